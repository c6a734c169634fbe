"""Tests for per-case grading and attempt aggregation."""

import pytest

from assessment.grading import (
    GradingRule,
    calculate_score,
    check_passed,
    format_time,
    grade_session,
    is_correct,
    letter_grade,
)
from assessment.models import AssessmentSession, CaseAnswer, SessionState
from cases import IMAGING_OPTIONS

SEQUENCE = ["lbp-acute-mechanical", "lbp-cancer-history", "headache-migraine"]


def _session(selections, time_limit=600, remaining=500):
    answers = {
        cid: CaseAnswer(case_id=cid, selected_imaging=selected, time_spent=20)
        for cid, selected in selections.items()
    }
    return AssessmentSession(
        session_id="s-1",
        assessment_id="quick-quiz",
        case_sequence=SEQUENCE,
        answers=answers,
        state=SessionState.COMPLETED,
        time_limit_seconds=time_limit,
        time_remaining_seconds=remaining,
    )


class TestIsCorrect:
    @pytest.mark.parametrize(
        "selected,rule,expected",
        [
            (["spect-mpi"], GradingRule.ANY_OVERLAP, True),
            (["spect-mpi"], GradingRule.EXACT_MATCH, False),
            (["xray-chest", "spect-mpi"], GradingRule.EXACT_MATCH, True),
            (["spect-mpi", "cta-chest"], GradingRule.ANY_OVERLAP, True),
            (["cta-chest"], GradingRule.ANY_OVERLAP, False),
            ([], GradingRule.ANY_OVERLAP, False),
            ([], GradingRule.EXACT_MATCH, False),
        ],
    )
    def test_rules(self, selected, rule, expected):
        optimal = ["spect-mpi", "xray-chest"]
        assert is_correct(selected, optimal, rule) is expected


class TestScoring:
    @pytest.mark.parametrize(
        "correct,total,expected",
        [(2, 3, 67), (1, 3, 33), (1, 2, 50), (1, 8, 13), (0, 0, 0), (5, 5, 100)],
    )
    def test_score_rounds_half_up(self, correct, total, expected):
        assert calculate_score(correct, total) == expected

    def test_pass_threshold_is_inclusive(self):
        assert check_passed(70, 70)
        assert not check_passed(69, 70)

    @pytest.mark.parametrize(
        "score,grade", [(95, "A"), (80, "B"), (70, "C"), (67, "D"), (59, "F")]
    )
    def test_letter_grade(self, score, grade):
        assert letter_grade(score) == grade

    def test_format_time(self):
        assert format_time(125) == "2:05"
        assert format_time(0) == "0:00"


class TestGradeSession:
    def test_two_of_three_correct(self, catalog):
        session = _session(
            {
                "lbp-acute-mechanical": ["no-imaging"],
                "lbp-cancer-history": ["mri-lumbar"],
                "headache-migraine": ["mri-brain-contrast"],
            }
        )

        result = grade_session(session, catalog, 70, imaging_options=IMAGING_OPTIONS)

        assert result.correct_count == 2
        assert result.total_cases == 3
        assert result.score == 67
        assert not result.passed
        assert result.letter_grade == "D"
        assert result.time_used == 100
        assert [r.correct for r in result.per_case_results] == [True, True, False]

    def test_missed_cases_and_recommendations(self, catalog):
        session = _session(
            {
                "lbp-acute-mechanical": ["no-imaging"],
                "lbp-cancer-history": ["mri-lumbar"],
                "headache-migraine": ["mri-brain-contrast"],
            }
        )

        result = grade_session(session, catalog, 70, imaging_options=IMAGING_OPTIONS)

        assert len(result.missed_cases) == 1
        missed = result.missed_cases[0]
        assert missed.case_id == "headache-migraine"
        assert missed.user_answer == "MRI brain with and without contrast"
        assert missed.correct_answer == "No imaging"

        assert [r.case_id for r in result.recommendations] == [
            "headache-migraine",
            "headache-thunderclap",
        ]
        assert result.recommendations[0].reason == "Practice more headache cases"

    def test_breakdowns_and_weak_areas(self, catalog):
        session = _session(
            {
                "lbp-acute-mechanical": ["no-imaging"],
                "lbp-cancer-history": ["mri-lumbar"],
                "headache-migraine": ["mri-brain-contrast"],
            }
        )

        result = grade_session(session, catalog, 70)

        categories = {b.key: b for b in result.category_breakdown}
        assert categories["low-back-pain"].percentage == 100
        assert categories["headache"].percentage == 0

        difficulties = {b.key: b for b in result.difficulty_breakdown}
        assert (difficulties["beginner"].correct, difficulties["beginner"].total) == (1, 2)

        assert result.weak_areas == ["headache imaging", "beginner difficulty cases"]

    def test_unanswered_cases_are_incorrect(self, catalog):
        session = _session({"lbp-acute-mechanical": ["no-imaging"]})

        result = grade_session(session, catalog, 70)

        assert result.correct_count == 1
        assert result.score == 33
        unanswered = result.per_case_results[1]
        assert not unanswered.answered
        assert not unanswered.correct
        assert result.missed_cases[0].user_answer == "No answer selected"

    def test_exact_match_rule(self, catalog):
        session = AssessmentSession(
            session_id="s-2",
            assessment_id="quick-quiz",
            case_sequence=["chest-typical-angina"],
            answers={
                "chest-typical-angina": CaseAnswer(
                    case_id="chest-typical-angina", selected_imaging=["spect-mpi"]
                )
            },
        )

        overlap = grade_session(session, catalog, 70)
        exact = grade_session(session, catalog, 70, rule=GradingRule.EXACT_MATCH)

        assert overlap.score == 100
        assert exact.score == 0

    def test_untimed_time_used_sums_cases(self, catalog):
        session = _session(
            {"lbp-acute-mechanical": ["no-imaging"], "headache-migraine": []},
            time_limit=0,
            remaining=0,
        )

        result = grade_session(session, catalog, 70)

        assert result.time_used == 40

    def test_appropriateness_of_selection(self, catalog):
        session = _session({"lbp-cancer-history": ["mri-lumbar", "no-imaging"]})

        result = grade_session(session, catalog, 70, imaging_options=IMAGING_OPTIONS)

        scores = result.per_case_results[1].appropriateness
        assert [s.modality for s in scores] == ["MRI without contrast", "No imaging"]
        assert scores[0].final_score == 9.0


class TestPartialAnswers:
    def test_two_correct_one_unanswered(self, catalog):
        session = _session(
            {
                "lbp-acute-mechanical": ["no-imaging"],
                "lbp-cancer-history": ["mri-lumbar"],
            }
        )

        result = grade_session(session, catalog, 70)

        assert result.correct_count == 2
        assert result.score == 67
