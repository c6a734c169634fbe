"""
Per-case correctness and attempt aggregation.

Grading compares each case's selected imaging with its optimal imaging,
then derives the percentage score, pass/fail, breakdowns and practice
recommendations shown after an attempt.
"""

import logging
import math
from collections import Counter
from datetime import datetime
from enum import Enum
from typing import Iterable, Mapping, Optional, Sequence

from aiie.engine import rank_imaging_options
from assessment.models import (
    AssessmentSession,
    AttemptResult,
    Breakdown,
    CaseRecommendation,
    CaseResult,
    MissedCase,
    utcnow,
)
from cases.models import Case, ImagingOption

logger = logging.getLogger(__name__)

WEAK_AREA_THRESHOLD = 60
MAX_RECOMMENDATIONS = 3

LETTER_GRADES = [(90, "A"), (80, "B"), (70, "C"), (60, "D")]


class GradingRule(str, Enum):
    """How a selection is compared with the optimal imaging."""

    ANY_OVERLAP = "any_overlap"  # At least one optimal study selected
    EXACT_MATCH = "exact_match"  # Selection equals the optimal set


def is_correct(
    selected: Iterable[str],
    optimal: Iterable[str],
    rule: GradingRule = GradingRule.ANY_OVERLAP,
) -> bool:
    """Whether a selection is correct. An empty selection never is."""
    selected_set = set(selected)
    optimal_set = set(optimal)
    if not selected_set or not optimal_set:
        return False
    if rule == GradingRule.EXACT_MATCH:
        return selected_set == optimal_set
    return bool(selected_set & optimal_set)


def percentage(correct: int, total: int) -> int:
    """Integer percentage, rounding halves up."""
    if total <= 0:
        return 0
    return math.floor(correct / total * 100 + 0.5)


def calculate_score(correct_count: int, total_cases: int) -> int:
    return percentage(correct_count, total_cases)


def check_passed(score: int, passing_score: int) -> bool:
    return score >= passing_score


def letter_grade(score: int) -> str:
    for threshold, grade in LETTER_GRADES:
        if score >= threshold:
            return grade
    return "F"


def format_time(seconds: int) -> str:
    """Format seconds as m:ss."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{secs:02d}"


def _breakdown(results: Sequence[CaseResult], attr: str) -> list[Breakdown]:
    tallies: dict[str, list[int]] = {}
    for result in results:
        value = getattr(result, attr)
        if value is None:
            continue
        tally = tallies.setdefault(value.value, [0, 0])
        tally[0] += int(result.correct)
        tally[1] += 1
    return [
        Breakdown(key=key, correct=c, total=t, percentage=percentage(c, t))
        for key, (c, t) in tallies.items()
    ]


def category_breakdown(results: Sequence[CaseResult]) -> list[Breakdown]:
    return _breakdown(results, "category")


def difficulty_breakdown(results: Sequence[CaseResult]) -> list[Breakdown]:
    return _breakdown(results, "difficulty")


def _names(ids: Sequence[str], option_names: Mapping[str, str]) -> str:
    return ", ".join(option_names.get(i, i) for i in ids)


def missed_cases(
    results: Sequence[CaseResult],
    cases: Mapping[str, Case],
    imaging_options: Sequence[ImagingOption] = (),
) -> list[MissedCase]:
    """Incorrect or unanswered cases, with readable answers."""
    option_names = {o.id: o.name for o in imaging_options}
    missed = []
    for result in results:
        if result.correct:
            continue
        case = cases.get(result.case_id)
        missed.append(
            MissedCase(
                case_id=result.case_id,
                title=result.title,
                category=result.category,
                difficulty=result.difficulty,
                user_answer=_names(result.selected_imaging, option_names)
                or "No answer selected",
                correct_answer=_names(result.optimal_imaging, option_names),
                explanation=case.explanation if case else "",
                time_spent=result.time_spent,
            )
        )
    return missed


def identify_weak_areas(
    categories: Sequence[Breakdown], difficulties: Sequence[Breakdown]
) -> list[str]:
    """Categories and difficulties scored below the weak-area threshold."""
    weak = [
        f"{b.key.replace('-', ' ')} imaging"
        for b in categories
        if b.percentage < WEAK_AREA_THRESHOLD
    ]
    weak.extend(
        f"{b.key} difficulty cases"
        for b in difficulties
        if b.percentage < WEAK_AREA_THRESHOLD
    )
    return weak


def generate_recommendations(
    missed: Sequence[MissedCase], all_cases: Iterable[Case]
) -> list[CaseRecommendation]:
    """Practice cases from the most frequently missed category."""
    counts = Counter(m.category for m in missed if m.category is not None)
    if not counts:
        return []
    # Ties go to the category missed first
    category = counts.most_common(1)[0][0]
    label = category.value.replace("-", " ")
    relevant = [c for c in all_cases if c.category == category][:MAX_RECOMMENDATIONS]
    return [
        CaseRecommendation(
            case_id=c.id,
            title=c.title,
            category=c.category,
            difficulty=c.difficulty,
            reason=f"Practice more {label} cases",
        )
        for c in relevant
    ]


def grade_case(
    case_id: str,
    session: AssessmentSession,
    cases: Mapping[str, Case],
    imaging_options: Mapping[str, ImagingOption],
    rule: GradingRule,
) -> CaseResult:
    """Grade one case of a session. Unknown cases grade as incorrect."""
    answer = session.answers.get(case_id)
    selected = list(answer.selected_imaging) if answer else []
    case = cases.get(case_id)
    optimal = list(case.optimal_imaging) if case else []

    appropriateness = []
    if case is not None and case.clinical_input is not None and selected:
        modalities = [
            imaging_options[i].aiie_modality for i in selected if i in imaging_options
        ]
        appropriateness = rank_imaging_options(case.clinical_input, modalities)

    return CaseResult(
        case_id=case_id,
        title=case.title if case else "",
        category=case.category if case else None,
        difficulty=case.difficulty if case else None,
        selected_imaging=selected,
        optimal_imaging=optimal,
        answered=bool(selected),
        correct=is_correct(selected, optimal, rule),
        flagged=answer.flagged if answer else False,
        time_spent=answer.time_spent if answer else 0,
        appropriateness=appropriateness,
    )


def grade_session(
    session: AssessmentSession,
    cases: Mapping[str, Case],
    passing_score: int,
    imaging_options: Sequence[ImagingOption] = (),
    rule: GradingRule = GradingRule.ANY_OVERLAP,
    completed_at: Optional[datetime] = None,
) -> AttemptResult:
    """
    Grade every case in a session.

    Args:
        session: Session to grade (normally just completed)
        cases: Case catalog keyed by id
        passing_score: Percentage needed to pass
        imaging_options: Options used to resolve names and AIIE modalities
        rule: Correctness rule
        completed_at: Completion time, defaults to now

    Returns:
        The finalized attempt result
    """
    options_by_id = {o.id: o for o in imaging_options}
    results = [
        grade_case(cid, session, cases, options_by_id, rule)
        for cid in session.case_sequence
    ]

    correct_count = sum(1 for r in results if r.correct)
    total = len(results)
    score = calculate_score(correct_count, total)

    if session.time_limit_seconds > 0:
        time_used = session.time_limit_seconds - session.time_remaining_seconds
    else:
        time_used = sum(r.time_spent for r in results)

    categories = category_breakdown(results)
    difficulties = difficulty_breakdown(results)
    missed = missed_cases(results, cases, imaging_options)

    logger.info(
        "graded session %s: %d/%d correct (%d%%)",
        session.session_id,
        correct_count,
        total,
        score,
    )

    return AttemptResult(
        session_id=session.session_id,
        assessment_id=session.assessment_id,
        score=score,
        correct_count=correct_count,
        total_cases=total,
        passed=check_passed(score, passing_score),
        passing_score=passing_score,
        letter_grade=letter_grade(score),
        time_used=time_used,
        time_limit=session.time_limit_seconds,
        per_case_results=results,
        category_breakdown=categories,
        difficulty_breakdown=difficulties,
        missed_cases=missed,
        weak_areas=identify_weak_areas(categories, difficulties),
        recommendations=generate_recommendations(missed, cases.values()),
        completed_at=completed_at or utcnow(),
    )
