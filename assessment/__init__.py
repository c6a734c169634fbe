"""Timed assessment sessions."""

from assessment.controller import AssessmentController
from assessment.definitions import (
    FULL_EXAM,
    QUICK_QUIZ,
    SPECIALTY_ASSESSMENTS,
    AssessmentDefinition,
    AssessmentType,
    get_assessment,
    list_assessments,
    select_cases,
)
from assessment.grading import GradingRule, grade_session, is_correct
from assessment.models import (
    AssessmentSession,
    AttemptResult,
    CaseAnswer,
    CaseResult,
    SessionSnapshot,
    SessionState,
)
from assessment.timer import AsyncioScheduler, CountdownTimer, ManualScheduler

__all__ = [
    "AssessmentController",
    "AssessmentDefinition",
    "AssessmentType",
    "QUICK_QUIZ",
    "SPECIALTY_ASSESSMENTS",
    "FULL_EXAM",
    "get_assessment",
    "list_assessments",
    "select_cases",
    "GradingRule",
    "grade_session",
    "is_correct",
    "AssessmentSession",
    "AttemptResult",
    "CaseAnswer",
    "CaseResult",
    "SessionSnapshot",
    "SessionState",
    "AsyncioScheduler",
    "CountdownTimer",
    "ManualScheduler",
]
