"""
Assessment session models.

GOVERNANCE:
- Sessions are owned by exactly one controller
- Snapshots are backups, the in-memory session is authoritative
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from aiie.models import ScoringResult
from cases.models import CaseCategory, DifficultyLevel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def dedupe(ids) -> list[str]:
    """Drop repeated ids, keeping first-seen order."""
    return list(dict.fromkeys(ids))


class SessionState(str, Enum):
    """Session state. Only moves forward."""

    START = "start"  # No case loaded, timer idle
    IN_PROGRESS = "in_progress"  # Cases being answered, timer running
    COMPLETED = "completed"  # Terminal


class CaseAnswer(BaseModel):
    """Answer captured for one case."""

    case_id: str
    selected_imaging: list[str] = Field(default_factory=list)
    flagged: bool = False
    time_spent: int = 0  # seconds, additive across visits

    @field_validator("selected_imaging")
    @classmethod
    def unique_selection(cls, v: list[str]) -> list[str]:
        return dedupe(v)


class AssessmentSession(BaseModel):
    """One attempt at an ordered sequence of cases under a time limit."""

    session_id: str
    assessment_id: str
    case_sequence: list[str] = Field(default_factory=list)
    current_case_index: int = 0
    # Keyed by case id, ordered by case sequence
    answers: dict[str, CaseAnswer] = Field(default_factory=dict)
    state: SessionState = SessionState.START
    time_limit_seconds: int = 0
    time_remaining_seconds: int = 0
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class SessionSnapshot(BaseModel):
    """Recoverable backup written after every mutation."""

    assessment_id: str
    # Case order the attempt started with, needed to resume it
    case_sequence: list[str] = Field(default_factory=list)
    answers: list[tuple[str, CaseAnswer]] = Field(default_factory=list)
    current_case_index: int = 0
    time_remaining_seconds: int = 0
    timestamp: datetime = Field(default_factory=utcnow)


class CaseResult(BaseModel):
    """Grading outcome for one case."""

    case_id: str
    title: str = ""
    category: Optional[CaseCategory] = None
    difficulty: Optional[DifficultyLevel] = None
    selected_imaging: list[str] = Field(default_factory=list)
    optimal_imaging: list[str] = Field(default_factory=list)
    answered: bool = False
    correct: bool = False
    flagged: bool = False
    time_spent: int = 0
    # AIIE scores of the selected modalities, best first
    appropriateness: list[ScoringResult] = Field(default_factory=list)


class Breakdown(BaseModel):
    """Correct/total for one category or difficulty."""

    key: str
    correct: int
    total: int
    percentage: int


class MissedCase(BaseModel):
    """A case answered incorrectly or left unanswered."""

    case_id: str
    title: str
    category: Optional[CaseCategory] = None
    difficulty: Optional[DifficultyLevel] = None
    user_answer: str
    correct_answer: str
    explanation: str = ""
    time_spent: int = 0


class CaseRecommendation(BaseModel):
    """A practice case suggested after an attempt."""

    case_id: str
    title: str
    category: CaseCategory
    difficulty: DifficultyLevel
    reason: str


class AttemptResult(BaseModel):
    """Finalized attempt handed to the submission sink."""

    session_id: str
    assessment_id: str
    score: int
    correct_count: int
    total_cases: int
    passed: bool
    passing_score: int
    letter_grade: str
    time_used: int
    time_limit: int
    per_case_results: list[CaseResult] = Field(default_factory=list)
    category_breakdown: list[Breakdown] = Field(default_factory=list)
    difficulty_breakdown: list[Breakdown] = Field(default_factory=list)
    missed_cases: list[MissedCase] = Field(default_factory=list)
    weak_areas: list[str] = Field(default_factory=list)
    recommendations: list[CaseRecommendation] = Field(default_factory=list)
    completed_at: datetime = Field(default_factory=utcnow)
