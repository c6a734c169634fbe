"""
Attempt request and response models.

GOVERNANCE:
- Optimal imaging and explanations are never shown before submission
"""

from typing import Optional

from pydantic import BaseModel, Field

from assessment.models import AttemptResult, CaseAnswer, SessionState
from cases.models import Case, CaseCategory, DifficultyLevel


class CreateAttemptRequest(BaseModel):
    """Request to create and start an attempt."""

    assessment_id: str
    # Overrides the catalog selection when given
    case_ids: Optional[list[str]] = None
    # Seeds case shuffling for a reproducible order
    seed: Optional[int] = None


class SelectionRequest(BaseModel):
    """Replace the imaging selection for a case."""

    imaging_ids: list[str] = Field(default_factory=list)


class NavigateRequest(BaseModel):
    index: int


class CaseView(BaseModel):
    """Case as shown while the attempt is in progress."""

    id: str
    title: str
    chief_complaint: str
    category: CaseCategory
    difficulty: DifficultyLevel

    @classmethod
    def from_case(cls, case: Case) -> "CaseView":
        return cls(
            id=case.id,
            title=case.title,
            chief_complaint=case.chief_complaint,
            category=case.category,
            difficulty=case.difficulty,
        )


class AttemptView(BaseModel):
    """Current state of an attempt."""

    session_id: str
    assessment_id: str
    state: SessionState
    case_sequence: list[str]
    current_case_index: int
    current_case: Optional[CaseView] = None
    answers: list[CaseAnswer]
    answered_count: int
    time_limit_seconds: int
    time_remaining_seconds: int
    # False when the request was ignored in the current state
    applied: bool = True
    result: Optional[AttemptResult] = None
