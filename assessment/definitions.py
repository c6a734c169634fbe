"""
Assessment catalog and case selection.

Pre-defined assessments mirror the product's quick quiz, specialty and full
exam formats. Case order is randomized with a caller-supplied RNG so a
seeded run is reproducible.
"""

import random
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from cases.models import (
    Case,
    CaseCategory,
    CaseFilter,
    DifficultyLevel,
    SpecialtyTrack,
)
from cases.repository import CaseRepository


class AssessmentType(str, Enum):
    QUICK = "quick"
    SPECIALTY = "specialty"
    FULL = "full"
    CUSTOM = "custom"


class AssessmentDefinition(BaseModel):
    """Configuration of an assessment."""

    id: str
    type: AssessmentType
    name: str
    description: str = ""
    question_count: int = Field(..., ge=1)
    time_limit: int = Field(..., ge=0)  # minutes, 0 for untimed
    passing_score: int = Field(70, ge=0, le=100)
    categories: list[CaseCategory] = Field(default_factory=list)
    specialty: Optional[SpecialtyTrack] = None
    difficulty: list[DifficultyLevel] = Field(default_factory=list)
    case_ids: list[str] = Field(default_factory=list)  # custom assessments

    @property
    def time_limit_seconds(self) -> int:
        return self.time_limit * 60


QUICK_QUIZ = AssessmentDefinition(
    id="quick-quiz",
    type=AssessmentType.QUICK,
    name="Quick Quiz",
    description="Random selection across all categories. Good for daily practice.",
    question_count=10,
    time_limit=15,
    passing_score=70,
)

_SPECIALTY_COPY = {
    SpecialtyTrack.EM: (
        "Emergency Medicine Assessment",
        "Comprehensive Emergency Medicine imaging scenarios covering trauma, "
        "chest pain, abdominal pain, and more.",
    ),
    SpecialtyTrack.IM: (
        "Internal Medicine Assessment",
        "Internal Medicine imaging appropriateness across multiple organ systems.",
    ),
    SpecialtyTrack.FM: (
        "Family Medicine Assessment",
        "Primary care imaging scenarios for common presentations.",
    ),
    SpecialtyTrack.SURGERY: (
        "Surgery Assessment",
        "Surgical imaging scenarios including pre-operative and post-operative "
        "evaluations.",
    ),
    SpecialtyTrack.PEDS: (
        "Pediatric Assessment",
        "Pediatric imaging appropriateness with radiation safety considerations.",
    ),
}

SPECIALTY_ASSESSMENTS: dict[SpecialtyTrack, AssessmentDefinition] = {
    track: AssessmentDefinition(
        id=f"specialty-{track.value}",
        type=AssessmentType.SPECIALTY,
        name=name,
        description=description,
        question_count=20,
        time_limit=30,
        specialty=track,
        passing_score=75,
    )
    for track, (name, description) in _SPECIALTY_COPY.items()
}

FULL_EXAM = AssessmentDefinition(
    id="full-exam",
    type=AssessmentType.FULL,
    name="Full Exam",
    description=(
        "Simulates board-style questioning with all categories weighted "
        "appropriately."
    ),
    question_count=50,
    time_limit=60,
    passing_score=70,
)


def list_assessments() -> list[AssessmentDefinition]:
    return [QUICK_QUIZ, *SPECIALTY_ASSESSMENTS.values(), FULL_EXAM]


def get_assessment(assessment_id: str) -> Optional[AssessmentDefinition]:
    """Look up a pre-defined assessment by id."""
    for definition in list_assessments():
        if definition.id == assessment_id:
            return definition
    return None


def select_cases(
    definition: AssessmentDefinition,
    repository: CaseRepository,
    rng: Optional[random.Random] = None,
) -> list[Case]:
    """
    Pick the cases for an attempt.

    Custom assessments keep their explicit case order. Others are filtered,
    shuffled and truncated to ``question_count``.
    """
    case_filter = CaseFilter(
        categories=definition.categories,
        specialty=definition.specialty,
        difficulty=definition.difficulty,
        case_ids=definition.case_ids,
    )
    cases = repository.list_cases(case_filter)
    if definition.case_ids:
        return cases[: definition.question_count]

    rng = rng or random.Random()
    shuffled = list(cases)
    rng.shuffle(shuffled)
    return shuffled[: definition.question_count]
