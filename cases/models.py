"""
Case and imaging option models.

Cases and imaging options are authored elsewhere; the core only reads them.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from aiie.models import ClinicalInput


class CaseCategory(str, Enum):
    """Clinical presentation category."""

    LOW_BACK_PAIN = "low-back-pain"
    HEADACHE = "headache"
    CHEST_PAIN = "chest-pain"
    ABDOMINAL_PAIN = "abdominal-pain"
    EXTREMITY_TRAUMA = "extremity-trauma"


class DifficultyLevel(str, Enum):
    """Case difficulty."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SpecialtyTrack(str, Enum):
    """Specialty curriculum track."""

    EM = "em"
    IM = "im"
    FM = "fm"
    SURGERY = "surgery"
    PEDS = "peds"


class Modality(str, Enum):
    """Imaging modality family."""

    XRAY = "xray"
    CT = "ct"
    MRI = "mri"
    ULTRASOUND = "ultrasound"
    NUCLEAR = "nuclear"
    NONE = "none"


class ImagingOption(BaseModel):
    """An orderable imaging study."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    short_name: str
    modality: Modality
    # Key into the AIIE modality baselines
    aiie_modality: str
    body_region: str = ""
    with_contrast: bool = False
    typical_cost_usd: int = Field(0, ge=0)
    radiation_msv: float = Field(0.0, ge=0.0)
    is_active: bool = True


class Case(BaseModel):
    """A clinical case with its optimal imaging."""

    model_config = ConfigDict(frozen=True)

    id: str
    slug: str
    title: str
    chief_complaint: str
    category: CaseCategory
    difficulty: DifficultyLevel
    specialty_tags: tuple[SpecialtyTrack, ...] = ()
    optimal_imaging: tuple[str, ...] = ()  # imaging option ids
    explanation: str = ""
    is_published: bool = True
    clinical_input: Optional[ClinicalInput] = None


class CaseFilter(BaseModel):
    """Case selection criteria. Empty criteria match everything."""

    categories: list[CaseCategory] = Field(default_factory=list)
    specialty: Optional[SpecialtyTrack] = None
    difficulty: list[DifficultyLevel] = Field(default_factory=list)
    case_ids: list[str] = Field(default_factory=list)
    published_only: bool = True
    limit: Optional[int] = Field(None, ge=1)
