"""
AIIE scoring models.

GOVERNANCE:
- Scores support clinical learning, they are not directives
- Every score ships with its explanatory factors
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Sex(str, Enum):
    """Patient sex as recorded on the case."""

    MALE = "male"
    FEMALE = "female"


class Duration(str, Enum):
    """Symptom duration bucket."""

    ACUTE = "acute"  # < 7 days
    SUBACUTE = "subacute"  # 1-6 weeks
    CHRONIC = "chronic"  # > 6 weeks


class Severity(str, Enum):
    """Symptom severity."""

    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class ScoreCategory(str, Enum):
    """RAND/UCLA appropriateness category."""

    APPROPRIATE = "appropriate"
    UNCERTAIN = "uncertain"
    INAPPROPRIATE = "inappropriate"


class ClinicalInput(BaseModel):
    """Patient presentation scored against a modality. Never mutated."""

    model_config = ConfigDict(frozen=True)

    # Demographics
    age: int = Field(..., ge=0, le=130)
    sex: Sex

    # Presentation
    chief_complaint: str = ""
    duration: Duration
    severity: Severity
    red_flags: tuple[str, ...] = ()

    # Risk factors
    cancer_history: bool = False
    immunocompromised: bool = False
    recent_trauma: bool = False
    neurologic_deficit: bool = False
    progressive_symptoms: bool = False

    # Prior workup
    prior_imaging: tuple[str, ...] = ()
    labs_available: tuple[str, ...] = ()
    physical_exam_findings: tuple[str, ...] = ()


class ShapFactor(BaseModel):
    """One explanatory contribution to a score."""

    factor: str
    contribution: float
    value: str
    explanation: str
    evidence_citation: str


class ScoringResult(BaseModel):
    """AIIE output for one (input, modality) pair."""

    modality: str
    final_score: float = Field(..., ge=1.0, le=9.0)
    category: ScoreCategory
    category_label: str
    shap_factors: list[ShapFactor] = Field(default_factory=list)
    radiation_level: str
    estimated_cost: str
    alternative_recommendation: Optional[str] = None
