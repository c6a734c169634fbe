"""
AIIE reference tables.

Modality baselines, literature-derived factor weights and the RAND/UCLA
category bands. All scores are on the 1-9 scale and these tables are shown
to learners for transparency.
"""

from dataclasses import dataclass

from aiie.models import ScoreCategory

SCORE_MIN = 1.0
SCORE_MAX = 9.0
BASELINE_SCORE = 5.0

DEFAULT_MODALITY = "CT without contrast"


@dataclass(frozen=True)
class ModalityBaseline:
    """Starting point for a modality before clinical adjustments."""

    base_score: float
    radiation: str
    cost: str


MODALITY_BASELINES: dict[str, ModalityBaseline] = {
    "X-ray": ModalityBaseline(BASELINE_SCORE, "low", "$50-150"),
    "CT without contrast": ModalityBaseline(BASELINE_SCORE, "medium", "$300-600"),
    "CT with contrast": ModalityBaseline(BASELINE_SCORE, "medium", "$400-800"),
    "MRI without contrast": ModalityBaseline(BASELINE_SCORE, "none", "$500-1500"),
    "MRI with contrast": ModalityBaseline(BASELINE_SCORE, "none", "$700-2000"),
    "Ultrasound": ModalityBaseline(BASELINE_SCORE, "none", "$100-300"),
    "Nuclear medicine": ModalityBaseline(BASELINE_SCORE, "high", "$500-1500"),
    "No imaging": ModalityBaseline(BASELINE_SCORE, "none", "$0"),
}


@dataclass(frozen=True)
class FactorWeight:
    """Signed weight of a clinical factor and its supporting citation."""

    weight: float
    citation: str


FACTOR_WEIGHTS: dict[str, FactorWeight] = {
    "red_flag_per_item": FactorWeight(
        0.5, "JAMA 2019: Red flags in imaging guidelines"
    ),
    "neurologic_deficit": FactorWeight(
        2.0, "Neurology 2020: Imaging in neurologic emergencies"
    ),
    "cancer_history": FactorWeight(
        1.5, "JCO 2021: Imaging in oncology surveillance"
    ),
    "acute_onset": FactorWeight(
        0.8, "Radiology 2020: Timing and imaging appropriateness"
    ),
    "chronic_duration": FactorWeight(
        -0.5, "AJR 2021: Conservative management in chronic conditions"
    ),
    "prior_imaging": FactorWeight(-1.0, "JACR 2022: Repeat imaging utility"),
    "age_extreme": FactorWeight(
        0.5, "Pediatrics 2020: Age-based imaging considerations"
    ),
    "progressive_symptoms": FactorWeight(
        1.0, "Spine 2019: Imaging after conservative therapy"
    ),
    "recent_trauma": FactorWeight(
        1.2, "J Trauma Acute Care Surg 2021: Imaging in trauma evaluation"
    ),
    "immunocompromised": FactorWeight(
        1.0, "Clin Infect Dis 2020: Imaging in immunocompromised hosts"
    ),
    "severe_symptoms": FactorWeight(
        0.5, "Ann Emerg Med 2019: Symptom severity and imaging decisions"
    ),
    "mild_chronic": FactorWeight(
        -0.5, "BMJ 2020: Conservative management in chronic pain"
    ),
}

# Red flags saturate at this total contribution
RED_FLAG_CAP = 2.0

PEDIATRIC_AGE_LIMIT = 18
GERIATRIC_AGE_LIMIT = 65

ALTERNATIVE_RECOMMENDATION = (
    "Consider conservative management or alternative modality"
)

# RAND/UCLA bands, highest first
CATEGORY_BANDS = [
    {
        "category": ScoreCategory.APPROPRIATE,
        "min_score": 7.0,
        "range": (7, 9),
        "label": "Usually Appropriate",
    },
    {
        "category": ScoreCategory.UNCERTAIN,
        "min_score": 4.0,
        "range": (4, 6),
        "label": "May Be Appropriate",
    },
    {
        "category": ScoreCategory.INAPPROPRIATE,
        "min_score": SCORE_MIN,
        "range": (1, 3),
        "label": "Usually Not Appropriate",
    },
]


def get_baseline(modality: str) -> ModalityBaseline:
    """Baseline for a modality, falling back to the default modality."""
    return MODALITY_BASELINES.get(modality, MODALITY_BASELINES[DEFAULT_MODALITY])


def get_score_category(score: float) -> dict:
    """Category band containing a score."""
    for band in CATEGORY_BANDS:
        if score >= band["min_score"]:
            return band
    return CATEGORY_BANDS[-1]
