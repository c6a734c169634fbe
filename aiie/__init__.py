"""AIIE clinical appropriateness scoring."""

from aiie.baselines import MODALITY_BASELINES, get_score_category
from aiie.engine import explain, rank_imaging_options, score
from aiie.models import (
    ClinicalInput,
    Duration,
    ScoreCategory,
    ScoringResult,
    Severity,
    Sex,
    ShapFactor,
)

__all__ = [
    "ClinicalInput",
    "Duration",
    "Severity",
    "Sex",
    "ScoreCategory",
    "ShapFactor",
    "ScoringResult",
    "MODALITY_BASELINES",
    "get_score_category",
    "score",
    "rank_imaging_options",
    "explain",
]
