"""Case and imaging option repository."""

from cases.catalog import CASES, IMAGING_OPTIONS
from cases.models import (
    Case,
    CaseCategory,
    CaseFilter,
    DifficultyLevel,
    ImagingOption,
    Modality,
    SpecialtyTrack,
)
from cases.repository import CaseNotFoundError, CaseRepository, InMemoryCaseRepository

__all__ = [
    "Case",
    "CaseCategory",
    "CaseFilter",
    "DifficultyLevel",
    "ImagingOption",
    "Modality",
    "SpecialtyTrack",
    "CaseRepository",
    "InMemoryCaseRepository",
    "CaseNotFoundError",
    "CASES",
    "IMAGING_OPTIONS",
]
