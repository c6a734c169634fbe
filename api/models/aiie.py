"""AIIE scoring request models."""

from typing import Optional

from pydantic import BaseModel, Field

from aiie.models import ClinicalInput


class ScoreRequest(BaseModel):
    """Score one modality for a presentation."""

    clinical_input: Optional[ClinicalInput] = None
    modality: str


class RankRequest(BaseModel):
    """Rank several modalities for a presentation."""

    clinical_input: Optional[ClinicalInput] = None
    modalities: list[str] = Field(..., min_length=1)


class ExplainResponse(BaseModel):
    modality: str
    report: str
