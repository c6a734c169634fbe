"""
AIIE scoring routes.

GOVERNANCE:
- Scores are educational, every response carries its factors
"""

from fastapi import APIRouter

from aiie import MODALITY_BASELINES, ScoringResult, explain, rank_imaging_options, score
from api.models.aiie import ExplainResponse, RankRequest, ScoreRequest

router = APIRouter(prefix="/v1/aiie", tags=["aiie"])


@router.get("/modalities", response_model=list[str])
async def get_modalities():
    """Modalities with a known baseline."""
    return list(MODALITY_BASELINES)


@router.post("/score", response_model=ScoringResult)
async def score_modality(request: ScoreRequest):
    return score(request.clinical_input, request.modality)


@router.post("/rank", response_model=list[ScoringResult])
async def rank_modalities(request: RankRequest):
    """Score every requested modality, best first."""
    return rank_imaging_options(request.clinical_input, request.modalities)


@router.post("/explain", response_model=ExplainResponse)
async def explain_modality(request: ScoreRequest):
    result = score(request.clinical_input, request.modality)
    return ExplainResponse(modality=result.modality, report=explain(result))
