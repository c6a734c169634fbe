"""API models."""

from api.models.aiie import ExplainResponse, RankRequest, ScoreRequest
from api.models.attempts import (
    AttemptView,
    CaseView,
    CreateAttemptRequest,
    NavigateRequest,
    SelectionRequest,
)

__all__ = [
    "AttemptView",
    "CaseView",
    "CreateAttemptRequest",
    "NavigateRequest",
    "SelectionRequest",
    "ScoreRequest",
    "RankRequest",
    "ExplainResponse",
]
