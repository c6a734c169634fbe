"""API routes."""

from api.routes.aiie import router as aiie_router
from api.routes.assessments import router as assessments_router

__all__ = ["assessments_router", "aiie_router"]
