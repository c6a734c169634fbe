"""
FastAPI application for the imaging appropriateness tutor.

GOVERNANCE:
- Educational use only, scores are not medical advice
- The API adds no behavior beyond the assessment and scoring core
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import aiie_router, assessments_router
from config import get_settings

settings = get_settings()

app = FastAPI(
    title="Imaging Tutor API",
    description="Timed imaging appropriateness assessments with AIIE scoring",
    version="1.0.0",
)

# CORS middleware for browser front ends
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict to specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(assessments_router)
app.include_router(aiie_router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "imaging_tutor"}


@app.get("/")
def root():
    """Root endpoint with API info."""
    return {
        "service": "Imaging Tutor API",
        "version": "1.0.0",
        "engine_version": settings.engine_version,
        "governance": "Educational use only, scores are not medical advice",
        "endpoints": {
            "assessments": "/v1/assessments",
            "attempts": "/v1/attempts",
            "aiie": "/v1/aiie",
        },
    }


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
