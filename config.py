"""
Configuration for the imaging appropriateness tutor.

GOVERNANCE:
- Educational use only, scores are not medical advice
- No credentials or patient identifiers in configuration
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Snapshot persistence (unset keeps snapshots in memory)
    snapshot_dir: Optional[str] = None

    # Assessment behavior
    grading_rule: Literal["any_overlap", "exact_match"] = "any_overlap"
    tick_interval_seconds: float = 1.0

    # Completed attempts stay readable over HTTP this long before eviction
    completed_attempt_retention_seconds: float = 3600.0

    # Minimum cases in a category before its accuracy counts for achievements
    min_category_cases: int = 5

    # AIIE version reported by the API
    engine_version: str = "2.0.0"

    model_config = {"env_prefix": "IMAGING_TUTOR_"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
