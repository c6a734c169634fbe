"""Learner progress: daily streaks and achievements."""

from progress.achievements import (
    ACHIEVEMENTS,
    AchievementDefinition,
    AchievementTracker,
    AchievementUnlock,
    CaseCompletion,
    RequirementType,
    UserAchievementStatus,
    UserStats,
    process_case_completion,
    record_attempt,
)
from progress.streak import StreakData, StreakResult, StreakTracker

__all__ = [
    "ACHIEVEMENTS",
    "AchievementDefinition",
    "AchievementTracker",
    "AchievementUnlock",
    "CaseCompletion",
    "RequirementType",
    "UserAchievementStatus",
    "UserStats",
    "process_case_completion",
    "record_attempt",
    "StreakData",
    "StreakResult",
    "StreakTracker",
]
