"""
Achievement catalog and unlock evaluation.

Definitions are static reference data. A user's status is always computed
from the catalog, their earned slugs and their cumulative stats.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from assessment.models import AttemptResult
from config import get_settings

logger = logging.getLogger(__name__)

NIGHT_HOURS = range(0, 5)
WEEKEND_DAYS = (5, 6)  # datetime.weekday(): Saturday, Sunday


class RequirementType(str, Enum):
    CASES_COMPLETED = "cases_completed"
    PERFECT_SCORES = "perfect_scores"
    CATEGORY_ACCURACY = "category_accuracy"
    CATEGORIES_COMPLETED = "categories_completed"
    CASE_TIME = "case_time"
    STREAK_DAYS = "streak_days"
    ASSESSMENTS_PASSED = "assessments_passed"
    FEEDBACK_SUBMITTED = "feedback_submitted"
    SPECIAL = "special"


class AchievementCategory(str, Enum):
    COMPLETION = "completion"
    ACCURACY = "accuracy"
    STREAK = "streak"
    SPEED = "speed"
    SPECIALTY = "specialty"
    MILESTONE = "milestone"


class AchievementDefinition(BaseModel):
    """A catalog milestone."""

    model_config = ConfigDict(frozen=True)

    slug: str
    name: str
    description: str
    category: AchievementCategory
    requirement_type: RequirementType
    requirement_value: int
    requirement_meta: dict[str, Any] = Field(default_factory=dict)
    points: int = 10
    secret: bool = False


class CategoryAccuracy(BaseModel):
    correct: int = 0
    total: int = 0


class UserStats(BaseModel):
    """Cumulative statistics fed by completed cases and attempts."""

    cases_completed: int = 0
    perfect_scores: int = 0
    category_accuracy: dict[str, CategoryAccuracy] = Field(default_factory=dict)
    categories_completed: list[str] = Field(default_factory=list)
    fastest_case_time: Optional[int] = None  # seconds, correct cases only
    current_streak: int = 0
    assessments_passed: int = 0
    perfect_assessments: int = 0
    feedback_submitted: int = 0
    weekend_cases: int = 0
    night_cases: int = 0


class UserAchievementStatus(BaseModel):
    """A definition paired with a user's progress on it."""

    slug: str
    name: str
    is_earned: bool
    earned_at: Optional[datetime] = None
    progress: int
    total: int
    secret: bool = False


class AchievementUnlock(BaseModel):
    achievement: AchievementDefinition
    unlocked_at: datetime


class CaseCompletion(BaseModel):
    """One finished case, as fed to :func:`process_case_completion`."""

    is_correct: bool
    score: int  # 0-100
    time_spent: int  # seconds
    category: str


ACHIEVEMENTS: list[AchievementDefinition] = [
    AchievementDefinition(
        slug="first-case",
        name="First Case",
        description="Complete your first case",
        category=AchievementCategory.COMPLETION,
        requirement_type=RequirementType.CASES_COMPLETED,
        requirement_value=1,
    ),
    AchievementDefinition(
        slug="case-explorer",
        name="Case Explorer",
        description="Complete 10 cases",
        category=AchievementCategory.COMPLETION,
        requirement_type=RequirementType.CASES_COMPLETED,
        requirement_value=10,
        points=25,
    ),
    AchievementDefinition(
        slug="case-centurion",
        name="Case Centurion",
        description="Complete 100 cases",
        category=AchievementCategory.MILESTONE,
        requirement_type=RequirementType.CASES_COMPLETED,
        requirement_value=100,
        points=100,
    ),
    AchievementDefinition(
        slug="perfect-score",
        name="Perfect Score",
        description="Choose the optimal imaging on a case",
        category=AchievementCategory.ACCURACY,
        requirement_type=RequirementType.PERFECT_SCORES,
        requirement_value=1,
    ),
    AchievementDefinition(
        slug="sharpshooter",
        name="Sharpshooter",
        description="Score perfectly on 25 cases",
        category=AchievementCategory.ACCURACY,
        requirement_type=RequirementType.PERFECT_SCORES,
        requirement_value=25,
        points=50,
    ),
    AchievementDefinition(
        slug="category-expert",
        name="Category Expert",
        description="Reach 90% accuracy in a category with at least 5 cases",
        category=AchievementCategory.SPECIALTY,
        requirement_type=RequirementType.CATEGORY_ACCURACY,
        requirement_value=90,
        points=50,
    ),
    AchievementDefinition(
        slug="well-rounded",
        name="Well Rounded",
        description="Complete a case in every category",
        category=AchievementCategory.COMPLETION,
        requirement_type=RequirementType.CATEGORIES_COMPLETED,
        requirement_value=5,
        points=30,
    ),
    AchievementDefinition(
        slug="quick-thinker",
        name="Quick Thinker",
        description="Answer a case correctly in 30 seconds",
        category=AchievementCategory.SPEED,
        requirement_type=RequirementType.CASE_TIME,
        requirement_value=30,
        points=20,
    ),
    AchievementDefinition(
        slug="week-streak",
        name="7 Day Streak",
        description="Maintain a 7-day learning streak",
        category=AchievementCategory.STREAK,
        requirement_type=RequirementType.STREAK_DAYS,
        requirement_value=7,
        points=30,
    ),
    AchievementDefinition(
        slug="month-streak",
        name="30 Day Streak",
        description="Maintain a 30-day learning streak",
        category=AchievementCategory.STREAK,
        requirement_type=RequirementType.STREAK_DAYS,
        requirement_value=30,
        points=100,
    ),
    AchievementDefinition(
        slug="assessment-passed",
        name="Certified",
        description="Pass an assessment",
        category=AchievementCategory.MILESTONE,
        requirement_type=RequirementType.ASSESSMENTS_PASSED,
        requirement_value=1,
        points=25,
    ),
    AchievementDefinition(
        slug="flawless-exam",
        name="Flawless",
        description="Score 100% on an assessment",
        category=AchievementCategory.MILESTONE,
        requirement_type=RequirementType.ASSESSMENTS_PASSED,
        requirement_value=1,
        requirement_meta={"perfect_score": True},
        points=75,
    ),
    AchievementDefinition(
        slug="helpful-reviewer",
        name="Helpful Reviewer",
        description="Submit feedback on 5 cases",
        category=AchievementCategory.MILESTONE,
        requirement_type=RequirementType.FEEDBACK_SUBMITTED,
        requirement_value=5,
    ),
    AchievementDefinition(
        slug="night-owl",
        name="Night Owl",
        description="Complete a case between midnight and 5am",
        category=AchievementCategory.MILESTONE,
        requirement_type=RequirementType.SPECIAL,
        requirement_value=1,
        secret=True,
    ),
    AchievementDefinition(
        slug="weekend-warrior",
        name="Weekend Warrior",
        description="Complete 10 cases on weekends",
        category=AchievementCategory.MILESTONE,
        requirement_type=RequirementType.SPECIAL,
        requirement_value=10,
        secret=True,
        points=20,
    ),
]


def get_achievement(slug: str) -> Optional[AchievementDefinition]:
    return next((a for a in ACHIEVEMENTS if a.slug == slug), None)


def best_category_accuracy(stats: UserStats, min_cases: int) -> int:
    """Best rounded accuracy among categories with enough cases."""
    best = 0
    for data in stats.category_accuracy.values():
        if data.total >= min_cases and data.total > 0:
            best = max(best, round(data.correct / data.total * 100))
    return best


class AchievementTracker:
    """Evaluates a user's stats against the catalog. Each slug unlocks once."""

    def __init__(
        self,
        catalog: Iterable[AchievementDefinition] = ACHIEVEMENTS,
        earned: Optional[Mapping[str, datetime]] = None,
        min_category_cases: Optional[int] = None,
    ):
        self.catalog = list(catalog)
        self.earned: dict[str, datetime] = dict(earned or {})
        if min_category_cases is None:
            min_category_cases = get_settings().min_category_cases
        self.min_category_cases = min_category_cases

    def progress(
        self, achievement: AchievementDefinition, stats: UserStats
    ) -> tuple[int, int]:
        """(progress, total) toward a definition."""
        value = achievement.requirement_value
        kind = achievement.requirement_type

        if kind == RequirementType.CASES_COMPLETED:
            return stats.cases_completed, value
        if kind == RequirementType.PERFECT_SCORES:
            return stats.perfect_scores, value
        if kind == RequirementType.CATEGORY_ACCURACY:
            min_cases = achievement.requirement_meta.get(
                "min_cases", self.min_category_cases
            )
            return best_category_accuracy(stats, min_cases), value
        if kind == RequirementType.CATEGORIES_COMPLETED:
            return len(stats.categories_completed), value
        if kind == RequirementType.CASE_TIME:
            met = stats.fastest_case_time is not None and stats.fastest_case_time <= value
            return int(met), 1
        if kind == RequirementType.STREAK_DAYS:
            return stats.current_streak, value
        if kind == RequirementType.ASSESSMENTS_PASSED:
            if achievement.requirement_meta.get("perfect_score"):
                return stats.perfect_assessments, value
            return stats.assessments_passed, value
        if kind == RequirementType.FEEDBACK_SUBMITTED:
            return stats.feedback_submitted, value
        if kind == RequirementType.SPECIAL:
            if achievement.slug == "night-owl":
                return int(stats.night_cases > 0), 1
            if achievement.slug == "weekend-warrior":
                return stats.weekend_cases, value
        return 0, 1

    def is_met(self, achievement: AchievementDefinition, stats: UserStats) -> bool:
        progress, total = self.progress(achievement, stats)
        return progress >= total

    def check_achievements(
        self, stats: UserStats, now: Optional[datetime] = None
    ) -> list[AchievementUnlock]:
        """Unlock every unearned definition whose requirement is now met."""
        now = now or datetime.now(timezone.utc)
        unlocked = []
        for achievement in self.catalog:
            if achievement.slug in self.earned:
                continue
            if not self.is_met(achievement, stats):
                continue
            self.earned[achievement.slug] = now
            unlocked.append(AchievementUnlock(achievement=achievement, unlocked_at=now))
            logger.info("achievement unlocked: %s", achievement.slug)
        return unlocked

    def statuses(self, stats: UserStats) -> list[UserAchievementStatus]:
        result = []
        for achievement in self.catalog:
            progress, total = self.progress(achievement, stats)
            result.append(
                UserAchievementStatus(
                    slug=achievement.slug,
                    name=achievement.name,
                    is_earned=achievement.slug in self.earned,
                    earned_at=self.earned.get(achievement.slug),
                    progress=min(progress, total),
                    total=total,
                    secret=achievement.secret,
                )
            )
        return result

    @property
    def total_points(self) -> int:
        by_slug = {a.slug: a for a in self.catalog}
        return sum(by_slug[s].points for s in self.earned if s in by_slug)


def process_case_completion(
    completion: CaseCompletion, stats: UserStats, completed_at: datetime
) -> UserStats:
    """Stats after one more completed case. The input is not modified."""
    updated = stats.model_copy(deep=True)
    updated.cases_completed += 1
    if completion.score == 100:
        updated.perfect_scores += 1

    accuracy = updated.category_accuracy.setdefault(
        completion.category, CategoryAccuracy()
    )
    accuracy.correct += int(completion.is_correct)
    accuracy.total += 1

    if completion.category not in updated.categories_completed:
        updated.categories_completed.append(completion.category)

    if completion.is_correct and (
        updated.fastest_case_time is None
        or completion.time_spent < updated.fastest_case_time
    ):
        updated.fastest_case_time = completion.time_spent

    if completed_at.hour in NIGHT_HOURS:
        updated.night_cases += 1
    if completed_at.weekday() in WEEKEND_DAYS:
        updated.weekend_cases += 1
    return updated


def record_attempt(stats: UserStats, result: AttemptResult) -> UserStats:
    """Fold a finalized attempt into cumulative stats."""
    updated = stats
    for case_result in result.per_case_results:
        if not case_result.answered or case_result.category is None:
            continue
        updated = process_case_completion(
            CaseCompletion(
                is_correct=case_result.correct,
                score=100 if case_result.correct else 0,
                time_spent=case_result.time_spent,
                category=case_result.category.value,
            ),
            updated,
            result.completed_at,
        )

    updated = updated.model_copy(deep=True)
    if result.passed:
        updated.assessments_passed += 1
    if result.score == 100:
        updated.perfect_assessments += 1
    return updated
