"""
Daily learning streaks.

A streak counts consecutive calendar days with recorded activity. Only
dates matter, never times of day.
"""

import logging
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_MILESTONES = (3, 7, 14, 30, 60, 100)


class StreakData(BaseModel):
    """Persisted streak state."""

    current_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)
    last_activity_date: Optional[date] = None
    is_active_today: bool = False
    streak_freezes: int = Field(0, ge=0)


class StreakResult(BaseModel):
    """Outcome of recording an activity."""

    streak_continued: bool
    streak_broken: bool
    freeze_used: bool = False
    new_streak: int
    milestone_reached: Optional[int] = None
    is_new_record: bool = False


class StreakMilestone(BaseModel):
    days: int
    reached: bool


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


class StreakTracker:
    """Applies streak rules to a :class:`StreakData`."""

    def __init__(
        self,
        data: Optional[StreakData] = None,
        milestones: tuple[int, ...] = DEFAULT_MILESTONES,
    ):
        self.data = data or StreakData()
        self.milestones = tuple(sorted(milestones))

    def record_activity(self, today: date) -> StreakResult:
        """
        Record learning activity on ``today``.

        Same day: unchanged. Next day: +1. A longer gap resets the streak
        to 1 unless a freeze is available, in which case one freeze is
        spent and the streak is kept as it was.
        """
        today = _as_date(today)
        data = self.data
        previous = data.current_streak
        last = data.last_activity_date

        continued = False
        broken = False
        freeze_used = False
        new_streak = previous

        if last is None:
            new_streak = 1
            continued = True
        else:
            gap = (today - last).days
            if gap <= 0:
                # Same day, or a clock that moved backwards
                continued = True
            elif gap == 1:
                new_streak = previous + 1
                continued = True
            elif data.streak_freezes > 0 and previous > 0:
                data.streak_freezes -= 1
                freeze_used = True
                continued = True
                logger.info("streak freeze used to bridge %d-day gap", gap)
            else:
                broken = previous > 0
                new_streak = 1

        milestone = next(
            (m for m in self.milestones if previous < m <= new_streak), None
        )
        is_new_record = new_streak > data.longest_streak

        data.current_streak = new_streak
        data.longest_streak = max(data.longest_streak, new_streak)
        if last is None or today >= last:
            data.last_activity_date = today
            data.is_active_today = True

        if milestone is not None:
            logger.info("streak milestone reached: %d days", milestone)

        return StreakResult(
            streak_continued=continued,
            streak_broken=broken,
            freeze_used=freeze_used,
            new_streak=new_streak,
            milestone_reached=milestone,
            is_new_record=is_new_record,
        )

    def refresh(self, today: date) -> bool:
        """
        Re-evaluate the streak for a new day without recording activity.

        Clears ``is_active_today`` on a new day and breaks a lapsed streak
        to 0 when no freeze is left to bridge it.

        Returns:
            True if the data changed
        """
        today = _as_date(today)
        data = self.data
        last = data.last_activity_date
        changed = False

        active = last is not None and (today - last).days <= 0
        if data.is_active_today != active:
            data.is_active_today = active
            changed = True

        if (
            last is not None
            and (today - last).days > 1
            and data.current_streak > 0
            and data.streak_freezes == 0
        ):
            logger.info("streak of %d days broken", data.current_streak)
            data.current_streak = 0
            changed = True

        return changed

    def add_streak_freezes(self, count: int) -> None:
        if count < 0:
            raise ValueError("count must be non-negative")
        self.data.streak_freezes += count

    def is_at_risk(self, today: date) -> bool:
        """Streak alive but no activity yet today."""
        today = _as_date(today)
        last = self.data.last_activity_date
        return self.data.current_streak > 0 and (last is None or last < today)

    def milestone_status(self) -> list[StreakMilestone]:
        return [
            StreakMilestone(days=m, reached=self.data.current_streak >= m)
            for m in self.milestones
        ]

    @property
    def next_milestone(self) -> Optional[int]:
        return next((m for m in self.milestones if m > self.data.current_streak), None)

    @property
    def progress_to_next_milestone(self) -> int:
        """Percent of the way to the next milestone, 100 past the last one."""
        target = self.next_milestone
        if target is None:
            return 100
        return round(self.data.current_streak / target * 100)
