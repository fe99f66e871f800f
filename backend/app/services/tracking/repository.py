"""
Tracker Repository Interface

Defines the persistence capability the tracking services depend on, plus
the plain records passed across it. Services never touch SQLAlchemy
directly; they receive a TrackerRepository and stay agnostic of the store.

Implementations:
- SQLTrackerRepository (sql_repository.py): PostgreSQL via async SQLAlchemy
- InMemoryTrackerRepository (memory_repository.py): process-local fake for tests

Atomicity contract:
- update_streak applies the transition as one read-modify-write per student.
  Concurrent calls for the same student are serialized.
- record_activity appends the log entry and accumulates the daily aggregate
  in one unit. Either both are stored or neither is.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from app.enums.tracking import ActivityType


# ===========================================
# Records
# ===========================================


@dataclass(frozen=True)
class StreakState:
    """Current streak of a single student."""

    student_id: int
    streak_days: int = 0
    last_streak_date: Optional[date] = None


@dataclass(frozen=True)
class NewActivity:
    """A completed activity about to be appended to the log."""

    student_id: int
    activity_type: ActivityType
    subject: str
    duration_minutes: int
    created_at: datetime
    content_title: Optional[str] = None
    completed: bool = True


@dataclass(frozen=True)
class ActivityEntry:
    """A stored activity log entry."""

    id: int
    student_id: int
    activity_type: ActivityType
    subject: str
    content_title: Optional[str]
    duration_minutes: int
    completed: bool
    created_at: datetime


@dataclass(frozen=True)
class DailySessionSummary:
    """Per-day rollup for one student."""

    student_id: int
    session_date: date
    total_minutes: int = 0
    lessons_count: int = 0
    videos_count: int = 0
    games_count: int = 0


@dataclass(frozen=True)
class SubjectCount:
    """Number of logged activities for one subject."""

    subject: str
    count: int


@dataclass(frozen=True)
class ActivityTotals:
    """Totals over a trailing window of the activity log."""

    total_activities: int = 0
    lessons_completed: int = 0
    total_minutes: int = 0


StreakUpdate = Callable[[StreakState], StreakState]


def category_increments(activity_type: ActivityType) -> dict[str, int]:
    """
    Map an activity type to its daily-aggregate counter increments.

    Exactly one of the three counters is incremented per activity.
    """
    return {
        "lessons_count": int(activity_type == ActivityType.LESSON),
        "videos_count": int(activity_type == ActivityType.VIDEO),
        "games_count": int(activity_type == ActivityType.GAME),
    }


# ===========================================
# Repository Interface
# ===========================================


class TrackerRepository(ABC):
    """Persistence capability for streak state, activity log and daily aggregates."""

    @abstractmethod
    async def student_exists(self, student_id: int) -> bool:
        """Return True if the directory knows this student."""

    @abstractmethod
    async def get_streak(self, student_id: int) -> Optional[StreakState]:
        """Read the streak state, or None if the student is unknown."""

    @abstractmethod
    async def update_streak(
        self, student_id: int, apply: StreakUpdate
    ) -> Optional[tuple[StreakState, StreakState]]:
        """
        Atomically replace the streak state with apply(current).

        Args:
            student_id: Student whose streak is updated.
            apply: Pure function computing the new state from the current one.
                Called while the student's state is locked.

        Returns:
            (before, after) states, or None if the student is unknown.
        """

    @abstractmethod
    async def record_activity(
        self, activity: NewActivity, session_date: date
    ) -> tuple[ActivityEntry, DailySessionSummary]:
        """
        Append an activity and fold it into the day's aggregate.

        Returns:
            The stored entry and the aggregate as it stands after this call.
        """

    @abstractmethod
    async def get_daily_sessions(
        self, student_id: int, since: date
    ) -> list[DailySessionSummary]:
        """Aggregates with session_date >= since, ascending by date."""

    @abstractmethod
    async def get_subject_distribution(
        self, student_id: int, since: datetime
    ) -> list[SubjectCount]:
        """Activity counts per subject for entries created at or after since."""

    @abstractmethod
    async def get_recent_activities(
        self, student_id: int, limit: int
    ) -> list[ActivityEntry]:
        """The most recent entries, newest first."""

    @abstractmethod
    async def get_activity_totals(
        self, student_id: int, since: datetime
    ) -> ActivityTotals:
        """Count, lesson count and minutes for entries created at or after since."""
