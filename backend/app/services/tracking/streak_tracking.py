"""
Streak Tracking Service

Maintains each student's daily streak: at most one credit per calendar day
in the reference timezone, continuing from yesterday or restarting at one
after a missed day.

Responsibilities:
- Decide the transition for "today" (advance_streak, a pure function)
- Apply it atomically per student through the repository
- Report the current streak with the countdown to the next creditable day

Transition table (keyed on last_streak_date):
    == today      -> no-op, incremented=False
    == yesterday  -> streak_days + 1, last_streak_date = today
    null / older  -> streak_days = 1, last_streak_date = today

Usage:
    from app.services.tracking import StreakTrackingService

    service = StreakTrackingService(repository, get_calendar())
    result = await service.increment_streak(student_id=7)
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from typing import Optional, Union

from app.enums.tracking import ActivityType, StreakAction
from app.middleware.error_handling import InvalidArgumentError, NotFoundError
from app.models.tracking import StreakIncrementResponse, StreakStatusResponse
from app.services.tracking.calendar import ReferenceCalendar
from app.services.tracking.repository import StreakState, TrackerRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreakTransition:
    """Result of applying the transition table to one state."""

    action: StreakAction
    state: StreakState

    @property
    def incremented(self) -> bool:
        return self.action != StreakAction.NOOP


def advance_streak(state: StreakState, today: date, yesterday: date) -> StreakTransition:
    """
    Apply the daily streak transition.

    Args:
        state: Current streak state.
        today: Current date in the reference timezone.
        yesterday: The day before today.

    Returns:
        StreakTransition with the action taken and the resulting state.
    """
    if state.last_streak_date == today:
        return StreakTransition(StreakAction.NOOP, state)

    if state.last_streak_date == yesterday:
        return StreakTransition(
            StreakAction.ADVANCE,
            replace(state, streak_days=state.streak_days + 1, last_streak_date=today),
        )

    return StreakTransition(
        StreakAction.RESET, replace(state, streak_days=1, last_streak_date=today)
    )


def parse_activity_type(value: Union[ActivityType, str]) -> ActivityType:
    """Coerce a raw activity type, raising InvalidArgumentError if unknown."""
    try:
        return ActivityType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in ActivityType)
        raise InvalidArgumentError(
            f"Invalid activity type '{value}'. Expected one of: {allowed}"
        ) from None


class StreakTrackingService:
    """
    Service for reading and crediting daily streaks.

    Holds no state of its own; the repository is the single source of truth.
    """

    def __init__(self, repository: TrackerRepository, calendar: ReferenceCalendar):
        """
        Initialize the streak tracking service.

        Args:
            repository: Persistence capability for streak state.
            calendar: Reference-timezone calendar.
        """
        self.repository = repository
        self.calendar = calendar

    async def increment_streak(
        self,
        student_id: int,
        now: Optional[datetime] = None,
        activity: Optional[Union[ActivityType, str]] = None,
    ) -> StreakIncrementResponse:
        """
        Credit today for a student if not already credited.

        The transition runs inside the repository's per-student atomic
        update, so concurrent calls for the same student credit the day once.

        Args:
            student_id: Student to credit.
            now: Current instant (defaults to the wall clock).
            activity: Optional activity that earned the credit.

        Returns:
            StreakIncrementResponse with the resulting streak.

        Raises:
            InvalidArgumentError: If activity is not a known activity type.
            NotFoundError: If the student doesn't exist.
        """
        activity_type = parse_activity_type(activity) if activity is not None else None
        now = now or datetime.now(timezone.utc)
        today = self.calendar.current_date(now)
        yesterday = self.calendar.previous_date(today)

        updated = await self.repository.update_streak(
            student_id, lambda state: advance_streak(state, today, yesterday).state
        )
        if updated is None:
            raise NotFoundError(f"Student {student_id} not found")

        before, after = updated
        transition = advance_streak(before, today, yesterday)

        logger.info(
            f"Streak {transition.action.value} for student {student_id}: "
            f"{before.streak_days} -> {after.streak_days}",
            extra={
                "student_id": student_id,
                "action": transition.action.value,
                "streak_days": after.streak_days,
                "previous_streak_date": (
                    before.last_streak_date.isoformat() if before.last_streak_date else None
                ),
                "today": today.isoformat(),
                "activity": activity_type.value if activity_type else None,
            },
        )

        return StreakIncrementResponse(
            student_id=student_id,
            streak_days=after.streak_days,
            last_streak_date=after.last_streak_date,
            incremented=before.last_streak_date != after.last_streak_date,
            today=today,
        )

    async def get_streak(
        self, student_id: int, now: Optional[datetime] = None
    ) -> StreakStatusResponse:
        """
        Read a student's streak without modifying it.

        Args:
            student_id: Student to read.
            now: Current instant (defaults to the wall clock).

        Returns:
            StreakStatusResponse with the stored streak, today's date and the
            seconds left until the next reference-zone midnight.

        Raises:
            NotFoundError: If the student doesn't exist.
        """
        now = now or datetime.now(timezone.utc)
        state = await self.repository.get_streak(student_id)
        if state is None:
            raise NotFoundError(f"Student {student_id} not found")

        today = self.calendar.current_date(now)

        return StreakStatusResponse(
            student_id=student_id,
            streak_days=state.streak_days,
            last_streak_date=state.last_streak_date,
            today=today,
            seconds_until_next_increment=self.calendar.seconds_until_next_midnight(now),
            can_increment=state.last_streak_date != today,
        )
