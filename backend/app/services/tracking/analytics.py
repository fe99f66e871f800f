"""
Activity Analytics Service

Read-only aggregation over a student's daily sessions and activity log.

Windows:
- daily_sessions: session_date >= today - window_days (caller chosen, default 7)
- subject_distribution, total_stats: trailing ANALYTICS_TRAILING_DAYS (30)
  regardless of window_days
- recent_activities: the last RECENT_ACTIVITY_LIMIT (10) entries

Usage:
    from app.services.tracking import AnalyticsService

    service = AnalyticsService(repository, get_calendar())
    analytics = await service.get_analytics(student_id=7, window_days=14)
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from app.config import settings
from app.middleware.error_handling import InvalidArgumentError, NotFoundError
from app.models.tracking import (
    ActivityResponse,
    AnalyticsResponse,
    DailySessionResponse,
    SubjectCountResponse,
    TotalStatsResponse,
)
from app.services.tracking.calendar import ReferenceCalendar
from app.services.tracking.repository import TrackerRepository


class AnalyticsService:
    """Service assembling the activity analytics read model."""

    def __init__(self, repository: TrackerRepository, calendar: ReferenceCalendar):
        self.repository = repository
        self.calendar = calendar

    async def get_analytics(
        self,
        student_id: int,
        window_days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> AnalyticsResponse:
        """
        Get activity analytics for a student.

        Args:
            student_id: Student to report on.
            window_days: Days of daily sessions to include
                (default ANALYTICS_DEFAULT_WINDOW_DAYS).
            now: Current instant (defaults to the wall clock).

        Returns:
            AnalyticsResponse. Empty windows yield empty lists and zero totals.

        Raises:
            InvalidArgumentError: If window_days is negative.
            NotFoundError: If the student doesn't exist.
        """
        if window_days is None:
            window_days = settings.ANALYTICS_DEFAULT_WINDOW_DAYS
        if window_days < 0:
            raise InvalidArgumentError("days must not be negative")

        if not await self.repository.student_exists(student_id):
            raise NotFoundError(f"Student {student_id} not found")

        now = now or datetime.now(timezone.utc)
        today = self.calendar.current_date(now)
        trailing_since = now - timedelta(days=settings.ANALYTICS_TRAILING_DAYS)

        sessions = await self.repository.get_daily_sessions(
            student_id, since=today - timedelta(days=window_days)
        )
        subjects = await self.repository.get_subject_distribution(
            student_id, since=trailing_since
        )
        recent = await self.repository.get_recent_activities(
            student_id, limit=settings.RECENT_ACTIVITY_LIMIT
        )
        totals = await self.repository.get_activity_totals(
            student_id, since=trailing_since
        )

        return AnalyticsResponse(
            student_id=student_id,
            window_days=window_days,
            daily_sessions=[DailySessionResponse.model_validate(s) for s in sessions],
            subject_distribution=[SubjectCountResponse.model_validate(s) for s in subjects],
            recent_activities=[ActivityResponse.model_validate(a) for a in recent],
            total_stats=TotalStatsResponse.model_validate(totals),
        )
