"""
FastAPI Dependencies

Common dependencies for database-backed repositories, the clock and the
tracking services.

Tests override get_tracker_repository and get_now through
app.dependency_overrides to run the API against an in-memory store at a
fixed instant.
"""

from datetime import datetime, timezone

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import get_db
from app.services.tracking import (
    ActivityTrackingService,
    AnalyticsService,
    ReferenceCalendar,
    SQLTrackerRepository,
    StreakTrackingService,
    TrackerRepository,
    get_calendar,
)


def get_now() -> datetime:
    """Current instant, timezone-aware UTC."""
    return datetime.now(timezone.utc)


async def get_tracker_repository(
    db: AsyncSession = Depends(get_db),
) -> TrackerRepository:
    """Get the PostgreSQL-backed tracker repository."""
    return SQLTrackerRepository(db)


def get_reference_calendar() -> ReferenceCalendar:
    """Get the shared reference-timezone calendar."""
    return get_calendar()


async def get_streak_service(
    repository: TrackerRepository = Depends(get_tracker_repository),
    calendar: ReferenceCalendar = Depends(get_reference_calendar),
) -> StreakTrackingService:
    """Get streak tracking service."""
    return StreakTrackingService(repository, calendar)


async def get_activity_service(
    repository: TrackerRepository = Depends(get_tracker_repository),
    calendar: ReferenceCalendar = Depends(get_reference_calendar),
) -> ActivityTrackingService:
    """Get activity tracking service."""
    return ActivityTrackingService(repository, calendar)


async def get_analytics_service(
    repository: TrackerRepository = Depends(get_tracker_repository),
    calendar: ReferenceCalendar = Depends(get_reference_calendar),
) -> AnalyticsService:
    """Get analytics service."""
    return AnalyticsService(repository, calendar)
