"""
Streak & Activity Tracking Services

Services for daily streaks, the activity log and learning analytics.

Modules:
- calendar: Reference-timezone dates and the midnight countdown
- repository: Record types and the TrackerRepository capability
- sql_repository: PostgreSQL implementation (row locks, ON CONFLICT upserts)
- memory_repository: Process-local implementation for tests
- streak_tracking: Streak transition table and StreakTrackingService
- activity_tracking: Activity logging with the daily session rollup
- analytics: Per-student analytics read model

Usage:
    from app.services.tracking import (
        ActivityTrackingService,
        AnalyticsService,
        StreakTrackingService,
        get_calendar,
    )
"""

from app.services.tracking.calendar import ReferenceCalendar, get_calendar
from app.services.tracking.repository import (
    ActivityEntry,
    ActivityTotals,
    DailySessionSummary,
    NewActivity,
    StreakState,
    SubjectCount,
    TrackerRepository,
)
from app.services.tracking.sql_repository import SQLTrackerRepository
from app.services.tracking.memory_repository import InMemoryTrackerRepository
from app.services.tracking.streak_tracking import (
    StreakTrackingService,
    StreakTransition,
    advance_streak,
)
from app.services.tracking.activity_tracking import ActivityTrackingService
from app.services.tracking.analytics import AnalyticsService

__all__ = [
    # Calendar
    "ReferenceCalendar",
    "get_calendar",
    # Repository
    "ActivityEntry",
    "ActivityTotals",
    "DailySessionSummary",
    "NewActivity",
    "StreakState",
    "SubjectCount",
    "TrackerRepository",
    "SQLTrackerRepository",
    "InMemoryTrackerRepository",
    # Services
    "StreakTrackingService",
    "StreakTransition",
    "advance_streak",
    "ActivityTrackingService",
    "AnalyticsService",
]
