"""
Streak & Activity Tracking API Models (Pydantic)

Request/response schemas for the tracker endpoints:
- Streak status and increments
- Activity logging with the daily session rollup
- Activity analytics

ARCHITECTURE NOTE:
    This file contains PYDANTIC models for API validation.
    There is a corresponding SQLAlchemy file: app/db/models.py

    Data flows: API Request → Pydantic → Service → Repository → Database

API Contract:
    Request models use StrictRequest (extra="forbid") to reject unknown fields.
    All fields travel as camelCase (studentId, activityType, ...).
"""

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from app.enums.tracking import ActivityType
from app.models.base import StrictRequest, StrictResponse

# Input limits; the string lengths match the activity_logs columns
SUBJECT_MAX_LENGTH = 100
CONTENT_TITLE_MAX_LENGTH = 255
MAX_DURATION_MINUTES = 24 * 60


# ===========================================
# Streak Models
# ===========================================


class StreakIncrementRequest(StrictRequest):
    """
    Request to credit today's streak for a student.

    The optional activity names what earned the credit. It is validated
    but does not change the transition.
    """

    student_id: int = Field(..., gt=0)
    activity: Optional[ActivityType] = None


class StreakStatusResponse(StrictResponse):
    """
    Current streak for a student.

    seconds_until_next_increment counts down to the next midnight in the
    reference timezone, when a new day can be credited.
    """

    student_id: int
    streak_days: int = Field(..., ge=0)
    last_streak_date: Optional[date] = None
    today: date
    seconds_until_next_increment: int = Field(..., ge=0)
    can_increment: bool


class StreakIncrementResponse(StrictResponse):
    """Streak after an increment attempt."""

    student_id: int
    streak_days: int = Field(..., ge=0)
    last_streak_date: Optional[date] = None
    incremented: bool
    today: date


# ===========================================
# Activity Models
# ===========================================


class ActivityLogRequest(StrictRequest):
    """
    Request to log a completed activity.

    duration_minutes falls back to DEFAULT_ACTIVITY_MINUTES when omitted.
    """

    student_id: int = Field(..., gt=0)
    activity_type: ActivityType
    subject: str = Field(..., min_length=1, max_length=SUBJECT_MAX_LENGTH)
    content_title: Optional[str] = Field(None, max_length=CONTENT_TITLE_MAX_LENGTH)
    duration_minutes: Optional[int] = Field(None, ge=0, le=MAX_DURATION_MINUTES)


class DailySessionResponse(StrictResponse):
    """One day of a student's activity rollup."""

    session_date: date
    total_minutes: int = 0
    lessons_count: int = 0
    videos_count: int = 0
    games_count: int = 0


class ActivityResponse(StrictResponse):
    """A logged activity."""

    id: int
    activity_type: ActivityType
    subject: str
    content_title: Optional[str] = None
    duration_minutes: int
    completed: bool = True
    created_at: datetime


class ActivityLogResponse(StrictResponse):
    """Response after logging an activity."""

    success: bool = True
    activity_id: int
    session_date: date
    daily_session: DailySessionResponse
    message: str


# ===========================================
# Analytics Models
# ===========================================


class SubjectCountResponse(StrictResponse):
    """Activity count for a single subject."""

    subject: str
    count: int


class TotalStatsResponse(StrictResponse):
    """Totals over the trailing analytics window."""

    total_activities: int = 0
    lessons_completed: int = 0
    total_minutes: int = 0


class AnalyticsResponse(StrictResponse):
    """
    Activity analytics for a student.

    daily_sessions honours window_days; subject_distribution and
    total_stats always cover the trailing ANALYTICS_TRAILING_DAYS.
    """

    student_id: int
    window_days: int
    daily_sessions: list[DailySessionResponse] = Field(default_factory=list)
    subject_distribution: list[SubjectCountResponse] = Field(default_factory=list)
    recent_activities: list[ActivityResponse] = Field(default_factory=list)
    total_stats: TotalStatsResponse = Field(default_factory=TotalStatsResponse)
