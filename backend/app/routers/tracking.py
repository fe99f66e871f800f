"""
Streak & Activity Tracking API Router

Endpoints for daily streaks, activity logging and activity analytics.

Endpoints:
- GET /api/streak-status - Current streak and countdown to the next creditable day
- POST /api/streak-increment - Credit today's streak (idempotent per day)
- POST /api/activity-log - Log a completed activity into today's session
- GET /api/activity-analytics - Daily sessions, subjects, recent activity and totals

All payloads are camelCase. Malformed input returns 400 invalid_argument,
unknown students return 404 not_found.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request

from app.config import settings
from app.dependencies import (
    get_activity_service,
    get_analytics_service,
    get_now,
    get_streak_service,
)
from app.enums import RateLimitType
from app.middleware import handle_endpoint_errors, limiter
from app.models.base import ErrorDetail
from app.models.tracking import (
    ActivityLogRequest,
    ActivityLogResponse,
    AnalyticsResponse,
    StreakIncrementRequest,
    StreakIncrementResponse,
    StreakStatusResponse,
)
from app.services.tracking import (
    ActivityTrackingService,
    AnalyticsService,
    StreakTrackingService,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["tracking"])

ERROR_RESPONSES = {
    400: {"model": ErrorDetail, "description": "Invalid or missing fields"},
    404: {"model": ErrorDetail, "description": "Student not found"},
    500: {"model": ErrorDetail, "description": "Store failure"},
}


# ===========================================
# Streak Endpoints
# ===========================================


@router.get(
    "/streak-status", response_model=StreakStatusResponse, responses=ERROR_RESPONSES
)
@limiter.limit(settings.get_rate_limit(RateLimitType.DEFAULT))
@handle_endpoint_errors("Get streak status")
async def get_streak_status(
    request: Request,
    student_id: int = Query(..., alias="studentId", gt=0),
    now: datetime = Depends(get_now),
    service: StreakTrackingService = Depends(get_streak_service),
) -> StreakStatusResponse:
    """
    Get the current streak for a student.

    secondsUntilNextIncrement counts down to the next midnight in the
    reference timezone. canIncrement is false once today has been credited.
    """
    return await service.get_streak(student_id, now=now)


@router.post(
    "/streak-increment",
    response_model=StreakIncrementResponse,
    responses=ERROR_RESPONSES,
)
@limiter.limit(settings.get_rate_limit(RateLimitType.WRITE))
@handle_endpoint_errors("Increment streak")
async def increment_streak(
    request: Request,
    payload: StreakIncrementRequest,
    now: datetime = Depends(get_now),
    service: StreakTrackingService = Depends(get_streak_service),
) -> StreakIncrementResponse:
    """
    Credit today's streak.

    Repeating the call on the same reference-zone day returns the stored
    streak with incremented=false.
    """
    return await service.increment_streak(
        payload.student_id, now=now, activity=payload.activity
    )


# ===========================================
# Activity Endpoints
# ===========================================


@router.post(
    "/activity-log", response_model=ActivityLogResponse, responses=ERROR_RESPONSES
)
@limiter.limit(settings.get_rate_limit(RateLimitType.WRITE))
@handle_endpoint_errors("Log activity")
async def log_activity(
    request: Request,
    payload: ActivityLogRequest,
    now: datetime = Depends(get_now),
    service: ActivityTrackingService = Depends(get_activity_service),
) -> ActivityLogResponse:
    """
    Log a completed lesson, video or game.

    Adds the minutes and the per-type count to today's daily session.
    Does not touch the streak.
    """
    return await service.log_activity(
        student_id=payload.student_id,
        activity_type=payload.activity_type,
        subject=payload.subject,
        content_title=payload.content_title,
        duration_minutes=payload.duration_minutes,
        now=now,
    )


@router.get(
    "/activity-analytics", response_model=AnalyticsResponse, responses=ERROR_RESPONSES
)
@limiter.limit(settings.get_rate_limit(RateLimitType.DEFAULT))
@handle_endpoint_errors("Get activity analytics")
async def get_activity_analytics(
    request: Request,
    student_id: int = Query(..., alias="studentId", gt=0),
    days: int = Query(
        settings.ANALYTICS_DEFAULT_WINDOW_DAYS,
        ge=0,
        le=settings.ANALYTICS_MAX_WINDOW_DAYS,
        description="Days of daily sessions to include",
    ),
    now: datetime = Depends(get_now),
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsResponse:
    """
    Get activity analytics for a student.

    Returns:
    - Daily sessions for the last `days` days
    - Subject distribution over the trailing 30 days
    - The 10 most recent activities
    - Totals over the trailing 30 days
    """
    return await service.get_analytics(student_id, window_days=days, now=now)
