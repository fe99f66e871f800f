"""
Activity Tracking Service

Logs completed activities and keeps the per-day session rollup current.

Responsibilities:
- Validate activity input (type, subject, duration)
- Append the activity to the log
- Accumulate the student's daily session for today's reference-zone date

Logging an activity never credits the streak. Clients call the streak
increment separately; the two updates are deliberately independent.

Usage:
    from app.services.tracking import ActivityTrackingService

    service = ActivityTrackingService(repository, get_calendar())
    result = await service.log_activity(7, "lesson", "Maths", duration_minutes=15)
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Union

from app.config import settings
from app.enums.tracking import ActivityType
from app.middleware.error_handling import InvalidArgumentError, NotFoundError
from app.models.tracking import (
    CONTENT_TITLE_MAX_LENGTH,
    MAX_DURATION_MINUTES,
    SUBJECT_MAX_LENGTH,
    ActivityLogResponse,
    DailySessionResponse,
)
from app.services.tracking.calendar import ReferenceCalendar
from app.services.tracking.repository import NewActivity, TrackerRepository
from app.services.tracking.streak_tracking import parse_activity_type

logger = logging.getLogger(__name__)


class ActivityTrackingService:
    """Service for logging activities into the log and daily rollup."""

    def __init__(
        self,
        repository: TrackerRepository,
        calendar: ReferenceCalendar,
        default_duration_minutes: Optional[int] = None,
    ):
        """
        Initialize the activity tracking service.

        Args:
            repository: Persistence capability for the log and aggregates.
            calendar: Reference-timezone calendar.
            default_duration_minutes: Minutes credited when a call omits
                duration (defaults to settings.DEFAULT_ACTIVITY_MINUTES).
        """
        self.repository = repository
        self.calendar = calendar
        self.default_duration_minutes = (
            default_duration_minutes
            if default_duration_minutes is not None
            else settings.DEFAULT_ACTIVITY_MINUTES
        )

    async def log_activity(
        self,
        student_id: int,
        activity_type: Union[ActivityType, str],
        subject: str,
        content_title: Optional[str] = None,
        duration_minutes: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> ActivityLogResponse:
        """
        Log a completed activity and fold it into today's session.

        Args:
            student_id: Student who completed the activity.
            activity_type: lesson, video or game.
            subject: Subject name, must not be blank.
            content_title: Optional title of the content.
            duration_minutes: Minutes spent (defaults to the configured value).
            now: Current instant (defaults to the wall clock).

        Returns:
            ActivityLogResponse with the new entry's ID and today's rollup.

        Raises:
            InvalidArgumentError: On unknown type, blank or overlong subject or title,
                or a duration outside 0..1440 minutes.
            NotFoundError: If the student doesn't exist.
        """
        activity = parse_activity_type(activity_type)

        subject = (subject or "").strip()
        if not subject:
            raise InvalidArgumentError("Subject is required")
        if len(subject) > SUBJECT_MAX_LENGTH:
            raise InvalidArgumentError(
                f"Subject must be at most {SUBJECT_MAX_LENGTH} characters"
            )
        if content_title and len(content_title) > CONTENT_TITLE_MAX_LENGTH:
            raise InvalidArgumentError(
                f"contentTitle must be at most {CONTENT_TITLE_MAX_LENGTH} characters"
            )

        if duration_minutes is None:
            duration_minutes = self.default_duration_minutes
        if duration_minutes < 0:
            raise InvalidArgumentError("durationMinutes must not be negative")
        if duration_minutes > MAX_DURATION_MINUTES:
            raise InvalidArgumentError(
                f"durationMinutes must be at most {MAX_DURATION_MINUTES}"
            )

        if not await self.repository.student_exists(student_id):
            raise NotFoundError(f"Student {student_id} not found")

        now = now or datetime.now(timezone.utc)
        session_date = self.calendar.current_date(now)

        entry, session = await self.repository.record_activity(
            NewActivity(
                student_id=student_id,
                activity_type=activity,
                subject=subject,
                content_title=content_title or None,
                duration_minutes=duration_minutes,
                created_at=now,
            ),
            session_date=session_date,
        )

        logger.info(
            f"Logged {activity.value} for student {student_id} "
            f"({duration_minutes} min, {subject})",
            extra={
                "student_id": student_id,
                "activity_id": entry.id,
                "activity_type": activity.value,
                "subject": subject,
                "duration_minutes": duration_minutes,
                "session_date": session_date.isoformat(),
                "day_total_minutes": session.total_minutes,
            },
        )

        return ActivityLogResponse(
            activity_id=entry.id,
            session_date=session_date,
            daily_session=DailySessionResponse.model_validate(session),
            message=f"Logged {duration_minutes} minutes of {activity.value}",
        )
