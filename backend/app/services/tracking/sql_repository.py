"""
SQL Tracker Repository

TrackerRepository backed by PostgreSQL through async SQLAlchemy.

Atomicity:
- update_streak locks the student row with SELECT ... FOR UPDATE, applies
  the transition and commits. A concurrent increment for the same student
  blocks on the lock and then sees the committed state.
- record_activity inserts the log entry and upserts the daily aggregate
  with INSERT ... ON CONFLICT DO UPDATE using additive SET expressions, in
  one transaction. Concurrent logs for the same day never lose increments.

Any SQLAlchemyError rolls the transaction back and surfaces as
InternalError. Nothing is retried here.
"""

import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy import case, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import ActivityLog, DailySession, Student
from app.enums.tracking import ActivityType
from app.middleware.error_handling import InternalError
from app.services.tracking.repository import (
    ActivityEntry,
    ActivityTotals,
    DailySessionSummary,
    NewActivity,
    StreakState,
    StreakUpdate,
    SubjectCount,
    TrackerRepository,
    category_increments,
)

logger = logging.getLogger(__name__)

_SESSION_COUNTERS = ("total_minutes", "lessons_count", "videos_count", "games_count")


def _to_entry(log: ActivityLog) -> ActivityEntry:
    return ActivityEntry(
        id=log.id,
        student_id=log.student_id,
        activity_type=ActivityType(log.activity_type),
        subject=log.subject,
        content_title=log.content_title,
        duration_minutes=log.duration_minutes,
        completed=log.completed,
        created_at=log.created_at,
    )


class SQLTrackerRepository(TrackerRepository):
    """Repository over the students, activity_logs and daily_sessions tables."""

    def __init__(self, db: AsyncSession):
        """
        Args:
            db: SQLAlchemy async database session.
        """
        self.db = db

    async def student_exists(self, student_id: int) -> bool:
        result = await self.db.execute(select(Student.id).where(Student.id == student_id))
        return result.scalar_one_or_none() is not None

    async def get_streak(self, student_id: int) -> Optional[StreakState]:
        result = await self.db.execute(
            select(Student.streak_days, Student.last_streak_date).where(
                Student.id == student_id
            )
        )
        row = result.one_or_none()
        if row is None:
            return None
        return StreakState(student_id, row.streak_days, row.last_streak_date)

    async def update_streak(
        self, student_id: int, apply: StreakUpdate
    ) -> Optional[tuple[StreakState, StreakState]]:
        try:
            result = await self.db.execute(
                select(Student)
                .where(Student.id == student_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            student = result.scalar_one_or_none()
            if student is None:
                await self.db.rollback()
                return None

            before = StreakState(student_id, student.streak_days, student.last_streak_date)
            after = apply(before)
            if after != before:
                student.streak_days = after.streak_days
                student.last_streak_date = after.last_streak_date
            await self.db.commit()
            return before, after
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Streak update failed for student {student_id}: {e}",
                extra={"student_id": student_id},
            )
            raise InternalError("Failed to update streak") from e

    async def record_activity(
        self, activity: NewActivity, session_date: date
    ) -> tuple[ActivityEntry, DailySessionSummary]:
        try:
            log = ActivityLog(
                student_id=activity.student_id,
                activity_type=activity.activity_type.value,
                subject=activity.subject,
                content_title=activity.content_title,
                duration_minutes=activity.duration_minutes,
                completed=activity.completed,
                created_at=activity.created_at,
            )
            self.db.add(log)
            await self.db.flush()

            counters = {
                "total_minutes": activity.duration_minutes,
                **category_increments(activity.activity_type),
            }
            stmt = pg_insert(DailySession).values(
                student_id=activity.student_id,
                session_date=session_date,
                updated_at=func.now(),
                **counters,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[DailySession.student_id, DailySession.session_date],
                set_={
                    **{
                        name: getattr(DailySession, name) + getattr(stmt.excluded, name)
                        for name in _SESSION_COUNTERS
                    },
                    "updated_at": func.now(),
                },
            ).returning(*(getattr(DailySession, name) for name in _SESSION_COUNTERS))

            row = (await self.db.execute(stmt)).one()
            entry = _to_entry(log)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Activity log failed for student {activity.student_id}: {e}",
                extra={
                    "student_id": activity.student_id,
                    "activity_type": activity.activity_type.value,
                },
            )
            raise InternalError("Failed to log activity") from e

        return entry, DailySessionSummary(
            student_id=activity.student_id,
            session_date=session_date,
            total_minutes=row.total_minutes,
            lessons_count=row.lessons_count,
            videos_count=row.videos_count,
            games_count=row.games_count,
        )

    async def get_daily_sessions(
        self, student_id: int, since: date
    ) -> list[DailySessionSummary]:
        result = await self.db.execute(
            select(DailySession)
            .where(DailySession.student_id == student_id, DailySession.session_date >= since)
            .order_by(DailySession.session_date.asc())
        )
        return [
            DailySessionSummary(
                student_id=s.student_id,
                session_date=s.session_date,
                total_minutes=s.total_minutes,
                lessons_count=s.lessons_count,
                videos_count=s.videos_count,
                games_count=s.games_count,
            )
            for s in result.scalars().all()
        ]

    async def get_subject_distribution(
        self, student_id: int, since: datetime
    ) -> list[SubjectCount]:
        count = func.count(ActivityLog.id).label("count")
        result = await self.db.execute(
            select(ActivityLog.subject, count)
            .where(ActivityLog.student_id == student_id, ActivityLog.created_at >= since)
            .group_by(ActivityLog.subject)
            .order_by(count.desc(), ActivityLog.subject)
        )
        return [SubjectCount(row.subject, row.count) for row in result]

    async def get_recent_activities(
        self, student_id: int, limit: int
    ) -> list[ActivityEntry]:
        result = await self.db.execute(
            select(ActivityLog)
            .where(ActivityLog.student_id == student_id)
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .limit(limit)
        )
        return [_to_entry(log) for log in result.scalars().all()]

    async def get_activity_totals(
        self, student_id: int, since: datetime
    ) -> ActivityTotals:
        result = await self.db.execute(
            select(
                func.count(ActivityLog.id).label("total_activities"),
                func.coalesce(
                    func.sum(
                        case((ActivityLog.activity_type == ActivityType.LESSON.value, 1), else_=0)
                    ),
                    0,
                ).label("lessons_completed"),
                func.coalesce(func.sum(ActivityLog.duration_minutes), 0).label(
                    "total_minutes"
                ),
            ).where(ActivityLog.student_id == student_id, ActivityLog.created_at >= since)
        )
        row = result.one()
        return ActivityTotals(
            total_activities=int(row.total_activities),
            lessons_completed=int(row.lessons_completed),
            total_minutes=int(row.total_minutes),
        )
