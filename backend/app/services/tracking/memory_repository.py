"""
In-Memory Tracker Repository

A process-local TrackerRepository with the same atomicity guarantees as the
SQL implementation. Used by the unit and API tests in place of PostgreSQL.

Concurrency:
    Per-student asyncio locks serialize streak updates; per (student, day)
    locks serialize aggregate accumulation. Each critical section yields to
    the event loop between read and write, the way a store round-trip would,
    so races surface in tests if the locking is wrong.
"""

import asyncio
from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from app.enums.tracking import ActivityType
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


class InMemoryTrackerRepository(TrackerRepository):
    """Dictionary-backed repository."""

    def __init__(self) -> None:
        self._streaks: dict[int, StreakState] = {}
        self._sessions: dict[tuple[int, date], DailySessionSummary] = {}
        self._activities: list[ActivityEntry] = []
        self._next_activity_id = 1
        self._streak_locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._session_locks: defaultdict[tuple[int, date], asyncio.Lock] = defaultdict(
            asyncio.Lock
        )

    def add_student(
        self,
        student_id: int,
        streak_days: int = 0,
        last_streak_date: Optional[date] = None,
    ) -> StreakState:
        """Register a student, as the directory does on registration."""
        state = StreakState(student_id, streak_days, last_streak_date)
        self._streaks[student_id] = state
        return state

    async def student_exists(self, student_id: int) -> bool:
        return student_id in self._streaks

    async def get_streak(self, student_id: int) -> Optional[StreakState]:
        return self._streaks.get(student_id)

    async def update_streak(
        self, student_id: int, apply: StreakUpdate
    ) -> Optional[tuple[StreakState, StreakState]]:
        async with self._streak_locks[student_id]:
            before = self._streaks.get(student_id)
            if before is None:
                return None
            after = apply(before)
            await asyncio.sleep(0)  # store round-trip
            self._streaks[student_id] = after
            return before, after

    async def record_activity(
        self, activity: NewActivity, session_date: date
    ) -> tuple[ActivityEntry, DailySessionSummary]:
        key = (activity.student_id, session_date)
        async with self._session_locks[key]:
            current = self._sessions.get(key) or DailySessionSummary(
                student_id=activity.student_id, session_date=session_date
            )
            increments = category_increments(activity.activity_type)
            updated = replace(
                current,
                total_minutes=current.total_minutes + activity.duration_minutes,
                lessons_count=current.lessons_count + increments["lessons_count"],
                videos_count=current.videos_count + increments["videos_count"],
                games_count=current.games_count + increments["games_count"],
            )
            await asyncio.sleep(0)  # store round-trip

            entry = ActivityEntry(
                id=self._next_activity_id,
                student_id=activity.student_id,
                activity_type=activity.activity_type,
                subject=activity.subject,
                content_title=activity.content_title,
                duration_minutes=activity.duration_minutes,
                completed=activity.completed,
                created_at=activity.created_at,
            )
            self._next_activity_id += 1
            self._activities.append(entry)
            self._sessions[key] = updated
            return entry, updated

    async def get_daily_sessions(
        self, student_id: int, since: date
    ) -> list[DailySessionSummary]:
        return sorted(
            (
                s
                for (sid, day), s in self._sessions.items()
                if sid == student_id and day >= since
            ),
            key=lambda s: s.session_date,
        )

    async def get_subject_distribution(
        self, student_id: int, since: datetime
    ) -> list[SubjectCount]:
        counts: dict[str, int] = defaultdict(int)
        for entry in self._entries_since(student_id, since):
            counts[entry.subject] += 1
        return [
            SubjectCount(subject, count)
            for subject, count in sorted(counts.items(), key=lambda x: (-x[1], x[0]))
        ]

    async def get_recent_activities(
        self, student_id: int, limit: int
    ) -> list[ActivityEntry]:
        entries = [a for a in self._activities if a.student_id == student_id]
        entries.sort(key=lambda a: (a.created_at, a.id), reverse=True)
        return entries[:limit]

    async def get_activity_totals(
        self, student_id: int, since: datetime
    ) -> ActivityTotals:
        entries = list(self._entries_since(student_id, since))
        return ActivityTotals(
            total_activities=len(entries),
            lessons_completed=sum(
                1 for a in entries if a.activity_type == ActivityType.LESSON
            ),
            total_minutes=sum(a.duration_minutes for a in entries),
        )

    def _entries_since(self, student_id: int, since: datetime):
        return (
            a
            for a in self._activities
            if a.student_id == student_id and a.created_at >= since
        )
