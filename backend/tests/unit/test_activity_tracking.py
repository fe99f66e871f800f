"""
Unit Tests for Activity Tracking.

Tests for:
- Logging activities and the daily session rollup
- Input validation (type, subject, duration)
- Session dates following the reference timezone
- Concurrent logs accumulating without lost updates
"""

import asyncio
from datetime import date, datetime, timezone

import pytest

from app.enums.tracking import ActivityType
from app.middleware.error_handling import InvalidArgumentError, NotFoundError


class TestLogActivity:
    """Tests for ActivityTrackingService.log_activity."""

    @pytest.mark.asyncio
    async def test_lesson_then_game_accumulate_same_day(self, activity_service, at) -> None:
        first = await activity_service.log_activity(
            7, "lesson", "Maths", duration_minutes=15, now=at(2024, 1, 11, 9, 0)
        )
        second = await activity_service.log_activity(
            7, "game", "Maths", duration_minutes=5, now=at(2024, 1, 11, 16, 0)
        )

        assert first.success is True
        assert first.daily_session.total_minutes == 15
        session = second.daily_session
        assert session.session_date == date(2024, 1, 11)
        assert session.total_minutes == 20
        assert session.lessons_count == 1
        assert session.games_count == 1
        assert session.videos_count == 0
        assert second.activity_id != first.activity_id

    @pytest.mark.asyncio
    async def test_default_duration_applies(self, activity_service, at) -> None:
        result = await activity_service.log_activity(
            7, ActivityType.VIDEO, "Science", now=at(2024, 1, 11)
        )

        assert result.daily_session.total_minutes == 10
        assert result.daily_session.videos_count == 1
        assert result.message == "Logged 10 minutes of video"

    @pytest.mark.asyncio
    async def test_zero_duration_still_counts_activity(self, activity_service, at) -> None:
        result = await activity_service.log_activity(
            7, "game", "Maths", duration_minutes=0, now=at(2024, 1, 11)
        )

        assert result.daily_session.total_minutes == 0
        assert result.daily_session.games_count == 1

    @pytest.mark.asyncio
    async def test_session_date_uses_reference_zone(self, activity_service) -> None:
        # 12:00 UTC on the 10th is 01:00 on the 11th in Auckland
        now = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)

        result = await activity_service.log_activity(7, "lesson", "Maths", now=now)

        assert result.session_date == date(2024, 1, 11)

    @pytest.mark.asyncio
    async def test_days_are_kept_apart(self, repository, activity_service, at) -> None:
        await activity_service.log_activity(7, "lesson", "Maths", now=at(2024, 1, 10))
        await activity_service.log_activity(7, "lesson", "Maths", now=at(2024, 1, 11))

        sessions = await repository.get_daily_sessions(7, since=date(2024, 1, 1))

        assert [s.session_date for s in sessions] == [date(2024, 1, 10), date(2024, 1, 11)]
        assert all(s.lessons_count == 1 for s in sessions)

    @pytest.mark.asyncio
    async def test_subject_is_trimmed(self, repository, activity_service, at) -> None:
        await activity_service.log_activity(7, "lesson", "  Maths  ", now=at(2024, 1, 11))

        recent = await repository.get_recent_activities(7, limit=1)

        assert recent[0].subject == "Maths"

    @pytest.mark.asyncio
    async def test_logging_does_not_touch_streak(self, repository, activity_service, at) -> None:
        await activity_service.log_activity(7, "lesson", "Maths", now=at(2024, 1, 11))

        state = await repository.get_streak(7)

        assert state.streak_days == 5
        assert state.last_streak_date == date(2024, 1, 10)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "activity_type,subject,duration",
        [
            ("quiz", "Maths", 10),
            ("lesson", "", 10),
            ("lesson", "   ", 10),
            ("lesson", "Maths", -1),
            ("lesson", "M" * 101, 10),
            ("lesson", "Maths", 1441),
        ],
    )
    async def test_invalid_input_rejected(
        self, repository, activity_service, at, activity_type, subject, duration
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            await activity_service.log_activity(
                7, activity_type, subject, duration_minutes=duration, now=at(2024, 1, 11)
            )

        assert await repository.get_recent_activities(7, limit=10) == []

    @pytest.mark.asyncio
    async def test_limits_are_inclusive(self, activity_service, at) -> None:
        result = await activity_service.log_activity(
            7, "lesson", "M" * 100, duration_minutes=1440, now=at(2024, 1, 11)
        )

        assert result.daily_session.total_minutes == 1440

    @pytest.mark.asyncio
    async def test_overlong_content_title_rejected(self, activity_service, at) -> None:
        with pytest.raises(InvalidArgumentError, match="contentTitle"):
            await activity_service.log_activity(
                7, "video", "Maths", content_title="t" * 256, now=at(2024, 1, 11)
            )

    @pytest.mark.asyncio
    async def test_unknown_student_raises_not_found(self, activity_service, at) -> None:
        with pytest.raises(NotFoundError):
            await activity_service.log_activity(999, "lesson", "Maths", now=at(2024, 1, 11))

    @pytest.mark.asyncio
    async def test_concurrent_logs_lose_no_increments(
        self, repository, activity_service, at
    ) -> None:
        now = at(2024, 1, 11, 10, 0)
        kinds = ["lesson", "video", "game", "lesson"] * 5

        await asyncio.gather(
            *(
                activity_service.log_activity(7, kind, "Maths", duration_minutes=5, now=now)
                for kind in kinds
            )
        )

        sessions = await repository.get_daily_sessions(7, since=date(2024, 1, 11))
        assert len(sessions) == 1
        session = sessions[0]
        assert session.total_minutes == 100
        assert session.lessons_count == 10
        assert session.videos_count == 5
        assert session.games_count == 5
        assert len(await repository.get_recent_activities(7, limit=50)) == 20
