"""
Reference Calendar

Derives civil dates and day boundaries in the platform's single reference
timezone (REFERENCE_TIMEZONE, Pacific/Auckland by default). Every student
shares this calendar regardless of where they are.

Instants are converted with zoneinfo, so daylight-saving transitions follow
the IANA rules for the zone.

Usage:
    from app.services.tracking.calendar import get_calendar

    calendar = get_calendar()
    today = calendar.current_date(datetime.now(timezone.utc))
    remaining = calendar.seconds_until_next_midnight(datetime.now(timezone.utc))
"""

from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

from app.config import settings

SECONDS_PER_DAY = 86400


class ReferenceCalendar:
    """Calendar arithmetic pinned to one named timezone."""

    def __init__(self, timezone_name: str):
        """
        Args:
            timezone_name: IANA zone name, e.g. "Pacific/Auckland".

        Raises:
            zoneinfo.ZoneInfoNotFoundError: If the zone is unknown.
        """
        self.timezone_name = timezone_name
        self.tz = ZoneInfo(timezone_name)

    def localize(self, now: datetime) -> datetime:
        """Convert an instant to wall-clock time in the reference zone."""
        if now.tzinfo is None:
            # Naive instants are UTC
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(self.tz)

    def current_date(self, now: datetime) -> date:
        """Calendar date of the instant in the reference zone."""
        return self.localize(now).date()

    @staticmethod
    def previous_date(day: date) -> date:
        """The calendar day immediately before day."""
        return day - timedelta(days=1)

    def next_midnight(self, now: datetime) -> datetime:
        """The next 00:00 wall-clock boundary after now, as an aware datetime."""
        local_date = self.current_date(now)
        return datetime.combine(local_date + timedelta(days=1), time.min, tzinfo=self.tz)

    def seconds_until_next_midnight(self, now: datetime) -> int:
        """
        Whole seconds remaining until the next reference-zone midnight.

        The difference is taken between UTC instants; subtracting two
        datetimes that share a tzinfo would compare wall-clock readings and
        be off by an hour on DST transition days.

        The result decreases one second per elapsed second except where
        the upper bound clamps it. At 00:00:00 exactly the true remainder
        is 86400, so 00:00:00 and 00:00:01 both report 86399. On the
        25-hour day at the end of daylight saving the whole first hour
        reports 86399 and the countdown only starts falling after it.
        Keeping the value below one day takes precedence over strict
        monotonicity on those readings.

        Returns:
            int in [0, 86400).
        """
        local_now = self.localize(now)
        remaining = self.next_midnight(now).astimezone(timezone.utc) - local_now.astimezone(
            timezone.utc
        )
        seconds = remaining // timedelta(seconds=1)
        return min(max(seconds, 0), SECONDS_PER_DAY - 1)


@lru_cache()
def get_calendar() -> ReferenceCalendar:
    """Get the process-wide reference calendar."""
    return ReferenceCalendar(settings.REFERENCE_TIMEZONE)
