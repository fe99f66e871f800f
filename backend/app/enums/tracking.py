"""
Streak & Activity Tracking Enums

Defines the activity categories a student can complete and the
outcomes of a streak transition.
"""

from enum import Enum


class ActivityType(str, Enum):
    """
    Categories of completed learning activities.

    Each category maps to exactly one counter on the daily session
    aggregate (lessons_count, videos_count, games_count).
    """

    LESSON = "lesson"
    VIDEO = "video"
    GAME = "game"


class StreakAction(str, Enum):
    """
    Outcome of applying the streak transition for "today".

    - NOOP: already credited today, nothing changes
    - ADVANCE: last credited day was yesterday, streak grows by one
    - RESET: never credited or a day was missed, streak restarts at one
    """

    NOOP = "noop"
    ADVANCE = "advance"
    RESET = "reset"
