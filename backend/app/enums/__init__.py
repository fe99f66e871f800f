"""
Centralized enum definitions for the application.

All enums are organized by domain:
- tracking.py: Activity categories and streak transition outcomes
- api.py: Rate limit categories

Usage:
    from app.enums import ActivityType, RateLimitType

    # Or import from specific module
    from app.enums.tracking import StreakAction
"""

from app.enums.tracking import (
    ActivityType,
    StreakAction,
)
from app.enums.api import (
    RateLimitType,
)

__all__ = [
    # Tracking enums
    "ActivityType",
    "StreakAction",
    # API enums
    "RateLimitType",
]
