"""Pydantic models for the application."""

from app.models.tracking import (
    ActivityLogRequest,
    ActivityLogResponse,
    AnalyticsResponse,
    StreakIncrementRequest,
    StreakIncrementResponse,
    StreakStatusResponse,
)

__all__ = [
    "ActivityLogRequest",
    "ActivityLogResponse",
    "AnalyticsResponse",
    "StreakIncrementRequest",
    "StreakIncrementResponse",
    "StreakStatusResponse",
]
