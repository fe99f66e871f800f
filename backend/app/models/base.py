"""
Strict Base Model for API Request/Response Validation

This module provides base classes with strict validation settings to harden
the API contract between backend and frontend.

MOTIVATION:
    Parameter mismatches between frontend and backend are a common source of bugs.
    By enforcing strict validation:
    - Unknown fields are rejected with 400 (extra="forbid")
    - Required vs optional is enforced at compile-time
    - Type mismatches fail fast with clear error messages

Wire format:
    Fields are snake_case in Python and camelCase on the wire
    (student_id <-> studentId). Both spellings are accepted on input.

Usage:
    # For request bodies (strictest validation)
    class ActivityCreate(StrictRequest):
        student_id: int
        subject: str

    # For response bodies
    class StreakResponse(StrictResponse):
        student_id: int
        streak_days: int

Architecture:
    API Request → StrictRequest (extra="forbid") → Route Handler
    Service Record → StrictResponse (extra="ignore") → API Response
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StrictRequest(BaseModel):
    """
    Base model for API request bodies with strict validation.

    Rejects any fields not explicitly declared in the model, catching
    frontend typos and mismatches at request time rather than runtime.

    Features:
        - extra="forbid": Unknown fields raise 400 invalid_argument
        - validate_default=True: Validates default values
        - str_strip_whitespace=True: Trims whitespace from strings
        - alias_generator=to_camel: camelCase wire names

    Example:
        >>> class ActivityCreate(StrictRequest):
        ...     student_id: int
        ...     subject: str
        >>>
        >>> ActivityCreate(studentId=7, subject="Maths")  # OK
        >>> ActivityCreate(studentId=7, subjct="Maths")  # Raises ValidationError
    """

    model_config = ConfigDict(
        extra="forbid",  # Reject unknown fields
        validate_default=True,  # Validate defaults
        str_strip_whitespace=True,  # Clean string inputs
        alias_generator=to_camel,
        populate_by_name=True,
    )


class StrictResponse(BaseModel):
    """
    Base model for API response bodies.

    More lenient than StrictRequest to allow flexibility in response data.
    Still enforces type validation but allows extra fields.

    Features:
        - extra="ignore": Silently ignores extra fields
        - validate_default=True: Validates default values
        - from_attributes=True: Allows conversion from dataclass records
        - alias_generator=to_camel: Serialized with camelCase names by FastAPI
    """

    model_config = ConfigDict(
        extra="ignore",  # Allow extra fields in responses
        validate_default=True,  # Validate defaults
        from_attributes=True,  # Enable record conversion
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# Common Response Patterns
# =============================================================================


class ErrorDetail(BaseModel):
    """
    Standardized error response detail.

    Matches the error format from the error_handling middleware.
    Frontend clients can rely on this consistent structure.
    """

    error: str  # Error code (e.g., "invalid_argument")
    message: str  # Human-readable message
    error_id: str  # Correlation ID for log lookup
    details: Optional[dict] = None  # Additional context
    timestamp: datetime
