"""
Error Handling Middleware

Provides consistent, informative error responses across the API.

Features:
- Standardized error response format
- Correlation IDs for log tracking
- Sanitized responses (hides internal details in production)
- Custom exception classes mirroring the tracker's error taxonomy

Usage:
    from app.middleware.error_handling import setup_error_handling, NotFoundError

    # Configure app
    setup_error_handling(app, debug=settings.DEBUG)

    # Raise custom exceptions from services
    raise NotFoundError(f"Student {student_id} not found")

Exception handling hierarchy:
    - HTTPException: Left to FastAPI's built-in handler
    - RequestValidationError: Malformed input → 400 invalid_argument
    - ServiceError: Custom exceptions → structured JSON response
    - Exception: Catch-all in the middleware → sanitized 500 response

Caveat: BaseHTTPMiddleware cannot catch exceptions raised after the
response body starts streaming (not an issue for JSON APIs).
"""

import functools
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional, TypeVar
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Error Response Schema
# =============================================================================


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error: str  # Error code (e.g., "not_found")
    message: str  # Human-readable message
    error_id: str  # For log correlation
    details: Optional[dict] = None  # Additional context (sanitized)
    timestamp: datetime


# =============================================================================
# Custom Exceptions
# =============================================================================


class ServiceError(Exception):
    """
    Base exception for service errors.

    Provides consistent error handling with:
    - HTTP status code
    - Error code for categorization
    - Optional details for debugging

    Example:
        raise ServiceError("Database connection failed", status_code=503)
    """

    status_code: int = 500
    error_code: str = "service_error"

    def __init__(
        self,
        message: str,
        status_code: int = None,
        error_code: str = None,
        details: dict = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code:
            self.status_code = status_code
        if error_code:
            self.error_code = error_code
        self.details = details


class InvalidArgumentError(ServiceError):
    """
    Missing or malformed input.

    Raised when a student ID, activity type, subject or window is invalid.
    """

    status_code = 400
    error_code = "invalid_argument"


class NotFoundError(ServiceError):
    """
    Resource not found error.

    Raised when the requested student doesn't exist.
    """

    status_code = 404
    error_code = "not_found"


class ConflictError(ServiceError):
    """
    Duplicate unique key.

    Raised by directory paths (registration) when a unique value is taken.
    """

    status_code = 409
    error_code = "conflict"


class InternalError(ServiceError):
    """
    Persistence failure.

    The operation was rolled back; callers may retry.
    """

    status_code = 500
    error_code = "internal"


# =============================================================================
# Error Handling Middleware
# =============================================================================


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    - Catches unhandled exceptions
    - Logs with correlation ID
    - Returns consistent error format
    - Hides internal details in production
    """

    def __init__(self, app, debug: bool = False):
        """
        Initialize middleware.

        Args:
            app: FastAPI/Starlette application
            debug: Whether to include stack traces in responses
        """
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        """Process request and handle any errors."""
        error_id = str(uuid4())[:8]

        try:
            response = await call_next(request)
            return response

        except HTTPException:
            # Let FastAPI handle HTTP exceptions
            raise

        except ServiceError as e:
            return _service_error_response(request, e, error_id, self.debug)

        except Exception as e:
            # Log full traceback for unexpected errors
            logger.error(
                f"[{error_id}] Unhandled error: {type(e).__name__}: {e}",
                extra={
                    "error_id": error_id,
                    "path": request.url.path,
                    "method": request.method,
                    "traceback": traceback.format_exc(),
                },
            )

            # Return sanitized response
            content = {
                "error": "internal_server_error",
                "message": "An unexpected error occurred",
                "error_id": error_id,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }

            # Include details in debug mode
            if self.debug:
                content["details"] = {
                    "exception": type(e).__name__,
                    "message": str(e),
                    "traceback": traceback.format_exc(),
                }

            return JSONResponse(status_code=500, content=content)


def _service_error_response(
    request: Request, error: ServiceError, error_id: str, debug: bool
) -> JSONResponse:
    """Log a ServiceError and render it in the standard error format."""
    log = logger.error if error.status_code >= 500 else logger.warning
    log(
        f"[{error_id}] {error.error_code}: {error.message}",
        extra={
            "error_id": error_id,
            "error_code": error.error_code,
            "path": request.url.path,
            "method": request.method,
            "details": error.details,
        },
    )

    return JSONResponse(
        status_code=error.status_code,
        content={
            "error": error.error_code,
            "message": error.message,
            "error_id": error_id,
            "details": error.details if debug else None,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


# =============================================================================
# Setup Function
# =============================================================================


def setup_error_handling(app: FastAPI, debug: bool = False) -> None:
    """
    Configure error handling on the FastAPI app.

    Registers exception handlers for ServiceError and request validation
    errors, and installs the catch-all middleware.

    Args:
        app: FastAPI application instance
        debug: Whether to include stack traces in responses
    """

    async def service_error_handler(request: Request, exc: ServiceError):
        return _service_error_response(request, exc, str(uuid4())[:8], debug)

    async def validation_error_handler(request: Request, exc: RequestValidationError):
        error_id = str(uuid4())[:8]
        errors = jsonable_encoder(exc.errors())
        logger.warning(
            f"[{error_id}] invalid_argument: {request.method} {request.url.path}",
            extra={"error_id": error_id, "path": request.url.path, "errors": errors},
        )
        fields = sorted({".".join(str(p) for p in err["loc"][1:]) for err in errors})
        return JSONResponse(
            status_code=400,
            content={
                "error": InvalidArgumentError.error_code,
                "message": f"Invalid or missing fields: {', '.join(fields) or 'request'}",
                "error_id": error_id,
                "details": {"errors": errors} if debug else None,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_middleware(ErrorHandlingMiddleware, debug=debug)
    logger.info(f"Error handling middleware enabled (debug={debug})")


# =============================================================================
# Endpoint Decorator
# =============================================================================


def handle_endpoint_errors(
    operation: str,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Wrap an endpoint so persistence failures surface as InternalError.

    ServiceError and HTTPException pass through untouched so their status
    codes reach the client. functools.wraps keeps the signature visible to
    FastAPI's dependency injection.

    Args:
        operation: Human-readable operation name used in logs and messages

    Usage:
        @router.get("/streak-status")
        @handle_endpoint_errors("Get streak status")
        async def get_streak_status(...):
            ...
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except (HTTPException, ServiceError):
                raise
            except SQLAlchemyError as e:
                logger.exception(f"{operation} failed: {type(e).__name__}")
                raise InternalError(f"{operation} failed") from e

        return wrapper

    return decorator
