"""
Middleware Package

Provides FastAPI middleware for:
- Rate limiting
- Error handling

Rate limiting usage:
    from app.middleware import limiter
    from app.enums import RateLimitType
    from app.config import settings

    @limiter.limit(settings.get_rate_limit(RateLimitType.WRITE))
    async def my_endpoint(request: Request):
        ...
"""

from app.middleware.rate_limit import setup_rate_limiting, limiter
from app.middleware.error_handling import (
    ConflictError,
    ErrorHandlingMiddleware,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    ServiceError,
    handle_endpoint_errors,
    setup_error_handling,
)

__all__ = [
    "setup_rate_limiting",
    "limiter",
    "ErrorHandlingMiddleware",
    "ServiceError",
    "InvalidArgumentError",
    "NotFoundError",
    "ConflictError",
    "InternalError",
    "handle_endpoint_errors",
    "setup_error_handling",
]
