"""
Rate Limiting Middleware

Prevents abuse and rapid double-submission using SlowAPI.

Usage:
    from app.middleware.rate_limit import limiter
    from app.enums import RateLimitType
    from app.config import settings

    @router.post("/activity-log")
    @limiter.limit(settings.get_rate_limit(RateLimitType.WRITE))
    async def log_activity(request: Request, ...):
        ...

Rate limit configurations (from settings):
- DEFAULT: Read endpoints (streak status, analytics)
- WRITE: Endpoints that mutate tracker state
"""

import logging

from fastapi import FastAPI, Request
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from app.config import settings

logger = logging.getLogger(__name__)


def get_client_identifier(request: Request) -> str:
    """
    Get client identifier for rate limiting.

    Uses X-Forwarded-For header if behind a proxy,
    otherwise falls back to direct IP address.

    Args:
        request: FastAPI request object

    Returns:
        Client IP address or identifier
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # Take the first IP in the chain (original client)
        return forwarded_for.split(",")[0].strip()

    return get_remote_address(request)


# Disabled limiter skips the per-endpoint checks entirely
limiter = Limiter(key_func=get_client_identifier, enabled=settings.RATE_LIMIT_ENABLED)


def setup_rate_limiting(app: FastAPI, enabled: bool = True) -> None:
    """
    Configure rate limiting on the FastAPI app.

    Args:
        app: FastAPI application instance
        enabled: Whether to enable rate limiting
    """
    if not enabled:
        logger.info("Rate limiting disabled")
        return

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    logger.info("Rate limiting enabled")
