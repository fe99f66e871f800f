"""API Routers package."""

from app.routers import health as health_router
from app.routers import tracking as tracking_router

__all__ = ["health_router", "tracking_router"]
