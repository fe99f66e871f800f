"""
Education Platform API

FastAPI application serving the streak and activity tracker.

Startup Sequence:
    1. Configure logging from LOG_LEVEL
    2. Install CORS, error handling and rate limiting
    3. Mount the health and tracking routers

Shutdown:
    Dispose of the database connection pool.

Run:
    uvicorn app.main:app --app-dir backend --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.db.base import close_db
from app.middleware import setup_error_handling, setup_rate_limiting
from app.routers import health_router, tracking_router

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Apply LOG_LEVEL to the root logger."""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Starting {settings.APP_NAME} (reference timezone {settings.REFERENCE_TIMEZONE})"
    )
    yield
    await close_db()
    logger.info(f"{settings.APP_NAME} stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    configure_logging()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_error_handling(app, debug=settings.DEBUG)
    setup_rate_limiting(app, enabled=settings.RATE_LIMIT_ENABLED)

    app.include_router(health_router.router)
    app.include_router(tracking_router.router)

    return app


app = create_app()
