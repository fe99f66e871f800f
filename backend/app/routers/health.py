"""
Health Check Endpoints

Provides health check endpoints for monitoring and orchestration.

Endpoints:
- GET /api/health - Basic health check
- GET /api/health/ready - Readiness probe for orchestration systems
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.base import get_db

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
async def health_check():
    """
    Basic health check.

    Returns a simple status response indicating the API is running.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
    }


@router.get("/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """
    Readiness probe for orchestration systems.

    Returns 200 only if the database answers a round-trip, 503 otherwise.

    Used by: Docker health checks, load balancers, Kubernetes, etc.
    """
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Readiness check failed: {e}")
        error = str(e) if settings.DEBUG else "database unavailable"
        return JSONResponse(status_code=503, content={"ready": False, "error": error})

    return {"ready": True}
