"""
Integration Tests for Health Check Endpoints

Tests the health check API endpoints against the test database.

Run with: pytest tests/integration/test_health.py -v
"""

import pytest

from app.config import settings

pytestmark = pytest.mark.integration


class TestBasicHealthEndpoint:
    """Test the basic health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_healthy_status(self, async_test_client) -> None:
        """Basic health check should indicate healthy status."""
        response = await async_test_client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": settings.APP_NAME}


class TestReadinessEndpoint:
    """Test the readiness probe."""

    @pytest.mark.asyncio
    async def test_ready_with_database(self, async_test_client) -> None:
        """Readiness probe should pass when PostgreSQL answers."""
        response = await async_test_client.get("/api/health/ready")

        assert response.status_code == 200
        assert response.json() == {"ready": True}
