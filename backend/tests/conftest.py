"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across unit and integration tests.
"""

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Generator
from zoneinfo import ZoneInfo

import pytest
from dotenv import load_dotenv

# Add the backend directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load .env file from project root BEFORE any fixtures run
# This ensures POSTGRES_TEST_* variables are available
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

# Settings are built when app.config is first imported, so the test
# configuration has to be in place before any test module imports app.*
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["REFERENCE_TIMEZONE"] = "Pacific/Auckland"
os.environ.setdefault("DEBUG", "true")

NZ = ZoneInfo("Pacific/Auckland")


# ============================================================================
# Environment Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """
    Set up test database variables before any tests run.

    Test database credentials come from POSTGRES_TEST_* env vars if set,
    otherwise fall back to defaults for CI environments.
    """
    original_env = os.environ.copy()

    test_env = {
        "POSTGRES_HOST": os.environ.get("POSTGRES_HOST", "localhost"),
        "POSTGRES_PORT": os.environ.get("POSTGRES_PORT", "5432"),
        "POSTGRES_USER": os.environ.get("POSTGRES_TEST_USER", "testuser"),
        "POSTGRES_PASSWORD": os.environ.get("POSTGRES_TEST_PASSWORD", "testpass"),
        "POSTGRES_DB": os.environ.get("POSTGRES_TEST_DB", "testdb"),
    }
    os.environ.update(test_env)

    yield

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


# ============================================================================
# Sample Configuration Data
# ============================================================================


@pytest.fixture
def sample_yaml_config() -> dict[str, Any]:
    """
    Provide a sample YAML configuration for testing.

    This matches the structure of config/default.yaml.
    """
    return {
        "database": {
            "pool_size": 3,
            "max_overflow": 5,
            "pool_timeout": 10,
        },
    }


# ============================================================================
# Clock and Calendar
# ============================================================================


def nz_time(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
    """Aware datetime for a wall-clock reading in Pacific/Auckland."""
    return datetime(year, month, day, hour, minute, tzinfo=NZ)


@pytest.fixture
def at() -> Callable[..., datetime]:
    """Build instants from Pacific/Auckland wall-clock readings."""
    return nz_time


@pytest.fixture
def calendar():
    """Reference calendar pinned to Pacific/Auckland."""
    from app.services.tracking import ReferenceCalendar

    return ReferenceCalendar("Pacific/Auckland")


class FrozenClock:
    """Mutable stand-in for the wall clock."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FrozenClock:
    """Clock frozen at midday on 2024-01-11 in Auckland."""
    return FrozenClock(nz_time(2024, 1, 11))


# ============================================================================
# Repository and Services
# ============================================================================


@pytest.fixture
def repository():
    """
    In-memory tracker repository with students 1, 7 and 8 registered.

    Student 7 has a five-day streak last credited on 2024-01-10.
    """
    from datetime import date

    from app.services.tracking import InMemoryTrackerRepository

    repo = InMemoryTrackerRepository()
    repo.add_student(1)
    repo.add_student(7, streak_days=5, last_streak_date=date(2024, 1, 10))
    repo.add_student(8)
    return repo


@pytest.fixture
def streak_service(repository, calendar):
    from app.services.tracking import StreakTrackingService

    return StreakTrackingService(repository, calendar)


@pytest.fixture
def activity_service(repository, calendar):
    from app.services.tracking import ActivityTrackingService

    return ActivityTrackingService(repository, calendar, default_duration_minutes=10)


@pytest.fixture
def analytics_service(repository, calendar):
    from app.services.tracking import AnalyticsService

    return AnalyticsService(repository, calendar)


# ============================================================================
# API Client
# ============================================================================


@pytest.fixture
def api_client(repository, calendar, clock) -> Generator:
    """
    TestClient wired to the in-memory repository and the frozen clock.

    The database session dependency is never resolved, so no PostgreSQL
    server is needed.
    """
    from fastapi.testclient import TestClient

    from app.dependencies import get_now, get_reference_calendar, get_tracker_repository
    from app.main import app

    app.dependency_overrides[get_tracker_repository] = lambda: repository
    app.dependency_overrides[get_reference_calendar] = lambda: calendar
    app.dependency_overrides[get_now] = clock

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
