"""
Integration Test Fixtures

Provides fixtures for integration tests that require a running PostgreSQL.
These fixtures set up real database connections and clean up after tests.

IMPORTANT: All integration tests use the TEST database only (via POSTGRES_TEST_* env vars).
The async_test_client fixture overrides get_db to ensure the production database is never touched.
A safety check fixture (verify_test_database) runs at session start to fail fast if
production credentials are detected. When the database is unreachable the whole
integration session is skipped.

Note: app.main imports are kept inside fixtures because they require
environment variables that are set up by the session-scoped fixtures
in the parent conftest.py.
"""

import os
from pathlib import Path
from typing import AsyncGenerator, Awaitable, Callable
from urllib.parse import quote_plus

import httpx
import pytest
import pytest_asyncio
from dotenv import load_dotenv
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Load .env file FIRST, before reading any environment variables
# This ensures POSTGRES_TEST_* variables are available
_project_root = Path(__file__).parent.parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

pytestmark = pytest.mark.integration

# Tables to clean (children before parents)
TABLES = ["daily_sessions", "activity_logs", "students"]


# =============================================================================
# Safety Check - Runs before any integration tests
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def verify_test_database():
    """
    Safety check: Verify we're using test database credentials.

    Set ALLOW_PROD_DB_TESTS=1 to skip this check (for local development only).
    """
    if os.environ.get("ALLOW_PROD_DB_TESTS", "").lower() in ("1", "true", "yes"):
        return

    db_name = get_test_db_config()["db"]
    production_indicators = ["education_platform", "prod", "production"]
    for indicator in production_indicators:
        assert indicator not in db_name.lower(), (
            f"SAFETY CHECK FAILED: Database name '{db_name}' looks like production! "
            "Set POSTGRES_TEST_DB environment variable or ALLOW_PROD_DB_TESTS=1."
        )


# =============================================================================
# Database Configuration
# =============================================================================


def get_test_db_config() -> dict:
    """
    Get test database configuration from environment variables.

    Priority: POSTGRES_TEST_* > POSTGRES_* > defaults
    """
    return {
        "host": os.environ.get("POSTGRES_HOST", "localhost"),
        "port": os.environ.get("POSTGRES_PORT", "5432"),
        "user": os.environ.get(
            "POSTGRES_TEST_USER",
            os.environ.get("POSTGRES_USER", "testuser")
        ),
        "password": os.environ.get(
            "POSTGRES_TEST_PASSWORD",
            os.environ.get("POSTGRES_PASSWORD", "testpass")
        ),
        "db": os.environ.get(
            "POSTGRES_TEST_DB",
            os.environ.get("POSTGRES_DB", "testdb")
        ),
    }


def get_test_db_url(async_driver: bool = True) -> str:
    """Build database URL from test config environment variables."""
    config = get_test_db_config()
    # URL-encode the password to handle special characters
    encoded_password = quote_plus(config["password"])
    driver = "postgresql+asyncpg" if async_driver else "postgresql+psycopg2"
    return f"{driver}://{config['user']}:{encoded_password}@{config['host']}:{config['port']}/{config['db']}"


@pytest.fixture(scope="session", autouse=True)
def setup_test_database(verify_test_database):
    """
    Create database tables before any tests run.

    Uses synchronous SQLAlchemy to avoid event loop issues.
    Tables are dropped and recreated at the start of the test session
    to ensure schema is up-to-date with models.
    """
    from app.db.base import Base

    sync_engine = create_engine(get_test_db_url(async_driver=False))
    try:
        with sync_engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except OperationalError as e:
        sync_engine.dispose()
        pytest.skip(f"PostgreSQL test database unavailable: {e.orig}")

    Base.metadata.drop_all(sync_engine)
    Base.metadata.create_all(sync_engine)

    yield

    sync_engine.dispose()


# =============================================================================
# Sessions
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def session_maker() -> AsyncGenerator[async_sessionmaker, None]:
    """
    Session factory bound to a fresh engine with truncated tables.

    Creates a fresh engine per test to avoid event loop issues. Concurrency
    tests open one session per task from this factory.
    """
    test_engine = create_async_engine(get_test_db_url(async_driver=True), echo=False)
    maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with maker() as session:
        await session.execute(text(f"TRUNCATE TABLE {', '.join(TABLES)} RESTART IDENTITY CASCADE"))
        await session.commit()

    yield maker

    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def clean_db(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a session on freshly truncated tables.

    WARNING: This truncates tables! Only use for integration tests.
    """
    async with session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def create_student(clean_db: AsyncSession) -> Callable[..., Awaitable[int]]:
    """Insert a student row and return its ID."""
    from app.db.models import Student

    async def _create(**fields) -> int:
        student = Student(**fields)
        clean_db.add(student)
        await clean_db.commit()
        return student.id

    return _create


@pytest_asyncio.fixture
async def async_test_client(clean_db: AsyncSession, clock):
    """
    Create an async HTTP client configured to use the test database.

    IMPORTANT: This overrides the app's get_db dependency to ensure
    tests NEVER touch the production database. The client shares the
    test's event loop, which the asyncpg connection is bound to.
    """
    # Import here to defer until after environment is configured
    from app.db.base import get_db
    from app.dependencies import get_now
    from app.main import app

    async def get_test_db():
        """Yield the test database session instead of production."""
        yield clean_db

    app.dependency_overrides[get_db] = get_test_db
    app.dependency_overrides[get_now] = clock

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
