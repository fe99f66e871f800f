"""
Education Platform Tracker Test Suite

Test Structure:
    tests/
    ├── conftest.py          # Shared fixtures (in-memory repository, frozen clock, API client)
    ├── unit/                # Unit tests (isolated, no external dependencies)
    │   ├── test_calendar.py          # Reference timezone and midnight countdown
    │   ├── test_streak_tracking.py   # Streak transitions and increments
    │   ├── test_activity_tracking.py # Activity log and daily rollup
    │   ├── test_tracking_analytics.py
    │   └── test_tracking_api.py      # HTTP surface against the in-memory store
    └── integration/         # Integration tests (require PostgreSQL)
        ├── test_sql_repository.py    # Row locks and ON CONFLICT upserts
        ├── test_tracking_api.py
        └── test_health.py

Running Tests:
    # Run all tests
    pytest backend/tests/ -v

    # Run only unit tests (fast, no dependencies)
    pytest backend/tests/unit/ -v

    # Run only integration tests (skipped when PostgreSQL is unreachable)
    pytest -m integration -v
"""
