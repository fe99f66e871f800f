"""
Integration Tests

Integration tests require a running PostgreSQL test database
(POSTGRES_TEST_* environment variables). The session is skipped when
the database cannot be reached.

These tests verify that the tracker's locking and upserts hold up against
a real database.
"""
