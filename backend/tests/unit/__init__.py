"""
Unit Tests

Unit tests run in isolation without external dependencies.
The tracker runs against InMemoryTrackerRepository instead of PostgreSQL.

These tests are fast and can run without Docker or any services running.
"""
