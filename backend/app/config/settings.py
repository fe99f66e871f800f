"""
Application Configuration

This module provides type-safe configuration loading using Pydantic settings.
Environment variables are loaded from .env file and validated.

Usage:
    from app.config import settings

    # Access settings
    db_url = settings.POSTGRES_URL
    zone = settings.REFERENCE_TIMEZONE
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings

from app.enums.api import RateLimitType


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Education Platform"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    # PostgreSQL
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "education"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "education_platform"

    @property
    def POSTGRES_URL(self) -> str:
        """Async PostgreSQL connection URL."""
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def POSTGRES_URL_SYNC(self) -> str:
        """Sync PostgreSQL connection URL for Alembic migrations."""
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Streak calendar. One zone for every student, not per-user.
    REFERENCE_TIMEZONE: str = "Pacific/Auckland"

    # Activity logging
    DEFAULT_ACTIVITY_MINUTES: int = 10

    # Analytics
    ANALYTICS_DEFAULT_WINDOW_DAYS: int = 7
    ANALYTICS_MAX_WINDOW_DAYS: int = 365
    ANALYTICS_TRAILING_DAYS: int = 30  # subject distribution + totals window
    RECENT_ACTIVITY_LIMIT: int = 10

    # Rate limiting (slowapi format: "<count>/<period>")
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "120/minute"
    RATE_LIMIT_WRITE: str = "30/minute"

    def get_rate_limit(self, rate_limit_type: RateLimitType) -> str:
        """Return the slowapi limit string for an endpoint category."""
        limits = {
            RateLimitType.DEFAULT: self.RATE_LIMIT_DEFAULT,
            RateLimitType.WRITE: self.RATE_LIMIT_WRITE,
        }
        return limits.get(rate_limit_type, self.RATE_LIMIT_DEFAULT)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()


@lru_cache()
def load_yaml_config() -> dict[str, Any]:
    """Load application configuration from config/default.yaml."""
    config_path = Path(__file__).parent.parent.parent.parent / "config" / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


yaml_config: dict[str, Any] = load_yaml_config()
