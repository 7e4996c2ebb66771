"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from jobrunner.configs.base import BaseSettings
from jobrunner.configs.celery_config import CelerySettings
from jobrunner.configs.database import DatabaseSettings
from jobrunner.configs.jobs import JobEngineSettings
from jobrunner.configs.redis_config import RedisSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    jobs: JobEngineSettings = Field(default_factory=JobEngineSettings)
    celery: CelerySettings = Field(default_factory=CelerySettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from jobrunner.configs import get_settings
        settings = get_settings()
    """
    return Settings()
