"""
Shared settings base for the job engine.

Every settings group (database, Redis, job tuning, Celery) derives from this
class so that all of them read the same `.env` file and share the
deployment-level fields used by the worker entry points.

Dependencies: pydantic_settings
System role: Common root of the job engine configuration groups
"""

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict
from pydantic import Field


class BaseSettings(PydanticBaseSettings):
    """Deployment-level settings inherited by every configuration group."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Deployment the worker runs in (development, staging, production)",
    )
    debug: bool = Field(
        default=False,
        description="Verbose engine diagnostics",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level applied when the Celery worker configures logging",
    )
