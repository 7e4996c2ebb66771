"""
Job engine configuration settings.

Retry, timeout, lock and deduplication parameters for the job runner.

Dependencies: pydantic, pydantic_settings
System role: Job engine tuning
"""

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from jobrunner.configs.base import BaseSettings


class JobEngineSettings(BaseSettings):
    """Job runner configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="JOBS_",
        case_sensitive=False,
        extra="ignore",
    )

    max_attempts: int = Field(
        default=3,
        ge=1,
        description="Failed attempts after which a job is marked FAILED",
    )
    step_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Hard timeout for a single step execution",
    )
    lock_ttl_seconds: int = Field(
        default=30,
        ge=1,
        description="TTL of the per-job lock marker",
    )
    dedup_ttl_seconds: int = Field(
        default=300,
        ge=1,
        description="Default idempotency window for enqueue requests",
    )
    batch_size: int = Field(
        default=5,
        ge=1,
        description="Jobs processed per scheduled batch cycle",
    )
    key_prefix: str = Field(
        default="jobs",
        description="Namespace prefix for lock and idempotency keys",
    )

    @model_validator(mode="after")
    def check_lock_outlives_step(self) -> "JobEngineSettings":
        """Reject a lock TTL that could expire while a step is still running."""
        if self.lock_ttl_seconds <= self.step_timeout_seconds:
            raise ValueError(
                f"lock_ttl_seconds ({self.lock_ttl_seconds}) must be greater than "
                f"step_timeout_seconds ({self.step_timeout_seconds})"
            )
        return self
