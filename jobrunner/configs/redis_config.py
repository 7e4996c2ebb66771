"""
Redis configuration settings.

Connection parameters for the key-value store shared by the idempotency
guard and the per-job distributed lock.

Dependencies: pydantic, pydantic_settings
System role: Key-value store configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from jobrunner.configs.base import BaseSettings


class RedisSettings(BaseSettings):
    """Redis connection configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REDIS_",
        case_sensitive=False,
        extra="ignore",
    )

    backend: str = Field(
        default="redis",
        description="Key-value backend: 'redis' for shared deployments, 'memory' for a single local process",
    )
    host: str = Field(default="localhost", description="Redis host")
    port: int = Field(default=6379, description="Redis port")
    db: int = Field(default=0, description="Redis database number")
    password: str | None = Field(default=None, description="Redis password")
    socket_timeout: float = Field(default=5.0, description="Socket timeout in seconds")

    @property
    def url(self) -> str:
        """
        Construct Redis connection URL.

        Returns:
            str: redis-py compatible URL
        """
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"
