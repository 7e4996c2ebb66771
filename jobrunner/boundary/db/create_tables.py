"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, jobrunner.configs
System role: Database schema initialization

Usage:
    python -m jobrunner.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from jobrunner.boundary.db.base import Base
from jobrunner.boundary.db.connection import get_async_engine
from jobrunner.configs import get_settings
from jobrunner.observability.logger import configure_logging

# Import all models to register them with Base.metadata
from jobrunner.boundary.db.models.job_model import JobModel  # noqa: F401

logger = logging.getLogger(__name__)


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: existing tables remain unchanged.

    Args:
        engine: Engine to use (defaults to one built from settings)
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Job tables created successfully")


async def drop_tables(engine: AsyncEngine | None = None) -> None:
    """
    Drop all database tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.

    Args:
        engine: Engine to use (defaults to one built from settings)
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Job tables dropped")


async def _main() -> None:
    configure_logging(get_settings().log_level)
    engine = get_async_engine()
    try:
        await create_tables(engine)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(_main())
