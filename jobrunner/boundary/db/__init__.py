"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - JobModel, JobStatus, JobType: Job entity and enums
  - JobCRUD, job_crud: Job CRUD class and singleton

Dependencies: sqlalchemy, jobrunner.configs
System role: Durable storage for background jobs
"""

from jobrunner.boundary.db.base import Base, TimestampMixin, UUIDMixin
from jobrunner.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from jobrunner.boundary.db.models.job_model import JobModel, JobStatus, JobType
from jobrunner.boundary.db.CRUD import BaseCRUD, JobCRUD, job_crud

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "JobModel",
    "JobStatus",
    "JobType",
    # CRUD
    "BaseCRUD",
    "JobCRUD",
    "job_crud",
]
