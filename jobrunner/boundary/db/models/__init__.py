"""
Database models package.

Exports:
  - JobModel, JobStatus, JobType: Job ORM model and related enums

Dependencies: sqlalchemy, jobrunner.boundary.db.base
System role: Database model definitions for domain entities
"""

from jobrunner.boundary.db.models.job_model import ACTIONABLE_STATUSES, JobModel, JobStatus, JobType

__all__ = [
    "ACTIONABLE_STATUSES",
    "JobModel",
    "JobStatus",
    "JobType",
]
