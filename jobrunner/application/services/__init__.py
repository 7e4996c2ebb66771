"""Service orchestrators."""

from .job_service import EnqueueOptions, JobService

__all__ = [
    "EnqueueOptions",
    "JobService",
]
