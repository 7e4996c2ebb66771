"""
Job ORM model.

One row per workflow instance, mutated in place as the job advances
through the steps of its type.

Dependencies: sqlalchemy, jobrunner.boundary.db.base
System role: Durable job state for the background runner
"""

import enum
from typing import Any

from sqlalchemy import JSON, Enum, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jobrunner.boundary.db.base import Base, TimestampMixin, UUIDMixin


class JobType(str, enum.Enum):
    """
    Supported workflow kinds.

    SEO_PLANNER: Analyze a post's SEO and produce suggestions
    IMAGE_GEN: Generate and store a featured image for a post
    DISTRIBUTION: Push a post to social / syndication channels
    BLOG_AUTOPUBLISH: Publish scheduled drafts matching criteria
    """

    SEO_PLANNER = "SEO_PLANNER"
    IMAGE_GEN = "IMAGE_GEN"
    DISTRIBUTION = "DISTRIBUTION"
    BLOG_AUTOPUBLISH = "BLOG_AUTOPUBLISH"


class JobStatus(str, enum.Enum):
    """
    Job lifecycle states.

    PENDING: Waiting to be picked up (new, or a failed step awaiting retry)
    RUNNING: Executing a step, or mid-workflow awaiting its next cycle
    DONE: All steps completed successfully (terminal)
    FAILED: Exceeded max attempts (terminal)
    """

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    DONE = "DONE"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.DONE, JobStatus.FAILED)


ACTIONABLE_STATUSES = (JobStatus.PENDING, JobStatus.RUNNING)


class JobModel(Base, UUIDMixin, TimestampMixin):
    """
    Job ORM model.

    Attributes:
        id: UUID primary key (auto-generated, immutable)
        type: Workflow kind; selects step list and payload schema
        step: Name of the step currently due (or that just ran)
        status: PENDING / RUNNING / DONE / FAILED
        payload: Validated, canonical input supplied at enqueue time
        result: Mapping of step name -> that step's last successful output
        error: Last failure message; cleared on the next success
        attempts: Total failed executions over the job's lifetime
        created_at: Enqueue timestamp (UTC); FIFO selection key
        updated_at: Last state change timestamp (UTC)

    Workflow:
        1. Enqueue inserts status=PENDING, step=first step, attempts=0, result={}
        2. Runner locks the job, marks it RUNNING and executes the current step
        3. Success advances `step` (RUNNING) or finishes (DONE)
        4. Failure increments `attempts` and returns to PENDING, or FAILED at the limit
    """

    __tablename__ = "jobs"
    __table_args__ = (
        Index("jobs_status_created_at_idx", "status", "created_at"),
    )

    type: Mapped[JobType] = mapped_column(
        Enum(JobType, native_enum=False, length=32),
        nullable=False,
    )

    step: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )

    status: Mapped[JobStatus] = mapped_column(
        Enum(JobStatus, native_enum=False, length=16),
        nullable=False,
        default=JobStatus.PENDING,
    )

    payload: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
    )

    result: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc="Accumulated step outputs keyed by step name",
    )

    error: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    attempts: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    def __repr__(self) -> str:
        return f"<JobModel id={self.id} type={self.type} step={self.step} status={self.status}>"
