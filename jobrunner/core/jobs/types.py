"""
Shared job engine types.

The step result contract returned by every step handler, and the per-job /
per-batch outcome records. Job type and status enums live with the ORM
model and are re-exported here.

Dependencies: pydantic, jobrunner.boundary.db.models
System role: Contracts shared by registry, dispatcher, runner and coordinator
"""

import enum
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field

from jobrunner.boundary.db.models.job_model import ACTIONABLE_STATUSES, JobModel, JobStatus, JobType


class StepResult(BaseModel):
    """Value returned by every workflow step handler."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(description="Whether the step succeeded")
    data: dict[str, Any] | None = Field(default=None, description="Step-specific output data")
    error: str | None = Field(default=None, description="Human-readable error (on failure)")
    next_step: str | None = Field(
        default=None,
        alias="nextStep",
        description="Explicit next step; None means follow the registry order",
    )

    @classmethod
    def ok(cls, data: dict[str, Any] | None = None, next_step: str | None = None) -> "StepResult":
        return cls(success=True, data=data, next_step=next_step)

    @classmethod
    def failure(cls, error: str) -> "StepResult":
        return cls(success=False, error=error)


# A step handler receives the job row and its validated payload.
StepHandler = Callable[[JobModel, dict[str, Any]], Awaitable[StepResult]]


class ProcessOutcome(str, enum.Enum):
    """Outcome of a single runner cycle."""

    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"


class ProcessResult(BaseModel):
    """Result of one `JobRunner.process_next_job` cycle."""

    job_id: str
    type: str
    step: str
    status: ProcessOutcome
    error: str | None = None


class BatchResult(BaseModel):
    """Summary returned by `BatchCoordinator.process_batch`."""

    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    details: list[ProcessResult] = Field(default_factory=list)

    def record(self, result: ProcessResult) -> None:
        self.processed += 1
        self.details.append(result)
        if result.status is ProcessOutcome.OK:
            self.succeeded += 1
        elif result.status is ProcessOutcome.FAILED:
            self.failed += 1
        else:
            self.skipped += 1


__all__ = [
    "ACTIONABLE_STATUSES",
    "BatchResult",
    "JobStatus",
    "JobType",
    "ProcessOutcome",
    "ProcessResult",
    "StepHandler",
    "StepResult",
]
