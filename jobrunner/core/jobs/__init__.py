"""
Job engine components.

Exports:
  - JobType, JobStatus, StepResult, ProcessResult, BatchResult: shared types
  - WorkflowDefinition, WorkflowRegistry, build_default_registry: workflow registry
  - StepDispatcher: (type, step) -> handler resolution
  - JobRunner: single-cycle processing
  - BatchCoordinator: bounded batch loop
"""

from jobrunner.core.jobs.types import (
    BatchResult,
    JobStatus,
    JobType,
    ProcessOutcome,
    ProcessResult,
    StepHandler,
    StepResult,
)
from jobrunner.core.jobs.registry import (
    WorkflowDefinition,
    WorkflowRegistry,
    build_default_registry,
)
from jobrunner.core.jobs.dispatcher import StepDispatcher
from jobrunner.core.jobs.runner import JobRunner
from jobrunner.core.jobs.coordinator import BatchCoordinator

__all__ = [
    "BatchCoordinator",
    "BatchResult",
    "JobRunner",
    "JobStatus",
    "JobType",
    "ProcessOutcome",
    "ProcessResult",
    "StepDispatcher",
    "StepHandler",
    "StepResult",
    "WorkflowDefinition",
    "WorkflowRegistry",
    "build_default_registry",
]
