"""
Step dispatcher.

Resolves (job type, current step) to a registered handler and invokes it
with the job row and its payload. An unregistered pair yields a failed
StepResult so the runner's uniform failure path applies. Handlers must not
write job state; the runner is the single writer.

Dependencies: jobrunner.core.jobs.types, jobrunner.core.jobs.registry
System role: Handler lookup and invocation
"""

import logging
from typing import Mapping

from jobrunner.boundary.db.models.job_model import JobModel, JobType
from jobrunner.core.jobs.registry import WorkflowRegistry
from jobrunner.core.jobs.types import StepHandler, StepResult

logger = logging.getLogger(__name__)


class StepDispatcher:
    """Lookup table of step handlers keyed by job type, then step name."""

    def __init__(self, handlers: Mapping[JobType, Mapping[str, StepHandler]]) -> None:
        self._handlers = {job_type: dict(steps) for job_type, steps in handlers.items()}

    def resolve(self, job_type: JobType, step: str) -> StepHandler | None:
        return self._handlers.get(job_type, {}).get(step)

    def missing_handlers(self, registry: WorkflowRegistry) -> list[tuple[JobType, str]]:
        """
        List registry steps that have no handler.

        Args:
            registry: Workflow registry to check against

        Returns:
            (job type, step) pairs the dispatcher cannot serve
        """
        return [
            (job_type, step)
            for job_type in registry.job_types
            for step in registry.steps_for(job_type)
            if self.resolve(job_type, step) is None
        ]

    async def dispatch(self, job: JobModel) -> StepResult:
        """
        Execute the handler for `job.type` + `job.step`.

        Handler exceptions propagate to the caller.

        Args:
            job: Job row (read-only for the handler)

        Returns:
            StepResult: Handler result, or a failure if no handler is registered
        """
        handler = self.resolve(job.type, job.step)
        if handler is None:
            job_type = job.type.value if isinstance(job.type, JobType) else job.type
            return StepResult.failure(f'No handler for step "{job.step}" in workflow "{job_type}"')

        result = await handler(job, dict(job.payload or {}))
        if not isinstance(result, StepResult):
            result = StepResult.model_validate(result)
        return result


def build_default_dispatcher(registry: WorkflowRegistry | None = None) -> StepDispatcher:
    """
    Dispatcher wired to the built-in workflow handlers.

    Args:
        registry: If given, missing handlers are logged as configuration gaps
    """
    from jobrunner.workflows import WORKFLOW_HANDLERS

    dispatcher = StepDispatcher(WORKFLOW_HANDLERS)
    if registry is not None:
        for job_type, step in dispatcher.missing_handlers(registry):
            logger.warning("No handler registered for %s/%s", job_type.value, step)
    return dispatcher
