"""Placeholder handler factory for steps whose integration is not wired yet."""

from typing import Any

from jobrunner.boundary.db.models.job_model import JobModel
from jobrunner.core.jobs.types import StepHandler, StepResult


def scaffold_step(name: str, *payload_keys: str) -> StepHandler:
    """
    Build a handler that succeeds with stub data.

    Args:
        name: Step name recorded in the output
        *payload_keys: Payload fields echoed into the output when present
    """

    async def handler(job: JobModel, payload: dict[str, Any]) -> StepResult:
        data: dict[str, Any] = {"step": name, "status": "scaffolded"}
        data.update({key: payload[key] for key in payload_keys if key in payload})
        return StepResult.ok(data)

    handler.__name__ = f"{name.replace('-', '_')}_step"
    return handler
