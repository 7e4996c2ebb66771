"""
Blog auto-publish workflow.

Steps: select -> validate -> publish -> notify

A dry run stops after validation and jumps straight to notify, so nothing
is published.
"""

from typing import Any

from jobrunner.boundary.db.models.job_model import JobModel
from jobrunner.core.jobs.types import StepResult
from jobrunner.workflows.scaffold import scaffold_step


async def validate(job: JobModel, payload: dict[str, Any]) -> StepResult:
    data: dict[str, Any] = {"step": "validate", "status": "scaffolded"}
    if payload.get("dryRun"):
        data["dryRun"] = True
        return StepResult.ok(data, next_step="notify")
    return StepResult.ok(data)


STEPS = {
    "select": scaffold_step("select", "criteria"),
    "validate": validate,
    "publish": scaffold_step("publish"),
    "notify": scaffold_step("notify", "dryRun"),
}
