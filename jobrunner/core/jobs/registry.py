"""
Workflow registry.

Maps each job type to its ordered step list and payload schema. Built once
at process start and shared read-only; adding a job type means adding a
definition here, not a migration.

Dependencies: pydantic, jobrunner.core.jobs.definitions
System role: Static workflow lookup for enqueue and runner
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable

from pydantic import BaseModel, ValidationError

from jobrunner.boundary.db.models.job_model import JobType
from jobrunner.core.exceptions import InvalidPayloadError, UnknownJobTypeError, WorkflowConfigurationError
from jobrunner.core.jobs.definitions import JOB_PAYLOAD_SCHEMAS, JOB_STEPS


@dataclass(frozen=True)
class WorkflowDefinition:
    """Step sequence and payload schema for one job type."""

    job_type: JobType
    steps: tuple[str, ...]
    payload_schema: type[BaseModel]

    def __post_init__(self) -> None:
        if len(set(self.steps)) != len(self.steps):
            raise WorkflowConfigurationError(
                f"Duplicate step names in workflow {self.job_type.value}",
                {"steps": list(self.steps)},
            )

    @property
    def first_step(self) -> str:
        return self.steps[0]

    def index_of(self, step: str) -> int | None:
        try:
            return self.steps.index(step)
        except ValueError:
            return None


class WorkflowRegistry:
    """Read-only lookup of workflow definitions by job type."""

    def __init__(self, definitions: Iterable[WorkflowDefinition]) -> None:
        self._definitions = MappingProxyType({d.job_type: d for d in definitions})

    @property
    def job_types(self) -> tuple[JobType, ...]:
        return tuple(self._definitions)

    def get(self, job_type: JobType | str) -> WorkflowDefinition:
        """
        Resolve the workflow for a job type.

        Args:
            job_type: JobType member or its string value

        Returns:
            WorkflowDefinition with a non-empty step list

        Raises:
            UnknownJobTypeError: If the type is not registered or has no steps
        """
        raw = job_type.value if isinstance(job_type, JobType) else str(job_type)
        try:
            resolved = JobType(raw)
        except ValueError:
            raise UnknownJobTypeError(raw) from None

        definition = self._definitions.get(resolved)
        if definition is None or not definition.steps:
            raise UnknownJobTypeError(raw)
        return definition

    def steps_for(self, job_type: JobType | str) -> tuple[str, ...]:
        return self.get(job_type).steps

    def next_step(self, job_type: JobType | str, step: str) -> str | None:
        """
        Step that follows `step` in the registry order.

        Returns:
            Next step name, or None if `step` is last (or not part of the workflow)
        """
        definition = self.get(job_type)
        idx = definition.index_of(step)
        if idx is None or idx >= len(definition.steps) - 1:
            return None
        return definition.steps[idx + 1]

    def is_forward_step(self, job_type: JobType | str, current: str, target: str) -> bool:
        """True if `target` is a step of the workflow strictly after `current`."""
        definition = self.get(job_type)
        current_idx = definition.index_of(current)
        target_idx = definition.index_of(target)
        if current_idx is None or target_idx is None:
            return False
        return target_idx > current_idx

    def validate_payload(self, job_type: JobType | str, payload: Any) -> dict[str, Any]:
        """
        Validate and normalize a raw payload.

        The result is JSON-compatible, uses the callers' field aliases and
        drops None-valued optionals, so equivalent payloads normalize to the
        same dict.

        Args:
            job_type: Job type whose schema applies
            payload: Raw payload as supplied by the caller

        Returns:
            dict: Canonical validated payload

        Raises:
            UnknownJobTypeError: If the type is not registered
            InvalidPayloadError: If validation fails (field-level errors attached)
        """
        definition = self.get(job_type)
        try:
            model = definition.payload_schema.model_validate(payload)
        except ValidationError as exc:
            errors = [
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in exc.errors()
            ]
            raise InvalidPayloadError(definition.job_type.value, errors) from exc
        return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def build_default_registry() -> WorkflowRegistry:
    """Registry for the built-in CMS workflows."""
    return WorkflowRegistry(
        WorkflowDefinition(job_type, steps, JOB_PAYLOAD_SCHEMAS[job_type])
        for job_type, steps in JOB_STEPS.items()
    )
