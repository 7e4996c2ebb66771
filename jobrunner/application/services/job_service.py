"""
Job service orchestrator.

Entry point for collaborators that enqueue background work. Validates the
type and payload, deduplicates through the idempotency guard and inserts
the job row.

Dependencies: sqlalchemy, pydantic, jobrunner.boundary, jobrunner.core
System role: Job enqueue orchestration
"""

import logging
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from jobrunner.boundary.cache.idempotency import IdempotencyGuard, hash_payload
from jobrunner.boundary.db.CRUD.job_crud import job_crud
from jobrunner.boundary.db.models.job_model import JobModel, JobStatus, JobType
from jobrunner.core.exceptions import DuplicateJobError
from jobrunner.core.jobs.registry import WorkflowRegistry
from jobrunner.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)


class EnqueueOptions(BaseModel):
    """Optional enqueue parameters."""

    priority: int | None = Field(
        default=None,
        ge=0,
        le=100,
        description="Accepted for forward compatibility; selection is FIFO",
    )
    deduplication_ttl_seconds: int | None = Field(
        default=None,
        gt=0,
        description="Overrides the default idempotency window",
    )


class JobService:
    """
    Job service orchestrator.

    Creates job rows for the runner to pick up. Never mutates an existing
    job; the runner is the only writer after creation.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        registry: WorkflowRegistry,
        guard: IdempotencyGuard,
        dedup_ttl_seconds: int = 300,
    ) -> None:
        """
        Initialize job service.

        Args:
            session_factory: Factory for job store sessions
            registry: Workflow registry for step lists and payload schemas
            guard: Idempotency guard for duplicate detection
            dedup_ttl_seconds: Default idempotency window
        """
        self.session_factory = session_factory
        self.registry = registry
        self.guard = guard
        self.dedup_ttl_seconds = dedup_ttl_seconds

    async def enqueue(
        self,
        job_type: JobType | str,
        payload: Any,
        options: EnqueueOptions | None = None,
    ) -> JobModel:
        """
        Insert a new PENDING job at the first step of its workflow.

        Validation happens before any side effect. The idempotency marker is
        set only after the insert succeeds, so a failed insert can be retried
        immediately.

        Args:
            job_type: Registered job type (member or string value)
            payload: Raw payload, validated against the type's schema
            options: Priority and deduplication window overrides

        Returns:
            JobModel: The created job

        Raises:
            UnknownJobTypeError: Type not registered or has no steps
            InvalidPayloadError: Payload failed schema validation
            DuplicateJobError: Identical enqueue within the idempotency window
        """
        options = options or EnqueueOptions()
        definition = self.registry.get(job_type)
        validated = self.registry.validate_payload(definition.job_type, payload)

        type_value = definition.job_type.value
        payload_hash = hash_payload(validated)
        if await self.guard.check(type_value, payload_hash):
            raise DuplicateJobError(type_value, payload_hash)

        if options.priority is not None:
            logger.debug("Priority %s accepted for %s; selection remains FIFO", options.priority, type_value)

        async with self.session_factory() as session:
            job = await job_crud.create(
                session,
                type=definition.job_type,
                step=definition.first_step,
                status=JobStatus.PENDING,
                payload=validated,
                result={},
                attempts=0,
            )
            await session.commit()

        ttl = options.deduplication_ttl_seconds or self.dedup_ttl_seconds
        await self.guard.mark(type_value, payload_hash, ttl)

        log_with_context(
            logger,
            logging.INFO,
            f"Job enqueued: {job.id} ({type_value})",
            job_id=job.id,
            job_type=type_value,
            step=job.step,
        )
        return job

    async def get_job(self, job_id: UUID) -> JobModel | None:
        """
        Fetch a job row by ID.

        Args:
            job_id: Job UUID

        Returns:
            JobModel if found, None otherwise
        """
        async with self.session_factory() as session:
            return await job_crud.get_by_id(session, job_id)
