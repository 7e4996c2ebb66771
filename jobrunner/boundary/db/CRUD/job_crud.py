"""
Job CRUD operations.

Extends BaseCRUD with the selection query and the state transitions the
runner applies to a job row.

Dependencies: sqlalchemy, jobrunner.boundary.db.models.job_model
System role: Job persistence operations for the background runner
"""

from typing import Any, Collection, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobrunner.boundary.db.CRUD.base_crud import BaseCRUD
from jobrunner.boundary.db.models.job_model import ACTIONABLE_STATUSES, JobModel, JobStatus, JobType


class JobCRUD(BaseCRUD[JobModel]):
    """
    CRUD operations for JobModel.

    The runner is the only writer of job state; every transition here is a
    single UPDATE of one row.
    """

    def __init__(self) -> None:
        """Initialize JobCRUD with JobModel."""
        super().__init__(JobModel)

    async def get_next_actionable(
        self,
        session: AsyncSession,
        exclude_ids: Collection[UUID] = (),
    ) -> JobModel | None:
        """
        Retrieve the oldest job that is PENDING or RUNNING.

        Args:
            session: Async database session
            exclude_ids: Job IDs to leave out of this selection

        Returns:
            Oldest actionable JobModel by created_at, None if the queue is drained
        """
        stmt = select(JobModel).where(JobModel.status.in_(ACTIONABLE_STATUSES))
        if exclude_ids:
            stmt = stmt.where(JobModel.id.not_in(list(exclude_ids)))
        stmt = stmt.order_by(JobModel.created_at.asc(), JobModel.id.asc()).limit(1)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_status(
        self,
        session: AsyncSession,
        status: JobStatus,
        limit: int | None = None,
    ) -> Sequence[JobModel]:
        """
        Retrieve jobs by status, oldest first.

        Args:
            session: Async database session
            status: Job status to filter by
            limit: Maximum number of jobs to return

        Returns:
            Sequence of JobModels with matching status
        """
        stmt = select(JobModel).where(JobModel.status == status).order_by(JobModel.created_at.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_type(
        self,
        session: AsyncSession,
        job_type: JobType,
        limit: int | None = None,
    ) -> Sequence[JobModel]:
        """
        Retrieve jobs by type, oldest first.

        Args:
            session: Async database session
            job_type: Job type to filter by
            limit: Maximum number of jobs to return

        Returns:
            Sequence of JobModels with matching type
        """
        stmt = select(JobModel).where(JobModel.type == job_type).order_by(JobModel.created_at.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def mark_running(
        self,
        session: AsyncSession,
        id: UUID,
        step: str,
        attempts: int,
    ) -> JobModel | None:
        """
        Claim a job for execution by marking it RUNNING.

        The update only applies while the row is still actionable and still
        at the `step` / `attempts` the caller selected, so a runner holding a
        stale copy cannot resurrect a terminal job or repeat a step another
        runner already finished.

        Args:
            session: Async database session
            id: Job UUID
            step: Step the caller selected the job at
            attempts: Attempt count the caller selected the job with

        Returns:
            Updated JobModel if claimed, None if the row changed or is gone
        """
        return await self.update_by_id(
            session,
            id,
            JobModel.status.in_(ACTIONABLE_STATUSES),
            JobModel.step == step,
            JobModel.attempts == attempts,
            status=JobStatus.RUNNING,
        )

    async def advance(
        self,
        session: AsyncSession,
        id: UUID,
        next_step: str,
        result: dict[str, Any],
    ) -> JobModel | None:
        """
        Move job to its next step after a successful step.

        Args:
            session: Async database session
            id: Job UUID
            next_step: Step name due on the next cycle
            result: Accumulated step outputs including the step that just ran

        Returns:
            Updated JobModel if found, None otherwise
        """
        return await self.update_by_id(
            session,
            id,
            step=next_step,
            status=JobStatus.RUNNING,
            result=result,
            error=None,
        )

    async def complete(
        self,
        session: AsyncSession,
        id: UUID,
        result: dict[str, Any],
    ) -> JobModel | None:
        """
        Mark job as DONE after its last step succeeded.

        Args:
            session: Async database session
            id: Job UUID
            result: Accumulated step outputs

        Returns:
            Updated JobModel if found, None otherwise
        """
        return await self.update_by_id(
            session,
            id,
            status=JobStatus.DONE,
            result=result,
            error=None,
        )

    async def record_failure(
        self,
        session: AsyncSession,
        id: UUID,
        attempts: int,
        status: JobStatus,
        error: str,
    ) -> JobModel | None:
        """
        Record a failed step execution.

        Args:
            session: Async database session
            id: Job UUID
            attempts: New total attempt count
            status: PENDING (retry later) or FAILED (permanent)
            error: Failure message

        Returns:
            Updated JobModel if found, None otherwise
        """
        return await self.update_by_id(
            session,
            id,
            attempts=attempts,
            status=status,
            error=error,
        )


job_crud = JobCRUD()
