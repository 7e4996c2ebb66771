"""
Job runner.

One processing cycle: select the oldest actionable job, lock it, execute
its current step under a timeout, then advance, complete or fail it and
release the lock. Step failures of any kind never escape; they are
recorded on the job and reported in the returned ProcessResult.

Selection and locking are separate, so the job may change in between; the
claim that marks it RUNNING only succeeds while the row still matches the
selected step and attempt count, otherwise the cycle is skipped.

The step timeout cancels the handler coroutine and then waits for it to
unwind. A handler that suppresses CancelledError or blocks during cleanup
holds the runner past the timeout, and work it has pushed to a thread keeps
running, which is why handlers must tolerate being abandoned and retried.

Dependencies: sqlalchemy, jobrunner.boundary, jobrunner.core.jobs
System role: Job state machine driver
"""

import asyncio
import logging
from typing import Collection
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from jobrunner.boundary.cache.lock import JobLock
from jobrunner.boundary.db.CRUD.job_crud import JobCRUD, job_crud
from jobrunner.boundary.db.models.job_model import JobModel, JobStatus
from jobrunner.core.jobs.dispatcher import StepDispatcher
from jobrunner.core.jobs.registry import WorkflowRegistry
from jobrunner.core.jobs.types import ProcessOutcome, ProcessResult, StepResult
from jobrunner.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)


class JobRunner:
    """
    Executes one step of one job per call.

    Attributes:
        session_factory: Factory for short-lived job store sessions
        registry: Workflow registry (step order, next-step lookup)
        dispatcher: Step handler dispatcher
        lock: Per-job distributed lock
        max_attempts: Failed attempts after which a job is FAILED
        step_timeout_seconds: Hard timeout for one step execution
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        registry: WorkflowRegistry,
        dispatcher: StepDispatcher,
        lock: JobLock,
        max_attempts: int = 3,
        step_timeout_seconds: float = 10.0,
        crud: JobCRUD = job_crud,
    ) -> None:
        self.session_factory = session_factory
        self.registry = registry
        self.dispatcher = dispatcher
        self.lock = lock
        self.max_attempts = max_attempts
        self.step_timeout_seconds = step_timeout_seconds
        self.crud = crud

    async def process_next_job(self, exclude_ids: Collection[UUID] = ()) -> ProcessResult | None:
        """
        Find the oldest actionable job, lock it, execute its current step,
        and advance or fail it.

        Selection and locking errors propagate; everything after the lock
        is acquired is converted into a result.

        Args:
            exclude_ids: Jobs not to select in this cycle

        Returns:
            ProcessResult for the selected job, None when no job is actionable
        """
        async with self.session_factory() as session:
            job = await self.crud.get_next_actionable(session, exclude_ids)

        if job is None:
            return None

        job_id = str(job.id)
        token = await self.lock.acquire(job_id)
        if token is None:
            logger.info("Job %s already locked, skipping", job_id)
            return self._result(job, ProcessOutcome.SKIPPED)

        try:
            return await self._run_locked(job)
        except Exception as exc:
            error = str(exc) or type(exc).__name__
            log_exception_with_context(
                logger,
                f"Unexpected error processing job {job_id}",
                exc,
                job_id=job_id,
                step=job.step,
            )
            await self._record_failure_best_effort(job, error)
            return self._result(job, ProcessOutcome.FAILED, error)
        finally:
            await self._release(job_id, token)

    async def _run_locked(self, job: JobModel) -> ProcessResult:
        async with self.session_factory() as session:
            claimed = await self.crud.mark_running(session, job.id, job.step, job.attempts)
            await session.commit()

        if claimed is None:
            # Another runner moved the job between selection and lock acquisition
            logger.info("Job %s changed since selection, skipping", job.id)
            return self._result(job, ProcessOutcome.SKIPPED)

        step_result = await self._execute_step(job)

        if step_result.success:
            next_step, error = self._resolve_next_step(job, step_result)
            if error is None:
                await self._advance(job, step_result, next_step)
                return self._result(job, ProcessOutcome.OK)
            step_result = StepResult.failure(error)

        error = step_result.error or "Unknown error"
        await self._fail(job, error)
        return self._result(job, ProcessOutcome.FAILED, error)

    async def _execute_step(self, job: JobModel) -> StepResult:
        try:
            return await asyncio.wait_for(
                self.dispatcher.dispatch(job),
                timeout=self.step_timeout_seconds,
            )
        except asyncio.TimeoutError:
            return StepResult.failure(f"Step timed out after {self.step_timeout_seconds}s")
        except Exception as exc:
            return StepResult.failure(str(exc) or type(exc).__name__)

    def _resolve_next_step(self, job: JobModel, step_result: StepResult) -> tuple[str | None, str | None]:
        """Return (next step or None when finished, error for an invalid override)."""
        override = step_result.next_step
        if override is None:
            return self.registry.next_step(job.type, job.step), None
        if not self.registry.is_forward_step(job.type, job.step, override):
            return None, f'Invalid next step "{override}" after "{job.step}"'
        return override, None

    async def _advance(self, job: JobModel, step_result: StepResult, next_step: str | None) -> None:
        result = dict(job.result or {})
        result[job.step] = step_result.data if step_result.data is not None else {"status": "ok"}

        async with self.session_factory() as session:
            if next_step is None:
                await self.crud.complete(session, job.id, result)
            else:
                await self.crud.advance(session, job.id, next_step, result)
            await session.commit()

        if next_step is None:
            log_with_context(
                logger, logging.INFO, f"Job {job.id} completed all steps",
                job_id=job.id, job_type=job.type.value,
            )
        else:
            log_with_context(
                logger, logging.INFO, f"Job {job.id} advanced to step: {next_step}",
                job_id=job.id, job_type=job.type.value, step=next_step,
            )

    async def _fail(self, job: JobModel, error: str) -> None:
        attempts = job.attempts + 1
        status = JobStatus.FAILED if attempts >= self.max_attempts else JobStatus.PENDING

        async with self.session_factory() as session:
            await self.crud.record_failure(session, job.id, attempts, status, error)
            await session.commit()

        if status is JobStatus.FAILED:
            log_with_context(
                logger, logging.ERROR,
                f"Job {job.id} permanently failed after {attempts} attempts: {error}",
                job_id=job.id, step=job.step, attempts=attempts,
            )
        else:
            log_with_context(
                logger, logging.WARNING,
                f'Job {job.id} step "{job.step}" failed (attempt {attempts}/{self.max_attempts}): {error}',
                job_id=job.id, step=job.step, attempts=attempts,
            )

    async def _record_failure_best_effort(self, job: JobModel, error: str) -> None:
        try:
            await self._fail(job, error)
        except Exception as exc:
            # Job stays RUNNING until its lock expires and a later cycle re-selects it
            log_exception_with_context(
                logger,
                f"Could not record failure for job {job.id}",
                exc,
                job_id=job.id,
            )

    async def _release(self, job_id: str, token: str) -> None:
        try:
            released = await self.lock.release(job_id, token)
        except Exception as exc:
            log_exception_with_context(logger, f"Could not release lock for job {job_id}", exc, job_id=job_id)
            return
        if not released:
            logger.warning("Lock for job %s expired before release", job_id)

    @staticmethod
    def _result(job: JobModel, outcome: ProcessOutcome, error: str | None = None) -> ProcessResult:
        return ProcessResult(
            job_id=str(job.id),
            type=job.type.value,
            step=job.step,
            status=outcome,
            error=error,
        )
