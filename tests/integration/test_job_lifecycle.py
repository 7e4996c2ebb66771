"""
End-to-end job lifecycle tests.

Enqueue through JobService, then drive the runner and batch coordinator
against the in-memory job store and key-value store. Covers step order,
retries, mutual exclusion, terminal states, timeouts and result
accumulation.

System role: Verification of the full enqueue -> run -> finish pipeline
"""

import asyncio
from typing import Any

import pytest
from pydantic import BaseModel

from jobrunner.application.services.job_service import JobService
from jobrunner.boundary.cache.lock import JobLock
from jobrunner.boundary.db.models.job_model import JobModel, JobStatus, JobType
from jobrunner.core.jobs.coordinator import BatchCoordinator
from jobrunner.core.jobs.registry import WorkflowDefinition, WorkflowRegistry
from jobrunner.core.jobs.runner import JobRunner
from jobrunner.core.jobs.types import ProcessOutcome, StepResult

IMAGE_GEN_STEPS = ("extract", "prompt", "generate", "store")


def recording_handlers(job_type: JobType, steps: tuple[str, ...], seen: list[str]) -> dict:
    """Handlers that succeed with per-step output and record the step they ran."""

    def make(step: str):
        async def handler(job: JobModel, payload: dict[str, Any]) -> StepResult:
            seen.append(step)
            return StepResult.ok({"output": f"{step}-{payload.get('postId')}"})

        return handler

    return {job_type: {step: make(step) for step in steps}}


async def always_fails(job: JobModel, payload: dict[str, Any]) -> StepResult:
    raise RuntimeError("provider unavailable")


class LockAfterRival:
    """Job lock that lets a rival runner finish a whole cycle before acquiring."""

    def __init__(self, lock: JobLock, rival: JobRunner) -> None:
        self.lock = lock
        self.rival = rival
        self.rival_results: list = []

    async def acquire(self, job_id: str) -> str | None:
        self.rival_results.append(await self.rival.process_next_job())
        return await self.lock.acquire(job_id)

    async def release(self, job_id: str, token: str) -> bool:
        return await self.lock.release(job_id, token)


class TestJobLifecycleHappyPath:
    """Enqueue and run a job to completion."""

    @pytest.mark.asyncio
    async def test_image_gen_should_finish_after_four_cycles(
        self, job_service: JobService, runner, load_job
    ) -> None:
        """Test a trivially succeeding workflow reaches DONE with one result per step."""
        # Arrange
        job = await job_service.enqueue(JobType.IMAGE_GEN, {"postId": "p1"})
        assert (job.step, job.status, job.attempts) == ("extract", JobStatus.PENDING, 0)

        # Act
        outcomes = [await runner.process_next_job() for _ in range(4)]

        # Assert
        assert [o.status for o in outcomes] == [ProcessOutcome.OK] * 4
        finished = await load_job(job.id)
        assert finished.status is JobStatus.DONE
        assert finished.step == "store"
        assert set(finished.result) == set(IMAGE_GEN_STEPS)
        assert finished.error is None

    @pytest.mark.asyncio
    async def test_steps_should_run_in_registry_order(
        self, job_service: JobService, build_runner, load_job
    ) -> None:
        """Test observed steps equal the registry list, in order, without repeats."""
        # Arrange
        seen: list[str] = []
        runner = build_runner(recording_handlers(JobType.IMAGE_GEN, IMAGE_GEN_STEPS, seen))
        job = await job_service.enqueue(JobType.IMAGE_GEN, {"postId": "p1"})

        # Act
        while await runner.process_next_job() is not None:
            pass

        # Assert
        assert seen == list(IMAGE_GEN_STEPS)
        assert (await load_job(job.id)).status is JobStatus.DONE

    @pytest.mark.asyncio
    async def test_result_should_hold_each_steps_output(
        self, job_service: JobService, build_runner, load_job
    ) -> None:
        """Test the final result maps every step to its own output."""
        # Arrange
        runner = build_runner(recording_handlers(JobType.IMAGE_GEN, IMAGE_GEN_STEPS, []))
        job = await job_service.enqueue(JobType.IMAGE_GEN, {"postId": "p7"})

        # Act
        for _ in IMAGE_GEN_STEPS:
            await runner.process_next_job()

        # Assert
        finished = await load_job(job.id)
        assert finished.result == {step: {"output": f"{step}-p7"} for step in IMAGE_GEN_STEPS}

    @pytest.mark.asyncio
    async def test_single_batch_should_drive_job_to_done(
        self, job_service: JobService, coordinator: BatchCoordinator, load_job
    ) -> None:
        job = await job_service.enqueue(JobType.SEO_PLANNER, {"postId": "p1", "url": "https://example.com/p1"})

        summary = await coordinator.process_batch()

        assert summary.processed == 4
        assert summary.succeeded == 4
        assert (await load_job(job.id)).status is JobStatus.DONE

    @pytest.mark.asyncio
    async def test_dry_run_autopublish_should_skip_publish(
        self, job_service: JobService, runner, load_job
    ) -> None:
        """Test the dry-run override jumps validate -> notify and never publishes."""
        # Arrange
        job = await job_service.enqueue(JobType.BLOG_AUTOPUBLISH, {"dryRun": True})

        # Act
        while await runner.process_next_job() is not None:
            pass

        # Assert
        finished = await load_job(job.id)
        assert finished.status is JobStatus.DONE
        assert set(finished.result) == {"select", "validate", "notify"}


class TestJobLifecycleRetries:
    """Failure accounting across batch cycles."""

    @pytest.mark.asyncio
    async def test_always_failing_step_should_fail_after_max_attempts(
        self, job_service: JobService, build_runner, load_job
    ) -> None:
        """Test attempts climb 1, 2, 3 across batches and the job ends FAILED."""
        # Arrange
        runner = build_runner({JobType.IMAGE_GEN: {"extract": always_fails}}, max_attempts=3)
        coordinator = BatchCoordinator(runner, default_limit=5)
        job = await job_service.enqueue(JobType.IMAGE_GEN, {"postId": "p1"})

        # Act / Assert
        expected = [(JobStatus.PENDING, 1), (JobStatus.PENDING, 2), (JobStatus.FAILED, 3)]
        for status, attempts in expected:
            summary = await coordinator.process_batch()
            assert summary.processed == 1
            assert summary.failed == 1
            current = await load_job(job.id)
            assert (current.status, current.attempts) == (status, attempts)
            assert current.step == "extract"
            assert current.error == "provider unavailable"

        # Terminal jobs are never picked up again
        for _ in range(3):
            assert await runner.process_next_job() is None
        assert (await load_job(job.id)).attempts == 3

    @pytest.mark.asyncio
    async def test_success_after_failure_should_clear_error(
        self, job_service: JobService, build_runner, load_job
    ) -> None:
        """Test a retry that succeeds clears the error but keeps the attempt count."""
        # Arrange
        calls = {"n": 0}

        async def flaky(job: JobModel, payload: dict[str, Any]) -> StepResult:
            calls["n"] += 1
            if calls["n"] == 1:
                return StepResult.failure("temporary")
            return StepResult.ok()

        runner = build_runner({JobType.IMAGE_GEN: {"extract": flaky}})
        job = await job_service.enqueue(JobType.IMAGE_GEN, {"postId": "p1"})

        # Act
        first = await runner.process_next_job()
        second = await runner.process_next_job()

        # Assert
        assert first.status is ProcessOutcome.FAILED
        assert second.status is ProcessOutcome.OK
        current = await load_job(job.id)
        assert current.step == "prompt"
        assert current.status is JobStatus.RUNNING
        assert current.error is None
        assert current.attempts == 1
        assert current.result == {"extract": {"status": "ok"}}

    @pytest.mark.asyncio
    async def test_missing_handler_should_count_as_failure(
        self, job_service: JobService, build_runner, load_job
    ) -> None:
        runner = build_runner({})
        job = await job_service.enqueue(JobType.DISTRIBUTION, {"postId": "p1"})

        result = await runner.process_next_job()

        assert result.status is ProcessOutcome.FAILED
        assert result.error == 'No handler for step "select-targets" in workflow "DISTRIBUTION"'
        assert (await load_job(job.id)).attempts == 1


class TestJobLifecycleTimeout:
    """Step timeout handling."""

    @pytest.mark.asyncio
    async def test_timed_out_step_should_fail_and_keep_step(
        self, session_factory, kv_store, guard, build_runner, load_job
    ) -> None:
        """Test a step that outlives the timeout fails without advancing."""

        # Arrange
        class _Payload(BaseModel):
            post_id: str | None = None

        registry = WorkflowRegistry([WorkflowDefinition(JobType.IMAGE_GEN, ("slow", "fast"), _Payload)])
        service = JobService(session_factory, registry, guard)

        async def slow(job: JobModel, payload: dict[str, Any]) -> StepResult:
            await asyncio.sleep(5)
            return StepResult.ok()

        async def fast(job: JobModel, payload: dict[str, Any]) -> StepResult:
            return StepResult.ok()

        runner = build_runner(
            {JobType.IMAGE_GEN: {"slow": slow, "fast": fast}},
            custom_registry=registry,
            step_timeout_seconds=0.05,
        )
        job = await service.enqueue(JobType.IMAGE_GEN, {})

        # Act
        result = await runner.process_next_job()

        # Assert
        assert result.status is ProcessOutcome.FAILED
        assert result.error == "Step timed out after 0.05s"
        current = await load_job(job.id)
        assert current.step == "slow"
        assert current.attempts == 1
        assert current.status is JobStatus.PENDING


class TestJobLifecycleConcurrency:
    """Mutual exclusion between runners sharing one lock store."""

    @pytest.mark.asyncio
    async def test_concurrent_runners_should_not_both_process_a_job(
        self, job_service: JobService, build_runner, load_job
    ) -> None:
        """Test the second runner skips while the first holds the job lock."""
        # Arrange
        started = asyncio.Event()
        release = asyncio.Event()
        calls: list[str] = []

        async def blocking(job: JobModel, payload: dict[str, Any]) -> StepResult:
            calls.append(job.step)
            started.set()
            await release.wait()
            return StepResult.ok()

        handlers = {JobType.IMAGE_GEN: {"extract": blocking}}
        first_runner = build_runner(handlers)
        second_runner = build_runner(handlers)
        job = await job_service.enqueue(JobType.IMAGE_GEN, {"postId": "p1"})

        # Act
        first = asyncio.create_task(first_runner.process_next_job())
        await started.wait()
        second = await second_runner.process_next_job()
        release.set()
        first_result = await first

        # Assert
        assert second.status is ProcessOutcome.SKIPPED
        assert second.job_id == str(job.id)
        assert first_result.status is ProcessOutcome.OK
        assert calls == ["extract"]
        current = await load_job(job.id)
        assert current.step == "prompt"
        assert current.attempts == 0

    @pytest.mark.asyncio
    async def test_job_failed_before_lock_should_not_run_again(
        self, job_service: JobService, build_runner, lock, load_job
    ) -> None:
        """Test a job that turned FAILED between selection and locking is skipped."""
        # Arrange
        calls: list[str] = []

        async def failing(job: JobModel, payload: dict[str, Any]) -> StepResult:
            calls.append(job.step)
            raise RuntimeError("provider unavailable")

        handlers = {JobType.IMAGE_GEN: {"extract": failing}}
        rival = build_runner(handlers, max_attempts=1)
        runner = build_runner(handlers, max_attempts=1)
        runner.lock = LockAfterRival(lock, rival)
        job = await job_service.enqueue(JobType.IMAGE_GEN, {"postId": "p1"})

        # Act
        result = await runner.process_next_job()

        # Assert
        assert runner.lock.rival_results[0].status is ProcessOutcome.FAILED
        assert result.status is ProcessOutcome.SKIPPED
        assert calls == ["extract"]
        current = await load_job(job.id)
        assert current.status is JobStatus.FAILED
        assert current.attempts == 1
        assert await lock.acquire(str(job.id)) is not None

    @pytest.mark.asyncio
    async def test_job_advanced_before_lock_should_not_repeat_step(
        self, job_service: JobService, build_runner, lock, load_job
    ) -> None:
        """Test a step another runner already completed is not executed twice."""
        # Arrange
        seen: list[str] = []
        handlers = recording_handlers(JobType.IMAGE_GEN, IMAGE_GEN_STEPS, seen)
        rival = build_runner(handlers)
        runner = build_runner(handlers)
        runner.lock = LockAfterRival(lock, rival)
        job = await job_service.enqueue(JobType.IMAGE_GEN, {"postId": "p1"})

        # Act
        result = await runner.process_next_job()

        # Assert
        assert runner.lock.rival_results[0].status is ProcessOutcome.OK
        assert result.status is ProcessOutcome.SKIPPED
        assert seen == ["extract"]
        current = await load_job(job.id)
        assert current.step == "prompt"
        assert current.attempts == 0
        assert current.result == {"extract": {"output": "extract-p1"}}

    @pytest.mark.asyncio
    async def test_job_retried_before_lock_should_not_double_count_attempts(
        self, job_service: JobService, build_runner, lock, load_job
    ) -> None:
        """Test a stale attempt count never overwrites a newer failure record."""
        # Arrange
        handlers = {JobType.IMAGE_GEN: {"extract": always_fails}}
        rival = build_runner(handlers, max_attempts=3)
        runner = build_runner(handlers, max_attempts=3)
        runner.lock = LockAfterRival(lock, rival)
        job = await job_service.enqueue(JobType.IMAGE_GEN, {"postId": "p1"})

        # Act
        result = await runner.process_next_job()

        # Assert
        assert result.status is ProcessOutcome.SKIPPED
        current = await load_job(job.id)
        assert (current.status, current.attempts) == (JobStatus.PENDING, 1)

    @pytest.mark.asyncio
    async def test_lock_should_be_released_after_cycle(
        self, job_service: JobService, runner, lock
    ) -> None:
        job = await job_service.enqueue(JobType.IMAGE_GEN, {"postId": "p1"})

        await runner.process_next_job()

        assert await lock.acquire(str(job.id)) is not None

    @pytest.mark.asyncio
    async def test_skipped_job_should_not_block_rest_of_batch(
        self, job_service: JobService, coordinator: BatchCoordinator, lock, load_job
    ) -> None:
        """Test a job locked elsewhere is skipped once and the batch moves on."""
        # Arrange
        held = await job_service.enqueue(JobType.IMAGE_GEN, {"postId": "held"})
        other = await job_service.enqueue(JobType.DISTRIBUTION, {"postId": "other"})
        await lock.acquire(str(held.id))

        # Act
        summary = await coordinator.process_batch(limit=10)

        # Assert
        assert summary.skipped == 1
        assert summary.succeeded == 4
        assert (await load_job(other.id)).status is JobStatus.DONE
        assert (await load_job(held.id)).status is JobStatus.PENDING
