"""
Batch coordinator.

Drives the runner sequentially up to `limit` times and aggregates a
summary. This is the unit an external scheduler invokes; it has no
scheduling logic of its own and never raises.

Dependencies: jobrunner.core.jobs.runner
System role: Bounded batch processing entry point
"""

import logging
from uuid import UUID

from jobrunner.core.jobs.runner import JobRunner
from jobrunner.core.jobs.types import BatchResult, ProcessOutcome
from jobrunner.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)


class BatchCoordinator:
    """Sequential batch loop over `JobRunner.process_next_job`."""

    def __init__(self, runner: JobRunner, default_limit: int = 5) -> None:
        self.runner = runner
        self.default_limit = default_limit

    async def process_batch(self, limit: int | None = None) -> BatchResult:
        """
        Process up to `limit` jobs, stopping early once the queue is drained.

        Jobs that were skipped or failed in this batch are not selected again
        until the next batch. An error while selecting or locking ends the
        batch early and is logged.

        Args:
            limit: Maximum runner cycles (defaults to `default_limit`)

        Returns:
            BatchResult: Counts per outcome plus per-job details
        """
        limit = self.default_limit if limit is None else limit
        summary = BatchResult()
        excluded: set[UUID] = set()

        for _ in range(limit):
            try:
                outcome = await self.runner.process_next_job(exclude_ids=excluded)
            except Exception as exc:
                log_exception_with_context(logger, "Job batch aborted", exc, processed=summary.processed)
                break

            if outcome is None:
                break

            summary.record(outcome)
            if outcome.status is not ProcessOutcome.OK:
                excluded.add(UUID(outcome.job_id))

        log_with_context(
            logger,
            logging.INFO,
            f"Job batch completed: {summary.processed} processed, "
            f"{summary.succeeded} succeeded, {summary.failed} failed, {summary.skipped} skipped",
            processed=summary.processed,
            succeeded=summary.succeeded,
            failed=summary.failed,
            skipped=summary.skipped,
        )
        return summary
