"""
Job batch Celery task.

Task: process_job_batch(limit)
Flow: build engine -> BatchCoordinator.process_batch -> dispose -> summary

Dependencies: celery, jobrunner.dependencies, jobrunner.workers
System role: Scheduled entry point that advances jobs
"""

import asyncio
from typing import Any

from jobrunner.configs import get_settings
from jobrunner.dependencies import EngineContainer
from jobrunner.workers import celery_app


async def run_batch(limit: int | None = None, container: EngineContainer | None = None) -> dict[str, Any]:
    """
    Run one batch cycle on a fresh container and release its resources.

    Args:
        limit: Maximum jobs to process (defaults to JOBS_BATCH_SIZE)
        container: Container to use (a new one from settings by default)

    Returns:
        dict: JSON-serializable batch summary
    """
    container = container or EngineContainer(get_settings())
    try:
        summary = await container.coordinator.process_batch(limit)
    finally:
        await container.aclose()
    return summary.model_dump(mode="json")


@celery_app.task(name="jobrunner.process_job_batch")
def process_job_batch(limit: int | None = None) -> dict[str, Any]:
    """
    Process one batch of jobs.

    Each invocation gets its own event loop, so the engine and key-value
    connections are created and disposed per run.

    Args:
        limit: Maximum jobs to process

    Returns:
        dict: Batch summary (processed, succeeded, failed, skipped, details)
    """
    return asyncio.run(run_batch(limit))
