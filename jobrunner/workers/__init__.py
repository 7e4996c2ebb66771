"""
Celery workers module.

Periodic job batch processing. Beat triggers `process_job_batch` every
`CELERY_BATCH_INTERVAL_SECONDS`; the engine itself has no scheduling logic.

Dependencies: celery, jobrunner.configs
System role: Background batch trigger
"""

from celery import Celery
from celery.signals import setup_logging

from jobrunner.configs import get_settings
from jobrunner.observability.logger import configure_logging

settings = get_settings()
celery_config = settings.celery

celery_app = Celery(
    "jobrunner",
    broker=celery_config.broker_url,
    backend=celery_config.result_backend_url,
    include=["jobrunner.workers.tasks.job_batch"],
)

celery_app.conf.update(
    task_serializer=celery_config.task_serializer,
    result_serializer=celery_config.result_serializer,
    accept_content=celery_config.accept_content,
    timezone=celery_config.timezone,
    beat_schedule={
        "process-job-batch": {
            "task": "jobrunner.process_job_batch",
            "schedule": celery_config.batch_interval_seconds,
        },
    },
)


@setup_logging.connect
def _configure_worker_logging(**kwargs) -> None:
    configure_logging(settings.log_level)
