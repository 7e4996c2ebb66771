"""
Workflow step handlers.

One module per job type; each exposes `STEPS`, a mapping of step name to
async handler. Handlers may be abandoned on timeout and re-invoked on
retry, so their side effects must be idempotent.

Exports:
  - WORKFLOW_HANDLERS: job type -> step name -> handler
"""

from typing import Mapping

from jobrunner.boundary.db.models.job_model import JobType
from jobrunner.core.jobs.types import StepHandler
from jobrunner.workflows import blog_autopublish, distribution, image_gen, seo_planner

WORKFLOW_HANDLERS: Mapping[JobType, Mapping[str, StepHandler]] = {
    JobType.SEO_PLANNER: seo_planner.STEPS,
    JobType.IMAGE_GEN: image_gen.STEPS,
    JobType.DISTRIBUTION: distribution.STEPS,
    JobType.BLOG_AUTOPUBLISH: blog_autopublish.STEPS,
}

__all__ = ["WORKFLOW_HANDLERS"]
