"""
Job type payload schemas and step definitions.

Payload models accept the camelCase field names used by callers; unknown
fields are ignored. Step lists are ordered: the first element is the step
assigned at enqueue, the last one finishes the job.

Dependencies: pydantic
System role: Static workflow configuration
"""

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field

from jobrunner.boundary.db.models.job_model import JobType


class PayloadModel(BaseModel):
    """Base for job payload schemas."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SeoPlannerPayload(PayloadModel):
    post_id: str = Field(alias="postId", min_length=1)
    url: AnyHttpUrl | None = None
    target_keywords: list[str] | None = Field(default=None, alias="targetKeywords")


class Dimensions(PayloadModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class ImageGenPayload(PayloadModel):
    post_id: str = Field(alias="postId", min_length=1)
    style: str | None = None
    dimensions: Dimensions | None = None


class DistributionPayload(PayloadModel):
    post_id: str = Field(alias="postId", min_length=1)
    channels: list[str] | None = None


class AutopublishCriteria(PayloadModel):
    status: str | None = None
    tag: str | None = None


class BlogAutopublishPayload(PayloadModel):
    criteria: AutopublishCriteria | None = None
    dry_run: bool | None = Field(default=None, alias="dryRun")


JOB_PAYLOAD_SCHEMAS: dict[JobType, type[PayloadModel]] = {
    JobType.SEO_PLANNER: SeoPlannerPayload,
    JobType.IMAGE_GEN: ImageGenPayload,
    JobType.DISTRIBUTION: DistributionPayload,
    JobType.BLOG_AUTOPUBLISH: BlogAutopublishPayload,
}

JOB_STEPS: dict[JobType, tuple[str, ...]] = {
    JobType.SEO_PLANNER: ("analyze", "research", "score", "suggest"),
    JobType.IMAGE_GEN: ("extract", "prompt", "generate", "store"),
    JobType.DISTRIBUTION: ("select-targets", "format", "distribute", "verify"),
    JobType.BLOG_AUTOPUBLISH: ("select", "validate", "publish", "notify"),
}
