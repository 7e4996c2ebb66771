"""
SEO planner workflow.

Steps: analyze -> research -> score -> suggest
"""

from jobrunner.workflows.scaffold import scaffold_step

STEPS = {
    "analyze": scaffold_step("analyze", "postId", "url"),
    "research": scaffold_step("research", "targetKeywords"),
    "score": scaffold_step("score"),
    "suggest": scaffold_step("suggest"),
}
