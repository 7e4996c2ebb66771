"""
Image generation workflow.

Steps: extract -> prompt -> generate -> store

Extract the post context, build an image prompt, generate the image and
store it in the media library.
"""

from jobrunner.workflows.scaffold import scaffold_step

STEPS = {
    "extract": scaffold_step("extract", "postId"),
    "prompt": scaffold_step("prompt", "style"),
    "generate": scaffold_step("generate", "dimensions"),
    "store": scaffold_step("store"),
}
