"""
Distribution workflow.

Steps: select-targets -> format -> distribute -> verify
"""

from jobrunner.workflows.scaffold import scaffold_step

STEPS = {
    "select-targets": scaffold_step("select-targets", "postId", "channels"),
    "format": scaffold_step("format"),
    "distribute": scaffold_step("distribute"),
    "verify": scaffold_step("verify"),
}
