"""Core transformation subpackage.

This package contains the per-workload transformation pipeline and the
batch runner that applies it to manifest files.
"""

from rakshify.core.runner import find_manifests, process_file, run_batch
from rakshify.core.transform import SecureWorkload, Stage, secure_object

__all__ = [
    "SecureWorkload",
    "Stage",
    "secure_object",
    "find_manifests",
    "process_file",
    "run_batch",
]
