"""rakshify: secure Kubernetes workload manifests for confidential runtimes.

This package rewrites workload manifests so that each container spec is
encrypted into a companion ConfigMap, the original spec is scrubbed, and
the workload is wrapped in a SecureContainer resource.

Example usage:
    from rakshify import TransformConfig, secure_object

    config = TransformConfig(secure_image="registry/raksh:latest", key=key)
    result = secure_object(deployment, config)
    result.config_map, result.wrapper
"""

__version__ = "0.1.0"

from rakshify.cli import cli
from rakshify.core.runner import run_batch
from rakshify.core.transform import SecureWorkload, secure_object
from rakshify.exceptions import (
    EncryptionError,
    ManifestIOError,
    ManifestParsingError,
    PipelineOrderError,
    RakshifyError,
    ShapeMismatchError,
    UnregisteredKindError,
)
from rakshify.models import FileResult, FileStatus, SecureResult, TransformConfig

__all__ = [
    # Version
    "__version__",
    # Main CLI
    "cli",
    # Pipeline
    "SecureWorkload",
    "secure_object",
    "run_batch",
    # Models
    "TransformConfig",
    "SecureResult",
    "FileResult",
    "FileStatus",
    # Exceptions
    "RakshifyError",
    "UnregisteredKindError",
    "ShapeMismatchError",
    "EncryptionError",
    "ManifestParsingError",
    "ManifestIOError",
    "PipelineOrderError",
]
