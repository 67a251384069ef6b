"""Data models for rakshify.

This module provides type-safe data structures for the application,
replacing loosely-typed dictionaries and global flags with proper
Python data classes.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, NamedTuple

DEFAULT_SCRATCH_IMAGE = "scratch"


@dataclass(frozen=True, slots=True)
class TransformConfig:
    """Read-only configuration shared by every file of a run.

    Attributes:
        secure_image: Image reference of the trusted secure-runtime.
        key: Symmetric key used to encrypt every container spec.
        scratch_image: Placeholder image written over every container image.
        vault_secret: Name of the Secret holding Vault settings, if any.
        output_dir: Directory under which output files are relocated.
        extra_kinds: Additional (apiVersion, kind) pairs accepted as workloads.

    """

    secure_image: str
    key: bytes = field(repr=False)
    scratch_image: str = DEFAULT_SCRATCH_IMAGE
    vault_secret: str | None = None
    output_dir: Path | None = None
    extra_kinds: frozenset[tuple[str, str]] = frozenset()


class WorkloadRef(NamedTuple):
    """References into a decoded workload document.

    Attributes:
        metadata: The object metadata block (same instance as in the document).
        pod_spec: The pod specification (same instance as in the document).

    """

    metadata: dict[str, Any]
    pod_spec: dict[str, Any]


class SecureResult(NamedTuple):
    """Generated documents for one workload.

    Attributes:
        wrapper: The SecureContainer document embedding the scrubbed workload.
        config_map: The companion ConfigMap holding encrypted container specs.

    """

    wrapper: dict[str, Any]
    config_map: dict[str, Any]


class FileStatus(str, Enum):
    """Outcome of processing a single manifest file."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class FileResult:
    """Result of processing a single manifest file.

    Attributes:
        path: The input manifest path.
        status: What happened to the file.
        output: Path of the written secure manifest, if any.
        error: The error that failed the file, if any.

    """

    path: Path
    status: FileStatus
    output: Path | None = None
    error: Exception | None = None
