"""Manifest handling subpackage.

This package contains modules for parsing and writing manifest files,
resolving kinds, locating pod specs and the per-container steps that
build the secured workload.
"""

from rakshify.manifests.accessors import get_workload, register_accessor
from rakshify.manifests.containers import (
    extract_container_secret,
    insert_vault_secret,
    mask_sensitive_data,
    mount_config_map,
)
from rakshify.manifests.parsing import load_documents, write_documents
from rakshify.manifests.registry import is_registered, resolve_kind
from rakshify.manifests.resources import new_config_map, new_secure_container

__all__ = [
    # accessors
    "get_workload",
    "register_accessor",
    # containers
    "extract_container_secret",
    "mask_sensitive_data",
    "mount_config_map",
    "insert_vault_secret",
    # parsing
    "load_documents",
    "write_documents",
    # registry
    "is_registered",
    "resolve_kind",
    # resources
    "new_config_map",
    "new_secure_container",
]
