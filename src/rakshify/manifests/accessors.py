"""Workload accessors.

This module locates the object metadata and the pod spec of a decoded
workload document. Kinds whose pod spec lives at a well-known place get an
explicit accessor; every other kind is navigated structurally along a
field path (``spec.template.spec`` by default), so any workload-shaped
resource is supported without enumerating it here.

The returned mappings are the same instances held by the document, so
callers mutate the workload in place through them.
"""

from collections.abc import Callable, Sequence
from typing import Any

from rakshify.exceptions import ShapeMismatchError
from rakshify.models import WorkloadRef

Accessor = Callable[[dict[str, Any]], WorkloadRef]

POD_PATH = ("spec",)
TEMPLATE_POD_PATH = ("spec", "template", "spec")
JOB_TEMPLATE_POD_PATH = ("spec", "jobTemplate", "spec", "template", "spec")


def _lookup(document: dict[str, Any], path: Sequence[str]) -> dict[str, Any]:
    """Follow a field path through nested mappings.

    Raises:
        ShapeMismatchError: If a field is absent, null or not a mapping.

    """
    node: Any = document
    for depth, key in enumerate(path):
        location = ".".join(path[: depth + 1])
        value = node.get(key)
        if value is None:
            raise ShapeMismatchError(f"{location} is required value")
        if not isinstance(value, dict):
            raise ShapeMismatchError(f"{location} must be a mapping, got {type(value).__name__}")
        node = value
    return node


def _metadata(document: dict[str, Any]) -> dict[str, Any]:
    metadata = _lookup(document, ("metadata",))
    if not metadata.get("name"):
        raise ShapeMismatchError("metadata.name is required value")
    return metadata


def path_accessor(path: Sequence[str]) -> Accessor:
    """Build an accessor that finds the pod spec along ``path``.

    Args:
        path: Field names leading from the document root to the pod spec.

    Returns:
        An accessor returning the metadata and pod spec of a document.

    """
    path = tuple(path)

    def accessor(document: dict[str, Any]) -> WorkloadRef:
        return WorkloadRef(metadata=_metadata(document), pod_spec=_lookup(document, path))

    return accessor


def _pod(document: dict[str, Any]) -> WorkloadRef:
    return WorkloadRef(metadata=_metadata(document), pod_spec=_lookup(document, POD_PATH))


def _deployment(document: dict[str, Any]) -> WorkloadRef:
    return WorkloadRef(metadata=_metadata(document), pod_spec=_lookup(document, TEMPLATE_POD_PATH))


def _cron_job(document: dict[str, Any]) -> WorkloadRef:
    return WorkloadRef(metadata=_metadata(document), pod_spec=_lookup(document, JOB_TEMPLATE_POD_PATH))


generic_accessor: Accessor = path_accessor(TEMPLATE_POD_PATH)

_ACCESSORS: dict[str, Accessor] = {
    "CronJob": _cron_job,
    "Pod": _pod,
    "Deployment": _deployment,
}


def register_accessor(kind: str, accessor: Accessor) -> None:
    """Register an explicit accessor for a kind, replacing any existing one."""
    _ACCESSORS[kind] = accessor


def get_accessor(kind: str) -> Accessor:
    """Return the accessor for a kind, falling back to the generic one."""
    return _ACCESSORS.get(kind, generic_accessor)


def get_workload(document: dict[str, Any]) -> WorkloadRef:
    """Extract the metadata and pod spec of a workload document.

    Args:
        document: A decoded document whose kind is already registered.

    Returns:
        References to the metadata and pod spec inside ``document``.

    Raises:
        ShapeMismatchError: If the document lacks the expected structure.

    """
    kind = document.get("kind", "")
    try:
        return get_accessor(kind)(document)
    except ShapeMismatchError as err:
        raise ShapeMismatchError(f"{kind}: {err}") from None
