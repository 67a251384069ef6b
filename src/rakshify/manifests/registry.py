"""Kind registration for decoded manifest documents.

A document is transformable when its apiVersion/kind resolves to a model of
the official Kubernetes Python client, or to one of the custom kinds the
caller explicitly registered.
"""

import re
from collections.abc import Collection
from typing import Any

from icecream import ic
from kubernetes import client

from rakshify.exceptions import ManifestParsingError, UnregisteredKindError

K8S_GROUP_SUFFIX = ".k8s.io"

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def model_name(api_version: str, kind: str) -> str:
    """Return the Kubernetes client model name for an apiVersion/kind pair.

    Example: ``("apps/v1", "Deployment")`` -> ``"V1Deployment"``.
    """
    version = api_version.rsplit("/", 1)[-1]
    return f"{version[:1].upper()}{version[1:]}{kind}"


def api_class_name(api_version: str) -> str:
    """Return the Kubernetes client API class serving an apiVersion.

    Example: ``"rbac.authorization.k8s.io/v1"`` -> ``"RbacAuthorizationV1Api"``.
    """
    group, _, version = api_version.rpartition("/")
    group = group.removesuffix(K8S_GROUP_SUFFIX)
    prefix = "".join(part.capitalize() for part in group.split(".")) if group else "Core"
    return f"{prefix}{version[:1].upper()}{version[1:]}Api"


def resource_name(kind: str) -> str:
    """Return the snake_case resource name used by API methods, e.g. ``cron_job``."""
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", kind)
    return _WORD_BOUNDARY.sub(r"\1_\2", name).lower()


def _served_by_group(api_version: str, kind: str) -> bool:
    api = getattr(client, api_class_name(api_version), None)
    if not isinstance(api, type):
        return False
    resource = resource_name(kind)
    return any(
        hasattr(api, f"{verb}_{scope}{resource}") for verb in ("read", "create") for scope in ("namespaced_", "")
    )


def is_registered(api_version: str, kind: str, extra_kinds: Collection[tuple[str, str]] = ()) -> bool:
    """Check whether an apiVersion/kind pair is a known schema.

    Built-in kinds need both a client model for the version and kind, and
    an API of the document's group that serves the kind, so a kind is not
    accepted under a foreign group.

    Args:
        api_version: The document apiVersion (e.g. ``batch/v1``).
        kind: The document kind (e.g. ``CronJob``).
        extra_kinds: Custom (apiVersion, kind) pairs accepted in addition
            to the Kubernetes client models.

    Returns:
        True if the pair is registered.

    """
    if (api_version, kind) in extra_kinds:
        return True
    model = getattr(client, model_name(api_version, kind), None)
    if not isinstance(model, type) or getattr(model, "openapi_types", None) is None:
        return False
    return _served_by_group(api_version, kind)


def resolve_kind(document: dict[str, Any], extra_kinds: Collection[tuple[str, str]] = ()) -> str:
    """Resolve the kind of a decoded document.

    Args:
        document: The decoded YAML mapping.
        extra_kinds: Custom (apiVersion, kind) pairs to accept.

    Returns:
        The document kind.

    Raises:
        ManifestParsingError: If apiVersion or kind is missing.
        UnregisteredKindError: If the kind has no known schema.

    """
    api_version = document.get("apiVersion")
    kind = document.get("kind")
    if not isinstance(api_version, str) or not api_version:
        raise ManifestParsingError("Object 'apiVersion' is missing")
    if not isinstance(kind, str) or not kind:
        raise ManifestParsingError("Object 'Kind' is missing")

    ic(api_version, kind)
    if not is_registered(api_version, kind, extra_kinds):
        raise UnregisteredKindError(api_version, kind)
    return kind


def parse_kind_ref(value: str) -> tuple[str, str]:
    """Split an ``apiVersion/Kind`` reference such as ``argoproj.io/v1alpha1/Rollout``.

    Raises:
        ValueError: If the reference has no apiVersion or kind part.

    """
    api_version, _, kind = value.rpartition("/")
    if not api_version or not kind:
        raise ValueError(f"Invalid kind reference '{value}', expected <apiVersion>/<Kind>")
    return api_version, kind
