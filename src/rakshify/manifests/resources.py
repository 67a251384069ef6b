"""Builders for the generated resources.

This module creates the companion ConfigMap holding the encrypted container
specs and the SecureContainer resource wrapping the scrubbed workload.
"""

from typing import Any

from kubernetes import client

from rakshify.manifests.containers import SECURE_PREFIX, to_manifest

SECURE_CONTAINER_API_VERSION = "securecontainers.k8s.io/v1alpha1"
SECURE_CONTAINER_KIND = "SecureContainer"


def config_map_name(workload_name: str) -> str:
    return f"{SECURE_PREFIX}configmap-{workload_name}"


def secure_container_name(workload_name: str) -> str:
    return f"{SECURE_PREFIX}{workload_name}"


def new_config_map(name: str, namespace: str | None) -> dict[str, Any]:
    """Create an empty ConfigMap manifest.

    Args:
        name: ConfigMap name.
        namespace: ConfigMap namespace, omitted when empty.

    Returns:
        The ConfigMap manifest with an empty ``data`` mapping.

    """
    config_map = client.V1ConfigMap(
        api_version="v1",
        kind="ConfigMap",
        metadata=client.V1ObjectMeta(name=name, namespace=namespace or None),
    )
    manifest = to_manifest(config_map)
    manifest["data"] = {}
    return manifest


def new_secure_container(name: str, secure_image: str, workload: dict[str, Any]) -> dict[str, Any]:
    """Create a SecureContainer manifest embedding ``workload``.

    The workload is embedded as is, not copied, so the wrapper always
    reflects the final state of the transformed document.

    Args:
        name: SecureContainer name.
        secure_image: Image reference of the secure runtime.
        workload: The transformed workload document.

    Returns:
        The SecureContainer manifest.

    """
    return {
        "apiVersion": SECURE_CONTAINER_API_VERSION,
        "kind": SECURE_CONTAINER_KIND,
        "metadata": {"name": name},
        "spec": {"secureContainerImageRef": {"name": secure_image}},
        "object": workload,
    }
