"""Per-container transformation steps.

This module provides the steps applied to the containers of a pod spec:
extracting the sensitive part of each container, masking it, mounting the
companion ConfigMap and optionally injecting Vault references. All steps
except extraction mutate the pod spec in place and keep container order.
"""

import copy
from functools import cache
from typing import Any

import yaml
from kubernetes import client

from rakshify.exceptions import ShapeMismatchError

SECURE_PREFIX = "secure-"
SECURE_MOUNT_PATH = "/etc/raksh"
SECURE_PROPERTIES_FILE = "raksh.properties"

# Fields carried into the encrypted spec, in the consumer's field naming
_SECRET_FIELDS = ("image", "command", "args", "env", "ports")

# (env var name, key in the Vault secret)
VAULT_ENV_KEYS = (
    ("SC_VAULT_ADDR", "vaultAdd"),
    ("SC_VAULT_TOKEN", "vaultToken"),
    ("SC_VAULT_SECRET", "secretName"),
    ("SC_VAULT_SYMM_KEY", "keyName"),
)


@cache
def _api_client() -> client.ApiClient:
    return client.ApiClient()


def to_manifest(model: Any) -> Any:
    """Convert a Kubernetes client model to its plain manifest form."""
    return _api_client().sanitize_for_serialization(model)


def get_containers(pod_spec: dict[str, Any]) -> list[dict[str, Any]]:
    """Return the container list of a pod spec.

    Raises:
        ShapeMismatchError: If containers is not a list of mappings.

    """
    containers = pod_spec.get("containers")
    if containers is None:
        return []
    if not isinstance(containers, list) or not all(isinstance(c, dict) for c in containers):
        raise ShapeMismatchError("containers must be a list of mappings")
    return containers


def secure_volume_name(container_name: str) -> str:
    return f"{SECURE_PREFIX}volume-{container_name}"


def extract_container_secret(container: dict[str, Any]) -> dict[str, Any]:
    """Build the document sealed into the companion ConfigMap for a container.

    The document has the shape ``{"spec": {"containers": [<subset>]}}``,
    which the runtime agent reads back after decryption. ``name`` and
    ``resources`` are always present; the other fields only when non-empty.

    Args:
        container: The container manifest. It is not modified.

    Returns:
        A new document holding deep copies of the container fields.

    """
    subset: dict[str, Any] = {"name": container.get("name") or ""}
    for field in _SECRET_FIELDS:
        value = container.get(field)
        if value:
            subset[field] = copy.deepcopy(value)
    subset["resources"] = copy.deepcopy(container.get("resources") or {})
    return {"spec": {"containers": [subset]}}


def serialize_container_secret(document: dict[str, Any]) -> bytes:
    """Serialize an extracted container document to YAML bytes."""
    return yaml.safe_dump(document, default_flow_style=False).encode("utf-8")


def mask_sensitive_data(pod_spec: dict[str, Any], scratch_image: str) -> None:
    """Scrub every container of a pod spec in place.

    The image is replaced by ``scratch_image``; command, args and env are
    cleared.
    """
    for container in get_containers(pod_spec):
        container["image"] = scratch_image
        for field in ("command", "args", "env"):
            container.pop(field, None)


def mount_config_map(pod_spec: dict[str, Any], config_map_name: str) -> None:
    """Mount the companion ConfigMap into every container.

    Each container gets its own volume exposing only its own ConfigMap key
    as ``raksh.properties``, mounted read-only at ``/etc/raksh``.

    Args:
        pod_spec: The pod spec to modify in place.
        config_map_name: Name of the companion ConfigMap.

    """
    volumes = []
    for container in get_containers(pod_spec):
        container_name = container.get("name") or ""
        volume_name = secure_volume_name(container_name)
        volume = client.V1Volume(
            name=volume_name,
            config_map=client.V1ConfigMapVolumeSource(
                name=config_map_name,
                items=[client.V1KeyToPath(key=container_name, path=SECURE_PROPERTIES_FILE)],
            ),
        )
        volumes.append(to_manifest(volume))
        mount = client.V1VolumeMount(name=volume_name, read_only=True, mount_path=SECURE_MOUNT_PATH)
        # rebuilt per container: YAML aliases may share one list between containers
        container["volumeMounts"] = [*(container.get("volumeMounts") or []), to_manifest(mount)]

    pod_spec["volumes"] = [*(pod_spec.get("volumes") or []), *volumes]


def vault_env_vars(secret_name: str) -> list[dict[str, Any]]:
    """Return the Vault environment variable references for a secret."""
    return [
        to_manifest(
            client.V1EnvVar(
                name=env_name,
                value_from=client.V1EnvVarSource(
                    secret_key_ref=client.V1SecretKeySelector(name=secret_name, key=key),
                ),
            )
        )
        for env_name, key in VAULT_ENV_KEYS
    ]


def insert_vault_secret(pod_spec: dict[str, Any], secret_name: str) -> None:
    """Append the Vault environment variables to every container."""
    for container in get_containers(pod_spec):
        container["env"] = [*(container.get("env") or []), *vault_env_vars(secret_name)]
