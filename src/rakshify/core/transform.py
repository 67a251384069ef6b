"""Workload transformation pipeline.

This module provides the SecureWorkload class which owns a private copy of
a workload document and moves it through the ordered steps that turn it
into a SecureContainer plus its companion ConfigMap.
"""

from enum import IntEnum
from typing import Any

from icecream import ic

from rakshify.crypto import encrypt_config
from rakshify.exceptions import PipelineOrderError, ShapeMismatchError
from rakshify.manifests.accessors import get_workload
from rakshify.manifests.containers import (
    extract_container_secret,
    get_containers,
    insert_vault_secret,
    mask_sensitive_data,
    mount_config_map,
    serialize_container_secret,
)
from rakshify.manifests.resources import (
    config_map_name,
    new_config_map,
    new_secure_container,
    secure_container_name,
)
from rakshify.models import SecureResult, TransformConfig


def unshared_copy(node: Any, _parents: frozenset[int] = frozenset()) -> Any:
    """Deep-copy decoded YAML so that no two places share a mapping or list.

    Unlike ``copy.deepcopy``, nodes reached through YAML aliases become
    independent copies, so mutating one container never leaks into another.

    Raises:
        ShapeMismatchError: If an alias refers to one of its own ancestors.

    """
    if not isinstance(node, (dict, list)):
        return node
    if id(node) in _parents:
        raise ShapeMismatchError("document contains a recursive YAML alias")
    parents = _parents | {id(node)}
    if isinstance(node, dict):
        return {key: unshared_copy(value, parents) for key, value in node.items()}
    return [unshared_copy(item, parents) for item in node]


class Stage(IntEnum):
    """Pipeline stages, in the order they must be reached."""

    NEW = 0
    EXTRACTED = 1
    MASKED = 2
    MOUNTED = 3
    INJECTED = 4
    WRAPPED = 5


class SecureWorkload:
    """Single-use builder turning one workload into its secured form.

    The steps must run in order: ``extract`` -> ``mask`` -> ``mount`` ->
    ``inject_vault`` -> ``wrap``. Calling a step out of order raises
    :class:`PipelineOrderError`.

    Attributes:
        workload: The builder's own deep copy of the input document.
        metadata: Metadata block of ``workload``.
        pod_spec: Pod spec of ``workload``.
        config_map: The companion ConfigMap being filled.
        stage: The last completed stage.

    """

    def __init__(self, document: dict[str, Any], config: TransformConfig) -> None:
        """Copy the document and locate its metadata and pod spec.

        Raises:
            ShapeMismatchError: If the document has no metadata or pod spec,
                or contains a recursive YAML alias.

        """
        self.config = config
        self.workload: dict[str, Any] = unshared_copy(document)
        self.metadata, self.pod_spec = get_workload(self.workload)
        self.name: str = self.metadata["name"]
        self.config_map = new_config_map(config_map_name(self.name), self.metadata.get("namespace"))
        self.stage = Stage.NEW

    def __repr__(self) -> str:
        return f"SecureWorkload(kind={self.workload.get('kind')!r}, name={self.name!r}, stage={self.stage.name})"

    def _advance(self, expected: Stage, target: Stage) -> None:
        if self.stage is not expected:
            raise PipelineOrderError(
                f"cannot move {self.name!r} to {target.name}: expected stage {expected.name}, at {self.stage.name}"
            )
        self.stage = target

    def extract(self) -> "SecureWorkload":
        """Encrypt every container spec into the companion ConfigMap.

        Containers sharing a name overwrite each other's entry; the last
        one wins.

        Raises:
            EncryptionError: If encryption fails for any container.

        """
        self._advance(Stage.NEW, Stage.EXTRACTED)
        data = self.config_map["data"]
        for container in get_containers(self.pod_spec):
            document = extract_container_secret(container)
            name = document["spec"]["containers"][0]["name"]
            ic(name)
            data[name] = encrypt_config(serialize_container_secret(document), self.config.key)
        return self

    def mask(self) -> "SecureWorkload":
        self._advance(Stage.EXTRACTED, Stage.MASKED)
        mask_sensitive_data(self.pod_spec, self.config.scratch_image)
        return self

    def mount(self) -> "SecureWorkload":
        self._advance(Stage.MASKED, Stage.MOUNTED)
        mount_config_map(self.pod_spec, self.config_map["metadata"]["name"])
        return self

    def inject_vault(self) -> "SecureWorkload":
        """Add Vault env references when a Vault secret is configured."""
        self._advance(Stage.MOUNTED, Stage.INJECTED)
        if self.config.vault_secret:
            insert_vault_secret(self.pod_spec, self.config.vault_secret)
        return self

    def wrap(self) -> SecureResult:
        self._advance(Stage.INJECTED, Stage.WRAPPED)
        wrapper = new_secure_container(secure_container_name(self.name), self.config.secure_image, self.workload)
        return SecureResult(wrapper=wrapper, config_map=self.config_map)


def secure_object(document: dict[str, Any], config: TransformConfig) -> SecureResult:
    """Transform one workload document into its secured form.

    The input document is left untouched.

    Args:
        document: A decoded workload document of a registered kind.
        config: Run configuration.

    Returns:
        The SecureContainer wrapper and the companion ConfigMap.

    Raises:
        ShapeMismatchError: If the document lacks metadata or a pod spec.
        EncryptionError: If a container spec cannot be encrypted.

    """
    return SecureWorkload(document, config).extract().mask().mount().inject_vault().wrap()
