"""Tests for manifests/containers.py module."""

import pytest
import yaml

from rakshify.exceptions import ShapeMismatchError
from rakshify.manifests.containers import (
    extract_container_secret,
    get_containers,
    insert_vault_secret,
    mask_sensitive_data,
    mount_config_map,
    serialize_container_secret,
)


class TestExtractContainerSecret:
    """Tests for extracting the sealed container document."""

    def test_document_shape(self, deployment_doc):
        """Test the document wraps the container subset in spec.containers."""
        container = deployment_doc["spec"]["template"]["spec"]["containers"][0]

        document = extract_container_secret(container)

        assert list(document) == ["spec"]
        assert list(document["spec"]) == ["containers"]
        assert document["spec"]["containers"] == [
            {
                "name": "api",
                "image": "myapp:1.0",
                "command": ["/bin/api"],
                "args": ["--port", "8080"],
                "env": [{"name": "DB_PASSWORD", "value": "hunter2"}],
                "ports": [{"containerPort": 8080}],
                "resources": {"limits": {"cpu": "500m", "memory": "128Mi"}},
            }
        ]

    def test_drops_unrelated_fields(self):
        """Test fields outside the subset are not carried over."""
        container = {
            "name": "app",
            "image": "app:1",
            "volumeMounts": [{"name": "x", "mountPath": "/x"}],
            "securityContext": {"runAsUser": 1000},
        }

        subset = extract_container_secret(container)["spec"]["containers"][0]

        assert subset == {"name": "app", "image": "app:1", "resources": {}}

    def test_omits_empty_fields(self):
        """Test empty command/args/env are omitted while resources is kept."""
        subset = extract_container_secret({"name": "app", "command": [], "env": None})["spec"]["containers"][0]

        assert subset == {"name": "app", "resources": {}}

    def test_copy_is_independent(self, deployment_doc):
        """Test masking the container later does not alter the extracted copy."""
        container = deployment_doc["spec"]["template"]["spec"]["containers"][0]
        document = extract_container_secret(container)

        container["env"].clear()

        assert document["spec"]["containers"][0]["env"] == [{"name": "DB_PASSWORD", "value": "hunter2"}]

    def test_serialize_round_trip(self, deployment_doc):
        """Test the serialized document parses back to itself."""
        container = deployment_doc["spec"]["template"]["spec"]["containers"][0]
        document = extract_container_secret(container)

        data = serialize_container_secret(document)

        assert isinstance(data, bytes)
        assert data.startswith(b"spec:\n  containers:\n")
        assert yaml.safe_load(data) == document


class TestMaskSensitiveData:
    """Tests for container masking."""

    def test_masks_every_container(self, pod_doc):
        """Test images are replaced and command/args/env cleared."""
        pod_doc["spec"]["containers"][0]["env"] = [{"name": "A", "value": "1"}]

        mask_sensitive_data(pod_doc["spec"], "scratch")

        for container in pod_doc["spec"]["containers"]:
            assert container["image"] == "scratch"
            assert container.get("command", []) == []
            assert container.get("args", []) == []
            assert container.get("env", []) == []

    def test_keeps_order_and_other_fields(self, pod_doc):
        """Test masking mutates in place without reordering containers."""
        containers = pod_doc["spec"]["containers"]
        first, second = containers

        mask_sensitive_data(pod_doc["spec"], "busybox")

        assert pod_doc["spec"]["containers"] is containers
        assert containers[0] is first
        assert containers[1] is second
        assert second["volumeMounts"] == [{"name": "data", "mountPath": "/data"}]


class TestMountConfigMap:
    """Tests for mounting the companion ConfigMap."""

    def test_adds_volume_and_mount_per_container(self, pod_doc):
        """Test each container gets its own read-only mount."""
        mount_config_map(pod_doc["spec"], "secure-configmap-worker")

        volumes = pod_doc["spec"]["volumes"]
        assert volumes[0] == {"name": "data", "emptyDir": {}}
        assert volumes[1:] == [
            {
                "name": "secure-volume-main",
                "configMap": {
                    "name": "secure-configmap-worker",
                    "items": [{"key": "main", "path": "raksh.properties"}],
                },
            },
            {
                "name": "secure-volume-sidecar",
                "configMap": {
                    "name": "secure-configmap-worker",
                    "items": [{"key": "sidecar", "path": "raksh.properties"}],
                },
            },
        ]
        main, sidecar = pod_doc["spec"]["containers"]
        assert main["volumeMounts"] == [{"name": "secure-volume-main", "mountPath": "/etc/raksh", "readOnly": True}]
        assert sidecar["volumeMounts"][0] == {"name": "data", "mountPath": "/data"}
        assert sidecar["volumeMounts"][1] == {
            "name": "secure-volume-sidecar",
            "mountPath": "/etc/raksh",
            "readOnly": True,
        }

    def test_null_volumes(self):
        """Test a null volumes field is replaced by a list."""
        pod_spec = {"containers": [{"name": "app"}], "volumes": None}

        mount_config_map(pod_spec, "cm")

        assert [v["name"] for v in pod_spec["volumes"]] == ["secure-volume-app"]

    def test_shared_mount_list(self):
        """Test containers sharing one volumeMounts list each get only their own mount."""
        shared = [{"name": "data", "mountPath": "/data"}]
        pod_spec = {"containers": [{"name": "a", "volumeMounts": shared}, {"name": "b", "volumeMounts": shared}]}

        mount_config_map(pod_spec, "cm")

        a, b = pod_spec["containers"]
        assert [m["name"] for m in a["volumeMounts"]] == ["data", "secure-volume-a"]
        assert [m["name"] for m in b["volumeMounts"]] == ["data", "secure-volume-b"]
        assert shared == [{"name": "data", "mountPath": "/data"}]


class TestInsertVaultSecret:
    """Tests for Vault env injection."""

    def test_appends_four_env_vars(self):
        """Test every container gets the four secret key references."""
        pod_spec = {"containers": [{"name": "a"}, {"name": "b", "env": [{"name": "KEEP", "value": "1"}]}]}

        insert_vault_secret(pod_spec, "vault-settings")

        a, b = pod_spec["containers"]
        assert [e["name"] for e in a["env"]] == [
            "SC_VAULT_ADDR",
            "SC_VAULT_TOKEN",
            "SC_VAULT_SECRET",
            "SC_VAULT_SYMM_KEY",
        ]
        assert [e["valueFrom"]["secretKeyRef"]["key"] for e in a["env"]] == [
            "vaultAdd",
            "vaultToken",
            "secretName",
            "keyName",
        ]
        assert all(e["valueFrom"]["secretKeyRef"]["name"] == "vault-settings" for e in a["env"])
        assert b["env"][0] == {"name": "KEEP", "value": "1"}
        assert len(b["env"]) == 5

    def test_shared_env_list(self):
        """Test containers sharing one env list get the references once each."""
        shared = [{"name": "KEEP", "value": "1"}]
        pod_spec = {"containers": [{"name": "a", "env": shared}, {"name": "b", "env": shared}]}

        insert_vault_secret(pod_spec, "vault-settings")

        a, b = pod_spec["containers"]
        assert len(a["env"]) == 5
        assert len(b["env"]) == 5
        assert shared == [{"name": "KEEP", "value": "1"}]


class TestGetContainers:
    """Tests for container list access."""

    def test_missing_containers(self):
        """Test a pod spec without containers yields an empty list."""
        assert get_containers({}) == []

    def test_invalid_containers(self):
        """Test a non-list containers field fails."""
        with pytest.raises(ShapeMismatchError):
            get_containers({"containers": {"name": "app"}})
