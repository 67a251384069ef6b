"""Shared test fixtures for rakshify tests."""

import hashlib

import pytest

from rakshify.models import TransformConfig

SECURE_IMAGE = "registry.example.com/raksh/secure-runtime:1.0"


@pytest.fixture
def key():
    """32-byte AES key derived the same way as from a key file."""
    return hashlib.sha256(b"test-symmetric-key").digest()


@pytest.fixture
def key_file(tmp_path):
    """Key file whose derived key equals the ``key`` fixture."""
    path = tmp_path / "symm.key"
    path.write_bytes(b"test-symmetric-key\n")
    return path


@pytest.fixture
def transform_config(key):
    """Configuration without Vault injection."""
    return TransformConfig(secure_image=SECURE_IMAGE, key=key)


@pytest.fixture
def vault_config(key):
    """Configuration with Vault injection enabled."""
    return TransformConfig(secure_image=SECURE_IMAGE, key=key, vault_secret="vault-settings")


@pytest.fixture
def deployment_doc():
    """Decoded Deployment with a single container."""
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": "web", "namespace": "default"},
        "spec": {
            "replicas": 2,
            "selector": {"matchLabels": {"app": "web"}},
            "template": {
                "metadata": {"labels": {"app": "web"}},
                "spec": {
                    "containers": [
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
                },
            },
        },
    }


@pytest.fixture
def pod_doc():
    """Decoded bare Pod with two containers and an existing volume."""
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {"name": "worker"},
        "spec": {
            "containers": [
                {"name": "main", "image": "worker:2.3", "args": ["run"]},
                {"name": "sidecar", "image": "proxy:1.1", "volumeMounts": [{"name": "data", "mountPath": "/data"}]},
            ],
            "volumes": [{"name": "data", "emptyDir": {}}],
        },
    }


@pytest.fixture
def cron_job_doc():
    """Decoded CronJob."""
    return {
        "apiVersion": "batch/v1",
        "kind": "CronJob",
        "metadata": {"name": "nightly", "namespace": "batch"},
        "spec": {
            "schedule": "0 2 * * *",
            "jobTemplate": {
                "spec": {
                    "template": {
                        "spec": {
                            "restartPolicy": "OnFailure",
                            "containers": [{"name": "report", "image": "reporter:3", "command": ["report"]}],
                        }
                    }
                }
            },
        },
    }


@pytest.fixture
def stateful_set_doc():
    """Decoded StatefulSet, handled by the generic accessor."""
    return {
        "apiVersion": "apps/v1",
        "kind": "StatefulSet",
        "metadata": {"name": "db", "namespace": "data"},
        "spec": {
            "serviceName": "db",
            "template": {
                "metadata": {"labels": {"app": "db"}},
                "spec": {"containers": [{"name": "postgres", "image": "postgres:16"}]},
            },
        },
    }


@pytest.fixture
def sample_deployment_yaml():
    """Sample Deployment manifest."""
    return """apiVersion: apps/v1
kind: Deployment
metadata:
  name: web
  namespace: default
spec:
  selector:
    matchLabels:
      app: web
  template:
    metadata:
      labels:
        app: web
    spec:
      containers:
        - name: api
          image: myapp:1.0
          env:
            - name: TOKEN
              value: secret-token
"""


@pytest.fixture
def sample_crd_yaml():
    """Sample manifest of a kind unknown to the Kubernetes client."""
    return """apiVersion: example.com/v1
kind: Widget
metadata:
  name: gadget
spec:
  size: 3
"""


@pytest.fixture
def sample_replication_controller_yaml():
    """Sample ReplicationController without a pod template."""
    return """apiVersion: v1
kind: ReplicationController
metadata:
  name: legacy
spec:
  replicas: 1
  template:
"""
