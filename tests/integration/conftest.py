"""Live-cluster fixtures: a single-node K3S server in Docker via testcontainers.

Controllers run for real, so Deployments create ReplicaSets and StatefulSets
publish revisions exactly as they would in production.
"""

from __future__ import annotations

import contextlib
import os
import time
import uuid
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import yaml
from testcontainers.core.container import DockerContainer
from testcontainers.core.waiting_utils import wait_for_logs

from workload_pods.integrations.kubernetes.client import KubernetesClient
from workload_pods.integrations.kubernetes.config import ClusterConfig, KubernetesConfig
from workload_pods.services.kubernetes import PodResolver

K3S_IMAGE = os.environ.get("K3S_TEST_IMAGE", "rancher/k3s:v1.31.4-k3s1")
PAUSE_IMAGE = "registry.k8s.io/pause:3.10"

_K3S_SERVER_FLAGS = (
    "--disable=traefik",
    "--disable=metrics-server",
    "--tls-san=0.0.0.0",
    "--write-kubeconfig-mode=644",
)
_K3S_READY_LOG = "Node controller sync successful"


def _poll(predicate: Callable[[], Any], timeout: float = 120, interval: float = 1.0) -> Any:
    """First truthy result of ``predicate``; TimeoutError after ``timeout`` seconds."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if result := predicate():
            return result
        time.sleep(interval)
    raise TimeoutError(f"Condition not met within {timeout}s")


class K3SContainer(DockerContainer):  # type: ignore[misc]
    """K3S server with its API port published on a random host port."""

    API_PORT = 6443

    def __init__(self, image: str = K3S_IMAGE) -> None:
        super().__init__(image)
        self.with_command(" ".join(("server", *_K3S_SERVER_FLAGS)))
        self.with_exposed_ports(self.API_PORT)
        # containerd inside the container needs these
        self.with_kwargs(privileged=True, tmpfs={"/run": "", "/var/run": ""})

    def kubeconfig_yaml(self) -> str:
        """The server's admin kubeconfig, pointed at the published port."""
        exit_code, output = self.exec("cat /etc/rancher/k3s/k3s.yaml")
        if exit_code != 0:
            raise RuntimeError(f"Cannot read k3s kubeconfig: {output!r}")

        kubeconfig = yaml.safe_load(output.decode("utf-8"))
        server = f"https://{self.get_container_host_ip()}:{self.get_exposed_port(self.API_PORT)}"
        for entry in kubeconfig.get("clusters", []):
            entry["cluster"]["server"] = server
        return yaml.safe_dump(kubeconfig)


# ============================================================================
# Cluster (one per test session)
# ============================================================================


@pytest.fixture(scope="session")
def k3s_container() -> Generator[K3SContainer]:
    with K3SContainer() as container:
        wait_for_logs(container, _K3S_READY_LOG, timeout=120)
        # The log line precedes the default service account by a moment
        time.sleep(2)
        yield container


@pytest.fixture(scope="session")
def k8s_config(
    k3s_container: K3SContainer, tmp_path_factory: pytest.TempPathFactory
) -> KubernetesConfig:
    """Config with a single ``k3s`` cluster whose kubeconfig is a temp file."""
    kubeconfig: Path = tmp_path_factory.mktemp("k3s") / "kubeconfig.yaml"
    kubeconfig.write_text(k3s_container.kubeconfig_yaml())
    return KubernetesConfig(
        clusters={"k3s": ClusterConfig(kubeconfig=str(kubeconfig))},
        active_cluster="k3s",
    )


@pytest.fixture(scope="session")
def k8s_client(k8s_config: KubernetesConfig) -> Generator[KubernetesClient]:
    with KubernetesClient(k8s_config) as client:
        yield client


# ============================================================================
# Per-module namespaces
# ============================================================================


@pytest.fixture(scope="module")
def test_namespace(k8s_client: KubernetesClient) -> Generator[str]:
    """A fresh namespace; deleting it at teardown removes its workloads."""
    name = f"wpods-{uuid.uuid4().hex[:8]}"
    k8s_client.core_v1.create_namespace(
        body={"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": name}}
    )
    _poll(
        lambda: k8s_client.core_v1.read_namespace(name=name).status.phase == "Active",
        timeout=15,
        interval=0.5,
    )

    yield name

    with contextlib.suppress(Exception):
        k8s_client.core_v1.delete_namespace(name=name)


@pytest.fixture
def unique_name() -> str:
    return f"web-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def pod_resolver(k8s_client: KubernetesClient) -> PodResolver:
    return PodResolver(k8s_client)


# ============================================================================
# Workload Builders and Waiters
# ============================================================================


def _pod_template(name: str, image: str = PAUSE_IMAGE, env: str = "1") -> dict[str, Any]:
    return {
        "metadata": {"labels": {"app": name}},
        "spec": {
            "containers": [
                {"name": "app", "image": image, "env": [{"name": "GENERATION", "value": env}]}
            ],
            "terminationGracePeriodSeconds": 0,
        },
    }


@pytest.fixture
def create_deployment(k8s_client: KubernetesClient) -> Callable[..., Any]:
    """Create a Deployment of pause containers."""

    def _create(name: str, namespace: str, replicas: int = 2, env: str = "1") -> Any:
        return k8s_client.apps_v1.create_namespaced_deployment(
            namespace=namespace,
            body={
                "apiVersion": "apps/v1",
                "kind": "Deployment",
                "metadata": {"name": name},
                "spec": {
                    "replicas": replicas,
                    "selector": {"matchLabels": {"app": name}},
                    "template": _pod_template(name, env=env),
                },
            },
        )

    return _create


@pytest.fixture
def roll_deployment(k8s_client: KubernetesClient) -> Callable[..., Any]:
    """Change a Deployment's template so a new ReplicaSet is created."""

    def _roll(name: str, namespace: str, env: str) -> Any:
        return k8s_client.apps_v1.patch_namespaced_deployment(
            name=name,
            namespace=namespace,
            body={"spec": {"template": _pod_template(name, env=env)}},
        )

    return _roll


@pytest.fixture
def create_statefulset(k8s_client: KubernetesClient) -> Callable[..., Any]:
    """Create a StatefulSet of pause containers."""

    def _create(name: str, namespace: str, replicas: int = 2) -> Any:
        return k8s_client.apps_v1.create_namespaced_stateful_set(
            namespace=namespace,
            body={
                "apiVersion": "apps/v1",
                "kind": "StatefulSet",
                "metadata": {"name": name},
                "spec": {
                    "replicas": replicas,
                    "serviceName": name,
                    "selector": {"matchLabels": {"app": name}},
                    "template": _pod_template(name),
                },
            },
        )

    return _create


@pytest.fixture
def wait_until() -> Callable[..., Any]:
    """The polling helper, for waiting on controllers."""
    return _poll
