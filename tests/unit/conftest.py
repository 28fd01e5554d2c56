"""Factories for kubernetes SDK objects used across unit tests.

Each fixture returns a builder so tests can describe only the fields that
matter to them.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any

import pytest
from kubernetes.client import (
    V1Container,
    V1ContainerState,
    V1ContainerStateRunning,
    V1ContainerStateWaiting,
    V1ContainerStatus,
    V1Deployment,
    V1DeploymentSpec,
    V1DeploymentStatus,
    V1LabelSelector,
    V1ObjectMeta,
    V1OwnerReference,
    V1Pod,
    V1PodSpec,
    V1PodStatus,
    V1PodTemplateSpec,
    V1ReplicaSet,
    V1ReplicaSetSpec,
    V1StatefulSet,
    V1StatefulSetSpec,
    V1StatefulSetStatus,
)

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


def _owner(kind: str, name: str, controller: bool | None = True) -> V1OwnerReference:
    return V1OwnerReference(
        api_version="apps/v1",
        kind=kind,
        name=name,
        uid=f"uid-{name}",
        controller=controller,
    )


def _template(labels: dict[str, str], image: str) -> V1PodTemplateSpec:
    return V1PodTemplateSpec(
        metadata=V1ObjectMeta(labels=dict(labels)),
        spec=V1PodSpec(containers=[V1Container(name="app", image=image)]),
    )


@pytest.fixture
def make_deployment() -> Callable[..., V1Deployment]:
    """Build a V1Deployment with a single-container template."""

    def _make(
        name: str = "web",
        namespace: str = "default",
        image: str = "nginx:1.25",
        labels: dict[str, str] | None = None,
        replicas: int = 2,
    ) -> V1Deployment:
        labels = labels or {"app": name}
        return V1Deployment(
            metadata=V1ObjectMeta(
                name=name, namespace=namespace, uid=f"uid-{name}", creation_timestamp=BASE_TIME
            ),
            spec=V1DeploymentSpec(
                replicas=replicas,
                selector=V1LabelSelector(match_labels=labels),
                template=_template(labels, image),
            ),
            status=V1DeploymentStatus(ready_replicas=replicas, available_replicas=replicas),
        )

    return _make


@pytest.fixture
def make_replica_set() -> Callable[..., V1ReplicaSet]:
    """Build a V1ReplicaSet owned by a Deployment.

    ``owner=None`` leaves it unowned; ``template_hash`` is added to the
    template labels the way the Deployment controller does it.
    """

    def _make(
        name: str,
        owner: str | None = "web",
        namespace: str = "default",
        image: str = "nginx:1.25",
        labels: dict[str, str] | None = None,
        template_hash: str | None = None,
        created: datetime | None = BASE_TIME,
        controller: bool | None = True,
        owner_kind: str = "Deployment",
    ) -> V1ReplicaSet:
        template_labels = dict(labels or {"app": owner or name})
        if template_hash:
            template_labels["pod-template-hash"] = template_hash
        return V1ReplicaSet(
            metadata=V1ObjectMeta(
                name=name,
                namespace=namespace,
                uid=f"uid-{name}",
                creation_timestamp=created,
                owner_references=[_owner(owner_kind, owner, controller)] if owner else None,
            ),
            spec=V1ReplicaSetSpec(
                replicas=1,
                selector=V1LabelSelector(match_labels=template_labels),
                template=_template(template_labels, image),
            ),
        )

    return _make


@pytest.fixture
def make_statefulset() -> Callable[..., V1StatefulSet]:
    """Build a V1StatefulSet with an optional current revision."""

    def _make(
        name: str = "db",
        namespace: str = "default",
        current_revision: str | None = "db-5f7c9",
        update_revision: str | None = None,
    ) -> V1StatefulSet:
        labels = {"app": name}
        return V1StatefulSet(
            metadata=V1ObjectMeta(
                name=name, namespace=namespace, uid=f"uid-{name}", creation_timestamp=BASE_TIME
            ),
            spec=V1StatefulSetSpec(
                replicas=3,
                service_name=f"{name}-headless",
                selector=V1LabelSelector(match_labels=labels),
                template=_template(labels, "postgres:16"),
            ),
            status=V1StatefulSetStatus(
                replicas=3,
                ready_replicas=3,
                current_revision=current_revision,
                update_revision=update_revision or current_revision,
            ),
        )

    return _make


@pytest.fixture
def make_pod() -> Callable[..., V1Pod]:
    """Build a running V1Pod with optional owner and labels."""

    def _make(
        name: str,
        owner: str | None = None,
        owner_kind: str = "ReplicaSet",
        namespace: str = "default",
        labels: dict[str, str] | None = None,
        controller: bool | None = True,
        phase: str = "Running",
    ) -> V1Pod:
        return V1Pod(
            metadata=V1ObjectMeta(
                name=name,
                namespace=namespace,
                uid=f"uid-{name}",
                labels=labels,
                creation_timestamp=BASE_TIME,
                owner_references=[_owner(owner_kind, owner, controller)] if owner else None,
            ),
            spec=V1PodSpec(
                containers=[V1Container(name="app", image="nginx:1.25")],
                node_name="node-1",
            ),
            status=V1PodStatus(
                phase=phase,
                pod_ip="10.0.0.5",
                container_statuses=[
                    V1ContainerStatus(
                        name="app",
                        image="nginx:1.25",
                        image_id="",
                        ready=phase == "Running",
                        restart_count=1,
                        state=V1ContainerState(
                            running=V1ContainerStateRunning() if phase == "Running" else None,
                            waiting=(
                                V1ContainerStateWaiting(reason="ContainerCreating")
                                if phase != "Running"
                                else None
                            ),
                        ),
                    )
                ],
            ),
        )

    return _make


@pytest.fixture
def as_list() -> Callable[[list[Any]], Any]:
    """Wrap objects in a list response with an ``items`` attribute."""

    def _wrap(items: list[Any]) -> Any:
        return SimpleNamespace(items=items)

    return _wrap
