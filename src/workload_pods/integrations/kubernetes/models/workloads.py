"""Display models for the objects pod resolution walks through.

Deployment -> ReplicaSet -> Pod is followed through controller owner
references and pod templates; StatefulSet -> Pod through the
``controller-revision-hash`` pod label.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, Field

from workload_pods.integrations.kubernetes.models.base import (
    K8sEntityBase,
    OwnedEntity,
    _get_template,
    _safe_get,
)


def _replica_counts(obj: Any) -> dict[str, int]:
    return {
        "replicas": _safe_get(obj, "spec", "replicas", default=0),
        "ready_replicas": _safe_get(obj, "status", "ready_replicas", default=0),
    }


def _container_state(state: Any) -> str:
    """``running``, the waiting/terminated reason, or ``unknown``."""
    if _safe_get(state, "running") is not None:
        return "running"
    for phase, fallback in (("waiting", "Waiting"), ("terminated", "Terminated")):
        if _safe_get(state, phase) is not None:
            return str(_safe_get(state, phase, "reason", default=fallback))
    return "unknown"


class ContainerStatus(BaseModel):
    """State of one container of a pod."""

    name: str = ""
    image: str | None = None
    ready: bool = False
    restart_count: int = 0
    state: str = "unknown"

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ContainerStatus:
        """Create from a kubernetes V1ContainerStatus object."""
        return cls(
            name=_safe_get(obj, "name", default=""),
            image=_safe_get(obj, "image"),
            ready=_safe_get(obj, "ready") is True,
            restart_count=_safe_get(obj, "restart_count", default=0),
            state=_container_state(_safe_get(obj, "state")),
        )


class PodSummary(OwnedEntity):
    """Pod display model."""

    kind: ClassVar[str] = "Pod"

    phase: str = "Unknown"
    node_name: str | None = None
    pod_ip: str | None = None
    restarts: int = Field(default=0, description="Restarts summed over all containers")
    ready_count: int = 0
    total_count: int = Field(default=0, description="Containers declared in the pod spec")
    containers: list[ContainerStatus] = Field(default_factory=list)

    @property
    def ready(self) -> str:
        """Ready containers as ``ready/total``."""
        return f"{self.ready_count}/{self.total_count}"

    @classmethod
    def from_k8s_object(cls, obj: Any) -> PodSummary:
        """Create from a kubernetes V1Pod object."""
        containers = [
            ContainerStatus.from_k8s_object(status)
            for status in _safe_get(obj, "status", "container_statuses", default=[])
        ]
        return cls(
            **cls._metadata(obj),
            phase=_safe_get(obj, "status", "phase", default="Unknown"),
            node_name=_safe_get(obj, "spec", "node_name"),
            pod_ip=_safe_get(obj, "status", "pod_ip"),
            restarts=sum(c.restart_count for c in containers),
            ready_count=sum(c.ready for c in containers),
            total_count=len(_safe_get(obj, "spec", "containers", default=[])),
            containers=containers,
        )


class DeploymentSummary(K8sEntityBase):
    """Deployment display model."""

    kind: ClassVar[str] = "Deployment"

    replicas: int = 0
    ready_replicas: int = 0
    updated_replicas: int = 0
    template: dict[str, Any] | None = Field(
        default=None, description="Desired pod template; its ReplicaSet carries the same one"
    )

    @classmethod
    def from_k8s_object(cls, obj: Any) -> DeploymentSummary:
        """Create from a kubernetes V1Deployment object."""
        return cls(
            **cls._metadata(obj),
            **_replica_counts(obj),
            updated_replicas=_safe_get(obj, "status", "updated_replicas", default=0),
            template=_get_template(obj),
        )


class ReplicaSetSummary(OwnedEntity):
    """ReplicaSet display model: one generation of a Deployment."""

    kind: ClassVar[str] = "ReplicaSet"

    replicas: int = 0
    ready_replicas: int = 0
    template: dict[str, Any] | None = Field(
        default=None, description="Pod template, including the pod-template-hash label"
    )

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ReplicaSetSummary:
        """Create from a kubernetes V1ReplicaSet object."""
        return cls(**cls._metadata(obj), **_replica_counts(obj), template=_get_template(obj))


class StatefulSetSummary(K8sEntityBase):
    """StatefulSet display model."""

    kind: ClassVar[str] = "StatefulSet"

    replicas: int = 0
    ready_replicas: int = 0
    service_name: str | None = None
    current_revision: str | None = Field(
        default=None,
        description="Revision of the running pods; None until the controller publishes one",
    )
    update_revision: str | None = Field(
        default=None, description="Revision an in-progress rollout is moving pods to"
    )

    @classmethod
    def from_k8s_object(cls, obj: Any) -> StatefulSetSummary:
        """Create from a kubernetes V1StatefulSet object."""
        return cls(
            **cls._metadata(obj),
            **_replica_counts(obj),
            service_name=_safe_get(obj, "spec", "service_name"),
            current_revision=_safe_get(obj, "status", "current_revision") or None,
            update_revision=_safe_get(obj, "status", "update_revision") or None,
        )
