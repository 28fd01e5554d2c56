"""Kubernetes resource display models."""

from workload_pods.integrations.kubernetes.models.base import (
    K8sEntityBase,
    OwnedEntity,
    OwnerReference,
)
from workload_pods.integrations.kubernetes.models.workloads import (
    ContainerStatus,
    DeploymentSummary,
    PodSummary,
    ReplicaSetSummary,
    StatefulSetSummary,
)

__all__ = [
    "ContainerStatus",
    "DeploymentSummary",
    "K8sEntityBase",
    "OwnedEntity",
    "OwnerReference",
    "PodSummary",
    "ReplicaSetSummary",
    "StatefulSetSummary",
]
