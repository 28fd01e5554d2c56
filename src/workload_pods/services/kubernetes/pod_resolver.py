"""Resolve the live pods of a Deployment or StatefulSet.

Return conventions, shared by the CLI:

- ``None``: the workload does not exist, or (Deployments only) it has no
  ReplicaSet matching its current template.
- ``[]``: the workload exists and currently owns no pods. A StatefulSet
  that has not published a current revision also resolves to ``[]``.

Errors other than a missing parent propagate as ``KubernetesError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from workload_pods.integrations.kubernetes.models.base import K8sEntityBase
from workload_pods.integrations.kubernetes.models.workloads import (
    DeploymentSummary,
    PodSummary,
    ReplicaSetSummary,
    StatefulSetSummary,
)
from workload_pods.services.kubernetes.accessor import ObjectAccessor
from workload_pods.services.kubernetes.base import K8sBaseManager
from workload_pods.services.kubernetes.ownership import (
    current_revision_selector,
    is_controlled_by,
    select_current_generation,
)

if TYPE_CHECKING:
    from workload_pods.integrations.kubernetes.client import KubernetesClient
    from workload_pods.integrations.kubernetes.models.base import OwnedEntity, OwnerReference

OwnerT = TypeVar("OwnerT", bound=K8sEntityBase)


class PodResolver(K8sBaseManager):
    """Find the pods a workload owns right now.

    Holds no state between calls; each operation is a short sequence of
    fresh reads, so concurrent callers need no coordination.
    """

    _entity_name = "pod_resolver"

    def __init__(self, client: KubernetesClient, accessor: ObjectAccessor | None = None) -> None:
        super().__init__(client)
        self._accessor = accessor or ObjectAccessor(client)

    @property
    def accessor(self) -> ObjectAccessor:
        """The accessor used for all reads."""
        return self._accessor

    # =========================================================================
    # Deployments
    # =========================================================================

    def current_replica_set(self, deployment: DeploymentSummary) -> ReplicaSetSummary | None:
        """Find the ReplicaSet serving the Deployment's current template."""
        replica_sets = self._accessor.list_namespaced(ReplicaSetSummary, deployment.namespace)
        current = select_current_generation(deployment, replica_sets)
        if current is None:
            self._log.info(
                "no_current_replicaset",
                deployment=deployment.name,
                namespace=deployment.namespace,
                candidates=len(replica_sets),
            )
        return current

    def current_replica_set_by_name(
        self, name: str, namespace: str | None = None
    ) -> ReplicaSetSummary | None:
        """Fetch a Deployment by name and find its current ReplicaSet."""
        deployment = self._accessor.get_opt(DeploymentSummary, name, namespace)
        if deployment is None:
            return None
        return self.current_replica_set(deployment)

    def pods_of_deployment(self, deployment: DeploymentSummary) -> list[PodSummary] | None:
        """Get the pods of a Deployment's current ReplicaSet.

        Mirrors what ``kubectl describe deployment`` reports: pods of older
        ReplicaSets still draining during a rollout are excluded.

        Args:
            deployment: The Deployment to resolve.

        Returns:
            Pods controlled by the current ReplicaSet, or None if the
            Deployment has no current ReplicaSet.
        """
        self._log.debug(
            "resolving_deployment_pods", name=deployment.name, namespace=deployment.namespace
        )
        current = self.current_replica_set(deployment)
        if current is None:
            return None

        pods = [
            pod
            for pod in self._accessor.list_namespaced(PodSummary, deployment.namespace)
            if is_controlled_by(pod, current)
        ]
        self._log.debug(
            "resolved_deployment_pods",
            name=deployment.name,
            replicaset=current.name,
            count=len(pods),
        )
        return pods

    def pods_of_deployment_by_name(
        self, name: str, namespace: str | None = None
    ) -> list[PodSummary] | None:
        """Get the pods of a Deployment looked up by name.

        Returns:
            The resolved pods, or None if the Deployment does not exist or
            has no current ReplicaSet.
        """
        deployment = self._accessor.get_opt(DeploymentSummary, name, namespace)
        if deployment is None:
            return None
        return self.pods_of_deployment(deployment)

    # =========================================================================
    # StatefulSets
    # =========================================================================

    def pods_of_statefulset(self, statefulset: StatefulSetSummary) -> list[PodSummary] | None:
        """Get the pods of a StatefulSet's current revision.

        StatefulSet pods carry their revision as a label, so a label-selected
        listing is the answer; no owner-reference filtering is applied.

        Returns:
            The pods, or an empty list when no current revision is published.
        """
        selector = current_revision_selector(statefulset)
        if selector is None:
            self._log.info(
                "no_current_revision",
                statefulset=statefulset.name,
                namespace=statefulset.namespace,
            )
            return []

        pods = self._accessor.list_namespaced(
            PodSummary, statefulset.namespace, label_selector=selector
        )
        self._log.debug(
            "resolved_statefulset_pods",
            name=statefulset.name,
            revision=statefulset.current_revision,
            count=len(pods),
        )
        return pods

    def pods_of_statefulset_by_name(
        self, name: str, namespace: str | None = None
    ) -> list[PodSummary] | None:
        """Get the pods of a StatefulSet looked up by name, None if it is absent."""
        statefulset = self._accessor.get_opt(StatefulSetSummary, name, namespace)
        if statefulset is None:
            return None
        return self.pods_of_statefulset(statefulset)

    # =========================================================================
    # Owners
    # =========================================================================

    def get_owner(
        self,
        obj: OwnedEntity,
        owner_model: type[OwnerT],
    ) -> OwnerT | None:
        """Fetch the owner of ``obj`` of the given kind.

        Uses the first owner reference naming ``owner_model``'s kind, whether or
        not it is the controller reference, and looks it up in ``obj``'s
        namespace.

        Returns:
            The owner, or None if no reference names that kind or the owner
            no longer exists.
        """
        ref: OwnerReference | None = next(
            (r for r in obj.owner_references if r.kind == owner_model.kind and r.name),
            None,
        )
        if ref is None or ref.name is None:
            return None
        return self._accessor.get_opt(owner_model, ref.name, obj.namespace)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close the client this resolver reads through."""
        self._client.close()

    def __enter__(self) -> PodResolver:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
