"""Typed read access to namespaced workload objects.

Supports a closed set of kinds (Deployment, StatefulSet, ReplicaSet, Pod).
Each kind is addressed by its display model class; asking for any other
model is a ``ValueError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

from workload_pods.integrations.kubernetes.exceptions import (
    KubernetesError,
    ignore_not_found,
)
from workload_pods.integrations.kubernetes.models.base import K8sEntityBase
from workload_pods.integrations.kubernetes.models.workloads import (
    DeploymentSummary,
    PodSummary,
    ReplicaSetSummary,
    StatefulSetSummary,
)
from workload_pods.services.kubernetes.base import K8sBaseManager

ModelT = TypeVar("ModelT", bound=K8sEntityBase)


@dataclass(frozen=True)
class KindBinding:
    """Where a kind lives in the kubernetes SDK."""

    api_group: str
    resource: str


KIND_BINDINGS: dict[type[K8sEntityBase], KindBinding] = {
    DeploymentSummary: KindBinding(api_group="apps_v1", resource="deployment"),
    StatefulSetSummary: KindBinding(api_group="apps_v1", resource="stateful_set"),
    ReplicaSetSummary: KindBinding(api_group="apps_v1", resource="replica_set"),
    PodSummary: KindBinding(api_group="core_v1", resource="pod"),
}


def model_for_kind(kind: str) -> type[K8sEntityBase]:
    """Look up the display model for an API kind string.

    Args:
        kind: Exact kind, e.g. ``"ReplicaSet"``.

    Raises:
        ValueError: If the kind is not supported.
    """
    for model in KIND_BINDINGS:
        if model.kind == kind:
            return model
    supported = ", ".join(sorted(m.kind for m in KIND_BINDINGS))
    raise ValueError(f"Unsupported kind '{kind}' (supported: {supported})")


class ObjectAccessor(K8sBaseManager):
    """Get and list workload objects as display models.

    Every call is a fresh read. Transient connection errors are retried with
    the client's backoff policy; everything else is translated once and raised.
    """

    _entity_name = "accessor"

    def _binding(self, model: type[K8sEntityBase]) -> KindBinding:
        binding = KIND_BINDINGS.get(model)
        if binding is None:
            raise ValueError(f"Unsupported kind model: {model.__name__}")
        return binding

    def _request(self, model: type[K8sEntityBase], verb: str, **kwargs: Any) -> Any:
        """Call ``<verb>_namespaced_<resource>`` for the model's kind."""
        binding = self._binding(model)
        api = getattr(self._client, binding.api_group)
        method = getattr(api, f"{verb}_namespaced_{binding.resource}")
        return self._call(method, model.kind, **kwargs)

    def get(self, model: type[ModelT], name: str, namespace: str | None = None) -> ModelT:
        """Get a single object by name.

        Args:
            model: Display model of the kind to fetch.
            name: Object name.
            namespace: Target namespace (uses default if None).

        Returns:
            The object as a display model.

        Raises:
            KubernetesNotFoundError: If the object does not exist.
            KubernetesError: For any other API failure.
        """
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_object", kind=model.kind, name=name, namespace=ns)
        result = self._request(model, "read", name=name, namespace=ns)
        return model.from_k8s_object(result)  # type: ignore[attr-defined,no-any-return]

    def get_opt(
        self, model: type[ModelT], name: str, namespace: str | None = None
    ) -> ModelT | None:
        """Get a single object by name, or None if it does not exist.

        Raises:
            KubernetesError: For any failure other than not-found.
        """
        try:
            return self.get(model, name, namespace)
        except KubernetesError as e:
            status = ignore_not_found(e)
            self._log.debug(
                "object_not_found", kind=model.kind, name=name, reason=status.reason
            )
            return None

    def list_namespaced(
        self,
        model: type[ModelT],
        namespace: str | None = None,
        *,
        label_selector: str | None = None,
    ) -> list[ModelT]:
        """List objects of one kind in a namespace.

        Args:
            model: Display model of the kind to list.
            namespace: Target namespace (uses default if None).
            label_selector: Filter by label selector (e.g., 'app=nginx').

        Returns:
            Objects in the order the API server returned them.
        """
        ns = self._resolve_namespace(namespace)
        self._log.debug(
            "listing_objects", kind=model.kind, namespace=ns, label_selector=label_selector
        )
        kwargs: dict[str, Any] = {"namespace": ns}
        if label_selector:
            kwargs["label_selector"] = label_selector

        result = self._request(model, "list", **kwargs)
        items = [model.from_k8s_object(item) for item in result.items or []]  # type: ignore[attr-defined]
        self._log.debug("listed_objects", kind=model.kind, count=len(items))
        return items
