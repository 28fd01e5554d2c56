"""Base manager for Kubernetes services.

Every read a service makes goes through ``K8sBaseManager._call``. It passes the
client's per-request timeout, applies the client's retry policy and translates
failures into ``KubernetesError`` subclasses.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, NoReturn, TypeVar

import structlog

if TYPE_CHECKING:
    from workload_pods.integrations.kubernetes.client import KubernetesClient

logger = structlog.get_logger()

T = TypeVar("T")


class K8sBaseManager:
    """Base class for services that read from the API server.

    Subclasses set ``_entity_name``; it is bound as ``entity`` on every log
    event the service emits.

    Example:
        >>> class ObjectAccessor(K8sBaseManager):
        ...     _entity_name = "accessor"
    """

    _entity_name: str = ""

    def __init__(self, client: KubernetesClient) -> None:
        self._client = client
        self._log = logger.bind(entity=self._entity_name)

    @property
    def default_namespace(self) -> str:
        """Namespace used when a call passes none."""
        return self._client.default_namespace

    def _resolve_namespace(self, namespace: str | None) -> str:
        return namespace or self._client.default_namespace

    def _call(self, api_call: Callable[..., T], resource_type: str, **kwargs: Any) -> T:
        """Run one SDK call under the client's timeout and retry policy.

        Args:
            api_call: Bound SDK method, e.g. ``apps_v1.read_namespaced_deployment``.
            resource_type: Kind named in a translated error.
            **kwargs: Passed to ``api_call``. ``name`` and ``namespace`` also
                label a translated error.

        Raises:
            KubernetesError: The translated failure, once retries are exhausted.
        """

        def _attempt() -> T:
            try:
                return api_call(_request_timeout=self._client.timeout, **kwargs)
            except Exception as e:
                self._handle_api_error(
                    e, resource_type, kwargs.get("name"), kwargs.get("namespace")
                )

        retrying = self._client.make_retry_decorator()
        return retrying(_attempt)()  # type: ignore[no-any-return]

    def _handle_api_error(
        self,
        e: Exception,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> NoReturn:
        """Translate an SDK or transport exception and raise it.

        Raises:
            KubernetesError: Always.
        """
        raise self._client.translate_api_exception(
            e,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )
