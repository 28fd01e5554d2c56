"""Connection to a Kubernetes API server.

``KubernetesClient`` owns one ``ApiClient`` for the active cluster of a
``KubernetesConfig``: the configured kubeconfig context when one loads, the
pod's service account otherwise. API groups handed out by the client are bound
to that ApiClient, so two clients for two clusters never share credentials.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from urllib3.exceptions import (
    MaxRetryError,
    NewConnectionError,
    ProtocolError,
    ReadTimeoutError,
)

from workload_pods.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    KubernetesValidationError,
)

if TYPE_CHECKING:
    from kubernetes.client import ApiClient, AppsV1Api, CoreV1Api, VersionApi

    from workload_pods.integrations.kubernetes.config import KubernetesConfig

logger = structlog.get_logger()

IN_CLUSTER_CONTEXT = "in-cluster"

# Attribute name -> kubernetes.client class
_API_GROUPS = {
    "core_v1": "CoreV1Api",
    "apps_v1": "AppsV1Api",
    "version": "VersionApi",
}

_TRANSPORT_ERRORS = (MaxRetryError, NewConnectionError, ProtocolError, ConnectionError)


class KubernetesClient:
    """Read access to one cluster.

    Example:
        ```python
        from workload_pods.integrations.kubernetes import KubernetesClient, load_config

        with KubernetesClient(load_config()) as client:
            print(client.get_current_context(), client.get_cluster_version())
        ```
    """

    def __init__(self, k8s_config: KubernetesConfig) -> None:
        """Connect using the active cluster of ``k8s_config``.

        Raises:
            KubernetesConnectionError: If neither a kubeconfig nor an in-cluster
                service account can be loaded.
        """
        self._config = k8s_config
        self._retries = k8s_config.defaults.retry_attempts
        self._apis: dict[str, Any] = {}
        self._context, self._api_client = self._connect()

        logger.info(
            "kubernetes_client_initialized",
            context=self._context,
            default_namespace=self.default_namespace,
            timeout=self.timeout,
        )

    def _connect(self) -> tuple[str, ApiClient]:
        from kubernetes import client, config
        from kubernetes.config import ConfigException

        cluster = self._config.get_active_cluster()
        kubeconfig = cluster.kubeconfig if cluster else None
        context = self._config.get_active_context()

        try:
            api_client = config.new_client_from_config(config_file=kubeconfig, context=context)
        except ConfigException as kubeconfig_error:
            configuration = client.Configuration()
            try:
                config.load_incluster_config(client_configuration=configuration)
            except ConfigException as e:
                raise KubernetesConnectionError(
                    message="Cannot load Kubernetes configuration: no usable kubeconfig "
                    "and not running inside a cluster",
                    original_error=e,
                ) from e
            logger.debug("loaded_incluster_config", kubeconfig_error=str(kubeconfig_error))
            return IN_CLUSTER_CONTEXT, client.ApiClient(configuration)

        if context is None:
            _, current = config.list_kube_config_contexts(config_file=kubeconfig)
            context = current["name"]
        logger.debug("loaded_kubeconfig", context=context, kubeconfig=kubeconfig)
        return str(context), api_client

    # =========================================================================
    # API Groups
    # =========================================================================

    def _api(self, group: str) -> Any:
        api = self._apis.get(group)
        if api is None:
            from kubernetes import client

            api = getattr(client, _API_GROUPS[group])(self._api_client)
            self._apis[group] = api
        return api

    @property
    def core_v1(self) -> CoreV1Api:
        """CoreV1Api (pods)."""
        return self._api("core_v1")  # type: ignore[no-any-return]

    @property
    def apps_v1(self) -> AppsV1Api:
        """AppsV1Api (deployments, statefulsets, replicasets)."""
        return self._api("apps_v1")  # type: ignore[no-any-return]

    @property
    def version_api(self) -> VersionApi:
        return self._api("version")  # type: ignore[no-any-return]

    def get_current_context(self) -> str:
        """Kubeconfig context in use, or ``in-cluster``."""
        return self._context

    # =========================================================================
    # Error Translation
    # =========================================================================

    @staticmethod
    def translate_api_exception(
        e: Exception,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> KubernetesError:
        """Map an SDK or transport failure onto the ``KubernetesError`` hierarchy.

        urllib3 timeouts become ``KubernetesTimeoutError``, other transport
        failures ``KubernetesConnectionError``. ``ApiException`` is mapped by
        HTTP status. A ``KubernetesError`` is returned unchanged.
        """
        from kubernetes.client import ApiException

        if isinstance(e, KubernetesError):
            return e

        cause = e.reason if isinstance(e, MaxRetryError) else e
        if isinstance(cause, (ReadTimeoutError, TimeoutError)):
            return KubernetesTimeoutError(message=f"Request timed out: {cause}")
        if isinstance(e, _TRANSPORT_ERRORS):
            return KubernetesConnectionError(
                message="Cannot reach the Kubernetes API server",
                original_error=e,
            )

        location: dict[str, Any] = {
            "resource_type": resource_type,
            "resource_name": resource_name,
            "namespace": namespace,
        }
        if not isinstance(e, ApiException):
            return KubernetesError(message=str(e), **location)

        status = e.status
        if status == 404:
            return KubernetesNotFoundError(**location)
        if status in (401, 403):
            return KubernetesAuthError(
                message=e.reason or "Authentication/authorization failed",
                status_code=status,
                reason=e.reason,
            )
        if status in (400, 422):
            return KubernetesValidationError(
                message=e.reason or "Invalid request",
                status_code=status,
            )
        return KubernetesError(
            message=e.reason or f"Kubernetes API error: {status}",
            status_code=status,
            **location,
        )

    # =========================================================================
    # Retry Policy
    # =========================================================================

    def make_retry_decorator(self) -> Any:
        """Build the tenacity policy reads run under.

        Only ``KubernetesConnectionError`` is retried, with exponential
        backoff, up to ``defaults.retry_attempts`` attempts in total. The last
        error is re-raised as is.
        """

        def _log_retry(state: RetryCallState) -> None:
            error = state.outcome.exception() if state.outcome else None
            logger.warning(
                "retrying_kubernetes_request",
                attempt=state.attempt_number,
                max_attempts=self._retries,
                error=str(error),
            )

        return retry(
            retry=retry_if_exception_type(KubernetesConnectionError),
            stop=stop_after_attempt(self._retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            before_sleep=_log_retry,
            reraise=True,
        )

    # =========================================================================
    # Cluster Info
    # =========================================================================

    def get_cluster_version(self) -> str:
        """Get the server version as ``v<major>.<minor>``.

        Raises:
            KubernetesConnectionError: If the cluster is unreachable.
        """
        try:
            info = self.version_api.get_code()
        except Exception as e:
            raise KubernetesConnectionError(
                message="Failed to get cluster version",
                original_error=e,
            ) from e
        return f"v{info.major}.{info.minor}"

    def check_connection(self) -> bool:
        try:
            self.get_cluster_version()
        except KubernetesConnectionError:
            return False
        return True

    @property
    def default_namespace(self) -> str:
        return self._config.get_active_namespace()

    @property
    def timeout(self) -> int:
        """Per-request timeout in seconds."""
        return self._config.get_active_timeout()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Drop the API groups and close the connection pool."""
        self._apis.clear()
        self._api_client.close()
        logger.debug("kubernetes_client_closed", context=self._context)

    def __enter__(self) -> KubernetesClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
