"""Kubernetes integration - API client, configuration and error types."""

from workload_pods.integrations.kubernetes.client import KubernetesClient
from workload_pods.integrations.kubernetes.config import (
    ClusterConfig,
    ConfigError,
    KubernetesConfig,
    KubernetesDefaultsConfig,
    load_config,
)
from workload_pods.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    KubernetesValidationError,
    NotFoundStatus,
    ignore_not_found,
)

__all__ = [
    "ClusterConfig",
    "ConfigError",
    "KubernetesAuthError",
    "KubernetesClient",
    "KubernetesConfig",
    "KubernetesConnectionError",
    "KubernetesDefaultsConfig",
    "KubernetesError",
    "KubernetesNotFoundError",
    "KubernetesTimeoutError",
    "KubernetesValidationError",
    "NotFoundStatus",
    "ignore_not_found",
    "load_config",
]
