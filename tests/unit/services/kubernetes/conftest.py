"""Shared fixtures for Kubernetes service tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from workload_pods.integrations.kubernetes.client import KubernetesClient
from workload_pods.services.kubernetes.accessor import ObjectAccessor
from workload_pods.services.kubernetes.pod_resolver import PodResolver


@pytest.fixture
def mock_k8s_client() -> MagicMock:
    """Create a mock Kubernetes client with API sub-mocks.

    ``core_v1`` and ``apps_v1`` are plain MagicMocks; error translation is the
    real one so that ``ApiException`` side effects surface as the same
    ``KubernetesError`` subclasses a live client would raise. Retries are
    disabled.
    """
    mock_client = MagicMock()
    mock_client.default_namespace = "default"
    mock_client.timeout = 30
    mock_client.make_retry_decorator.return_value = lambda fn: fn
    mock_client.translate_api_exception.side_effect = KubernetesClient.translate_api_exception
    return mock_client


@pytest.fixture
def accessor(mock_k8s_client: MagicMock) -> ObjectAccessor:
    """Create an ObjectAccessor over the mock client."""
    return ObjectAccessor(mock_k8s_client)


@pytest.fixture
def resolver(mock_k8s_client: MagicMock) -> PodResolver:
    """Create a PodResolver over the mock client."""
    return PodResolver(mock_k8s_client)
