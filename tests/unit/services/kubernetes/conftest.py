"""Shared fixtures for Kubernetes service tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from kubepane.integrations.kubernetes.client import KubernetesClient


@pytest.fixture
def mock_k8s_client() -> MagicMock:
    """Create a mock Kubernetes client.

    Retries are disabled and API exceptions are translated with the real
    client logic, so managers raise the same errors as in production.
    """
    mock_client = MagicMock()
    mock_client.default_namespace = "default"
    mock_client.timeout = 30
    mock_client.make_retry_decorator.return_value = lambda fn: fn
    mock_client.translate_api_exception = KubernetesClient.translate_api_exception
    return mock_client
