"""Kubernetes integration: API client, configuration, errors and models."""

from kubepane.integrations.kubernetes.client import KubernetesClient
from kubepane.integrations.kubernetes.config import (
    KubernetesConfig,
    resolve_kubeconfig_path,
)
from kubepane.integrations.kubernetes.exceptions import (
    BackendNotInitializedError,
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    KubernetesValidationError,
    MetricsUnavailableError,
    PortForwardError,
)

__all__ = [
    "BackendNotInitializedError",
    "KubernetesAuthError",
    "KubernetesClient",
    "KubernetesConfig",
    "KubernetesConflictError",
    "KubernetesConnectionError",
    "KubernetesError",
    "KubernetesNotFoundError",
    "KubernetesTimeoutError",
    "KubernetesValidationError",
    "MetricsUnavailableError",
    "PortForwardError",
    "resolve_kubeconfig_path",
]
