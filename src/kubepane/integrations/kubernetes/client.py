"""Kubernetes API client wrapper.

Wraps the official kubernetes Python client with lazy API group
initialization, retry logic for transient failures and translation of API
errors into the :mod:`kubepane.integrations.kubernetes.exceptions` hierarchy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from kubepane.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    KubernetesValidationError,
)

if TYPE_CHECKING:
    from kubernetes.client import (
        ApiClient,
        AppsV1Api,
        CoreV1Api,
        CustomObjectsApi,
    )

    from kubepane.integrations.kubernetes.config import KubernetesConfig

logger = structlog.get_logger()


class KubernetesClient:
    """Single-cluster Kubernetes API client.

    Example:
        ```python
        from kubepane.integrations.kubernetes import KubernetesClient, KubernetesConfig

        with KubernetesClient(KubernetesConfig(namespace="kube-system")) as client:
            pods = client.core_v1.list_namespaced_pod(client.default_namespace)
        ```
    """

    def __init__(self, config: KubernetesConfig) -> None:
        """Initialize the client and load cluster credentials.

        Args:
            config: Connection settings.

        Raises:
            KubernetesConnectionError: If neither a kubeconfig nor an
                in-cluster service account could be loaded.
        """
        self._config = config
        self._current_context: str | None = None

        self._api_client: ApiClient | None = None
        self._core_v1: CoreV1Api | None = None
        self._apps_v1: AppsV1Api | None = None
        self._custom_objects: CustomObjectsApi | None = None

        self._load_config()

        logger.info(
            "kubernetes_client_initialized",
            context=self._current_context,
            default_namespace=config.namespace,
        )

    def _load_config(self) -> None:
        """Load configuration from kubeconfig, falling back to in-cluster."""
        from kubernetes import config
        from kubernetes.config import ConfigException

        kubeconfig_path = self._config.kubeconfig_path
        try:
            config.load_kube_config(
                config_file=kubeconfig_path,
                context=self._config.context,
            )
            self._current_context = self._config.context or self._active_context_name()
            logger.debug(
                "loaded_kubeconfig",
                context=self._current_context,
                kubeconfig=kubeconfig_path,
            )
        except (ConfigException, OSError) as kube_err:
            try:
                config.load_incluster_config()
                self._current_context = "in-cluster"
                logger.debug("loaded_incluster_config")
            except ConfigException as e:
                raise KubernetesConnectionError(
                    message=f"Cannot load Kubernetes configuration: {kube_err}",
                    original_error=e,
                ) from e

        self._invalidate_api_cache()

    def _active_context_name(self) -> str | None:
        from kubernetes import config

        try:
            _, active = config.list_kube_config_contexts(
                config_file=self._config.kubeconfig_path,
            )
        except Exception:
            return None
        return active.get("name") if active else None

    def _invalidate_api_cache(self) -> None:
        """Clear cached API group instances."""
        self._api_client = None
        self._core_v1 = None
        self._apps_v1 = None
        self._custom_objects = None

    # =========================================================================
    # Lazy API Group Accessors
    # =========================================================================

    @property
    def api_client(self) -> ApiClient:
        """Get the shared ApiClient (used for object serialization)."""
        if self._api_client is None:
            from kubernetes.client import ApiClient

            self._api_client = ApiClient()
        return self._api_client

    @property
    def core_v1(self) -> CoreV1Api:
        """Get CoreV1Api instance (pods, services, namespaces)."""
        if self._core_v1 is None:
            from kubernetes.client import CoreV1Api

            self._core_v1 = CoreV1Api(self.api_client)
        return self._core_v1

    @property
    def apps_v1(self) -> AppsV1Api:
        """Get AppsV1Api instance (deployments)."""
        if self._apps_v1 is None:
            from kubernetes.client import AppsV1Api

            self._apps_v1 = AppsV1Api(self.api_client)
        return self._apps_v1

    @property
    def custom_objects(self) -> CustomObjectsApi:
        """Get CustomObjectsApi instance (metrics.k8s.io)."""
        if self._custom_objects is None:
            from kubernetes.client import CustomObjectsApi

            self._custom_objects = CustomObjectsApi(self.api_client)
        return self._custom_objects

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
        """Translate a client-library exception into a KubernetesError.

        Args:
            e: The original exception.
            resource_type: Kind of resource being operated on.
            resource_name: Name of the resource.
            namespace: Namespace of the resource.

        Returns:
            An appropriate KubernetesError subclass.
        """
        from kubernetes.client import ApiException
        from urllib3.exceptions import MaxRetryError, ProtocolError, ReadTimeoutError

        if isinstance(e, KubernetesError):
            return e

        if isinstance(e, ReadTimeoutError):
            return KubernetesTimeoutError(message=f"Request timed out: {e}")

        if isinstance(e, (MaxRetryError, ProtocolError, ConnectionError)):
            return KubernetesConnectionError(
                message=f"Cannot reach Kubernetes API server: {e}",
                original_error=e,
            )

        if not isinstance(e, ApiException):
            return KubernetesError(
                message=str(e),
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        status = e.status

        if status in (401, 403):
            return KubernetesAuthError(
                message=e.reason or "Authentication/authorization failed",
                status_code=status,
                reason=e.reason,
            )

        if status == 404:
            return KubernetesNotFoundError(
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        if status == 409:
            return KubernetesConflictError(
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        if status in (400, 422):
            return KubernetesValidationError(
                message=e.reason or "Validation failed",
                status_code=status,
            )

        return KubernetesError(
            message=e.reason or f"Kubernetes API error: {status}",
            status_code=status,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )

    # =========================================================================
    # Retry Decorator
    # =========================================================================

    def make_retry_decorator(self) -> Any:
        """Create a retry decorator for transient connection errors.

        Returns:
            A tenacity retry decorator configured with exponential backoff.
        """
        return retry(
            retry=retry_if_exception_type(KubernetesConnectionError),
            stop=stop_after_attempt(self._config.retry_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            reraise=True,
        )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def current_context(self) -> str:
        """Active context name, ``in-cluster`` or ``unknown``."""
        return self._current_context or "unknown"

    @property
    def default_namespace(self) -> str:
        """Get the default namespace from config."""
        return self._config.namespace

    @property
    def timeout(self) -> int:
        """Per-request timeout in seconds, passed as ``_request_timeout``."""
        return self._config.timeout

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close the client and release pooled connections."""
        if self._api_client is not None:
            self._api_client.close()
        self._invalidate_api_cache()
        logger.debug("kubernetes_client_closed")

    def __enter__(self) -> KubernetesClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
