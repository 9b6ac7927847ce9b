"""Errors raised by the Kubernetes integration layer.

Every failure that can come out of the resource manager or the port-forward
registry is a :class:`KubernetesError`. The dashboard never lets one of these
reach the event loop; the load dispatcher turns them into result events.
"""

from __future__ import annotations


class KubernetesError(Exception):
    """Base exception for Kubernetes operations.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code from the API server (if any).
        resource_type: Kind of resource involved (e.g. "Pod").
        resource_name: Name of the resource involved.
        namespace: Namespace of the resource.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.namespace = namespace

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        if self.resource_type and self.resource_name:
            where = f"[{self.resource_type}/{self.resource_name}"
            if self.namespace:
                where += f" in {self.namespace}"
            parts.append(where + "]")
        return " ".join(parts)


class KubernetesConnectionError(KubernetesError):
    """The cluster could not be reached or the kubeconfig could not be loaded."""

    def __init__(
        self,
        message: str = "Failed to connect to Kubernetes cluster",
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message=message)
        self.original_error = original_error


class BackendNotInitializedError(KubernetesError):
    """Raised for every call made after the client failed to initialize."""

    def __init__(self, message: str = "kubernetes manager not initialized") -> None:
        super().__init__(message=message)


class KubernetesAuthError(KubernetesError):
    """Authentication or RBAC denial (401/403)."""

    def __init__(
        self,
        message: str = "Kubernetes authentication/authorization failed",
        status_code: int | None = 401,
        reason: str | None = None,
    ) -> None:
        super().__init__(message=message, status_code=status_code)
        self.reason = reason


class KubernetesNotFoundError(KubernetesError):
    """The requested resource does not exist (404)."""

    def __init__(
        self,
        message: str = "Kubernetes resource not found",
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        if resource_type and resource_name:
            message = f"{resource_type} '{resource_name}' not found"
            if namespace:
                message += f" in namespace '{namespace}'"
        super().__init__(
            message=message,
            status_code=404,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )


class KubernetesConflictError(KubernetesError):
    """The resource was modified concurrently (409)."""

    def __init__(
        self,
        message: str = "Resource conflict",
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        if resource_type and resource_name:
            message = f"{resource_type} '{resource_name}' was modified concurrently"
        super().__init__(
            message=message,
            status_code=409,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )


class KubernetesValidationError(KubernetesError):
    """The API server rejected the request body (400/422)."""

    def __init__(
        self,
        message: str = "Invalid request",
        status_code: int | None = 422,
    ) -> None:
        super().__init__(message=message, status_code=status_code)


class KubernetesTimeoutError(KubernetesError):
    """A request to the API server timed out."""

    def __init__(
        self,
        message: str = "Kubernetes operation timed out",
        timeout_seconds: int | None = None,
    ) -> None:
        if timeout_seconds:
            message = f"{message} (after {timeout_seconds}s)"
        super().__init__(message=message)
        self.timeout_seconds = timeout_seconds


class MetricsUnavailableError(KubernetesError):
    """The metrics API is not served by this cluster.

    This is an expected condition on clusters without metrics-server and is
    rendered as an explanatory placeholder, not as an error.
    """

    def __init__(self, message: str = "metrics-server not available") -> None:
        super().__init__(message=message)


class PortForwardError(KubernetesError):
    """A port-forward could not be started or stopped."""

    def __init__(
        self,
        message: str,
        pod_name: str | None = None,
        local_port: int | None = None,
    ) -> None:
        super().__init__(message=message, resource_type="Pod", resource_name=pod_name)
        self.local_port = local_port
