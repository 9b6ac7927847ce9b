"""Resource manager used by the dashboard.

One manager covers everything the dashboard reads and mutates: the four
resource lists, per-pod diagnostics (logs, metrics, environment), YAML
manifests, and the delete/scale mutations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import yaml

from kubepane.integrations.kubernetes.exceptions import (
    KubernetesValidationError,
    MetricsUnavailableError,
)
from kubepane.integrations.kubernetes.models.diagnostics import PodEnvVars, PodMetrics
from kubepane.integrations.kubernetes.models.networking import ServiceInfo
from kubepane.integrations.kubernetes.models.workloads import DeploymentInfo, PodInfo
from kubepane.services.kubernetes.base import K8sBaseManager

if TYPE_CHECKING:
    from collections.abc import Callable

METRICS_API_GROUP = "metrics.k8s.io"
METRICS_API_VERSION = "v1beta1"

DEFAULT_TAIL_LINES = 100

# kind -> (client api attribute, read method, display kind)
YAML_READERS: dict[str, tuple[str, str, str]] = {
    "pod": ("core_v1", "read_namespaced_pod", "Pod"),
    "deployment": ("apps_v1", "read_namespaced_deployment", "Deployment"),
    "service": ("core_v1", "read_namespaced_service", "Service"),
}


class ResourceManager(K8sBaseManager):
    """Lists, inspects and mutates namespaces, deployments, pods and services."""

    _entity_name = "resource"

    def _with_retry(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Call ``fn`` retrying transient connection failures."""
        return self._client.make_retry_decorator()(fn)(*args, **kwargs)

    # =========================================================================
    # Lists
    # =========================================================================

    def list_namespaces(self) -> list[str]:
        """List namespace names in API order."""
        self._log.debug("listing_namespaces")

        def _list() -> list[str]:
            try:
                result = self._client.core_v1.list_namespace(
                    _request_timeout=self._client.timeout
                )
            except Exception as e:
                self._handle_api_error(e, "Namespace")
            return [ns.metadata.name for ns in result.items]

        names: list[str] = self._with_retry(_list)
        self._log.debug("listed_namespaces", count=len(names))
        return names

    def list_deployments(self, namespace: str | None = None) -> list[DeploymentInfo]:
        """List deployments in a namespace."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("listing_deployments", namespace=ns)

        def _list() -> list[DeploymentInfo]:
            try:
                result = self._client.apps_v1.list_namespaced_deployment(
                    namespace=ns, _request_timeout=self._client.timeout
                )
            except Exception as e:
                self._handle_api_error(e, "Deployment", None, ns)
            return [DeploymentInfo.from_k8s_object(d) for d in result.items]

        deployments: list[DeploymentInfo] = self._with_retry(_list)
        self._log.debug("listed_deployments", count=len(deployments))
        return deployments

    def list_pods(self, namespace: str | None = None) -> list[PodInfo]:
        """List pods in a namespace."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("listing_pods", namespace=ns)

        def _list() -> list[PodInfo]:
            try:
                result = self._client.core_v1.list_namespaced_pod(
                    namespace=ns, _request_timeout=self._client.timeout
                )
            except Exception as e:
                self._handle_api_error(e, "Pod", None, ns)
            return [PodInfo.from_k8s_object(p) for p in result.items]

        pods: list[PodInfo] = self._with_retry(_list)
        self._log.debug("listed_pods", count=len(pods))
        return pods

    def list_services(self, namespace: str | None = None) -> list[ServiceInfo]:
        """List services in a namespace."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("listing_services", namespace=ns)

        def _list() -> list[ServiceInfo]:
            try:
                result = self._client.core_v1.list_namespaced_service(
                    namespace=ns, _request_timeout=self._client.timeout
                )
            except Exception as e:
                self._handle_api_error(e, "Service", None, ns)
            return [ServiceInfo.from_k8s_object(s) for s in result.items]

        services: list[ServiceInfo] = self._with_retry(_list)
        self._log.debug("listed_services", count=len(services))
        return services

    # =========================================================================
    # Pod diagnostics
    # =========================================================================

    def get_pod_logs(
        self,
        name: str,
        namespace: str | None = None,
        *,
        tail_lines: int = DEFAULT_TAIL_LINES,
    ) -> str:
        """Get the last ``tail_lines`` lines of a pod's log.

        Args:
            name: Pod name.
            namespace: Target namespace.
            tail_lines: Number of lines from the end of the log.

        Returns:
            Log content as string.
        """
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_pod_logs", name=name, namespace=ns, tail_lines=tail_lines)
        try:
            logs: str = self._client.core_v1.read_namespaced_pod_log(
                name=name,
                namespace=ns,
                tail_lines=tail_lines,
                _request_timeout=self._client.timeout,
            )
            return logs
        except Exception as e:
            self._handle_api_error(e, "Pod", name, ns)

    def get_pod_metrics(self, name: str, namespace: str | None = None) -> PodMetrics:
        """Get aggregated CPU/memory usage of a pod from metrics-server.

        Raises:
            MetricsUnavailableError: If the metrics API is not served.
            KubernetesError: For any other API failure.
        """
        from kubernetes.client import ApiException

        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_pod_metrics", name=name, namespace=ns)
        try:
            item = self._client.custom_objects.get_namespaced_custom_object(
                group=METRICS_API_GROUP,
                version=METRICS_API_VERSION,
                namespace=ns,
                plural="pods",
                name=name,
                _request_timeout=self._client.timeout,
            )
        except ApiException as e:
            # 404: metrics API group not registered, or no sample yet; 503: server down
            if e.status in (404, 503):
                raise MetricsUnavailableError() from e
            self._handle_api_error(e, "PodMetrics", name, ns)
        except Exception as e:
            self._handle_api_error(e, "PodMetrics", name, ns)
        return PodMetrics.from_metrics_item(item)

    def get_pod_env_vars(self, name: str, namespace: str | None = None) -> PodEnvVars:
        """Get environment variables declared by every container of a pod."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_pod_env", name=name, namespace=ns)
        try:
            pod = self._client.core_v1.read_namespaced_pod(
                name=name, namespace=ns, _request_timeout=self._client.timeout
            )
        except Exception as e:
            self._handle_api_error(e, "Pod", name, ns)
        return PodEnvVars.from_k8s_object(pod)

    def get_resource_yaml(self, kind: str, name: str, namespace: str | None = None) -> str:
        """Render a pod, deployment or service manifest as YAML.

        Args:
            kind: One of ``pod``, ``deployment``, ``service``.
            name: Resource name.
            namespace: Target namespace.

        Returns:
            The manifest, without ``metadata.managedFields``.

        Raises:
            KubernetesValidationError: If ``kind`` is not supported.
        """
        if kind not in YAML_READERS:
            raise KubernetesValidationError(
                message=f"unsupported resource type: {kind}", status_code=None
            )
        api_attr, read_method, display_kind = YAML_READERS[kind]
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_resource_yaml", kind=kind, name=name, namespace=ns)
        try:
            raw = getattr(getattr(self._client, api_attr), read_method)(
                name=name, namespace=ns, _request_timeout=self._client.timeout
            )
        except Exception as e:
            self._handle_api_error(e, display_kind, name, ns)

        obj_dict = self._client.api_client.sanitize_for_serialization(raw)
        if isinstance(obj_dict.get("metadata"), dict):
            obj_dict["metadata"].pop("managedFields", None)
        obj_dict.setdefault("apiVersion", "apps/v1" if kind == "deployment" else "v1")
        obj_dict.setdefault("kind", display_kind)
        return str(yaml.dump(obj_dict, default_flow_style=False, sort_keys=False))

    # =========================================================================
    # Mutations
    # =========================================================================

    def delete_pod(self, name: str, namespace: str | None = None) -> None:
        """Delete a pod."""
        ns = self._resolve_namespace(namespace)
        self._log.info("deleting_pod", name=name, namespace=ns)
        try:
            self._client.core_v1.delete_namespaced_pod(
                name=name, namespace=ns, _request_timeout=self._client.timeout
            )
            self._log.info("deleted_pod", name=name, namespace=ns)
        except Exception as e:
            self._handle_api_error(e, "Pod", name, ns)

    def delete_deployment(self, name: str, namespace: str | None = None) -> None:
        """Delete a deployment."""
        ns = self._resolve_namespace(namespace)
        self._log.info("deleting_deployment", name=name, namespace=ns)
        try:
            self._client.apps_v1.delete_namespaced_deployment(
                name=name, namespace=ns, _request_timeout=self._client.timeout
            )
            self._log.info("deleted_deployment", name=name, namespace=ns)
        except Exception as e:
            self._handle_api_error(e, "Deployment", name, ns)

    def scale_deployment(self, name: str, namespace: str | None = None, *, replicas: int) -> None:
        """Set a deployment's desired replica count.

        Raises:
            KubernetesValidationError: If ``replicas`` is negative.
        """
        if replicas < 0:
            raise KubernetesValidationError(
                message="replica count cannot be negative", status_code=None
            )
        ns = self._resolve_namespace(namespace)
        self._log.info("scaling_deployment", name=name, namespace=ns, replicas=replicas)
        try:
            self._client.apps_v1.patch_namespaced_deployment(
                name=name,
                namespace=ns,
                body={"spec": {"replicas": replicas}},
                _request_timeout=self._client.timeout,
            )
            self._log.info("scaled_deployment", name=name, namespace=ns, replicas=replicas)
        except Exception as e:
            self._handle_api_error(e, "Deployment", name, ns)
