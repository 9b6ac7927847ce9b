"""Unit tests for ResourceManager."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import yaml
from kubernetes.client import ApiException

from kubepane.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesValidationError,
    MetricsUnavailableError,
)
from kubepane.services.kubernetes.resource_manager import (
    METRICS_API_GROUP,
    METRICS_API_VERSION,
    ResourceManager,
)


@pytest.fixture
def resource_manager(mock_k8s_client: MagicMock) -> ResourceManager:
    """Create a ResourceManager instance with mocked client."""
    return ResourceManager(mock_k8s_client)


def _named(name: str, namespace: str | None = None) -> MagicMock:
    obj = MagicMock()
    obj.metadata.name = name
    obj.metadata.namespace = namespace
    return obj


def _items(*objs: MagicMock) -> MagicMock:
    response = MagicMock()
    response.items = list(objs)
    return response


class TestResourceManagerLists:
    """Tests for the four list operations."""

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_list_namespaces(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """Namespace names are returned in API order."""
        mock_k8s_client.core_v1.list_namespace.return_value = _items(
            _named("default"), _named("kube-system")
        )

        assert resource_manager.list_namespaces() == ["default", "kube-system"]

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_list_pods(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """Pods are listed from the requested namespace."""
        pod = _named("web-1", "apps")
        pod.status.phase = "Running"
        pod.status.container_statuses = []
        mock_k8s_client.core_v1.list_namespaced_pod.return_value = _items(pod)

        result = resource_manager.list_pods("apps")

        assert [p.name for p in result] == ["web-1"]
        assert result[0].status == "Running"
        mock_k8s_client.core_v1.list_namespaced_pod.assert_called_once_with(
            namespace="apps", _request_timeout=30
        )

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_list_deployments_default_namespace(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """The client default namespace is used when none is given."""
        deployment = _named("api", "default")
        deployment.spec.replicas = 2
        deployment.status.replicas = 2
        deployment.status.ready_replicas = 2
        deployment.status.updated_replicas = 2
        deployment.status.available_replicas = 2
        mock_k8s_client.apps_v1.list_namespaced_deployment.return_value = _items(deployment)

        result = resource_manager.list_deployments()

        assert result[0].ready == "2/2"
        mock_k8s_client.apps_v1.list_namespaced_deployment.assert_called_once_with(
            namespace="default", _request_timeout=30
        )

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_list_services_empty(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """An empty namespace gives an empty list."""
        mock_k8s_client.core_v1.list_namespaced_service.return_value = _items()

        assert resource_manager.list_services("apps") == []

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_list_error_translated(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """RBAC denials surface as KubernetesAuthError."""
        mock_k8s_client.core_v1.list_namespace.side_effect = ApiException(
            status=403, reason="Forbidden"
        )

        with pytest.raises(KubernetesAuthError):
            resource_manager.list_namespaces()

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_lists_go_through_retry(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """List calls are wrapped by the client's retry decorator."""
        mock_k8s_client.core_v1.list_namespace.return_value = _items()

        resource_manager.list_namespaces()

        mock_k8s_client.make_retry_decorator.assert_called_once()

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_requests_carry_client_timeout(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """A hung API server cannot block a call past the configured timeout."""
        mock_k8s_client.timeout = 7
        mock_k8s_client.core_v1.list_namespace.return_value = _items()

        resource_manager.list_namespaces()
        resource_manager.delete_pod("web-1", "apps")

        mock_k8s_client.core_v1.list_namespace.assert_called_once_with(_request_timeout=7)
        mock_k8s_client.core_v1.delete_namespaced_pod.assert_called_once_with(
            name="web-1", namespace="apps", _request_timeout=7
        )


class TestResourceManagerDiagnostics:
    """Tests for logs, metrics, environment and YAML."""

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_get_pod_logs(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """Logs are tailed with the requested line count."""
        mock_k8s_client.core_v1.read_namespaced_pod_log.return_value = "line1\nline2"

        logs = resource_manager.get_pod_logs("web-1", "apps", tail_lines=50)

        assert logs == "line1\nline2"
        mock_k8s_client.core_v1.read_namespaced_pod_log.assert_called_once_with(
            name="web-1", namespace="apps", tail_lines=50, _request_timeout=30
        )

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_get_pod_logs_not_found(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """A vanished pod raises KubernetesNotFoundError."""
        mock_k8s_client.core_v1.read_namespaced_pod_log.side_effect = ApiException(
            status=404, reason="Not Found"
        )

        with pytest.raises(KubernetesNotFoundError, match="Pod 'web-1' not found"):
            resource_manager.get_pod_logs("web-1", "apps")

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_get_pod_metrics(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """Metrics are read from the metrics.k8s.io API."""
        mock_k8s_client.custom_objects.get_namespaced_custom_object.return_value = {
            "metadata": {"name": "web-1", "namespace": "apps"},
            "containers": [{"usage": {"cpu": "120m", "memory": "64Mi"}}],
        }

        metrics = resource_manager.get_pod_metrics("web-1", "apps")

        assert metrics.cpu_millicores == 120
        assert metrics.memory_display == "64Mi"
        mock_k8s_client.custom_objects.get_namespaced_custom_object.assert_called_once_with(
            group=METRICS_API_GROUP,
            version=METRICS_API_VERSION,
            namespace="apps",
            plural="pods",
            name="web-1",
            _request_timeout=30,
        )

    @pytest.mark.unit
    @pytest.mark.kubernetes
    @pytest.mark.parametrize("status", [404, 503])
    def test_get_pod_metrics_unavailable(
        self,
        resource_manager: ResourceManager,
        mock_k8s_client: MagicMock,
        status: int,
    ) -> None:
        """A missing metrics API is reported as MetricsUnavailableError."""
        mock_k8s_client.custom_objects.get_namespaced_custom_object.side_effect = ApiException(
            status=status
        )

        with pytest.raises(MetricsUnavailableError):
            resource_manager.get_pod_metrics("web-1", "apps")

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_get_pod_metrics_other_error(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """Other API failures are real errors."""
        mock_k8s_client.custom_objects.get_namespaced_custom_object.side_effect = ApiException(
            status=500, reason="Internal Server Error"
        )

        with pytest.raises(KubernetesError) as exc_info:
            resource_manager.get_pod_metrics("web-1", "apps")

        assert not isinstance(exc_info.value, MetricsUnavailableError)

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_get_pod_env_vars(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """Environment is read from the pod spec."""
        from kubernetes.client import V1Container, V1EnvVar, V1ObjectMeta, V1Pod, V1PodSpec

        mock_k8s_client.core_v1.read_namespaced_pod.return_value = V1Pod(
            metadata=V1ObjectMeta(name="web-1", namespace="apps"),
            spec=V1PodSpec(
                containers=[V1Container(name="app", env=[V1EnvVar(name="A", value="1")])]
            ),
        )

        env = resource_manager.get_pod_env_vars("web-1", "apps")

        assert env.containers["app"][0].value == "1"

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_get_resource_yaml(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """Manifests are dumped without managedFields, in field order."""
        mock_k8s_client.api_client.sanitize_for_serialization.return_value = {
            "metadata": {"name": "api", "managedFields": [{"manager": "kubectl"}]},
            "spec": {"replicas": 2},
        }

        text = resource_manager.get_resource_yaml("deployment", "api", "apps")

        mock_k8s_client.apps_v1.read_namespaced_deployment.assert_called_once_with(
            name="api", namespace="apps", _request_timeout=30
        )
        manifest = yaml.safe_load(text)
        assert "managedFields" not in manifest["metadata"]
        assert manifest["apiVersion"] == "apps/v1"
        assert manifest["kind"] == "Deployment"
        assert text.index("metadata") < text.index("spec")

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_get_resource_yaml_unsupported_kind(
        self, resource_manager: ResourceManager
    ) -> None:
        """Only pods, deployments and services are supported."""
        with pytest.raises(KubernetesValidationError, match="unsupported resource type"):
            resource_manager.get_resource_yaml("namespace", "default")


class TestResourceManagerMutations:
    """Tests for delete and scale."""

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_delete_pod(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """Pods are deleted by name and namespace."""
        resource_manager.delete_pod("web-1", "apps")

        mock_k8s_client.core_v1.delete_namespaced_pod.assert_called_once_with(
            name="web-1", namespace="apps", _request_timeout=30
        )

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_delete_deployment_error(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """Delete failures are translated."""
        mock_k8s_client.apps_v1.delete_namespaced_deployment.side_effect = ApiException(
            status=404, reason="Not Found"
        )

        with pytest.raises(KubernetesNotFoundError):
            resource_manager.delete_deployment("api", "apps")

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_scale_deployment(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """Scaling patches spec.replicas."""
        resource_manager.scale_deployment("api", "apps", replicas=0)

        mock_k8s_client.apps_v1.patch_namespaced_deployment.assert_called_once_with(
            name="api", namespace="apps", body={"spec": {"replicas": 0}}, _request_timeout=30
        )

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_scale_deployment_negative(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """A negative replica count never reaches the API."""
        with pytest.raises(KubernetesValidationError):
            resource_manager.scale_deployment("api", "apps", replicas=-1)

        mock_k8s_client.apps_v1.patch_namespaced_deployment.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_unreachable_server(
        self, resource_manager: ResourceManager, mock_k8s_client: MagicMock
    ) -> None:
        """Transport failures surface as KubernetesConnectionError."""
        from urllib3.exceptions import MaxRetryError

        mock_k8s_client.core_v1.delete_namespaced_pod.side_effect = MaxRetryError(
            None, "/api/v1/namespaces/apps/pods/web-1"
        )

        with pytest.raises(KubernetesConnectionError):
            resource_manager.delete_pod("web-1", "apps")
