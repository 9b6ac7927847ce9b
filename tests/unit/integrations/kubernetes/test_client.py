"""Unit tests for the Kubernetes client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from kubernetes.client import ApiException
from urllib3.exceptions import MaxRetryError, ReadTimeoutError

from kubepane.integrations.kubernetes.client import KubernetesClient
from kubepane.integrations.kubernetes.config import KubernetesConfig
from kubepane.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    KubernetesValidationError,
)


@pytest.mark.unit
@pytest.mark.kubernetes
class TestKubernetesClientInitialization:
    """Test KubernetesClient initialization."""

    @patch("kubernetes.config")
    def test_loads_kubeconfig_with_context(self, mock_config: MagicMock) -> None:
        """The configured kubeconfig and context are passed through."""
        client = KubernetesClient(KubernetesConfig(kubeconfig="/tmp/kc", context="dev"))

        mock_config.load_kube_config.assert_called_once_with(
            config_file="/tmp/kc", context="dev"
        )
        assert client.current_context == "dev"

    @patch("kubernetes.config")
    def test_active_context_read_from_kubeconfig(self, mock_config: MagicMock) -> None:
        """Without an explicit context the kubeconfig's active one is reported."""
        mock_config.list_kube_config_contexts.return_value = ([], {"name": "kind-dev"})

        client = KubernetesClient(KubernetesConfig(kubeconfig="/tmp/kc"))

        assert client.current_context == "kind-dev"

    @patch("kubernetes.config")
    def test_unknown_context_when_listing_fails(self, mock_config: MagicMock) -> None:
        """A kubeconfig without contexts still yields a usable client."""
        mock_config.list_kube_config_contexts.side_effect = Exception("no contexts")

        client = KubernetesClient(KubernetesConfig(kubeconfig="/tmp/kc"))

        assert client.current_context == "unknown"

    @patch("kubernetes.config")
    def test_fallback_to_incluster(self, mock_config: MagicMock) -> None:
        """Without a kubeconfig the in-cluster service account is tried."""
        from kubernetes.config import ConfigException

        mock_config.load_kube_config.side_effect = ConfigException("Not found")

        client = KubernetesClient(KubernetesConfig())

        mock_config.load_incluster_config.assert_called_once()
        assert client.current_context == "in-cluster"

    @patch("kubernetes.config")
    def test_missing_file_falls_back_to_incluster(self, mock_config: MagicMock) -> None:
        """An unreadable kubeconfig file is treated like a missing one."""
        mock_config.load_kube_config.side_effect = FileNotFoundError("/tmp/kc")

        client = KubernetesClient(KubernetesConfig(kubeconfig="/tmp/kc"))

        assert client.current_context == "in-cluster"

    @patch("kubernetes.config")
    def test_connection_error_when_nothing_loads(self, mock_config: MagicMock) -> None:
        """Both loaders failing raises KubernetesConnectionError."""
        from kubernetes.config import ConfigException

        mock_config.load_kube_config.side_effect = ConfigException("No config")
        mock_config.load_incluster_config.side_effect = ConfigException("Not in cluster")

        with pytest.raises(KubernetesConnectionError) as exc_info:
            KubernetesClient(KubernetesConfig())

        assert "Cannot load Kubernetes configuration" in str(exc_info.value)
        assert exc_info.value.original_error is not None

    @patch("kubernetes.config")
    def test_properties(self, mock_config: MagicMock) -> None:
        """Namespace and request timeout come from the configuration."""
        client = KubernetesClient(KubernetesConfig(namespace="apps", timeout=10, context="c"))

        assert client.default_namespace == "apps"
        assert client.timeout == 10


@pytest.mark.unit
@pytest.mark.kubernetes
class TestKubernetesClientAPIProperties:
    """Test KubernetesClient lazy API properties."""

    @patch("kubernetes.config")
    def test_api_groups_share_one_api_client(self, mock_config: MagicMock) -> None:
        """Every API group is built once around the shared ApiClient."""
        client = KubernetesClient(KubernetesConfig(context="c"))

        with (
            patch("kubernetes.client.ApiClient") as api_client_cls,
            patch("kubernetes.client.CoreV1Api") as core_cls,
            patch("kubernetes.client.AppsV1Api") as apps_cls,
        ):
            assert client.core_v1 is client.core_v1
            _ = client.apps_v1

        api_client_cls.assert_called_once_with()
        core_cls.assert_called_once_with(api_client_cls.return_value)
        apps_cls.assert_called_once_with(api_client_cls.return_value)

    @patch("kubernetes.config")
    def test_close_releases_api_client(self, mock_config: MagicMock) -> None:
        """close() closes the ApiClient and drops cached groups."""
        client = KubernetesClient(KubernetesConfig(context="c"))
        with (
            patch("kubernetes.client.ApiClient") as api_client_cls,
            patch("kubernetes.client.CustomObjectsApi"),
        ):
            _ = client.custom_objects
            client.close()

        api_client_cls.return_value.close.assert_called_once()
        assert client._custom_objects is None


@pytest.mark.unit
@pytest.mark.kubernetes
class TestTranslateApiException:
    """Test mapping of client-library exceptions."""

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            (401, KubernetesAuthError),
            (403, KubernetesAuthError),
            (404, KubernetesNotFoundError),
            (409, KubernetesConflictError),
            (400, KubernetesValidationError),
            (422, KubernetesValidationError),
        ],
    )
    def test_status_mapping(self, status: int, expected: type[KubernetesError]) -> None:
        """HTTP statuses map onto specific error types."""
        error = KubernetesClient.translate_api_exception(
            ApiException(status=status, reason="reason"), "Pod", "web-1", "default"
        )
        assert type(error) is expected
        assert error.status_code == status

    def test_not_found_message(self) -> None:
        """404 names the missing resource."""
        error = KubernetesClient.translate_api_exception(
            ApiException(status=404, reason="Not Found"), "Pod", "web-1", "default"
        )
        assert error.message == "Pod 'web-1' not found in namespace 'default'"

    def test_other_status_is_base_error(self) -> None:
        """Unmapped statuses keep the reason and resource details."""
        error = KubernetesClient.translate_api_exception(
            ApiException(status=500, reason="Internal Server Error"), "Pod", "web-1", "ns"
        )
        assert type(error) is KubernetesError
        assert str(error) == "Internal Server Error (status: 500) [Pod/web-1 in ns]"

    def test_transport_errors(self) -> None:
        """Unreachable servers and timeouts get their own types."""
        unreachable = KubernetesClient.translate_api_exception(
            MaxRetryError(None, "/api/v1/pods")
        )
        timed_out = KubernetesClient.translate_api_exception(
            ReadTimeoutError(None, "/api/v1/pods", "read timed out")
        )
        assert isinstance(unreachable, KubernetesConnectionError)
        assert isinstance(timed_out, KubernetesTimeoutError)

    def test_kubernetes_error_passes_through(self) -> None:
        """Already-translated errors are returned unchanged."""
        original = KubernetesNotFoundError(resource_type="Pod", resource_name="x")
        assert KubernetesClient.translate_api_exception(original) is original

    def test_unexpected_exception(self) -> None:
        """Anything else becomes a plain KubernetesError with its text."""
        error = KubernetesClient.translate_api_exception(ValueError("boom"))
        assert type(error) is KubernetesError
        assert error.message == "boom"


@pytest.mark.unit
@pytest.mark.kubernetes
class TestRetryDecorator:
    """Test the tenacity retry policy."""

    @patch("kubernetes.config")
    def test_retries_connection_errors(self, mock_config: MagicMock) -> None:
        """Connection errors are retried up to retry_attempts times."""
        client = KubernetesClient(KubernetesConfig(context="c", retry_attempts=2))
        attempts: list[int] = []

        def flaky() -> str:
            attempts.append(1)
            if len(attempts) == 1:
                raise KubernetesConnectionError("down")
            return "ok"

        with patch("time.sleep"):
            result = client.make_retry_decorator()(flaky)()

        assert result == "ok"
        assert len(attempts) == 2

    @patch("kubernetes.config")
    def test_does_not_retry_other_errors(self, mock_config: MagicMock) -> None:
        """API errors are raised immediately."""
        client = KubernetesClient(KubernetesConfig(context="c", retry_attempts=3))
        attempts: list[int] = []

        def missing() -> None:
            attempts.append(1)
            raise KubernetesNotFoundError("gone")

        with pytest.raises(KubernetesNotFoundError):
            client.make_retry_decorator()(missing)()

        assert len(attempts) == 1
