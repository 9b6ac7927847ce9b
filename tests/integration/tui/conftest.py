"""Shared fixtures for TUI integration tests.

The dashboard runs headless against a mocked resource manager and a mocked
port-forward registry, so no cluster or kubectl is needed.
"""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from kubepane.integrations.kubernetes.models import (
    DeploymentInfo,
    PodEnvVars,
    PodInfo,
    PodMetrics,
    ServiceInfo,
)
from kubepane.tui.apps.dashboard import DashboardApp, LoadDispatcher

AppFactory = Callable[..., DashboardApp]


@pytest.fixture
def manager() -> MagicMock:
    """Resource manager serving a small two-namespace cluster."""
    mock = MagicMock()
    mock.list_namespaces.return_value = ["default", "kube-system"]
    mock.list_deployments.return_value = [
        DeploymentInfo(
            name="api",
            namespace="default",
            ready="3/3",
            up_to_date=3,
            available=3,
            replicas=3,
        )
    ]
    mock.list_pods.return_value = [
        PodInfo(name=f"web-{i}", namespace="default", status="Running", ready="1/1")
        for i in range(3)
    ]
    mock.list_services.return_value = [
        ServiceInfo(name="web", namespace="default", cluster_ip="10.0.0.1", ports="80/TCP")
    ]
    mock.get_pod_logs.side_effect = lambda name, ns, **_: f"hello from {name}"
    mock.get_pod_metrics.side_effect = lambda name, ns: PodMetrics(
        name=name, namespace=ns, cpu_millicores=100, memory_bytes=64 * 1024**2
    )
    mock.get_pod_env_vars.side_effect = lambda name, ns: PodEnvVars(name=name, namespace=ns)
    mock.get_resource_yaml.side_effect = lambda kind, name, ns: f"kind: {kind}\nname: {name}\n"
    return mock


@pytest.fixture
def registry() -> MagicMock:
    """Port-forward registry with no running processes."""
    mock = MagicMock()
    mock.stop_all.return_value = 0
    mock.active.return_value = []
    return mock


@pytest.fixture
def app_factory(manager: MagicMock, registry: MagicMock) -> AppFactory:
    """Build a DashboardApp wired to the mocks.

    Pass ``manager=None`` to simulate a client that failed to initialize.
    """

    def _create(
        *,
        manager_override: MagicMock | None = manager,
        status: str = "✓ K8s connected",
    ) -> DashboardApp:
        return DashboardApp(
            LoadDispatcher(manager_override),
            registry,
            namespace="default",
            status=status,
            refresh_interval=60.0,
        )

    return _create
