"""Shared fixtures for dashboard tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from kubepane.integrations.kubernetes.models import DeploymentInfo, PodInfo, ServiceInfo
from kubepane.tui.apps.dashboard.items import (
    DeploymentItem,
    NamespaceItem,
    PodItem,
    ServiceItem,
)
from kubepane.tui.apps.dashboard.state import AppState, initial_state
from kubepane.tui.apps.dashboard.types import ResourceCategory

PodFactory = Callable[..., PodInfo]
DeploymentFactory = Callable[..., DeploymentInfo]


@pytest.fixture
def make_pod() -> PodFactory:
    """Build PodInfo values with sensible defaults."""

    def _make(name: str, status: str = "Running", namespace: str = "default") -> PodInfo:
        return PodInfo(name=name, namespace=namespace, status=status, ready="1/1")

    return _make


@pytest.fixture
def make_deployment() -> DeploymentFactory:
    """Build DeploymentInfo values with sensible defaults."""

    def _make(name: str, replicas: int = 3, namespace: str = "default") -> DeploymentInfo:
        return DeploymentInfo(
            name=name,
            namespace=namespace,
            ready=f"{replicas}/{replicas}",
            up_to_date=replicas,
            available=replicas,
            replicas=replicas,
        )

    return _make


@pytest.fixture
def base_state() -> AppState:
    """Fresh state for the default namespace on a 120x40 terminal."""
    return initial_state("default", width=120, height=40)


@pytest.fixture
def loaded_state(
    base_state: AppState,
    make_pod: PodFactory,
    make_deployment: DeploymentFactory,
) -> AppState:
    """State with every pane populated; twelve pods, one 3-replica deployment."""
    state = base_state
    panes = {
        ResourceCategory.NAMESPACES: [NamespaceItem("default"), NamespaceItem("kube-system")],
        ResourceCategory.DEPLOYMENTS: [
            DeploymentItem(make_deployment("api", 3)),
            DeploymentItem(make_deployment("idle", 0)),
        ],
        ResourceCategory.PODS: [PodItem(make_pod(f"web-{i}")) for i in range(12)],
        ResourceCategory.SERVICES: [
            ServiceItem(
                ServiceInfo(
                    name="web",
                    namespace="default",
                    cluster_ip="10.0.0.1",
                    ports="80/TCP",
                )
            )
        ],
    }
    for category, items in panes.items():
        state = state.with_pane(category, state.pane(category).set_items(items))
    return state
