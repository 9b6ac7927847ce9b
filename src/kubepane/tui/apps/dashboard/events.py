"""Events consumed by the reducer and effects it asks the runtime to perform.

Events arrive one at a time on the app's message queue: key presses,
resizes, timer ticks, and results posted back by worker threads. Effects
are plain requests; the runtime turns each into a worker, a timer, or a
shutdown.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kubepane.integrations.kubernetes.models import (
        DeploymentInfo,
        PodEnvVars,
        PodInfo,
        PodMetrics,
        ServiceInfo,
    )
    from kubepane.tui.apps.dashboard.types import ConfirmAction, ResourceKind


class LoadKind(StrEnum):
    """What a load request fetches."""

    NAMESPACES = "list-namespaces"
    DEPLOYMENTS = "list-deployments"
    PODS = "list-pods"
    SERVICES = "list-services"
    POD_LOGS = "pod-logs"
    POD_METRICS = "pod-metrics"
    POD_ENV = "pod-env"
    RESOURCE_YAML = "resource-yaml"

    @property
    def is_list(self) -> bool:
        return self in LIST_LOADS


LIST_LOADS = frozenset({LoadKind.NAMESPACES, LoadKind.DEPLOYMENTS, LoadKind.PODS, LoadKind.SERVICES})


# =============================================================================
# Effects
# =============================================================================


@dataclass(frozen=True)
class LoadRequest:
    """Fetch something from the cluster.

    List loads are tagged with the namespace they were issued for; content
    loads also carry the selection generation current at dispatch time.
    """

    kind: LoadKind
    namespace: str = ""
    name: str | None = None
    resource_kind: ResourceKind | None = None
    generation: int | None = None


@dataclass(frozen=True)
class MutationRequest:
    """Run a confirmed delete or scale."""

    action: ConfirmAction
    namespace: str
    name: str
    replicas: int | None = None


@dataclass(frozen=True)
class StartPortForward:
    namespace: str
    pod_name: str
    local_port: int
    remote_port: int


@dataclass(frozen=True)
class StopPortForwards:
    pass


@dataclass(frozen=True)
class ScheduleRefresh:
    """Arm the refresh timer; replaces any timer already pending."""

    delay: float


@dataclass(frozen=True)
class Quit:
    """Tear down port-forwards and exit."""


Effect = LoadRequest | MutationRequest | StartPortForward | StopPortForwards | ScheduleRefresh | Quit


# =============================================================================
# Input events
# =============================================================================


@dataclass(frozen=True)
class KeyPressed:
    """A normalized key name, e.g. ``j``, ``P``, ``tab``, ``ctrl+d``, ``esc``."""

    key: str


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class RefreshTick:
    pass


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class LoadResult:
    """Outcome of a LoadRequest; ``error`` is set when the load failed."""

    request: LoadRequest
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class NamespacesLoaded(LoadResult):
    namespaces: tuple[str, ...] = ()


@dataclass(frozen=True)
class DeploymentsLoaded(LoadResult):
    deployments: tuple[DeploymentInfo, ...] = ()


@dataclass(frozen=True)
class PodsLoaded(LoadResult):
    pods: tuple[PodInfo, ...] = ()


@dataclass(frozen=True)
class ServicesLoaded(LoadResult):
    services: tuple[ServiceInfo, ...] = ()


@dataclass(frozen=True)
class PodLogsLoaded(LoadResult):
    logs: str = ""


@dataclass(frozen=True)
class PodMetricsLoaded(LoadResult):
    metrics: PodMetrics | None = None
    unavailable: bool = False


@dataclass(frozen=True)
class PodEnvLoaded(LoadResult):
    env: PodEnvVars | None = None


@dataclass(frozen=True)
class ResourceYamlLoaded(LoadResult):
    yaml: str = ""


RESULT_TYPES: dict[LoadKind, type[LoadResult]] = {
    LoadKind.NAMESPACES: NamespacesLoaded,
    LoadKind.DEPLOYMENTS: DeploymentsLoaded,
    LoadKind.PODS: PodsLoaded,
    LoadKind.SERVICES: ServicesLoaded,
    LoadKind.POD_LOGS: PodLogsLoaded,
    LoadKind.POD_METRICS: PodMetricsLoaded,
    LoadKind.POD_ENV: PodEnvLoaded,
    LoadKind.RESOURCE_YAML: ResourceYamlLoaded,
}


@dataclass(frozen=True)
class MutationCompleted:
    request: MutationRequest
    error: str | None = None


@dataclass(frozen=True)
class PortForwardStarted:
    request: StartPortForward
    error: str | None = None
    active: tuple[tuple[str, int], ...] = ()


@dataclass(frozen=True)
class PortForwardsStopped:
    count: int = 0
    active: tuple[tuple[str, int], ...] = ()


Event = (
    KeyPressed
    | Resized
    | RefreshTick
    | LoadResult
    | MutationCompleted
    | PortForwardStarted
    | PortForwardsStopped
)
