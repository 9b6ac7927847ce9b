"""List items for the four resource panes.

Every item exposes ``title()`` and ``description()``; the list pane renders
rows from those two strings and never looks at the concrete item type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from kubepane.tui.apps.dashboard.types import ResourceKind

if TYPE_CHECKING:
    from kubepane.integrations.kubernetes.models import DeploymentInfo, PodInfo, ServiceInfo

HEALTHY = "●"
UNHEALTHY = "○"


class ResourceItem(Protocol):
    """What a list pane needs from a row."""

    kind: ResourceKind

    def title(self) -> str: ...

    def description(self) -> str: ...


@dataclass(frozen=True)
class NamespaceItem:
    name: str
    kind: ResourceKind = ResourceKind.NAMESPACE

    def title(self) -> str:
        return self.name

    def description(self) -> str:
        return ""


@dataclass(frozen=True)
class DeploymentItem:
    deployment: DeploymentInfo
    kind: ResourceKind = ResourceKind.DEPLOYMENT

    @property
    def replicas(self) -> int:
        return self.deployment.replicas

    def title(self) -> str:
        return self.deployment.name

    def description(self) -> str:
        icon = HEALTHY if self.deployment.is_available else UNHEALTHY
        return f"{icon} Ready: {self.deployment.ready} | Up-to-date: {self.deployment.up_to_date}"


@dataclass(frozen=True)
class PodItem:
    pod: PodInfo
    kind: ResourceKind = ResourceKind.POD

    def title(self) -> str:
        return self.pod.name

    def description(self) -> str:
        icon = HEALTHY if self.pod.is_running else UNHEALTHY
        return f"{icon} {self.pod.status} | {self.pod.ready}"


@dataclass(frozen=True)
class ServiceItem:
    service: ServiceInfo
    kind: ResourceKind = ResourceKind.SERVICE

    def title(self) -> str:
        return self.service.name

    def description(self) -> str:
        svc = self.service
        return f"{svc.type} | {svc.cluster_ip} | {svc.ports}"


def row_text(item: ResourceItem) -> str:
    """Title followed by the description, if there is one."""
    desc = item.description()
    return f"{item.title()} {desc}" if desc else item.title()
