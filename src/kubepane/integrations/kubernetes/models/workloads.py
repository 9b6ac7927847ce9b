"""Pod and deployment display models."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from kubepane.integrations.kubernetes.models.base import K8sEntityBase, _safe_get


class PodInfo(K8sEntityBase):
    """Pod row as shown in the Pods pane."""

    _entity_name: ClassVar[str] = "pod"

    status: str = Field(default="Unknown", description="Pod phase")
    ready: str = Field(default="0/0", description="Ready containers, e.g. '1/2'")
    restarts: int = Field(default=0, description="Total container restarts")

    @property
    def is_running(self) -> bool:
        return self.status == "Running"

    @classmethod
    def from_k8s_object(cls, obj: Any) -> PodInfo:
        """Create from a kubernetes V1Pod object."""
        statuses = _safe_get(obj, "status", "container_statuses") or []
        ready_count = sum(1 for cs in statuses if getattr(cs, "ready", False))
        restarts = sum(getattr(cs, "restart_count", 0) or 0 for cs in statuses)
        return cls(
            name=_safe_get(obj, "metadata", "name", default=""),
            namespace=_safe_get(obj, "metadata", "namespace"),
            status=_safe_get(obj, "status", "phase", default="Unknown"),
            ready=f"{ready_count}/{len(statuses)}",
            restarts=restarts,
        )


class DeploymentInfo(K8sEntityBase):
    """Deployment row as shown in the Deployments pane.

    ``replicas`` is the desired count from the deployment spec; it is the
    base for the scale up/down actions.
    """

    _entity_name: ClassVar[str] = "deployment"

    ready: str = Field(default="0/0", description="Ready/current replicas, e.g. '2/3'")
    up_to_date: int = Field(default=0, description="Updated replicas")
    available: int = Field(default=0, description="Available replicas")
    replicas: int = Field(default=0, description="Desired replicas")

    @property
    def is_available(self) -> bool:
        return self.available >= self.replicas

    @classmethod
    def from_k8s_object(cls, obj: Any) -> DeploymentInfo:
        """Create from a kubernetes V1Deployment object."""
        ready_replicas = _safe_get(obj, "status", "ready_replicas", default=0) or 0
        current = _safe_get(obj, "status", "replicas", default=0) or 0
        return cls(
            name=_safe_get(obj, "metadata", "name", default=""),
            namespace=_safe_get(obj, "metadata", "namespace"),
            ready=f"{ready_replicas}/{current}",
            up_to_date=_safe_get(obj, "status", "updated_replicas", default=0) or 0,
            available=_safe_get(obj, "status", "available_replicas", default=0) or 0,
            replicas=_safe_get(obj, "spec", "replicas", default=0) or 0,
        )
