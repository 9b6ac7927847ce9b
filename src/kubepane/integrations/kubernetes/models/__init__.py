"""Display models for the resources the dashboard lists and inspects."""

from kubepane.integrations.kubernetes.models.diagnostics import (
    EnvVar,
    PodEnvVars,
    PodMetrics,
)
from kubepane.integrations.kubernetes.models.networking import ServiceInfo
from kubepane.integrations.kubernetes.models.workloads import DeploymentInfo, PodInfo

__all__ = [
    "DeploymentInfo",
    "EnvVar",
    "PodEnvVars",
    "PodInfo",
    "PodMetrics",
    "ServiceInfo",
]
