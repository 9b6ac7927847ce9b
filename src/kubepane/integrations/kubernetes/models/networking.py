"""Service display model."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from kubepane.integrations.kubernetes.models.base import K8sEntityBase, _safe_get


class ServiceInfo(K8sEntityBase):
    """Service row as shown in the Services pane."""

    _entity_name: ClassVar[str] = "service"

    type: str = Field(default="ClusterIP", description="Service type")
    cluster_ip: str = Field(default="", description="Cluster IP")
    external_ip: str = Field(default="<none>", description="External IP or hostname")
    ports: str = Field(default="", description="Ports, e.g. '80/TCP,443/TCP'")

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ServiceInfo:
        """Create from a kubernetes V1Service object."""
        ports = _safe_get(obj, "spec", "ports") or []
        port_str = ",".join(
            f"{getattr(p, 'port', '')}/{getattr(p, 'protocol', None) or 'TCP'}" for p in ports
        )
        return cls(
            name=_safe_get(obj, "metadata", "name", default=""),
            namespace=_safe_get(obj, "metadata", "namespace"),
            type=_safe_get(obj, "spec", "type", default="ClusterIP"),
            cluster_ip=_safe_get(obj, "spec", "cluster_ip", default=""),
            external_ip=_external_ip(obj),
            ports=port_str,
        )


def _external_ip(obj: Any) -> str:
    """Load balancer ingress IP or hostname, then spec.externalIPs, else '<none>'."""
    ingress = _safe_get(obj, "status", "load_balancer", "ingress") or []
    if ingress:
        first = ingress[0]
        return getattr(first, "ip", None) or getattr(first, "hostname", None) or "<none>"
    # The client renamed spec.externalIPs from external_i_ps to external_ips
    external_ips = (
        _safe_get(obj, "spec", "external_ips") or _safe_get(obj, "spec", "external_i_ps") or []
    )
    if external_ips:
        return str(external_ips[0])
    return "<none>"
