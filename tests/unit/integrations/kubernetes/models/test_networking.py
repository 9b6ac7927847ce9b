"""Unit tests for the service display model."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from kubernetes.client import (
    V1LoadBalancerIngress,
    V1LoadBalancerStatus,
    V1ObjectMeta,
    V1Service,
    V1ServicePort,
    V1ServiceSpec,
    V1ServiceStatus,
)

from kubepane.integrations.kubernetes.models.networking import ServiceInfo

# Python name of spec.externalIPs differs between client releases
EXTERNAL_IPS_FIELD = next(
    name for name, key in V1ServiceSpec.attribute_map.items() if key == "externalIPs"
)


def _service(
    *,
    type_: str = "ClusterIP",
    ingress: list[V1LoadBalancerIngress] | None = None,
    external_ips: list[str] | None = None,
) -> V1Service:
    return V1Service(
        metadata=V1ObjectMeta(name="web", namespace="default"),
        spec=V1ServiceSpec(
            type=type_,
            cluster_ip="10.0.0.10",
            ports=[
                V1ServicePort(port=80, protocol="TCP"),
                V1ServicePort(port=53, protocol="UDP"),
            ],
            **{EXTERNAL_IPS_FIELD: external_ips},
        ),
        status=V1ServiceStatus(load_balancer=V1LoadBalancerStatus(ingress=ingress)),
    )


@pytest.mark.unit
@pytest.mark.kubernetes
class TestServiceInfo:
    """Test ServiceInfo model."""

    def test_cluster_ip_service(self) -> None:
        """Ports are joined as port/protocol."""
        service = ServiceInfo.from_k8s_object(_service())

        assert service.type == "ClusterIP"
        assert service.cluster_ip == "10.0.0.10"
        assert service.ports == "80/TCP,53/UDP"
        assert service.external_ip == "<none>"

    def test_load_balancer_ip(self) -> None:
        """The first ingress IP is the external address."""
        service = ServiceInfo.from_k8s_object(
            _service(type_="LoadBalancer", ingress=[V1LoadBalancerIngress(ip="1.2.3.4")])
        )
        assert service.external_ip == "1.2.3.4"

    def test_load_balancer_hostname(self) -> None:
        """Hostname ingresses are used when no IP is set."""
        service = ServiceInfo.from_k8s_object(
            _service(
                type_="LoadBalancer",
                ingress=[V1LoadBalancerIngress(hostname="lb.example.com")],
            )
        )
        assert service.external_ip == "lb.example.com"

    def test_external_ips(self) -> None:
        """spec.externalIPs is the fallback."""
        service = ServiceInfo.from_k8s_object(_service(external_ips=["5.6.7.8"]))
        assert service.external_ip == "5.6.7.8"

    @pytest.mark.parametrize("field", ["external_ips", "external_i_ps"])
    def test_external_ips_under_either_client_name(self, field: str) -> None:
        """Both names the client has used for spec.externalIPs are read."""
        obj = SimpleNamespace(
            metadata=SimpleNamespace(name="web", namespace="default"),
            spec=SimpleNamespace(
                type="ClusterIP", cluster_ip="10.0.0.10", ports=[], **{field: ["9.9.9.9"]}
            ),
            status=SimpleNamespace(load_balancer=None),
        )
        assert ServiceInfo.from_k8s_object(obj).external_ip == "9.9.9.9"
