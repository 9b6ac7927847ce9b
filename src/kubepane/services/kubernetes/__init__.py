"""Kubernetes service managers."""

from kubepane.services.kubernetes.base import K8sBaseManager
from kubepane.services.kubernetes.port_forward import (
    PortForwardHandle,
    PortForwardKey,
    PortForwardRegistry,
)
from kubepane.services.kubernetes.resource_manager import ResourceManager

__all__ = [
    "K8sBaseManager",
    "PortForwardHandle",
    "PortForwardKey",
    "PortForwardRegistry",
    "ResourceManager",
]
