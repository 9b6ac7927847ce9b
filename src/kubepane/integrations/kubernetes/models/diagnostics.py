"""Per-pod diagnostic models: resource usage and environment variables."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from kubepane.integrations.kubernetes.models.base import K8sEntityBase, _safe_get

MILLICORES_PER_CORE = 1000
MIB = 1024**2
GIB = 1024**3

SECRET_PLACEHOLDER = "<secret>"


# =============================================================================
# Metrics
# =============================================================================


class PodMetrics(K8sEntityBase):
    """Aggregated CPU and memory usage of all containers in a pod."""

    _entity_name: ClassVar[str] = "pod_metrics"

    cpu_millicores: int = Field(default=0, description="CPU usage in millicores")
    memory_bytes: int = Field(default=0, description="Memory usage in bytes")

    @property
    def cpu_display(self) -> str:
        """CPU as ``250m``, or as cores (``1.50``) from one core upwards."""
        if self.cpu_millicores >= MILLICORES_PER_CORE:
            return f"{self.cpu_millicores / MILLICORES_PER_CORE:.2f}"
        return f"{self.cpu_millicores}m"

    @property
    def memory_display(self) -> str:
        """Memory as ``128Mi``, or as ``1.25Gi`` from one GiB upwards."""
        if self.memory_bytes >= GIB:
            return f"{self.memory_bytes / GIB:.2f}Gi"
        return f"{self.memory_bytes // MIB}Mi"

    @classmethod
    def from_metrics_item(cls, item: dict[str, Any]) -> PodMetrics:
        """Create from a ``metrics.k8s.io/v1beta1`` PodMetrics dict."""
        total_cpu = 0
        total_mem = 0
        for container in item.get("containers", []):
            usage = container.get("usage", {})
            total_cpu += parse_cpu(usage.get("cpu", "0"))
            total_mem += parse_memory(usage.get("memory", "0"))
        metadata = item.get("metadata", {})
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace"),
            cpu_millicores=total_cpu,
            memory_bytes=total_mem,
        )


def parse_cpu(value: str) -> int:
    """Parse a Kubernetes CPU quantity to millicores."""
    if not value or value == "0":
        return 0
    value = str(value)
    if value.endswith("n"):
        return int(value[:-1]) // 1_000_000
    if value.endswith("u"):
        return int(value[:-1]) // 1_000
    if value.endswith("m"):
        return int(value[:-1])
    return int(float(value) * MILLICORES_PER_CORE)


_MEMORY_SUFFIXES = {
    "Ki": 1024,
    "Mi": 1024**2,
    "Gi": 1024**3,
    "Ti": 1024**4,
    "k": 1000,
    "M": 1000**2,
    "G": 1000**3,
    "T": 1000**4,
}


def parse_memory(value: str) -> int:
    """Parse a Kubernetes memory quantity to bytes."""
    if not value or value == "0":
        return 0
    value = str(value)
    for suffix, multiplier in _MEMORY_SUFFIXES.items():
        if value.endswith(suffix):
            return int(float(value[: -len(suffix)]) * multiplier)
    return int(value)


# =============================================================================
# Environment variables
# =============================================================================


class EnvVar(BaseModel):
    """A single environment variable as seen in a container spec.

    ``value`` is set for literal values (and masked for secrets); ``source``
    describes where a ``valueFrom``/``envFrom`` value comes from.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    value: str | None = None
    source: str | None = None

    @classmethod
    def from_k8s_object(cls, obj: Any) -> EnvVar:
        """Create from a kubernetes V1EnvVar object."""
        name = getattr(obj, "name", "") or ""
        value_from = getattr(obj, "value_from", None)
        if value_from is None:
            return cls(name=name, value=getattr(obj, "value", None) or "")

        if ref := getattr(value_from, "config_map_key_ref", None):
            return cls(name=name, source=f"ConfigMap: {ref.name} (key: {ref.key})")
        if ref := getattr(value_from, "secret_key_ref", None):
            return cls(
                name=name,
                value=SECRET_PLACEHOLDER,
                source=f"Secret: {ref.name} (key: {ref.key})",
            )
        if ref := getattr(value_from, "field_ref", None):
            return cls(name=name, source=f"FieldRef: {ref.field_path}")
        if ref := getattr(value_from, "resource_field_ref", None):
            return cls(name=name, source=f"ResourceFieldRef: {ref.resource}")
        return cls(name=name)

    @classmethod
    def from_env_from_source(cls, obj: Any) -> EnvVar | None:
        """Create a summary entry for a V1EnvFromSource, if it references anything."""
        if ref := getattr(obj, "config_map_ref", None):
            return cls(
                name=f"(All keys from ConfigMap: {ref.name})",
                source=f"ConfigMap: {ref.name}",
            )
        if ref := getattr(obj, "secret_ref", None):
            return cls(
                name=f"(All keys from Secret: {ref.name})",
                value=SECRET_PLACEHOLDER,
                source=f"Secret: {ref.name}",
            )
        return None


class PodEnvVars(K8sEntityBase):
    """Environment variables of every container in a pod, keyed by container."""

    _entity_name: ClassVar[str] = "pod_env"

    containers: dict[str, list[EnvVar]] = Field(default_factory=dict)

    @classmethod
    def from_k8s_object(cls, obj: Any) -> PodEnvVars:
        """Create from a kubernetes V1Pod object."""
        containers: dict[str, list[EnvVar]] = {}
        for container in _safe_get(obj, "spec", "containers") or []:
            env_vars = [EnvVar.from_k8s_object(e) for e in (container.env or [])]
            for source in container.env_from or []:
                if entry := EnvVar.from_env_from_source(source):
                    env_vars.append(entry)
            containers[container.name] = env_vars
        return cls(
            name=_safe_get(obj, "metadata", "name", default=""),
            namespace=_safe_get(obj, "metadata", "namespace"),
            containers=containers,
        )
