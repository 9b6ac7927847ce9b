"""Text shown in the Stats, Env, Config and Exec tabs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kubepane.integrations.kubernetes.models.diagnostics import GIB, MILLICORES_PER_CORE

if TYPE_CHECKING:
    from kubepane.integrations.kubernetes.models import PodEnvVars, PodMetrics

BAR_WIDTH = 20
BAR_FILLED = "█"
BAR_EMPTY = "░"

METRICS_SERVER_NOTE = (
    "Note: Metrics require metrics-server to be installed in the cluster.\n"
    "Install with: kubectl apply -f "
    "https://github.com/kubernetes-sigs/metrics-server/releases/latest/download/components.yaml"
)


def usage_bar(percent: int, width: int = BAR_WIDTH) -> str:
    """A ``width``-cell gauge with ``percent`` (clamped to 0-100) filled."""
    percent = min(max(percent, 0), 100)
    filled = percent * width // 100
    return BAR_FILLED * filled + BAR_EMPTY * (width - filled)


def format_stats(metrics: PodMetrics) -> str:
    """Stats tab: CPU against one core and memory against 1 GiB."""
    cpu_percent = min(metrics.cpu_millicores * 100 // MILLICORES_PER_CORE, 100)
    mem_percent = min(metrics.memory_bytes * 100 // GIB, 100)
    return (
        f"Resource Metrics for: {metrics.name}\n"
        "\n"
        f"CPU Usage:    {metrics.cpu_display}  {usage_bar(cpu_percent)} ({cpu_percent}%)\n"
        f"Memory Usage: {metrics.memory_display}  {usage_bar(mem_percent)} ({mem_percent}%)\n"
        "\n"
        "Raw Values:\n"
        f"  CPU:    {metrics.cpu_display}\n"
        f"  Memory: {metrics.memory_display}\n"
        "\n"
        f"Namespace: {metrics.namespace}"
    )


def metrics_unavailable(pod_name: str) -> str:
    return f"Metrics unavailable for {pod_name}\n\n{METRICS_SERVER_NOTE}"


def format_env(env: PodEnvVars) -> str:
    """Env tab: one section per container, sorted by container name."""
    if not env.containers:
        return f"No environment variables found for {env.name}"

    lines = [f"Environment Variables for: {env.name}", f"Namespace: {env.namespace}", ""]
    for container in sorted(env.containers):
        lines += [f"━━━ Container: {container} ━━━", ""]
        env_vars = env.containers[container]
        if not env_vars:
            lines += ["  (no environment variables)", ""]
            continue
        for var in env_vars:
            lines.append(f"  {var.name}")
            if var.value:
                lines.append(f"    = {var.value}")
            if var.source:
                lines.append(f"    → {var.source}")
            lines.append("")
    return "\n".join(lines)


def format_config(kind: str, name: str, namespace: str, manifest: str) -> str:
    return f"YAML Configuration for {kind}: {name} (Namespace: {namespace})\n\n{manifest}"


def format_exec(pod_name: str, namespace: str) -> str:
    return (
        f"Exec into: {pod_name}\n"
        "\n"
        f"$ kubectl exec -it {pod_name} -n {namespace} -- /bin/sh\n"
        "\n"
        "(Run the command above in another terminal for shell access)"
    )
