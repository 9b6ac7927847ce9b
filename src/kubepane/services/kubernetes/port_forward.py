"""Registry of live ``kubectl port-forward`` processes.

Each forward is identified by ``(pod_name, local_port)``. Processes are owned
by the registry until they are stopped explicitly or swept by
:meth:`PortForwardRegistry.stop_all` at shutdown.
"""

from __future__ import annotations

import shutil
import subprocess
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from kubepane.integrations.kubernetes.exceptions import PortForwardError

logger = structlog.get_logger()

STOP_TIMEOUT_SECONDS = 3.0
KILL_TIMEOUT_SECONDS = 2.0


@dataclass(frozen=True, order=True)
class PortForwardKey:
    """Identity of a port-forward: one local port per pod."""

    pod_name: str
    local_port: int

    def __str__(self) -> str:
        return f"{self.pod_name}:{self.local_port}"


@dataclass
class PortForwardHandle:
    """A running port-forward process."""

    key: PortForwardKey
    namespace: str
    remote_port: int
    process: subprocess.Popen[bytes]
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def alive(self) -> bool:
        return self.process.poll() is None

    def stop(self) -> None:
        """Terminate the process, escalating to kill after a grace period."""
        if self.process.poll() is not None:
            return
        self.process.terminate()
        try:
            self.process.wait(timeout=STOP_TIMEOUT_SECONDS)
        except subprocess.TimeoutExpired:
            logger.warning("port_forward_force_kill", key=str(self.key), pid=self.process.pid)
            self.process.kill()
            self.process.wait(timeout=KILL_TIMEOUT_SECONDS)


class PortForwardRegistry:
    """Start, stop and sweep port-forward processes.

    Methods are safe to call from worker threads.
    """

    def __init__(self, kubectl_path: str | None = None) -> None:
        self._kubectl_path = kubectl_path
        self._handles: dict[PortForwardKey, PortForwardHandle] = {}
        self._lock = threading.Lock()
        self._log = logger.bind(entity="port_forward")

    def _find_kubectl(self) -> str:
        if self._kubectl_path:
            return self._kubectl_path
        found = shutil.which("kubectl")
        if not found:
            raise PortForwardError("kubectl not found in PATH")
        return found

    def start(
        self,
        namespace: str,
        pod_name: str,
        local_port: int,
        remote_port: int,
    ) -> PortForwardKey:
        """Start forwarding ``localhost:local_port`` to ``pod_name:remote_port``.

        Args:
            namespace: Namespace of the pod.
            pod_name: Target pod.
            local_port: Local port to listen on.
            remote_port: Port on the pod.

        Returns:
            Key identifying the new forward.

        Raises:
            PortForwardError: If a forward with the same key is active or the
                process could not be spawned.
        """
        key = PortForwardKey(pod_name, local_port)
        with self._lock:
            existing = self._handles.get(key)
            if existing is not None and existing.alive:
                raise PortForwardError(
                    f"port-forward already active: {key}",
                    pod_name=pod_name,
                    local_port=local_port,
                )
            cmd = [
                self._find_kubectl(),
                "port-forward",
                "-n",
                namespace,
                f"pod/{pod_name}",
                f"{local_port}:{remote_port}",
            ]
            self._log.info("starting_port_forward", key=str(key), namespace=namespace)
            try:
                process = subprocess.Popen(
                    cmd,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
            except OSError as e:
                raise PortForwardError(
                    f"failed to start port-forward: {e}",
                    pod_name=pod_name,
                    local_port=local_port,
                ) from e
            self._handles[key] = PortForwardHandle(
                key=key,
                namespace=namespace,
                remote_port=remote_port,
                process=process,
            )
        return key

    def stop_one(self, key: PortForwardKey) -> None:
        """Stop a single forward.

        Raises:
            PortForwardError: If no forward with this key is registered.
        """
        with self._lock:
            handle = self._handles.pop(key, None)
        if handle is None:
            raise PortForwardError(
                f"no port-forward for {key}",
                pod_name=key.pod_name,
                local_port=key.local_port,
            )
        handle.stop()
        self._log.info("stopped_port_forward", key=str(key))

    def stop_all(self) -> int:
        """Stop every registered forward and empty the registry.

        Returns:
            Number of forwards that were stopped.
        """
        with self._lock:
            handles = list(self._handles.values())
            self._handles.clear()
        for handle in handles:
            try:
                handle.stop()
            except (OSError, subprocess.SubprocessError) as e:
                self._log.warning("port_forward_stop_failed", key=str(handle.key), error=str(e))
        if handles:
            self._log.info("stopped_all_port_forwards", count=len(handles))
        return len(handles)

    def active(self) -> list[PortForwardKey]:
        """Keys of forwards whose process is still running, sorted."""
        with self._lock:
            return sorted(k for k, h in self._handles.items() if h.alive)

    def __len__(self) -> int:
        return len(self.active())

    def __contains__(self, key: object) -> bool:
        return key in self.active()
