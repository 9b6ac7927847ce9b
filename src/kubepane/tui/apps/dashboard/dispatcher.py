"""Runs load and mutation requests against the resource manager.

``execute`` and ``execute_mutation`` are called on worker threads. They
always return exactly one result event and never raise: backend failures
are reported through the result's ``error`` text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from kubepane.integrations.kubernetes.exceptions import (
    BackendNotInitializedError,
    KubernetesError,
    MetricsUnavailableError,
)
from kubepane.services.kubernetes.resource_manager import DEFAULT_TAIL_LINES
from kubepane.tui.apps.dashboard.events import (
    RESULT_TYPES,
    DeploymentsLoaded,
    LoadKind,
    LoadRequest,
    LoadResult,
    MutationCompleted,
    MutationRequest,
    NamespacesLoaded,
    PodEnvLoaded,
    PodLogsLoaded,
    PodMetricsLoaded,
    PodsLoaded,
    ResourceYamlLoaded,
    ServicesLoaded,
)
from kubepane.tui.apps.dashboard.types import ConfirmAction

if TYPE_CHECKING:
    from kubepane.services.kubernetes.resource_manager import ResourceManager

logger = structlog.get_logger()


class LoadDispatcher:
    """Turns requests into result events using a ResourceManager.

    Args:
        manager: The resource manager, or None when the Kubernetes client
            could not be initialized; every request then fails immediately.
        tail_lines: Number of log lines fetched for the Logs tab.
    """

    def __init__(
        self,
        manager: ResourceManager | None,
        *,
        tail_lines: int = DEFAULT_TAIL_LINES,
    ) -> None:
        self._manager = manager
        self._tail_lines = tail_lines
        self._log = logger.bind(entity="dispatcher")

    @property
    def initialized(self) -> bool:
        return self._manager is not None

    def _require_manager(self) -> ResourceManager:
        if self._manager is None:
            raise BackendNotInitializedError()
        return self._manager

    # =========================================================================
    # Loads
    # =========================================================================

    def execute(self, request: LoadRequest) -> LoadResult:
        """Perform one load and wrap the outcome in its typed result event."""
        try:
            return self._load(request)
        except MetricsUnavailableError as e:
            self._log.debug("metrics_unavailable", name=request.name, namespace=request.namespace)
            return PodMetricsLoaded(request=request, error=str(e), unavailable=True)
        except KubernetesError as e:
            self._log.warning("load_failed", kind=str(request.kind), error=str(e))
            return RESULT_TYPES[request.kind](request=request, error=str(e))
        except Exception as e:
            self._log.exception("load_crashed", kind=str(request.kind))
            return RESULT_TYPES[request.kind](request=request, error=str(e) or type(e).__name__)

    def _load(self, request: LoadRequest) -> LoadResult:
        manager = self._require_manager()
        ns = request.namespace
        kind = request.kind

        if kind is LoadKind.NAMESPACES:
            return NamespacesLoaded(request=request, namespaces=tuple(manager.list_namespaces()))
        if kind is LoadKind.DEPLOYMENTS:
            return DeploymentsLoaded(
                request=request, deployments=tuple(manager.list_deployments(ns))
            )
        if kind is LoadKind.PODS:
            return PodsLoaded(request=request, pods=tuple(manager.list_pods(ns)))
        if kind is LoadKind.SERVICES:
            return ServicesLoaded(request=request, services=tuple(manager.list_services(ns)))

        name = request.name or ""
        if kind is LoadKind.POD_LOGS:
            logs = manager.get_pod_logs(name, ns, tail_lines=self._tail_lines)
            return PodLogsLoaded(request=request, logs=logs)
        if kind is LoadKind.POD_METRICS:
            return PodMetricsLoaded(request=request, metrics=manager.get_pod_metrics(name, ns))
        if kind is LoadKind.POD_ENV:
            return PodEnvLoaded(request=request, env=manager.get_pod_env_vars(name, ns))
        if kind is LoadKind.RESOURCE_YAML:
            resource_kind = str(request.resource_kind or "")
            manifest = manager.get_resource_yaml(resource_kind, name, ns)
            return ResourceYamlLoaded(request=request, yaml=manifest)
        raise ValueError(f"unknown load kind: {kind}")

    # =========================================================================
    # Mutations
    # =========================================================================

    def execute_mutation(self, request: MutationRequest) -> MutationCompleted:
        """Perform a confirmed delete or scale."""
        try:
            manager = self._require_manager()
            if request.action is ConfirmAction.DELETE_POD:
                manager.delete_pod(request.name, request.namespace)
            elif request.action is ConfirmAction.DELETE_DEPLOYMENT:
                manager.delete_deployment(request.name, request.namespace)
            else:
                manager.scale_deployment(
                    request.name, request.namespace, replicas=request.replicas or 0
                )
        except KubernetesError as e:
            self._log.warning("mutation_failed", action=str(request.action), error=str(e))
            return MutationCompleted(request=request, error=str(e))
        except Exception as e:
            self._log.exception("mutation_crashed", action=str(request.action))
            return MutationCompleted(request=request, error=str(e) or type(e).__name__)
        return MutationCompleted(request=request)
