"""The dashboard reducer.

``update(state, event)`` returns the next state and the effects the runtime
should perform. It never blocks, never performs I/O and never raises for a
failed load; failures become text in the destination pane or tab, or in the
status line.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from kubepane.tui.apps.dashboard import content
from kubepane.tui.apps.dashboard.events import (
    DeploymentsLoaded,
    KeyPressed,
    LoadKind,
    LoadResult,
    MutationCompleted,
    NamespacesLoaded,
    PodEnvLoaded,
    PodLogsLoaded,
    PodMetricsLoaded,
    PodsLoaded,
    PortForwardsStopped,
    PortForwardStarted,
    RefreshTick,
    Resized,
    ResourceYamlLoaded,
    ScheduleRefresh,
    ServicesLoaded,
)
from kubepane.tui.apps.dashboard.items import (
    DeploymentItem,
    NamespaceItem,
    PodItem,
    ServiceItem,
)
from kubepane.tui.apps.dashboard.layout import compute_layout
from kubepane.tui.apps.dashboard.navigation import (
    ALL_LISTS,
    handle_navigation_key,
    list_loads,
    select_resource,
)
from kubepane.tui.apps.dashboard.overlays import handle_dialog_key
from kubepane.tui.apps.dashboard.state import SelectionContext
from kubepane.tui.apps.dashboard.types import ConfirmAction, ResourceCategory, Tab

if TYPE_CHECKING:
    from kubepane.tui.apps.dashboard.events import Effect, Event
    from kubepane.tui.apps.dashboard.items import ResourceItem
    from kubepane.tui.apps.dashboard.state import AppState

REFRESHING = "Refreshing..."

LIST_LABELS: dict[ResourceCategory, str] = {
    ResourceCategory.NAMESPACES: "namespaces",
    ResourceCategory.DEPLOYMENTS: "deployments",
    ResourceCategory.PODS: "pods",
    ResourceCategory.SERVICES: "services",
}


def start(state: AppState) -> tuple[AppState, list[Effect]]:
    """Effects issued once when the dashboard comes up."""
    return state, [*list_loads(state, ALL_LISTS), ScheduleRefresh(state.refresh_interval)]


def update(state: AppState, event: Event) -> tuple[AppState, list[Effect]]:
    """Compute the next state for one event."""
    if isinstance(event, KeyPressed):
        if state.dialog is not None:
            return handle_dialog_key(state, event.key)
        return handle_navigation_key(state, event.key)
    if isinstance(event, Resized):
        return state.with_geometry(compute_layout(event.width, event.height)), []
    if isinstance(event, RefreshTick):
        return state, [*list_loads(state, ALL_LISTS), ScheduleRefresh(state.refresh_interval)]
    if isinstance(event, LoadResult):
        if event.request.kind.is_list:
            return _apply_list(state, event)
        return _apply_content(state, event), []
    if isinstance(event, MutationCompleted):
        return _apply_mutation(state, event)
    if isinstance(event, PortForwardStarted):
        return _apply_port_forward(state, event), []
    if isinstance(event, PortForwardsStopped):
        return replace(state, port_forwards=event.active, status="Stopped all port-forwards"), []
    return state, []


# =============================================================================
# List loads
# =============================================================================


def _items_for(result: LoadResult) -> tuple[ResourceCategory, tuple[ResourceItem, ...]]:
    if isinstance(result, NamespacesLoaded):
        return ResourceCategory.NAMESPACES, tuple(NamespaceItem(n) for n in result.namespaces)
    if isinstance(result, DeploymentsLoaded):
        return ResourceCategory.DEPLOYMENTS, tuple(DeploymentItem(d) for d in result.deployments)
    if isinstance(result, PodsLoaded):
        return ResourceCategory.PODS, tuple(PodItem(p) for p in result.pods)
    if isinstance(result, ServicesLoaded):
        return ResourceCategory.SERVICES, tuple(ServiceItem(s) for s in result.services)
    raise TypeError(f"not a list result: {type(result).__name__}")


def _apply_list(state: AppState, result: LoadResult) -> tuple[AppState, list[Effect]]:
    """Replace a pane's items wholesale, keeping the cursor on the same item."""
    # Lists issued for a namespace we have since left
    if result.request.kind is not LoadKind.NAMESPACES and result.request.namespace != state.namespace:
        return state, []

    category, items = _items_for(result)
    pane = state.pane(category)
    if result.error is not None:
        status = f"Error loading {LIST_LABELS[category]}: {result.error}"
        new_state = state.with_pane(category, pane.with_error(result.error))
        return replace(new_state, status=status, error=result.error), []

    keep = pane.selected_title()
    if category is ResourceCategory.NAMESPACES and keep is None:
        keep = state.namespace
    new_state = state.with_pane(category, pane.set_items(items).select_title(keep))

    if category is ResourceCategory.PODS and state.status == REFRESHING:
        new_state = replace(
            new_state, status=f"Loaded {len(items)} pods from {state.namespace}"
        )
    return _follow_cursor(new_state, category)


def _follow_cursor(state: AppState, category: ResourceCategory) -> tuple[AppState, list[Effect]]:
    """Re-derive the selection when a reload moved the cursor off it.

    A reload that drops the selected resource leaves the cursor on another
    item; the content tabs then follow the cursor so that they describe the
    same resource the action keys act on. The active tab and status line
    are kept.
    """
    if category is not state.category or category is ResourceCategory.NAMESPACES:
        return state, []
    item = state.pane(category).selected_item()
    if state.selection is None or item is None:
        return state, []
    if SelectionContext(item.title(), item.kind, state.namespace).same_target(state.selection):
        return state, []
    new_state, effects = select_resource(state, item, status=state.status)
    if item.kind is state.selection.kind:
        new_state = replace(new_state, tab=state.tab)
    return new_state, effects


# =============================================================================
# Content loads
# =============================================================================


def _apply_content(state: AppState, result: LoadResult) -> AppState:
    """Write a tab-content result into its viewport if it is still current."""
    selection = state.selection
    if selection is None or result.request.generation != selection.generation:
        return state
    unavailable = isinstance(result, PodMetricsLoaded) and result.unavailable
    if result.error is not None and not unavailable:
        state = replace(state, error=result.error)

    name = selection.name
    if isinstance(result, PodLogsLoaded):
        text = result.logs if result.ok else f"Error: {result.error}"
        return state.with_contents({Tab.LOGS: text})
    if isinstance(result, PodMetricsLoaded):
        if result.ok and result.metrics is not None:
            text = content.format_stats(result.metrics)
        elif result.unavailable:
            text = content.metrics_unavailable(name)
        else:
            text = f"Error loading metrics: {result.error}"
        return state.with_contents({Tab.STATS: text})
    if isinstance(result, PodEnvLoaded):
        if result.ok and result.env is not None:
            text = content.format_env(result.env)
        else:
            text = f"Error loading environment variables: {result.error}"
        return state.with_contents({Tab.ENV: text})
    if isinstance(result, ResourceYamlLoaded):
        if result.ok:
            text = content.format_config(selection.kind, name, selection.namespace, result.yaml)
        else:
            text = f"Error loading YAML: {result.error}"
        return state.with_contents({Tab.CONFIG: text})
    return state


# =============================================================================
# Mutations and port-forwards
# =============================================================================


def _apply_mutation(state: AppState, event: MutationCompleted) -> tuple[AppState, list[Effect]]:
    request = event.request
    if request.action is ConfirmAction.DELETE_POD:
        failed = "Error deleting pod"
        status = f"Deleted pod: {request.name}"
        reload = (LoadKind.PODS,)
    elif request.action is ConfirmAction.DELETE_DEPLOYMENT:
        failed = "Error deleting deployment"
        status = f"Deleted deployment: {request.name}"
        reload = (LoadKind.DEPLOYMENTS,)
    else:
        failed = "Error scaling"
        status = f"Scaled {request.name} to {request.replicas} replicas"
        reload = (LoadKind.DEPLOYMENTS,)
    if event.error is not None:
        return replace(state, status=f"{failed}: {event.error}", error=event.error), []
    return replace(state, status=status), list_loads(state, reload)


def _apply_port_forward(state: AppState, event: PortForwardStarted) -> AppState:
    request = event.request
    if event.error is not None:
        return replace(
            state,
            port_forwards=event.active,
            status=f"Error starting port-forward: {event.error}",
            error=event.error,
        )
    return replace(
        state,
        port_forwards=event.active,
        status=(
            f"Port-forward started: localhost:{request.local_port} -> "
            f"{request.pod_name}:{request.remote_port}"
        ),
    )
