"""Normal-mode key handling: focus, tabs, list cursors and selection.

A selection change is the only thing that issues tab-content loads. Every
new selection gets a fresh generation so results for the previous one are
ignored when they arrive late.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from kubepane.tui.apps.dashboard import content, overlays
from kubepane.tui.apps.dashboard.events import (
    LoadKind,
    LoadRequest,
    Quit,
    StartPortForward,
    StopPortForwards,
)
from kubepane.tui.apps.dashboard.items import PodItem
from kubepane.tui.apps.dashboard.list_pane import ListPaneState
from kubepane.tui.apps.dashboard.state import TAB_PLACEHOLDERS, SelectionContext
from kubepane.tui.apps.dashboard.types import (
    TAB_KEYS,
    ResourceCategory,
    ResourceKind,
    Tab,
)

if TYPE_CHECKING:
    from kubepane.tui.apps.dashboard.events import Effect
    from kubepane.tui.apps.dashboard.items import ResourceItem
    from kubepane.tui.apps.dashboard.state import AppState

QUIT_KEYS = frozenset({"q", "ctrl+c"})
JUMP_KEYS: dict[str, ResourceCategory] = {str(c.value + 1): c for c in ResourceCategory}
SCALE_UP_KEYS = frozenset({"+", "="})
SCALE_DOWN_KEYS = frozenset({"-", "_"})

NAMESPACED_LISTS = (LoadKind.DEPLOYMENTS, LoadKind.PODS, LoadKind.SERVICES)
ALL_LISTS = (LoadKind.NAMESPACES, *NAMESPACED_LISTS)

NOT_A_POD: dict[Tab, str] = {
    Tab.LOGS: "Logs are only available for pods",
    Tab.STATS: "Stats are only available for pods",
    Tab.ENV: "Environment variables are only available for pods",
    Tab.EXEC: "Exec is only available for pods",
}


# =============================================================================
# Load helpers
# =============================================================================


def list_loads(state: AppState, kinds: tuple[LoadKind, ...] = ALL_LISTS) -> list[Effect]:
    return [LoadRequest(kind=kind, namespace=state.namespace) for kind in kinds]


def content_loads(selection: SelectionContext) -> list[Effect]:
    """Tab loads for a selection: everything for pods, YAML otherwise."""
    def load(kind: LoadKind) -> LoadRequest:
        return LoadRequest(
            kind=kind,
            namespace=selection.namespace,
            name=selection.name,
            resource_kind=selection.kind,
            generation=selection.generation,
        )

    if selection.kind is ResourceKind.POD:
        kinds = (LoadKind.POD_LOGS, LoadKind.POD_METRICS, LoadKind.POD_ENV, LoadKind.RESOURCE_YAML)
    else:
        kinds = (LoadKind.RESOURCE_YAML,)
    return [load(kind) for kind in kinds]


# =============================================================================
# Selection
# =============================================================================


def select_resource(
    state: AppState,
    item: ResourceItem,
    *,
    status: str | None = None,
) -> tuple[AppState, list[Effect]]:
    """Make ``item`` the subject of the content tabs and load its content."""
    generation = state.generation + 1
    selection = SelectionContext(
        name=item.title(),
        kind=item.kind,
        namespace=state.namespace,
        generation=generation,
    )
    name = selection.name
    if selection.kind is ResourceKind.POD:
        tab = Tab.LOGS
        contents = {
            Tab.LOGS: f"Loading logs for {name}...",
            Tab.STATS: f"Loading metrics for {name}...",
            Tab.ENV: f"Loading environment variables for {name}...",
            Tab.CONFIG: f"Loading YAML for {name}...",
            Tab.EXEC: content.format_exec(name, state.namespace),
        }
    else:
        tab = Tab.CONFIG
        contents = {**NOT_A_POD, Tab.CONFIG: f"Loading YAML for {name}..."}

    new_state = replace(
        state,
        selection=selection,
        generation=generation,
        tab=tab,
        status=status if status is not None else f"Selected: {name}",
    ).with_contents(contents)
    return new_state, content_loads(selection)


def switch_namespace(state: AppState, namespace: str) -> tuple[AppState, list[Effect]]:
    """Change namespace: clear the namespaced panes, drop the selection, reload."""
    new_state = replace(
        state,
        namespace=namespace,
        selection=None,
        generation=state.generation + 1,
        status=f"Switched to namespace: {namespace}",
    ).with_contents(dict(TAB_PLACEHOLDERS))
    for category in (
        ResourceCategory.DEPLOYMENTS,
        ResourceCategory.PODS,
        ResourceCategory.SERVICES,
    ):
        new_state = new_state.with_pane(category, new_state.pane(category).set_items(()))
    return new_state, list_loads(new_state, NAMESPACED_LISTS)


def _preview(state: AppState, previous: ListPaneState) -> tuple[AppState, list[Effect]]:
    """Follow a cursor move in the active pane."""
    pane = state.pane()
    item = pane.selected_item()
    if item is None or pane.index == previous.index:
        return state, []
    if state.category is ResourceCategory.NAMESPACES:
        if item.title() == state.namespace:
            return state, []
        return switch_namespace(state, item.title())
    candidate = SelectionContext(item.title(), item.kind, state.namespace)
    if candidate.same_target(state.selection):
        return state, []
    return select_resource(state, item)


def enter_category(state: AppState, category: ResourceCategory) -> tuple[AppState, list[Effect]]:
    """Focus ``category``; a pane with a selection becomes the content subject."""
    state = replace(state, category=category)
    item = state.pane().selected_item()
    if category is ResourceCategory.NAMESPACES or item is None:
        return state, []
    return select_resource(state, item)


# =============================================================================
# Keys
# =============================================================================


def _on_enter(state: AppState) -> tuple[AppState, list[Effect]]:
    item = state.pane().selected_item()
    if item is None:
        return state, []
    if state.category is ResourceCategory.NAMESPACES:
        new_state, effects = switch_namespace(state, item.title())
        return replace(new_state, category=ResourceCategory.PODS), effects
    if item.kind is ResourceKind.DEPLOYMENT:
        return select_resource(state, item, status=f"Selected deployment: {item.title()}")
    return select_resource(state, item)


def _on_port_forward(state: AppState) -> tuple[AppState, list[Effect]]:
    item = state.pane().selected_item()
    if state.category is not ResourceCategory.PODS or not isinstance(item, PodItem):
        return state, []
    key = (item.title(), state.local_port)
    if key in state.port_forwards:
        return replace(state, status=f"Port-forward already active: {key[0]}:{key[1]}"), []
    request = StartPortForward(
        namespace=state.namespace,
        pod_name=item.title(),
        local_port=state.local_port,
        remote_port=state.remote_port,
    )
    return state, [request]


def handle_navigation_key(state: AppState, key: str) -> tuple[AppState, list[Effect]]:
    """Handle a key while no dialog is open."""
    if key in QUIT_KEYS:
        return replace(state, quitting=True), [Quit()]
    if key == "?":
        return overlays.open_help(state), []
    if key == "tab":
        return enter_category(state, state.category.next())
    if key == "shift+tab":
        return enter_category(state, state.category.previous())
    if key in JUMP_KEYS:
        return enter_category(state, JUMP_KEYS[key])
    if key in TAB_KEYS:
        return replace(state, tab=TAB_KEYS[key]), []
    if key == "r":
        return replace(state, status="Refreshing..."), list_loads(state)
    if key == "enter":
        return _on_enter(state)
    if key == "d":
        return overlays.open_delete(state), []
    if key in SCALE_UP_KEYS:
        return overlays.open_scale(state, +1), []
    if key in SCALE_DOWN_KEYS:
        return overlays.open_scale(state, -1), []
    if key == "p":
        return _on_port_forward(state)
    if key == "P":
        return state, [StopPortForwards()]
    if key == "a":
        logs = state.viewport(Tab.LOGS).toggle_auto_follow()
        return state.with_viewport(Tab.LOGS, logs), []

    previous = state.pane()
    pane = previous.handle_key(key)
    if pane is not previous:
        return _preview(state.with_pane(state.category, pane), previous)

    viewport = state.viewport().handle_key(key)
    return state.with_viewport(state.tab, viewport), []

