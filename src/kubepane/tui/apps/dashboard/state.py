"""Root state of the dashboard.

AppState is an immutable value. The reducer returns a new AppState for
every event; nothing else ever changes it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from kubepane.tui.apps.dashboard.layout import Geometry, compute_layout
from kubepane.tui.apps.dashboard.list_pane import ListPaneState
from kubepane.tui.apps.dashboard.types import (
    ConfirmAction,
    ResourceCategory,
    ResourceKind,
    Tab,
)
from kubepane.tui.apps.dashboard.viewport import ViewportState

DEFAULT_WIDTH = 120
DEFAULT_HEIGHT = 40

# Placeholders shown before anything is selected
TAB_PLACEHOLDERS: dict[Tab, str] = {
    Tab.LOGS: "Select a pod to view logs",
    Tab.STATS: "Select a pod to view stats",
    Tab.ENV: "Select a pod to view environment variables",
    Tab.CONFIG: "Select a resource to view YAML configuration",
    Tab.TOP: "Top/Resource usage (coming soon)",
    Tab.EXEC: "Select a pod to exec into",
}


@dataclass(frozen=True)
class SelectionContext:
    """The resource the content tabs currently describe.

    ``generation`` increases every time the selection is (re)derived; loads
    carry the generation they were issued for so that late results for an
    older selection can be recognised and dropped.
    """

    name: str
    kind: ResourceKind
    namespace: str
    generation: int = 0

    def same_target(self, other: SelectionContext | None) -> bool:
        return (
            other is not None
            and self.name == other.name
            and self.kind == other.kind
            and self.namespace == other.namespace
        )


@dataclass(frozen=True)
class ConfirmDialog:
    """Pending yes/no confirmation for a mutation."""

    action: ConfirmAction
    target: str
    replicas: int | None = None

    @property
    def message(self) -> str:
        if self.action is ConfirmAction.DELETE_POD:
            return f"Delete pod '{self.target}'?"
        if self.action is ConfirmAction.DELETE_DEPLOYMENT:
            return f"Delete deployment '{self.target}'?"
        return f"Scale '{self.target}' to {self.replicas} replicas?"


@dataclass(frozen=True)
class HelpDialog:
    """Keyboard shortcut overlay."""


Dialog = ConfirmDialog | HelpDialog | None


def _initial_panes() -> tuple[ListPaneState, ...]:
    return tuple(ListPaneState() for _ in ResourceCategory)


def _initial_viewports() -> tuple[ViewportState, ...]:
    return tuple(
        ViewportState(content=TAB_PLACEHOLDERS[tab], auto_follow=tab is Tab.LOGS) for tab in Tab
    )


@dataclass(frozen=True)
class AppState:
    """Everything the dashboard shows, as one immutable value.

    ``port_forwards`` mirrors the keys held by the port-forward registry;
    the registry itself owns the processes.
    """

    namespace: str = "default"
    category: ResourceCategory = ResourceCategory.NAMESPACES
    tab: Tab = Tab.LOGS
    panes: tuple[ListPaneState, ...] = field(default_factory=_initial_panes)
    viewports: tuple[ViewportState, ...] = field(default_factory=_initial_viewports)
    selection: SelectionContext | None = None
    generation: int = 0
    dialog: Dialog = None
    port_forwards: tuple[tuple[str, int], ...] = ()
    geometry: Geometry = field(default_factory=lambda: compute_layout(DEFAULT_WIDTH, DEFAULT_HEIGHT))
    status: str = ""
    error: str | None = None
    refresh_interval: float = 5.0
    local_port: int = 8080
    remote_port: int = 80
    quitting: bool = False

    # =========================================================================
    # Accessors
    # =========================================================================

    def pane(self, category: ResourceCategory | None = None) -> ListPaneState:
        return self.panes[self.category if category is None else category]

    def viewport(self, tab: Tab | None = None) -> ViewportState:
        return self.viewports[self.tab if tab is None else tab]

    # =========================================================================
    # Copy helpers
    # =========================================================================

    def with_pane(self, category: ResourceCategory, pane: ListPaneState) -> AppState:
        panes = list(self.panes)
        panes[category] = pane
        return replace(self, panes=tuple(panes))

    def with_viewport(self, tab: Tab, viewport: ViewportState) -> AppState:
        viewports = list(self.viewports)
        viewports[tab] = viewport
        return replace(self, viewports=tuple(viewports))

    def with_geometry(self, geometry: Geometry) -> AppState:
        """Resize every pane and viewport to ``geometry``."""
        panes = tuple(p.resize(geometry.list_width, geometry.section_height) for p in self.panes)
        viewports = tuple(
            v.set_size(geometry.viewport_width, geometry.viewport_height) for v in self.viewports
        )
        return replace(self, geometry=geometry, panes=panes, viewports=viewports)

    def with_contents(self, contents: dict[Tab, str]) -> AppState:
        """Replace the content of several tabs at once."""
        viewports = list(self.viewports)
        for tab, text in contents.items():
            viewports[tab] = viewports[tab].set_content(text)
        return replace(self, viewports=tuple(viewports))


def initial_state(
    namespace: str = "default",
    *,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    status: str = "",
    refresh_interval: float = 5.0,
    local_port: int = 8080,
    remote_port: int = 80,
) -> AppState:
    """Build the state the dashboard starts with, sized for ``width`` x ``height``."""
    state = AppState(
        namespace=namespace,
        status=status,
        refresh_interval=refresh_interval,
        local_port=local_port,
        remote_port=remote_port,
    )
    return state.with_geometry(compute_layout(width, height))
