"""Textual runtime for the kubepane dashboard.

The app owns the current AppState and feeds every event through the
reducer. Effects that touch the cluster or spawn processes run on worker
threads and come back as EventPosted messages, so the reducer only ever
runs on the UI thread.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from rich.text import Text
from textual import events, on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.message import Message

from kubepane.integrations.kubernetes.exceptions import PortForwardError
from kubepane.tui.apps.dashboard.events import (
    KeyPressed,
    LoadRequest,
    MutationRequest,
    PortForwardsStopped,
    PortForwardStarted,
    Quit,
    RefreshTick,
    Resized,
    ScheduleRefresh,
    StartPortForward,
    StopPortForwards,
)
from kubepane.tui.apps.dashboard.layout import compute_layout
from kubepane.tui.apps.dashboard.reducer import start, update
from kubepane.tui.apps.dashboard.render import render
from kubepane.tui.apps.dashboard.state import initial_state
from kubepane.tui.base import BaseWidget

if TYPE_CHECKING:
    from textual.timer import Timer

    from kubepane.services.kubernetes.port_forward import PortForwardRegistry
    from kubepane.tui.apps.dashboard.dispatcher import LoadDispatcher
    from kubepane.tui.apps.dashboard.events import Effect, Event
    from kubepane.tui.apps.dashboard.state import AppState

logger = structlog.get_logger()

KEY_ALIASES = {"escape": "esc"}


def normalize_key(key: str, character: str | None) -> str:
    """Map a Textual key event to the key names the reducer understands.

    Printable characters are used as-is, so ``G`` and ``?`` arrive as
    typed; everything else uses Textual's key name.
    """
    if character is not None and len(character) == 1 and character.isprintable():
        return character
    return KEY_ALIASES.get(key, key)


class EventPosted(Message):
    """Carries a reducer event from a worker thread to the app."""

    def __init__(self, event: Event) -> None:
        super().__init__()
        self.event = event


class DashboardView(BaseWidget, can_focus=True):
    """Full-screen widget that draws the current frame and forwards keys."""

    DEFAULT_CSS = """
    DashboardView {
        width: 1fr;
        height: 1fr;
    }
    """

    class KeyInput(Message):
        """A normalized key press."""

        def __init__(self, key: str) -> None:
            super().__init__()
            self.key = key

    def __init__(self) -> None:
        super().__init__(id="dashboard")
        self._frame_text = Text("")

    def show(self, text: Text) -> None:
        self._frame_text = text
        self.refresh()

    def render(self) -> Text:
        return self._frame_text

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.post_event(self.KeyInput(normalize_key(event.key, event.character)))


class DashboardApp(App[None]):
    """Terminal dashboard for one Kubernetes cluster.

    Args:
        dispatcher: Performs loads and mutations on worker threads.
        registry: Owns the kubectl port-forward processes.
        namespace: Namespace selected at startup.
        status: Initial status line message.
        refresh_interval: Seconds between list refreshes.
        local_port: Local port used for new port-forwards.
        remote_port: Pod port used for new port-forwards.
    """

    TITLE = "kubepane"
    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("ctrl+c", "dashboard_key('ctrl+c')", "Quit", show=False, priority=True),
        Binding("tab", "dashboard_key('tab')", show=False, priority=True),
        Binding("shift+tab", "dashboard_key('shift+tab')", show=False, priority=True),
    ]

    def __init__(
        self,
        dispatcher: LoadDispatcher,
        registry: PortForwardRegistry,
        *,
        namespace: str = "default",
        status: str = "",
        refresh_interval: float = 5.0,
        local_port: int = 8080,
        remote_port: int = 80,
    ) -> None:
        super().__init__()
        self._dispatcher = dispatcher
        self._registry = registry
        self._refresh_timer: Timer | None = None
        self._view: DashboardView | None = None
        self.state: AppState = initial_state(
            namespace,
            status=status,
            refresh_interval=refresh_interval,
            local_port=local_port,
            remote_port=remote_port,
        )

    def compose(self) -> ComposeResult:
        self._view = DashboardView()
        yield self._view

    def on_mount(self) -> None:
        """Size the state to the terminal and issue the startup loads."""
        self.query_one(DashboardView).focus()
        self.state, effects = start(
            self.state.with_geometry(compute_layout(self.size.width, self.size.height))
        )
        logger.info("dashboard_started", namespace=self.state.namespace)
        self._run_effects(effects)
        self._redraw()

    def on_unmount(self) -> None:
        stopped = self._registry.stop_all()
        if stopped:
            logger.info("port_forwards_stopped_on_exit", count=stopped)

    # =========================================================================
    # Event intake
    # =========================================================================

    def on_resize(self, event: events.Resize) -> None:
        self._dispatch(Resized(width=event.size.width, height=event.size.height))

    @on(DashboardView.KeyInput)
    def handle_key_input(self, message: DashboardView.KeyInput) -> None:
        self._dispatch(KeyPressed(message.key))

    @on(EventPosted)
    def handle_event_posted(self, message: EventPosted) -> None:
        self._dispatch(message.event)

    def action_dashboard_key(self, key: str) -> None:
        """Route keys claimed by app-level bindings to the reducer."""
        self._dispatch(KeyPressed(key))

    def _on_refresh_timer(self) -> None:
        self._refresh_timer = None
        self._dispatch(RefreshTick())

    def _dispatch(self, event: Event) -> None:
        # Results still arriving from workers after quit start nothing new
        if self.state.quitting:
            return
        self.state, effects = update(self.state, event)
        self._run_effects(effects)
        self._redraw()

    def _redraw(self) -> None:
        if self._view is None:
            return
        text = render(self.state).to_text()
        text.no_wrap = True
        text.overflow = "crop"
        self._view.show(text)

    # =========================================================================
    # Effects
    # =========================================================================

    def _run_effects(self, effects: list[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, LoadRequest):
                self._run_load(effect)
            elif isinstance(effect, MutationRequest):
                self._run_mutation(effect)
            elif isinstance(effect, StartPortForward):
                self._start_port_forward(effect)
            elif isinstance(effect, StopPortForwards):
                self._stop_port_forwards()
            elif isinstance(effect, ScheduleRefresh):
                self._schedule_refresh(effect.delay)
            elif isinstance(effect, Quit):
                self._quit()

    def _schedule_refresh(self, delay: float) -> None:
        if self._refresh_timer is not None:
            self._refresh_timer.stop()
        self._refresh_timer = self.set_timer(delay, self._on_refresh_timer)

    def _quit(self) -> None:
        if self._refresh_timer is not None:
            self._refresh_timer.stop()
            self._refresh_timer = None
        self._registry.stop_all()
        self.exit()

    def _active_forwards(self) -> tuple[tuple[str, int], ...]:
        return tuple((key.pod_name, key.local_port) for key in self._registry.active())

    @work(thread=True, group="loads")
    def _run_load(self, request: LoadRequest) -> None:
        """Perform one load in a background thread."""
        self.post_message(EventPosted(self._dispatcher.execute(request)))

    @work(thread=True, group="mutations")
    def _run_mutation(self, request: MutationRequest) -> None:
        """Perform a confirmed delete or scale in a background thread."""
        self.post_message(EventPosted(self._dispatcher.execute_mutation(request)))

    @work(thread=True, group="port-forwards")
    def _start_port_forward(self, request: StartPortForward) -> None:
        """Spawn a kubectl port-forward in a background thread."""
        error: str | None = None
        try:
            self._registry.start(
                request.namespace,
                request.pod_name,
                request.local_port,
                request.remote_port,
            )
        except PortForwardError as e:
            logger.warning("port_forward_failed", pod=request.pod_name, error=str(e))
            error = str(e)
        self.post_message(
            EventPosted(
                PortForwardStarted(request=request, error=error, active=self._active_forwards())
            )
        )

    @work(thread=True, group="port-forwards")
    def _stop_port_forwards(self) -> None:
        """Stop every running port-forward in a background thread."""
        count = self._registry.stop_all()
        self.post_message(
            EventPosted(PortForwardsStopped(count=count, active=self._active_forwards()))
        )
