"""The kubepane dashboard: reducer, renderer and Textual runtime."""

from kubepane.tui.apps.dashboard.app import DashboardApp
from kubepane.tui.apps.dashboard.dispatcher import LoadDispatcher
from kubepane.tui.apps.dashboard.reducer import start, update
from kubepane.tui.apps.dashboard.render import render
from kubepane.tui.apps.dashboard.state import AppState, initial_state

__all__ = [
    "AppState",
    "DashboardApp",
    "LoadDispatcher",
    "initial_state",
    "render",
    "start",
    "update",
]
