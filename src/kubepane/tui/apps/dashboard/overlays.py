"""Help screen and confirmation dialog.

While a dialog is open it receives every key. The help screen closes on
``?``, ``q`` or ``esc``; the confirmation dialog runs its action on
``y``/``Y`` and cancels on ``n``/``N``/``esc``/``q``. All other keys are
swallowed.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from kubepane.tui.apps.dashboard.events import MutationRequest
from kubepane.tui.apps.dashboard.items import DeploymentItem, PodItem
from kubepane.tui.apps.dashboard.state import ConfirmDialog, HelpDialog
from kubepane.tui.apps.dashboard.types import ConfirmAction, ResourceCategory

if TYPE_CHECKING:
    from kubepane.tui.apps.dashboard.events import Effect
    from kubepane.tui.apps.dashboard.state import AppState

CONFIRM_KEYS = frozenset({"y", "Y"})
CANCEL_KEYS = frozenset({"n", "N", "esc", "q"})
HELP_CLOSE_KEYS = frozenset({"?", "q", "esc"})

CONFIRM_PROMPT = "[Y] Yes  [N] No"

HELP_TEXT = """\
KUBEPANE - KEYBOARD SHORTCUTS

NAVIGATION
  tab / shift+tab    Cycle through sections
  1-4                Jump to section (1:Namespaces 2:Deployments 3:Pods 4:Services)
  j / down           Move down in list
  k / up             Move up in list
  pgup / pgdn        Page up / down in list
  home / end         First / last item
  enter              Select item (namespace: switch namespace)

TABS (Right Panel)
  l                  Logs tab
  s                  Stats tab (resource metrics)
  e                  Environment variables tab
  c                  Config tab (YAML view)
  t                  Top tab
  x                  Exec tab
  ctrl+d / ctrl+u    Scroll half a page down / up
  g / G              Scroll to top / bottom
  a                  Toggle log auto-follow

ACTIONS
  +                  Scale deployment up (increase replicas)
  -                  Scale deployment down (decrease replicas)
  p                  Start port-forward (pod -> localhost)
  P                  Stop all port-forwards
  d                  Delete selected resource (pod/deployment)
  r                  Refresh all lists

GENERAL
  ?                  Toggle this help screen
  q / ctrl+c         Quit application
  esc                Close dialog/help

Press ? or q to close this help screen"""


def open_help(state: AppState) -> AppState:
    return replace(state, dialog=HelpDialog())


def open_delete(state: AppState) -> AppState:
    """Ask to delete the selected pod or deployment; no-op elsewhere."""
    item = state.pane().selected_item()
    if state.category is ResourceCategory.PODS and isinstance(item, PodItem):
        return replace(state, dialog=ConfirmDialog(ConfirmAction.DELETE_POD, item.title()))
    if state.category is ResourceCategory.DEPLOYMENTS and isinstance(item, DeploymentItem):
        return replace(state, dialog=ConfirmDialog(ConfirmAction.DELETE_DEPLOYMENT, item.title()))
    return state


def open_scale(state: AppState, delta: int) -> AppState:
    """Ask to scale the selected deployment by ``delta`` (+1 or -1).

    Scaling down is refused when the deployment is already at zero.
    """
    item = state.pane().selected_item()
    if state.category is not ResourceCategory.DEPLOYMENTS or not isinstance(item, DeploymentItem):
        return state
    target = item.replicas + delta
    if target < 0:
        return replace(state, status=f"{item.title()} is already scaled to 0 replicas")
    action = ConfirmAction.SCALE_UP if delta > 0 else ConfirmAction.SCALE_DOWN
    return replace(state, dialog=ConfirmDialog(action, item.title(), target))


def handle_dialog_key(state: AppState, key: str) -> tuple[AppState, list[Effect]]:
    """Route a key to whichever dialog is open."""
    dialog = state.dialog
    if isinstance(dialog, HelpDialog):
        if key in HELP_CLOSE_KEYS:
            return replace(state, dialog=None), []
        return state, []

    if isinstance(dialog, ConfirmDialog):
        if key in CONFIRM_KEYS:
            request = MutationRequest(
                action=dialog.action,
                namespace=state.namespace,
                name=dialog.target,
                replicas=dialog.replicas,
            )
            return replace(state, dialog=None), [request]
        if key in CANCEL_KEYS:
            return replace(state, dialog=None, status="Action cancelled"), []
    return state, []
