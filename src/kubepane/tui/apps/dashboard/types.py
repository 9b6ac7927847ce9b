"""Enumerations shared by the dashboard modules.

Kept separate from state.py so items, panes and the reducer can import them
without import cycles.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class ResourceCategory(IntEnum):
    """The four resource panes, in display and cycling order."""

    NAMESPACES = 0
    DEPLOYMENTS = 1
    PODS = 2
    SERVICES = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def pane_title(self) -> str:
        """Border title, e.g. ``[3] Pods``."""
        return f"[{self.value + 1}] {self.label}"

    def next(self) -> ResourceCategory:
        return ResourceCategory((self.value + 1) % len(ResourceCategory))

    def previous(self) -> ResourceCategory:
        return ResourceCategory((self.value - 1) % len(ResourceCategory))


class Tab(IntEnum):
    """Content tabs of the right-hand pane."""

    LOGS = 0
    STATS = 1
    ENV = 2
    CONFIG = 3
    TOP = 4
    EXEC = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()


TAB_KEYS: dict[str, Tab] = {
    "l": Tab.LOGS,
    "s": Tab.STATS,
    "e": Tab.ENV,
    "c": Tab.CONFIG,
    "t": Tab.TOP,
    "x": Tab.EXEC,
}


class ResourceKind(StrEnum):
    """Kind of the resource a list item or selection refers to."""

    NAMESPACE = "namespace"
    DEPLOYMENT = "deployment"
    POD = "pod"
    SERVICE = "service"


class ConfirmAction(StrEnum):
    """Mutations that need a yes/no confirmation."""

    DELETE_POD = "delete-pod"
    DELETE_DEPLOYMENT = "delete-deployment"
    SCALE_UP = "scale-up"
    SCALE_DOWN = "scale-down"

    @property
    def is_scale(self) -> bool:
        return self in (ConfirmAction.SCALE_UP, ConfirmAction.SCALE_DOWN)
