"""Terminal user interface for kubepane."""

from kubepane.tui.base import BaseWidget

__all__ = ["BaseWidget"]
