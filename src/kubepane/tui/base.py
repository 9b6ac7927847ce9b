"""Base class for kubepane widgets.

Usage:
    from kubepane.tui import BaseWidget

    class MyWidget(BaseWidget):
        DEFAULT_CSS = '''
        MyWidget { height: auto; }
        '''
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.widget import Widget

if TYPE_CHECKING:
    from textual.message import Message


class BaseWidget(Widget):
    """Base class for custom TUI widgets.

    Subclasses define DEFAULT_CSS, their rendering, and Message subclasses
    for the events they emit.
    """

    def post_event(self, message: Message) -> None:
        """Post a message event to the app.

        Args:
            message: The message to post.
        """
        self.post_message(message)
