"""Theme constants and style utilities.

Usage:
    from kubepane.tui.theme import Colors, Styles

    text = Text("web-0", style=Colors.SELECTED)
    console.print(Styles.error("Invalid configuration"))
"""

from __future__ import annotations


class Colors:
    """Rich style strings used by the dashboard renderer."""

    # Chrome
    TITLE = "bold cyan"
    STATUS = "bold cyan"
    HELP_HINT = "grey58"

    # Borders
    BORDER = "grey35"
    BORDER_FOCUSED = "cyan"

    # List rows
    SELECTED = "bold cyan"
    ROW = ""
    ERROR = "red"

    # Tabs
    TAB = ""
    TAB_ACTIVE = "bold cyan"
    TAB_MARKER = "green"

    # Overlays
    HELP_BORDER = "cyan"
    DANGER = "bold red"
    DANGER_BORDER = "red"
    CAUTION = "bold yellow"
    CAUTION_BORDER = "yellow"
    PROMPT = "grey58"


class Styles:
    """Style helper functions for Rich markup."""

    @staticmethod
    def warning(text: str) -> str:
        """Style text as warning (yellow)."""
        return f"[yellow]{text}[/yellow]"

    @staticmethod
    def error(text: str) -> str:
        """Style text as error (red)."""
        return f"[red]{text}[/red]"
