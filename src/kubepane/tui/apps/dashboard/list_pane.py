"""A bordered, titled list of resource items with a single cursor."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from rich.cells import cell_len
from rich.text import Text

from kubepane.tui.apps.dashboard.items import row_text
from kubepane.tui.theme import Colors

if TYPE_CHECKING:
    from kubepane.tui.apps.dashboard.items import ResourceItem

ELLIPSIS = "..."
SELECTED_PREFIX = "> "
ROW_PREFIX = "  "
EMPTY_TEXT = "No items"

# key -> cursor delta; None means "page", resolved against the pane height
_STEP_KEYS: dict[str, int] = {"up": -1, "k": -1, "down": 1, "j": 1}
_PAGE_KEYS: dict[str, int] = {"pageup": -1, "pagedown": 1}


def truncate(text: str, max_width: int) -> str:
    """Fit ``text`` into ``max_width`` cells, ending in an ellipsis if cut.

    Text that already fits is returned unchanged. Otherwise trailing
    characters are dropped one at a time until the text plus the ellipsis
    fits; a wide character that leaves one cell over is replaced by a space
    so the result is always exactly ``max_width`` cells.
    """
    if max_width <= 0:
        return ""
    if cell_len(text) <= max_width:
        return text
    if max_width <= len(ELLIPSIS):
        return ELLIPSIS[:max_width]
    while text and cell_len(text + ELLIPSIS) > max_width:
        text = text[:-1]
    pad = max_width - cell_len(text + ELLIPSIS)
    return text + " " * pad + ELLIPSIS


@dataclass(frozen=True)
class ListPaneState:
    """Items of one resource pane plus its cursor.

    ``index`` is None exactly when there are no items; otherwise it is in
    ``[0, len(items))``. ``offset`` is the first visible row.
    """

    items: tuple[ResourceItem, ...] = ()
    index: int | None = None
    offset: int = 0
    height: int = 3
    width: int = 0
    error: str | None = None

    # =========================================================================
    # Queries
    # =========================================================================

    def selected_item(self) -> ResourceItem | None:
        if self.index is None:
            return None
        return self.items[self.index]

    def selected_title(self) -> str | None:
        item = self.selected_item()
        return item.title() if item is not None else None

    def visible_items(self) -> tuple[ResourceItem, ...]:
        return self.items[self.offset : self.offset + max(0, self.height)]

    # =========================================================================
    # Transitions
    # =========================================================================

    def set_items(self, items: tuple[ResourceItem, ...] | list[ResourceItem]) -> ListPaneState:
        """Replace all items, putting the cursor on the first one."""
        items = tuple(items)
        return replace(self, items=items, index=0 if items else None, offset=0, error=None)

    def with_error(self, message: str) -> ListPaneState:
        return replace(self, error=message)

    def select(self, index: int) -> ListPaneState:
        """Move the cursor to ``index``, clamped to the item range."""
        if not self.items:
            return replace(self, index=None, offset=0)
        index = min(max(index, 0), len(self.items) - 1)
        return replace(self, index=index, offset=self._offset_for(index))

    def select_title(self, title: str | None) -> ListPaneState:
        """Move the cursor to the item with ``title``; unchanged if absent."""
        if title is None:
            return self
        for i, item in enumerate(self.items):
            if item.title() == title:
                return self.select(i)
        return self

    def move(self, delta: int) -> ListPaneState:
        if self.index is None:
            return self
        return self.select(self.index + delta)

    def resize(self, width: int, height: int) -> ListPaneState:
        pane = replace(self, width=width, height=height)
        return pane.select(pane.index) if pane.index is not None else pane

    def handle_key(self, key: str) -> ListPaneState:
        """Apply a navigation key; returns ``self`` for keys it ignores."""
        if self.index is None:
            return self
        if key in _STEP_KEYS:
            return self.move(_STEP_KEYS[key])
        if key in _PAGE_KEYS:
            return self.move(_PAGE_KEYS[key] * max(1, self.height))
        if key == "home":
            return self.select(0)
        if key == "end":
            return self.select(len(self.items) - 1)
        return self

    def _offset_for(self, index: int) -> int:
        height = max(1, self.height)
        offset = self.offset
        if index < offset:
            offset = index
        elif index >= offset + height:
            offset = index - height + 1
        return max(0, min(offset, max(0, len(self.items) - height)))

    # =========================================================================
    # Rendering
    # =========================================================================

    def render_rows(self) -> list[Text]:
        """Item rows, at most ``height`` of them, each fitted to ``width``."""
        max_width = self.width - len(ROW_PREFIX)
        if self.error is not None:
            message = truncate(f"Error: {self.error}", max_width)
            return [Text(ROW_PREFIX + message, Colors.ERROR)][: self.height]
        if not self.items:
            return [Text(ROW_PREFIX + truncate(EMPTY_TEXT, max_width), "dim")][: self.height]

        rows: list[Text] = []
        for i, item in enumerate(self.visible_items(), start=self.offset):
            label = row_text(item)
            if max_width > len(ELLIPSIS):
                label = truncate(label, max_width)
            if i == self.index:
                rows.append(Text(SELECTED_PREFIX + label, Colors.SELECTED))
            else:
                rows.append(Text(ROW_PREFIX + label, Colors.ROW))
        return rows

    def render(self, title: str, box_width: int, focused: bool) -> list[Text]:
        """Draw the pane as a rounded box with ``title`` in the top border.

        The box is ``height + 2`` lines tall and ``box_width`` cells wide.
        """
        style = Colors.BORDER_FOCUSED if focused else Colors.BORDER
        right_pad = max(2, box_width - 2 - len(title) - 4)
        top = Text("╭" + "─" * 2 + " ", style)
        top.append(title, "bold" if focused else "")
        top.append(" " + "─" * right_pad + "╮", style)
        lines = [top]

        inner = max(0, box_width - 2)
        rows = self.render_rows()
        rows += [Text("") for _ in range(self.height - len(rows))]
        for row in rows[: self.height]:
            row.truncate(inner, overflow="crop", pad=True)
            line = Text("│", style)
            line.append_text(row)
            line.append("│", style)
            lines.append(line)

        lines.append(Text("╰" + "─" * max(0, box_width - 2) + "╯", style))
        return lines
