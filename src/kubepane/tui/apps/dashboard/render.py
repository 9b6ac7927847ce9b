"""Turns an AppState into a frame of styled text lines.

The base frame is title bar, resource panes beside the tabbed content box,
status bar and help hint. Open dialogs are drawn as layers composited on
top of the base frame.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rich.text import Text

from kubepane.tui.apps.dashboard.list_pane import truncate
from kubepane.tui.apps.dashboard.overlays import CONFIRM_PROMPT, HELP_TEXT
from kubepane.tui.apps.dashboard.state import ConfirmDialog, HelpDialog
from kubepane.tui.apps.dashboard.types import ResourceCategory, Tab
from kubepane.tui.theme import Colors

if TYPE_CHECKING:
    from kubepane.tui.apps.dashboard.state import AppState

TITLE = "kubepane - Kubernetes TUI"
HELP_HINT = (
    "?: help • tab/shift-tab: cycle • 1-4: jump • l: logs • s: stats • e: env • "
    "c: config • +/-: scale • p: port-fwd • P: stop • d: delete • r: refresh • q: quit"
)
HELP_HINT_MARGIN = 4
HELP_BOX_WIDTH = 70
CONFIRM_BOX_WIDTH = 50
BOX_PAD_X = 2


@dataclass
class Frame:
    """One screenful: ``height`` lines, each exactly ``width`` cells."""

    width: int
    height: int
    lines: list[Text] = field(default_factory=list)

    @property
    def plain(self) -> str:
        return "\n".join(line.plain for line in self.lines)

    def to_text(self) -> Text:
        return Text("\n").join(self.lines)


@dataclass(frozen=True)
class Layer:
    """Lines to draw over a frame with their top-left corner at (x, y)."""

    lines: tuple[Text, ...]
    x: int = 0
    y: int = 0


def _fit(line: Text, width: int) -> Text:
    line = line.copy()
    line.truncate(max(0, width), overflow="crop", pad=True)
    return line


def composite(frame: Frame, layer: Layer) -> Frame:
    """Draw ``layer`` over ``frame``; anything outside the frame is clipped."""
    lines = list(frame.lines)
    for i, overlay_line in enumerate(layer.lines):
        row = layer.y + i
        if not 0 <= row < len(lines) or layer.x >= frame.width:
            continue
        base = _fit(lines[row], frame.width)
        x = max(0, layer.x)
        piece = overlay_line.copy()
        piece.truncate(frame.width - x, overflow="crop")
        end = x + len(piece.plain)
        lines[row] = base[:x] + piece + base[end:]
    return Frame(width=frame.width, height=frame.height, lines=lines)


# =============================================================================
# Base frame
# =============================================================================


def _left_column(state: AppState) -> list[Text]:
    g = state.geometry
    lines: list[Text] = []
    for category in ResourceCategory:
        lines += state.pane(category).render(
            category.pane_title,
            g.section_box_width,
            focused=category is state.category,
        )
    lines = lines[: g.main_height]
    lines += [Text("") for _ in range(g.main_height - len(lines))]
    return [_fit(line, g.left_width) for line in lines]


def _tab_header(state: AppState) -> Text:
    header = Text()
    for tab in Tab:
        style = Colors.TAB_ACTIVE if tab is state.tab else Colors.TAB
        header.append(f" {tab.label} ", style)
    viewport = state.viewport()
    header.append("  ")
    if state.tab is Tab.LOGS and viewport.auto_follow:
        header.append("[AUTO] ", Colors.TAB_MARKER)
    header.append(f"{viewport.scroll_percent()}% ({viewport.line_count} lines)", "dim")
    return header


def _clean(line: str) -> str:
    return line.replace("\r", "").expandtabs(4)


def _right_box(state: AppState) -> list[Text]:
    g = state.geometry
    height = g.main_height
    if height < 2:
        return [Text("") for _ in range(height)]

    inner = g.right_width
    text_width = max(0, inner - 2)
    body = [Text(""), _tab_header(state), Text("")]
    body += [Text(_clean(line)) for line in state.viewport().visible_lines()]
    body = body[: height - 2]
    body += [Text("") for _ in range(height - 2 - len(body))]

    style = Colors.BORDER
    lines = [Text("╭" + "─" * inner + "╮", style)]
    for row in body:
        line = Text("│ ", style)
        line.append_text(_fit(row, text_width))
        line.append(" │", style)
        lines.append(line)
    lines.append(Text("╰" + "─" * inner + "╯", style))
    return lines


def _status_line(state: AppState) -> Text:
    text = f" Namespace: {state.namespace} | {state.status}"
    if state.port_forwards:
        text += f" | Port-forwards: {len(state.port_forwards)}"
    return Text(text, Colors.STATUS)


def help_hint(width: int) -> str:
    """The one-line key hint, cut with an ellipsis to fit ``width``."""
    return truncate(HELP_HINT, width - HELP_HINT_MARGIN)


def render_base(state: AppState) -> Frame:
    g = state.geometry
    lines = [Text(f" {TITLE}", Colors.TITLE)]
    left = _left_column(state)
    right = _right_box(state)
    for left_line, right_line in zip(left, right, strict=False):
        row = left_line.copy()
        row.append(" ")
        row.append_text(right_line)
        lines.append(row)
    lines.append(_status_line(state))
    lines.append(Text(" " + help_hint(g.width), Colors.HELP_HINT))
    lines = [_fit(line, g.width) for line in lines[: g.height]]
    return Frame(width=g.width, height=g.height, lines=lines)


# =============================================================================
# Overlays
# =============================================================================


def _box(
    rows: list[Text],
    width: int,
    border_style: str,
    *,
    center: bool = False,
) -> tuple[Text, ...]:
    """Rounded box of outer ``width`` with one blank row above and below ``rows``."""
    inner = max(0, width - 2)
    text_width = max(0, inner - 2 * BOX_PAD_X)
    pad = " " * BOX_PAD_X
    lines = [Text("╭" + "─" * inner + "╮", border_style)]
    for row in [Text(""), *rows, Text("")]:
        row = row.copy()
        row.truncate(text_width, overflow="crop")
        if center:
            row.align("center", text_width)
        else:
            row.truncate(text_width, overflow="crop", pad=True)
        line = Text("│" + pad, border_style)
        line.append_text(row)
        line.append(pad + "│", border_style)
        lines.append(line)
    lines.append(Text("╰" + "─" * inner + "╯", border_style))
    return tuple(lines)


def _centered(box: tuple[Text, ...], width: int, frame: Frame) -> Layer:
    x = max(0, (frame.width - width) // 2)
    y = max(0, (frame.height - len(box)) // 2)
    return Layer(lines=box, x=x, y=y)


def render_overlay(state: AppState, frame: Frame) -> Layer | None:
    """The layer for the open dialog, if any."""
    dialog = state.dialog
    if isinstance(dialog, HelpDialog):
        width = min(HELP_BOX_WIDTH, frame.width)
        rows = [Text(line) for line in HELP_TEXT.split("\n")]
        return _centered(_box(rows, width, Colors.HELP_BORDER), width, frame)
    if isinstance(dialog, ConfirmDialog):
        width = min(CONFIRM_BOX_WIDTH, frame.width)
        if dialog.action.is_scale:
            text_style, border = Colors.CAUTION, Colors.CAUTION_BORDER
        else:
            text_style, border = Colors.DANGER, Colors.DANGER_BORDER
        rows = [Text(dialog.message, text_style), Text(""), Text(CONFIRM_PROMPT, Colors.PROMPT)]
        return _centered(_box(rows, width, border, center=True), width, frame)
    return None


def render(state: AppState) -> Frame:
    """Render the full frame for ``state``."""
    frame = render_base(state)
    layer = render_overlay(state, frame)
    return composite(frame, layer) if layer is not None else frame
