"""Scrollable text buffer backing one content tab."""

from __future__ import annotations

from dataclasses import dataclass, replace

LINE_SEPARATOR = "\n"


@dataclass(frozen=True)
class ViewportState:
    """Content of one tab plus its scroll position.

    With ``auto_follow`` on, new content scrolls to the bottom so the latest
    lines stay visible (used by the Logs tab).
    """

    content: str = ""
    offset: int = 0
    width: int = 0
    height: int = 0
    auto_follow: bool = False

    @property
    def lines(self) -> list[str]:
        return self.content.split(LINE_SEPARATOR)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def max_offset(self) -> int:
        return max(0, self.line_count - max(0, self.height))

    @property
    def at_bottom(self) -> bool:
        return self.offset >= self.max_offset

    def scroll_percent(self) -> int:
        """How far down the buffer the view is, 0-100."""
        if self.max_offset == 0:
            return 100
        return self.offset * 100 // self.max_offset

    def visible_lines(self) -> list[str]:
        return self.lines[self.offset : self.offset + max(0, self.height)]

    # =========================================================================
    # Content
    # =========================================================================

    def set_content(self, content: str) -> ViewportState:
        """Replace the buffer; scrolls to the bottom when following, else to the top."""
        vp = replace(self, content=content, offset=0)
        return vp.goto_bottom() if vp.auto_follow else vp

    def append_content(self, content: str) -> ViewportState:
        """Add ``content`` after the existing buffer on a new line."""
        joined = self.content + LINE_SEPARATOR + content if self.content else content
        vp = replace(self, content=joined)
        return vp.goto_bottom() if vp.auto_follow else vp

    # =========================================================================
    # Scrolling
    # =========================================================================

    def set_size(self, width: int, height: int) -> ViewportState:
        vp = replace(self, width=max(0, width), height=max(0, height))
        if vp.auto_follow:
            return vp.goto_bottom()
        return replace(vp, offset=min(vp.offset, vp.max_offset))

    def scroll(self, delta: int) -> ViewportState:
        return replace(self, offset=min(max(self.offset + delta, 0), self.max_offset))

    def goto_top(self) -> ViewportState:
        return replace(self, offset=0)

    def goto_bottom(self) -> ViewportState:
        return replace(self, offset=self.max_offset)

    def toggle_auto_follow(self) -> ViewportState:
        vp = replace(self, auto_follow=not self.auto_follow)
        return vp.goto_bottom() if vp.auto_follow else vp

    def handle_key(self, key: str) -> ViewportState:
        """Apply a scroll key; returns ``self`` for keys it ignores."""
        half_page = max(1, self.height // 2)
        if key == "ctrl+d":
            return self.scroll(half_page)
        if key == "ctrl+u":
            return self.scroll(-half_page)
        if key == "g":
            return self.goto_top()
        if key == "G":
            return self.goto_bottom()
        return self
