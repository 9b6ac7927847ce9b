"""Pane geometry for a given terminal size.

The left third of the screen holds the four resource panes stacked
vertically; the rest holds the tabbed content box. Geometry is a pure
function of the terminal size.
"""

from __future__ import annotations

from dataclasses import dataclass

SECTION_COUNT = 4
MIN_SECTION_HEIGHT = 3

# title, status and help bars plus the right box border/padding
CHROME_HEIGHT = 6
# chrome plus tab header, spacer and the viewport's own margins
VIEWPORT_CHROME_HEIGHT = 12
RIGHT_PANE_ALLOWANCE = 4
LIST_ALLOWANCE = 4
VIEWPORT_ALLOWANCE = 4
# section border rows (top + bottom)
SECTION_BORDER_ROWS = 2


@dataclass(frozen=True)
class Geometry:
    """Computed sizes for one terminal size."""

    width: int
    height: int
    left_width: int
    right_width: int
    section_height: int
    list_width: int
    viewport_width: int
    viewport_height: int

    @property
    def main_height(self) -> int:
        """Rows between the title bar and the status bar."""
        return max(0, self.height - 3)

    @property
    def section_box_width(self) -> int:
        """Outer width of one bordered resource pane."""
        return max(0, self.left_width - 2)


def compute_layout(width: int, height: int) -> Geometry:
    """Compute pane geometry for a terminal of ``width`` x ``height`` cells.

    Every resource pane gets at least MIN_SECTION_HEIGHT rows, even when the
    terminal is too short to show all four in full.
    """
    width = max(0, width)
    height = max(0, height)
    left_width = width // 3
    right_width = max(0, width - left_width - RIGHT_PANE_ALLOWANCE)
    available = max(0, height - CHROME_HEIGHT)
    section_height = max(
        MIN_SECTION_HEIGHT, available // SECTION_COUNT - SECTION_BORDER_ROWS
    )
    return Geometry(
        width=width,
        height=height,
        left_width=left_width,
        right_width=right_width,
        section_height=section_height,
        list_width=max(0, left_width - LIST_ALLOWANCE),
        viewport_width=max(0, right_width - VIEWPORT_ALLOWANCE),
        viewport_height=max(0, height - VIEWPORT_CHROME_HEIGHT),
    )
