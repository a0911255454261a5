"""Frame composition: bordered boxes and positioned text, flushed as one write."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ansi_console.cli.core.palette import ColorRole, Painter
from ansi_console.cli.core.terminal import CLEAR_SCREEN, CURSOR_HIDE, CURSOR_SHOW, move_to

if TYPE_CHECKING:
    from ansi_console.cli.core.layout import Region

# Box drawing characters
TOP_LEFT = '┌'
TOP_RIGHT = '┐'
BOTTOM_LEFT = '└'
BOTTOM_RIGHT = '┘'
HORIZONTAL = '─'
VERTICAL = '│'

LABEL_COLUMN = 2


def box_lines(height: int, width: int, label: str = "") -> list[str]:
    """
    Border rows for a height x width box, top row first.

    The label is written into the top border at column 2 as `` label ``.
    Rows between top and bottom contain only the two vertical edges, with
    spaces between them.
    """
    if height <= 0 or width <= 0:
        return []
    if width == 1:
        return [VERTICAL] * height

    inner = width - 2
    top = HORIZONTAL * inner
    if label and inner > LABEL_COLUMN:
        text = f" {label} "[:inner - (LABEL_COLUMN - 1)]
        start = LABEL_COLUMN - 1
        top = top[:start] + text + top[start + len(text):]
    rows = [TOP_LEFT + top + TOP_RIGHT]
    if height == 1:
        return rows
    rows.extend(VERTICAL + ' ' * inner + VERTICAL for _ in range(height - 2))
    rows.append(BOTTOM_LEFT + HORIZONTAL * inner + BOTTOM_RIGHT)
    return rows


class FrameBuilder:
    """Accumulates one frame of screen updates."""

    def __init__(self, painter: Optional[Painter] = None) -> None:
        self.painter = painter or Painter.plain()
        self._parts: list[str] = []
        self._cursor: Optional[tuple[int, int]] = None

    def clear_screen(self) -> None:
        self._parts.append(CLEAR_SCREEN)

    def put(self, row: int, col: int, text: str) -> None:
        """Write already-styled text at (row, col)."""
        self._parts.append(move_to(row, col) + text)

    def put_lines(self, row: int, col: int, lines: list[str]) -> None:
        for offset, line in enumerate(lines):
            self.put(row + offset, col, line)

    def box(self, region: Region) -> None:
        """Draw the region's labelled border."""
        rows = box_lines(region.height, region.width, region.label)
        self.put_lines(
            region.top, region.left,
            [self.painter.paint(ColorRole.BORDER, row) for row in rows],
        )

    def notice(self, lines: list[str], width: int) -> None:
        """Print lines from the top-left corner, one per row."""
        for row, line in enumerate(lines):
            self.put(row, 0, self.painter.paint(ColorRole.NORMAL, line[:max(0, width)]))

    def place_cursor(self, row: int, col: int) -> None:
        """Leave the visible cursor at (row, col) once the frame is drawn."""
        self._cursor = (row, col)

    def compose(self) -> str:
        """The frame as a single string, ending with cursor placement."""
        tail = CURSOR_HIDE if self._cursor is None else move_to(*self._cursor) + CURSOR_SHOW
        return CURSOR_HIDE + ''.join(self._parts) + tail
