"""Output region: the visible window of the scrollback, with paging."""

from __future__ import annotations

from typing import Optional

from ansi_console.cli.core.input import Key, KeyEvent
from ansi_console.cli.core.palette import ColorRole, Painter
from ansi_console.cli.widgets.base import BaseWidget, Rect, clip
from ansi_console.core.output_buffer import OutputBuffer

# Control characters would move the cursor mid-frame
_CONTROL = {i: "?" for i in (*range(0x00, 0x20), 0x7f)}
_CONTROL[ord("\t")] = " "


def displayable(line: str) -> str:
    """Replace control characters so a line occupies one row."""
    return line.translate(_CONTROL)


class OutputLogWidget(BaseWidget):
    """Displays the tail of an OutputBuffer; PgUp/PgDn page through history."""

    def __init__(self, buffer: OutputBuffer, painter: Optional[Painter] = None) -> None:
        super().__init__()
        self.buffer = buffer
        self.painter = painter or Painter.plain()
        self._visible_height: int = 0
        self._visible_width: int = 0

    def resize(self, bounds: Rect) -> None:
        """Record the viewport size used for paging."""
        self._visible_height = bounds.height
        self._visible_width = bounds.width

    @property
    def visible_height(self) -> int:
        return self._visible_height

    def handle_input(self, event: KeyEvent) -> bool:
        if event.key == Key.PAGE_UP:
            self.page_up()
            return True
        elif event.key == Key.PAGE_DOWN:
            self.page_down()
            return True
        return False

    def page_up(self) -> int:
        return self.buffer.scroll_up(self._visible_height, self._visible_height)

    def page_down(self) -> int:
        return self.buffer.scroll_down(self._visible_height)

    def render(self, bounds: Rect) -> list[str]:
        """Render the visible slice, oldest first, clipped and padded to bounds."""
        self.resize(bounds)
        if bounds.empty:
            return []

        # Snapshot under the buffer lock, then draw without holding it
        visible = self.buffer.visible_slice(bounds.height)

        lines = [
            self.painter.paint(ColorRole.NORMAL, clip(displayable(line), bounds.width))
            for line in visible
        ]
        blank = self.painter.paint(ColorRole.NORMAL, " " * bounds.width)
        while len(lines) < bounds.height:
            lines.append(blank)
        return lines
