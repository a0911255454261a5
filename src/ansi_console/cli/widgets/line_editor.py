"""Single-line command editor with history recall."""

from __future__ import annotations

from typing import Callable, Optional

from ansi_console.cli.core.input import Key, KeyEvent
from ansi_console.cli.core.palette import ColorRole, Painter
from ansi_console.cli.widgets.base import BaseWidget, Rect, clip


class CommandHistory:
    """
    Previously submitted commands plus a recall cursor.

    The cursor is ``None`` when not browsing. Entries are never empty,
    never the exit command, and never equal to the entry just before them.
    """

    def __init__(self, exit_command: str = "exit") -> None:
        self.exit_command = exit_command
        self._entries: list[str] = []
        self._index: Optional[int] = None

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def index(self) -> Optional[int]:
        return self._index

    @property
    def browsing(self) -> bool:
        return self._index is not None

    def record(self, command: str) -> bool:
        """Append command if eligible. Returns True if it was stored."""
        if not command or command == self.exit_command:
            return False
        if self._entries and self._entries[-1] == command:
            return False
        self._entries.append(command)
        return True

    def previous(self) -> Optional[str]:
        """Step back one entry (starting from the newest). None if history is empty."""
        if not self._entries:
            return None
        if self._index is None:
            self._index = len(self._entries) - 1
        elif self._index > 0:
            self._index -= 1
        return self._entries[self._index]

    def next(self) -> Optional[str]:
        """
        Step forward one entry.

        Returns the entry, or "" after stepping past the newest (browsing
        ends). Returns None when not browsing.
        """
        if self._index is None:
            return None
        if self._index < len(self._entries) - 1:
            self._index += 1
            return self._entries[self._index]
        self._index = None
        return ""

    def reset(self) -> None:
        self._index = None

    def __len__(self) -> int:
        return len(self._entries)


class LineEditorWidget(BaseWidget):
    """
    Edit buffer for the input region.

    Keyboard:
        Printable     Insert at cursor
        Backspace     Delete before cursor
        Delete        Delete at cursor
        ←/→ Home/End  Move cursor
        ↑/↓           Recall history
        Enter         Submit (ignored when the line is empty)

    Boundary operations (backspace at column 0, recall past either end)
    are consumed as no-ops. ``handle_input`` returns False only for keys it
    does not understand and for submitting an empty line.
    """

    def __init__(
        self,
        exit_command: str = "exit",
        painter: Optional[Painter] = None,
    ) -> None:
        super().__init__()
        self.painter = painter or Painter.plain()
        self.history = CommandHistory(exit_command)
        self._text: str = ""
        self._cursor: int = 0
        self._on_submit: Callable[[str], None] | None = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    def on_submit(self, callback: Callable[[str], None] | None) -> None:
        """Register callback receiving each submitted command."""
        self._on_submit = callback

    def set_text(self, text: str) -> None:
        """Replace the buffer and put the cursor at its end."""
        self._text = text
        self._cursor = len(text)

    def clear(self) -> None:
        self._text = ""
        self._cursor = 0

    # -------------------------------------------------------------------------
    # Input Handling
    # -------------------------------------------------------------------------

    def handle_input(self, event: KeyEvent) -> bool:
        """Apply one key event. Returns True if the event was consumed."""
        if event.is_char and event.char is not None:
            self.insert(event.char)
            return True

        if event.key == Key.BACKSPACE:
            self.backspace()
        elif event.key == Key.DELETE:
            self.delete_forward()
        elif event.key == Key.LEFT:
            self._set_cursor(self._cursor - 1)
        elif event.key == Key.RIGHT:
            self._set_cursor(self._cursor + 1)
        elif event.key == Key.HOME:
            self._set_cursor(0)
        elif event.key == Key.END:
            self._set_cursor(len(self._text))
        elif event.key == Key.UP:
            self.history_previous()
        elif event.key == Key.DOWN:
            self.history_next()
        elif event.key == Key.ENTER:
            return self.submit() is not None
        else:
            return False
        return True

    def insert(self, ch: str) -> None:
        """Insert a single printable character at the cursor."""
        self._text = self._text[:self._cursor] + ch + self._text[self._cursor:]
        self._cursor += len(ch)

    def backspace(self) -> None:
        if self._cursor > 0:
            self._text = self._text[:self._cursor - 1] + self._text[self._cursor:]
            self._cursor -= 1

    def delete_forward(self) -> None:
        if self._cursor < len(self._text):
            self._text = self._text[:self._cursor] + self._text[self._cursor + 1:]

    def history_previous(self) -> None:
        entry = self.history.previous()
        if entry is not None:
            self.set_text(entry)

    def history_next(self) -> None:
        entry = self.history.next()
        if entry is not None:
            self.set_text(entry)

    def submit(self) -> Optional[str]:
        """
        Submit the current line.

        Fires the submit callback, records history, and resets the buffer
        and recall cursor. Returns the command, or None for an empty line.
        """
        command = self._text
        if not command:
            return None
        if self._on_submit:
            self._on_submit(command)
        self.history.record(command)
        self.clear()
        self.history.reset()
        return command

    def _set_cursor(self, pos: int) -> None:
        self._cursor = max(0, min(len(self._text), pos))

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def cursor_column(self, width: int) -> int:
        """Screen column of the cursor within an interior of ``width`` cells."""
        return min(self._cursor, max(0, width - 1))

    def render(self, bounds: Rect) -> list[str]:
        """First row shows the buffer; remaining rows are blank."""
        if bounds.empty:
            return []
        lines = [self.painter.paint(ColorRole.INPUT, clip(self._text, bounds.width))]
        blank = self.painter.paint(ColorRole.NORMAL, " " * bounds.width)
        while len(lines) < bounds.height:
            lines.append(blank)
        return lines
