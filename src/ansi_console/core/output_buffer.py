"""Bounded, thread-safe scrollback of display lines."""

from __future__ import annotations

import threading
from collections import deque

MAX_LINES = 1000


class OutputBuffer:
    """
    Append-only line log with a scroll offset measured from the tail.

    Offset 0 shows the most recent lines; new output pushes a non-scrolled
    view forward without renumbering. Every read and write takes the same
    lock, held only for the single operation.
    """

    def __init__(self, max_lines: int = MAX_LINES) -> None:
        if max_lines <= 0:
            raise ValueError(f"max_lines must be positive, got {max_lines}")
        self.max_lines = max_lines
        self._lines: deque[str] = deque()
        self._scroll_offset = 0
        self._lock = threading.Lock()

    def append(self, line: str) -> None:
        """Add a line, evicting the oldest while over capacity."""
        with self._lock:
            self._lines.append(line)
            while len(self._lines) > self.max_lines:
                self._lines.popleft()

    def extend(self, lines: list[str]) -> None:
        for line in lines:
            self.append(line)

    def clear(self) -> None:
        """Drop all lines and return to the live tail."""
        with self._lock:
            self._lines.clear()
            self._scroll_offset = 0

    def visible_slice(self, viewport_height: int) -> list[str]:
        """Lines in the visible window, oldest first."""
        with self._lock:
            last = max(0, len(self._lines) - self._scroll_offset)
            first = max(0, last - max(0, viewport_height))
            return [self._lines[i] for i in range(first, last)]

    def scroll_up(self, amount: int, viewport_height: int) -> int:
        """Scroll toward older lines. Returns the new offset."""
        with self._lock:
            limit = max(0, len(self._lines) - viewport_height)
            self._scroll_offset = min(limit, self._scroll_offset + max(0, amount))
            return self._scroll_offset

    def scroll_down(self, amount: int) -> int:
        """Scroll toward the live tail. Returns the new offset."""
        with self._lock:
            self._scroll_offset = max(0, self._scroll_offset - max(0, amount))
            return self._scroll_offset

    def reset_scroll(self) -> None:
        with self._lock:
            self._scroll_offset = 0

    @property
    def scroll_offset(self) -> int:
        with self._lock:
            return self._scroll_offset

    def lines(self) -> list[str]:
        """Snapshot of every retained line, oldest first."""
        with self._lock:
            return list(self._lines)

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)
