"""Keyboard input handling with event abstraction."""

from __future__ import annotations

import os
import select
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, Protocol

from ansi_console.cli.core.terminal import TerminalSize


class Key(Enum):
    """Named key constants."""
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ENTER = auto()
    ESCAPE = auto()
    TAB = auto()
    BACKSPACE = auto()
    HOME = auto()
    END = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    DELETE = auto()
    INSERT = auto()
    INTERRUPT = auto()  # Ctrl-C; raw mode stops the tty from raising SIGINT
    RESIZE = auto()     # Synthetic: terminal dimensions changed


@dataclass(frozen=True)
class KeyEvent:
    """Represents a keyboard input event."""
    key: Optional[Key] = None  # Named key if recognized
    char: Optional[str] = None  # Character if printable
    raw: str = ""  # Raw escape sequence

    @property
    def is_char(self) -> bool:
        """Check if this is a printable character."""
        return self.char is not None and self.key is None

    @property
    def is_resize(self) -> bool:
        return self.key == Key.RESIZE


RESIZE_EVENT = KeyEvent(key=Key.RESIZE)


class EventSource(Protocol):
    """Anything the session can poll for one event at a time."""

    def read(self, timeout: float = 0.0) -> Optional[KeyEvent]:
        ...


class InputReader:
    """
    Non-blocking keyboard input reader.

    Uses os.read() to bypass Python's I/O buffering and properly
    handle escape sequences that may arrive split across reads. When given
    a ``size_provider`` it also reports terminal resizes as RESIZE events,
    either on ``notify_resize`` (SIGWINCH) or by noticing a changed size.
    """

    # Escape sequence mappings (without the \x1b prefix)
    SEQUENCES: dict[str, Key] = {
        # Arrow keys (CSI)
        '[A': Key.UP,
        '[B': Key.DOWN,
        '[C': Key.RIGHT,
        '[D': Key.LEFT,
        # Arrow keys (SS3 - application mode)
        'OA': Key.UP,
        'OB': Key.DOWN,
        'OC': Key.RIGHT,
        'OD': Key.LEFT,
        'OH': Key.HOME,
        'OF': Key.END,
        'OM': Key.ENTER,  # Keypad enter
        # Navigation
        '[H': Key.HOME,
        '[F': Key.END,
        '[1~': Key.HOME,
        '[7~': Key.HOME,
        '[4~': Key.END,
        '[8~': Key.END,
        '[5~': Key.PAGE_UP,
        '[6~': Key.PAGE_DOWN,
        '[2~': Key.INSERT,
        '[3~': Key.DELETE,
    }

    SIMPLE_KEYS: dict[str, Key] = {
        '\r': Key.ENTER,
        '\n': Key.ENTER,
        '\t': Key.TAB,
        '\x7f': Key.BACKSPACE,
        '\x08': Key.BACKSPACE,
        '\x03': Key.INTERRUPT,
    }

    def __init__(
        self,
        fd: int,
        size_provider: Optional[Callable[[], TerminalSize]] = None,
    ) -> None:
        self._buffer = ""
        self._fd = fd
        self._size_provider = size_provider
        self._last_size = size_provider() if size_provider else None
        self._resize_pending = False

    def notify_resize(self) -> None:
        """Mark the terminal size as changed (safe from a signal handler)."""
        self._resize_pending = True

    def read(self, timeout: float = 0.0) -> Optional[KeyEvent]:
        """
        Read a single key event.

        Returns None if no input available within timeout; ``timeout=0``
        polls without blocking.
        """
        if self._check_resize():
            return RESIZE_EVENT

        # Process any buffered input first
        if self._buffer:
            return self._process_buffer()

        if not self._has_input(timeout):
            return None

        self._read_available()

        if self._buffer:
            return self._process_buffer()

        return None

    def _check_resize(self) -> bool:
        if self._size_provider is None:
            pending, self._resize_pending = self._resize_pending, False
            return pending
        size = self._size_provider()
        changed = self._resize_pending or size != self._last_size
        self._resize_pending = False
        self._last_size = size
        return changed

    def _read_available(self) -> None:
        """Read all currently available input into buffer using os.read."""
        try:
            data = os.read(self._fd, 1024)
            self._buffer += data.decode('utf-8', errors='replace')
        except (OSError, BlockingIOError):
            pass

        # If buffer is just escape, wait for potential sequence
        if self._buffer == '\x1b':
            self._wait_for_escape_sequence()

    def _wait_for_escape_sequence(self) -> None:
        """Wait briefly for an escape sequence to complete."""
        deadline = time.monotonic() + 0.05

        while time.monotonic() < deadline:
            remaining = deadline - time.monotonic()
            wait_time = min(remaining, 0.01)

            if wait_time <= 0:
                break

            if self._has_input(wait_time):
                try:
                    data = os.read(self._fd, 1024)
                    self._buffer += data.decode('utf-8', errors='replace')
                except (OSError, BlockingIOError):
                    pass

                if len(self._buffer) > 1:
                    rest = self._buffer[1:]
                    if rest and (rest[-1].isalpha() or rest[-1] == '~'):
                        return
                    if rest in self.SEQUENCES:
                        return

    def _process_buffer(self) -> Optional[KeyEvent]:
        """Process buffered input and return next key event."""
        event, consumed = self.decode(self._buffer)
        self._buffer = self._buffer[consumed:]
        return event

    @classmethod
    def decode(cls, data: str) -> tuple[Optional[KeyEvent], int]:
        """Decode the first event in data. Returns (event, characters consumed)."""
        if not data:
            return None, 0

        # Simple keys
        if data[0] in cls.SIMPLE_KEYS:
            return KeyEvent(key=cls.SIMPLE_KEYS[data[0]], raw=data[0]), 1

        # Escape sequence
        if data[0] == '\x1b':
            return cls._parse_escape_sequence(data)

        # Printable single-byte character
        ch = data[0]
        if ' ' <= ch <= '~':
            return KeyEvent(char=ch, raw=ch), 1

        # Unknown control or non-ASCII character - report raw only
        return KeyEvent(raw=ch), 1

    @classmethod
    def _parse_escape_sequence(cls, data: str) -> tuple[KeyEvent, int]:
        """Parse an escape sequence at the start of data."""
        if len(data) == 1:
            return KeyEvent(key=Key.ESCAPE, raw='\x1b'), 1

        rest = data[1:]

        # Find where this sequence ends. The introducer ('[' or 'O') sits
        # at index 0, so a letter there does not terminate the sequence.
        end_idx = 0
        for i, ch in enumerate(rest):
            if ch == '\x1b':
                end_idx = i
                break
            if (ch.isalpha() and i > 0) or ch == '~':
                end_idx = i + 1
                break
            end_idx = i + 1

        if end_idx == 0:
            return KeyEvent(key=Key.ESCAPE, raw='\x1b'), 1

        seq = rest[:end_idx]
        return KeyEvent(key=cls.SEQUENCES.get(seq), raw='\x1b' + seq), 1 + end_idx

    def _has_input(self, timeout: float) -> bool:
        """Check if input is available within timeout."""
        try:
            ready, _, _ = select.select([self._fd], [], [], max(0.0, timeout))
            return bool(ready)
        except (ValueError, OSError):
            return False
