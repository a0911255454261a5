"""Low-level terminal operations for the console session."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Optional, TextIO

from rich.console import Console

from ansi_console.errors import (
    ColorSupportMissingError,
    RegionSetupError,
    TerminalUnavailableError,
)

logger = logging.getLogger(__name__)

# Escape sequences
ALT_SCREEN_ON = '\x1b[?1049h'
ALT_SCREEN_OFF = '\x1b[?1049l'
KEYPAD_ON = '\x1b[?1h\x1b='    # Application cursor keys + keypad
KEYPAD_OFF = '\x1b[?1l\x1b>'
CURSOR_SHOW = '\x1b[?25h'
CURSOR_HIDE = '\x1b[?25l'
CLEAR_SCREEN = '\x1b[2J\x1b[H'
RESET_ATTRS = '\x1b[0m'
SYNC_BEGIN = '\x1b[?2026h'     # Synchronized update: terminal paints once
SYNC_END = '\x1b[?2026l'
BELL = '\a'


@dataclass(frozen=True)
class TerminalSize:
    """Terminal dimensions."""
    rows: int
    cols: int


def move_to(row: int, col: int) -> str:
    """Cursor positioning sequence (0-indexed arguments)."""
    return f'\x1b[{row + 1};{col + 1}H'


class Terminal:
    """
    Owns the physical terminal for one interactive session.

    ``open`` saves the termios state, enters raw mode and the alternate
    screen and enables keypad mode; ``close`` undoes all of it. Both are
    safe to call repeatedly, and ``close`` only undoes the steps that
    ``open`` actually completed.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        input_fd: Optional[int] = None,
    ) -> None:
        self.stream = stream or sys.stdout
        self._input_fd = input_fd
        self._saved_attrs: Optional[list[Any]] = None
        self._screen_active = False
        self._console = Console(file=self.stream)

    @property
    def input_fd(self) -> int:
        if self._input_fd is None:
            self._input_fd = sys.stdin.fileno()
        return self._input_fd

    @property
    def is_open(self) -> bool:
        return self._saved_attrs is not None or self._screen_active

    @property
    def color_system(self) -> Optional[str]:
        """Colour system reported by rich ('standard', '256', 'truecolor', …)."""
        return self._console.color_system

    def size(self) -> TerminalSize:
        """Get current terminal dimensions."""
        try:
            size = os.get_terminal_size(self.stream.fileno())
            return TerminalSize(size.lines, size.columns)
        except (OSError, ValueError, AttributeError):
            return TerminalSize(24, 80)

    def check(self) -> None:
        """Raise the InitError matching why this terminal cannot host a session."""
        try:
            interactive = os.isatty(self.input_fd) and self._console.is_terminal
        except (OSError, ValueError) as e:
            raise TerminalUnavailableError(f"No usable terminal: {e}") from e
        if not interactive:
            raise TerminalUnavailableError("Standard input and output must be a terminal")
        if self.color_system is None:
            raise ColorSupportMissingError(
                f"Terminal {os.environ.get('TERM', '(unset)')!r} reports no colour support"
            )

    def open(self) -> None:
        """Enter raw, no-echo, keypad mode on the alternate screen."""
        if self.is_open:
            return
        try:
            import termios
            import tty
        except ImportError as e:
            raise TerminalUnavailableError("termios is not available on this platform") from e

        try:
            self._saved_attrs = termios.tcgetattr(self.input_fd)
            tty.setraw(self.input_fd)
        except termios.error as e:
            self._saved_attrs = None
            raise TerminalUnavailableError(f"Cannot enter raw mode: {e}") from e

        try:
            self._screen_active = True
            self._emit(ALT_SCREEN_ON + KEYPAD_ON + CURSOR_SHOW + CLEAR_SCREEN)
        except OSError as e:
            self.close()
            raise RegionSetupError(f"Cannot prepare screen: {e}") from e
        logger.debug("Terminal opened (fd=%s)", self.input_fd)

    def close(self) -> None:
        """Restore line-buffered, echoing, cursor-visible mode."""
        if self._screen_active:
            self._screen_active = False
            try:
                self._emit(KEYPAD_OFF + CURSOR_SHOW + RESET_ATTRS + ALT_SCREEN_OFF)
            except OSError as e:
                logger.warning("Could not write terminal restore sequence: %s", e)
        if self._saved_attrs is not None:
            import termios
            attrs, self._saved_attrs = self._saved_attrs, None
            try:
                termios.tcsetattr(self.input_fd, termios.TCSADRAIN, attrs)
            except termios.error as e:
                logger.warning("Could not restore terminal attributes: %s", e)
        logger.debug("Terminal closed")

    def write_frame(self, frame: str) -> None:
        """Write a composed frame in one synchronized update."""
        self._emit(SYNC_BEGIN + frame + SYNC_END)

    def bell(self) -> None:
        """Audible rejection signal."""
        self._emit(BELL)

    def _emit(self, data: str) -> None:
        self.stream.write(data)
        self.stream.flush()

