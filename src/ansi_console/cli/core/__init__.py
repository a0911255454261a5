"""Core TUI infrastructure - terminal I/O, input handling, layout, colours."""

from ansi_console.cli.core.terminal import Terminal, TerminalSize
from ansi_console.cli.core.input import InputReader, KeyEvent, Key, RESIZE_EVENT
from ansi_console.cli.core.layout import (
    Layout,
    LayoutReady,
    LayoutTooSmall,
    LayoutManager,
    Region,
    compute_layout,
)
from ansi_console.cli.core.palette import ColorRole, Painter, Palette

__all__ = [
    "Terminal",
    "TerminalSize",
    "InputReader",
    "KeyEvent",
    "Key",
    "RESIZE_EVENT",
    "Layout",
    "LayoutReady",
    "LayoutTooSmall",
    "LayoutManager",
    "Region",
    "compute_layout",
    "ColorRole",
    "Painter",
    "Palette",
]
