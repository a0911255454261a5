"""Terminal-independent state: scrollback and signal routing."""

from ansi_console.core.output_buffer import OutputBuffer, MAX_LINES
from ansi_console.core.signals import SignalRegistry, default_registry

__all__ = [
    "OutputBuffer",
    "MAX_LINES",
    "SignalRegistry",
    "default_registry",
]
