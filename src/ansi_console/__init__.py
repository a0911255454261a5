"""
ansi-console: bordered terminal console with scrollback and command history.

Quick Start:
    >>> from ansi_console import ConsoleSession
    >>> def handle(command, output):
    ...     output(f"You said: {command}")
    >>> ConsoleSession(handler=handle).run()

Features:
    - Output region with 1000-line scrollback (PgUp/PgDn)
    - Single-line editor with history recall (Up/Down)
    - Resize handling with a "terminal too small" notice
    - SIGINT/SIGTERM stop the session; the terminal is always restored
"""

__version__ = "0.1.0"

from ansi_console.config import SessionConfig
from ansi_console.core.output_buffer import OutputBuffer
from ansi_console.core.signals import SignalRegistry
from ansi_console.cli.console.session import ConsoleSession, SessionState, run_session
from ansi_console.errors import ConsoleError, ConfigError, InitError

__all__ = [
    "__version__",
    "SessionConfig",
    "OutputBuffer",
    "SignalRegistry",
    "ConsoleSession",
    "SessionState",
    "run_session",
    "ConsoleError",
    "ConfigError",
    "InitError",
]
