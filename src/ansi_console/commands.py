"""Routing of submitted command lines.

Three tokens are handled here: exit, clear and help. Every other line is
forwarded verbatim to the external command handler, which answers by
appending lines to the output.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Protocol

from ansi_console.config import SessionConfig
from ansi_console.core.output_buffer import OutputBuffer

logger = logging.getLogger(__name__)

OutputSink = Callable[[str], None]


class CommandHandler(Protocol):
    """External command processor."""

    def __call__(self, command: str, output: OutputSink) -> None:
        ...


class ReservedCommand(Enum):
    EXIT = "exit"
    CLEAR = "clear"
    HELP = "help"


def unknown_command(command: str, output: OutputSink) -> None:
    """Fallback handler used when no command processor is attached."""
    output(f"Unknown: '{command}'")


class CommandRouter:
    """Handles reserved tokens and delegates everything else."""

    def __init__(
        self,
        buffer: OutputBuffer,
        stop: Callable[[], None],
        handler: Optional[CommandHandler] = None,
        config: Optional[SessionConfig] = None,
    ) -> None:
        self.buffer = buffer
        self.stop = stop
        self.handler: CommandHandler = handler or unknown_command
        self.config = config or SessionConfig()

    @property
    def help_text(self) -> str:
        c = self.config
        return f"Commands: {c.exit_command}, {c.clear_command}, {c.help_command}. Scroll: PgUp/PgDn"

    def reserved(self, command: str) -> Optional[ReservedCommand]:
        c = self.config
        return {
            c.exit_command: ReservedCommand.EXIT,
            c.clear_command: ReservedCommand.CLEAR,
            c.help_command: ReservedCommand.HELP,
        }.get(command)

    def dispatch(self, command: str) -> Optional[ReservedCommand]:
        """Execute command. Returns the reserved token it matched, if any."""
        token = self.reserved(command)
        if token is ReservedCommand.EXIT:
            logger.info("Exit command received")
            self.stop()
        elif token is ReservedCommand.CLEAR:
            self.buffer.clear()
        elif token is ReservedCommand.HELP:
            self.buffer.append(self.help_text)
        else:
            self._forward(command)
        return token

    def _forward(self, command: str) -> None:
        logger.debug("Forwarding command %r", command)
        try:
            self.handler(command, self.buffer.append)
        except Exception as e:
            # The loop must survive a failing processor
            logger.exception("Command handler failed for %r", command)
            self.buffer.append(f"Error: {e}")
