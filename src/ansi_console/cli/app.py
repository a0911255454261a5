"""Typer CLI application."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from ansi_console.errors import ConfigError, InitError


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


def create_app() -> typer.Typer:
    """Create and configure the CLI application."""
    app = typer.Typer(
        name="ansi-console",
        help="Interactive bordered console with scrollback and command history.",
        no_args_is_help=True,
        rich_markup_mode="rich",
    )
    console = Console(stderr=True)

    @app.command()
    def run(
        min_height: Annotated[Optional[int], typer.Option("--min-height", help="Minimum usable terminal rows")] = None,
        min_width: Annotated[Optional[int], typer.Option("--min-width", help="Minimum usable terminal columns")] = None,
        max_lines: Annotated[Optional[int], typer.Option("--max-lines", help="Scrollback lines to retain")] = None,
        log_dir: Annotated[Optional[Path], typer.Option("--log-dir", help="Directory for log files")] = None,
        log_level: Annotated[LogLevel, typer.Option("--log-level", case_sensitive=False, help="Logging level")] = LogLevel.INFO,
    ) -> None:
        """Start the interactive console session."""
        from ansi_console.cli.console.session import run_session
        from ansi_console.config import SessionConfig
        from ansi_console.log import setup_logging

        try:
            config = SessionConfig.from_env(
                min_height=min_height, min_width=min_width, max_lines=max_lines,
            )
        except ConfigError as e:
            console.print(f"[red]Invalid configuration:[/] {e}")
            raise typer.Exit(2)

        setup_logging(str(log_dir) if log_dir else None, log_level.value)

        try:
            run_session(config=config)
        except InitError as e:
            console.print(f"[red]Cannot start console ({e.reason}):[/] {e}")
            raise typer.Exit(1)

    @app.command()
    def check() -> None:
        """Report whether this terminal can host a session."""
        from ansi_console.cli.core.layout import compute_layout
        from ansi_console.cli.core.terminal import Terminal
        from ansi_console.config import SessionConfig

        try:
            config = SessionConfig.from_env()
        except ConfigError as e:
            console.print(f"[red]Invalid configuration:[/] {e}")
            raise typer.Exit(2)

        terminal = Terminal()
        size = terminal.size()
        layout = compute_layout(
            size.rows, size.cols, config.min_height, config.min_width, config.input_height
        )
        console.print(f"[bold]Size:[/]   {size.cols}x{size.rows}")
        console.print(f"[bold]Colour:[/] {terminal.color_system or '(none)'}")
        if layout.ready:
            console.print("[green]Layout fits[/]")
        else:
            for line in layout.notice():
                console.print(f"[yellow]{line}[/]")

        try:
            terminal.check()
        except InitError as e:
            console.print(f"[red]{e.reason}:[/] {e}")
            raise typer.Exit(1)

    return app
