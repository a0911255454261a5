"""Interactive console session: owns the terminal and runs the main loop."""

from __future__ import annotations

import atexit
import logging
import signal
import threading
import time
from enum import Enum
from typing import Any, Optional

from ansi_console.cli.core.input import EventSource, InputReader, Key, KeyEvent
from ansi_console.cli.core.layout import LayoutManager, LayoutReady, LayoutTooSmall
from ansi_console.cli.core.palette import Painter
from ansi_console.cli.core.terminal import Terminal
from ansi_console.cli.widgets.frame import FrameBuilder
from ansi_console.cli.widgets.line_editor import LineEditorWidget
from ansi_console.cli.widgets.output_log import OutputLogWidget
from ansi_console.commands import CommandHandler, CommandRouter
from ansi_console.config import SessionConfig
from ansi_console.core.output_buffer import OutputBuffer
from ansi_console.core.signals import SignalRegistry, default_registry, signal_name
from ansi_console.errors import InitError, RegionSetupError

logger = logging.getLogger(__name__)

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)
RESIZE_SIGNAL: Optional[int] = getattr(signal, "SIGWINCH", None)


class SessionState(Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    STOPPING = "stopping"
    TERMINATED = "terminated"


class ConsoleSession:
    """
    Terminal session controller.

    Construction takes over the terminal (raw mode, alternate screen),
    computes the initial layout and binds SIGINT/SIGTERM to ``stop``. If
    any step fails, whatever was already done is undone and the matching
    InitError propagates. ``run`` polls one event per iteration, renders a
    frame, and pauses ``config.frame_interval`` seconds until stopped;
    teardown then happens exactly once on the thread that called ``run``.

    ``stop`` only clears the run flag, so it is safe from signal handlers
    and other threads. Sessions cannot be copied; ``transfer`` moves one
    into a new controller.
    """

    READY_MESSAGE = "Console UI Ready. Type 'help' or 'exit'."
    RESIZED_MESSAGE = "Terminal resized to usable dimensions."

    def __init__(
        self,
        terminal: Optional[Terminal] = None,
        *,
        handler: Optional[CommandHandler] = None,
        config: Optional[SessionConfig] = None,
        events: Optional[EventSource] = None,
        signals: Optional[SignalRegistry] = None,
        install_signals: bool = True,
    ) -> None:
        self.config = (config or SessionConfig()).validate()
        self.terminal = terminal or Terminal()
        self.signals = signals or default_registry
        self.state = SessionState.INITIALIZING

        self._running = True
        self._torn_down = False
        self._teardown_lock = threading.Lock()
        self._needs_clear = True
        self._last_frame: Optional[str] = None
        self._bound: list[int] = []
        self._installed: list[int] = []
        self._install_signals = install_signals

        self.buffer = OutputBuffer(self.config.max_lines)
        self.layout = LayoutManager(
            self.config.min_height, self.config.min_width, self.config.input_height
        )
        self.painter = Painter.plain()
        self.output_log = OutputLogWidget(self.buffer, self.painter)
        self.editor = LineEditorWidget(self.config.exit_command, self.painter)
        self.editor.on_submit(self._on_submit)
        self.router = CommandRouter(self.buffer, self.stop, handler, self.config)
        self.events: Optional[EventSource] = events

        try:
            self._initialize()
        except InitError as e:
            logger.error("Session initialisation failed (%s): %s", e.reason, e)
            self.close()
            raise

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def _initialize(self) -> None:
        self.terminal.check()
        self.painter = Painter.for_terminal(self.config.palette, self.terminal.color_system)
        self.output_log.painter = self.painter
        self.editor.painter = self.painter

        self.terminal.open()
        atexit.register(self.close)

        size = self.terminal.size()
        self._apply_layout(size.rows, size.cols)
        logger.info(
            "Session started at %dx%d (%s colour) with %s",
            size.cols, size.rows, self.terminal.color_system, self.config.to_dict(),
        )

        if self.events is None:
            self.events = InputReader(self.terminal.input_fd, size_provider=self.terminal.size)

        self._bind_signals()

        try:
            self._render()
        except OSError as e:
            raise RegionSetupError(f"Cannot draw initial screen: {e}") from e

    def _bind_signals(self) -> None:
        for signum in STOP_SIGNALS:
            self.signals.register(signum, self.stop)
            self._bound.append(signum)
        notify = getattr(self.events, "notify_resize", None)
        if RESIZE_SIGNAL is not None and notify is not None:
            self.signals.register(RESIZE_SIGNAL, notify)
            self._bound.append(RESIZE_SIGNAL)
        if self._install_signals:
            for signum in self._bound:
                if self.signals.install(signum):
                    self._installed.append(signum)

    def _unbind_signals(self) -> None:
        for signum in self._installed:
            self.signals.uninstall(signum)
        for signum in self._bound:
            self.signals.unregister(signum)
        self._installed = []
        self._bound = []

    def stop(self) -> None:
        """Request the loop to exit. Idempotent; only writes the run flag."""
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def run(self) -> None:
        """Run until stopped, then tear down."""
        if self.state is not SessionState.INITIALIZING:
            return
        self.state = SessionState.RUNNING
        if self._running and self.layout.ready:
            self.post(self.READY_MESSAGE)
        try:
            while self._running:
                self.step()
                if self._running:
                    time.sleep(self.config.frame_interval)
            logger.info("Stop requested, leaving main loop")
        finally:
            self.close()

    def close(self) -> None:
        """Restore the terminal. Runs once; later calls do nothing."""
        with self._teardown_lock:
            if self._torn_down:
                return
            self._torn_down = True

        self._running = False
        self.state = SessionState.STOPPING
        try:
            self._unbind_signals()
            self.layout.release()
            self.terminal.close()
        finally:
            atexit.unregister(self.close)
            self.state = SessionState.TERMINATED
            logger.info("Session terminated")

    def __enter__(self) -> ConsoleSession:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __copy__(self) -> ConsoleSession:
        raise TypeError("ConsoleSession owns the terminal and cannot be copied")

    def __deepcopy__(self, memo: dict[int, Any]) -> ConsoleSession:
        raise TypeError("ConsoleSession owns the terminal and cannot be copied")

    def transfer(self) -> ConsoleSession:
        """
        Move this session into a new controller.

        Signal bindings, exit hook and callbacks follow the new object in
        one step; this one is left terminated and owning nothing, so
        closing it is harmless.
        """
        moved = object.__new__(type(self))
        moved.__dict__.update(self.__dict__)
        moved._teardown_lock = threading.Lock()

        moved.editor.on_submit(moved._on_submit)
        moved.router.stop = moved.stop
        callbacks = {signum: moved.stop for signum in moved._bound if signum in STOP_SIGNALS}
        self.signals.replace_all(callbacks)
        if not self._torn_down:
            atexit.unregister(self.close)
            atexit.register(moved.close)

        self._neutralize()
        return moved

    def _neutralize(self) -> None:
        self._running = False
        self._torn_down = True
        self._bound = []
        self._installed = []
        self.state = SessionState.TERMINATED
        self.terminal = None  # type: ignore[assignment]
        self.events = None

    # -------------------------------------------------------------------------
    # Main loop
    # -------------------------------------------------------------------------

    def step(self) -> None:
        """One loop iteration: handle at most one event, then redraw."""
        event = self.events.read(0.0) if self.events is not None else None
        if event is not None:
            self.handle_event(event)
        if self._running:
            self._render()

    def handle_event(self, event: KeyEvent) -> None:
        if event.is_resize:
            self._handle_resize()
            return

        if event.key == Key.INTERRUPT:
            # Same path as an OS-delivered SIGINT
            if not self.signals.dispatch(signal.SIGINT):
                self.stop()
            return

        if not self.layout.ready:
            self.terminal.bell()
            return

        if self.output_log.handle_input(event):
            return
        if not self.editor.handle_input(event):
            self.terminal.bell()

    def post(self, line: str) -> None:
        """Append a line to the output. Safe from any thread."""
        self.buffer.append(line)

    def _on_submit(self, command: str) -> None:
        self.buffer.append(f"{self.config.prompt_prefix}{command}")
        self.router.dispatch(command)
        self.buffer.reset_scroll()

    def _handle_resize(self) -> None:
        size = self.terminal.size()
        was_ready = self.layout.ready
        self._apply_layout(size.rows, size.cols)
        if not was_ready and self.layout.ready:
            self.post(self.RESIZED_MESSAGE)

    def _apply_layout(self, height: int, width: int) -> None:
        layout = self.layout.calculate(height, width)
        if isinstance(layout, LayoutReady):
            self.output_log.resize(layout.output.interior)
        self._needs_clear = True

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def compose_frame(self) -> str:
        """Build the next frame without writing it."""
        frame = FrameBuilder(self.painter)
        if self._needs_clear:
            frame.clear_screen()
            self._needs_clear = False

        layout = self.layout.layout
        if isinstance(layout, LayoutTooSmall):
            frame.notice(layout.notice(), layout.term_width)
        elif isinstance(layout, LayoutReady):
            frame.box(layout.output)
            frame.box(layout.input)

            output_area = layout.output.interior
            frame.put_lines(output_area.y, output_area.x, self.output_log.render(output_area))

            input_area = layout.input.interior
            frame.put_lines(input_area.y, input_area.x, self.editor.render(input_area))
            if not input_area.empty:
                frame.place_cursor(
                    input_area.y, input_area.x + self.editor.cursor_column(input_area.width)
                )
        return frame.compose()

    def _render(self) -> None:
        frame = self.compose_frame()
        if frame == self._last_frame:
            return
        self.terminal.write_frame(frame)
        self._last_frame = frame


def run_session(
    handler: Optional[CommandHandler] = None,
    config: Optional[SessionConfig] = None,
) -> None:
    """Create a session on the controlling terminal and run it."""
    session = ConsoleSession(handler=handler, config=config)
    logger.debug("Running session (signals: %s)", [signal_name(s) for s in STOP_SIGNALS])
    session.run()
