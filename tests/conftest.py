"""Pytest fixtures: a fake terminal and scripted keyboard input."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Optional

import pytest

from ansi_console.cli.console.session import ConsoleSession
from ansi_console.cli.core.input import Key, KeyEvent
from ansi_console.cli.core.terminal import TerminalSize
from ansi_console.config import SessionConfig
from ansi_console.core.signals import SignalRegistry
from ansi_console.errors import ColorSupportMissingError, TerminalUnavailableError


class FakeTerminal:
    """Records what a session does to the terminal instead of touching a TTY."""

    input_fd = -1

    def __init__(
        self,
        rows: int = 24,
        cols: int = 80,
        color_system: Optional[str] = "standard",
        interactive: bool = True,
        fail_write: bool = False,
    ) -> None:
        self.rows = rows
        self.cols = cols
        self.color_system = color_system
        self.interactive = interactive
        self.fail_write = fail_write
        self.frames: list[str] = []
        self.bells = 0
        self.opened = 0
        self.closed = 0
        self.is_open = False

    def size(self) -> TerminalSize:
        return TerminalSize(self.rows, self.cols)

    def resize(self, rows: int, cols: int) -> None:
        self.rows = rows
        self.cols = cols

    def check(self) -> None:
        if not self.interactive:
            raise TerminalUnavailableError("not a tty")
        if self.color_system is None:
            raise ColorSupportMissingError("no colours")

    def open(self) -> None:
        self.opened += 1
        self.is_open = True

    def close(self) -> None:
        if self.is_open:
            self.is_open = False
            self.closed += 1

    def write_frame(self, frame: str) -> None:
        if self.fail_write:
            raise OSError("write failed")
        self.frames.append(frame)

    def bell(self) -> None:
        self.bells += 1

    @property
    def last_frame(self) -> str:
        return self.frames[-1] if self.frames else ""


class ScriptedInput:
    """Event source fed from a queue; returns None once the queue is empty."""

    def __init__(self, events: Iterable[KeyEvent] = ()) -> None:
        self.queue: deque[KeyEvent] = deque(events)

    def push(self, *events: KeyEvent) -> None:
        self.queue.extend(events)

    def type(self, text: str, submit: bool = True) -> None:
        """Queue one event per character, then Enter."""
        self.push(*(KeyEvent(char=ch, raw=ch) for ch in text))
        if submit:
            self.push(KeyEvent(key=Key.ENTER, raw='\r'))

    def read(self, timeout: float = 0.0) -> Optional[KeyEvent]:
        return self.queue.popleft() if self.queue else None


def key(k: Key) -> KeyEvent:
    return KeyEvent(key=k)


def char(ch: str) -> KeyEvent:
    return KeyEvent(char=ch, raw=ch)


@pytest.fixture
def terminal() -> FakeTerminal:
    return FakeTerminal()


@pytest.fixture
def events() -> ScriptedInput:
    return ScriptedInput()


@pytest.fixture
def registry() -> SignalRegistry:
    return SignalRegistry()


@pytest.fixture
def config() -> SessionConfig:
    return SessionConfig(frame_interval=0.0)


@pytest.fixture
def make_session(terminal, events, registry, config):
    """Factory building sessions on the fake terminal; closes them afterwards."""
    created: list[ConsoleSession] = []

    def factory(**kwargs) -> ConsoleSession:
        kwargs.setdefault("terminal", terminal)
        kwargs.setdefault("events", events)
        kwargs.setdefault("signals", registry)
        kwargs.setdefault("config", config)
        kwargs.setdefault("install_signals", False)
        session = ConsoleSession(**kwargs)
        created.append(session)
        return session

    yield factory

    for session in created:
        session.close()


def drain(session: ConsoleSession, events: ScriptedInput) -> None:
    """Step the session until all queued input has been consumed."""
    while events.queue and session.running:
        session.step()
