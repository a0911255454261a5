"""Base widget protocol and common functionality."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ansi_console.cli.core.input import KeyEvent


@dataclass(frozen=True)
class Rect:
    """Rectangle bounds for widget positioning (0-indexed screen cells)."""
    x: int
    y: int
    width: int
    height: int

    @property
    def empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


def clip(text: str, width: int) -> str:
    """Cut or space-pad plain text to exactly width cells."""
    return text[:max(0, width)].ljust(max(0, width))


@runtime_checkable
class Widget(Protocol):
    """Protocol for TUI widgets."""

    def render(self, bounds: Rect) -> list[str]:
        """Render widget content as list of lines."""
        ...

    def handle_input(self, event: KeyEvent) -> bool:
        """Handle input event. Returns True if consumed."""
        ...


class BaseWidget(ABC):
    """Base class for the console regions."""

    @abstractmethod
    def render(self, bounds: Rect) -> list[str]:
        """Subclasses must implement rendering."""
        pass

    def handle_input(self, event: KeyEvent) -> bool:
        """Default: don't consume events."""
        return False
