"""Colour roles for the console regions, rendered through rich styles."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from rich.color import ColorSystem
from rich.errors import StyleSyntaxError
from rich.style import Style

from ansi_console.errors import ColorCustomizationError


class ColorRole(Enum):
    """Logical colour roles used by the renderer."""
    NORMAL = "normal"   # Output text
    BORDER = "border"   # Frames and labels
    INPUT = "input"     # Command line text


# Names reported by rich.console.Console.color_system
COLOR_SYSTEM_NAMES: dict[str, ColorSystem] = {
    "standard": ColorSystem.STANDARD,
    "256": ColorSystem.EIGHT_BIT,
    "truecolor": ColorSystem.TRUECOLOR,
    "windows": ColorSystem.WINDOWS,
}


def _rank(system: ColorSystem) -> int:
    # Legacy Windows consoles only do the 16 standard colours
    return ColorSystem.STANDARD if system == ColorSystem.WINDOWS else int(system)


@dataclass(frozen=True)
class Palette:
    """Style definitions (rich syntax, e.g. ``"cyan on black"``) per role."""
    normal: str = "white on black"
    border: str = "cyan on black"
    input: str = "yellow on black"

    def definition(self, role: ColorRole) -> str:
        return getattr(self, role.value)

    def parse(self) -> dict[ColorRole, Style]:
        """Parse every role, raising ColorCustomizationError on bad syntax."""
        styles: dict[ColorRole, Style] = {}
        for role in ColorRole:
            try:
                styles[role] = Style.parse(self.definition(role))
            except StyleSyntaxError as e:
                raise ColorCustomizationError(
                    f"Invalid {role.value} style {self.definition(role)!r}: {e}"
                ) from e
        return styles

    def required_system(self) -> ColorSystem:
        """Smallest colour system able to show every role without downgrading."""
        required = ColorSystem.STANDARD
        for style in self.parse().values():
            for color in (style.color, style.bgcolor):
                if color is not None and _rank(color.system) > _rank(required):
                    required = color.system
        return required


class Painter:
    """
    Applies palette roles to text for one terminal colour system.

    A painter built with ``color_system=None`` returns text unchanged,
    which is what tests and colourless previews use.
    """

    def __init__(self, palette: Palette, color_system: Optional[ColorSystem]) -> None:
        self.palette = palette
        self.color_system = color_system
        self._styles = palette.parse()

    @classmethod
    def for_terminal(cls, palette: Palette, system_name: Optional[str]) -> Painter:
        """
        Build a painter for a terminal reporting ``system_name``.

        Raises ColorCustomizationError when the palette needs more colours
        than the terminal offers.
        """
        system = COLOR_SYSTEM_NAMES.get(system_name or "")
        if system is None:
            return cls(palette, None)
        required = palette.required_system()
        if _rank(required) > _rank(system):
            raise ColorCustomizationError(
                f"Palette needs {required.name.lower()} colours, "
                f"terminal supports {system_name}"
            )
        return cls(palette, system)

    @classmethod
    def plain(cls, palette: Optional[Palette] = None) -> Painter:
        return cls(palette or Palette(), None)

    def paint(self, role: ColorRole, text: str) -> str:
        if not text:
            return text
        return self._styles[role].render(text, color_system=self.color_system)
