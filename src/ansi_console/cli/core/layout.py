"""Two-region layout: a scrolling output region above a fixed input region.

The output region takes every row not used by the input region. Both span
the full terminal width and carry a one-cell border, so their interiors are
two rows and two columns smaller (never negative). Below the minimum
terminal size no regions exist and the layout reports TooSmall instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from ansi_console.cli.widgets.base import Rect

logger = logging.getLogger(__name__)

# Layout constants
MIN_HEIGHT = 10
MIN_WIDTH = 40
INPUT_HEIGHT = 3
BORDER = 1


@dataclass(frozen=True)
class Region:
    """A bordered rectangle of the screen."""
    label: str
    top: int
    left: int
    height: int
    width: int

    @property
    def interior(self) -> Rect:
        """Drawing area inside the border, clamped to zero size."""
        return Rect(
            self.left + BORDER,
            self.top + BORDER,
            max(0, self.width - 2 * BORDER),
            max(0, self.height - 2 * BORDER),
        )


@dataclass(frozen=True)
class LayoutReady:
    """Both regions fit."""
    term_height: int
    term_width: int
    output: Region
    input: Region

    @property
    def ready(self) -> bool:
        return True


@dataclass(frozen=True)
class LayoutTooSmall:
    """Terminal is below the minimum size; no regions are allocated."""
    term_height: int
    term_width: int
    min_height: int
    min_width: int

    @property
    def ready(self) -> bool:
        return False

    def notice(self) -> list[str]:
        """Lines explaining the required versus current dimensions."""
        return [
            "Terminal too small!",
            f"Required: {self.min_width} x {self.min_height}, "
            f"Current: {self.term_width} x {self.term_height}",
        ]


Layout = Union[LayoutReady, LayoutTooSmall]


def compute_layout(
    height: int,
    width: int,
    min_height: int = MIN_HEIGHT,
    min_width: int = MIN_WIDTH,
    input_height: int = INPUT_HEIGHT,
) -> Layout:
    """
    Calculate region geometry for a terminal of height x width.

    Pure and idempotent: the same arguments always give an equal result.
    """
    if height < min_height or width < min_width:
        return LayoutTooSmall(height, width, min_height, min_width)

    output_height = height - input_height
    return LayoutReady(
        term_height=height,
        term_width=width,
        output=Region("Output", 0, 0, output_height, width),
        input=Region("Input", output_height, 0, input_height, width),
    )


class LayoutManager:
    """
    Holds the current layout and recomputes it on resize.

    Only the latest layout is kept, so regions never outlive the
    dimensions they were computed for.
    """

    def __init__(
        self,
        min_height: int = MIN_HEIGHT,
        min_width: int = MIN_WIDTH,
        input_height: int = INPUT_HEIGHT,
    ) -> None:
        self.min_height = min_height
        self.min_width = min_width
        self.input_height = input_height
        self._layout: Optional[Layout] = None

    def calculate(self, height: int, width: int) -> Layout:
        """Recompute and cache the layout; logs Ready/TooSmall transitions."""
        previous = self._layout
        self._layout = compute_layout(
            height, width, self.min_height, self.min_width, self.input_height
        )
        if previous is None or previous.ready != self._layout.ready:
            logger.info(
                "Layout %s at %dx%d",
                "ready" if self._layout.ready else "too small",
                width, height,
            )
        return self._layout

    def release(self) -> None:
        """Forget the current regions."""
        self._layout = None

    @property
    def layout(self) -> Optional[Layout]:
        """Current cached layout."""
        return self._layout

    @property
    def ready(self) -> bool:
        return self._layout is not None and self._layout.ready

    @property
    def output_region(self) -> Optional[Region]:
        return self._layout.output if isinstance(self._layout, LayoutReady) else None

    @property
    def input_region(self) -> Optional[Region]:
        return self._layout.input if isinstance(self._layout, LayoutReady) else None
