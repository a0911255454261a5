"""Tests for region layout and frame drawing."""

import pytest
from rich.color import ColorSystem

from ansi_console.cli.core.layout import (
    LayoutManager,
    LayoutReady,
    LayoutTooSmall,
    Region,
    compute_layout,
)
from ansi_console.cli.core.palette import ColorRole, Painter, Palette
from ansi_console.cli.widgets.base import Rect
from ansi_console.cli.widgets.frame import FrameBuilder, box_lines
from ansi_console.errors import ColorCustomizationError


class TestComputeLayout:
    def test_below_min_height_is_too_small(self) -> None:
        layout = compute_layout(9, 40)
        assert isinstance(layout, LayoutTooSmall)
        assert (layout.min_height, layout.min_width) == (10, 40)

    def test_below_min_width_is_too_small(self) -> None:
        assert not compute_layout(24, 39).ready

    def test_minimum_size_is_ready(self) -> None:
        layout = compute_layout(10, 40)
        assert isinstance(layout, LayoutReady)
        assert layout.output.height == 7
        assert layout.input.height == 3

    @pytest.mark.parametrize("height,width", [(10, 40), (24, 80), (61, 200)])
    def test_regions_fill_terminal(self, height: int, width: int) -> None:
        layout = compute_layout(height, width)
        assert layout.output.height + layout.input.height == height
        assert layout.output.top == 0
        assert layout.input.top == layout.output.height
        assert layout.output.width == layout.input.width == width

    def test_interiors(self) -> None:
        layout = compute_layout(24, 80)
        assert layout.output.interior == Rect(1, 1, 78, 19)
        assert layout.input.interior == Rect(1, 22, 78, 1)

    def test_interior_clamped_to_zero(self) -> None:
        assert Region("x", 0, 0, 1, 1).interior == Rect(1, 1, 0, 0)

    def test_idempotent(self) -> None:
        assert compute_layout(30, 100) == compute_layout(30, 100)

    def test_custom_input_height(self) -> None:
        layout = compute_layout(20, 50, input_height=5)
        assert layout.output.height == 15

    def test_notice_text(self) -> None:
        layout = compute_layout(9, 30)
        assert layout.notice() == [
            "Terminal too small!",
            "Required: 40 x 10, Current: 30 x 9",
        ]


class TestLayoutManager:
    def test_tracks_transitions(self) -> None:
        manager = LayoutManager()
        manager.calculate(5, 20)
        assert not manager.ready
        assert manager.output_region is None
        manager.calculate(24, 80)
        assert manager.ready
        assert manager.input_region.top == 21

    def test_release(self) -> None:
        manager = LayoutManager()
        manager.calculate(24, 80)
        manager.release()
        assert manager.layout is None
        assert not manager.ready


class TestBoxLines:
    def test_label_at_column_two(self) -> None:
        rows = box_lines(3, 20, "Input")
        assert rows[0] == "┌─ Input " + "─" * 10 + "┐"
        assert rows[1] == "│" + " " * 18 + "│"
        assert rows[2] == "└" + "─" * 18 + "┘"
        assert all(len(row) == 20 for row in rows)

    def test_label_truncated_in_narrow_box(self) -> None:
        rows = box_lines(2, 6, "Output")
        assert len(rows[0]) == 6
        assert rows[0].startswith("┌─ O")

    def test_degenerate_sizes(self) -> None:
        assert box_lines(0, 10) == []
        assert box_lines(2, 1) == ["│", "│"]


class TestFrameBuilder:
    def test_cursor_hidden_without_placement(self) -> None:
        frame = FrameBuilder()
        frame.put(0, 0, "hi")
        composed = frame.compose()
        assert "\x1b[1;1Hhi" in composed
        assert composed.endswith("\x1b[?25l")

    def test_cursor_placement(self) -> None:
        frame = FrameBuilder()
        frame.place_cursor(22, 4)
        assert frame.compose().endswith("\x1b[23;5H\x1b[?25h")


class TestPalette:
    def test_paint_standard(self) -> None:
        painter = Painter(Palette(), ColorSystem.STANDARD)
        assert painter.paint(ColorRole.NORMAL, "x") == "\x1b[37;40mx\x1b[0m"

    def test_plain_painter_passes_text_through(self) -> None:
        assert Painter.plain().paint(ColorRole.BORDER, "abc") == "abc"

    def test_truecolor_palette_on_standard_terminal(self) -> None:
        palette = Palette(border="#ff8800 on black")
        with pytest.raises(ColorCustomizationError):
            Painter.for_terminal(palette, "standard")

    def test_truecolor_palette_on_truecolor_terminal(self) -> None:
        palette = Palette(border="#ff8800 on black")
        assert Painter.for_terminal(palette, "truecolor").color_system == ColorSystem.TRUECOLOR

    def test_invalid_style(self) -> None:
        with pytest.raises(ColorCustomizationError):
            Palette(input="definitely_not_a_colour").parse()
