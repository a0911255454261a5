"""Widgets for the output and input regions."""

from ansi_console.cli.widgets.base import BaseWidget, Widget, Rect, clip
from ansi_console.cli.widgets.frame import FrameBuilder, box_lines
from ansi_console.cli.widgets.line_editor import CommandHistory, LineEditorWidget
from ansi_console.cli.widgets.output_log import OutputLogWidget

__all__ = [
    "BaseWidget",
    "Widget",
    "Rect",
    "clip",
    "FrameBuilder",
    "box_lines",
    "CommandHistory",
    "LineEditorWidget",
    "OutputLogWidget",
]
