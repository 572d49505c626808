"""Terminal display: progress bar, rendering strategies and terminal helpers."""

from fpb.display.progress import (
    ProgressBar,
    build_bar,
    format_eta,
    truncate_label,
)
from fpb.display.styles import AnsiStyle, PlainStyle, resolve_style, supports_color
from fpb.display.terminal import display_length, strip_ansi, terminal_size

__all__ = [
    "AnsiStyle",
    "PlainStyle",
    "ProgressBar",
    "build_bar",
    "display_length",
    "format_eta",
    "resolve_style",
    "strip_ansi",
    "supports_color",
    "terminal_size",
    "truncate_label",
]
