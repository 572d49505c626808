"""Plain and ANSI-decorated rendering strategies.

Whether colors are used is decided once per run by :func:`resolve_style`.
Rendering code asks the chosen strategy to decorate each fragment instead
of branching on a color flag itself.
"""

from __future__ import annotations

import sys
from typing import IO, Any

from rich.color import ColorSystem
from rich.style import Style


class PlainStyle:
    """Strategy returning every fragment unchanged."""

    colored = False

    def percentage(self, text: str) -> str:
        return text

    def rate(self, text: str) -> str:
        return text

    def eta(self, text: str) -> str:
        return text

    def bar(self, text: str) -> str:
        return text

    def prompt(self, text: str) -> str:
        return text

    def error(self, text: str) -> str:
        return text


class AnsiStyle(PlainStyle):
    """Strategy wrapping fragments in standard ANSI SGR sequences."""

    colored = True

    PERCENTAGE = Style(color="yellow")
    RATE = Style(color="red")
    ETA = Style(color="blue")
    BAR = Style(color="green")
    PROMPT = Style(color="bright_yellow", bold=True)
    ERROR = Style(color="bright_red", bold=True)

    def _paint(self, style: Style, text: str) -> str:
        # 16 color palette only: reset, bold and the named colors
        return style.render(text, color_system=ColorSystem.STANDARD)

    def percentage(self, text: str) -> str:
        return self._paint(self.PERCENTAGE, text)

    def rate(self, text: str) -> str:
        return self._paint(self.RATE, text)

    def eta(self, text: str) -> str:
        return self._paint(self.ETA, text)

    def bar(self, text: str) -> str:
        return self._paint(self.BAR, text)

    def prompt(self, text: str) -> str:
        return self._paint(self.PROMPT, text)

    def error(self, text: str) -> str:
        return self._paint(self.ERROR, text)


def _is_terminal(stream: IO[Any]) -> bool:
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except (OSError, ValueError):
        return False


def supports_color(stream: IO[Any], platform: str | None = None) -> bool:
    """Whether ANSI colors may be written to ``stream``.

    Windows consoles are always treated as colorless, everything else
    needs ``stream`` to be an interactive terminal.
    """
    platform = sys.platform if platform is None else platform
    if platform.startswith("win"):
        return False
    return _is_terminal(stream)


def resolve_style(stream: IO[Any], platform: str | None = None) -> PlainStyle:
    if supports_color(stream, platform):
        return AnsiStyle()
    return PlainStyle()
