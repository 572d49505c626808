"""Single-line progress bar redrawn in place on the diagnostic stream.

Layout::

    clip.mp4 ━━━━━━━━━━━━━━╸━━━━━━━━━━━━━ 50.0% • 1305/2610 • 29fps • ETA 00:12

The label is truncated to fit, the trailing statistics are fixed format and
the bar takes whatever width is left on the terminal.
"""

from __future__ import annotations

import sys
import time
from collections.abc import Callable
from typing import TextIO

from fpb.config.settings import WrapperSettings
from fpb.core.session import Unit
from fpb.display.styles import PlainStyle
from fpb.display.terminal import CLEAR_LINE, display_length, terminal_size

FILLED = "━"
EDGE = "╸"
ELLIPSIS = "..."
# Same suffix whichever unit is counted
RATE_SUFFIX = "fps"


def truncate_label(description: str, limit: int = 30) -> str:
    """Shorten ``description`` to ``limit`` characters using an ellipsis."""
    if len(description) > limit:
        return description[: limit - len(ELLIPSIS)] + ELLIPSIS
    return description


def format_eta(seconds: float) -> str:
    """Format a duration as MM:SS, negative durations clamp to 00:00."""
    if seconds < 0:
        return "00:00"
    total_seconds = int(seconds)
    minutes, secs = divmod(total_seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def build_bar(filled: int, width: int, style: PlainStyle) -> str:
    """Compose ``width`` cells with ``filled`` of them highlighted.

    The cell right after the filled run is an edge glyph unless the bar is
    full. Plain and decorated bars use the same glyphs.
    """
    if width <= 0:
        return ""
    filled = max(0, min(filled, width))
    if filled >= width:
        return style.bar(FILLED * width)
    head = FILLED * filled + EDGE
    tail = FILLED * (width - filled - 1)
    return style.bar(head) + tail


class ProgressBar:
    """Throttled progress renderer.

    Example:
        >>> bar = ProgressBar("clip.mp4", 90, Unit.SECONDS, stream=sys.stderr)
        >>> bar.update(45)
        >>> bar.finish()
    """

    def __init__(
        self,
        description: str,
        total: int,
        unit: Unit = Unit.SECONDS,
        *,
        stream: TextIO | None = None,
        style: PlainStyle | None = None,
        settings: WrapperSettings | None = None,
        start_time: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        size: Callable[[], tuple[int, int]] = terminal_size,
    ) -> None:
        """Initialize the bar.

        Args:
            description: Label shown on the left (usually the source file)
            total: Total units of work, 0 when unknown
            unit: Unit ``total`` and later values are counted in
            stream: Output destination (defaults to stderr)
            style: Rendering strategy, plain when omitted
            settings: Layout and throttling settings
            start_time: Clock reading the elapsed time is measured from
            clock: Monotonic clock in seconds
            size: Terminal size query returning (columns, lines)
        """
        self.description = description
        self.total = total
        self.unit = unit
        self.current = 0
        self.stream = stream or sys.stderr
        self.style = style or PlainStyle()
        self.settings = settings or WrapperSettings()
        self._clock = clock
        self._size = size
        self.start_time = clock() if start_time is None else start_time
        self._last_render: float | None = None
        self._rendered = False
        self._finished = False

    @property
    def percentage(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.current / self.total * 100

    def update(self, current: int) -> bool:
        """Store ``current`` and redraw unless the last redraw was too recent.

        Returns:
            True if the bar was redrawn
        """
        self.current = current

        now = self._clock()
        if (
            self._last_render is not None
            and now - self._last_render < self.settings.render_interval
        ):
            return False
        self._last_render = now

        self.render()
        return True

    def finish(self) -> None:
        """Draw the bar at 100% and move to a fresh line."""
        self.current = self.total
        self.render()
        self.stream.write("\n")
        self.stream.flush()
        self._finished = True

    def break_line(self) -> None:
        """End a drawn bar's line without forcing completion."""
        if self._rendered and not self._finished:
            self.stream.write("\n")
            self.stream.flush()
            self._finished = True

    def render(self) -> None:
        width, _ = self._size()
        self.stream.write(CLEAR_LINE)
        self.stream.write(self.compose(width))
        self.stream.flush()
        self._rendered = True

    def compose(self, width: int) -> str:
        """Build the status line for a terminal ``width`` columns wide."""
        percentage = self.percentage
        elapsed = max(self._clock() - self.start_time, 0.0)

        remaining = 0.0
        if self.current > 0 and self.total > 0:
            remaining = elapsed * (self.total - self.current) / self.current

        rate = self.current / elapsed if elapsed > 0 else 0.0

        info = self.info(percentage, rate, remaining)
        label = truncate_label(self.description, self.settings.label_limit)
        bar_width = self.bar_width(width, label, info)
        filled = int(bar_width * percentage / 100)

        return f"{label} {build_bar(filled, bar_width, self.style)}{info}"

    def info(self, percentage: float, rate: float, remaining: float) -> str:
        style = self.style
        return (
            f" {style.percentage(f'{percentage:.1f}%')}"
            f" • {self.current}/{self.total}"
            f" • {style.rate(f'{rate:.0f}{RATE_SUFFIX}')}"
            f" • ETA {style.eta(format_eta(remaining))}"
        )

    def bar_width(self, width: int, label: str, info: str) -> int:
        """Cells left for the bar once label and statistics are placed."""
        settings = self.settings
        reserved = len(label) + 1 + display_length(info)
        space = width - reserved
        if space < settings.min_bar_width or width < settings.min_terminal_width:
            space = max(settings.fallback_width - reserved, settings.min_bar_width)
        return space
