"""Rolling model of transcoding progress.

Converts playback positions into progress samples expressed in seconds or,
once a frame rate is known, in frames, and owns the lazily created
progress bar.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Optional

from fpb.core.session import ProgressSample, Session, Unit
from fpb.utils.logging import get_logger

if TYPE_CHECKING:
    from fpb.display.progress import ProgressBar

# (description, total, unit, start_time) -> bar
BarFactory = Callable[[str, int, Unit, float], "ProgressBar"]

DEFAULT_PLACEHOLDER = "Processing"

logger = get_logger("fpb.progress")


class ProgressModel:
    """Resolves positions against the session and drives the bar."""

    def __init__(
        self,
        session: Session,
        bar_factory: BarFactory,
        *,
        placeholder: str = DEFAULT_PLACEHOLDER,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session = session
        self.placeholder = placeholder
        self._bar_factory = bar_factory
        self._bar: Optional[ProgressBar] = None
        self.latest: Optional[ProgressSample] = None
        session.mark_started(clock())

    @property
    def bar(self) -> Optional[ProgressBar]:
        return self._bar

    def resolve(self, current_seconds: int) -> ProgressSample:
        """Express ``current_seconds`` and the known total in display units."""
        total = self.session.total_duration_seconds
        current = current_seconds
        fps = self.session.frame_rate
        if fps > 0:
            current *= fps
            if total > 0:
                total *= fps
            return ProgressSample(current=current, total=total, unit=Unit.FRAMES)
        return ProgressSample(current=current, total=total, unit=Unit.SECONDS)

    def update(self, current_seconds: int) -> ProgressSample:
        sample = self.resolve(current_seconds)
        self.latest = sample

        if self._bar is None:
            # Totals, unit and label are frozen from here on
            description = self.session.source_name or self.placeholder
            self._bar = self._bar_factory(
                description, sample.total, sample.unit, self.session.start_time
            )
            logger.debug(
                "progress_started",
                description=description,
                total=sample.total,
                unit=sample.unit.value,
            )

        self._bar.update(sample.current)
        return sample

    def finish(self) -> None:
        if self._bar is not None:
            self._bar.finish()

    def break_line(self) -> None:
        if self._bar is not None:
            self._bar.break_line()
