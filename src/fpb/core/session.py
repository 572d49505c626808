"""Facts learned about one transcoding run and the samples derived from them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Unit(Enum):
    """Unit a progress sample is counted in."""

    SECONDS = "seconds"
    FRAMES = "frames"


@dataclass
class Session:
    """Facts discovered from ffmpeg's stderr during one invocation.

    Every fact starts unknown (``0`` / ``""``) and is set at most once: the
    first successful parse wins and later lines never overwrite it.
    """

    total_duration_seconds: int = 0
    source_name: str = ""
    frame_rate: int = 0
    start_time: Optional[float] = None

    def learn_duration(self, seconds: int) -> bool:
        if self.total_duration_seconds or seconds <= 0:
            return False
        self.total_duration_seconds = seconds
        return True

    def learn_source(self, name: str) -> bool:
        if self.source_name or not name:
            return False
        self.source_name = name
        return True

    def learn_frame_rate(self, fps: int) -> bool:
        if self.frame_rate or fps <= 0:
            return False
        self.frame_rate = fps
        return True

    def mark_started(self, timestamp: float) -> float:
        """Record the start time once; later calls keep the first value."""
        if self.start_time is None:
            self.start_time = timestamp
        return self.start_time


@dataclass(frozen=True)
class ProgressSample:
    """Latest position resolved against the session's totals."""

    current: int
    total: int
    unit: Unit

    @property
    def percentage(self) -> float:
        """Completion percentage (0-100), 0 while the total is unknown."""
        if self.total <= 0:
            return 0.0
        return self.current / self.total * 100
