"""Pattern matchers that pull progress facts out of ffmpeg diagnostics.

Only the handful of lines needed to drive the progress display are
recognized. Anything that does not match, or matches with a number that
cannot be parsed, is ignored and leaves the corresponding fact unknown.
"""

from __future__ import annotations

import posixpath
import re
from typing import Optional

from fpb.core.session import Session
from fpb.utils.logging import get_logger

# "  Duration: 00:01:30.45, start: 0.000000, bitrate: 1205 kb/s"
DURATION_RE = re.compile(r"Duration: (\d{2}):(\d{2}):(\d{2})\.\d{2}")
# "frame=  120 fps= 30 q=28.0 size= 256kB time=00:00:04.00 bitrate=..."
PROGRESS_RE = re.compile(r"time=(\d{2}):(\d{2}):(\d{2})\.\d{2}")
# "Input #0, mov,mp4,m4a,3gp,3g2,mj2, from 'clip.mp4':"
SOURCE_RE = re.compile(r"from '(.*)':")
# "Stream #0:0: Video: h264, yuv420p, 1920x1080, 29.97 fps, 29.97 tbr"
FPS_RE = re.compile(r"(\d{2}\.\d{2}|\d{2}) fps")

logger = get_logger("fpb.patterns")


def to_seconds(hours: str | int, minutes: str | int, seconds: str | int) -> int:
    """Convert HH, MM, SS components to whole seconds."""
    return (int(hours) * 60 + int(minutes)) * 60 + int(seconds)


def basename(path: str) -> str:
    """Final component of a path written with either separator."""
    name = posixpath.basename(path.replace("\\", "/"))
    return name or path


class FactExtractor:
    """Applies the fixed matchers to completed stderr lines."""

    def duration(self, line: str) -> int:
        match = DURATION_RE.search(line)
        if match is None:
            return 0
        return to_seconds(*match.groups())

    def source(self, line: str) -> str:
        match = SOURCE_RE.search(line)
        if match is None:
            return ""
        return basename(match.group(1))

    def frame_rate(self, line: str) -> int:
        match = FPS_RE.search(line)
        if match is None:
            return 0
        try:
            return int(float(match.group(1)))
        except ValueError:
            return 0

    def position(self, line: str) -> Optional[int]:
        match = PROGRESS_RE.search(line)
        if match is None:
            return None
        return to_seconds(*match.groups())

    def learn(self, line: str, session: Session) -> Optional[int]:
        """Record any new facts from ``line`` on ``session``.

        Duration, source and frame rate are first-match-wins and are only
        looked for while still unknown. The playback position is returned
        for every line carrying one.
        """
        if not session.total_duration_seconds:
            if session.learn_duration(self.duration(line)):
                logger.debug("duration_learned", seconds=session.total_duration_seconds)
        if not session.source_name:
            if session.learn_source(self.source(line)):
                logger.debug("source_learned", source=session.source_name)
        if not session.frame_rate:
            if session.learn_frame_rate(self.frame_rate(line)):
                logger.debug("frame_rate_learned", fps=session.frame_rate)
        return self.position(line)
