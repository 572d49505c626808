"""Byte-level interpreter for ffmpeg's stderr.

Ties the line accumulator, fact extractor, progress model and prompt
forwarder together. Every byte read from the wrapped process goes through
:meth:`ProgressNotifier.process_byte` on the single reading task.
"""

from __future__ import annotations

from typing import Optional

from fpb.core.line_buffer import LineAccumulator
from fpb.core.patterns import FactExtractor
from fpb.core.progress_model import ProgressModel
from fpb.core.prompt import PromptForwarder
from fpb.core.session import Session


class ProgressNotifier:
    """Turns a raw stderr byte stream into progress updates and prompts."""

    def __init__(
        self,
        model: ProgressModel,
        forwarder: PromptForwarder,
        *,
        extractor: Optional[FactExtractor] = None,
        lines: Optional[LineAccumulator] = None,
    ) -> None:
        self.model = model
        self.forwarder = forwarder
        self.extractor = extractor or FactExtractor()
        self.lines = lines or LineAccumulator()

    @property
    def session(self) -> Session:
        return self.model.session

    def process_byte(self, byte: int) -> None:
        line = self.lines.feed(byte)
        if line is not None:
            self.process_line(line)
            return

        # A prompt has no terminator, so it is detected on the open line.
        # Only its last byte can complete it.
        if byte == self.forwarder.marker[-1] and self.forwarder.matches(self.lines.pending):
            prompt = self.lines.finalize()
            self.forwarder.trigger(prompt)

    def feed(self, chunk: bytes) -> None:
        for byte in chunk:
            self.process_byte(byte)

    def process_line(self, line: str) -> None:
        position = self.extractor.learn(line, self.session)
        if position is not None:
            self.model.update(position)

    def close(self) -> None:
        """Complete the progress display after a successful run."""
        self.model.finish()

    def abort(self) -> None:
        """Leave the progress line so failure output starts on its own line."""
        self.model.break_line()
