"""Byte-at-a-time line reconstruction for ffmpeg's stderr.

ffmpeg redraws its status line with bare carriage returns, so both ``\\r``
and ``\\n`` terminate a line here. Content is kept as raw bytes until the
line is complete so multi-byte UTF-8 file names are decoded intact.
"""

from __future__ import annotations

CR = 0x0D
LF = 0x0A


def _decode(data: bytes | bytearray) -> str:
    return bytes(data).decode("utf-8", errors="replace")


class LineAccumulator:
    """Buffers one in-progress line and keeps the history of finished ones."""

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._lines: list[str] = []

    def feed(self, byte: int) -> str | None:
        """Consume one byte.

        Args:
            byte: Raw byte value (0-255) read from the stream

        Returns:
            The completed line when ``byte`` is a line terminator,
            otherwise None
        """
        if byte == CR or byte == LF:
            return self.finalize()
        self._buffer.append(byte)
        return None

    def finalize(self) -> str:
        """Close the in-progress line, record it and start a fresh one."""
        line = _decode(self._buffer)
        self._lines.append(line)
        self._buffer.clear()
        return line

    @property
    def pending(self) -> str:
        """Content received since the last terminator."""
        return _decode(self._buffer)

    @property
    def history(self) -> list[str]:
        """Get all completed lines."""
        return self._lines.copy()
