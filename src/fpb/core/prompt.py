"""Relay of interactive confirmation prompts to the real user.

ffmpeg asks ``File 'out.mp4' already exists. Overwrite? [y/N] `` on stderr
and waits on stdin. Since stdin is a pipe owned by fpb, the prompt is
echoed to the user and one line of their input is written back to ffmpeg.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Optional, TextIO

from fpb.utils.logging import get_logger

if TYPE_CHECKING:
    from fpb.display.styles import PlainStyle

DEFAULT_SUFFIX = "[y/N] "

logger = get_logger("fpb.prompt")


class PromptForwarder:
    """Echoes detected prompts and forwards one line of user input.

    The read runs on a daemon thread so a user who never answers does not
    stall stderr parsing or keep the interpreter alive at exit. Forwards
    are serialized: while one read is pending, later prompts are echoed but
    do not start another read.
    """

    def __init__(
        self,
        sink: Callable[[bytes], None],
        *,
        stream: TextIO | None = None,
        style: Optional[PlainStyle] = None,
        user_input: TextIO | None = None,
        suffix: str = DEFAULT_SUFFIX,
    ) -> None:
        """Initialize the forwarder.

        Args:
            sink: Callable writing bytes to the wrapped program's stdin
            stream: Display stream prompts are echoed to
            style: Rendering strategy for the echoed prompt
            user_input: Where answers are read from (defaults to stdin)
            suffix: Trailing text identifying a prompt
        """
        self.sink = sink
        self.stream = stream or sys.stderr
        self.style = style
        self.suffix = suffix
        self.marker = suffix.encode("utf-8")
        self._user_input = user_input
        self._lock = threading.Lock()
        self._pending = False

    @property
    def pending(self) -> bool:
        """Whether a forward read is still waiting for the user."""
        with self._lock:
            return self._pending

    def matches(self, pending_line: str) -> bool:
        return pending_line.endswith(self.suffix)

    def trigger(self, prompt: str) -> Optional[threading.Thread]:
        """Echo ``prompt`` and start forwarding the user's answer."""
        text = self.style.prompt(prompt) if self.style is not None else prompt
        self.stream.write(text)
        self.stream.flush()
        return self.forward()

    def forward(self) -> Optional[threading.Thread]:
        with self._lock:
            if self._pending:
                logger.debug("prompt_forward_already_pending")
                return None
            self._pending = True

        thread = threading.Thread(
            target=self._relay, name="fpb-prompt-forward", daemon=True
        )
        thread.start()
        return thread

    def _relay(self) -> None:
        source = self._user_input or sys.stdin
        # Binary layer keeps "\r\n" and non UTF-8 answers intact
        reader = getattr(source, "buffer", source)
        try:
            try:
                line = reader.readline()
            except (OSError, ValueError) as exc:
                logger.debug("prompt_forward_read_failed", error=str(exc))
                return
            if not line:
                logger.debug("prompt_forward_eof")
                return

            data = line.encode("utf-8") if isinstance(line, str) else bytes(line)
            try:
                self.sink(data)
            except (OSError, RuntimeError) as exc:
                # Process already gone or loop closed
                logger.debug("prompt_forward_write_failed", error=str(exc))
        finally:
            with self._lock:
                self._pending = False
