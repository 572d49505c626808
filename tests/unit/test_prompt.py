"""Tests for prompt detection and input forwarding."""

from __future__ import annotations

import io
import threading

import pytest

from fpb.core.prompt import PromptForwarder
from fpb.display.styles import AnsiStyle

pytestmark = pytest.mark.unit


class BlockingInput:
    """Input whose readline blocks until released."""

    def __init__(self, line: str = "y\n"):
        self.line = line
        self.release = threading.Event()
        self.calls = 0

    def readline(self) -> str:
        self.calls += 1
        self.release.wait(timeout=5)
        return self.line


class BrokenInput:
    def readline(self) -> str:
        raise OSError("input closed")


@pytest.fixture
def sent():
    return []


class TestMatching:
    def test_matches_exact_suffix(self, sent):
        forwarder = PromptForwarder(sent.append)
        assert forwarder.matches("File 'out.mp4' already exists. Overwrite? [y/N] ")

    def test_requires_trailing_space(self, sent):
        forwarder = PromptForwarder(sent.append)
        assert not forwarder.matches("Overwrite? [y/N]")

    def test_case_sensitive(self, sent):
        forwarder = PromptForwarder(sent.append)
        assert not forwarder.matches("Overwrite? [Y/n] ")

    def test_marker_bytes(self, sent):
        assert PromptForwarder(sent.append).marker == b"[y/N] "


class TestForwarding:
    """Tests for PromptForwarder.trigger and forward."""

    def test_echoes_and_forwards_one_line(self, sent, display):
        forwarder = PromptForwarder(
            sent.append, stream=display, user_input=io.StringIO("y\nextra\n")
        )
        thread = forwarder.trigger("Overwrite? [y/N] ")
        thread.join(timeout=5)

        assert display.getvalue() == "Overwrite? [y/N] "
        assert sent == [b"y\n"]
        assert forwarder.pending is False

    def test_echo_is_highlighted_when_decorated(self, sent, display):
        forwarder = PromptForwarder(
            sent.append, stream=display, style=AnsiStyle(), user_input=io.StringIO("n\n")
        )
        forwarder.trigger("Overwrite? [y/N] ").join(timeout=5)
        assert display.getvalue() != "Overwrite? [y/N] "
        assert "Overwrite? [y/N] " in display.getvalue()
        assert sent == [b"n\n"]

    def test_eof_is_abandoned(self, sent, display):
        forwarder = PromptForwarder(sent.append, stream=display, user_input=io.StringIO(""))
        forwarder.forward().join(timeout=5)
        assert sent == []
        assert forwarder.pending is False

    def test_read_error_is_abandoned(self, sent, display):
        forwarder = PromptForwarder(sent.append, stream=display, user_input=BrokenInput())
        forwarder.forward().join(timeout=5)
        assert sent == []
        assert forwarder.pending is False

    def test_sink_error_is_abandoned(self, display):
        def sink(data: bytes) -> None:
            raise BrokenPipeError("ffmpeg exited")

        forwarder = PromptForwarder(sink, stream=display, user_input=io.StringIO("y\n"))
        forwarder.forward().join(timeout=5)
        assert forwarder.pending is False

    def test_answer_without_terminator_forwarded_verbatim(self, sent, display):
        forwarder = PromptForwarder(sent.append, stream=display, user_input=io.StringIO("y"))
        forwarder.forward().join(timeout=5)
        assert sent == [b"y"]

    def test_binary_input_forwarded_byte_for_byte(self, sent, display):
        user_input = io.TextIOWrapper(io.BytesIO(b"o\xf9i\r\nnext\r\n"), encoding="utf-8")
        forwarder = PromptForwarder(sent.append, stream=display, user_input=user_input)
        forwarder.forward().join(timeout=5)
        assert sent == [b"o\xf9i\r\n"]

    def test_overlapping_forwards_are_serialized(self, sent, display):
        user_input = BlockingInput()
        forwarder = PromptForwarder(sent.append, stream=display, user_input=user_input)

        first = forwarder.trigger("Overwrite? [y/N] ")
        second = forwarder.trigger("Overwrite? [y/N] ")
        assert first is not None
        assert second is None
        assert forwarder.pending is True

        user_input.release.set()
        first.join(timeout=5)

        assert user_input.calls == 1
        assert sent == [b"y\n"]
        assert display.getvalue() == "Overwrite? [y/N] " * 2
        assert forwarder.pending is False

    def test_thread_is_daemon(self, sent, display):
        forwarder = PromptForwarder(sent.append, stream=display, user_input=io.StringIO("y\n"))
        thread = forwarder.forward()
        assert thread.daemon is True
        thread.join(timeout=5)
