"""Tests for the fpb command line entry point.

The CLI declares no options of its own, so these tests focus on arguments
reaching the supervisor untouched and on the exit status being propagated.
"""

from __future__ import annotations

import sys
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from fpb.cli.main import app, run
from fpb.errors import ConfigError

pytestmark = pytest.mark.unit


# ========== Fixtures ==========


@pytest.fixture
def cli_runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def wrapped():
    with patch("fpb.cli.main.run_wrapped", return_value=0) as mock_run:
        yield mock_run


# ========== Tests: Invocation ==========


class TestUsage:
    """Tests for invocation without arguments."""

    def test_no_arguments_prints_usage(self, cli_runner, wrapped):
        result = cli_runner.invoke(app, [])
        assert result.exit_code == 1
        assert "Usage:" in result.output
        assert "<ffmpeg-args>" in result.output
        wrapped.assert_not_called()

    def test_config_error_exits_1(self, cli_runner, wrapped):
        with patch("fpb.cli.main.get_settings", side_effect=ConfigError("Invalid configuration: bad")):
            result = cli_runner.invoke(app, ["-i", "in.mp4", "out.mp4"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        wrapped.assert_not_called()


class TestPassthrough:
    """Tests for forwarding arguments to ffmpeg."""

    @pytest.mark.parametrize(
        "args",
        [
            ["-i", "in.mp4", "out.webm"],
            ["-y", "-i", "in.mp4", "-c:v", "libx264", "-crf", "23", "out.mp4"],
            ["-i", "talk.mkv", "-vn", "-map", "0:a", "talk.opus"],
            ["-hide_banner", "-ss", "00:01:00", "-i", "in.mp4", "-t", "10", "cut.mp4"],
        ],
    )
    def test_arguments_forwarded_verbatim(self, cli_runner, wrapped, args):
        result = cli_runner.invoke(app, args)
        assert result.exit_code == 0
        assert wrapped.call_args.args[0] == args

    def test_help_flags_belong_to_ffmpeg(self, cli_runner, wrapped):
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert wrapped.call_args.args[0] == ["--help"]

        cli_runner.invoke(app, ["-h"])
        assert wrapped.call_args.args[0] == ["-h"]

    def test_double_dash_kept(self, cli_runner, wrapped):
        args = ["-i", "a.mp4", "--", "out.mp4"]
        result = cli_runner.invoke(app, args, obj={"argv": args})
        assert result.exit_code == 0
        assert wrapped.call_args.args[0] == args

    def test_entry_point_uses_raw_argv(self, wrapped, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["fpb", "-i", "a.mp4", "--", "out.mp4"])
        with pytest.raises(SystemExit) as excinfo:
            run()
        assert excinfo.value.code == 0
        assert wrapped.call_args.args[0] == ["-i", "a.mp4", "--", "out.mp4"]

    def test_entry_point_without_arguments(self, wrapped):
        with pytest.raises(SystemExit) as excinfo:
            run([])
        assert excinfo.value.code == 1
        wrapped.assert_not_called()

    def test_settings_are_passed(self, cli_runner, wrapped):
        cli_runner.invoke(app, ["-i", "in.mp4", "out.mp4"])
        assert wrapped.call_args.kwargs["settings"].wrapper.program == "ffmpeg"


class TestExitStatus:
    @pytest.mark.parametrize("code", [0, 1, 69, 130, 143])
    def test_supervisor_status_propagates(self, cli_runner, code):
        with patch("fpb.cli.main.run_wrapped", return_value=code):
            result = cli_runner.invoke(app, ["-i", "in.mp4", "out.mp4"])
        assert result.exit_code == code
