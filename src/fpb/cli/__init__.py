"""CLI module for fpb.

Provides the Typer application wrapping ffmpeg.
"""

from fpb.cli.main import app, run

__all__ = ["app", "run"]
