"""
Main CLI application definition.

fpb: FFmpeg progress bar

Runs ffmpeg with exactly the arguments given and replaces its scrolling
stderr with a single progress line. Every token, including ``-h`` and
``--help``, is handed to ffmpeg, so the CLI declares no options of its own.

Examples:
    fpb -i input.mp4 -c:v libx264 -crf 23 output.mp4
    fpb -y -i talk.mkv -vn talk.opus
"""

from __future__ import annotations

import sys

import typer

from fpb.config.settings import get_settings
from fpb.core.supervisor import EXIT_FAILURE, run_wrapped
from fpb.display.styles import supports_color
from fpb.errors import ConfigError
from fpb.utils.logging import configure_from_settings, get_logger

PASSTHROUGH_CONTEXT = {
    "allow_extra_args": True,
    "ignore_unknown_options": True,
    "help_option_names": [],
}

app = typer.Typer(
    name="fpb",
    add_completion=False,
    add_help_option=False,
    context_settings=PASSTHROUGH_CONTEXT,
)


def passthrough_args(ctx: typer.Context) -> list[str]:
    """Arguments for ffmpeg, in order.

    Click drops a bare ``--`` from ``ctx.args``, so the raw argv handed over
    by :func:`run` in ``ctx.obj`` is preferred when present.
    """
    if isinstance(ctx.obj, dict) and "argv" in ctx.obj:
        return list(ctx.obj["argv"])
    return list(ctx.args)


@app.command(context_settings=PASSTHROUGH_CONTEXT, add_help_option=False)
def main(ctx: typer.Context) -> None:
    """Run ffmpeg with a live progress bar."""
    args = passthrough_args(ctx)
    if not args:
        typer.echo(f"Usage: {ctx.info_name or 'fpb'} <ffmpeg-args>", err=True)
        raise typer.Exit(code=EXIT_FAILURE)

    try:
        settings = get_settings()
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXIT_FAILURE)

    configure_from_settings(settings, color=supports_color(sys.stderr))
    logger = get_logger("fpb.cli")
    logger.debug("invoked", args=args)

    code = run_wrapped(args, settings=settings)
    raise typer.Exit(code=code)


def run(argv: list[str] | None = None) -> None:
    """Console script entry point."""
    argv = sys.argv[1:] if argv is None else list(argv)
    app(args=argv, prog_name="fpb", obj={"argv": argv})


if __name__ == "__main__":
    run()
