"""Logging setup and configuration using structlog."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

import structlog

from fpb.config.settings import Settings

_LEVEL_MAP = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

_DEFAULT_LEVEL = logging.WARNING


def _resolve_level(level: str) -> int:
    return _LEVEL_MAP.get(str(level).lower(), _DEFAULT_LEVEL)


def configure_logging(
    *,
    level: str = "warning",
    color: bool = False,
    log_file: Path | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog + stdlib logging.

    Parameters
    ----------
    level: str
            Minimum level (debug, info, warning, error, critical).
    color: bool
            Enable colored console rendering.
    log_file: Optional[Path]
            If provided, also write logs to this file.
    stream: Optional[TextIO]
            Console destination. Defaults to stderr; stdout is never used
            because it may carry the wrapped program's payload.
    """

    log_level = _resolve_level(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=color),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    root = logging.getLogger()
    root.handlers = []
    root.setLevel(log_level)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)

    # Silence asyncio's own debug chatter about subprocess transports
    logging.getLogger("asyncio").setLevel(max(log_level, logging.WARNING))


def configure_from_settings(settings: Settings, *, color: bool = False) -> None:
    """Configure logging using Settings values."""

    log_file = Path(settings.general.log_file) if settings.general.log_file else None
    configure_logging(
        level=settings.general.verbosity,
        color=color,
        log_file=log_file,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a configured structlog logger."""

    return structlog.get_logger(name) if name else structlog.get_logger()
