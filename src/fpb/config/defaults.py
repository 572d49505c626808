"""Default configuration values and constants for configuration loading."""

from __future__ import annotations

from typing import Any

ENV_PREFIX = "FPB"

# Environment variables are only honoured for these sections; the wrapper
# itself must behave the same regardless of the caller's environment.
ENV_SECTIONS = frozenset({"general"})

# Short aliases accepted in addition to the nested FPB_GENERAL__* form.
ENV_ALIASES: dict[str, tuple[str, ...]] = {
    "LOG_LEVEL": ("general", "verbosity"),
    "LOG_FILE": ("general", "log_file"),
}

# Default configuration tree used when nothing else is provided.
DEFAULT_CONFIG: dict[str, Any] = {
    "general": {
        "verbosity": "warning",
        "log_file": "",
    },
    "wrapper": {
        # Program name is fixed; arguments are appended after it.
        "program": "ffmpeg",
        # Description shown before the source file name is known
        "placeholder_label": "Processing",
        "prompt_suffix": "[y/N] ",
        "render_interval_ms": 50,
        "fallback_width": 80,
        "min_terminal_width": 20,
        "min_bar_width": 5,
        "label_limit": 30,
        "read_chunk_size": 4096,
    },
}
