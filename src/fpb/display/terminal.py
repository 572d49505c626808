"""Terminal primitives: size query, escape stripping and display width."""

from __future__ import annotations

import re
import shutil

FALLBACK_SIZE = (80, 24)

# Carriage return followed by "erase to end of line"
CLEAR_LINE = "\r\x1b[K"

ANSI_RE = re.compile(r"\x1b\[[0-9;]*[mGKHfABCDEFGJSTuhlp]")
NON_ASCII_RE = re.compile(r"[^\x00-\x7F]")


def terminal_size(fallback: tuple[int, int] = FALLBACK_SIZE) -> tuple[int, int]:
    """Return the live (columns, lines) of the terminal, or ``fallback``."""
    size = shutil.get_terminal_size(fallback)
    return size.columns, size.lines


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes and blank out non-ASCII characters.

    Every non-ASCII character (bar glyphs, bullets) is replaced by a single
    space so the result has one character per terminal cell.
    """
    return NON_ASCII_RE.sub(" ", ANSI_RE.sub("", text))


def display_length(text: str) -> int:
    return len(strip_ansi(text))
