"""Exception hierarchy for fpb.

Only supervisor-level failures are errors of this tool. Parse misses are
ignored where they happen and a failing ffmpeg run is reported through its
own exit status.
"""

from __future__ import annotations


class FpbError(Exception):
    """Base class for all fpb errors."""

    exit_code = 1


class ConfigError(FpbError):
    """Raised when configuration values fail validation."""


class SpawnError(FpbError):
    """Raised when the wrapped program cannot be started."""

    def __init__(self, program: str, cause: BaseException):
        self.program = program
        self.cause = cause
        super().__init__(f"Error starting {program}: {cause}")


class StreamReadError(FpbError):
    """Raised when reading the wrapped program's stderr fails before EOF."""

    def __init__(self, program: str, cause: BaseException):
        self.program = program
        self.cause = cause
        super().__init__(f"Error reading {program} output: {cause}")
