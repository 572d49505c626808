"""Core domain logic: stderr interpretation, progress model and supervision.

The supervisor lives in :mod:`fpb.core.supervisor` and is imported from
there directly since it depends on the display package.
"""

from fpb.core.line_buffer import LineAccumulator
from fpb.core.notifier import ProgressNotifier
from fpb.core.patterns import FactExtractor, to_seconds
from fpb.core.progress_model import ProgressModel
from fpb.core.prompt import PromptForwarder
from fpb.core.session import ProgressSample, Session, Unit

__all__ = [
    "FactExtractor",
    "LineAccumulator",
    "ProgressModel",
    "ProgressNotifier",
    "ProgressSample",
    "PromptForwarder",
    "Session",
    "Unit",
    "to_seconds",
]
