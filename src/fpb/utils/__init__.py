"""
Shared utilities module.
"""

from fpb.utils.logging import (
    configure_from_settings,
    configure_logging,
    get_logger,
)

__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
]
