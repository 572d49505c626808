"""
Configuration module for fpb.

Pydantic-validated settings built from defaults, a restricted set of
environment variables and explicit overrides.
"""

from fpb.config.defaults import DEFAULT_CONFIG, ENV_PREFIX
from fpb.config.settings import (
    ConfigService,
    GeneralSettings,
    Settings,
    WrapperSettings,
    config_service,
    get_settings,
)

__all__ = [
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "ConfigService",
    "GeneralSettings",
    "Settings",
    "WrapperSettings",
    "config_service",
    "get_settings",
]
