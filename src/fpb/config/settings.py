"""Configuration system for fpb.

Settings are layered with the following priority (high → low):
1) Explicit overrides (tests, embedding callers)
2) Environment variables (prefix: FPB_, ``general`` section only)
3) Built-in defaults
"""

from __future__ import annotations

import json
import os
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from fpb.config.defaults import DEFAULT_CONFIG, ENV_ALIASES, ENV_PREFIX, ENV_SECTIONS
from fpb.errors import ConfigError


class GeneralSettings(BaseModel):
    verbosity: str = Field(default="warning")
    log_file: str = Field(default="")


class WrapperSettings(BaseModel):
    program: str = Field(default="ffmpeg")
    placeholder_label: str = Field(default="Processing")
    prompt_suffix: str = Field(default="[y/N] ", min_length=1)
    render_interval_ms: int = Field(default=50, ge=0)
    fallback_width: int = Field(default=80, gt=0)
    min_terminal_width: int = Field(default=20, ge=0)
    min_bar_width: int = Field(default=5, ge=1)
    label_limit: int = Field(default=30, ge=4)
    read_chunk_size: int = Field(default=4096, gt=0)

    @property
    def render_interval(self) -> float:
        """Minimum delay between two throttled renders, in seconds."""
        return self.render_interval_ms / 1000


class Settings(BaseModel):
    general: GeneralSettings
    wrapper: WrapperSettings

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        return cls.model_validate(data)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base, returning a new dict."""

    result = {**base}
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _parse_scalar(value: str) -> Any:
    """Best-effort parsing for env string values."""

    trimmed = value.strip()
    # Try JSON (covers numbers, booleans, null, quoted strings)
    try:
        return json.loads(trimmed)
    except json.JSONDecodeError:
        pass

    lowered = trimmed.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if lowered in {"none", "null"}:
        return None
    return trimmed


def _set_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    current = target
    for key in path[:-1]:
        current = current.setdefault(key, {})
    current[path[-1]] = value


class ConfigService:
    """Loads and merges fpb configuration."""

    def __init__(self, env_prefix: str = ENV_PREFIX):
        self.env_prefix = env_prefix

    def load(
        self,
        overrides: dict[str, Any] | None = None,
        environ: dict[str, str] | None = None,
    ) -> Settings:
        data = _deep_merge(DEFAULT_CONFIG, self._env_overrides(environ))
        if overrides:
            data = _deep_merge(data, overrides)

        try:
            return Settings.from_dict(data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc

    def _env_overrides(self, environ: dict[str, str] | None = None) -> dict[str, Any]:
        environ = os.environ if environ is None else environ
        overrides: dict[str, Any] = {}
        prefix = f"{self.env_prefix}_"
        for key, raw_value in environ.items():
            if not key.startswith(prefix):
                continue
            path = self._normalize_env_key(key[len(prefix) :])
            if not path or path[0] not in ENV_SECTIONS:
                continue
            _set_nested(overrides, path, _parse_scalar(raw_value))
        return overrides

    def _normalize_env_key(self, key: str) -> list[str]:
        if key in ENV_ALIASES:
            return list(ENV_ALIASES[key])
        segments = key.split("__")
        return [segment.lower() for segment in segments if segment]


config_service = ConfigService()


_cached_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _cached_settings
    if _cached_settings is None:
        _cached_settings = config_service.load()
    return _cached_settings
