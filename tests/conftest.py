"""Pytest configuration and shared fixtures.

Test Categories:
| Category    | Focus                       | Tools                        |
| Unit        | Individual components       | pytest, fake clocks, StringIO |
| Integration | Supervisor + real processes | pytest-asyncio, fake ffmpeg  |
"""

import io
import sys
import textwrap
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line(
        "markers", "integration: Integration tests (component interaction)"
    )


# =============================================================================
# COMMON FIXTURES
# =============================================================================


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def display() -> io.StringIO:
    """Stand-in for the diagnostic stream."""
    return io.StringIO()


@pytest.fixture
def settings():
    """Default settings, independent of the caller's environment."""
    from fpb.config.settings import config_service

    return config_service.load(environ={})


@pytest.fixture
def fake_ffmpeg(tmp_path):
    """Write a Python script standing in for ffmpeg.

    Returns a factory taking the script body; the result is the argument
    list to run it (``sys.executable`` is used as the program).
    """

    def make(body: str) -> list[str]:
        script = tmp_path / "fake_ffmpeg.py"
        script.write_text(textwrap.dedent(body), encoding="utf-8")
        return [str(script)]

    return make
