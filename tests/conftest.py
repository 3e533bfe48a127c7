"""Shared test fixtures for the calltrack test suite.

The ``tracker`` fixture comes from calltrack's own pytest plugin.
"""

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import structlog

from calltrack import CallRecord, Tracker


@pytest.fixture
def config_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory fixture to write TOML files into a temporary directory.

    Usage:
        def test_something(config_file):
            path = config_file("calltrack.toml", "log_level = 'DEBUG'")
    """

    def _write(filename: str, content: str) -> Path:
        path = tmp_path / filename
        path.write_text(content)
        return path

    return _write


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear the settings cache and calltrack env vars around each test."""
    from calltrack.config import get_settings

    for name in ("CALLTRACK_CONFIG", "CALLTRACK_ENV"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def log_greet() -> Callable[[Tracker, str], None]:
    """Log one call of "greet" the way the decorator would."""

    def _log(tracker: Tracker, name: str) -> None:
        tracker.log_call("greet", CallRecord.of(arguments=(name,), returned=f"hi {name}"))

    return _log


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Start from default structlog and put the calltrack logger back afterwards."""
    library_logger = logging.getLogger("calltrack")
    handlers = list(library_logger.handlers)
    level = library_logger.level
    propagate = library_logger.propagate
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
    library_logger.handlers = handlers
    library_logger.setLevel(level)
    library_logger.propagate = propagate
