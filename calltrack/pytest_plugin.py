"""pytest plugin providing a fresh tracker per test.

Registered through the ``pytest11`` entry point, so installing calltrack is
enough:

    def test_greets(tracker):
        greeter = Greeter(tracker)
        greeter.greet("Ann")
        tracker.assert_that("Greeter::greet").was_called_once()
"""

from collections.abc import Generator

import pytest

from calltrack.config import get_settings
from calltrack.observability.logging import setup_logging
from calltrack.tracker import Tracker


def pytest_configure(config: pytest.Config) -> None:  # noqa: ARG001
    """Configure structlog when the settings ask for it."""
    settings = get_settings()
    if settings.configure_logging:
        setup_logging(
            level=settings.log_level,
            format=settings.log_format,
            max_repr_length=settings.max_repr_length,
        )


@pytest.fixture
def tracker() -> Generator[Tracker, None, None]:
    """Yield an empty tracker and clear it after the test."""
    fresh = Tracker()
    yield fresh
    fresh.clear()
