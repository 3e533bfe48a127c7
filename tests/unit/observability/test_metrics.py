"""Tests for Prometheus metrics."""

import pytest
from prometheus_client import REGISTRY

from calltrack import AssertionFailure, CallRecord, Tracker


def _sample(name: str, **labels: str) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestCallsLogged:
    """Tests for the calls counter."""

    def test_increments_per_call(self, tracker: Tracker) -> None:
        """Each logged call bumps the counter."""
        before = _sample("calltrack_calls_logged_total")
        tracker.log_call("a", CallRecord())
        tracker.log_call("b", CallRecord())
        assert _sample("calltrack_calls_logged_total") == before + 2

    def test_disabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Nothing is counted when metrics are disabled."""
        monkeypatch.setenv("CALLTRACK_METRICS_ENABLED", "false")
        tracker = Tracker()
        before = _sample("calltrack_calls_logged_total")
        tracker.log_call("a", CallRecord())
        assert _sample("calltrack_calls_logged_total") == before


class TestAssertions:
    """Tests for the assertions counter."""

    def test_counts_outcomes(self, tracker: Tracker) -> None:
        """Passed and failed checks are counted by check name."""
        passed = _sample("calltrack_assertions_total", check="wasnt_called", outcome="passed")
        failed = _sample("calltrack_assertions_total", check="was_called_once", outcome="failed")

        tracker.assert_that("x").wasnt_called()
        with pytest.raises(AssertionFailure):
            tracker.assert_that("x").was_called_once()

        assert (
            _sample("calltrack_assertions_total", check="wasnt_called", outcome="passed")
            == passed + 1
        )
        assert (
            _sample("calltrack_assertions_total", check="was_called_once", outcome="failed")
            == failed + 1
        )
