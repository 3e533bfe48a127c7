"""Registry of call logs, keyed by the name of the tracked operation."""

import sys
import threading
from functools import lru_cache
from typing import TextIO

from calltrack.assertions import Assertion
from calltrack.call_log import CallLog
from calltrack.config import Settings, get_settings
from calltrack.observability.logging import get_logger, truncate
from calltrack.observability.metrics import CALLS_LOGGED
from calltrack.record import CallRecord

logger = get_logger(__name__)


class Tracker:
    """Records calls under string keys and starts assertion chains on them.

    Keys are opaque and compared exactly. By convention they look like
    ``"Namespace::method_name"`` or a bare ``"function_name"``.

    One tracker is meant to be shared by everything that logs into it, across
    threads. The key lookup is guarded by a short-held registry lock and each
    key's log by its own lock, so calls to unrelated keys never wait on each
    other.

    Example:
        tracker = Tracker()
        tracker.log_call("greet", CallRecord.of(("Ann",), "hi Ann"))
        tracker.assert_that("greet").was_called_once().with_(("Ann",))
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize an empty registry.

        Args:
            settings: Settings for metrics and dumps, read from the config
                when omitted. They are fixed for the life of the tracker.
        """
        self._settings = settings if settings is not None else get_settings()
        self._logs: dict[str, CallLog] = {}
        self._lock = threading.Lock()

    @classmethod
    def new(cls) -> "Tracker":
        """Construct a new tracker."""
        return cls()

    def log_call(self, key: str, record: CallRecord) -> None:
        """Log a call under ``key``.

        This is what instrumentation calls at each invocation, e.g. the
        ``track_with`` decorator. It can be called by hand as well.

        Args:
            key: Key of the tracked operation, e.g. "Greeter::greet"
            record: Arguments and return value of the call; either may be absent

        Raises:
            TypeError: If key isn't a string or record isn't a CallRecord
        """
        if not isinstance(key, str):
            raise TypeError(f"key must be a str, got {type(key).__name__}")
        if not isinstance(record, CallRecord):
            raise TypeError(f"record must be a CallRecord, got {type(record).__name__}")

        with self._lock:
            log = self._logs.get(key)
            if log is None:
                log = CallLog()
                self._logs[key] = log
                logger.debug("call_log_created", key=key)

        log.append(record)
        logger.debug("call_logged", key=key)
        if self._settings.metrics_enabled:
            CALLS_LOGGED.inc()

    def assert_that(self, key: str) -> Assertion:
        """Start an assertion chain for ``key``.

        The chain works on the calls logged up to now. A key that was never
        logged is not an error; it simply has no calls.
        """
        return Assertion(key, self.calls(key), self._settings)

    def calls(self, key: str) -> tuple[CallRecord, ...]:
        """Return the records logged for ``key`` so far, oldest first."""
        log = self._get_log(key)
        if log is None:
            return ()
        return log.snapshot()

    def call_count(self, key: str) -> int:
        log = self._get_log(key)
        return 0 if log is None else len(log)

    def keys(self) -> list[str]:
        """Return every key that has been logged, sorted."""
        with self._lock:
            return sorted(self._logs)

    def clear(self) -> int:
        """Forget every key and its calls.

        Assertion chains that were already started keep their snapshot.

        Returns:
            Number of records cleared
        """
        with self._lock:
            logs = self._logs
            self._logs = {}
        cleared = sum(log.clear() for log in logs.values())
        logger.info("tracker_cleared", keys=len(logs), records=cleared)
        return cleared

    def debug_dump(self, key: str, file: TextIO | None = None) -> str:
        """Print the calls logged for ``key`` and return the printed text.

        Args:
            key: Key to dump
            file: Stream to print to, stdout by default
        """
        records = self.calls(key)
        limit = self._settings.max_repr_length
        if not records:
            lines = [f"{key}: no calls logged"]
        else:
            lines = [f"{key}: {len(records)} call(s)"]
            for index, record in enumerate(records):
                arguments = "-" if record.arguments is None else record.arguments.describe()
                returned = "-" if record.returned is None else record.returned.describe()
                lines.append(
                    f"  #{index} {record.recorded_at.isoformat()} "
                    f"arguments={truncate(arguments, limit)} returned={truncate(returned, limit)}"
                )
        text = "\n".join(lines)
        print(text, file=file if file is not None else sys.stdout)
        return text

    def _get_log(self, key: str) -> CallLog | None:
        with self._lock:
            return self._logs.get(key)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._logs

    def __repr__(self) -> str:
        with self._lock:
            counts = {key: len(log) for key, log in sorted(self._logs.items())}
        return f"Tracker({counts})"


@lru_cache(maxsize=1)
def default_tracker() -> Tracker:
    """Get the process-wide tracker.

    Handy for module-level functions that have no object to carry a tracker.
    Tests using it should call ``clear()`` between runs.
    """
    return Tracker()


__all__ = ["Tracker", "default_tracker"]
