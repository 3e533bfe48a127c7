"""Chained assertions over a snapshot of one key's call log.

A chain starts at ``Tracker.assert_that(key)``:

    tracker.assert_that("greet").was_called_once().with_(("Ann",)).and_returned("hi Ann")

``Assertion`` runs exactly one cardinality check and hands over to a
``MetaAssertion``, which runs existential checks on the logged payloads.
Each step consumes the object it was called on; reusing it raises
``SpentAssertionError``.
"""

from typing import Any

from calltrack.config import Settings, get_settings
from calltrack.exceptions import (
    AssertionFailure,
    InvalidCountError,
    MissingPayloadError,
    PayloadTypeError,
    SpentAssertionError,
    TypeMismatchError,
)
from calltrack.observability.logging import get_logger, truncate
from calltrack.observability.metrics import ASSERTIONS
from calltrack.payload import Payload
from calltrack.record import CallRecord

logger = get_logger(__name__)


def _plural(count: int) -> str:
    return "call" if count == 1 else "calls"


class _Chain:
    """Shared state of a chain step: the key, its snapshot and a spent flag."""

    def __init__(
        self,
        key: str,
        records: tuple[CallRecord, ...],
        settings: Settings | None = None,
    ) -> None:
        self._key = key
        self._records = records
        self._settings = settings if settings is not None else get_settings()
        self._spent_by: str | None = None

    @property
    def key(self) -> str:
        return self._key

    def _ensure_live(self, check: str) -> None:
        if self._spent_by is not None:
            raise SpentAssertionError(
                f"Can't run {check}() on the assertion for {self._key}: it was "
                f"already consumed by {self._spent_by}(). Start a new chain with assert_that()."
            )

    def _consume(self, check: str) -> None:
        self._ensure_live(check)
        self._spent_by = check

    def _passed(self, check: str) -> None:
        if self._settings.metrics_enabled:
            ASSERTIONS.labels(check=check, outcome="passed").inc()

    def _failed(self, check: str, error: AssertionFailure) -> AssertionFailure:
        logger.info(
            "assertion_failed",
            key=self._key,
            check=check,
            expected=repr(error.expected),
            actual=repr(error.actual),
            reason=error.message,
        )
        if self._settings.metrics_enabled:
            ASSERTIONS.labels(check=check, outcome="failed").inc()
        return error

    def _cardinality_failure(self, message: str, expected: int) -> AssertionFailure:
        actual = len(self._records)
        return AssertionFailure(
            f"{message} (expected {expected} {_plural(expected)}, actual {actual})",
            self._key,
            expected=expected,
            actual=actual,
        )


class Assertion(_Chain):
    """Cardinality checks on the calls logged for one key."""

    def was_called_once(self) -> "MetaAssertion":
        """Require that the key was called exactly once."""
        check = "was_called_once"
        self._consume(check)
        count = len(self._records)
        if count == 0:
            raise self._failed(check, self._cardinality_failure(f"{self._key} wasn't called.", 1))
        if count > 1:
            raise self._failed(
                check,
                self._cardinality_failure(
                    f"{self._key} was called more than once. Was called {count} times.", 1
                ),
            )
        self._passed(check)
        return MetaAssertion(self._key, self._records, self._settings)

    def was_called_times(self, n: int) -> "MetaAssertion":
        """Require that the key was called exactly ``n`` times.

        ``n == 0`` is accepted and behaves like ``wasnt_called``, except that
        the chain continues.

        Raises:
            InvalidCountError: If ``n`` is negative
        """
        check = "was_called_times"
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise InvalidCountError(
                f"was_called_times() needs a non-negative integer count, got {n!r}"
            )
        self._consume(check)
        count = len(self._records)
        if n == 0 and count > 0:
            raise self._failed(
                check,
                self._cardinality_failure(
                    f"{self._key} should not have been called but was called {count} times.", 0
                ),
            )
        elif count == 0 and n > 0:
            raise self._failed(
                check,
                self._cardinality_failure(
                    f"{self._key} should've been called {n} times, but wasn't called.", n
                ),
            )
        elif count < n:
            raise self._failed(
                check,
                self._cardinality_failure(
                    f"{self._key} was called fewer than {n} times. Was called {count} times.", n
                ),
            )
        elif count > n:
            raise self._failed(
                check,
                self._cardinality_failure(
                    f"{self._key} was called more than {n} times. Was called {count} times.", n
                ),
            )
        self._passed(check)
        return MetaAssertion(self._key, self._records, self._settings)

    def wasnt_called(self) -> None:
        """Require that the key was never called. Ends the chain."""
        check = "wasnt_called"
        self._consume(check)
        count = len(self._records)
        if count != 0:
            raise self._failed(
                check,
                self._cardinality_failure(
                    f"{self._key} should not have been called but was called {count} times.", 0
                ),
            )
        self._passed(check)


class MetaAssertion(_Chain):
    """Existential checks on the arguments and return values of logged calls.

    A check passes if at least one logged call matches. Values are compared
    only after recovering the logged payload as exactly ``type(expected)``;
    a logged payload of any other type fails the check with
    ``TypeMismatchError``.
    """

    def with_(self, expected: Any) -> "MetaAssertion":
        """Require that the key was called at least once with ``expected``.

        ``expected`` must be what the instrumentation logged, usually a tuple
        of the call's arguments: ``with_(("Ann",))``.
        """
        check = "with"
        self._ensure_live(check)
        if not self._records:
            raise self._failed(
                check, AssertionFailure(f"{self._key} wasn't called.", self._key, expected, 0)
            )
        payloads = self._carried(check, "arguments", "arguments")
        if not self._any_matches(check, payloads, expected):
            raise self._failed(
                check,
                AssertionFailure(
                    f"{self._key} wasn't called with the arguments specified. "
                    f"Expected {self._show(expected)}, logged {self._show_all(payloads)}.",
                    self._key,
                    expected=expected,
                    actual=[p.describe() for p in payloads],
                ),
            )
        self._passed(check)
        return self

    def not_with(self, args: Any) -> "MetaAssertion":
        """Require that the key was never called with ``args``.

        Vacuously true when nothing was logged.
        """
        check = "not_with"
        self._ensure_live(check)
        if not self._records:
            self._passed(check)
            return self
        payloads = self._carried(check, "arguments", "arguments")
        if self._any_matches(check, payloads, args):
            raise self._failed(
                check,
                AssertionFailure(
                    f"{self._key} was called with {self._show(args)} when it shouldn't have been.",
                    self._key,
                    expected=args,
                    actual=[p.describe() for p in payloads],
                ),
            )
        self._passed(check)
        return self

    def and_returned(self, value: Any) -> None:
        """Require that the key returned ``value`` at least once. Ends the chain."""
        check = "and_returned"
        self._consume(check)
        if not self._records:
            raise self._failed(
                check, AssertionFailure(f"{self._key} wasn't called.", self._key, value, 0)
            )
        payloads = self._carried(check, "returned", "return values")
        if not self._any_matches(check, payloads, value):
            raise self._failed(
                check,
                AssertionFailure(
                    f"{self._key} didn't return the value specified. "
                    f"Expected {self._show(value)}, logged {self._show_all(payloads)}.",
                    self._key,
                    expected=value,
                    actual=[p.describe() for p in payloads],
                ),
            )
        self._passed(check)

    def _carried(self, check: str, field: str, what: str) -> list[Payload]:
        payloads = [
            payload
            for payload in (getattr(record, field) for record in self._records)
            if payload is not None
        ]
        if not payloads:
            raise self._failed(check, MissingPayloadError(self._key, what))
        return payloads

    def _any_matches(self, check: str, payloads: list[Payload], expected: Any) -> bool:
        # Every payload is recovered, so a mistyped one fails even after a match.
        found = False
        for payload in payloads:
            try:
                if payload.matches(expected):
                    found = True
            except PayloadTypeError as exc:
                raise self._failed(
                    check, TypeMismatchError(self._key, exc.logged_type, exc.expected_type)
                ) from exc
        return found

    def _show(self, value: Any) -> str:
        return truncate(repr(value), self._settings.max_repr_length)

    def _show_all(self, payloads: list[Payload]) -> str:
        rendered = ", ".join(p.describe() for p in payloads)
        return truncate(f"[{rendered}]", self._settings.max_repr_length)


__all__ = ["Assertion", "MetaAssertion"]
