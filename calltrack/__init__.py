"""Call tracking for tests.

Records calls of functions, methods and closures under string keys and
lets tests assert on how often they were called, with which arguments and
what they returned.

    from calltrack import Tracker, track_with

    tracker = Tracker()

    @track_with(tracker)
    def greet(name: str) -> str:
        return f"hi {name}"

    greet("Ann")
    tracker.assert_that("greet").was_called_once().with_(("Ann",)).and_returned("hi Ann")

Calls can also be logged by hand with ``Tracker.log_call`` and
``CallRecord.of``.
"""

from calltrack.assertions import Assertion, MetaAssertion
from calltrack.call_log import CallLog
from calltrack.decorators import track_with
from calltrack.exceptions import (
    AssertionFailure,
    CallTrackError,
    InvalidCountError,
    MissingPayloadError,
    PayloadTypeError,
    SpentAssertionError,
    TypeMismatchError,
)
from calltrack.payload import Payload
from calltrack.record import MISSING, CallRecord
from calltrack.tracker import Tracker, default_tracker

__all__ = [
    # Registry
    "Tracker",
    "default_tracker",
    "CallLog",
    # Records
    "CallRecord",
    "Payload",
    "MISSING",
    # Assertions
    "Assertion",
    "MetaAssertion",
    # Instrumentation
    "track_with",
    # Errors
    "AssertionFailure",
    "CallTrackError",
    "InvalidCountError",
    "MissingPayloadError",
    "PayloadTypeError",
    "SpentAssertionError",
    "TypeMismatchError",
]
