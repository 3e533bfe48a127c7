"""Exception hierarchy for call tracking.

Two families live here:

* ``AssertionFailure`` and its subclasses signal a violated check. They
  inherit from ``AssertionError`` so test runners report them as ordinary
  test failures.
* ``CallTrackError`` and its subclasses signal misuse of the library itself
  (reusing a spent assertion, passing a negative count).
"""


class CallTrackError(Exception):
    """Base exception for library misuse."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SpentAssertionError(CallTrackError):
    """Raised when an assertion object is used after its chain step ran."""


class InvalidCountError(CallTrackError, ValueError):
    """Raised when a cardinality check is given a negative count."""


class PayloadTypeError(TypeError):
    """Raised when a payload is recovered as a type it does not hold."""

    def __init__(self, logged_type: type, expected_type: type) -> None:
        self.logged_type = logged_type
        self.expected_type = expected_type
        super().__init__(
            f"Payload holds {_type_name(logged_type)}, not {_type_name(expected_type)}"
        )


class AssertionFailure(AssertionError):
    """Raised when a recorded call log doesn't satisfy a check.

    Carries the tracked key and, for cardinality checks, the expected and
    actual call counts.
    """

    def __init__(
        self,
        message: str,
        key: str,
        expected: object = None,
        actual: object = None,
    ) -> None:
        self.message = message
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class TypeMismatchError(AssertionFailure):
    """Raised when a logged value had a different type than expected."""

    def __init__(self, key: str, logged_type: type, expected_type: type) -> None:
        super().__init__(
            f"The value logged for {key} had a different type than expected "
            f"(logged {_type_name(logged_type)}, expected {_type_name(expected_type)}).",
            key,
            expected=expected_type,
            actual=logged_type,
        )


class MissingPayloadError(AssertionFailure):
    """Raised when no recorded call carries the payload being checked."""

    def __init__(self, key: str, what: str) -> None:
        self.what = what
        super().__init__(f"You didn't log any {what} for your calls to {key}.", key)


def _type_name(tp: type) -> str:
    module = tp.__module__
    if module == "builtins":
        return tp.__qualname__
    return f"{module}.{tp.__qualname__}"


__all__ = [
    "AssertionFailure",
    "CallTrackError",
    "InvalidCountError",
    "MissingPayloadError",
    "PayloadTypeError",
    "SpentAssertionError",
    "TypeMismatchError",
]
