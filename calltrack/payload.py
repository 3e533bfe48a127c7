"""Type-erased holder for one captured value."""

import copy
from typing import Any, TypeVar

from calltrack.exceptions import PayloadTypeError

T = TypeVar("T")


class Payload:
    """Holds exactly one value together with the type it was logged as.

    The value can only be read back whole, and only as the exact type it was
    logged with. Subclasses don't count: a ``bool`` payload does not recover
    as ``int``.
    """

    __slots__ = ("_value", "_type")

    def __init__(self, value: Any) -> None:
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_type", type(value))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Payload is immutable")

    @property
    def logged_type(self) -> type:
        """The exact type of the held value."""
        return self._type

    @property
    def type_name(self) -> str:
        """Qualified name of the held value's type, for messages."""
        return self._type.__qualname__

    def recover(self, expected_type: type[T]) -> T:
        """Return the held value if it is exactly of ``expected_type``.

        Raises:
            PayloadTypeError: If the value was logged as another type
        """
        if self._type is not expected_type:
            raise PayloadTypeError(self._type, expected_type)
        return self._value

    def matches(self, expected: Any) -> bool:
        """Recover as ``type(expected)`` and compare with the value's own equality."""
        return bool(self.recover(type(expected)) == expected)

    def __copy__(self) -> "Payload":
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "Payload":
        return Payload(copy.deepcopy(self._value, memo))

    def describe(self) -> str:
        """Render the held value for failure messages and dumps."""
        return repr(self._value)

    def __repr__(self) -> str:
        return f"Payload({self._value!r})"


__all__ = ["Payload"]
