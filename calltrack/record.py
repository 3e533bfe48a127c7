"""Call record model."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from calltrack.payload import Payload


class _Missing:
    """Marker for a value that was not logged at all."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class CallRecord(BaseModel):
    """One logged invocation.

    ``None`` in a payload field means nothing was logged for it. A logged
    ``None`` value is stored as ``Payload(None)``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    arguments: Payload | None = Field(
        default=None, description="Arguments of the call, usually as a tuple"
    )
    returned: Payload | None = Field(default=None, description="Value the call returned")
    recorded_at: datetime = Field(default_factory=utc_now, description="When the call was logged")

    @classmethod
    def of(cls, arguments: Any = MISSING, returned: Any = MISSING) -> "CallRecord":
        """Build a record from raw values, wrapping each one that was given."""
        return cls(
            arguments=None if arguments is MISSING else Payload(arguments),
            returned=None if returned is MISSING else Payload(returned),
        )


__all__ = ["MISSING", "CallRecord"]
