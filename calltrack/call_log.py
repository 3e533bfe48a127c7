"""Append-only per-key store of call records."""

import threading

from calltrack.record import CallRecord


class CallLog:
    """Ordered, thread-safe sequence of the calls logged under one key.

    Insertion order is call order. The log only grows, except through
    ``clear``. Each log carries its own lock, so logs for different keys
    never contend with each other.
    """

    def __init__(self) -> None:
        """Initialize an empty log."""
        self._records: list[CallRecord] = []
        self._lock = threading.Lock()

    def append(self, record: CallRecord) -> None:
        """Add a record at the end of the log."""
        with self._lock:
            self._records.append(record)

    def snapshot(self) -> tuple[CallRecord, ...]:
        """Return the records logged so far.

        The tuple is independent of the log: calls appended afterwards don't
        appear in it.
        """
        with self._lock:
            return tuple(self._records)

    def clear(self) -> int:
        """Remove every record.

        Returns:
            Number of records cleared
        """
        with self._lock:
            count = len(self._records)
            self._records = []
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


__all__ = ["CallLog"]
