"""Tests for CallLog."""

import threading

from calltrack import CallLog, CallRecord


def test_append_keeps_order() -> None:
    log = CallLog()
    for i in range(3):
        log.append(CallRecord.of(arguments=(i,)))

    values = [record.arguments.recover(tuple) for record in log.snapshot()]  # type: ignore[union-attr]
    assert values == [(0,), (1,), (2,)]
    assert len(log) == 3


def test_snapshot_is_unaffected_by_later_appends() -> None:
    log = CallLog()
    log.append(CallRecord.of(arguments=(1,)))
    snapshot = log.snapshot()

    log.append(CallRecord.of(arguments=(2,)))

    assert len(snapshot) == 1
    assert len(log) == 2


def test_clear_returns_count() -> None:
    log = CallLog()
    log.append(CallRecord())
    log.append(CallRecord())

    assert log.clear() == 2
    assert len(log) == 0
    assert log.snapshot() == ()


def test_concurrent_appends_are_not_lost() -> None:
    log = CallLog()
    per_thread = 200

    def worker(thread_id: int) -> None:
        for i in range(per_thread):
            log.append(CallRecord.of(arguments=(thread_id, i)))

    threads = [threading.Thread(target=worker, args=(t,)) for t in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    records = log.snapshot()
    assert len(records) == 8 * per_thread
    # each thread's own calls stay in the order it made them
    for thread_id in range(8):
        seen = [
            args[1]
            for args in (r.arguments.recover(tuple) for r in records)  # type: ignore[union-attr]
            if args[0] == thread_id
        ]
        assert seen == list(range(per_thread))
