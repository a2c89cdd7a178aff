"""Tests for blocking lock acquisition with backoff."""

import threading
import time

import pytest

from aws_coordination_tool.kvstore.core.lock_acquisition import acquire_lock, backoff_delay
from aws_coordination_tool.kvstore.core.lock_handle import LockHandle
from aws_coordination_tool.kvstore.exceptions import KVStoreError, LockTimeoutError
from aws_coordination_tool.kvstore.models import LockState


@pytest.mark.parametrize(
    "attempt, expected",
    [(1, 0.25), (2, 0.5), (3, 0.5), (4, 0.5), (50, 0.5)],
)
def test_backoff_is_linear_and_capped(attempt, expected):
    assert backoff_delay(attempt) == pytest.approx(expected)


def test_free_lock_is_acquired_immediately(client, events, recorder):
    handle = acquire_lock(client, "res", events=events)

    assert handle.held
    assert handle.state is LockState.HELD
    assert recorder.finishes("acquire_lock") == ["acquired"]
    assert recorder.finishes("try_acquire_lock") == [0]


def test_expired_holder_is_taken_over(client, table, events, recorder):
    table.put_raw(
        {"PK": "lock:res", "SK": "lock:res", "value": "crashed", "ttl": int(time.time()) - 5}
    )

    handle = acquire_lock(client, "res", max_wait=0, events=events)

    assert handle.held
    assert recorder.finishes("acquire_lock") == ["acquired"]


def test_waiter_acquires_after_holder_releases(client, events, recorder):
    holder = acquire_lock(client, "res")
    threading.Timer(0.3, holder.release).start()

    start = time.monotonic()
    handle = acquire_lock(client, "res", max_wait=5, events=events)
    elapsed = time.monotonic() - start

    assert handle.held
    assert 0.25 <= elapsed < 2.0
    assert recorder.finishes("acquire_lock") == ["waited-then-acquired"]
    assert "contended" in recorder.finishes("try_acquire_lock")
    assert recorder.finishes("try_acquire_lock")[-1] == 0


def test_timeout_after_max_wait(client, events, recorder):
    holder = acquire_lock(client, "res")

    start = time.monotonic()
    with pytest.raises(LockTimeoutError) as excinfo:
        acquire_lock(client, "res", max_wait=0.6, events=events)
    elapsed = time.monotonic() - start

    assert 0.6 <= elapsed < 2.0
    assert excinfo.value.lock_name == "res"
    assert excinfo.value.wait_time >= 0.6
    assert recorder.finishes("acquire_lock") == ["timeout"]
    assert set(recorder.finishes("try_acquire_lock")) == {"contended"}
    assert holder.check()["owner"] == holder.owner


def test_zero_wait_makes_a_single_attempt(client, table, events, recorder):
    acquire_lock(client, "res")
    table.calls.clear()

    with pytest.raises(LockTimeoutError):
        acquire_lock(client, "res", max_wait=0, events=events)

    assert table.calls.count("PutItem") == 1
    assert recorder.starts("try_acquire_lock") == 1


def test_store_error_fails_without_retry(client, table, events, recorder):
    table.fail_next("PutItem", "InternalServerError")

    with pytest.raises(KVStoreError) as excinfo:
        acquire_lock(client, "res", max_wait=5, events=events)

    assert not isinstance(excinfo.value, LockTimeoutError)
    assert table.calls.count("PutItem") == 1
    assert recorder.finishes("try_acquire_lock") == ["InternalServerError"]
    assert recorder.finishes("acquire_lock") == ["error"]


def test_watchers_are_stopped_after_acquisition(client):
    holder = acquire_lock(client, "res")
    threading.Timer(0.2, holder.release).start()

    acquire_lock(client, "res", max_wait=5)

    assert not [t for t in threading.enumerate() if t.name == "lock-watch-res"]


def test_only_one_thread_holds_the_lock_at_a_time(client):
    active = 0
    peak = 0
    completed = 0
    guard = threading.Lock()

    def worker():
        nonlocal active, peak, completed
        handle = acquire_lock(client, "shared", max_wait=20)
        try:
            with guard:
                active += 1
                peak = max(peak, active)
            time.sleep(0.05)
            with guard:
                active -= 1
                completed += 1
        finally:
            handle.release()

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert completed == 5
    assert peak == 1


def test_handles_use_distinct_tokens(client):
    first = acquire_lock(client, "a")
    second = acquire_lock(client, "b")

    assert isinstance(first, LockHandle)
    assert first.owner != second.owner


def test_zero_lease_fails_before_touching_the_store(client, table, events, recorder):
    with pytest.raises(ValueError):
        acquire_lock(client, "res", lease_timeout=0, events=events)

    assert table.calls == []
    assert recorder.records == []
