"""Tests for LockHandle lifecycle operations."""

import pytest

from aws_coordination_tool.kvstore.core.lock_handle import LockHandle
from aws_coordination_tool.kvstore.exceptions import KVStoreError, LockLostError
from aws_coordination_tool.kvstore.models import LockState


def test_try_acquire_reports_contention(client):
    first = LockHandle(client, "res")
    second = LockHandle(client, "res")

    assert first.try_acquire() is True
    assert second.try_acquire() is False
    assert first.held and not second.held


def test_each_handle_gets_its_own_token(client):
    assert LockHandle(client, "res").owner != LockHandle(client, "res").owner


def test_try_acquire_raises_other_store_errors(client, table):
    table.fail_next("PutItem", "InternalServerError")

    with pytest.raises(KVStoreError):
        LockHandle(client, "res").try_acquire()


def test_release_frees_the_lock(client):
    first = LockHandle(client, "res")
    first.try_acquire()
    first.release()

    assert not first.held
    assert first.state is LockState.IDLE
    assert LockHandle(client, "res").try_acquire() is True


def test_release_swallows_store_errors(client, table):
    handle = LockHandle(client, "res")
    handle.try_acquire()
    table.fail_next("DeleteItem", "InternalServerError")

    handle.release()

    assert handle.check()["owner"] == handle.owner


def test_renew_propagates_lost_lock(client):
    handle = LockHandle(client, "res")

    with pytest.raises(LockLostError):
        handle.renew()


def test_renew_propagates_store_errors(client, table):
    handle = LockHandle(client, "res")
    handle.try_acquire()
    table.fail_next("UpdateItem", "InternalServerError")

    with pytest.raises(KVStoreError):
        handle.renew()


def test_watcher_signals_when_lock_is_released(client):
    holder = LockHandle(client, "res")
    holder.try_acquire()
    waiter = LockHandle(client, "res", watch_interval=0.02)

    waiter.watch()
    try:
        assert not waiter.freed.wait(0.1)
        holder.release()
        assert waiter.freed.wait(1.0)
    finally:
        waiter.stop_watch()


def test_watcher_survives_read_errors(client, table):
    holder = LockHandle(client, "res")
    holder.try_acquire()
    waiter = LockHandle(client, "res", watch_interval=0.02)
    table.fail_next("GetItem", "InternalServerError", times=3)

    waiter.watch()
    try:
        holder.release()
        assert waiter.freed.wait(1.0)
    finally:
        waiter.stop_watch()


def test_context_manager_releases(client):
    with LockHandle(client, "res") as handle:
        assert handle.try_acquire()

    assert handle.check() is None


@pytest.mark.parametrize("lease", [0, -5])
def test_non_positive_lease_is_rejected(client, table, lease):
    with pytest.raises(ValueError, match="lease_timeout"):
        LockHandle(client, "res", lease_timeout=lease)

    assert table.calls == []
