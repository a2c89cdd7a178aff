"""
Lock acquisition with bounded linear backoff.

Drives a LockHandle from IDLE through ATTEMPTING to HELD, FAILED or
TIMED_OUT. Contention is retried with a delay of
min(LOCK_BACKOFF_STEP * attempt, LOCK_BACKOFF_MAX) seconds; any other
store error fails immediately. While backing off the handle's watcher
wakes the waiter as soon as the current holder lets go, so the common
"previous holder just released" case does not pay the full delay.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import logging
import time
from typing import Any

from ..constants import DEFAULT_LOCK_LEASE, DEFAULT_LOCK_WAIT, LOCK_BACKOFF_MAX, LOCK_BACKOFF_STEP
from ..events import CallEvents, instrument
from ..exceptions import LockTimeoutError
from ..logging_config import get_logger
from ..models import AcquireStatus, LockState
from .client import DynamoDBClient
from .lock_handle import LockHandle

module_logger = get_logger(__name__)


def backoff_delay(attempt: int) -> float:
    """
    Delay before retrying after the given number of contended attempts.

    Args:
        attempt: Number of contention failures so far (1-based)

    Returns:
        Delay in seconds
    """
    return min(LOCK_BACKOFF_STEP * attempt, LOCK_BACKOFF_MAX)


def acquire_lock(
    client: DynamoDBClient,
    lock_name: str,
    lease_timeout: int = DEFAULT_LOCK_LEASE,
    max_wait: float = DEFAULT_LOCK_WAIT,
    *,
    owner: str | None = None,
    events: CallEvents | None = None,
    context: Any = None,
    logger: logging.Logger | None = None,
) -> LockHandle:
    """
    Acquire a distributed lock, waiting up to max_wait seconds.

    Args:
        client: DynamoDB client
        lock_name: Lock name
        lease_timeout: Seconds the lock stays valid once held unless renewed
        max_wait: Seconds to keep retrying a contended lock
        owner: Holder token (optional, a fresh one is generated per call)
        events: Instrumentation observers (optional)
        context: Caller context passed through to observers
        logger: Logger for diagnostics (optional)

    Returns:
        Held LockHandle; release it with LockHandle.release()

    Raises:
        LockTimeoutError: If the lock could not be acquired within max_wait
        KVStoreError: For DynamoDB errors other than contention
        ValueError: If lease_timeout is not positive
    """
    log = logger or module_logger
    handle = LockHandle(client, lock_name, lease_timeout, owner=owner, logger=log)

    with instrument(
        events, lock_name, "acquire_lock", context, lease_timeout=lease_timeout, max_wait=max_wait
    ) as call:
        start = time.monotonic()
        deadline = start + max_wait
        attempt = 0
        handle.state = LockState.ATTEMPTING

        try:
            while True:
                if _try_once(handle, events, context):
                    wait_time = time.monotonic() - start
                    handle.state = LockState.HELD
                    if attempt == 0:
                        call.status = AcquireStatus.ACQUIRED.value
                    else:
                        call.status = AcquireStatus.WAITED_THEN_ACQUIRED.value
                    log.info(f"Acquired lock '{lock_name}' (waited {wait_time:.3f}s)")
                    return handle

                attempt += 1
                log.warning(f"Lock contention on '{lock_name}' (attempt {attempt})")

                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                if attempt == 1:
                    handle.watch()

                if handle.freed.wait(min(backoff_delay(attempt), remaining)):
                    # Holder let go: retry right away, resume backoff if we lose again
                    handle.freed.clear()
        except Exception:
            handle.state = LockState.FAILED
            call.status = AcquireStatus.ERROR.value
            raise
        finally:
            handle.stop_watch()

        wait_time = time.monotonic() - start
        handle.state = LockState.TIMED_OUT
        call.status = AcquireStatus.TIMEOUT.value
        log.warning(f"Timed out waiting for lock '{lock_name}' after {wait_time:.3f}s")
        raise LockTimeoutError(lock_name, wait_time)


def _try_once(handle: LockHandle, events: CallEvents | None, context: Any) -> bool:
    with instrument(events, handle.name, "try_acquire_lock", context) as call:
        acquired = handle.try_acquire()
        call.status = 0 if acquired else "contended"
    return acquired
