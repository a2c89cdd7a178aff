"""
Memoize: run an expensive computation at most once across the fleet.

Double-checked locking over the store:

1. Read <key>-value, return it if present (no lock taken).
2. Acquire <key>-lock.
3. Read again, another holder may have filled the cache meanwhile.
4. Run the computation while a LeaseRenewer keeps the lock alive.
5. Cache the result under <key>-value (unless ttl is 0) and release.

Failed computations are not cached, so the next caller retries.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

from ..constants import (
    DEFAULT_LOCK_LEASE,
    DEFAULT_LOCK_WAIT,
    DEFAULT_MEMOIZE_TTL,
    MEMOIZE_LOCK_SUFFIX,
    MEMOIZE_VALUE_SUFFIX,
)
from ..events import CallEvents, instrument
from ..logging_config import get_logger
from ..models import MemoizeStatus
from ..utils import decode_value, encode_value
from .client import DynamoDBClient
from .kv_operations import get_value, set_value
from .lock_acquisition import acquire_lock
from .lock_handle import LockHandle

module_logger = get_logger(__name__)


class LeaseRenewer:
    """
    Background task renewing a held lock every ``interval`` seconds.

    Owned by a single memoize call. stop() cancels the timer, waits for an
    in-flight renewal to finish and re-raises the first renewal failure.
    """

    def __init__(self, handle: LockHandle, interval: float):
        self.handle = handle
        self.interval = interval
        self.error: BaseException | None = None
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name=f"lock-renew-{handle.name}", daemon=True
        )

    def start(self) -> "LeaseRenewer":
        self._thread.start()
        return self

    def stop(self, raise_error: bool = True) -> None:
        self._stop.set()
        if self._thread.is_alive():
            self._thread.join()
        if raise_error and self.error is not None:
            raise self.error

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self.handle.renew()
            except Exception as e:
                self.handle.logger.warning(f"Failed to renew lock '{self.handle.name}': {e}")
                self.error = e
                return

    def __enter__(self) -> "LeaseRenewer":
        return self.start()

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        # Never mask an exception already on its way out
        self.stop(raise_error=exc_type is None)


def memoize(
    client: DynamoDBClient,
    key: str,
    func: Callable[[], Any],
    ttl: int = DEFAULT_MEMOIZE_TTL,
    lease_timeout: int = DEFAULT_LOCK_LEASE,
    max_wait: float = DEFAULT_LOCK_WAIT,
    *,
    events: CallEvents | None = None,
    context: Any = None,
    logger: logging.Logger | None = None,
) -> Any:
    """
    Return the cached result for key, computing it with func at most once.

    This is expensive: every call is at least one DynamoDB read, and a miss
    takes a distributed lock. Use it for making critical sections idempotent,
    not as a general purpose cache.

    Args:
        client: DynamoDB client
        key: Memoization key
        func: Zero-argument computation
        ttl: Seconds to cache the result, 0 runs func under the lock without caching
        lease_timeout: Lock lease in seconds, renewed every lease_timeout / 2
        max_wait: Seconds to wait for the lock
        events: Instrumentation observers (optional)
        context: Caller context passed through to observers
        logger: Logger for diagnostics (optional)

    Returns:
        The cached or freshly computed value

    Raises:
        LockTimeoutError: If the lock could not be acquired within max_wait
        LockLostError: If the lease could not be renewed during the computation
        ValueError: If lease_timeout is not positive
        TypeError: If the result is not JSON-serializable (nothing is cached)
        KVStoreError: For DynamoDB errors
        Exception: Whatever func raises, unchanged
    """
    log = logger or module_logger
    value_key = f"{key}{MEMOIZE_VALUE_SUFFIX}"
    lock_key = f"{key}{MEMOIZE_LOCK_SUFFIX}"

    with instrument(events, key, "memoize", context, ttl=ttl) as call:
        value = get_value(client, value_key, events=events, context=context)
        if value is not None:
            call.status = MemoizeStatus.CACHE_HIT_BEFORE_LOCK.value
            return value

        try:
            handle = acquire_lock(
                client,
                lock_key,
                lease_timeout,
                max_wait,
                events=events,
                context=context,
                logger=log,
            )
        except Exception:
            call.status = MemoizeStatus.ERROR.value
            raise

        try:
            value = get_value(client, value_key, events=events, context=context)
            if value is not None:
                call.status = MemoizeStatus.CACHE_HIT_AFTER_LOCK.value
                return value

            with LeaseRenewer(handle, lease_timeout / 2):
                value = _normalize(func())

            # Hand back what later callers will read from the cache
            value = decode_value(encode_value(value))

            if ttl != 0:
                set_value(client, value_key, value, ttl, events=events, context=context)
            call.status = MemoizeStatus.COMPUTED.value
            log.info(f"Computed and cached value for '{key}'")
            return value
        except Exception:
            call.status = MemoizeStatus.ERROR.value
            raise
        finally:
            handle.release()


def _normalize(value: Any) -> Any:
    """Map 'nothing' results to an empty mapping so a concrete value is cached."""
    if value is None:
        return {}
    if isinstance(value, (str, list, dict, tuple)) and len(value) == 0:
        return {}
    return value
