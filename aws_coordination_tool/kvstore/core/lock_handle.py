"""
Lock handle for kvstore.

A LockHandle owns exactly one Lock (one holder token) and offers the
lifecycle operations on it: try-acquire, renew, release and a
"became free" notification. DynamoDB has no change streams we can block
on cheaply, so the notification is a polling watcher thread that sets
``freed`` once the lock entry is gone or expired.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import logging
import threading
from typing import Any

from ..constants import DEFAULT_LOCK_LEASE, LOCK_WATCH_INTERVAL
from ..exceptions import LockUnavailableError
from ..logging_config import get_logger
from ..models import Lock, LockState
from .client import DynamoDBClient
from .lock_operations import (
    check_lock,
    generate_owner_token,
    release_lock,
    renew_lock,
    try_acquire_lock,
)

module_logger = get_logger(__name__)


class LockHandle:
    """One named mutual-exclusion lock instance."""

    def __init__(
        self,
        client: DynamoDBClient,
        name: str,
        lease_timeout: int = DEFAULT_LOCK_LEASE,
        owner: str | None = None,
        logger: logging.Logger | None = None,
        watch_interval: float = LOCK_WATCH_INTERVAL,
    ):
        if lease_timeout <= 0:
            raise ValueError(f"lease_timeout must be positive, got {lease_timeout}")
        self.client = client
        self.lock = Lock(
            name=name, owner=owner or generate_owner_token(), lease_timeout=lease_timeout
        )
        self.logger = logger or module_logger
        self.watch_interval = watch_interval
        self.state = LockState.IDLE
        self.freed = threading.Event()
        self._stop_watch = threading.Event()
        self._watcher: threading.Thread | None = None

    @property
    def name(self) -> str:
        return self.lock.name

    @property
    def owner(self) -> str:
        return self.lock.owner

    @property
    def held(self) -> bool:
        return self.lock.held

    def try_acquire(self) -> bool:
        """
        Make one non-blocking acquisition attempt.

        Returns:
            True if the lock is now held, False if another owner holds it

        Raises:
            KVStoreError: For DynamoDB errors other than contention
        """
        try:
            try_acquire_lock(self.client, self.lock)
        except LockUnavailableError:
            return False
        return True

    def renew(self) -> dict[str, Any]:
        """
        Re-assert the lease for another lease_timeout seconds.

        Raises:
            LockLostError: If this owner no longer holds the lock
            KVStoreError: For other DynamoDB errors
        """
        self.logger.info(f"Renewing lock '{self.name}'")
        return renew_lock(self.client, self.lock)

    def release(self) -> None:
        """Release the lock. Errors are logged and never raised; the lease TTL is the backstop."""
        self.stop_watch()
        try:
            result = release_lock(self.client, self.name, self.owner)
            self.logger.info(f"Released lock '{self.name}' ({result['status']})")
        except Exception as e:
            self.logger.warning(f"Failed to release lock '{self.name}': {e}")
        finally:
            self.lock.acquired_at = None
            self.state = LockState.IDLE

    def check(self) -> dict[str, Any] | None:
        """Return the current holder info, or None if the lock is free."""
        return check_lock(self.client, self.name)

    def watch(self) -> None:
        """Start the watcher that sets ``freed`` when the lock becomes free."""
        if self._watcher is not None and self._watcher.is_alive():
            return
        self.freed.clear()
        self._stop_watch.clear()
        self._watcher = threading.Thread(
            target=self._watch_loop, name=f"lock-watch-{self.name}", daemon=True
        )
        self._watcher.start()

    def stop_watch(self) -> None:
        """Stop the watcher thread and wait for it to exit."""
        self._stop_watch.set()
        watcher = self._watcher
        if watcher is not None and watcher is not threading.current_thread():
            watcher.join()
        self._watcher = None

    def _watch_loop(self) -> None:
        while not self._stop_watch.is_set():
            if not self.freed.is_set():
                try:
                    if self.check() is None:
                        self.logger.debug(f"Lock '{self.name}' became free")
                        self.freed.set()
                except Exception as e:
                    # Only an optimisation for waiters; backoff still retries
                    self.logger.debug(f"Watcher could not read lock '{self.name}': {e}")
            self._stop_watch.wait(self.watch_interval)

    def __enter__(self) -> "LockHandle":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()
