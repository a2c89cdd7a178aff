"""
Type models for kvstore operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ItemType(Enum):
    """Types of items stored in kvstore."""

    KV = "kv"
    LOCK = "lock"


class LockState(Enum):
    """States of a single lock acquisition attempt."""

    IDLE = "idle"
    ATTEMPTING = "attempting"
    HELD = "held"
    FAILED = "failed"
    TIMED_OUT = "timed-out"


class AcquireStatus(str, Enum):
    """Finish statuses reported for acquire_lock."""

    ACQUIRED = "acquired"
    WAITED_THEN_ACQUIRED = "waited-then-acquired"
    ERROR = "error"
    TIMEOUT = "timeout"


class MemoizeStatus(str, Enum):
    """Finish statuses reported for memoize."""

    CACHE_HIT_BEFORE_LOCK = "cache-hit-before-lock"
    CACHE_HIT_AFTER_LOCK = "cache-hit-after-lock"
    COMPUTED = "computed"
    ERROR = "error"


@dataclass
class Lock:
    """Distributed lock model for coordination primitives.

    ``owner`` is the holder token of one acquisition attempt.
    """

    name: str
    owner: str
    lease_timeout: int
    acquired_at: float | None = None

    @property
    def held(self) -> bool:
        return self.acquired_at is not None


@dataclass
class CallInfo:
    """Instrumentation record for one kvstore operation."""

    key: str
    method: str
    context: Any = None
    extra: dict[str, Any] = field(default_factory=dict)
    status: Any = None
