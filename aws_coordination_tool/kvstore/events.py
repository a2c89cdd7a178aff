"""
Start/finish instrumentation events for kvstore operations.

Every public operation emits a ``start`` event before it talks to DynamoDB
and exactly one ``finish`` event afterwards. Observers (metrics, tracing)
subscribe with a callback receiving the operation's CallInfo. Observers
can never change the outcome of an operation: their exceptions are logged
and dropped.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from .exceptions import KVStoreError
from .logging_config import get_logger
from .models import CallInfo

logger = get_logger(__name__)

EVENT_START = "start"
EVENT_FINISH = "finish"

Observer = Callable[[CallInfo], None]


def status_code(error: BaseException | None) -> Any:
    """
    Map an operation outcome to a finish status.

    Returns:
        0 on success, the store error code for KVStoreError, 'unknown' otherwise
    """
    if error is None:
        return 0
    if isinstance(error, KVStoreError):
        return error.code
    return "unknown"


class CallEvents:
    """Observer registry for start/finish events."""

    def __init__(self) -> None:
        self._observers: dict[str, list[Observer]] = {EVENT_START: [], EVENT_FINISH: []}
        self._lock = threading.Lock()

    def subscribe(self, event: str, callback: Observer) -> None:
        if event not in self._observers:
            raise ValueError(f"Unknown event '{event}', expected 'start' or 'finish'")
        with self._lock:
            self._observers[event].append(callback)

    def unsubscribe(self, event: str, callback: Observer) -> None:
        with self._lock:
            observers = self._observers.get(event, [])
            if callback in observers:
                observers.remove(callback)

    def emit(self, event: str, call: CallInfo) -> None:
        with self._lock:
            observers = list(self._observers.get(event, []))
        for callback in observers:
            try:
                callback(call)
            except Exception:
                logger.exception(f"Observer for '{event}' failed on {call.method} '{call.key}'")


@contextmanager
def instrument(
    events: CallEvents | None,
    key: str,
    method: str,
    context: Any = None,
    **extra: Any,
) -> Iterator[CallInfo]:
    """
    Wrap an operation in start/finish events.

    The body may set ``call.status``; otherwise the status is 0 on success
    or derived from the raised exception.
    """
    call = CallInfo(key=key, method=method, context=context, extra=extra)
    if events is not None:
        events.emit(EVENT_START, call)
    try:
        yield call
    except BaseException as e:
        if call.status is None:
            call.status = status_code(e)
        raise
    else:
        if call.status is None:
            call.status = 0
    finally:
        if events is not None:
            events.emit(EVENT_FINISH, call)
