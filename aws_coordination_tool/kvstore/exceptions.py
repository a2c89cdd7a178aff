"""
Custom exceptions for kvstore operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""


class KVStoreError(Exception):
    """Base exception for kvstore operations.

    Carries the store's error classifier (the DynamoDB error code) in ``code``.
    """

    def __init__(self, message: str, code: str = "unknown"):
        super().__init__(message)
        self.code = code


class ConditionFailedError(KVStoreError):
    """Conditional write failed."""

    def __init__(self, message: str, code: str = "ConditionalCheckFailedException"):
        super().__init__(message, code)


class LockUnavailableError(KVStoreError):
    """Lock is held by another process."""

    def __init__(self, message: str, code: str = "LockUnavailable"):
        super().__init__(message, code)


class LockTimeoutError(KVStoreError):
    """Timed out waiting for a contended lock."""

    def __init__(self, lock_name: str, wait_time: float):
        super().__init__(
            f"Timed out waiting for lock '{lock_name}' after {wait_time:.2f}s",
            "LockTimeout",
        )
        self.lock_name = lock_name
        self.wait_time = wait_time


class LockLostError(KVStoreError):
    """Lock is no longer held by this owner (expired or taken over)."""

    def __init__(self, message: str, code: str = "LockLost"):
        super().__init__(message, code)


class AWSThrottlingError(KVStoreError):
    """DynamoDB throttling occurred."""

    pass


class AWSPermissionError(KVStoreError):
    """AWS permission denied."""

    pass


class TableNotFoundError(KVStoreError):
    """DynamoDB table does not exist."""

    pass


class TableAlreadyExistsError(KVStoreError):
    """DynamoDB table already exists."""

    pass
