"""
Lock operations for kvstore.

Single-shot primitives on the lock entry. Mutual exclusion comes from
DynamoDB conditional writes: an entry can only be created when none
exists, when the existing one has expired, or when it already belongs to
the same holder token.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import os
import socket
import time
import uuid
from typing import Any

from ..constants import ATTR_PK, ATTR_SK, ATTR_TTL, ATTR_VALUE, PREFIX_LOCK
from ..exceptions import ConditionFailedError, LockLostError, LockUnavailableError
from ..models import ItemType, Lock
from ..utils import expiry_timestamp, format_key, is_expired
from .client import DynamoDBClient


def try_acquire_lock(client: DynamoDBClient, lock: Lock) -> Lock:
    """
    Try once to acquire a distributed lock.

    Args:
        client: DynamoDB client
        lock: Lock to acquire, its owner is the holder token

    Returns:
        The same lock with acquired_at set

    Raises:
        LockUnavailableError: If lock is held by another owner
        KVStoreError: For other DynamoDB errors
    """
    pk = format_key(PREFIX_LOCK, lock.name)
    now = time.time()
    timestamp = int(now)

    item = {
        ATTR_PK: pk,
        ATTR_SK: pk,
        ATTR_VALUE: lock.owner,
        "type": ItemType.LOCK.value,
        ATTR_TTL: expiry_timestamp(lock.lease_timeout, now),
        "metadata": {"acquired_at": timestamp, "owner": lock.owner},
        "created_at": timestamp,
        "updated_at": timestamp,
    }

    # Allow lock acquisition if:
    # 1. Lock doesn't exist (attribute_not_exists)
    # 2. Lock is owned by the same holder token (value = :owner) - idempotent retry
    # 3. Lock lease expired but DynamoDB has not removed the item yet
    try:
        client.put_item(
            item,
            condition_expression="attribute_not_exists(PK) OR #v = :owner OR #ttl <= :now",
            expression_attribute_names={"#v": ATTR_VALUE, "#ttl": ATTR_TTL},
            expression_attribute_values={":owner": lock.owner, ":now": timestamp},
        )
    except ConditionFailedError:
        raise LockUnavailableError(
            f"Lock '{lock.name}' is held by another owner. "
            f"Wait for it to be released or for its lease to expire."
        )

    lock.acquired_at = now
    return lock


def renew_lock(client: DynamoDBClient, lock: Lock) -> dict[str, Any]:
    """
    Extend the lock lease by lease_timeout seconds from now.

    Args:
        client: DynamoDB client
        lock: Held lock

    Returns:
        Lock data with the new TTL

    Raises:
        LockLostError: If lock is not held by this owner or has expired
        KVStoreError: For other DynamoDB errors
    """
    pk = format_key(PREFIX_LOCK, lock.name)
    now = time.time()
    timestamp = int(now)
    new_ttl = expiry_timestamp(lock.lease_timeout, now)

    try:
        client.update_item(
            key={ATTR_PK: pk, ATTR_SK: pk},
            update_expression="SET #ttl = :new_ttl, updated_at = :ts",
            expression_attribute_names={"#ttl": ATTR_TTL, "#value": ATTR_VALUE},
            expression_attribute_values={
                ":new_ttl": new_ttl,
                ":owner": lock.owner,
                ":ts": timestamp,
            },
            condition_expression="#value = :owner AND #ttl > :ts",
        )
    except ConditionFailedError:
        raise LockLostError(
            f"Cannot renew lock '{lock.name}': not owned by '{lock.owner}' or lease expired"
        )

    return {"lock": lock.name, "owner": lock.owner, "ttl": new_ttl, "renewed": True}


def release_lock(client: DynamoDBClient, lock_name: str, owner: str) -> dict[str, Any]:
    """
    Release a distributed lock. This operation is idempotent.

    Args:
        client: DynamoDB client
        lock_name: Name of the lock to release
        owner: Owner ID (must match lock holder)

    Returns:
        Lock release confirmation

    Raises:
        KVStoreError: For any unexpected DynamoDB errors.
    """
    pk = format_key(PREFIX_LOCK, lock_name)

    try:
        client.delete_item(
            {ATTR_PK: pk, ATTR_SK: pk},
            condition_expression="#value = :owner",
            expression_attribute_names={"#value": ATTR_VALUE},
            expression_attribute_values={":owner": owner},
        )
        return {"lock": lock_name, "released": True, "status": "released"}
    except ConditionFailedError:
        # Either gone or owned by someone else: this owner does not hold it
        return {"lock": lock_name, "released": True, "status": "not_owned_or_already_released"}


def check_lock(client: DynamoDBClient, lock_name: str) -> dict[str, Any] | None:
    """
    Check if a lock is held.

    Args:
        client: DynamoDB client
        lock_name: Name of the lock

    Returns:
        Lock information if locked, None if free or expired
    """
    pk = format_key(PREFIX_LOCK, lock_name)

    item = client.get_item({ATTR_PK: pk, ATTR_SK: pk})

    if not item or is_expired(item):
        return None

    acquired_at = item.get("metadata", {}).get("acquired_at")
    return {
        "lock": lock_name,
        "owner": item[ATTR_VALUE],
        "ttl": int(item[ATTR_TTL]) if item.get(ATTR_TTL) is not None else None,
        "acquired_at": int(acquired_at) if acquired_at is not None else None,
    }


def generate_owner_token() -> str:
    """
    Generate a holder token unique to one acquisition attempt.

    Returns:
        Owner ID in format hostname-pid-uuid
    """
    return f"{socket.gethostname()}-{os.getpid()}-{uuid.uuid4().hex}"
