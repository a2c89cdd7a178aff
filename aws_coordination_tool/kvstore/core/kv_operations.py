"""
Key-value operations for kvstore.

Values are stored as JSON documents. Reads treat missing and expired
items the same way: the key is absent and None is returned.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import time
from typing import Any

from boto3.dynamodb.conditions import Attr

from ..constants import ATTR_PK, ATTR_SK, ATTR_TTL, ATTR_VALUE, KEY_SEPARATOR, PREFIX_KV
from ..events import CallEvents, instrument
from ..models import ItemType
from ..utils import decode_value, encode_value, expiry_timestamp, format_key, is_expired, parse_key
from .client import DynamoDBClient


def set_value(
    client: DynamoDBClient,
    key: str,
    value: Any,
    ttl: int | None = None,
    *,
    events: CallEvents | None = None,
    context: Any = None,
) -> dict[str, Any]:
    """
    Set a key-value pair.

    Args:
        client: DynamoDB client
        key: Key name
        value: JSON-serializable value to store
        ttl: TTL in seconds (optional, 0 or None means no expiry)
        events: Instrumentation observers (optional)
        context: Caller context passed through to observers

    Returns:
        Item data

    Raises:
        TypeError: If value is not JSON-serializable
        KVStoreError: For DynamoDB errors
    """
    with instrument(events, key, "set", context, ttl=ttl):
        document = encode_value(value)
        pk = format_key(PREFIX_KV, key)
        timestamp = int(time.time())

        item: dict[str, Any] = {
            ATTR_PK: pk,
            ATTR_SK: pk,
            ATTR_VALUE: document,
            "type": ItemType.KV.value,
            "created_at": timestamp,
            "updated_at": timestamp,
        }
        if ttl:
            item[ATTR_TTL] = expiry_timestamp(ttl)

        client.put_item(item)

    return {"key": key, "value": value, "ttl": item.get(ATTR_TTL), "updated_at": timestamp}


def get_value(
    client: DynamoDBClient,
    key: str,
    recursive: bool = False,
    *,
    events: CallEvents | None = None,
    context: Any = None,
) -> Any:
    """
    Get a value by key.

    Args:
        client: DynamoDB client
        key: Key name
        recursive: Return the whole subtree under key as a nested mapping
        events: Instrumentation observers (optional)
        context: Caller context passed through to observers

    Returns:
        Decoded value, {key: subtree} when recursive, or None if absent

    Raises:
        KVStoreError: For DynamoDB errors
    """
    with instrument(events, key, "get", context, recursive=recursive):
        if recursive:
            return _get_tree(client, key)

        pk = format_key(PREFIX_KV, key)
        item = client.get_item({ATTR_PK: pk, ATTR_SK: pk})
        if not item or is_expired(item):
            return None
        return decode_value(item[ATTR_VALUE])


def delete_value(
    client: DynamoDBClient,
    key: str,
    *,
    events: CallEvents | None = None,
    context: Any = None,
) -> dict[str, Any]:
    """
    Delete a key-value pair. Deleting a non-existent key succeeds.

    Args:
        client: DynamoDB client
        key: Key name
        events: Instrumentation observers (optional)
        context: Caller context passed through to observers

    Returns:
        Deletion confirmation
    """
    with instrument(events, key, "delete", context):
        pk = format_key(PREFIX_KV, key)
        client.delete_item({ATTR_PK: pk, ATTR_SK: pk})

    return {"key": key, "deleted": True}


def _get_tree(client: DynamoDBClient, key: str) -> dict[str, Any] | None:
    root = key.rstrip(KEY_SEPARATOR)
    pk = format_key(PREFIX_KV, root)
    condition = Attr(ATTR_PK).eq(pk) | Attr(ATTR_PK).begins_with(pk + KEY_SEPARATOR)
    now = time.time()
    items = [item for item in client.scan(condition) if not is_expired(item, now)]
    if not items:
        return None

    leaf: Any = None
    tree: dict[str, Any] = {}
    # Shorter paths first so deeper keys overwrite leaf values with subtrees
    for item in sorted(items, key=lambda i: len(i[ATTR_PK])):
        _, full_key = parse_key(item[ATTR_PK])
        value = decode_value(item[ATTR_VALUE])
        if full_key == root:
            leaf = value
            continue
        parts = full_key[len(root) + 1 :].split(KEY_SEPARATOR)
        node = tree
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        if not isinstance(node.get(parts[-1]), dict):
            node[parts[-1]] = value

    if tree:
        return {root: tree}
    return {root: leaf}
