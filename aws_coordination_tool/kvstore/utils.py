"""
Utility functions for kvstore operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import json
import math
import time
from typing import Any

from .constants import ATTR_TTL


def format_key(prefix: str, key: str) -> str:
    """
    Format a key with namespace prefix.

    Args:
        prefix: Namespace prefix (e.g., 'kv', 'lock')
        key: User-provided key

    Returns:
        Formatted key with prefix (e.g., 'kv:mykey')
    """
    return f"{prefix}:{key}"


def parse_key(full_key: str) -> tuple[str, str]:
    """
    Parse a formatted key into prefix and key.

    Args:
        full_key: Full key with prefix (e.g., 'kv:mykey')

    Returns:
        Tuple of (prefix, key)
    """
    parts = full_key.split(":", 1)
    if len(parts) == 2:
        return parts[0], parts[1]
    return "", full_key


def expiry_timestamp(ttl: float, now: float | None = None) -> int:
    """
    Convert a relative TTL into the absolute epoch second stored in the item.

    Rounds up so an entry never expires before ``ttl`` seconds have passed.
    """
    if now is None:
        now = time.time()
    return math.ceil(now + ttl)


def is_expired(item: dict[str, Any], now: float | None = None) -> bool:
    """
    Check whether an item's TTL has passed.

    DynamoDB removes expired items lazily, so reads must filter them.
    """
    ttl = item.get(ATTR_TTL)
    if ttl is None:
        return False
    if now is None:
        now = time.time()
    return float(ttl) <= now


def encode_value(value: Any) -> str:
    """Serialize a value to the JSON document stored in DynamoDB."""
    return json.dumps(value)


def decode_value(raw: str) -> Any:
    """Deserialize a stored JSON document."""
    return json.loads(raw)


def output_json(data: Any, quiet: bool = False) -> None:
    """
    Output JSON to stdout.

    Args:
        data: Data to output as JSON
        quiet: If True, suppress output
    """
    if not quiet:
        print(json.dumps(data))


def output_text(message: str, quiet: bool = False) -> None:
    """
    Output text to stdout.

    Args:
        message: Message to output
        quiet: If True, suppress output
    """
    if not quiet:
        print(message)


def error_json(error: str, solution: str, exit_code: int) -> str:
    """
    Format error as JSON.

    Args:
        error: Error message
        solution: Solution suggestion
        exit_code: Exit code

    Returns:
        Error document as a JSON string
    """
    return json.dumps({"error": error, "solution": solution, "exit_code": exit_code})


def error_text(error: str, solution: str) -> str:
    """
    Format error as human-readable text.

    Args:
        error: Error message
        solution: Solution suggestion

    Returns:
        Formatted error message
    """
    return f"❌ Error: {error}\n\n💡 Solution: {solution}"


def validate_table_name(table_name: str) -> bool:
    """
    Validate DynamoDB table name.

    Args:
        table_name: Table name to validate

    Returns:
        True if valid

    Raises:
        ValueError: If table name is invalid
    """
    if not table_name:
        raise ValueError("Table name cannot be empty")
    if len(table_name) < 3 or len(table_name) > 255:
        raise ValueError("Table name must be between 3 and 255 characters")
    if not all(c.isalnum() or c in "-_." for c in table_name):
        raise ValueError(
            "Table name can only contain alphanumeric characters, hyphens, underscores, and periods"
        )
    return True

