"""
Constants for kvstore operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

# Default table name
DEFAULT_TABLE_NAME = "aws-coordination-tool-kvstore"

# Default TTLs (in seconds)
DEFAULT_LOCK_LEASE = 10  # Lock entry lifetime unless renewed
DEFAULT_LOCK_WAIT = 30  # Max time to wait for a contended lock
DEFAULT_MEMOIZE_TTL = 300  # 5 minutes

# Namespace prefixes for DynamoDB keys
PREFIX_KV = "kv"
PREFIX_LOCK = "lock"

# Suffixes used by memoize for the derived keys
MEMOIZE_VALUE_SUFFIX = "-value"
MEMOIZE_LOCK_SUFFIX = "-lock"

# Separator for hierarchical keys
KEY_SEPARATOR = "/"

# DynamoDB attribute names
ATTR_PK = "PK"
ATTR_SK = "SK"
ATTR_VALUE = "value"
ATTR_TTL = "ttl"

# Lock wait behavior (linear backoff)
LOCK_BACKOFF_STEP = 0.25  # Delay added per contended attempt
LOCK_BACKOFF_MAX = 0.5  # Max delay between retries
LOCK_WATCH_INTERVAL = 0.2  # Poll interval for the "lock became free" watcher

# Shell users hold CLI locks across separate invocations, so default longer
DEFAULT_CLI_LOCK_LEASE = 300  # 5 minutes
