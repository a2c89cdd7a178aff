"""
Logging configuration for kvstore commands.

Maps the CLI ``-v`` count to log levels:
    0: WARNING
    1: INFO (-v)
    2: DEBUG (-vv)
    3+: DEBUG including boto3/botocore internals (-vvv)

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_THIRD_PARTY_LOGGERS = ("boto3", "botocore", "urllib3")


def setup_logging(verbosity: int = 0) -> None:
    """
    Configure root logging based on verbosity.

    Args:
        verbosity: Number of -v flags given on the command line
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)

    # AWS SDK debug output is very noisy; only show it at -vvv
    third_party_level = logging.DEBUG if verbosity >= 3 else logging.WARNING
    for name in _THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger.

    Args:
        name: Logger name, usually __name__

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
