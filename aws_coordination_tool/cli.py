"""CLI entry point for aws-coordination-tool.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import click

from aws_coordination_tool.kvstore.commands.kv_commands import (
    delete_command,
    get_command,
    set_command,
)
from aws_coordination_tool.kvstore.commands.lock_commands import (
    lock_acquire_command,
    lock_check_command,
    lock_release_command,
    lock_renew_command,
)
from aws_coordination_tool.kvstore.commands.memoize_commands import memoize_command
from aws_coordination_tool.kvstore.commands.table_commands import (
    create_table_command,
    drop_table_command,
)


@click.group()
@click.version_option(version="0.1.0")
def main() -> None:
    """Distributed locks and compute-once caching on DynamoDB"""
    pass


@main.group("kvstore")
def kvstore() -> None:
    """DynamoDB-backed values, locks and memoize"""
    pass


# Register table commands
kvstore.add_command(create_table_command)
kvstore.add_command(drop_table_command)

# Register kv commands
kvstore.add_command(set_command)
kvstore.add_command(get_command)
kvstore.add_command(delete_command)

# Register lock commands
kvstore.add_command(lock_acquire_command)
kvstore.add_command(lock_release_command)
kvstore.add_command(lock_renew_command)
kvstore.add_command(lock_check_command)

# Register memoize command
kvstore.add_command(memoize_command)

if __name__ == "__main__":
    main()
