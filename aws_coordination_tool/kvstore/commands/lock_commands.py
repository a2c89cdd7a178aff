"""
Lock commands for kvstore.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import click

from ..constants import DEFAULT_CLI_LOCK_LEASE, DEFAULT_TABLE_NAME
from ..coordinator import CoordinationClient
from ..core.lock_handle import LockHandle
from ..core.lock_operations import check_lock, release_lock
from ..exceptions import KVStoreError, LockLostError, LockTimeoutError
from ..logging_config import get_logger, setup_logging
from ..utils import error_json, error_text, output_json, output_text

logger = get_logger(__name__)


@click.command("lock-acquire")
@click.argument("lock_name")
@click.option(
    "--lease",
    type=click.IntRange(min=1),
    default=DEFAULT_CLI_LOCK_LEASE,
    help=f"Lock lease in seconds (default: {DEFAULT_CLI_LOCK_LEASE})",
)
@click.option("--owner", help="Owner token (default: hostname-pid-uuid)")
@click.option(
    "--wait",
    type=float,
    default=0,
    help="Seconds to wait for a contended lock, with linear backoff (default: 0)",
)
@click.option(
    "--table",
    envvar="KVSTORE_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def lock_acquire_command(
    ctx: click.Context,
    lock_name: str,
    lease: int,
    owner: str | None,
    wait: float,
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Acquire a distributed lock.

    Uses a DynamoDB conditional write, so at most one owner holds the lock.
    The lock expires after --lease seconds unless renewed with lock-renew.
    Keep the returned owner token: lock-release and lock-renew need it.

    Examples:

    \b
        # Acquire lock with 5-minute lease
        aws-coordination-tool kvstore lock-acquire deploy-prod --lease 300

    \b
        # Wait up to 60 seconds for the lock
        aws-coordination-tool kvstore lock-acquire task-123 --owner agent-abc --wait 60

    \b
        # Use in shell script
        if aws-coordination-tool kvstore lock-acquire deploy --owner "$$"; then
            deploy.sh
            aws-coordination-tool kvstore lock-release deploy --owner "$$"
        fi

    \b
    Output Format:
        Returns JSON:
        {"lock": "deploy-prod", "owner": "host-123-9f0c", "lease": 300, "acquired_at": 1731696000}
    """
    setup_logging(verbose)

    try:
        logger.info(f"Acquiring lock '{lock_name}'")
        logger.debug(f"Table: {table}, Lease: {lease}, Wait: {wait}")

        client = CoordinationClient(table, region, profile)
        handle = client.acquire_lock(lock_name, lease, wait, owner=owner)
        result = {
            "lock": lock_name,
            "owner": handle.owner,
            "lease": lease,
            "acquired_at": int(handle.lock.acquired_at or 0),
        }

        if text:
            output_text(f"✅ Lock '{lock_name}' acquired by {handle.owner}")
            output_text(f"Lease: {lease} seconds")
        else:
            output_json(result)

    except LockTimeoutError as e:
        solution = (
            f"Wait for the lease to expire, retry with a longer --wait, or check the holder "
            f"with "
            f"'aws-coordination-tool kvstore lock-check {lock_name}'"
        )
        if text:
            click.echo(error_text(str(e), solution), err=True)
        else:
            click.echo(error_json(str(e), "Wait for expiration or retry with --wait", 4), err=True)
        ctx.exit(4)

    except KVStoreError as e:
        if text:
            click.echo(error_text(str(e), "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(str(e), "Check table and credentials", 3), err=True)
        ctx.exit(3)


@click.command("lock-release")
@click.argument("lock_name")
@click.option("--owner", required=True, help="Owner token returned by lock-acquire")
@click.option(
    "--table",
    envvar="KVSTORE_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def lock_release_command(
    ctx: click.Context,
    lock_name: str,
    owner: str,
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Release a distributed lock.

    Only the owner can release the lock. Releasing a lock that is free or
    held by someone else succeeds without touching it.

    Examples:

    \b
        aws-coordination-tool kvstore lock-release deploy-prod --owner agent-abc

    \b
    Output Format:
        Returns JSON:
        {"lock": "deploy-prod", "released": true, "status": "released"}
    """
    setup_logging(verbose)

    try:
        logger.info(f"Releasing lock '{lock_name}' as {owner}")

        client = CoordinationClient(table, region, profile)
        result = release_lock(client.client, lock_name, owner)

        if text:
            if result["status"] == "released":
                output_text(f"✅ Lock '{lock_name}' released by {owner}")
            else:
                output_text(f"Lock '{lock_name}' was not held by {owner}")
        else:
            output_json(result)

    except KVStoreError as e:
        if text:
            click.echo(error_text(str(e), "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(str(e), "Check table and credentials", 3), err=True)
        ctx.exit(3)


@click.command("lock-renew")
@click.argument("lock_name")
@click.option("--owner", required=True, help="Owner token returned by lock-acquire")
@click.option(
    "--lease",
    type=click.IntRange(min=1),
    default=DEFAULT_CLI_LOCK_LEASE,
    help=f"New lease in seconds from now (default: {DEFAULT_CLI_LOCK_LEASE})",
)
@click.option(
    "--table",
    envvar="KVSTORE_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def lock_renew_command(
    ctx: click.Context,
    lock_name: str,
    owner: str,
    lease: int,
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Renew the lease of a held lock.

    Useful for long-running operations that need to keep their lock.

    Examples:

    \b
        # Heartbeat pattern in shell script
        while true; do
            aws-coordination-tool kvstore lock-renew deploy --owner "$$" --lease 120
            sleep 60
        done

    \b
    Output Format:
        Returns JSON:
        {"lock": "deploy", "owner": "12345", "ttl": 1731696900, "renewed": true}
    """
    setup_logging(verbose)

    try:
        logger.info(f"Renewing lock '{lock_name}' as {owner} for {lease}s")

        client = CoordinationClient(table, region, profile)
        handle = LockHandle(client.client, lock_name, lease, owner=owner)
        result = handle.renew()

        if text:
            output_text(f"✅ Lock '{lock_name}' renewed by {owner}")
            output_text(f"New lease: {lease} seconds from now")
        else:
            output_json(result)

    except LockLostError as e:
        if text:
            click.echo(
                error_text(str(e), f"Verify the lock is owned by '{owner}' or acquire it again"),
                err=True,
            )
        else:
            click.echo(error_json(str(e), "Verify ownership or check if lock expired", 2), err=True)
        ctx.exit(2)

    except KVStoreError as e:
        if text:
            click.echo(error_text(str(e), "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(str(e), "Check table and credentials", 3), err=True)
        ctx.exit(3)


@click.command("lock-check")
@click.argument("lock_name")
@click.option(
    "--table",
    envvar="KVSTORE_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def lock_check_command(
    ctx: click.Context,
    lock_name: str,
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Check if a lock is held.

    Exit code 0 if locked, 1 if free.

    Examples:

    \b
        if aws-coordination-tool kvstore lock-check deploy-prod; then
            echo "Lock is held"
        fi

    \b
    Output Format:
        Returns JSON if locked:
        {"lock": "deploy-prod", "owner": "agent-123", "ttl": 1731696300, "acquired_at": 1731696000}

        Returns JSON if free:
        {"lock": "deploy-prod", "status": "free"}
    """
    setup_logging(verbose)

    try:
        logger.info(f"Checking lock '{lock_name}'")

        client = CoordinationClient(table, region, profile)
        result = check_lock(client.client, lock_name)

    except KVStoreError as e:
        if text:
            click.echo(error_text(str(e), "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(str(e), "Check table and credentials", 3), err=True)
        ctx.exit(3)

    if result:
        if text:
            output_text(f"Lock '{lock_name}' is held by {result['owner']}")
            if result.get("ttl"):
                output_text(f"Expires at: {result['ttl']}")
        else:
            output_json(result)
        ctx.exit(0)

    if text:
        output_text(f"Lock '{lock_name}' is free")
    else:
        output_json({"lock": lock_name, "status": "free"})
    ctx.exit(1)
