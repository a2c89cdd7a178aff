"""
Memoize command for kvstore.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import json
import subprocess

import click

from ..constants import (
    DEFAULT_LOCK_LEASE,
    DEFAULT_LOCK_WAIT,
    DEFAULT_MEMOIZE_TTL,
    DEFAULT_TABLE_NAME,
)
from ..coordinator import CoordinationClient
from ..exceptions import KVStoreError, LockTimeoutError
from ..logging_config import get_logger, setup_logging
from ..utils import error_json, error_text, output_json, output_text

logger = get_logger(__name__)


@click.command("memoize")
@click.argument("key")
@click.argument("command", nargs=-1, required=True)
@click.option(
    "--ttl",
    type=int,
    default=DEFAULT_MEMOIZE_TTL,
    help=f"Seconds to cache the output, 0 disables caching (default: {DEFAULT_MEMOIZE_TTL})",
)
@click.option(
    "--lease",
    type=click.IntRange(min=1),
    default=DEFAULT_LOCK_LEASE,
    help=f"Lock lease in seconds, renewed while COMMAND runs (default: {DEFAULT_LOCK_LEASE})",
)
@click.option(
    "--wait",
    type=float,
    default=DEFAULT_LOCK_WAIT,
    help=f"Seconds to wait for another runner to finish (default: {DEFAULT_LOCK_WAIT})",
)
@click.option(
    "--table",
    envvar="KVSTORE_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--text", is_flag=True, help="Print the cached output only")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def memoize_command(
    ctx: click.Context,
    key: str,
    command: tuple[str, ...],
    ttl: int,
    lease: int,
    wait: float,
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Run COMMAND at most once across all machines and cache its output.

    The first caller runs COMMAND while holding a lock; concurrent callers
    wait and then reuse the cached stdout. A failing COMMAND is not cached,
    so the next caller runs it again.

    Examples:

    \b
        # Run a migration once per release, from every instance
        aws-coordination-tool kvstore memoize migrate-v42 -- ./manage.py migrate

    \b
        # Share an expensive lookup for 10 minutes
        aws-coordination-tool kvstore memoize build-id --ttl 600 -- git rev-parse HEAD

    \b
    Exit codes:
        0: Output returned (computed or cached)
        3: AWS error
        4: Timed out waiting for the lock
        5: COMMAND failed

    \b
    Output Format:
        Returns JSON:
        {"key": "build-id", "value": "3f2c1a...\\n"}
    """
    setup_logging(verbose)

    def run_command() -> str:
        logger.info(f"Running {' '.join(command)}")
        completed = subprocess.run(list(command), capture_output=True, text=True, check=True)
        return completed.stdout

    try:
        client = CoordinationClient(table, region, profile)
        value = client.memoize(key, run_command, ttl, lease, wait)

        if text:
            output_text(value if isinstance(value, str) else json.dumps(value))
        else:
            output_json({"key": key, "value": value})

    except subprocess.CalledProcessError as e:
        message = f"Command exited with status {e.returncode}: {e.stderr.strip()}"
        if text:
            click.echo(error_text(message, "Fix the command; failures are not cached"), err=True)
        else:
            click.echo(error_json(message, "Fix the command; failures are not cached", 5), err=True)
        ctx.exit(5)

    except FileNotFoundError as e:
        if text:
            click.echo(error_text(str(e), "Check the command is installed and on PATH"), err=True)
        else:
            click.echo(error_json(str(e), "Check the command is on PATH", 5), err=True)
        ctx.exit(5)

    except LockTimeoutError as e:
        if text:
            click.echo(
                error_text(str(e), "Another runner is still busy; retry with a longer --wait"),
                err=True,
            )
        else:
            click.echo(error_json(str(e), "Retry with a longer --wait", 4), err=True)
        ctx.exit(4)

    except KVStoreError as e:
        if text:
            click.echo(error_text(str(e), "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(str(e), "Check table and credentials", 3), err=True)
        ctx.exit(3)
