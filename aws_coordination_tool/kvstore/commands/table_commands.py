"""
Table management commands for kvstore.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from typing import Literal

import click

from ..constants import DEFAULT_TABLE_NAME
from ..core.table_operations import create_table, drop_table
from ..exceptions import KVStoreError, TableAlreadyExistsError, TableNotFoundError
from ..logging_config import get_logger, setup_logging
from ..utils import error_json, error_text, output_json, output_text, validate_table_name

logger = get_logger(__name__)


@click.command("create-table")
@click.option(
    "--table",
    envvar="KVSTORE_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option(
    "--billing",
    type=click.Choice(["on-demand", "provisioned"]),
    default="on-demand",
    help="Billing mode (default: on-demand)",
)
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def create_table_command(
    ctx: click.Context,
    table: str,
    region: str | None,
    profile: str | None,
    billing: str,
    text: bool,
    verbose: int,
) -> None:
    """Create the DynamoDB table backing values and locks.

    The table uses PK/SK string keys and has TTL enabled on the "ttl"
    attribute, so expired values and abandoned locks are removed
    server-side. The command waits until the table is active.

    Examples:

    \b
        # Create table with default name
        aws-coordination-tool kvstore create-table

    \b
        # Create table with custom name
        aws-coordination-tool kvstore create-table --table my-coordination

    \b
    Output Format:
        Returns JSON with table details:
        {"table": "...", "status": "ACTIVE", "arn": "..."}
    """
    setup_logging(verbose)

    try:
        validate_table_name(table)
    except ValueError as e:
        click.echo(error_json(str(e), "Choose a valid DynamoDB table name", 2), err=True)
        ctx.exit(2)

    try:
        logger.info(f"Creating table '{table}'")
        logger.debug(f"Region: {region}, Billing: {billing}")

        billing_mode: Literal["PAY_PER_REQUEST", "PROVISIONED"] = (
            "PAY_PER_REQUEST" if billing == "on-demand" else "PROVISIONED"
        )
        table_desc = create_table(table, region, profile, billing_mode)

        if text:
            output_text(f"✅ Table '{table}' created with TTL enabled")
            output_text(f"ARN: {table_desc['TableArn']}")
        else:
            output_json(
                {"table": table, "status": table_desc["TableStatus"], "arn": table_desc["TableArn"]}
            )

    except TableAlreadyExistsError as e:
        solution = (
            f"Reuse it with --table {table} or drop it with "
            f"'aws-coordination-tool kvstore drop-table --table {table} --approve'"
        )
        if text:
            click.echo(error_text(str(e), solution), err=True)
        else:
            click.echo(error_json(str(e), solution, 1), err=True)
        ctx.exit(1)

    except KVStoreError as e:
        if text:
            click.echo(error_text(str(e), "Check AWS credentials and permissions"), err=True)
        else:
            click.echo(error_json(str(e), "Check AWS credentials and permissions", 3), err=True)
        ctx.exit(3)


@click.command("drop-table")
@click.option(
    "--table",
    envvar="KVSTORE_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--approve", is_flag=True, help="Required flag to confirm table deletion")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def drop_table_command(
    ctx: click.Context,
    table: str,
    region: str | None,
    profile: str | None,
    approve: bool,
    text: bool,
    verbose: int,
) -> None:
    """Drop the DynamoDB table.

    WARNING: This permanently deletes all cached values and held locks.

    Examples:

    \b
        aws-coordination-tool kvstore drop-table --table my-coordination --approve

    \b
    Output Format:
        Returns JSON with confirmation:
        {"table": "...", "status": "DELETING"}
    """
    setup_logging(verbose)

    if not approve:
        solution = (
            f"Add --approve to confirm: "
            f"aws-coordination-tool kvstore drop-table --table {table} --approve"
        )
        if text:
            click.echo(error_text(f"Dropping '{table}' deletes ALL data", solution), err=True)
        else:
            click.echo(error_json("Table deletion requires approval", solution, 2), err=True)
        ctx.exit(2)

    try:
        logger.info(f"Dropping table '{table}'")

        table_desc = drop_table(table, region, profile)

        if text:
            output_text(f"✅ Table '{table}' deletion initiated")
        else:
            output_json({"table": table, "status": table_desc["TableStatus"]})

    except TableNotFoundError as e:
        if text:
            click.echo(error_text(str(e), "Check table name and region"), err=True)
        else:
            click.echo(error_json(str(e), "Check table name and region", 1), err=True)
        ctx.exit(1)

    except KVStoreError as e:
        if text:
            click.echo(error_text(str(e), "Check AWS credentials and permissions"), err=True)
        else:
            click.echo(error_json(str(e), "Check AWS credentials and permissions", 3), err=True)
        ctx.exit(3)
