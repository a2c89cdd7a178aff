"""
Key-value commands for kvstore.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import json
from typing import Any

import click

from ..constants import DEFAULT_TABLE_NAME
from ..coordinator import CoordinationClient
from ..exceptions import KVStoreError
from ..logging_config import get_logger, setup_logging
from ..utils import error_json, error_text, output_json, output_text

logger = get_logger(__name__)


@click.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--ttl", type=int, help="TTL in seconds")
@click.option("--raw", is_flag=True, help="Store VALUE as a plain string instead of parsing JSON")
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
def set_command(
    ctx: click.Context,
    key: str,
    value: str,
    ttl: int | None,
    raw: bool,
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Store a JSON value under a key.

    VALUE is parsed as JSON; strings that are not valid JSON are stored
    as-is. Use --ttl to auto-expire keys.

    Examples:

    \b
        # Store a document
        aws-coordination-tool kvstore set config/app '{"debug": false, "workers": 4}'

    \b
        # Store a session token that expires in 1 hour
        aws-coordination-tool kvstore set sessions/abc123 '"user-42"' --ttl 3600

    \b
    Output Format:
        Returns JSON:
        {"key": "config/app", "value": {"debug": false, "workers": 4}, "ttl": null, ...}
    """
    setup_logging(verbose)

    parsed: Any = value
    if not raw:
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            logger.debug(f"Value for '{key}' is not JSON, storing as string")

    try:
        logger.info(f"Setting key '{key}'")
        logger.debug(f"Table: {table}, Region: {region}, TTL: {ttl}")

        client = CoordinationClient(table, region, profile)
        client.set(key, parsed, ttl)
        result = {"key": key, "value": parsed, "ttl": ttl}

        if text:
            output_text(f"✅ Set {key} = {json.dumps(parsed)}")
            if ttl:
                output_text(f"TTL: {ttl} seconds")
        else:
            output_json(result)

    except KVStoreError as e:
        if text:
            click.echo(
                error_text(
                    str(e), "Check table exists with 'aws-coordination-tool kvstore create-table'"
                ),
                err=True,
            )
        else:
            click.echo(error_json(str(e), "Check table exists", 3), err=True)
        ctx.exit(3)


@click.command("get")
@click.argument("key")
@click.option("--recursive", "-r", is_flag=True, help="Return the whole subtree under KEY")
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
def get_command(
    ctx: click.Context,
    key: str,
    recursive: bool,
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Retrieve a value by key.

    Exit code 1 if the key does not exist or has expired.

    Examples:

    \b
        # Get a key
        aws-coordination-tool kvstore get config/app

    \b
        # Get everything under config/
        aws-coordination-tool kvstore get config --recursive

    \b
    Output Format:
        Returns JSON:
        {"key": "config/app", "value": {"debug": false, "workers": 4}}
    """
    setup_logging(verbose)

    try:
        logger.info(f"Getting key '{key}'")
        logger.debug(f"Table: {table}, Region: {region}, Recursive: {recursive}")

        client = CoordinationClient(table, region, profile)
        value = client.get(key, recursive=recursive)

        if value is None:
            message = (
                f"Key '{key}' not found. "
                f"Use 'aws-coordination-tool kvstore set {key} <value>' to create it."
            )
            if text:
                click.echo(error_text(message, "Set the key first"), err=True)
            else:
                click.echo(error_json(message, "Set the key first", 1), err=True)
            ctx.exit(1)

        if text:
            output_text(f"{key} = {json.dumps(value)}")
        else:
            output_json({"key": key, "value": value})

    except KVStoreError as e:
        if text:
            click.echo(error_text(str(e), "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(str(e), "Check table and credentials", 3), err=True)
        ctx.exit(3)


@click.command("delete")
@click.argument("key")
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
def delete_command(
    ctx: click.Context,
    key: str,
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Delete a key.

    Deletion is idempotent - deleting a non-existent key succeeds.

    Examples:

    \b
        # Delete a key
        aws-coordination-tool kvstore delete config/app

    \b
    Output Format:
        Returns JSON:
        {"key": "config/app", "deleted": true}
    """
    setup_logging(verbose)

    try:
        logger.info(f"Deleting key '{key}'")
        logger.debug(f"Table: {table}, Region: {region}")

        client = CoordinationClient(table, region, profile)
        client.delete(key)

        if text:
            output_text(f"✅ Deleted {key}")
        else:
            output_json({"key": key, "deleted": True})

    except KVStoreError as e:
        if text:
            click.echo(error_text(str(e), "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(str(e), "Check table and credentials", 3), err=True)
        ctx.exit(3)
