"""
Table management operations for kvstore.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from typing import Any, Literal

import boto3
from botocore.exceptions import ClientError

from ..constants import ATTR_PK, ATTR_SK, ATTR_TTL
from ..exceptions import KVStoreError, TableAlreadyExistsError, TableNotFoundError


def create_table(
    table_name: str,
    region: str | None = None,
    profile: str | None = None,
    billing_mode: Literal["PAY_PER_REQUEST", "PROVISIONED"] = "PAY_PER_REQUEST",
    dynamodb: Any | None = None,
) -> dict[str, Any]:
    """
    Create DynamoDB table for kvstore.

    Waits for the table to become active so TTL can be enabled on it.

    Args:
        table_name: Table name
        region: AWS region (optional)
        profile: AWS profile (optional)
        billing_mode: Billing mode (PAY_PER_REQUEST or PROVISIONED)
        dynamodb: Pre-built boto3 DynamoDB client (optional)

    Returns:
        Table description

    Raises:
        TableAlreadyExistsError: If table already exists
        KVStoreError: For other DynamoDB errors
    """
    if dynamodb is None:
        session = boto3.Session(profile_name=profile, region_name=region)
        dynamodb = session.client("dynamodb")

    kwargs: dict[str, Any] = {
        "TableName": table_name,
        "KeySchema": [
            {"AttributeName": ATTR_PK, "KeyType": "HASH"},  # Partition key
            {"AttributeName": ATTR_SK, "KeyType": "RANGE"},  # Sort key
        ],
        "AttributeDefinitions": [
            {"AttributeName": ATTR_PK, "AttributeType": "S"},
            {"AttributeName": ATTR_SK, "AttributeType": "S"},
        ],
        "BillingMode": billing_mode,
        "Tags": [
            {"Key": "ManagedBy", "Value": "aws-coordination-tool"},
            {"Key": "Purpose", "Value": "kvstore"},
        ],
    }
    if billing_mode == "PROVISIONED":
        kwargs["ProvisionedThroughput"] = {"ReadCapacityUnits": 5, "WriteCapacityUnits": 5}

    try:
        response = dynamodb.create_table(**kwargs)
        dynamodb.get_waiter("table_exists").wait(TableName=table_name)

        # Enable TTL so expired values and abandoned locks are removed server-side
        dynamodb.update_time_to_live(
            TableName=table_name,
            TimeToLiveSpecification={"Enabled": True, "AttributeName": ATTR_TTL},
        )

        return response["TableDescription"]  # type: ignore[no-any-return]

    except ClientError as e:
        code = e.response["Error"]["Code"]
        if code == "ResourceInUseException":
            raise TableAlreadyExistsError(f"Table '{table_name}' already exists", code) from e
        raise KVStoreError(f"DynamoDB error: {e}", code) from e


def drop_table(
    table_name: str,
    region: str | None = None,
    profile: str | None = None,
    dynamodb: Any | None = None,
) -> dict[str, Any]:
    """
    Drop DynamoDB table.

    Args:
        table_name: Table name
        region: AWS region (optional)
        profile: AWS profile (optional)
        dynamodb: Pre-built boto3 DynamoDB client (optional)

    Returns:
        Table description

    Raises:
        TableNotFoundError: If table does not exist
        KVStoreError: For other DynamoDB errors
    """
    if dynamodb is None:
        session = boto3.Session(profile_name=profile, region_name=region)
        dynamodb = session.client("dynamodb")

    try:
        response = dynamodb.delete_table(TableName=table_name)
        return response["TableDescription"]  # type: ignore[no-any-return]
    except ClientError as e:
        code = e.response["Error"]["Code"]
        if code == "ResourceNotFoundException":
            raise TableNotFoundError(f"Table '{table_name}' not found", code) from e
        raise KVStoreError(f"DynamoDB error: {e}", code) from e
