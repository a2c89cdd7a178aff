"""Tests for table management against a stubbed DynamoDB client."""

import boto3
import pytest
from botocore.stub import ANY, Stubber

from aws_coordination_tool.kvstore.core.table_operations import create_table, drop_table
from aws_coordination_tool.kvstore.exceptions import (
    KVStoreError,
    TableAlreadyExistsError,
    TableNotFoundError,
)

TABLE_ARN = "arn:aws:dynamodb:us-east-1:123456789012:table/kv-table"


@pytest.fixture
def dynamodb():
    client = boto3.client(
        "dynamodb",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    with Stubber(client) as stubber:
        yield client, stubber
        stubber.assert_no_pending_responses()


def test_create_table_enables_ttl(dynamodb):
    client, stubber = dynamodb
    stubber.add_response(
        "create_table",
        {
            "TableDescription": {
                "TableName": "kv-table",
                "TableStatus": "CREATING",
                "TableArn": TABLE_ARN,
            }
        },
        {
            "TableName": "kv-table",
            "KeySchema": [
                {"AttributeName": "PK", "KeyType": "HASH"},
                {"AttributeName": "SK", "KeyType": "RANGE"},
            ],
            "AttributeDefinitions": [
                {"AttributeName": "PK", "AttributeType": "S"},
                {"AttributeName": "SK", "AttributeType": "S"},
            ],
            "BillingMode": "PAY_PER_REQUEST",
            "Tags": ANY,
        },
    )
    stubber.add_response(
        "describe_table",
        {"Table": {"TableName": "kv-table", "TableStatus": "ACTIVE"}},
        {"TableName": "kv-table"},
    )
    stubber.add_response(
        "update_time_to_live",
        {"TimeToLiveSpecification": {"Enabled": True, "AttributeName": "ttl"}},
        {
            "TableName": "kv-table",
            "TimeToLiveSpecification": {"Enabled": True, "AttributeName": "ttl"},
        },
    )

    description = create_table("kv-table", dynamodb=client)

    assert description["TableArn"] == TABLE_ARN


def test_create_provisioned_table_sets_throughput(dynamodb):
    client, stubber = dynamodb
    stubber.add_response(
        "create_table",
        {"TableDescription": {"TableName": "kv-table", "TableStatus": "CREATING"}},
        {
            "TableName": "kv-table",
            "KeySchema": ANY,
            "AttributeDefinitions": ANY,
            "BillingMode": "PROVISIONED",
            "Tags": ANY,
            "ProvisionedThroughput": {"ReadCapacityUnits": 5, "WriteCapacityUnits": 5},
        },
    )
    stubber.add_response("describe_table", {"Table": {"TableStatus": "ACTIVE"}})
    stubber.add_response("update_time_to_live", {})

    create_table("kv-table", billing_mode="PROVISIONED", dynamodb=client)


def test_create_existing_table(dynamodb):
    client, stubber = dynamodb
    stubber.add_client_error("create_table", service_error_code="ResourceInUseException")

    with pytest.raises(TableAlreadyExistsError):
        create_table("kv-table", dynamodb=client)


def test_drop_table(dynamodb):
    client, stubber = dynamodb
    stubber.add_response(
        "delete_table",
        {"TableDescription": {"TableName": "kv-table", "TableStatus": "DELETING"}},
        {"TableName": "kv-table"},
    )

    assert drop_table("kv-table", dynamodb=client)["TableStatus"] == "DELETING"


def test_drop_missing_table(dynamodb):
    client, stubber = dynamodb
    stubber.add_client_error("delete_table", service_error_code="ResourceNotFoundException")

    with pytest.raises(TableNotFoundError):
        drop_table("kv-table", dynamodb=client)


def test_drop_table_other_error_keeps_code(dynamodb):
    client, stubber = dynamodb
    stubber.add_client_error("delete_table", service_error_code="AccessDeniedException")

    with pytest.raises(KVStoreError) as excinfo:
        drop_table("kv-table", dynamodb=client)

    assert excinfo.value.code == "AccessDeniedException"
