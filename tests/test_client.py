"""Tests for DynamoDBClient against a stubbed boto3 Table resource."""

import boto3
import pytest
from boto3.dynamodb.conditions import Attr
from botocore.stub import Stubber

from aws_coordination_tool.kvstore.core.client import DynamoDBClient
from aws_coordination_tool.kvstore.exceptions import (
    AWSPermissionError,
    AWSThrottlingError,
    ConditionFailedError,
    KVStoreError,
    TableNotFoundError,
)


@pytest.fixture
def stubbed():
    resource = boto3.resource(
        "dynamodb",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    table = resource.Table("kv-table")
    with Stubber(table.meta.client) as stubber:
        yield DynamoDBClient("kv-table", table=table), stubber
        stubber.assert_no_pending_responses()


def test_get_item_deserializes_attributes(stubbed):
    client, stubber = stubbed
    stubber.add_response(
        "get_item",
        {"Item": {"PK": {"S": "kv:a"}, "SK": {"S": "kv:a"}, "value": {"S": '"x"'}}},
    )

    assert client.get_item({"PK": "kv:a", "SK": "kv:a"}) == {
        "PK": "kv:a",
        "SK": "kv:a",
        "value": '"x"',
    }


def test_get_item_returns_none_when_absent(stubbed):
    client, stubber = stubbed
    stubber.add_response("get_item", {})

    assert client.get_item({"PK": "kv:a", "SK": "kv:a"}) is None


@pytest.mark.parametrize(
    "code, error_class",
    [
        ("ConditionalCheckFailedException", ConditionFailedError),
        ("ResourceNotFoundException", TableNotFoundError),
        ("ProvisionedThroughputExceededException", AWSThrottlingError),
        ("ThrottlingException", AWSThrottlingError),
        ("AccessDeniedException", AWSPermissionError),
        ("InternalServerError", KVStoreError),
    ],
)
def test_put_item_maps_errors(stubbed, code, error_class):
    client, stubber = stubbed
    stubber.add_client_error("put_item", service_error_code=code)

    with pytest.raises(error_class) as excinfo:
        client.put_item({"PK": "kv:a", "SK": "kv:a", "value": "1"})

    assert excinfo.value.code == code


def test_delete_item_maps_condition_failure(stubbed):
    client, stubber = stubbed
    stubber.add_client_error("delete_item", service_error_code="ConditionalCheckFailedException")

    with pytest.raises(ConditionFailedError):
        client.delete_item(
            {"PK": "lock:a", "SK": "lock:a"},
            condition_expression="#value = :owner",
            expression_attribute_names={"#value": "value"},
            expression_attribute_values={":owner": "me"},
        )


def test_scan_follows_pagination(stubbed):
    client, stubber = stubbed
    stubber.add_response(
        "scan",
        {
            "Items": [{"PK": {"S": "kv:a/1"}}],
            "LastEvaluatedKey": {"PK": {"S": "kv:a/1"}, "SK": {"S": "kv:a/1"}},
        },
    )
    stubber.add_response("scan", {"Items": [{"PK": {"S": "kv:a/2"}}]})

    items = client.scan(Attr("PK").begins_with("kv:a/"))

    assert [item["PK"] for item in items] == ["kv:a/1", "kv:a/2"]
