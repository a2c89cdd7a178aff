"""
DynamoDB client wrapper with error handling.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from typing import Any

import boto3
from botocore.exceptions import ClientError

from ..exceptions import (
    AWSPermissionError,
    AWSThrottlingError,
    ConditionFailedError,
    KVStoreError,
    TableNotFoundError,
)


class DynamoDBClient:
    """DynamoDB client wrapper with error handling."""

    def __init__(
        self,
        table_name: str,
        region: str | None = None,
        profile: str | None = None,
        table: Any | None = None,
    ):
        """
        Initialize DynamoDB client.

        Args:
            table_name: DynamoDB table name
            region: AWS region (optional, uses SDK default)
            profile: AWS profile (optional, uses SDK default)
            table: Pre-built boto3 Table resource (optional, skips session setup)
        """
        self.table_name = table_name
        if table is None:
            session = boto3.Session(profile_name=profile, region_name=region)
            table = session.resource("dynamodb").Table(table_name)
        self.table = table

    def put_item(
        self,
        item: dict[str, Any],
        condition_expression: str | None = None,
        expression_attribute_names: dict[str, str] | None = None,
        expression_attribute_values: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Put item with optional condition.

        Args:
            item: Item to put
            condition_expression: Optional condition expression
            expression_attribute_names: Optional expression attribute names
            expression_attribute_values: Optional expression attribute values

        Returns:
            Response from DynamoDB

        Raises:
            ConditionFailedError: If condition fails
            KVStoreError: For other DynamoDB errors
        """
        try:
            kwargs: dict[str, Any] = {"Item": item}
            if condition_expression:
                kwargs["ConditionExpression"] = condition_expression
            if expression_attribute_names:
                kwargs["ExpressionAttributeNames"] = expression_attribute_names
            if expression_attribute_values:
                kwargs["ExpressionAttributeValues"] = expression_attribute_values
            return self.table.put_item(**kwargs)  # type: ignore[no-any-return]
        except ClientError as e:
            self._handle_error(e)
            raise  # For type checker

    def get_item(self, key: dict[str, Any]) -> dict[str, Any] | None:
        """
        Get item by key with a strongly consistent read.

        Args:
            key: Key to retrieve

        Returns:
            Item if found, None otherwise

        Raises:
            KVStoreError: For DynamoDB errors
        """
        try:
            response = self.table.get_item(Key=key, ConsistentRead=True)
            return response.get("Item")  # type: ignore[no-any-return]
        except ClientError as e:
            self._handle_error(e)
            raise  # For type checker

    def update_item(
        self,
        key: dict[str, Any],
        update_expression: str,
        expression_attribute_names: dict[str, str] | None = None,
        expression_attribute_values: dict[str, Any] | None = None,
        condition_expression: str | None = None,
        return_values: str = "NONE",
    ) -> dict[str, Any]:
        """
        Update item attributes with optional condition.

        Args:
            key: Key to update
            update_expression: Update expression
            expression_attribute_names: Optional expression attribute names
            expression_attribute_values: Optional expression attribute values
            condition_expression: Optional condition expression
            return_values: What DynamoDB returns (NONE, ALL_NEW, ...)

        Returns:
            Response from DynamoDB

        Raises:
            ConditionFailedError: If condition fails
            KVStoreError: For other DynamoDB errors
        """
        try:
            kwargs: dict[str, Any] = {
                "Key": key,
                "UpdateExpression": update_expression,
                "ReturnValues": return_values,
            }
            if condition_expression:
                kwargs["ConditionExpression"] = condition_expression
            if expression_attribute_names:
                kwargs["ExpressionAttributeNames"] = expression_attribute_names
            if expression_attribute_values:
                kwargs["ExpressionAttributeValues"] = expression_attribute_values
            return self.table.update_item(**kwargs)  # type: ignore[no-any-return]
        except ClientError as e:
            self._handle_error(e)
            raise  # For type checker

    def delete_item(
        self,
        key: dict[str, Any],
        condition_expression: str | None = None,
        expression_attribute_names: dict[str, str] | None = None,
        expression_attribute_values: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Delete item with optional condition.

        Args:
            key: Key to delete
            condition_expression: Optional condition expression
            expression_attribute_names: Optional expression attribute names
            expression_attribute_values: Optional expression attribute values

        Returns:
            Response from DynamoDB

        Raises:
            ConditionFailedError: If condition fails
            KVStoreError: For other DynamoDB errors
        """
        try:
            kwargs: dict[str, Any] = {"Key": key}
            if condition_expression:
                kwargs["ConditionExpression"] = condition_expression
            if expression_attribute_names:
                kwargs["ExpressionAttributeNames"] = expression_attribute_names
            if expression_attribute_values:
                kwargs["ExpressionAttributeValues"] = expression_attribute_values
            return self.table.delete_item(**kwargs)  # type: ignore[no-any-return]
        except ClientError as e:
            self._handle_error(e)
            raise  # For type checker

    def scan(self, filter_expression: Any) -> list[dict[str, Any]]:
        """
        Scan the whole table with a filter, following pagination.

        Args:
            filter_expression: boto3 condition (e.g. Attr("PK").begins_with(...))

        Returns:
            List of matching items

        Raises:
            KVStoreError: For DynamoDB errors
        """
        items: list[dict[str, Any]] = []
        kwargs: dict[str, Any] = {"FilterExpression": filter_expression, "ConsistentRead": True}
        try:
            while True:
                response = self.table.scan(**kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    return items
                kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            self._handle_error(e)
            raise  # For type checker

    def _handle_error(self, error: ClientError) -> None:
        """
        Convert boto3 errors to kvstore exceptions.

        The DynamoDB error code is kept on the exception as ``code``.

        Args:
            error: ClientError from boto3

        Raises:
            ConditionFailedError: If condition check failed
            TableNotFoundError: If table not found
            AWSThrottlingError: If throttled
            AWSPermissionError: If permission denied
            KVStoreError: For other errors
        """
        code = error.response.get("Error", {}).get("Code", "unknown")

        if code == "ConditionalCheckFailedException":
            raise ConditionFailedError(f"Condition failed: {error}", code) from error
        elif code == "ResourceNotFoundException":
            raise TableNotFoundError(f"Table '{self.table_name}' not found", code) from error
        elif code in ("ProvisionedThroughputExceededException", "ThrottlingException"):
            raise AWSThrottlingError("DynamoDB throttling - retry with backoff", code) from error
        elif code == "AccessDeniedException":
            raise AWSPermissionError("AWS permission denied", code) from error
        else:
            raise KVStoreError(f"DynamoDB error: {error}", code) from error
