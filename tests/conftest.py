"""Shared fixtures for kvstore tests."""

from typing import Any

import pytest
from fake_dynamodb import FakeSession, FakeTable

from aws_coordination_tool.kvstore.coordinator import CoordinationClient
from aws_coordination_tool.kvstore.core.client import DynamoDBClient
from aws_coordination_tool.kvstore.events import EVENT_FINISH, EVENT_START, CallEvents
from aws_coordination_tool.kvstore.models import CallInfo


class EventRecorder:
    """Collects (event, method, key, status) tuples from a CallEvents registry."""

    def __init__(self, events: CallEvents):
        self.records: list[tuple[str, str, str, Any]] = []
        events.subscribe(EVENT_START, self._on_start)
        events.subscribe(EVENT_FINISH, self._on_finish)

    def _on_start(self, call: CallInfo) -> None:
        self.records.append((EVENT_START, call.method, call.key, call.status))

    def _on_finish(self, call: CallInfo) -> None:
        self.records.append((EVENT_FINISH, call.method, call.key, call.status))

    def finishes(self, method: str) -> list[Any]:
        return [r[3] for r in self.records if r[0] == EVENT_FINISH and r[1] == method]

    def starts(self, method: str) -> int:
        return sum(1 for r in self.records if r[0] == EVENT_START and r[1] == method)


@pytest.fixture
def table() -> FakeTable:
    return FakeTable()


@pytest.fixture
def client(table: FakeTable) -> DynamoDBClient:
    return DynamoDBClient("test-table", table=table)


@pytest.fixture
def events() -> CallEvents:
    return CallEvents()


@pytest.fixture
def recorder(events: CallEvents) -> EventRecorder:
    return EventRecorder(events)


@pytest.fixture
def coordinator(table: FakeTable) -> CoordinationClient:
    return CoordinationClient("test-table", table=table)


@pytest.fixture
def fake_session(table: FakeTable, monkeypatch: pytest.MonkeyPatch) -> FakeTable:
    """Route every boto3.Session created by the CLI to the shared fake table."""
    monkeypatch.setattr(
        "aws_coordination_tool.kvstore.core.client.boto3.Session",
        lambda **kwargs: FakeSession(table),
    )
    return table
