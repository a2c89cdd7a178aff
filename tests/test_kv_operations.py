"""Tests for the JSON value facade over DynamoDB."""

import time

import pytest

from aws_coordination_tool.kvstore.core.kv_operations import delete_value, get_value, set_value
from aws_coordination_tool.kvstore.exceptions import AWSThrottlingError, KVStoreError


def test_get_never_written_key_returns_none(client):
    assert get_value(client, "never/written") is None


@pytest.mark.parametrize(
    "value",
    [
        {"a": True, "b": 3, "c": "four", "d": [1, 2, 3]},
        [1, "two", {"three": 3.5}],
        "plain string",
        42,
        False,
    ],
)
def test_set_then_get_returns_equal_value(client, value):
    set_value(client, "round-trip", value, ttl=0)

    assert get_value(client, "round-trip") == value


def test_value_is_stored_as_json_document(client, table):
    set_value(client, "doc", {"n": 1.5})

    item = table.raw("kv:doc")
    assert item["value"] == '{"n": 1.5}'
    assert item["type"] == "kv"
    assert "ttl" not in item


def test_ttl_zero_means_no_expiry(client, table):
    set_value(client, "forever", "x", ttl=0)

    assert "ttl" not in table.raw("kv:forever")


def test_ttl_is_stored_as_absolute_epoch_seconds(client, table):
    before = time.time()
    set_value(client, "short", "x", ttl=60)

    assert before + 60 <= table.raw("kv:short")["ttl"] <= before + 62


def test_written_value_expires_after_ttl(client):
    value = {"a": True, "b": 3, "c": "four", "d": [1, 2, 3]}
    set_value(client, "test-key", value, ttl=1)

    assert get_value(client, "test-key") == value

    time.sleep(2)

    assert get_value(client, "test-key") is None


def test_expired_item_still_in_table_is_treated_as_absent(client, table):
    table.put_raw(
        {"PK": "kv:stale", "SK": "kv:stale", "value": '"old"', "ttl": int(time.time()) - 5}
    )

    assert get_value(client, "stale") is None


def test_delete_removes_value(client):
    set_value(client, "gone", 1)
    delete_value(client, "gone")

    assert get_value(client, "gone") is None


def test_delete_missing_key_succeeds(client):
    assert delete_value(client, "missing") == {"key": "missing", "deleted": True}


def test_set_rejects_non_serializable_value_before_writing(client, table):
    with pytest.raises(TypeError):
        set_value(client, "bad", {"when": object()})

    assert "PutItem" not in table.calls


def test_store_error_propagates_with_code(client, table):
    table.fail_next("GetItem", "InternalServerError")

    with pytest.raises(KVStoreError) as exc_info:
        get_value(client, "any")

    assert exc_info.value.code == "InternalServerError"


def test_throttling_is_classified(client, table):
    table.fail_next("PutItem", "ProvisionedThroughputExceededException")

    with pytest.raises(AWSThrottlingError):
        set_value(client, "busy", 1)


class TestRecursiveGet:
    def test_returns_nested_subtree(self, client):
        set_value(client, "config/app/debug", False)
        set_value(client, "config/app/workers", 4)
        set_value(client, "config/db", {"host": "localhost"})
        set_value(client, "configuration", "not a child")

        assert get_value(client, "config", recursive=True) == {
            "config": {
                "app": {"debug": False, "workers": 4},
                "db": {"host": "localhost"},
            }
        }

    def test_trailing_separator_is_ignored(self, client):
        set_value(client, "jobs/a", 1)

        assert get_value(client, "jobs/", recursive=True) == {"jobs": {"a": 1}}

    def test_leaf_key_returns_its_value(self, client):
        set_value(client, "single", [1, 2])

        assert get_value(client, "single", recursive=True) == {"single": [1, 2]}

    def test_absent_subtree_returns_none(self, client):
        set_value(client, "elsewhere/x", 1)

        assert get_value(client, "nothing", recursive=True) is None

    def test_expired_children_are_skipped(self, client, table):
        set_value(client, "tree/live", 1)
        table.put_raw(
            {
                "PK": "kv:tree/dead",
                "SK": "kv:tree/dead",
                "value": "2",
                "ttl": int(time.time()) - 1,
            }
        )

        assert get_value(client, "tree", recursive=True) == {"tree": {"live": 1}}

    def test_follows_scan_pagination(self, client, table):
        table.page_size = 2
        for i in range(5):
            set_value(client, f"paged/{i}", i)

        assert get_value(client, "paged", recursive=True) == {
            "paged": {str(i): i for i in range(5)}
        }
        assert table.calls.count("Scan") == 3
