from __future__ import annotations

import threading
from datetime import date

import pytest
from botocore.exceptions import ClientError

from paygen.errors import CoordinationError
from paygen.partitioning import PartitionAssigner
from paygen.partitioning.dynamodb import DynamoDBPartitionStore

TABLE = "partition_counters"
PARTITION = date(2024, 6, 9)


def _client_error(code: str, operation: str = "UpdateItem") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakeDynamoDB:
    """Understands exactly the update expressions the store issues."""

    def __init__(self) -> None:
        self.items = {}
        self.calls = []
        self._lock = threading.Lock()

    def get_item(self, TableName, Key, ConsistentRead=False):
        assert TableName == TABLE
        assert ConsistentRead
        item = self.items.get(Key["partition_date"]["S"])
        return {"Item": item} if item is not None else {}

    def update_item(self, TableName, Key, UpdateExpression, **kwargs):
        assert TableName == TABLE
        self.calls.append(UpdateExpression)
        names = kwargs.get("ExpressionAttributeNames", {})
        values = kwargs.get("ExpressionAttributeValues", {})
        with self._lock:
            item = self.items.setdefault(Key["partition_date"]["S"], {})
            if UpdateExpression == "ADD job_counter :inc":
                current = int(item.get("job_counter", {"N": "0"})["N"])
                item["job_counter"] = {"N": str(current + int(values[":inc"]["N"]))}
                return {"Attributes": {"job_counter": item["job_counter"]}}
            if UpdateExpression == "SET active_jobs.#job_id = :order":
                if "active_jobs" not in item:
                    raise _client_error("ValidationException")
                item["active_jobs"]["M"][names["#job_id"]] = values[":order"]
                return {}
            if UpdateExpression == "SET active_jobs = if_not_exists(active_jobs, :empty)":
                item.setdefault("active_jobs", {"M": dict(values[":empty"]["M"])})
                return {}
            if UpdateExpression == "REMOVE active_jobs.#job_id":
                if "active_jobs" not in item:
                    raise _client_error("ValidationException")
                item["active_jobs"]["M"].pop(names["#job_id"], None)
                return {}
        raise AssertionError(f"unexpected expression {UpdateExpression}")


@pytest.fixture
def client():
    return FakeDynamoDB()


@pytest.fixture
def store(client):
    return DynamoDBPartitionStore(client, TABLE)


def test_assign_creates_container_on_first_write(client, store) -> None:
    assert PartitionAssigner(store).assign(PARTITION, "job_a") == 0
    item = client.items["2024-06-09"]
    assert item["job_counter"] == {"N": "1"}
    assert item["active_jobs"] == {"M": {"job_a": {"N": "0"}}}
    assert client.calls.count("SET active_jobs.#job_id = :order") == 2


def test_assign_reuses_active_order(client, store) -> None:
    assigner = PartitionAssigner(store)
    assigner.assign(PARTITION, "job_a")
    assigner.assign(PARTITION, "job_b")
    calls_before = len(client.calls)
    assert assigner.assign(PARTITION, "job_a") == 0
    assert len(client.calls) == calls_before


def test_create_container_keeps_existing_entries(client, store) -> None:
    assigner = PartitionAssigner(store)
    assigner.assign(PARTITION, "job_a")
    store.create_active_container(PARTITION)
    assert store.get_active_order(PARTITION, "job_a") == 0


def test_complete_removes_entry(client, store) -> None:
    assigner = PartitionAssigner(store)
    assigner.assign(PARTITION, "job_a")
    assigner.complete(PARTITION, "job_a")
    assert client.items["2024-06-09"]["active_jobs"] == {"M": {}}
    assert store.get_active_order(PARTITION, "job_a") is None


def test_remove_without_container_is_a_no_op(store) -> None:
    store.remove_active(PARTITION, "job_a")


def test_other_client_errors_propagate_as_coordination_errors(client, store) -> None:
    def throttled(**kwargs):
        raise _client_error("ProvisionedThroughputExceededException")

    client.update_item = throttled
    with pytest.raises(CoordinationError):
        PartitionAssigner(store).assign(PARTITION, "job_a")


def test_missing_counter_attribute_is_an_error(client, store) -> None:
    client.update_item = lambda **kwargs: {}
    with pytest.raises(CoordinationError):
        PartitionAssigner(store).assign(PARTITION, "job_a")
