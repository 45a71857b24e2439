from __future__ import annotations

import logging

from botocore.exceptions import EndpointConnectionError

from paygen.pipeline.reference_pool import (
    REFERENCE_RECORDS,
    DynamoDBReferenceSource,
    SyntheticReferenceSource,
    draw_indices,
)

TABLE = "reference_pans"
POOL_SIZE = 250
SEED = 7001


def test_draw_indices_is_seeded_and_bounded() -> None:
    indices = draw_indices(POOL_SIZE, SEED)
    assert indices == draw_indices(POOL_SIZE, SEED)
    assert all(0 <= idx < REFERENCE_RECORDS for idx in indices)


def test_synthetic_source_is_deterministic() -> None:
    source = SyntheticReferenceSource()
    pool = source.fetch(POOL_SIZE, SEED)
    assert pool == source.fetch(POOL_SIZE, SEED)
    assert pool != source.fetch(POOL_SIZE, SEED + 1)
    assert all(value.startswith("hash_") and len(value) == 21 for value in pool)


class FakeDynamoDB:
    """Serves ids divisible by three; the first request leaves one key unprocessed."""

    def __init__(self) -> None:
        self.requests = []

    def batch_get_item(self, RequestItems):
        request = RequestItems[TABLE]
        assert request["ProjectionExpression"] == "id, hash_pan"
        keys = request["Keys"]
        assert len(keys) <= 100
        self.requests.append(keys)
        unprocessed = []
        if len(self.requests) == 1 and len(keys) > 1:
            unprocessed, keys = keys[-1:], keys[:-1]
        items = [
            {"id": key["id"], "hash_pan": {"S": f"pan_{key['id']['N']}"}}
            for key in keys
            if int(key["id"]["N"]) % 3 == 0
        ]
        response = {"Responses": {TABLE: items}}
        if unprocessed:
            response["UnprocessedKeys"] = {TABLE: {"Keys": unprocessed}}
        return response


def test_dynamodb_source_maps_records_and_fills_misses(caplog) -> None:
    client = FakeDynamoDB()
    source = DynamoDBReferenceSource(client, TABLE)

    with caplog.at_level(logging.WARNING):
        pool = source.fetch(POOL_SIZE, SEED)

    indices = draw_indices(POOL_SIZE, SEED)
    assert len(pool) == POOL_SIZE
    for idx, value in zip(indices, pool):
        if idx % 3 == 0:
            assert value == f"pan_{idx}"
        else:
            assert value.startswith("hash_")
    # The unprocessed key from the first batch is asked for again on its own.
    assert len(client.requests[1]) == 1
    assert any("[REFERENCE POOL MISS]" in record.getMessage() for record in caplog.records)
    assert pool == DynamoDBReferenceSource(FakeDynamoDB(), TABLE).fetch(POOL_SIZE, SEED)


class UnreachableDynamoDB:
    def batch_get_item(self, RequestItems):
        raise EndpointConnectionError(endpoint_url="http://localhost:8000")


def test_unreachable_source_degrades_to_synthetic(caplog) -> None:
    source = DynamoDBReferenceSource(UnreachableDynamoDB(), TABLE)

    with caplog.at_level(logging.WARNING):
        pool = source.fetch(POOL_SIZE, SEED)

    assert len(pool) == POOL_SIZE
    assert all(value.startswith("hash_") for value in pool)
    assert pool == source.fetch(POOL_SIZE, SEED)
    assert any("[REFERENCE POOL UNAVAILABLE]" in record.getMessage() for record in caplog.records)
