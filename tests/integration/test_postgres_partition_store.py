"""
PostgreSQL partition store against a real database.

Run with: RUN_INTEGRATION_TESTS=1 pytest tests/integration/
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest

from paygen.infrastructure.db_factory import PoolManager
from paygen.partitioning import PartitionAssigner
from paygen.partitioning.postgres import PostgresPartitionStore
from paygen.pipeline.reference_pool import PostgresReferenceSource

PARTITION = date(2024, 6, 9)
CONCURRENT_JOBS = 20
REFERENCE_ROWS = 30

pytestmark = pytest.mark.skipif(
    os.getenv("RUN_INTEGRATION_TESTS", "0") != "1",
    reason="Integration tests require RUN_INTEGRATION_TESTS=1 and reachable Postgres",
)


@pytest.fixture
def store(test_settings, clean_partition_counters):
    pool = PoolManager().get_pool(test_settings)
    return PostgresPartitionStore(pool)


def test_assign_creates_row_and_container(store) -> None:
    assigner = PartitionAssigner(store)
    assert assigner.assign(PARTITION, "job_a") == 0
    assert store.get_active_order(PARTITION, "job_a") == 0
    assert store.counter(PARTITION) == 1


def test_reassign_and_complete(store) -> None:
    assigner = PartitionAssigner(store)
    assigner.assign(PARTITION, "job_a")
    assert assigner.assign(PARTITION, "job_b") == 1
    assert assigner.assign(PARTITION, "job_a") == 0

    assigner.complete(PARTITION, "job_a")
    assert store.get_active_order(PARTITION, "job_a") is None
    assert store.get_active_order(PARTITION, "job_b") == 1
    assert store.counter(PARTITION) == 2


def test_concurrent_assignment_is_gap_free(store) -> None:
    assigner = PartitionAssigner(store)
    job_ids = [f"job_{i}" for i in range(CONCURRENT_JOBS)]
    with ThreadPoolExecutor(max_workers=4) as pool:
        orders = list(pool.map(lambda job_id: assigner.assign(PARTITION, job_id), job_ids))
    assert sorted(orders) == list(range(CONCURRENT_JOBS))


def test_remove_without_row_is_a_no_op(store) -> None:
    store.remove_active(date(2024, 6, 10), "job_a")
    assert store.counter(date(2024, 6, 10)) == 0


def test_reference_source_reads_seeded_rows(test_settings, db_connection, db_schema_initialized) -> None:
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.reference_pans;")
        for idx in range(REFERENCE_ROWS):
            cur.execute(
                "INSERT INTO public.reference_pans (id, pan, hash_pan, card_type) VALUES (%s, %s, %s, %s)",
                (idx, f"5{idx:015d}", f"pan_{idx}", "Mastercard"),
            )
    db_connection.commit()

    source = PostgresReferenceSource(PoolManager().get_pool(test_settings))
    try:
        pool = source.fetch(10, 1001)
    finally:
        with db_connection.cursor() as cur:
            cur.execute("TRUNCATE TABLE public.reference_pans;")
        db_connection.commit()

    assert len(pool) == 10
    # Indices are drawn over the full id space, so a tiny table mostly misses.
    assert all(value.startswith("pan_") or value.startswith("hash_") for value in pool)
