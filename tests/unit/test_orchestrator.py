from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from paygen.config import JobConfig
from paygen.errors import ConfigurationError, JobFailedError
from paygen.generation.schemas import TABLE_NAMES
from paygen.orchestrator import resolve_partition_store, run_job
from paygen.partitioning import InMemoryPartitionStore
from paygen.pipeline.batch import object_key
from paygen.pipeline.encoding import decode_parquet
from paygen.pipeline.reference_pool import SyntheticReferenceSource
from paygen.pipeline.sinks import LocalSink

THREADS = 2
ROWS = 20
EXPECTED_UPLOADS = len(TABLE_NAMES) * 2 * THREADS


class RejectingSink(LocalSink):
    """Rejects every upload to one bucket."""

    name = "rejecting"

    def __init__(self, root, bucket: str) -> None:
        super().__init__(root)
        self.bucket = bucket

    def put(self, bucket, key, body):
        if bucket == self.bucket:
            raise PermissionError(f"write to {bucket} denied")
        super().put(bucket, key, body)


def _run(job_config, **kwargs):
    kwargs.setdefault("store", InMemoryPartitionStore())
    kwargs.setdefault("sink", LocalSink(job_config.local_output_dir))
    kwargs.setdefault("reference_source", SyntheticReferenceSource())
    return run_job(job_config, **kwargs)


def test_object_key_layout(job_config) -> None:
    key = object_key("clearing_hash", job_config.partition_date, 7, 2)
    date_path = job_config.partition_date.strftime("%Y/%m/%d")
    assert key == f"clearing_hash/{date_path}/job_7_thread_2.parquet"


def test_run_job_writes_every_table_to_both_buckets(job_config, local_settings) -> None:
    store = InMemoryPartitionStore()
    report = _run(job_config, settings=local_settings, store=store)

    assert report["completed"] is True
    assert report["partition_order"] == 0
    assert report["rows"] == ROWS * THREADS
    assert report["extra"]["uploads_succeeded"] == EXPECTED_UPLOADS
    assert report["extra"]["uploads_failed"] == 0
    assert report["extra"]["chargeback_rows"] == 2 * THREADS
    assert [t["thread_id"] for t in report["threads"]] == [1, 2]

    root = Path(job_config.local_output_dir)
    for thread_id in job_config.thread_ids:
        for name in TABLE_NAMES:
            key = object_key(name, job_config.partition_date, job_config.job_index, thread_id)
            family = name.replace("_hash", "")
            main = root / "payment-data" / key
            assert main.exists()
            assert (root / family / key).read_bytes() == main.read_bytes()

    # Completed jobs leave the active map.
    assert store.snapshot(job_config.partition_date).active_jobs == {}


def test_generated_rows_carry_job_sequence_numbers(job_config, local_settings) -> None:
    _run(job_config, settings=local_settings)
    key = object_key("authorization_hash", job_config.partition_date, job_config.job_index, 2)
    table = decode_parquet((Path(job_config.local_output_dir) / "payment-data" / key).read_bytes())
    sequence = table.column("sequence_number").to_pylist()
    assert sequence == sorted(sequence)
    assert sequence[0] == 1_000_000_000_000_001 + ROWS


def test_failed_upload_keeps_job_active_and_rerun_reuses_order(job_config, local_settings) -> None:
    store = InMemoryPartitionStore()
    sink = RejectingSink(job_config.local_output_dir, "clearing")

    with pytest.raises(JobFailedError) as excinfo:
        _run(job_config, settings=local_settings, store=store, sink=sink)

    report = excinfo.value.report
    assert report["completed"] is False
    assert report["extra"]["uploads_failed"] == 2 * THREADS
    assert all(thread["error"] for thread in report["threads"])
    assert store.snapshot(job_config.partition_date).active_jobs == {job_config.job_id: 0}

    rerun = _run(job_config, settings=local_settings, store=store)
    assert rerun["partition_order"] == 0
    assert store.snapshot(job_config.partition_date).job_counter == 1


def test_zero_chargeback_ratio_skips_chargeback_tables(job_config, local_settings) -> None:
    config = JobConfig.from_settings(
        local_settings.model_copy(update={"chargeback_percentage": 0.0}),
        today=date(2024, 6, 15),
    )
    assert config.chargeback_ratio == Decimal(0)
    report = _run(config, settings=local_settings)
    assert report["extra"]["chargeback_rows"] == 0
    for thread in report["threads"]:
        assert thread["tables"] == ["authorization", "authorization_hash", "clearing", "clearing_hash"]
        assert thread["uploads_succeeded"] == 8


def test_backends_resolve_from_config(job_config, local_settings) -> None:
    report = run_job(job_config, settings=local_settings)
    assert report["completed"] is True
    assert report["extra"]["storage_backend"] == "local"
    assert report["extra"]["partition_store_backend"] == "memory"


def test_unknown_backend_is_rejected(job_config, local_settings) -> None:
    config = JobConfig(**{**job_config.__dict__, "partition_store_backend": "redis"})
    with pytest.raises(ConfigurationError, match="redis"):
        resolve_partition_store(config, local_settings)
