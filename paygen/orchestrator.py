"""
Orchestrator for one generation job.

A job is one AWS Batch array child. It claims an order in its date partition,
fans the shards out to `num_threads` worker threads and marks itself complete
only when every thread has uploaded every table.

Usage (example from CLI):
    from paygen.config import JobConfig, get_settings
    from paygen.orchestrator import run_job

    settings = get_settings()
    report = run_job(JobConfig.from_settings(settings), settings)
    print(report["partition_order"], report["rows"])

A failed job raises `JobFailedError` after all threads settle; its partition
order stays in the active map so a restart reuses it.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional

from paygen.config import JobConfig, Settings, get_settings
from paygen.domain.models import JobReport, ThreadResult
from paygen.errors import ConfigurationError, JobFailedError
from paygen.generation.rules import FieldRuleRegistry
from paygen.infrastructure.aws import dynamodb_client, s3_client
from paygen.infrastructure.db_factory import get_sync_pool
from paygen.partitioning.abstract import PartitionStore
from paygen.partitioning.assigner import PartitionAssigner
from paygen.partitioning.dynamodb import DynamoDBPartitionStore
from paygen.partitioning.memory import InMemoryPartitionStore
from paygen.partitioning.postgres import PostgresPartitionStore
from paygen.pipeline.batch import JobPlan, WorkerDeps, run_worker_thread
from paygen.pipeline.reference_pool import (
    DynamoDBReferenceSource,
    PostgresReferenceSource,
    ReferencePoolSource,
    SyntheticReferenceSource,
)
from paygen.pipeline.sinks import LocalSink, ObjectSink, S3Sink
from paygen.utils.logging import get_logger
from paygen.utils.profiler import ProfileStats, profile_block

log = get_logger(__name__)


def _round_float(value: float, decimals: int = 2) -> float:
    """Round a float to specified decimal places for human-readable output."""
    return round(value, decimals)


def _partition_store_factories(
    config: JobConfig, settings: Settings
) -> Dict[str, Callable[[], PartitionStore]]:
    """Registry of partition-order backends."""
    return {
        "memory": lambda: InMemoryPartitionStore(),
        "dynamodb": lambda: DynamoDBPartitionStore(
            dynamodb_client(settings), config.partition_counter_table_name or ""
        ),
        "postgres": lambda: PostgresPartitionStore(
            get_sync_pool(settings), config.partition_counter_table_name
        ),
    }


def _sink_factories(config: JobConfig, settings: Settings) -> Dict[str, Callable[[], ObjectSink]]:
    return {
        "s3": lambda: S3Sink(s3_client(settings)),
        "local": lambda: LocalSink(config.local_output_dir),
    }


def _reference_source_factories(
    config: JobConfig, settings: Settings
) -> Dict[str, Callable[[], ReferencePoolSource]]:
    return {
        "synthetic": lambda: SyntheticReferenceSource(),
        "dynamodb": lambda: DynamoDBReferenceSource(
            dynamodb_client(settings), config.hash_pan_table_name or ""
        ),
        "postgres": lambda: PostgresReferenceSource(get_sync_pool(settings)),
    }


def _resolve(kind: str, name: str, factories: Dict[str, Callable[[], object]]) -> object:
    if name not in factories:
        raise ConfigurationError(f"Unknown {kind} '{name}'. Available: {', '.join(sorted(factories))}")
    return factories[name]()


def resolve_partition_store(config: JobConfig, settings: Settings) -> PartitionStore:
    return _resolve(  # type: ignore[return-value]
        "partition store",
        config.partition_store_backend,
        _partition_store_factories(config, settings),
    )


def resolve_sink(config: JobConfig, settings: Settings) -> ObjectSink:
    return _resolve("storage backend", config.storage_backend, _sink_factories(config, settings))  # type: ignore[return-value]


def resolve_reference_source(config: JobConfig, settings: Settings) -> ReferencePoolSource:
    return _resolve(  # type: ignore[return-value]
        "reference source",
        config.reference_source_backend,
        _reference_source_factories(config, settings),
    )


def _build_report(
    config: JobConfig,
    order: Optional[int],
    threads: List[ThreadResult],
    stats: ProfileStats,
    completed: bool,
) -> JobReport:
    return JobReport(
        job_index=config.job_index,
        job_id=config.job_id,
        partition_date=config.process_date,
        partition_order=order if order is not None else -1,
        threads=sorted(threads, key=lambda t: t["thread_id"]),
        rows=stats.rows,
        duration_seconds=_round_float(stats.duration_seconds),
        throughput_rows_per_sec=_round_float(stats.throughput_rows_per_sec),
        peak_rss_bytes=stats.peak_rss_bytes,
        cpu_percent=_round_float(stats.cpu_percent, 1) if stats.cpu_percent else None,
        completed=completed,
        extra={
            "chargeback_rows": sum(t.get("chargeback_rows", 0) for t in threads),
            "uploads_succeeded": sum(t.get("uploads_succeeded", 0) for t in threads),
            "uploads_failed": sum(t.get("uploads_failed", 0) for t in threads),
            "peak_traced_bytes": stats.peak_traced_bytes,
            "storage_backend": config.storage_backend,
            "partition_store_backend": config.partition_store_backend,
        },
    )


def run_job(
    config: JobConfig,
    settings: Optional[Settings] = None,
    store: Optional[PartitionStore] = None,
    sink: Optional[ObjectSink] = None,
    reference_source: Optional[ReferencePoolSource] = None,
    registry: Optional[FieldRuleRegistry] = None,
    enable_tracemalloc: bool = False,
) -> JobReport:
    """
    Run one generation job end to end.

    Parameters
    ----------
    config : JobConfig
        Validated job inputs.
    settings : Settings, optional
        Connection settings for backends built here. Defaults to the cached settings.
    store, sink, reference_source : optional
        Pre-built backends; when omitted they are resolved from `config`.
    registry : FieldRuleRegistry, optional
        Field rules; defaults to the built-in registry.
    enable_tracemalloc : bool
        Track peak Python allocations (slows generation noticeably).

    Returns
    -------
    JobReport
        Per-thread results plus job totals and profiler stats.

    Raises
    ------
    CoordinationError
        If the partition order cannot be assigned or completion cannot be written.
    JobFailedError
        If any worker thread failed. The report is attached as `exc.report`.
    """
    settings = settings or get_settings()
    owned_store = store is None
    store = store or resolve_partition_store(config, settings)
    sink = sink or resolve_sink(config, settings)
    reference_source = reference_source or resolve_reference_source(config, settings)
    assigner = PartitionAssigner(store)

    log.info(
        f"[JOB START] {config.job_id}",
        extra={
            "job_index": config.job_index,
            "job_id": config.job_id,
            "partition_date": config.process_date,
            "threads": config.num_threads,
            "rows_per_thread": config.rows_per_thread,
            "initial_load": config.initial_load,
        },
    )

    order: Optional[int] = None
    threads: List[ThreadResult] = []
    try:
        with profile_block(f"job-{config.job_index}", enable_tracemalloc=enable_tracemalloc) as stats:
            order = assigner.assign(config.partition_date, config.job_id)
            plan = JobPlan(config=config, partition_order=order)
            deps = WorkerDeps(sink=sink, reference_source=reference_source, registry=registry)

            with ThreadPoolExecutor(
                max_workers=config.num_threads, thread_name_prefix="worker"
            ) as pool:
                futures = [
                    pool.submit(run_worker_thread, plan, thread_id, deps)
                    for thread_id in config.thread_ids
                ]
                threads = [future.result() for future in futures]

            for thread in threads:
                log.info(
                    f"[THREAD DONE] {thread['thread_id']}",
                    extra={
                        "thread_id": thread["thread_id"],
                        "rows": thread.get("rows"),
                        "chargeback_rows": thread.get("chargeback_rows"),
                        "uploads_succeeded": thread.get("uploads_succeeded"),
                        "uploads_failed": thread.get("uploads_failed"),
                        "error": thread.get("error"),
                    },
                )

            stats.rows = sum(t.get("rows", 0) for t in threads)
            failed = [t for t in threads if t.get("error")]
            if not failed:
                assigner.complete(config.partition_date, config.job_id)
    finally:
        if owned_store:
            store.close()

    report = _build_report(config, order, threads, stats, completed=not failed)
    if failed:
        log.error(
            f"[JOB FAILED] {config.job_id}",
            extra={"job_id": config.job_id, "failed_threads": [t["thread_id"] for t in failed]},
        )
        raise JobFailedError(
            f"{len(failed)} of {len(threads)} worker thread(s) failed; "
            f"job {config.job_id} left active in partition {config.process_date}",
            report=dict(report),
        )

    log.info(
        f"[JOB COMPLETE] {config.job_id}",
        extra={
            "job_id": config.job_id,
            "partition_order": order,
            "rows": report["rows"],
            "duration": report["duration_seconds"],
            "throughput_rps": report["throughput_rows_per_sec"],
        },
    )
    return report


__all__ = [
    "run_job",
    "resolve_partition_store",
    "resolve_sink",
    "resolve_reference_source",
]
