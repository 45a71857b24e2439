"""
Per-thread batch pipeline.

One worker thread owns one shard of the job (`rows_per_thread` row seeds) and
runs it end to end:

1. fetch the reference pool once,
2. select the chargeback rows,
3. generate the tables of the shard concurrently,
4. encode each table as Parquet,
5. upload every payload to the main and the family bucket.

The thread succeeds only if every upload succeeds. Failures are reported in
the returned `ThreadResult`; sibling threads are never interrupted.
"""

from __future__ import annotations

import asyncio
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence

from paygen.config import JobConfig
from paygen.domain.models import ThreadResult
from paygen.generation.chargebacks import select_chargeback_seeds
from paygen.generation.context import JobMeta
from paygen.generation.rules import FieldRuleRegistry
from paygen.generation.schemas import is_chargeback_table, table_family, tables_for_thread
from paygen.generation.seeds import derive_row_seeds, derive_thread_seed
from paygen.generation.tables import TableData, generate_table
from paygen.pipeline.encoding import encode_parquet
from paygen.pipeline.reference_pool import ReferencePoolSource
from paygen.pipeline.sinks import ObjectSink
from paygen.pipeline.upload import (
    UploadState,
    UploadTask,
    dual_destination_tasks,
    raise_for_failures,
    upload_all,
)
from paygen.utils.logging import get_logger

log = get_logger(__name__)


def object_key(table_name: str, process_date: date, job_index: int, thread_id: int) -> str:
    """`{table}/{YYYY}/{MM}/{DD}/job_{job_index}_thread_{thread_id}.parquet`"""
    return (
        f"{table_name}/{process_date:%Y}/{process_date:%m}/{process_date:%d}/"
        f"job_{job_index}_thread_{thread_id}.parquet"
    )


@dataclass(frozen=True)
class JobPlan:
    """A configured job after its partition order has been assigned."""

    config: JobConfig
    partition_order: int

    def job_meta(self, thread_id: int) -> JobMeta:
        return JobMeta(
            job_index=self.config.job_index,
            thread_id=thread_id,
            num_threads=self.config.num_threads,
            rows_per_thread=self.config.rows_per_thread,
            partition_order=self.partition_order,
            card_brand=self.config.card_brand,
            network_brand=self.config.network_brand,
        )


@dataclass
class WorkerDeps:
    """Backends a worker thread talks to."""

    sink: ObjectSink
    reference_source: ReferencePoolSource
    registry: Optional[FieldRuleRegistry] = None


def generate_thread_tables(
    plan: JobPlan,
    thread_id: int,
    row_seeds: Sequence[int],
    chargeback_seeds: Sequence[int],
    reference_pool: Sequence[str],
    registry: Optional[FieldRuleRegistry] = None,
) -> Dict[str, TableData]:
    """
    Generate every table of one shard on a private thread pool.

    Chargeback tables are produced over `chargeback_seeds` and skipped when
    that list is empty.
    """
    job_meta = plan.job_meta(thread_id)
    selected = frozenset(chargeback_seeds)
    names = tables_for_thread(bool(chargeback_seeds))

    with ThreadPoolExecutor(max_workers=len(names), thread_name_prefix=f"thread{thread_id}-table") as pool:
        futures = {
            name: pool.submit(
                generate_table,
                name,
                list(chargeback_seeds) if is_chargeback_table(name) else row_seeds,
                job_meta,
                selected,
                plan.config.partition_date,
                reference_pool,
                registry,
            )
            for name in names
        }
        return {name: future.result() for name, future in futures.items()}


def build_upload_tasks(plan: JobPlan, thread_id: int, payloads: Dict[str, bytes]) -> List[UploadTask]:
    buckets = plan.config.buckets
    tasks: List[UploadTask] = []
    for name, body in payloads.items():
        key = object_key(name, plan.config.partition_date, plan.config.job_index, thread_id)
        tasks.extend(dual_destination_tasks(key, body, buckets.main, buckets.for_family(table_family(name))))
    return tasks


def run_worker_thread(plan: JobPlan, thread_id: int, deps: WorkerDeps) -> ThreadResult:
    """
    Run one shard end to end.

    Parameters
    ----------
    plan : JobPlan
        Job configuration plus the assigned partition order.
    thread_id : int
        1-based worker id.
    deps : WorkerDeps
        Sink, reference source and optional field-rule registry.

    Returns
    -------
    ThreadResult
        `error` is None only if every upload succeeded.
    """
    config = plan.config
    start = time.perf_counter()
    result = ThreadResult(
        thread_id=thread_id,
        rows=0,
        chargeback_rows=0,
        tables=[],
        uploads_succeeded=0,
        uploads_failed=0,
        duration_seconds=0.0,
        error=None,
    )
    tasks: List[UploadTask] = []

    try:
        row_seeds = derive_row_seeds(config.job_index, thread_id, config.rows_per_thread)
        reference_pool = deps.reference_source.fetch(
            config.reference_pool_size, derive_thread_seed(config.job_index, thread_id)
        )
        chargeback_seeds = select_chargeback_seeds(
            row_seeds, config.chargeback_ratio, config.job_index, thread_id
        )

        tables = generate_thread_tables(
            plan, thread_id, row_seeds, chargeback_seeds, reference_pool, deps.registry
        )
        result["rows"] = len(row_seeds)
        result["chargeback_rows"] = len(chargeback_seeds)
        result["tables"] = list(tables)

        payloads = {name: encode_parquet(table) for name, table in tables.items()}
        tasks = asyncio.run(
            upload_all(
                deps.sink,
                build_upload_tasks(plan, thread_id, payloads),
                max_attempts=config.upload_max_attempts,
                backoff_seconds=config.upload_backoff_seconds,
            )
        )
        raise_for_failures(tasks)
    except Exception as exc:  # noqa: BLE001 - recorded on the result; the job decides
        log.exception(
            f"[THREAD FAILED] {thread_id}",
            extra={"job_index": config.job_index, "thread_id": thread_id},
        )
        result["error"] = str(exc)
    finally:
        result["uploads_succeeded"] = sum(1 for task in tasks if task.state is UploadState.SUCCEEDED)
        result["uploads_failed"] = sum(1 for task in tasks if task.state is UploadState.FAILED)
        result["duration_seconds"] = time.perf_counter() - start

    return result


__all__ = [
    "JobPlan",
    "WorkerDeps",
    "object_key",
    "generate_thread_tables",
    "build_upload_tasks",
    "run_worker_thread",
]
