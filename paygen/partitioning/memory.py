"""
In-process partition store for tests and local runs.

Mirrors the DynamoDB item semantics: a record created by a counter increment
has no active-jobs container until `create_active_container` runs.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional

from paygen.partitioning.abstract import AbstractPartitionStore, ActiveJobsMissingError


@dataclass
class PartitionRecord:
    job_counter: int = 0
    active_jobs: Optional[Dict[str, int]] = None


class InMemoryPartitionStore(AbstractPartitionStore):
    name = "memory"

    def __init__(self) -> None:
        self._records: Dict[date, PartitionRecord] = {}
        self._lock = threading.Lock()

    def get_active_order(self, partition_date: date, job_id: str) -> Optional[int]:
        with self._lock:
            record = self._records.get(partition_date)
            if record is None or record.active_jobs is None:
                return None
            return record.active_jobs.get(job_id)

    def increment_counter(self, partition_date: date) -> int:
        with self._lock:
            record = self._records.setdefault(partition_date, PartitionRecord())
            record.job_counter += 1
            return record.job_counter

    def set_active_order(self, partition_date: date, job_id: str, order: int) -> None:
        with self._lock:
            record = self._records.get(partition_date)
            if record is None or record.active_jobs is None:
                raise ActiveJobsMissingError(str(partition_date))
            record.active_jobs[job_id] = order

    def create_active_container(self, partition_date: date) -> None:
        with self._lock:
            record = self._records.setdefault(partition_date, PartitionRecord())
            if record.active_jobs is None:
                record.active_jobs = {}

    def remove_active(self, partition_date: date, job_id: str) -> None:
        with self._lock:
            record = self._records.get(partition_date)
            if record is not None and record.active_jobs is not None:
                record.active_jobs.pop(job_id, None)

    def snapshot(self, partition_date: date) -> PartitionRecord:
        """Copy of the record for inspection."""
        with self._lock:
            record = self._records.get(partition_date, PartitionRecord())
            active = dict(record.active_jobs) if record.active_jobs is not None else None
            return PartitionRecord(job_counter=record.job_counter, active_jobs=active)


__all__ = ["InMemoryPartitionStore", "PartitionRecord"]
