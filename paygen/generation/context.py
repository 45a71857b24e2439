"""
Explicit per-job and per-row inputs to the field rules.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date
from typing import Sequence

from paygen.generation.business_logic import BusinessLogic
from paygen.generation.reference_data import normalize_brand

SEQUENCE_BASE = 1_000_000_000_000_001


@dataclass(frozen=True)
class JobMeta:
    """
    Job-level values the field rules need.

    Parameters
    ----------
    job_index : int
        Global job index used for seeding.
    thread_id : int
        1-based worker thread id.
    num_threads : int
        Worker threads in the job.
    rows_per_thread : int
        Rows each thread generates for the base tables.
    partition_order : int
        Ordinal assigned to this job within its date partition.
    card_brand, network_brand : str
        Brands echoed into card and clearing columns.
    """

    job_index: int
    thread_id: int
    num_threads: int
    rows_per_thread: int
    partition_order: int
    card_brand: str = "MASTERCARD"
    network_brand: str = "MASTERCARD"

    def sequence_number(self, row_index: int) -> int:
        job_base = self.partition_order * (self.rows_per_thread * self.num_threads)
        thread_offset = (self.thread_id - 1) * self.rows_per_thread
        return SEQUENCE_BASE + job_base + thread_offset + row_index

    @property
    def normalized_card_brand(self) -> str:
        return normalize_brand(self.card_brand)

    @property
    def normalized_network_brand(self) -> str:
        return normalize_brand(self.network_brand)


@dataclass
class RowContext:
    """Everything a field rule may read while resolving one column of one row."""

    field_name: str
    row_seed: int
    row_index: int
    job: JobMeta
    logic: BusinessLogic
    rng: random.Random
    is_chargeback_row: bool
    is_chargeback_table: bool
    process_date: date
    reference_pool: Sequence[str]


__all__ = ["SEQUENCE_BASE", "JobMeta", "RowContext"]
