"""
Row seed derivation.

A row seed identifies one logical transaction. It is a pure function of
(job_index, thread_id, row_index):

    thread_seed = job_index * 1000 + thread_id
    row_seed    = thread_seed * 100000 + row_index

The layout is collision free only while thread_id < 1000 and
row_index < 100000, so both bounds are checked here instead of being assumed.
"""

from __future__ import annotations

from typing import List

from paygen.errors import SeedBoundsError

THREAD_SPACE = 1_000
ROW_SPACE = 100_000
MAX_SEED = 2**64 - 1
MAX_JOB_INDEX = (MAX_SEED // ROW_SPACE) // THREAD_SPACE - 1


def validate_seed_bounds(job_index: int, thread_id: int, num_rows: int = 1) -> None:
    """
    Fail fast when a shard would leave the collision-free seed space.

    Parameters
    ----------
    job_index : int
        Global job index (array index plus offset).
    thread_id : int
        Worker thread id within the job.
    num_rows : int
        Number of rows the thread will generate (row indexes 0..num_rows-1).

    Raises
    ------
    SeedBoundsError
        If any component is negative or exceeds its slot width.
    """
    if job_index < 0 or job_index > MAX_JOB_INDEX:
        raise SeedBoundsError(f"job_index {job_index} outside [0, {MAX_JOB_INDEX}]")
    if thread_id < 0 or thread_id >= THREAD_SPACE:
        raise SeedBoundsError(f"thread_id {thread_id} outside [0, {THREAD_SPACE})")
    if num_rows < 0 or num_rows > ROW_SPACE:
        raise SeedBoundsError(f"num_rows {num_rows} outside [0, {ROW_SPACE}]")


def derive_thread_seed(job_index: int, thread_id: int) -> int:
    validate_seed_bounds(job_index, thread_id)
    return job_index * THREAD_SPACE + thread_id


def derive_row_seed(job_index: int, thread_id: int, row_index: int) -> int:
    """Return the globally unique seed for one row of one worker thread."""
    validate_seed_bounds(job_index, thread_id)
    if row_index < 0 or row_index >= ROW_SPACE:
        raise SeedBoundsError(f"row_index {row_index} outside [0, {ROW_SPACE})")
    return derive_thread_seed(job_index, thread_id) * ROW_SPACE + row_index


def derive_row_seeds(job_index: int, thread_id: int, num_rows: int) -> List[int]:
    """Seeds for rows 0..num_rows-1 of a thread shard. No side effects."""
    validate_seed_bounds(job_index, thread_id, num_rows)
    base = derive_thread_seed(job_index, thread_id) * ROW_SPACE
    return [base + row_index for row_index in range(num_rows)]


def row_index_from_seed(row_seed: int) -> int:
    return row_seed % ROW_SPACE


__all__ = [
    "THREAD_SPACE",
    "ROW_SPACE",
    "MAX_SEED",
    "MAX_JOB_INDEX",
    "validate_seed_bounds",
    "derive_thread_seed",
    "derive_row_seed",
    "derive_row_seeds",
    "row_index_from_seed",
]
