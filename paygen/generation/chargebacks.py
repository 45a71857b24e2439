"""
Chargeback selection for one worker thread.
"""

from __future__ import annotations

import hashlib
import random
from decimal import ROUND_CEILING, Decimal
from typing import List, Sequence, Union

Ratio = Union[float, Decimal, str]


def chargeback_count(num_rows: int, ratio: Ratio) -> int:
    """`ceil(num_rows * ratio)` in decimal arithmetic, so 100 * 0.07 is exactly 7."""
    product = Decimal(num_rows) * Decimal(str(ratio))
    return int(product.to_integral_value(rounding=ROUND_CEILING))


def selection_seed(job_index: int, thread_id: int) -> int:
    digest = hashlib.sha256(f"{job_index}:{thread_id}".encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def select_chargeback_seeds(
    row_seeds: Sequence[int],
    ratio: Ratio,
    job_index: int,
    thread_id: int,
) -> List[int]:
    """
    Pick the rows of a thread shard that also appear in the chargeback tables.

    Parameters
    ----------
    row_seeds : Sequence[int]
        All row seeds of the shard.
    ratio : float | Decimal | str
        Fraction of rows to select, in [0, 1].
    job_index, thread_id : int
        Identify the shard; the same shard always selects the same rows.

    Returns
    -------
    List[int]
        Selected seeds, sorted ascending. Empty when `ratio` is 0.

    Raises
    ------
    ValueError
        If `ratio` lies outside [0, 1].
    """
    value = Decimal(str(ratio))
    if value < 0 or value > 1:
        raise ValueError(f"chargeback ratio {ratio} outside [0, 1]")
    count = min(chargeback_count(len(row_seeds), value), len(row_seeds))
    if count == 0:
        return []
    rng = random.Random(selection_seed(job_index, thread_id))
    return sorted(rng.sample(list(row_seeds), count))


__all__ = ["chargeback_count", "selection_seed", "select_chargeback_seeds"]
