"""
Calendar-date partition selection.

Initial load spreads jobs over [2020-01-01, today - 7 days] by a stable hash of
the job index. Nightly runs cover the last seven days, (today - 7) + 1 through
today, one day per array index modulo 7.
"""

from __future__ import annotations

import hashlib
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from paygen.errors import ConfigurationError

INITIAL_LOAD_START = date(2020, 1, 1)
LOOKBACK_DAYS = 7


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def stable_hash(job_index: int) -> int:
    """First 8 bytes of SHA-256 over the decimal job index; identical on every host."""
    digest = hashlib.sha256(str(job_index).encode("ascii")).digest()
    return int.from_bytes(digest[:8], "big")


def initial_load_window(today: Optional[date] = None) -> tuple:
    today = today or utc_today()
    end = today - timedelta(days=LOOKBACK_DAYS)
    if end < INITIAL_LOAD_START:
        raise ConfigurationError(f"initial load window is empty: end {end} precedes {INITIAL_LOAD_START}")
    return INITIAL_LOAD_START, end


def initial_partition_date(job_index: int, today: Optional[date] = None) -> date:
    start, end = initial_load_window(today)
    total_days = (end - start).days + 1
    return start + timedelta(days=stable_hash(job_index) % total_days)


def nightly_partition_date(array_index: int, today: Optional[date] = None) -> date:
    today = today or utc_today()
    window_end = today - timedelta(days=LOOKBACK_DAYS)
    return window_end + timedelta(days=(array_index % LOOKBACK_DAYS) + 1)


def partition_date(
    job_index: int,
    array_index: int,
    initial_load: bool,
    today: Optional[date] = None,
) -> date:
    """
    Date partition a job writes to.

    Parameters
    ----------
    job_index : int
        Global job index (array index plus offset); used in initial-load mode.
    array_index : int
        AWS Batch array index; used in nightly mode.
    initial_load : bool
        Backfill mode when True, nightly mode otherwise.
    today : date, optional
        Reference day, defaults to the current UTC date.
    """
    if initial_load:
        return initial_partition_date(job_index, today)
    return nightly_partition_date(array_index, today)


__all__ = [
    "INITIAL_LOAD_START",
    "LOOKBACK_DAYS",
    "stable_hash",
    "initial_load_window",
    "initial_partition_date",
    "nightly_partition_date",
    "partition_date",
    "utc_today",
]
