"""
Field resolver.

Produces the string value of one column of one row. The value is a pure
function of (field name, row seed, job metadata, chargeback membership,
process date, reference pool); only `insert_date` reads the wall clock.

Each column starts from a generator re-seeded with the row seed and advanced
through the business logic draws, so the shared columns agree across tables
and no column's draws can shift another column's values.
"""

from __future__ import annotations

import random
from datetime import date
from functools import lru_cache
from typing import AbstractSet, Any, Optional, Sequence, Tuple

from paygen.generation.business_logic import BusinessLogic, draw_business_logic
from paygen.generation.context import JobMeta, RowContext
from paygen.generation.rules import FieldRuleRegistry, build_registry


@lru_cache(maxsize=1)
def default_registry() -> FieldRuleRegistry:
    return build_registry()


def resolve_field(
    field_name: str,
    row_seed: int,
    row_index: int,
    job_meta: JobMeta,
    chargeback_seeds: AbstractSet[int],
    is_chargeback_table: bool,
    process_date: date,
    reference_pool: Sequence[str],
    registry: Optional[FieldRuleRegistry] = None,
) -> str:
    """
    Resolve a single column value.

    Parameters
    ----------
    field_name : str
        Column name from a table schema.
    row_seed : int
        Seed of the logical transaction.
    row_index : int
        Position of the row in its thread shard.
    job_meta : JobMeta
        Job-level values (brands, partition order, shard shape).
    chargeback_seeds : AbstractSet[int]
        Seeds selected for the chargeback tables of this thread.
    is_chargeback_table : bool
        True when resolving for the chargeback or chargeback_hash table.
    process_date : date
        Partition date; timestamps fall on this day.
    reference_pool : Sequence[str]
        hash_pan values available to this thread.

    Returns
    -------
    str
        The value rendered as text; typed columns are coerced by the caller.
    """
    row = RowResolver(
        row_seed=row_seed,
        row_index=row_index,
        job_meta=job_meta,
        is_chargeback_row=is_chargeback_table or row_seed in chargeback_seeds,
        is_chargeback_table=is_chargeback_table,
        process_date=process_date,
        reference_pool=reference_pool,
        registry=registry,
    )
    return row.resolve(field_name)


class RowResolver:
    """
    Resolves many columns of the same row.

    The business logic is drawn once; the generator state right after it is
    captured and restored before each column, which gives the same values as
    re-seeding from scratch per column.
    """

    def __init__(
        self,
        row_seed: int,
        row_index: int,
        job_meta: JobMeta,
        is_chargeback_row: bool,
        is_chargeback_table: bool,
        process_date: date,
        reference_pool: Sequence[str],
        registry: Optional[FieldRuleRegistry] = None,
    ) -> None:
        self.row_seed = row_seed
        self.row_index = row_index
        self.job_meta = job_meta
        self.is_chargeback_row = is_chargeback_row
        self.is_chargeback_table = is_chargeback_table
        self.process_date = process_date
        self.reference_pool = reference_pool
        self.registry = registry or default_registry()

        self._rng = random.Random(row_seed)
        self.logic: BusinessLogic = draw_business_logic(self._rng)
        self._state: Tuple[Any, ...] = self._rng.getstate()

    def rng_for_field(self) -> random.Random:
        """The row generator, rewound to just after the business logic draws."""
        self._rng.setstate(self._state)
        return self._rng

    def resolve(self, field_name: str) -> str:
        ctx = RowContext(
            field_name=field_name,
            row_seed=self.row_seed,
            row_index=self.row_index,
            job=self.job_meta,
            logic=self.logic,
            rng=self.rng_for_field(),
            is_chargeback_row=self.is_chargeback_row,
            is_chargeback_table=self.is_chargeback_table,
            process_date=self.process_date,
            reference_pool=self.reference_pool,
        )
        return self.registry.lookup(field_name)(ctx)


__all__ = ["resolve_field", "RowResolver", "default_registry"]
