"""
Table materialization.

Resolves every column of every row of one table and coerces the text values
to the column types declared by the table descriptor. A value that cannot be
coerced is replaced by a seeded default for that (row, column) pair; the row
and its other columns are unaffected.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import AbstractSet, Any, Dict, List, Optional, Sequence

from paygen.domain.models import (
    BIGINT,
    DECIMAL,
    INT,
    SMALLINT,
    TIMESTAMP,
    TINYINT,
    Column,
    TableSchema,
)
from paygen.generation.context import JobMeta
from paygen.generation.primitives import timestamp_micros
from paygen.generation.resolver import RowResolver
from paygen.generation.rules import FieldRuleRegistry
from paygen.generation.schemas import is_chargeback_table, load_schema
from paygen.utils.logging import get_logger

log = get_logger(__name__)

# kind -> (min, max) accepted, (low, high) half-open fallback range
INTEGER_BOUNDS: Dict[str, tuple] = {
    INT: ((-(2**31), 2**31 - 1), (1, 1_000_000)),
    BIGINT: ((-(2**63), 2**63 - 1), (1, 1_000_000_000)),
    SMALLINT: ((-(2**15), 2**15 - 1), (1, 30_000)),
    TINYINT: ((-(2**7), 2**7 - 1), (1, 100)),
}

_MICROS_BOUNDS = (-(2**63), 2**63 - 1)


class CoercionError(ValueError):
    """A resolved value does not fit its column type."""


@dataclass
class TableData:
    """Typed column values for one generated table."""

    name: str
    schema: TableSchema
    columns: Dict[str, List[Any]]
    num_rows: int
    fallbacks: Dict[str, int] = field(default_factory=dict)


def fallback_rng(row_seed: int, column_name: str) -> random.Random:
    return random.Random(f"{row_seed}:{column_name}")


def coerce_integer(raw: str, kind: str) -> int:
    (low, high), _ = INTEGER_BOUNDS[kind]
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise CoercionError(f"not an integer: {raw!r}") from exc
    if value < low or value > high:
        raise CoercionError(f"{value} out of {kind} range")
    return value


def coerce_timestamp(raw: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise CoercionError(f"not epoch microseconds: {raw!r}") from exc
    if value < _MICROS_BOUNDS[0] or value > _MICROS_BOUNDS[1]:
        raise CoercionError(f"{value} out of timestamp range")
    return value


def decimal_limit(precision: int, scale: int) -> Decimal:
    """Largest magnitude representable as decimal(precision, scale)."""
    return Decimal(10) ** (precision - scale) - Decimal(10) ** -scale


def coerce_decimal(raw: str, precision: int, scale: int) -> Decimal:
    try:
        value = Decimal(raw.strip())
    except InvalidOperation as exc:
        raise CoercionError(f"not a decimal: {raw!r}") from exc
    if not value.is_finite():
        raise CoercionError(f"not a finite decimal: {raw!r}")
    quantized = value.quantize(Decimal(10) ** -scale, rounding=ROUND_HALF_UP)
    if abs(quantized) > decimal_limit(precision, scale):
        raise CoercionError(f"{raw} exceeds decimal({precision},{scale})")
    return quantized


def fallback_value(column: Column, rng: random.Random, process_date: date) -> Any:
    if column.kind in INTEGER_BOUNDS:
        _, (low, high) = INTEGER_BOUNDS[column.kind]
        return rng.randrange(low, high)
    if column.kind == TIMESTAMP:
        return timestamp_micros(process_date, rng)
    if column.kind == DECIMAL:
        scale = column.scale or 0
        value = Decimal(repr(rng.uniform(1.0, 1_000_000.0)))
        value = min(value, decimal_limit(column.precision or 38, scale))
        return value.quantize(Decimal(10) ** -scale, rounding=ROUND_HALF_UP)
    return ""


def coerce_value(column: Column, raw: str) -> Any:
    """Convert resolved text to the column's Python value; raises CoercionError."""
    if column.kind in INTEGER_BOUNDS:
        return coerce_integer(raw, column.kind)
    if column.kind == TIMESTAMP:
        return coerce_timestamp(raw)
    if column.kind == DECIMAL:
        return coerce_decimal(raw, column.precision or 38, column.scale or 0)
    return raw


def generate_table(
    table_name: str,
    row_seeds: Sequence[int],
    job_meta: JobMeta,
    chargeback_seeds: AbstractSet[int],
    process_date: date,
    reference_pool: Sequence[str],
    registry: Optional[FieldRuleRegistry] = None,
    schema: Optional[TableSchema] = None,
) -> TableData:
    """
    Generate one table for one worker thread.

    Parameters
    ----------
    table_name : str
        One of the six packaged tables.
    row_seeds : Sequence[int]
        The rows to generate. For the chargeback family these are the selected
        chargeback seeds; otherwise the full shard.
    job_meta : JobMeta
        Job-level values for the field rules.
    chargeback_seeds : AbstractSet[int]
        Seeds selected for chargebacks in this shard.
    process_date : date
        Partition date.
    reference_pool : Sequence[str]
        hash_pan values for this thread.

    Returns
    -------
    TableData
        Column-major typed values plus per-column fallback counts.
    """
    schema = schema or load_schema(table_name)
    columns = schema.columns()
    chargeback_table = is_chargeback_table(table_name)
    values: Dict[str, List[Any]] = {column.name: [] for column in columns}
    fallbacks: Dict[str, int] = {}

    for row_index, row_seed in enumerate(row_seeds):
        row = RowResolver(
            row_seed=row_seed,
            row_index=row_index,
            job_meta=job_meta,
            is_chargeback_row=chargeback_table or row_seed in chargeback_seeds,
            is_chargeback_table=chargeback_table,
            process_date=process_date,
            reference_pool=reference_pool,
            registry=registry,
        )
        for column in columns:
            raw = row.resolve(column.name)
            try:
                value = coerce_value(column, raw)
            except CoercionError:
                value = fallback_value(column, fallback_rng(row_seed, column.name), process_date)
                fallbacks[column.name] = fallbacks.get(column.name, 0) + 1
            values[column.name].append(value)

    if fallbacks:
        log.info(
            f"[COERCION FALLBACK] {table_name}",
            extra={"table": table_name, "columns": sorted(fallbacks), "values": sum(fallbacks.values())},
        )

    return TableData(
        name=table_name,
        schema=schema,
        columns=values,
        num_rows=len(row_seeds),
        fallbacks=fallbacks,
    )


__all__ = [
    "TableData",
    "CoercionError",
    "coerce_value",
    "coerce_integer",
    "coerce_timestamp",
    "coerce_decimal",
    "decimal_limit",
    "fallback_value",
    "fallback_rng",
    "generate_table",
]
