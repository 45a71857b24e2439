"""
Domain models for the payment data generator.

`TableSchema` mirrors the JSON descriptors shipped under
`paygen/generation/schema_files/`. Column order is fixed: strings, ints, bigints,
smallints, tinyints, timestamps, then each `decimals_P_S` group in file order.

`ThreadResult` and `JobReport` are the result contracts passed from the batch
pipeline to the orchestrator and reporter.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, NamedTuple, Optional, TypedDict

from pydantic import BaseModel, Field, model_validator

STRING = "string"
INT = "int"
BIGINT = "bigint"
SMALLINT = "smallint"
TINYINT = "tinyint"
TIMESTAMP = "timestamp"
DECIMAL = "decimal"

# Schema group key -> column kind, in column order.
SCALAR_GROUPS: Dict[str, str] = {
    "strings": STRING,
    "ints": INT,
    "bigints": BIGINT,
    "smallints": SMALLINT,
    "tinyints": TINYINT,
    "timestamps": TIMESTAMP,
}

DECIMAL_GROUP = re.compile(r"^decimals_(\d+)_(\d+)$")


class Column(NamedTuple):
    name: str
    kind: str
    precision: Optional[int] = None
    scale: Optional[int] = None


class TableSchema(BaseModel):
    """
    Representation of one table descriptor.
    """

    table_name: str = Field(..., description="Output table name and key prefix.")
    total_columns: int = Field(..., ge=1, description="Declared column count.")
    field_groups: Dict[str, List[str]] = Field(
        ..., alias="fields", description="Column names grouped by type key."
    )

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    @model_validator(mode="after")
    def _check_groups(self) -> "TableSchema":
        for key in self.field_groups:
            if key in SCALAR_GROUPS:
                continue
            match = DECIMAL_GROUP.match(key)
            if match is None:
                raise ValueError(f"unknown field group '{key}' in table {self.table_name}")
            precision, scale = int(match.group(1)), int(match.group(2))
            if not 1 <= precision <= 38 or scale > precision:
                raise ValueError(f"invalid decimal group '{key}' in table {self.table_name}")

        names = [name for group in self.field_groups.values() for name in group]
        if len(names) != self.total_columns:
            raise ValueError(
                f"table {self.table_name} declares {self.total_columns} columns, found {len(names)}"
            )
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate column names in table {self.table_name}")
        return self

    def columns(self) -> List[Column]:
        ordered: List[Column] = []
        for key, kind in SCALAR_GROUPS.items():
            ordered.extend(Column(name, kind) for name in self.field_groups.get(key, []))
        for key, names in self.field_groups.items():
            match = DECIMAL_GROUP.match(key)
            if match is None:
                continue
            precision, scale = int(match.group(1)), int(match.group(2))
            ordered.extend(Column(name, DECIMAL, precision, scale) for name in names)
        return ordered

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns()]


class ThreadResult(TypedDict, total=False):
    """
    Outcome of one worker thread.

    `error` is set only when the thread failed; the other fields still report
    how far it got.
    """

    thread_id: int
    rows: int
    chargeback_rows: int
    tables: List[str]
    uploads_succeeded: int
    uploads_failed: int
    duration_seconds: float
    error: Optional[str]


class JobReport(TypedDict, total=False):
    job_index: int
    job_id: str
    partition_date: str
    partition_order: int
    threads: List[ThreadResult]
    rows: int
    duration_seconds: float
    throughput_rows_per_sec: float
    peak_rss_bytes: Optional[int]
    cpu_percent: Optional[float]
    completed: bool
    extra: Dict[str, Any]


__all__ = [
    "STRING",
    "INT",
    "BIGINT",
    "SMALLINT",
    "TINYINT",
    "TIMESTAMP",
    "DECIMAL",
    "Column",
    "TableSchema",
    "ThreadResult",
    "JobReport",
]
