"""
Parquet encoding of generated tables.

Column types follow the table descriptor: strings as UTF-8, integer groups at
their declared width, timestamps as UTC microseconds, decimals as
decimal128(P, S).
"""

from __future__ import annotations

from typing import Dict

import pyarrow as pa
import pyarrow.parquet as pq

from paygen.domain.models import (
    BIGINT,
    DECIMAL,
    INT,
    SMALLINT,
    STRING,
    TIMESTAMP,
    TINYINT,
    Column,
    TableSchema,
)
from paygen.generation.tables import TableData

DEFAULT_COMPRESSION = "snappy"

_SCALAR_TYPES: Dict[str, pa.DataType] = {
    STRING: pa.string(),
    INT: pa.int32(),
    BIGINT: pa.int64(),
    SMALLINT: pa.int16(),
    TINYINT: pa.int8(),
    TIMESTAMP: pa.timestamp("us", tz="UTC"),
}


def arrow_type(column: Column) -> pa.DataType:
    if column.kind == DECIMAL:
        return pa.decimal128(column.precision or 38, column.scale or 0)
    return _SCALAR_TYPES[column.kind]


def arrow_schema(schema: TableSchema) -> pa.Schema:
    return pa.schema([pa.field(column.name, arrow_type(column)) for column in schema.columns()])


def to_arrow(table: TableData) -> pa.Table:
    schema = arrow_schema(table.schema)
    arrays = [pa.array(table.columns[field.name], type=field.type) for field in schema]
    return pa.Table.from_arrays(arrays, schema=schema)


def encode_parquet(table: TableData, compression: str = DEFAULT_COMPRESSION) -> bytes:
    """
    Encode one generated table as a single Parquet object.

    Returns
    -------
    bytes
        The complete file, ready for upload.
    """
    buffer = pa.BufferOutputStream()
    pq.write_table(to_arrow(table), buffer, compression=compression)
    return buffer.getvalue().to_pybytes()


def decode_parquet(payload: bytes) -> pa.Table:
    return pq.read_table(pa.BufferReader(payload))


__all__ = [
    "DEFAULT_COMPRESSION",
    "arrow_type",
    "arrow_schema",
    "to_arrow",
    "encode_parquet",
    "decode_parquet",
]
