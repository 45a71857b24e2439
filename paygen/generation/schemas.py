"""
Loading of the packaged table descriptors.

The six tables come in three families. Each family has a full table and a
narrow `_hash` table keyed by hash_pan and sequence_number; the chargeback
family is generated only over the rows selected for chargebacks.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Dict, List, Tuple

from pydantic import ValidationError

from paygen.domain.models import TableSchema
from paygen.errors import SchemaError

AUTHORIZATION = "authorization"
CLEARING = "clearing"
CHARGEBACK = "chargeback"

FAMILIES: Tuple[str, ...] = (AUTHORIZATION, CLEARING, CHARGEBACK)

TABLE_NAMES: Tuple[str, ...] = (
    "authorization",
    "authorization_hash",
    "clearing",
    "clearing_hash",
    "chargeback",
    "chargeback_hash",
)

_SCHEMA_DIR = "schema_files"


def table_family(table_name: str) -> str:
    """Family a table belongs to: `clearing_hash` -> `clearing`."""
    family = table_name[: -len("_hash")] if table_name.endswith("_hash") else table_name
    if family not in FAMILIES:
        raise SchemaError(f"Unknown table '{table_name}'. Available: {', '.join(TABLE_NAMES)}")
    return family


def is_chargeback_table(table_name: str) -> bool:
    return table_family(table_name) == CHARGEBACK


def parse_schema(content: str, source: str = "<string>") -> TableSchema:
    try:
        return TableSchema.model_validate(json.loads(content))
    except (ValueError, ValidationError) as exc:
        raise SchemaError(f"Invalid table schema in {source}: {exc}") from exc


@lru_cache(maxsize=None)
def load_schema(table_name: str) -> TableSchema:
    """Load and validate the descriptor for `table_name`; raises SchemaError."""
    table_family(table_name)
    filename = f"{table_name}_schema.json"
    try:
        path = resources.files("paygen.generation").joinpath(_SCHEMA_DIR).joinpath(filename)
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise SchemaError(f"Schema file {filename} is missing") from exc
    schema = parse_schema(content, filename)
    if schema.table_name != table_name:
        raise SchemaError(f"{filename} declares table '{schema.table_name}'")
    return schema


def load_all_schemas() -> Dict[str, TableSchema]:
    return {name: load_schema(name) for name in TABLE_NAMES}


def tables_for_thread(has_chargebacks: bool) -> List[str]:
    if has_chargebacks:
        return list(TABLE_NAMES)
    return [name for name in TABLE_NAMES if table_family(name) != CHARGEBACK]


__all__ = [
    "AUTHORIZATION",
    "CLEARING",
    "CHARGEBACK",
    "FAMILIES",
    "TABLE_NAMES",
    "table_family",
    "is_chargeback_table",
    "parse_schema",
    "load_schema",
    "load_all_schemas",
    "tables_for_thread",
]
