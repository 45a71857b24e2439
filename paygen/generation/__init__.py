"""
Deterministic, seed-driven row generation.

Exports the seed deriver, business-logic synthesizer, field resolver,
chargeback selector and table materialization.
"""

from paygen.generation.business_logic import BusinessLogic, synthesize
from paygen.generation.chargebacks import select_chargeback_seeds
from paygen.generation.context import JobMeta
from paygen.generation.resolver import RowResolver, resolve_field
from paygen.generation.schemas import TABLE_NAMES, load_schema
from paygen.generation.seeds import (
    derive_row_seed,
    derive_row_seeds,
    derive_thread_seed,
    row_index_from_seed,
    validate_seed_bounds,
)
from paygen.generation.tables import TableData, generate_table

__all__ = [
    "BusinessLogic",
    "synthesize",
    "select_chargeback_seeds",
    "JobMeta",
    "RowResolver",
    "resolve_field",
    "TABLE_NAMES",
    "load_schema",
    "derive_row_seed",
    "derive_row_seeds",
    "derive_thread_seed",
    "row_index_from_seed",
    "validate_seed_bounds",
    "TableData",
    "generate_table",
]
