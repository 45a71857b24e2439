from __future__ import annotations

from datetime import date

import pytest

from paygen.generation.business_logic import synthesize
from paygen.generation.context import SEQUENCE_BASE, JobMeta
from paygen.generation.resolver import RowResolver, default_registry, resolve_field
from paygen.generation.schemas import load_schema
from paygen.generation.seeds import derive_row_seed

PROCESS_DATE = date(2024, 6, 15)
POOL = ["hash_a", "hash_b", "hash_c"]
JOB = JobMeta(job_index=7, thread_id=1, num_threads=2, rows_per_thread=10, partition_order=0)
ROW_SEED = derive_row_seed(7, 1, 3)


def _resolve(field: str, *, seed: int = ROW_SEED, chargeback_table: bool = False, pool=POOL) -> str:
    return resolve_field(
        field,
        row_seed=seed,
        row_index=3,
        job_meta=JOB,
        chargeback_seeds=frozenset(),
        is_chargeback_table=chargeback_table,
        process_date=PROCESS_DATE,
        reference_pool=pool,
    )


def test_resolution_is_deterministic() -> None:
    for field in ("transaction_id", "merchant_name", "hash_pan", "transaction_amount", "mti"):
        assert _resolve(field) == _resolve(field)


def test_shared_columns_agree_across_tables() -> None:
    # Chargeback-table resolution of the same seed must echo the base row.
    for field in ("transaction_amount", "hash_pan", "transaction_timestamp", "merchant_country_code"):
        assert _resolve(field) == _resolve(field, chargeback_table=True)


def test_country_and_currency_echo_business_logic() -> None:
    logic = synthesize(ROW_SEED)
    assert _resolve("merchant_country_code") == logic.merchant_country
    assert _resolve("issuer_country_code") == logic.issuer_country
    assert _resolve("currency_code") == logic.issuer_currency
    assert _resolve("local_currency") == logic.merchant_currency
    assert _resolve("transaction_amount") == f"{logic.base_amount:.2f}"
    assert _resolve("exchange_rate") == f"{logic.exchange_rate:.4f}"


def test_brand_columns_echo_job_meta() -> None:
    assert _resolve("card_brand") == "MASTERCARD"
    assert _resolve("clearing_network") == "MASTERCARD"


@pytest.mark.parametrize(
    "field, kind",
    [
        ("transaction_amount", "exact"),
        ("settlement_currency", "exact"),
        ("process_date", "exact"),
        ("insert_date", "exact"),
        ("presentment_currency", "generic_currency"),
        ("authorization_timestamp", "generic_timestamp"),
        ("response_time", "generic_timestamp"),
        ("chargeback_date", "generic_timestamp"),
        ("processing_priority", "fallback"),
    ],
)
def test_registry_resolution_stage(field: str, kind: str) -> None:
    assert default_registry().kind(field) == kind


def test_every_schema_column_resolves() -> None:
    schema = load_schema("authorization")
    for name in schema.column_names:
        assert isinstance(_resolve(name), str)


def test_hash_pan_comes_from_pool() -> None:
    assert _resolve("hash_pan") in POOL


def test_hash_pan_without_pool_is_synthesized() -> None:
    value = _resolve("hash_pan", pool=[])
    assert value.startswith("hash_")
    assert len(value) == len("hash_") + 16


def test_sequence_number_layout() -> None:
    job = JobMeta(job_index=0, thread_id=2, num_threads=3, rows_per_thread=10, partition_order=2)
    assert job.sequence_number(4) == SEQUENCE_BASE + 2 * 30 + 10 + 4


def test_chargeback_sequence_number_uses_seed_row_index() -> None:
    seed = derive_row_seed(7, 1, 8)
    value = resolve_field(
        "sequence_number",
        row_seed=seed,
        row_index=0,
        job_meta=JOB,
        chargeback_seeds=frozenset({seed}),
        is_chargeback_table=True,
        process_date=PROCESS_DATE,
        reference_pool=POOL,
    )
    assert int(value) == JOB.sequence_number(8)


def test_chargeback_membership_drives_status_and_count() -> None:
    logic = synthesize(ROW_SEED)
    member = resolve_field(
        "chargeback_count",
        row_seed=ROW_SEED,
        row_index=3,
        job_meta=JOB,
        chargeback_seeds=frozenset({ROW_SEED}),
        is_chargeback_table=False,
        process_date=PROCESS_DATE,
        reference_pool=POOL,
    )
    assert member == "1"
    assert _resolve("chargeback_count") == "0"
    if not (logic.is_auth_declined or logic.is_reversal or logic.is_refund):
        assert _resolve("transaction_status_code", chargeback_table=True) == "6"


def test_row_resolver_matches_single_field_resolution() -> None:
    row = RowResolver(
        row_seed=ROW_SEED,
        row_index=3,
        job_meta=JOB,
        is_chargeback_row=False,
        is_chargeback_table=False,
        process_date=PROCESS_DATE,
        reference_pool=POOL,
    )
    fields = ["transaction_id", "tip_amount_cents", "merchant_name", "ip_address", "transaction_id"]
    assert [row.resolve(f) for f in fields] == [_resolve(f) for f in fields]
    assert row.logic == synthesize(ROW_SEED)
