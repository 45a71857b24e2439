from __future__ import annotations

import random
from datetime import date

import pytest

from paygen.generation.business_logic import (
    ADJUSTMENT,
    BALANCE_TRANSFER,
    CASH_ADVANCE,
    FEE,
    PURCHASE,
    REFUND,
    draw_business_logic,
    synthesize,
)
from paygen.generation.context import SEQUENCE_BASE, JobMeta
from paygen.generation.reference_data import COUNTRY_CURRENCIES
from paygen.generation.resolver import resolve_field
from paygen.generation.seeds import derive_row_seed

KNOWN_SEED = 12345
SAMPLE_SEEDS = range(2_000)
TRANSACTION_TYPES = {PURCHASE, REFUND, CASH_ADVANCE, BALANCE_TRANSFER, FEE, ADJUSTMENT}

# First seeds in range(5000) for which each flag is set. Any change to the
# draw order moves these.
FIRST_DECLINED = [31, 43, 57, 113, 127]
FIRST_REVERSAL = [309, 934, 1073, 1286, 1377]
FIRST_WARRANTY = [1, 4, 8, 30, 42]
FIRST_HANDLING = [8, 13, 14, 16, 17]


def test_same_seed_gives_identical_logic() -> None:
    assert synthesize(KNOWN_SEED) == synthesize(KNOWN_SEED)


def test_synthesize_matches_drawing_from_seeded_generator() -> None:
    assert synthesize(KNOWN_SEED) == draw_business_logic(random.Random(KNOWN_SEED))


def test_known_seed_values_are_stable() -> None:
    logic = synthesize(KNOWN_SEED)
    assert logic.is_auth_declined is False
    assert logic.is_reversal is False
    assert (logic.merchant_country, logic.merchant_currency) == ("COL", "COP")
    assert (logic.issuer_country, logic.issuer_currency) == ("SGP", "SGD")
    assert round(logic.base_amount, 2) == 9318.52
    assert logic.chargeback_multiplier == pytest.approx(0.6351224205121702)
    assert (logic.is_refund, logic.is_void, logic.is_adjustment) == (False, False, False)
    assert (logic.has_tip, logic.has_shipping, logic.has_handling, logic.has_warranty) == (True, True, True, False)
    assert logic.has_reconciliation_fee is False
    assert logic.transaction_type == PURCHASE
    assert logic.issuer_rate == pytest.approx(0.008736180865004863)
    assert logic.exchange_rate == pytest.approx(3229.9513245898984)
    assert logic.processing_rate == pytest.approx(0.0013113681134573035)


def _first_seeds(flag: str, count: int = 5) -> list:
    found = []
    for seed in range(5_000):
        if getattr(synthesize(seed), flag):
            found.append(seed)
            if len(found) == count:
                break
    return found


def test_flag_draw_order_is_stable() -> None:
    assert _first_seeds("is_auth_declined") == FIRST_DECLINED
    assert _first_seeds("is_reversal") == FIRST_REVERSAL
    assert _first_seeds("has_warranty") == FIRST_WARRANTY
    assert _first_seeds("has_handling") == FIRST_HANDLING


def test_known_row_resolves_to_stable_identifiers() -> None:
    job = JobMeta(job_index=7, thread_id=1, num_threads=2, rows_per_thread=10, partition_order=0)
    row_seed = derive_row_seed(7, 1, 3)
    assert row_seed == 700_100_003

    def resolve(field: str) -> str:
        return resolve_field(
            field,
            row_seed=row_seed,
            row_index=3,
            job_meta=job,
            chargeback_seeds=frozenset(),
            is_chargeback_table=False,
            process_date=date(2024, 6, 15),
            reference_pool=["hash_a"],
        )

    assert resolve("transaction_id") == "TXN9967414695338417047"
    assert resolve("sequence_number") == str(SEQUENCE_BASE + 3)
    assert resolve("merchant_country_code") == "DNK"


def test_different_seeds_differ() -> None:
    assert synthesize(KNOWN_SEED) != synthesize(KNOWN_SEED + 1)


def test_refund_void_adjustment_are_mutually_exclusive() -> None:
    for seed in SAMPLE_SEEDS:
        logic = synthesize(seed)
        assert sum((logic.is_refund, logic.is_void, logic.is_adjustment)) <= 1


def test_dependent_flags() -> None:
    for seed in SAMPLE_SEEDS:
        logic = synthesize(seed)
        if logic.has_handling:
            assert logic.has_shipping
        if logic.has_tip:
            assert not logic.is_auth_declined
            assert not logic.is_refund
        if logic.is_adjustment or logic.is_void:
            assert logic.has_reconciliation_fee


def test_values_stay_in_range() -> None:
    pairs = set(COUNTRY_CURRENCIES)
    for seed in SAMPLE_SEEDS:
        logic = synthesize(seed)
        assert 10.00 <= logic.base_amount <= 9999.99
        assert 0.5 <= logic.chargeback_multiplier <= 1.0
        assert logic.base_amount * 0.5 <= logic.chargeback_amount <= logic.base_amount
        assert logic.transaction_type in TRANSACTION_TYPES
        assert (logic.merchant_country, logic.merchant_currency) in pairs
        assert (logic.issuer_country, logic.issuer_currency) in pairs
        assert logic.processing_rate > 0


def test_same_currency_has_unit_exchange_rate() -> None:
    found = False
    for seed in SAMPLE_SEEDS:
        logic = synthesize(seed)
        if logic.issuer_currency == logic.merchant_currency:
            assert logic.exchange_rate == 1.0
            found = True
    assert found


def test_cross_border_property() -> None:
    for seed in range(200):
        logic = synthesize(seed)
        assert logic.is_cross_border == (logic.merchant_country != logic.issuer_country)


def test_declines_and_purchases_occur() -> None:
    sample = [synthesize(seed) for seed in SAMPLE_SEEDS]
    assert any(logic.is_auth_declined for logic in sample)
    assert sum(logic.transaction_type == PURCHASE for logic in sample) > len(sample) // 2
