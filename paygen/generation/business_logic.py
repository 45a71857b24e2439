"""
Business logic synthesis.

`synthesize(seed)` turns a row seed into the immutable set of decisions that
every table derived from that row must agree on: outcome flags, countries,
currencies, amounts, transaction type and rates.

The draw order below is part of the output contract. Field rules keep drawing
from the same generator afterwards, so inserting, removing or reordering a
draw here changes every downstream column for every seed.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from paygen.generation.reference_data import COUNTRY_CURRENCIES, FROM_USD, TO_USD

PURCHASE = "PURCHASE"
REFUND = "REFUND"
CASH_ADVANCE = "CASH_ADVANCE"
BALANCE_TRANSFER = "BALANCE_TRANSFER"
FEE = "FEE"
ADJUSTMENT = "ADJUSTMENT"

# Upper bounds (exclusive) on randrange(100) for each transaction type.
_TRANSACTION_TYPE_BUCKETS = (
    (85, PURCHASE),
    (88, REFUND),
    (93, CASH_ADVANCE),
    (97, BALANCE_TRANSFER),
    (99, FEE),
    (100, ADJUSTMENT),
)


@dataclass(frozen=True)
class BusinessLogic:
    """Decisions shared by every table row derived from one seed."""

    is_auth_declined: bool
    is_reversal: bool
    is_refund: bool
    is_void: bool
    is_adjustment: bool
    has_tip: bool
    has_shipping: bool
    has_handling: bool
    has_warranty: bool
    has_reconciliation_fee: bool
    merchant_country: str
    merchant_currency: str
    issuer_country: str
    issuer_currency: str
    base_amount: float
    chargeback_multiplier: float
    transaction_type: str
    issuer_rate: float
    network_rate: float
    risk_rate: float
    acquirer_rate: float
    exchange_rate: float
    interchange_rate: float
    processing_rate: float

    @property
    def is_cross_border(self) -> bool:
        return self.merchant_country != self.issuer_country

    @property
    def chargeback_amount(self) -> float:
        return self.base_amount * self.chargeback_multiplier


def synthesize(seed: int) -> BusinessLogic:
    """Derive business logic from a row seed with a private generator."""
    return draw_business_logic(random.Random(seed))


def draw_business_logic(rng: random.Random) -> BusinessLogic:
    """
    Draw business logic from an already seeded generator.

    The generator is left positioned right after the last rate draw so the
    caller can continue with field-level draws.
    """
    is_auth_declined = rng.random() < 0.05
    is_reversal = rng.random() < 0.005

    merchant_country, merchant_currency = rng.choice(COUNTRY_CURRENCIES)
    issuer_country, issuer_currency = rng.choice(COUNTRY_CURRENCIES)

    base_amount = rng.uniform(10.00, 9999.99)
    chargeback_multiplier = rng.uniform(0.5, 1.0)

    state = rng.randrange(100)
    is_refund = state < 5
    is_void = 5 <= state < 7
    is_adjustment = 7 <= state < 10

    has_tip = not is_auth_declined and not is_refund and rng.random() < 0.4
    has_shipping = rng.random() < 0.6
    has_handling = has_shipping and rng.random() < 0.5
    has_warranty = rng.random() < 0.1
    has_reconciliation_fee = is_adjustment or is_void or rng.random() < 0.05

    transaction_type = _draw_transaction_type(rng)
    cross_border = merchant_country != issuer_country

    issuer_rate = _draw_issuer_rate(rng, transaction_type)

    network_rate = rng.uniform(0.0001, 0.0015)
    if cross_border:
        network_rate *= rng.uniform(1.5, 2.5)

    if is_auth_declined:
        risk_rate = rng.uniform(0.008, 0.015)
    else:
        risk_rate = rng.uniform(0.0001, 0.008)
    if has_tip:
        risk_rate *= 1.2

    acquirer_rate = _draw_acquirer_rate(rng, transaction_type)
    if base_amount < 100.0:
        acquirer_rate *= rng.uniform(1.1, 1.3)

    exchange_rate = _draw_exchange_rate(rng, issuer_currency, merchant_currency)

    interchange_rate = _draw_interchange_rate(rng, transaction_type)
    if cross_border:
        interchange_rate *= rng.uniform(1.2, 1.5)

    processing_rate = rng.uniform(0.001, 0.005)
    if is_auth_declined:
        processing_rate *= 1.2

    return BusinessLogic(
        is_auth_declined=is_auth_declined,
        is_reversal=is_reversal,
        is_refund=is_refund,
        is_void=is_void,
        is_adjustment=is_adjustment,
        has_tip=has_tip,
        has_shipping=has_shipping,
        has_handling=has_handling,
        has_warranty=has_warranty,
        has_reconciliation_fee=has_reconciliation_fee,
        merchant_country=merchant_country,
        merchant_currency=merchant_currency,
        issuer_country=issuer_country,
        issuer_currency=issuer_currency,
        base_amount=base_amount,
        chargeback_multiplier=chargeback_multiplier,
        transaction_type=transaction_type,
        issuer_rate=issuer_rate,
        network_rate=network_rate,
        risk_rate=risk_rate,
        acquirer_rate=acquirer_rate,
        exchange_rate=exchange_rate,
        interchange_rate=interchange_rate,
        processing_rate=processing_rate,
    )


def _draw_transaction_type(rng: random.Random) -> str:
    roll = rng.randrange(100)
    for upper, name in _TRANSACTION_TYPE_BUCKETS:
        if roll < upper:
            return name
    return ADJUSTMENT


def _draw_issuer_rate(rng: random.Random, transaction_type: str) -> float:
    if transaction_type == CASH_ADVANCE:
        return rng.uniform(0.025, 0.045)
    if transaction_type == BALANCE_TRANSFER:
        return rng.uniform(0.015, 0.035)
    if transaction_type == PURCHASE:
        return rng.uniform(0.005, 0.025)
    return rng.uniform(0.008, 0.020)


def _draw_acquirer_rate(rng: random.Random, transaction_type: str) -> float:
    if transaction_type == CASH_ADVANCE:
        return rng.uniform(0.025, 0.050)
    if transaction_type == BALANCE_TRANSFER:
        return rng.uniform(0.020, 0.040)
    if transaction_type == PURCHASE:
        return rng.uniform(0.015, 0.035)
    return rng.uniform(0.018, 0.030)


def _draw_exchange_rate(rng: random.Random, issuer_currency: str, merchant_currency: str) -> float:
    if issuer_currency == merchant_currency:
        return 1.0
    to_usd = TO_USD.get(issuer_currency)
    from_usd = FROM_USD.get(merchant_currency)
    if to_usd is None or from_usd is None:
        return 1.0
    return to_usd * from_usd * rng.uniform(0.98, 1.02)


def _draw_interchange_rate(rng: random.Random, transaction_type: str) -> float:
    if transaction_type == CASH_ADVANCE:
        return rng.uniform(0.020, 0.025)
    if transaction_type == BALANCE_TRANSFER:
        return rng.uniform(0.015, 0.020)
    if transaction_type == PURCHASE:
        return rng.uniform(0.005, 0.020)
    return rng.uniform(0.008, 0.015)


__all__ = [
    "BusinessLogic",
    "synthesize",
    "draw_business_logic",
    "PURCHASE",
    "REFUND",
    "CASH_ADVANCE",
    "BALANCE_TRANSFER",
    "FEE",
    "ADJUSTMENT",
]
