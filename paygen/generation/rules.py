"""
Declarative field rules and the registry that dispatches on column name.

Resolution order for a column:

1. exact-name rules (echo, categorical, prefixed id, formula, lookup, constant)
2. ordered name-pattern rules (generic currency, timestamps)
3. the name-driven placeholder in `primitives.generic_value`

Every rule draws from `ctx.rng`, which is positioned right after the business
logic draws for the row. Rules never share generator state with each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from paygen.generation import primitives as p
from paygen.generation.business_logic import BALANCE_TRANSFER, CASH_ADVANCE, REFUND
from paygen.generation.context import RowContext
from paygen.generation.reference_data import (
    CARD_PRODUCTS,
    CHARGEBACK_REASON_CODES,
    CITIES,
    DECLINE_RESPONSE_CODES,
    DEFAULT_CARD_PRODUCTS,
    DEFAULT_CITIES,
    FALLBACK_MERCHANTS,
    GENERIC_CURRENCIES,
    MERCHANTS,
    SHIPPING_COUNTRIES,
    STATES,
    TRANSACTION_TYPE_CODES,
    USER_AGENTS,
    Merchant,
)
from paygen.generation.seeds import row_index_from_seed

Rule = Callable[[RowContext], str]

# Fraction of seeds (by seed % 10000) that carry an open chargeback status.
CHARGEBACK_STATUS_THRESHOLD = 0.005

MERCHANT_COUNTRY_FIELDS: Tuple[str, ...] = (
    "country_code",
    "transaction_country_code",
    "merchant_country_code",
    "acquirer_country_code",
    "processor_country_code",
)

ISSUER_COUNTRY_FIELDS: Tuple[str, ...] = (
    "issuer_country_code",
    "cardholder_country",
    "billing_country",
    "settlement_country_code",
    "clearing_country_code",
)

ISSUER_CURRENCY_FIELDS: Tuple[str, ...] = (
    "currency_code",
    "original_currency",
    "settlement_currency",
    "clearing_currency",
    "issuer_currency",
    "cardholder_currency",
    "billing_currency",
)

MERCHANT_CURRENCY_FIELDS: Tuple[str, ...] = ("local_currency",)

RATE_FIELDS: Tuple[str, ...] = (
    "issuer_rate",
    "network_rate",
    "risk_rate",
    "acquirer_rate",
    "exchange_rate",
    "interchange_rate",
    "processing_rate",
)

CATEGORICAL_FIELDS: Dict[str, Tuple[str, ...]] = {
    "account_age_indicator": ("01", "02", "03", "04", "05"),
    "account_change_indicator": ("01", "02", "03", "04"),
    "account_pwd_change_indicator": ("01", "02", "03", "04"),
    "address_reputation": ("GOOD", "POOR", "UNKNOWN"),
    "auth_method": ("PASSWORD", "BIOMETRIC", "TOKEN", "SMS"),
    "authentication_status": ("Y", "N", "A", "U", "R"),
    "browser_info": ("Chrome", "Safari", "Firefox", "Edge"),
    "card_type": ("CREDIT", "DEBIT", "PREPAID"),
    "cardholder_present_code": ("0", "1", "2", "5"),
    "card_present_code": ("0", "1", "2", "5"),
    "cavv_result": ("0", "1", "2", "3", "4"),
    "ccpa_pattern": ("COMPLIANT", "NON_COMPLIANT", "EXEMPT"),
    "channel_type": ("ONLINE", "MOBILE", "POS", "ATM"),
    "cryptogram_type": ("ARQC", "TC", "AAC", "CDA"),
    "device_channel": ("01", "02", "03"),
    "eci_indicator": ("05", "06", "07", "02"),
    "enrollment_status": ("Y", "N", "U"),
    "geolocation_result": ("MATCH", "NO_MATCH", "UNAVAILABLE"),
    "interchange_category": ("STANDARD", "ENHANCED", "PREMIUM"),
    "merchant_risk_indicator": ("LOW", "MEDIUM", "HIGH"),
    "payment_acc_indicator": ("01", "02", "03", "04"),
    "pci_pattern": ("DSS", "P2PE", "TSP"),
    "pos_condition_code": ("00", "01", "02", "03"),
    "pos_entry_mode": ("01", "02", "05", "90"),
    "risk_analysis_result": ("LOW", "MEDIUM", "HIGH"),
    "risk_score_tier": ("LOW", "MEDIUM", "HIGH", "CRITICAL"),
    "sdk_info": ("iOS_SDK_1.0", "Android_SDK_1.0", "Web_SDK_1.0"),
    "spending_pattern": ("NORMAL", "HIGH", "BURST"),
    "step_up_indicator": ("Y", "N"),
    "suspicious_acc_activity": ("Y", "N"),
    "trusted_beneficiary": ("Y", "N"),
    "terminal_type": ("POS", "ATM", "MOTO", "ECOMMERCE"),
    "three_ds_version": ("2.1.0", "2.2.0", "2.3.1"),
    "tokenization_method": ("DPAN", "NETWORK", "ISSUER"),
    "transaction_source": ("ONLINE", "POS", "ATM", "MOBILE"),
    "user_agent": USER_AGENTS,
    "velocity_check_result": ("PASS", "FAIL", "WARNING"),
    "whitelist_status": ("WHITELISTED", "NOT_WHITELISTED", "PENDING"),
    "interchange_program": ("STANDARD", "ENHANCED", "PREMIUM", "CORPORATE"),
    "interchange_rate_type": ("QUALIFIED", "MID_QUALIFIED", "NON_QUALIFIED"),
    "cvv_result": ("M", "N", "P", "S", "U", "X", "Y"),
    "avs_result": ("Y", "N", "A", "Z", "W", "X", "U", "R"),
    "processor_name": ("FIRST_DATA", "CHASE_PAYMENTECH", "WORLDPAY", "TSYS", "ELAVON"),
    "exemption_type": ("NONE", "LOW_VALUE", "TRA", "CORPORATE", "SECURE_CORPORATE"),
    "sca_result": ("AUTHENTICATED", "NOT_AUTHENTICATED", "ATTEMPTED", "UNAVAILABLE"),
}

PREFIXED_ID_FIELDS: Dict[str, Tuple[str, int]] = {
    "acquirer_id": ("ACQ", 8),
    "acs_transaction_id": ("ACS", 32),
    "auth_data": ("AUTH", 16),
    "batch_id": ("BATCH", 12),
    "customer_id": ("CUST", 12),
    "device_fingerprint": ("FP", 32),
    "directory_server_id": ("DS", 16),
    "issuer_id": ("ISS", 8),
    "session_id": ("SESS", 16),
    "terminal_id": ("TERM", 8),
    "token_requestor_id": ("TR", 11),
    "clearing_batch_id": ("CLR_BATCH", 12),
    "processor_id": ("PROC", 8),
    "network_id": ("NET", 6),
    "settlement_batch_id": ("STL_BATCH", 12),
}

CONSTANT_FIELDS: Dict[str, str] = {
    "daily_transaction_count": "1",
    "ship_addr_line3": "",
    "ship_addr_state": "N/A",
}

_DECLINE_REASONS = (
    "INSUFFICIENT_FUNDS",
    "EXPIRED_CARD",
    "INVALID_CVV",
    "SUSPECTED_FRAUD",
    "CARD_BLOCKED",
    "EXCEEDS_LIMIT",
    "INVALID_PIN",
    "CARD_NOT_ACTIVATED",
)

# (exclusive upper bound on randrange(100), MTI)
_MTI_FLOW = (
    (36, "0100"),
    (56, "0110"),
    (71, "0200"),
    (86, "0210"),
    (91, "0120"),
    (94, "0130"),
    (97, "0121"),
    (99, "0800"),
    (100, "0810"),
)

_SHIPPING_POSTCODE_COUNTRIES = ("USA", "CAN", "GBR")

_FORMULAS: Dict[str, Rule] = {}


def formula(*names: str) -> Callable[[Rule], Rule]:
    """Register a computed rule for one or more exact column names."""

    def register(fn: Rule) -> Rule:
        for name in names:
            _FORMULAS[name] = fn
        return fn

    return register


# --- rule builders -----------------------------------------------------------


def categorical(options: Sequence[str]) -> Rule:
    return lambda ctx: p.choice(ctx.rng, options)


def prefixed(prefix: str, digits: int) -> Rule:
    return lambda ctx: p.prefixed_id(ctx.rng, prefix, digits)


def constant(value: str) -> Rule:
    return lambda ctx: value


def echo(attribute: str) -> Rule:
    return lambda ctx: str(getattr(ctx.logic, attribute))


def rate(attribute: str) -> Rule:
    return lambda ctx: f"{getattr(ctx.logic, attribute):.4f}"


# --- shared attributes -------------------------------------------------------


@formula("sequence_number")
def _sequence_number(ctx: RowContext) -> str:
    row_index = row_index_from_seed(ctx.row_seed) if ctx.is_chargeback_table else ctx.row_index
    return str(ctx.job.sequence_number(row_index))


@formula("transaction_amount", "settlement_amount")
def _transaction_amount(ctx: RowContext) -> str:
    return p.money(ctx.logic.base_amount)


@formula("transaction_amount_cents")
def _transaction_amount_cents(ctx: RowContext) -> str:
    return p.cents(ctx.logic.base_amount)


@formula("transaction_fee_amount")
def _transaction_fee_amount(ctx: RowContext) -> str:
    return p.money(ctx.logic.base_amount * ctx.rng.uniform(0.015, 0.035))


@formula("interchange_amount_cents")
def _interchange_amount_cents(ctx: RowContext) -> str:
    return p.truncated_cents(ctx.logic.base_amount * ctx.rng.uniform(0.005, 0.025))


@formula("tip_amount_cents")
def _tip_amount_cents(ctx: RowContext) -> str:
    if not ctx.logic.has_tip:
        return "0"
    return p.truncated_cents(ctx.logic.base_amount * ctx.rng.uniform(0.10, 0.25))


@formula("shipping_amount_cents")
def _shipping_amount_cents(ctx: RowContext) -> str:
    if not ctx.logic.has_shipping:
        return "0"
    return p.truncated_cents(ctx.rng.uniform(5.00, 50.00))


@formula("handling_amount_cents")
def _handling_amount_cents(ctx: RowContext) -> str:
    if not ctx.logic.has_handling:
        return "0"
    return p.truncated_cents(ctx.rng.uniform(2.00, 15.00))


@formula("transaction_type")
def _transaction_type(ctx: RowContext) -> str:
    return ctx.logic.transaction_type


@formula("transaction_type_cd")
def _transaction_type_cd(ctx: RowContext) -> str:
    return TRANSACTION_TYPE_CODES.get(ctx.logic.transaction_type, "00")


@formula("transaction_status_code")
def _transaction_status_code(ctx: RowContext) -> str:
    logic = ctx.logic
    if logic.is_auth_declined:
        return "5"
    if logic.is_reversal:
        return "3"
    if logic.is_refund:
        return "4"
    if ctx.is_chargeback_row:
        return "6"
    return "0"


# --- chargeback, reversal, refund -------------------------------------------


@formula("chargeback_count")
def _chargeback_count(ctx: RowContext) -> str:
    return "1" if ctx.is_chargeback_row else "0"


@formula("chargeback_amount")
def _chargeback_amount(ctx: RowContext) -> str:
    return p.money(ctx.logic.chargeback_amount) if ctx.is_chargeback_row else "0.00"


@formula("chargeback_amount_cents")
def _chargeback_amount_cents(ctx: RowContext) -> str:
    return p.cents(ctx.logic.chargeback_amount) if ctx.is_chargeback_row else "0"


def _reversed(ctx: RowContext) -> bool:
    return ctx.logic.is_reversal and not ctx.logic.is_auth_declined


def _reversal_value(ctx: RowContext) -> float:
    if ctx.rng.random() < 0.9:
        return ctx.logic.base_amount
    return ctx.logic.base_amount * ctx.rng.uniform(0.5, 0.95)


@formula("reversal_amount")
def _reversal_amount(ctx: RowContext) -> str:
    return p.money(_reversal_value(ctx)) if _reversed(ctx) else "0.00"


@formula("reversal_amount_cents")
def _reversal_amount_cents(ctx: RowContext) -> str:
    return p.cents(_reversal_value(ctx)) if _reversed(ctx) else "0"


@formula("reversal_count")
def _reversal_count(ctx: RowContext) -> str:
    return "1" if _reversed(ctx) else "0"


@formula("refund_amount_cents")
def _refund_amount_cents(ctx: RowContext) -> str:
    if not ctx.logic.is_refund:
        return "0"
    if ctx.rng.random() < 0.7:
        return p.cents(ctx.logic.base_amount)
    return p.cents(ctx.logic.base_amount * ctx.rng.uniform(0.2, 0.8))


@formula("reconciliation_fee")
def _reconciliation_fee(ctx: RowContext) -> str:
    if not ctx.logic.has_reconciliation_fee:
        return "0.00"
    return p.money(ctx.rng.uniform(1.00, 25.00))


@formula("reconciliation_fee_processing_code")
def _reconciliation_fee_processing_code(ctx: RowContext) -> str:
    if not ctx.logic.has_reconciliation_fee:
        return ""
    return p.choice(ctx.rng, ("REC001", "REC002", "REC003", "ADJ001", "ADJ002"))


@formula("reason_code", "chargeback_reason_code")
def _chargeback_reason_code(ctx: RowContext) -> str:
    if not ctx.is_chargeback_row:
        return ""
    codes = CHARGEBACK_REASON_CODES.get(
        ctx.job.normalized_network_brand, CHARGEBACK_REASON_CODES["MASTERCARD"]
    )
    return p.choice(ctx.rng, codes)


@formula("chargeback_status")
def _chargeback_status(ctx: RowContext) -> str:
    if (ctx.row_seed % 10_000) / 10_000 < CHARGEBACK_STATUS_THRESHOLD:
        return p.choice(ctx.rng, ("INITIATED", "PENDING", "RESOLVED"))
    return "NONE"


# --- card and cardholder -----------------------------------------------------


@formula("card_brand")
def _card_brand(ctx: RowContext) -> str:
    return ctx.job.card_brand


@formula("clearing_network")
def _clearing_network(ctx: RowContext) -> str:
    return ctx.job.network_brand


@formula("card_product_id")
def _card_product_id(ctx: RowContext) -> str:
    products = CARD_PRODUCTS.get(ctx.job.normalized_card_brand, DEFAULT_CARD_PRODUCTS)
    return p.choice(ctx.rng, products)


@formula("hash_pan")
def _hash_pan(ctx: RowContext) -> str:
    if not ctx.reference_pool:
        return f"hash_{p.u64(ctx.rng):016x}"
    return ctx.reference_pool[ctx.rng.randrange(len(ctx.reference_pool))]


@formula("cardholder_name_hash")
def _cardholder_name_hash(ctx: RowContext) -> str:
    return p.hex_hash(ctx.rng)


@formula("expiry_date")
def _expiry_date(ctx: RowContext) -> str:
    year = ctx.rng.randrange(2026, 2031)
    month = ctx.rng.randrange(1, 13)
    return f"{month:02d}/{year % 100:02d}"


@formula("ip_address")
def _ip_address(ctx: RowContext) -> str:
    rng = ctx.rng
    return f"{rng.randrange(1, 255)}.{rng.randrange(255)}.{rng.randrange(255)}.{rng.randrange(1, 255)}"


@formula("account_info")
def _account_info(ctx: RowContext) -> str:
    return p.generic_value("account_info", ctx.rng)


@formula("alert_pattern")
def _alert_pattern(ctx: RowContext) -> str:
    logic = ctx.logic
    if logic.is_auth_declined:
        return "HIGH_RISK"
    if logic.base_amount > 5000.0:
        return "SUSPICIOUS"
    if logic.transaction_type == CASH_ADVANCE and logic.base_amount > 1000.0:
        return "SUSPICIOUS"
    return "NORMAL"


# --- merchant ----------------------------------------------------------------


def _merchant(ctx: RowContext) -> Merchant:
    merchants = MERCHANTS.get(ctx.logic.merchant_country, FALLBACK_MERCHANTS)
    return merchants[ctx.rng.randrange(len(merchants))]


@formula("merchant_name")
def _merchant_name(ctx: RowContext) -> str:
    return _merchant(ctx).name


@formula("merchant_dba")
def _merchant_dba(ctx: RowContext) -> str:
    return _merchant(ctx).dba


@formula("merchant_legal_name")
def _merchant_legal_name(ctx: RowContext) -> str:
    return _merchant(ctx).legal_name


@formula("merchant_category_code", "merchant_code")
def _merchant_category_code(ctx: RowContext) -> str:
    return _merchant(ctx).category_code


@formula("business_region_code")
def _business_region_code(ctx: RowContext) -> str:
    return _merchant(ctx).region_code


@formula("merchant_id")
def _merchant_id(ctx: RowContext) -> str:
    return _merchant(ctx).merchant_id


# --- addresses ---------------------------------------------------------------


@formula("bill_addr_country")
def _bill_addr_country(ctx: RowContext) -> str:
    return ctx.logic.issuer_country


@formula("bill_addr_city")
def _bill_addr_city(ctx: RowContext) -> str:
    return p.choice(ctx.rng, CITIES.get(ctx.logic.issuer_country, DEFAULT_CITIES))


@formula("bill_addr_line")
def _bill_addr_line(ctx: RowContext) -> str:
    return f"{ctx.rng.randrange(100, 9999)} Billing St"


@formula("bill_addr_post_code")
def _bill_addr_post_code(ctx: RowContext) -> str:
    return p.postcode(ctx.rng, ctx.logic.issuer_country)


@formula("bill_addr_state")
def _bill_addr_state(ctx: RowContext) -> str:
    states = STATES.get(ctx.logic.issuer_country)
    if not states:
        return "N/A"
    return p.choice(ctx.rng, states)


def _shipping_country(ctx: RowContext) -> str:
    return p.choice(ctx.rng, SHIPPING_COUNTRIES)


@formula("ship_addr_country")
def _ship_addr_country(ctx: RowContext) -> str:
    return _shipping_country(ctx)


@formula("ship_addr_city")
def _ship_addr_city(ctx: RowContext) -> str:
    country = _shipping_country(ctx)
    return p.choice(ctx.rng, CITIES.get(country, DEFAULT_CITIES))


@formula("ship_addr_line1")
def _ship_addr_line1(ctx: RowContext) -> str:
    return f"{ctx.rng.randrange(100, 9999)} Shipping St"


@formula("ship_addr_line2")
def _ship_addr_line2(ctx: RowContext) -> str:
    if ctx.rng.random() < 0.3:
        return f"Unit {ctx.rng.randrange(1, 999)}"
    return ""


@formula("ship_addr_post_code")
def _ship_addr_post_code(ctx: RowContext) -> str:
    country = _shipping_country(ctx)
    if country not in _SHIPPING_POSTCODE_COUNTRIES:
        country = ""
    return p.postcode(ctx.rng, country)


# --- payment method ----------------------------------------------------------

_PAYMENT_METHODS = ("CARD", "BANK", "WALLET", "CRYPTO")
_WALLETS = ("APPLE_PAY", "GOOGLE_PAY", "SAMSUNG_PAY", "PAYPAL")


@formula("payment_method")
def _payment_method(ctx: RowContext) -> str:
    return p.choice(ctx.rng, _PAYMENT_METHODS)


@formula("wallet_type")
def _wallet_type(ctx: RowContext) -> str:
    if p.choice(ctx.rng, _PAYMENT_METHODS) != "WALLET":
        return "N/A"
    return p.choice(ctx.rng, _WALLETS)


# --- identifiers and timestamps ---------------------------------------------


@formula("transaction_id", "original_transaction_id")
def _transaction_id(ctx: RowContext) -> str:
    return f"TXN{p.u64(ctx.rng):016d}"


@formula("clearing_id")
def _clearing_id(ctx: RowContext) -> str:
    return f"CLR{p.u64(ctx.rng):016d}"


@formula("settlement_id")
def _settlement_id(ctx: RowContext) -> str:
    return f"STL{p.u64(ctx.rng):016d}"


@formula("transaction_timestamp", "process_date")
def _seeded_timestamp(ctx: RowContext) -> str:
    return str(p.timestamp_micros(ctx.process_date, ctx.rng))


@formula("insert_date")
def _insert_date(ctx: RowContext) -> str:
    return str(p.insert_timestamp_micros())


# --- outcome statuses --------------------------------------------------------


@formula("refund_status")
def _refund_status(ctx: RowContext) -> str:
    if not ctx.logic.is_refund:
        return "NONE"
    return p.choice(ctx.rng, ("PROCESSED", "PENDING", "FAILED"))


@formula("void_status")
def _void_status(ctx: RowContext) -> str:
    if not ctx.logic.is_void:
        return "NONE"
    return p.choice(ctx.rng, ("VOIDED", "PENDING"))


@formula("adjustment_status")
def _adjustment_status(ctx: RowContext) -> str:
    if not ctx.logic.is_adjustment:
        return "NONE"
    return p.choice(ctx.rng, ("ADJUSTED", "PENDING"))


@formula("clearing_response_code")
def _clearing_response_code(ctx: RowContext) -> str:
    if ctx.logic.is_auth_declined:
        return p.choice(ctx.rng, ("01", "02", "03", "04", "05"))
    if ctx.rng.random() < 0.9:
        return "00"
    return p.choice(ctx.rng, ("01", "02"))


@formula("clearing_response_message")
def _clearing_response_message(ctx: RowContext) -> str:
    roll = ctx.rng.random()
    if ctx.logic.is_auth_declined:
        if roll < 0.6:
            return "DECLINED"
        return "ERROR" if roll < 0.85 else "PENDING"
    return "APPROVED" if roll < 0.9 else "PENDING"


@formula("reconciliation_status")
def _reconciliation_status(ctx: RowContext) -> str:
    if ctx.logic.is_auth_declined:
        return "EXCEPTION"
    if ctx.is_chargeback_row:
        return "UNMATCHED"
    threshold = 0.95 if ctx.logic.transaction_type == REFUND else 0.88
    return "MATCHED" if ctx.rng.random() < threshold else "PENDING"


@formula("dispute_status")
def _dispute_status(ctx: RowContext) -> str:
    if ctx.is_chargeback_row:
        return p.choice(ctx.rng, ("INITIATED", "PENDING", "RESOLVED"))
    if ctx.logic.is_auth_declined:
        return "NONE"
    return "NONE" if ctx.rng.random() < 0.95 else "CLOSED"


@formula("auth_response_code")
def _auth_response_code(ctx: RowContext) -> str:
    if ctx.logic.is_auth_declined:
        return p.choice(ctx.rng, DECLINE_RESPONSE_CODES)
    if ctx.logic.transaction_type == CASH_ADVANCE:
        return p.choice(ctx.rng, ("00", "85"))
    if ctx.logic.transaction_type == BALANCE_TRANSFER:
        return p.choice(ctx.rng, ("00", "87"))
    return p.choice(ctx.rng, ("00", "08", "10"))


@formula("auth_response_message")
def _auth_response_message(ctx: RowContext) -> str:
    if not ctx.logic.is_auth_declined:
        return "APPROVED"
    if ctx.logic.transaction_type in (CASH_ADVANCE, BALANCE_TRANSFER):
        return f"{ctx.logic.transaction_type}_DECLINED"
    return "DECLINED"


@formula("settlement_status")
def _settlement_status(ctx: RowContext) -> str:
    roll = ctx.rng.random()
    if ctx.logic.is_auth_declined:
        return "FAILED" if roll < 0.7 else "CANCELLED"
    threshold = {REFUND: 0.9, CASH_ADVANCE: 0.95}.get(ctx.logic.transaction_type, 0.85)
    return "SETTLED" if roll < threshold else "PENDING"


@formula("mti")
def _mti(ctx: RowContext) -> str:
    if _reversed(ctx):
        return "0420" if ctx.rng.random() < 0.8 else "0400"
    if ctx.logic.is_void:
        return "0100"
    roll = ctx.rng.randrange(100)
    for upper, mti in _MTI_FLOW:
        if roll < upper:
            return mti
    return "0810"


@formula("decline_reason")
def _decline_reason(ctx: RowContext) -> str:
    if not ctx.logic.is_auth_declined:
        return ""
    if ctx.logic.transaction_type == CASH_ADVANCE:
        return p.choice(ctx.rng, ("CASH_ADVANCE_NOT_ALLOWED", "EXCEEDS_CASH_LIMIT", "INSUFFICIENT_FUNDS"))
    if ctx.logic.transaction_type == BALANCE_TRANSFER:
        return p.choice(ctx.rng, ("BALANCE_TRANSFER_NOT_ALLOWED", "EXCEEDS_CREDIT_LIMIT"))
    return p.choice(ctx.rng, _DECLINE_REASONS)


@formula("clearing_status")
def _clearing_status(ctx: RowContext) -> str:
    if ctx.is_chargeback_row:
        return "CLEARED"
    if ctx.logic.is_auth_declined:
        return "REJECTED"
    roll = ctx.rng.random()
    if ctx.logic.transaction_type == REFUND:
        return "CLEARED" if roll < 0.98 else "PENDING"
    if ctx.logic.transaction_type == CASH_ADVANCE:
        return "CLEARED" if roll < 0.92 else "PENDING"
    if roll < 0.95:
        return "CLEARED"
    return "PENDING" if roll < 0.98 else "FAILED"


# --- name patterns -----------------------------------------------------------


def _is_generic_currency(name: str) -> bool:
    return "currency" in name


def _is_generic_timestamp(name: str) -> bool:
    if "timestamp" in name or "_time" in name:
        return True
    return "_date" in name and name not in ("process_date", "insert_date")


def _generic_currency(ctx: RowContext) -> str:
    return p.choice(ctx.rng, GENERIC_CURRENCIES)


def _fallback(ctx: RowContext) -> str:
    return p.generic_value(ctx.field_name, ctx.rng)


@dataclass(frozen=True)
class PatternRule:
    name: str
    matches: Callable[[str], bool]
    rule: Rule


PATTERN_RULES: Tuple[PatternRule, ...] = (
    PatternRule("generic_currency", _is_generic_currency, _generic_currency),
    PatternRule("generic_timestamp", _is_generic_timestamp, _seeded_timestamp),
)


class FieldRuleRegistry:
    """
    Column name -> rule dispatch.

    Pattern and fallback lookups are memoized per column name, so a table of
    N rows pays for pattern matching once per column.
    """

    def __init__(
        self,
        exact: Mapping[str, Rule],
        patterns: Sequence[PatternRule] = PATTERN_RULES,
        fallback: Rule = _fallback,
    ) -> None:
        self._exact: Dict[str, Rule] = dict(exact)
        self._patterns: List[PatternRule] = list(patterns)
        self._fallback = fallback
        self._resolved: Dict[str, Rule] = {}

    def __contains__(self, field_name: str) -> bool:
        return field_name in self._exact

    def lookup(self, field_name: str) -> Rule:
        rule = self._resolved.get(field_name)
        if rule is None:
            rule = self._match(field_name)
            self._resolved[field_name] = rule
        return rule

    def kind(self, field_name: str) -> str:
        """Which resolution stage handles `field_name`: exact, a pattern name, or fallback."""
        if field_name in self._exact:
            return "exact"
        for pattern in self._patterns:
            if pattern.matches(field_name):
                return pattern.name
        return "fallback"

    def _match(self, field_name: str) -> Rule:
        exact: Optional[Rule] = self._exact.get(field_name)
        if exact is not None:
            return exact
        for pattern in self._patterns:
            if pattern.matches(field_name):
                return pattern.rule
        return self._fallback


def build_exact_rules() -> Dict[str, Rule]:
    rules: Dict[str, Rule] = {}
    for name in MERCHANT_COUNTRY_FIELDS:
        rules[name] = echo("merchant_country")
    for name in ISSUER_COUNTRY_FIELDS:
        rules[name] = echo("issuer_country")
    for name in ISSUER_CURRENCY_FIELDS:
        rules[name] = echo("issuer_currency")
    for name in MERCHANT_CURRENCY_FIELDS:
        rules[name] = echo("merchant_currency")
    for name in RATE_FIELDS:
        rules[name] = rate(name)
    for name, options in CATEGORICAL_FIELDS.items():
        rules[name] = categorical(options)
    for name, (prefix, digits) in PREFIXED_ID_FIELDS.items():
        rules[name] = prefixed(prefix, digits)
    for name, value in CONSTANT_FIELDS.items():
        rules[name] = constant(value)
    rules.update(_FORMULAS)
    return rules


def build_registry() -> FieldRuleRegistry:
    return FieldRuleRegistry(build_exact_rules())


__all__ = [
    "Rule",
    "PatternRule",
    "FieldRuleRegistry",
    "CATEGORICAL_FIELDS",
    "PREFIXED_ID_FIELDS",
    "RATE_FIELDS",
    "MERCHANT_COUNTRY_FIELDS",
    "ISSUER_COUNTRY_FIELDS",
    "ISSUER_CURRENCY_FIELDS",
    "MERCHANT_CURRENCY_FIELDS",
    "build_exact_rules",
    "build_registry",
    "formula",
]
