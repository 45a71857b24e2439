"""
Small seeded value generators shared by the field rules.

Every helper takes the row's `random.Random` explicitly; none of them touch
module-level random state.
"""

from __future__ import annotations

import random
from datetime import date, datetime, time, timezone
from typing import Sequence

from paygen.generation.reference_data import (
    DEFAULT_POSTCODE_FORMAT,
    PLACEHOLDER_MESSAGES,
    PLACEHOLDER_NAMES,
    POSTCODE_FORMATS,
)

_MAX_ID_DIGITS = 18
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def choice(rng: random.Random, options: Sequence[str]) -> str:
    if not options:
        return generic_value("unknown_field", rng)
    return options[rng.randrange(len(options))]


def u64(rng: random.Random) -> int:
    return rng.getrandbits(64)


def hex_hash(rng: random.Random) -> str:
    """64 hex characters, shaped like a SHA-256 digest."""
    return "".join(f"{rng.getrandbits(64):016x}" for _ in range(4))


def prefixed_id(rng: random.Random, prefix: str, digits: int) -> str:
    """`prefix` followed by exactly `digits` digits (at most 18), no leading zero."""
    if digits <= 0:
        return prefix
    digits = min(digits, _MAX_ID_DIGITS)
    low = 0 if digits == 1 else 10 ** (digits - 1)
    return f"{prefix}{rng.randrange(low, 10 ** digits):0{digits}d}"


def to_micros(moment: datetime) -> int:
    delta = moment - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds


def timestamp_micros(process_date: date, rng: random.Random) -> int:
    """A seeded second-resolution UTC instant on `process_date`, in epoch microseconds."""
    hour = rng.randrange(24)
    minute = rng.randrange(60)
    second = rng.randrange(60)
    moment = datetime.combine(process_date, time(hour, minute, second), tzinfo=timezone.utc)
    return to_micros(moment)


def insert_timestamp_micros() -> int:
    return to_micros(datetime.now(timezone.utc))


def money(value: float) -> str:
    return f"{value:.2f}"


def cents(value: float) -> str:
    """Round half away from zero, matching the amount's two-decimal rendering."""
    return str(int(value * 100.0 + (0.5 if value >= 0 else -0.5)))


def truncated_cents(value: float) -> str:
    return str(int(value * 100.0))


def postcode(rng: random.Random, country: str) -> str:
    """
    Fill a postcode template for `country`.

    Template characters: "9" any digit, "1" non-zero digit, "A" a letter from
    the country's alphabet; other characters are copied.
    """
    template, alphabet = POSTCODE_FORMATS.get(country, DEFAULT_POSTCODE_FORMAT)
    out = []
    for char in template:
        if char == "9":
            out.append(str(rng.randrange(10)))
        elif char == "1":
            out.append(str(rng.randrange(1, 10)))
        elif char == "A":
            out.append(alphabet[rng.randrange(len(alphabet))])
        else:
            out.append(char)
    return "".join(out)


def generic_value(field_name: str, rng: random.Random) -> str:
    """Name-driven placeholder for columns without a dedicated rule."""
    if "_hash" in field_name:
        return hex_hash(rng)
    if "_id" in field_name:
        return f"ID{u64(rng):012d}"
    if "address" in field_name:
        return f"{rng.randrange(100, 9999)} Main St"
    if "name" in field_name:
        return choice(rng, PLACEHOLDER_NAMES)
    if "message" in field_name:
        return choice(rng, PLACEHOLDER_MESSAGES)
    prefix = field_name.split("_", 1)[0] or "data"
    return f"{prefix}_{rng.getrandbits(32):08x}"


__all__ = [
    "choice",
    "u64",
    "hex_hash",
    "prefixed_id",
    "to_micros",
    "timestamp_micros",
    "insert_timestamp_micros",
    "money",
    "cents",
    "truncated_cents",
    "postcode",
    "generic_value",
]
