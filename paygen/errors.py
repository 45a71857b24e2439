"""
Exception hierarchy for the payment data generator.

Every fatal condition raised by the package derives from `PaygenError` so the
CLI can map it to a non-zero exit code. Locally recoverable conditions (field
coercion, reference-pool misses) never raise; they fall back and log.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class PaygenError(Exception):
    """Base class for all fatal generator errors."""


class ConfigurationError(PaygenError):
    """Invalid or incomplete job configuration. Raised before generation starts."""


class SeedBoundsError(ConfigurationError, ValueError):
    """A (job, thread, row) triple falls outside the collision-free seed space."""


class SchemaError(ConfigurationError):
    """A table schema descriptor is missing or malformed."""


class CoordinationError(PaygenError):
    """The partition-order store is unreachable or returned an inconsistent state."""


class UploadFailedError(PaygenError):
    """An object upload exhausted its retries or hit a non-transient error."""


class JobFailedError(PaygenError):
    """At least one worker thread failed; the job was not marked complete."""

    def __init__(self, message: str, report: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.report = report


__all__ = [
    "PaygenError",
    "ConfigurationError",
    "SeedBoundsError",
    "SchemaError",
    "CoordinationError",
    "UploadFailedError",
    "JobFailedError",
]
