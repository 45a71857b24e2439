"""
paygen - Synthetic payment transaction data generator.

Produces deterministic, cross-table consistent payment records (authorization,
clearing and chargeback tables plus their hash-keyed companions) as Parquet
objects, one job per AWS Batch array child:

- Seed-driven row generation: the same (job, thread, row) always yields the
  same values
- Partition-order assignment over DynamoDB, PostgreSQL or an in-process store
- Concurrent worker threads with dual-destination uploads and bounded retries
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from paygen.config import JobConfig, Settings, get_settings
from paygen.domain.models import JobReport, TableSchema, ThreadResult
from paygen.errors import (
    ConfigurationError,
    CoordinationError,
    JobFailedError,
    PaygenError,
    UploadFailedError,
)
from paygen.orchestrator import run_job
from paygen.utils.logging import configure_logging, get_logger
from paygen.utils.profiler import ProfileStats, profile_block

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "JobConfig",
    "Settings",
    "get_settings",
    # Orchestration
    "run_job",
    # Result contracts
    "JobReport",
    "TableSchema",
    "ThreadResult",
    # Errors
    "PaygenError",
    "ConfigurationError",
    "CoordinationError",
    "UploadFailedError",
    "JobFailedError",
    # Logging
    "configure_logging",
    "get_logger",
    # Profiling
    "ProfileStats",
    "profile_block",
]
