"""
Pytest configuration for the payment data generator.

Provides fixtures for:
- Local job configuration (local sink, in-memory partition store, synthetic pool)
- Database connection management for the PostgreSQL backends
- Partition table cleanup for integration tests
"""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Generator

import psycopg
import pytest

from paygen.config import JobConfig, Settings

# Fixed reference day so partition dates are stable across test runs.
TEST_TODAY = date(2024, 6, 15)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "paygen"),
        log_level="DEBUG",
    )


@pytest.fixture
def local_settings(tmp_path: Path) -> Settings:
    """Small job that touches no external service."""
    return Settings(
        aws_batch_job_id="job:abc",
        aws_batch_job_array_index=3,
        job_index_offset=0,
        num_of_rows=20,
        num_threads=2,
        chargeback_percentage=10.0,
        initial_load=True,
        storage_backend="local",
        local_output_dir=str(tmp_path / "out"),
        partition_store_backend="memory",
        reference_source_backend="synthetic",
        reference_pool_size=50,
        upload_max_attempts=3,
        upload_backoff_seconds=0.0,
    )


@pytest.fixture
def job_config(local_settings: Settings) -> JobConfig:
    return JobConfig.from_settings(local_settings, today=TEST_TODAY)


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return test_settings.dsn


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(db_connection: psycopg.Connection) -> bool:
    """
    Ensure the partition and reference tables exist (db/init.sql is idempotent).
    """
    init_sql_path = Path(__file__).parent.parent / "db" / "init.sql"
    with db_connection.cursor() as cur:
        cur.execute(init_sql_path.read_text(encoding="utf-8"))
    db_connection.commit()
    return True


@pytest.fixture(scope="function")
def clean_partition_counters(db_connection: psycopg.Connection, db_schema_initialized: bool):
    """
    Empty the partition_counters table before and after each test function.
    """
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.partition_counters;")
    db_connection.commit()
    yield
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.partition_counters;")
    db_connection.commit()
