from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from paygen.config import JobConfig
from paygen.errors import ConfigurationError, SeedBoundsError

TODAY = date(2024, 6, 15)


def _with(settings, **overrides):
    return settings.model_copy(update=overrides)


def test_job_config_from_local_settings(job_config) -> None:
    assert job_config.job_index == 3
    assert job_config.array_index == 3
    assert job_config.job_id == "job_abc_3"
    assert job_config.chargeback_ratio == Decimal("0.1")
    assert list(job_config.thread_ids) == [1, 2]
    assert job_config.buckets.main == "payment-data"
    assert job_config.buckets.for_family("clearing") == "clearing"


def test_job_index_includes_offset(local_settings) -> None:
    config = JobConfig.from_settings(_with(local_settings, job_index_offset=1000), today=TODAY)
    assert config.job_index == 1003
    assert config.array_index == 3


def test_nightly_partition_uses_array_index(local_settings) -> None:
    config = JobConfig.from_settings(_with(local_settings, initial_load=False), today=TODAY)
    assert config.partition_date == date(2024, 6, 12)
    assert config.process_date == "2024-06-12"


def test_s3_backend_requires_bucket_names(local_settings) -> None:
    with pytest.raises(ConfigurationError, match="CLEARING_BUCKET_NAME"):
        JobConfig.from_settings(
            _with(
                local_settings,
                storage_backend="s3",
                payment_data_bucket_name="pd",
                authorization_bucket_name="auth",
                chargeback_bucket_name="cb",
            ),
            today=TODAY,
        )


def test_s3_backend_with_all_buckets(local_settings) -> None:
    config = JobConfig.from_settings(
        _with(
            local_settings,
            storage_backend="s3",
            payment_data_bucket_name="pd",
            authorization_bucket_name="auth",
            clearing_bucket_name="clr",
            chargeback_bucket_name="cb",
        ),
        today=TODAY,
    )
    assert config.buckets.for_family("chargeback") == "cb"


def test_dynamodb_backends_require_table_names(local_settings) -> None:
    with pytest.raises(ConfigurationError, match="PARTITION_COUNTER_TABLE_NAME"):
        JobConfig.from_settings(_with(local_settings, partition_store_backend="dynamodb"), today=TODAY)
    with pytest.raises(ConfigurationError, match="HASH_PAN_TABLE_NAME"):
        JobConfig.from_settings(_with(local_settings, reference_source_backend="dynamodb"), today=TODAY)


def test_rows_beyond_seed_space_are_rejected(local_settings) -> None:
    with pytest.raises(SeedBoundsError):
        JobConfig.from_settings(_with(local_settings, num_of_rows=100_001), today=TODAY)


@pytest.mark.parametrize(
    "overrides",
    [
        {"chargeback_percentage": 150.0},
        {"chargeback_percentage": -1.0},
        {"num_of_rows": 0},
        {"num_threads": 0},
        {"reference_pool_size": 0},
        {"upload_max_attempts": 0},
        {"upload_backoff_seconds": -1.0},
    ],
)
def test_invalid_values_are_rejected(local_settings, overrides) -> None:
    with pytest.raises(ConfigurationError):
        JobConfig.from_settings(_with(local_settings, **overrides), today=TODAY)
