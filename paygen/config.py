"""
Configuration for the payment data generator.

`Settings` loads the environment (AWS Batch injects the job inputs as
environment variables) through Pydantic Settings. `JobConfig` is the explicit,
validated per-job structure handed to the orchestrator and pipeline; nothing
below it reads the environment.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from paygen.errors import ConfigurationError
from paygen.generation.seeds import validate_seed_bounds
from paygen.partitioning.dates import partition_date

StorageBackend = Literal["s3", "local"]
PartitionStoreBackend = Literal["dynamodb", "postgres", "memory"]
ReferenceSourceBackend = Literal["dynamodb", "postgres", "synthetic"]


class Settings(BaseSettings):
    # Job inputs
    aws_batch_job_array_index: int = Field(0, alias="AWS_BATCH_JOB_ARRAY_INDEX")
    job_index_offset: int = Field(0, alias="JOB_INDEX_OFFSET")
    aws_batch_job_id: str = Field("local", alias="AWS_BATCH_JOB_ID")
    num_of_rows: int = Field(100_000, alias="NUM_OF_ROWS")
    num_threads: int = Field(3, alias="NUM_THREADS")
    # Percent of rows, so 0.1 means one row in a thousand.
    chargeback_percentage: float = Field(0.1, alias="CHARGEBACK_PERCENTAGE")
    initial_load: bool = Field(True, alias="INITIAL_LOAD")
    card_brand: str = Field("MASTERCARD", alias="CARD_BRAND")
    network_brand: str = Field("MASTERCARD", alias="NETWORK_BRAND")

    # Storage and coordination
    payment_data_bucket_name: Optional[str] = Field(None, alias="PAYMENT_DATA_BUCKET_NAME")
    authorization_bucket_name: Optional[str] = Field(None, alias="AUTHORIZATION_BUCKET_NAME")
    clearing_bucket_name: Optional[str] = Field(None, alias="CLEARING_BUCKET_NAME")
    chargeback_bucket_name: Optional[str] = Field(None, alias="CHARGEBACK_BUCKET_NAME")
    hash_pan_table_name: Optional[str] = Field(None, alias="HASH_PAN_TABLE_NAME")
    partition_counter_table_name: Optional[str] = Field(None, alias="PARTITION_COUNTER_TABLE_NAME")
    aws_default_region: str = Field("us-east-1", alias="AWS_DEFAULT_REGION")
    dynamodb_region: Optional[str] = Field(None, alias="DYNAMODB_REGION")
    s3_endpoint_url: Optional[str] = Field(None, alias="S3_ENDPOINT_URL")
    dynamodb_endpoint_url: Optional[str] = Field(None, alias="DYNAMODB_ENDPOINT_URL")

    storage_backend: StorageBackend = Field("s3", alias="STORAGE_BACKEND")
    local_output_dir: str = Field("output", alias="LOCAL_OUTPUT_DIR")
    partition_store_backend: PartitionStoreBackend = Field("dynamodb", alias="PARTITION_STORE_BACKEND")
    reference_source_backend: ReferenceSourceBackend = Field("dynamodb", alias="REFERENCE_SOURCE_BACKEND")

    # Tuning
    reference_pool_size: int = Field(1_000, alias="REFERENCE_POOL_SIZE")
    upload_max_attempts: int = Field(3, alias="UPLOAD_MAX_ATTEMPTS")
    upload_backoff_seconds: float = Field(1.0, alias="UPLOAD_BACKOFF_SECONDS")

    # Database (PostgreSQL partition store / reference source)
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("paygen", alias="DB_NAME")
    db_pool_size: int = Field(4, alias="DB_POOL_SIZE")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def job_index(self) -> int:
        return self.aws_batch_job_array_index + self.job_index_offset

    @property
    def effective_dynamodb_region(self) -> str:
        return self.dynamodb_region or self.aws_default_region

    @property
    def dsn(self) -> str:
        return (
            f"postgresql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


@dataclass(frozen=True)
class Buckets:
    main: str
    authorization: str
    clearing: str
    chargeback: str

    def for_family(self, family: str) -> str:
        return getattr(self, family)


@dataclass(frozen=True)
class JobConfig:
    """
    Validated inputs of one generation job.

    Attributes
    ----------
    job_index : int
        Array index plus offset; the root of every row seed in the job.
    array_index : int
        AWS Batch array index; selects the nightly partition day.
    job_id : str
        Key of this job in the partition's active-job map. Stable across
        restarts of the same array child.
    chargeback_ratio : Decimal
        Fraction of rows selected for chargebacks (percent / 100).
    """

    job_index: int
    array_index: int
    job_id: str
    rows_per_thread: int
    num_threads: int
    chargeback_ratio: Decimal
    initial_load: bool
    partition_date: date
    card_brand: str
    network_brand: str
    buckets: Buckets
    storage_backend: str
    local_output_dir: str
    partition_store_backend: str
    reference_source_backend: str
    hash_pan_table_name: Optional[str]
    partition_counter_table_name: Optional[str]
    reference_pool_size: int
    upload_max_attempts: int
    upload_backoff_seconds: float

    @property
    def process_date(self) -> str:
        return self.partition_date.isoformat()

    @property
    def thread_ids(self) -> range:
        return range(1, self.num_threads + 1)

    @classmethod
    def from_settings(cls, settings: Settings, today: Optional[date] = None) -> "JobConfig":
        """
        Build and validate the job configuration.

        Raises
        ------
        ConfigurationError
            On missing bucket or table names for the selected backends,
            non-positive sizes, or a ratio outside [0, 1].
        """
        if settings.num_of_rows <= 0:
            raise ConfigurationError(f"NUM_OF_ROWS must be positive, got {settings.num_of_rows}")
        if settings.num_threads <= 0:
            raise ConfigurationError(f"NUM_THREADS must be positive, got {settings.num_threads}")
        if settings.reference_pool_size <= 0:
            raise ConfigurationError("REFERENCE_POOL_SIZE must be positive")
        if settings.upload_max_attempts <= 0:
            raise ConfigurationError("UPLOAD_MAX_ATTEMPTS must be positive")
        if settings.upload_backoff_seconds < 0:
            raise ConfigurationError("UPLOAD_BACKOFF_SECONDS must not be negative")

        job_index = settings.job_index
        validate_seed_bounds(job_index, settings.num_threads, settings.num_of_rows)

        ratio = Decimal(str(settings.chargeback_percentage)) / Decimal(100)
        if ratio < 0 or ratio > 1:
            raise ConfigurationError(
                f"CHARGEBACK_PERCENTAGE must lie in [0, 100], got {settings.chargeback_percentage}"
            )

        buckets = _resolve_buckets(settings)

        if settings.partition_store_backend == "dynamodb" and not settings.partition_counter_table_name:
            raise ConfigurationError("PARTITION_COUNTER_TABLE_NAME is required for the dynamodb partition store")
        if settings.reference_source_backend == "dynamodb" and not settings.hash_pan_table_name:
            raise ConfigurationError("HASH_PAN_TABLE_NAME is required for the dynamodb reference source")

        job_id = f"{settings.aws_batch_job_id.replace(':', '_')}_{settings.aws_batch_job_array_index}"

        return cls(
            job_index=job_index,
            array_index=settings.aws_batch_job_array_index,
            job_id=job_id,
            rows_per_thread=settings.num_of_rows,
            num_threads=settings.num_threads,
            chargeback_ratio=ratio,
            initial_load=settings.initial_load,
            partition_date=partition_date(
                job_index, settings.aws_batch_job_array_index, settings.initial_load, today
            ),
            card_brand=settings.card_brand,
            network_brand=settings.network_brand,
            buckets=buckets,
            storage_backend=settings.storage_backend,
            local_output_dir=settings.local_output_dir,
            partition_store_backend=settings.partition_store_backend,
            reference_source_backend=settings.reference_source_backend,
            hash_pan_table_name=settings.hash_pan_table_name,
            partition_counter_table_name=settings.partition_counter_table_name,
            reference_pool_size=settings.reference_pool_size,
            upload_max_attempts=settings.upload_max_attempts,
            upload_backoff_seconds=settings.upload_backoff_seconds,
        )


def _resolve_buckets(settings: Settings) -> Buckets:
    names = {
        "PAYMENT_DATA_BUCKET_NAME": settings.payment_data_bucket_name,
        "AUTHORIZATION_BUCKET_NAME": settings.authorization_bucket_name,
        "CLEARING_BUCKET_NAME": settings.clearing_bucket_name,
        "CHARGEBACK_BUCKET_NAME": settings.chargeback_bucket_name,
    }
    missing = [env for env, value in names.items() if not value]
    if missing and settings.storage_backend == "s3":
        raise ConfigurationError(f"Missing bucket names for the s3 backend: {', '.join(missing)}")
    # Local output uses the bucket names as directory names.
    return Buckets(
        main=settings.payment_data_bucket_name or "payment-data",
        authorization=settings.authorization_bucket_name or "authorization",
        clearing=settings.clearing_bucket_name or "clearing",
        chargeback=settings.chargeback_bucket_name or "chargeback",
    )


__all__ = ["Settings", "get_settings", "Buckets", "JobConfig"]
