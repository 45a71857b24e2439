"""
boto3 client factories.

Clients get bounded connect/read timeouts and botocore's adaptive retry mode
(3 attempts), which covers throttling and credential-resolution hiccups during
container start. Application-level upload retries sit on top of this in
`paygen.pipeline.upload`.
"""

from __future__ import annotations

from typing import Any, Optional

import boto3
from botocore.config import Config

from paygen.config import Settings

CONNECT_TIMEOUT_SECONDS = 30
READ_TIMEOUT_SECONDS = 60

_CLIENT_CONFIG = Config(
    connect_timeout=CONNECT_TIMEOUT_SECONDS,
    read_timeout=READ_TIMEOUT_SECONDS,
    retries={"max_attempts": 3, "mode": "adaptive"},
    max_pool_connections=32,
)


def _client(service: str, region: str, endpoint_url: Optional[str]) -> Any:
    return boto3.client(
        service,
        region_name=region,
        endpoint_url=endpoint_url,
        config=_CLIENT_CONFIG,
    )


def s3_client(settings: Settings) -> Any:
    return _client("s3", settings.aws_default_region, settings.s3_endpoint_url)


def dynamodb_client(settings: Settings) -> Any:
    return _client("dynamodb", settings.effective_dynamodb_region, settings.dynamodb_endpoint_url)


def dynamodb_table(settings: Settings, table_name: str) -> Any:
    """Resource-level table handle; used for bulk loading through `batch_writer`."""
    resource = boto3.resource(
        "dynamodb",
        region_name=settings.effective_dynamodb_region,
        endpoint_url=settings.dynamodb_endpoint_url,
        config=_CLIENT_CONFIG,
    )
    return resource.Table(table_name)


__all__ = ["s3_client", "dynamodb_client", "dynamodb_table"]
