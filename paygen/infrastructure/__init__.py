"""
Infrastructure package for the payment data generator.

Centralizes external connectivity: PostgreSQL pooling and boto3 clients.
Keep this layer focused on I/O and resource management, decoupled from
generation and orchestration logic.
"""

from paygen.infrastructure.aws import dynamodb_client, dynamodb_table, s3_client
from paygen.infrastructure.db_factory import PoolManager, get_sync_connection, get_sync_pool

__all__ = [
    "dynamodb_client",
    "dynamodb_table",
    "s3_client",
    "PoolManager",
    "get_sync_connection",
    "get_sync_pool",
]
