"""
Partition assignment for the payment data generator.

Backends that need third-party clients (`dynamodb`, `postgres`) are imported
from their modules directly so that configuration can depend on the date
helpers here without pulling in the database layer.
"""

from paygen.partitioning.abstract import (
    AbstractPartitionStore,
    ActiveJobsMissingError,
    PartitionStore,
    partition_key,
)
from paygen.partitioning.assigner import PartitionAssigner
from paygen.partitioning.dates import (
    initial_partition_date,
    nightly_partition_date,
    partition_date,
)
from paygen.partitioning.memory import InMemoryPartitionStore

__all__ = [
    "AbstractPartitionStore",
    "ActiveJobsMissingError",
    "PartitionStore",
    "partition_key",
    "PartitionAssigner",
    "initial_partition_date",
    "nightly_partition_date",
    "partition_date",
    "InMemoryPartitionStore",
]
