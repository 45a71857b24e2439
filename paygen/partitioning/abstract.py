"""
Partition-order store interface.

A store keeps one record per partition date:

    {job_counter: int, active_jobs: {job_id: order}}

`PartitionAssigner` builds the assignment protocol on top of the five
primitive operations below. Backends only have to make each primitive atomic
on its own; no multi-operation transactions are needed.
"""

from __future__ import annotations

import abc
from datetime import date
from typing import Optional, Protocol, runtime_checkable


class ActiveJobsMissingError(Exception):
    """The partition record has no active-jobs container to write into."""


@runtime_checkable
class PartitionStore(Protocol):
    """
    Common interface all partition-order stores implement.

    Attributes
    ----------
    name : str
        Short backend identifier used in logs.
    """

    name: str

    def get_active_order(self, partition_date: date, job_id: str) -> Optional[int]:
        """Order recorded for `job_id`, or None. Must be a consistent read."""
        ...

    def increment_counter(self, partition_date: date) -> int:
        """Atomically add one to the counter (creating it at 0 first); return the new value."""
        ...

    def set_active_order(self, partition_date: date, job_id: str, order: int) -> None:
        """
        Record `job_id -> order` in the active-jobs container.

        Raises
        ------
        ActiveJobsMissingError
            If the record has no active-jobs container yet.
        """
        ...

    def create_active_container(self, partition_date: date) -> None:
        """Create an empty active-jobs container unless one exists. Never clobbers entries."""
        ...

    def remove_active(self, partition_date: date, job_id: str) -> None:
        """Drop `job_id` from the active-jobs container; a missing entry is not an error."""
        ...

    def close(self) -> None:
        """Release backend resources held by the store."""
        ...


class AbstractPartitionStore(abc.ABC):
    """
    Optional ABC helper for class-based implementations.
    """

    name: str

    @abc.abstractmethod
    def get_active_order(self, partition_date: date, job_id: str) -> Optional[int]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def increment_counter(self, partition_date: date) -> int:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def set_active_order(self, partition_date: date, job_id: str, order: int) -> None:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def create_active_container(self, partition_date: date) -> None:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def remove_active(self, partition_date: date, job_id: str) -> None:  # pragma: no cover
        raise NotImplementedError

    def close(self) -> None:
        """Release backend resources. Default: nothing to release."""


def partition_key(partition_date: date) -> str:
    return partition_date.isoformat()


__all__ = [
    "ActiveJobsMissingError",
    "PartitionStore",
    "AbstractPartitionStore",
    "partition_key",
]
