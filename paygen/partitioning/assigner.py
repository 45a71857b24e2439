"""
Partition assignment protocol.

`assign` gives each job an exclusive ordinal within its date partition and
returns the same ordinal when a restarted job asks again:

1. If the job already holds an order, return it; the counter is untouched.
2. Otherwise atomically increment the partition counter; order = new - 1.
3. Record job_id -> order. If the active-jobs container does not exist yet,
   create it without clobbering concurrent entries and write again once.

`complete` removes the job from the active map once all of its output is
durable. A job that crashes before `complete` keeps its order.
"""

from __future__ import annotations

from datetime import date

from paygen.errors import CoordinationError
from paygen.partitioning.abstract import ActiveJobsMissingError, PartitionStore
from paygen.utils.logging import get_logger

log = get_logger(__name__)


class PartitionAssigner:
    def __init__(self, store: PartitionStore) -> None:
        self.store = store

    def assign(self, partition_date: date, job_id: str) -> int:
        """
        Return this job's order in the partition.

        Raises
        ------
        CoordinationError
            If the store fails or returns an inconsistent state.
        """
        try:
            existing = self.store.get_active_order(partition_date, job_id)
            if existing is not None:
                log.info(
                    f"[PARTITION REUSED] {job_id}",
                    extra={"job_id": job_id, "partition_date": str(partition_date), "order": existing},
                )
                return existing

            counter = self.store.increment_counter(partition_date)
            if counter < 1:
                raise CoordinationError(
                    f"partition counter for {partition_date} returned {counter} after increment"
                )
            order = counter - 1

            try:
                self.store.set_active_order(partition_date, job_id, order)
            except ActiveJobsMissingError:
                self.store.create_active_container(partition_date)
                self.store.set_active_order(partition_date, job_id, order)
        except CoordinationError:
            raise
        except Exception as exc:
            log.error(
                f"[PARTITION FAILED] {job_id}",
                extra={"job_id": job_id, "partition_date": str(partition_date), "store": self.store.name},
            )
            raise CoordinationError(
                f"could not assign {job_id} in partition {partition_date}: {exc}"
            ) from exc

        log.info(
            f"[PARTITION ASSIGNED] {job_id}",
            extra={"job_id": job_id, "partition_date": str(partition_date), "order": order},
        )
        return order

    def complete(self, partition_date: date, job_id: str) -> None:
        try:
            self.store.remove_active(partition_date, job_id)
        except Exception as exc:
            raise CoordinationError(
                f"could not mark {job_id} complete in partition {partition_date}: {exc}"
            ) from exc
        log.info(
            f"[PARTITION COMPLETE] {job_id}",
            extra={"job_id": job_id, "partition_date": str(partition_date)},
        )


__all__ = ["PartitionAssigner"]
