"""
DynamoDB partition store.

Table keyed by `partition_date` (string, YYYY-MM-DD). Each item holds a
numeric `job_counter` and a map attribute `active_jobs`. All writes are
single `update_item` expressions, so each primitive is atomic server-side.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from botocore.exceptions import ClientError

from paygen.partitioning.abstract import (
    AbstractPartitionStore,
    ActiveJobsMissingError,
    partition_key,
)
from paygen.utils.logging import get_logger

log = get_logger(__name__)

_VALIDATION_ERROR = "ValidationException"


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


class DynamoDBPartitionStore(AbstractPartitionStore):
    """
    Parameters
    ----------
    client : botocore client
        A low-level `boto3.client("dynamodb")`.
    table_name : str
        Partition counter table.
    """

    name = "dynamodb"

    def __init__(self, client: Any, table_name: str) -> None:
        self.client = client
        self.table_name = table_name

    def _key(self, partition_date: date) -> Dict[str, Dict[str, str]]:
        return {"partition_date": {"S": partition_key(partition_date)}}

    def get_active_order(self, partition_date: date, job_id: str) -> Optional[int]:
        response = self.client.get_item(
            TableName=self.table_name,
            Key=self._key(partition_date),
            ConsistentRead=True,
        )
        item = response.get("Item")
        if not item:
            return None
        entry = item.get("active_jobs", {}).get("M", {}).get(job_id)
        if entry is None or "N" not in entry:
            return None
        return int(entry["N"])

    def increment_counter(self, partition_date: date) -> int:
        response = self.client.update_item(
            TableName=self.table_name,
            Key=self._key(partition_date),
            UpdateExpression="ADD job_counter :inc",
            ExpressionAttributeValues={":inc": {"N": "1"}},
            ReturnValues="UPDATED_NEW",
        )
        try:
            return int(response["Attributes"]["job_counter"]["N"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"update_item returned no job_counter: {response!r}") from exc

    def set_active_order(self, partition_date: date, job_id: str, order: int) -> None:
        try:
            self.client.update_item(
                TableName=self.table_name,
                Key=self._key(partition_date),
                UpdateExpression="SET active_jobs.#job_id = :order",
                ExpressionAttributeNames={"#job_id": job_id},
                ExpressionAttributeValues={":order": {"N": str(order)}},
            )
        except ClientError as exc:
            # The map path is invalid until active_jobs exists.
            if _error_code(exc) == _VALIDATION_ERROR:
                raise ActiveJobsMissingError(partition_key(partition_date)) from exc
            raise

    def create_active_container(self, partition_date: date) -> None:
        self.client.update_item(
            TableName=self.table_name,
            Key=self._key(partition_date),
            UpdateExpression="SET active_jobs = if_not_exists(active_jobs, :empty)",
            ExpressionAttributeValues={":empty": {"M": {}}},
        )

    def remove_active(self, partition_date: date, job_id: str) -> None:
        try:
            self.client.update_item(
                TableName=self.table_name,
                Key=self._key(partition_date),
                UpdateExpression="REMOVE active_jobs.#job_id",
                ExpressionAttributeNames={"#job_id": job_id},
            )
        except ClientError as exc:
            if _error_code(exc) != _VALIDATION_ERROR:
                raise
            log.debug(
                "[PARTITION REMOVE SKIPPED] no active_jobs container",
                extra={"partition_date": partition_key(partition_date), "job_id": job_id},
            )


__all__ = ["DynamoDBPartitionStore"]
