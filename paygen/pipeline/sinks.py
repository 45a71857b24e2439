"""
Object sinks: where encoded table payloads are written.

A sink exposes one blocking `put(bucket, key, body)` and classifies the errors
it raises into transient (retry) and terminal. The upload layer never inspects
backend exceptions itself.
"""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from botocore.exceptions import BotoCoreError, ClientError

# S3 error codes that retrying cannot fix.
_TERMINAL_S3_CODES = frozenset(
    {
        "AccessDenied",
        "AllAccessDisabled",
        "InvalidAccessKeyId",
        "InvalidBucketName",
        "NoSuchBucket",
        "SignatureDoesNotMatch",
    }
)

PARQUET_CONTENT_TYPE = "application/vnd.apache.parquet"


@runtime_checkable
class ObjectSink(Protocol):
    name: str

    def put(self, bucket: str, key: str, body: bytes) -> None:
        ...

    def is_transient(self, exc: BaseException) -> bool:
        ...


class S3Sink:
    """
    Parameters
    ----------
    client : botocore client
        A `boto3.client("s3")`; see `paygen.infrastructure.aws.s3_client`.
    """

    name = "s3"

    def __init__(self, client: Any) -> None:
        self.client = client

    def put(self, bucket: str, key: str, body: bytes) -> None:
        self.client.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType=PARQUET_CONTENT_TYPE,
        )

    def is_transient(self, exc: BaseException) -> bool:
        if isinstance(exc, ClientError):
            return exc.response.get("Error", {}).get("Code", "") not in _TERMINAL_S3_CODES
        return isinstance(exc, BotoCoreError)


class LocalSink:
    """Writes `<root>/<bucket>/<key>`; used for local runs and tests."""

    name = "local"

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def path_for(self, bucket: str, key: str) -> Path:
        return self.root / bucket / key

    def put(self, bucket: str, key: str, body: bytes) -> None:
        target = self.path_for(bucket, key)
        target.parent.mkdir(parents=True, exist_ok=True)
        # Readers only ever see complete objects.
        partial = target.with_name(f"{target.name}.{uuid.uuid4().hex}.partial")
        partial.write_bytes(body)
        partial.replace(target)

    def is_transient(self, exc: BaseException) -> bool:
        if isinstance(exc, (PermissionError, IsADirectoryError, NotADirectoryError)):
            return False
        return isinstance(exc, OSError)


__all__ = ["ObjectSink", "S3Sink", "LocalSink", "PARQUET_CONTENT_TYPE"]
