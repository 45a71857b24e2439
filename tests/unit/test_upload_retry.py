from __future__ import annotations

import threading

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from paygen.errors import UploadFailedError
from paygen.pipeline.sinks import PARQUET_CONTENT_TYPE, LocalSink, S3Sink
from paygen.pipeline.upload import (
    UploadState,
    UploadTask,
    dual_destination_tasks,
    raise_for_failures,
    upload_all,
    upload_with_retry,
)

BODY = b"PAR1"
KEY = "authorization/2024/06/09/job_1_thread_1.parquet"

P, U, S, F = (UploadState.PENDING, UploadState.UPLOADING, UploadState.SUCCEEDED, UploadState.FAILED)


class FlakySink:
    """Fails the first `failures` puts per destination with `error`."""

    name = "flaky"

    def __init__(self, failures: int = 0, error: Exception = OSError("connection reset")) -> None:
        self.failures = failures
        self.error = error
        self.calls = {}
        self.stored = {}
        self._lock = threading.Lock()

    def put(self, bucket, key, body):
        with self._lock:
            count = self.calls.get((bucket, key), 0) + 1
            self.calls[(bucket, key)] = count
        if count <= self.failures:
            raise self.error
        self.stored[(bucket, key)] = body

    def is_transient(self, exc):
        return isinstance(exc, OSError)


@pytest.mark.asyncio
async def test_transient_errors_are_retried_until_success() -> None:
    sink = FlakySink(failures=2)
    task = UploadTask(bucket="main", key=KEY, body=BODY)

    result = await upload_with_retry(sink, task, max_attempts=3, backoff_seconds=0)

    assert result.state is S
    assert result.attempts == 3
    assert result.history == [P, U, P, U, P, U, S]
    assert sink.stored[("main", KEY)] == BODY


@pytest.mark.asyncio
async def test_exhausted_retries_fail_the_task() -> None:
    sink = FlakySink(failures=5)
    task = UploadTask(bucket="main", key=KEY, body=BODY)

    with pytest.raises(UploadFailedError, match="3 attempt"):
        await upload_with_retry(sink, task, max_attempts=3, backoff_seconds=0)

    assert task.state is F
    assert task.attempts == 3
    assert task.history[-2:] == [U, F]
    assert "connection reset" in task.error


@pytest.mark.asyncio
async def test_terminal_error_is_not_retried() -> None:
    sink = FlakySink(failures=1, error=ValueError("bad payload"))
    task = UploadTask(bucket="main", key=KEY, body=BODY)

    with pytest.raises(UploadFailedError):
        await upload_with_retry(sink, task, max_attempts=3, backoff_seconds=0)

    assert task.attempts == 1
    assert task.history == [P, U, F]


@pytest.mark.asyncio
async def test_upload_all_settles_every_task_before_reporting() -> None:
    tasks = dual_destination_tasks(KEY, BODY, "main", "authorization") + [
        UploadTask(bucket="other", key="x.parquet", body=BODY)
    ]

    class PartlyBroken(FlakySink):
        def put(self, bucket, key, body):
            if bucket == "other":
                raise ValueError("rejected")
            super().put(bucket, key, body)

    broken = PartlyBroken()
    settled = await upload_all(broken, tasks, max_attempts=2, backoff_seconds=0)

    assert [task.state for task in settled] == [S, S, F]
    assert set(broken.stored) == {("main", KEY), ("authorization", KEY)}
    with pytest.raises(UploadFailedError, match="other/x.parquet"):
        raise_for_failures(settled)


def test_raise_for_failures_accepts_all_succeeded() -> None:
    task = UploadTask(bucket="main", key=KEY, body=BODY)
    task.transition(U)
    task.transition(S)
    raise_for_failures([task])


def test_dual_destination_shares_key_and_body() -> None:
    main, family = dual_destination_tasks(KEY, BODY, "payment-data", "clearing")
    assert (main.bucket, family.bucket) == ("payment-data", "clearing")
    assert main.key == family.key == KEY
    assert main.body is family.body


@pytest.mark.parametrize(
    "path",
    [
        [S],
        [F],
        [U, U],
        [U, S, U],
        [U, F, P],
    ],
)
def test_illegal_transitions_are_rejected(path) -> None:
    task = UploadTask(bucket="main", key=KEY, body=BODY)
    with pytest.raises(ValueError, match="illegal upload transition"):
        for state in path:
            task.transition(state)


def test_local_sink_writes_complete_objects(tmp_path) -> None:
    sink = LocalSink(tmp_path)
    sink.put("main", KEY, BODY)
    target = sink.path_for("main", KEY)
    assert target.read_bytes() == BODY
    assert not list(target.parent.glob("*.partial"))


def test_local_sink_error_classification(tmp_path) -> None:
    sink = LocalSink(tmp_path)
    assert sink.is_transient(OSError("disk busy"))
    assert not sink.is_transient(PermissionError("denied"))
    assert not sink.is_transient(ValueError("bad"))


class RecordingS3:
    def __init__(self) -> None:
        self.calls = []

    def put_object(self, **kwargs):
        self.calls.append(kwargs)
        return {}


def test_s3_sink_puts_parquet_objects() -> None:
    client = RecordingS3()
    S3Sink(client).put("payment-data", KEY, BODY)
    assert client.calls == [
        {"Bucket": "payment-data", "Key": KEY, "Body": BODY, "ContentType": PARQUET_CONTENT_TYPE}
    ]


def test_s3_sink_error_classification() -> None:
    sink = S3Sink(RecordingS3())
    throttled = ClientError({"Error": {"Code": "SlowDown"}}, "PutObject")
    denied = ClientError({"Error": {"Code": "AccessDenied"}}, "PutObject")
    missing = ClientError({"Error": {"Code": "NoSuchBucket"}}, "PutObject")
    assert sink.is_transient(throttled)
    assert sink.is_transient(EndpointConnectionError(endpoint_url="https://s3.amazonaws.com"))
    assert not sink.is_transient(denied)
    assert not sink.is_transient(missing)
    assert not sink.is_transient(ValueError("bad"))
