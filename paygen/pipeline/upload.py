"""
Concurrent uploads with bounded retries.

Every encoded table goes to two destinations: the main bucket and the bucket
of its table family. Uploads of one worker thread run concurrently on an
asyncio loop; each blocking `sink.put` runs in the default executor.

Each upload is an `UploadTask` moving through

    PENDING -> UPLOADING -> SUCCEEDED
               UPLOADING -> PENDING   (transient error, attempts remain)
               UPLOADING -> FAILED    (exhausted or terminal error)

Retries wait `backoff * 2**attempt` seconds (tenacity `wait_exponential`).
All uploads settle before any failure is reported.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from paygen.errors import UploadFailedError
from paygen.pipeline.sinks import ObjectSink
from paygen.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_SECONDS = 1.0


class UploadState(str, Enum):
    PENDING = "pending"
    UPLOADING = "uploading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


_TRANSITIONS: Dict[UploadState, FrozenSet[UploadState]] = {
    UploadState.PENDING: frozenset({UploadState.UPLOADING}),
    UploadState.UPLOADING: frozenset(
        {UploadState.SUCCEEDED, UploadState.PENDING, UploadState.FAILED}
    ),
    UploadState.SUCCEEDED: frozenset(),
    UploadState.FAILED: frozenset(),
}


@dataclass
class UploadTask:
    """One payload bound for one destination."""

    bucket: str
    key: str
    body: bytes = field(repr=False)
    state: UploadState = UploadState.PENDING
    attempts: int = 0
    error: Optional[str] = None
    history: List[UploadState] = field(default_factory=lambda: [UploadState.PENDING])

    @property
    def destination(self) -> str:
        return f"{self.bucket}/{self.key}"

    def transition(self, new_state: UploadState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise ValueError(f"illegal upload transition {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)


def _log_retry(task: UploadTask):
    def before_sleep(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        log.warning(
            f"[UPLOAD RETRY] {task.destination}",
            extra={
                "destination": task.destination,
                "attempt": retry_state.attempt_number,
                "sleep_seconds": retry_state.next_action.sleep if retry_state.next_action else None,
                "error": str(exc),
            },
        )

    return before_sleep


async def upload_with_retry(
    sink: ObjectSink,
    task: UploadTask,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
) -> UploadTask:
    """
    Upload one task, retrying transient errors.

    Raises
    ------
    UploadFailedError
        When attempts are exhausted or the sink reports a terminal error.
        The task is left in FAILED with `error` set.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=backoff_seconds),
        retry=retry_if_exception(sink.is_transient),
        before_sleep=_log_retry(task),
        reraise=True,
    )
    try:
        async for attempt in retrying:
            with attempt:
                task.transition(UploadState.UPLOADING)
                task.attempts += 1
                try:
                    await asyncio.to_thread(sink.put, task.bucket, task.key, task.body)
                except Exception as exc:
                    if sink.is_transient(exc) and task.attempts < max_attempts:
                        task.transition(UploadState.PENDING)
                    raise
                task.transition(UploadState.SUCCEEDED)
    except Exception as exc:
        task.transition(UploadState.FAILED)
        task.error = str(exc)
        log.error(
            f"[UPLOAD FAILED] {task.destination}",
            extra={"destination": task.destination, "attempts": task.attempts, "error": task.error},
        )
        raise UploadFailedError(
            f"upload to {task.destination} failed after {task.attempts} attempt(s): {exc}"
        ) from exc
    return task


async def upload_all(
    sink: ObjectSink,
    tasks: Iterable[UploadTask],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
) -> List[UploadTask]:
    """
    Run all uploads concurrently and wait for every one to settle.

    Failures are recorded on the tasks; use `raise_for_failures` afterwards.
    """
    pending = list(tasks)
    await asyncio.gather(
        *(upload_with_retry(sink, task, max_attempts, backoff_seconds) for task in pending),
        return_exceptions=True,
    )
    return pending


def raise_for_failures(tasks: Iterable[UploadTask]) -> None:
    failed = [task for task in tasks if task.state is not UploadState.SUCCEEDED]
    if failed:
        first = failed[0]
        raise UploadFailedError(
            f"{len(failed)} upload(s) failed; first: {first.destination}: {first.error}"
        )


def dual_destination_tasks(
    key: str, body: bytes, main_bucket: str, family_bucket: str
) -> List[UploadTask]:
    return [
        UploadTask(bucket=main_bucket, key=key, body=body),
        UploadTask(bucket=family_bucket, key=key, body=body),
    ]


__all__ = [
    "UploadState",
    "UploadTask",
    "upload_with_retry",
    "upload_all",
    "raise_for_failures",
    "dual_destination_tasks",
]
