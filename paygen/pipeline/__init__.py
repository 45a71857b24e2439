"""
Batch pipeline: reference pool, Parquet encoding, sinks and uploads.
"""

from paygen.pipeline.batch import JobPlan, WorkerDeps, object_key, run_worker_thread
from paygen.pipeline.encoding import encode_parquet
from paygen.pipeline.reference_pool import (
    DynamoDBReferenceSource,
    PostgresReferenceSource,
    ReferencePoolSource,
    SyntheticReferenceSource,
)
from paygen.pipeline.sinks import LocalSink, ObjectSink, S3Sink
from paygen.pipeline.upload import UploadState, UploadTask, upload_all, upload_with_retry

__all__ = [
    "JobPlan",
    "WorkerDeps",
    "object_key",
    "run_worker_thread",
    "encode_parquet",
    "DynamoDBReferenceSource",
    "PostgresReferenceSource",
    "ReferencePoolSource",
    "SyntheticReferenceSource",
    "LocalSink",
    "ObjectSink",
    "S3Sink",
    "UploadState",
    "UploadTask",
    "upload_all",
    "upload_with_retry",
]
