"""
Domain package for the payment data generator.

Exports table descriptors and the result contracts shared by the pipeline,
orchestrator and reporter. Keep this package focused on data definitions and
validation concerns.
"""

from paygen.domain.models import Column, JobReport, TableSchema, ThreadResult

__all__ = [
    "Column",
    "JobReport",
    "TableSchema",
    "ThreadResult",
]
