"""Observability module for metrics and monitoring."""

from s3vector.observability.metrics import (
    get_metrics,
    timed_operation,
    track_query_results,
    track_upsert_batch,
    track_vectorstore_operation,
)

__all__ = [
    "get_metrics",
    "timed_operation",
    "track_query_results",
    "track_upsert_batch",
    "track_vectorstore_operation",
]
