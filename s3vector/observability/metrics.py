"""Prometheus metrics for the S3 Vectors adapter.

Provides metrics instrumentation for:
- Per-operation latency and counts
- Upsert batch outcomes
- Query result sizes
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
)

VECTORSTORE_OPERATION_DURATION = Histogram(
    "vectorstore_operation_duration_seconds",
    "Vector store operation duration",
    ["operation", "status"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
)

VECTORSTORE_OPERATION_TOTAL = Counter(
    "vectorstore_operations_total",
    "Total vector store operations",
    ["operation", "status"],
)

VECTORSTORE_UPSERT_BATCHES = Counter(
    "vectorstore_upsert_batches_total",
    "PutVectors batches issued by upsert",
    ["status"],
)

VECTORSTORE_QUERY_RESULTS = Histogram(
    "vectorstore_query_results_returned",
    "Number of results returned per query after filtering",
    buckets=[0, 1, 2, 3, 5, 10, 20, 50, 100],
)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def track_vectorstore_operation(
    operation: str,
    duration: float,
    success: bool = True,
) -> None:
    """Track a vector store operation.

    Args:
        operation: Operation name (e.g. "query").
        duration: Operation duration in seconds.
        success: Whether the operation succeeded.
    """
    status = "success" if success else "error"

    VECTORSTORE_OPERATION_DURATION.labels(
        operation=operation, status=status
    ).observe(duration)
    VECTORSTORE_OPERATION_TOTAL.labels(operation=operation, status=status).inc()


@contextmanager
def timed_operation(operation: str) -> Iterator[None]:
    """Time the enclosed block and record it as a vector store operation.

    The operation counts as failed if the block raises.
    """
    start_time = time.perf_counter()
    success = False
    try:
        yield
        success = True
    finally:
        track_vectorstore_operation(
            operation, time.perf_counter() - start_time, success=success
        )


def track_upsert_batch(success: bool = True) -> None:
    """Count one PutVectors batch issued by upsert."""
    VECTORSTORE_UPSERT_BATCHES.labels(status="success" if success else "error").inc()


def track_query_results(results_returned: int) -> None:
    """Record how many results a query returned."""
    VECTORSTORE_QUERY_RESULTS.observe(results_returned)
