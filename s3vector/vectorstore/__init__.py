"""Vector store module."""

from s3vector.vectorstore.models import (
    DistanceMetric,
    IndexStats,
    QueryResult,
    VectorMetadata,
    VectorRecord,
    VectorUpdate,
)
from s3vector.vectorstore.service import S3VectorStore, VectorStore

__all__ = [
    "DistanceMetric",
    "IndexStats",
    "QueryResult",
    "S3VectorStore",
    "VectorMetadata",
    "VectorRecord",
    "VectorStore",
    "VectorUpdate",
]
