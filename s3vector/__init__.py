"""Amazon S3 Vectors adapter exposing a fixed vector store interface."""

from s3vector.exceptions import ErrorCode, VectorStoreError
from s3vector.vectorstore import (
    DistanceMetric,
    IndexStats,
    QueryResult,
    S3VectorStore,
    VectorStore,
    VectorUpdate,
)

__version__ = "0.1.0"

__all__ = [
    "DistanceMetric",
    "ErrorCode",
    "IndexStats",
    "QueryResult",
    "S3VectorStore",
    "VectorStore",
    "VectorStoreError",
    "VectorUpdate",
    "__version__",
]
