"""Translation between adapter shapes and S3 Vectors API shapes.

All functions are pure. Request builders never emit ``None`` values because
botocore parameter validation rejects them.
"""

from typing import Any

from s3vector.vectorstore.models import (
    DistanceMetric,
    IndexStats,
    VectorMetadata,
    VectorRecord,
)

# S3 Vectors stores every index as float32
DATA_TYPE = "float32"

# Used when a query asks for no results
DEFAULT_TOP_K = 10


def _compact(params: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


def build_create_index_request(
    bucket: str,
    index_name: str,
    dimension: int,
    metric: DistanceMetric | str = DistanceMetric.COSINE,
) -> dict[str, Any]:
    """Build CreateIndex parameters."""
    return {
        "vectorBucketName": bucket,
        "indexName": index_name,
        "dataType": DATA_TYPE,
        "dimension": dimension,
        "distanceMetric": DistanceMetric(metric).value,
    }


def build_index_request(bucket: str, index_name: str) -> dict[str, Any]:
    """Build parameters addressing a single index (GetIndex, DeleteIndex)."""
    return {"vectorBucketName": bucket, "indexName": index_name}


def build_list_indexes_request(
    bucket: str,
    next_token: str | None = None,
) -> dict[str, Any]:
    """Build ListIndexes parameters for one page."""
    return _compact({"vectorBucketName": bucket, "nextToken": next_token})


def record_to_remote(record: VectorRecord) -> dict[str, Any]:
    """Convert a VectorRecord to a PutVectors vector entry."""
    return {
        "key": record.id,
        "data": {DATA_TYPE: list(record.embedding)},
        "metadata": dict(record.metadata),
    }


def build_put_vectors_request(
    bucket: str,
    index_name: str,
    records: list[dict[str, Any]],
) -> dict[str, Any]:
    """Build PutVectors parameters from already converted vector entries."""
    return {
        "vectorBucketName": bucket,
        "indexName": index_name,
        "vectors": records,
    }


def build_update_vector_request(
    bucket: str,
    index_name: str,
    vector_id: str,
    embedding: list[float],
    metadata: VectorMetadata | None = None,
) -> dict[str, Any]:
    """Build a single-vector PutVectors request that replaces one record."""
    entry = _compact(
        {
            "key": vector_id,
            "data": {DATA_TYPE: list(embedding)},
            "metadata": dict(metadata) if metadata is not None else None,
        }
    )
    return build_put_vectors_request(bucket, index_name, [entry])


def build_query_request(
    bucket: str,
    index_name: str,
    query_embedding: list[float],
    top_k: int,
    filter: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build QueryVectors parameters.

    Distance and metadata are always requested; score computation and
    metadata attachment depend on them. A ``top_k`` of zero falls back to
    ``DEFAULT_TOP_K``.
    """
    return _compact(
        {
            "vectorBucketName": bucket,
            "indexName": index_name,
            "queryVector": {DATA_TYPE: list(query_embedding)},
            "topK": top_k or DEFAULT_TOP_K,
            "filter": filter,
            "returnDistance": True,
            "returnMetadata": True,
        }
    )


def build_delete_vectors_request(
    bucket: str,
    index_name: str,
    keys: list[str],
) -> dict[str, Any]:
    """Build DeleteVectors parameters."""
    return {"vectorBucketName": bucket, "indexName": index_name, "keys": keys}


def index_stats_from_response(response: dict[str, Any]) -> IndexStats:
    """Convert a GetIndex response to IndexStats.

    S3 Vectors does not report a vector count, so ``count`` is always 0.
    """
    index = response.get("index") or {}
    return IndexStats(
        dimension=index.get("dimension") or 0,
        count=0,
        metric=DistanceMetric(index.get("distanceMetric") or DistanceMetric.COSINE),
    )


def index_names_from_response(response: dict[str, Any]) -> list[str]:
    """Extract index names from one ListIndexes page."""
    return [
        summary["indexName"]
        for summary in response.get("indexes") or []
        if summary.get("indexName")
    ]
