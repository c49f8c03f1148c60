"""Vector store interface and Amazon S3 Vectors implementation."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Sequence
from contextlib import AsyncExitStack
from typing import Any

from aiobotocore.session import get_session

from s3vector.config import S3VectorSettings, get_settings
from s3vector.exceptions import (
    ConfigurationError,
    ErrorCode,
    ValidationError,
    VectorStoreError,
)
from s3vector.logging_config import get_logger
from s3vector.observability.metrics import (
    timed_operation,
    track_query_results,
    track_upsert_batch,
)
from s3vector.vectorstore import mapping
from s3vector.vectorstore.batching import (
    BatchUpsertCoordinator,
    BatchWriteError,
    build_records,
)
from s3vector.vectorstore.models import (
    DistanceMetric,
    IndexStats,
    QueryResult,
    VectorMetadata,
    VectorUpdate,
)
from s3vector.vectorstore.postprocess import postprocess_candidates

logger = get_logger(__name__)


class VectorStore(ABC):
    """Abstract base class for vector stores.

    Defines the interface for managing indexes and storing and querying
    vectors.
    """

    @abstractmethod
    async def create_index(
        self,
        index_name: str,
        dimension: int,
        metric: DistanceMetric | str = DistanceMetric.COSINE,
    ) -> None:
        """Create a new index.

        Args:
            index_name: Index name, unique within the bucket.
            dimension: Vector dimension.
            metric: Distance metric.

        Raises:
            VectorStoreError: If creation fails.
        """
        ...

    @abstractmethod
    async def describe_index(self, index_name: str) -> IndexStats:
        """Describe an index.

        Args:
            index_name: Index name.

        Returns:
            Dimension, count and metric of the index.

        Raises:
            VectorStoreError: If the index cannot be described.
        """
        ...

    @abstractmethod
    async def delete_index(self, index_name: str) -> None:
        """Delete an index and all its vectors.

        Args:
            index_name: Index name.

        Raises:
            VectorStoreError: If deletion fails.
        """
        ...

    @abstractmethod
    async def list_indexes(self) -> list[str]:
        """List index names.

        Returns:
            Names of all indexes.

        Raises:
            VectorStoreError: If listing fails.
        """
        ...

    @abstractmethod
    async def upsert(
        self,
        index_name: str,
        embeddings: Sequence[Sequence[float]],
        metadata: Sequence[VectorMetadata | None] | None = None,
        ids: Sequence[str | None] | None = None,
    ) -> list[str]:
        """Insert or replace vectors.

        Args:
            index_name: Index name.
            embeddings: Vectors to write.
            metadata: Metadata per vector.
            ids: Id per vector; generated when missing.

        Returns:
            Ids of the written vectors, in input order.

        Raises:
            VectorStoreError: If a write fails.
        """
        ...

    @abstractmethod
    async def query(
        self,
        index_name: str,
        query_embedding: Sequence[float],
        top_k: int = 10,
        filter: dict[str, Any] | None = None,
        include_vector: bool = False,
        min_score: float | None = None,
    ) -> list[QueryResult]:
        """Search for similar vectors.

        Args:
            index_name: Index name.
            query_embedding: Query vector.
            top_k: Maximum results to return.
            filter: Optional metadata filter.
            include_vector: Return stored vectors with results.
            min_score: Minimum similarity score.

        Returns:
            List of query results.

        Raises:
            VectorStoreError: If the query fails.
        """
        ...

    @abstractmethod
    async def update_vector(
        self,
        index_name: str,
        vector_id: str,
        update: VectorUpdate,
    ) -> None:
        """Replace a stored vector.

        Args:
            index_name: Index name.
            vector_id: Id of the vector to replace.
            update: New embedding and metadata.

        Raises:
            VectorStoreError: If the update fails.
        """
        ...

    @abstractmethod
    async def delete_vector(self, index_name: str, vector_id: str) -> None:
        """Delete a vector by id.

        Args:
            index_name: Index name.
            vector_id: Id of the vector to delete.

        Raises:
            VectorStoreError: If deletion fails.
        """
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Release held connection resources."""
        ...


class S3VectorStore(VectorStore):
    """Amazon S3 Vectors store implementation.

    Batch upserts are not transactional: when a chunk fails, the chunks
    before it remain written.
    """

    def __init__(
        self,
        settings: S3VectorSettings | None = None,
        vector_bucket_name: str | None = None,
        client: Any | None = None,
    ) -> None:
        """Initialize the S3 Vectors store.

        Args:
            settings: S3 Vectors configuration.
            vector_bucket_name: Bucket override (default from settings).
            client: Existing s3vectors client (for testing).
        """
        self._settings = settings or get_settings().s3vectors
        bucket = vector_bucket_name or self._settings.vector_bucket_name
        if not bucket:
            raise ConfigurationError(
                "Vector bucket name is required",
                details={"setting": "S3VECTORS_VECTOR_BUCKET_NAME"},
            )
        self._bucket = bucket
        self._client = client
        self._owns_client = client is None
        self._exit_stack: AsyncExitStack | None = None
        self._client_lock = asyncio.Lock()

    @property
    def vector_bucket_name(self) -> str:
        """Name of the vector bucket this store operates on."""
        return self._bucket

    async def _get_client(self) -> Any:
        """Get or create the s3vectors client.

        Creation is serialized so concurrent first calls share one client.
        """
        if self._client is not None:
            return self._client

        async with self._client_lock:
            if self._client is None:
                self._client = await self._open_client()
                self._owns_client = True
        return self._client

    async def _open_client(self) -> Any:
        if not self._settings.region:
            raise ConfigurationError(
                "AWS region is required",
                details={"setting": "S3VECTORS_REGION"},
            )

        client_kwargs: dict[str, Any] = {
            "region_name": self._settings.region,
            "endpoint_url": self._settings.endpoint_url,
        }
        secret = self._settings.secret_access_key
        if self._settings.access_key_id and secret:
            client_kwargs["aws_access_key_id"] = self._settings.access_key_id
            client_kwargs["aws_secret_access_key"] = secret.get_secret_value()
            if self._settings.session_token:
                client_kwargs["aws_session_token"] = (
                    self._settings.session_token.get_secret_value()
                )

        exit_stack = AsyncExitStack()
        try:
            client = await exit_stack.enter_async_context(
                get_session().create_client("s3vectors", **client_kwargs)
            )
        except Exception as e:
            await exit_stack.aclose()
            logger.error(
                f"Failed to open s3vectors client: {e}",
                extra={"bucket": self._bucket, "region": self._settings.region},
            )
            raise ConfigurationError(
                f"Failed to open s3vectors client: {e}",
                details=e,
            ) from e

        self._exit_stack = exit_stack
        logger.debug(
            f"Opened s3vectors client for bucket {self._bucket}",
            extra={"region": self._settings.region},
        )
        return client

    async def disconnect(self) -> None:
        """Close the s3vectors client if this store created it."""
        if self._owns_client and self._exit_stack is not None:
            await self._exit_stack.aclose()
            self._exit_stack = None
            self._client = None

    def _failure(
        self,
        message: str,
        code: ErrorCode,
        error: Exception,
    ) -> VectorStoreError:
        logger.error(message, extra={"bucket": self._bucket, "code": code.value})
        return VectorStoreError(message, code=code, details=error)

    async def create_index(
        self,
        index_name: str,
        dimension: int,
        metric: DistanceMetric | str = DistanceMetric.COSINE,
    ) -> None:
        """Create a new S3 Vectors index.

        Not idempotent: creating an existing index fails remotely.
        """
        client = await self._get_client()

        with timed_operation("create_index"):
            try:
                await client.create_index(
                    **mapping.build_create_index_request(
                        self._bucket, index_name, dimension, metric
                    )
                )
            except Exception as e:
                raise self._failure(
                    f"Failed to create index {index_name}: {e}",
                    ErrorCode.INDEX_CREATION_FAILED,
                    e,
                ) from e

        logger.info(
            f"Created index: {index_name}",
            extra={"dimension": dimension, "metric": DistanceMetric(metric).value},
        )

    async def validate_existing_index(
        self,
        index_name: str,
        dimension: int,
        metric: DistanceMetric | str = DistanceMetric.COSINE,
    ) -> None:
        """Check that an existing index has the expected dimension and metric.

        Raises:
            ValidationError: With code ``index_mismatch`` on any difference.
            VectorStoreError: If the index cannot be described.
        """
        stats = await self.describe_index(index_name)
        expected_metric = DistanceMetric(metric)
        if stats.dimension != dimension or stats.metric != expected_metric:
            raise ValidationError(
                f"Index {index_name} already exists with different "
                f"dimension or metric",
                code=ErrorCode.INDEX_MISMATCH,
                details={
                    "index": index_name,
                    "expected": {
                        "dimension": dimension,
                        "metric": expected_metric.value,
                    },
                    "actual": {
                        "dimension": stats.dimension,
                        "metric": stats.metric.value,
                    },
                },
            )

    async def describe_index(self, index_name: str) -> IndexStats:
        """Describe an S3 Vectors index. ``count`` is always 0."""
        client = await self._get_client()

        with timed_operation("describe_index"):
            try:
                response = await client.get_index(
                    **mapping.build_index_request(self._bucket, index_name)
                )
                return mapping.index_stats_from_response(response)
            except Exception as e:
                raise self._failure(
                    f"Failed to describe index {index_name}: {e}",
                    ErrorCode.DESCRIBE_FAILED,
                    e,
                ) from e

    async def delete_index(self, index_name: str) -> None:
        """Delete an S3 Vectors index."""
        client = await self._get_client()

        with timed_operation("delete_index"):
            try:
                await client.delete_index(
                    **mapping.build_index_request(self._bucket, index_name)
                )
            except Exception as e:
                raise self._failure(
                    f"Failed to delete index {index_name}: {e}",
                    ErrorCode.DELETE_INDEX_FAILED,
                    e,
                ) from e

        logger.info(f"Deleted index: {index_name}")

    async def list_indexes(self) -> list[str]:
        """List index names in the bucket, following pagination."""
        client = await self._get_client()

        names: list[str] = []
        next_token = None
        with timed_operation("list_indexes"):
            try:
                while True:
                    response = await client.list_indexes(
                        **mapping.build_list_indexes_request(self._bucket, next_token)
                    )
                    names.extend(mapping.index_names_from_response(response))
                    next_token = response.get("nextToken")
                    if not next_token:
                        break
            except Exception as e:
                raise self._failure(
                    f"Failed to list indexes: {e}",
                    ErrorCode.LIST_INDEXES_FAILED,
                    e,
                ) from e

        return names

    async def _check_dimensions(
        self,
        index_name: str,
        embeddings: Sequence[Sequence[float]],
    ) -> None:
        """Fail fast on embeddings that do not match the index dimension."""
        if not self._settings.validate_dimensions:
            return

        stats = await self.describe_index(index_name)
        for position, embedding in enumerate(embeddings):
            if len(embedding) != stats.dimension:
                raise ValidationError(
                    f"Vector at position {position} has dimension "
                    f"{len(embedding)}, index {index_name} expects "
                    f"{stats.dimension}",
                    code=ErrorCode.DIMENSION_MISMATCH,
                    details={
                        "index": index_name,
                        "position": position,
                        "expected": stats.dimension,
                        "actual": len(embedding),
                    },
                )

    async def upsert(
        self,
        index_name: str,
        embeddings: Sequence[Sequence[float]],
        metadata: Sequence[VectorMetadata | None] | None = None,
        ids: Sequence[str | None] | None = None,
    ) -> list[str]:
        """Write vectors in sequential chunks of ``batch_size``.

        A failing chunk aborts the call; earlier chunks are not rolled back.
        """
        if not embeddings:
            return []

        await self._check_dimensions(index_name, embeddings)
        client = await self._get_client()

        async def put_batch(records: list[dict[str, Any]]) -> None:
            await client.put_vectors(
                **mapping.build_put_vectors_request(self._bucket, index_name, records)
            )

        coordinator = BatchUpsertCoordinator(put_batch, self._settings.batch_size)
        records = build_records(embeddings, metadata, ids)

        with timed_operation("upsert"):
            try:
                written = await coordinator.run(
                    index_name,
                    records,
                    on_chunk_done=lambda _chunk: track_upsert_batch(success=True),
                )
            except BatchWriteError as e:
                track_upsert_batch(success=False)
                raise self._failure(
                    f"Failed to upsert vectors {e.chunk.offset + 1} to "
                    f"{e.chunk.end} to index {index_name}: {e.cause}",
                    ErrorCode.UPSERT_FAILED,
                    e.cause,
                ) from e.cause

        logger.debug(
            f"Upserted {len(written)} vectors",
            extra={"index": index_name},
        )
        return written

    async def query(
        self,
        index_name: str,
        query_embedding: Sequence[float],
        top_k: int = 10,
        filter: dict[str, Any] | None = None,
        include_vector: bool = False,
        min_score: float | None = None,
    ) -> list[QueryResult]:
        """Query nearest neighbors and convert distances to scores."""
        client = await self._get_client()

        with timed_operation("query"):
            try:
                response = await client.query_vectors(
                    **mapping.build_query_request(
                        self._bucket,
                        index_name,
                        list(query_embedding),
                        top_k,
                        filter,
                    )
                )
                results = postprocess_candidates(
                    response.get("vectors") or [],
                    include_vector=include_vector,
                    min_score=min_score,
                )
            except Exception as e:
                raise self._failure(
                    f"Failed to query index {index_name}: {e}",
                    ErrorCode.QUERY_FAILED,
                    e,
                ) from e

        track_query_results(len(results))
        return results

    async def update_vector(
        self,
        index_name: str,
        vector_id: str,
        update: VectorUpdate,
    ) -> None:
        """Replace a stored vector.

        PutVectors always writes whole records, so an embedding is required
        even when only the metadata changes.
        """
        if update.embedding is None:
            raise ValidationError(
                "Vector data is required for update operation in S3 Vectors",
                code=ErrorCode.UPDATE_REQUIRES_VECTOR_DATA,
                details={"index": index_name, "id": vector_id},
            )

        await self._check_dimensions(index_name, [update.embedding])
        client = await self._get_client()

        with timed_operation("update_vector"):
            try:
                await client.put_vectors(
                    **mapping.build_update_vector_request(
                        self._bucket,
                        index_name,
                        vector_id,
                        update.embedding,
                        update.metadata,
                    )
                )
            except Exception as e:
                raise self._failure(
                    f"Failed to update vector {vector_id} in index {index_name}: {e}",
                    ErrorCode.UPDATE_VECTOR_FAILED,
                    e,
                ) from e

        logger.debug(f"Updated vector {vector_id}", extra={"index": index_name})

    async def delete_vector(self, index_name: str, vector_id: str) -> None:
        """Delete a single vector by id."""
        client = await self._get_client()

        with timed_operation("delete_vector"):
            try:
                await client.delete_vectors(
                    **mapping.build_delete_vectors_request(
                        self._bucket, index_name, [vector_id]
                    )
                )
            except Exception as e:
                raise self._failure(
                    f"Failed to delete vector {vector_id} from index "
                    f"{index_name}: {e}",
                    ErrorCode.DELETE_VECTOR_FAILED,
                    e,
                ) from e

        logger.debug(f"Deleted vector {vector_id}", extra={"index": index_name})
