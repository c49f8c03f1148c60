"""Batched upsert coordination.

PutVectors rejects oversized request bodies well before its documented
500-vector limit, so bulk writes are split into small chunks and issued one
after another.
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from s3vector.logging_config import get_logger
from s3vector.vectorstore.mapping import record_to_remote
from s3vector.vectorstore.models import VectorMetadata, VectorRecord

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 10

PutBatch = Callable[[list[dict[str, Any]]], Awaitable[Any]]


@dataclass
class BatchChunk:
    """A contiguous slice of an upsert request.

    Attributes:
        offset: Position of the first record in the overall input.
        records: PutVectors entries for this slice.
    """

    offset: int
    records: list[dict[str, Any]]

    @property
    def end(self) -> int:
        """Position one past the last record."""
        return self.offset + len(self.records)


class BatchWriteError(Exception):
    """A chunk write failed; carries the chunk and the original cause."""

    def __init__(self, chunk: BatchChunk, cause: Exception) -> None:
        self.chunk = chunk
        self.cause = cause
        super().__init__(str(cause))


def generate_id(position: int) -> str:
    """Generate the default id for the record at ``position`` in the input."""
    return f"vector_{position}"


def build_records(
    embeddings: Sequence[Sequence[float]],
    metadata: Sequence[VectorMetadata | None] | None = None,
    ids: Sequence[str | None] | None = None,
) -> list[VectorRecord]:
    """Pair embeddings with their ids and metadata.

    Missing or empty ids fall back to ``vector_{i}`` where ``i`` is the
    position in the whole input, so ids never depend on chunking.
    """
    records = []
    for position, embedding in enumerate(embeddings):
        record_id = ids[position] if ids is not None and position < len(ids) else None
        record_metadata = (
            metadata[position]
            if metadata is not None and position < len(metadata)
            else None
        )
        records.append(
            VectorRecord(
                id=record_id or generate_id(position),
                embedding=list(embedding),
                metadata=record_metadata or {},
            )
        )
    return records


def chunk_records(
    records: Sequence[VectorRecord],
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> list[BatchChunk]:
    """Split records into ordered chunks of at most ``batch_size``."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    return [
        BatchChunk(
            offset=start,
            records=[
                record_to_remote(record)
                for record in records[start : start + batch_size]
            ],
        )
        for start in range(0, len(records), batch_size)
    ]


class BatchUpsertCoordinator:
    """Writes records chunk by chunk through a PutVectors callable.

    Chunks are awaited strictly in sequence. The first failing chunk
    propagates its exception; chunks written before it stay committed.
    """

    def __init__(
        self,
        put_batch: PutBatch,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        """Initialize the coordinator.

        Args:
            put_batch: Coroutine function issuing one PutVectors call.
            batch_size: Maximum records per call.
        """
        self._put_batch = put_batch
        self._batch_size = batch_size

    async def run(
        self,
        index_name: str,
        records: Sequence[VectorRecord],
        on_chunk_done: Callable[[BatchChunk], None] | None = None,
    ) -> list[str]:
        """Write all records and return their ids in input order.

        Args:
            index_name: Target index, for logging.
            records: Records to write.
            on_chunk_done: Called after each committed chunk.

        Returns:
            Ids of all submitted records.

        Raises:
            BatchWriteError: Wrapping the first failing chunk's exception.
        """
        total = len(records)
        for chunk in chunk_records(records, self._batch_size):
            logger.info(
                f"Upserting vectors {chunk.offset + 1} to {chunk.end} "
                f"into index {index_name}",
                extra={"index": index_name, "total": total},
            )
            try:
                await self._put_batch(chunk.records)
            except Exception as e:
                raise BatchWriteError(chunk, e) from e
            if on_chunk_done is not None:
                on_chunk_done(chunk)

        return [record.id for record in records]

