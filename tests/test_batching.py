"""Tests for batched upsert coordination."""

from unittest.mock import AsyncMock

import pytest

from s3vector.vectorstore.batching import (
    BatchUpsertCoordinator,
    BatchWriteError,
    build_records,
    chunk_records,
    generate_id,
)


class TestBuildRecords:
    """Tests for pairing embeddings with ids and metadata."""

    def test_generates_positional_ids(self) -> None:
        """Ids default to vector_{position}."""
        records = build_records([[0.1], [0.2], [0.3]])
        assert [r.id for r in records] == ["vector_0", "vector_1", "vector_2"]

    def test_supplied_ids_kept(self) -> None:
        """Supplied ids are used as given."""
        records = build_records([[0.1], [0.2]], ids=["a", "b"])
        assert [r.id for r in records] == ["a", "b"]

    def test_missing_ids_fall_back_per_position(self) -> None:
        """Short or empty id entries fall back to the generated id."""
        records = build_records([[0.1], [0.2], [0.3]], ids=["a", ""])
        assert [r.id for r in records] == ["a", "vector_1", "vector_2"]

    def test_metadata_defaults_to_empty(self) -> None:
        """Missing metadata becomes an empty mapping."""
        records = build_records([[0.1], [0.2]], metadata=[{"k": "v"}])
        assert records[0].metadata == {"k": "v"}
        assert records[1].metadata == {}


class TestChunkRecords:
    """Tests for splitting records into chunks."""

    def test_chunk_sizes(self) -> None:
        """N records give ceil(N/size) chunks in order."""
        records = build_records([[float(i)] for i in range(23)])

        chunks = chunk_records(records, batch_size=10)

        assert [len(c.records) for c in chunks] == [10, 10, 3]
        assert [c.offset for c in chunks] == [0, 10, 20]
        assert chunks[-1].end == 23
        keys = [entry["key"] for c in chunks for entry in c.records]
        assert keys == [f"vector_{i}" for i in range(23)]

    @pytest.mark.parametrize("batch_size", [1, 3, 7, 10, 50])
    def test_generated_ids_independent_of_chunk_size(self, batch_size: int) -> None:
        """Re-chunking never changes generated ids."""
        records = build_records([[float(i)] for i in range(17)])

        chunks = chunk_records(records, batch_size=batch_size)

        keys = [entry["key"] for c in chunks for entry in c.records]
        assert keys == [generate_id(i) for i in range(17)]
        assert all(len(c.records) <= batch_size for c in chunks)

    def test_remote_entry_shape(self) -> None:
        """Chunks hold PutVectors entries."""
        records = build_records([[0.5, 0.25]], metadata=[{"lang": "en"}], ids=["x"])

        (chunk,) = chunk_records(records)

        assert chunk.records == [
            {"key": "x", "data": {"float32": [0.5, 0.25]}, "metadata": {"lang": "en"}}
        ]

    def test_rejects_non_positive_batch_size(self) -> None:
        """Batch size must be at least 1."""
        with pytest.raises(ValueError):
            chunk_records(build_records([[0.1]]), batch_size=0)


class TestBatchUpsertCoordinator:
    """Tests for sequential chunk writes."""

    @pytest.mark.asyncio
    async def test_writes_chunks_in_order(self) -> None:
        """Each chunk is one call, awaited in input order."""
        put_batch = AsyncMock()
        coordinator = BatchUpsertCoordinator(put_batch, batch_size=10)
        records = build_records([[float(i)] for i in range(25)])

        ids = await coordinator.run("docs", records)

        assert ids == [f"vector_{i}" for i in range(25)]
        sizes = [len(c.args[0]) for c in put_batch.await_args_list]
        assert sizes == [10, 10, 5]

    @pytest.mark.asyncio
    async def test_chunks_never_overlap_in_flight(self) -> None:
        """A chunk starts only after the previous one finished."""
        in_flight = 0
        peak = 0

        async def put_batch(records: list[dict]) -> None:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            in_flight -= 1

        coordinator = BatchUpsertCoordinator(put_batch, batch_size=2)
        await coordinator.run("docs", build_records([[0.1]] * 7))

        assert peak == 1

    @pytest.mark.asyncio
    async def test_first_failure_aborts(self) -> None:
        """The failing chunk is reported and later chunks are skipped."""
        cause = RuntimeError("payload too large")
        put_batch = AsyncMock(side_effect=[None, cause, None])
        done = []
        coordinator = BatchUpsertCoordinator(put_batch, batch_size=10)

        with pytest.raises(BatchWriteError) as exc_info:
            await coordinator.run(
                "docs",
                build_records([[0.1]] * 25),
                on_chunk_done=done.append,
            )

        assert exc_info.value.cause is cause
        assert exc_info.value.chunk.offset == 10
        assert put_batch.await_count == 2
        assert [c.offset for c in done] == [0]
