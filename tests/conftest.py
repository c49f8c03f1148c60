"""Pytest configuration and shared fixtures."""

from unittest.mock import AsyncMock

import pytest

from s3vector.config import S3VectorSettings
from s3vector.vectorstore.service import S3VectorStore
from tests.fakes import BUCKET, FakeS3VectorsClient


@pytest.fixture
def s3_settings() -> S3VectorSettings:
    """Settings pointing at a test bucket."""
    return S3VectorSettings(region="us-west-2", vector_bucket_name=BUCKET)


@pytest.fixture
def mock_client() -> AsyncMock:
    """Mock s3vectors client with empty default responses."""
    client = AsyncMock()
    client.create_index = AsyncMock(return_value={})
    client.get_index = AsyncMock(
        return_value={"index": {"dimension": 3, "distanceMetric": "cosine"}}
    )
    client.delete_index = AsyncMock(return_value={})
    client.list_indexes = AsyncMock(return_value={"indexes": []})
    client.put_vectors = AsyncMock(return_value={})
    client.query_vectors = AsyncMock(return_value={"vectors": []})
    client.delete_vectors = AsyncMock(return_value={})
    client.close = AsyncMock()
    return client


@pytest.fixture
def store(s3_settings: S3VectorSettings, mock_client: AsyncMock) -> S3VectorStore:
    """Store backed by the mock client."""
    return S3VectorStore(settings=s3_settings, client=mock_client)


@pytest.fixture
def fake_client() -> FakeS3VectorsClient:
    """In-memory s3vectors client."""
    return FakeS3VectorsClient()


@pytest.fixture
def fake_store(
    s3_settings: S3VectorSettings,
    fake_client: FakeS3VectorsClient,
) -> S3VectorStore:
    """Store backed by the in-memory client."""
    return S3VectorStore(settings=s3_settings, client=fake_client)
