"""Vector store data models."""

from enum import Enum

from pydantic import BaseModel, Field

MetadataValue = str | int | float | bool | None
VectorMetadata = dict[str, MetadataValue]


class DistanceMetric(str, Enum):
    """Distance metrics supported by S3 Vectors."""

    COSINE = "cosine"
    EUCLIDEAN = "euclidean"


class VectorRecord(BaseModel):
    """A record to store in a vector index.

    Attributes:
        id: Unique identifier within the index.
        embedding: The embedding vector.
        metadata: Filterable metadata stored with the vector.
    """

    id: str = Field(description="Unique record identifier")
    embedding: list[float] = Field(description="Embedding vector")
    metadata: VectorMetadata = Field(
        default_factory=dict,
        description="Metadata stored with the vector",
    )


class IndexStats(BaseModel):
    """Description of a vector index.

    Attributes:
        dimension: Vector dimension fixed at creation.
        count: Number of vectors. S3 Vectors does not report it, so always 0.
        metric: Distance metric fixed at creation.
    """

    dimension: int = Field(description="Vector dimension")
    count: int = Field(default=0, description="Vector count (not reported)")
    metric: DistanceMetric = Field(
        default=DistanceMetric.COSINE,
        description="Distance metric",
    )


class QueryResult(BaseModel):
    """Result from a vector similarity query.

    Attributes:
        id: Record identifier.
        score: Similarity score (higher is more similar).
        metadata: Stored metadata.
        embedding: Stored vector, only when requested and returned.
    """

    id: str = Field(description="Record identifier")
    score: float = Field(description="Similarity score")
    metadata: VectorMetadata = Field(
        default_factory=dict,
        description="Record metadata",
    )
    embedding: list[float] | None = Field(
        default=None,
        description="Stored vector (only if requested)",
    )


class VectorUpdate(BaseModel):
    """Replacement data for a single stored vector."""

    embedding: list[float] | None = Field(
        default=None,
        description="New embedding (required by S3 Vectors)",
    )
    metadata: VectorMetadata | None = Field(
        default=None,
        description="New metadata",
    )
