"""Query response post-processing.

S3 Vectors ranks candidates and reports a distance; callers expect a
similarity score where higher means closer.
"""

from typing import Any

from s3vector.vectorstore.mapping import DATA_TYPE
from s3vector.vectorstore.models import QueryResult


def distance_to_score(distance: float) -> float:
    """Convert a reported distance into a similarity score.

    Only exact for cosine distance normalized to [0, 1]. Euclidean distances
    are unbounded and go through the same transform uncorrected.
    """
    return 1 - distance


def postprocess_candidates(
    candidates: list[dict[str, Any]],
    include_vector: bool = False,
    min_score: float | None = None,
) -> list[QueryResult]:
    """Turn QueryVectors candidates into QueryResults.

    Args:
        candidates: The ``vectors`` list of a QueryVectors response.
        include_vector: Attach stored embeddings when the response has them.
        min_score: Drop candidates scoring below this. Candidates without a
            distance are always kept.

    Returns:
        Surviving results in the order the service returned them.
    """
    results = []
    for candidate in candidates:
        distance = candidate.get("distance")
        score = distance_to_score(distance) if distance is not None else 0.0

        if min_score is not None and distance is not None and score < min_score:
            continue

        embedding = None
        if include_vector:
            embedding = (candidate.get("data") or {}).get(DATA_TYPE)

        results.append(
            QueryResult(
                id=candidate["key"],
                score=score,
                metadata=candidate.get("metadata") or {},
                embedding=embedding,
            )
        )
    return results
