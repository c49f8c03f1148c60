"""Tests for query post-processing."""

import pytest

from s3vector.vectorstore.postprocess import distance_to_score, postprocess_candidates


class TestDistanceToScore:
    """Tests for distance to score conversion."""

    @pytest.mark.parametrize("distance", [0.0, 0.125, 0.3, 0.5, 0.999, 1.0])
    def test_score_is_one_minus_distance(self, distance: float) -> None:
        """score == 1 - distance exactly."""
        assert distance_to_score(distance) == 1 - distance

    def test_exact_match_scores_one(self) -> None:
        """Zero distance gives a perfect score."""
        assert distance_to_score(0) == 1


class TestPostprocessCandidates:
    """Tests for converting QueryVectors candidates."""

    def test_basic_conversion(self) -> None:
        """Candidates become results with metadata defaulted."""
        results = postprocess_candidates(
            [
                {"key": "a", "distance": 0.0, "metadata": {"lang": "en"}},
                {"key": "b", "distance": 0.25},
            ]
        )

        assert [(r.id, r.score) for r in results] == [("a", 1.0), ("b", 0.75)]
        assert results[0].metadata == {"lang": "en"}
        assert results[1].metadata == {}

    def test_min_score_filters(self) -> None:
        """No result scores below min_score."""
        candidates = [
            {"key": str(i), "distance": d}
            for i, d in enumerate([0.05, 0.2, 0.61, 0.5, 0.9])
        ]

        results = postprocess_candidates(candidates, min_score=0.5)

        assert [r.id for r in results] == ["0", "1", "3"]
        assert all(r.score >= 0.5 for r in results)

    def test_min_score_is_inclusive(self) -> None:
        """A score equal to min_score is kept."""
        results = postprocess_candidates(
            [{"key": "a", "distance": 0.25}], min_score=0.75
        )
        assert [r.id for r in results] == ["a"]

    def test_missing_distance_never_filtered(self) -> None:
        """Candidates without a distance survive any threshold."""
        results = postprocess_candidates([{"key": "a"}], min_score=0.99)

        assert len(results) == 1
        assert results[0].score == 0.0

    def test_order_preserved(self) -> None:
        """Results keep the service's order."""
        results = postprocess_candidates(
            [
                {"key": "far", "distance": 0.8},
                {"key": "near", "distance": 0.1},
            ]
        )
        assert [r.id for r in results] == ["far", "near"]

    def test_embedding_only_when_requested(self) -> None:
        """Vector data is attached only with include_vector."""
        candidate = {"key": "a", "distance": 0.1, "data": {"float32": [0.1, 0.2]}}

        without = postprocess_candidates([candidate])
        with_vector = postprocess_candidates([candidate], include_vector=True)

        assert without[0].embedding is None
        assert with_vector[0].embedding == [0.1, 0.2]

    def test_embedding_absent_from_response(self) -> None:
        """include_vector without returned data leaves embedding unset."""
        results = postprocess_candidates(
            [{"key": "a", "distance": 0.1}], include_vector=True
        )
        assert results[0].embedding is None
