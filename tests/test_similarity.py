"""
Unit tests for cosine similarity scoring.
"""

import math

import pytest

from rag.errors import DegenerateVectorError, DimensionMismatchError
from rag.similarity import cosine_similarity


class TestCosineSimilarity:

    @pytest.mark.parametrize(
        "vec",
        [[1.0, 2.0, 3.0, 4.0], [3.0, 4.0], [-0.2, 0.5, 0.1], [1e-6, 2e-6]],
    )
    def test_self_similarity_is_one(self, vec):
        assert cosine_similarity(vec, vec) == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "a, b",
        [
            ([1.0, 2.0, 3.0], [3.0, -1.0, 0.5]),
            ([0.1, 0.9], [0.8, 0.2]),
            ([-1.0, 0.0, 2.0], [4.0, 4.0, 4.0]),
        ],
    )
    def test_symmetry(self, a, b):
        assert cosine_similarity(a, b) == cosine_similarity(b, a)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1.0, 0.0, 0.0], [0.0, 1.0, 0.0]) == pytest.approx(0.0)

    def test_opposite_vectors(self):
        assert cosine_similarity([1.0, 0.0], [-2.0, 0.0]) == pytest.approx(-1.0)

    def test_magnitude_does_not_matter(self):
        assert cosine_similarity([1.0, 0.0], [2.0, 0.0]) == 1.0

    def test_forty_five_degrees(self):
        assert cosine_similarity([1.0, 0.0], [1.0, 1.0]) == pytest.approx(math.sqrt(0.5))

    def test_result_stays_in_range(self):
        vec = [0.1] * 1536
        score = cosine_similarity(vec, vec)

        assert -1.0 <= score <= 1.0


class TestDegenerateVectors:

    def test_zero_vector_scores_zero(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [0.0, 0.0, 0.0]) == 0.0
        assert cosine_similarity([0.0, 0.0], [0.0, 0.0]) == 0.0

    def test_zero_vector_raises_in_strict_mode(self):
        with pytest.raises(DegenerateVectorError):
            cosine_similarity([0.0, 0.0], [1.0, 0.0], strict=True)

    def test_nan_component_yields_nan(self):
        assert math.isnan(cosine_similarity([float("nan"), 1.0], [1.0, 1.0]))


class TestDimensionErrors:

    def test_mismatched_lengths(self):
        with pytest.raises(DimensionMismatchError, match="dimensions must match"):
            cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0])

    def test_empty_vectors(self):
        with pytest.raises(DimensionMismatchError, match="cannot be empty"):
            cosine_similarity([], [1.0])
        with pytest.raises(DimensionMismatchError, match="cannot be empty"):
            cosine_similarity([1.0], [])
