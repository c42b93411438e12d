"""
Tests for core/vector.py

Geometry helpers every engine leans on.
"""

import numpy as np
import pytest

from bio_swarm.core.vector import (
    as_vector, distance, normalize, clamp_magnitude, pairwise_distances,
)


class TestAsVector:
    """Tests for as_vector."""

    def test_converts_lists(self):
        """Lists become float64 arrays."""
        vec = as_vector([1, 2, 3])
        assert isinstance(vec, np.ndarray)
        assert vec.dtype == np.float64

    def test_copies_input(self):
        """Mutating the result does not touch the source."""
        source = np.array([1.0, 2.0])
        vec = as_vector(source)
        vec[0] = 99.0
        assert source[0] == 1.0

    def test_dimension_mismatch_raises(self):
        """Wrong size is rejected."""
        with pytest.raises(ValueError):
            as_vector([1.0, 2.0], dimensions=3)

    def test_non_finite_raises(self):
        """NaN and inf are rejected."""
        with pytest.raises(ValueError):
            as_vector([np.nan, 0.0])
        with pytest.raises(ValueError):
            as_vector([np.inf, 0.0])


class TestNormalize:
    """Tests for normalize."""

    def test_unit_length(self):
        """Result has length 1."""
        vec = normalize(np.array([3.0, 4.0]))
        assert np.isclose(np.linalg.norm(vec), 1.0)
        assert np.allclose(vec, [0.6, 0.8])

    def test_zero_vector(self):
        """Zero-length input gives a zero vector, not NaN."""
        vec = normalize(np.zeros(3))
        assert np.all(vec == 0.0)
        assert not np.any(np.isnan(vec))


class TestClampMagnitude:
    """Tests for clamp_magnitude."""

    def test_long_vector_scaled(self):
        """Vectors over the cap are scaled to the cap."""
        vec = clamp_magnitude(np.array([30.0, 40.0]), 5.0)
        assert np.isclose(np.linalg.norm(vec), 5.0)

    def test_direction_preserved(self):
        """Clamping keeps the direction."""
        original = np.array([30.0, 40.0, 0.0])
        vec = clamp_magnitude(original, 5.0)
        assert np.allclose(normalize(vec), normalize(original))

    def test_short_vector_unchanged(self):
        """Vectors under the cap pass through."""
        vec = clamp_magnitude(np.array([1.0, 1.0]), 5.0)
        assert np.allclose(vec, [1.0, 1.0])


class TestDistances:
    """Tests for distance and pairwise_distances."""

    def test_distance(self):
        """3-4-5 triangle."""
        assert distance(np.array([0.0, 0.0]), np.array([3.0, 4.0])) == pytest.approx(5.0)

    def test_pairwise_symmetric(self):
        """Distance matrix is symmetric with a zero diagonal."""
        rng = np.random.default_rng(42)
        pts = rng.uniform(-10, 10, size=(6, 3))
        dist = pairwise_distances(pts)
        assert dist.shape == (6, 6)
        assert np.allclose(dist, dist.T)
        assert np.allclose(np.diag(dist), 0.0)
        assert dist[1, 4] == pytest.approx(np.linalg.norm(pts[1] - pts[4]))

    def test_pairwise_empty(self):
        """No points, empty matrix."""
        assert pairwise_distances(np.zeros((0, 2))).shape == (0, 0)
