"""
core/vector.py

Small geometry helpers shared by every engine.

Positions and velocities are plain numpy float64 arrays of shape (2,) or (3,).
"""

from __future__ import annotations
from typing import Sequence, Union
import numpy as np

VectorLike = Union[np.ndarray, Sequence[float]]

EPSILON = 1e-9


def as_vector(value: VectorLike, dimensions: int | None = None) -> np.ndarray:
    """Copy `value` into a float64 vector, optionally checking its size."""
    vec = np.array(value, dtype=np.float64).reshape(-1)
    if dimensions is not None and vec.shape[0] != dimensions:
        raise ValueError(
            f"Expected a {dimensions}-dimensional vector, got {vec.shape[0]}"
        )
    if not np.all(np.isfinite(vec)):
        raise ValueError(f"Vector must be finite, got {vec.tolist()}")
    return vec


def distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two points."""
    return float(np.linalg.norm(np.asarray(a) - np.asarray(b)))


def normalize(vec: np.ndarray) -> np.ndarray:
    """
    Unit vector in the direction of `vec`.

    A zero-length input yields a zero vector instead of NaN.
    """
    vec = np.asarray(vec, dtype=np.float64)
    norm = np.linalg.norm(vec)
    if norm < EPSILON:
        return np.zeros_like(vec)
    return vec / norm


def clamp_magnitude(vec: np.ndarray, max_magnitude: float) -> np.ndarray:
    """Scale `vec` down so its length is at most `max_magnitude`."""
    vec = np.asarray(vec, dtype=np.float64)
    norm = np.linalg.norm(vec)
    if norm > max_magnitude and norm > EPSILON:
        return vec * (max_magnitude / norm)
    return vec.copy()


def pairwise_distances(positions: np.ndarray) -> np.ndarray:
    """(n, n) matrix of distances between rows of `positions`."""
    positions = np.asarray(positions, dtype=np.float64)
    if positions.size == 0:
        return np.zeros((0, 0))
    diff = positions[:, None, :] - positions[None, :, :]
    return np.linalg.norm(diff, axis=-1)
