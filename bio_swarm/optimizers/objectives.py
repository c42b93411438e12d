"""
optimizers/objectives.py

Cost landscapes the optimizers minimize.

Lower is better everywhere. Every objective here is total over finite
inputs, so no NaN can leak into the swarm.
"""

from __future__ import annotations
from typing import Callable
import numpy as np

Objective = Callable[[np.ndarray], float]


def sphere(position: np.ndarray) -> float:
    """Squared distance to the origin. Single basin, minimum 0 at 0."""
    position = np.asarray(position, dtype=np.float64)
    return float(np.dot(position, position))


def rastrigin(position: np.ndarray, scale: float = 1.0) -> float:
    """
    Rastrigin function on `position / scale`.

    Highly multimodal: a grid of local minima around the global
    minimum 0 at the origin. `scale` stretches the landscape so the
    basins are a sensible size in world units.
    """
    x = np.asarray(position, dtype=np.float64) / scale
    return float(np.sum(x ** 2 - 10.0 * np.cos(2.0 * np.pi * x)) + 10.0 * x.shape[0])


def scaled_rastrigin(scale: float) -> Objective:
    """Rastrigin with a fixed `scale`, as a one-argument objective."""
    if scale <= 0:
        raise ValueError(f"scale must be > 0, got {scale}")

    def objective(position: np.ndarray) -> float:
        return rastrigin(position, scale)

    return objective
