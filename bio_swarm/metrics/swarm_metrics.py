"""
metrics/swarm_metrics.py

How tight is the swarm? How close are drones to colliding? How far
from their slots?

Everything here is a pure function of a position/velocity snapshot.

Scaling note: minimum separation compares every pair, O(n^2) in time
and memory. Fine for a few hundred drones; beyond that it dominates the
tick and wants a spatial index.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import math
import numpy as np

from bio_swarm.core.vector import pairwise_distances


@dataclass(frozen=True)
class SwarmMetrics:
    """Read-only snapshot of swarm shape and motion."""
    drone_count: int
    center_of_mass: np.ndarray
    spread: float             # Max distance from the center of mass
    min_separation: float     # inf with fewer than two drones
    formation_error: float    # Mean distance to assigned targets
    mean_speed: float

    def as_dict(self):
        return {
            'drone_count': self.drone_count,
            'center_of_mass': self.center_of_mass.tolist(),
            'spread': self.spread,
            'min_separation': self.min_separation,
            'formation_error': self.formation_error,
            'mean_speed': self.mean_speed,
        }


def compute_metrics(
    positions: np.ndarray,
    velocities: np.ndarray,
    targets: Optional[np.ndarray] = None,
    dimensions: int = 3,
) -> SwarmMetrics:
    """
    Compute metrics from (n, d) arrays.

    `targets`, when given, must line up row for row with `positions`.
    An empty swarm yields a zero center and zero spread.
    """
    positions = np.asarray(positions, dtype=np.float64)
    velocities = np.asarray(velocities, dtype=np.float64)
    n = positions.shape[0] if positions.size else 0

    if n == 0:
        return SwarmMetrics(
            drone_count=0,
            center_of_mass=np.zeros(dimensions),
            spread=0.0,
            min_separation=math.inf,
            formation_error=0.0,
            mean_speed=0.0,
        )

    center = positions.mean(axis=0)
    spread = float(np.linalg.norm(positions - center, axis=1).max())

    if n > 1:
        dist = pairwise_distances(positions)
        upper = dist[np.triu_indices(n, k=1)]
        min_separation = float(upper.min())
    else:
        min_separation = math.inf

    if targets is not None:
        targets = np.asarray(targets, dtype=np.float64)
        if targets.shape != positions.shape:
            raise ValueError(
                f"targets shape {targets.shape} does not match positions {positions.shape}"
            )
        formation_error = float(np.linalg.norm(positions - targets, axis=1).mean())
    else:
        formation_error = 0.0

    mean_speed = float(np.linalg.norm(velocities, axis=1).mean()) if velocities.size else 0.0

    return SwarmMetrics(
        drone_count=n,
        center_of_mass=center,
        spread=spread,
        min_separation=min_separation,
        formation_error=formation_error,
        mean_speed=mean_speed,
    )
