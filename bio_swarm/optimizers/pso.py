"""
optimizers/pso.py

Particle Swarm Optimization.

Each particle remembers the best place it has been; the swarm remembers
the best place anyone has been. Velocity blends momentum, memory and
the swarm's knowledge:

    v' = w*v + c1*r1*(pbest - x) + c2*r2*(gbest - x)

Reference: Kennedy & Eberhart, "Particle Swarm Optimization" (1995).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import logging
import math
import numpy as np

from bio_swarm.core.vector import clamp_magnitude
from .base import SwarmOptimizer
from .objectives import Objective, sphere

logger = logging.getLogger(__name__)

INERTIA_RANGE = (0.0, 1.0)
COEFFICIENT_RANGE = (0.0, 4.0)

# Velocity factor applied to an axis that hits the boundary
BOUNCE_DAMPING = -0.5


@dataclass
class PSOConfig:
    """Configuration for the PSO engine."""
    num_particles: int = 30
    dimensions: int = 2
    inertia: float = 0.7          # w
    cognitive: float = 2.0        # c1, pull toward personal best
    social: float = 2.0           # c2, pull toward global best
    max_velocity: float = 5.0
    bounds: float = 100.0         # Search space is [-bounds, bounds] per axis
    initial_speed: float = 5.0    # Initial velocity drawn from [-s, s] per axis
    history_length: int = 200
    seed: Optional[int] = None

    def __post_init__(self):
        if self.num_particles < 0:
            raise ValueError(f"num_particles must be >= 0, got {self.num_particles}")
        if self.dimensions not in (2, 3):
            raise ValueError(f"dimensions must be 2 or 3, got {self.dimensions}")
        _check_range("inertia", self.inertia, INERTIA_RANGE)
        _check_range("cognitive", self.cognitive, COEFFICIENT_RANGE)
        _check_range("social", self.social, COEFFICIENT_RANGE)
        if not self.max_velocity > 0:
            raise ValueError(f"max_velocity must be > 0, got {self.max_velocity}")
        if not self.bounds > 0 or not math.isfinite(self.bounds):
            raise ValueError(f"bounds must be finite and > 0, got {self.bounds}")
        if self.initial_speed < 0:
            raise ValueError(f"initial_speed must be >= 0, got {self.initial_speed}")
        if self.history_length < 1:
            raise ValueError(f"history_length must be >= 1, got {self.history_length}")


def _check_range(name: str, value: float, bounds: Tuple[float, float]) -> None:
    low, high = bounds
    if not (low <= value <= high):
        raise ValueError(f"{name} must be in [{low}, {high}], got {value}")


@dataclass(eq=False)
class Particle:
    """A candidate solution with momentum and memory."""
    id: int
    position: np.ndarray
    velocity: np.ndarray
    pbest_position: np.ndarray
    pbest_cost: float = math.inf
    cost: float = math.inf


def pso_velocity(
    velocity: np.ndarray,
    position: np.ndarray,
    pbest: np.ndarray,
    gbest: np.ndarray,
    inertia: float,
    cognitive: float,
    social: float,
    r1: float,
    r2: float,
) -> np.ndarray:
    """The canonical PSO velocity rule, unclamped."""
    return (
        inertia * velocity
        + cognitive * r1 * (pbest - position)
        + social * r2 * (gbest - position)
    )


class PSOEngine(SwarmOptimizer):
    """
    Global-best PSO over a bounded box.

    Per tick:
    1. Evaluate every particle (read phase)
    2. Update personal bests, then the global best, on strict improvement
    3. Freeze the global best and move every particle against it
    4. Clamp speed, integrate, bounce inelastically off the bounds
    5. Record the global-best cost
    """

    def __init__(
        self,
        config: Optional[PSOConfig] = None,
        objective: Optional[Objective] = None,
        initial_positions: Optional[Sequence[Sequence[float]]] = None,
        initial_velocities: Optional[Sequence[Sequence[float]]] = None,
    ):
        self.config = config or PSOConfig()
        super().__init__(self.config.seed, self.config.history_length)
        self.objective = objective or sphere
        self.inertia = self.config.inertia
        self.cognitive = self.config.cognitive
        self.social = self.config.social

        self.gbest_position = np.zeros(self.config.dimensions)
        self.gbest_cost = math.inf
        self.particles = self._spawn(initial_positions, initial_velocities)

    def _spawn(self, initial_positions, initial_velocities) -> List[Particle]:
        dims = self.config.dimensions
        if initial_positions is not None:
            pos = np.asarray(initial_positions, dtype=np.float64).reshape(-1, dims)
        else:
            pos = self.rng.uniform(
                -self.config.bounds, self.config.bounds,
                size=(self.config.num_particles, dims),
            )

        if initial_velocities is not None:
            vel = np.asarray(initial_velocities, dtype=np.float64).reshape(-1, dims)
            if vel.shape != pos.shape:
                raise ValueError(
                    f"initial_velocities shape {vel.shape} does not match "
                    f"positions shape {pos.shape}"
                )
        else:
            speed = self.config.initial_speed
            vel = self.rng.uniform(-speed, speed, size=pos.shape)

        return [
            Particle(
                id=i,
                position=pos[i].copy(),
                velocity=vel[i].copy(),
                pbest_position=pos[i].copy(),
            )
            for i in range(pos.shape[0])
        ]

    def tune(
        self,
        inertia: Optional[float] = None,
        cognitive: Optional[float] = None,
        social: Optional[float] = None,
    ) -> None:
        """Change coefficients mid-run, clamped into the recognized ranges."""
        for name, value in (("inertia", inertia), ("cognitive", cognitive), ("social", social)):
            if value is not None and not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        if inertia is not None:
            self.inertia = float(np.clip(inertia, *INERTIA_RANGE))
        if cognitive is not None:
            self.cognitive = float(np.clip(cognitive, *COEFFICIENT_RANGE))
        if social is not None:
            self.social = float(np.clip(social, *COEFFICIENT_RANGE))
        logger.debug(
            f"PSO tuned: w={self.inertia}, c1={self.cognitive}, c2={self.social}"
        )

    def step(self) -> None:
        self.iteration += 1

        if self.particles:
            # Read phase: evaluate, update memories, freeze global best
            costs = np.array([self.objective(p.position) for p in self.particles])
            for particle, cost in zip(self.particles, costs):
                particle.cost = float(cost)
                if cost < particle.pbest_cost:
                    particle.pbest_cost = float(cost)
                    particle.pbest_position = particle.position.copy()

            best_idx = int(np.argmin(costs))
            if costs[best_idx] < self.gbest_cost:
                self.gbest_cost = float(costs[best_idx])
                self.gbest_position = self.particles[best_idx].position.copy()
            gbest = self.gbest_position.copy()

            # Write phase: every particle independently
            for particle in self.particles:
                r1, r2 = self.rng.random(2)
                velocity = pso_velocity(
                    particle.velocity, particle.position,
                    particle.pbest_position, gbest,
                    self.inertia, self.cognitive, self.social,
                    r1, r2,
                )
                particle.velocity = clamp_magnitude(velocity, self.config.max_velocity)
                particle.position = particle.position + particle.velocity
                self._bounce(particle)

        self.history.append(self.gbest_cost)

    def _bounce(self, particle: Particle) -> None:
        """Clamp out-of-bounds axes and reflect their velocity at half speed."""
        bound = self.config.bounds
        for axis in range(particle.position.shape[0]):
            if abs(particle.position[axis]) > bound:
                particle.position[axis] = math.copysign(bound, particle.position[axis])
                particle.velocity[axis] *= BOUNCE_DAMPING

    def get_best(self) -> Tuple[Optional[np.ndarray], float]:
        if math.isinf(self.gbest_cost):
            return None, self.gbest_cost
        return self.gbest_position.copy(), self.gbest_cost

    def positions(self) -> List[Tuple[int, np.ndarray]]:
        return [(p.id, p.position.copy()) for p in self.particles]

    def get_statistics(self):
        stats = super().get_statistics()
        stats.update({
            'particles': len(self.particles),
            'inertia': self.inertia,
            'cognitive': self.cognitive,
            'social': self.social,
        })
        return stats

    def __repr__(self) -> str:
        return (
            f"PSOEngine(particles={len(self.particles)}, "
            f"iteration={self.iteration}, best={self.gbest_cost:.4f})"
        )
