"""
optimizers/aco.py

Ant Colony Optimization for obstacle-aware pathfinding.

The ant doesn't plan. It walks roughly toward the goal, leaving a
trace behind it. Traces fade; short paths get remembered.

Two movement modes:
- Biased random walk (default): goal direction plus uniform noise.
  Pheromone is deposited and evaporates but does not steer the ants;
  `alpha` and `beta` are carried for inspection only.
- Pheromone-guided (`pheromone_guided=True`): the classic ACO
  transition rule. Several noisy headings are proposed and one is
  chosen with probability proportional to tau^alpha * eta^beta, where
  tau is the trail strength near the candidate and eta = 1/distance
  to goal.

Reference: Dorigo & Stützle, "Ant Colony Optimization" (2004).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple
import logging
import math
import numpy as np

from bio_swarm.core.vector import as_vector, normalize
from .base import SwarmOptimizer

logger = logging.getLogger(__name__)

EVAPORATION_RANGE = (0.01, 0.5)
EXPONENT_RANGE = (0.1, 5.0)

CANDIDATE_HEADINGS = 8     # Proposals per ant per tick in guided mode
PHEROMONE_BASE = 0.1       # Trail level assumed where nothing was deposited


@dataclass
class Obstacle:
    """Circular (spherical in 3D) exclusion zone."""
    center: np.ndarray
    radius: float

    def __post_init__(self):
        self.center = as_vector(self.center)
        if not math.isfinite(self.radius) or self.radius < 0:
            raise ValueError(f"Obstacle radius must be finite and >= 0, got {self.radius}")

    def blocks(self, point: np.ndarray, margin: float = 0.0) -> bool:
        """True if `point` is inside radius + margin."""
        return float(np.linalg.norm(point - self.center)) < self.radius + margin


def default_obstacles() -> List[Obstacle]:
    return [
        Obstacle(center=(0.0, 0.0), radius=25.0),
        Obstacle(center=(-40.0, 30.0), radius=15.0),
        Obstacle(center=(40.0, -20.0), radius=20.0),
    ]


@dataclass
class ACOConfig:
    """Configuration for the ACO engine."""
    num_ants: int = 20
    start: Tuple[float, ...] = (-80.0, -60.0)
    goal: Tuple[float, ...] = (80.0, 60.0)
    obstacles: List[Obstacle] = field(default_factory=default_obstacles)
    evaporation_rate: float = 0.1
    alpha: float = 1.0              # Pheromone exponent
    beta: float = 2.0               # Heuristic (goal proximity) exponent
    step_length: float = 5.0
    goal_threshold: float = 5.0     # Ant counts as arrived within this distance
    safety_margin: float = 5.0      # Added to every obstacle radius
    noise_scale: float = 20.0       # Noise drawn from [-scale/2, scale/2] per axis
    noise_weight: float = 0.3
    goal_weight: float = 3.0
    pheromone_floor: float = 0.05   # Trails weaker than this are removed
    max_trails: int = 500
    eviction_batch: int = 100
    pheromone_guided: bool = False
    history_length: int = 200
    seed: Optional[int] = None

    def __post_init__(self):
        if self.num_ants < 0:
            raise ValueError(f"num_ants must be >= 0, got {self.num_ants}")
        start = as_vector(self.start)
        goal = as_vector(self.goal, start.shape[0])
        if start.shape[0] not in (2, 3):
            raise ValueError(f"start/goal must be 2D or 3D, got {start.shape[0]}D")
        for obstacle in self.obstacles:
            if obstacle.center.shape != start.shape:
                raise ValueError("Obstacle centers must match start/goal dimensions")
            for name, point in (("start", start), ("goal", goal)):
                if obstacle.blocks(point, self.safety_margin):
                    raise ValueError(f"{name} {point.tolist()} lies inside an obstacle")
        _check_range("evaporation_rate", self.evaporation_rate, EVAPORATION_RANGE)
        _check_range("alpha", self.alpha, EXPONENT_RANGE)
        _check_range("beta", self.beta, EXPONENT_RANGE)
        for name in ("step_length", "goal_threshold"):
            if not getattr(self, name) > 0:
                raise ValueError(f"{name} must be > 0, got {getattr(self, name)}")
        for name in ("safety_margin", "noise_scale", "noise_weight", "goal_weight"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        if not 0 < self.pheromone_floor < 1:
            raise ValueError(f"pheromone_floor must be in (0, 1), got {self.pheromone_floor}")
        if self.max_trails < 1 or not 1 <= self.eviction_batch <= self.max_trails:
            raise ValueError("Need max_trails >= 1 and 1 <= eviction_batch <= max_trails")
        if self.history_length < 1:
            raise ValueError(f"history_length must be >= 1, got {self.history_length}")


def _check_range(name: str, value: float, bounds: Tuple[float, float]) -> None:
    low, high = bounds
    if not (low <= value <= high):
        raise ValueError(f"{name} must be in [{low}, {high}], got {value}")


# ==================== Pheromones ====================

@dataclass(eq=False)
class PheromoneTrail:
    """A segment walked by an ant, with a fading strength in (0, 1]."""
    start: np.ndarray
    end: np.ndarray
    strength: float = 1.0


class PheromoneField:
    """
    Insertion-ordered collection of fading trail segments.

    Growth is bounded by bulk eviction: once the cap is exceeded the
    oldest `eviction_batch` segments go at once, so the amortized cost
    per deposit stays constant.
    """

    def __init__(
        self,
        floor: float = 0.05,
        max_trails: int = 500,
        eviction_batch: int = 100,
    ):
        self.floor = floor
        self.max_trails = max_trails
        self.eviction_batch = eviction_batch
        self._trails: List[PheromoneTrail] = []

    def deposit(self, start: np.ndarray, end: np.ndarray, strength: float = 1.0) -> None:
        """Lay a segment. Strength is clamped into (0, 1]."""
        strength = float(np.clip(strength, 0.0, 1.0))
        if strength <= 0.0:
            return
        self._trails.append(
            PheromoneTrail(start=np.array(start, dtype=np.float64),
                           end=np.array(end, dtype=np.float64),
                           strength=strength)
        )

    def evaporate(self, rate: float) -> None:
        """Multiply every strength by (1 - rate) and drop faded segments."""
        keep = 1.0 - rate
        for trail in self._trails:
            trail.strength *= keep
        self._trails = [t for t in self._trails if t.strength >= self.floor]

    def trim(self) -> int:
        """Bulk-evict the oldest segments while over the cap."""
        evicted = 0
        while len(self._trails) > self.max_trails:
            del self._trails[:self.eviction_batch]
            evicted += self.eviction_batch
        return evicted

    def strength_near(self, point: np.ndarray, radius: float) -> float:
        """Total strength of segments ending within `radius` of `point`."""
        if not self._trails:
            return 0.0
        ends = np.array([t.end for t in self._trails])
        strengths = np.array([t.strength for t in self._trails])
        close = np.linalg.norm(ends - point, axis=1) <= radius
        return float(strengths[close].sum())

    def total_strength(self) -> float:
        return float(sum(t.strength for t in self._trails))

    def __len__(self) -> int:
        return len(self._trails)

    def __iter__(self) -> Iterator[PheromoneTrail]:
        return iter(self._trails)

    def __repr__(self) -> str:
        return f"PheromoneField(trails={len(self)}, total={self.total_strength():.2f})"


# ==================== Ants ====================

@dataclass(eq=False)
class Ant:
    """A walker with a memory of where it has been."""
    id: int
    position: np.ndarray
    path: List[np.ndarray] = field(default_factory=list)


def path_length(path: Sequence[np.ndarray]) -> float:
    """Total polyline length."""
    if len(path) < 2:
        return 0.0
    points = np.asarray(path)
    return float(np.linalg.norm(np.diff(points, axis=0), axis=1).sum())


class ACOEngine(SwarmOptimizer):
    """
    Colony of ants shuttling from start to goal around obstacles.

    Per tick:
    1. Every ant proposes a move from the frozen pheromone field (read)
    2. Blocked moves are rejected; accepted moves extend the ant's path
    3. Arrived ants may replace the best path, then restart
    4. New segments are committed, everything evaporates, cap enforced
    """

    def __init__(self, config: Optional[ACOConfig] = None):
        self.config = config or ACOConfig()
        super().__init__(self.config.seed, self.config.history_length)
        self.start = as_vector(self.config.start)
        self.goal = as_vector(self.config.goal)
        self.obstacles = list(self.config.obstacles)
        self.evaporation_rate = self.config.evaporation_rate
        self.alpha = self.config.alpha
        self.beta = self.config.beta

        self.pheromones = PheromoneField(
            floor=self.config.pheromone_floor,
            max_trails=self.config.max_trails,
            eviction_batch=self.config.eviction_batch,
        )
        self.ants = [
            Ant(id=i, position=self.start.copy(), path=[self.start.copy()])
            for i in range(self.config.num_ants)
        ]
        # Placeholder until some ant actually arrives
        self.best_path: List[np.ndarray] = [self.start.copy(), self.goal.copy()]
        self.best_path_found = False
        self.completed_tours = 0

    def tune(
        self,
        evaporation_rate: Optional[float] = None,
        alpha: Optional[float] = None,
        beta: Optional[float] = None,
    ) -> None:
        """Change parameters mid-run, clamped into the recognized ranges."""
        for name, value in (("evaporation_rate", evaporation_rate), ("alpha", alpha), ("beta", beta)):
            if value is not None and not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        if evaporation_rate is not None:
            self.evaporation_rate = float(np.clip(evaporation_rate, *EVAPORATION_RANGE))
        if alpha is not None:
            self.alpha = float(np.clip(alpha, *EXPONENT_RANGE))
        if beta is not None:
            self.beta = float(np.clip(beta, *EXPONENT_RANGE))

    def collides(self, point: np.ndarray) -> bool:
        """True if `point` is inside any obstacle's safety zone."""
        margin = self.config.safety_margin
        return any(obstacle.blocks(point, margin) for obstacle in self.obstacles)

    # ==================== Tick ====================

    def step(self) -> None:
        self.iteration += 1

        new_segments = []
        for ant in self.ants:
            segment = self._advance(ant)
            if segment is not None:
                new_segments.append(segment)

        for start, end in new_segments:
            self.pheromones.deposit(start, end, 1.0)
        self.pheromones.evaporate(self.evaporation_rate)
        evicted = self.pheromones.trim()
        if evicted:
            logger.debug(f"Evicted {evicted} oldest pheromone trails")

        self.history.append(self.best_path_length)

    def _advance(self, ant: Ant) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        to_goal = self.goal - ant.position
        if np.linalg.norm(to_goal) <= self.config.goal_threshold:
            self._arrive(ant)
            return None

        if self.config.pheromone_guided:
            candidate = self._guided_proposal(ant.position, to_goal)
        else:
            candidate = self._random_proposal(ant.position, to_goal)
        if candidate is None or self.collides(candidate):
            return None

        old = ant.position
        ant.position = candidate
        ant.path.append(candidate.copy())
        return old, candidate.copy()

    def _random_proposal(self, position: np.ndarray, to_goal: np.ndarray) -> np.ndarray:
        noise = (self.rng.random(position.shape[0]) - 0.5) * self.config.noise_scale
        heading = normalize(
            normalize(to_goal) * self.config.goal_weight
            + noise * self.config.noise_weight
        )
        return position + heading * self.config.step_length

    def _guided_proposal(
        self, position: np.ndarray, to_goal: np.ndarray
    ) -> Optional[np.ndarray]:
        candidates = [
            self._random_proposal(position, to_goal)
            for _ in range(CANDIDATE_HEADINGS)
        ]
        candidates = [c for c in candidates if not self.collides(c)]
        if not candidates:
            return None

        radius = self.config.step_length
        weights = []
        for candidate in candidates:
            tau = PHEROMONE_BASE + self.pheromones.strength_near(candidate, radius)
            eta = 1.0 / max(float(np.linalg.norm(self.goal - candidate)), 1e-6)
            weights.append(tau ** self.alpha * eta ** self.beta)
        weights = np.array(weights)
        choice = self.rng.choice(len(candidates), p=weights / weights.sum())
        return candidates[choice]

    def _arrive(self, ant: Ant) -> None:
        if not self.best_path_found or len(ant.path) < len(self.best_path):
            self.best_path = [p.copy() for p in ant.path]
            self.best_path_found = True
            logger.info(
                f"ACO best path improved: {len(self.best_path)} waypoints, "
                f"length {self.best_path_length:.1f}"
            )
        self.completed_tours += 1
        ant.position = self.start.copy()
        ant.path = [self.start.copy()]

    # ==================== Queries ====================

    @property
    def best_path_length(self) -> float:
        """Polyline length of the best path, inf while only the placeholder exists."""
        if not self.best_path_found:
            return math.inf
        return path_length(self.best_path)

    def get_best(self) -> Tuple[Optional[np.ndarray], float]:
        if not self.best_path_found:
            return None, math.inf
        return np.array(self.best_path), self.best_path_length

    def positions(self) -> List[Tuple[int, np.ndarray]]:
        return [(a.id, a.position.copy()) for a in self.ants]

    def get_statistics(self):
        stats = super().get_statistics()
        stats.update({
            'ants': len(self.ants),
            'pheromone_trails': len(self.pheromones),
            'best_path_waypoints': len(self.best_path),
            'completed_tours': self.completed_tours,
            'evaporation_rate': self.evaporation_rate,
            'alpha': self.alpha,
            'beta': self.beta,
        })
        return stats

    def __repr__(self) -> str:
        return (
            f"ACOEngine(ants={len(self.ants)}, iteration={self.iteration}, "
            f"trails={len(self.pheromones)})"
        )
