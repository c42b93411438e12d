"""
optimizers/gwo.py

Grey Wolf Optimizer.

The pack is led by its three fittest members. Everyone else hunts by
triangulating between them, and the exploration radius shrinks as the
hunt goes on:

    a = 2 * (1 - t / T)
    A = 2*a*r1 - a,  C = 2*r2
    D = |C*X_leader - X|,  X_k = X_leader - A*D
    X' = mean(X_alpha, X_beta, X_delta)

Ranks here come from fitness and are recomputed every tick. They are a
different thing from the fixed FormationRole of a drone.

Reference: Mirjalili, Mirjalili & Lewis, "Grey Wolf Optimizer" (2014).
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple
import logging
import math
import numpy as np

from .base import SwarmOptimizer
from .objectives import Objective, scaled_rastrigin

logger = logging.getLogger(__name__)

INITIAL_A = 2.0


class WolfRank(Enum):
    """Per-tick fitness rank inside the GWO pack."""
    ALPHA = "alpha"
    BETA = "beta"
    DELTA = "delta"
    OMEGA = "omega"


LEADER_RANKS = (WolfRank.ALPHA, WolfRank.BETA, WolfRank.DELTA)


@dataclass
class GWOConfig:
    """Configuration for the GWO engine."""
    num_wolves: int = 20
    dimensions: int = 2
    bounds: float = 100.0          # Search space is [-bounds, bounds] per axis
    max_iterations: int = 500      # Budget over which `a` decays to 0
    fitness_scale: float = 20.0    # Stretch of the default Rastrigin landscape
    history_length: int = 200
    seed: Optional[int] = None

    def __post_init__(self):
        if self.num_wolves < 0:
            raise ValueError(f"num_wolves must be >= 0, got {self.num_wolves}")
        if self.dimensions not in (2, 3):
            raise ValueError(f"dimensions must be 2 or 3, got {self.dimensions}")
        if not self.bounds > 0 or not math.isfinite(self.bounds):
            raise ValueError(f"bounds must be finite and > 0, got {self.bounds}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if not self.fitness_scale > 0:
            raise ValueError(f"fitness_scale must be > 0, got {self.fitness_scale}")
        if self.history_length < 1:
            raise ValueError(f"history_length must be >= 1, got {self.history_length}")


@dataclass(eq=False)
class Wolf:
    """A pack member: a candidate solution with a fitness rank."""
    id: int
    position: np.ndarray
    fitness: float = math.inf
    rank: WolfRank = WolfRank.OMEGA


def convergence_parameter(iteration: int, max_iterations: int) -> float:
    """Linear decay of `a` from 2 to 0 over the budget, floored at 0."""
    return max(0.0, INITIAL_A * (1.0 - iteration / max_iterations))


def rank_order(fitness: Sequence[float]) -> np.ndarray:
    """Indices sorted by ascending fitness; ties keep their original order."""
    return np.argsort(np.asarray(fitness, dtype=np.float64), kind="stable")


def leader_candidate(
    leader: np.ndarray,
    position: np.ndarray,
    a: float,
    r1: np.ndarray,
    r2: np.ndarray,
) -> np.ndarray:
    """Position suggested by one leader, per axis."""
    A = 2.0 * a * r1 - a
    C = 2.0 * r2
    D = np.abs(C * leader - position)
    return leader - A * D


class GWOEngine(SwarmOptimizer):
    """
    Grey Wolf Optimizer over a bounded box.

    Per tick:
    1. Decay the exploration parameter `a`
    2. Evaluate fitness and rank the pack (read phase)
    3. Freeze leader positions
    4. Move every Omega toward the averaged leader candidates, hard clamp
    5. Record the Alpha's fitness
    """

    def __init__(
        self,
        config: Optional[GWOConfig] = None,
        objective: Optional[Objective] = None,
        initial_positions: Optional[Sequence[Sequence[float]]] = None,
    ):
        self.config = config or GWOConfig()
        super().__init__(self.config.seed, self.config.history_length)
        self.objective = objective or scaled_rastrigin(self.config.fitness_scale)
        self.convergence_param = INITIAL_A

        dims = self.config.dimensions
        if initial_positions is not None:
            pos = np.asarray(initial_positions, dtype=np.float64).reshape(-1, dims)
        else:
            pos = self.rng.uniform(
                -self.config.bounds, self.config.bounds,
                size=(self.config.num_wolves, dims),
            )
        self.wolves = [Wolf(id=i, position=pos[i].copy()) for i in range(pos.shape[0])]

    # ==================== Pack Structure ====================

    def leaders(self) -> List[Wolf]:
        """Alpha, Beta, Delta (as many as exist), as copies."""
        by_rank = {w.rank: w for w in self.wolves if w.rank is not WolfRank.OMEGA}
        return [
            Wolf(id=by_rank[r].id, position=by_rank[r].position.copy(),
                 fitness=by_rank[r].fitness, rank=r)
            for r in LEADER_RANKS if r in by_rank
        ]

    @property
    def alpha(self) -> Optional[Wolf]:
        leaders = self.leaders()
        return leaders[0] if leaders else None

    def _rank_pack(self) -> np.ndarray:
        order = rank_order([w.fitness for w in self.wolves])
        for position_in_order, idx in enumerate(order):
            if position_in_order < len(LEADER_RANKS):
                self.wolves[idx].rank = LEADER_RANKS[position_in_order]
            else:
                self.wolves[idx].rank = WolfRank.OMEGA
        return order

    # ==================== Tick ====================

    def step(self) -> None:
        self.iteration += 1
        self.convergence_param = convergence_parameter(
            self.iteration, self.config.max_iterations
        )
        if not self.wolves:
            return

        # Read phase
        for wolf in self.wolves:
            wolf.fitness = float(self.objective(wolf.position))
        order = self._rank_pack()
        leader_positions = [
            self.wolves[idx].position.copy() for idx in order[:len(LEADER_RANKS)]
        ]
        self.history.append(self.wolves[order[0]].fitness)

        # Write phase: Omegas only
        a = self.convergence_param
        bound = self.config.bounds
        for wolf in self.wolves:
            if wolf.rank is not WolfRank.OMEGA:
                continue
            candidates = [
                leader_candidate(
                    leader, wolf.position, a,
                    self.rng.random(wolf.position.shape[0]),
                    self.rng.random(wolf.position.shape[0]),
                )
                for leader in leader_positions
            ]
            wolf.position = np.clip(np.mean(candidates, axis=0), -bound, bound)

    def get_best(self) -> Tuple[Optional[np.ndarray], float]:
        alpha = self.alpha
        if alpha is None:
            return None, math.inf
        return alpha.position, alpha.fitness

    def positions(self) -> List[Tuple[int, np.ndarray]]:
        return [(w.id, w.position.copy()) for w in self.wolves]

    def get_statistics(self):
        stats = super().get_statistics()
        stats.update({
            'wolves': len(self.wolves),
            'convergence_param': self.convergence_param,
        })
        return stats

    def __repr__(self) -> str:
        return (
            f"GWOEngine(wolves={len(self.wolves)}, "
            f"iteration={self.iteration}, a={self.convergence_param:.3f})"
        )
