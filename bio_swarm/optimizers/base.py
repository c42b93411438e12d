"""
optimizers/base.py

Common shape of the three swarm optimizers.

Every optimizer advances in ticks. Each tick has two phases:
- Read: compute tick-scoped aggregates (global best, leaders, ranks)
  from the state the previous tick left behind, then freeze them.
- Write: update every agent independently, using only its own state
  and the frozen aggregates.

No agent ever sees another agent's already-updated state within a tick.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple
import numpy as np


class SwarmOptimizer(ABC):
    """
    Abstract base for the tick-driven optimizers.
    """

    def __init__(self, seed: Optional[int] = None, history_length: int = 200):
        self.rng = np.random.default_rng(seed)
        self.iteration = 0
        self.history: Deque[float] = deque(maxlen=history_length)

    @abstractmethod
    def step(self) -> None:
        """Advance the optimizer by one tick."""
        pass

    @abstractmethod
    def get_best(self) -> Tuple[Optional[np.ndarray], float]:
        """Return the best position found and its cost."""
        pass

    @abstractmethod
    def positions(self) -> List[Tuple[int, np.ndarray]]:
        """(id, position) for every agent, as copies."""
        pass

    def get_history(self) -> List[float]:
        """Bounded convergence history, oldest first."""
        return list(self.history)

    def get_statistics(self) -> Dict[str, Any]:
        """Get current optimizer statistics."""
        _, best = self.get_best()
        return {
            'iteration': self.iteration,
            'algorithm': self.__class__.__name__,
            'best_cost': best,
        }
