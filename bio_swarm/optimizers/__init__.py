"""
Swarm optimizers: three ways for many simple agents to find one answer.

- pso: Particle Swarm Optimization, memory and momentum
- gwo: Grey Wolf Optimizer, leadership by fitness
- aco: Ant Colony Optimization, trails that fade
"""

from .base import SwarmOptimizer
from .objectives import sphere, rastrigin, scaled_rastrigin
from .pso import PSOConfig, PSOEngine, Particle
from .gwo import GWOConfig, GWOEngine, Wolf, WolfRank
from .aco import ACOConfig, ACOEngine, Ant, Obstacle, PheromoneField, PheromoneTrail

__all__ = [
    "SwarmOptimizer",
    "sphere", "rastrigin", "scaled_rastrigin",
    "PSOConfig", "PSOEngine", "Particle",
    "GWOConfig", "GWOEngine", "Wolf", "WolfRank",
    "ACOConfig", "ACOEngine", "Ant", "Obstacle", "PheromoneField", "PheromoneTrail",
]
