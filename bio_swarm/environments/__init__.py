"""
Environments: the world the swarm flies in.

- swarm_field: drones, formation center, the tick
- config: what a run can be told
- demo: an unattended tour of the algorithms
"""

from .config import AlgorithmType, SimulationConfig, load_config
from .demo import DemoAction, DemoActionKind, DemoScenario, DemoSequencer
from .swarm_field import SwarmSimulation, run_simulation

__all__ = [
    "AlgorithmType", "SimulationConfig", "load_config",
    "DemoAction", "DemoActionKind", "DemoScenario", "DemoSequencer",
    "SwarmSimulation", "run_simulation",
]
