"""
environments/demo.py

An unattended tour of everything the swarm can do.

The sequencer is a small state machine driven by tick counts. It never
touches the swarm itself: each tick it may emit one DemoAction, and the
simulation decides how to carry it out.

    FORMATION_SHOWCASE -> PSO_CONVERGENCE -> ACO_PATHFINDING
        -> GWO_HUNTING -> SCALE_TEST -> FORMATION_SHOWCASE
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging

from bio_swarm.formation.generator import FormationType, SHOWCASE_ORDER
from .config import AlgorithmType

logger = logging.getLogger(__name__)

# Tick guards
SHOWCASE_INTERVAL = 200
SHOWCASE_DURATION = 1000
PHASE_DURATION = 600
SCALE_INTERVAL = 100
SCALE_DURATION = 500

# Swarm sizes
DEMO_PARTICLES = 40
DEMO_WOLVES = 25
SCALE_START = 50
SCALE_STEP = 10
SCALE_LIMIT = 100
RESTART_DRONES = 15


class DemoScenario(Enum):
    FORMATION_SHOWCASE = "Formation Showcase"
    PSO_CONVERGENCE = "PSO Optimization"
    ACO_PATHFINDING = "ACO Pathfinding"
    GWO_HUNTING = "GWO Wolf Pack"
    SCALE_TEST = "Scale Test"


class DemoActionKind(Enum):
    SET_FORMATION = "set_formation"
    START_ALGORITHM = "start_algorithm"
    RESIZE = "resize"


@dataclass(frozen=True)
class DemoAction:
    """One instruction for the simulation. Only the fields of its kind are set."""
    kind: DemoActionKind
    formation: Optional[FormationType] = None
    algorithm: Optional[AlgorithmType] = None
    count: Optional[int] = None


class DemoSequencer:
    """
    Tick-counting state machine over the demo scenarios.

    Within a scenario the periodic check runs before the duration check,
    so a tick that is both a multiple of the interval and past the
    duration performs the periodic action and leaves the transition to a
    later tick.
    """

    def __init__(self):
        self.scenario = DemoScenario.FORMATION_SHOWCASE
        self.step = 0
        self.formation_index = 0

    @property
    def scenario_name(self) -> str:
        return self.scenario.value

    def advance(self, drone_count: int) -> Optional[DemoAction]:
        """Count one tick and return the action it triggers, if any."""
        self.step += 1

        if self.scenario is DemoScenario.FORMATION_SHOWCASE:
            if self.step % SHOWCASE_INTERVAL == 0:
                self.formation_index = (self.formation_index + 1) % len(SHOWCASE_ORDER)
                formation = SHOWCASE_ORDER[self.formation_index]
                logger.debug(f"Demo showcase formation -> {formation.value}")
                return DemoAction(DemoActionKind.SET_FORMATION, formation=formation)
            if self.step > SHOWCASE_DURATION:
                self._enter(DemoScenario.PSO_CONVERGENCE)
                return DemoAction(
                    DemoActionKind.START_ALGORITHM,
                    algorithm=AlgorithmType.PSO, count=DEMO_PARTICLES,
                )
            return None

        if self.scenario is DemoScenario.PSO_CONVERGENCE:
            if self.step > PHASE_DURATION:
                self._enter(DemoScenario.ACO_PATHFINDING)
                return DemoAction(DemoActionKind.START_ALGORITHM, algorithm=AlgorithmType.ACO)
            return None

        if self.scenario is DemoScenario.ACO_PATHFINDING:
            if self.step > PHASE_DURATION:
                self._enter(DemoScenario.GWO_HUNTING)
                return DemoAction(
                    DemoActionKind.START_ALGORITHM,
                    algorithm=AlgorithmType.GWO, count=DEMO_WOLVES,
                )
            return None

        if self.scenario is DemoScenario.GWO_HUNTING:
            if self.step > PHASE_DURATION:
                self._enter(DemoScenario.SCALE_TEST)
                return DemoAction(DemoActionKind.RESIZE, count=SCALE_START)
            return None

        # SCALE_TEST
        if self.step % SCALE_INTERVAL == 0 and drone_count < SCALE_LIMIT:
            return DemoAction(DemoActionKind.RESIZE, count=drone_count + SCALE_STEP)
        if self.step > SCALE_DURATION:
            self._enter(DemoScenario.FORMATION_SHOWCASE)
            self.formation_index = 0
            return DemoAction(DemoActionKind.RESIZE, count=RESTART_DRONES)
        return None

    def _enter(self, scenario: DemoScenario) -> None:
        logger.info(f"Demo: {self.scenario.value} -> {scenario.value}")
        self.scenario = scenario
        self.step = 0

    def __repr__(self) -> str:
        return f"DemoSequencer(scenario={self.scenario.name}, step={self.step})"
