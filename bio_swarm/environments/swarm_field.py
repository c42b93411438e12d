"""
environments/swarm_field.py

The drone swarm and the clock that moves it.

A simple world for simple beginnings: drones, a formation center drifting
toward a goal, and an optimizer deciding how each drone gets to its slot.

Inspired by:
- Reynolds boids simulation
- Leader-follower formation flight
- Ground-station mission sequencers
"""

from __future__ import annotations
from dataclasses import replace
from collections import deque
from typing import Dict, List, Mapping, Optional, Tuple, Union
import copy
import logging
import math
import time
import numpy as np

from bio_swarm.core.agent import (
    Drone, FormationRole, ring_neighbors, status_for_battery,
)
from bio_swarm.core.telemetry import DroneTelemetry
from bio_swarm.core.vector import as_vector, clamp_magnitude, normalize
from bio_swarm.formation.generator import FormationType, positions as formation_positions
from bio_swarm.metrics.swarm_metrics import SwarmMetrics, compute_metrics
from bio_swarm.network.topology import NetworkTopology, build_topology
from bio_swarm.optimizers.aco import ACOEngine
from bio_swarm.optimizers.base import SwarmOptimizer
from bio_swarm.optimizers.gwo import GWOEngine, convergence_parameter, leader_candidate
from bio_swarm.optimizers.pso import PSOEngine
from .config import AlgorithmType, SimulationConfig
from .demo import DemoAction, DemoActionKind, DemoSequencer

logger = logging.getLogger(__name__)

HORIZONTAL = slice(0, 2)

AlgorithmLike = Union[AlgorithmType, str]


class SwarmSimulation:
    """
    Tick-driven drone swarm.

    Each tick:
    1. Let the demo sequencer act (if running)
    2. Lay out formation targets around the current center
    3. Move the drones with the active algorithm (PSO, GWO, or seeking for ACO)
    4. Trails, battery, status
    5. Step the active abstract optimizer, if one was started
    6. Rebuild the communication graph

    Aggregates each algorithm needs (center, leader positions) are read
    before any drone moves, so update order never matters.
    """

    def __init__(self, config: Optional[SimulationConfig] = None, drone_count: int = 10):
        self.drones: List[Drone] = []
        self.engines: Dict[AlgorithmType, SwarmOptimizer] = {}
        self.demo: Optional[DemoSequencer] = None
        self.initialize(drone_count, config or SimulationConfig())

    # ==================== Lifecycle ====================

    def initialize(self, drone_count: int, config: Optional[SimulationConfig] = None) -> None:
        """Rebuild the swarm from scratch: roles, neighbors, clock."""
        if config is not None:
            self.config = config
        self.rng = np.random.default_rng(self.config.seed)
        self.formation = self.config.formation
        self.center = as_vector(self.config.center)
        self.target = as_vector(self.config.target)
        self._simulation_speed = self.config.simulation_speed
        self.active_algorithm = AlgorithmType.PSO
        self.time_step = 0
        self.iteration = 0
        self.engines = {}
        self._spawn(drone_count)
        logger.info(
            f"Initialized swarm: {drone_count} drones, "
            f"formation={self.formation.value}, dims={self.config.dimensions}"
        )

    def _spawn(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"drone_count must be >= 0, got {count}")

        self.drones = []
        for i in range(count):
            angle = 2.0 * np.pi * i / count
            position = self.center.copy()
            position[0] += self.config.spawn_radius * np.cos(angle)
            position[1] += self.config.spawn_radius * np.sin(angle)
            drone = Drone(
                id=i,
                position=position,
                role=FormationRole.for_index(i),
                neighbors=ring_neighbors(i, count),
                battery=80 + int(self.rng.random() * 20),
                trail=deque(maxlen=self.config.trail_length),
            )
            drone.status = status_for_battery(drone.battery)
            self.drones.append(drone)

        self._random_offsets = self._draw_random_offsets(count)
        self._assign_targets()
        self._rebuild_topology()

    def reset(self) -> None:
        """Respawn the same number of drones; restart any running optimizers."""
        count = len(self.drones)
        self.time_step = 0
        self.iteration = 0
        self.center = as_vector(self.config.center)
        self._spawn(count)
        for algorithm, engine in list(self.engines.items()):
            self.engines[algorithm] = self._make_engine(algorithm, _agent_count(engine))
        logger.info(f"Reset swarm ({count} drones)")

    # ==================== Controls ====================

    def set_formation(self, formation: Union[FormationType, str]) -> None:
        self.formation = FormationType.parse(formation)
        self._random_offsets = self._draw_random_offsets(len(self.drones))
        self._assign_targets()
        logger.info(f"Formation -> {self.formation.value}")

    def set_target(self, target) -> None:
        """Where the formation center should head."""
        self.target = as_vector(target, self.config.dimensions)

    def move_center_toward_target(self, speed: float) -> None:
        """Slide the formation center horizontally toward the target."""
        delta = self.target[HORIZONTAL] - self.center[HORIZONTAL]
        dist = float(np.linalg.norm(delta))
        if dist > self.config.arrival_threshold:
            self.center[HORIZONTAL] += delta / dist * speed

    @property
    def simulation_speed(self) -> float:
        return self._simulation_speed

    @simulation_speed.setter
    def simulation_speed(self, value: float) -> None:
        if not value > 0:
            raise ValueError(f"simulation_speed must be > 0, got {value}")
        self._simulation_speed = float(value)

    def start_demo(self) -> None:
        self.demo = DemoSequencer()
        logger.info("Demo started")

    def stop_demo(self) -> None:
        self.demo = None
        logger.info("Demo stopped")

    @property
    def is_demo_active(self) -> bool:
        return self.demo is not None

    def engine(self, algorithm: AlgorithmLike) -> SwarmOptimizer:
        """The abstract optimizer for `algorithm`, started on first use."""
        algorithm = AlgorithmType.parse(algorithm)
        if algorithm not in self.engines:
            self.engines[algorithm] = self._make_engine(algorithm)
        return self.engines[algorithm]

    def _make_engine(self, algorithm: AlgorithmType, count: Optional[int] = None) -> SwarmOptimizer:
        if algorithm is AlgorithmType.PSO:
            cfg = self.config.pso if count is None else replace(self.config.pso, num_particles=count)
            return PSOEngine(cfg)
        if algorithm is AlgorithmType.GWO:
            cfg = self.config.gwo if count is None else replace(self.config.gwo, num_wolves=count)
            return GWOEngine(cfg)
        cfg = self.config.aco if count is None else replace(self.config.aco, num_ants=count)
        return ACOEngine(cfg)

    # ==================== Tick ====================

    def step(self, algorithm: Optional[AlgorithmLike] = None, dt: float = 0.1) -> None:
        """
        Advance one tick.

        `algorithm` selects the active algorithm from now on; None keeps
        the current one (and lets a running demo switch it).
        """
        if not (math.isfinite(dt) and dt >= 0):
            raise ValueError(f"dt must be finite and >= 0, got {dt}")
        if algorithm is not None:
            self.active_algorithm = AlgorithmType.parse(algorithm)
        self.time_step += 1

        if self.demo is not None:
            action = self.demo.advance(len(self.drones))
            if action is not None:
                self._apply_demo_action(action)

        self._assign_targets()
        if self.active_algorithm is AlgorithmType.PSO:
            self._update_pso(dt)
        elif self.active_algorithm is AlgorithmType.GWO:
            self._update_gwo(dt)
        else:
            self._update_seek(dt)
        self.iteration += 1

        self._housekeeping()

        engine = self.engines.get(self.active_algorithm)
        if engine is not None:
            engine.step()

        self._rebuild_topology()

    def _apply_demo_action(self, action: DemoAction) -> None:
        if action.kind is DemoActionKind.SET_FORMATION:
            self.set_formation(action.formation)
            self._spawn(len(self.drones))
        elif action.kind is DemoActionKind.START_ALGORITHM:
            self.active_algorithm = action.algorithm
            self.engines[action.algorithm] = self._make_engine(action.algorithm, action.count)
        elif action.kind is DemoActionKind.RESIZE:
            self._spawn(action.count)
            logger.info(f"Swarm resized to {action.count} drones")

    def _update_pso(self, dt: float) -> None:
        """Formation PSO: personal best is the slot, global best the center."""
        cfg = self.config
        gbest = self.center.copy()
        for drone in self.drones:
            r1, r2 = self.rng.random(2)
            to_slot = drone.target - drone.position
            to_center = gbest - drone.position
            # Altitude only follows the slot
            to_center[HORIZONTAL.stop:] = 0.0
            velocity = (
                cfg.inertia * drone.velocity
                + cfg.cognitive * r1 * to_slot
                + cfg.social * r2 * to_center
            )
            drone.velocity = clamp_magnitude(velocity, cfg.max_speed)
            drone.integrate(dt)

    def _update_gwo(self, dt: float) -> None:
        """Formation GWO: leaders chase the target, Omegas triangulate the leaders."""
        cfg = self.config
        a = convergence_parameter(self.iteration, cfg.gwo_max_iterations)

        by_role = {d.role: d.position.copy() for d in self.drones if d.role.is_leader}
        leaders = [
            by_role.get(role, self.center.copy())
            for role in (FormationRole.ALPHA, FormationRole.BETA, FormationRole.DELTA)
        ]

        for drone in self.drones:
            if drone.role.is_leader:
                continue
            here = drone.position[HORIZONTAL]
            candidates = [
                leader_candidate(
                    leader[HORIZONTAL], here, a,
                    self.rng.random(2), self.rng.random(2),
                )
                for leader in leaders
            ]
            velocity = np.zeros_like(drone.position)
            velocity[HORIZONTAL] = (np.mean(candidates, axis=0) - here) * cfg.omega_gain
            drone.velocity = clamp_magnitude(velocity, cfg.max_speed)
            drone.integrate(dt)

        speeds = dict(zip(
            (FormationRole.ALPHA, FormationRole.BETA, FormationRole.DELTA),
            cfg.leader_speeds,
        ))
        for drone in self.drones:
            if not drone.role.is_leader:
                continue
            delta = self.target[HORIZONTAL] - drone.position[HORIZONTAL]
            dist = float(np.linalg.norm(delta))
            velocity = np.zeros_like(drone.position)
            if dist > cfg.arrival_threshold:
                velocity[HORIZONTAL] = delta / dist * speeds[drone.role]
            drone.velocity = clamp_magnitude(velocity, cfg.max_speed)
            drone.integrate(dt)

    def _update_seek(self, dt: float) -> None:
        """Plain formation seeking: straight at the slot, slowing on approach."""
        cfg = self.config
        for drone in self.drones:
            to_slot = drone.target - drone.position
            dist = float(np.linalg.norm(to_slot))
            if dist > cfg.arrival_threshold:
                speed = min(self._simulation_speed * cfg.seek_speed, dist, cfg.max_speed)
                drone.velocity = normalize(to_slot) * speed
                drone.integrate(dt)
            else:
                drone.velocity = np.zeros_like(drone.position)

    def _housekeeping(self) -> None:
        drain = self.time_step % self.config.battery_drain_interval == 0
        for drone in self.drones:
            if self.config.show_trails:
                drone.record_trail()
            if drain and drone.battery > 0:
                drone.battery -= 1
            drone.status = status_for_battery(drone.battery)

    # ==================== Targets & Topology ====================

    def _draw_random_offsets(self, count: int) -> Optional[List[np.ndarray]]:
        # Random slots are drawn once per formation change, not every tick
        if self.formation is not FormationType.RANDOM:
            return None
        origin = np.zeros(self.config.dimensions)
        offsets = formation_positions(
            FormationType.RANDOM, count, origin,
            self.config.formation_params, self.rng,
        )
        # The swarm flies at the center's altitude
        for offset in offsets:
            offset[2:] = 0.0
        return offsets

    def _assign_targets(self) -> None:
        if self._random_offsets is not None:
            slots = [self.center + offset for offset in self._random_offsets]
        else:
            slots = formation_positions(
                self.formation, len(self.drones), self.center,
                self.config.formation_params,
            )
        for drone, slot in zip(self.drones, slots):
            drone.target = slot

    def _rebuild_topology(self) -> None:
        self._topology = build_topology(
            [d.id for d in self.drones],
            [d.position for d in self.drones],
            self.config.comm_range,
            self.config.latency_per_unit,
        )

    # ==================== Snapshots ====================

    def current_positions(self) -> List[Tuple[int, np.ndarray]]:
        return [(d.id, d.position.copy()) for d in self.drones]

    def get_positions(self) -> np.ndarray:
        """(n, d) array of drone positions."""
        if not self.drones:
            return np.zeros((0, self.config.dimensions))
        return np.array([d.position for d in self.drones])

    def get_velocities(self) -> np.ndarray:
        if not self.drones:
            return np.zeros((0, self.config.dimensions))
        return np.array([d.velocity for d in self.drones])

    def get_targets(self) -> np.ndarray:
        if not self.drones:
            return np.zeros((0, self.config.dimensions))
        return np.array([d.target for d in self.drones])

    def metrics(self) -> SwarmMetrics:
        return compute_metrics(
            self.get_positions(),
            self.get_velocities(),
            self.get_targets() if self.drones else None,
            dimensions=self.config.dimensions,
        )

    def topology(self) -> NetworkTopology:
        return copy.deepcopy(self._topology)

    # ==================== Transport Seam ====================

    def waypoints(self) -> Dict[int, np.ndarray]:
        """Outgoing setpoints: each drone's current formation slot."""
        return {d.id: d.target.copy() for d in self.drones}

    def apply_telemetry(self, snapshots: Mapping[int, DroneTelemetry]) -> None:
        """Overwrite drone kinematics with observed vehicle state."""
        by_id = {d.id: d for d in self.drones}
        unknown = [drone_id for drone_id in snapshots if drone_id not in by_id]
        if unknown:
            raise KeyError(f"Unknown drone ids in telemetry: {sorted(unknown)}")

        dims = self.config.dimensions
        observed = {}
        for drone_id, snapshot in snapshots.items():
            if snapshot.position.shape != (dims,):
                raise ValueError(
                    f"Telemetry for drone {drone_id} is {snapshot.position.shape[0]}D, "
                    f"swarm is {dims}D"
                )
            observed[drone_id] = (
                as_vector(snapshot.position, dims),
                as_vector(snapshot.velocity, dims),
            )
        for drone_id, snapshot in snapshots.items():
            drone = by_id[drone_id]
            drone.position, drone.velocity = observed[drone_id]
            drone.armed = snapshot.armed

    # ==================== Introspection ====================

    @property
    def scenario_name(self) -> Optional[str]:
        return self.demo.scenario_name if self.demo is not None else None

    def get_statistics(self) -> Dict[str, object]:
        m = self.metrics()
        stats = {
            'time_step': self.time_step,
            'drones': len(self.drones),
            'formation': self.formation.value,
            'algorithm': self.active_algorithm.value,
            'spread': m.spread,
            'formation_error': m.formation_error,
            'mean_speed': m.mean_speed,
            'edges': len(self._topology.edges),
        }
        engine = self.engines.get(self.active_algorithm)
        if engine is not None:
            stats['optimizer'] = engine.get_statistics()
        return stats

    def __repr__(self) -> str:
        return (
            f"SwarmSimulation(drones={len(self.drones)}, "
            f"time={self.time_step}, "
            f"algorithm={self.active_algorithm.value}, "
            f"formation={self.formation.value})"
        )


def _agent_count(engine: SwarmOptimizer) -> int:
    return len(engine.positions())


def run_simulation(
    sim: SwarmSimulation,
    steps: int,
    algorithm: Optional[AlgorithmLike] = None,
    dt: float = 0.1,
    max_wall_time: Optional[float] = None,
) -> int:
    """
    Run up to `steps` ticks, stopping early once `max_wall_time` seconds
    of wall clock have passed. Returns the number of ticks executed.
    """
    if steps < 0:
        raise ValueError(f"steps must be >= 0, got {steps}")
    if max_wall_time is not None and max_wall_time < 0:
        raise ValueError(f"max_wall_time must be >= 0, got {max_wall_time}")

    started = time.monotonic()
    executed = 0
    for _ in range(steps):
        if max_wall_time is not None and time.monotonic() - started >= max_wall_time:
            logger.info(f"Wall-clock cap of {max_wall_time}s reached after {executed} ticks")
            break
        sim.step(algorithm, dt)
        executed += 1
    return executed
