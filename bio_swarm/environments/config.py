"""
environments/config.py

Everything a simulation run can be told, in one place.

Configs are plain dataclasses with safe defaults. Files are YAML:

    dimensions: 3
    formation: vformation
    target: [50.0, 50.0, 10.0]
    pso:
      num_particles: 40
    aco:
      pheromone_guided: true
      obstacles:
        - {center: [0.0, 0.0], radius: 25.0}

Unknown keys are an error, not a silent no-op.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union
import logging
import math

import yaml

from bio_swarm.core.vector import as_vector
from bio_swarm.formation.generator import FormationParams, FormationType
from bio_swarm.optimizers.aco import ACOConfig, Obstacle
from bio_swarm.optimizers.gwo import GWOConfig
from bio_swarm.optimizers.pso import PSOConfig, INERTIA_RANGE, COEFFICIENT_RANGE

logger = logging.getLogger(__name__)

DEFAULT_CENTER = (0.0, 0.0, 10.0)
DEFAULT_TARGET = (50.0, 50.0, 10.0)


class AlgorithmType(Enum):
    """Which engine drives the swarm this tick."""
    PSO = "pso"
    GWO = "gwo"
    ACO = "aco"

    @classmethod
    def parse(cls, value) -> "AlgorithmType":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if member.value == key:
                return member
        names = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown algorithm '{value}' (expected one of: {names})")


@dataclass
class SimulationConfig:
    """Configuration for a SwarmSimulation."""
    dimensions: int = 3
    formation: FormationType = FormationType.CIRCLE
    formation_params: FormationParams = field(default_factory=FormationParams)
    center: Optional[Tuple[float, ...]] = None   # Defaults to (0, 0, 10), x/y only in 2D
    target: Optional[Tuple[float, ...]] = None   # Defaults to (50, 50, 10), x/y only in 2D
    spawn_radius: float = 5.0          # Drones start on a small ring around the center
    max_speed: float = 5.0

    # Network
    comm_range: float = 80.0
    latency_per_unit: float = 0.5      # RTT (ms) per unit of distance

    # Drone bookkeeping
    trail_length: int = 50
    show_trails: bool = True
    battery_drain_interval: int = 100  # Ticks per 1% of battery
    arrival_threshold: float = 1.0
    seek_speed: float = 2.0
    simulation_speed: float = 1.0

    # Formation PSO
    inertia: float = 0.7
    cognitive: float = 1.5
    social: float = 1.5

    # Formation GWO
    gwo_max_iterations: int = 100
    leader_speeds: Tuple[float, float, float] = (3.0, 2.5, 2.0)  # Alpha, Beta, Delta
    omega_gain: float = 0.5

    # Abstract optimizers
    pso: PSOConfig = field(default_factory=PSOConfig)
    gwo: GWOConfig = field(default_factory=GWOConfig)
    aco: ACOConfig = field(default_factory=ACOConfig)

    seed: Optional[int] = None

    def __post_init__(self):
        if self.dimensions not in (2, 3):
            raise ValueError(f"dimensions must be 2 or 3, got {self.dimensions}")
        self.formation = FormationType.parse(self.formation)
        if self.center is None:
            self.center = DEFAULT_CENTER[:self.dimensions]
        if self.target is None:
            self.target = DEFAULT_TARGET[:self.dimensions]
        self.center = tuple(as_vector(self.center, self.dimensions).tolist())
        self.target = tuple(as_vector(self.target, self.dimensions).tolist())

        for name in ("max_speed", "comm_range", "arrival_threshold",
                     "seek_speed", "simulation_speed"):
            value = getattr(self, name)
            if not (math.isfinite(value) and value > 0):
                raise ValueError(f"{name} must be finite and > 0, got {value}")
        for name in ("spawn_radius", "latency_per_unit", "omega_gain"):
            value = getattr(self, name)
            if not (math.isfinite(value) and value >= 0):
                raise ValueError(f"{name} must be finite and >= 0, got {value}")
        if self.trail_length < 1:
            raise ValueError(f"trail_length must be >= 1, got {self.trail_length}")
        if self.battery_drain_interval < 1:
            raise ValueError(
                f"battery_drain_interval must be >= 1, got {self.battery_drain_interval}"
            )
        if self.gwo_max_iterations < 1:
            raise ValueError(
                f"gwo_max_iterations must be >= 1, got {self.gwo_max_iterations}"
            )

        for name, bounds in (("inertia", INERTIA_RANGE),
                             ("cognitive", COEFFICIENT_RANGE),
                             ("social", COEFFICIENT_RANGE)):
            value = getattr(self, name)
            if not bounds[0] <= value <= bounds[1]:
                raise ValueError(f"{name} must be in [{bounds[0]}, {bounds[1]}], got {value}")

        self.leader_speeds = tuple(float(s) for s in self.leader_speeds)
        if len(self.leader_speeds) != 3 or not all(
            math.isfinite(s) and s >= 0 for s in self.leader_speeds
        ):
            raise ValueError(
                f"leader_speeds needs three finite non-negative values, got {self.leader_speeds}"
            )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SimulationConfig":
        """Build a config from a plain mapping (e.g. parsed YAML)."""
        data = dict(data or {})
        _reject_unknown(cls, data, "simulation")

        if "formation_params" in data:
            params = data["formation_params"] or {}
            _reject_unknown(FormationParams, params, "formation_params")
            data["formation_params"] = FormationParams(**params)
        if "pso" in data:
            section = data["pso"] or {}
            _reject_unknown(PSOConfig, section, "pso")
            data["pso"] = PSOConfig(**section)
        if "gwo" in data:
            section = data["gwo"] or {}
            _reject_unknown(GWOConfig, section, "gwo")
            data["gwo"] = GWOConfig(**section)
        if "aco" in data:
            data["aco"] = _aco_from_dict(data["aco"] or {})

        for key in ("center", "target", "leader_speeds"):
            if data.get(key) is not None:
                data[key] = tuple(data[key])

        return cls(**data)


def _aco_from_dict(section: Dict[str, Any]) -> ACOConfig:
    section = dict(section)
    _reject_unknown(ACOConfig, section, "aco")
    if "obstacles" in section:
        obstacles = []
        for entry in section["obstacles"] or []:
            unknown = set(entry) - {"center", "radius"}
            if unknown:
                raise ValueError(f"Unknown obstacle keys: {sorted(unknown)}")
            obstacles.append(Obstacle(center=entry["center"], radius=float(entry["radius"])))
        section["obstacles"] = obstacles
    for key in ("start", "goal"):
        if key in section:
            section[key] = tuple(section[key])
    return ACOConfig(**section)


def _reject_unknown(config_cls, data: Dict[str, Any], section: str) -> None:
    if not isinstance(data, dict):
        raise ValueError(f"Section '{section}' must be a mapping, got {type(data).__name__}")
    known = {f.name for f in fields(config_cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown keys in '{section}': {sorted(unknown)}")


def load_config(config_path: Union[str, Path]) -> SimulationConfig:
    """Load a SimulationConfig from a YAML file."""
    with open(config_path) as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raw = {}
    logger.info(f"Loaded simulation config from {config_path}")
    return SimulationConfig.from_dict(raw)
