"""
core/agent.py

A drone in the formation layer.

The drone is the physical body. Optimizers reason about abstract
particles, wolves and ants; the drone is what actually flies to the slot
the formation assigns it.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, List, Optional
import numpy as np


class FormationRole(Enum):
    """
    Fixed leader/follower hierarchy of the formation layer.

    Assigned once when the swarm is spawned and never changed afterwards.
    Not to be confused with `WolfRank`, which the GWO engine recomputes
    from fitness every tick.
    """
    ALPHA = "alpha"
    BETA = "beta"
    DELTA = "delta"
    OMEGA = "omega"

    @classmethod
    def for_index(cls, index: int) -> "FormationRole":
        """Role of the drone at spawn slot `index`."""
        if index == 0:
            return cls.ALPHA
        if index == 1:
            return cls.BETA
        if index == 2:
            return cls.DELTA
        return cls.OMEGA

    @property
    def is_leader(self) -> bool:
        return self is not FormationRole.OMEGA


class DroneStatus(Enum):
    """Operational status, derived from battery level."""
    IDLE = "idle"
    ACTIVE = "active"
    RETURNING = "returning"
    EMERGENCY = "emergency"
    FAILED = "failed"


# Battery thresholds (percent)
RETURN_BATTERY = 20
EMERGENCY_BATTERY = 10


def status_for_battery(battery: int) -> DroneStatus:
    """Map a battery percentage to a status."""
    if battery < EMERGENCY_BATTERY:
        return DroneStatus.EMERGENCY
    if battery < RETURN_BATTERY:
        return DroneStatus.RETURNING
    return DroneStatus.ACTIVE


@dataclass(eq=False)
class Drone:
    """
    What a drone IS at this moment.

    `id` and `role` are fixed for the lifetime of the swarm that spawned
    the drone. Everything else is kinematic state the simulation owns.
    """
    id: int
    position: np.ndarray
    role: FormationRole = FormationRole.OMEGA
    velocity: Optional[np.ndarray] = None
    target: Optional[np.ndarray] = None
    neighbors: List[int] = field(default_factory=list)
    battery: int = 100
    status: DroneStatus = DroneStatus.ACTIVE
    armed: bool = False
    trail: Deque[np.ndarray] = field(default_factory=lambda: deque(maxlen=50))

    def __post_init__(self):
        # Ensure arrays are proper numpy arrays
        self.position = np.asarray(self.position, dtype=np.float64).copy()
        if self.velocity is None:
            self.velocity = np.zeros_like(self.position)
        else:
            self.velocity = np.asarray(self.velocity, dtype=np.float64).copy()
        if self.target is None:
            self.target = self.position.copy()
        else:
            self.target = np.asarray(self.target, dtype=np.float64).copy()

    def __setattr__(self, name, value):
        # Identity and formation role are write-once
        if name in ("id", "role") and name in self.__dict__:
            raise AttributeError(f"Drone.{name} is immutable")
        super().__setattr__(name, value)

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))

    def integrate(self, dt: float) -> None:
        """Explicit Euler step: x += v * dt."""
        self.position = self.position + self.velocity * dt

    def record_trail(self) -> None:
        """Push the current position onto the bounded trail."""
        self.trail.append(self.position.copy())

    def distance_to(self, other: Drone) -> float:
        """Euclidean distance to another drone."""
        return float(np.linalg.norm(self.position - other.position))

    def __repr__(self) -> str:
        coords = ", ".join(f"{c:.2f}" for c in self.position)
        return (
            f"Drone(id={self.id}, role={self.role.value}, "
            f"pos=[{coords}], battery={self.battery})"
        )


def ring_neighbors(index: int, count: int) -> List[int]:
    """Left and right neighbors of `index` in a ring of `count` drones."""
    if count <= 1:
        return []
    left = (index + count - 1) % count
    right = (index + 1) % count
    if left == right:
        return [left]
    return [left, right]
