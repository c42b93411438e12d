"""
core/telemetry.py

The seam between the swarm core and whatever link carries commands to
real vehicles.

The core never speaks a wire protocol. The transport layer feeds back
`DroneTelemetry` snapshots and reads waypoints out; these helpers are all
the core needs to know about either direction.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import logging
import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class DroneTelemetry:
    """Observed vehicle state reported by the transport layer."""
    position: np.ndarray
    velocity: np.ndarray
    armed: bool = False

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=np.float64)
        self.velocity = np.asarray(self.velocity, dtype=np.float64)
        if self.position.shape != self.velocity.shape:
            raise ValueError(
                f"Position {self.position.shape} and velocity "
                f"{self.velocity.shape} must have the same shape"
            )


def circle_waypoints(
    num_points: int,
    radius: float,
    altitude: float,
    ned: bool = True,
) -> List[np.ndarray]:
    """
    Waypoints evenly spaced on a horizontal circle.

    In the NED frame "up" is negative z, so the altitude is negated.
    """
    if num_points < 0:
        raise ValueError(f"num_points must be >= 0, got {num_points}")
    if radius < 0:
        raise ValueError(f"radius must be >= 0, got {radius}")

    z = -altitude if ned else altitude
    waypoints = []
    for i in range(num_points):
        angle = 2.0 * np.pi * i / num_points
        waypoints.append(np.array([
            radius * np.cos(angle),
            radius * np.sin(angle),
            z,
        ]))
    return waypoints


class WaypointTracker:
    """
    Walks a vehicle around a closed list of waypoints.

    A waypoint counts as reached when the horizontal distance drops below
    `acceptance_radius` and at least `dwell_time` seconds have passed since
    the previous one was reached. Time is passed in by the caller so the
    tracker stays deterministic under test.
    """

    def __init__(
        self,
        waypoints: List[np.ndarray],
        acceptance_radius: float = 3.0,
        dwell_time: float = 2.0,
        start_time: float = 0.0,
    ):
        if not waypoints:
            raise ValueError("WaypointTracker needs at least one waypoint")
        if acceptance_radius <= 0:
            raise ValueError(
                f"acceptance_radius must be > 0, got {acceptance_radius}"
            )
        self.waypoints = [np.asarray(wp, dtype=np.float64) for wp in waypoints]
        self.acceptance_radius = acceptance_radius
        self.dwell_time = dwell_time
        self.current_index = 0
        self.reached_count = 0
        self._last_reached_at = start_time

    @property
    def current(self) -> np.ndarray:
        """Setpoint the vehicle should be flying to right now."""
        return self.waypoints[self.current_index].copy()

    @property
    def laps_completed(self) -> int:
        return self.reached_count // len(self.waypoints)

    def update(self, position: np.ndarray, now: float) -> Optional[int]:
        """
        Feed an observed position.

        Returns the index of the waypoint that was just reached, or None.
        """
        target = self.waypoints[self.current_index]
        horizontal = float(np.linalg.norm(np.asarray(position)[:2] - target[:2]))

        if horizontal >= self.acceptance_radius:
            return None
        if now - self._last_reached_at <= self.dwell_time:
            return None

        reached = self.current_index
        self.reached_count += 1
        self._last_reached_at = now
        self.current_index = (self.current_index + 1) % len(self.waypoints)
        logger.info(
            f"Reached waypoint {reached} at {horizontal:.1f}m "
            f"[{self.reached_count}/{len(self.waypoints)}]"
        )
        return reached
