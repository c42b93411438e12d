"""
Core components of the bio-swarm system.

- vector: Geometry helpers
- agent: The Drone - body, role, battery
- telemetry: The seam to real vehicles
"""

from .agent import Drone, DroneStatus, FormationRole
from .telemetry import DroneTelemetry, WaypointTracker, circle_waypoints

__all__ = [
    "Drone", "DroneStatus", "FormationRole",
    "DroneTelemetry", "WaypointTracker", "circle_waypoints",
]
