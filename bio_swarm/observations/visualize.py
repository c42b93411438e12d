"""
observations/visualize.py

Watch. Learn. Adjust.

You cannot tune what you cannot see. A top-down view of the swarm:
drones by role, links by quality, slots, trails, and the ant colony's
world when ACO is running.
"""

from __future__ import annotations
from collections import deque
from typing import Deque, Optional, TYPE_CHECKING
import numpy as np

from bio_swarm.core.agent import FormationRole
from bio_swarm.environments.config import AlgorithmType

if TYPE_CHECKING:
    from bio_swarm.environments.swarm_field import SwarmSimulation

ROLE_COLORS = {
    FormationRole.ALPHA: '#f72585',
    FormationRole.BETA: '#ff9e00',
    FormationRole.DELTA: '#ffd60a',
    FormationRole.OMEGA: '#4cc9f0',
}


class SwarmVisualizer:
    """
    Top-down matplotlib view of a SwarmSimulation.

    matplotlib is imported on first render, so importing this module
    costs nothing in headless runs.
    """

    def __init__(
        self,
        sim: SwarmSimulation,
        figsize: tuple = (10, 10),
        extent: float = 120.0,
        history_length: int = 50,
    ):
        self.sim = sim
        self.figsize = figsize
        self.extent = extent

        self.position_history: Deque[np.ndarray] = deque(maxlen=history_length)

        self._plt = None
        self._fig = None
        self._ax = None

    def _setup_plot(self):
        import matplotlib.pyplot as plt
        self._plt = plt

        self._fig, self._ax = plt.subplots(figsize=self.figsize)
        self._fig.patch.set_facecolor('#16213e')

    def record_frame(self) -> None:
        """Record current positions."""
        self.position_history.append(self.sim.get_positions().copy())

    def render(
        self,
        show_network: bool = True,
        show_targets: bool = True,
        show_trails: bool = True,
        pause: bool = True,
    ) -> None:
        """Draw the current state. `pause=False` for headless frame dumps."""
        if self._plt is None:
            self._setup_plot()

        ax = self._ax
        ax.clear()
        ax.set_xlim(-self.extent, self.extent)
        ax.set_ylim(-self.extent, self.extent)
        ax.set_aspect('equal')
        ax.set_facecolor('#1a1a2e')

        if self.sim.active_algorithm is AlgorithmType.ACO:
            self._render_colony()

        if show_network:
            self._render_network()

        if show_trails:
            self._render_trails()

        positions = self.sim.get_positions()
        if len(positions) > 0:
            if show_targets:
                targets = self.sim.get_targets()
                ax.scatter(
                    targets[:, 0], targets[:, 1],
                    marker='x', color='white', alpha=0.3, s=20,
                )
            colors = [ROLE_COLORS[d.role] for d in self.sim.drones]
            ax.scatter(
                positions[:, 0], positions[:, 1],
                c=colors, s=50, alpha=0.9, edgecolors='white', linewidths=0.5,
            )

        m = self.sim.metrics()
        title = (
            f"t={self.sim.time_step} | {self.sim.active_algorithm.value.upper()} | "
            f"{self.sim.formation.value} | drones={m.drone_count} | "
            f"error={m.formation_error:.2f}"
        )
        if self.sim.scenario_name:
            title = f"[{self.sim.scenario_name}] " + title
        ax.set_title(title, color='white', fontsize=11)

        if pause:
            self._plt.pause(0.01)

    def _render_network(self) -> None:
        topology = self.sim.topology()
        by_id = {node.id: node.position for node in topology.nodes}
        for edge in topology.edges:
            a, b = by_id[edge.from_id], by_id[edge.to_id]
            self._ax.plot(
                [a[0], b[0]], [a[1], b[1]],
                color='#4361ee', alpha=0.1 + 0.5 * edge.link_quality, linewidth=0.8,
            )

    def _render_trails(self) -> None:
        for drone in self.sim.drones:
            if len(drone.trail) < 2:
                continue
            trail = np.array(drone.trail)
            self._ax.plot(
                trail[:, 0], trail[:, 1],
                color=ROLE_COLORS[drone.role], alpha=0.3, linewidth=1,
            )

    def _render_colony(self) -> None:
        import matplotlib.patches as patches

        engine = self.sim.engines.get(AlgorithmType.ACO)
        if engine is None:
            return

        for obstacle in engine.obstacles:
            self._ax.add_patch(patches.Circle(
                (obstacle.center[0], obstacle.center[1]), obstacle.radius,
                color='#6c757d', alpha=0.5,
            ))
        for trail in engine.pheromones:
            self._ax.plot(
                [trail.start[0], trail.end[0]], [trail.start[1], trail.end[1]],
                color='#80ffdb', alpha=0.6 * trail.strength, linewidth=1,
            )
        if engine.best_path_found:
            path = np.array(engine.best_path)
            self._ax.plot(path[:, 0], path[:, 1], color='#ffd60a', linewidth=2)

        ants = np.array([pos for _, pos in engine.positions()])
        if len(ants) > 0:
            self._ax.scatter(ants[:, 0], ants[:, 1], color='#b5e48c', s=10)

    def save_frame(self, path: str) -> None:
        """Save current frame to file."""
        if self._fig is not None:
            self._fig.savefig(path, dpi=150, facecolor=self._fig.get_facecolor())

    def close(self) -> None:
        """Close the visualization."""
        if self._plt is not None:
            self._plt.close(self._fig)
            self._plt = None
            self._fig = None
            self._ax = None


def animate_run(
    sim: SwarmSimulation,
    steps: int = 100,
    algorithm: Optional[str] = None,
    save_path: Optional[str] = None,
) -> None:
    """
    Run and animate a simulation.

    Watch before you tune.
    """
    viz = SwarmVisualizer(sim)

    try:
        for _ in range(steps):
            sim.step(algorithm)
            viz.record_frame()
            viz.render()

        if save_path:
            viz.save_frame(save_path)

    finally:
        viz.close()
