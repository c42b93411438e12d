"""
Tests for observations/visualize.py

Rendered headless on the Agg backend.
"""

import matplotlib
matplotlib.use("Agg")

import pytest

from bio_swarm.environments.config import SimulationConfig
from bio_swarm.environments.swarm_field import SwarmSimulation
from bio_swarm.observations.visualize import SwarmVisualizer


@pytest.fixture
def sim():
    return SwarmSimulation(SimulationConfig(seed=42), drone_count=6)


class TestSwarmVisualizer:
    """Tests for SwarmVisualizer."""

    def test_lazy_matplotlib(self, sim):
        """Nothing is plotted until the first render."""
        viz = SwarmVisualizer(sim)
        assert viz._fig is None
        viz.close()

    def test_history_bounded(self, sim):
        viz = SwarmVisualizer(sim, history_length=5)
        for _ in range(12):
            sim.step("pso")
            viz.record_frame()
        assert len(viz.position_history) == 5
        assert viz.position_history[-1].shape == (6, 3)

    def test_render_and_save(self, sim, tmp_path):
        viz = SwarmVisualizer(sim)
        try:
            for _ in range(3):
                sim.step("pso")
                viz.render(pause=False)
            path = tmp_path / "frame.png"
            viz.save_frame(str(path))
            assert path.exists()
        finally:
            viz.close()

    def test_render_colony(self, sim):
        """ACO view draws obstacles, pheromones and ants."""
        sim.engine("aco")
        viz = SwarmVisualizer(sim)
        try:
            for _ in range(5):
                sim.step("aco")
            viz.render(pause=False)
            assert len(viz._ax.patches) == 3
        finally:
            viz.close()
