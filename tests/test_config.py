"""
Tests for environments/config.py

Defaults, validation, YAML.
"""

import pytest

from bio_swarm.environments.config import AlgorithmType, SimulationConfig, load_config
from bio_swarm.formation.generator import FormationType


class TestAlgorithmType:
    """Tests for algorithm name parsing."""

    def test_parse(self):
        assert AlgorithmType.parse("pso") is AlgorithmType.PSO
        assert AlgorithmType.parse(" GWO ") is AlgorithmType.GWO
        assert AlgorithmType.parse(AlgorithmType.ACO) is AlgorithmType.ACO

    def test_unknown_raises(self):
        """Unknown names fail instead of falling back to PSO."""
        with pytest.raises(ValueError):
            AlgorithmType.parse("bees")


class TestSimulationConfig:
    """Tests for SimulationConfig."""

    def test_defaults(self):
        config = SimulationConfig()
        assert config.dimensions == 3
        assert config.formation is FormationType.CIRCLE
        assert config.center == (0.0, 0.0, 10.0)
        assert config.target == (50.0, 50.0, 10.0)
        assert config.comm_range == 80.0
        assert config.trail_length == 50
        assert (config.inertia, config.cognitive, config.social) == (0.7, 1.5, 1.5)
        assert config.leader_speeds == (3.0, 2.5, 2.0)

    def test_formation_from_string(self):
        config = SimulationConfig(formation="v")
        assert config.formation is FormationType.VFORMATION

    def test_center_dimension_checked(self):
        with pytest.raises(ValueError):
            SimulationConfig(dimensions=2, center=(0.0, 0.0, 10.0))

    def test_two_dimensional_defaults(self):
        """A flat swarm takes the x/y part of the default center and target."""
        config = SimulationConfig(dimensions=2)
        assert config.center == (0.0, 0.0)
        assert config.target == (50.0, 50.0)

    def test_two_dimensional(self):
        config = SimulationConfig(dimensions=2, center=(0.0, 0.0), target=(10.0, 10.0))
        assert config.center == (0.0, 0.0)

    def test_bad_values_rejected(self):
        with pytest.raises(ValueError):
            SimulationConfig(comm_range=0.0)
        with pytest.raises(ValueError):
            SimulationConfig(max_speed=-1.0)
        with pytest.raises(ValueError):
            SimulationConfig(inertia=2.0)
        with pytest.raises(ValueError):
            SimulationConfig(leader_speeds=(1.0, 2.0))
        with pytest.raises(ValueError):
            SimulationConfig(leader_speeds=(3.0, float("nan"), 2.0))
        with pytest.raises(ValueError):
            SimulationConfig(formation="blob")


class TestFromDict:
    """Tests for SimulationConfig.from_dict and load_config."""

    def test_nested_sections(self):
        config = SimulationConfig.from_dict({
            "formation": "grid",
            "formation_params": {"grid_spacing": 12.0},
            "pso": {"num_particles": 40},
            "gwo": {"num_wolves": 25},
            "aco": {
                "num_ants": 5,
                "pheromone_guided": True,
                "obstacles": [{"center": [0.0, 0.0], "radius": 10.0}],
            },
        })
        assert config.formation is FormationType.GRID
        assert config.formation_params.grid_spacing == 12.0
        assert config.pso.num_particles == 40
        assert config.gwo.num_wolves == 25
        assert config.aco.pheromone_guided is True
        assert len(config.aco.obstacles) == 1
        assert config.aco.obstacles[0].radius == 10.0

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValueError):
            SimulationConfig.from_dict({"warp_speed": 9})
        with pytest.raises(ValueError):
            SimulationConfig.from_dict({"pso": {"num_birds": 3}})
        with pytest.raises(ValueError):
            SimulationConfig.from_dict({"aco": {"obstacles": [{"center": [0, 0], "radius": 1, "height": 3}]}})

    def test_empty(self):
        config = SimulationConfig.from_dict(None)
        assert config.center == SimulationConfig().center
        assert config.pso == SimulationConfig().pso

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text(
            "dimensions: 3\n"
            "formation: vformation\n"
            "target: [30.0, 30.0, 10.0]\n"
            "comm_range: 60.0\n"
            "seed: 7\n"
            "aco:\n"
            "  evaporation_rate: 0.2\n"
        )
        config = load_config(path)
        assert config.formation is FormationType.VFORMATION
        assert config.target == (30.0, 30.0, 10.0)
        assert config.comm_range == 60.0
        assert config.seed == 7
        assert config.aco.evaporation_rate == 0.2

    def test_load_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path).dimensions == 3
