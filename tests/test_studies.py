"""
Smoke tests for the studies.

Studies print; here they only need to finish.
"""

import importlib

import pytest


@pytest.fixture
def formation_flight():
    return importlib.import_module("bio_swarm.studies.01_formation_flight.observe")


@pytest.fixture
def optimizer_tour():
    return importlib.import_module("bio_swarm.studies.02_optimizer_tour.observe")


class TestFormationFlightStudy:
    """Tests for study 01."""

    def test_runs(self, formation_flight, capsys):
        formation_flight.run_study(n_drones=6, phase_steps=10, hunt_steps=10, seed=42)
        out = capsys.readouterr().out
        assert "Phase 3" in out
        assert "Study complete" in out

    def test_runs_from_yaml(self, formation_flight, tmp_path, capsys):
        path = tmp_path / "flight.yaml"
        path.write_text("formation: line\nseed: 3\n")
        formation_flight.run_study(n_drones=4, phase_steps=5, hunt_steps=5, config_path=str(path))
        assert "Observations" in capsys.readouterr().out


class TestOptimizerTourStudy:
    """Tests for study 02."""

    def test_runs(self, optimizer_tour, capsys):
        optimizer_tour.run_study(iterations=60, particles=10, wolves=8, ants=5, seed=42)
        out = capsys.readouterr().out
        assert "PSO (sphere)" in out
        assert "ACO completed tours" in out

    def test_guided(self, optimizer_tour, capsys):
        optimizer_tour.run_study(iterations=30, particles=5, wolves=5, ants=5, guided=True, seed=42)
        assert "Study complete" in capsys.readouterr().out
