"""
Tests for optimizers/pso.py

Momentum, memory, and the swarm's knowledge.
"""

import math

import numpy as np
import pytest

from bio_swarm.optimizers.pso import PSOConfig, PSOEngine, pso_velocity


class TestPSOConfig:
    """Tests for PSOConfig validation."""

    def test_defaults(self):
        config = PSOConfig()
        assert config.inertia == 0.7
        assert config.cognitive == 2.0
        assert config.social == 2.0
        assert config.max_velocity == 5.0
        assert config.bounds == 100.0
        assert config.history_length == 200

    def test_out_of_range_rejected(self):
        """Coefficients outside the recognized ranges fail fast."""
        with pytest.raises(ValueError):
            PSOConfig(inertia=1.5)
        with pytest.raises(ValueError):
            PSOConfig(social=-0.1)
        with pytest.raises(ValueError):
            PSOConfig(bounds=0.0)
        with pytest.raises(ValueError):
            PSOConfig(dimensions=4)


class TestVelocityRule:
    """Tests for pso_velocity."""

    def test_pulls_toward_bests(self):
        """With no momentum the particle heads toward pbest and gbest."""
        v = pso_velocity(
            velocity=np.zeros(2), position=np.zeros(2),
            pbest=np.array([1.0, 0.0]), gbest=np.array([0.0, 1.0]),
            inertia=0.7, cognitive=2.0, social=2.0, r1=0.5, r2=0.5,
        )
        assert np.allclose(v, [1.0, 1.0])


class TestPSOEngine:
    """Tests for the engine tick."""

    def test_speed_capped_every_tick(self):
        """No particle exceeds max_velocity after any update."""
        engine = PSOEngine(PSOConfig(num_particles=25, seed=42))
        for _ in range(50):
            engine.step()
            for p in engine.particles:
                assert np.linalg.norm(p.velocity) <= engine.config.max_velocity + 1e-9

    def test_gbest_monotonic(self):
        """Global-best cost never increases."""
        engine = PSOEngine(PSOConfig(num_particles=20, seed=42))
        for _ in range(100):
            engine.step()
        history = engine.get_history()
        assert all(b <= a for a, b in zip(history, history[1:]))
        assert history[-1] < history[0]

    def test_inertia_decay(self):
        """Single particle, no attraction: v_n = 0.7^n * v_0."""
        v0 = np.array([1.0, 2.0])
        engine = PSOEngine(
            PSOConfig(num_particles=1, inertia=0.7, cognitive=0.0, social=0.0, seed=42),
            initial_positions=[[0.0, 0.0]],
            initial_velocities=[v0],
        )
        for n in range(1, 11):
            engine.step()
            np.testing.assert_allclose(engine.particles[0].velocity, 0.7 ** n * v0)

    def test_bounce(self):
        """Crossing the bound clamps the axis and reflects at half speed."""
        engine = PSOEngine(
            PSOConfig(num_particles=1, inertia=1.0, cognitive=0.0, social=0.0, seed=42),
            initial_positions=[[99.0, 0.0]],
            initial_velocities=[[5.0, 0.0]],
        )
        engine.step()
        particle = engine.particles[0]
        assert particle.position[0] == pytest.approx(100.0)
        assert particle.velocity[0] == pytest.approx(-2.5)
        assert particle.velocity[1] == pytest.approx(0.0)

    def test_positions_stay_in_bounds(self):
        engine = PSOEngine(PSOConfig(num_particles=30, seed=42))
        for _ in range(100):
            engine.step()
        for _, pos in engine.positions():
            assert np.all(np.abs(pos) <= engine.config.bounds)

    def test_best_before_and_after(self):
        """No best before the first evaluation."""
        engine = PSOEngine(PSOConfig(num_particles=5, seed=42))
        position, cost = engine.get_best()
        assert position is None
        assert math.isinf(cost)
        engine.step()
        position, cost = engine.get_best()
        assert position is not None
        assert cost == pytest.approx(float(np.dot(position, position)))

    def test_history_bounded(self):
        engine = PSOEngine(PSOConfig(num_particles=3, history_length=10, seed=42))
        for _ in range(25):
            engine.step()
        assert len(engine.get_history()) == 10

    def test_empty_swarm(self):
        """Zero particles: ticks run, nothing divides by zero."""
        engine = PSOEngine(PSOConfig(num_particles=0, seed=42))
        engine.step()
        assert engine.iteration == 1
        assert engine.positions() == []

    def test_custom_objective(self):
        """Any callable can be minimized."""
        target = np.array([10.0, -20.0])
        engine = PSOEngine(
            PSOConfig(num_particles=30, seed=42),
            objective=lambda x: float(np.sum((x - target) ** 2)),
        )
        for _ in range(200):
            engine.step()
        position, _ = engine.get_best()
        assert np.linalg.norm(position - target) < 5.0

    def test_tune_clamps(self):
        """Live changes are clamped into the recognized ranges."""
        engine = PSOEngine(PSOConfig(num_particles=2, seed=42))
        engine.tune(inertia=3.0, cognitive=-1.0, social=2.5)
        assert engine.inertia == 1.0
        assert engine.cognitive == 0.0
        assert engine.social == 2.5

    def test_tune_rejects_nan(self):
        """A NaN coefficient is refused and the old value kept."""
        engine = PSOEngine(PSOConfig(num_particles=2, seed=42))
        with pytest.raises(ValueError):
            engine.tune(inertia=float("nan"))
        assert engine.inertia == 0.7
        engine.step()
        for particle in engine.particles:
            assert np.all(np.isfinite(particle.position))

    def test_seeded_runs_repeat(self):
        a = PSOEngine(PSOConfig(num_particles=10, seed=7))
        b = PSOEngine(PSOConfig(num_particles=10, seed=7))
        for _ in range(20):
            a.step()
            b.step()
        assert a.get_history() == b.get_history()
