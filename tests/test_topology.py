"""
Tests for network/topology.py

Who can hear whom, and how well.
"""

import itertools

import numpy as np
import pytest

from bio_swarm.network.topology import build_topology


class TestBuildTopology:
    """Tests for build_topology."""

    def test_edges_iff_in_range(self):
        """An edge exists exactly when the pair is closer than the range."""
        rng = np.random.default_rng(42)
        positions = rng.uniform(-100, 100, size=(20, 2))
        ids = list(range(20))
        topology = build_topology(ids, positions, comm_range=80.0)

        linked = {(e.from_id, e.to_id) for e in topology.edges}
        for i, j in itertools.combinations(ids, 2):
            in_range = np.linalg.norm(positions[i] - positions[j]) < 80.0
            assert ((i, j) in linked) == in_range

    def test_each_pair_stored_once(self):
        positions = np.zeros((5, 3))
        topology = build_topology(list(range(5)), positions)
        pairs = [frozenset((e.from_id, e.to_id)) for e in topology.edges]
        assert len(pairs) == len(set(pairs)) == 10

    def test_link_quality(self):
        """Quality in [0, 1], strictly decreasing with distance."""
        positions = np.array([[0.0, 0.0], [10.0, 0.0], [40.0, 0.0], [79.0, 0.0]])
        topology = build_topology([0, 1, 2, 3], positions, comm_range=80.0)
        from_origin = sorted(
            (e for e in topology.edges if e.from_id == 0),
            key=lambda e: e.to_id,
        )
        qualities = [e.link_quality for e in from_origin]
        assert all(0.0 <= q <= 1.0 for q in qualities)
        assert qualities == sorted(qualities, reverse=True)
        assert qualities[0] == pytest.approx(1.0 - 10.0 / 80.0)

    def test_rtt_proportional(self):
        positions = np.array([[0.0, 0.0], [20.0, 0.0]])
        topology = build_topology([0, 1], positions, latency_per_unit=0.5)
        assert topology.edges[0].rtt_ms == pytest.approx(10.0)

    def test_boundary_excluded(self):
        """Exactly at range is out of range."""
        positions = np.array([[0.0, 0.0], [80.0, 0.0]])
        topology = build_topology([0, 1], positions, comm_range=80.0)
        assert topology.edges == []

    def test_neighbor_counts_both_ends(self):
        positions = np.array([[0.0, 0.0], [10.0, 0.0], [200.0, 0.0]])
        topology = build_topology([7, 8, 9], positions)
        counts = {n.id: n.neighbor_count for n in topology.nodes}
        assert counts == {7: 1, 8: 1, 9: 0}
        assert topology.neighbors_of(7) == {8}

    def test_connectivity(self):
        chain = np.array([[0.0, 0.0], [50.0, 0.0], [100.0, 0.0]])
        assert build_topology([0, 1, 2], chain).is_connected()
        split = np.array([[0.0, 0.0], [50.0, 0.0], [300.0, 0.0]])
        assert not build_topology([0, 1, 2], split).is_connected()

    def test_empty(self):
        topology = build_topology([], [])
        assert topology.nodes == []
        assert topology.edges == []
        assert topology.is_connected()

    def test_invalid_range(self):
        with pytest.raises(ValueError):
            build_topology([0], [np.zeros(2)], comm_range=0.0)

    def test_duplicate_ids(self):
        with pytest.raises(ValueError):
            build_topology([1, 1], [np.zeros(2), np.ones(2)])
