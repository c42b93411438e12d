"""
network/topology.py

Communication graph of the swarm.

Two drones can talk when they are closer than the radio range. Link
quality falls off linearly with distance; round-trip time grows with it.
The graph is rebuilt from scratch every tick, never patched.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set
import logging
import numpy as np

from bio_swarm.core.vector import pairwise_distances

logger = logging.getLogger(__name__)


@dataclass
class NetworkNode:
    id: int
    position: np.ndarray
    neighbor_count: int = 0


@dataclass
class NetworkEdge:
    """One link, stored once per unordered pair (from_id < to_id by index)."""
    from_id: int
    to_id: int
    link_quality: float   # 1.0 at zero distance, 0.0 at the range limit
    rtt_ms: float


@dataclass
class NetworkTopology:
    """Snapshot of the communication graph."""
    nodes: List[NetworkNode] = field(default_factory=list)
    edges: List[NetworkEdge] = field(default_factory=list)

    def neighbors_of(self, node_id: int) -> Set[int]:
        """Ids linked to `node_id`."""
        linked = set()
        for edge in self.edges:
            if edge.from_id == node_id:
                linked.add(edge.to_id)
            elif edge.to_id == node_id:
                linked.add(edge.from_id)
        return linked

    def adjacency(self) -> Dict[int, Set[int]]:
        adj: Dict[int, Set[int]] = {node.id: set() for node in self.nodes}
        for edge in self.edges:
            adj[edge.from_id].add(edge.to_id)
            adj[edge.to_id].add(edge.from_id)
        return adj

    def is_connected(self) -> bool:
        """True if every node can reach every other through some path."""
        if len(self.nodes) <= 1:
            return True
        adj = self.adjacency()
        start = self.nodes[0].id
        seen = {start}
        frontier = [start]
        while frontier:
            current = frontier.pop()
            for nxt in adj[current]:
                if nxt not in seen:
                    seen.add(nxt)
                    frontier.append(nxt)
        return len(seen) == len(self.nodes)

    def mean_link_quality(self) -> float:
        if not self.edges:
            return 0.0
        return float(np.mean([e.link_quality for e in self.edges]))

    def __repr__(self) -> str:
        return f"NetworkTopology(nodes={len(self.nodes)}, edges={len(self.edges)})"


def build_topology(
    ids: Sequence[int],
    positions: Sequence[np.ndarray],
    comm_range: float = 80.0,
    latency_per_unit: float = 0.5,
) -> NetworkTopology:
    """
    Build the graph of every pair strictly closer than `comm_range`.

    Neighbor counts include both endpoints of each link.
    """
    if not comm_range > 0:
        raise ValueError(f"comm_range must be > 0, got {comm_range}")
    if latency_per_unit < 0:
        raise ValueError(f"latency_per_unit must be >= 0, got {latency_per_unit}")
    if len(ids) != len(positions):
        raise ValueError(f"Got {len(ids)} ids but {len(positions)} positions")
    if len(set(ids)) != len(ids):
        raise ValueError("Node ids must be unique")

    n = len(ids)
    nodes = [
        NetworkNode(id=ids[i], position=np.array(positions[i], dtype=np.float64))
        for i in range(n)
    ]
    if n == 0:
        return NetworkTopology()

    dist = pairwise_distances(np.array([node.position for node in nodes]))
    edges = []
    for i in range(n):
        for j in range(i + 1, n):
            d = float(dist[i, j])
            if d < comm_range:
                edges.append(NetworkEdge(
                    from_id=ids[i],
                    to_id=ids[j],
                    link_quality=1.0 - d / comm_range,
                    rtt_ms=d * latency_per_unit,
                ))
                nodes[i].neighbor_count += 1
                nodes[j].neighbor_count += 1

    return NetworkTopology(nodes=nodes, edges=edges)
