"""
Network: who can hear whom.
"""

from .topology import NetworkNode, NetworkEdge, NetworkTopology, build_topology

__all__ = ["NetworkNode", "NetworkEdge", "NetworkTopology", "build_topology"]
