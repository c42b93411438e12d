"""
Metrics: read-only views of the swarm's shape and motion.
"""

from .swarm_metrics import SwarmMetrics, compute_metrics

__all__ = ["SwarmMetrics", "compute_metrics"]
