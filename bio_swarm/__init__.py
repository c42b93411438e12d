"""
Bio-Swarm: Bio-Inspired Coordination for Multi-Drone Swarms

Particle swarms, wolf packs and ant colonies steering a formation of
drones toward a goal, with the communication graph and swarm metrics
recomputed every tick.
"""

__version__ = "0.1.0"
