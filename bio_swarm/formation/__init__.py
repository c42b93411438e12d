"""
Formation geometry.

- generator: pattern + slot count -> ordered target positions
"""

from .generator import FormationType, FormationParams, positions, SHOWCASE_ORDER

__all__ = ["FormationType", "FormationParams", "positions", "SHOWCASE_ORDER"]
