"""
formation/generator.py

Formations are pure geometry: slot index in, target position out.

Nothing here knows about drones, only about where N points should sit
around a center. Every pattern except Random is deterministic.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional
import math
import numpy as np

from bio_swarm.core.vector import VectorLike, as_vector

V_ANGLE = math.pi / 6.0  # 30 degrees


class FormationType(Enum):
    """Recognized formation patterns."""
    VFORMATION = "vformation"
    CIRCLE = "circle"
    LINE = "line"
    GRID = "grid"
    RANDOM = "random"

    @classmethod
    def parse(cls, value) -> "FormationType":
        """Accept an enum member or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "").replace("_", "")
        aliases = {"v": cls.VFORMATION, "vform": cls.VFORMATION}
        if key in aliases:
            return aliases[key]
        for member in cls:
            if member.value == key:
                return member
        names = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown formation '{value}' (expected one of: {names})")


# Order used when cycling through formations (demo showcase)
SHOWCASE_ORDER = (
    FormationType.CIRCLE,
    FormationType.GRID,
    FormationType.VFORMATION,
    FormationType.LINE,
    FormationType.RANDOM,
)


@dataclass
class FormationParams:
    """Spacing parameters for every pattern."""
    v_spacing: float = 8.0
    line_spacing: float = 10.0
    grid_spacing: float = 10.0
    circle_radius: float = 15.0
    random_extent: float = 100.0    # Half-width of the Random square/cube

    def __post_init__(self):
        for name in (
            "v_spacing", "line_spacing", "grid_spacing",
            "circle_radius", "random_extent",
        ):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be finite and >= 0, got {value}")


def positions(
    pattern: FormationType,
    count: int,
    center: VectorLike,
    params: Optional[FormationParams] = None,
    rng: Optional[np.random.Generator] = None,
) -> List[np.ndarray]:
    """
    Target positions for `count` slots of `pattern` around `center`.

    The fixed patterns are laid out in the x/y plane and copy any further
    axes (altitude) from the center. Random fills a square (2D) or cube (3D)
    around the center. A single slot is always the center itself.
    """
    pattern = FormationType.parse(pattern)
    params = params or FormationParams()
    center = as_vector(center)

    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    if center.shape[0] < 2:
        raise ValueError("Formation center needs at least 2 dimensions")
    if count == 0:
        return []
    if count == 1:
        return [center.copy()]

    if pattern is FormationType.VFORMATION:
        offsets = _v_offsets(count, params.v_spacing)
    elif pattern is FormationType.CIRCLE:
        offsets = _circle_offsets(count, params.circle_radius)
    elif pattern is FormationType.LINE:
        offsets = _line_offsets(count, params.line_spacing)
    elif pattern is FormationType.GRID:
        offsets = _grid_offsets(count, params.grid_spacing)
    else:
        rng = rng if rng is not None else np.random.default_rng()
        extent = params.random_extent
        return [
            center + rng.uniform(-extent, extent, size=center.shape[0])
            for _ in range(count)
        ]

    result = []
    for dx, dy in offsets:
        slot = center.copy()
        slot[0] += dx
        slot[1] += dy
        result.append(slot)
    return result


def _v_offsets(count: int, spacing: float):
    # Two echelons trailing the leader, alternating sides
    for i in range(count):
        side = 1.0 if i % 2 == 0 else -1.0
        row = i // 2
        yield (
            -row * spacing * math.cos(V_ANGLE),
            side * row * spacing * math.sin(V_ANGLE),
        )


def _circle_offsets(count: int, radius: float):
    for i in range(count):
        angle = 2.0 * math.pi * i / count
        yield radius * math.cos(angle), radius * math.sin(angle)


def _line_offsets(count: int, spacing: float):
    start = -(count - 1) * spacing / 2.0
    for i in range(count):
        yield start + i * spacing, 0.0


def _grid_offsets(count: int, spacing: float):
    cols = math.ceil(math.sqrt(count))
    rows = math.ceil(count / cols)
    x0 = (cols - 1) * spacing / 2.0
    y0 = (rows - 1) * spacing / 2.0
    for i in range(count):
        row, col = divmod(i, cols)
        yield col * spacing - x0, row * spacing - y0
