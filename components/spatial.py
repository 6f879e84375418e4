"""components.spatial — Position, movement, and collision shapes.

All coordinates and dimensions are in arena units.
"""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class Position:
    x: float = 0.0        # u
    y: float = 0.0        # u


@dataclass
class Velocity:
    x: float = 0.0        # u/s
    y: float = 0.0        # u/s


@dataclass
class Collider:
    """Circular hull of fixed ``radius``.

    ``touching`` holds the entity ids overlapped last tick, so contact
    effects fire once per touch instead of every frame.
    """
    radius: float = 10.0  # u
    touching: set[int] = field(default_factory=set)
