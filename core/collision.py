"""core/collision.py — Low-level geometry primitives for the arena.

These live in ``core/`` (not ``logic/``) because both the collision
system and the projectile system need them.  Positions are
``pygame.math.Vector2`` or anything with ``x``/``y`` attributes.
"""

from __future__ import annotations
import math

from pygame.math import Vector2


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounded up.

    Python's ``round()`` is banker's rounding (``round(2.5) == 2``); the
    damage and projectile-count rules expect ``2.5 → 3``.
    """
    return int(math.floor(value + 0.5))


def circles_overlap(ax: float, ay: float, ar: float,
                    bx: float, by: float, br: float) -> bool:
    """True if two circles intersect or touch."""
    reach = ar + br
    return Vector2(ax - bx, ay - by).length_squared() <= reach * reach


def aim_direction(origin_x: float, origin_y: float,
                  target_x: float, target_y: float) -> Vector2:
    """Unit vector from origin toward target.

    A zero-length aim (target on top of origin) points along +x.
    """
    d = Vector2(target_x - origin_x, target_y - origin_y)
    if d.length_squared() == 0:
        return Vector2(1.0, 0.0)
    return d.normalize()


def outside_bounds(x: float, y: float, radius: float,
                   width: float, height: float) -> bool:
    """True once the circle has fully left the ``width×height`` arena."""
    return (x + radius < 0 or y + radius < 0
            or x - radius > width or y - radius > height)


def wrap_position(x: float, y: float, width: float,
                  height: float) -> tuple[float, float]:
    """Wrap a point that left the arena to the opposite edge."""
    if x > width:
        x = 0.0
    elif x < 0:
        x = width
    elif y > height:
        y = 0.0
    elif y < 0:
        y = height
    return x, y
