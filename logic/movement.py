"""logic/movement.py — Physics / movement system.

Moves entities with Position+Velocity.  Velocities are in u/s; authored
speeds (ship ``max_speed``, asteroid speed) are u/tick and are scaled by
``TICKS_PER_SECOND`` when turned into a Velocity.
"""

from __future__ import annotations
from core.ecs import World
from components import Position, Velocity, Player
from core.collision import aim_direction
from core.constants import MS_PER_SECOND, TICKS_PER_SECOND


def steer_player(world: World, direction: tuple[int, int]) -> None:
    """Set the player's heading from input.  ``(0, 0)`` stops the ship.

    Each axis is -1, 0 or 1; diagonals are normalised so they are not
    faster than straight lines.
    """
    for eid, player, vel in world.query(Player, Velocity):
        player.direction = direction
        dx, dy = direction
        if dx == 0 and dy == 0:
            vel.x = 0.0
            vel.y = 0.0
            continue
        heading = aim_direction(0.0, 0.0, dx, dy)
        speed = player.max_speed * TICKS_PER_SECOND
        vel.x = heading.x * speed
        vel.y = heading.y * speed


def velocity_towards(origin: Position, target_x: float, target_y: float,
                     speed: float) -> Velocity:
    """Velocity of *speed* u/tick from *origin* toward a point."""
    heading = aim_direction(origin.x, origin.y, target_x, target_y)
    return Velocity(heading.x * speed * TICKS_PER_SECOND,
                    heading.y * speed * TICKS_PER_SECOND)


def movement_system(world: World, dt_ms: float) -> None:
    """Integrate Position from Velocity."""
    dt = dt_ms / MS_PER_SECOND
    for eid, pos, vel in world.query(Position, Velocity):
        pos.x += vel.x * dt
        pos.y += vel.y * dt
