"""logic/spawner.py — Asteroid spawning.

Asteroids appear at a random point in the arena on a fixed interval and
drift toward wherever the player was at spawn time.  Bigger rocks are
slower: speed is ``ceil(3 / ceil(r × max_hp + 1))`` u/tick.
"""

from __future__ import annotations
import math
import random
from typing import TYPE_CHECKING

from components import Arena, Collider, CombatStats, Player, Position, Spawner
from core.constants import SIDE_ENEMY
from logic.movement import velocity_towards

if TYPE_CHECKING:
    from core.ecs import World


def spawn_asteroid(world: "World", rng=random, scale: float = 1.0) -> int:
    """Spawn one asteroid.  HP is ``ceil(r × 20 + 10) × scale``."""
    arena = world.res(Arena) or Arena()
    size = math.ceil(rng.random() * 20 + 10) * scale
    pos = Position(rng.random() * arena.width, rng.random() * arena.height)
    stats = CombatStats(side=SIDE_ENEMY, base_max_hp=size)

    target = world.query_one(Player, Position)
    if target is not None:
        _, _player, ppos = target
        tx, ty = ppos.x, ppos.y
    else:
        tx, ty = arena.width / 2, arena.height / 2
    speed = math.ceil(3 / math.ceil(rng.random() * stats.max_hp + 1)) * scale

    return world.spawn(pos, velocity_towards(pos, tx, ty, speed),
                       Collider(radius=size + 10), stats)


def spawner_system(world: "World", dt_ms: float, rng=random) -> int:
    """Spawn asteroids as the interval elapses.  Returns how many spawned."""
    spawner = world.res(Spawner)
    if spawner is None or not spawner.running or spawner.interval_ms <= 0:
        return 0
    spawner.elapsed_ms += dt_ms
    spawned = 0
    while spawner.elapsed_ms >= spawner.interval_ms:
        spawner.elapsed_ms -= spawner.interval_ms
        spawn_asteroid(world, rng, spawner.scale)
        spawned += 1
    return spawned
