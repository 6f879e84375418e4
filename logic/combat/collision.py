"""logic/combat/collision.py — Hull contacts, ramming damage and arena bounds.

Contacts use first-contact semantics: a pair of overlapping hulls
triggers once, and again only after they separate.  Same-side pairs
never interact.

``bounds_system()`` keeps the arena tidy: the player wraps to the
opposite edge, anything else that drifts fully outside is removed, and
combat entities at zero HP go through the death sequence.
"""

from __future__ import annotations
import math
import random
from typing import TYPE_CHECKING

from components import Arena, Collider, CombatStats, Player, Position, Ramming
from components.stats import Tag
from core.collision import circles_overlap, outside_bounds, wrap_position
from logic.combat.damage import handle_death, take_damage

if TYPE_CHECKING:
    from core.ecs import World


def collision_system(world: "World", rng=random) -> None:
    """Detect new hull contacts and apply ramming damage."""
    bodies = list(world.query(Position, Collider, CombatStats))
    for eid, pos, col, stats in bodies:
        if not world.alive(eid):
            continue
        radius = col.radius
        now: set[int] = set()
        fresh: list[tuple[int, CombatStats]] = []
        for oeid, opos, ocol, ostats in bodies:
            if oeid == eid or ostats.side == stats.side or not world.alive(oeid):
                continue
            if circles_overlap(pos.x, pos.y, radius,
                               opos.x, opos.y, ocol.radius):
                now.add(oeid)
                if oeid not in col.touching:
                    fresh.append((oeid, ostats))
        col.touching = now

        ram = world.get(eid, Ramming)
        if ram is None:
            continue
        for oeid, ostats in fresh:
            ram_damage(world, eid, stats, ram, oeid, ostats, rng)


def ram_damage(world: "World", eid: int, stats: CombatStats, ram: Ramming,
               other_eid: int, other: CombatStats, rng=random) -> bool:
    """Apply collision damage to *stats* from touching *other*.

    Takes ``ceil(fraction × own max HP + fraction × other max HP)`` with
    the ``collision`` tag, unless still inside the invulnerability window
    after the previous hit.  Returns True if damage was attempted.
    """
    if stats.time_since_last_hit < ram.invulnerability_ms:
        return False
    damage = math.ceil(stats.max_hp * ram.hp_fraction + other.max_hp * ram.hp_fraction)
    was_alive = stats.hp > 0
    take_damage(stats, damage, [Tag.COLLISION], rng)
    if was_alive and stats.hp <= 0:
        handle_death(world, eid, other_eid)
    return True


def bounds_system(world: "World") -> None:
    """Wrap the player, cull strays and clear out the dead."""
    arena = world.res(Arena)
    for eid, pos, col, stats in world.query(Position, Collider, CombatStats):
        if stats.hp <= 0:
            handle_death(world, eid)
            continue
        if arena is None:
            continue
        if outside_bounds(pos.x, pos.y, col.radius,
                          arena.width, arena.height):
            if world.has(eid, Player):
                pos.x, pos.y = wrap_position(pos.x, pos.y, arena.width, arena.height)
            else:
                world.kill(eid)
