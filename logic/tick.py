"""logic/tick.py — System tick orchestration.

One call to ``tick_combat()`` advances the arena by one frame.  The
order is fixed and gameplay depends on it:

    clock → spawner → ledger → loadout → movement → collisions
          → projectiles → bounds/cull → event drain → purge

Randomness comes from *rng* (anything with ``random()``), so a seeded
``random.Random`` replays a fight exactly.

Usage::

    from logic.tick import tick_combat
    tick_combat(world, 1000 / 60)
"""

from __future__ import annotations
import random
from typing import TYPE_CHECKING

from components import GameClock, Loadout, Player
from core.events import EventBus
from logic.combat.collision import bounds_system, collision_system
from logic.combat.ledger import ledger_system
from logic.combat.loadout import loadout_system
from logic.combat.projectiles import projectile_system
from logic.movement import movement_system, steer_player
from logic.spawner import spawner_system

if TYPE_CHECKING:
    from core.ecs import World


# ── Input ────────────────────────────────────────────────────────────

def input_system(world: "World", *, direction: tuple[int, int] | None = None,
                 aim: tuple[float, float] | None = None,
                 firing: bool | None = None) -> None:
    """Feed discrete input into the player ship.  ``None`` leaves a field as is."""
    if direction is not None:
        steer_player(world, direction)
    for eid, _player, loadout in world.query(Player, Loadout):
        if aim is not None:
            loadout.aim = aim
        if firing is not None:
            loadout.firing = firing


# ── Frame ────────────────────────────────────────────────────────────

def tick_combat(world: "World", dt_ms: float, rng=random, *,
                skip_spawner: bool = False) -> None:
    """Run all combat systems for one frame.

    Parameters
    ----------
    world : World
        The ECS world.
    dt_ms : float
        Frame time in milliseconds.
    rng
        Random source for spawns, avoidance, evasion and crits.
    skip_spawner : bool
        Don't spawn asteroids (scripted fights, tests).
    """
    clock = world.res(GameClock)
    if clock:
        clock.time += dt_ms

    if not skip_spawner:
        spawner_system(world, dt_ms, rng)

    ledger_system(world, dt_ms)
    loadout_system(world, dt_ms)

    # Physics
    movement_system(world, dt_ms)
    collision_system(world, rng)
    projectile_system(world, dt_ms, rng)
    bounds_system(world)

    # Event bus drain
    bus = world.res(EventBus)
    if bus:
        bus.drain()

    world.purge()
