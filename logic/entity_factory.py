"""logic/entity_factory.py — Building the arena and the player ship.

``create_arena()`` returns a World with every resource the combat tick
expects (clock, arena, bus, log, spawner, session) and the player ship
spawned in the middle, already fitted from the session's skill tree.
"""

from __future__ import annotations
from typing import Iterable

from core.ecs import World
from core.events import EventBus
from core.constants import SIDE_PLAYER
from core.tuning import get as _tun
from components import (
    Arena, Collider, CombatLog, CombatStats, GameClock, Loadout, Player,
    PlayerSession, Position, Ramming, SkillClass, Spawner, Velocity,
)
from logic.skill_tree import install_scoring, new_session, refit_player


def spawn_player(world: World, x: float | None = None, y: float | None = None) -> int:
    """Spawn the player frigate (centre of the arena by default)."""
    arena = world.res(Arena) or Arena()
    eid = world.spawn(
        Player(),
        Position(arena.width / 2 if x is None else x,
                 arena.height / 2 if y is None else y),
        Velocity(),
        Collider(radius=_tun("player", "radius", 10.0)),
        CombatStats(side=SIDE_PLAYER, base_max_hp=_tun("player", "max_hp", 30.0)),
        Ramming(),
        Loadout(),
    )
    refit_player(world)
    return eid


def create_arena(classes: Iterable[SkillClass] = (),
                 session: PlayerSession | None = None) -> tuple[World, int]:
    """Fresh world with resources installed.  Returns ``(world, player_eid)``."""
    world = World()
    world.set_res(GameClock())
    world.set_res(Arena())
    world.set_res(EventBus())
    world.set_res(CombatLog())
    world.set_res(Spawner())
    world.set_res(session if session is not None else new_session(classes))
    install_scoring(world)
    player = spawn_player(world)
    return world, player
