"""logic/combat/damage.py — Canonical damage application and death sequence.

Every code-path that deals damage (projectile hits, explosions, ramming)
funnels through ``take_damage()`` so the defence layers always apply in
the same order:

    avoidance → damage taken → evasion → armour → shields → HP

Random numbers are drawn in a fixed order (avoidance, then the evasion
remainder) from *rng*, any object with a ``random()`` method.  Pass a
seeded ``random.Random`` or a stub for deterministic tests.

``on_kill()`` applies the killer's life/armour-on-kill bonuses and
``handle_death()`` centralises the death pipeline (event → log → kill)
so all damage sources share it.
"""

from __future__ import annotations
import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from components import CombatStats, CombatLog, Player, GameClock
from components.stats import Stat, Tag
from core.collision import round_half_up
from core.events import EventBus, EntityDied
from logic.stats import calculate_final_stat

if TYPE_CHECKING:
    from core.ecs import World


@dataclass
class DamageResult:
    """Outcome of one ``take_damage`` call."""
    avoided: bool = False
    damage: float = 0.0               # post-mitigation, before HP rounding
    absorbed_by_shields: bool = False


def take_damage(stats: CombatStats, raw_damage: float,
                tags: Iterable[Tag | str] = (), rng=random) -> DamageResult:
    """Run one hit of *raw_damage* through the defence layers of *stats*.

    A hit that lands always does at least 1 damage.  Shields, while up,
    absorb the whole hit even if it exceeds them.
    """
    tags = list(tags)
    adjustments = stats.effective_adjustments()

    # ── Avoidance ────────────────────────────────────────────────────
    avoidance = calculate_final_stat(Stat.AVOIDANCE, tags, 0.0, adjustments)
    if rng.random() < avoidance:
        return DamageResult(avoided=True)

    # ── Damage taken modifiers ───────────────────────────────────────
    damage = calculate_final_stat(Stat.DAMAGE_TAKEN, tags, raw_damage, adjustments)

    # ── Evasion (stacks past 100 %) ──────────────────────────────────
    evade_chance = calculate_final_stat(Stat.EVADE_CHANCE, [], stats.evade_chance, adjustments)
    evade_effect = calculate_final_stat(Stat.EVADE_EFFECT, [], stats.evade_effect, adjustments)
    stacks = math.floor(evade_chance)
    evade_multiplier = (1.0 - evade_effect) ** stacks if stacks > 0 else 1.0
    if rng.random() < evade_chance - stacks:
        evade_multiplier *= 1.0 - evade_effect

    # ── Armour ───────────────────────────────────────────────────────
    reduction = 0.0
    if stats.armour > 0:
        reduction = calculate_final_stat(Stat.ARMOUR_CLASS, [], stats.armour_class, adjustments)

    final = max(1.0, damage * evade_multiplier - reduction)

    # ── Shields, then HP ─────────────────────────────────────────────
    shielded = stats.shields > 0
    if shielded:
        stats.shields = max(0.0, stats.shields - final)
    else:
        stats.hp -= round_half_up(final)
        if stats.armour > 0:
            stats.armour = max(0.0, stats.armour - final)

    stats.time_since_last_hit = 0.0
    return DamageResult(damage=final, absorbed_by_shields=shielded)


def on_kill(stats: CombatStats, victim: CombatStats | None = None) -> None:
    """Grant *stats* its on-kill bonuses.

    HP on kill heals while damaged; at full HP it tops up armour
    instead.  Armour on kill always goes to armour.  Armour never
    exceeds ``max_armour``.
    """
    adjustments = stats.effective_adjustments()
    gain = calculate_final_stat(Stat.HP_ON_KILL, [], 0.0, adjustments)
    if gain > 0:
        if stats.hp < stats.max_hp:
            stats.hp = min(stats.max_hp, stats.hp + gain)
        else:
            stats.armour = min(stats.max_armour, stats.armour + gain)

    armour_gain = calculate_final_stat(Stat.ARMOUR_ON_KILL, [], 0.0, adjustments)
    if armour_gain > 0:
        stats.armour = min(stats.max_armour, stats.armour + armour_gain)


# ── Death sequence ───────────────────────────────────────────────────

def handle_death(world: "World", dead_eid: int, killer_eid: int | None = None) -> None:
    """Unified death sequence: event → log → kill.

    Called from projectile hits, ramming and the cull pass.  Idempotent:
    an entity already marked dead is ignored.
    """
    if not world.alive(dead_eid):
        return
    bus = world.res(EventBus)
    if bus:
        stats = world.get(dead_eid, CombatStats)
        bus.emit(EntityDied(eid=dead_eid, killer_eid=killer_eid,
                            side=stats.side if stats else ""))
    log = world.res(CombatLog)
    if log:
        clock = world.res(GameClock)
        log.record(dead_eid, "kill", "destroyed",
                   t=clock.time if clock else 0.0,
                   details={"killer": killer_eid})
    if world.has(dead_eid, Player):
        print("[COMBAT] Player down!")
    else:
        print(f"[COMBAT] Entity {dead_eid} destroyed")
    world.kill(dead_eid)

