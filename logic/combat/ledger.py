"""logic/combat/ledger.py — Per-tick upkeep of an entity's combat stats.

``update_combat_stats()`` runs once per tick for every ``CombatStats``:
buff timers, conditional passives, the combined adjustment tree,
derived maxima and shield recharge.  Order matters:

  1. Advance the hit timer; count buffs down.
  2. Fire ``expire`` on buffs that ran out, then drop them.
  3. Evaluate conditional passives against the current fields.
  4. Flatten base + buffs + satisfied conditionals into the cache.
  5. Recompute max HP / shields / armour.
  6. Recharge shields.

Everything is synchronous.  An ``expire`` callback that raises aborts
the update for that entity and propagates to the caller.
"""

from __future__ import annotations
import operator
from numbers import Real
from typing import TYPE_CHECKING

from components import CombatStats, ConditionalPassive, CombatLog, GameClock
from components.stats import Stat
from core.constants import MS_PER_SECOND
from core.events import EventBus, BuffExpired
from logic.stats import calculate_final_stat, flatten_stat_adjustments

if TYPE_CHECKING:
    from core.ecs import World


_OPS = {
    "==": operator.eq,
    ">=": operator.ge,
    "<=": operator.le,
}


def update_combat_stats(stats: CombatStats, dt_ms: float) -> list[str]:
    """Advance *stats* by *dt_ms*.  Returns the names of expired buffs."""
    stats.time_since_last_hit += dt_ms

    # ── Buff countdown + expiry ──────────────────────────────────────
    for buff in stats.buffs:
        buff.remaining_ms -= dt_ms
    expired = [b for b in stats.buffs if b.remaining_ms <= 0]
    for buff in expired:
        if buff.expire is not None:
            buff.expire(stats)
    if expired:
        # by identity: an expire callback may have appended new buffs
        gone = {id(b) for b in expired}
        stats.buffs = [b for b in stats.buffs if id(b) not in gone]

    # ── Combined adjustment tree ─────────────────────────────────────
    layers = [stats.base_adjustments]
    layers.extend(b.stat_adjustments for b in stats.buffs
                  if b.stat_adjustments is not None)
    layers.extend(c.stat_adjustments for c in stats.conditionals
                  if condition_met(stats, c))
    effective = flatten_stat_adjustments(layers)
    stats._set_effective(effective)

    # ── Derived maxima ───────────────────────────────────────────────
    new_max_hp = calculate_final_stat(Stat.MAX_HP, [], stats.base_max_hp, effective)
    if new_max_hp != stats.max_hp:
        ratio = stats.hp / stats.max_hp if stats.max_hp > 0 else 1.0
        stats.max_hp = new_max_hp
        stats.hp = ratio * new_max_hp

    stats.max_shields = calculate_final_stat(
        Stat.MAX_SHIELDS, [], stats.base_max_shields, effective)
    stats.shields = min(stats.shields, stats.max_shields)

    new_max_armour = calculate_final_stat(
        Stat.ARMOUR, [], stats.base_max_armour, effective)
    if new_max_armour != stats.max_armour:
        stats.armour = max(0.0, stats.armour + new_max_armour - stats.max_armour)
        stats.max_armour = new_max_armour

    # ── Shield recharge ──────────────────────────────────────────────
    if (stats.shields != stats.max_shields
            and stats.time_since_last_hit >= stats.shield_recharge_threshold):
        stats.shields = min(
            stats.max_shields,
            stats.shields + stats.shield_recharge_rate * stats.max_shields
            * dt_ms / MS_PER_SECOND,
        )

    assert stats.hp <= stats.max_hp + 1e-9, "hp exceeds max_hp"
    assert stats.shields <= stats.max_shields + 1e-9, "shields exceed max_shields"
    return [b.name for b in expired]


def condition_met(stats: CombatStats, passive: ConditionalPassive) -> bool:
    """True while the passive's ``(field, op, value)`` holds for *stats*."""
    field_name, op, value = passive.condition
    compare = _OPS.get(op)
    if compare is None:
        return False
    current = getattr(stats, field_name, None)
    if isinstance(current, bool) or not isinstance(current, Real):
        return False
    return compare(current, value)


def ledger_system(world: "World", dt_ms: float) -> None:
    """Run ``update_combat_stats`` for every combat entity in *world*."""
    bus = world.res(EventBus)
    log = world.res(CombatLog)
    clock = world.res(GameClock)
    now = clock.time if clock else 0.0
    for eid, stats in world.query(CombatStats):
        for name in update_combat_stats(stats, dt_ms):
            if bus:
                bus.emit(BuffExpired(eid=eid, name=name))
            if log:
                log.record(eid, "buff", f"{name or 'buff'} expired", t=now)
