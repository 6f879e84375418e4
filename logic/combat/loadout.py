"""logic/combat/loadout.py — Rate of fire, weapon cycling and tech cooldowns.

The selected weapon fires once ``shoot_time_ms`` passes the interval
``60000 / rof`` (rof stat-adjusted by the weapon's tags) while the
trigger is held.  Techs go on a cooldown shortened by the user's
``rechargeSpeed``: +50 % recharge speed turns a 6 s cooldown into 4 s.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from components import ActiveSkill, CombatLog, CombatStats, GameClock, Loadout, Weapon
from components.stats import Stat
from core.constants import MS_PER_MINUTE
from core.events import EventBus, SkillUsed
from logic.combat.projectiles import spawn_projectiles
from logic.stats import calculate_final_stat

if TYPE_CHECKING:
    from core.ecs import World


def fire_interval_ms(weapon: Weapon, stats: CombatStats) -> float:
    """Milliseconds between shots of *weapon* for *stats*."""
    rof = calculate_final_stat(Stat.ROF, weapon.tags, weapon.rof,
                               stats.effective_adjustments())
    if rof <= 0:
        return float("inf")
    return MS_PER_MINUTE / rof


def fire_weapon(world: "World", eid: int, weapon: Weapon,
                target: tuple[float, float]) -> list[int]:
    """Pull the trigger once and spawn whatever comes out."""
    if weapon.fire is None:
        return []
    return spawn_projectiles(world, weapon.fire(weapon, world, eid, target))


def loadout_system(world: "World", dt_ms: float) -> None:
    """Tick cooldowns and auto-fire for every armed entity."""
    for eid, loadout, stats in world.query(Loadout, CombatStats):
        loadout.cooldowns = [max(0.0, cd - dt_ms) for cd in loadout.cooldowns]

        weapon = loadout.weapon
        if weapon is None:
            continue
        if loadout.shoot_time_ms <= fire_interval_ms(weapon, stats):
            loadout.shoot_time_ms += dt_ms
        elif loadout.firing:
            loadout.shoot_time_ms = 0.0
            fire_weapon(world, eid, weapon, loadout.aim)


def use_skill(world: "World", eid: int, index: int,
              target: tuple[float, float] | None = None) -> bool:
    """Trigger tech *index*.  Returns False if missing or cooling down."""
    loadout = world.get(eid, Loadout)
    stats = world.get(eid, CombatStats)
    if loadout is None or stats is None:
        return False
    if not 0 <= index < len(loadout.skills):
        return False
    if len(loadout.cooldowns) < len(loadout.skills):
        loadout.cooldowns.extend([0.0] * (len(loadout.skills) - len(loadout.cooldowns)))
    if loadout.cooldowns[index] > 0:
        return False

    skill = loadout.skills[index]
    if target is None:
        target = loadout.aim
    if skill.use is not None:
        spawn_projectiles(world, skill.use(skill, world, eid, target))

    loadout.cooldowns[index] = cooldown_ms(skill, stats)

    bus = world.res(EventBus)
    if bus:
        bus.emit(SkillUsed(eid=eid, skill_id=skill.id))
    log = world.res(CombatLog)
    if log:
        clock = world.res(GameClock)
        log.record(eid, "skill", f"{skill.name} used",
                   t=clock.time if clock else 0.0,
                   details={"cooldown_ms": loadout.cooldowns[index]})
    print(f"[SKILL] {skill.name} used ({loadout.cooldowns[index] / 1000:.1f}s cooldown)")
    return True


def cooldown_ms(skill: ActiveSkill, stats: CombatStats) -> float:
    recharge = calculate_final_stat(Stat.RECHARGE_SPEED, skill.tags, 1.0,
                                    stats.effective_adjustments())
    if recharge <= 0:
        return skill.cooldown_ms
    return skill.cooldown_ms / recharge


def cycle_weapon(loadout: Loadout) -> Weapon | None:
    """Select the next weapon, wrapping around."""
    if loadout.weapons:
        loadout.selected = (loadout.selected + 1) % len(loadout.weapons)
    return loadout.weapon


def equip(loadout: Loadout, weapons: list[Weapon], skills: list[ActiveSkill],
          enhancements: set[str] | None = None) -> None:
    """Replace the loadout's contents.

    Techs that stay equipped keep their running cooldown, and the
    selected weapon stays selected if it is still carried.  Anything
    new starts ready.
    """
    current = loadout.weapon
    running = {skill.id: left for skill, left
               in zip(loadout.skills, loadout.cooldowns)}

    loadout.weapons = list(weapons)
    loadout.selected = 0
    if current is not None:
        for i, weapon in enumerate(loadout.weapons):
            if weapon.name == current.name:
                loadout.selected = i
                break
    loadout.skills = list(skills)
    loadout.cooldowns = [running.get(skill.id, 0.0) for skill in loadout.skills]
    loadout.enhancements = set(enhancements or ())
