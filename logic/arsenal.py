"""logic/arsenal.py — Built-in weapons and techs.

``WEAPONS`` and ``SKILLS`` are the registries the skill-tree loader
resolves ids against.  Behaviour is attached as plain functions:

    weapon.fire(weapon, world, shooter_eid, target)  -> list[Projectile]
    skill.use(skill, world, user_eid, target)         -> list[Projectile]

Projectiles returned by ``fire`` still need spawning; ``fire_weapon``
and ``use_skill`` in ``logic.combat.loadout`` take care of that.
"""

from __future__ import annotations
import math
from typing import TYPE_CHECKING

from components import (
    ActiveSkill, Buff, CombatStats, Enhancement, Loadout, Player, Position,
    Projectile, StatAdjustments, Tag, Velocity, Weapon,
)
from components.arsenal import weapon_from
from core.collision import aim_direction, round_half_up
from core.constants import KIND_AREA
from core.tuning import get as _tun
from logic.combat.projectiles import make_projectile, shoot, spawn_projectiles
from logic.movement import steer_player

if TYPE_CHECKING:
    from core.ecs import World


# ═══════════════════════════════════════════════════════════════════
#  Weapons
# ═══════════════════════════════════════════════════════════════════

def standard_fire(weapon: Weapon, world: "World", shooter_eid: int,
                  target: tuple[float, float]) -> list[Projectile]:
    """Fan out ``weapon.count`` projectiles from the shooter toward *target*."""
    stats = world.get(shooter_eid, CombatStats)
    pos = world.get(shooter_eid, Position)
    if stats is None or pos is None:
        return []
    return shoot(stats, weapon, (pos.x, pos.y), target,
                 count=weapon.count, angle=weapon.spread,
                 draw_projectile=weapon.draw, owner_eid=shooter_eid)


def _explode(world: "World", proj_eid: int, proj: Projectile) -> None:
    """Missile impact: leave a short-lived blast that hits everything in it."""
    blast = weapon_from(
        proj.source,
        name=f"{proj.source.name} (blast)",
        damage=_tun("combat.explosion", "damage", 10.0),
        tags=(Tag.EXPLOSIVE,),
        on_hit=None,
        draw=None,
    )
    area = make_projectile(proj.owner, blast, kind=KIND_AREA,
                           origin=(proj.x, proj.y), owner_eid=proj.owner_eid)
    area.hp = _tun("combat.explosion", "hp", 10)
    area.speed = 0.0
    area.radius = _tun("combat.explosion", "radius", 50.0)
    area.ttl_ms = _tun("combat.explosion", "ttl_ms", 250.0)
    area.char = "*"
    area.color = (255, 0, 0)
    world.spawn(area)


def _chain(world: "World", proj_eid: int, proj: Projectile) -> None:
    """Arc impact: bend toward the nearest untouched enemy in range."""
    reach = _tun("combat.chain", "retarget_radius", 100.0)
    best: Position | None = None
    best_d2 = reach * reach
    for eid, pos, stats in world.query(Position, CombatStats):
        if stats.side == proj.side or eid in proj.touching or not world.alive(eid):
            continue
        d2 = (pos.x - proj.x) ** 2 + (pos.y - proj.y) ** 2
        if d2 < best_d2:
            best, best_d2 = pos, d2
    if best is not None:
        heading = aim_direction(proj.x, proj.y, best.x, best.y)
        proj.dx, proj.dy = heading.x, heading.y


def _draw_rocket(proj: Projectile) -> Projectile:
    proj.char = ">"
    return proj


def _draw_arc(proj: Projectile) -> Projectile:
    # an arc keeps jumping: five extra contacts on top of its piercing
    proj.hp += 5
    proj.char = "~"
    proj.color = (120, 200, 255)
    return proj


CANNON = Weapon(
    name="TI-4-G Twin-Mounted Autocannon",
    damage=6.0,
    rof=270.0,
    tags=(Tag.KINETIC,),
    projectile_speed=10.0,
    fire=standard_fire,
)

MISSILE_LAUNCHER = Weapon(
    name="G-Class Missile Launcher",
    damage=1.0,                       # the blast carries the real damage
    rof=90.0,
    tags=(Tag.EXPLOSIVE,),
    projectile_speed=6.0,
    fire=standard_fire,
    on_hit=_explode,
    draw=_draw_rocket,
)

ARC_COIL = Weapon(
    name="High Impulse Arc Coil",
    damage=4.0,
    rof=150.0,
    tags=(Tag.ENERGY,),
    projectile_speed=40.0,
    fire=standard_fire,
    on_hit=_chain,
    draw=_draw_arc,
)

SHOTGUN = Weapon(
    name="K-12 Flak Scattergun",
    damage=3.0,
    rof=60.0,
    tags=(Tag.KINETIC,),
    projectile_speed=12.0,
    count=5,
    spread=0.15,
    fire=standard_fire,
)

WEAPONS: dict[str, Weapon] = {
    "cannon": CANNON,
    "missile": MISSILE_LAUNCHER,
    "arc": ARC_COIL,
    "shotgun": SHOTGUN,
}


# ═══════════════════════════════════════════════════════════════════
#  Techs (active skills)
# ═══════════════════════════════════════════════════════════════════

EXPULSION = "reinforce|expulsion"


def _reinforce(skill: ActiveSkill, world: "World", user_eid: int,
               target: tuple[float, float]) -> list[Projectile]:
    """Fill armour to max for 6 s; leftover temporary armour is taken back."""
    stats = world.get(user_eid, CombatStats)
    if stats is None:
        return []
    initial = stats.armour
    stats.armour = stats.max_armour

    def expire(s: CombatStats) -> None:
        remaining = s.armour - initial
        if remaining <= 0:
            return
        s.armour = initial
        loadout = world.get(user_eid, Loadout)
        if loadout is not None and EXPULSION in loadout.enhancements:
            _expel_armour(world, user_eid, s, remaining)

    stats.buffs.append(Buff(6000.0, name="Armour Reinforcement", expire=expire))
    return []


def _expel_armour(world: "World", user_eid: int, stats: CombatStats,
                  remaining: float) -> None:
    """Fire leftover armour off as a ring of kinetic shrapnel.

    Up to 18 projectiles sharing ``3 × remaining`` damage between them.
    """
    pos = world.get(user_eid, Position)
    if pos is None or stats.max_armour <= 0:
        return
    count = round_half_up(18 * remaining / stats.max_armour)
    if count <= 0:
        return
    shrapnel = Weapon(name="Shedding Expulsion", damage=3 * remaining / count,
                      tags=(Tag.KINETIC,))
    projectiles = shoot(stats, shrapnel, (pos.x, pos.y), (pos.x + 1, pos.y + 1),
                        count=count, angle=2 * math.pi / count, owner_eid=user_eid)
    spawn_projectiles(world, projectiles)


def _evade(skill: ActiveSkill, world: "World", user_eid: int,
           target: tuple[float, float]) -> list[Projectile]:
    stats = world.get(user_eid, CombatStats)
    if stats is None:
        return []
    stats.buffs.append(Buff(
        3000.0,
        name="Evasive Maneuvers",
        stat_adjustments=StatAdjustments.parse({
            "avoidance": {
                "projectile": {"addition": 1},
                "collision": {"addition": 1},
            },
        }),
    ))
    return []


def _wormhole(skill: ActiveSkill, world: "World", user_eid: int,
              target: tuple[float, float]) -> list[Projectile]:
    """Stop, then reappear at *target* (at most ``range`` away) after a beat."""
    pos = world.get(user_eid, Position)
    stats = world.get(user_eid, CombatStats)
    if pos is None or stats is None:
        return []
    vel = world.get(user_eid, Velocity)
    if vel is not None:
        vel.x = vel.y = 0.0

    reach = _tun("skills.wormhole", "range", 500.0)
    heading = aim_direction(pos.x, pos.y, target[0], target[1])
    distance = min(reach, math.hypot(target[0] - pos.x, target[1] - pos.y))
    dest = (pos.x + heading.x * distance, pos.y + heading.y * distance)

    def expire(_s: CombatStats) -> None:
        pos.x, pos.y = dest
        player = world.get(user_eid, Player)
        if player is not None:
            steer_player(world, player.direction)

    stats.buffs.append(Buff(_tun("skills.wormhole", "delay_ms", 300.0),
                            name="Wormhole Transit", expire=expire))
    return []


REINFORCE = ActiveSkill(
    id="reinforce",
    name="Armour Reinforcement",
    description="Engage armour reserves, gaining temporary armour up to "
                "your maximum armour for 6 seconds",
    cooldown_ms=24_000.0,
    tags=(Tag.DEFENSIVE,),
    use=_reinforce,
    enhancements={
        EXPULSION: Enhancement(
            name="Shedding Expulsion System",
            description="At the end of skill effect, remaining temporary armour "
                        "is fired off as kinetic projectiles.",
        ),
    },
)

EVASIVE_MANEUVERS = ActiveSkill(
    id="evasive_maneuvers",
    name="Evasive Maneuvers",
    description="Take evasive action, avoiding all damage from collisions "
                "and projectiles for 3 seconds.",
    cooldown_ms=10_000.0,
    tags=(Tag.DEFENSIVE, Tag.MOVEMENT),
    use=_evade,
)

PORTABLE_WORMHOLE = ActiveSkill(
    id="portable_wormhole",
    name="Portable Wormhole",
    description="Open a wormhole to a location within 500 units, "
                "teleporting you there after a brief delay.",
    cooldown_ms=6_000.0,
    tags=(Tag.MOVEMENT,),
    use=_wormhole,
)

SKILLS: dict[str, ActiveSkill] = {
    skill.id: skill for skill in (REINFORCE, EVASIVE_MANEUVERS, PORTABLE_WORMHOLE)
}
