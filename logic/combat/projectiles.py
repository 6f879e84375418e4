"""logic/combat/projectiles.py — Projectile fan-out, hit resolution and tick system.

``shoot()`` turns one trigger pull into N projectiles:

  1. count  = round(projectileCount)   (stat-adjusted, halves round up)
  2. spread = projectileSpread         (radians between neighbours)
  3. projectile *i* leaves at ``(i - (count-1)/2) × spread`` from the aim
     line, so odd counts put one on-axis and even counts straddle it.

Each frame ``projectile_system()``:
  1. Moves every Projectile along its direction.
  2. Counts down area-effect lifetimes.
  3. Resolves first contact with opposite-side combat entities.
  4. Despawns projectiles at zero hp or outside the arena.
"""

from __future__ import annotations
import random
from typing import TYPE_CHECKING, Callable, Sequence

from components import (
    Arena, Collider, CombatLog, CombatStats, GameClock, Position, Projectile,
)
from components.arsenal import Weapon
from components.stats import Stat, Tag
from core.collision import aim_direction, circles_overlap, outside_bounds, round_half_up
from core.constants import KIND_AREA, KIND_PROJECTILE, MS_PER_SECOND
from core.events import EventBus, EntityHit
from core.tuning import get as _tun
from logic.combat.damage import DamageResult, handle_death, on_kill, take_damage
from logic.stats import calculate_final_stat

if TYPE_CHECKING:
    from core.ecs import World


def make_projectile(owner: CombatStats, source: Weapon, *,
                    kind: str = KIND_PROJECTILE,
                    origin: tuple[float, float] = (0.0, 0.0),
                    owner_eid: int = -1) -> Projectile:
    """Build one projectile with piercing hp, tags and scale resolved."""
    adjustments = owner.effective_adjustments()
    tags = (*source.tags, Tag(kind))
    return Projectile(
        owner=owner,
        source=source,
        kind=kind,
        owner_eid=owner_eid,
        hp=calculate_final_stat(Stat.PROJECTILE_HP, source.tags, 1.0, adjustments),
        tags=tags,
        scale=calculate_final_stat(Stat.EFFECT_SIZE, tags, 1.0, adjustments),
        x=origin[0],
        y=origin[1],
        speed=source.projectile_speed,
    )


def shoot(owner: CombatStats, source: Weapon,
          origin: tuple[float, float], target: tuple[float, float],
          count: float = 1, angle: float | None = None,
          draw_projectile: Callable[[Projectile], Projectile | None] | None = None,
          owner_eid: int = -1) -> list[Projectile]:
    """Fire *source* from *origin* toward *target*.

    Returns the new projectiles; spawning them is the caller's job (see
    ``spawn_projectiles``).  *draw_projectile* may tweak each one (colour,
    glyph, extra piercing) and may return a replacement.
    """
    if angle is None:
        angle = _tun("combat.projectiles", "default_spread", 0.1)
    adjustments = owner.effective_adjustments()
    final_count = round_half_up(
        calculate_final_stat(Stat.PROJECTILE_COUNT, source.tags, count, adjustments))
    final_angle = calculate_final_stat(
        Stat.PROJECTILE_SPREAD, source.tags, angle, adjustments)

    aim = aim_direction(origin[0], origin[1], target[0], target[1])
    projectiles: list[Projectile] = []
    for i in range(final_count):
        deviation = (i - (final_count - 1) / 2) * final_angle
        heading = aim.rotate_rad(deviation)
        proj = make_projectile(owner, source, origin=origin, owner_eid=owner_eid)
        proj.dx, proj.dy = heading.x, heading.y
        if draw_projectile is not None:
            proj = draw_projectile(proj) or proj
        projectiles.append(proj)
    return projectiles


def spawn_projectiles(world: "World", projectiles: Sequence[Projectile]) -> list[int]:
    """Add each projectile to *world* as its own entity."""
    return [world.spawn(p) for p in projectiles]


def resolve_projectile_hit(world: "World", proj_eid: int, proj: Projectile,
                           target_eid: int, target: CombatStats,
                           rng=random) -> DamageResult | None:
    """Apply one contact between *proj* and *target*.

    Spends one point of projectile hp, rolls a crit (never for area
    effects), runs the target's damage pipeline and finally the
    weapon's ``on_hit``.  Returns ``None`` when the projectile had no
    damage to deal.
    """
    if proj.hp:
        proj.hp -= 1
    proj.touching.add(target_eid)

    owner = proj.owner
    adjustments = owner.effective_adjustments()
    damage = calculate_final_stat(Stat.DAMAGE, proj.tags, proj.source.damage, adjustments)

    result = None
    if damage > 0:
        is_crit = False
        if proj.kind != KIND_AREA:
            crit_chance = calculate_final_stat(
                Stat.CRIT_CHANCE, proj.tags, owner.crit_chance, adjustments)
            crit_damage = calculate_final_stat(
                Stat.CRIT_DAMAGE, proj.tags, owner.crit_damage, adjustments)
            if rng.random() < crit_chance:
                damage *= crit_damage
                is_crit = True

        was_alive = target.hp > 0
        result = take_damage(target, damage, proj.tags, rng)
        if not result.avoided:
            _report_hit(world, proj, target_eid, target, result, is_crit)
        if was_alive and target.hp <= 0:
            on_kill(owner, target)
            handle_death(world, target_eid, proj.owner_eid)

    if proj.source.on_hit is not None:
        proj.source.on_hit(world, proj_eid, proj)
    return result


def projectile_system(world: "World", dt_ms: float, rng=random) -> None:
    """Tick all projectiles for one frame."""
    arena = world.res(Arena)
    step = _tun("combat.projectiles", "speed_scale", 60.0) * dt_ms / MS_PER_SECOND
    targets = list(world.query(Position, Collider, CombatStats))

    to_kill: list[int] = []

    for eid, proj in world.query(Projectile):
        # Move
        proj.x += proj.dx * proj.speed * step
        proj.y += proj.dy * proj.speed * step

        # Lifetime (area effects)
        if proj.ttl_ms is not None:
            proj.ttl_ms -= dt_ms
            if proj.ttl_ms <= 0:
                to_kill.append(eid)
                continue

        # Contacts: only the first tick of each overlap counts
        radius = proj.radius * proj.scale
        now: set[int] = set()
        for teid, tpos, tcol, tstats in targets:
            if tstats.side == proj.side or not world.alive(teid):
                continue
            if circles_overlap(proj.x, proj.y, radius,
                               tpos.x, tpos.y, tcol.radius):
                now.add(teid)
                if teid not in proj.touching and proj.hp > 0:
                    resolve_projectile_hit(world, eid, proj, teid, tstats, rng)
        proj.touching = now

        if proj.hp <= 0:
            to_kill.append(eid)
            continue

        if arena is not None and outside_bounds(
                proj.x, proj.y, radius, arena.width, arena.height):
            to_kill.append(eid)

    for eid in to_kill:
        world.kill(eid)


# ── internal helpers ────────────────────────────────────────────────

def _report_hit(world: "World", proj: Projectile, target_eid: int,
                target: CombatStats, result: DamageResult, is_crit: bool) -> None:
    bus = world.res(EventBus)
    if bus:
        bus.emit(EntityHit(eid=target_eid, damage=result.damage, is_crit=is_crit,
                           shielded=result.absorbed_by_shields,
                           attacker_eid=proj.owner_eid))
    log = world.res(CombatLog)
    if log:
        clock = world.res(GameClock)
        crit_tag = " [CRIT]" if is_crit else ""
        log.record(target_eid, "hit",
                   f"{proj.source.name} hit for {result.damage:.0f}{crit_tag}",
                   t=clock.time if clock else 0.0,
                   details={"damage": result.damage,
                            "shielded": result.absorbed_by_shields,
                            "hp": target.hp, "shields": target.shields})
