"""components.arsenal — Weapon and active-skill definitions.

Both are static data plus behaviour: a frozen record whose ``fire`` /
``use`` / ``on_hit`` / ``draw`` fields are plain callables.  Variants are
built by composing fields (``dataclasses.replace``), never by
subclassing.

Callable signatures::

    fire(weapon, world, shooter_eid, target_xy) -> list[Projectile]
    use(skill, world, user_eid, target_xy)      -> list[Projectile]
    on_hit(world, projectile_eid, projectile)   -> None
    draw(projectile)                            -> Projectile | None
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Callable

from components.stats import Tag


@dataclass(frozen=True)
class Weapon:
    """A gun, launcher or any other source of projectiles.

    ``count`` and ``spread`` are the fan-out base values before
    ``projectileCount`` / ``projectileSpread`` adjustments; ``None``
    spread means the tuned default.
    """
    name: str
    damage: float                     # HP per hit, before adjustments
    rof: float = 60.0                 # rounds per minute
    tags: tuple[Tag, ...] = ()        # weapon-class tags (kinetic, …)
    projectile_speed: float = 10.0    # u/tick
    count: float = 1.0
    spread: float | None = None       # radians
    fire: Callable[..., list] | None = field(default=None, compare=False, repr=False)
    on_hit: Callable[..., None] | None = field(default=None, compare=False, repr=False)
    draw: Callable[..., Any] | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Enhancement:
    """Optional modifier to an active skill, unlocked on the skill tree."""
    name: str
    description: str = ""


@dataclass(frozen=True)
class ActiveSkill:
    """A tech: press a button, get an effect, wait out the cooldown."""
    id: str
    name: str
    description: str = ""
    cooldown_ms: float = 10_000.0
    tags: tuple[Tag, ...] = ()
    use: Callable[..., list] | None = field(default=None, compare=False, repr=False)
    enhancements: dict[str, Enhancement] = field(default_factory=dict, compare=False)

    def __hash__(self) -> int:
        return hash(self.id)


def weapon_from(base: Weapon, **changes: Any) -> Weapon:
    """Copy of *base* with *changes* applied (explosions, shrapnel …)."""
    return replace(base, **changes)
