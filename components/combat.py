"""components.combat — Combat state: entity defences, buffs, projectiles, loadout."""

from __future__ import annotations
from dataclasses import InitVar, dataclass, field
from typing import Callable

from components.arsenal import ActiveSkill, Weapon
from components.stats import EMPTY, Stat, StatAdjustments, Tag
from core.constants import KIND_PROJECTILE, SIDE_ENEMY
from core.tuning import get as _tun


@dataclass(eq=False)
class Buff:
    """Temporary buff or debuff owned by a single entity.

    ``remaining_ms`` counts down each tick.  When it crosses zero the
    optional ``expire(stats)`` callback fires once (use it to undo any
    custom state the skill applied) and the buff is dropped.
    """
    remaining_ms: float
    name: str = ""
    stat_adjustments: StatAdjustments | None = None
    expire: Callable[["CombatStats"], None] | None = field(default=None, repr=False)


@dataclass
class ConditionalPassive:
    """Adjustments that apply only while ``condition`` holds.

    ``condition`` is ``(field, op, value)`` where *field* names a
    numeric attribute of ``CombatStats`` (``"hp"``, ``"max_hp"``,
    ``"shields"`` …) and *op* is one of ``"=="``, ``">="``, ``"<="``.
    """
    condition: tuple[str, str, float]
    stat_adjustments: StatAdjustments = EMPTY
    name: str = ""


@dataclass(eq=False)
class CombatStats:
    """Everything that can shoot or be shot.

    Maxima come in pairs: ``base_max_*`` is the designer value,
    ``max_*`` is recomputed every tick from it and the combined
    adjustments (see ``logic.combat.ledger``).

    Layers of defence, in the order a hit meets them:
    avoidance → evasion → armour → shields → HP.

    ``armour`` is a depletable reserve.  While it is above zero every
    hit is reduced by a flat ``armour_class``; once it hits zero it does
    nothing until restored.
    """
    side: str = SIDE_ENEMY
    base_max_hp: float = 100.0         # HP
    base_max_shields: float = 0.0      # HP
    base_max_armour: float = 0.0       # HP
    armour_class: float = 0.0          # HP removed from each hit while armoured

    # Evasion can exceed 1.0: each whole point is a guaranteed stack.
    evade_chance: float = field(default_factory=lambda: _tun("combat.evasion", "default_chance", 0.0))
    evade_effect: float = field(default_factory=lambda: _tun("combat.evasion", "default_effect", 0.5))
    crit_chance: float = field(default_factory=lambda: _tun("combat.crit", "default_chance", 0.0))
    crit_damage: float = field(default_factory=lambda: _tun("combat.crit", "default_damage", 1.5))

    shield_recharge_threshold: float = field(   # ms without a hit before recharge
        default_factory=lambda: _tun("combat.shields", "recharge_threshold_ms", 2000.0))
    shield_recharge_rate: float = field(        # fraction of max shields per second
        default_factory=lambda: _tun("combat.shields", "recharge_rate", 0.5))

    adjustments: InitVar[StatAdjustments | None] = None   # initial base layer

    # ── Derived / live state ─────────────────────────────────────────
    max_hp: float = field(init=False)
    hp: float = field(init=False)
    max_shields: float = field(init=False)
    shields: float = field(init=False)
    max_armour: float = field(init=False)
    armour: float = field(init=False)
    time_since_last_hit: float = field(init=False, default=0.0)   # ms
    buffs: list[Buff] = field(init=False, default_factory=list)
    conditionals: list[ConditionalPassive] = field(init=False, default_factory=list)

    def __post_init__(self, adjustments: StatAdjustments | None):
        from logic.stats import calculate_final_stat

        self._base: StatAdjustments = adjustments if adjustments is not None else EMPTY
        self._effective: StatAdjustments = self._base
        self.max_hp = calculate_final_stat(Stat.MAX_HP, [], self.base_max_hp, self._base)
        self.hp = self.max_hp
        self.max_shields = calculate_final_stat(Stat.MAX_SHIELDS, [], self.base_max_shields, self._base)
        self.shields = self.max_shields
        self.max_armour = calculate_final_stat(Stat.ARMOUR, [], self.base_max_armour, self._base)
        self.armour = self.max_armour

    # ── Adjustment layers ────────────────────────────────────────────

    @property
    def base_adjustments(self) -> StatAdjustments:
        """Permanent layer (skill tree allocations)."""
        return self._base

    def set_base_adjustments(self, adjustments: StatAdjustments) -> None:
        """Replace the permanent layer.

        Buffs and conditionals are untouched; the combined tree picks the
        change up on the next ledger update.
        """
        self._base = adjustments

    def effective_adjustments(self) -> StatAdjustments:
        """Combined base + buffs + active conditionals, as of the last update."""
        return self._effective

    def _set_effective(self, adjustments: StatAdjustments) -> None:
        self._effective = adjustments


@dataclass(eq=False)
class Projectile:
    """A bullet, missile or area burst flying through the arena.

    Created by ``logic.combat.projectiles.shoot``.  ``hp`` is how many
    targets it can still hit (piercing), not a health pool.  ``tags`` is
    the weapon's tags plus the projectile kind and is what every
    damage/crit calculation on hit uses.
    """
    owner: CombatStats
    source: Weapon
    kind: str = KIND_PROJECTILE
    owner_eid: int = -1
    hp: float = 1.0
    tags: tuple[Tag, ...] = ()
    scale: float = 1.0
    x: float = 0.0
    y: float = 0.0
    dx: float = 1.0            # normalised direction
    dy: float = 0.0
    speed: float = 10.0        # u/tick
    radius: float = field(default_factory=lambda: _tun("combat.projectiles", "radius", 3.0))
    ttl_ms: float | None = None
    char: str = "-"
    color: tuple = (255, 255, 255)
    touching: set[int] = field(default_factory=set)

    @property
    def side(self) -> str:
        return self.owner.side


@dataclass
class Ramming:
    """Takes collision damage when touching enemy hulls (the player ship)."""
    invulnerability_ms: float = field(
        default_factory=lambda: _tun("combat.ramming", "invulnerability_ms", 250.0))
    hp_fraction: float = field(
        default_factory=lambda: _tun("combat.ramming", "hp_fraction", 0.05))


@dataclass
class Loadout:
    """Equipped weapons and techs, plus their timers."""
    weapons: list[Weapon] = field(default_factory=list)
    selected: int = 0
    firing: bool = False
    aim: tuple[float, float] = (0.0, 0.0)
    shoot_time_ms: float = 0.0          # ms since last shot
    skills: list[ActiveSkill] = field(default_factory=list)
    cooldowns: list[float] = field(default_factory=list)   # ms remaining
    enhancements: set[str] = field(default_factory=set)

    @property
    def weapon(self) -> Weapon | None:
        if 0 <= self.selected < len(self.weapons):
            return self.weapons[self.selected]
        return None
