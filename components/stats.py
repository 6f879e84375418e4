"""components.stats — Stat/tag taxonomy and the stat-adjustment tree.

A *stat* is a modifiable number (damage, rate of fire, max HP …).
A *tag* scopes an adjustment to part of that stat: "+10 % kinetic
damage" lives under ``damage → kinetic``.  Every stat also accepts the
implicit ``global`` key, which always applies.

Which tags a stat accepts is fixed here in ``STAT_TAGS`` and checked
when a tree is built, so a typo in skill-tree data fails at load time
rather than silently never applying in combat.

    tree = StatAdjustments.parse({
        "damage": {"global": {"addition": 2}, "kinetic": {"multiplier": 0.1}},
    })
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Mapping


class InvalidAdjustmentError(ValueError):
    """An adjustment tree names an unknown stat/tag or a tag its stat rejects."""


class Stat(str, Enum):
    DAMAGE = "damage"
    ROF = "rof"
    PROJECTILE_HP = "projectileHP"
    PROJECTILE_COUNT = "projectileCount"
    PROJECTILE_SPREAD = "projectileSpread"
    CRIT_CHANCE = "critChance"
    CRIT_DAMAGE = "critDamage"
    MAX_HP = "maxHP"
    MAX_SHIELDS = "maxShields"
    EVADE_CHANCE = "evadeChance"
    EVADE_EFFECT = "evadeEffect"
    AVOIDANCE = "avoidance"
    ARMOUR = "armour"
    ARMOUR_CLASS = "armourClass"
    DAMAGE_TAKEN = "damageTaken"
    RECHARGE_SPEED = "rechargeSpeed"
    EFFECT_SIZE = "effectSize"
    HP_ON_KILL = "hpOnKill"
    ARMOUR_ON_KILL = "armourOnKill"


class Tag(str, Enum):
    GLOBAL = "global"
    # damage types / weapon classes
    KINETIC = "kinetic"
    EXPLOSIVE = "explosive"
    ENERGY = "energy"
    # delivery
    PROJECTILE = "projectile"
    COLLISION = "collision"
    AREA = "area"
    # active skills
    DEFENSIVE = "defensive"
    MOVEMENT = "movement"
    OFFENSIVE = "offensive"


# ── Tag legality ─────────────────────────────────────────────────────

WEAPON_TAGS = frozenset({Tag.KINETIC, Tag.EXPLOSIVE, Tag.ENERGY})
DAMAGE_TAGS = WEAPON_TAGS | {Tag.PROJECTILE, Tag.COLLISION, Tag.AREA}
SKILL_TAGS = frozenset({Tag.DEFENSIVE, Tag.MOVEMENT, Tag.OFFENSIVE})
NO_TAGS: frozenset[Tag] = frozenset()

STAT_TAGS: dict[Stat, frozenset[Tag]] = {
    Stat.DAMAGE: DAMAGE_TAGS,
    Stat.ROF: WEAPON_TAGS,
    Stat.PROJECTILE_HP: WEAPON_TAGS,
    Stat.PROJECTILE_COUNT: WEAPON_TAGS,
    Stat.PROJECTILE_SPREAD: WEAPON_TAGS,
    Stat.CRIT_CHANCE: DAMAGE_TAGS,
    Stat.CRIT_DAMAGE: DAMAGE_TAGS,
    Stat.MAX_HP: NO_TAGS,
    Stat.MAX_SHIELDS: NO_TAGS,
    Stat.EVADE_CHANCE: NO_TAGS,
    Stat.EVADE_EFFECT: NO_TAGS,
    Stat.AVOIDANCE: DAMAGE_TAGS,
    Stat.ARMOUR: NO_TAGS,
    Stat.ARMOUR_CLASS: NO_TAGS,
    Stat.DAMAGE_TAKEN: DAMAGE_TAGS,
    Stat.RECHARGE_SPEED: SKILL_TAGS,
    Stat.EFFECT_SIZE: frozenset({Tag.PROJECTILE, Tag.AREA}),
    Stat.HP_ON_KILL: NO_TAGS,
    Stat.ARMOUR_ON_KILL: NO_TAGS,
}


def accepts(stat: Stat, tag: Tag) -> bool:
    """True if *stat* may carry an adjustment keyed by *tag*."""
    return tag is Tag.GLOBAL or tag in STAT_TAGS[stat]


# ── Adjustment ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class Adjustment:
    """One ``(stat, tag)`` modifier.

    ``addition`` is a flat offset applied before every multiplier.
    ``multiplier`` is an additive percentage delta: 0 means no change,
    0.5 means +50 %, -0.2 means -20 %.
    """
    addition: float = 0.0
    multiplier: float = 0.0

    def __add__(self, other: "Adjustment") -> "Adjustment":
        return Adjustment(self.addition + other.addition,
                          self.multiplier + other.multiplier)


# ── Adjustment tree ──────────────────────────────────────────────────

class StatAdjustments:
    """Sparse ``Stat → Tag → Adjustment`` tree.

    Absent stats and tags mean "no effect".  Instances are treated as
    immutable: flattening and the combat ledger always build new trees.
    """

    __slots__ = ("_tree",)

    def __init__(self, tree: Mapping[Stat, Mapping[Tag, Adjustment]] | None = None):
        self._tree: dict[Stat, dict[Tag, Adjustment]] = {}
        for stat, tags in (tree or {}).items():
            stat = _coerce_stat(stat)
            bucket: dict[Tag, Adjustment] = {}
            for tag, adjustment in tags.items():
                tag = _coerce_tag(tag)
                if not accepts(stat, tag):
                    raise InvalidAdjustmentError(
                        f"stat {stat.value!r} does not accept tag {tag.value!r}")
                if not isinstance(adjustment, Adjustment):
                    raise InvalidAdjustmentError(
                        f"{stat.value}.{tag.value}: expected Adjustment, "
                        f"got {type(adjustment).__name__}")
                bucket[tag] = adjustment
            self._tree[stat] = bucket

    @classmethod
    def parse(cls, raw: Mapping[str, Any] | None) -> "StatAdjustments":
        """Build a tree from plain data (TOML tables, literals in code).

        Partial adjustments are allowed: ``{"multiplier": 0.1}`` fills
        ``addition`` with 0.
        """
        tree: dict[Stat, dict[Tag, Adjustment]] = {}
        for stat_key, tags in (raw or {}).items():
            stat = _coerce_stat(stat_key)
            if not isinstance(tags, Mapping):
                raise InvalidAdjustmentError(
                    f"{stat.value}: expected a table of tags, got {tags!r}")
            bucket = tree.setdefault(stat, {})
            for tag_key, values in tags.items():
                if isinstance(values, Adjustment):
                    bucket[_coerce_tag(tag_key)] = values
                    continue
                if not isinstance(values, Mapping):
                    raise InvalidAdjustmentError(
                        f"{stat.value}.{tag_key}: expected addition/multiplier table")
                unknown = set(values) - {"addition", "multiplier"}
                if unknown:
                    raise InvalidAdjustmentError(
                        f"{stat.value}.{tag_key}: unknown keys {sorted(unknown)}")
                bucket[_coerce_tag(tag_key)] = Adjustment(
                    addition=float(values.get("addition", 0.0)),
                    multiplier=float(values.get("multiplier", 0.0)),
                )
        return cls(tree)

    # ── Read access ──────────────────────────────────────────────────

    def for_stat(self, stat: Stat) -> Mapping[Tag, Adjustment] | None:
        """Tag → adjustment map for *stat*, or ``None`` if the stat is absent."""
        return self._tree.get(Stat(stat))

    def items(self) -> Iterator[tuple[Stat, Tag, Adjustment]]:
        """Yield every ``(stat, tag, adjustment)`` leaf."""
        for stat, tags in self._tree.items():
            for tag, adjustment in tags.items():
                yield stat, tag, adjustment

    def to_dict(self) -> dict[str, dict[str, dict[str, float]]]:
        """Plain-data form, the inverse of ``parse``."""
        return {
            stat.value: {
                tag.value: {"addition": adj.addition, "multiplier": adj.multiplier}
                for tag, adj in tags.items()
            }
            for stat, tags in self._tree.items()
        }

    def __contains__(self, stat: object) -> bool:
        try:
            return Stat(stat) in self._tree
        except ValueError:
            return False

    def __bool__(self) -> bool:
        return bool(self._tree)

    def __len__(self) -> int:
        return len(self._tree)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StatAdjustments):
            return NotImplemented
        return self._tree == other._tree

    def __hash__(self):
        return hash(tuple(sorted((s.value, t.value, a) for s, t, a in self.items())))

    def __repr__(self) -> str:
        return f"StatAdjustments({self.to_dict()!r})"


def _coerce_stat(key: Any) -> Stat:
    try:
        return Stat(key)
    except ValueError:
        raise InvalidAdjustmentError(f"unknown stat {key!r}") from None


def _coerce_tag(key: Any) -> Tag:
    try:
        return Tag(key)
    except ValueError:
        raise InvalidAdjustmentError(f"unknown tag {key!r}") from None


EMPTY = StatAdjustments()
