"""logic/stats.py — Final stat calculation and adjustment flattening.

Every number that can be modified in combat goes through
``calculate_final_stat``.  The order is fixed and balance depends on it:

    final = (base + Σ additions) × (1 + Σ multipliers)

summed over ``global`` plus each requested tag.  So "+1 damage, +50 %
damage" on a base of 1 gives (1 + 1) × 1.5 = 3, never 1 × 1.5 + 1.
"""

from __future__ import annotations
from typing import Iterable

from components.stats import Adjustment, Stat, StatAdjustments, Tag


def calculate_final_stat(stat: Stat | str, tags: Iterable[Tag | str],
                         base_value: float,
                         adjustments: StatAdjustments) -> float:
    """Apply *adjustments* for *stat* to *base_value*.

    ``global`` always applies; *tags* add to it.  A stat with no entry
    in the tree returns *base_value* untouched.  Tags are matched
    exactly, so an adjustment keyed to a tag missing from *tags* never
    applies.
    """
    by_tag = adjustments.for_stat(Stat(stat))
    if by_tag is None:
        return base_value

    total_addition = 0.0
    total_multiplier = 1.0
    seen: set[Tag] = set()
    for tag in (Tag.GLOBAL, *tags):
        tag = Tag(tag)
        if tag in seen:
            continue
        seen.add(tag)
        adjustment = by_tag.get(tag)
        if adjustment is not None:
            total_addition += adjustment.addition
            total_multiplier += adjustment.multiplier

    return (base_value + total_addition) * total_multiplier


def flatten_stat_adjustments(trees: Iterable[StatAdjustments]) -> StatAdjustments:
    """Merge many adjustment trees into one.

    Each ``(stat, tag)`` present in any input ends up holding the sum of
    its additions and of its multipliers.  Inputs are not modified and
    an empty list gives an empty tree.
    """
    merged: dict[Stat, dict[Tag, Adjustment]] = {}
    for tree in trees:
        for stat, tag, adjustment in tree.items():
            bucket = merged.setdefault(stat, {})
            bucket[tag] = bucket.get(tag, Adjustment()) + adjustment
    return StatAdjustments(merged)


# ── Display text ─────────────────────────────────────────────────────

_STAT_NAMES: dict[Stat, str] = {
    Stat.DAMAGE: "Damage",
    Stat.ROF: "Rate of Fire",
    Stat.PROJECTILE_HP: "Projectile HP (Pierces)",
    Stat.PROJECTILE_COUNT: "Projectiles",
    Stat.PROJECTILE_SPREAD: "Projectile Spread",
    Stat.CRIT_CHANCE: "Critical Strike Chance",
    Stat.CRIT_DAMAGE: "Critical Damage Multiplier",
    Stat.MAX_HP: "Max HP",
    Stat.MAX_SHIELDS: "Shields",
    Stat.EVADE_CHANCE: "Evasion Chance",
    Stat.EVADE_EFFECT: "Damage reduction from evaded attacks",
    Stat.AVOIDANCE: "Chance to completely avoid damage",
    Stat.ARMOUR: "Armour",
    Stat.ARMOUR_CLASS: "Armour Class",
    Stat.DAMAGE_TAKEN: "Damage Taken",
    Stat.RECHARGE_SPEED: "Tech Recovery",
    Stat.EFFECT_SIZE: "Area of Effect",
    Stat.HP_ON_KILL: "HP gained on kill",
    Stat.ARMOUR_ON_KILL: "Armour gained on kill",
}


def describe_adjustments(adjustments: StatAdjustments) -> str:
    """Human-readable summary, one modifier per line.

    >>> describe_adjustments(StatAdjustments.parse(
    ...     {"damage": {"kinetic": {"multiplier": 0.15}}}))
    '+15% Kinetic Damage\\n'
    """
    lines: list[str] = []
    for stat, tag, adj in adjustments.items():
        label = _label(stat, tag)
        if adj.addition != 0:
            sign = "+" if adj.addition > 0 else "-"
            magnitude = abs(adj.addition)
            # fractional additions are chances (0.1 → 10%)
            value = f"{_fmt(magnitude * 100)}%" if magnitude < 1 else _fmt(magnitude)
            lines.append(f"{sign}{value} to {label}")
        if adj.multiplier != 0:
            sign = "+" if adj.multiplier > 0 else "-"
            lines.append(f"{sign}{round(abs(adj.multiplier) * 100)}% {label}")
    return "".join(line + "\n" for line in lines)


def _label(stat: Stat, tag: Tag) -> str:
    if tag is Tag.GLOBAL:
        return _STAT_NAMES[stat]
    return f"{tag.value.capitalize()} {_STAT_NAMES[stat]}"


def _fmt(value: float) -> str:
    return f"{value:g}"
