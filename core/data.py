"""
core/data.py — TOML → skill-tree loader

Reads ship classes and their skill trees from a data file and builds
the frozen node dataclasses.  Weapon and tech ids are resolved against
registries passed in by the caller, so this module never imports game
logic.

Each top-level table is a class; its nodes are an array of tables:

    [t0-ship]
    name = "JOURNEYMAN-class"

    [[t0-ship.nodes]]
    id = "red-1"
    type = "passive"
    connected = ["ship"]
    colour = "r"
    stat_adjustments = { damage = { global = { addition = 2 } } }

Usage:
    classes = load_skill_trees("data/skill_trees.toml", WEAPONS, SKILLS)

Everything is validated at load time; authoring mistakes raise
``SkillTreeError`` naming the file and node.
"""

from __future__ import annotations
try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib
from pathlib import Path
from typing import Any, Mapping

from components.arsenal import ActiveSkill, Weapon
from components.skill_tree import (
    COLOURS, ClassNode, ConditionalPassiveNode, PassiveNode, SkillClass,
    SkillNode, TechNode, WeaponNode,
)
from components.stats import InvalidAdjustmentError, StatAdjustments

_CONDITION_OPS = ("==", ">=", "<=")


class SkillTreeError(ValueError):
    """A skill-tree data file is malformed."""


def load_skill_trees(path: str | Path,
                     weapons: Mapping[str, Weapon],
                     skills: Mapping[str, ActiveSkill]) -> dict[str, SkillClass]:
    """Load a TOML file of classes.  Returns ``{class_id: SkillClass}``."""
    path = Path(path)
    with open(path, "rb") as f:
        data = tomllib.load(f)
    classes = parse_skill_trees(data, weapons, skills, source=str(path))
    count = sum(len(c.tree) for c in classes.values())
    print(f"[DATA] Loaded {len(classes)} classes ({count} nodes) from {path}")
    return classes


def parse_skill_trees(data: Mapping[str, Any],
                      weapons: Mapping[str, Weapon],
                      skills: Mapping[str, ActiveSkill],
                      source: str = "<data>") -> dict[str, SkillClass]:
    """Build classes from already-decoded TOML *data*."""
    classes: dict[str, SkillClass] = {}
    seen: set[str] = set()

    for class_id, section in data.items():
        if not isinstance(section, dict):
            continue
        nodes = []
        for raw in section.get("nodes", []):
            node = _build_node(raw, weapons, skills, f"{source}:{class_id}")
            if node.id in seen:
                raise SkillTreeError(f"{source}:{class_id}: duplicate node id '{node.id}'")
            seen.add(node.id)
            nodes.append(node)

        prereqs = dict(section.get("prerequisites", {}))
        for colour in prereqs:
            if colour not in COLOURS:
                raise SkillTreeError(
                    f"{source}:{class_id}: unknown prerequisite colour '{colour}'")

        classes[class_id] = SkillClass(
            id=class_id,
            name=section.get("name", class_id),
            description=section.get("description", ""),
            tree=tuple(nodes),
            prerequisites=prereqs,
        )

    # connections may cross trees, so check them once everything is known
    for skill_class in classes.values():
        for node in skill_class.tree:
            for target in node.connected:
                if target not in seen:
                    raise SkillTreeError(
                        f"{source}:{skill_class.id}: node '{node.id}' connects "
                        f"to unknown node '{target}'")
    return classes


def _build_node(raw: Mapping[str, Any], weapons: Mapping[str, Weapon],
                skills: Mapping[str, ActiveSkill], where: str) -> SkillNode:
    node_id = raw.get("id")
    if not node_id:
        raise SkillTreeError(f"{where}: node without an id")
    where = f"{where}:{node_id}"

    colour = raw.get("colour")
    if colour is not None and colour not in COLOURS:
        raise SkillTreeError(f"{where}: unknown colour '{colour}'")

    common = dict(
        id=node_id,
        connected=tuple(raw.get("connected", ())),
        depth=int(raw.get("depth", 0)),
        index=int(raw.get("index", 0)),
        colour=colour,
        name=raw.get("name", ""),
        enhancements=tuple(raw.get("enhancements", ())),
    )

    kind = raw.get("type")
    if kind == "passive":
        return PassiveNode(**common, stat_adjustments=_adjustments(raw, where))
    if kind == "conditionalPassive":
        return ConditionalPassiveNode(**common,
                                      stat_adjustments=_adjustments(raw, where),
                                      condition=_condition(raw, where))
    if kind == "weapon":
        return WeaponNode(**common, weapon=_lookup(weapons, raw.get("weapon"), "weapon", where))
    if kind == "tech":
        return TechNode(**common, tech=_lookup(skills, raw.get("tech"), "tech", where))
    if kind == "class":
        weapon_id = raw.get("weapon")
        weapon = _lookup(weapons, weapon_id, "weapon", where) if weapon_id else None
        return ClassNode(**common, weapon=weapon)
    raise SkillTreeError(f"{where}: unknown node type '{kind}'")


def _adjustments(raw: Mapping[str, Any], where: str) -> StatAdjustments:
    try:
        return StatAdjustments.parse(raw.get("stat_adjustments", {}))
    except InvalidAdjustmentError as e:
        raise SkillTreeError(f"{where}: {e}") from e


def _condition(raw: Mapping[str, Any], where: str) -> tuple[str, str, float]:
    cond = raw.get("condition")
    if not isinstance(cond, list) or len(cond) != 3:
        raise SkillTreeError(f"{where}: condition must be [field, op, value]")
    field_name, op, value = cond
    if op not in _CONDITION_OPS:
        raise SkillTreeError(f"{where}: unknown condition operator '{op}'")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SkillTreeError(f"{where}: condition value must be a number")
    return str(field_name), op, float(value)


def _lookup(registry: Mapping[str, Any], key: Any, what: str, where: str):
    if key not in registry:
        raise SkillTreeError(f"{where}: unknown {what} '{key}'")
    return registry[key]
