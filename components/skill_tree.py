"""components.skill_tree — Skill-tree nodes, ship classes and the player session.

A tree is a flat tuple of nodes.  Each node names the nodes it hangs
off (``connected``); a node can be taken once any of those is taken.
``depth``/``index`` are layout hints only (0 = root, negative index =
left of centre).

``PlayerSession`` is a world resource that lives for one game session.
It owns the unspent skill points, the allocated nodes and the kill
score that earns more points.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import ClassVar

from components.arsenal import ActiveSkill, Weapon
from components.stats import EMPTY, StatAdjustments
from core.tuning import get as _tun

COLOURS = ("r", "g", "b")


@dataclass(frozen=True)
class SkillNode:
    id: str
    connected: tuple[str, ...] = ()
    depth: int = 0
    index: int = 0
    colour: str | None = None          # "r" | "g" | "b"
    name: str = ""
    enhancements: tuple[str, ...] = ()  # active-skill enhancements unlocked
    kind: ClassVar[str] = "node"


@dataclass(frozen=True)
class PassiveNode(SkillNode):
    stat_adjustments: StatAdjustments = EMPTY
    kind: ClassVar[str] = "passive"


@dataclass(frozen=True)
class ConditionalPassiveNode(SkillNode):
    stat_adjustments: StatAdjustments = EMPTY
    condition: tuple[str, str, float] = ("hp", ">=", 0.0)
    kind: ClassVar[str] = "conditionalPassive"


@dataclass(frozen=True)
class WeaponNode(SkillNode):
    weapon: Weapon | None = None
    kind: ClassVar[str] = "weapon"


@dataclass(frozen=True)
class TechNode(SkillNode):
    tech: ActiveSkill | None = None
    kind: ClassVar[str] = "tech"


@dataclass(frozen=True)
class ClassNode(SkillNode):
    """Root of a class tree.  May carry the hull's built-in weapon."""
    weapon: Weapon | None = None
    kind: ClassVar[str] = "class"


@dataclass(frozen=True)
class SkillClass:
    """A ship class: a skill tree plus colour-rating prerequisites."""
    id: str
    name: str
    description: str = ""
    tree: tuple[SkillNode, ...] = ()
    prerequisites: dict[str, int] = field(default_factory=dict, compare=False)

    @property
    def root(self) -> SkillNode | None:
        return self.tree[0] if self.tree else None


@dataclass
class PlayerSession:
    """Skill points and allocations for one run.  Stored as a resource."""
    skill_points: int = field(
        default_factory=lambda: int(_tun("session", "starting_skill_points", 20)))
    kills_per_skill_point: int = field(
        default_factory=lambda: int(_tun("session", "kills_per_skill_point", 10)))
    allocated: dict[str, SkillNode] = field(default_factory=dict)
    # ids named as prerequisites by allocated nodes; lets a tree be
    # walked in either direction without storing reverse edges
    connected: set[str] = field(default_factory=set)
    score: int = 0
    revision: int = 0                  # bumped on every allocation

    def can_allocate(self, node: SkillNode) -> bool:
        return (
            self.skill_points > 0
            and node.id not in self.allocated
            and (not node.connected
                 or any(c in self.allocated for c in node.connected)
                 or node.id in self.connected)
        )

    def allocate(self, node: SkillNode) -> bool:
        """Spend a point on *node*.  Returns False if it can't be taken."""
        if not self.can_allocate(node):
            return False
        self.skill_points -= 1
        self.grant(node)
        return True

    def grant(self, node: SkillNode) -> None:
        """Allocate *node* without spending a point (class roots)."""
        self.allocated[node.id] = node
        self.connected.update(node.connected)
        self.revision += 1

    def ratings(self) -> dict[str, int]:
        """Allocated node count per colour."""
        totals = {c: 0 for c in COLOURS}
        for node in self.allocated.values():
            if node.colour in totals:
                totals[node.colour] += 1
        return totals

    def can_allocate_class(self, skill_class: SkillClass) -> bool:
        if not skill_class.prerequisites:
            return True
        ratings = self.ratings()
        return all(ratings[c] >= skill_class.prerequisites.get(c, 0) for c in COLOURS)

    def record_kill(self) -> bool:
        """Count one kill.  Returns True when it earned a skill point."""
        self.score += 1
        if self.kills_per_skill_point > 0 and self.score % self.kills_per_skill_point == 0:
            self.skill_points += 1
            return True
        return False

    def nodes(self) -> list[SkillNode]:
        """Allocated nodes in allocation order."""
        return list(self.allocated.values())
