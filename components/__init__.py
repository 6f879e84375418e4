"""components — ECS component dataclasses, organised by domain.

Submodules
----------
spatial        Position, Velocity, Collider
stats          Stat, Tag, Adjustment, StatAdjustments
arsenal        Weapon, ActiveSkill, Enhancement
combat         CombatStats, Buff, ConditionalPassive, Projectile, Ramming, Loadout
skill_tree     SkillNode variants, SkillClass, PlayerSession
resources      GameClock, Arena, Player, Spawner
combat_log     CombatLog

All public names are re-exported here so code can simply do
``from components import Position``.
"""

# ── Spatial ──────────────────────────────────────────────────────────
from components.spatial import Position, Velocity, Collider

# ── Stats ────────────────────────────────────────────────────────────
from components.stats import (
    Stat, Tag, Adjustment, StatAdjustments, InvalidAdjustmentError,
)

# ── Arsenal ──────────────────────────────────────────────────────────
from components.arsenal import Weapon, ActiveSkill, Enhancement

# ── Combat ───────────────────────────────────────────────────────────
from components.combat import (
    CombatStats, Buff, ConditionalPassive, Projectile, Ramming, Loadout,
)

# ── Skill trees ──────────────────────────────────────────────────────
from components.skill_tree import (
    SkillNode, PassiveNode, ConditionalPassiveNode, WeaponNode, TechNode,
    ClassNode, SkillClass, PlayerSession,
)

# ── World resources / singletons ─────────────────────────────────────
from components.resources import GameClock, Arena, Player, Spawner
from components.combat_log import CombatLog

__all__ = [
    # spatial
    "Position", "Velocity", "Collider",
    # stats
    "Stat", "Tag", "Adjustment", "StatAdjustments", "InvalidAdjustmentError",
    # arsenal
    "Weapon", "ActiveSkill", "Enhancement",
    # combat
    "CombatStats", "Buff", "ConditionalPassive", "Projectile", "Ramming", "Loadout",
    # skill trees
    "SkillNode", "PassiveNode", "ConditionalPassiveNode", "WeaponNode",
    "TechNode", "ClassNode", "SkillClass", "PlayerSession",
    # resources
    "GameClock", "Arena", "Player", "Spawner", "CombatLog",
]
