"""logic/skill_tree.py — Turning allocated skill-tree nodes into ship stats.

The session's allocated nodes feed the player like this:

    passive             → flattened into the base adjustment layer
    conditionalPassive  → ConditionalPassive entries on CombatStats
    weapon / class      → Loadout weapons (class roots carry the hull gun)
    tech                → Loadout techs
    node.enhancements   → Loadout enhancements

Kills are scored through the event bus: every enemy ``EntityDied``
counts toward the next skill point.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Iterable

from components import (
    ClassNode, CombatStats, ConditionalPassive, ConditionalPassiveNode,
    Loadout, PassiveNode, Player, PlayerSession, SkillClass, SkillNode,
    TechNode, WeaponNode,
)
from core.constants import SIDE_ENEMY
from core.events import EventBus, EntityDied
from logic.combat.loadout import equip
from logic.stats import flatten_stat_adjustments

if TYPE_CHECKING:
    from core.ecs import World


def apply_skill_tree(session: PlayerSession, stats: CombatStats,
                     loadout: Loadout | None = None) -> None:
    """Rebuild *stats* (and *loadout*) from everything *session* has allocated.

    Only the base layer is replaced; buffs keep running.  The combined
    tree picks the change up on the next ledger update.
    """
    nodes = session.nodes()
    stats.set_base_adjustments(flatten_stat_adjustments(
        n.stat_adjustments for n in nodes if isinstance(n, PassiveNode)))
    stats.conditionals = [
        ConditionalPassive(n.condition, n.stat_adjustments, n.name)
        for n in nodes if isinstance(n, ConditionalPassiveNode)
    ]
    if loadout is None:
        return
    weapons = [n.weapon for n in nodes
               if isinstance(n, (ClassNode, WeaponNode)) and n.weapon is not None]
    techs = [n.tech for n in nodes if isinstance(n, TechNode) and n.tech is not None]
    enhancements = {e for n in nodes for e in n.enhancements}
    equip(loadout, weapons, techs, enhancements)


def new_session(classes: Iterable[SkillClass]) -> PlayerSession:
    """Fresh session with the first class's root node already allocated."""
    session = PlayerSession()
    for skill_class in classes:
        if skill_class.root is not None:
            session.grant(skill_class.root)
        break
    return session


def allocate_node(world: "World", node: SkillNode) -> bool:
    """Spend a skill point on *node* and refit the player ship."""
    session = world.res(PlayerSession)
    if session is None or not session.allocate(node):
        return False
    print(f"[SKILL] Allocated {node.name or node.id} "
          f"({session.skill_points} points left)")
    refit_player(world)
    return True


def refit_player(world: "World") -> None:
    """Re-apply the session to the player entity, if there is one."""
    session = world.res(PlayerSession)
    found = world.query_one(Player, CombatStats)
    if session is None or found is None:
        return
    eid, _player, stats = found
    apply_skill_tree(session, stats, world.get(eid, Loadout))


def install_scoring(world: "World") -> None:
    """Subscribe the session to enemy deaths on the world's event bus."""
    bus = world.res(EventBus)
    if bus is None:
        return

    def on_died(event: EntityDied) -> None:
        session = world.res(PlayerSession)
        if session is None or event.side != SIDE_ENEMY:
            return
        if session.record_kill():
            print(f"[SKILL] Score {session.score}: +1 skill point "
                  f"({session.skill_points} unspent)")

    bus.subscribe(EntityDied, on_died)
