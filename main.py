"""
main.py — Bootstrap

1. Load tuning constants and skill-tree data
2. Create the arena world and the player ship
3. Spend a few skill points
4. Run a headless autopilot fight until the player dies or time runs out
"""

import random
import sys
from pathlib import Path

from core import tuning
from core.data import load_skill_trees
from components import CombatLog, CombatStats, Loadout, PlayerSession, Position
from core.constants import SIDE_ENEMY
from logic.arsenal import SKILLS, WEAPONS
from logic.entity_factory import create_arena
from logic.skill_tree import allocate_node
from logic.stats import describe_adjustments
from logic.combat.loadout import use_skill
from logic.tick import input_system, tick_combat

ROOT = Path(__file__).resolve().parent
FRAME_MS = 1000.0 / 60.0

# Nodes the autopilot buys at start, in order.
OPENING_BUILD = ["red-1", "red-2-offensive", "red-2-defensive", "red-capstone",
                 "green-1", "green-2-offensive"]


def nearest_enemy(world, x: float, y: float) -> tuple[float, float] | None:
    best, best_d2 = None, float("inf")
    for eid, pos, stats in world.query(Position, CombatStats):
        if stats.side != SIDE_ENEMY:
            continue
        d2 = (pos.x - x) ** 2 + (pos.y - y) ** 2
        if d2 < best_d2:
            best, best_d2 = (pos.x, pos.y), d2
    return best


def main(seconds: float = 60.0, seed: int | None = None):
    tuning.load()
    classes = load_skill_trees(ROOT / "data" / "skill_trees.toml", WEAPONS, SKILLS)
    rng = random.Random(seed)

    world, player = create_arena(classes.values())
    nodes = {n.id: n for c in classes.values() for n in c.tree}
    for node_id in OPENING_BUILD:
        allocate_node(world, nodes[node_id])

    session = world.res(PlayerSession)
    stats = world.get(player, CombatStats)
    print(f"[MAIN] Skill tree:\n{describe_adjustments(stats.base_adjustments)}")

    elapsed = 0.0
    while elapsed < seconds * 1000 and world.alive(player):
        pos = world.get(player, Position)
        target = nearest_enemy(world, pos.x, pos.y)
        input_system(world, aim=target or (pos.x + 1, pos.y), firing=target is not None)
        loadout = world.get(player, Loadout)
        if loadout.skills and stats.hp < stats.max_hp / 2:
            use_skill(world, player, 0)
        tick_combat(world, FRAME_MS, rng)
        elapsed += FRAME_MS

    log = world.res(CombatLog)
    for entry in log.recent(8):
        print(f"[MAIN] {entry}")
    print(f"[MAIN] {elapsed / 1000:.1f}s survived, score {session.score}, "
          f"{session.skill_points} unspent skill points")
    return session.score


if __name__ == "__main__":
    seed = int(sys.argv[1]) if len(sys.argv) > 1 else None
    main(seed=seed)
