"""test_skill_tree.py — Skill-tree allocation, the player session and TOML loading.

Run: python test_skill_tree.py
"""
from __future__ import annotations
import sys, traceback
from pathlib import Path

passed = 0
failed = 0


def ok(label: str):
    global passed
    passed += 1
    print(f"  [PASS] {label}")


def fail(label: str, detail: str = ""):
    global failed
    failed += 1
    print(f"  [FAIL] {label}")
    if detail:
        for line in detail.strip().splitlines():
            print(f"         {line}")


from components import (
    ClassNode, CombatStats, ConditionalPassiveNode, Loadout, PassiveNode,
    PlayerSession, SkillClass, Stat, StatAdjustments, TechNode, WeaponNode,
)
from core.constants import SIDE_PLAYER
from core.data import SkillTreeError, load_skill_trees, parse_skill_trees
from logic.arsenal import CANNON, EXPULSION, MISSILE_LAUNCHER, REINFORCE, SKILLS, WEAPONS
from logic.combat.ledger import update_combat_stats
from logic.entity_factory import create_arena
from logic.skill_tree import allocate_node, apply_skill_tree, new_session

ROOT = Path(__file__).resolve().parent
TREES = ROOT / "data" / "skill_trees.toml"


def adj(raw):
    return StatAdjustments.parse(raw)


ROOT_NODE = ClassNode(id="ship", name="Test hull", weapon=CANNON)
RED_1 = PassiveNode(id="red-1", connected=("ship",), colour="r",
                    stat_adjustments=adj({"maxHP": {"global": {"addition": 10}}}))
RED_2 = PassiveNode(id="red-2", connected=("red-1",), colour="r",
                    stat_adjustments=adj({"damage": {"global": {"multiplier": 0.15}}}))
RED_TECH = TechNode(id="red-tech", connected=("red-2",), colour="r", tech=REINFORCE)
GREEN_1 = PassiveNode(id="green-1", connected=("ship",), colour="g")


# ════════════════════════════════════════════════════════════════════════
#  TEST 1 — Allocation rules
# ════════════════════════════════════════════════════════════════════════

def test_allocation():
    print("\n=== Test 1: Allocation rules ===")

    session = PlayerSession(skill_points=2)
    session.grant(ROOT_NODE)
    assert session.skill_points == 2 and "ship" in session.allocated
    ok("grant() allocates for free")

    assert session.can_allocate(RED_1)
    assert not session.can_allocate(RED_2)
    ok("Only nodes hanging off an allocated node are available")

    assert session.allocate(RED_1) and session.skill_points == 1
    assert not session.can_allocate(RED_1)
    assert not session.allocate(RED_1)
    ok("A node is allocated once and costs one point")

    assert session.allocate(RED_2) and session.skill_points == 0
    assert not session.can_allocate(RED_TECH)
    assert not session.allocate(GREEN_1)
    ok("No points, no allocation")

    session.skill_points = 1
    assert session.can_allocate(PassiveNode(id="orphan"))
    ok("Nodes without connections are always reachable")

    reverse = PlayerSession(skill_points=1)
    reverse.grant(RED_2)
    assert reverse.can_allocate(RED_1)
    ok("A node named by an allocated node is reachable in reverse")

    revision = session.revision
    session.allocate(GREEN_1)
    assert session.revision == revision + 1
    assert [n.id for n in session.nodes()] == ["ship", "red-1", "red-2", "green-1"]
    ok("Allocation bumps the revision and keeps order")


def test_ratings_and_classes():
    print("\n=== Test 2: Colour ratings and class prerequisites ===")

    session = PlayerSession(skill_points=10)
    session.grant(ROOT_NODE)
    session.allocate(RED_1)
    session.allocate(RED_2)
    session.allocate(GREEN_1)
    assert session.ratings() == {"r": 2, "g": 1, "b": 0}
    ok("ratings() counts allocated nodes per colour")

    raider = SkillClass(id="t1-red", name="RAIDER", prerequisites={"r": 3})
    assert not session.can_allocate_class(raider)
    session.allocate(RED_TECH)
    assert session.can_allocate_class(raider)
    ok("Class unlocks once its colour requirements are met")

    assert session.can_allocate_class(SkillClass(id="free", name="free"))
    ok("Class without prerequisites is always available")


def test_record_kill():
    print("\n=== Test 3: Score and skill points ===")

    session = PlayerSession(skill_points=0, kills_per_skill_point=10)
    earned = [session.record_kill() for _ in range(9)]
    assert not any(earned) and session.skill_points == 0
    assert session.record_kill()
    assert session.score == 10 and session.skill_points == 1
    for _ in range(10):
        session.record_kill()
    assert session.score == 20 and session.skill_points == 2
    ok("One skill point every 10 kills")


# ════════════════════════════════════════════════════════════════════════
#  TEST 4 — Applying a tree to a ship
# ════════════════════════════════════════════════════════════════════════

def test_apply_skill_tree():
    print("\n=== Test 4: apply_skill_tree ===")

    session = PlayerSession(skill_points=10)
    session.grant(ROOT_NODE)
    session.allocate(RED_1)
    session.allocate(RED_2)
    session.allocate(RED_TECH)
    session.allocate(WeaponNode(id="launcher", weapon=MISSILE_LAUNCHER))
    session.allocate(ConditionalPassiveNode(
        id="last-stand", condition=("hp", "<=", 10.0),
        stat_adjustments=adj({"damageTaken": {"global": {"multiplier": -0.5}}})))
    session.allocate(PassiveNode(id="expel", enhancements=(EXPULSION,)))

    stats = CombatStats(side=SIDE_PLAYER, base_max_hp=30.0)
    loadout = Loadout(selected=1, cooldowns=[5.0])
    apply_skill_tree(session, stats, loadout)
    update_combat_stats(stats, 0)

    assert stats.max_hp == 40 and stats.hp == 40
    assert Stat.DAMAGE in stats.base_adjustments
    ok("Passive nodes flatten into the base layer")

    assert len(stats.conditionals) == 1
    assert stats.conditionals[0].condition == ("hp", "<=", 10.0)
    assert Stat.DAMAGE_TAKEN not in stats.effective_adjustments()
    ok("Conditional nodes become conditional passives")

    assert loadout.weapons == [CANNON, MISSILE_LAUNCHER] and loadout.selected == 0
    assert loadout.skills == [REINFORCE] and loadout.cooldowns == [0.0]
    assert loadout.enhancements == {EXPULSION}
    ok("Class/weapon/tech nodes and enhancements fill the loadout")

    apply_skill_tree(PlayerSession(), stats)
    assert not stats.base_adjustments and stats.conditionals == []
    ok("Re-applying an empty session clears the base layer")


# ════════════════════════════════════════════════════════════════════════
#  TEST 5 — Data loading
# ════════════════════════════════════════════════════════════════════════

def _tree(*nodes, **section):
    return {"test": {"name": "Test", **section, "nodes": list(nodes)}}


def test_parse_errors():
    print("\n=== Test 5: Skill-tree validation ===")

    good = {"id": "a", "type": "passive",
            "stat_adjustments": {"damage": {"global": {"addition": 1}}}}
    classes = parse_skill_trees(_tree(good), WEAPONS, SKILLS)
    node = classes["test"].tree[0]
    assert isinstance(node, PassiveNode) and node.stat_adjustments == adj(good["stat_adjustments"])
    ok("Minimal passive node parses")

    bad_inputs = {
        "duplicate id": _tree(good, dict(good)),
        "missing id": _tree({"type": "passive"}),
        "unknown type": _tree({"id": "x", "type": "mystery"}),
        "unknown weapon": _tree({"id": "x", "type": "weapon", "weapon": "railgun"}),
        "unknown tech": _tree({"id": "x", "type": "tech", "tech": "cloak"}),
        "bad colour": _tree({"id": "x", "type": "passive", "colour": "purple"}),
        "bad prerequisite": _tree(good, prerequisites={"y": 2}),
        "dangling connection": _tree({"id": "x", "type": "passive", "connected": ["nope"]}),
        "illegal tag": _tree({"id": "x", "type": "passive",
                              "stat_adjustments": {"maxHP": {"kinetic": {"addition": 1}}}}),
        "bad operator": _tree({"id": "x", "type": "conditionalPassive",
                               "condition": ["hp", "<", 5]}),
        "non-numeric condition": _tree({"id": "x", "type": "conditionalPassive",
                                        "condition": ["hp", "<=", "low"]}),
        "short condition": _tree({"id": "x", "type": "conditionalPassive",
                                  "condition": ["hp", "<="]}),
    }
    for label, data in bad_inputs.items():
        try:
            parse_skill_trees(data, WEAPONS, SKILLS)
        except SkillTreeError:
            continue
        raise AssertionError(f"{label}: expected SkillTreeError")
    ok(f"{len(bad_inputs)} malformed trees rejected with SkillTreeError")


def test_load_game_data():
    print("\n=== Test 6: data/skill_trees.toml ===")

    classes = load_skill_trees(TREES, WEAPONS, SKILLS)
    assert list(classes) == ["t0-ship", "t1-red"]
    ship = classes["t0-ship"]
    assert isinstance(ship.root, ClassNode) and ship.root.weapon is CANNON
    assert classes["t1-red"].prerequisites == {"r": 3}
    ok("Both classes load; the starting hull carries the cannon")

    nodes = {n.id: n for c in classes.values() for n in c.tree}
    assert nodes["red-capstone"].tech is REINFORCE
    assert nodes["t1-red|base"].weapon is MISSILE_LAUNCHER
    conversion = nodes["t1-red|life-to-armour"]
    assert isinstance(conversion, ConditionalPassiveNode)
    assert conversion.condition == ("armour", "<=", 0.0)
    assert nodes["t1-red|reinforce-buff"].enhancements == (EXPULSION,)
    ok("Techs, weapons, conditions and enhancements resolved")

    session = new_session(classes.values())
    assert list(session.allocated) == ["ship"]
    ok("new_session() starts with the first hull allocated")

    world, player = create_arena(classes.values())
    session = world.res(PlayerSession)
    start = session.skill_points
    assert allocate_node(world, nodes["red-1"])
    assert not allocate_node(world, nodes["red-capstone"])
    assert session.skill_points == start - 1
    stats = world.get(player, CombatStats)
    update_combat_stats(stats, 0)
    assert stats.max_hp == 40
    assert world.get(player, Loadout).weapons == [CANNON]
    ok("allocate_node() spends a point and refits the player")

    for node_id in ("red-2-offensive", "red-2-defensive"):
        allocate_node(world, nodes[node_id])
    assert session.can_allocate_class(classes["t1-red"])
    ok("Three red nodes unlock the RAIDER class")


# ════════════════════════════════════════════════════════════════════════
#  Summary
# ════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    for test in (test_allocation, test_ratings_and_classes, test_record_kill,
                 test_apply_skill_tree, test_parse_errors, test_load_game_data):
        try:
            test()
        except Exception:
            fail(test.__name__, traceback.format_exc())

    print(f"\n{'═' * 50}")
    print(f"  Results: {passed} passed, {failed} failed")
    print(f"{'═' * 50}")
    sys.exit(1 if failed else 0)
