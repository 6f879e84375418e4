"""test_stats.py — Final stat calculation, flattening and the adjustment tree.

Covers the calculator's add-before-multiply order, tag scoping,
flattening laws, tag legality at construction time and the
human-readable descriptions.

Run: python test_stats.py
"""
from __future__ import annotations
import sys, traceback

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


from components.stats import (
    Adjustment, InvalidAdjustmentError, Stat, StatAdjustments, Tag, accepts,
)
from logic.stats import (
    calculate_final_stat, describe_adjustments, flatten_stat_adjustments,
)


def adj(raw):
    return StatAdjustments.parse(raw)


# ════════════════════════════════════════════════════════════════════════
#  TEST 1 — Calculator order and tag scoping
# ════════════════════════════════════════════════════════════════════════

def test_calculator():
    print("\n=== Test 1: Final stat calculator ===")

    tree = adj({"damage": {"global": {"addition": 1, "multiplier": 0.5}}})
    assert calculate_final_stat(Stat.DAMAGE, [], 1, tree) == 3.0
    ok("+1 and +50% on base 1 gives 3 (additions first)")

    tree = adj({"damage": {
        "global": {"addition": 1, "multiplier": 0.5},
        "kinetic": {"addition": 1},
    }})
    assert calculate_final_stat(Stat.DAMAGE, [Tag.KINETIC], 1, tree) == 4.5
    ok("global + kinetic on base 1 gives 4.5")

    # kinetic entry must not apply without the tag
    assert calculate_final_stat(Stat.DAMAGE, [Tag.ENERGY], 1, tree) == 3.0
    ok("Adjustment for an absent tag never applies")

    # string tags behave like the enum
    assert calculate_final_stat("damage", ["kinetic"], 1, tree) == 4.5
    ok("String stat/tag keys accepted")

    # listing a tag twice does not double it
    assert calculate_final_stat(Stat.DAMAGE, [Tag.KINETIC, Tag.KINETIC], 1, tree) == 4.5
    ok("Duplicate tags count once")

    assert calculate_final_stat(Stat.ROF, [Tag.KINETIC], 270, tree) == 270
    ok("Stat absent from the tree returns base untouched")

    empty = StatAdjustments()
    for stat in Stat:
        assert calculate_final_stat(stat, [], 7.25, empty) == 7.25
    ok("Empty tree is a no-op for every stat")

    tree = adj({"damageTaken": {"global": {"multiplier": -0.5}}})
    assert calculate_final_stat(Stat.DAMAGE_TAKEN, [], 20, tree) == 10
    ok("Negative multiplier reduces")


# ════════════════════════════════════════════════════════════════════════
#  TEST 2 — Flattening
# ════════════════════════════════════════════════════════════════════════

def test_flatten():
    print("\n=== Test 2: Flattening ===")

    a = adj({"damage": {"global": {"addition": 2}, "kinetic": {"multiplier": 0.25}}})
    b = adj({"damage": {"global": {"multiplier": 0.5}},
             "maxHP": {"global": {"addition": 10}}})
    c = adj({"damage": {"kinetic": {"addition": 1, "multiplier": 0.25}}})

    ab = flatten_stat_adjustments([a, b])
    assert ab == flatten_stat_adjustments([b, a])
    ok("flatten is commutative")

    assert flatten_stat_adjustments([flatten_stat_adjustments([a]), b]) == ab
    assert (flatten_stat_adjustments([ab, c])
            == flatten_stat_adjustments([a, flatten_stat_adjustments([b, c])]))
    ok("flatten is associative")

    merged = flatten_stat_adjustments([a, b, c])
    assert merged.for_stat(Stat.DAMAGE)[Tag.GLOBAL] == Adjustment(2.0, 0.5)
    assert merged.for_stat(Stat.DAMAGE)[Tag.KINETIC] == Adjustment(1.0, 0.5)
    assert merged.for_stat(Stat.MAX_HP)[Tag.GLOBAL] == Adjustment(10.0, 0.0)
    ok("Additions and multipliers summed per (stat, tag)")

    # inputs untouched
    assert a.for_stat(Stat.DAMAGE)[Tag.GLOBAL] == Adjustment(2.0, 0.0)
    ok("Inputs are not modified")

    assert not flatten_stat_adjustments([])
    assert len(flatten_stat_adjustments([])) == 0
    ok("Empty input gives an empty tree")


# ════════════════════════════════════════════════════════════════════════
#  TEST 3 — Tree construction and tag legality
# ════════════════════════════════════════════════════════════════════════

def test_tree_validation():
    print("\n=== Test 3: Adjustment tree validation ===")

    assert accepts(Stat.DAMAGE, Tag.KINETIC)
    assert accepts(Stat.MAX_HP, Tag.GLOBAL)
    assert not accepts(Stat.MAX_HP, Tag.KINETIC)
    assert not accepts(Stat.ROF, Tag.COLLISION)
    ok("Legality map: global always, others per stat")

    bad = [
        {"maxHP": {"kinetic": {"addition": 1}}},     # tag not accepted
        {"speed": {"global": {"addition": 1}}},      # unknown stat
        {"damage": {"plasma": {"addition": 1}}},     # unknown tag
        {"damage": {"global": {"add": 1}}},          # unknown key
        {"damage": 5},                               # not a table
    ]
    for raw in bad:
        try:
            adj(raw)
        except InvalidAdjustmentError:
            continue
        raise AssertionError(f"{raw!r} should be rejected")
    ok("Malformed trees rejected at construction")

    tree = adj({"rof": {"energy": {"multiplier": 0.1}}})
    assert tree.for_stat(Stat.ROF)[Tag.ENERGY] == Adjustment(0.0, 0.1)
    ok("Partial adjustment fills addition with 0")

    assert StatAdjustments.parse(tree.to_dict()) == tree
    assert "rof" in tree and Stat.DAMAGE not in tree and "nonsense" not in tree
    ok("to_dict / __contains__")

    try:
        StatAdjustments({Stat.DAMAGE: {Tag.GLOBAL: 2.0}})
    except InvalidAdjustmentError:
        ok("Raw numbers in place of Adjustment rejected")
    else:
        raise AssertionError("expected InvalidAdjustmentError")


# ════════════════════════════════════════════════════════════════════════
#  TEST 4 — Descriptions
# ════════════════════════════════════════════════════════════════════════

def test_describe():
    print("\n=== Test 4: Descriptions ===")

    assert describe_adjustments(adj(
        {"damage": {"kinetic": {"multiplier": 0.15}}})) == "+15% Kinetic Damage\n"
    ok("Tagged multiplier")

    assert describe_adjustments(adj(
        {"damage": {"global": {"addition": 2}}})) == "+2 to Damage\n"
    ok("Flat addition")

    assert describe_adjustments(adj(
        {"critChance": {"global": {"addition": 0.1}}})) == "+10% to Critical Strike Chance\n"
    ok("Fractional addition shown as a percentage")

    text = describe_adjustments(adj(
        {"damageTaken": {"collision": {"multiplier": -0.25}}}))
    assert text == "-25% Collision Damage Taken\n"
    ok("Negative multiplier")

    assert describe_adjustments(StatAdjustments()) == ""
    ok("Empty tree describes as empty string")


# ════════════════════════════════════════════════════════════════════════
#  Summary
# ════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    for test in (test_calculator, test_flatten, test_tree_validation, test_describe):
        try:
            test()
        except Exception:
            fail(test.__name__, traceback.format_exc())

    print(f"\n{'═' * 50}")
    print(f"  Results: {passed} passed, {failed} failed")
    print(f"{'═' * 50}")
    sys.exit(1 if failed else 0)
