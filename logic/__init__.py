"""logic — Game systems package.

Subpackages
-----------
combat/     — ledger, damage pipeline, projectiles, collisions, loadout

Top-level modules
-----------------
stats       — calculate_final_stat / flatten_stat_adjustments / descriptions
arsenal     — built-in weapons and techs
skill_tree  — applying allocated nodes to the player, kill scoring
spawner     — asteroid spawning
movement    — steering and position integration
tick        — per-frame system orchestrator
"""
