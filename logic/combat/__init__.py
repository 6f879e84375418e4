"""logic/combat — Combat subpackage.

Modules
-------
ledger       — update_combat_stats(): buffs, conditionals, derived maxima
damage       — take_damage() pipeline, on_kill() + handle_death()
projectiles  — shoot() fan-out, resolve_projectile_hit(), projectile_system()
collision    — first-contact hull checks, ramming, arena bounds
loadout      — rate of fire, weapon cycling, tech cooldowns

Public symbols are re-exported here for ``from logic.combat import X``.
"""

# ── ledger ───────────────────────────────────────────────────────────
from logic.combat.ledger import (                    # noqa: F401
    condition_met,
    ledger_system,
    update_combat_stats,
)

# ── damage + death ───────────────────────────────────────────────────
from logic.combat.damage import (                    # noqa: F401
    DamageResult,
    handle_death,
    on_kill,
    take_damage,
)

# ── projectiles ──────────────────────────────────────────────────────
from logic.combat.projectiles import (               # noqa: F401
    make_projectile,
    projectile_system,
    resolve_projectile_hit,
    shoot,
    spawn_projectiles,
)

# ── collision ────────────────────────────────────────────────────────
from logic.combat.collision import (                 # noqa: F401
    bounds_system,
    collision_system,
    ram_damage,
)

# ── loadout ──────────────────────────────────────────────────────────
from logic.combat.loadout import (                   # noqa: F401
    cooldown_ms,
    cycle_weapon,
    equip,
    fire_interval_ms,
    fire_weapon,
    loadout_system,
    use_skill,
)
