"""core/constants.py — Shared constants used across the codebase.

Centralises magic numbers so there's exactly one place to change them.

Unit System
-----------
The combat core runs in arena units, where 1 unit = 1 px at 1× zoom.

    Distance / position     u       (arena units)
    Speed (authoring)       u/tick  (per 60 fps frame, as weapon tables list it)
    Speed (simulation)      u/s     (authoring speed × TICKS_PER_SECOND)
    Time                    ms      (tick deltas, buff durations, cooldowns)
    Rate of fire            rpm     (rounds per minute)
    Health / shields        HP
    Angles                  rad
    Chances / multipliers   —       (0.15 = 15 %)

Balance values that designers tweak live in ``data/tuning.toml``;
this file only holds structural constants.
"""

# ── Time ────────────────────────────────────────────────────────────
TICKS_PER_SECOND: float = 60.0
MS_PER_SECOND: float = 1000.0
MS_PER_MINUTE: float = 60_000.0

# ── Sides ───────────────────────────────────────────────────────────
SIDE_PLAYER = "player"
SIDE_ENEMY = "enemy"

# ── Projectile kinds ────────────────────────────────────────────────
KIND_PROJECTILE = "projectile"
KIND_AREA = "area"
