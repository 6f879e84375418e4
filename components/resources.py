"""components.resources — World-level singletons (not per-entity)."""

from __future__ import annotations
from dataclasses import dataclass, field

from core.tuning import get as _tun


@dataclass
class GameClock:
    """Monotonic game time — accumulated tick deltas since session start (ms)."""
    time: float = 0.0


@dataclass
class Arena:
    """Playfield bounds.  Objects fully outside are culled (the player wraps)."""
    width: float = field(default_factory=lambda: _tun("arena", "width", 1500.0))
    height: float = field(default_factory=lambda: _tun("arena", "height", 800.0))


@dataclass
class Player:
    """Marks the player ship."""
    max_speed: float = field(default_factory=lambda: _tun("player", "max_speed", 5.0))  # u/tick
    direction: tuple[int, int] = (0, 0)


@dataclass
class Spawner:
    """Asteroid spawn pacing.  ``scale`` multiplies asteroid size and speed."""
    interval_ms: float = field(default_factory=lambda: _tun("spawner", "interval_ms", 500.0))
    scale: float = field(default_factory=lambda: _tun("spawner", "scale", 1.0))
    elapsed_ms: float = 0.0
    running: bool = True
