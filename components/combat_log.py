"""components.combat_log — Structured record of what happened in a fight.

A world resource fed by the combat systems: every landed hit, kill,
buff expiry and tech use becomes one ``LogEntry``.  Debug overlays and
the test scripts read it to see *why* a number came out the way it did.

    log = world.res(CombatLog)
    log.record(eid, "hit", "Autocannon hit for 6", t=clock.time,
               details={"damage": 6.0, "shielded": False})

Only the newest ``max_entries`` are kept.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field


@dataclass(frozen=True)
class LogEntry:
    t: float            # GameClock time, ms
    eid: int
    cat: str            # "hit" | "kill" | "buff" | "skill"
    msg: str
    details: dict | None = None

    def __str__(self) -> str:
        return f"[{self.t / 1000:7.2f}s] #{self.eid:<4} {self.cat:<5} {self.msg}"


@dataclass
class CombatLog:
    max_entries: int = 500
    # If non-empty, only these categories are recorded.
    categories: set[str] = field(default_factory=set)
    paused: bool = False
    entries: deque = field(init=False, repr=False)

    def __post_init__(self):
        self.entries = deque(maxlen=self.max_entries)

    def record(self, eid: int, cat: str, msg: str, *,
               t: float = 0.0, details: dict | None = None) -> None:
        if self.paused or (self.categories and cat not in self.categories):
            return
        self.entries.append(LogEntry(t, eid, cat, msg, details))

    def clear(self) -> None:
        self.entries.clear()

    def recent(self, n: int = 50) -> list[LogEntry]:
        """The *n* newest entries, oldest first."""
        return list(self.entries)[-n:]

    def for_eid(self, eid: int, n: int = 30) -> list[LogEntry]:
        return [e for e in self.entries if e.eid == eid][-n:]

    def for_cat(self, cat: str, n: int = 50) -> list[LogEntry]:
        return [e for e in self.entries if e.cat == cat][-n:]

    def damage_taken(self, eid: int) -> float:
        """Total landed damage recorded against *eid* (shield hits included)."""
        return sum((e.details or {}).get("damage", 0.0)
                   for e in self.entries if e.eid == eid and e.cat == "hit")
