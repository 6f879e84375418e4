"""core/events.py — Combat outcome events and the bus that carries them.

Combat resolution itself is synchronous: a projectile hit calls
``take_damage`` and ``on_kill`` directly.  The bus is for *observers*
of combat (kill scoring, a HUD, sound) that only need to hear about
outcomes once per tick.  It lives as an ECS resource::

    bus = world.res(EventBus)
    bus.emit(EntityDied(eid=42, killer_eid=7, side="enemy"))
    bus.subscribe(EntityDied, on_died)

``tick_combat`` drains it once per frame, after every system has run.
Events are plain dataclasses with no behaviour.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable
from collections import defaultdict


# ═══════════════════════════════════════════════════════════════════
#  Event definitions
# ═══════════════════════════════════════════════════════════════════

@dataclass
class EntityDied:
    """A combat entity's HP dropped to zero or below."""
    eid: int
    killer_eid: int | None = None
    side: str = ""


@dataclass
class EntityHit:
    """Damage landed on an entity (after avoidance)."""
    eid: int
    damage: float = 0.0
    is_crit: bool = False
    shielded: bool = False
    attacker_eid: int | None = None


@dataclass
class BuffExpired:
    """A buff ran out on an entity."""
    eid: int
    name: str = ""


@dataclass
class SkillUsed:
    """An active skill was triggered."""
    eid: int
    skill_id: str = ""


# ═══════════════════════════════════════════════════════════════════
#  Event Bus
# ═══════════════════════════════════════════════════════════════════

# Rounds of handler-emitted events one drain will follow before giving up.
MAX_DRAIN_ROUNDS = 1000


class EventBus:
    """Queue of combat outcomes, delivered to observers once per tick."""

    def __init__(self):
        self._queue: list[Any] = []
        self._subs: dict[str, list[Callable]] = defaultdict(list)
        self._counts: dict[str, int] = defaultdict(int)

    def emit(self, event) -> None:
        """Queue *event* for the next ``drain()``."""
        self._queue.append(event)

    def subscribe(self, event_type: str | type, handler: Callable) -> None:
        """Call *handler* with every event of *event_type*.

        *event_type* is the event class or its name (``"EntityDied"``).
        """
        name = event_type if isinstance(event_type, str) else event_type.__name__
        self._subs[name].append(handler)

    def drain(self) -> int:
        """Deliver queued events in FIFO order.  Returns how many were delivered.

        Events emitted by handlers are delivered in the same drain,
        after the current batch.  Handler exceptions propagate and leave
        the rest of the batch undelivered.
        """
        delivered = 0
        for _ in range(MAX_DRAIN_ROUNDS):
            if not self._queue:
                break
            batch, self._queue = self._queue, []
            for event in batch:
                name = type(event).__name__
                self._counts[name] += 1
                for handler in self._subs.get(name, ()):
                    handler(event)
            delivered += len(batch)
        return delivered

    def clear(self) -> None:
        """Drop pending events without delivering them."""
        self._queue.clear()

    def counts(self) -> dict[str, int]:
        """Events delivered so far, by type name."""
        return dict(self._counts)

    def pending_count(self) -> int:
        return len(self._queue)

    def __repr__(self) -> str:
        return f"EventBus(pending={len(self._queue)}, subs={len(self._subs)})"
