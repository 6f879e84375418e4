"""
core/ecs.py — Entity-Component-System

Entities are ints. Components are any object, stored by type.
Query by component types to get matching entities.

    w = World()
    ship = w.spawn()
    w.add(ship, Position(750.0, 400.0))
    w.add(ship, CombatStats(base_max_hp=30))

    for eid, pos, stats in w.query(Position, CombatStats):
        ...

Resources (one per type, not tied to an entity) hold session-wide
state: the event bus, the arena bounds, the player session.
"""

from __future__ import annotations
from typing import Any, Iterator


class World:
    def __init__(self):
        self._next_id = 0
        self._stores: dict[type, dict[int, Any]] = {}
        self._resources: dict[type, Any] = {}
        self._dead: set[int] = set()

    # -- Entities --

    def spawn(self, *components: Any) -> int:
        """Create an entity, optionally attaching *components* at once."""
        self._next_id += 1
        eid = self._next_id
        for comp in components:
            self.add(eid, comp)
        return eid

    def kill(self, eid: int):
        """Mark *eid* dead.  It stays readable until ``purge()``."""
        self._dead.add(eid)

    def alive(self, eid: int) -> bool:
        return eid not in self._dead and any(
            eid in store for store in self._stores.values()
        )

    def purge(self):
        """Remove dead entities from all stores. Call once per tick."""
        for store in self._stores.values():
            for eid in self._dead:
                store.pop(eid, None)
        self._dead.clear()

    # -- Components --

    def add(self, eid: int, comp: Any):
        self._stores.setdefault(type(comp), {})[eid] = comp

    def get(self, eid: int, comp_type: type) -> Any | None:
        return self._stores.get(comp_type, {}).get(eid)

    def has(self, eid: int, comp_type: type) -> bool:
        return eid in self._stores.get(comp_type, {})

    # -- Queries --

    def query(self, *types: type) -> Iterator[tuple]:
        """Yield (eid, comp1, comp2, ...) for living entities that have ALL types.

        The matching ids are snapshotted first, so systems may spawn or
        kill entities while iterating.
        """
        if not types:
            return
        buckets = [self._stores.get(t, {}) for t in types]
        smallest = min(buckets, key=len)
        for eid in list(smallest):
            if eid in self._dead:
                continue
            if all(eid in b for b in buckets):
                yield (eid, *(b[eid] for b in buckets))

    def query_one(self, *types: type) -> tuple | None:
        """Return first match or None."""
        for result in self.query(*types):
            return result
        return None

    def count(self, comp_type: type) -> int:
        return sum(1 for eid in self._stores.get(comp_type, {})
                   if eid not in self._dead)

    # -- Resources (singletons, not tied to entities) --

    def set_res(self, resource: Any):
        self._resources[type(resource)] = resource

    def res(self, res_type: type) -> Any | None:
        return self._resources.get(res_type)
