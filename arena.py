# arena.py

from __future__ import annotations
from concurrent.futures import Executor
from typing import Callable, Iterator, List, Optional, Tuple

from entity import Entity, EntityId
from errors import InvariantViolation

DEFAULT_BATCH = 1024


class EntityArena:
    """
    Insertion-ordered, index-stable entity storage.

    - ids are dense list indices handed out by add(); nothing is ever removed,
      so an id keeps pointing at the same entity for the arena's lifetime
    - pairwise access hands out two distinct entities; asking for the same
      id twice is rejected before any lookup
    """

    def __init__(self):
        self._items: List[Entity] = []

    # -------- basic ops --------
    def add(self, entity: Entity) -> EntityId:
        self._items.append(entity)
        return len(self._items) - 1

    def _check(self, entity_id: EntityId) -> None:
        # Negative ids would silently wrap on a list, reject them explicitly
        if not isinstance(entity_id, int) or not 0 <= entity_id < len(self._items):
            raise IndexError(f"EntityId {entity_id!r} out of range (arena size {len(self._items)})")

    def get(self, entity_id: EntityId) -> Entity:
        self._check(entity_id)
        return self._items[entity_id]

    def set(self, entity_id: EntityId, entity: Entity) -> None:
        self._check(entity_id)
        self._items[entity_id] = entity

    __getitem__ = get
    __setitem__ = set

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._items)

    def ids(self) -> range:
        return range(len(self._items))

    def items(self) -> Iterator[Tuple[EntityId, Entity]]:
        return enumerate(self._items)

    def clear(self):
        self._items.clear()

    # -------- pairwise access --------
    def pair(self, i: EntityId, j: EntityId) -> Tuple[Entity, Entity]:
        """Both entities, in argument order. i == j is a caller bug."""
        self._check(i)
        self._check(j)
        if i == j:
            raise InvariantViolation(f"pair() called twice with the same EntityId {i}")
        return self._items[i], self._items[j]

    def for_each_unique_pair(self, fn: Callable[[Entity, Entity], None]) -> None:
        """
        Call fn(a, b) once for every unordered pair of distinct entities,
        n*(n-1)/2 calls in total. The split point moves right one slot per
        outer step: entity i against every entity in the tail after it.
        """
        items = self._items
        n = len(items)
        for i in range(n - 1):
            a = items[i]
            for j in range(i + 1, n):
                fn(a, items[j])

    def unique_pairs(self) -> Iterator[Tuple[Entity, Entity]]:
        items = self._items
        n = len(items)
        for i in range(n - 1):
            a = items[i]
            for j in range(i + 1, n):
                yield a, items[j]

    # -------- data-parallel per-entity updates --------
    def par_for_each(self, fn: Callable[[Entity], None],
                     executor: Optional[Executor] = None,
                     batch_size: int = DEFAULT_BATCH) -> None:
        """
        Apply fn to every entity. With an executor the arena is cut into
        disjoint slices of batch_size, one task per slice. fn must only read
        and write the entity it is given.
        """
        items = self._items
        n = len(items)
        batch_size = max(1, int(batch_size))
        if executor is None or n <= batch_size:
            for e in items:
                fn(e)
            return

        def run_slice(lo: int, hi: int) -> None:
            for k in range(lo, hi):
                fn(items[k])

        futures = [executor.submit(run_slice, lo, min(lo + batch_size, n))
                   for lo in range(0, n, batch_size)]
        # result() re-raises anything a worker hit
        for f in futures:
            f.result()
