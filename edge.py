# edge.py
from __future__ import annotations
from typing import Tuple


class Edge:
    """
    Membership link. Always stored as (collection_id, member_id) so that the
    same link reached from either side hashes the same.
    """
    __slots__ = ("_collection", "_member")

    def __init__(self, collectionId: int, memberId: int):
        # Prevent loops
        if collectionId == memberId:
            raise ValueError("Edge endpoints must be distinct (no loops).")
        self._collection = int(collectionId)
        self._member = int(memberId)

    # --- Getters ---
    def getCollectionId(self) -> int: return self._collection
    def getMemberId(self) -> int: return self._member

    def other(self, entity_id: int) -> int:
        if entity_id == self._collection:
            return self._member
        if entity_id == self._member:
            return self._collection
        raise ValueError(f"{entity_id} is not an endpoint of {self!r}")

    # Convenience: tuple key by endpoint ids
    def key(self) -> Tuple[int, int]:
        return (self._collection, self._member)

    def __iter__(self):
        return iter(self.key())

    def __eq__(self, other) -> bool:
        return isinstance(other, Edge) and self.key() == other.key()

    def __hash__(self) -> int:
        return hash(self.key())

    def __repr__(self):
        return f"E(c{self._collection} - m{self._member})"
