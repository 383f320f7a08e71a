# entity.py

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Set
import time

from phys import Position, Velocity, Acceleration
from records import EntityKind, Record

EntityId = int


@dataclass(frozen=True)
class DragState:
    start_position: Position
    start_time: float  # time.monotonic() seconds


class Entity:
    """
    One node of the graph. Identity (payload) is fixed at creation; the physics
    fields are owned by the simulator, the UI flags by the interaction layer.
    """
    __slots__ = ("position", "velocity", "acceleration", "dragged",
                 "is_under_mouse", "is_scraped", "payload", "related")

    def __init__(self, payload: Record, position: Position,
                 velocity: Optional[Velocity] = None,
                 acceleration: Optional[Acceleration] = None):
        self.payload = payload
        self.position = position
        self.velocity = velocity if velocity is not None else Velocity()
        self.acceleration = acceleration if acceleration is not None else Acceleration()
        self.dragged: Optional[DragState] = None
        self.is_under_mouse = False
        self.is_scraped = False
        self.related: Set[EntityId] = set()

    # --- Getters ---
    def getKind(self) -> EntityKind:
        return self.payload.kind

    def isCollection(self) -> bool:
        return self.payload.kind is EntityKind.COLLECTION

    def isMember(self) -> bool:
        return self.payload.kind is EntityKind.MEMBER

    def getUrl(self) -> str:
        return self.payload.url

    def getExternalId(self) -> int:
        return self.payload.external_id

    def isPinned(self) -> bool:
        # Held under the pointer: no integration, velocity forced to zero
        return self.is_under_mouse

    def startDrag(self, now: Optional[float] = None) -> None:
        self.dragged = DragState(self.position, time.monotonic() if now is None else now)

    def getDegree(self) -> int:
        return len(self.related)

    def __repr__(self) -> str:
        k = "C" if self.isCollection() else "M"
        return f"{k}({self.payload.external_id} @ {self.position.x:.1f},{self.position.y:.1f})"
