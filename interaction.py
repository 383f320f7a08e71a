# interaction.py

from __future__ import annotations
from typing import List, Optional
import time

from entity import EntityId
from layout_config import InteractionConfig
from logsetup import logger
from phys import Position


class Interaction:
    """
    Pointer state over a graph store, independent of any UI toolkit.
    Positions are in scene (graph) coordinates. Only the UI flags
    (is_under_mouse, dragged) and a dragged entity's position are written.
    """

    def __init__(self, store, config: Optional[InteractionConfig] = None):
        self.store = store
        self.config = config if config is not None else InteractionConfig()

    def update_under_mouse(self, mouse_pos: Position) -> List[EntityId]:
        r = self.config.proximity
        hovered = []
        for entity_id, e in self.store.arena.items():
            e.is_under_mouse = (e.position - mouse_pos).chebyshev() < r
            if e.is_under_mouse:
                hovered.append(entity_id)
        return hovered

    def hovered(self) -> List[EntityId]:
        return [i for i, e in self.store.arena.items() if e.is_under_mouse]

    def dragging(self) -> List[EntityId]:
        return [i for i, e in self.store.arena.items() if e.dragged is not None]

    def start_drag(self, now: Optional[float] = None) -> List[EntityId]:
        now = time.monotonic() if now is None else now
        started = []
        for entity_id, e in self.store.arena.items():
            if e.is_under_mouse:
                e.startDrag(now)
                started.append(entity_id)
        return started

    def update_drag(self, mouse_pos: Position) -> bool:
        """Move dragged entities onto the pointer. False means nothing is held (caller pans)."""
        moved = False
        for e in self.store.arena:
            if e.dragged is not None:
                e.position = mouse_pos
                moved = True
        return moved

    def stop_drag(self, now: Optional[float] = None) -> Optional[EntityId]:
        """
        Release everything held. Returns the entity that counts as clicked:
        barely moved and released quickly.
        """
        now = time.monotonic() if now is None else now
        clicked = None
        for entity_id, e in self.store.arena.items():
            if e.dragged is None:
                continue
            drag, e.dragged = e.dragged, None
            moved = (drag.start_position - e.position).chebyshev()
            if moved < self.config.proximity and now - drag.start_time < self.config.click_duration:
                clicked = entity_id
        if clicked is not None:
            logger.debug(f"Clicked #{clicked}")
        return clicked
