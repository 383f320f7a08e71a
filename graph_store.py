# graph_store.py

from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Set, Tuple
import random
import secrets

from arena import EntityArena
from edge import Edge
from entity import Entity, EntityId
from errors import InvariantViolation
from generator import generate_random_graph
from layout_config import LayoutConfig, PlacementConfig
from logsetup import logger
from phys import Acceleration, Distance, Position, Velocity
from records import CollectionRecord, EntityKind, MemberRecord, Record


class GraphStore:
    def __init__(self, config: Optional[LayoutConfig] = None,
                 rng: Optional[random.Random] = None):
        self.config = config if config is not None else LayoutConfig()
        self.arena = EntityArena()
        self.edges: Set[Edge] = set()
        self._edge_order: List[Edge] = []      # insertion order, for stable rendering
        self.collections: Dict[int, EntityId] = {}
        self.members: Dict[int, EntityId] = {}

        # Robust randomness unless the caller pins a seed
        self.rng = rng if rng is not None else random.Random(secrets.randbits(64))

    # --------------------------
    # Small helpers
    # --------------------------
    @property
    def placement(self) -> PlacementConfig:
        return self.config.placement

    def _dedup_map(self, kind: EntityKind) -> Dict[int, EntityId]:
        return self.collections if kind is EntityKind.COLLECTION else self.members

    def _spawn_velocity(self) -> Velocity:
        s = self.placement.spawn_speed
        return Velocity.sample_uniform(self.rng, Velocity(-s, -s), Velocity(s, s))

    def _random_canvas_position(self) -> Position:
        p = self.placement
        return Position.sample_uniform(self.rng, Position.from_tuple(p.canvas_min),
                                       Position.from_tuple(p.canvas_max))

    def _position_near(self, anchor: Position) -> Position:
        half = self.placement.window / 2.0
        offset = Distance(half, half)
        return Position.sample_uniform(self.rng, anchor - offset, anchor + offset)

    def _spawn(self, record: Record, position: Position) -> EntityId:
        entity = Entity(record, position, self._spawn_velocity(), Acceleration())
        entity_id = self.arena.add(entity)
        self._dedup_map(record.kind)[record.external_id] = entity_id
        logger.debug(f"Spawned {record.kind.value} {record.external_id} as #{entity_id} at {position}")
        return entity_id

    def _resolve(self, record: Record) -> Optional[EntityId]:
        entity_id = self._dedup_map(record.kind).get(record.external_id)
        if entity_id is None:
            return None
        if self.arena.get(entity_id).getKind() is not record.kind:
            raise InvariantViolation(
                f"{record.kind.value} id {record.external_id} maps to #{entity_id}, "
                f"which is a {self.arena.get(entity_id).getKind().value}")
        return entity_id

    # --------------------------
    # Insertion
    # --------------------------
    def insert_edge(self, collection: CollectionRecord, member: MemberRecord) -> Edge:
        """
        Add the membership link collection <-> member, creating whichever
        endpoint is new:
        - one side known: the new one spawns in a window around the known one
        - neither known: both spawn anywhere on the canvas
        - both known: nothing is created
        Re-inserting an existing link changes nothing.
        """
        if not isinstance(collection, CollectionRecord):
            raise InvariantViolation(f"Expected a CollectionRecord, got {collection!r}")
        if not isinstance(member, MemberRecord):
            raise InvariantViolation(f"Expected a MemberRecord, got {member!r}")

        c_id = self._resolve(collection)
        m_id = self._resolve(member)

        if c_id is not None and m_id is None:
            m_id = self._spawn(member, self._position_near(self.arena[c_id].position))
        elif m_id is not None and c_id is None:
            c_id = self._spawn(collection, self._position_near(self.arena[m_id].position))
        elif c_id is None and m_id is None:
            c_id = self._spawn(collection, self._random_canvas_position())
            m_id = self._spawn(member, self._random_canvas_position())

        edge = Edge(c_id, m_id)
        if edge not in self.edges:
            self.edges.add(edge)
            self._edge_order.append(edge)
            c_ent, m_ent = self.arena.pair(c_id, m_id)
            c_ent.related.add(m_id)
            m_ent.related.add(c_id)
        return edge

    def insert_edges(self, pairs: Iterable[Tuple[CollectionRecord, MemberRecord]]) -> int:
        n = 0
        for collection, member in pairs:
            self.insert_edge(collection, member)
            n += 1
        return n

    def generate_random_graph(self, num_collections: int, num_members: int) -> int:
        return generate_random_graph(self, num_collections, num_members, rng=self.rng)

    def mark_scraped(self, record: Record) -> Optional[EntityId]:
        """Flag the entity for a record the discovery side has finished. Unknown records are ignored."""
        entity_id = self._resolve(record)
        if entity_id is not None:
            self.arena[entity_id].is_scraped = True
        return entity_id

    def lookup(self, record: Record) -> Optional[EntityId]:
        return self._resolve(record)

    def clear(self):
        self.arena.clear()
        self.edges.clear()
        self._edge_order.clear()
        self.collections.clear()
        self.members.clear()

    # --------------------------
    # Read-only views (renderers)
    # --------------------------
    def getEntities(self) -> EntityArena:
        return self.arena

    def getEdges(self) -> Tuple[Edge, ...]:
        return tuple(self._edge_order)

    def getEntity(self, entity_id: EntityId) -> Entity:
        return self.arena.get(entity_id)

    def edges_of(self, entity_id: EntityId) -> List[Edge]:
        entity = self.arena.get(entity_id)
        if entity.isCollection():
            return [Edge(entity_id, other) for other in sorted(entity.related)]
        return [Edge(other, entity_id) for other in sorted(entity.related)]

    def __len__(self) -> int:
        return len(self.arena)

    def get_stats(self):
        return {
            "entities": len(self.arena),
            "collections": len(self.collections),
            "members": len(self.members),
            "edges": len(self.edges),
            "scraped": sum(1 for e in self.arena if e.is_scraped),
        }

    def validate_invariants(self, verbose=False) -> bool:
        ok = True
        V = len(self.arena)

        for kind, mapping in ((EntityKind.COLLECTION, self.collections),
                              (EntityKind.MEMBER, self.members)):
            for ext_id, entity_id in mapping.items():
                if not 0 <= entity_id < V:
                    ok = False
                    if verbose: logger.warning(f"{kind.value} {ext_id} -> missing #{entity_id}")
                    continue
                payload = self.arena[entity_id].payload
                if payload.kind is not kind or payload.external_id != ext_id:
                    ok = False
                    if verbose: logger.warning(f"{kind.value} {ext_id} -> #{entity_id} holds {payload!r}")

        if len(self.collections) + len(self.members) != V:
            ok = False
            if verbose: logger.warning(f"Dedup maps cover {len(self.collections) + len(self.members)} of {V} entities")

        for e in self.edges:
            c, m = e.key()
            if not (0 <= c < V and 0 <= m < V):
                ok = False
                if verbose: logger.warning(f"Dangling edge {e!r}")
                continue
            if not self.arena[c].isCollection() or not self.arena[m].isMember():
                ok = False
                if verbose: logger.warning(f"Edge {e!r} breaks the collection/member split")
            if m not in self.arena[c].related or c not in self.arena[m].related:
                ok = False
                if verbose: logger.warning(f"Adjacency missing for {e!r}")

        for u, ent in self.arena.items():
            for v in ent.related:
                if not 0 <= v < V:
                    ok = False
                    if verbose: logger.warning(f"Invalid neighbour {v} for {u}")
                    continue
                if u not in self.arena[v].related:
                    ok = False
                    if verbose: logger.warning(f"Asymmetry: {u} has {v}, but {v} missing {u}")

        return ok
