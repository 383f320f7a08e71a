"""GraphStore insertion: dedup, bipartite edges, anchored placement."""
import logging

import pytest

from edge import Edge
from errors import InvariantViolation
from phys import Position
from records import CollectionRecord, MemberRecord


def C(i: int) -> CollectionRecord:
    return CollectionRecord(i, f"https://example.org/collection/{i}")


def M(i: int) -> MemberRecord:
    return MemberRecord(i, f"https://example.org/member/{i}")


class TestInsertEdge:
    """Entity creation and edge bookkeeping."""

    def test_both_new(self, store):
        edge = store.insert_edge(C(1), M(1))
        assert len(store) == 2
        assert edge == Edge(store.collections[1], store.members[1])
        assert store.getEdges() == (edge,)

    def test_idempotent(self, store):
        store.insert_edge(C(1), M(1))
        before = (len(store), store.getEdges(), dict(store.collections), dict(store.members))
        store.insert_edge(C(1), M(1))
        after = (len(store), store.getEdges(), dict(store.collections), dict(store.members))
        assert before == after

    def test_same_external_id_in_both_kinds_is_two_entities(self, store):
        store.insert_edge(C(7), M(7))
        assert store.collections[7] != store.members[7]
        assert len(store) == 2

    def test_both_known_only_adds_edge(self, store):
        store.insert_edge(C(1), M(1))
        store.insert_edge(C(2), M(2))
        store.insert_edge(C(1), M(2))
        assert len(store) == 4
        assert len(store.getEdges()) == 3

    def test_edges_are_bipartite(self, store):
        for c in range(5):
            for m in range(3):
                if (c + m) % 2:
                    store.insert_edge(C(c), M(m))
        for edge in store.getEdges():
            c_id, m_id = edge.key()
            assert store.getEntity(c_id).isCollection()
            assert store.getEntity(m_id).isMember()

    def test_ids_are_stable(self, store):
        store.insert_edge(C(1), M(1))
        ent = store.getEntity(store.collections[1])
        for i in range(2, 20):
            store.insert_edge(C(i), M(i % 3))
        assert store.getEntity(store.collections[1]) is ent
        assert ent.payload == C(1)

    def test_adjacency(self, store):
        store.insert_edge(C(1), M(1))
        store.insert_edge(C(1), M(2))
        c_id = store.collections[1]
        assert store.getEntity(c_id).getDegree() == 2
        assert set(store.edges_of(c_id)) == {Edge(c_id, store.members[1]), Edge(c_id, store.members[2])}

    @pytest.mark.parametrize("collection, member", [
        (M(1), M(2)),
        (C(1), C(2)),
        (("not", "a record"), M(1)),
    ])
    def test_wrong_record_types(self, store, collection, member):
        with pytest.raises(InvariantViolation):
            store.insert_edge(collection, member)


class TestKindClash:
    """A dedup entry pointing at an entity of the other kind is a hard error."""

    @pytest.fixture
    def clashed(self, store):
        store.insert_edge(C(1), M(1))
        # Member id 2 now resolves to a collection entity
        store.members[2] = store.collections[1]
        return store

    def test_insert_edge_raises(self, clashed):
        with pytest.raises(InvariantViolation):
            clashed.insert_edge(C(5), M(2))

    def test_lookup_raises(self, clashed):
        with pytest.raises(InvariantViolation):
            clashed.lookup(M(2))

    def test_mark_scraped_raises(self, clashed):
        with pytest.raises(InvariantViolation):
            clashed.mark_scraped(M(2))

    def test_validate_reports_kind_mismatch(self, clashed):
        assert not clashed.validate_invariants()

    def test_validate_reports_external_id_mismatch(self, store):
        store.insert_edge(C(1), M(1))
        store.insert_edge(C(2), M(1))
        c1, c2 = store.collections[1], store.collections[2]
        store.collections[1], store.collections[2] = c2, c1
        assert not store.validate_invariants()


class TestPlacement:
    """New endpoints spawn near the existing one, or anywhere on the canvas."""

    def test_both_new_spawn_on_canvas(self, store):
        lo, hi = store.placement.canvas_min, store.placement.canvas_max
        for i in range(50):
            store.insert_edge(C(i), M(i))
        for e in store.arena:
            assert lo[0] <= e.position.x <= hi[0]
            assert lo[1] <= e.position.y <= hi[1]

    def test_new_member_near_known_collection(self, store):
        store.insert_edge(C(1), M(1))
        anchor = store.getEntity(store.collections[1]).position
        half = store.placement.window / 2
        for m in range(2, 40):
            store.insert_edge(C(1), M(m))
            p = store.getEntity(store.members[m]).position
            assert (p - anchor).chebyshev() <= half

    def test_new_collection_near_known_member(self, store):
        store.insert_edge(C(1), M(1))
        m_ent = store.getEntity(store.members[1])
        m_ent.position = Position(5000, -5000)
        half = store.placement.window / 2
        store.insert_edge(C(2), M(1))
        p = store.getEntity(store.collections[2]).position
        assert (p - m_ent.position).chebyshev() <= half

    def test_spawn_velocity_bounded(self, store):
        for i in range(20):
            store.insert_edge(C(i), M(i))
        s = store.placement.spawn_speed
        assert all(e.velocity.chebyshev() <= s for e in store.arena)


class TestBookkeeping:
    """Scraped flag, stats and the invariant checker."""

    def test_mark_scraped(self, store):
        store.insert_edge(C(1), M(1))
        entity_id = store.mark_scraped(M(1))
        assert store.getEntity(entity_id).is_scraped
        assert store.mark_scraped(M(99)) is None
        assert store.get_stats()["scraped"] == 1

    def test_stats(self, store):
        store.insert_edge(C(1), M(1))
        store.insert_edge(C(2), M(1))
        assert store.get_stats() == {
            "entities": 3, "collections": 2, "members": 1, "edges": 2, "scraped": 0,
        }

    def test_validate_invariants(self, store, caplog):
        for i in range(10):
            store.insert_edge(C(i), M(i % 4))
        assert store.validate_invariants()

        # Break adjacency behind the store's back
        c_id, m_id = store.getEdges()[0].key()
        store.getEntity(c_id).related.discard(m_id)
        with caplog.at_level(logging.WARNING, logger="collection_graph"):
            assert not store.validate_invariants(verbose=True)
        assert "Adjacency missing" in caplog.text

    def test_clear(self, store):
        store.insert_edge(C(1), M(1))
        store.clear()
        assert len(store) == 0
        assert store.getEdges() == ()
        assert store.lookup(C(1)) is None
