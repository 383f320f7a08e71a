"""Edge identity and bulk insertion."""
import pytest

from edge import Edge
from records import CollectionRecord, MemberRecord


class TestEdge:
    """Canonical (collection, member) pair."""

    def test_endpoints(self):
        e = Edge(3, 8)
        assert (e.getCollectionId(), e.getMemberId()) == (3, 8)
        assert e.other(3) == 8
        assert e.other(8) == 3
        assert tuple(e) == (3, 8)

    def test_not_an_endpoint(self):
        with pytest.raises(ValueError):
            Edge(3, 8).other(5)

    def test_loops_rejected(self):
        with pytest.raises(ValueError):
            Edge(4, 4)

    def test_hash_by_key(self):
        assert len({Edge(1, 2), Edge(1, 2), Edge(2, 1)}) == 2


class TestInsertEdges:
    """Bulk insertion goes through insert_edge one pair at a time."""

    def test_counts_calls_not_new_edges(self, store):
        pairs = [(CollectionRecord(1, "c"), MemberRecord(1, "m"))] * 3
        pairs.append((CollectionRecord(2, "c"), MemberRecord(1, "m")))
        assert store.insert_edges(pairs) == 4
        assert len(store.getEdges()) == 2
