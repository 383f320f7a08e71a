"""Force model and integration order of the layout simulator."""
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from entity import Entity
from graph_store import GraphStore
from layout_config import PhysicsConfig
from phys import Acceleration, Position, Velocity
from records import CollectionRecord, MemberRecord
from simulation import LayoutSimulator, interpolate


def place(store: GraphStore, *points):
    """Add free-standing collections (no edges) at the given points."""
    for i, (x, y) in enumerate(points):
        store.arena.add(Entity(CollectionRecord(i, f"no://c/{i}"), Position(x, y)))


class TestRepulsion:
    """Every pair pushes apart, equal and opposite."""

    def test_three_entities(self, store):
        place(store, (0, 0), (10, 0), (0, 10))
        sim = LayoutSimulator()
        sim.update_accelerations(store)
        a0, a1, a2 = (e.acceleration for e in store.arena)

        # Away from both neighbours
        assert a0.as_tuple() == pytest.approx((-100.0, -100.0))
        # Entity 0 sits on entity 1's x axis, so only entity 2 adds y
        assert a1.x == pytest.approx(100.0 + 50.0)
        assert a1.y == pytest.approx(-50.0)
        assert a2.as_tuple() == pytest.approx((-50.0, 150.0))

    def test_symmetry(self, store):
        place(store, (3, 4), (-7, 12))
        LayoutSimulator().repel(store)
        a, b = store.arena
        assert (a.acceleration + b.acceleration).as_tuple() == pytest.approx((0.0, 0.0))

    def test_coincident_entities_stay_finite(self, store):
        place(store, (5, 5), (5, 5))
        LayoutSimulator().update_accelerations(store)
        for e in store.arena:
            assert e.acceleration == Acceleration(0, 0)

    def test_min_dsq_floor(self, store):
        place(store, (0, 0), (0.01, 0))
        physics = PhysicsConfig(min_dsq=0.001)
        LayoutSimulator(physics).repel(store)
        # dsq = 0.0001 is floored to 0.001
        assert store.arena[1].acceleration.x == pytest.approx(1000.0 * 0.01 / 0.001)


class TestAttraction:
    """Edges pull their endpoints together."""

    def test_pull_towards_each_other(self, store):
        store.insert_edge(CollectionRecord(1, "c"), MemberRecord(1, "m"))
        c, m = store.arena
        c.position, m.position = Position(0, 0), Position(10, 0)
        sim = LayoutSimulator(PhysicsConfig(repulsion=0.0))
        sim.update_accelerations(store)
        assert c.acceleration.as_tuple() == pytest.approx((20.0, 0.0))
        assert m.acceleration.as_tuple() == pytest.approx((-20.0, 0.0))


class TestIntegration:
    """Positions, then accelerations, then velocities."""

    def test_acceleration_past_the_cap_is_clamped(self, store):
        place(store, (0, 0))
        e = store.arena[0]
        e.acceleration = Acceleration(3e6, 4e6)
        LayoutSimulator().update_velocities(store, timedelta(milliseconds=50))
        assert e.velocity.length() == pytest.approx(1000.0)
        assert e.velocity.as_tuple() == pytest.approx((600.0, 800.0))

    def test_fast_velocity_is_clamped(self, store):
        place(store, (0, 0))
        e = store.arena[0]
        e.velocity = Velocity(0, 50000)
        LayoutSimulator().update_velocities(store, timedelta(milliseconds=50))
        assert e.velocity.length() == pytest.approx(1000.0)
        assert e.velocity.x == 0.0

    def test_damping(self, store):
        place(store, (0, 0))
        e = store.arena[0]
        e.velocity = Velocity(10, 0)
        LayoutSimulator().update_velocities(store, timedelta(seconds=0.05))
        assert e.velocity.as_tuple() == pytest.approx((7.0, 0.0))

    def test_pinned_entity_frozen(self, store):
        place(store, (0, 0), (1, 0))
        held = store.arena[0]
        held.is_under_mouse = True
        held.velocity = Velocity(30, 30)
        LayoutSimulator().advance(store, 0.05)
        assert held.position == Position(0, 0)
        assert held.velocity == Velocity(0, 0)

    def test_advance_moves_by_previous_velocity(self, store):
        place(store, (0, 0))
        e = store.arena[0]
        e.velocity = Velocity(20, -40)
        LayoutSimulator().advance(store, timedelta(milliseconds=50))
        assert e.position.as_tuple() == pytest.approx((1.0, -2.0))

    def test_pool_matches_sequential(self):
        def build():
            s = GraphStore()
            for i in range(30):
                s.insert_edge(CollectionRecord(i, "c"), MemberRecord(i % 4, "m"))
            return s

        a, b = build(), build()
        for ea, eb in zip(a.arena, b.arena):
            eb.position, eb.velocity = ea.position, ea.velocity

        LayoutSimulator().advance(a, 0.05)
        with ThreadPoolExecutor(max_workers=3) as pool:
            LayoutSimulator(executor=pool, batch_size=4).advance(b, 0.05)

        for ea, eb in zip(a.arena, b.arena):
            assert ea.velocity.as_tuple() == pytest.approx(eb.velocity.as_tuple())


class TestInterpolate:
    """Render position between ticks."""

    def test_extrapolates_along_velocity(self):
        e = Entity(CollectionRecord(1, "c"), Position(10, 10), Velocity(100, 0))
        assert interpolate(e, 0.01).as_tuple() == pytest.approx((11.0, 10.0))

    def test_pinned_does_not_move(self):
        e = Entity(CollectionRecord(1, "c"), Position(10, 10), Velocity(100, 0))
        e.is_under_mouse = True
        assert interpolate(e, 0.5) == Position(10, 10)
