# simulation.py

from __future__ import annotations
from concurrent.futures import Executor
from datetime import timedelta
from typing import Optional, Union

from arena import DEFAULT_BATCH
from entity import Entity
from layout_config import PhysicsConfig
from phys import Acceleration, Position, Velocity, as_duration


class LayoutSimulator:
    """
    Fixed-timestep integrator. One tick:
      1. position += velocity * dt
      2. acceleration = repulsion (all pairs) + attraction (edges)
      3. velocity = clamp(velocity * damping + acceleration * dt)
    Steps 2-reset and 3 only touch one entity at a time and may run on the
    executor; the pairwise passes are sequential.
    """

    def __init__(self, physics: Optional[PhysicsConfig] = None,
                 executor: Optional[Executor] = None,
                 batch_size: int = DEFAULT_BATCH):
        self.physics = physics if physics is not None else PhysicsConfig()
        self.executor = executor
        self.batch_size = batch_size

    # --------------------------
    # 1. positions
    # --------------------------
    def update_positions(self, store, dt: timedelta) -> None:
        for e in store.arena:
            if e.isPinned():
                continue
            e.position = e.position + e.velocity * dt

    # --------------------------
    # 2. accelerations
    # --------------------------
    def reset_accelerations(self, store) -> None:
        def reset(e: Entity) -> None:
            e.acceleration = Acceleration()
        store.arena.par_for_each(reset, self.executor, self.batch_size)

    def repel(self, store) -> None:
        k = self.physics.repulsion
        min_dsq = self.physics.min_dsq

        def push_apart(a: Entity, b: Entity) -> None:
            d = a.position - b.position
            dsq = max(d.euclid_squared(), min_dsq)
            push = Acceleration(d.v * k) / dsq
            a.acceleration = a.acceleration + push
            b.acceleration = b.acceleration + (-push)

        store.arena.for_each_unique_pair(push_apart)

    def attract(self, store) -> None:
        k = self.physics.attraction
        for edge in store.getEdges():
            c_id, m_id = edge.key()
            collection, member = store.arena.pair(c_id, m_id)
            # TODO: attraction still multiplies a Distance straight into an
            # Acceleration; give the spring constant its own unit (1/s^2)
            pull = Acceleration((member.position - collection.position).v * k)
            collection.acceleration = collection.acceleration + pull
            member.acceleration = member.acceleration + (-pull)

    def update_accelerations(self, store) -> None:
        self.reset_accelerations(store)
        self.repel(store)
        self.attract(store)

    # --------------------------
    # 3. velocities
    # --------------------------
    def update_velocities(self, store, dt: timedelta) -> None:
        damping = self.physics.damping
        max_speed = self.physics.max_speed

        def integrate(e: Entity) -> None:
            if e.isPinned():
                e.velocity = Velocity()
                return
            e.velocity = (e.velocity * damping + e.acceleration * dt).clamp(max_speed)

        store.arena.par_for_each(integrate, self.executor, self.batch_size)

    def advance(self, store, dt: Union[timedelta, float]) -> None:
        dt = as_duration(dt)
        self.update_positions(store, dt)
        self.update_accelerations(store)
        self.update_velocities(store, dt)


def interpolate(entity: Entity, elapsed: Union[timedelta, float]) -> Position:
    """Where to draw an entity `elapsed` after the last tick."""
    if entity.isPinned():
        return entity.position
    return entity.position + entity.velocity * as_duration(elapsed)
