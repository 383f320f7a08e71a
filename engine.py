# engine.py

from __future__ import annotations
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Union
import queue
import random
import time

from entity import EntityId
from graph_store import GraphStore
from layout_config import LayoutConfig
from logsetup import logger
from records import CollectionRecord, EntityKind, MemberRecord, Record
from simulation import LayoutSimulator, interpolate
from phys import Position


# --------------------------
# Discovery messages
# --------------------------
@dataclass(frozen=True)
class EdgeDiscovered:
    collection: CollectionRecord
    member: MemberRecord


@dataclass(frozen=True)
class NodeScraped:
    record: Record


@dataclass(frozen=True)
class DiscoveryRequest:
    kind: EntityKind
    url: str


class RateCounter:
    """Events per second over the last `samples` intervals (ring buffer)."""

    def __init__(self, samples: int = 32, clock=time.monotonic):
        self._clock = clock
        self._samples = deque([0.0] * max(1, samples), maxlen=max(1, samples))
        self._accumulated = 0.0
        self._last = clock()

    def tick(self) -> None:
        now = self._clock()
        sample, self._last = now - self._last, now
        self._accumulated += sample - self._samples[0]
        self._samples.append(sample)

    def value(self) -> float:
        if self._accumulated <= 0.0:
            return 0.0
        return len(self._samples) / self._accumulated


class LayoutEngine:
    """
    Single owner of the graph store. Discovery threads only call submit();
    everything that mutates the store runs on the thread calling
    advance()/update(), with queued events applied before each tick.
    """

    def __init__(self, store: Optional[GraphStore] = None,
                 config: Optional[LayoutConfig] = None,
                 rng: Optional[random.Random] = None,
                 clock=time.monotonic):
        self.config = config if config is not None else (
            store.config if store is not None else LayoutConfig())
        self.store = store if store is not None else GraphStore(self.config, rng=rng)
        self._clock = clock

        ec = self.config.engine
        self._executor = (ThreadPoolExecutor(max_workers=ec.workers, thread_name_prefix="layout")
                          if ec.workers > 0 else None)
        self.simulator = LayoutSimulator(self.config.physics, self._executor, ec.batch_size)

        self.events: "queue.Queue" = queue.Queue()
        self.requests: "queue.Queue[DiscoveryRequest]" = queue.Queue(maxsize=max(0, ec.max_pending_requests))

        self.paused = False
        self.ticks = 0
        self.tps = RateCounter(ec.rate_samples, clock)
        self._accumulator = 0.0
        self._last_tick = clock()

    # --------------------------
    # Discovery side (any thread)
    # --------------------------
    def submit(self, event) -> None:
        if not isinstance(event, (EdgeDiscovered, NodeScraped)):
            raise TypeError(f"Unsupported discovery event: {event!r}")
        self.events.put(event)

    def submit_edge(self, collection: CollectionRecord, member: MemberRecord) -> None:
        self.submit(EdgeDiscovered(collection, member))

    # --------------------------
    # Owner thread
    # --------------------------
    def drain_events(self, limit: Optional[int] = None) -> int:
        applied = 0
        while limit is None or applied < limit:
            try:
                event = self.events.get_nowait()
            except queue.Empty:
                break
            if isinstance(event, EdgeDiscovered):
                self.store.insert_edge(event.collection, event.member)
            else:
                self.store.mark_scraped(event.record)
            applied += 1
        if applied:
            logger.debug(f"Applied {applied} discovery events")
        return applied

    def insert_edge(self, collection: CollectionRecord, member: MemberRecord):
        return self.store.insert_edge(collection, member)

    def generate_random_graph(self, num_collections: int, num_members: int) -> int:
        return self.store.generate_random_graph(num_collections, num_members)

    def advance(self, dt: Union[timedelta, float, None] = None) -> None:
        """Apply pending events, then one simulation tick of dt (default: one tick period)."""
        if dt is None:
            dt = self.config.engine.tick_seconds
        self.drain_events()
        self.simulator.advance(self.store, dt)
        self.ticks += 1
        self._last_tick = self._clock()
        self.tps.tick()

    def update(self, elapsed: float) -> int:
        """
        Feed wall time in; run as many fixed ticks as fit. Paused engines run
        none and drop the time. Backlog beyond max_ticks_per_update is dropped
        instead of spiralling.
        """
        if self.paused:
            self._accumulator = 0.0
            return 0
        step = self.config.engine.tick_seconds
        self._accumulator += max(0.0, float(elapsed))
        ran = 0
        while self._accumulator >= step and ran < self.config.engine.max_ticks_per_update:
            self.advance(step)
            self._accumulator -= step
            ran += 1
        if self._accumulator >= step:
            self._accumulator = 0.0
        return ran

    def reset(self) -> None:
        """Start a new run: fresh store (same config and rng), pending events dropped."""
        self.store = GraphStore(self.config, rng=self.store.rng)
        while True:
            try:
                self.events.get_nowait()
            except queue.Empty:
                break
        self._accumulator = 0.0
        logger.info("Graph reset")

    def pause(self) -> None:
        if not self.paused:
            self.paused = True
            logger.info("Simulation paused")

    def resume(self) -> None:
        if self.paused:
            self.paused = False
            self._accumulator = 0.0
            logger.info("Simulation resumed")

    def toggle_pause(self) -> bool:
        if self.paused:
            self.resume()
        else:
            self.pause()
        return self.paused

    def since_last_tick(self) -> float:
        return max(0.0, self._clock() - self._last_tick)

    def render_position(self, entity_id: EntityId) -> Position:
        elapsed = 0.0 if self.paused else self.since_last_tick()
        return interpolate(self.store.arena[entity_id], elapsed)

    def request_discovery(self, entity_id: EntityId) -> Optional[DiscoveryRequest]:
        """
        Queue a discovery request for the discovery side, which owns draining
        self.requests. When max_pending_requests are already waiting the
        request is dropped (logged) and None is returned.
        """
        e = self.store.arena[entity_id]
        req = DiscoveryRequest(e.getKind(), e.getUrl())
        try:
            self.requests.put_nowait(req)
        except queue.Full:
            logger.warning(f"Discovery queue full, dropped request for {req.kind.value} {req.url}")
            return None
        logger.info(f"Requested discovery of {req.kind.value} {req.url}")
        return req

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
            self.simulator.executor = None
        logger.debug("Layout engine closed")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
