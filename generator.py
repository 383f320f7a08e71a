# generator.py

from __future__ import annotations
from typing import List, Optional, Set
import math
import random

from logsetup import logger
from records import CollectionRecord, MemberRecord

PRIMARY_MEAN = 20.0
SECONDARY_MEAN = 3.0


def poisson(rng: random.Random, mean: float) -> int:
    """Knuth's multiplication method; fine for the small means used here."""
    if mean <= 0.0:
        return 0
    L = math.exp(-mean)
    k = 0
    p = 1.0
    while True:
        p *= rng.random()
        if p <= L:
            return k
        k += 1


def _distinct_ids(rng: random.Random, count: int, taken: Set[int]) -> List[int]:
    ids = []
    while len(ids) < count:
        i = rng.getrandbits(64)
        if i in taken:
            continue
        taken.add(i)
        ids.append(i)
    return ids


def random_collections(rng: random.Random, count: int) -> List[CollectionRecord]:
    return [CollectionRecord(i, f"no://random/collection/{i}")
            for i in _distinct_ids(rng, count, set())]


def random_members(rng: random.Random, count: int) -> List[MemberRecord]:
    return [MemberRecord(i, f"no://random/member/{i}")
            for i in _distinct_ids(rng, count, set())]


def generate_random_graph(store, num_collections: int, num_members: int,
                          rng: Optional[random.Random] = None,
                          primary_mean: float = PRIMARY_MEAN,
                          secondary_mean: float = SECONDARY_MEAN) -> int:
    """
    Build a plausible collection/member graph through store.insert_edge.

    1. primary: each member takes Poisson(primary_mean) collections off the
       front of the unassigned pool, so no collection gets two primaries
    2. secondary: each member links Poisson(secondary_mean) distinct
       collections sampled from those already linked (hubs / cross links)
    3. fallback: collections still unassigned go to one random member each

    With num_members >= 1 every collection ends up with at least one edge.
    Returns the number of insert_edge calls made.
    """
    rng = rng if rng is not None else store.rng
    num_collections = max(0, int(num_collections))
    num_members = max(0, int(num_members))

    unassigned = random_collections(rng, num_collections)
    members = random_members(rng, num_members)
    linked: List[CollectionRecord] = []
    calls = 0

    for member in members:
        count = min(poisson(rng, primary_mean), len(unassigned))
        taken, unassigned = unassigned[:count], unassigned[count:]
        for collection in taken:
            linked.append(collection)
            store.insert_edge(collection, member)
            calls += 1

    for member in members:
        count = min(poisson(rng, secondary_mean), len(linked))
        for collection in rng.sample(linked, count):
            store.insert_edge(collection, member)
            calls += 1

    if members:
        for collection in unassigned:
            store.insert_edge(collection, rng.choice(members))
            calls += 1
    elif unassigned:
        logger.warning(f"No members to link {len(unassigned)} generated collections to")

    logger.info(f"Generated random graph: {num_collections} collections, "
                f"{num_members} members, {calls} links")
    return calls
