"""Shared fixtures: seeded randomness and single-threaded engine configs."""
import random

import pytest

from graph_store import GraphStore
from layout_config import LayoutConfig


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def store(rng) -> GraphStore:
    return GraphStore(rng=rng)


@pytest.fixture
def serial_config() -> LayoutConfig:
    """No worker pool, so ticks run on the test thread."""
    return LayoutConfig.from_dict({"engine": {"workers": 0}})

