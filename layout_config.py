# layout_config.py

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Tuple


@dataclass
class PhysicsConfig:
    # Force parameters (tuned for looks, not physics)
    repulsion: float = 1000.0
    attraction: float = 2.0
    damping: float = 0.7        # velocity multiplier per tick
    max_speed: float = 1000.0   # units / second
    min_dsq: float = 0.001      # floor on squared separation


@dataclass
class PlacementConfig:
    window: float = 100.0                           # side of the box around the anchor
    canvas_min: Tuple[float, float] = (200.0, 200.0)
    canvas_max: Tuple[float, float] = (400.0, 400.0)
    spawn_speed: float = 10.0                       # |vx|, |vy| bound for new entities


@dataclass
class InteractionConfig:
    proximity: float = 5.0        # chebyshev distance for hover / click
    click_duration: float = 0.1   # seconds


@dataclass
class EngineConfig:
    tick_rate: int = 20           # simulation ticks per second
    workers: int = 4              # per-entity update threads; 0 disables the pool
    batch_size: int = 1024
    max_ticks_per_update: int = 5
    rate_samples: int = 32
    max_pending_requests: int = 256   # outbound requests waiting to be drained; 0 = unbounded

    @property
    def tick_seconds(self) -> float:
        return 1.0 / self.tick_rate


@dataclass
class LayoutConfig:
    physics: PhysicsConfig = field(default_factory=PhysicsConfig)
    placement: PlacementConfig = field(default_factory=PlacementConfig)
    interaction: InteractionConfig = field(default_factory=InteractionConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, Any]]) -> "LayoutConfig":
        """
        Partial overrides, e.g. {"physics": {"damping": 0.8}}.
        Unknown sections or keys raise ValueError.
        """
        cfg = cls()
        for section, values in (data or {}).items():
            if section not in {f.name for f in fields(cls)}:
                raise ValueError(f"Unknown config section: {section!r}")
            current = getattr(cfg, section)
            allowed = {f.name for f in fields(current)}
            unknown = set(values) - allowed
            if unknown:
                raise ValueError(f"Unknown keys for {section!r}: {sorted(unknown)}")
            values = dict(values)
            for key in ("canvas_min", "canvas_max"):
                if key in values:
                    values[key] = tuple(float(v) for v in values[key])
            setattr(cfg, section, replace(current, **values))
        return cfg
