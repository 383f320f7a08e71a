# phys.py

from __future__ import annotations
from datetime import timedelta
from typing import Tuple, Union
import math
import random

Number = Union[int, float]


class Vec2:
    """Plain 2-D float pair. The unit wrappers below are what the simulation uses."""
    __slots__ = ("x", "y")

    def __init__(self, x: Number = 0.0, y: Number = 0.0):
        self.x = float(x)
        self.y = float(y)

    def __add__(self, other: "Vec2") -> "Vec2":
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, s: Number) -> "Vec2":
        if not isinstance(s, (int, float)):
            return NotImplemented
        return Vec2(self.x * s, self.y * s)

    __rmul__ = __mul__

    def __truediv__(self, s: Number) -> "Vec2":
        if not isinstance(s, (int, float)):
            return NotImplemented
        return Vec2(self.x / s, self.y / s)

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def __eq__(self, other) -> bool:
        return isinstance(other, Vec2) and self.x == other.x and self.y == other.y

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __iter__(self):
        yield self.x
        yield self.y

    def __repr__(self) -> str:
        return f"Vec2({self.x:.3f}, {self.y:.3f})"

    # --- metrics ---
    def taxicab(self) -> float:
        return abs(self.x) + abs(self.y)

    def chebyshev(self) -> float:
        return max(abs(self.x), abs(self.y))

    def euclid_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def clamp(self, max_len: float) -> "Vec2":
        # Cap magnitude, keep direction
        L = self.length()
        if L <= max_len or L == 0.0:
            return Vec2(self.x, self.y)
        return self * (max_len / L)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


def _seconds(d: timedelta) -> float:
    return d.total_seconds()


class _Unit:
    """
    Base for dimensioned vectors. Scalar * and / keep the unit, negation and
    like-unit addition are opted into per subclass, everything else is a
    TypeError through NotImplemented.
    """
    __slots__ = ("v",)

    def __init__(self, x: Union[Number, Vec2] = 0.0, y: Number = 0.0):
        if isinstance(x, Vec2):
            self.v = Vec2(x.x, x.y)
        else:
            self.v = Vec2(x, y)

    @classmethod
    def from_tuple(cls, xy):
        x, y = xy
        return cls(x, y)

    @classmethod
    def sample_uniform(cls, rng: random.Random, low: "_Unit", high: "_Unit"):
        """Uniform sample in the axis-aligned box [low, high]."""
        return cls(rng.uniform(low.x, high.x), rng.uniform(low.y, high.y))

    @property
    def x(self) -> float:
        return self.v.x

    @property
    def y(self) -> float:
        return self.v.y

    def __mul__(self, s):
        if isinstance(s, (int, float)) and not isinstance(s, bool):
            return type(self)(self.v * s)
        return NotImplemented

    def __rmul__(self, s):
        return self.__mul__(s)

    def __truediv__(self, s):
        if isinstance(s, (int, float)) and not isinstance(s, bool):
            return type(self)(self.v / s)
        return NotImplemented

    def __eq__(self, other) -> bool:
        return type(other) is type(self) and self.v == other.v

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.v.x, self.v.y))

    def __iter__(self):
        return iter(self.v)

    def euclid_squared(self) -> float:
        return self.v.euclid_squared()

    def length(self) -> float:
        return self.v.length()

    def taxicab(self) -> float:
        return self.v.taxicab()

    def chebyshev(self) -> float:
        return self.v.chebyshev()

    def as_tuple(self) -> Tuple[float, float]:
        return self.v.as_tuple()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.v.x:.3f}, {self.v.y:.3f})"


class Distance(_Unit):
    __slots__ = ()

    def __add__(self, other):
        if type(other) is Distance:
            return Distance(self.v + other.v)
        return NotImplemented

    def __neg__(self) -> "Distance":
        return Distance(-self.v)


class Position(_Unit):
    __slots__ = ()

    def __add__(self, other):
        if type(other) is Distance:
            return Position(self.v + other.v)
        return NotImplemented

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        # Position - Position -> Distance, Position - Distance -> Position
        if type(other) is Position:
            return Distance(self.v - other.v)
        if type(other) is Distance:
            return Position(self.v - other.v)
        return NotImplemented


class Velocity(_Unit):
    __slots__ = ()

    def __add__(self, other):
        if type(other) is Velocity:
            return Velocity(self.v + other.v)
        return NotImplemented

    def __mul__(self, s):
        if isinstance(s, timedelta):
            return Distance(self.v * _seconds(s))
        return super().__mul__(s)

    def __rmul__(self, s):
        return self.__mul__(s)

    def clamp(self, max_speed: float) -> "Velocity":
        return Velocity(self.v.clamp(max_speed))


class Acceleration(_Unit):
    __slots__ = ()

    def __add__(self, other):
        if type(other) is Acceleration:
            return Acceleration(self.v + other.v)
        return NotImplemented

    def __neg__(self) -> "Acceleration":
        return Acceleration(-self.v)

    def __mul__(self, s):
        if isinstance(s, timedelta):
            return Velocity(self.v * _seconds(s))
        return super().__mul__(s)

    def __rmul__(self, s):
        return self.__mul__(s)


def as_duration(dt: Union[timedelta, Number]) -> timedelta:
    """Accept a timedelta or seconds; the simulation works in timedeltas."""
    if isinstance(dt, timedelta):
        return dt
    return timedelta(seconds=float(dt))
