"""Unit algebra: only dimensionally meaningful combinations are allowed."""
import operator
import random
from datetime import timedelta

import pytest

from phys import Acceleration, Distance, Position, Vec2, Velocity, as_duration


class TestLegalOperations:
    """Combinations that must work and produce the right unit."""

    def test_position_minus_position_is_distance(self):
        d = Position(5, 7) - Position(2, 3)
        assert type(d) is Distance
        assert d.as_tuple() == (3.0, 4.0)

    def test_position_plus_and_minus_distance(self):
        p = Position(1, 1)
        assert Position(1, 1) + Distance(2, 3) == Position(3, 4)
        assert Distance(2, 3) + p == Position(3, 4)
        assert p - Distance(1, 1) == Position(0, 0)

    def test_velocity_times_duration_is_distance(self):
        d = Velocity(10, -4) * timedelta(milliseconds=500)
        assert type(d) is Distance
        assert d.as_tuple() == pytest.approx((5.0, -2.0))

    def test_acceleration_times_duration_is_velocity(self):
        v = Acceleration(2, 8) * timedelta(seconds=0.25)
        assert type(v) is Velocity
        assert v.as_tuple() == pytest.approx((0.5, 2.0))

    def test_scalar_multiply_and_divide_keep_the_unit(self):
        assert Position(1, 2) * 3 == Position(3, 6)
        assert 2 * Velocity(1, 1) == Velocity(2, 2)
        assert Acceleration(4, 2) / 2 == Acceleration(2, 1)

    def test_negation_and_like_addition(self):
        assert -Acceleration(1, -2) == Acceleration(-1, 2)
        assert -Distance(3, 0) == Distance(-3, 0)
        assert Velocity(1, 2) + Velocity(3, 4) == Velocity(4, 6)
        assert Distance(1, 1) + Distance(1, 1) == Distance(2, 2)

    def test_units_with_same_components_are_not_equal(self):
        assert Position(1, 1) != Distance(1, 1)


class TestIllegalOperations:
    """Everything outside the table is a TypeError."""

    @pytest.mark.parametrize("op, a, b", [
        (operator.add, Position(1, 1), Position(1, 1)),
        (operator.add, Velocity(1, 1), Acceleration(1, 1)),
        (operator.add, Position(1, 1), Velocity(1, 1)),
        (operator.sub, Distance(1, 1), Position(1, 1)),
        (operator.mul, Position(1, 1), timedelta(seconds=1)),
        (operator.mul, Distance(1, 1), timedelta(seconds=1)),
        (operator.mul, Velocity(1, 1), Velocity(1, 1)),
        (operator.mul, Position(1, 1), True),
    ])
    def test_rejected(self, op, a, b):
        with pytest.raises(TypeError):
            op(a, b)

    def test_position_has_no_negation(self):
        with pytest.raises(TypeError):
            -Position(1, 1)


class TestMetricsAndHelpers:
    """Norms, clamping, sampling and duration coercion."""

    def test_norms(self):
        v = Vec2(3, -4)
        assert v.taxicab() == 7.0
        assert v.chebyshev() == 4.0
        assert v.euclid_squared() == 25.0
        assert v.length() == 5.0

    def test_clamp_caps_magnitude_and_keeps_direction(self):
        v = Velocity(3000, 4000).clamp(1000)
        assert v.length() == pytest.approx(1000.0)
        assert v.as_tuple() == pytest.approx((600.0, 800.0))

    def test_clamp_leaves_slow_vectors_alone(self):
        assert Velocity(3, 4).clamp(1000) == Velocity(3, 4)
        assert Velocity().clamp(1000) == Velocity()

    def test_sample_uniform_stays_in_box(self):
        rng = random.Random(5)
        low, high = Position(200, 200), Position(400, 400)
        for _ in range(200):
            p = Position.sample_uniform(rng, low, high)
            assert 200 <= p.x <= 400
            assert 200 <= p.y <= 400

    def test_as_duration(self):
        assert as_duration(0.05) == timedelta(milliseconds=50)
        td = timedelta(seconds=2)
        assert as_duration(td) is td
