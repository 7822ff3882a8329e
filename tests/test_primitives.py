"""Tests for the immutable value types."""

import dataclasses
import math

import numpy as np
import pytest

from cannon_sim.primitives import CannonState, Projectile, Target, Trail, Vector2D


class TestVector2D:
    def test_array_round_trip(self):
        v = Vector2D.from_array(np.array([3.0, -4.0]))
        assert v == Vector2D(3.0, -4.0)
        np.testing.assert_array_equal(v.as_array(), [3.0, -4.0])

    def test_magnitude_and_distance(self):
        assert Vector2D(3.0, 4.0).magnitude() == pytest.approx(5.0)
        assert Vector2D(1.0, 1.0).distance_to(Vector2D(4.0, 5.0)) == pytest.approx(5.0)

    def test_frozen(self):
        v = Vector2D(1.0, 2.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            v.x = 5.0

    def test_unpacks(self):
        x, y = Vector2D(7.0, 8.0)
        assert (x, y) == (7.0, 8.0)


class TestTrail:
    def test_appended_returns_new_trail(self):
        empty = Trail()
        one = empty.appended(Vector2D(1.0, 1.0))
        assert len(empty) == 0
        assert len(one) == 1
        assert one[0] == Vector2D(1.0, 1.0)

    def test_evicts_oldest_past_capacity(self):
        trail = Trail(capacity=3)
        for i in range(5):
            trail = trail.appended(Vector2D(float(i), 0.0))
        assert [p.x for p in trail] == [2.0, 3.0, 4.0]

    def test_default_capacity_is_fifty(self):
        trail = Trail()
        for i in range(60):
            trail = trail.appended(Vector2D(float(i), 0.0))
        assert len(trail) == 50
        assert trail[0].x == 10.0
        assert trail[-1].x == 59.0

    def test_earlier_trail_unchanged_after_eviction(self):
        full = Trail(Vector2D(float(i), 0.0) for i in range(50))
        longer = full.appended(Vector2D(99.0, 0.0))
        assert full[0].x == 0.0
        assert longer[0].x == 1.0

    def test_as_array_shape(self):
        assert Trail().as_array().shape == (0, 2)
        trail = Trail([Vector2D(1.0, 2.0), Vector2D(3.0, 4.0)])
        np.testing.assert_array_equal(trail.as_array(), [[1.0, 2.0], [3.0, 4.0]])

    def test_equality(self):
        a = Trail([Vector2D(1.0, 2.0)])
        b = Trail([Vector2D(1.0, 2.0)])
        assert a == b
        assert hash(a) == hash(b)
        assert a != Trail([Vector2D(1.0, 3.0)])

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            Trail(capacity=0)


class TestTarget:
    def test_position(self):
        target = Target(id=1, x=10.0, y=20.0, radius=5.0, color="#fff")
        assert target.position == Vector2D(10.0, 20.0)
        assert target.is_hit is False

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_non_positive_radius_rejected(self, radius):
        with pytest.raises(ValueError):
            Target(id=1, x=0.0, y=0.0, radius=radius, color="#fff")


class TestCannonState:
    def test_defaults(self):
        cannon = CannonState()
        assert cannon.position == Vector2D(100.0, 500.0)
        assert cannon.length == 50.0
        assert cannon.angle == pytest.approx(-math.pi / 4)
        assert not cannon.is_charging
        assert cannon.charge_power == 0.0

    def test_muzzle(self):
        cannon = CannonState(angle=0.0)
        assert cannon.muzzle == pytest.approx((150.0, 500.0))

    @pytest.mark.parametrize("power", [-0.01, 1.01])
    def test_charge_power_bounds(self, power):
        with pytest.raises(ValueError):
            CannonState(charge_power=power)


def test_projectile_speed():
    projectile = Projectile(position=Vector2D(), velocity=Vector2D(600.0, 800.0))
    assert projectile.speed == pytest.approx(1000.0)
    assert projectile.active
    assert len(projectile.trail) == 0
