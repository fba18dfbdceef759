import math

import pytest

import constants as C
from forces import ForceSource, PointerAttractor, WindField, apply_force_sources
from physics import PhysicsWorld


class FixedRandom:
    def __init__(self, draw=0.0, pick=None):
        self.draw = draw
        self.pick = pick

    def random(self):
        return self.draw

    def uniform(self, a, b):
        return b if self.pick is None else self.pick


@pytest.fixture
def world():
    return PhysicsWorld(gravity=(0.0, 0.0))


class TestForceSources:
    def test_point_on_source_pushed_and_far_point_untouched(self, world):
        near = world.create_point_mass(100.0, 100.0)
        far = world.create_point_mass(300.0, 100.0)
        source = ForceSource(100.0, 100.0, radius=50.0, strength=0.2, max_force=0.1)

        touched = apply_force_sources([near, far], [source], world)
        assert touched == 1
        fx, fy = world.get_force(near)
        assert math.hypot(fx, fy) > 0
        assert (fx, fy) == pytest.approx((C.FORCE_DEGENERATE_DIRECTION[0] * 0.1, C.FORCE_DEGENERATE_DIRECTION[1] * 0.1))
        assert world.get_force(far) == (0.0, 0.0)

    def test_falloff_and_direction(self, world):
        pm = world.create_point_mass(0.0, 0.0)
        apply_force_sources([pm], [ForceSource(30.0, 0.0, radius=60.0, strength=0.1, max_force=1.0)], world)
        fx, fy = world.get_force(pm)
        assert fx == pytest.approx(0.1 * (1 - 30.0 / 60.0))
        assert fy == pytest.approx(0.0)

    def test_magnitude_is_capped(self, world):
        pm = world.create_point_mass(0.0, 0.0)
        apply_force_sources([pm], [ForceSource(0.0, 10.0, radius=60.0, strength=5.0, max_force=0.1)], world)
        assert math.hypot(*world.get_force(pm)) == pytest.approx(0.1)

    def test_fixed_points_are_ignored(self, world):
        pm = world.create_point_mass(0.0, 0.0, fixed=True)
        assert apply_force_sources([pm], [ForceSource(5.0, 0.0, radius=60.0)], world) == 0
        assert world.get_force(pm) == (0.0, 0.0)

    def test_point_on_radius_is_outside(self, world):
        pm = world.create_point_mass(60.0, 0.0)
        apply_force_sources([pm], [ForceSource(0.0, 0.0, radius=60.0)], world)
        assert world.get_force(pm) == (0.0, 0.0)

    def test_sources_add_up(self, world):
        pm = world.create_point_mass(0.0, 0.0)
        sources = [ForceSource(-10.0, 0.0, radius=60.0, strength=0.05), ForceSource(10.0, 0.0, radius=60.0, strength=0.05)]
        apply_force_sources([pm], sources, world)
        assert world.get_force(pm) == pytest.approx((0.0, 0.0))

    def test_non_positive_radius_is_skipped(self, world):
        pm = world.create_point_mass(0.0, 0.0)
        assert apply_force_sources([pm], [ForceSource(0.0, 0.0, radius=0.0)], world) == 0


class TestPointerAttractor:
    def test_limits_are_clamped(self):
        attractor = PointerAttractor(strength=5.0, radius=1.0)
        assert attractor.strength == C.ATTRACTOR_STRENGTH_LIMITS[1]
        assert attractor.radius == C.ATTRACTOR_RADIUS_LIMITS[0]
        attractor.set_strength(0.0)
        attractor.set_radius(1000.0)
        assert attractor.strength == C.ATTRACTOR_STRENGTH_LIMITS[0]
        assert attractor.radius == C.ATTRACTOR_RADIUS_LIMITS[1]

    def test_sources_only_while_pressed(self):
        attractor = PointerAttractor()
        assert attractor.sources() == []
        attractor.press(10.0, 20.0)
        (source,) = attractor.sources()
        assert (source.x, source.y) == (10.0, 20.0)
        assert source.radius == C.ATTRACTOR_RADIUS
        attractor.move(30.0, 40.0)
        assert (attractor.sources()[0].x, attractor.sources()[0].y) == (30.0, 40.0)
        attractor.release()
        assert attractor.sources() == []

    def test_disabled_attractor_never_activates(self):
        attractor = PointerAttractor()
        attractor.toggle()
        attractor.press(0.0, 0.0)
        assert attractor.sources() == []


class TestWind:
    def test_force_eases_towards_target(self):
        wind = WindField(ground_y=700.0, rng=FixedRandom(draw=1.0))
        wind.target_force = C.WIND_MAX_FORCE
        wind.update()
        assert wind.force == pytest.approx(C.WIND_MAX_FORCE * C.WIND_EASING)
        assert wind.target_force == C.WIND_MAX_FORCE

    def test_target_redrawn_within_limits(self):
        wind = WindField(ground_y=700.0, rng=FixedRandom(draw=0.0))
        wind.update()
        assert wind.target_force == C.WIND_MAX_FORCE

    def test_higher_points_pushed_harder(self, world):
        low = world.create_point_mass(0.0, 690.0, mass=1.0)
        high = world.create_point_mass(0.0, 100.0, mass=1.0)
        root = world.create_point_mass(0.0, 700.0, fixed=True)
        wind = WindField(ground_y=700.0, rng=FixedRandom())
        wind.force = C.WIND_MAX_FORCE

        assert wind.apply([low, high, root], world, tick=0) == 2
        assert world.get_force(high)[0] > world.get_force(low)[0] > 0
        assert world.get_force(root) == (0.0, 0.0)

    def test_lighter_points_pushed_harder(self, world):
        light = world.create_point_mass(0.0, 300.0, mass=0.1)
        heavy = world.create_point_mass(0.0, 300.0, mass=2.0)
        wind = WindField(ground_y=700.0, rng=FixedRandom())
        wind.force = -C.WIND_MAX_FORCE
        wind.apply([light, heavy], world, tick=0)
        assert world.get_force(light)[0] < world.get_force(heavy)[0] < 0

    def test_disabled_wind_does_nothing(self, world):
        pm = world.create_point_mass(0.0, 300.0)
        wind = WindField(ground_y=700.0, rng=FixedRandom())
        wind.force = C.WIND_MAX_FORCE
        wind.toggle()
        assert wind.apply([pm], world, tick=0) == 0
        assert world.get_force(pm) == (0.0, 0.0)
