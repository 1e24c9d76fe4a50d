from __future__ import annotations

import math

import numpy as np
import pytest

from cosmos_drift.core.bodies import (
    BodyPositionUpdater,
    OrbitConfigError,
    orbit_angle,
    position_at,
    spin_rate,
)
from cosmos_drift.core.config import OrbitCfg
from cosmos_drift.core.model import CelestialBody
from cosmos_drift.data.solar_system import PLANET_DISPLAY_ORDER, build_solar_system

FULL_TURN = OrbitCfg(angular_scale=2.0 * math.pi)


def _planet(**kwargs) -> CelestialBody:
    defaults = dict(name="Planet", radius=1.0, orbit_radius=50.0, orbit_period=4.0)
    defaults.update(kwargs)
    return CelestialBody(**defaults)


def test_body_starts_on_positive_x_axis():
    updater = BodyPositionUpdater(FULL_TURN)
    planet = updater.register(_planet())
    updater.update(0.0, 0.0)
    np.testing.assert_allclose(planet.position, [50.0, 0.0, 0.0], atol=1e-12)


def test_quarter_period_is_quarter_turn():
    planet = _planet()
    t = planet.orbit_period / 4.0
    expected_angle = (t / planet.orbit_period) * FULL_TURN.angular_scale
    assert orbit_angle(planet, t, FULL_TURN) == pytest.approx(expected_angle)
    assert expected_angle == pytest.approx(math.pi / 2.0)

    updater = BodyPositionUpdater(FULL_TURN)
    updater.register(planet)
    updater.update(t, t)
    np.testing.assert_allclose(
        planet.position,
        [50.0 * math.cos(expected_angle), 0.0, 50.0 * math.sin(expected_angle)],
        atol=1e-9,
    )


def test_orbit_angle_wraps_into_one_turn():
    planet = _planet()
    angle = orbit_angle(planet, 10.5 * planet.orbit_period, FULL_TURN)
    assert 0.0 <= angle < 2.0 * math.pi
    assert angle == pytest.approx(math.pi)


def test_positions_do_not_depend_on_step_size():
    coarse = BodyPositionUpdater(FULL_TURN)
    fine = BodyPositionUpdater(FULL_TURN)
    a = coarse.register(_planet())
    b = fine.register(_planet())

    coarse.update(3.0, 3.0)
    steps = 300
    for i in range(1, steps + 1):
        fine.update(3.0 * i / steps, 3.0 / steps)

    np.testing.assert_allclose(a.position, b.position, atol=1e-9)


def test_satellite_orbits_its_parent_current_position():
    updater = BodyPositionUpdater(FULL_TURN)
    planet = _planet()
    moon = planet.add_satellite(
        CelestialBody(name="Moon", radius=0.2, orbit_radius=3.0, orbit_period=0.5)
    )
    updater.register_tree([planet])

    for t in (0.3, 1.7, 2.2):
        updater.update(t, 0.1)
        offset = moon.position - planet.position
        assert float(np.linalg.norm(offset)) == pytest.approx(3.0)
        assert offset[1] == pytest.approx(0.0)
        np.testing.assert_allclose(moon.position, position_at(moon, t, FULL_TURN), atol=1e-9)


def test_parent_must_be_registered_first():
    updater = BodyPositionUpdater()
    planet = _planet()
    moon = planet.add_satellite(
        CelestialBody(name="Moon", radius=0.2, orbit_radius=3.0, orbit_period=0.5)
    )
    with pytest.raises(OrbitConfigError):
        updater.register(moon)
    updater.register(planet)
    updater.register(moon)
    assert updater.bodies == (planet, moon)
    assert updater.roots == (planet,)


@pytest.mark.parametrize("period", [0.0, -1.0])
def test_orbiting_body_needs_positive_period(period):
    updater = BodyPositionUpdater()
    with pytest.raises(OrbitConfigError):
        updater.register(_planet(orbit_period=period))


def test_rejects_non_positive_radius_and_duplicates():
    updater = BodyPositionUpdater()
    with pytest.raises(OrbitConfigError):
        updater.register(_planet(radius=0.0))
    planet = updater.register(_planet())
    with pytest.raises(OrbitConfigError):
        updater.register(planet)


def test_stationary_body_stays_on_parent():
    updater = BodyPositionUpdater(FULL_TURN)
    sun = updater.register(CelestialBody(name="Sun", radius=5.0))
    updater.update(12.0, 0.5)
    np.testing.assert_allclose(sun.position, np.zeros(3))


def test_spin_accumulates_with_dt():
    cfg = OrbitCfg(angular_scale=0.1, spin_scale=0.6)
    updater = BodyPositionUpdater(cfg)
    planet = updater.register(_planet(rotation_period=2.0))
    for i in range(10):
        updater.update(0.1 * (i + 1), 0.1)
    assert planet.spin_angle == pytest.approx((1.0 / 2.0) * 0.6 * 1.0)


def test_zero_rotation_period_disables_spin():
    updater = BodyPositionUpdater()
    planet = updater.register(_planet(rotation_period=0.0))
    updater.update(1.0, 1.0)
    assert spin_rate(planet) == 0.0
    assert planet.spin_angle == 0.0


def test_retrograde_rotation_spins_backwards():
    updater = BodyPositionUpdater()
    venus = updater.register(_planet(name="Venus", rotation_period=-243.0))
    updater.update(1.0, 1.0)
    assert venus.spin_angle < 0.0


def test_solar_system_registers_in_display_order():
    updater = BodyPositionUpdater()
    updater.register_tree(build_solar_system())
    assert updater.roots[0].name == "Sun"
    planet_names = [body.name for body in updater.roots[1:]]
    assert planet_names == list(PLANET_DISPLAY_ORDER)
    earth = updater.find("Earth")
    assert earth is not None
    assert [moon.name for moon in earth.satellites] == ["Moon"]
    for body in updater:
        if body.parent is not None:
            assert updater.bodies.index(body.parent) < updater.bodies.index(body)
