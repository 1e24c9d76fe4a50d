from __future__ import annotations

import math
from dataclasses import fields

import numpy as np
import pytest

from cosmos_drift.controls import FocusController, FocusState, orbit_offset
from cosmos_drift.core.model import CameraState

from conftest import make_body


def test_nearest_body_wins(focus):
    far = make_body("Far", position=(0.0, 0.0, 20.0))
    near = make_body("Near", position=(10.0, 0.0, 0.0))
    assert focus.focus_on_nearest([far, near]) is near
    assert focus.target is near
    assert focus.state is FocusState.TRANSITIONING


def test_nearest_search_includes_satellites(focus):
    planet = make_body("Planet", position=(0.0, 0.0, 30.0))
    moon = planet.add_satellite(make_body("Moon", position=(0.0, 0.0, 5.0)))
    assert focus.focus_on_nearest([planet]) is moon


def test_ties_keep_the_first_body(focus):
    first = make_body("First", position=(10.0, 0.0, 0.0))
    second = make_body("Second", position=(-10.0, 0.0, 0.0))
    assert focus.focus_on_nearest([first, second]) is first


def test_no_bodies_leaves_focus_idle(focus):
    assert focus.focus_on_nearest([]) is None
    assert focus.state is FocusState.IDLE
    assert focus.session is None


def test_session_uses_radius_ratio(focus):
    body = make_body("Planet", radius=2.0, position=(0.0, 0.0, -40.0))
    session = focus.focus_on_target(body)
    assert session.orbit_radius == pytest.approx(focus.cfg.orbit_radius_ratio * 2.0)
    assert session.progress == 0.0


def test_transition_switches_to_orbiting_after_duration(focus):
    body = make_body("Planet", position=(0.0, 0.0, -40.0))
    focus.focus_on_target(body)
    steps = 4
    dt = focus.cfg.transition_duration / 5.0
    for _ in range(steps):
        focus.update(dt)
    assert focus.state is FocusState.TRANSITIONING
    focus.update(dt)
    focus.update(dt)
    assert focus.state is FocusState.ORBITING
    assert focus.session.progress == 1.0


def test_transition_ends_on_the_ideal_orbit_point(focus, camera):
    body = make_body("Planet", position=(0.0, 0.0, -40.0))
    focus.focus_on_target(body)
    half = focus.cfg.transition_duration / 2.0
    focus.update(half)
    focus.update(half)
    assert focus.state is FocusState.ORBITING
    np.testing.assert_allclose(camera.position, focus.ideal_position(), atol=1e-9)


def test_entry_stays_on_the_viewer_side(camera):
    camera.position = np.array([0.0, 0.0, 50.0])
    focus = FocusController(camera)
    body = make_body("Planet", position=(0.0, 0.0, 0.0))
    focus.focus_on_target(body)
    for _ in range(30):
        focus.update(1.0 / 60.0)
        assert camera.position[2] > 0.0


def test_orbit_keeps_distance_and_faces_target(focus, camera):
    body = make_body("Planet", radius=2.0, position=(0.0, 0.0, -40.0))
    focus.focus_on_target(body)
    for _ in range(600):
        focus.update(1.0 / 60.0)

    radius = focus.session.orbit_radius
    expected = math.hypot(radius, radius * focus.cfg.vertical_offset_fraction)
    assert focus.get_distance_to_target() == pytest.approx(expected, rel=0.02)

    to_target = body.position - camera.position
    to_target /= np.linalg.norm(to_target)
    assert float(np.dot(camera.forward(), to_target)) == pytest.approx(1.0, abs=5e-3)


def test_orbit_follows_a_moving_target(focus, camera):
    body = make_body("Planet", position=(0.0, 0.0, -40.0))
    focus.focus_on_target(body)
    for i in range(600):
        body.position = body.position + np.array([0.05, 0.0, 0.0])
        focus.update(1.0 / 60.0)
    assert focus.get_distance_to_target() < 10.0 * focus.session.orbit_radius


def test_orbit_angle_advances_with_time(focus):
    body = make_body("Planet", position=(0.0, 0.0, -40.0))
    session = focus.focus_on_target(body)
    start_angle = session.orbit_angle
    focus.update(0.5)
    assert session.orbit_angle == pytest.approx(start_angle + focus.cfg.orbit_angular_speed * 0.5)


def test_refocus_after_release_starts_fresh(focus, camera):
    body = make_body("Planet", position=(0.0, 0.0, -40.0))
    first = focus.focus_on_target(body)
    for _ in range(120):
        focus.update(1.0 / 60.0)
    focus.return_to_free_flight()
    assert focus.state is FocusState.IDLE

    released_at = camera.position.copy()
    second = focus.focus_on_target(body)
    assert second is not first
    assert focus.state is FocusState.TRANSITIONING
    assert second.progress == 0.0
    np.testing.assert_array_equal(second.start_position, released_at)
    second.start_position[0] += 1.0
    np.testing.assert_array_equal(camera.position, released_at)


def test_idle_reports_zero_distance_and_speed(focus):
    assert focus.get_distance_to_target() == 0.0
    assert focus.get_speed() == 0.0
    focus.update(0.1)
    assert focus.state is FocusState.IDLE


def test_release_is_idempotent(focus, camera):
    focus.return_to_free_flight()
    body = make_body("Planet", position=(0.0, 0.0, -40.0))
    focus.focus_on_target(body)
    focus.update(0.1)
    pose = camera.copy()
    focus.return_to_free_flight()
    focus.return_to_free_flight()
    np.testing.assert_array_equal(camera.position, pose.position)
    assert camera.yaw == pose.yaw
    assert focus.get_distance_to_target() == 0.0


def test_speed_while_focused_is_measured(focus):
    body = make_body("Planet", position=(0.0, 0.0, -40.0))
    focus.focus_on_target(body)
    focus.update(0.1)
    assert focus.get_speed() > 0.0


def test_orbit_offset_layout():
    offset = orbit_offset(0.0, 4.0, 0.3)
    np.testing.assert_allclose(offset, [0.0, 1.2, 4.0], atol=1e-12)
    offset = orbit_offset(math.pi / 2.0, 4.0, 0.3)
    np.testing.assert_allclose(offset, [4.0, 1.2, 0.0], atol=1e-12)


def test_controller_starts_idle():
    focus = FocusController(CameraState())
    assert focus.state is FocusState.IDLE
    assert not focus.is_focused
    assert focus.target is None


def test_session_holds_only_the_entry_blend_state(focus):
    body = make_body("Planet", position=(0.0, 0.0, -40.0))
    session = focus.focus_on_target(body)
    assert {f.name for f in fields(session)} == {
        "target",
        "orbit_radius",
        "orbit_angle",
        "start_position",
        "progress",
    }
