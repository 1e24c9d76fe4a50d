from __future__ import annotations

import math

import numpy as np
import pytest

from cosmos_drift.controls import FreeFlightController, local_direction
from cosmos_drift.core.config import FlightCfg
from cosmos_drift.core.model import CameraState, InputState

from conftest import FakeCapture

DT = 1.0 / 60.0


def _fly(flight: FreeFlightController, seconds: float, *names: str) -> None:
    for _ in range(int(round(seconds / DT))):
        flight.update(DT, InputState.held(*names))


def test_local_direction_is_normalized():
    direction = local_direction({"forward": True, "right": True})
    assert float(np.linalg.norm(direction)) == pytest.approx(1.0)
    np.testing.assert_allclose(local_direction({"forward": True, "back": True}), np.zeros(3))


def test_forward_moves_along_view_direction(flight, camera):
    flight.lock()
    _fly(flight, 1.0, "forward")
    assert camera.position[2] < 0.0
    assert camera.position[0] == pytest.approx(0.0, abs=1e-9)
    assert flight.get_speed() == pytest.approx(flight.cfg.base_speed, rel=1e-2)


def test_boost_multiplies_cruise_speed(flight):
    flight.lock()
    _fly(flight, 2.0, "forward", "boost")
    cfg = flight.cfg
    assert flight.get_speed() == pytest.approx(cfg.base_speed * cfg.boost_multiplier, rel=1e-3)


def test_diagonal_is_not_faster(flight):
    flight.lock()
    _fly(flight, 2.0, "forward", "right", "up")
    assert flight.get_speed() == pytest.approx(flight.cfg.base_speed, rel=1e-3)


def test_acceleration_is_quicker_than_deceleration(flight):
    flight.lock()
    target = flight.cfg.base_speed

    frames_to_speed_up = 0
    while flight.get_speed() < 0.9 * target:
        flight.update(DT, InputState.held("forward"))
        frames_to_speed_up += 1
    _fly(flight, 2.0, "forward")

    frames_to_slow_down = 0
    while flight.get_speed() > 0.1 * target:
        flight.update(DT, InputState())
        frames_to_slow_down += 1

    assert frames_to_speed_up < frames_to_slow_down


def test_releasing_keys_coasts_instead_of_stopping(flight):
    flight.lock()
    _fly(flight, 1.0, "forward")
    flight.update(DT, InputState())
    assert flight.get_speed() > 0.5 * flight.cfg.base_speed


def test_pitch_is_clamped_after_many_deltas(flight, camera):
    flight.lock()
    for _ in range(500):
        flight.update(DT, InputState(pointer_delta=(0.0, -400.0)))
    assert camera.pitch == pytest.approx(math.pi / 2.0)
    for _ in range(1000):
        flight.update(DT, InputState(pointer_delta=(0.0, 400.0)))
    assert camera.pitch == pytest.approx(-math.pi / 2.0)


def test_custom_pitch_limits():
    camera = CameraState()
    flight = FreeFlightController(camera, FakeCapture(), FlightCfg(pitch_min_deg=-30.0, pitch_max_deg=45.0))
    flight.lock()
    flight.apply_look(0.0, -1e6)
    assert camera.pitch == pytest.approx(math.radians(45.0))
    flight.apply_look(0.0, 1e6)
    assert camera.pitch == pytest.approx(math.radians(-30.0))


def test_yaw_follows_horizontal_motion(flight, camera):
    flight.lock()
    flight.update(DT, InputState(pointer_delta=(100.0, 0.0)))
    assert camera.yaw == pytest.approx(-100.0 * flight.cfg.mouse_sensitivity)


def test_input_is_ignored_while_unlocked(flight, camera):
    for _ in range(30):
        flight.update(DT, InputState.held("forward", pointer_delta=(50.0, 50.0)))
    np.testing.assert_allclose(camera.position, np.zeros(3))
    assert camera.yaw == 0.0
    assert camera.pitch == 0.0
    assert flight.get_speed() == 0.0


def test_lock_failure_reports_once_without_retry():
    capture = FakeCapture(grant=False)
    flight = FreeFlightController(CameraState(), capture)
    errors = []
    flight.on_lock_error(lambda: errors.append("denied"))

    assert flight.lock() is False
    assert errors == ["denied"]
    assert capture.requests == 1
    assert not flight.is_locked

    _fly(flight, 0.5, "forward")
    assert capture.requests == 1


def test_lock_and_unlock_callbacks(flight, capture):
    events = []
    flight.on_lock(lambda: events.append("lock"))
    flight.on_unlock(lambda: events.append("unlock"))

    assert flight.lock() is True
    assert flight.lock() is True
    flight.unlock()
    flight.unlock()

    assert events == ["lock", "unlock"]
    assert capture.requests == 1
    assert capture.releases == 1


def test_capture_loss_stops_accepting_input(flight, camera):
    flight.lock()
    _fly(flight, 1.0, "forward")
    flight.handle_capture_change(False)
    assert not flight.is_locked
    yaw_before = camera.yaw
    speed_before = flight.get_speed()
    flight.update(DT, InputState.held("forward", pointer_delta=(300.0, 0.0)))
    assert camera.yaw == yaw_before
    assert flight.get_speed() < speed_before


def test_disable_stops_immediately_and_freezes_position(flight, camera):
    flight.lock()
    _fly(flight, 0.5, "forward")
    assert flight.get_speed() > 0.0

    flight.disable()
    flight.update(DT, InputState.held("forward"))
    assert flight.get_speed() == 0.0

    frozen = camera.position.copy()
    for _ in range(20):
        flight.update(DT, InputState.held("forward", pointer_delta=(10.0, 10.0)))
        np.testing.assert_array_equal(camera.position, frozen)

    flight.enable()
    flight.update(DT, InputState())
    np.testing.assert_array_equal(camera.position, frozen)


def test_non_positive_dt_is_a_no_op(flight, camera):
    flight.lock()
    flight.update(0.0, InputState.held("forward"))
    flight.update(-0.1, InputState.held("forward"))
    np.testing.assert_array_equal(camera.position, np.zeros(3))
    assert flight.get_speed() == 0.0
