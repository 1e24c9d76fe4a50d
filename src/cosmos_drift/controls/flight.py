"""First-person free flight with pointer capture and inertia."""
from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

import numpy as np

from cosmos_drift.core.config import FLIGHT_CFG, FlightCfg
from cosmos_drift.core.mathutils import clamp, damp
from cosmos_drift.core.model import MOVEMENT_ACTIONS, CameraState, InputState

logger = logging.getLogger(__name__)

# Camera-local unit axes for each movement action; the camera looks down -Z.
_ACTION_AXES: dict[str, np.ndarray] = {
    "forward": np.array([0.0, 0.0, -1.0]),
    "back": np.array([0.0, 0.0, 1.0]),
    "left": np.array([-1.0, 0.0, 0.0]),
    "right": np.array([1.0, 0.0, 0.0]),
    "up": np.array([0.0, 1.0, 0.0]),
    "down": np.array([0.0, -1.0, 0.0]),
}


class PointerCapture(Protocol):
    """Backend that grabs and releases relative pointer motion."""

    def request(self) -> bool:
        """Try to capture the pointer; return ``True`` on success."""

    def release(self) -> None:
        ...


class NullPointerCapture:
    """Capture backend that always succeeds; used headless and in tools."""

    def request(self) -> bool:
        return True

    def release(self) -> None:
        return None


def local_direction(actions: dict[str, bool]) -> np.ndarray:
    """Normalized camera-local movement direction for the held actions."""

    direction = np.zeros(3, dtype=float)
    for name, axis in _ACTION_AXES.items():
        if actions.get(name, False):
            direction += axis
    length = float(np.linalg.norm(direction))
    if length > 0.0:
        direction /= length
    return direction


class FreeFlightController:
    """Inertial camera flight driven by an :class:`InputState` per frame.

    The controller is *Unlocked* until :meth:`lock` succeeds; while unlocked
    input is ignored and the craft coasts to rest. :meth:`disable` hands the
    camera to another controller and guarantees flight later resumes at rest.
    """

    def __init__(
        self,
        camera: CameraState,
        capture: PointerCapture | None = None,
        cfg: FlightCfg = FLIGHT_CFG,
    ) -> None:
        cfg.validate()
        self._camera = camera
        self._capture: PointerCapture = capture or NullPointerCapture()
        self._cfg = cfg
        self._velocity = np.zeros(3, dtype=float)
        self._actions: dict[str, bool] = {name: False for name in MOVEMENT_ACTIONS}
        self._locked = False
        self._enabled = True
        self._on_lock: Optional[Callable[[], None]] = None
        self._on_unlock: Optional[Callable[[], None]] = None
        self._on_lock_error: Optional[Callable[[], None]] = None

    @property
    def camera(self) -> CameraState:
        return self._camera

    @property
    def cfg(self) -> FlightCfg:
        return self._cfg

    @property
    def velocity(self) -> np.ndarray:
        return self._velocity.copy()

    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    def on_lock(self, callback: Callable[[], None]) -> None:
        self._on_lock = callback

    def on_unlock(self, callback: Callable[[], None]) -> None:
        self._on_unlock = callback

    def on_lock_error(self, callback: Callable[[], None]) -> None:
        self._on_lock_error = callback

    # ------------------------------------------------------------------
    # Pointer capture
    # ------------------------------------------------------------------
    def lock(self) -> bool:
        """Request pointer capture. Failure is reported, never retried."""

        if self._locked:
            return True
        if self._capture.request():
            self.handle_capture_change(True)
            return True
        logger.warning("Pointer capture was rejected; staying unlocked")
        if self._on_lock_error is not None:
            self._on_lock_error()
        return False

    def unlock(self) -> None:
        if not self._locked:
            return
        self._capture.release()
        self.handle_capture_change(False)

    def handle_capture_change(self, captured: bool) -> None:
        """Apply a capture-change notification from the input backend."""

        if captured == self._locked:
            return
        self._locked = captured
        if captured:
            logger.info("Pointer locked")
            if self._on_lock is not None:
                self._on_lock()
        else:
            self._actions = {name: False for name in MOVEMENT_ACTIONS}
            logger.info("Pointer unlocked")
            if self._on_unlock is not None:
                self._on_unlock()

    # ------------------------------------------------------------------
    # Hand-over
    # ------------------------------------------------------------------
    def disable(self) -> None:
        """Clear movement flags, zero velocity and ignore updates until enabled."""

        self._actions = {name: False for name in MOVEMENT_ACTIONS}
        self._velocity[:] = 0.0
        self._enabled = False
        logger.debug("Free flight disabled")

    def enable(self) -> None:
        self._enabled = True
        logger.debug("Free flight enabled")

    # ------------------------------------------------------------------
    # Per-frame update
    # ------------------------------------------------------------------
    def apply_look(self, dx: float, dy: float) -> None:
        cfg = self._cfg
        camera = self._camera
        camera.yaw -= dx * cfg.mouse_sensitivity
        camera.pitch = clamp(camera.pitch - dy * cfg.mouse_sensitivity, cfg.pitch_min, cfg.pitch_max)

    def update(self, dt: float, input_state: InputState | None = None) -> None:
        if not self._enabled:
            return
        if dt <= 0.0:
            return

        if self._locked and input_state is not None:
            self._actions = dict(input_state.actions)
            dx, dy = input_state.pointer_delta
            if dx or dy:
                self.apply_look(dx, dy)
        elif not self._locked:
            self._actions = {name: False for name in MOVEMENT_ACTIONS}

        cfg = self._cfg
        direction = self._camera.rotation() @ local_direction(self._actions)
        moving = bool(np.any(direction))
        speed = cfg.base_speed * (cfg.boost_multiplier if self._actions.get("boost") else 1.0)
        target_velocity = direction * speed
        time_constant = cfg.acceleration_time if moving else cfg.deceleration_time

        self._velocity = damp(self._velocity, target_velocity, time_constant, dt)
        self._camera.position += self._velocity * dt

    def get_speed(self) -> float:
        return float(np.linalg.norm(self._velocity))


__all__ = [
    "FreeFlightController",
    "NullPointerCapture",
    "PointerCapture",
    "local_direction",
]
