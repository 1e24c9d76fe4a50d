"""Focus autopilot: smooth entry into, and a continuous orbit around, a body."""
from __future__ import annotations

import enum
import logging
import math
from typing import Iterable

import numpy as np

from cosmos_drift.core.config import FOCUS_CFG, FocusCfg
from cosmos_drift.core.mathutils import (
    clamp,
    ease_in_out_cubic,
    exp_follow,
    lerp,
    quat_from_yaw_pitch,
    quat_slerp,
    smoothing_factor,
    yaw_pitch_from_direction,
    yaw_pitch_from_quat,
)
from cosmos_drift.core.model import CameraState, CelestialBody, FocusSession

logger = logging.getLogger(__name__)


class FocusState(enum.Enum):
    IDLE = "idle"
    TRANSITIONING = "transitioning"
    ORBITING = "orbiting"


def orbit_offset(angle: float, radius: float, vertical_fraction: float) -> np.ndarray:
    """Camera offset from the target for the given orbit angle."""

    return np.array(
        [math.sin(angle) * radius, radius * vertical_fraction, math.cos(angle) * radius],
        dtype=float,
    )


def bearing_from_target(target: np.ndarray, viewer: np.ndarray) -> float:
    """Orbit angle whose offset points from *target* toward *viewer*."""

    delta = viewer - target
    return math.atan2(float(delta[0]), float(delta[2]))


def iter_bodies(bodies: Iterable[CelestialBody]) -> Iterable[CelestialBody]:
    """Every top-level body followed by its satellites, in catalog order."""

    for body in bodies:
        yield from body.walk()


class FocusController:
    """State machine driving the camera while a body is in focus.

    ``IDLE`` is both the initial and the terminal state. A focus request
    always starts a fresh :class:`FocusSession` in ``TRANSITIONING``; once the
    entry blend completes the controller switches to ``ORBITING``.
    """

    def __init__(self, camera: CameraState, cfg: FocusCfg = FOCUS_CFG) -> None:
        cfg.validate()
        self._camera = camera
        self._cfg = cfg
        self._state = FocusState.IDLE
        self._session: FocusSession | None = None
        self._last_speed = 0.0

    @property
    def camera(self) -> CameraState:
        return self._camera

    @property
    def cfg(self) -> FocusCfg:
        return self._cfg

    @property
    def state(self) -> FocusState:
        return self._state

    @property
    def session(self) -> FocusSession | None:
        return self._session

    @property
    def is_focused(self) -> bool:
        return self._state is not FocusState.IDLE

    @property
    def target(self) -> CelestialBody | None:
        return self._session.target if self._session is not None else None

    def focus_on_target(self, body: CelestialBody) -> FocusSession:
        camera = self._camera
        target_position = np.asarray(body.position, dtype=float)
        self._session = FocusSession(
            target=body,
            orbit_radius=self._cfg.orbit_radius_ratio * body.radius,
            orbit_angle=bearing_from_target(target_position, camera.position),
            start_position=camera.position.copy(),
        )
        self._state = FocusState.TRANSITIONING
        self._last_speed = 0.0
        logger.info(
            "Focusing on %s (orbit radius %.3f)", body.name, self._session.orbit_radius
        )
        return self._session

    def focus_on_nearest(self, bodies: Iterable[CelestialBody]) -> CelestialBody | None:
        """Focus the body closest to the camera; ``None`` when there is none."""

        nearest: CelestialBody | None = None
        nearest_distance = math.inf
        position = self._camera.position
        for body in iter_bodies(bodies):
            distance = body.distance_to(position)
            if distance < nearest_distance:
                nearest_distance = distance
                nearest = body
        if nearest is None:
            logger.info("No body available to focus on")
            return None
        self.focus_on_target(nearest)
        return nearest

    def return_to_free_flight(self) -> None:
        if self._state is FocusState.IDLE:
            return
        name = self._session.target.name if self._session is not None else "?"
        self._state = FocusState.IDLE
        self._session = None
        self._last_speed = 0.0
        logger.info("Released focus on %s", name)

    def ideal_position(self) -> np.ndarray | None:
        session = self._session
        if session is None:
            return None
        return session.target.position + orbit_offset(
            session.orbit_angle, session.orbit_radius, self._cfg.vertical_offset_fraction
        )

    def update(self, dt: float) -> None:
        session = self._session
        if self._state is FocusState.IDLE or session is None or dt <= 0.0:
            return
        cfg = self._cfg
        camera = self._camera
        previous = camera.position.copy()

        session.orbit_angle += cfg.orbit_angular_speed * dt
        ideal = self.ideal_position()

        if self._state is FocusState.TRANSITIONING:
            session.progress = clamp(session.progress + dt / cfg.transition_duration, 0.0, 1.0)
            camera.position = lerp(session.start_position, ideal, ease_in_out_cubic(session.progress))
            if session.progress >= 1.0:
                self._state = FocusState.ORBITING
                logger.debug("Entry transition to %s complete", session.target.name)
        else:
            camera.position = exp_follow(camera.position, ideal, cfg.follow_rate, dt)

        self._rotate_toward(session.target.position, dt)
        self._last_speed = float(np.linalg.norm(camera.position - previous)) / dt

    def _rotate_toward(self, point: np.ndarray, dt: float) -> None:
        camera = self._camera
        direction = point - camera.position
        if float(np.linalg.norm(direction)) <= 1e-12:
            return
        target_q = quat_from_yaw_pitch(*yaw_pitch_from_direction(direction))
        blended = quat_slerp(camera.quaternion(), target_q, smoothing_factor(self._cfg.rotation_rate, dt))
        camera.yaw, camera.pitch = yaw_pitch_from_quat(blended)

    def get_distance_to_target(self) -> float:
        """Distance to the focused body, or ``0.0`` while idle."""

        target = self.target
        if target is None:
            return 0.0
        return target.distance_to(self._camera.position)

    def get_speed(self) -> float:
        return self._last_speed if self.is_focused else 0.0


__all__ = [
    "FocusController",
    "FocusState",
    "bearing_from_target",
    "iter_bodies",
    "orbit_offset",
]
