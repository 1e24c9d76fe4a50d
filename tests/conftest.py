from __future__ import annotations

import numpy as np
import pytest

from cosmos_drift.controls import FocusController, FreeFlightController, ModeArbiter
from cosmos_drift.core.bodies import BodyPositionUpdater
from cosmos_drift.core.config import OrbitCfg
from cosmos_drift.core.model import CameraState, CelestialBody


class FakeCapture:
    """Pointer capture backend with a scripted answer."""

    def __init__(self, grant: bool = True) -> None:
        self.grant = grant
        self.requests = 0
        self.releases = 0

    def request(self) -> bool:
        self.requests += 1
        return self.grant

    def release(self) -> None:
        self.releases += 1


def make_body(name: str, radius: float = 1.0, *, position=(0.0, 0.0, 0.0), **kwargs) -> CelestialBody:
    body = CelestialBody(name=name, radius=radius, **kwargs)
    body.position = np.asarray(position, dtype=float)
    return body


@pytest.fixture
def camera() -> CameraState:
    return CameraState(position=np.array([0.0, 0.0, 0.0]))


@pytest.fixture
def capture() -> FakeCapture:
    return FakeCapture()


@pytest.fixture
def flight(camera, capture) -> FreeFlightController:
    return FreeFlightController(camera, capture)


@pytest.fixture
def focus(camera) -> FocusController:
    return FocusController(camera)


@pytest.fixture
def static_updater() -> BodyPositionUpdater:
    """A Sun and one planet that barely moves over a test's lifetime."""

    updater = BodyPositionUpdater(OrbitCfg(angular_scale=1e-9, spin_scale=0.6))
    sun = CelestialBody(name="Sun", radius=5.0, rotation_period=25.0)
    planet = CelestialBody(name="Planet", radius=1.0, orbit_radius=100.0, orbit_period=1.0)
    sun.add_satellite(planet)
    updater.register_tree([sun])
    return updater


@pytest.fixture
def arbiter(camera, flight, focus, static_updater) -> ModeArbiter:
    return ModeArbiter(camera, static_updater, flight, focus)
