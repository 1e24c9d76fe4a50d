"""Data models shared by the body updater, the controllers and the HUD."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

import numpy as np

from .mathutils import (
    forward_vector,
    quat_from_yaw_pitch,
    rotation_matrix,
    yaw_pitch_from_direction,
)


@dataclass(eq=False)
class CelestialBody:
    """A body moving on a circular, horizontal orbit around its parent.

    Bodies with ``orbit_radius == 0`` stay fixed on their parent (or the
    origin). ``rotation_period`` is signed: negative values spin retrograde
    and ``0`` disables spin.
    """

    name: str
    radius: float
    orbit_radius: float = 0.0
    orbit_period: float = 0.0
    rotation_period: float = 0.0
    tilt: float = 0.0
    real_radius_km: float = 0.0
    color: tuple[int, int, int] = (200, 200, 200)
    description: str = ""
    parent: Optional["CelestialBody"] = field(default=None, repr=False)
    satellites: list["CelestialBody"] = field(default_factory=list, repr=False)
    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=float))
    spin_angle: float = 0.0

    @property
    def is_orbiting(self) -> bool:
        return self.orbit_radius > 0.0

    def add_satellite(self, body: "CelestialBody") -> "CelestialBody":
        body.parent = self
        self.satellites.append(body)
        return body

    def walk(self) -> Iterator["CelestialBody"]:
        """Yield this body, then every satellite depth first."""

        yield self
        for satellite in self.satellites:
            yield from satellite.walk()

    def distance_to(self, point: np.ndarray) -> float:
        return float(np.linalg.norm(self.position - point))


@dataclass
class CameraState:
    """Camera pose: world position plus a roll-free yaw/pitch orientation."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=float))
    yaw: float = 0.0
    pitch: float = 0.0

    def forward(self) -> np.ndarray:
        return forward_vector(self.yaw, self.pitch)

    def rotation(self) -> np.ndarray:
        return rotation_matrix(self.yaw, self.pitch)

    def right(self) -> np.ndarray:
        return self.rotation()[:, 0]

    def up(self) -> np.ndarray:
        return self.rotation()[:, 1]

    def quaternion(self) -> np.ndarray:
        return quat_from_yaw_pitch(self.yaw, self.pitch)

    def look_at(self, point: np.ndarray) -> None:
        direction = np.asarray(point, dtype=float) - self.position
        if float(np.linalg.norm(direction)) <= 1e-12:
            return
        self.yaw, self.pitch = yaw_pitch_from_direction(direction)

    def copy(self) -> "CameraState":
        return CameraState(position=self.position.copy(), yaw=self.yaw, pitch=self.pitch)


MOVEMENT_ACTIONS: tuple[str, ...] = ("forward", "back", "left", "right", "up", "down", "boost")
COMMAND_ACTIONS: tuple[str, ...] = ("focus", "release", "lock", "unlock")


@dataclass
class InputState:
    """Per-frame input snapshot handed to the controllers.

    ``actions`` holds the held state of every movement action,
    ``pointer_delta`` the relative pointer motion accumulated this frame and
    ``commands`` the edge-triggered commands pressed this frame, in order.
    """

    actions: dict[str, bool] = field(
        default_factory=lambda: {name: False for name in MOVEMENT_ACTIONS}
    )
    pointer_delta: tuple[float, float] = (0.0, 0.0)
    commands: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.actions = dict(self.actions)
        self.commands = list(self.commands)
        for name in self.actions:
            if name not in MOVEMENT_ACTIONS:
                raise KeyError(f"unknown movement action {name!r}")
        for name in MOVEMENT_ACTIONS:
            self.actions.setdefault(name, False)
        for name in self.commands:
            if name not in COMMAND_ACTIONS:
                raise KeyError(f"unknown command {name!r}")

    @classmethod
    def held(
        cls,
        *names: str,
        pointer_delta: tuple[float, float] = (0.0, 0.0),
        commands: Iterable[str] = (),
    ) -> "InputState":
        """Snapshot with the given movement actions held."""

        return cls(
            actions={name: True for name in names},
            pointer_delta=pointer_delta,
            commands=list(commands),
        )

    def is_active(self, name: str) -> bool:
        return self.actions[name]


@dataclass
class FocusSession:
    """State of one focus request, from entry until release."""

    target: CelestialBody
    orbit_radius: float
    orbit_angle: float
    start_position: np.ndarray
    progress: float = 0.0


__all__ = [
    "COMMAND_ACTIONS",
    "CameraState",
    "CelestialBody",
    "FocusSession",
    "InputState",
    "MOVEMENT_ACTIONS",
]
