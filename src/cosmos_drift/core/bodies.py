"""Orbital placement of the celestial bodies.

Positions are a pure function of simulation time: every tick recomputes them
from scratch, so they never drift. Only the spin angle accumulates.
"""
from __future__ import annotations

import logging
import math
from typing import Iterable, Iterator

import numpy as np

from .config import ORBIT_CFG, OrbitCfg
from .model import CelestialBody

logger = logging.getLogger(__name__)


class OrbitConfigError(ValueError):
    """Raised when a body is registered with unusable orbital parameters."""


def orbit_angle(body: CelestialBody, t: float, cfg: OrbitCfg = ORBIT_CFG) -> float:
    """Orbital angle of *body* at time *t*, wrapped into ``[0, 2*pi)``."""

    if not body.is_orbiting:
        return 0.0
    return ((t / body.orbit_period) * cfg.angular_scale) % (2.0 * math.pi)


def local_offset(body: CelestialBody, t: float, cfg: OrbitCfg = ORBIT_CFG) -> np.ndarray:
    """Offset of *body* from its parent at time *t* (horizontal XZ plane)."""

    angle = orbit_angle(body, t, cfg)
    return np.array(
        [body.orbit_radius * math.cos(angle), 0.0, body.orbit_radius * math.sin(angle)],
        dtype=float,
    )


def position_at(body: CelestialBody, t: float, cfg: OrbitCfg = ORBIT_CFG) -> np.ndarray:
    """World position of *body* at time *t*, computed from its ancestors."""

    origin = np.zeros(3, dtype=float) if body.parent is None else position_at(body.parent, t, cfg)
    return origin + local_offset(body, t, cfg)


def spin_rate(body: CelestialBody, cfg: OrbitCfg = ORBIT_CFG) -> float:
    if body.rotation_period == 0.0:
        return 0.0
    return (1.0 / body.rotation_period) * cfg.spin_scale


class BodyPositionUpdater:
    """Owns the body list and recomputes positions and spins each tick."""

    def __init__(self, cfg: OrbitCfg = ORBIT_CFG) -> None:
        self._cfg = cfg
        self._bodies: list[CelestialBody] = []
        self._roots: list[CelestialBody] = []
        self._time = 0.0

    @property
    def cfg(self) -> OrbitCfg:
        return self._cfg

    @property
    def bodies(self) -> tuple[CelestialBody, ...]:
        """All registered bodies, parents always before their satellites."""

        return tuple(self._bodies)

    @property
    def roots(self) -> tuple[CelestialBody, ...]:
        return tuple(self._roots)

    @property
    def time(self) -> float:
        return self._time

    def __iter__(self) -> Iterator[CelestialBody]:
        return iter(self._bodies)

    def __len__(self) -> int:
        return len(self._bodies)

    def register(self, body: CelestialBody) -> CelestialBody:
        if body.radius <= 0.0:
            raise OrbitConfigError(f"{body.name}: radius must be positive, got {body.radius!r}")
        if body.orbit_radius < 0.0:
            raise OrbitConfigError(
                f"{body.name}: orbit_radius must not be negative, got {body.orbit_radius!r}"
            )
        if body.is_orbiting and body.orbit_period <= 0.0:
            raise OrbitConfigError(
                f"{body.name}: orbiting bodies need a positive orbit_period, "
                f"got {body.orbit_period!r}"
            )
        if any(existing is body for existing in self._bodies):
            raise OrbitConfigError(f"{body.name}: already registered")
        if body.parent is None:
            self._roots.append(body)
        elif not any(existing is body.parent for existing in self._bodies):
            raise OrbitConfigError(
                f"{body.name}: parent {body.parent.name} must be registered first"
            )
        self._bodies.append(body)
        body.position = position_at(body, self._time, self._cfg)
        logger.debug("Registered body %s (parent=%s)", body.name, getattr(body.parent, "name", None))
        return body

    def register_tree(self, roots: Iterable[CelestialBody]) -> None:
        for root in roots:
            for body in root.walk():
                self.register(body)

    def find(self, name: str) -> CelestialBody | None:
        for body in self._bodies:
            if body.name == name:
                return body
        return None

    def update(self, t: float, dt: float) -> None:
        """Place every body at time *t* and advance spins by *dt*."""

        self._time = t
        cfg = self._cfg
        for body in self._bodies:
            origin = body.parent.position if body.parent is not None else 0.0
            body.position = origin + local_offset(body, t, cfg)
            body.spin_angle += spin_rate(body, cfg) * dt


__all__ = [
    "BodyPositionUpdater",
    "OrbitConfigError",
    "local_offset",
    "orbit_angle",
    "position_at",
    "spin_rate",
]
