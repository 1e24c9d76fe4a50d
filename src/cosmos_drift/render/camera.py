from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from cosmos_drift.core.model import CameraState


@dataclass(frozen=True)
class Projection:
    x: float
    y: float
    depth: float

    @property
    def pixel(self) -> tuple[int, int]:
        return int(round(self.x)), int(round(self.y))


class PerspectiveProjector:
    """Pinhole projection of world points through a :class:`CameraState`."""

    def __init__(
        self,
        size: tuple[int, int],
        fov: float,
        *,
        near: float = 0.1,
    ) -> None:
        if not 0.0 < fov < math.pi:
            raise ValueError("fov must be within (0, pi) radians")
        self._size = size
        self._fov = fov
        self._near = near
        self._focal = self._compute_focal()
        self._view = np.eye(3)
        self._eye = np.zeros(3)

    def _compute_focal(self) -> float:
        return (self._size[1] / 2.0) / math.tan(self._fov / 2.0)

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def update_size(self, size: tuple[int, int]) -> None:
        self._size = size
        self._focal = self._compute_focal()

    @property
    def focal_length(self) -> float:
        return self._focal

    def set_camera(self, camera: CameraState) -> None:
        """Cache the world-to-camera transform for the current frame."""

        self._view = camera.rotation().T
        self._eye = camera.position.copy()

    def to_camera_space(self, point: np.ndarray) -> np.ndarray:
        return self._view @ (np.asarray(point, dtype=float) - self._eye)

    def project(self, point: np.ndarray) -> Projection | None:
        """Screen position and depth of *point*, or ``None`` behind the near plane."""

        local = self.to_camera_space(point)
        depth = -float(local[2])
        if depth <= self._near:
            return None
        width, height = self._size
        sx = width / 2.0 + local[0] / depth * self._focal
        sy = height / 2.0 - local[1] / depth * self._focal
        return Projection(float(sx), float(sy), depth)

    def project_many(self, points: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Vectorised projection; returns ``(screen_xy, visible_mask)``."""

        local = (np.asarray(points, dtype=float) - self._eye) @ self._view.T
        depth = -local[:, 2]
        visible = depth > self._near
        safe_depth = np.where(visible, depth, 1.0)
        width, height = self._size
        xy = np.empty((len(local), 2), dtype=float)
        xy[:, 0] = width / 2.0 + local[:, 0] / safe_depth * self._focal
        xy[:, 1] = height / 2.0 - local[:, 1] / safe_depth * self._focal
        return xy, visible

    def projected_radius(self, radius: float, depth: float) -> float:
        if depth <= 0.0:
            return 0.0
        return radius / depth * self._focal

    def project_direction(self, direction: np.ndarray) -> Projection | None:
        """Project a point at infinity (used for the background starfield)."""

        local = self._view @ np.asarray(direction, dtype=float)
        depth = -float(local[2])
        if depth <= 1e-6:
            return None
        width, height = self._size
        return Projection(
            width / 2.0 + local[0] / depth * self._focal,
            height / 2.0 - local[1] / depth * self._focal,
            math.inf,
        )


__all__ = ["PerspectiveProjector", "Projection"]
