"""Math helpers shared by the camera controllers.

Orientation follows the usual right-handed, Y-up camera convention: the
camera looks down its local ``-Z`` axis, yaw rotates about world ``Y`` and
pitch about the camera's local ``X`` axis. Quaternions are stored as
``numpy`` arrays in ``(w, x, y, z)`` order.
"""
from __future__ import annotations

import math

import numpy as np


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* between *lo* and *hi*."""

    return max(lo, min(hi, value))


def lerp(start, end, t: float):
    """Linear interpolation; works on scalars and numpy arrays."""

    return start + (end - start) * t


def smoothing_factor(rate: float, dt: float) -> float:
    """Fraction of the remaining gap closed in *dt* by decay at *rate* per second."""

    if dt <= 0.0:
        return 0.0
    return 1.0 - math.exp(-rate * dt)


def damp(current, target, time_constant: float, dt: float):
    """Exponentially approach *target* with the given time constant."""

    return lerp(current, target, smoothing_factor(1.0 / time_constant, dt))


def exp_follow(current, target, rate: float, dt: float):
    """Critically damped tracking of a moving *target* at *rate* per second.

    Unlike a hard snap, the follower lags a revolving target slightly and
    never overshoots.
    """

    return lerp(current, target, smoothing_factor(rate, dt))


def ease_in_out_cubic(t: float) -> float:
    """Cubic ease-in-out on ``[0, 1]``; values outside are clamped."""

    t = clamp(t, 0.0, 1.0)
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - math.pow(-2.0 * t + 2.0, 3) / 2.0


def wrap_angle(angle: float) -> float:
    """Wrap *angle* into ``[0, 2*pi)``."""

    return angle % (2.0 * math.pi)


def rotation_matrix(yaw: float, pitch: float) -> np.ndarray:
    """Camera-to-world rotation for a yaw/pitch pair (roll is always 0)."""

    cy, sy = math.cos(yaw), math.sin(yaw)
    cp, sp = math.cos(pitch), math.sin(pitch)
    # Columns are the camera's right, up and back axes in world space.
    return np.array(
        [
            [cy, sy * sp, sy * cp],
            [0.0, cp, -sp],
            [-sy, cy * sp, cy * cp],
        ],
        dtype=float,
    )


def forward_vector(yaw: float, pitch: float) -> np.ndarray:
    cp = math.cos(pitch)
    return np.array([-math.sin(yaw) * cp, math.sin(pitch), -math.cos(yaw) * cp], dtype=float)


def yaw_pitch_from_direction(direction: np.ndarray) -> tuple[float, float]:
    """Yaw and pitch that make the camera look along *direction*."""

    norm = float(np.linalg.norm(direction))
    if norm <= 1e-12:
        raise ValueError("direction must be non-zero")
    dx, dy, dz = (float(c) / norm for c in direction)
    pitch = math.asin(clamp(dy, -1.0, 1.0))
    if math.hypot(dx, dz) <= 1e-12:
        yaw = 0.0
    else:
        yaw = math.atan2(-dx, -dz)
    return yaw, pitch


def quat_from_yaw_pitch(yaw: float, pitch: float) -> np.ndarray:
    half_yaw = 0.5 * yaw
    half_pitch = 0.5 * pitch
    cy, sy = math.cos(half_yaw), math.sin(half_yaw)
    cp, sp = math.cos(half_pitch), math.sin(half_pitch)
    # q_yaw(Y) * q_pitch(X)
    return np.array([cy * cp, cy * sp, sy * cp, -sy * sp], dtype=float)


def quat_rotate(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate vector *v* by unit quaternion *q*."""

    w = q[0]
    u = q[1:]
    uv = np.cross(u, v)
    return v + 2.0 * (w * uv + np.cross(u, uv))


def yaw_pitch_from_quat(q: np.ndarray) -> tuple[float, float]:
    """Recover yaw/pitch from the camera's forward axis, dropping any roll."""

    return yaw_pitch_from_direction(quat_rotate(q, np.array([0.0, 0.0, -1.0])))


def quat_slerp(q0: np.ndarray, q1: np.ndarray, t: float) -> np.ndarray:
    """Spherical linear interpolation along the shortest arc."""

    q0 = q0 / np.linalg.norm(q0)
    q1 = q1 / np.linalg.norm(q1)
    dot = float(np.dot(q0, q1))
    if dot < 0.0:
        q1 = -q1
        dot = -dot
    if dot > 0.9995:
        result = q0 + (q1 - q0) * t
        return result / np.linalg.norm(result)
    theta_0 = math.acos(clamp(dot, -1.0, 1.0))
    theta = theta_0 * t
    sin_theta_0 = math.sin(theta_0)
    s0 = math.sin(theta_0 - theta) / sin_theta_0
    s1 = math.sin(theta) / sin_theta_0
    return s0 * q0 + s1 * q1


__all__ = [
    "clamp",
    "damp",
    "ease_in_out_cubic",
    "exp_follow",
    "forward_vector",
    "lerp",
    "quat_from_yaw_pitch",
    "quat_rotate",
    "quat_slerp",
    "rotation_matrix",
    "smoothing_factor",
    "wrap_angle",
    "yaw_pitch_from_direction",
    "yaw_pitch_from_quat",
]
