from __future__ import annotations

from typing import Sequence

import numpy as np

UP_AXIS = np.array([0.0, 1.0, 0.0])
FORWARD_AXIS = np.array([0.0, 0.0, 1.0])


def _normalize_axis(axis: Sequence[float]) -> np.ndarray:
    vec = np.asarray(axis, dtype=float).reshape(3)
    norm = np.linalg.norm(vec)
    if norm == 0:
        raise ValueError("Rotation axis must be non-zero.")
    return vec / norm


def translation_matrix(offset: Sequence[float]) -> np.ndarray:
    dx, dy, dz = np.asarray(offset, dtype=float).reshape(3)
    mat = np.eye(4)
    mat[:3, 3] = [dx, dy, dz]
    return mat


def axis_rotation_matrix(axis: Sequence[float], angle_rad: float) -> np.ndarray:
    """Right-handed rotation about ``axis`` through the origin."""

    x, y, z = _normalize_axis(axis)
    c = np.cos(angle_rad)
    s = np.sin(angle_rad)
    C = 1.0 - c
    return np.array(
        [
            [x * x * C + c, x * y * C - z * s, x * z * C + y * s, 0.0],
            [y * x * C + z * s, y * y * C + c, y * z * C - x * s, 0.0],
            [z * x * C - y * s, z * y * C + x * s, z * z * C + c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=float,
    )


def yaw_matrix(angle_rad: float) -> np.ndarray:
    """Rotation about the vertical (Y) axis; maps +Z to (sin a, 0, cos a)."""

    return axis_rotation_matrix(UP_AXIS, angle_rad)


def scale_matrix(factors: Sequence[float] | float, origin: Sequence[float] = (0.0, 0.0, 0.0)) -> np.ndarray:
    if np.isscalar(factors):
        factors = (float(factors),) * 3
    sx, sy, sz = np.asarray(factors, dtype=float).reshape(3)
    mat = np.eye(4)
    mat[0, 0] = sx
    mat[1, 1] = sy
    mat[2, 2] = sz
    origin = np.asarray(origin, dtype=float).reshape(3)
    return translation_matrix(origin) @ mat @ translation_matrix(-origin)


def mirror_matrix(axis: Sequence[float]) -> np.ndarray:
    axis_vec = np.asarray(axis, dtype=float).reshape(3)
    norm = np.linalg.norm(axis_vec)
    if norm == 0:
        raise ValueError("Mirror axis must be non-zero.")
    axis_vec = axis_vec / norm
    mat = np.eye(4)
    mat[:3, :3] -= 2.0 * np.outer(axis_vec, axis_vec)
    return mat


def flip_authoring_frame() -> np.ndarray:
    """Map the y-down authoring frame into the Y-up world.

    Negates Y and Z together (two mirrors, i.e. a half turn about X), which
    keeps triangle winding and therefore outward normals intact.
    """

    return mirror_matrix((0.0, 1.0, 0.0)) @ mirror_matrix((0.0, 0.0, 1.0))


__all__ = [
    "UP_AXIS",
    "FORWARD_AXIS",
    "translation_matrix",
    "axis_rotation_matrix",
    "yaw_matrix",
    "scale_matrix",
    "mirror_matrix",
    "flip_authoring_frame",
]
