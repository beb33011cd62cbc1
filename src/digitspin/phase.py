"""Quadrant classification of a heading rotating about the vertical axis.

Headings are measured on the XZ plane from the reference forward vector
(+Z) and grow in the configured spin sense, so a spinning object always
walks the quadrants 0 -> 1 -> 2 -> 3 -> 0. Each quadrant is the half-open
interval ``[k * 90deg, (k + 1) * 90deg)`` of that heading:

====  =================  ====================
 q    heading             signs of (x, y)
====  =================  ====================
 0    [0, 90)            x > 0,  y >= 0
 1    [90, 180)          x <= 0, y > 0
 2    [180, 270)         x < 0,  y <= 0
 3    [270, 360)         x >= 0, y < 0
====  =================  ====================

Components smaller than ``HEADING_EPSILON`` are treated as exactly zero so
headings that land on a boundary up to rounding resolve the same way.
"""

from __future__ import annotations

import enum
import math
from typing import Sequence

import numpy as np

from digitspin.modeling.transform import FORWARD_AXIS

HEADING_EPSILON = 1e-9


class Spin(enum.Enum):
    CLOCKWISE = "clockwise"
    COUNTERCLOCKWISE = "counterclockwise"

    @classmethod
    def from_name(cls, name: str) -> "Spin":
        key = name.strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        aliases = {
            "cw": cls.CLOCKWISE,
            "clockwise": cls.CLOCKWISE,
            "ccw": cls.COUNTERCLOCKWISE,
            "counterclockwise": cls.COUNTERCLOCKWISE,
            "anticlockwise": cls.COUNTERCLOCKWISE,
        }
        if key not in aliases:
            raise ValueError(f"Unknown spin direction '{name}'.")
        return aliases[key]

    @property
    def intersection_angle(self) -> float:
        """Yaw applied to a partner solid before intersecting, in radians."""

        return math.pi / 2 if self is Spin.CLOCKWISE else -math.pi / 2

    @property
    def step_sign(self) -> int:
        """Sign of the per-tick yaw step (clockwise seen from above is negative yaw)."""

        return -1 if self is Spin.CLOCKWISE else 1


def forward_direction(matrix: np.ndarray) -> np.ndarray:
    """Unit forward vector of an oriented basis: the transform applied to +Z."""

    mat = np.asarray(matrix, dtype=float)
    direction = mat[:3, :3] @ FORWARD_AXIS
    norm = np.linalg.norm(direction)
    if norm == 0:
        raise ValueError("Transform collapses the forward axis.")
    return direction / norm


def _planar(direction: Sequence[float], spin: Spin) -> tuple[float, float]:
    d = np.asarray(direction, dtype=float).reshape(3)
    x = float(d[2])
    y = float(-d[0]) if spin is Spin.CLOCKWISE else float(d[0])
    if abs(x) < HEADING_EPSILON:
        x = 0.0
    if abs(y) < HEADING_EPSILON:
        y = 0.0
    if x == 0.0 and y == 0.0:
        raise ValueError("Direction has no component in the rotation plane.")
    return x, y


def heading_of(direction: Sequence[float], spin: Spin = Spin.CLOCKWISE) -> float:
    """Heading in ``[0, 2*pi)`` measured in the spin sense."""

    x, y = _planar(direction, spin)
    return math.atan2(y, x) % (2 * math.pi)


def quadrant_of(direction: Sequence[float], spin: Spin = Spin.CLOCKWISE) -> int:
    x, y = _planar(direction, spin)
    if x > 0 and y >= 0:
        return 0
    if x <= 0 and y > 0:
        return 1
    if x < 0 and y <= 0:
        return 2
    return 3


def has_crossed(quadrant: int, last_quadrant: int) -> bool:
    return quadrant != last_quadrant


__all__ = [
    "HEADING_EPSILON",
    "Spin",
    "forward_direction",
    "heading_of",
    "quadrant_of",
    "has_crossed",
]
