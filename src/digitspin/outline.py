from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

import numpy as np


def _require_loop(points: Iterable[Sequence[float]], label: str) -> np.ndarray:
    try:
        arr = np.asarray(list(points), dtype=float)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{label} must be a sequence of 2D points.") from exc
    if arr.size == 0:
        return np.zeros((0, 2), dtype=float)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"{label} must be a sequence of 2D points.")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{label} must be finite.")
    if arr.shape[0] > 1 and np.allclose(arr[0], arr[-1]):
        arr = arr[:-1]
    return arr.copy()


def signed_area(points: np.ndarray) -> float:
    """Shoelace area of a closed loop, positive for counter-clockwise winding."""

    if points.shape[0] < 3:
        return 0.0
    x = points[:, 0]
    y = points[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


def distinct_points(points: np.ndarray) -> int:
    if points.shape[0] == 0:
        return 0
    return int(np.unique(points, axis=0).shape[0])


@dataclass
class Outline:
    """Closed 2D silhouette: loop 0 is the exterior, later loops are holes."""

    loops: List[np.ndarray] = field(default_factory=list)
    name: str | None = None

    def __post_init__(self) -> None:
        self.loops = [_require_loop(loop, f"loop {idx}") for idx, loop in enumerate(self.loops)]

    @classmethod
    def from_points(
        cls,
        exterior: Iterable[Sequence[float]],
        holes: Iterable[Iterable[Sequence[float]]] = (),
        name: str | None = None,
    ) -> "Outline":
        return cls(loops=[list(exterior), *[list(hole) for hole in holes]], name=name)

    @property
    def exterior(self) -> np.ndarray:
        if not self.loops:
            return np.zeros((0, 2), dtype=float)
        return self.loops[0]

    @property
    def holes(self) -> list[np.ndarray]:
        return self.loops[1:]

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        pts = self.exterior
        if pts.shape[0] == 0:
            return (0.0, 0.0, 0.0, 0.0)
        mins = pts.min(axis=0)
        maxs = pts.max(axis=0)
        return (float(mins[0]), float(maxs[0]), float(mins[1]), float(maxs[1]))

    @property
    def size(self) -> tuple[float, float]:
        min_x, max_x, min_y, max_y = self.bounds
        return (max_x - min_x, max_y - min_y)

    @property
    def is_degenerate(self) -> bool:
        pts = self.exterior
        if distinct_points(pts) < 3:
            return True
        width, _ = self.size
        if width <= 0:
            return True
        return abs(signed_area(pts)) <= 0.0


__all__ = ["Outline", "signed_area", "distinct_points"]
