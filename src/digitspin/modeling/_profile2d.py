from __future__ import annotations

import numpy as np

from digitspin.outline import Outline, distinct_points, signed_area


def _drop_collinear(points: np.ndarray, rel_tol: float = 1e-9) -> np.ndarray:
    """Remove repeated and collinear vertices so caps and side walls share one vertex set."""

    if points.shape[0] < 3:
        return points
    shifted = np.roll(points, 1, axis=0)
    pts = points[np.any(np.abs(points - shifted) > 0, axis=1)]
    scale = max(float(np.ptp(points, axis=0).max()), 1.0)
    while pts.shape[0] >= 3:
        d0 = pts - np.roll(pts, 1, axis=0)
        d1 = np.roll(pts, -1, axis=0) - pts
        cross = d0[:, 0] * d1[:, 1] - d0[:, 1] * d1[:, 0]
        flat = np.flatnonzero(np.abs(cross) <= rel_tol * scale * scale)
        if flat.size == 0:
            break
        pts = np.delete(pts, flat[0], axis=0)
    return pts


def _ensure_winding(points: np.ndarray, clockwise: bool) -> np.ndarray:
    if points.shape[0] < 3:
        return points
    area = signed_area(points)
    is_cw = area < 0
    if is_cw != clockwise:
        return points[::-1].copy()
    return points


def _outline_loops(outline: Outline) -> list[np.ndarray]:
    """Exterior CCW first, then every usable hole CW."""

    loops = [_ensure_winding(_drop_collinear(outline.exterior), clockwise=False)]
    for hole in outline.holes:
        hole = _drop_collinear(hole)
        if distinct_points(hole) < 3:
            continue
        loops.append(_ensure_winding(hole, clockwise=True))
    return loops


def _triangulate_loops(loops: list[np.ndarray]) -> tuple[np.ndarray, np.ndarray]:
    if not loops:
        return np.zeros((0, 2), dtype=float), np.zeros((0, 3), dtype=int)
    try:
        import mapbox_earcut as earcut
    except ImportError as exc:  # pragma: no cover - runtime dependency
        raise ImportError("mapbox_earcut is required for outline triangulation.") from exc

    vertices = np.vstack(loops).astype(np.float64)
    ring_ends = []
    offset = 0
    for loop in loops:
        offset += loop.shape[0]
        ring_ends.append(offset)
    ring_end_indices = np.asarray(ring_ends, dtype=np.uint32)
    indices = earcut.triangulate_float64(vertices, ring_end_indices)
    faces = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
    return vertices, faces
