from __future__ import annotations

import warnings
from typing import Literal

import numpy as np

from digitspin.mesh import Mesh
from digitspin.outline import Outline
from digitspin.solid import Solid

from ._profile2d import _outline_loops, _triangulate_loops
from .csg import BooleanBackend, BooleanOp, evaluate
from .transform import flip_authoring_frame

HoleMode = Literal["cap", "subtract"]

# Hole prisms poke this fraction of the depth past both caps in "subtract" mode.
_HOLE_OVERSHOOT = 1e-3


def _cap_faces(
    vertices: np.ndarray,
    faces: np.ndarray,
    expected_normal: np.ndarray,
) -> np.ndarray:
    if faces.size == 0:
        return faces
    tri = faces.copy()
    v1 = vertices[tri[:, 1]] - vertices[tri[:, 0]]
    v2 = vertices[tri[:, 2]] - vertices[tri[:, 0]]
    normals = np.cross(v1, v2)
    dots = np.einsum("ij,j->i", normals, expected_normal)
    flip = dots < 0
    if np.any(flip):
        tri[flip] = tri[flip][:, [0, 2, 1]]
    return tri


def _sweep(loops: list[np.ndarray], z0: float, z1: float) -> Mesh:
    """Sweep already-wound loops (exterior CCW, holes CW) from z0 to z1."""

    vertices_2d, faces_2d = _triangulate_loops(loops)
    count = len(vertices_2d)
    base = np.column_stack([vertices_2d, np.full(count, z0)])
    top = np.column_stack([vertices_2d, np.full(count, z1)])
    vertices = np.vstack([base, top])

    plane_normal = np.array([0.0, 0.0, 1.0], dtype=float)
    faces = [
        _cap_faces(base, faces_2d, expected_normal=-plane_normal),
        _cap_faces(top, faces_2d, expected_normal=plane_normal) + count,
    ]

    offset = 0
    for loop in loops:
        n = loop.shape[0]
        idx = np.arange(n)
        b0 = offset + idx
        b1 = offset + (idx + 1) % n
        t0 = b0 + count
        t1 = b1 + count
        faces.append(np.column_stack([b0, b1, t1]))
        faces.append(np.column_stack([b0, t1, t0]))
        offset += n

    return Mesh(vertices, np.vstack(faces))


def extrude(
    outline: Outline,
    center_origin: bool = False,
    depth: float | None = None,
    holes: HoleMode = "cap",
    backend: BooleanBackend = "manifold",
    tolerance: float = 1e-6,
) -> Solid | None:
    """Sweep an outline into a watertight solid.

    The extrusion depth defaults to the exterior's bounding-box width, so
    every solid is as deep as it is wide. The sweep happens in the y-down
    authoring frame and is then turned upright (Y and Z negated).

    Returns ``None`` for a degenerate outline.
    """

    if outline.is_degenerate:
        label = f" '{outline.name}'" if outline.name else ""
        warnings.warn(
            f"Outline{label} has no usable exterior; no solid produced.",
            RuntimeWarning,
            stacklevel=2,
        )
        return None

    width, _ = outline.size
    if depth is None:
        depth = width
    depth = float(depth)
    if depth <= 0:
        raise ValueError("depth must be positive.")
    if holes not in ("cap", "subtract"):
        raise ValueError("holes must be 'cap' or 'subtract'.")

    loops = _outline_loops(outline)
    dropped = len(outline.holes) - (len(loops) - 1)
    if dropped:
        warnings.warn(
            f"Ignoring {dropped} degenerate hole loop(s) with fewer than three points.",
            RuntimeWarning,
            stacklevel=2,
        )

    if holes == "cap":
        solid = Solid(_sweep(loops, 0.0, depth), name=outline.name)
    else:
        solid = Solid(_sweep(loops[:1], 0.0, depth), name=outline.name)
        margin = depth * _HOLE_OVERSHOOT
        for hole in loops[1:]:
            cutter = Solid(_sweep([hole[::-1].copy()], -margin, depth + margin))
            solid = evaluate(solid, cutter, BooleanOp.SUBTRACT, backend=backend, tolerance=tolerance)

    mesh = solid.mesh.transform(flip_authoring_frame(), inplace=False)
    offset = np.zeros(3)
    if center_origin:
        offset = -mesh.center
        mesh.translate(offset)

    mesh.metadata = {"depth": depth, "center_offset": tuple(float(v) for v in offset)}
    return Solid(mesh, name=outline.name)


__all__ = ["extrude", "HoleMode"]
