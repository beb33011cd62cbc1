from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np


@dataclass
class MeshAnalysis:
    n_vertices: int
    n_faces: int
    degenerate_faces: int
    boundary_edges: int
    nonmanifold_edges: int
    invalid_vertices: int

    @property
    def is_manifold(self) -> bool:
        return self.nonmanifold_edges == 0

    @property
    def is_watertight(self) -> bool:
        return self.boundary_edges == 0 and self.is_manifold

    @property
    def has_degenerate_faces(self) -> bool:
        return self.degenerate_faces > 0

    @property
    def has_invalid_vertices(self) -> bool:
        return self.invalid_vertices > 0

    def issues(self) -> list[str]:
        issues: list[str] = []
        if self.has_invalid_vertices:
            issues.append(f"{self.invalid_vertices} invalid vertices (NaN/inf)")
        if self.has_degenerate_faces:
            issues.append(f"{self.degenerate_faces} degenerate faces")
        if self.boundary_edges > 0:
            issues.append(f"{self.boundary_edges} boundary edges (not watertight)")
        if self.nonmanifold_edges > 0:
            issues.append(f"{self.nonmanifold_edges} non-manifold edges")
        return issues


@dataclass
class Mesh:
    """Indexed triangle mesh: ``(n, 3)`` float vertices, ``(m, 3)`` int faces."""

    vertices: np.ndarray
    faces: np.ndarray
    metadata: dict[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.vertices = np.asarray(self.vertices, dtype=float).reshape(-1, 3).copy()
        self.faces = np.asarray(self.faces, dtype=int).reshape(-1, 3).copy()

    @classmethod
    def empty(cls) -> "Mesh":
        return cls(np.zeros((0, 3), dtype=float), np.zeros((0, 3), dtype=int))

    def copy(self) -> "Mesh":
        return Mesh(
            vertices=self.vertices.copy(),
            faces=self.faces.copy(),
            metadata=dict(self.metadata),
        )

    @property
    def n_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def n_faces(self) -> int:
        return int(self.faces.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.n_faces == 0

    @property
    def bounds(self) -> tuple[float, float, float, float, float, float]:
        if self.n_vertices == 0:
            return (0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
        mins = self.vertices.min(axis=0)
        maxs = self.vertices.max(axis=0)
        return (float(mins[0]), float(maxs[0]), float(mins[1]), float(maxs[1]), float(mins[2]), float(maxs[2]))

    @property
    def extents(self) -> np.ndarray:
        b = self.bounds
        return np.array([b[1] - b[0], b[3] - b[2], b[5] - b[4]], dtype=float)

    @property
    def center(self) -> np.ndarray:
        b = self.bounds
        return np.array([(b[0] + b[1]) / 2.0, (b[2] + b[3]) / 2.0, (b[4] + b[5]) / 2.0], dtype=float)

    @property
    def volume(self) -> float:
        """Signed enclosed volume; positive when faces point outward."""

        if self.n_faces == 0:
            return 0.0
        v0 = self.vertices[self.faces[:, 0]]
        v1 = self.vertices[self.faces[:, 1]]
        v2 = self.vertices[self.faces[:, 2]]
        return float(np.einsum("ij,ij->i", v0, np.cross(v1, v2)).sum() / 6.0)

    def transform(self, matrix: np.ndarray, inplace: bool = True) -> "Mesh":
        verts = np.hstack([self.vertices, np.ones((self.n_vertices, 1), dtype=float)])
        transformed = (np.asarray(matrix, dtype=float) @ verts.T).T[:, :3]
        if inplace:
            self.vertices = transformed
            return self
        mesh = self.copy()
        mesh.vertices = transformed
        return mesh

    def translate(self, offset: Sequence[float], inplace: bool = True) -> "Mesh":
        vec = np.asarray(offset, dtype=float).reshape(3)
        if inplace:
            self.vertices = self.vertices + vec
            return self
        mesh = self.copy()
        mesh.vertices = mesh.vertices + vec
        return mesh


def weld_vertices(mesh: Mesh, tolerance: float = 1e-6) -> Mesh:
    """Merge vertices that share a ``tolerance``-sized grid cell and drop collapsed triangles.

    Vertices are snapped to the nearest multiple of ``tolerance``, so two points
    closer than ``tolerance`` can still land in neighbouring cells and stay
    separate. Use it to fuse coordinates that should be identical up to
    rounding, not as a distance-based merge.
    """

    if tolerance <= 0:
        raise ValueError("tolerance must be positive.")
    if mesh.n_vertices == 0:
        return mesh.copy()
    keys = np.round(mesh.vertices / tolerance).astype(np.int64)
    _, first, inverse = np.unique(keys, axis=0, return_index=True, return_inverse=True)
    inverse = inverse.reshape(-1)
    faces = inverse[mesh.faces]
    keep = (faces[:, 0] != faces[:, 1]) & (faces[:, 1] != faces[:, 2]) & (faces[:, 2] != faces[:, 0])
    return Mesh(mesh.vertices[first], faces[keep], metadata=dict(mesh.metadata))


def analyze_mesh(mesh: Mesh, area_epsilon: float = 1e-12) -> MeshAnalysis:
    verts = mesh.vertices
    faces = mesh.faces
    invalid_vertices = int(np.count_nonzero(~np.isfinite(verts)))

    degenerate_faces = 0
    if faces.size > 0:
        v0 = verts[faces[:, 0]]
        v1 = verts[faces[:, 1]]
        v2 = verts[faces[:, 2]]
        cross = np.cross(v1 - v0, v2 - v0)
        areas = np.linalg.norm(cross, axis=1) * 0.5
        degenerate_faces = int(np.count_nonzero(areas <= area_epsilon))

    edge_counts: dict[tuple[int, int], int] = {}
    for tri in faces:
        edges = [(tri[0], tri[1]), (tri[1], tri[2]), (tri[2], tri[0])]
        for a, b in edges:
            key = (a, b) if a < b else (b, a)
            edge_counts[key] = edge_counts.get(key, 0) + 1

    boundary_edges = sum(1 for count in edge_counts.values() if count == 1)
    nonmanifold_edges = sum(1 for count in edge_counts.values() if count > 2)

    return MeshAnalysis(
        n_vertices=mesh.n_vertices,
        n_faces=mesh.n_faces,
        degenerate_faces=degenerate_faces,
        boundary_edges=boundary_edges,
        nonmanifold_edges=nonmanifold_edges,
        invalid_vertices=invalid_vertices,
    )


def mesh_to_pyvista(mesh: Mesh):
    import pyvista as pv

    if mesh.n_faces == 0:
        return pv.PolyData(mesh.vertices, deep=True)
    faces = np.hstack([np.full((mesh.n_faces, 1), 3, dtype=np.int64), mesh.faces.astype(np.int64)]).ravel()
    return pv.PolyData(mesh.vertices, faces, deep=True)


def mesh_from_pyvista(poly) -> Mesh:
    poly = poly.triangulate()
    if poly.n_cells == 0:
        return Mesh.empty()
    faces = np.asarray(poly.faces, dtype=int).reshape(-1, 4)[:, 1:]
    return Mesh(np.asarray(poly.points, dtype=float), faces)
