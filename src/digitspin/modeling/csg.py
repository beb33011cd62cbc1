from __future__ import annotations

import enum
import warnings
from typing import Literal

import numpy as np

from digitspin.mesh import Mesh, mesh_from_pyvista, mesh_to_pyvista, weld_vertices
from digitspin.solid import Solid

BooleanBackend = Literal["manifold", "vtk"]
BACKENDS: tuple[str, ...] = ("manifold", "vtk")


class BooleanOp(enum.Enum):
    INTERSECT = "intersect"
    SUBTRACT = "subtract"

    @classmethod
    def from_name(cls, name: str) -> "BooleanOp":
        key = name.strip().lower()
        for op in cls:
            if op.value == key or op.name.lower() == key:
                return op
        raise ValueError(f"Unknown boolean operator '{name}'.")


def evaluate(
    solid_a: Solid,
    solid_b: Solid,
    operator: BooleanOp = BooleanOp.INTERSECT,
    backend: BooleanBackend = "manifold",
    tolerance: float = 1e-6,
) -> Solid:
    """Boolean-combine two solids in world space.

    INTERSECT keeps the volume inside both solids; SUBTRACT keeps the volume
    of ``solid_a`` outside ``solid_b``. Both placements are frozen before
    evaluation and the result has an identity placement.
    """

    _ensure_backend(backend)
    operator = BooleanOp(operator)
    mesh_a = _prepare(solid_a, tolerance)
    mesh_b = _prepare(solid_b, tolerance)

    if mesh_a.is_empty or (mesh_b.is_empty and operator is BooleanOp.INTERSECT):
        result = Mesh.empty()
    elif mesh_b.is_empty:
        result = mesh_a
    elif backend == "manifold":
        result = _evaluate_manifold(mesh_a, mesh_b, operator)
    else:
        result = _evaluate_vtk(mesh_a, mesh_b, operator, tolerance)

    result.metadata["operator"] = operator.value
    result.metadata["backend"] = backend
    return Solid(result, name=_result_name(solid_a, solid_b, operator))


def _prepare(solid: Solid, tolerance: float) -> Mesh:
    mesh = solid.frozen().world_mesh()
    if mesh.is_empty:
        return mesh
    return weld_vertices(mesh, tolerance)


def _result_name(solid_a: Solid, solid_b: Solid, operator: BooleanOp) -> str | None:
    if solid_a.name is None or solid_b.name is None:
        return None
    symbol = "&" if operator is BooleanOp.INTERSECT else "-"
    return f"{solid_a.name}{symbol}{solid_b.name}"


def _ensure_backend(backend: str) -> None:
    if backend not in BACKENDS:
        raise ValueError(f"Unsupported backend '{backend}'. Choose one of: {', '.join(BACKENDS)}.")


# manifold3d ---------------------------------------------------------------


def _manifold_from_mesh(mesh: Mesh):
    from manifold3d import Manifold, Mesh as ManifoldMesh

    vertices = np.asarray(mesh.vertices, dtype=np.float32)
    faces = np.asarray(mesh.faces, dtype=np.uint32)
    try:
        manifold_mesh = ManifoldMesh(vertices, faces)
    except TypeError:
        manifold_mesh = ManifoldMesh(vert_properties=vertices, tri_verts=faces)
    manifold = Manifold(manifold_mesh)
    status = _status_name(manifold)
    if status != "NoError":
        warnings.warn(
            f"Boolean input rejected by manifold3d ({status}); result may be incomplete.",
            RuntimeWarning,
            stacklevel=3,
        )
    return manifold


def _status_name(manifold) -> str:
    status = manifold.status()
    return getattr(status, "name", str(status).rsplit(".", 1)[-1])


def _mesh_from_manifold(manifold) -> Mesh:
    mesh = manifold.to_mesh()
    vertices = np.asarray(mesh.vert_properties, dtype=float)
    faces = np.asarray(mesh.tri_verts, dtype=int)
    if vertices.size == 0 or faces.size == 0:
        return Mesh.empty()
    return Mesh(vertices[:, :3], faces)


def _evaluate_manifold(mesh_a: Mesh, mesh_b: Mesh, operator: BooleanOp) -> Mesh:
    from manifold3d import Manifold, OpType

    op_type = {
        BooleanOp.INTERSECT: OpType.Intersect,
        BooleanOp.SUBTRACT: OpType.Subtract,
    }[operator]
    result = Manifold.batch_boolean([_manifold_from_mesh(mesh_a), _manifold_from_mesh(mesh_b)], op_type)
    return _mesh_from_manifold(result)


# pyvista / VTK ------------------------------------------------------------

# Linear subdivision levels applied to both VTK inputs.
_VTK_SUBDIVISIONS = 2


def _check_mesh(mesh: Mesh, subdivisions: int = _VTK_SUBDIVISIONS):
    poly = mesh_to_pyvista(mesh).triangulate()
    poly = poly.clean(inplace=False)
    if poly.n_cells > 0 and subdivisions > 0:
        poly = poly.subdivide(subdivisions, subfilter="linear")
    if poly.n_cells > 0 and hasattr(poly, "orient_faces"):
        poly = poly.orient_faces(inplace=False)
    if poly.n_cells > 0:
        poly = poly.compute_normals(
            cell_normals=True,
            point_normals=False,
            auto_orient_normals=True,
            consistent_normals=True,
            inplace=False,
        )
    return poly


def _finalize_mesh(poly, tolerance: float):
    poly = poly.extract_geometry().triangulate()
    poly = poly.clean(tolerance=tolerance, inplace=False)
    if poly.n_cells > 0 and hasattr(poly, "orient_faces"):
        poly = poly.orient_faces(inplace=False)
    if poly.n_cells > 0:
        poly = poly.compute_normals(
            cell_normals=True,
            point_normals=False,
            auto_orient_normals=True,
            consistent_normals=True,
            inplace=False,
        )
    return poly


def _evaluate_vtk(mesh_a: Mesh, mesh_b: Mesh, operator: BooleanOp, tolerance: float) -> Mesh:
    """VTK booleans for inputs in general position; coplanar faces are not supported."""

    poly_a = _check_mesh(mesh_a)
    poly_b = _check_mesh(mesh_b)
    if operator is BooleanOp.INTERSECT:
        result = poly_a.boolean_intersection(poly_b, tolerance=tolerance)
    else:
        result = poly_a.boolean_difference(poly_b, tolerance=tolerance)
    return weld_vertices(mesh_from_pyvista(_finalize_mesh(result, tolerance)), tolerance)


__all__ = ["BooleanOp", "BooleanBackend", "BACKENDS", "evaluate"]
