from __future__ import annotations

from pathlib import Path
import struct

import numpy as np

from digitspin.mesh import Mesh
from digitspin.solid import Solid


def _face_normals(mesh: Mesh) -> np.ndarray:
    if mesh.n_faces == 0:
        return np.zeros((0, 3), dtype=float)
    v0 = mesh.vertices[mesh.faces[:, 0]]
    v1 = mesh.vertices[mesh.faces[:, 1]]
    v2 = mesh.vertices[mesh.faces[:, 2]]
    normals = np.cross(v1 - v0, v2 - v0)
    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    safe = np.where(lengths > 0, lengths, 1.0)
    normals = np.where(lengths > 0, normals / safe, 0.0)
    return normals


def write_stl(shape: Solid | Mesh, path: Path, ascii: bool = False) -> Path:
    """Write a solid (placement applied) or a bare mesh as STL."""

    path = Path(path)
    mesh = shape.world_mesh() if isinstance(shape, Solid) else shape
    name = (shape.name if isinstance(shape, Solid) else None) or "digitspin"
    normals = _face_normals(mesh)
    triangles = mesh.vertices[mesh.faces] if mesh.n_faces else np.zeros((0, 3, 3), dtype=float)

    if ascii:
        lines = [f"solid {name}"]
        for normal, tri in zip(normals, triangles):
            nx, ny, nz = normal
            lines.append(f"  facet normal {nx:.6e} {ny:.6e} {nz:.6e}")
            lines.append("    outer loop")
            for vx, vy, vz in tri:
                lines.append(f"      vertex {vx:.6e} {vy:.6e} {vz:.6e}")
            lines.append("    endloop")
            lines.append("  endfacet")
        lines.append(f"endsolid {name}")
        path.write_text("\n".join(lines) + "\n")
        return path

    header = f"digitspin {name}".encode("ascii", "replace")[:80].ljust(80, b"\0")
    records = np.zeros(
        mesh.n_faces,
        dtype=np.dtype([("normal", "<f4", (3,)), ("vertices", "<f4", (3, 3)), ("attr", "<u2")]),
    )
    records["normal"] = normals
    records["vertices"] = triangles
    with path.open("wb") as handle:
        handle.write(header)
        handle.write(struct.pack("<I", mesh.n_faces))
        handle.write(records.tobytes())
    return path


__all__ = ["write_stl"]
