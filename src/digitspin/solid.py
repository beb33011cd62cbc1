from __future__ import annotations

from dataclasses import dataclass, field, replace

import numpy as np

from digitspin.mesh import Mesh, MeshAnalysis, analyze_mesh
from digitspin.modeling.transform import scale_matrix, translation_matrix, yaw_matrix


@dataclass(frozen=True)
class Placement:
    """Local-to-world transform: translation, yaw about the vertical axis, uniform scale."""

    translation: tuple[float, float, float] = (0.0, 0.0, 0.0)
    yaw: float = 0.0
    scale: float = 1.0

    def __post_init__(self) -> None:
        vec = np.asarray(self.translation, dtype=float).reshape(3)
        object.__setattr__(self, "translation", (float(vec[0]), float(vec[1]), float(vec[2])))
        if not np.isfinite(self.scale) or self.scale <= 0:
            raise ValueError("scale must be positive.")

    @property
    def is_identity(self) -> bool:
        return self.translation == (0.0, 0.0, 0.0) and self.yaw == 0.0 and self.scale == 1.0

    def matrix(self) -> np.ndarray:
        return translation_matrix(self.translation) @ yaw_matrix(self.yaw) @ scale_matrix(self.scale)

    def then_yaw(self, angle_rad: float) -> "Placement":
        return replace(self, yaw=self.yaw + float(angle_rad))


@dataclass(frozen=True, eq=False)
class Solid:
    """Immutable watertight mesh plus the placement it is displayed with.

    The placement never touches the stored vertices until :meth:`frozen`
    bakes it in, which boolean evaluation requires.
    """

    mesh: Mesh
    placement: Placement = field(default_factory=Placement)
    name: str | None = None

    def __post_init__(self) -> None:
        mesh = self.mesh.copy()
        mesh.vertices.flags.writeable = False
        mesh.faces.flags.writeable = False
        object.__setattr__(self, "mesh", mesh)

    @property
    def n_vertices(self) -> int:
        return self.mesh.n_vertices

    @property
    def n_faces(self) -> int:
        return self.mesh.n_faces

    @property
    def is_empty(self) -> bool:
        return self.mesh.is_empty

    def world_mesh(self) -> Mesh:
        if self.placement.is_identity:
            return self.mesh.copy()
        return self.mesh.transform(self.placement.matrix(), inplace=False)

    def frozen(self) -> "Solid":
        """Return an equivalent solid whose placement is baked into its vertices."""

        if self.placement.is_identity:
            return self
        return Solid(self.world_mesh(), Placement(), name=self.name)

    def rotated(self, yaw: float) -> "Solid":
        return Solid(self.mesh, self.placement.then_yaw(yaw), name=self.name)

    @property
    def bounds(self) -> tuple[float, float, float, float, float, float]:
        return self.world_mesh().bounds

    @property
    def volume(self) -> float:
        return self.world_mesh().volume

    def analysis(self) -> MeshAnalysis:
        return analyze_mesh(self.mesh)

    @property
    def is_watertight(self) -> bool:
        return self.analysis().is_watertight


__all__ = ["Placement", "Solid"]
