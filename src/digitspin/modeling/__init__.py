"""Modeling utilities: extrusion, boolean evaluation, and transform helpers."""

from __future__ import annotations

from .csg import BACKENDS, BooleanBackend, BooleanOp, evaluate
from .extrude import HoleMode, extrude
from .transform import (
    mirror_matrix,
    scale_matrix,
    translation_matrix,
    yaw_matrix,
)

__all__ = [
    "BACKENDS",
    "BooleanBackend",
    "BooleanOp",
    "evaluate",
    "HoleMode",
    "extrude",
    "mirror_matrix",
    "scale_matrix",
    "translation_matrix",
    "yaw_matrix",
]
