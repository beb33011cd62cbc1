from __future__ import annotations

import math

import numpy as np
import pytest

from digitspin.modeling import mirror_matrix, scale_matrix, translation_matrix, yaw_matrix
from digitspin.modeling.transform import axis_rotation_matrix, flip_authoring_frame


def _apply(matrix, point):
    return (matrix @ np.append(np.asarray(point, dtype=float), 1.0))[:3]


def test_yaw_maps_forward_axis():
    angle = math.radians(30.0)
    assert np.allclose(_apply(yaw_matrix(angle), (0, 0, 1)), (math.sin(angle), 0.0, math.cos(angle)))
    assert np.allclose(_apply(yaw_matrix(angle), (0, 1, 0)), (0, 1, 0))


def test_yaw_composes_additively():
    assert np.allclose(yaw_matrix(0.3) @ yaw_matrix(-1.1), yaw_matrix(-0.8))


def test_axis_rotation_is_right_handed():
    turned = _apply(axis_rotation_matrix((0, 0, 2), math.pi / 2), (1, 0, 0))
    assert np.allclose(turned, (0, 1, 0))


def test_scale_accepts_scalar_and_origin():
    assert np.allclose(_apply(scale_matrix(2.0), (1, 2, 3)), (2, 4, 6))
    assert np.allclose(_apply(scale_matrix((2, 1, 1), origin=(1, 0, 0)), (2, 0, 0)), (3, 0, 0))


def test_translation():
    assert np.allclose(_apply(translation_matrix((1, -2, 3)), (0, 0, 0)), (1, -2, 3))


def test_authoring_flip_is_a_proper_rotation():
    flip = flip_authoring_frame()
    assert np.linalg.det(flip[:3, :3]) == pytest.approx(1.0)
    assert np.allclose(_apply(flip, (1, 2, 3)), (1, -2, -3))
    assert np.linalg.det(mirror_matrix((0, 1, 0))[:3, :3]) == pytest.approx(-1.0)


def test_zero_axes_raise():
    with pytest.raises(ValueError):
        axis_rotation_matrix((0, 0, 0), 0.5)
    with pytest.raises(ValueError):
        mirror_matrix((0, 0, 0))
