from __future__ import annotations

import math

import numpy as np
import pytest

from digitspin.mesh import Mesh, analyze_mesh, weld_vertices
from digitspin.solid import Placement, Solid
from tests.helpers import rect_solid


def test_weld_merges_near_duplicates_and_drops_collapsed_faces():
    mesh = Mesh(
        vertices=[(0, 0, 0), (1, 0, 0), (0, 1, 0), (1e-9, 0, 0)],
        faces=[(0, 1, 2), (3, 1, 2), (0, 3, 2)],
    )
    welded = weld_vertices(mesh, tolerance=1e-6)
    assert welded.n_vertices == 3
    assert welded.n_faces == 2


def test_weld_snaps_to_a_grid_rather_than_by_distance():
    mesh = Mesh(
        vertices=[(0.0004, 0, 0), (0.0001, 0, 0), (0.0006, 0, 0), (0, 1, 0), (1, 0, 0)],
        faces=[(0, 3, 4), (1, 3, 4), (2, 3, 4)],
    )
    welded = weld_vertices(mesh, tolerance=1e-3)
    # 0.0004 and 0.0001 share the cell at 0; 0.0006 rounds to the next cell.
    assert welded.n_vertices == 4
    assert np.unique(welded.faces[:, 0]).size == 2


def test_weld_rejects_non_positive_tolerance():
    with pytest.raises(ValueError):
        weld_vertices(Mesh.empty(), tolerance=0.0)


def test_open_mesh_reports_boundary_edges():
    mesh = Mesh(vertices=[(0, 0, 0), (1, 0, 0), (0, 1, 0)], faces=[(0, 1, 2)])
    analysis = analyze_mesh(mesh)
    assert not analysis.is_watertight
    assert analysis.boundary_edges == 3
    assert "3 boundary edges (not watertight)" in analysis.issues()


def test_box_volume_and_bounds():
    solid = rect_solid(2.0, 4.0)
    assert solid.volume == pytest.approx(2.0 * 4.0 * 2.0)
    assert np.allclose(solid.bounds, (-1.0, 1.0, -2.0, 2.0, -1.0, 1.0))


def test_solid_vertices_are_read_only():
    solid = rect_solid(2.0, 4.0)
    with pytest.raises(ValueError):
        solid.mesh.vertices[0, 0] = 99.0


def test_rotation_is_tracked_until_frozen():
    solid = rect_solid(2.0, 4.0)
    turned = solid.rotated(math.pi / 2)
    assert np.array_equal(turned.mesh.vertices, solid.mesh.vertices)
    assert not turned.placement.is_identity

    frozen = turned.frozen()
    assert frozen.placement.is_identity
    assert np.allclose(frozen.mesh.vertices, turned.world_mesh().vertices)
    assert frozen.volume == pytest.approx(solid.volume)


def test_placement_matrix_applies_scale_then_yaw_then_translation():
    placement = Placement(translation=(5.0, 0.0, 0.0), yaw=math.pi / 2, scale=2.0)
    point = placement.matrix() @ np.array([0.0, 0.0, 1.0, 1.0])
    assert np.allclose(point[:3], (7.0, 0.0, 0.0))


def test_placement_rejects_bad_scale():
    with pytest.raises(ValueError):
        Placement(scale=0.0)


def test_solid_frozen_keeps_identity_solid():
    solid = Solid(Mesh.empty())
    assert solid.frozen() is solid
    assert solid.is_empty
