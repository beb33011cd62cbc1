from __future__ import annotations

import numpy as np
import pytest

from digitspin.digits import DIGIT_LOOPS, VIEWBOX, digit_outline, digit_outlines
from digitspin.outline import Outline, distinct_points, signed_area


def test_closing_point_is_dropped():
    outline = Outline.from_points([(0, 0), (4, 0), (4, 2), (0, 2), (0, 0)])
    assert outline.exterior.shape == (4, 2)


def test_signed_area_follows_winding():
    ccw = np.array([(0, 0), (4, 0), (4, 2), (0, 2)], dtype=float)
    assert signed_area(ccw) == pytest.approx(8.0)
    assert signed_area(ccw[::-1]) == pytest.approx(-8.0)


def test_bounds_and_size_use_exterior_only():
    outline = Outline.from_points(
        [(1, 2), (7, 2), (7, 5), (1, 5)],
        holes=[[(2, 3), (3, 3), (3, 4), (2, 4)]],
    )
    assert outline.bounds == (1.0, 7.0, 2.0, 5.0)
    assert outline.size == (6.0, 3.0)
    assert len(outline.holes) == 1


@pytest.mark.parametrize(
    "points",
    [
        [],
        [(3, 3)],
        [(0, 0), (0, 0), (0, 0)],
        [(0, 0), (1, 1), (2, 2)],
        [(5, 0), (5, 4), (5, 9)],
    ],
)
def test_degenerate_outlines(points):
    assert Outline.from_points(points).is_degenerate


def test_invalid_points_raise():
    with pytest.raises(ValueError):
        Outline.from_points([(0, 0, 0), (1, 0, 0), (1, 1, 0)])
    with pytest.raises(ValueError):
        Outline.from_points([(0, 0), (1, float("nan")), (1, 1)])


def test_distinct_points_ignores_repeats():
    pts = np.array([(0, 0), (1, 0), (1, 0), (0, 0)], dtype=float)
    assert distinct_points(pts) == 2


def test_all_digits_fill_the_canvas():
    outlines = digit_outlines()
    assert len(outlines) == 10
    for digit, outline in enumerate(outlines):
        assert outline.name == str(digit)
        assert not outline.is_degenerate
        assert outline.size == VIEWBOX


def test_digit_hole_counts():
    assert [len(loops) - 1 for loops in DIGIT_LOOPS] == [1, 0, 0, 0, 0, 0, 1, 0, 2, 1]


def test_digit_out_of_range():
    with pytest.raises(ValueError):
        digit_outline(10)
    with pytest.raises(ValueError):
        digit_outline(-1)
