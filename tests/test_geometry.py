import numpy as np
import pytest

from src.crackfield.field_types import Node, Point
from src.crackfield.geometry import (
    check_crossing,
    crossing_triangles,
    positions_array,
    triangle_area,
)

SEG_START = Point(1.0, 5.0)
SEG_END = Point(9.0, 5.0)


def test_triangle_area_orientation() -> None:
    a = Point(0.0, 0.0)
    b = Point(1.0, 0.0)
    c = Point(0.0, 1.0)
    assert triangle_area(a, b, c) == pytest.approx(1.0)
    assert triangle_area(a, c, b) == pytest.approx(-1.0)


def test_triangle_area_collinear_is_zero() -> None:
    assert triangle_area(Point(0, 0), Point(1, 1), Point(3, 3)) == 0.0


def test_check_crossing_above() -> None:
    check = check_crossing(Point(5, 6), Point(2, 2), SEG_START, SEG_END)
    assert check.result == 2
    assert tuple(check.areas) == pytest.approx((-13.0, 19.0, 8.0, -24.0))


def test_check_crossing_below() -> None:
    check = check_crossing(Point(5, 4), Point(2, 8), SEG_START, SEG_END)
    assert check.result == 3
    assert tuple(check.areas) == pytest.approx((13.0, -19.0, -8.0, 24.0))


def test_check_crossing_same_side_is_zero() -> None:
    check = check_crossing(Point(5, 4), Point(2, 2), SEG_START, SEG_END)
    assert check.result == 0


def test_check_crossing_reversed_segment_flips_label() -> None:
    p = Point(5, 6)
    n = Point(2, 2)
    forward = check_crossing(p, n, SEG_START, SEG_END)
    backward = check_crossing(p, n, SEG_END, SEG_START)
    assert forward.result == 2
    assert backward.result == 3
    assert backward.areas.area1 == pytest.approx(forward.areas.area2)
    assert backward.areas.area2 == pytest.approx(forward.areas.area1)
    assert backward.areas.area3 == pytest.approx(-forward.areas.area3)
    assert backward.areas.area4 == pytest.approx(-forward.areas.area4)


def test_check_crossing_segment_beyond_pair_is_zero() -> None:
    # Pair segment stops short of the crack line.
    check = check_crossing(Point(5, 1), Point(5, 3), SEG_START, SEG_END)
    assert check.result == 0


def test_check_crossing_zero_length_segment() -> None:
    p = Point(5, 6)
    check = check_crossing(p, Point(2, 2), Point(3, 3), Point(3, 3))
    assert check.result == 0
    assert check.areas.area3 == 0.0
    assert check.areas.area4 == 0.0


def test_check_crossing_node_on_crack_line() -> None:
    # area4 == 0 sits on the non-negative side: only the "below" pattern can match.
    check = check_crossing(Point(5, 4), Point(5, 5), SEG_START, SEG_END)
    assert check.areas.area4 == 0.0
    assert check.result == 3


def test_crossing_triangles_order() -> None:
    p, n = Point(5, 6), Point(2, 2)
    tris = crossing_triangles(p, n, SEG_START, SEG_END)
    assert tris[0] == (p, n, SEG_START)
    assert tris[1] == (p, n, SEG_END)
    assert tris[2] == (SEG_START, SEG_END, p)
    assert tris[3] == (SEG_START, SEG_END, n)


def test_positions_array() -> None:
    xy = positions_array([Node(0, 1, 2), Node(1, 3, 4)])
    assert xy.dtype == np.float64
    np.testing.assert_allclose(xy, np.array([[1.0, 2.0], [3.0, 4.0]]))


def test_positions_array_empty() -> None:
    xy = positions_array([])
    assert xy.shape == (0, 2)
