import pytest
from hypothesis import given
from hypothesis import strategies as st

from mzkit.bresenham import bresenham2d, bresenham3d

ints = st.integers(min_value=0, max_value=40)
points2 = st.tuples(ints, ints)
points3 = st.tuples(ints, ints, ints)


def test_horizontal_line():
    assert list(bresenham2d((0, 0), (3, 0))) == [(0, 0), (1, 0), (2, 0), (3, 0)]


def test_diagonal_line():
    assert list(bresenham2d((0, 0), (2, 2))) == [(0, 0), (1, 1), (2, 2)]


def test_single_point():
    assert list(bresenham2d((5, 7), (5, 7))) == [(5, 7)]
    assert list(bresenham3d((1, 2, 3), (1, 2, 3))) == [(1, 2, 3)]


def test_3d_axis_line():
    assert list(bresenham3d((0, 0, 0), (0, 0, 2))) == [(0, 0, 0), (0, 0, 1), (0, 0, 2)]


@given(points2, points2)
def test_2d_endpoints_and_length(a, b):
    cells = list(bresenham2d(a, b))
    assert cells[0] == a
    assert cells[-1] == b
    assert len(cells) == max(abs(b[0] - a[0]), abs(b[1] - a[1])) + 1


@given(points2, points2)
def test_2d_steps_are_connected(a, b):
    cells = list(bresenham2d(a, b))
    for p, q in zip(cells, cells[1:]):
        assert max(abs(p[0] - q[0]), abs(p[1] - q[1])) == 1


@given(points3, points3)
def test_3d_endpoints_and_length(a, b):
    cells = list(bresenham3d(a, b))
    assert cells[0] == a
    assert cells[-1] == b
    assert len(cells) == max(abs(b[i] - a[i]) for i in range(3)) + 1


@given(points3, points3)
def test_3d_steps_are_connected(a, b):
    cells = list(bresenham3d(a, b))
    for p, q in zip(cells, cells[1:]):
        assert max(abs(p[i] - q[i]) for i in range(3)) == 1


@given(points2, points2)
def test_2d_reverse_covers_same_extent(a, b):
    forward = list(bresenham2d(a, b))
    backward = list(bresenham2d(b, a))
    assert len(forward) == len(backward)
    assert backward[0] == b and backward[-1] == a


@pytest.mark.parametrize(
    "start,end",
    [((0, 0, 0), (4, 1, 2)), ((4, 1, 2), (0, 0, 0)), ((0, 3, 0), (1, 0, 1))],
)
def test_3d_monotone_per_axis(start, end):
    cells = list(bresenham3d(start, end))
    for axis in range(3):
        values = [c[axis] for c in cells]
        if end[axis] >= start[axis]:
            assert values == sorted(values)
        else:
            assert values == sorted(values, reverse=True)