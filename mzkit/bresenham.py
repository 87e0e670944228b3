"""Bresenham line rasterisation on 2D and 3D integer grids."""

from __future__ import annotations

from typing import Iterator, Sequence


def bresenham2d(
    start: Sequence[int], end: Sequence[int]
) -> Iterator[tuple[int, int]]:
    """Yield every cell on the line from ``start`` to ``end``, both included."""
    x, y = start
    dx, dy = end[0] - x, end[1] - y
    x_inc = -1 if dx < 0 else 1
    y_inc = -1 if dy < 0 else 1
    l, m = abs(dx), abs(dy)
    dx2, dy2 = l << 1, m << 1

    if l >= m:
        err = dy2 - l
        for _ in range(l):
            yield (x, y)
            if err > 0:
                y += y_inc
                err -= dx2
            err += dy2
            x += x_inc
    else:
        err = dx2 - m
        for _ in range(m):
            yield (x, y)
            if err > 0:
                x += x_inc
                err -= dy2
            err += dx2
            y += y_inc

    yield (x, y)


def bresenham3d(
    start: Sequence[int], end: Sequence[int]
) -> Iterator[tuple[int, int, int]]:
    """Yield every cell on the line from ``start`` to ``end``, both included."""
    p = list(start)
    dx, dy, dz = end[0] - p[0], end[1] - p[1], end[2] - p[2]
    x_inc = -1 if dx < 0 else 1
    y_inc = -1 if dy < 0 else 1
    z_inc = -1 if dz < 0 else 1
    l, m, n = abs(dx), abs(dy), abs(dz)
    dx2, dy2, dz2 = l << 1, m << 1, n << 1

    if l >= m and l >= n:
        # major axis x; minor axes y and z
        major, major_inc, steps, major2 = 0, x_inc, l, dx2
        minors = ((1, y_inc, dy2), (2, z_inc, dz2))
    elif m >= l and m >= n:
        major, major_inc, steps, major2 = 1, y_inc, m, dy2
        minors = ((0, x_inc, dx2), (2, z_inc, dz2))
    else:
        major, major_inc, steps, major2 = 2, z_inc, n, dz2
        minors = ((1, y_inc, dy2), (0, x_inc, dx2))

    errs = [d2 - steps for _, _, d2 in minors]
    for _ in range(steps):
        yield (p[0], p[1], p[2])
        for k, (axis, inc, _) in enumerate(minors):
            if errs[k] > 0:
                p[axis] += inc
                errs[k] -= major2
        for k, (_, _, d2) in enumerate(minors):
            errs[k] += d2
        p[major] += major_inc

    yield (p[0], p[1], p[2])