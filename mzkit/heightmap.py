"""Height maps: a 2D grid of cell heights with meshing and spatial subdivision."""

from __future__ import annotations

import math
import struct
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence, Union

from mzkit.grid2 import Cell, Grid2
from mzkit.vec2 import Vec2

INVALID_HEIGHT = -sys.float_info.max
"""Marker stored in cells that have no height."""

Point3 = tuple[float, float, float]
Box3 = tuple[Point3, Point3]

_HEADER = struct.Struct("<QQQddd")
_DEFAULT_AXES = (0, 1, 2)

_Key = Union[int, "tuple[int, int]"]


@dataclass
class Split:
    """One node of the spatial subdivision of a height map.

    ``s0`` is the first cell and ``s1`` one past the last cell on each axis.
    ``box`` spans the centres of the corner cells and the height range.
    Indices refer to positions in the list returned by
    :meth:`HeightMap.subdivide`; ``None`` marks a missing parent or child.
    """

    s0: Cell
    s1: Cell
    box: Box3
    parent_index: int | None = None
    child_index: list[int | None] = field(default_factory=lambda: [None, None])


@dataclass
class HeightMesh:
    """A triangle mesh: vertex positions and triangles of vertex indices."""

    verts: list[Point3] = field(default_factory=list)
    faces: list[tuple[int, int, int]] = field(default_factory=list)

    def add_triangle(self, i: int, j: int, k: int) -> int:
        """Append a triangle and return its index."""
        self.faces.append((i, j, k))
        return len(self.faces) - 1


def _place(ax: Sequence[int], a: float, b: float, h: float) -> Point3:
    v = [0.0, 0.0, 0.0]
    v[ax[0]] = a
    v[ax[1]] = b
    v[ax[2]] = h
    return (v[0], v[1], v[2])


class HeightMap(Grid2):
    """A grid holding one height per cell; missing cells hold ``INVALID_HEIGHT``."""

    INVALID_HEIGHT = INVALID_HEIGHT

    def clear(self) -> None:
        """Reset to an empty map."""
        super().clear()
        self._heights: list[float] = []
        self.min_height = INVALID_HEIGHT
        self.max_height = INVALID_HEIGHT

    def resize(
        self,
        nx: int,
        ny: int,
        cell_size: float,
        origin: Vec2 | Sequence[float] = (0.0, 0.0),
    ) -> None:
        """Set the dimensions; every cell starts without a height."""
        self.clear()
        super().resize(nx, ny, cell_size, origin)
        self._heights = [INVALID_HEIGHT] * self.size

    def resize_to_fit(
        self,
        lo: Vec2 | Sequence[float],
        hi: Vec2 | Sequence[float],
        cell_size: float,
    ) -> None:
        """Size the map to cover ``lo``..``hi``; every cell starts without a height."""
        self.clear()
        super().resize_to_fit(lo, hi, cell_size)
        self._heights = [INVALID_HEIGHT] * self.size

    @property
    def heights(self) -> list[float]:
        """The flat height array, ``x`` varying fastest."""
        return self._heights

    def _index(self, key: _Key) -> int:
        if isinstance(key, tuple):
            x, y = key
            if not (0 <= x < self.nx and 0 <= y < self.ny):
                raise IndexError(f"cell out of range: {key}")
            return self.sub2ind(x, y)
        return key

    def __getitem__(self, key: _Key) -> float:
        return self._heights[self._index(key)]

    def __setitem__(self, key: _Key, value: float) -> None:
        self._heights[self._index(key)] = float(value)

    def __len__(self) -> int:
        return self.size

    @staticmethod
    def correct_height(h: float, default: float) -> float:
        """Return ``default`` in place of a missing height."""
        return default if h == INVALID_HEIGHT else h

    def corrected_height(self, x: int, y: int, default: float) -> float:
        """Height of cell ``(x, y)``, or ``default`` if missing or off the map."""
        if not (0 <= x < self.nx and 0 <= y < self.ny):
            return default
        return self.correct_height(self._heights[self.sub2ind(x, y)], default)

    def compute_extents(
        self, s0: Sequence[int], s1: Sequence[int]
    ) -> tuple[float, float]:
        """Lowest and highest valid height in cells ``s0`` up to (not incl.) ``s1``."""
        valid = [
            h
            for y in range(s0[1], s1[1])
            for x in range(s0[0], s1[0])
            if (h := self._heights[self.sub2ind(x, y)]) != INVALID_HEIGHT
        ]
        if not valid:
            return INVALID_HEIGHT, INVALID_HEIGHT
        return min(valid), max(valid)

    def recompute_extents(self) -> None:
        """Refresh ``min_height`` and ``max_height`` from the whole map."""
        self.min_height, self.max_height = self.compute_extents((0, 0), self.dims)

    def compute_bbox(self) -> Box3 | None:
        """Box spanning the grid and the height range, or None when empty."""
        box = self.bbox()
        if box is None:
            return None
        lo, hi = box
        return (lo.x, lo.y, self.min_height), (hi.x, hi.y, self.max_height)

    def load(self, path: str | Path) -> None:
        """Read a map written by :meth:`save`.

        Raises ValueError if the header is inconsistent or the data is short.
        """
        raw = Path(path).read_bytes()
        if len(raw) < _HEADER.size:
            raise ValueError("height map file is truncated")
        nx, ny, size, ox, oy, cell_size = _HEADER.unpack_from(raw)
        if nx * ny != size:
            raise ValueError(
                f"height map dimensions {nx}x{ny} do not match size {size}"
            )
        needed = _HEADER.size + 8 * size
        if len(raw) < needed:
            raise ValueError("height map file is truncated")
        heights = list(struct.unpack_from(f"<{size}d", raw, _HEADER.size))

        self.dims = (nx, ny)
        self.size = size
        self.origin = Vec2(ox, oy)
        self.cell_size = cell_size
        self._heights = heights
        self.recompute_extents()

    def save(self, path: str | Path) -> None:
        """Write dimensions, origin, cell size and heights in binary form."""
        header = _HEADER.pack(
            self.nx, self.ny, self.size, self.origin.x, self.origin.y, self.cell_size
        )
        body = struct.pack(f"<{self.size}d", *self._heights)
        Path(path).write_bytes(header + body)

    @staticmethod
    def bound_points(
        points: Sequence[Sequence[float]], ax: Sequence[int] = _DEFAULT_AXES
    ) -> tuple[Vec2, Vec2] | None:
        """Bounding rectangle of the points on axes ``ax[0]``, ``ax[1]``.

        Returns None when there are no points.
        """
        if not points:
            return None
        us = [p[ax[0]] for p in points]
        vs = [p[ax[1]] for p in points]
        return Vec2(min(us), min(vs)), Vec2(max(us), max(vs))

    def bin_points(
        self, points: Sequence[Sequence[float]], ax: Sequence[int] = _DEFAULT_AXES
    ) -> list[list[float]]:
        """Collect each point's ``ax[2]`` coordinate in the cell nearest to it."""
        bins: list[list[float]] = [[] for _ in range(self.size)]
        for p in points:
            cell = self.nearest_cell(Vec2(p[ax[0]], p[ax[1]]))
            bins[self.sub2ind(*cell)].append(p[ax[2]])
        return bins

    def median_map(self, bins: list[list[float]], min_count: int = 1) -> None:
        """Raise each cell to the median of its bin when it holds ``min_count`` values.

        The bins are emptied afterwards and the extents recomputed.
        """
        if len(bins) != self.size:
            raise ValueError(f"expected {self.size} bins, got {len(bins)}")
        for i, values in enumerate(bins):
            if not values or len(values) < min_count:
                continue
            median = sorted(values)[len(values) // 2]
            self._heights[i] = max(self._heights[i], median)
        bins.clear()
        self.recompute_extents()

    def _difference(self, lo: float, mid: float, hi: float) -> float:
        cs = self.cell_size
        if hi != INVALID_HEIGHT:
            if lo != INVALID_HEIGHT:
                return (hi - lo) / (2 * cs)
            if mid != INVALID_HEIGHT:
                return (hi - mid) / cs
        elif lo != INVALID_HEIGHT and mid != INVALID_HEIGHT:
            return (mid - lo) / cs
        return 0.0

    def slope(self, x: int, y: int) -> Vec2:
        """Height gradient at a cell from finite differences of valid neighbours."""
        nx, ny = self.dims
        if not (0 <= x < nx and 0 <= y < ny):
            return Vec2(0.0, 0.0)
        h11 = self[x, y]
        h01 = self[x - 1, y] if x > 0 else INVALID_HEIGHT
        h21 = self[x + 1, y] if x + 1 < nx else INVALID_HEIGHT
        h10 = self[x, y - 1] if y > 0 else INVALID_HEIGHT
        h12 = self[x, y + 1] if y + 1 < ny else INVALID_HEIGHT
        return Vec2(self._difference(h01, h11, h21), self._difference(h10, h11, h12))

    def normal(self, x: int, y: int) -> Point3:
        """Unit surface normal at a cell."""
        s = self.slope(x, y)
        n = (-s.x, -s.y, 1.0)
        length = math.sqrt(sum(c * c for c in n))
        return (n[0] / length, n[1] / length, n[2] / length)

    def generate_mesh(
        self, drop_edges: float = 0.0, ax: Sequence[int] = _DEFAULT_AXES
    ) -> HeightMesh:
        """Triangulate the map, one vertex per cell centre.

        With ``drop_edges`` positive, missing heights next to valid ones are
        placed ``drop_edges`` below the minimum so the surface gets a skirt.
        """
        drop = drop_edges > 0
        floor = self.min_height - drop_edges
        mesh = HeightMesh()
        for i, h in enumerate(self._heights):
            cc = self.cell_center_of_index(i)
            if drop:
                h = self.correct_height(h, floor)
            mesh.verts.append(_place(ax, cc.x, cc.y, h))

        inv = INVALID_HEIGHT
        for v in range(1, self.ny):
            for u in range(1, self.nx):
                i00 = self.sub2ind(u - 1, v - 1)
                i10 = self.sub2ind(u, v - 1)
                i01 = self.sub2ind(u - 1, v)
                i11 = self.sub2ind(u, v)
                h00, h10, h01, h11 = (
                    self._heights[i] for i in (i00, i10, i01, i11)
                )
                if drop and any(h != inv for h in (h00, h10, h01, h11)):
                    h00, h10, h01, h11 = (
                        self.correct_height(h, floor) for h in (h00, h10, h01, h11)
                    )

                if inv not in (h00, h10, h01, h11):
                    if abs(h00 - h11) < abs(h01 - h10):
                        mesh.add_triangle(i00, i10, i11)
                        mesh.add_triangle(i00, i11, i01)
                    else:
                        mesh.add_triangle(i01, i00, i10)
                        mesh.add_triangle(i01, i10, i11)
                elif h00 != inv and h11 != inv:
                    if h10 != inv:
                        mesh.add_triangle(i00, i10, i11)
                    if h01 != inv:
                        mesh.add_triangle(i00, i11, i01)
                elif h10 != inv and h01 != inv:
                    if h00 != inv:
                        mesh.add_triangle(i01, i00, i10)
                    if h11 != inv:
                        mesh.add_triangle(i01, i10, i11)
        return mesh

    def subdivide(self) -> list[Split]:
        """Split the map recursively in halves until each part is flat.

        Parts without any valid height are left out.  The result lists
        nodes depth first, the root at index 0.
        """
        splits: list[Split] = []
        if not self.empty:
            self._subdivide(splits, None, 0, (0, 0), self.dims)
        return splits

    def _subdivide(
        self,
        splits: list[Split],
        parent: int | None,
        which: int,
        s0: Cell,
        s1: Cell,
    ) -> None:
        hmin, hmax = self.compute_extents(s0, s1)
        if hmin == INVALID_HEIGHT:
            return

        cur_index = len(splits)
        c0 = self.cell_center(s0)
        c1 = self.cell_center((s1[0] - 1, s1[1] - 1))
        splits.append(
            Split(s0, s1, ((c0.x, c0.y, hmin), (c1.x, c1.y, hmax)), parent)
        )
        if parent is not None:
            splits[parent].child_index[which] = cur_index

        if hmin == hmax:
            return

        sx, sy = s1[0] - s0[0], s1[1] - s0[1]
        if sx >= sy:
            xmid = s0[0] + sx // 2
            self._subdivide(splits, cur_index, 0, s0, (xmid, s1[1]))
            self._subdivide(splits, cur_index, 1, (xmid, s0[1]), s1)
        else:
            ymid = s0[1] + sy // 2
            self._subdivide(splits, cur_index, 0, s0, (s1[0], ymid))
            self._subdivide(splits, cur_index, 1, (s0[0], ymid), s1)