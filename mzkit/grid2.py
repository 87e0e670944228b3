"""Regular 2D grids of square cells."""

from __future__ import annotations

import math
from typing import Any, Sequence

from mzkit.vec2 import Vec2

Cell = tuple[int, int]

_DISPLACEMENTS = ((0, 0), (0, 1), (1, 0), (1, 1))


def _vec(p: Vec2 | Sequence[float]) -> Vec2:
    return p if isinstance(p, Vec2) else Vec2(float(p[0]), float(p[1]))


class Grid2:
    """Geometry of an ``nx``-by-``ny`` grid: origin, cell size and indexing.

    Cells are addressed by ``(x, y)`` pairs and by flat indices in which
    ``x`` varies fastest.
    """

    def __init__(self) -> None:
        self.clear()

    def clear(self) -> None:
        """Reset to an empty grid."""
        self.dims: Cell = (0, 0)
        self.size = 0
        self.origin = Vec2(0.0, 0.0)
        self.cell_size = 0.0

    @property
    def nx(self) -> int:
        return self.dims[0]

    @property
    def ny(self) -> int:
        return self.dims[1]

    @property
    def empty(self) -> bool:
        return not self.size

    def resize(
        self,
        nx: int,
        ny: int,
        cell_size: float,
        origin: Vec2 | Sequence[float] = (0.0, 0.0),
    ) -> None:
        """Set the dimensions directly; a zero dimension leaves the grid empty."""
        self.clear()
        size = nx * ny
        if not size:
            return
        self.dims = (nx, ny)
        self.size = size
        self.cell_size = float(cell_size)
        self.origin = _vec(origin)

    def resize_to_fit(
        self,
        lo: Vec2 | Sequence[float],
        hi: Vec2 | Sequence[float],
        cell_size: float,
    ) -> None:
        """Size the grid to cover ``lo``..``hi``, centred on their midpoint.

        If ``hi`` is below ``lo`` on either axis the grid is left empty.
        """
        self.clear()
        lo_v, hi_v = _vec(lo), _vec(hi)
        center = 0.5 * (hi_v + lo_v)
        dims = []
        origin = []
        for a, b, c in zip(lo_v, hi_v, center):
            f = (b - a) / cell_size
            if f < 0:
                return
            d = math.ceil(f)
            dims.append(d)
            origin.append(c - 0.5 * cell_size * d)
        self.resize(dims[0], dims[1], cell_size, Vec2(origin[0], origin[1]))

    def bbox(self) -> tuple[Vec2, Vec2] | None:
        """Lower and upper corners of the grid, or None when it is empty."""
        if self.empty:
            return None
        upper = self.origin + Vec2(self.cell_size * self.nx, self.cell_size * self.ny)
        return (self.origin, upper)

    def center(self) -> Vec2:
        half = 0.5 * self.cell_size
        return self.origin + Vec2(half * self.nx, half * self.ny)

    def _vec2sub(self, pos: Vec2 | Sequence[float], delta: float) -> Cell:
        if self.empty:
            raise ValueError("grid is empty")
        v = (_vec(pos) - self.origin) * (1.0 / self.cell_size)
        x, y = (
            min(int(max(c + delta, 0.0)), d - 1) for c, d in zip(v, self.dims)
        )
        return (x, y)

    def floor_cell(self, pos: Vec2 | Sequence[float]) -> Cell:
        """Cell whose centre is at or below ``pos`` on both axes, clamped."""
        return self._vec2sub(pos, -0.5)

    def ceil_cell(self, pos: Vec2 | Sequence[float]) -> Cell:
        """Cell whose centre is above ``pos`` on both axes, clamped."""
        return self._vec2sub(pos, 0.5)

    def nearest_cell(self, pos: Vec2 | Sequence[float]) -> Cell:
        """Cell containing ``pos``, clamped to the grid."""
        return self._vec2sub(pos, 0.0)

    def cell_center(self, cell: Sequence[int]) -> Vec2:
        x, y = cell
        return self.origin + Vec2(x + 0.5, y + 0.5) * self.cell_size

    def cell_center_of_index(self, idx: int) -> Vec2:
        return self.cell_center(self.ind2sub(idx))

    def sub2ind(self, x: int, y: int) -> int:
        return y * self.nx + x

    def ind2sub(self, idx: int) -> Cell:
        y, x = divmod(idx, self.nx)
        return (x, y)

    def sample_coeffs(
        self, pos: Vec2 | Sequence[float]
    ) -> tuple[Cell, tuple[float, float]]:
        """Floor cell and its bilinear blending weight on each axis."""
        p = _vec(pos)
        fs = self.floor_cell(p)
        fv = self.cell_center(fs)
        inv_cs = 1.0 / self.cell_size
        alpha = []
        for pj, fj, sj, dj in zip(p, fv, fs, self.dims):
            diff = pj - fj
            if diff < 0 or diff >= self.cell_size or sj + 1 >= dj:
                alpha.append(1.0)
            else:
                alpha.append(1.0 - diff * inv_cs)
        return fs, (alpha[0], alpha[1])

    def sample_at(
        self, floor_cell: Sequence[int], alpha: Sequence[float], data: Sequence[Any]
    ) -> Any:
        """Blend the four cells above ``floor_cell`` from flat ``data``."""
        fx, fy = floor_cell
        total: Any = 0
        for dx, dy in _DISPLACEMENTS:
            coeff = (1 - alpha[0] if dx else alpha[0]) * (
                1 - alpha[1] if dy else alpha[1]
            )
            if not coeff:
                continue
            total = total + coeff * data[self.sub2ind(fx + dx, fy + dy)]
        return total

    def sample(self, pos: Vec2 | Sequence[float], data: Sequence[Any]) -> Any:
        """Bilinearly interpolate flat per-cell ``data`` at ``pos``."""
        fs, alpha = self.sample_coeffs(pos)
        return self.sample_at(fs, alpha, data)