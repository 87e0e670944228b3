"""Row-major 3-by-3 matrices for transforming 3D coordinates."""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence, Union

_Index = Union[int, "tuple[int, int]"]


class Mat3:
    """A mutable 3-by-3 matrix stored in row-major order.

    ``Mat3()`` is the identity; ``Mat3(values)`` takes nine row-major values.
    Elements are reached either by flat index ``m[i]`` or by ``m[row, col]``.
    """

    XX, XY, XZ, YX, YY, YZ, ZX, ZY, ZZ = range(9)

    __slots__ = ("data",)

    def __init__(self, data: Iterable[float] | None = None) -> None:
        if data is None:
            self.data = [1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0]
            return
        values = [float(v) for v in data]
        if len(values) != 9:
            raise ValueError(f"a 3x3 matrix needs 9 values, got {len(values)}")
        self.data = values

    @classmethod
    def identity(cls) -> Mat3:
        return cls()

    @classmethod
    def from_rows(
        cls, r0: Sequence[float], r1: Sequence[float], r2: Sequence[float]
    ) -> Mat3:
        return cls([*r0[:3], *r1[:3], *r2[:3]])

    @classmethod
    def from_cols(
        cls, c0: Sequence[float], c1: Sequence[float], c2: Sequence[float]
    ) -> Mat3:
        return cls.from_rows(c0, c1, c2).transpose()

    @classmethod
    def cross(cls, v: Sequence[float]) -> Mat3:
        """Skew-symmetric matrix ``S`` such that ``S * u`` is ``v x u``."""
        x, y, z = v
        return cls([0.0, -z, y, z, 0.0, -x, -y, x, 0.0])

    @classmethod
    def outer(cls, a: Sequence[float], b: Sequence[float]) -> Mat3:
        """Outer product of two 3-vectors."""
        return cls(ai * bj for ai in a[:3] for bj in b[:3])

    @staticmethod
    def _flat(key: _Index) -> int:
        if isinstance(key, tuple):
            row, col = key
            if not (0 <= row < 3 and 0 <= col < 3):
                raise IndexError(f"matrix subscript out of range: {key}")
            return row * 3 + col
        return key

    def __getitem__(self, key: _Index) -> float:
        return self.data[self._flat(key)]

    def __setitem__(self, key: _Index, value: float) -> None:
        self.data[self._flat(key)] = float(value)

    def __iter__(self) -> Iterator[float]:
        return iter(self.data)

    def __len__(self) -> int:
        return 9

    def __repr__(self) -> str:
        return f"Mat3({self.data!r})"

    def __str__(self) -> str:
        return self.format()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mat3):
            return NotImplemented
        return self.data == other.data

    def transpose(self) -> Mat3:
        return Mat3(self.data[c * 3 + r] for r in range(3) for c in range(3))

    def row(self, i: int) -> tuple[float, float, float]:
        return tuple(self.data[3 * i : 3 * i + 3])  # type: ignore[return-value]

    def col(self, i: int) -> tuple[float, float, float]:
        return tuple(self.data[i::3])  # type: ignore[return-value]

    def set_row(self, i: int, v: Sequence[float]) -> None:
        self.data[3 * i : 3 * i + 3] = [float(x) for x in v[:3]]

    def set_col(self, i: int, v: Sequence[float]) -> None:
        self.data[i::3] = [float(x) for x in v[:3]]

    def determinant(self) -> float:
        d = self.data
        return (
            d[0] * (d[4] * d[8] - d[5] * d[7])
            + d[1] * (d[5] * d[6] - d[3] * d[8])
            + d[2] * (d[3] * d[7] - d[4] * d[6])
        )

    def inverse(self, det: float | None = None) -> Mat3:
        """Return the inverse; pass ``det`` if the determinant is already known."""
        if det is None:
            det = self.determinant()
        if det == 0:
            raise ValueError("matrix is singular")
        inv = 1.0 / det
        d = self.data
        return Mat3(
            [
                (d[4] * d[8] - d[5] * d[7]) * inv,
                (d[2] * d[7] - d[1] * d[8]) * inv,
                (d[1] * d[5] - d[2] * d[4]) * inv,
                (d[5] * d[6] - d[3] * d[8]) * inv,
                (d[0] * d[8] - d[2] * d[6]) * inv,
                (d[2] * d[3] - d[0] * d[5]) * inv,
                (d[3] * d[7] - d[4] * d[6]) * inv,
                (d[1] * d[6] - d[0] * d[7]) * inv,
                (d[0] * d[4] - d[1] * d[3]) * inv,
            ]
        )

    def format(self) -> str:
        """Rows of right-aligned, ten-wide elements, one row per line."""
        return "".join(
            "".join(f"{format(v, 'g'):>10} " for v in self.row(r)) + "\n"
            for r in range(3)
        )

    def __neg__(self) -> Mat3:
        return Mat3(-v for v in self.data)

    def __add__(self, other: Mat3) -> Mat3:
        if not isinstance(other, Mat3):
            return NotImplemented
        return Mat3(a + b for a, b in zip(self.data, other.data))

    def __sub__(self, other: Mat3) -> Mat3:
        if not isinstance(other, Mat3):
            return NotImplemented
        return Mat3(a - b for a, b in zip(self.data, other.data))

    def __mul__(self, other):  # type: ignore[no-untyped-def]
        if isinstance(other, Mat3):
            return Mat3(
                sum(self[i, k] * other[k, j] for k in range(3))
                for i in range(3)
                for j in range(3)
            )
        if isinstance(other, (int, float)):
            return Mat3(v * other for v in self.data)
        try:
            x, y, z = other
        except (TypeError, ValueError):
            return NotImplemented
        return tuple(
            x * self[r, 0] + y * self[r, 1] + z * self[r, 2] for r in range(3)
        )

    def __rmul__(self, scalar: float) -> Mat3:
        if isinstance(scalar, (int, float)):
            return Mat3(v * scalar for v in self.data)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]