"""Four-dimensional (homogeneous) vectors."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Sequence


@dataclass(frozen=True)
class Vec4:
    """An immutable 4D vector; ``w`` defaults to 1."""

    x: float
    y: float
    z: float
    w: float = 1.0

    @classmethod
    def zero(cls) -> Vec4:
        """The null vector."""
        return cls(0.0, 0.0, 0.0, 0.0)

    @classmethod
    def filled(cls, value: float) -> Vec4:
        """Return a vector whose coordinates all equal ``value``."""
        return cls(value, value, value, value)

    @classmethod
    def from_vec3(cls, v3: Sequence[float], w: float) -> Vec4:
        """Build from three coordinates and a fourth component."""
        x, y, z = v3
        return cls(x, y, z, w)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z
        yield self.w

    def __len__(self) -> int:
        return 4

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z, self.w)[index]

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z}, {self.w})"

    def __add__(self, other: Vec4) -> Vec4:
        if not isinstance(other, Vec4):
            return NotImplemented
        return Vec4(*(a + b for a, b in zip(self, other)))

    def __sub__(self, other: Vec4) -> Vec4:
        if not isinstance(other, Vec4):
            return NotImplemented
        return Vec4(*(a - b for a, b in zip(self, other)))

    def __neg__(self) -> Vec4:
        return Vec4(-self.x, -self.y, -self.z, -self.w)

    def __mul__(self, scalar: float) -> Vec4:
        if isinstance(scalar, Vec4):
            return NotImplemented
        return Vec4(*(a * scalar for a in self))

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec4:
        if isinstance(scalar, Vec4):
            return NotImplemented
        return Vec4(*(a / scalar for a in self))

    def norm(self) -> float:
        """Euclidean length over all four components."""
        return math.sqrt(self.norm2())

    def norm2(self) -> float:
        """Squared Euclidean length over all four components."""
        return sum(a * a for a in self)

    def infnorm(self) -> float:
        """Largest magnitude among the x, y and z components."""
        return max(abs(self.x), abs(self.y), abs(self.z))

    def proj(self) -> tuple[float, float, float]:
        """The first three components divided by ``w``."""
        return (self.x / self.w, self.y / self.w, self.z / self.w)

    def trunc(self) -> tuple[float, float, float]:
        """The first three components."""
        return (self.x, self.y, self.z)

    def normalized(self) -> Vec4:
        """Vector with the same direction and unit length."""
        return self / self.norm()

    def dot(self, other: Vec4) -> float:
        return sum(a * b for a, b in zip(self, other))

    def lerp(self, other: Vec4, u: float) -> Vec4:
        """Linear interpolation, clamped to the endpoints outside [0, 1]."""
        if u < 0:
            return self
        if u > 1:
            return other
        return (1 - u) * self + u * other

    def smoothstep(self, other: Vec4, u: float) -> Vec4:
        """Cubic interpolation between the two vectors."""
        uu = 2 * u * u * u + 3 * u * u
        return self.lerp(other, uu)