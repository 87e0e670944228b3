"""Two-dimensional vectors."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Vec2:
    """An immutable 2D vector."""

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def filled(cls, value: float) -> Vec2:
        """Return a vector whose coordinates all equal ``value``."""
        return cls(value, value)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y)[index]

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"

    def __add__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def __mul__(self, scalar: float) -> Vec2:
        if isinstance(scalar, Vec2):
            return NotImplemented
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec2:
        if isinstance(scalar, Vec2):
            return NotImplemented
        return Vec2(self.x / scalar, self.y / scalar)

    def norm(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.norm2())

    def norm2(self) -> float:
        """Squared Euclidean length."""
        return self.x * self.x + self.y * self.y

    def normalized(self) -> Vec2:
        """Vector with the same direction and unit length."""
        length = self.norm()
        return Vec2(self.x / length, self.y / length)

    def dot(self, other: Vec2) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vec2) -> float:
        """The z component of the 3D cross product of the two vectors."""
        return self.x * other.y - self.y * other.x

    def lerp(self, other: Vec2, u: float) -> Vec2:
        """Linear interpolation, clamped to the endpoints outside [0, 1]."""
        if u < 0:
            return self
        if u > 1:
            return other
        return (1 - u) * self + u * other

    def smoothstep(self, other: Vec2, u: float) -> Vec2:
        """Cubic interpolation between the two vectors."""
        uu = 2 * u * u * u + 3 * u * u
        return self.lerp(other, uu)

    def angle(self) -> float:
        """Plane angle of the vector, in radians."""
        return math.atan2(self.y, self.x)

    @classmethod
    def from_angle(cls, theta: float) -> Vec2:
        """Unit vector at plane angle ``theta``."""
        return cls(math.cos(theta), math.sin(theta))