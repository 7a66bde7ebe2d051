"""Basic geometric value types: vectors, rays and 8-bit colours."""

from __future__ import annotations

import math
from dataclasses import dataclass

EPSILON = 0.0005


@dataclass(frozen=True, slots=True)
class Vector:
    """An immutable three-component vector of floats."""

    x: float
    y: float
    z: float

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector:
        return Vector(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y, -self.z)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def dot(self, other: Vector) -> float:
        """Scalar product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector) -> Vector:
        """Vector product ``self x other``."""
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.dot(self))

    def normalized(self) -> Vector:
        """Unit vector with the same direction.

        Raises ZeroDivisionError for the zero vector.
        """
        length = self.length()
        return Vector(self.x / length, self.y / length, self.z / length)


@dataclass(frozen=True, slots=True)
class Ray:
    """A half-line starting at ``origin`` and heading along ``direction``."""

    origin: Vector
    direction: Vector

    def at(self, t: float) -> Vector:
        """Point reached after travelling ``t`` units of direction."""
        return self.origin + self.direction * t


@dataclass(frozen=True, slots=True)
class Color:
    """An RGB colour with 8-bit channels."""

    r: int
    g: int
    b: int

    def __iter__(self):
        yield self.r
        yield self.g
        yield self.b