#!/usr/bin/env python3
"""
Point and vector value types for scene geometry.

Points and vectors are kept as separate types the way the geometry reads:
point - point is a vector, point + vector is a point, vectors scale and add.
Both are frozen, so a body or curve can hand out its state without anyone
editing it behind its back.
"""
import math
from dataclasses import dataclass


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


@dataclass(frozen=True)
class Vector3d:
    """Displacement with components (dx, dy, dz)."""
    dx: float = 0.0
    dy: float = 0.0
    dz: float = 0.0

    def __add__(self, other: "Vector3d") -> "Vector3d":
        if not isinstance(other, Vector3d):
            return NotImplemented
        return Vector3d(self.dx + other.dx, self.dy + other.dy, self.dz + other.dz)

    def __sub__(self, other: "Vector3d") -> "Vector3d":
        if not isinstance(other, Vector3d):
            return NotImplemented
        return Vector3d(self.dx - other.dx, self.dy - other.dy, self.dz - other.dz)

    def __mul__(self, s: float) -> "Vector3d":
        return Vector3d(self.dx * s, self.dy * s, self.dz * s)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector3d":
        return Vector3d(-self.dx, -self.dy, -self.dz)

    def __iter__(self):
        yield self.dx
        yield self.dy
        yield self.dz

    def dot(self, other: "Vector3d") -> float:
        return self.dx * other.dx + self.dy * other.dy + self.dz * other.dz

    def cross2d(self, other: "Vector3d") -> float:
        """Signed parallelogram area spanned by the planar parts of both vectors."""
        return self.dx * other.dy - self.dy * other.dx

    def norm2(self) -> float:
        return self.dot(self)

    def norm(self) -> float:
        return math.sqrt(self.norm2())

    def unit(self) -> "Vector3d":
        n = self.norm()
        if n == 0:
            return Vector3d(0.0, 0.0, 0.0)
        return Vector3d(self.dx / n, self.dy / n, self.dz / n)

    def isclose(self, other: "Vector3d", abs_tol: float = 1e-9) -> bool:
        return (math.isclose(self.dx, other.dx, abs_tol=abs_tol)
                and math.isclose(self.dy, other.dy, abs_tol=abs_tol)
                and math.isclose(self.dz, other.dz, abs_tol=abs_tol))


@dataclass(frozen=True)
class Point3d:
    """Location with coordinates (x, y, z)."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, v: Vector3d) -> "Point3d":
        if not isinstance(v, Vector3d):
            return NotImplemented
        return Point3d(self.x + v.dx, self.y + v.dy, self.z + v.dz)

    def __sub__(self, other):
        if isinstance(other, Point3d):
            return Vector3d(self.x - other.x, self.y - other.y, self.z - other.z)
        if isinstance(other, Vector3d):
            return Point3d(self.x - other.dx, self.y - other.dy, self.z - other.dz)
        return NotImplemented

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def dist2(self, other: "Point3d") -> float:
        return (self - other).norm2()

    def dist(self, other: "Point3d") -> float:
        return math.sqrt(self.dist2(other))

    def planar_dist2(self, other: "Point3d") -> float:
        """Squared distance using x and y only."""
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def with_xy(self, x: float, y: float) -> "Point3d":
        return Point3d(x, y, self.z)

    def isclose(self, other: "Point3d", abs_tol: float = 1e-9) -> bool:
        return (math.isclose(self.x, other.x, abs_tol=abs_tol)
                and math.isclose(self.y, other.y, abs_tol=abs_tol)
                and math.isclose(self.z, other.z, abs_tol=abs_tol))

    @classmethod
    def from_sequence(cls, seq) -> "Point3d":
        """Build a point from [x, y] or [x, y, z]."""
        z = float(seq[2]) if len(seq) > 2 else 0.0
        return cls(float(seq[0]), float(seq[1]), z)
