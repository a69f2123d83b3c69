"""Plain 2D value types: vectors, line segments and rectangles."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

EPSILON = 1e-12

PointLike = Union["Vector2D", Tuple[float, float]]


@dataclass(frozen=True)
class Vector2D:
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def zero(cls) -> "Vector2D":
        return cls(0.0, 0.0)

    @classmethod
    def of(cls, value: PointLike) -> "Vector2D":
        if isinstance(value, Vector2D):
            return value
        x, y = value
        return cls(float(x), float(y))

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vector2D":
        return Vector2D(-self.x, -self.y)

    def __mul__(self, scalar: float) -> "Vector2D":
        return Vector2D(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vector2D":
        return Vector2D(self.x / scalar, self.y / scalar)

    @property
    def length(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def normalized(self) -> "Vector2D":
        """Unit vector in the same direction, or the zero vector for a zero input."""
        length = self.length
        if length <= 0.0:
            return Vector2D.zero()
        return Vector2D(self.x / length, self.y / length)

    @property
    def normal(self) -> "Vector2D":
        """Perpendicular vector rotated 90 degrees counter-clockwise, same length."""
        return Vector2D(-self.y, self.x)

    @property
    def is_zero(self) -> bool:
        return abs(self.x) < EPSILON and abs(self.y) < EPSILON

    def dot(self, other: "Vector2D") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Vector2D") -> float:
        return self.x * other.y - self.y * other.x

    def distance(self, other: "Vector2D") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def lerp(self, other: "Vector2D", t: float) -> "Vector2D":
        return self + (other - self) * t

    def is_close(self, other: "Vector2D", tol: float = 1e-9) -> bool:
        return math.isclose(self.x, other.x, abs_tol=tol) and math.isclose(
            self.y, other.y, abs_tol=tol
        )


@dataclass(frozen=True)
class LineSegment:
    start: Vector2D
    end: Vector2D

    @property
    def length(self) -> float:
        return self.start.distance(self.end)

    @property
    def direction(self) -> Vector2D:
        return (self.end - self.start).normalized

    @property
    def normal(self) -> Vector2D:
        return self.direction.normal

    def offset(self, distance: float) -> "LineSegment":
        shift = self.normal * distance
        return LineSegment(self.start + shift, self.end + shift)

    def line_intersection(self, other: "LineSegment") -> Optional[Vector2D]:
        """Intersection of the two infinite lines, or None when they are parallel."""
        d1 = self.end - self.start
        d2 = other.end - other.start
        denom = d1.cross(d2)
        scale = max(d1.length * d2.length, EPSILON)
        if abs(denom) / scale < 1e-9:
            return None
        t = (other.start - self.start).cross(d2) / denom
        return self.start + d1 * t


@dataclass(frozen=True)
class Rect2D:
    origin: Vector2D
    size: Vector2D

    @classmethod
    def from_bounds(cls, min_x: float, min_y: float, max_x: float, max_y: float) -> "Rect2D":
        return cls(Vector2D(min_x, min_y), Vector2D(max_x - min_x, max_y - min_y))

    @property
    def min_x(self) -> float:
        return self.origin.x

    @property
    def min_y(self) -> float:
        return self.origin.y

    @property
    def max_x(self) -> float:
        return self.origin.x + self.size.x

    @property
    def max_y(self) -> float:
        return self.origin.y + self.size.y

    @property
    def width(self) -> float:
        return self.size.x

    @property
    def height(self) -> float:
        return self.size.y

    @property
    def center(self) -> Vector2D:
        return Vector2D(self.origin.x + self.size.x / 2.0, self.origin.y + self.size.y / 2.0)

    def union(self, other: "Rect2D") -> "Rect2D":
        return Rect2D.from_bounds(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    def inset(self, amount: float) -> "Rect2D":
        return Rect2D.from_bounds(
            self.min_x + amount, self.min_y + amount, self.max_x - amount, self.max_y - amount
        )
