"""Append-only Bezier path builder."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

from .affine import AffineTransform
from .geometry import PointLike, Rect2D, Vector2D

# Four-segment cubic circle approximation (radial error ~1e-5).
_CIRCLE_A = 1.00005519
_CIRCLE_B = 0.55342686


@dataclass(frozen=True)
class MoveTo:
    point: Vector2D


@dataclass(frozen=True)
class LineTo:
    point: Vector2D


@dataclass(frozen=True)
class CurveTo:
    end: Vector2D
    control1: Vector2D
    control2: Vector2D


@dataclass(frozen=True)
class QuadCurveTo:
    control: Vector2D
    end: Vector2D


@dataclass(frozen=True)
class ClosePath:
    pass


PathElement = Union[MoveTo, LineTo, CurveTo, QuadCurveTo, ClosePath]


def _fmt(value: float) -> str:
    if math.isclose(value, round(value), abs_tol=1e-9):
        return str(int(round(value)))
    return f"{value:.3f}".rstrip("0").rstrip(".")


def _cubic_extrema(p0: float, p1: float, p2: float, p3: float) -> List[float]:
    # Roots of the derivative of a 1D cubic Bezier, restricted to (0, 1).
    a = -p0 + 3 * p1 - 3 * p2 + p3
    b = 2 * (p0 - 2 * p1 + p2)
    c = p1 - p0
    roots: List[float] = []
    if abs(a) < 1e-12:
        if abs(b) > 1e-12:
            roots.append(-c / b)
    else:
        disc = b * b - 4 * a * c
        if disc >= 0:
            sq = math.sqrt(disc)
            roots.extend(((-b + sq) / (2 * a), (-b - sq) / (2 * a)))
    return [t for t in roots if 0.0 < t < 1.0]


def _cubic_at(p0: float, p1: float, p2: float, p3: float, t: float) -> float:
    mt = 1.0 - t
    return mt * mt * mt * p0 + 3 * mt * mt * t * p1 + 3 * mt * t * t * p2 + t * t * t * p3


class BezierPath:
    """Sequence of sub-paths made of move/line/curve/close elements.

    Builder methods append; ``+`` returns a new path, ``+=`` appends in place.
    """

    def __init__(self, elements: Optional[Iterable[PathElement]] = None) -> None:
        self.elements: List[PathElement] = []
        self.current_point: Optional[Vector2D] = None
        self._start_point: Optional[Vector2D] = None
        if elements is not None:
            self.add_elements(elements)

    # Construction helpers

    @classmethod
    def polyline(cls, points: Sequence[PointLike]) -> "BezierPath":
        path = cls()
        path.add_lines(points)
        return path

    @classmethod
    def polygon(cls, points: Sequence[PointLike]) -> "BezierPath":
        path = cls.polyline(points)
        if not path.is_empty:
            path.close_subpath()
        return path

    @classmethod
    def line(cls, start: PointLike, end: PointLike) -> "BezierPath":
        return cls.polyline([start, end])

    @classmethod
    def circle(cls, center: PointLike, radius: float) -> "BezierPath":
        path = cls()
        path.add_ellipse(center, radius, radius)
        return path

    @classmethod
    def ellipse(cls, center: PointLike, rx: float, ry: float) -> "BezierPath":
        path = cls()
        path.add_ellipse(center, rx, ry)
        return path

    @classmethod
    def rect(cls, rect: Rect2D) -> "BezierPath":
        path = cls()
        path.add_rect(rect)
        return path

    @classmethod
    def curve_through(cls, points: Sequence[PointLike], tension: float = 1.0 / 6.0) -> "BezierPath":
        """Smooth curve through every point (Catmull-Rom style control points).

        The missing neighbours of the first and last points are extrapolated
        along the end segments. Two points give a straight line.
        """
        pts = [Vector2D.of(p) for p in points]
        path = cls()
        if len(pts) < 2:
            return path
        path.move_to(pts[0])
        if len(pts) == 2:
            path.add_line(pts[1])
            return path
        for i in range(len(pts) - 1):
            current = pts[i]
            nxt = pts[i + 1]
            prev = pts[i - 1] if i > 0 else current - (nxt - current)
            after = pts[i + 2] if i + 2 < len(pts) else nxt + (nxt - current)
            out_control = (nxt - prev) * tension
            in_control = (after - current) * tension
            path.add_curve(nxt, current + out_control, nxt - in_control)
        return path

    # Builder

    def move_to(self, point: PointLike) -> None:
        point = Vector2D.of(point)
        self.elements.append(MoveTo(point))
        self.current_point = point
        self._start_point = point

    def add_line(self, point: PointLike) -> None:
        if self.current_point is None:
            self.move_to(Vector2D.zero())
        point = Vector2D.of(point)
        self.elements.append(LineTo(point))
        self.current_point = point

    def add_lines(self, points: Iterable[PointLike]) -> None:
        for point in points:
            if self.current_point is None:
                self.move_to(point)
            else:
                self.add_line(point)

    def add_curve(self, end: PointLike, control1: PointLike, control2: PointLike) -> None:
        if self.current_point is None:
            self.move_to(Vector2D.zero())
        end = Vector2D.of(end)
        self.elements.append(CurveTo(end, Vector2D.of(control1), Vector2D.of(control2)))
        self.current_point = end

    def add_quad_curve(self, end: PointLike, control: PointLike) -> None:
        if self.current_point is None:
            self.move_to(Vector2D.zero())
        end = Vector2D.of(end)
        self.elements.append(QuadCurveTo(Vector2D.of(control), end))
        self.current_point = end

    def close_subpath(self) -> None:
        self.elements.append(ClosePath())
        self.current_point = self._start_point

    def add_rect(self, rect: Rect2D) -> None:
        self.move_to(Vector2D(rect.min_x, rect.min_y))
        self.add_line(Vector2D(rect.max_x, rect.min_y))
        self.add_line(Vector2D(rect.max_x, rect.max_y))
        self.add_line(Vector2D(rect.min_x, rect.max_y))
        self.close_subpath()

    def add_ellipse(self, center: PointLike, rx: float, ry: float) -> None:
        c = Vector2D.of(center)
        p1 = Vector2D(_CIRCLE_B * rx, 0.0)
        p2 = Vector2D(0.0, _CIRCLE_B * ry)
        bottom = c + Vector2D(0.0, _CIRCLE_A * ry)
        right = c + Vector2D(_CIRCLE_A * rx, 0.0)
        top = c + Vector2D(0.0, -_CIRCLE_A * ry)
        left = c + Vector2D(-_CIRCLE_A * rx, 0.0)
        self.move_to(bottom)
        self.add_curve(right, bottom + p1, right + p2)
        self.add_curve(top, right - p2, top + p1)
        self.add_curve(left, top - p1, left - p2)
        self.add_curve(bottom, left + p2, bottom - p1)
        self.close_subpath()

    def add_elements(self, elements: Iterable[PathElement]) -> None:
        for element in elements:
            if isinstance(element, MoveTo):
                self.move_to(element.point)
            elif isinstance(element, LineTo):
                self.add_line(element.point)
            elif isinstance(element, CurveTo):
                self.add_curve(element.end, element.control1, element.control2)
            elif isinstance(element, QuadCurveTo):
                self.add_quad_curve(element.end, element.control)
            elif isinstance(element, ClosePath):
                self.close_subpath()
            else:
                raise TypeError(f"unknown path element: {element!r}")

    def add_path(self, other: "BezierPath") -> None:
        self.add_elements(other.elements)

    def __iadd__(self, other: "BezierPath") -> "BezierPath":
        self.add_path(other)
        return self

    def __add__(self, other: "BezierPath") -> "BezierPath":
        result = self.copy()
        result.add_path(other)
        return result

    def copy(self) -> "BezierPath":
        return BezierPath(self.elements)

    # Queries

    @property
    def is_empty(self) -> bool:
        return not self.elements

    def __bool__(self) -> bool:
        return bool(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BezierPath):
            return NotImplemented
        return self.elements == other.elements

    def __repr__(self) -> str:
        return f"BezierPath({self.to_svg_d()!r})"

    @property
    def is_closed(self) -> bool:
        return any(isinstance(element, ClosePath) for element in self.elements)

    @property
    def is_polygon(self) -> bool:
        return all(isinstance(e, (MoveTo, LineTo, ClosePath)) for e in self.elements)

    def points(self) -> List[Vector2D]:
        """End points of every move/line/curve element, in order."""
        result: List[Vector2D] = []
        for element in self.elements:
            if isinstance(element, (MoveTo, LineTo)):
                result.append(element.point)
            elif isinstance(element, (CurveTo, QuadCurveTo)):
                result.append(element.end)
        return result

    def subpaths(self) -> List["BezierPath"]:
        result: List[BezierPath] = []
        current: Optional[BezierPath] = None
        for element in self.elements:
            if isinstance(element, MoveTo) or current is None:
                current = BezierPath()
                result.append(current)
            current.add_elements([element])
        return result

    @property
    def bounding_box(self) -> Optional[Rect2D]:
        """Exact bounds including curve extrema; None for an empty path."""
        xs: List[float] = []
        ys: List[float] = []
        position = Vector2D.zero()
        start = position
        for element in self.elements:
            if isinstance(element, MoveTo):
                position = start = element.point
                xs.append(position.x)
                ys.append(position.y)
            elif isinstance(element, LineTo):
                position = element.point
                xs.append(position.x)
                ys.append(position.y)
            elif isinstance(element, QuadCurveTo):
                c1 = position + (element.control - position) * (2.0 / 3.0)
                c2 = element.end + (element.control - element.end) * (2.0 / 3.0)
                self._extend_cubic_bounds(xs, ys, position, c1, c2, element.end)
                position = element.end
            elif isinstance(element, CurveTo):
                self._extend_cubic_bounds(
                    xs, ys, position, element.control1, element.control2, element.end
                )
                position = element.end
            elif isinstance(element, ClosePath):
                position = start
        if not xs:
            return None
        return Rect2D.from_bounds(min(xs), min(ys), max(xs), max(ys))

    @staticmethod
    def _extend_cubic_bounds(
        xs: List[float],
        ys: List[float],
        p0: Vector2D,
        p1: Vector2D,
        p2: Vector2D,
        p3: Vector2D,
    ) -> None:
        xs.append(p3.x)
        ys.append(p3.y)
        for t in _cubic_extrema(p0.x, p1.x, p2.x, p3.x):
            xs.append(_cubic_at(p0.x, p1.x, p2.x, p3.x, t))
        for t in _cubic_extrema(p0.y, p1.y, p2.y, p3.y):
            ys.append(_cubic_at(p0.y, p1.y, p2.y, p3.y, t))

    def transformed(self, transform: AffineTransform) -> "BezierPath":
        result = BezierPath()
        for element in self.elements:
            if isinstance(element, MoveTo):
                result.move_to(transform.apply(element.point))
            elif isinstance(element, LineTo):
                result.add_line(transform.apply(element.point))
            elif isinstance(element, CurveTo):
                result.add_curve(
                    transform.apply(element.end),
                    transform.apply(element.control1),
                    transform.apply(element.control2),
                )
            elif isinstance(element, QuadCurveTo):
                result.add_quad_curve(transform.apply(element.end), transform.apply(element.control))
            else:
                result.close_subpath()
        return result

    def to_svg_d(self) -> str:
        parts: List[str] = []
        for element in self.elements:
            if isinstance(element, MoveTo):
                parts.append(f"M {_fmt(element.point.x)} {_fmt(element.point.y)}")
            elif isinstance(element, LineTo):
                parts.append(f"L {_fmt(element.point.x)} {_fmt(element.point.y)}")
            elif isinstance(element, CurveTo):
                c1, c2, end = element.control1, element.control2, element.end
                parts.append(
                    "C "
                    f"{_fmt(c1.x)} {_fmt(c1.y)} "
                    f"{_fmt(c2.x)} {_fmt(c2.y)} "
                    f"{_fmt(end.x)} {_fmt(end.y)}"
                )
            elif isinstance(element, QuadCurveTo):
                c, end = element.control, element.end
                parts.append(f"Q {_fmt(c.x)} {_fmt(c.y)} {_fmt(end.x)} {_fmt(end.y)}")
            else:
                parts.append("Z")
        return " ".join(parts)
