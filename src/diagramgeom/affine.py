"""Immutable 2D affine transform.

Matrix layout (SVG ``matrix(a b c d e f)`` order, ``e``/``f`` named ``tx``/``ty``)::

    [a  c  tx]   [x]   [a*x + c*y + tx]
    [b  d  ty] x [y] = [b*x + d*y + ty]
    [0  0  1 ]   [1]   [1             ]
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .geometry import PointLike, Vector2D

AffineTuple = Tuple[float, float, float, float, float, float]


@dataclass(frozen=True)
class AffineTransform:
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    @classmethod
    def identity(cls) -> "AffineTransform":
        return cls(1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

    @classmethod
    def translation(cls, tx: float, ty: float) -> "AffineTransform":
        return cls(1.0, 0.0, 0.0, 1.0, tx, ty)

    @classmethod
    def scaling(cls, sx: float, sy: Optional[float] = None) -> "AffineTransform":
        if sy is None:
            sy = sx
        return cls(sx, 0.0, 0.0, sy, 0.0, 0.0)

    @classmethod
    def rotation(cls, radians: float) -> "AffineTransform":
        """Counter-clockwise rotation about the origin."""
        cos_v = math.cos(radians)
        sin_v = math.sin(radians)
        return cls(cos_v, sin_v, -sin_v, cos_v, 0.0, 0.0)

    @classmethod
    def from_tuple(cls, values: AffineTuple) -> "AffineTransform":
        a, b, c, d, tx, ty = values
        return cls(a, b, c, d, tx, ty)

    def as_tuple(self) -> AffineTuple:
        return (self.a, self.b, self.c, self.d, self.tx, self.ty)

    def concatenating(self, other: "AffineTransform") -> "AffineTransform":
        """Return ``self ∘ other``: ``other`` is applied first, then ``self``."""
        return AffineTransform(
            self.a * other.a + self.c * other.b,
            self.b * other.a + self.d * other.b,
            self.a * other.c + self.c * other.d,
            self.b * other.c + self.d * other.d,
            self.a * other.tx + self.c * other.ty + self.tx,
            self.b * other.tx + self.d * other.ty + self.ty,
        )

    def translated(self, tx: float, ty: float) -> "AffineTransform":
        return self.concatenating(AffineTransform.translation(tx, ty))

    def scaled(self, sx: float, sy: Optional[float] = None) -> "AffineTransform":
        return self.concatenating(AffineTransform.scaling(sx, sy))

    def rotated(self, radians: float) -> "AffineTransform":
        return self.concatenating(AffineTransform.rotation(radians))

    def inverted(self) -> Optional["AffineTransform"]:
        det = self.a * self.d - self.b * self.c
        if abs(det) < 1e-12 or not math.isfinite(det):
            return None
        inv_det = 1.0 / det
        ai = self.d * inv_det
        bi = -self.b * inv_det
        ci = -self.c * inv_det
        di = self.a * inv_det
        return AffineTransform(
            ai,
            bi,
            ci,
            di,
            -(ai * self.tx + ci * self.ty),
            -(bi * self.tx + di * self.ty),
        )

    def apply(self, point: PointLike) -> Vector2D:
        x, y = point
        return Vector2D(self.a * x + self.c * y + self.tx, self.b * x + self.d * y + self.ty)

    def __mul__(self, other):
        if isinstance(other, AffineTransform):
            return self.concatenating(other)
        return self.apply(other)

    @property
    def origin(self) -> Vector2D:
        return Vector2D(self.tx, self.ty)

    @property
    def scale(self) -> Vector2D:
        # Column norms; exact only for transforms without skew.
        return Vector2D(math.hypot(self.a, self.b), math.hypot(self.c, self.d))

    @property
    def is_identity(self) -> bool:
        return self == AffineTransform.identity()

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(value) for value in self.as_tuple())

    def almost_equal(self, other: "AffineTransform", tol: float = 1e-9) -> bool:
        return all(
            math.isclose(lhs, rhs, rel_tol=tol, abs_tol=tol)
            for lhs, rhs in zip(self.as_tuple(), other.as_tuple())
        )
