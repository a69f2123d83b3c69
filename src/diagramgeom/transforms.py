"""SVG transform operations, transform lists and the transform-syntax parser."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Union, overload

from .affine import AffineTransform
from .scanner import StringScanner

logger = logging.getLogger(__name__)


def _num(value: float) -> str:
    if math.isfinite(value) and value == int(value):
        return str(int(value))
    return repr(value)


def _shear(angle: float) -> float:
    # tan() near +/-90 degrees yields a huge finite number; report it as unbounded.
    if math.isclose(math.fmod(abs(angle), 180.0), 90.0, abs_tol=1e-9):
        logger.debug("skew angle %s has an unbounded tangent", angle)
        return math.copysign(math.inf, math.tan(math.radians(angle)))
    return math.tan(math.radians(angle))


@dataclass(frozen=True)
class Translate:
    tx: float
    ty: float = 0.0

    def to_affine(self) -> AffineTransform:
        return AffineTransform.translation(self.tx, self.ty)

    def to_svg(self) -> str:
        return f"translate({_num(self.tx)} {_num(self.ty)})"


@dataclass(frozen=True)
class Rotate:
    """Rotation by ``angle`` degrees, about ``(cx, cy)`` when a center is given."""

    angle: float
    cx: Optional[float] = None
    cy: Optional[float] = None

    @property
    def has_center(self) -> bool:
        return self.cx is not None and self.cy is not None

    def to_affine(self) -> AffineTransform:
        rotation = AffineTransform.rotation(math.radians(self.angle))
        if not self.has_center:
            return rotation
        to_center = AffineTransform.translation(self.cx, self.cy)
        from_center = AffineTransform.translation(-self.cx, -self.cy)
        return to_center.concatenating(rotation).concatenating(from_center)

    def to_svg(self) -> str:
        if self.has_center:
            return f"rotate({_num(self.angle)} {_num(self.cx)} {_num(self.cy)})"
        return f"rotate({_num(self.angle)})"


@dataclass(frozen=True)
class Scale:
    sx: float
    sy: float

    def to_affine(self) -> AffineTransform:
        return AffineTransform.scaling(self.sx, self.sy)

    def to_svg(self) -> str:
        return f"scale({_num(self.sx)} {_num(self.sy)})"


@dataclass(frozen=True)
class SkewX:
    """Horizontal shear by ``angle`` degrees.

    At +/-90 degrees the shear coefficient is ``math.inf``; such a transform is
    unrepresentable and callers needing finite geometry must reject it
    (``AffineTransform.is_finite``).
    """

    angle: float

    def to_affine(self) -> AffineTransform:
        return AffineTransform(1.0, 0.0, _shear(self.angle), 1.0, 0.0, 0.0)

    def to_svg(self) -> str:
        return f"skewX({_num(self.angle)})"


@dataclass(frozen=True)
class SkewY:
    """Vertical shear by ``angle`` degrees; see ``SkewX`` for the +/-90 case."""

    angle: float

    def to_affine(self) -> AffineTransform:
        return AffineTransform(1.0, _shear(self.angle), 0.0, 1.0, 0.0, 0.0)

    def to_svg(self) -> str:
        return f"skewY({_num(self.angle)})"


@dataclass(frozen=True)
class Matrix:
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float

    def to_affine(self) -> AffineTransform:
        return AffineTransform(self.a, self.b, self.c, self.d, self.e, self.f)

    def to_svg(self) -> str:
        values = " ".join(_num(v) for v in (self.a, self.b, self.c, self.d, self.e, self.f))
        return f"matrix({values})"


TransformOp = Union[Translate, Rotate, Scale, SkewX, SkewY, Matrix]


def make_transform_op(name: str, params: Sequence[float]) -> Optional[TransformOp]:
    """Build an op from a function name and its parameters; None for bad names or arity."""
    count = len(params)
    kind = name.lower()
    if kind == "translate":
        if count == 0:
            return None
        return Translate(params[0], params[1] if count >= 2 else 0.0)
    if kind == "rotate":
        if count == 1:
            return Rotate(params[0])
        if count >= 3:
            return Rotate(params[0], params[1], params[2])
        return None
    if kind == "scale":
        if count == 0:
            return None
        return Scale(params[0], params[1] if count >= 2 else params[0])
    if kind == "matrix":
        if count != 6:
            return None
        return Matrix(*params)
    if kind == "skewx":
        return SkewX(params[0]) if count == 1 else None
    if kind == "skewy":
        return SkewY(params[0]) if count == 1 else None
    return None


def _scan_parameters(scanner: StringScanner) -> List[float]:
    params: List[float] = []
    scanner.skip_whitespace()
    while not scanner.at_end and scanner.peek() != ")":
        value = scanner.scan_number()
        if value is None:
            break
        params.append(value)
        scanner.skip_separator()
    return params


def parse_transform_list(text: str) -> List[TransformOp]:
    """Parse SVG transform syntax without raising.

    A function whose parentheses do not close (missing ``)``, unit suffixes,
    stray tokens) stops the parse; ops completed before it are kept. Unknown
    function names and wrong parameter counts drop only that function.
    """
    ops: List[TransformOp] = []
    if not text:
        return ops
    scanner = StringScanner(text)
    first = True
    while not scanner.at_end:
        scanner.skip_whitespace()
        if not first:
            scanner.skip_separator()
        first = False
        name = scanner.scan_identifier()
        if name is None:
            break
        scanner.skip_whitespace()
        if not scanner.accept("("):
            break
        params = _scan_parameters(scanner)
        if not scanner.accept(")"):
            logger.debug("unterminated %s( in transform %r", name, text)
            break
        op = make_transform_op(name, params)
        if op is None:
            logger.debug("skipping %s with %d parameters", name, len(params))
            continue
        ops.append(op)
    return ops


class TransformList:
    """Ordered transform operations.

    Ops compose left to right, so the rightmost op is applied to a point first.
    """

    def __init__(self, items: Optional[Iterable[TransformOp]] = None) -> None:
        self.items: List[TransformOp] = list(items) if items is not None else []

    @classmethod
    def parse(cls, text: Optional[str]) -> "TransformList":
        return cls(parse_transform_list(text or ""))

    def append(self, op: TransformOp) -> None:
        self.items.append(op)

    def extend(self, other: Union["TransformList", Iterable[TransformOp]]) -> None:
        if isinstance(other, TransformList):
            self.items.extend(other.items)
        else:
            self.items.extend(other)

    def __iter__(self) -> Iterator[TransformOp]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return bool(self.items)

    @overload
    def __getitem__(self, index: int) -> TransformOp: ...

    @overload
    def __getitem__(self, index: slice) -> "TransformList": ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return TransformList(self.items[index])
        return self.items[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransformList):
            return NotImplemented
        return self.items == other.items

    def __repr__(self) -> str:
        return f"TransformList({self.to_svg()!r})"

    def to_svg(self) -> str:
        return " ".join(op.to_svg() for op in self.items)

    def to_affine(self) -> AffineTransform:
        result = AffineTransform.identity()
        for op in self.items:
            result = result.concatenating(op.to_affine())
        return result
