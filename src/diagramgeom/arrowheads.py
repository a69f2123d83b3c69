"""Arrowhead geometry for connector endpoints."""
from __future__ import annotations

import enum
from dataclasses import dataclass

from .errors import ContractViolationError
from .geometry import PointLike, Vector2D
from .path import BezierPath


class ThinArrowheadType(enum.Enum):
    NONE = "none"
    STICK = "stick"
    DIAMOND = "diamond"
    BOX = "box"
    BAR = "bar"
    NON_NAVIGABLE = "nonNavigable"
    NEGATIVE = "negative"
    BALL = "ball"
    BALL_CENTER = "ballCenter"

    def touch_point_offset(self, size: float) -> float:
        """Distance from the endpoint back to where the connector line should stop."""
        if self in (
            ThinArrowheadType.DIAMOND,
            ThinArrowheadType.BOX,
            ThinArrowheadType.NON_NAVIGABLE,
            ThinArrowheadType.BALL,
        ):
            return size
        if self is ThinArrowheadType.BALL_CENTER:
            return size / 2.0
        return 0.0


class FatArrowheadType(enum.Enum):
    NONE = "none"
    REGULAR = "regular"

    def touch_point_offset(self, size: float) -> float:
        if self is FatArrowheadType.REGULAR:
            return size
        return 0.0


@dataclass(frozen=True)
class Arrowhead:
    path: BezierPath
    offset: float


def create_thin_arrowhead(
    head_point: PointLike,
    direction: PointLike,
    size: float,
    head_type: ThinArrowheadType,
) -> Arrowhead:
    """Stroke geometry of an arrowhead whose tip is ``head_point``.

    ``direction`` is the unit vector the arrow faces (from the line into the
    point). Lateral offsets use ``perpendicular = (-direction.y, direction.x)``.
    """
    if size < 0:
        raise ContractViolationError(f"arrowhead size must be >= 0, got {size}")
    head = Vector2D.of(head_point)
    forward = Vector2D.of(direction)
    side = forward.normal
    half = size / 2.0
    path = BezierPath()

    if head_type is ThinArrowheadType.NONE:
        pass
    elif head_type is ThinArrowheadType.STICK:
        back = head - forward * (size * 1.5)
        path.move_to(back + side * half)
        path.add_line(head)
        path.add_line(back - side * half)
    elif head_type is ThinArrowheadType.DIAMOND:
        back = head - forward * size
        side1 = head - forward * half + side * half
        side2 = head - forward * half - side * half
        path.move_to(side1)
        path.add_line(head)
        path.add_line(side2)
        path.add_line(back)
        path.add_line(side1)
        path.close_subpath()
    elif head_type is ThinArrowheadType.BOX:
        c1 = head - side * half
        c2 = c1 - forward * size
        c3 = c2 + side * size
        c4 = c3 + forward * size
        path.move_to(c1)
        path.add_line(c2)
        path.add_line(c3)
        path.add_line(c4)
        path.add_line(c1)
        path.close_subpath()
    elif head_type is ThinArrowheadType.BAR:
        back = head - forward * half
        path.move_to(back - side * half)
        path.add_line(back + side * half)
    elif head_type is ThinArrowheadType.NEGATIVE:
        path.move_to(head - side * half)
        path.add_line(head + side * half)
    elif head_type is ThinArrowheadType.NON_NAVIGABLE:
        # Front and back edges of the box, sides omitted.
        c1 = head - side * half
        c2 = c1 - forward * size
        c3 = c2 + side * size
        c4 = c3 + forward * size
        path.move_to(c1)
        path.add_line(c4)
        path.move_to(c2)
        path.add_line(c3)
    elif head_type is ThinArrowheadType.BALL:
        path = BezierPath.circle(head - forward * half, half)
    elif head_type is ThinArrowheadType.BALL_CENTER:
        path = BezierPath.circle(head, half)
    else:
        raise ContractViolationError(f"unknown arrowhead type: {head_type!r}")

    return Arrowhead(path=path, offset=head_type.touch_point_offset(size))
