"""Parallel offsetting of polylines with corner joins."""
from __future__ import annotations

import enum
import logging
import math
from typing import List, Sequence

from .geometry import LineSegment, PointLike, Vector2D

logger = logging.getLogger(__name__)

DEFAULT_MITER_LIMIT = 2.0
_ROUND_STEP = math.pi / 8


class JoinType(enum.Enum):
    MITER = "miter"
    ROUND = "round"
    BEVEL = "bevel"


def _distinct_points(points: Sequence[PointLike]) -> List[Vector2D]:
    result: List[Vector2D] = []
    for raw in points:
        point = Vector2D.of(raw)
        if result and result[-1].is_close(point, 1e-12):
            continue
        result.append(point)
    return result


def _round_join(start: Vector2D, end: Vector2D, center: Vector2D, radius: float) -> List[Vector2D]:
    angle1 = math.atan2(start.y - center.y, start.x - center.x)
    angle2 = math.atan2(end.y - center.y, end.x - center.x)
    delta = angle2 - angle1
    # Short way around.
    if delta > math.pi:
        delta -= 2 * math.pi
    elif delta < -math.pi:
        delta += 2 * math.pi
    steps = max(3, int(abs(delta) / _ROUND_STEP) + 1)
    arc: List[Vector2D] = []
    for i in range(1, steps):
        angle = angle1 + delta * i / steps
        arc.append(center + Vector2D(math.cos(angle), math.sin(angle)) * radius)
    return arc


def offset_polyline(
    points: Sequence[PointLike],
    distance: float,
    join_type: JoinType = JoinType.MITER,
    miter_limit: float = DEFAULT_MITER_LIMIT,
) -> List[Vector2D]:
    """Displace a polyline by ``distance`` along each segment's normal ``(-dy, dx)``.

    Negative distances offset to the other side. Consecutive duplicate points are
    ignored; fewer than two distinct points give an empty list. The first and
    last points are the plain offset segment ends. On the inner side of a turn
    the two offset lines meet at their intersection; on the outer side
    ``join_type`` decides, with miters longer than ``abs(distance) * miter_limit``
    (measured from the original vertex) falling back to a bevel.
    """
    pts = _distinct_points(points)
    if len(pts) < 2:
        return []

    radius = abs(distance)
    segments = [LineSegment(pts[i], pts[i + 1]).offset(distance) for i in range(len(pts) - 1)]
    result: List[Vector2D] = [segments[0].start]

    def emit(point: Vector2D) -> None:
        if not result[-1].is_close(point):
            result.append(point)

    for i in range(len(segments) - 1):
        seg1 = segments[i]
        seg2 = segments[i + 1]
        joint = pts[i + 1]
        if seg1.end.is_close(seg2.start):
            emit(seg1.end)
            continue

        intersect = seg1.line_intersection(seg2)
        if intersect is None:
            # Parallel neighbours (a reversal); nothing to extend.
            emit(seg1.end)
            emit(seg2.start)
            continue

        turn = (pts[i + 1] - pts[i]).cross(pts[i + 2] - pts[i + 1])
        if turn * distance > 0:
            # Inner side: the offset segments overlap, cut them at the crossing.
            emit(intersect)
            continue

        if join_type is JoinType.MITER:
            if intersect.distance(joint) <= radius * miter_limit:
                emit(intersect)
            else:
                logger.debug("miter at %s exceeds limit %s; using bevel", joint, miter_limit)
                emit(seg1.end)
                emit(seg2.start)
        elif join_type is JoinType.ROUND:
            emit(seg1.end)
            for point in _round_join(seg1.end, seg2.start, joint, radius):
                emit(point)
            emit(seg2.start)
        else:
            emit(seg1.end)
            emit(seg2.start)

    emit(segments[-1].end)
    return result
