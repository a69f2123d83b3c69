"""Connector path synthesis: thin (stroked) and fat (filled) connectors."""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from .arrowheads import FatArrowheadType, ThinArrowheadType, create_thin_arrowhead
from .errors import ContractViolationError
from .geometry import PointLike, Vector2D
from .offset import JoinType, offset_polyline
from .path import BezierPath

logger = logging.getLogger(__name__)

# Fat heads are pulled back further than their nominal size so the body does not
# show under the lobe.
FAT_HEAD_PULLBACK = 1.5


class LineType(enum.Enum):
    STRAIGHT = "straight"
    CURVED = "curved"
    ORTHOGONAL = "orthogonal"


@dataclass
class ShapeStyle:
    line_width: float = 1.0
    line_color: str = "black"
    fill_color: str = "white"


@dataclass
class ThinConnectorStyle:
    head_type: ThinArrowheadType = ThinArrowheadType.STICK
    tail_type: ThinArrowheadType = ThinArrowheadType.NONE
    head_size: float = 10.0
    tail_size: Optional[float] = None
    line_type: LineType = LineType.STRAIGHT

    def __post_init__(self) -> None:
        if self.tail_size is None:
            self.tail_size = self.head_size


@dataclass
class FatConnectorStyle:
    head_type: FatArrowheadType = FatArrowheadType.REGULAR
    tail_type: FatArrowheadType = FatArrowheadType.NONE
    head_size: float = 10.0
    tail_size: Optional[float] = None
    width: float = 7.0
    join_type: JoinType = JoinType.MITER

    def __post_init__(self) -> None:
        if self.tail_size is None:
            self.tail_size = self.head_size


ConnectorStyle = Union[ThinConnectorStyle, FatConnectorStyle]


def _direction(toward: Vector2D, away_from: Vector2D, fallback: Vector2D) -> Vector2D:
    delta = toward - away_from
    if delta.is_zero:
        logger.debug("zero-length connector span at %s; using %s", toward, fallback)
        return fallback
    return delta.normalized


def arrowhead_directions(
    origin: Vector2D, target: Vector2D, midpoints: Sequence[Vector2D] = ()
) -> Tuple[Vector2D, Vector2D]:
    """Unit directions the tail (at origin) and head (at target) arrowheads face.

    Each points into its endpoint from the adjacent point: the first/last
    midpoint when present, else the opposite endpoint. A degenerate span falls
    back to +x for the head and -x for the tail.
    """
    if midpoints:
        origin_dir = _direction(origin, midpoints[0], Vector2D(-1.0, 0.0))
        target_dir = _direction(target, midpoints[-1], Vector2D(1.0, 0.0))
    else:
        origin_dir = _direction(origin, target, Vector2D(-1.0, 0.0))
        target_dir = _direction(target, origin, Vector2D(1.0, 0.0))
    return origin_dir, target_dir


def orthogonal_polyline(
    start: PointLike, end: PointLike, midpoints: Sequence[PointLike] = ()
) -> BezierPath:
    """Axis-aligned path through every point, alternating horizontal and vertical first legs.

    The step into the first point starts horizontally.
    """
    current = Vector2D.of(start)
    path = BezierPath()
    path.move_to(current)
    horizontal = True
    for raw in list(midpoints) + [end]:
        nxt = Vector2D.of(raw)
        if horizontal:
            corner = Vector2D(nxt.x, current.y)
        else:
            corner = Vector2D(current.x, nxt.y)
        if not corner.is_close(current) and not corner.is_close(nxt):
            path.add_line(corner)
        if not nxt.is_close(current):
            path.add_line(nxt)
        current = nxt
        horizontal = not horizontal
    return path


def thin_connector_paths(
    origin: PointLike,
    target: PointLike,
    midpoints: Sequence[PointLike],
    style: ThinConnectorStyle,
) -> List[BezierPath]:
    """Head path, tail path (each only when non-empty), then the centerline."""
    origin = Vector2D.of(origin)
    target = Vector2D.of(target)
    mids = [Vector2D.of(p) for p in midpoints]
    origin_dir, target_dir = arrowhead_directions(origin, target, mids)

    head = create_thin_arrowhead(target, target_dir, style.head_size, style.head_type)
    tail = create_thin_arrowhead(origin, origin_dir, style.tail_size, style.tail_type)

    paths: List[BezierPath] = []
    if not head.path.is_empty:
        paths.append(head.path)
    if not tail.path.is_empty:
        paths.append(tail.path)

    clipped_origin = origin - origin_dir * tail.offset
    clipped_target = target - target_dir * head.offset
    points = [clipped_origin] + mids + [clipped_target]

    if style.line_type is LineType.STRAIGHT:
        line = BezierPath.polyline(points)
    elif style.line_type is LineType.CURVED:
        line = BezierPath.curve_through(points)
    elif style.line_type is LineType.ORTHOGONAL:
        line = orthogonal_polyline(clipped_origin, clipped_target, mids)
    else:
        raise ContractViolationError(f"unknown line type: {style.line_type!r}")
    paths.append(line)
    return paths


def _append_fat_arrowhead(
    path: BezierPath,
    endpoint: Vector2D,
    direction: Vector2D,
    connect_in: Vector2D,
    connect_out: Vector2D,
    size: float,
) -> None:
    # Barbs are the connect points pushed across the centerline by ``size``.
    normal = direction.normal
    path.add_line(connect_out + normal * size)
    path.add_line(endpoint)
    path.add_line(connect_in - normal * size)
    path.add_line(connect_out)


def _fat_outline(
    there: Sequence[Vector2D],
    back: Sequence[Vector2D],
    origin: Vector2D,
    target: Vector2D,
    origin_dir: Vector2D,
    target_dir: Vector2D,
    style: FatConnectorStyle,
) -> BezierPath:
    if not there or not back:
        raise ContractViolationError(
            "fat arrowhead assembly needs at least two offset points "
            f"(got {len(there) + len(back)})"
        )

    path = BezierPath()
    path.move_to(there[0])
    for point in there[1:]:
        path.add_line(point)

    if style.head_type is FatArrowheadType.REGULAR:
        _append_fat_arrowhead(path, target, target_dir, there[-1], back[0], style.head_size)
    else:
        path.add_line(back[0])

    for point in back[1:]:
        path.add_line(point)

    if style.tail_type is FatArrowheadType.REGULAR:
        _append_fat_arrowhead(path, origin, origin_dir, back[-1], there[0], style.tail_size)
    path.close_subpath()
    return path


def fat_connector_path(
    origin: PointLike,
    target: PointLike,
    midpoints: Sequence[PointLike],
    style: FatConnectorStyle,
) -> BezierPath:
    """Single closed outline of the connector body and its arrowhead lobes.

    The body is ``style.width`` wide (each side offset by half of it). A
    centerline that collapses to one point keeps a zero-length body across
    the target direction.
    """
    origin = Vector2D.of(origin)
    target = Vector2D.of(target)
    mids = [Vector2D.of(p) for p in midpoints]
    origin_dir, target_dir = arrowhead_directions(origin, target, mids)

    tail_pull = style.tail_type.touch_point_offset(style.tail_size * FAT_HEAD_PULLBACK)
    head_pull = style.head_type.touch_point_offset(style.head_size * FAT_HEAD_PULLBACK)
    clipped_origin = origin - origin_dir * tail_pull
    clipped_target = target - target_dir * head_pull

    points = [clipped_origin] + mids + [clipped_target]
    half_width = style.width / 2.0
    there = offset_polyline(points, half_width, style.join_type)
    back = offset_polyline(list(reversed(points)), half_width, style.join_type)
    if len(there) < 2 or len(back) < 2:
        logger.debug("fat connector centerline collapsed at %s", clipped_target)
        side = target_dir.normal * half_width
        there = [clipped_target + side]
        back = [clipped_target - side]

    return _fat_outline(there, back, origin, target, origin_dir, target_dir, style)


class Connector:
    """A connector between two points, optionally routed through midpoints.

    Holds no derived geometry; ``paths()`` recomputes from the current state.
    """

    def __init__(
        self,
        origin_point: PointLike = (0.0, 0.0),
        target_point: PointLike = (0.0, 0.0),
        midpoints: Optional[Sequence[PointLike]] = None,
        style: Optional[ConnectorStyle] = None,
        shape_style: Optional[ShapeStyle] = None,
        *,
        id: Optional[str] = None,
    ) -> None:
        self.id = id
        self.origin_point = Vector2D.of(origin_point)
        self.target_point = Vector2D.of(target_point)
        self.midpoints: List[Vector2D] = [Vector2D.of(p) for p in midpoints or ()]
        self.style: ConnectorStyle = style if style is not None else ThinConnectorStyle()
        self.shape_style = shape_style if shape_style is not None else ShapeStyle()

    def set_endpoints(self, origin: PointLike, target: PointLike) -> None:
        self.origin_point = Vector2D.of(origin)
        self.target_point = Vector2D.of(target)

    def arrowhead_directions(self) -> Tuple[Vector2D, Vector2D]:
        return arrowhead_directions(self.origin_point, self.target_point, self.midpoints)

    def paths(self, style: Optional[ConnectorStyle] = None) -> List[BezierPath]:
        style = style if style is not None else self.style
        if isinstance(style, ThinConnectorStyle):
            return thin_connector_paths(self.origin_point, self.target_point, self.midpoints, style)
        if isinstance(style, FatConnectorStyle):
            return [fat_connector_path(self.origin_point, self.target_point, self.midpoints, style)]
        raise ContractViolationError(f"unknown connector style: {style!r}")


def connector_paths(connector: Connector, style: Optional[ConnectorStyle] = None) -> List[BezierPath]:
    return connector.paths(style)
