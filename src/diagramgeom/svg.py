"""SVG adapter: element trees, path data, element outlines and connector output."""
from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Dict, Iterable, List, Optional, Sequence

from .affine import AffineTransform
from .connector import Connector, FatConnectorStyle
from .errors import ElementNotFoundError, UnsupportedElementKindError
from .geometry import Rect2D, Vector2D
from .path import BezierPath, _fmt
from .scanner import StringScanner
from .transforms import TransformList

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
ET.register_namespace("", SVG_NS)

# Elements that may carry a transform attribute.
TRANSFORMABLE_TAGS = frozenset(
    {
        "svg",
        "g",
        "a",
        "switch",
        "use",
        "path",
        "rect",
        "circle",
        "ellipse",
        "line",
        "polyline",
        "polygon",
        "text",
        "image",
        "foreignObject",
    }
)
CONTAINER_TAGS = frozenset({"svg", "g", "a", "switch"})
DOCUMENT_PADDING = 10.0


def _q(tag: str) -> str:
    return f"{{{SVG_NS}}}{tag}"


def _local_name(tag: str) -> str:
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def _float_attr(elem: ET.Element, name: str, default: float = 0.0) -> float:
    value = elem.get(name)
    if value is None:
        return default
    match = re.match(r"^\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?", value)
    if match:
        return float(match.group(0))
    return default


def _pretty_xml(element: ET.Element) -> str:
    ET.indent(element, space="  ")
    return ET.tostring(element, encoding="unicode")


def is_transformable(elem: ET.Element) -> bool:
    return _local_name(elem.tag) in TRANSFORMABLE_TAGS


class SvgTree:
    """Read-only view of an SVG document with parent lookups.

    The parent map is built once; mutate the underlying tree and build a new
    view if lookups must reflect the change.
    """

    def __init__(self, root: ET.Element) -> None:
        self.root = root
        self._parent_by_node: Dict[ET.Element, ET.Element] = {
            child: parent for parent in root.iter() for child in parent
        }

    @classmethod
    def from_string(cls, text: str) -> "SvgTree":
        return cls(ET.fromstring(text))

    def find(self, element_id: str) -> ET.Element:
        for elem in self.root.iter():
            if elem.get("id") == element_id:
                return elem
        raise ElementNotFoundError(f"no element with id '{element_id}'")

    def parent(self, elem: ET.Element) -> Optional[ET.Element]:
        return self._parent_by_node.get(elem)

    def ancestors(self, elem: ET.Element) -> List[ET.Element]:
        """Ancestors from the nearest parent up to the document root."""
        chain: List[ET.Element] = []
        cursor = self._parent_by_node.get(elem)
        while cursor is not None:
            chain.append(cursor)
            cursor = self._parent_by_node.get(cursor)
        return chain

    def transform_of(self, elem: ET.Element) -> Optional[TransformList]:
        if not is_transformable(elem):
            return None
        text = elem.get("transform")
        if not text:
            return None
        return TransformList.parse(text)

    def cumulative_transform(self, elem: ET.Element) -> AffineTransform:
        """Map from ``elem``'s local coordinates to document-root coordinates."""
        lineage = list(reversed(self.ancestors(elem)))
        lineage.append(elem)
        m = AffineTransform.identity()
        for node in lineage:
            transform = self.transform_of(node)
            if transform:
                m = m.concatenating(transform.to_affine())
        return m

    def ancestors_transform(self, elem: ET.Element) -> AffineTransform:
        """Cumulative transform of the ancestors only, excluding ``elem``'s own."""
        parent = self.parent(elem)
        if parent is None:
            return AffineTransform.identity()
        return self.cumulative_transform(parent)


# Path data

_PATH_COMMANDS = "MmLlHhVvCcSsQqTtZz"
_PATH_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "Z": 0}


def _scan_arguments(scanner: StringScanner, count: int) -> Optional[List[float]]:
    mark = scanner.position
    values: List[float] = []
    for index in range(count):
        if index:
            scanner.skip_separator()
        value = scanner.scan_number()
        if value is None:
            scanner.position = mark
            return None
        values.append(value)
    return values


def parse_path_data(d: Optional[str]) -> BezierPath:
    """Parse SVG path data into a ``BezierPath``.

    Supports ``M L H V C S Q T Z`` in absolute and relative forms, including
    implicit command repetition. Parsing stops at the first unsupported or
    malformed command; everything before it is kept.
    """
    path = BezierPath()
    if not d:
        return path
    scanner = StringScanner(d)
    current = Vector2D.zero()
    start = Vector2D.zero()
    last_control: Optional[Vector2D] = None
    last_command = ""

    while True:
        scanner.skip_separator()
        if scanner.at_end:
            break
        char = scanner.peek()
        if char in _PATH_COMMANDS:
            scanner.advance()
            command = char
        elif last_command and last_command.upper() != "Z":
            # Implicit repetition; a repeated moveto becomes a lineto.
            command = {"M": "L", "m": "l"}.get(last_command, last_command)
        else:
            logger.debug("unsupported path command %r at %d", char, scanner.position)
            break

        upper = command.upper()
        relative = command.islower()
        scanner.skip_whitespace()
        args = _scan_arguments(scanner, _PATH_ARITY[upper])
        if args is None:
            logger.debug("malformed arguments for %r at %d", command, scanner.position)
            break

        base = current if relative else Vector2D.zero()

        def pt(i: int) -> Vector2D:
            return Vector2D(base.x + args[i], base.y + args[i + 1])

        control: Optional[Vector2D] = None
        if upper == "M":
            current = pt(0)
            start = current
            path.move_to(current)
        elif upper == "L":
            current = pt(0)
            path.add_line(current)
        elif upper == "H":
            current = Vector2D(base.x + args[0] if relative else args[0], current.y)
            path.add_line(current)
        elif upper == "V":
            current = Vector2D(current.x, base.y + args[0] if relative else args[0])
            path.add_line(current)
        elif upper == "C":
            c1, control, end = pt(0), pt(2), pt(4)
            path.add_curve(end, c1, control)
            current = end
        elif upper == "S":
            if last_control is not None and last_command.upper() in "CS":
                c1 = current * 2 - last_control
            else:
                c1 = current
            control, end = pt(0), pt(2)
            path.add_curve(end, c1, control)
            current = end
        elif upper == "Q":
            control, end = pt(0), pt(2)
            path.add_quad_curve(end, control)
            current = end
        elif upper == "T":
            if last_control is not None and last_command.upper() in "QT":
                control = current * 2 - last_control
            else:
                control = current
            end = pt(0)
            path.add_quad_curve(end, control)
            current = end
        else:
            path.close_subpath()
            current = start
        last_control = control
        last_command = command
    return path


def _parse_points(text: Optional[str]) -> List[Vector2D]:
    points: List[Vector2D] = []
    if not text:
        return points
    scanner = StringScanner(text)
    while True:
        scanner.skip_separator()
        pair = _scan_arguments(scanner, 2)
        if pair is None:
            break
        points.append(Vector2D(pair[0], pair[1]))
    return points


def _element_path(tree: SvgTree, elem: ET.Element) -> BezierPath:
    kind = _local_name(elem.tag)
    if kind == "path":
        return parse_path_data(elem.get("d"))
    if kind == "rect":
        return BezierPath.rect(
            Rect2D(
                Vector2D(_float_attr(elem, "x"), _float_attr(elem, "y")),
                Vector2D(_float_attr(elem, "width"), _float_attr(elem, "height")),
            )
        )
    if kind == "circle":
        center = Vector2D(_float_attr(elem, "cx"), _float_attr(elem, "cy"))
        return BezierPath.circle(center, _float_attr(elem, "r"))
    if kind == "ellipse":
        center = Vector2D(_float_attr(elem, "cx"), _float_attr(elem, "cy"))
        return BezierPath.ellipse(center, _float_attr(elem, "rx"), _float_attr(elem, "ry"))
    if kind == "line":
        return BezierPath.line(
            (_float_attr(elem, "x1"), _float_attr(elem, "y1")),
            (_float_attr(elem, "x2"), _float_attr(elem, "y2")),
        )
    if kind == "polyline":
        return BezierPath.polyline(_parse_points(elem.get("points")))
    if kind == "polygon":
        return BezierPath.polygon(_parse_points(elem.get("points")))
    if kind in CONTAINER_TAGS:
        path = BezierPath()
        for child in elem:
            if not is_transformable(child):
                # title, desc, defs and friends draw nothing
                continue
            path += render_bezier_path(tree, child)
        return path
    raise UnsupportedElementKindError(kind)


def render_bezier_path(tree: SvgTree, elem: ET.Element) -> BezierPath:
    """Outline of ``elem`` in its parent's coordinates (own transform applied)."""
    path = _element_path(tree, elem)
    transform = tree.transform_of(elem)
    if transform:
        return path.transformed(transform.to_affine())
    return path


def render_in_root(tree: SvgTree, elem: ET.Element) -> BezierPath:
    """Outline of ``elem`` in document-root coordinates."""
    path = render_bezier_path(tree, elem)
    ancestors = tree.ancestors_transform(elem)
    if ancestors.is_identity:
        return path
    return path.transformed(ancestors)


# Output


def connector_svg(connector: Connector) -> ET.Element:
    """``<g>`` holding one ``<path>`` per connector path.

    Thin connectors are stroked with the line color; fat connectors are a
    single filled outline.
    """
    shape = connector.shape_style
    group = ET.Element(_q("g"))
    if connector.id:
        group.set("id", connector.id)
    fat = isinstance(connector.style, FatConnectorStyle)
    for path in connector.paths():
        node = ET.SubElement(group, _q("path"))
        node.set("d", path.to_svg_d())
        node.set("stroke", shape.line_color)
        node.set("stroke-width", _fmt(shape.line_width))
        if fat or path.is_closed:
            node.set("fill", shape.fill_color)
        else:
            node.set("fill", "none")
    return group


def _paths_bounds(paths: Iterable[BezierPath]) -> Optional[Rect2D]:
    bounds: Optional[Rect2D] = None
    for path in paths:
        box = path.bounding_box
        if box is None:
            continue
        bounds = box if bounds is None else bounds.union(box)
    return bounds


def connector_document(connectors: Sequence[Connector], padding: float = DOCUMENT_PADDING) -> str:
    """Standalone SVG document drawing ``connectors``."""
    groups = [connector_svg(connector) for connector in connectors]
    bounds = _paths_bounds(path for connector in connectors for path in connector.paths())
    if bounds is None:
        bounds = Rect2D(Vector2D.zero(), Vector2D.zero())
    view = bounds.inset(-padding)
    root = ET.Element(_q("svg"))
    root.set("width", _fmt(view.width))
    root.set("height", _fmt(view.height))
    root.set(
        "viewBox",
        f"{_fmt(view.min_x)} {_fmt(view.min_y)} {_fmt(view.width)} {_fmt(view.height)}",
    )
    for group in groups:
        root.append(group)
    return _pretty_xml(root)
