"""Public API for diagramgeom."""
from .affine import AffineTransform
from .arrowheads import Arrowhead, FatArrowheadType, ThinArrowheadType, create_thin_arrowhead
from .connector import (
    Connector,
    FatConnectorStyle,
    LineType,
    ShapeStyle,
    ThinConnectorStyle,
    connector_paths,
)
from .errors import (
    ContractViolationError,
    DiagramGeomError,
    ElementNotFoundError,
    UnsupportedElementKindError,
)
from .geometry import LineSegment, Rect2D, Vector2D
from .offset import JoinType, offset_polyline
from .path import BezierPath
from .resolver import GraphicNode, cumulative_transform
from .svg import SvgTree, connector_document, parse_path_data, render_bezier_path, render_in_root
from .transforms import (
    Matrix,
    Rotate,
    Scale,
    SkewX,
    SkewY,
    TransformList,
    Translate,
    parse_transform_list,
)

__all__ = [
    "AffineTransform",
    "Arrowhead",
    "BezierPath",
    "Connector",
    "ContractViolationError",
    "DiagramGeomError",
    "ElementNotFoundError",
    "FatArrowheadType",
    "FatConnectorStyle",
    "GraphicNode",
    "JoinType",
    "LineSegment",
    "LineType",
    "Matrix",
    "Rect2D",
    "Rotate",
    "Scale",
    "ShapeStyle",
    "SkewX",
    "SkewY",
    "SvgTree",
    "ThinArrowheadType",
    "ThinConnectorStyle",
    "TransformList",
    "Translate",
    "UnsupportedElementKindError",
    "Vector2D",
    "connector_document",
    "connector_paths",
    "create_thin_arrowhead",
    "cumulative_transform",
    "offset_polyline",
    "parse_path_data",
    "parse_transform_list",
    "render_bezier_path",
    "render_in_root",
]
