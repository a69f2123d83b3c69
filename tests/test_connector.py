from __future__ import annotations

import sys
import unittest
from pathlib import Path

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = TESTS_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from diagramgeom.arrowheads import FatArrowheadType, ThinArrowheadType
from diagramgeom.connector import (
    Connector,
    FatConnectorStyle,
    LineType,
    ThinConnectorStyle,
    _fat_outline,
    connector_paths,
    orthogonal_polyline,
)
from diagramgeom.errors import ContractViolationError
from diagramgeom.geometry import Vector2D
from diagramgeom.offset import JoinType
from diagramgeom.path import CurveTo


def _thin(head=ThinArrowheadType.STICK, tail=ThinArrowheadType.NONE, **kwargs) -> ThinConnectorStyle:
    return ThinConnectorStyle(head_type=head, tail_type=tail, **kwargs)


class ThinConnectorTests(unittest.TestCase):
    def test_stick_reaches_the_target(self) -> None:
        paths = Connector((0, 0), (100, 0), style=_thin()).paths()
        self.assertEqual(len(paths), 2)
        self.assertEqual(paths[-1].points()[-1], Vector2D(100, 0))

    def test_line_stops_at_touch_point(self) -> None:
        expected = {
            ThinArrowheadType.DIAMOND: 90,
            ThinArrowheadType.BOX: 90,
            ThinArrowheadType.BALL: 90,
            ThinArrowheadType.BALL_CENTER: 95,
            ThinArrowheadType.BAR: 100,
        }
        for head_type, x in expected.items():
            line = Connector((0, 0), (100, 0), style=_thin(head_type, head_size=10)).paths()[-1]
            self.assertAlmostEqual(line.points()[-1].x, x, msg=head_type)

    def test_tail_is_clipped_and_drawn_after_head(self) -> None:
        style = _thin(ThinArrowheadType.STICK, ThinArrowheadType.DIAMOND)
        head, tail, line = Connector((0, 0), (100, 0), style=style).paths()
        self.assertAlmostEqual(line.points()[0].x, 10)
        self.assertAlmostEqual(tail.bounding_box.min_x, 0)
        self.assertAlmostEqual(head.bounding_box.max_x, 100)

    def test_tail_size_defaults_to_head_size(self) -> None:
        self.assertEqual(ThinConnectorStyle(head_size=4).tail_size, 4)
        self.assertEqual(ThinConnectorStyle(head_size=4, tail_size=9).tail_size, 9)
        self.assertEqual(FatConnectorStyle(head_size=6).tail_size, 6)

    def test_no_arrowheads_leaves_only_the_line(self) -> None:
        style = _thin(ThinArrowheadType.NONE)
        paths = Connector((0, 0), (10, 10), style=style).paths()
        self.assertEqual(len(paths), 1)

    def test_midpoints_set_arrow_directions(self) -> None:
        connector = Connector((0, 0), (100, 100), [(0, 100)], style=_thin())
        origin_dir, target_dir = connector.arrowhead_directions()
        self.assertTrue(origin_dir.is_close(Vector2D(0, -1)))
        self.assertTrue(target_dir.is_close(Vector2D(1, 0)))

    def test_coincident_endpoints_fall_back_to_x_axis(self) -> None:
        connector = Connector((5, 5), (5, 5))
        origin_dir, target_dir = connector.arrowhead_directions()
        self.assertEqual(origin_dir, Vector2D(-1, 0))
        self.assertEqual(target_dir, Vector2D(1, 0))
        self.assertEqual(len(connector.paths()), 2)

    def test_curved_line_passes_midpoints(self) -> None:
        style = _thin(ThinArrowheadType.NONE, line_type=LineType.CURVED)
        line = Connector((0, 0), (100, 0), [(50, 40)], style=style).paths()[-1]
        self.assertIn(Vector2D(50, 40), line.points())
        self.assertTrue(any(isinstance(e, CurveTo) for e in line.elements))


class OrthogonalRoutingTests(unittest.TestCase):
    def test_horizontal_then_vertical(self) -> None:
        style = _thin(ThinArrowheadType.NONE, line_type=LineType.ORTHOGONAL)
        (line,) = Connector((0, 0), (10, 10), style=style).paths()
        self.assertEqual(line.to_svg_d(), "M 0 0 L 10 0 L 10 10")

    def test_orientation_alternates_through_midpoints(self) -> None:
        path = orthogonal_polyline((0, 0), (10, 10), [(5, 5)])
        self.assertEqual(path.to_svg_d(), "M 0 0 L 5 0 L 5 5 L 5 10 L 10 10")

    def test_aligned_points_need_no_corner(self) -> None:
        self.assertEqual(orthogonal_polyline((0, 0), (10, 0)).to_svg_d(), "M 0 0 L 10 0")
        self.assertEqual(orthogonal_polyline((0, 0), (0, 10)).to_svg_d(), "M 0 0 L 0 10")


class FatConnectorTests(unittest.TestCase):
    def test_single_closed_outline_with_head_lobe(self) -> None:
        paths = Connector((0, 0), (100, 0), style=FatConnectorStyle()).paths()
        self.assertEqual(len(paths), 1)
        outline = paths[0]
        self.assertTrue(outline.is_closed)
        self.assertEqual(
            outline.to_svg_d(),
            "M 0 3.5 L 85 3.5 L 85 6.5 L 100 0 L 85 -6.5 L 85 -3.5 L 0 -3.5 Z",
        )

    def test_tail_lobe(self) -> None:
        style = FatConnectorStyle(
            head_type=FatArrowheadType.NONE, tail_type=FatArrowheadType.REGULAR
        )
        outline = Connector((0, 0), (100, 0), style=style).paths()[0]
        self.assertEqual(
            outline.to_svg_d(),
            "M 15 3.5 L 100 3.5 L 100 -3.5 L 15 -3.5 L 15 -6.5 L 0 0 L 15 6.5 L 15 3.5 Z",
        )

    def test_width_sets_body_thickness(self) -> None:
        style = FatConnectorStyle(head_type=FatArrowheadType.NONE, width=20)
        box = Connector((0, 0), (100, 0), style=style).paths()[0].bounding_box
        self.assertAlmostEqual(box.min_y, -10)
        self.assertAlmostEqual(box.max_y, 10)

    def test_bent_connector_joins(self) -> None:
        for join in JoinType:
            style = FatConnectorStyle(head_type=FatArrowheadType.NONE, join_type=join)
            outline = Connector((0, 0), (100, 100), [(100, 0)], style=style).paths()[0]
            box = outline.bounding_box
            self.assertAlmostEqual(box.max_x, 103.5, msg=join)
            self.assertAlmostEqual(box.min_y, -3.5, msg=join)

    def test_lobe_barbs_follow_the_body_edges(self) -> None:
        style = FatConnectorStyle(width=2)
        outline = Connector((0, 0), (100, 0), style=style).paths()[0]
        self.assertEqual(
            outline.to_svg_d(),
            "M 0 1 L 85 1 L 85 9 L 100 0 L 85 -9 L 85 -1 L 0 -1 Z",
        )

    def test_arrowheads_consuming_the_body_keep_both_lobes(self) -> None:
        style = FatConnectorStyle(tail_type=FatArrowheadType.REGULAR, head_size=10)
        outline = Connector((0, 0), (30, 0), style=style).paths()[0]
        self.assertEqual(
            outline.to_svg_d(),
            "M 15 3.5 L 15 6.5 L 30 0 L 15 -6.5 L 15 -3.5 L 15 -6.5 L 0 0 L 15 6.5 L 15 3.5 Z",
        )

    def test_default_fat_connector_with_coincident_endpoints(self) -> None:
        style = FatConnectorStyle(head_type=FatArrowheadType.NONE)
        (outline,) = Connector(style=style).paths()
        self.assertEqual(outline.to_svg_d(), "M 0 3.5 L 0 -3.5 Z")

        (outline,) = Connector(style=FatConnectorStyle()).paths()
        self.assertTrue(outline.is_closed)
        self.assertIn(Vector2D(0, 0), outline.points())

    def test_outline_assembly_requires_offset_points(self) -> None:
        with self.assertRaises(ContractViolationError):
            _fat_outline(
                [], [], Vector2D(0, 0), Vector2D(1, 0), Vector2D(-1, 0), Vector2D(1, 0), FatConnectorStyle()
            )

    def test_style_override(self) -> None:
        connector = Connector((0, 0), (100, 0))
        self.assertEqual(len(connector_paths(connector)), 2)
        self.assertEqual(len(connector_paths(connector, FatConnectorStyle())), 1)


if __name__ == "__main__":
    unittest.main()
