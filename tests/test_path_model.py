"""
Tests for SVG path-data parsing and flattening.
"""

import numpy as np
import pytest
from svgpathtools import Arc, CubicBezier, Line

from core.path_model import PathParser, VectorPath
from core.silhouette import CAT_VECTOR_SIZE, cat_path, cat_path_nodes


class TestPathParser:
    """Test parsing path data into nodes."""

    def test_parse_basic_commands(self):
        nodes = PathParser.parse("M0 0 L10 0 L10 10 Z")
        # closing adds the segment back to the start point
        assert [n.kind for n in nodes] == ['M', 'L', 'L', 'L']
        assert nodes[0].point == 0j
        assert nodes[1].point == 10 + 0j
        assert nodes[3].point == 0j
        assert nodes[0].segment is None
        assert isinstance(nodes[1].segment, Line)

    def test_implicit_lineto_after_moveto(self):
        nodes = PathParser.parse("M 0 0 10 0 10 10")
        assert [n.kind for n in nodes] == ['M', 'L', 'L']

        relative = PathParser.parse("m 5 5 1 1")
        assert [n.kind for n in relative] == ['M', 'L']
        assert relative[1].point == 6 + 6j

    def test_implicit_repeat_of_curve(self):
        nodes = PathParser.parse("M0 0 C 1 1 2 2 3 3 4 4 5 5 6 6")
        assert [n.kind for n in nodes] == ['M', 'C', 'C']
        assert isinstance(nodes[2].segment, CubicBezier)
        assert nodes[2].xy == (6.0, 6.0)

    def test_compact_number_syntax(self):
        nodes = PathParser.parse("M1.5-2.5L.5.5,1e1 0")
        assert nodes[0].point == 1.5 - 2.5j
        assert nodes[1].point == 0.5 + 0.5j
        assert nodes[2].point == 10 + 0j

    def test_compact_arc_flags(self):
        """Arc flags may be written without separators."""
        nodes = PathParser.parse("M0 0 a5 5 0 1010 10")
        assert [n.kind for n in nodes] == ['M', 'A']
        assert isinstance(nodes[1].segment, Arc)
        assert nodes[1].point == pytest.approx(10 + 10j)

        spaced = PathParser.parse("M0 0 a5 5 0 1 0 10 10")
        assert spaced[1].point == pytest.approx(nodes[1].point)

    def test_arc_flags_repeat(self):
        nodes = PathParser.parse("M0 0 A5 5 0 0110 0 5 5 0 0120 0")
        assert [n.kind for n in nodes] == ['M', 'A', 'A']
        assert nodes[2].point == pytest.approx(20 + 0j)

    def test_each_subpath_starts_with_move(self):
        nodes = PathParser.parse("M0 0 L10 0 M 20 20 L 30 30")
        assert [n.kind for n in nodes] == ['M', 'L', 'M', 'L']
        assert nodes[2].point == 20 + 20j

    @pytest.mark.parametrize("path_data", [
        "10 10 L 5 5",         # no leading command
        "M 0 0 L 10",          # missing argument
        "M 0 0 X 1 1",         # unknown command
        "M 0 0 A 5 5 0 2 0 10 10",  # arc flag must be 0 or 1
    ])
    def test_invalid_path_data(self, path_data):
        with pytest.raises(ValueError):
            PathParser.parse(path_data)


class TestVectorPath:
    """Test flattening into polylines and polygons."""

    def test_prefix_polylines(self):
        path = VectorPath.from_path_data("M0 0 L10 0 L10 10 L0 10 Z")
        assert len(path) == 5
        assert path.polylines(0) == []
        # only the moveto: a single point is not drawable
        assert path.polylines(1) == []

        two = path.polylines(2)
        assert len(two) == 1
        np.testing.assert_allclose(two[0].points, [[0, 0], [10, 0]])
        assert not two[0].closed

        full = path.polylines()
        assert full[0].closed
        assert len(full[0].points) == 5

    def test_relative_and_axis_commands(self):
        path = VectorPath.from_path_data("M 10 10 h 5 v 5 H 0 V 0 l 2 3")
        points = path.polylines()[0].points
        np.testing.assert_allclose(points, [[10, 10], [15, 10], [15, 15],
                                            [0, 15], [0, 0], [2, 3]])

    def test_curves_end_exactly_on_endpoint(self):
        path = VectorPath.from_path_data("M 0 0 C 0 10 10 10 10 0 S 20 -10 20 0 Q 25 5 30 0 T 40 0")
        points = path.polylines()[0].points
        np.testing.assert_allclose(points[-1], [40, 0])
        assert len(points) > 8

    def test_curve_sampling_follows_length(self):
        short = VectorPath.from_path_data("M 0 0 Q 1 1 2 0", segment_length=4.0)
        long = VectorPath.from_path_data("M 0 0 Q 500 500 1000 0", segment_length=4.0)
        assert len(short.node_points[1]) == 4
        assert len(long.node_points[1]) == 64

    def test_arc_flattening(self):
        path = VectorPath.from_path_data("M 0 0 A 10 10 0 0 1 20 0")
        points = path.polylines()[0].points
        np.testing.assert_allclose(points[-1], [20, 0], atol=1e-9)
        # sweep flag 1 bulges towards negative y in screen coordinates
        assert points[:, 1].min() < -9.0

    def test_fill_polygons_skip_open_lines(self):
        path = VectorPath.from_path_data("M0 0 L10 0 L10 10 Z M 20 20 L 30 30")
        polygons = path.fill_polygons()
        assert len(polygons) == 1

    def test_bounds(self):
        path = VectorPath.from_path_data("M 5 5 L 15 25")
        assert path.bounds() == (5.0, 5.0, 15.0, 25.0)
        assert VectorPath([]).bounds() == (0.0, 0.0, 0.0, 0.0)


class TestSilhouette:
    """Test the built-in cat outline."""

    def test_cat_path_is_cached(self):
        assert cat_path() is cat_path()
        assert len(cat_path()) == len(cat_path_nodes())

    def test_cat_fits_reference_box(self):
        min_x, min_y, max_x, max_y = cat_path().bounds()
        assert min_x >= 0 and min_y >= 0
        assert max_x <= CAT_VECTOR_SIZE.width
        assert max_y <= CAT_VECTOR_SIZE.height

    def test_cat_has_fill_region(self):
        assert len(cat_path().fill_polygons()) >= 2
