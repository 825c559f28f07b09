"""
Unit Tests for geometry and shape models.
"""

import pytest

from ddmarker.core.errors import FormatError
from ddmarker.core.models.geometry import ImageGeometry, Point
from ddmarker.core.models.shapes import Circle, Polygon, Rectangle, ShapeKind


class TestPoint:
    """Tests for Point."""

    def test_moved_when_called_then_returns_shifted_point(self):
        assert Point(1, 2).moved(3, -4) == Point(4, -2)

    def test_str_when_called_then_field_format(self):
        assert str(Point(10, 20)) == "10,20"


class TestImageGeometry:
    """Tests for ImageGeometry."""

    def test_at_when_called_then_offset_equals_position(self):
        geo = ImageGeometry.at(5, 6, 100, 80)
        assert geo.offset == geo.position == Point(5, 6)
        assert geo.size == (100, 80)

    @pytest.mark.parametrize("width, height", [(0, 10), (10, 0), (-5, 10)])
    def test_init_when_not_positive_then_raises_error(self, width, height):
        with pytest.raises(ValueError, match="must be positive"):
            ImageGeometry.at(0, 0, width, height)


class TestShapes:
    """Tests for shape variants."""

    def test_shape_kind_parse_when_known_then_enum(self):
        assert ShapeKind.parse(" Rectangle ") is ShapeKind.RECTANGLE

    def test_shape_kind_parse_when_unknown_then_raises_format_error(self):
        with pytest.raises(FormatError, match="Unknown shape kind"):
            ShapeKind.parse("triangle")

    def test_circle_corners_when_called_then_bounding_box(self):
        assert Circle(50, 50, 20).corners == (Point(30, 30), Point(70, 70))

    def test_rectangle_center_when_odd_size_then_fractional(self):
        assert Rectangle(0, 0, 5, 5).center == (2.5, 2.5)

    def test_polygon_center_when_called_then_bounding_box_midpoint(self):
        polygon = Polygon((Point(10, 10), Point(90, 10), Point(10, 80)))
        assert polygon.center == (50.0, 45.0)

    def test_polygon_init_when_two_points_then_raises_error(self):
        with pytest.raises(ValueError, match="at least 3"):
            Polygon((Point(1, 1), Point(2, 2)))

    def test_kind_when_accessed_then_matches_variant(self):
        assert Circle(1, 1, 1).kind is ShapeKind.CIRCLE
        assert Rectangle(1, 1, 1, 1).kind is ShapeKind.RECTANGLE
