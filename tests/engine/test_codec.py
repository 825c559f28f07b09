"""
Unit Tests for the marker field and geometry codecs.
"""

import pytest

from ddmarker.core.errors import FormatError
from ddmarker.core.models.geometry import ImageGeometry, Point
from ddmarker.core.models.shapes import Circle, Rectangle
from ddmarker.engine.codec import (
    decode_points,
    encode_points,
    parse_circle,
    parse_polygon,
    parse_rectangle,
)
from ddmarker.engine.mapper import CoordinateMapper


class TestMarkerField:
    """Tests for encode_points / decode_points."""

    def test_encode_when_two_points_then_semicolon_separated(self):
        assert encode_points([(10, 20), (30, 40)]) == "10,20;30,40"

    def test_encode_when_empty_then_empty_string(self):
        assert encode_points([]) == ""

    def test_decode_when_two_pairs_then_points_in_order(self):
        assert decode_points("10,20;30,40") == [Point(10, 20), Point(30, 40)]

    def test_decode_when_empty_then_no_points(self):
        assert decode_points("") == []

    def test_decode_when_encoded_then_returns_original(self):
        points = [Point(1, 1), Point(100, 3), Point(42, 99)]
        assert decode_points(encode_points(points)) == points

    @pytest.mark.parametrize("value", ["10", "10,20,30", "10,20;", "a,b", "10.5,3", "1,2;;3,4"])
    def test_decode_when_malformed_then_raises_format_error(self, value):
        with pytest.raises(FormatError):
            decode_points(value)

    def test_format_error_when_raised_then_is_value_error(self):
        """Callers catching ValueError still see codec failures."""
        with pytest.raises(ValueError):
            decode_points("x")


class TestShapeParsers:
    """Tests for parse_circle / parse_rectangle."""

    def test_parse_circle_when_valid_then_returns_circle(self):
        assert parse_circle("50,50;20") == Circle(cx=50, cy=50, r=20)

    def test_parse_circle_when_radius_missing_then_none(self):
        assert parse_circle("50,50") is None

    def test_parse_circle_when_garbage_then_none(self):
        assert parse_circle("circle!") is None

    def test_parse_rectangle_when_valid_then_returns_rectangle(self):
        assert parse_rectangle("10,20;30,40") == Rectangle(x=10, y=20, w=30, h=40)

    def test_parse_rectangle_when_circle_geometry_then_none(self):
        assert parse_rectangle("50,50;20") is None

    def test_parse_circle_when_trailing_segments_then_first_match_used(self):
        """Legacy geometry with extra segments still draws."""
        assert parse_circle("50,50;20;0") == Circle(cx=50, cy=50, r=20)

    def test_parse_rectangle_when_trailing_segments_then_first_match_used(self):
        assert parse_rectangle("10,20;30,40;5,5") == Rectangle(x=10, y=20, w=30, h=40)


class TestPolygonParser:
    """Tests for parse_polygon's tolerant filtering."""

    @pytest.fixture
    def mapper(self):
        return CoordinateMapper(ImageGeometry.at(0, 0, 100, 100))

    def test_parse_polygon_when_vertex_off_image_then_dropped(self, mapper):
        """x=200 exceeds the width, so that vertex disappears."""
        assert parse_polygon("10,10;200,10;50,90", mapper) == [Point(10, 10), Point(50, 90)]

    def test_parse_polygon_when_segment_malformed_then_dropped(self, mapper):
        assert parse_polygon("10,10;oops;50,90;90,50", mapper) == [
            Point(10, 10), Point(50, 90), Point(90, 50),
        ]

    def test_parse_polygon_when_all_valid_then_keeps_order(self, mapper):
        assert parse_polygon("90,10;10,10;50,90", mapper) == [
            Point(90, 10), Point(10, 10), Point(50, 90),
        ]

    def test_parse_polygon_when_vertex_on_edge_then_dropped(self, mapper):
        """A vertex at x=0 is not on the image."""
        assert parse_polygon("0,10;10,10", mapper) == [Point(10, 10)]
