"""
Unit Tests for CoordinateMapper

Conversions between viewport and image space, bounds and clamping.
"""

import pytest

from ddmarker.core.models.geometry import ImageGeometry, Point
from ddmarker.engine.mapper import CoordinateMapper


@pytest.fixture
def mapper(geometry_100):
    return CoordinateMapper(geometry_100)


class TestConversions:
    """Tests for to_image_xy / to_viewport_xy."""

    def test_to_image_xy_when_called_then_subtracts_offset_and_border(self, mapper):
        """Image x = viewport x - offset x - 1."""
        assert mapper.to_image_xy((61, 71)) == Point(50, 60)

    def test_to_viewport_xy_when_called_then_adds_position_and_border(self, mapper):
        """Viewport x = image x + position x + 1."""
        assert mapper.to_viewport_xy((50, 60)) == Point(61, 71)

    def test_roundtrip_when_offset_equals_position_then_returns_original(self, mapper):
        """Converting there and back is the identity for a shared origin."""
        for p in [(0, 0), (11, 11), (61, 71), (500, -20)]:
            assert mapper.to_viewport_xy(mapper.to_image_xy(p)) == Point(*p)

    def test_conversions_when_offset_differs_from_position_then_use_each(self):
        """Offset (page) drives to_image_xy, position (ancestor) drives to_viewport_xy."""
        geo = ImageGeometry(offset=Point(110, 210), position=Point(10, 10), width=100, height=100)
        mapper = CoordinateMapper(geo)
        assert mapper.to_image_xy((161, 271)) == Point(50, 60)
        assert mapper.to_viewport_xy((50, 60)) == Point(61, 71)

    def test_to_image_xy_when_given_strings_then_coerces_numbers(self, mapper):
        """Coordinates read from text are accepted."""
        assert mapper.to_image_xy(("61", "71")) == Point(50, 60)


class TestBounds:
    """Tests for is_within_image."""

    @pytest.mark.parametrize("xy", [(1, 1), (100, 100), (50, 1), (1, 50)])
    def test_is_within_image_when_inside_then_true(self, mapper, xy):
        assert mapper.is_within_image(xy) is True

    @pytest.mark.parametrize("xy", [(0, 50), (50, 0), (-1, 5), (101, 50), (50, 101), (0, 0)])
    def test_is_within_image_when_outside_then_false(self, mapper, xy):
        """Lower bound is strict, upper bound inclusive."""
        assert mapper.is_within_image(xy) is False


class TestClamping:
    """Tests for clamp_to_image / clamp_image_xy."""

    def test_clamp_image_xy_when_outside_then_clamps_each_axis(self, mapper):
        assert mapper.clamp_image_xy((-5, 150)) == Point(0, 100)

    def test_clamp_to_image_when_outside_then_returns_viewport_point_on_edge(self, mapper):
        """(5, 200) viewport -> (-6, 189) image -> (0, 100) -> (11, 111) viewport."""
        assert mapper.clamp_to_image((5, 200)) == Point(11, 111)

    def test_clamp_to_image_when_inside_then_unchanged(self, mapper):
        assert mapper.clamp_to_image((61, 71)) == Point(61, 71)

    @pytest.mark.parametrize("xy", [(5, 200), (61, 71), (-300, -300), (1000, 20)])
    def test_clamp_to_image_when_applied_twice_then_same_as_once(self, mapper, xy):
        once = mapper.clamp_to_image(xy)
        assert mapper.clamp_to_image(once) == once


class TestSplitLayout:
    """Page offset and layout position differ (scrolled or nested surface)."""

    @pytest.fixture
    def split(self):
        geo = ImageGeometry(offset=Point(110, 210), position=Point(10, 10), width=100, height=100)
        return CoordinateMapper(geo)

    def test_to_page_xy_when_called_then_inverse_of_to_image_xy(self, split):
        assert split.to_page_xy((50, 60)) == Point(161, 271)
        assert split.to_image_xy(split.to_page_xy((50, 60))) == Point(50, 60)

    def test_from_viewport_xy_when_called_then_inverse_of_to_viewport_xy(self, split):
        assert split.from_viewport_xy((61, 71)) == Point(50, 60)
        assert split.from_viewport_xy(split.to_viewport_xy((-5, 7))) == Point(-5, 7)

    def test_page_to_viewport_xy_when_called_then_same_image_pixel(self, split):
        assert split.page_to_viewport_xy((161, 271)) == Point(61, 71)

    def test_clamp_to_image_when_outside_then_returns_page_point_on_edge(self, split):
        """(5, 200) page -> (-106, -11) image -> (0, 0) -> (111, 211) page."""
        assert split.clamp_to_image((5, 200)) == Point(111, 211)
        assert split.clamp_to_image(Point(111, 211)) == Point(111, 211)
