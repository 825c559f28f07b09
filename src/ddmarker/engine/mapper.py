"""
Module: engine.mapper

Purpose:
    Convert between viewport and image-relative coordinates and keep
    points inside the background image.

    Two outer spaces are involved. Page points (pointer events) are
    measured against the image's page offset; viewport points (where
    things are drawn) are measured against its layout position. Image
    points are the bridge between them and the only space placements are
    stored in.

    The image is drawn with a 1-unit border, which shifts its pixels by
    one unit down and to the right; every conversion compensates for it.

Key Classes:
    - CoordinateMapper: Conversions for one ImageGeometry snapshot

Dependencies:
    - core.models.geometry

Used By:
    - engine.codec: Polygon vertex filtering
    - engine.markers: Saving placements
    - engine.dropzones: Shape bounds and label layout
    - engine.interaction: Dragging and keyboard nudges
"""

from __future__ import annotations

from ..core.models.geometry import ImageGeometry, Point

BORDER_WIDTH = 1


class CoordinateMapper:
    """
    Coordinate conversions for a single image geometry.

    Build a new mapper whenever the layout may have changed (image load,
    resize); a mapper never refreshes its geometry.

    Example:
        >>> mapper = CoordinateMapper(ImageGeometry.at(10, 20, 100, 100))
        >>> mapper.to_image_xy(Point(61, 71))
        Point(x=50, y=50)
        >>> mapper.to_viewport_xy(Point(50, 50))
        Point(x=61, y=71)
    """

    def __init__(self, geometry: ImageGeometry):
        self.geometry = geometry

    @property
    def width(self) -> int:
        return self.geometry.width

    @property
    def height(self) -> int:
        return self.geometry.height

    def to_image_xy(self, viewport_xy: tuple[int, int]) -> Point:
        """Page point (pointer space, offset-based) to image-relative point."""
        offset = self.geometry.offset
        return Point(
            int(viewport_xy[0]) - offset.x - BORDER_WIDTH,
            int(viewport_xy[1]) - offset.y - BORDER_WIDTH,
        )

    def to_page_xy(self, image_xy: tuple[int, int]) -> Point:
        """Image-relative point to page point; inverse of to_image_xy()."""
        offset = self.geometry.offset
        return Point(
            int(image_xy[0]) + offset.x + BORDER_WIDTH,
            int(image_xy[1]) + offset.y + BORDER_WIDTH,
        )

    def to_viewport_xy(self, image_xy: tuple[int, int]) -> Point:
        """Image-relative point to viewport (ancestor-relative) point."""
        position = self.geometry.position
        return Point(
            int(image_xy[0]) + position.x + BORDER_WIDTH,
            int(image_xy[1]) + position.y + BORDER_WIDTH,
        )

    def from_viewport_xy(self, viewport_xy: tuple[int, int]) -> Point:
        """Viewport (ancestor-relative) point to image point; inverse of to_viewport_xy()."""
        position = self.geometry.position
        return Point(
            int(viewport_xy[0]) - position.x - BORDER_WIDTH,
            int(viewport_xy[1]) - position.y - BORDER_WIDTH,
        )

    def page_to_viewport_xy(self, page_xy: tuple[int, int]) -> Point:
        """Page point to the viewport point drawn under it."""
        return self.to_viewport_xy(self.to_image_xy(page_xy))

    def is_within_image(self, image_xy: tuple[float, float]) -> bool:
        """
        True iff 0 < x <= width and 0 < y <= height.

        The lower bound is strict: a point on the left or top edge does not
        count as being on the image.
        """
        x, y = image_xy[0], image_xy[1]
        return 0 < x <= self.width and 0 < y <= self.height

    def clamp_image_xy(self, image_xy: tuple[int, int]) -> Point:
        """Clamp an image-relative point to [0, width] x [0, height]."""
        return Point(
            min(self.width, max(0, int(image_xy[0]))),
            min(self.height, max(0, int(image_xy[1]))),
        )

    def clamp_to_image(self, page_xy: tuple[int, int]) -> Point:
        """Keep a page point on the image; returns a page point."""
        return self.to_page_xy(self.clamp_image_xy(self.to_image_xy(page_xy)))
