"""
Module: core.models.geometry

Purpose:
    Points and background-image geometry.

    Two coordinate spaces are in play:
    - viewport: where the UI surface draws things (page or widget pixels)
    - image: pixels measured from the background image's top-left

Key Classes:
    - Point: Integer (x, y) pair
    - ImageGeometry: Current layout of the background image

Dependencies:
    - dataclasses (std)
    - typing (std)

Used By:
    - engine.mapper: Coordinate conversions
    - engine.markers: Marker placements
    - engine.dropzones: Overlay sizing and label layout
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


class Point(NamedTuple):
    """An integer (x, y) pixel coordinate."""

    x: int
    y: int

    def moved(self, dx: int, dy: int) -> Point:
        """Return a new point shifted by (dx, dy)."""
        return Point(self.x + dx, self.y + dy)

    def __str__(self) -> str:
        return f"{self.x},{self.y}"


@dataclass(frozen=True, slots=True)
class ImageGeometry:
    """
    Layout of the background image at one moment (immutable).

    Layout can change between calls (resize, scroll), so a fresh geometry is
    reported by the UI surface every time it changes.

    Attributes:
        offset: Top-left of the image in page-absolute coordinates
        position: Top-left of the image relative to its positioned ancestor
        width: Rendered image width in pixels
        height: Rendered image height in pixels

    Invariants:
        - width > 0
        - height > 0

    Example:
        >>> geo = ImageGeometry(Point(10, 10), Point(10, 10), 100, 80)
        >>> geo.size
        (100, 80)
    """

    offset: Point
    position: Point
    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate dimensions on construction."""
        if self.width <= 0:
            raise ValueError(f"width must be positive: {self.width}")
        if self.height <= 0:
            raise ValueError(f"height must be positive: {self.height}")

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) tuple, PIL style."""
        return (self.width, self.height)

    @classmethod
    def at(cls, x: int, y: int, width: int, height: int) -> ImageGeometry:
        """Geometry for a surface where page offset and position coincide."""
        origin = Point(x, y)
        return cls(offset=origin, position=origin, width=width, height=height)
