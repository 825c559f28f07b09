"""
Module: core.models.shapes

Purpose:
    Drop-zone shape geometry as a closed tagged variant.

Key Classes:
    - ShapeKind: circle | rectangle | polygon
    - Circle, Rectangle, Polygon: Parsed geometry (image coordinates)
    - Shape: Union of the three

Used By:
    - engine.codec: Parsing geometry strings
    - engine.dropzones: Rendering primitives
    - output.overlay: Drawing
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..errors import FormatError
from .geometry import Point


class ShapeKind(str, Enum):
    """Shape kinds a drop zone may use."""

    CIRCLE = "circle"
    RECTANGLE = "rectangle"
    POLYGON = "polygon"

    @classmethod
    def parse(cls, value: str) -> ShapeKind:
        """
        Parse a shape kind name.

        Raises:
            FormatError: If the name is not a known shape kind
        """
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise FormatError(f"Unknown shape kind: {value!r}") from None


@dataclass(frozen=True, slots=True)
class Circle:
    """Circle centred on (cx, cy) with radius r."""

    cx: int
    cy: int
    r: int

    kind = ShapeKind.CIRCLE

    @property
    def corners(self) -> tuple[Point, Point]:
        """Top-left and bottom-right of the bounding box."""
        return Point(self.cx - self.r, self.cy - self.r), Point(self.cx + self.r, self.cy + self.r)

    @property
    def center(self) -> tuple[float, float]:
        return (float(self.cx), float(self.cy))


@dataclass(frozen=True, slots=True)
class Rectangle:
    """Axis-aligned rectangle with top-left (x, y), width w and height h."""

    x: int
    y: int
    w: int
    h: int

    kind = ShapeKind.RECTANGLE

    @property
    def corners(self) -> tuple[Point, Point]:
        """Top-left and bottom-right corners."""
        return Point(self.x, self.y), Point(self.x + self.w, self.y + self.h)

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.w / 2, self.y + self.h / 2)


@dataclass(frozen=True, slots=True)
class Polygon:
    """
    Polygon with three or more vertices.

    The center is the midpoint of the axis-aligned bounding box of the
    vertices, not the centroid. Label positions depend on this.
    """

    points: tuple[Point, ...]

    kind = ShapeKind.POLYGON

    def __post_init__(self) -> None:
        if len(self.points) < 3:
            raise ValueError(f"polygon needs at least 3 points: {len(self.points)}")

    @property
    def corners(self) -> tuple[Point, Point]:
        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return Point(min(xs), min(ys)), Point(max(xs), max(ys))

    @property
    def center(self) -> tuple[float, float]:
        (min_x, min_y), (max_x, max_y) = self.corners
        return ((min_x + max_x) / 2, (min_y + max_y) / 2)


Shape = Union[Circle, Rectangle, Polygon]
