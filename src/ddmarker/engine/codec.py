"""
Module: engine.codec

Purpose:
    Text encodings used by the marker question.

    - Persisted marker field: "x1,y1;x2,y2;...", no trailing separator
    - Circle geometry: "cx,cy;r"
    - Rectangle geometry: "x,y;w,h"
    - Polygon geometry: "x1,y1;x2,y2;...;xn,yn"

Key Functions:
    - encode_points() / decode_points(): Persisted marker field
    - parse_circle() / parse_rectangle(): First-match parsers; extra text is ignored
    - parse_polygon(): Tolerant vertex parser (drops bad vertices)

Used By:
    - engine.markers: Reading and writing choice fields
    - engine.dropzones: Building drop-zone shapes
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from ..core.errors import FormatError
from ..core.models.geometry import Point
from ..core.models.shapes import Circle, Rectangle
from .mapper import CoordinateMapper

logger = logging.getLogger(__name__)

PAIR_SEPARATOR = ";"
COORD_SEPARATOR = ","

_CIRCLE_RE = re.compile(r"(\d+),(\d+);(\d+)")
_RECTANGLE_RE = re.compile(r"(\d+),(\d+);(\d+),(\d+)")
_VERTEX_RE = re.compile(r"^(\d+),(\d+)$")


def encode_points(points: Iterable[tuple[int, int]]) -> str:
    """
    Encode points as "x1,y1;x2,y2;...".

    Example:
        >>> encode_points([(10, 20), (30, 40)])
        '10,20;30,40'
        >>> encode_points([])
        ''
    """
    return PAIR_SEPARATOR.join(f"{int(x)}{COORD_SEPARATOR}{int(y)}" for x, y in points)


def decode_points(value: str) -> list[Point]:
    """
    Decode "x1,y1;x2,y2;..." into points.

    Args:
        value: Persisted field text; empty string means no points

    Returns:
        Points in stored order

    Raises:
        FormatError: If any pair is not exactly two integers
    """
    if value == "":
        return []
    points = []
    for part in value.split(PAIR_SEPARATOR):
        coords = part.split(COORD_SEPARATOR)
        if len(coords) != 2:
            raise FormatError(f"Expected 'x,y' pair, got {part!r} in {value!r}")
        try:
            points.append(Point(int(coords[0]), int(coords[1])))
        except ValueError:
            raise FormatError(f"Non-integer coordinate in {part!r}") from None
    return points


def parse_circle(value: str) -> Optional[Circle]:
    """Parse the first "cx,cy;r" in the text; None if there is none."""
    match = _CIRCLE_RE.search(value)
    if match is None:
        return None
    cx, cy, r = (int(g) for g in match.groups())
    return Circle(cx=cx, cy=cy, r=r)


def parse_rectangle(value: str) -> Optional[Rectangle]:
    """Parse the first "x,y;w,h" in the text; None if there is none."""
    match = _RECTANGLE_RE.search(value)
    if match is None:
        return None
    x, y, w, h = (int(g) for g in match.groups())
    return Rectangle(x=x, y=y, w=w, h=h)


def parse_polygon(value: str, mapper: CoordinateMapper) -> list[Point]:
    """
    Parse polygon vertices, silently dropping bad ones.

    Segments that are not "x,y" or that fall outside the image are
    skipped, not reported. The caller decides whether enough vertices
    remain to draw a shape.

    Example (100x100 image):
        >>> parse_polygon("10,10;200,10;50,90", mapper)
        [Point(x=10, y=10), Point(x=50, y=90)]
    """
    points = []
    for segment in value.split(PAIR_SEPARATOR):
        match = _VERTEX_RE.match(segment)
        if match is None:
            continue
        point = Point(int(match.group(1)), int(match.group(2)))
        if not mapper.is_within_image(point):
            logger.debug(f"Dropping polygon vertex {point} outside image")
            continue
        points.append(point)
    return points
