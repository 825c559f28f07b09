"""
Module: core.models.dropzones

Purpose:
    Drop zones shown for review/feedback and the primitives drawn for them.

Key Classes:
    - DropZone: Immutable drop-zone definition from configuration
    - ShapePrimitive: A parsed, coloured shape ready for compositing
    - DropzoneLabel: Label text and where it is laid out
    - OverlayDescriptor: The flat overlay layer over the background image
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .geometry import Point
from .shapes import Circle, Rectangle, Shape, ShapeKind

DEFAULT_FILL_OPACITY = 0.5
HIGHLIGHT_FILL_OPACITY = 0.7


@dataclass(frozen=True, slots=True)
class DropZone:
    """
    Drop-zone definition (immutable for the session).

    Attributes:
        zone_no: Integer id (insertion order)
        label: Label text; empty means no visible label
        kind: Shape kind
        coords: Geometry string in the encoding for `kind`
        linked: Render the label as a clickable link
    """

    zone_no: int
    label: str
    kind: ShapeKind
    coords: str
    linked: bool = True


@dataclass(slots=True)
class ShapePrimitive:
    """A drop-zone shape with its assigned colour."""

    zone_no: int
    shape: Shape
    colour: str
    fill_opacity: float = DEFAULT_FILL_OPACITY

    def to_svg(self) -> str:
        """SVG element for this shape."""
        style = (
            f'fill="{self.colour}" fill-opacity="{self.fill_opacity}" '
            f'stroke="black" stroke-width="1"'
        )
        shape = self.shape
        if isinstance(shape, Circle):
            return (
                f'<circle id="dz{self.zone_no}" cx="{shape.cx}" cy="{shape.cy}" '
                f'r="{shape.r}" {style} />'
            )
        if isinstance(shape, Rectangle):
            return (
                f'<rect id="dz{self.zone_no}" width="{shape.w}" height="{shape.h}" '
                f'x="{shape.x}" y="{shape.y}" {style} />'
            )
        points = " ".join(f"{p.x} {p.y}" for p in shape.points)
        return f'<polygon id="dz{self.zone_no}" {style} points="{points}" />'


@dataclass(slots=True)
class DropzoneLabel:
    """
    Label for one drop zone.

    Attributes:
        zone_no: Drop zone id
        text: Label text (never empty; empty labels are removed)
        linked: Rendered as a clickable link
        anchor: Shape center in image coordinates
        origin: Top-left in viewport coordinates once laid out
    """

    zone_no: int
    text: str
    linked: bool
    anchor: Optional[tuple[float, float]] = None
    origin: Optional[tuple[float, float]] = None


@dataclass(frozen=True)
class OverlayDescriptor:
    """
    One flat overlay layer sized and positioned over the background image.

    Attributes:
        left: Viewport x of the overlay (image position + border)
        top: Viewport y of the overlay (image position + border)
        width: Background image width
        height: Background image height
        primitives: Shapes in drop-zone id order
    """

    left: int
    top: int
    width: int
    height: int
    primitives: tuple[ShapePrimitive, ...] = field(default_factory=tuple)

    @property
    def origin(self) -> Point:
        return Point(self.left, self.top)

    def to_svg(self) -> str:
        """Standalone SVG document for the overlay."""
        body = "".join(p.to_svg() for p in self.primitives)
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{self.width}" '
            f'height="{self.height}">{body}</svg>'
        )


__all__ = [
    "DropZone",
    "ShapePrimitive",
    "DropzoneLabel",
    "OverlayDescriptor",
    "DEFAULT_FILL_OPACITY",
    "HIGHLIGHT_FILL_OPACITY",
]
