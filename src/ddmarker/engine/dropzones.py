"""
Module: engine.dropzones

Purpose:
    Turn drop-zone definitions into coloured shape primitives, lay out
    their labels, and compose the flat overlay drawn over the background
    image. Every redraw rebuilds the overlay in full.

Key Classes:
    - Palette: Cyclic 8-colour palette
    - DropzoneRenderer: Shape registry, labels and overlay for a session

Dependencies:
    - engine.codec: Geometry parsing
    - engine.mapper: Bounds and viewport conversion

Used By:
    - engine.interaction: Redraws and label clicks
    - output.review: Review image rendering
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..config import LABEL_X_OFFSET
from ..core.models.dropzones import (
    HIGHLIGHT_FILL_OPACITY,
    DropzoneLabel,
    OverlayDescriptor,
    ShapePrimitive,
)
from ..core.models.shapes import Polygon, Shape, ShapeKind
from .codec import parse_circle, parse_polygon, parse_rectangle
from .mapper import BORDER_WIDTH, CoordinateMapper
from .session import QuestionSession

logger = logging.getLogger(__name__)

COLOURS = (
    "#FFFFFF",
    "#B0C4DE",
    "#DCDCDC",
    "#D8BFD8",
    "#87CEFA",
    "#DAA520",
    "#FFD700",
    "#F0E68C",
)

Anchor = tuple[float, float]
LabelMeasure = Callable[[DropzoneLabel], tuple[float, float]]


class Palette:
    """
    Fixed colour sequence with a wrapping cursor.

    Example:
        >>> palette = Palette()
        >>> [palette.next_colour() for _ in range(9)][-1] == COLOURS[0]
        True
    """

    def __init__(self, colours: tuple[str, ...] = COLOURS):
        if not colours:
            raise ValueError("palette needs at least one colour")
        self.colours = tuple(colours)
        self.cursor = 0

    def restart(self) -> None:
        self.cursor = 0

    def next_colour(self) -> str:
        colour = self.colours[self.cursor]
        self.cursor = (self.cursor + 1) % len(self.colours)
        return colour


def _build_circle(coords: str, mapper: CoordinateMapper) -> Optional[Shape]:
    circle = parse_circle(coords)
    if circle is None:
        return None
    top_left, bottom_right = circle.corners
    if not (mapper.is_within_image(top_left) and mapper.is_within_image(bottom_right)):
        return None
    return circle


def _build_rectangle(coords: str, mapper: CoordinateMapper) -> Optional[Shape]:
    rectangle = parse_rectangle(coords)
    if rectangle is None:
        return None
    top_left, bottom_right = rectangle.corners
    if not (mapper.is_within_image(top_left) and mapper.is_within_image(bottom_right)):
        return None
    return rectangle


def _build_polygon(coords: str, mapper: CoordinateMapper) -> Optional[Shape]:
    points = parse_polygon(coords, mapper)
    if len(points) < 3:
        return None
    return Polygon(points=tuple(points))


SHAPE_BUILDERS: dict[ShapeKind, Callable[[str, CoordinateMapper], Optional[Shape]]] = {
    ShapeKind.CIRCLE: _build_circle,
    ShapeKind.RECTANGLE: _build_rectangle,
    ShapeKind.POLYGON: _build_polygon,
}


def _no_size(label: DropzoneLabel) -> tuple[float, float]:
    return (0.0, 0.0)


class DropzoneRenderer:
    """
    Drop-zone shapes, labels and overlay for one session.

    Shapes are registered by drop zone id; registering again overwrites.
    A shape whose geometry does not parse, or does not fit entirely on the
    image, is skipped without affecting the other zones.
    """

    def __init__(self, session: QuestionSession, palette: Optional[Palette] = None):
        self.session = session
        self.palette = palette or Palette()

    def build_shape(self, kind: ShapeKind, coords: str) -> Optional[Shape]:
        """Parse and bounds-check geometry for a shape kind."""
        return SHAPE_BUILDERS[kind](coords, self.session.mapper())

    def add_dropzone(
        self,
        zone_no: int,
        label: str,
        kind: ShapeKind,
        coords: str,
        colour: str,
        linked: bool = True,
    ) -> Optional[Anchor]:
        """
        Register one drop zone's shape and label.

        Returns:
            Shape center in image coordinates, or None if the shape is skipped
        """
        self._update_label(zone_no, label, linked)

        shape = self.build_shape(kind, coords)
        if shape is None:
            logger.warning(f"Skipping drop zone {zone_no}: bad or off-image {kind.value} {coords!r}")
            return None

        self.session.shapes[zone_no] = ShapePrimitive(zone_no=zone_no, shape=shape, colour=colour)
        anchor = shape.center
        existing = self.session.labels.get(zone_no)
        if existing is not None:
            existing.anchor = anchor
        return anchor

    def _update_label(self, zone_no: int, text: str, linked: bool) -> None:
        labels = self.session.labels
        existing = labels.get(zone_no)
        if existing is not None:
            if text != "":
                existing.text = text
            else:
                del labels[zone_no]
        elif text != "":
            labels[zone_no] = DropzoneLabel(zone_no=zone_no, text=text, linked=linked)

    def layout(
        self,
        anchors: dict[int, Anchor],
        measure: LabelMeasure = _no_size,
    ) -> dict[int, tuple[float, float]]:
        """
        Center each label on its shape.

        Args:
            anchors: Shape centers (image coordinates) by drop zone id
            measure: Returns a label's rendered (width, height)

        Returns:
            Label top-left corners in viewport coordinates, by drop zone id
        """
        base = self.session.mapper().to_viewport_xy((0, 0))
        origins = {}
        for zone_no, (ax, ay) in anchors.items():
            label = self.session.labels.get(zone_no)
            if label is None:
                continue
            width, height = measure(label)
            origin = (base.x + ax - width / 2 - LABEL_X_OFFSET, base.y + ay - height / 2)
            label.origin = origin
            origins[zone_no] = origin
        return origins

    def compose(self) -> Optional[OverlayDescriptor]:
        """
        Build a fresh overlay from every registered shape.

        The overlay matches the image size and sits at the image position
        plus the border width. Returns None while no shape is registered.
        """
        if not self.session.shapes:
            return None
        image = self.session.image
        if image is None:
            return None
        overlay = OverlayDescriptor(
            left=image.position.x + BORDER_WIDTH,
            top=image.position.y + BORDER_WIDTH,
            width=image.width,
            height=image.height,
            primitives=tuple(self.session.shapes[k] for k in sorted(self.session.shapes)),
        )
        self.session.overlay = overlay
        return overlay

    def draw_all(self, measure: LabelMeasure = _no_size) -> Optional[OverlayDescriptor]:
        """
        Full drop-zone redraw pass.

        The palette restarts, each drop zone takes the next colour in turn
        (whether or not its shape is drawn), labels are laid out and the
        overlay is rebuilt.
        """
        if not self.session.dropzones:
            return None
        self.palette.restart()
        anchors = {}
        for zone in self.session.dropzones:
            colour = self.palette.next_colour()
            anchor = self.add_dropzone(
                zone.zone_no, zone.label, zone.kind, zone.coords, colour, zone.linked
            )
            if anchor is not None:
                anchors[zone.zone_no] = anchor
        self.layout(anchors, measure)
        return self.compose()

    def highlight(self, zone_no: int) -> bool:
        """Emphasise a zone's shape (linked label clicked) until next redraw."""
        primitive = self.session.shapes.get(zone_no)
        if primitive is None:
            return False
        primitive.fill_opacity = HIGHLIGHT_FILL_OPACITY
        return True
