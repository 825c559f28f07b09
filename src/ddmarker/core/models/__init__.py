"""
Core Models Package

Immutable geometry and drop-zone definitions, plus the mutable marker
model the interaction controller drives.
"""

from .geometry import Point, ImageGeometry
from .shapes import ShapeKind, Circle, Rectangle, Polygon, Shape
from .markers import Choice, MarkerInstance
from .dropzones import DropZone, ShapePrimitive, DropzoneLabel, OverlayDescriptor

__all__ = [
    "Point",
    "ImageGeometry",
    "ShapeKind",
    "Circle",
    "Rectangle",
    "Polygon",
    "Shape",
    "Choice",
    "MarkerInstance",
    "DropZone",
    "ShapePrimitive",
    "DropzoneLabel",
    "OverlayDescriptor",
]
