"""
Core Package

Data models and error types shared by the engine, output and GUI layers.
"""

from .errors import DdMarkerError, FormatError, ConfigurationError, ImageNotReadyError
from .models import (
    Point,
    ImageGeometry,
    ShapeKind,
    Circle,
    Rectangle,
    Polygon,
    Choice,
    MarkerInstance,
    DropZone,
    OverlayDescriptor,
)

__all__ = [
    "DdMarkerError",
    "FormatError",
    "ConfigurationError",
    "ImageNotReadyError",
    "Point",
    "ImageGeometry",
    "ShapeKind",
    "Circle",
    "Rectangle",
    "Polygon",
    "Choice",
    "MarkerInstance",
    "DropZone",
    "OverlayDescriptor",
]
