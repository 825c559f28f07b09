"""
Module: core.errors

Purpose:
    Exception types shared by the engine.

    Out-of-bounds geometry and coordinates are deliberately NOT errors:
    they are filtered out where they are read (tolerant parsing).

Key Classes:
    - DdMarkerError: Base class
    - FormatError: Malformed coordinate or geometry string
    - ConfigurationError: Missing required configuration or anchors
    - ImageNotReadyError: Coordinate work requested before image geometry
"""

from __future__ import annotations


class DdMarkerError(Exception):
    """Base error for the marker question engine."""
    pass


class FormatError(DdMarkerError, ValueError):
    """Malformed coordinate list, geometry string or shape kind."""
    pass


class ConfigurationError(DdMarkerError):
    """Required configuration is missing; interaction cannot start."""
    pass


class ImageNotReadyError(DdMarkerError):
    """The background image has not reported its geometry yet."""
    pass
