"""
Module: engine

Purpose:
    The interaction engine for a drag-and-drop marker question.

Key Classes:
    - QuestionSession: Per-question context
    - CoordinateMapper: Viewport/image coordinate conversions
    - MarkerSetController: Marker instances and persisted fields
    - DropzoneRenderer: Drop-zone shapes, labels and overlay
    - InteractionController: Drag and keyboard state machine

Key Functions:
    - encode_points() / decode_points(): Persisted field format
    - parse_circle() / parse_rectangle() / parse_polygon(): Geometry
"""

from .codec import decode_points, encode_points, parse_circle, parse_polygon, parse_rectangle
from .dropzones import COLOURS, DropzoneRenderer, Palette
from .interaction import InteractionController, KeyAction, Phase, action_for_key
from .mapper import CoordinateMapper
from .markers import MarkerSetController, MarkerSlot, ReconcilePlan
from .session import QuestionSession

__all__ = [
    "QuestionSession",
    "CoordinateMapper",
    "MarkerSetController",
    "MarkerSlot",
    "ReconcilePlan",
    "DropzoneRenderer",
    "Palette",
    "COLOURS",
    "InteractionController",
    "KeyAction",
    "Phase",
    "action_for_key",
    "encode_points",
    "decode_points",
    "parse_circle",
    "parse_rectangle",
    "parse_polygon",
]
