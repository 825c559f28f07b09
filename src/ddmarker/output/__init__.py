"""
Module: output

Purpose:
    Pillow rendering of drop-zone overlays and review images.
"""

from .overlay import render_overlay, load_font
from .review import render_review, render_review_from_config, review_geometry

__all__ = [
    "render_overlay",
    "load_font",
    "render_review",
    "render_review_from_config",
    "review_geometry",
]
