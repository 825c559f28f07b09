"""Top-level package for the drag-and-drop marker question engine.

Provides subpackages:
- ddmarker.core – data models and error types
- ddmarker.engine – coordinate mapping, codec, marker and drop-zone logic
- ddmarker.output – Pillow rendering of overlays and review images
- ddmarker.gui – PySide6 widget that drives the engine
"""

from importlib.metadata import PackageNotFoundError, version as _pkg_version

try:
    __version__ = _pkg_version("ddmarker")
except PackageNotFoundError:
    # Running from a source checkout without an install
    __version__ = "0.0.0"

__all__: list[str] = ["__version__"]
