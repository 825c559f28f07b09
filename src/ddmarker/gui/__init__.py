"""
PySide6 front end: a widget that supplies drag, keyboard and image-ready
events to the engine and paints its state.
"""
