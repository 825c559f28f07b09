"""
Entry point for the desktop marker question.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

from ddmarker import __version__
from ddmarker.config import QuestionConfig

logger = logging.getLogger(__name__)


def run(config_path: Path) -> int:
    """Open a window for the question described by a JSON config file."""
    from PySide6.QtWidgets import QApplication

    from ddmarker.gui.widget import MarkerQuestionWidget

    config = QuestionConfig.from_json(config_path)

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("DD Marker")
    app.setApplicationVersion(__version__)

    widget = MarkerQuestionWidget(config)
    widget.setWindowTitle(f"DD Marker - {config.top_node}")
    widget.answerChanged.connect(
        lambda choice_no, value: logger.info(f"choice{choice_no} = {value!r}")
    )
    widget.resize(widget.sizeHint())
    widget.show()
    return app.exec()
