"""
Desktop surface for a marker question (PySide6).

The widget is a pure rendering target: it reports image geometry and
pointer/key events to the InteractionController and paints whatever the
session says. It never keeps marker state of its own.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QPoint, QPointF, QRect, QSize, Qt, Signal
from PySide6.QtGui import QColor, QFontMetrics, QPainter, QPen, QPixmap, QPolygon
from PySide6.QtWidgets import QWidget

from ddmarker.config import MARKER_OPACITY, LABEL_OPACITY, QuestionConfig
from ddmarker.core.models.dropzones import DropzoneLabel
from ddmarker.core.models.geometry import ImageGeometry, Point
from ddmarker.core.models.markers import MarkerInstance
from ddmarker.core.models.shapes import Circle, Rectangle
from ddmarker.engine.interaction import InteractionController
from ddmarker.engine.mapper import BORDER_WIDTH
from ddmarker.engine.session import QuestionSession

logger = logging.getLogger(__name__)


def _key_code(key) -> int:
    return int(getattr(key, "value", key))


# Qt key -> key name understood by action_for_key()
QT_KEY_NAMES = {
    _key_code(Qt.Key.Key_Left): "left",
    _key_code(Qt.Key.Key_Right): "right",
    _key_code(Qt.Key.Key_Up): "up",
    _key_code(Qt.Key.Key_Down): "down",
    _key_code(Qt.Key.Key_A): "a",
    _key_code(Qt.Key.Key_D): "d",
    _key_code(Qt.Key.Key_W): "w",
    _key_code(Qt.Key.Key_S): "s",
    _key_code(Qt.Key.Key_Space): "space",
    _key_code(Qt.Key.Key_Escape): "escape",
}


class MarkerQuestionWidget(QWidget):
    """
    Background image with draggable markers and optional drop-zone overlay.

    Home templates are laid out in a row under the image.
    """

    answerChanged = Signal(int, str)  # choice number, new field value

    IMAGE_MARGIN = 20
    HOME_ROW_GAP = 40
    HOME_SPACING = 90
    MARKER_HIT = 8
    LABEL_PADDING = 2

    def __init__(self, config: QuestionConfig, parent=None):
        super().__init__(parent)
        self.config = config
        self.session = QuestionSession.from_config(config)
        self.controller = InteractionController(
            self.session,
            measure=self._measure_label,
            on_redraw=lambda overlay: self.update(),
        )
        self._pixmap = QPixmap()
        self._focused: Optional[MarkerInstance] = None

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMinimumSize(200, 150)
        self.load_image(config.background_image_url)

    # ─────────────────────────────────────────────────────────────────────────
    # Image and layout
    # ─────────────────────────────────────────────────────────────────────────

    def load_image(self, path: str) -> bool:
        pixmap = QPixmap(path)
        if pixmap.isNull():
            self.controller.image_failed(f"cannot load {path}")
            return False
        self._pixmap = pixmap
        self.updateGeometry()
        self._layout_homes()
        self.controller.image_loaded(self.image_geometry())
        return True

    def image_geometry(self) -> ImageGeometry:
        """
        Where the image is drawn right now (centered horizontally).

        Pointer events and painting both use widget coordinates, so the
        page offset and layout position are the same point.
        """
        width, height = self._pixmap.width(), self._pixmap.height()
        x = max(self.IMAGE_MARGIN, (self.width() - width) // 2)
        return ImageGeometry.at(x, self.IMAGE_MARGIN, width, height)

    def _layout_homes(self) -> None:
        geo = self.image_geometry()
        top = geo.position.y + geo.height + 2 * BORDER_WIDTH + self.HOME_ROW_GAP
        for n, choice in enumerate(self.session.choices.values()):
            choice.home = Point(geo.position.x + n * self.HOME_SPACING, top)

    def sizeHint(self) -> QSize:
        if self._pixmap.isNull():
            return QSize(400, 300)
        return QSize(
            self._pixmap.width() + 2 * self.IMAGE_MARGIN,
            self._pixmap.height() + 2 * self.IMAGE_MARGIN + self.HOME_ROW_GAP + 40,
        )

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if self._pixmap.isNull():
            return
        self._layout_homes()
        self.controller.resized(self.image_geometry())

    # ─────────────────────────────────────────────────────────────────────────
    # Hit testing
    # ─────────────────────────────────────────────────────────────────────────

    def _text_size(self, text: str) -> tuple[int, int]:
        rect = QFontMetrics(self.font()).boundingRect(text)
        return rect.width() + 2 * self.LABEL_PADDING, rect.height() + 2 * self.LABEL_PADDING

    def _measure_label(self, label: DropzoneLabel) -> tuple[float, float]:
        return self._text_size(label.text)

    def _marker_rect(self, instance: MarkerInstance) -> QRect:
        x, y = self.controller.markers.viewport_xy(instance)
        text_width, _ = self._text_size(instance.label)
        hit = self.MARKER_HIT
        return QRect(x - hit, y - hit, 2 * hit + text_width, 2 * hit)

    def instance_at(self, pos: QPoint) -> Optional[MarkerInstance]:
        """Topmost marker instance under a widget position."""
        for choice in reversed(list(self.session.choices.values())):
            for instance in reversed(choice.instances):
                if self._marker_rect(instance).contains(pos):
                    return instance
        return None

    def label_at(self, pos: QPoint) -> Optional[DropzoneLabel]:
        for label in self.session.labels.values():
            if label.origin is None:
                continue
            width, height = self._measure_label(label)
            rect = QRect(round(label.origin[0]), round(label.origin[1]), width, height)
            if rect.contains(pos):
                return label
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Events
    # ─────────────────────────────────────────────────────────────────────────

    def mousePressEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            return super().mousePressEvent(event)
        pos = event.position().toPoint()
        instance = self.instance_at(pos)
        if instance is not None:
            if self.controller.pointer_down(instance, (pos.x(), pos.y())):
                self._focused = instance
                self.update()
            return
        label = self.label_at(pos)
        if label is not None:
            self.controller.label_clicked(label.zone_no)

    def mouseMoveEvent(self, event):
        pos = event.position().toPoint()
        if self.controller.pointer_move((pos.x(), pos.y())):
            self.update()

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            return super().mouseReleaseEvent(event)
        instance = self.controller.active
        pos = event.position().toPoint()
        value = self.controller.pointer_up((pos.x(), pos.y()))
        if value is not None and instance is not None:
            self.answerChanged.emit(instance.choice_no, value)

    def keyPressEvent(self, event):
        code = _key_code(event.key())
        if code == _key_code(Qt.Key.Key_Tab):
            self.focus_next_marker()
            return
        name = QT_KEY_NAMES.get(code)
        instance = self._focused
        if name is None or instance is None or not self._is_displayed(instance):
            return super().keyPressEvent(event)
        if self.controller.key_press(instance, name):
            self.answerChanged.emit(instance.choice_no, self.session.choice(instance.choice_no).value)
            event.accept()

    def focusNextPrevChild(self, next: bool) -> bool:
        # Keep Tab for cycling markers
        return False

    def _is_displayed(self, instance: MarkerInstance) -> bool:
        choice = self.session.choices.get(instance.choice_no)
        return choice is not None and instance in choice.instances

    def focus_next_marker(self) -> Optional[MarkerInstance]:
        """Move keyboard focus to the next marker (choice order, then tab index)."""
        ordered = [
            instance
            for choice in self.session.choices.values()
            for instance in sorted(choice.instances, key=lambda i: i.tab_index)
        ]
        if not ordered:
            self._focused = None
            return None
        if self._focused in ordered:
            self._focused = ordered[(ordered.index(self._focused) + 1) % len(ordered)]
        else:
            self._focused = ordered[0]
        self.update()
        return self._focused

    # ─────────────────────────────────────────────────────────────────────────
    # Painting
    # ─────────────────────────────────────────────────────────────────────────

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        if self._pixmap.isNull():
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, "Background image unavailable")
            painter.end()
            return

        geo = self.image_geometry()
        painter.setPen(QPen(QColor("black"), BORDER_WIDTH))
        painter.drawRect(geo.position.x, geo.position.y, geo.width + 1, geo.height + 1)
        painter.drawPixmap(geo.position.x + BORDER_WIDTH, geo.position.y + BORDER_WIDTH, self._pixmap)

        self._paint_overlay(painter)
        self._paint_labels(painter)
        self._paint_homes(painter)
        self._paint_markers(painter)
        painter.end()

    def _paint_overlay(self, painter: QPainter) -> None:
        overlay = self.session.overlay
        if overlay is None:
            return
        painter.save()
        painter.translate(overlay.left, overlay.top)
        painter.setPen(QPen(QColor("black"), 1))
        for primitive in overlay.primitives:
            fill = QColor(primitive.colour)
            fill.setAlphaF(primitive.fill_opacity)
            painter.setBrush(fill)
            shape = primitive.shape
            if isinstance(shape, Circle):
                painter.drawEllipse(QPointF(shape.cx, shape.cy), shape.r, shape.r)
            elif isinstance(shape, Rectangle):
                painter.drawRect(shape.x, shape.y, shape.w, shape.h)
            else:
                painter.drawPolygon(QPolygon([QPoint(p.x, p.y) for p in shape.points]))
        painter.restore()

    def _paint_labels(self, painter: QPainter) -> None:
        for label in self.session.labels.values():
            if label.origin is None:
                continue
            width, height = self._measure_label(label)
            rect = QRect(round(label.origin[0]), round(label.origin[1]), width, height)
            background = QColor("white")
            background.setAlphaF(LABEL_OPACITY)
            painter.fillRect(rect, background)
            painter.setPen(QColor("#0000EE") if label.linked else QColor("black"))
            painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, label.text)

    def _paint_homes(self, painter: QPainter) -> None:
        painter.setPen(QColor("black"))
        for choice in self.session.choices.values():
            width, height = self._text_size(choice.label)
            painter.drawText(
                QRect(choice.home.x, choice.home.y, width, height),
                Qt.AlignmentFlag.AlignCenter,
                choice.label,
            )

    def _paint_markers(self, painter: QPainter) -> None:
        colour = QColor("black")
        colour.setAlphaF(MARKER_OPACITY)
        arm = self.MARKER_HIT // 2
        for choice in self.session.choices.values():
            for instance in choice.instances:
                x, y = self.controller.markers.viewport_xy(instance)
                focused = instance is self._focused
                painter.setPen(QPen(QColor("#1565C0") if focused else colour, 2 if focused else 1))
                painter.drawLine(x - arm, y, x + arm, y)
                painter.drawLine(x, y - arm, x, y + arm)
                painter.drawText(QPoint(x + arm + 2, y - 2), instance.label)
