"""
Page canvas showing the rendered page with its annotation overlays.
"""
from typing import Dict, List, Optional, Tuple

from PyQt5.QtCore import QPointF, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import (
    QColor,
    QContextMenuEvent,
    QFont,
    QImage,
    QKeyEvent,
    QMouseEvent,
    QPainter,
    QPainterPath,
    QPen,
    QPixmap,
)
from PyQt5.QtWidgets import QLabel, QMenu

from inkstamp.core.annotations import Annotation, SignatureAnnotation, TextAnnotation
from inkstamp.core.document.renderer import RenderedPage


class PageCanvas(QLabel):
    """
    Displays one rendered page and lets the user manipulate annotations.

    Features:
    - Drag annotations to reposition them
    - Double-click a text label to edit it
    - Right-click or press Delete to remove an annotation
    """

    # Signals
    annotation_selected = pyqtSignal(object)  # annotation id or None
    annotation_moved = pyqtSignal(str, float, float)  # id, x, y
    move_finished = pyqtSignal()
    edit_requested = pyqtSignal(str)  # annotation id
    delete_requested = pyqtSignal(str)  # annotation id

    SELECTION_COLOR = QColor(74, 158, 255)

    def __init__(self, parent=None):
        super().__init__(parent)

        self.annotations: List[Annotation] = []
        self.selected_id: Optional[str] = None
        self.page: Optional[RenderedPage] = None

        # Drag state
        self._drag_id: Optional[str] = None
        self._drag_offset: Tuple[float, float] = (0.0, 0.0)
        self._dragged = False

        # Decoded raster signatures, keyed by PNG bytes
        self._image_cache: Dict[bytes, QImage] = {}

        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setMouseTracking(True)

    def set_page(self, page: RenderedPage) -> None:
        """Show a freshly rendered page."""
        image_format = QImage.Format_RGBA8888 if page.has_alpha else QImage.Format_RGB888
        image = QImage(page.samples, page.width, page.height, page.stride, image_format)
        # QImage does not own the buffer; copy before the bytes go away
        self.setPixmap(QPixmap.fromImage(image.copy()))
        self.setFixedSize(page.width, page.height)
        self.page = page
        self.update()

    def clear_page(self) -> None:
        self.page = None
        self.annotations = []
        self.selected_id = None
        self.clear()
        self.update()

    def set_annotations(self, annotations: List[Annotation]) -> None:
        """Set annotations to display on this page."""
        self.annotations = list(annotations)
        if self.selected_id and not any(a.id == self.selected_id for a in self.annotations):
            self.select(None)
        self.update()

    def select(self, annotation_id: Optional[str]) -> None:
        if annotation_id != self.selected_id:
            self.selected_id = annotation_id
            self.annotation_selected.emit(annotation_id)
            self.update()

    def annotation_at(self, x: float, y: float) -> Optional[Annotation]:
        """Topmost annotation under (x, y)."""
        for annotation in reversed(self.annotations):
            x0, y0, x1, y1 = annotation.bounds()
            if x0 <= x <= x1 and y0 <= y <= y1:
                return annotation
        return None

    # Mouse event handlers

    def mousePressEvent(self, event: QMouseEvent):
        self.setFocus()

        if event.button() != Qt.LeftButton:
            return super().mousePressEvent(event)

        pos = event.pos()
        annotation = self.annotation_at(pos.x(), pos.y())
        if annotation is None:
            self.select(None)
            return

        self.select(annotation.id)
        self._drag_id = annotation.id
        self._drag_offset = (pos.x() - annotation.x, pos.y() - annotation.y)
        self._dragged = False
        self.setCursor(Qt.ClosedHandCursor)

    def mouseMoveEvent(self, event: QMouseEvent):
        pos = event.pos()

        if self._drag_id and (event.buttons() & Qt.LeftButton):
            self._dragged = True
            self.annotation_moved.emit(
                self._drag_id,
                pos.x() - self._drag_offset[0],
                pos.y() - self._drag_offset[1],
            )
            return

        if self.annotation_at(pos.x(), pos.y()) is not None:
            self.setCursor(Qt.OpenHandCursor)
        else:
            self.setCursor(Qt.ArrowCursor)

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() != Qt.LeftButton:
            return super().mouseReleaseEvent(event)

        if self._drag_id and self._dragged:
            self.move_finished.emit()
        self._drag_id = None
        self._dragged = False
        self.setCursor(Qt.ArrowCursor)

    def mouseDoubleClickEvent(self, event: QMouseEvent):
        pos = event.pos()
        annotation = self.annotation_at(pos.x(), pos.y())
        if isinstance(annotation, TextAnnotation):
            self.select(annotation.id)
            self.edit_requested.emit(annotation.id)

    def contextMenuEvent(self, event: QContextMenuEvent):
        pos = event.pos()
        annotation = self.annotation_at(pos.x(), pos.y())
        if annotation is None:
            return

        self.select(annotation.id)
        menu = QMenu(self)
        if isinstance(annotation, TextAnnotation):
            edit_action = menu.addAction("Edit Text")
            edit_action.triggered.connect(lambda: self.edit_requested.emit(annotation.id))
        delete_action = menu.addAction("Delete")
        delete_action.triggered.connect(lambda: self.delete_requested.emit(annotation.id))
        menu.exec_(event.globalPos())

    def keyPressEvent(self, event: QKeyEvent):
        if event.key() in (Qt.Key_Delete, Qt.Key_Backspace) and self.selected_id:
            self.delete_requested.emit(self.selected_id)
            return
        super().keyPressEvent(event)

    # Paint methods

    def paintEvent(self, event):
        super().paintEvent(event)
        if self.page is None:
            return

        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        try:
            for annotation in self.annotations:
                if isinstance(annotation, TextAnnotation):
                    self._paint_text(painter, annotation)
                elif annotation.is_vector:
                    self._paint_strokes(painter, annotation)
                else:
                    self._paint_image(painter, annotation)

                if annotation.id == self.selected_id:
                    self._paint_selection(painter, annotation)
        finally:
            painter.end()

    def _paint_text(self, painter: QPainter, ann: TextAnnotation):
        """Paint a text label anchored at its top-left corner."""
        font = QFont("Helvetica")
        font.setPixelSize(max(1, round(ann.font_size)))
        painter.setFont(font)
        painter.setPen(QColor(ann.color))

        x0, y0, x1, y1 = ann.bounds()
        painter.drawText(QRectF(x0, y0, x1 - x0, y1 - y0), Qt.AlignLeft | Qt.AlignTop, ann.text)

        if ann.editing:
            pen = QPen(QColor(150, 150, 150), 1, Qt.DashLine)
            painter.setPen(pen)
            painter.setBrush(Qt.NoBrush)
            painter.drawRect(QRectF(x0 - 2, y0 - 2, x1 - x0 + 4, y1 - y0 + 4))

    def _paint_strokes(self, painter: QPainter, ann: SignatureAnnotation):
        """Paint a vector signature; points are relative to the box corner."""
        pen = QPen(QColor(ann.color), ann.line_width)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)

        for stroke in ann.stroke_paths:
            if not stroke:
                continue
            first = stroke[0]
            if len(stroke) == 1:
                painter.drawPoint(QPointF(ann.x + first[0], ann.y + first[1]))
                continue

            path = QPainterPath()
            path.moveTo(ann.x + first[0], ann.y + first[1])
            for point in stroke[1:]:
                path.lineTo(ann.x + point[0], ann.y + point[1])
            painter.drawPath(path)

    def _paint_image(self, painter: QPainter, ann: SignatureAnnotation):
        """Paint a raster signature scaled into its box."""
        image = self._image_cache.get(ann.image_data)
        if image is None:
            image = QImage.fromData(ann.image_data, "PNG")
            self._image_cache[ann.image_data] = image
        if image.isNull():
            return
        painter.drawImage(QRectF(ann.x, ann.y, ann.width, ann.height), image)

    def _paint_selection(self, painter: QPainter, ann: Annotation):
        x0, y0, x1, y1 = ann.bounds()
        pen = QPen(self.SELECTION_COLOR, 1, Qt.DashLine)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(QRectF(x0 - 3, y0 - 3, x1 - x0 + 6, y1 - y0 + 6))
