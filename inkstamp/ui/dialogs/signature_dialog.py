"""
Signature drawing pad and the dialog around it.
"""
from typing import Optional

from PyQt5.QtCore import QPointF, Qt
from PyQt5.QtGui import QColor, QMouseEvent, QPainter, QPainterPath, QPen
from PyQt5.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from inkstamp.core.signature import CapturedSignature, SignatureCapture, SignatureFormat


class SignaturePad(QWidget):
    """Fixed-size surface that feeds pointer gestures into a SignatureCapture."""

    def __init__(self, capture: SignatureCapture, parent=None):
        super().__init__(parent)
        self.capture = capture
        self.setFixedSize(int(capture.width), int(capture.height))
        self.setCursor(Qt.CrossCursor)
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setStyleSheet("background-color: white; border: 1px solid #cccccc;")

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton:
            self.capture.pointer_down(event.pos().x(), event.pos().y())
            self.update()

    def mouseMoveEvent(self, event: QMouseEvent):
        if event.buttons() & Qt.LeftButton:
            self.capture.pointer_move(event.pos().x(), event.pos().y())
            self.update()

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton:
            self.capture.pointer_up()
            self.update()

    def leaveEvent(self, event):
        # Leaving the pad ends the stroke
        self.capture.pointer_up()
        super().leaveEvent(event)

    def clear(self):
        self.capture.clear()
        self.update()

    def paintEvent(self, event):
        super().paintEvent(event)

        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        pen = QPen(QColor(self.capture.color), self.capture.line_width)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        painter.setPen(pen)

        for stroke in self.capture.paths:
            if len(stroke) == 1:
                painter.drawPoint(QPointF(*stroke[0]))
                continue
            path = QPainterPath()
            path.moveTo(*stroke[0])
            for point in stroke[1:]:
                path.lineTo(*point)
            painter.drawPath(path)
        painter.end()


class SignatureDialog(QDialog):
    """Modal dialog for drawing a signature."""

    def __init__(self, width: int = 400, height: int = 200, color: str = "#000000",
                 line_width: float = 2.0, fmt: SignatureFormat = SignatureFormat.PATHS,
                 parent=None):
        super().__init__(parent)
        self.setWindowTitle("Add Signature")
        self.setModal(True)

        self.format = fmt
        self.capture = SignatureCapture(width, height, color, line_width)
        self._signature: Optional[CapturedSignature] = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(10)

        hint = QLabel("Draw your signature below", self)
        hint.setStyleSheet("color: #8899AA;")
        layout.addWidget(hint)

        self.pad = SignaturePad(self.capture, self)
        layout.addWidget(self.pad)

        button_layout = QHBoxLayout()
        self.clear_button = QPushButton("Clear", self)
        self.clear_button.clicked.connect(self.pad.clear)
        button_layout.addWidget(self.clear_button)
        button_layout.addStretch()

        self.cancel_button = QPushButton("Cancel", self)
        self.cancel_button.clicked.connect(self.reject)
        button_layout.addWidget(self.cancel_button)

        self.save_button = QPushButton("Save Signature", self)
        self.save_button.setDefault(True)
        self.save_button.clicked.connect(self._on_save)
        button_layout.addWidget(self.save_button)

        layout.addLayout(button_layout)

    def signature(self) -> Optional[CapturedSignature]:
        """The saved signature, or None if the dialog was cancelled."""
        return self._signature

    def _on_save(self):
        self._signature = self.capture.save(self.format)
        self.accept()
