"""
Side panel for editing the selected text annotation.
"""
from typing import Optional

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QColor
from PyQt5.QtWidgets import (
    QColorDialog,
    QDoubleSpinBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QSizePolicy,
    QToolButton,
    QVBoxLayout,
)

from inkstamp.core.annotations import TextAnnotation


class TextPropertiesPanel(QFrame):
    """Edits the content, font size and colour of one text annotation."""

    # Signals
    property_changed = pyqtSignal(str, dict)  # annotation id, patch
    editing_finished = pyqtSignal(str)  # annotation id

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("TextPropertiesPanel")
        self.annotation_id: Optional[str] = None
        self.current_color = "#000000"

        self.setup_ui()
        self.hide()

    def setup_ui(self):
        self.setFixedWidth(260)
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Preferred)

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(12, 10, 12, 10)
        main_layout.setSpacing(8)

        # Header
        header_layout = QHBoxLayout()
        header_label = QLabel("Edit Text", self)
        header_label.setStyleSheet("font-weight: bold; color: #8899AA;")
        header_layout.addWidget(header_label)
        header_layout.addStretch()
        main_layout.addLayout(header_layout)

        self.text_edit = QLineEdit(self)
        self.text_edit.setPlaceholderText("Text")
        self.text_edit.editingFinished.connect(self._on_text_edited)
        main_layout.addWidget(self.text_edit)

        # Font size
        size_layout = QHBoxLayout()
        size_label = QLabel("Size:", self)
        size_label.setStyleSheet("color: #8899AA;")
        size_layout.addWidget(size_label)

        self.size_spin = QDoubleSpinBox(self)
        self.size_spin.setRange(4.0, 144.0)
        self.size_spin.setDecimals(0)
        self.size_spin.valueChanged.connect(self._on_size_changed)
        size_layout.addWidget(self.size_spin)
        size_layout.addStretch()
        main_layout.addLayout(size_layout)

        # Color picker
        color_layout = QHBoxLayout()
        color_label = QLabel("Color:", self)
        color_label.setStyleSheet("color: #8899AA;")
        color_layout.addWidget(color_label)

        self.color_button = QToolButton(self)
        self.color_button.setToolTip("Choose color")
        self.color_button.setFixedSize(32, 32)
        self.color_button.clicked.connect(self._choose_color)
        color_layout.addWidget(self.color_button)
        color_layout.addStretch()
        main_layout.addLayout(color_layout)

        self.done_button = QToolButton(self)
        self.done_button.setText("Done")
        self.done_button.setFixedHeight(32)
        self.done_button.clicked.connect(self._on_done)
        main_layout.addWidget(self.done_button, alignment=Qt.AlignRight)

        main_layout.addStretch()
        self._update_color_button()

    def edit(self, annotation: TextAnnotation) -> None:
        """Show the panel for ``annotation``."""
        self.annotation_id = annotation.id
        self.current_color = annotation.color

        # Populate without echoing the values back as edits
        self.size_spin.blockSignals(True)
        self.text_edit.setText(annotation.text)
        self.size_spin.setValue(annotation.font_size)
        self.size_spin.blockSignals(False)
        self._update_color_button()

        self.show()
        self.text_edit.setFocus()
        self.text_edit.selectAll()

    def refresh(self, annotation: Optional[TextAnnotation]) -> None:
        """Follow external changes (undo, redo, delete) of the edited annotation."""
        if annotation is None or not annotation.editing:
            self.annotation_id = None
            self.hide()
            return
        if not self.text_edit.hasFocus():
            self.text_edit.setText(annotation.text)
        self.size_spin.blockSignals(True)
        self.size_spin.setValue(annotation.font_size)
        self.size_spin.blockSignals(False)
        self.current_color = annotation.color
        self._update_color_button()

    def _on_text_edited(self):
        if self.annotation_id:
            self.property_changed.emit(self.annotation_id, {'text': self.text_edit.text()})

    def _on_size_changed(self, value: float):
        if self.annotation_id:
            self.property_changed.emit(self.annotation_id, {'font_size': float(value)})

    def _choose_color(self):
        """Open color picker dialog."""
        color = QColorDialog.getColor(QColor(self.current_color), self, "Choose Text Color")
        if color.isValid() and self.annotation_id:
            self.current_color = color.name()
            self._update_color_button()
            self.property_changed.emit(self.annotation_id, {'color': self.current_color})

    def _on_done(self):
        if self.annotation_id:
            annotation_id = self.annotation_id
            self._on_text_edited()
            self.annotation_id = None
            self.hide()
            self.editing_finished.emit(annotation_id)

    def _update_color_button(self):
        """Update the color button to show the current color."""
        self.color_button.setStyleSheet(f"""
            QToolButton {{
                background-color: {self.current_color};
                border: 2px solid #555555;
                border-radius: 4px;
            }}
            QToolButton:hover {{
                border: 2px solid #777777;
            }}
        """)
