"""
Top toolbar: document, navigation, zoom, annotation and export controls.
"""
from PyQt5.QtCore import pyqtSignal
from PyQt5.QtWidgets import QFrame, QHBoxLayout, QLabel, QToolButton


class EditorToolbar(QFrame):
    """Row of editor actions; emits one signal per action."""

    open_requested = pyqtSignal()
    close_requested = pyqtSignal()
    previous_page_requested = pyqtSignal()
    next_page_requested = pyqtSignal()
    zoom_out_requested = pyqtSignal()
    zoom_in_requested = pyqtSignal()
    add_text_requested = pyqtSignal()
    add_signature_requested = pyqtSignal()
    undo_requested = pyqtSignal()
    redo_requested = pyqtSignal()
    clear_requested = pyqtSignal()
    export_requested = pyqtSignal()
    theme_toggle_requested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("TopFrame")
        self.setup_ui()
        self.set_document_loaded(False)

    def _button(self, text: str, tooltip: str, signal) -> QToolButton:
        btn = QToolButton(self)
        btn.setText(text)
        btn.setToolTip(tooltip)
        btn.setMinimumHeight(32)
        btn.clicked.connect(signal.emit)
        self.layout().addWidget(btn)
        return btn

    def _separator(self):
        separator = QFrame(self)
        separator.setFrameShape(QFrame.VLine)
        separator.setFrameShadow(QFrame.Sunken)
        separator.setStyleSheet("background-color: #555555; max-width: 1px;")
        self.layout().addWidget(separator)

    def setup_ui(self):
        layout = QHBoxLayout(self)
        layout.setContentsMargins(10, 8, 10, 8)
        layout.setSpacing(8)

        self.open_button = self._button("Open", "Open PDF (Ctrl+O)", self.open_requested)
        self.close_button = self._button("Close", "Close PDF (Ctrl+W)", self.close_requested)
        self._separator()

        self.prev_button = self._button("◀", "Previous page", self.previous_page_requested)
        self.page_label = QLabel("", self)
        self.page_label.setMinimumWidth(90)
        layout.addWidget(self.page_label)
        self.next_button = self._button("▶", "Next page", self.next_page_requested)
        self._separator()

        self.zoom_out_button = self._button("−", "Zoom out (Ctrl+-)", self.zoom_out_requested)
        self.zoom_label = QLabel("", self)
        self.zoom_label.setMinimumWidth(50)
        layout.addWidget(self.zoom_label)
        self.zoom_in_button = self._button("+", "Zoom in (Ctrl++)", self.zoom_in_requested)
        self._separator()

        self.text_button = self._button("Add Text", "Add a text label", self.add_text_requested)
        self.signature_button = self._button(
            "Add Signature", "Draw and place a signature", self.add_signature_requested
        )
        self._separator()

        self.undo_button = self._button("Undo", "Undo (Ctrl+Z)", self.undo_requested)
        self.redo_button = self._button("Redo", "Redo (Ctrl+Y)", self.redo_requested)
        self.clear_button = self._button("Clear All", "Remove every annotation", self.clear_requested)

        layout.addStretch()

        self.theme_button = self._button("Light", "Switch to Light Mode", self.theme_toggle_requested)
        self.export_button = self._button("Export PDF", "Save the annotated PDF (Ctrl+S)",
                                          self.export_requested)

    def set_document_loaded(self, loaded: bool):
        for btn in (self.close_button, self.prev_button, self.next_button, self.zoom_in_button,
                    self.zoom_out_button, self.text_button, self.signature_button,
                    self.clear_button, self.export_button):
            btn.setEnabled(loaded)
        if not loaded:
            self.page_label.setText("")
            self.zoom_label.setText("")
            self.undo_button.setEnabled(False)
            self.redo_button.setEnabled(False)

    def set_page(self, current: int, total: int):
        self.page_label.setText(f"Page {current} of {total}")
        self.prev_button.setEnabled(current > 1)
        self.next_button.setEnabled(current < total)

    def set_zoom(self, scale: float, min_scale: float, max_scale: float):
        self.zoom_label.setText(f"{round(scale * 100)}%")
        self.zoom_out_button.setEnabled(scale > min_scale)
        self.zoom_in_button.setEnabled(scale < max_scale)

    def set_history_state(self, can_undo: bool, can_redo: bool):
        self.undo_button.setEnabled(can_undo)
        self.redo_button.setEnabled(can_redo)

    def set_dark_mode(self, dark_mode: bool):
        if dark_mode:
            self.theme_button.setText("Light")
            self.theme_button.setToolTip("Switch to Light Mode")
        else:
            self.theme_button.setText("Dark")
            self.theme_button.setToolTip("Switch to Dark Mode")

    def set_exporting(self, exporting: bool):
        self.export_button.setEnabled(not exporting)
        self.export_button.setText("Exporting..." if exporting else "Export PDF")
