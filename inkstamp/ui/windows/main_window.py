import logging
import os
from typing import Optional

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QDragEnterEvent, QDropEvent, QIcon, QKeySequence
from PyQt5.QtWidgets import (
    QDialog,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QScrollArea,
    QShortcut,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from inkstamp.controllers import EditorController
from inkstamp.core.annotations import TextAnnotation
from inkstamp.core.config import EditorConfig
from inkstamp.core.document.compositor import ExportResult
from inkstamp.core.session import EditorSession
from inkstamp.core.signature import SignatureFormat
from inkstamp.styles.theme_manager import apply_style
from inkstamp.ui.dialogs.signature_dialog import SignatureDialog
from inkstamp.ui.toolbars.editor_toolbar import EditorToolbar
from inkstamp.ui.widgets.page_canvas import PageCanvas
from inkstamp.ui.widgets.text_properties import TextPropertiesPanel
from inkstamp.utils.resource_loader import get_icon_path, resource_exists
from inkstamp.utils.warning_manager import WarningType, warning_manager

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, config: Optional[EditorConfig] = None, file_path: Optional[str] = None):
        super().__init__()

        if resource_exists("resources/icons/inkstamp.ico"):
            self.setWindowIcon(QIcon(get_icon_path("inkstamp.ico")))
        self.setWindowTitle("Inkstamp")
        self.setAcceptDrops(True)

        self.config = config or EditorConfig()
        self.session = EditorSession(self.config)
        self.controller = EditorController(self.session, self)
        self.dark_mode = True
        self._export_path: Optional[str] = None

        self.setup_ui()
        self.setup_shortcuts()
        self.connect_signals()
        apply_style(self, self.dark_mode)

        if file_path:
            self.controller.open_file(file_path)

    def setup_ui(self):
        central = QWidget(self)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        self.toolbar = EditorToolbar(central)
        main_layout.addWidget(self.toolbar)

        # Inline error message, hidden until something fails
        self.error_label = QLabel("", central)
        self.error_label.setObjectName("errorLabel")
        self.error_label.setWordWrap(True)
        self.error_label.setContentsMargins(12, 6, 12, 6)
        self.error_label.hide()
        main_layout.addWidget(self.error_label)

        body_layout = QHBoxLayout()
        body_layout.setContentsMargins(0, 0, 0, 0)
        body_layout.setSpacing(0)

        self.stack = QStackedWidget(central)

        self.drop_hint = QLabel("Drop a PDF here or click Open", self.stack)
        self.drop_hint.setObjectName("dropHint")
        self.drop_hint.setAlignment(Qt.AlignCenter)
        self.stack.addWidget(self.drop_hint)

        self.scroll_area = QScrollArea(self.stack)
        self.scroll_area.setAlignment(Qt.AlignCenter)
        self.canvas = PageCanvas()
        self.scroll_area.setWidget(self.canvas)
        self.stack.addWidget(self.scroll_area)

        body_layout.addWidget(self.stack, 1)

        self.text_panel = TextPropertiesPanel(central)
        body_layout.addWidget(self.text_panel)

        main_layout.addLayout(body_layout, 1)

        self.status_label = QLabel("", central)
        self.status_label.setObjectName("statusLabel")
        self.status_label.setContentsMargins(12, 4, 12, 4)
        main_layout.addWidget(self.status_label)

        self.setCentralWidget(central)
        self.resize(1100, 850)

    def setup_shortcuts(self):
        QShortcut(QKeySequence.Open, self, activated=self.open_pdf)
        QShortcut(QKeySequence.Save, self, activated=self.export_pdf)
        QShortcut(QKeySequence("Ctrl+W"), self, activated=self.close_pdf)
        QShortcut(QKeySequence.Undo, self, activated=self.controller.undo)
        QShortcut(QKeySequence.Redo, self, activated=self.controller.redo)
        QShortcut(QKeySequence("Ctrl+Y"), self, activated=self.controller.redo)
        QShortcut(QKeySequence.ZoomIn, self, activated=self.controller.zoom_in)
        QShortcut(QKeySequence.ZoomOut, self, activated=self.controller.zoom_out)
        QShortcut(QKeySequence(Qt.Key_PageDown), self, activated=self.controller.next_page)
        QShortcut(QKeySequence(Qt.Key_PageUp), self, activated=self.controller.previous_page)

    def connect_signals(self):
        # Toolbar
        self.toolbar.open_requested.connect(self.open_pdf)
        self.toolbar.close_requested.connect(self.close_pdf)
        self.toolbar.previous_page_requested.connect(self.controller.previous_page)
        self.toolbar.next_page_requested.connect(self.controller.next_page)
        self.toolbar.zoom_in_requested.connect(self.controller.zoom_in)
        self.toolbar.zoom_out_requested.connect(self.controller.zoom_out)
        self.toolbar.add_text_requested.connect(self.add_text)
        self.toolbar.add_signature_requested.connect(self.add_signature)
        self.toolbar.undo_requested.connect(self.controller.undo)
        self.toolbar.redo_requested.connect(self.controller.redo)
        self.toolbar.clear_requested.connect(self.clear_annotations)
        self.toolbar.export_requested.connect(self.export_pdf)
        self.toolbar.theme_toggle_requested.connect(self.toggle_mode)

        # Controller
        self.controller.document_loaded.connect(self.on_document_loaded)
        self.controller.document_closed.connect(self.on_document_closed)
        self.controller.page_changed.connect(self.toolbar.set_page)
        self.controller.zoom_changed.connect(self.on_zoom_changed)
        self.controller.page_rendered.connect(self.on_page_rendered)
        self.controller.annotations_changed.connect(self.refresh_annotations)
        self.controller.export_started.connect(lambda: self.toolbar.set_exporting(True))
        self.controller.export_progress.connect(self.status_label.setText)
        self.controller.export_finished.connect(self.on_export_finished)
        self.controller.export_ended.connect(lambda _: self.toolbar.set_exporting(False))
        self.controller.error_occurred.connect(self.show_error)

        # Canvas
        self.canvas.annotation_moved.connect(self.controller.move_annotation)
        self.canvas.move_finished.connect(self.controller.finish_move)
        self.canvas.edit_requested.connect(self.edit_text)
        self.canvas.delete_requested.connect(self.delete_annotation)

        # Text panel
        self.text_panel.property_changed.connect(
            lambda annotation_id, patch: self.controller.update_annotation(annotation_id, **patch)
        )
        self.text_panel.editing_finished.connect(
            lambda annotation_id: self.controller.set_editing(annotation_id, False)
        )

    # ------------------------------------------------------------------
    # Document
    # ------------------------------------------------------------------

    def open_pdf(self):
        """Let the user pick a PDF to open."""
        path, _ = QFileDialog.getOpenFileName(self, "Open PDF", "", "PDF Files (*.pdf)")
        if path:
            self.load_pdf(path)

    def load_pdf(self, path: str):
        if not self._confirm_replace():
            return
        self.controller.open_file(path)

    def close_pdf(self):
        if not self.session.is_loaded():
            return
        if self.session.annotations.get_annotation_count():
            confirmed = warning_manager.show_confirmation(
                self,
                WarningType.CLOSE_DOCUMENT,
                "Close Document",
                "Closing the PDF discards all current annotations. Continue?",
            )
            if not confirmed:
                return
        self.controller.close_document()

    def _confirm_replace(self) -> bool:
        if not self.session.annotations.get_annotation_count():
            return True
        return warning_manager.show_confirmation(
            self,
            WarningType.REPLACE_DOCUMENT,
            "Replace Document",
            "Opening another PDF discards all current annotations. Continue?",
        )

    def dragEnterEvent(self, event: QDragEnterEvent):
        if self._dropped_pdf_path(event) is not None:
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event: QDropEvent):
        path = self._dropped_pdf_path(event)
        if path is None:
            event.ignore()
            return
        event.acceptProposedAction()
        self.load_pdf(path)

    @staticmethod
    def _dropped_pdf_path(event) -> Optional[str]:
        mime = event.mimeData()
        if not mime.hasUrls():
            return None
        for url in mime.urls():
            if url.isLocalFile():
                return url.toLocalFile()
        return None

    def on_document_loaded(self, page_count: int):
        self.clear_error()
        self.text_panel.refresh(None)
        self.canvas.clear_page()
        self.stack.setCurrentWidget(self.scroll_area)
        self.toolbar.set_document_loaded(True)
        name = self.session.filename or "document"
        self.setWindowTitle(f"Inkstamp - {name}")
        self.status_label.setText(f"{name}: {page_count} page(s)")

    def on_document_closed(self):
        self.canvas.clear_page()
        self.text_panel.refresh(None)
        self.stack.setCurrentWidget(self.drop_hint)
        self.toolbar.set_document_loaded(False)
        self.setWindowTitle("Inkstamp")
        self.status_label.setText("")

    def on_zoom_changed(self, scale: float):
        self.toolbar.set_zoom(scale, self.config.min_scale, self.config.max_scale)

    def on_page_rendered(self, page):
        self.clear_error()
        self.canvas.set_page(page)
        self.refresh_annotations()

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    def refresh_annotations(self):
        """Redraw overlays and sync toolbar and text panel with the session."""
        self.canvas.set_annotations(self.controller.current_page_annotations())
        if self.session.is_loaded():
            self.toolbar.set_history_state(
                self.session.annotations.can_undo(), self.session.annotations.can_redo()
            )

        if self.text_panel.annotation_id:
            annotation = self.session.annotations.get(self.text_panel.annotation_id)
            if annotation is not None and annotation.page != self.session.current_page:
                annotation = None
            self.text_panel.refresh(annotation)

    def add_text(self):
        annotation = self.controller.add_text()
        if annotation is not None:
            self.canvas.select(annotation.id)
            self.text_panel.edit(annotation)

    def edit_text(self, annotation_id: str):
        self.controller.set_editing(annotation_id, True)
        annotation = self.session.annotations.get(annotation_id)
        if isinstance(annotation, TextAnnotation):
            self.text_panel.edit(annotation)

    def add_signature(self):
        try:
            fmt = SignatureFormat(self.config.signature_format)
        except ValueError:
            fmt = SignatureFormat.PATHS

        dialog = SignatureDialog(
            self.config.signature_width,
            self.config.signature_height,
            self.config.default_color,
            self.config.signature_line_width,
            fmt,
            self,
        )
        if dialog.exec_() != QDialog.Accepted:
            return

        captured = dialog.signature()
        if captured is None or captured.is_empty:
            self.status_label.setText("Signature was empty and was not added.")
            return

        annotation = self.controller.add_signature(captured)
        if annotation is not None:
            self.canvas.select(annotation.id)

    def delete_annotation(self, annotation_id: str):
        confirmed = warning_manager.show_confirmation(
            self,
            WarningType.DELETE_ANNOTATION,
            "Delete Annotation",
            "Are you sure you want to delete this annotation?",
        )
        if confirmed:
            self.controller.delete_annotation(annotation_id)

    def clear_annotations(self):
        if not self.session.annotations.get_annotation_count():
            return
        confirmed = warning_manager.show_confirmation(
            self,
            WarningType.CLEAR_ANNOTATIONS,
            "Clear Annotations",
            "Remove every annotation? This cannot be undone.",
        )
        if confirmed:
            self.controller.clear_annotations()

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_pdf(self):
        """Ask for a destination and export the annotated PDF there."""
        if not self.session.is_loaded():
            self.show_error("Export", "No PDF document is currently loaded.")
            return

        default_dir = os.path.expanduser("~")
        default_path = os.path.join(default_dir, self.config.export_filename)

        output_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Annotated PDF",
            default_path,
            "PDF Files (*.pdf)",
            options=QFileDialog.DontConfirmOverwrite,
        )
        if not output_path:
            return

        if os.path.exists(output_path):
            confirmed = warning_manager.show_confirmation(
                self,
                WarningType.OVERWRITE_FILE,
                "Overwrite File",
                f"{os.path.basename(output_path)} already exists. Overwrite it?",
                show_dont_ask=False,
            )
            if not confirmed:
                return

        self._export_path = output_path
        self.controller.export(output_path)

    def on_export_finished(self, result: ExportResult):
        path = self._export_path
        self.status_label.setText(f"Saved {path}" if path else "Export finished")

        if result.has_skipped:
            QMessageBox.warning(
                self,
                "Export Incomplete",
                f"{len(result.skipped)} annotation(s) could not be added to the PDF.",
            )

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def show_error(self, title: str, message: str):
        logger.debug(f"{title}: {message}")
        self.error_label.setText(message)
        self.error_label.show()

    def clear_error(self):
        self.error_label.hide()
        self.error_label.setText("")

    def toggle_mode(self):
        self.dark_mode = not self.dark_mode
        self.toolbar.set_dark_mode(self.dark_mode)
        apply_style(self, self.dark_mode)

    def closeEvent(self, event):
        self.controller.shutdown()
        self.session.close_document()
        event.accept()
