"""
Controller connecting the editor session to the UI.
"""
import logging
from typing import List, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from inkstamp.core.annotations import Annotation
from inkstamp.core.document.render_worker import RenderWorker
from inkstamp.core.document.renderer import RenderedPage, RenderRequest
from inkstamp.core.errors import EditorError
from inkstamp.core.export import ExportWorker
from inkstamp.core.session import EditorSession
from inkstamp.core.signature import CapturedSignature

logger = logging.getLogger(__name__)


class EditorController(QObject):
    """
    Runs document, render and annotation operations for the main window.

    Renders and exports run on worker threads. At most one render runs at a
    time and a render that completes after a newer one was requested is
    dropped.
    """

    # Signals
    document_loaded = pyqtSignal(int)  # page count
    document_closed = pyqtSignal()
    page_changed = pyqtSignal(int, int)  # current page, page count
    zoom_changed = pyqtSignal(float)
    page_rendered = pyqtSignal(object)  # RenderedPage
    annotations_changed = pyqtSignal()
    export_started = pyqtSignal()
    export_progress = pyqtSignal(str)
    export_finished = pyqtSignal(object)  # ExportResult
    export_ended = pyqtSignal(bool)  # success
    error_occurred = pyqtSignal(str, str)  # title, message

    def __init__(self, session: EditorSession, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.session = session
        self._render_worker: Optional[RenderWorker] = None
        self._pending_render: Optional[RenderRequest] = None
        self._export_worker: Optional[ExportWorker] = None

    # ------------------------------------------------------------------
    # Document
    # ------------------------------------------------------------------

    def open_file(self, path: str) -> bool:
        """
        Load a PDF from disk and start rendering its first page.

        Returns:
            True if the document was loaded
        """
        try:
            page_count = self.session.load_file(path)
        except EditorError as e:
            self._document_failed(e)
            return False
        self._document_opened(page_count)
        return True

    def open_bytes(self, data: bytes, filename: Optional[str] = None) -> bool:
        """Load a PDF already held in memory."""
        try:
            page_count = self.session.load_document(data, filename)
        except EditorError as e:
            self._document_failed(e)
            return False
        self._document_opened(page_count)
        return True

    def close_document(self) -> None:
        self._pending_render = None
        self.session.close_document()
        self.annotations_changed.emit()
        self.document_closed.emit()

    def _document_opened(self, page_count: int) -> None:
        self.document_loaded.emit(page_count)
        self.annotations_changed.emit()
        self._emit_view_state()
        self.request_render()

    def _document_failed(self, error: EditorError) -> None:
        logger.warning(f"Could not open document: {error}")
        # The session has already been reset, the UI must follow
        self.annotations_changed.emit()
        self.document_closed.emit()
        self.error_occurred.emit("Error", str(error))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def is_rendering(self) -> bool:
        return self._render_worker is not None

    def request_render(self) -> None:
        """
        Render the current page at the current scale on a worker thread.

        Only one render runs at a time. A request made while one is in flight
        waits in a single slot, replacing any request already waiting there,
        and starts once the running worker has finished.
        """
        if not self.session.is_loaded():
            return

        request = self.session.begin_render()
        if self.is_rendering():
            self._pending_render = request
            return
        self._start_render(request)

    def _start_render(self, request: RenderRequest) -> None:
        worker = RenderWorker(self.session.source, request)
        worker.rendered.connect(self._on_page_rendered)
        worker.failed.connect(self._on_render_failed)
        worker.finished.connect(self._on_render_worker_finished)
        self._render_worker = worker
        worker.start()

    def _on_page_rendered(self, request: RenderRequest, page: RenderedPage) -> None:
        if self.session.apply_render(request, page):
            self.page_rendered.emit(page)

    def _on_render_failed(self, request: RenderRequest, message: str) -> None:
        if self.session.fail_render(request, message):
            self.error_occurred.emit("Render Error", message)

    def _on_render_worker_finished(self) -> None:
        worker = self._render_worker
        self._render_worker = None
        if worker is not None:
            worker.wait()
            worker.deleteLater()

        request = self._pending_render
        self._pending_render = None
        if request is not None and self.session.is_loaded() and self.session.is_current(request):
            self._start_render(request)

    # ------------------------------------------------------------------
    # Navigation and zoom
    # ------------------------------------------------------------------

    def next_page(self) -> None:
        if self.session.next_page():
            self._view_changed()

    def previous_page(self) -> None:
        if self.session.previous_page():
            self._view_changed()

    def go_to_page(self, page_number: int) -> None:
        if self.session.go_to_page(page_number):
            self._view_changed()

    def zoom_in(self) -> None:
        if self.session.zoom_in():
            self._view_changed()

    def zoom_out(self) -> None:
        if self.session.zoom_out():
            self._view_changed()

    def _view_changed(self) -> None:
        self._emit_view_state()
        self.annotations_changed.emit()
        self.request_render()

    def _emit_view_state(self) -> None:
        self.page_changed.emit(self.session.current_page, self.session.page_count)
        self.zoom_changed.emit(self.session.scale)

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    def add_text(self) -> Optional[Annotation]:
        """Add a default text label at the centre of the current page."""
        try:
            annotation = self.session.add_text_annotation()
        except EditorError as e:
            self.error_occurred.emit("Add Text", str(e))
            return None
        self.annotations_changed.emit()
        return annotation

    def add_signature(self, captured: CapturedSignature) -> Optional[Annotation]:
        """Place a captured signature at the centre of the current page."""
        if captured.is_empty:
            return None
        try:
            annotation = self.session.add_signature_annotation(captured)
        except EditorError as e:
            self.error_occurred.emit("Add Signature", str(e))
            return None
        self.annotations_changed.emit()
        return annotation

    def update_annotation(self, annotation_id: str, **patch) -> None:
        try:
            updated = self.session.update_annotation(annotation_id, **patch)
        except ValueError as e:
            self.error_occurred.emit("Edit Annotation", str(e))
            return
        if updated is not None:
            self.annotations_changed.emit()

    def set_editing(self, annotation_id: str, editing: bool) -> None:
        if self.session.annotations.set_editing(annotation_id, editing) is not None:
            self.annotations_changed.emit()

    def move_annotation(self, annotation_id: str, x: float, y: float) -> None:
        """Reposition during a drag; no history step is recorded."""
        if self.session.annotations.move(annotation_id, x, y) is not None:
            self.annotations_changed.emit()

    def finish_move(self) -> None:
        """Record the end of a drag as one history step."""
        if self.session.annotations.commit():
            self.annotations_changed.emit()

    def delete_annotation(self, annotation_id: str) -> bool:
        if self.session.delete_annotation(annotation_id):
            self.annotations_changed.emit()
            return True
        return False

    def undo(self) -> bool:
        """
        Undo the last annotation action.

        Returns:
            True if undo was successful
        """
        if self.session.undo():
            self.annotations_changed.emit()
            return True
        return False

    def redo(self) -> bool:
        """
        Redo the last undone annotation action.

        Returns:
            True if redo was successful
        """
        if self.session.redo():
            self.annotations_changed.emit()
            return True
        return False

    def clear_annotations(self) -> None:
        self.session.clear_annotations()
        self.annotations_changed.emit()

    def current_page_annotations(self) -> List[Annotation]:
        return self.session.annotations.get_annotations_for_page(self.session.current_page)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def is_exporting(self) -> bool:
        return self._export_worker is not None and self._export_worker.isRunning()

    def export(self, output_path: Optional[str] = None) -> bool:
        """
        Start exporting the annotated document.

        Args:
            output_path: Where to write the result; if None the bytes are only
                delivered through ``export_finished``

        Returns:
            True if the export was started
        """
        if not self.session.is_loaded():
            self.error_occurred.emit("Export", "No PDF document is currently loaded.")
            return False
        if self.is_exporting():
            return False

        worker = ExportWorker(
            self.session.compositor,
            self.session.source,
            self.session.annotations.annotations,
            self.session.canvas_sizes(),
            output_path,
        )
        worker.progress.connect(self.export_progress.emit)
        worker.page_progress.connect(self._on_export_page_progress)
        worker.exported.connect(self.export_finished.emit)
        worker.finished.connect(self._on_export_finished)
        self._export_worker = worker
        self.export_started.emit()
        worker.start()
        return True

    def _on_export_page_progress(self, done: int, total: int) -> None:
        self.export_progress.emit(f"Exporting annotations... {done}/{total} pages")

    def _on_export_finished(self, success: bool, message: str) -> None:
        if success:
            self.export_progress.emit(message)
        else:
            self.error_occurred.emit("Export Error", message)
        if self._export_worker is not None:
            # finished is emitted from inside run(); let the thread return first
            self._export_worker.wait()
            self._export_worker.deleteLater()
            self._export_worker = None
        self.export_ended.emit(success)

    def shutdown(self) -> None:
        """Wait for running workers before the application exits."""
        self._pending_render = None
        if self._render_worker is not None:
            self._render_worker.wait()
        if self._export_worker is not None:
            self._export_worker.wait()
