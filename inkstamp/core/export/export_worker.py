"""
Background worker for exporting the annotated PDF.
"""
import logging
import os
import shutil
import tempfile
from typing import List, Mapping, Optional

from PyQt5.QtCore import QThread, pyqtSignal

from inkstamp.core.annotations.models import Annotation
from inkstamp.core.document.compositor import DocumentCompositor, ExportResult
from inkstamp.core.errors import EditorError
from inkstamp.core.page.transform import Size

logger = logging.getLogger(__name__)


class ExportWorker(QThread):
    """Worker thread for compositing annotations without freezing the UI."""

    # Signals
    finished = pyqtSignal(bool, str)  # success, message
    exported = pyqtSignal(object)  # ExportResult
    progress = pyqtSignal(str)  # status message
    page_progress = pyqtSignal(int, int)  # current, total pages

    def __init__(self, compositor: DocumentCompositor, source: bytes,
                 annotations: List[Annotation], canvas_sizes: Mapping[int, Size],
                 output_path: Optional[str] = None, parent=None):
        super().__init__(parent)
        self.compositor = compositor
        self.source = source
        self.annotations = list(annotations)
        self.canvas_sizes = dict(canvas_sizes)
        self.output_path = output_path
        self.result: Optional[ExportResult] = None

    def run(self):
        """Execute the export in a background thread."""
        temp_path = None
        try:
            self.progress.emit("Exporting annotations...")
            self.result = self.compositor.compose(
                self.source,
                self.annotations,
                self.canvas_sizes,
                progress=self.page_progress.emit,
            )

            if self.output_path:
                self.progress.emit("Finalizing...")
                # Write next to the target first so a failed write never
                # leaves a truncated file behind
                output_dir = os.path.dirname(os.path.abspath(self.output_path))
                temp_fd, temp_path = tempfile.mkstemp(suffix='.pdf', dir=output_dir)
                with os.fdopen(temp_fd, 'wb') as f:
                    f.write(self.result.data)
                shutil.move(temp_path, self.output_path)
                temp_path = None

            self.exported.emit(self.result)
            if self.result.has_skipped:
                self.finished.emit(
                    True,
                    f"Exported with {len(self.result.skipped)} annotation(s) skipped.",
                )
            else:
                self.finished.emit(True, "Annotations exported successfully!")

        except EditorError as e:
            self.finished.emit(False, str(e))
        except Exception as e:
            logger.error(f"Error during export: {e}", exc_info=True)
            self.finished.emit(False, f"Error during export: {e}")
        finally:
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)
