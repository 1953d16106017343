"""
Background worker for page rendering.
"""
import logging

from PyQt5.QtCore import QThread, pyqtSignal

from inkstamp.core.errors import EditorError
from .renderer import DocumentRenderer, RenderRequest

logger = logging.getLogger(__name__)


class RenderWorker(QThread):
    """
    Renders one page without freezing the UI.

    Each worker opens its own document handle from the source bytes; the
    controller runs one worker at a time.
    """

    # Signals
    rendered = pyqtSignal(object, object)  # RenderRequest, RenderedPage
    failed = pyqtSignal(object, str)  # RenderRequest, error message

    def __init__(self, source: bytes, request: RenderRequest, parent=None):
        super().__init__(parent)
        self._source = source
        self.request = request

    def run(self):
        """Execute the render in a background thread."""
        renderer = DocumentRenderer()
        try:
            renderer.load(self._source)
            page = renderer.render_page(self.request.page_number, self.request.scale)
            self.rendered.emit(self.request, page)
        except EditorError as e:
            self.failed.emit(self.request, str(e))
        except Exception as e:
            logger.error(f"Unexpected error rendering page {self.request.page_number}: {e}",
                         exc_info=True)
            self.failed.emit(self.request, f"Failed to render page: {e}")
        finally:
            renderer.close()
