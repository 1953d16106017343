"""
Editor session: the single open document, its view state and annotations.
"""
import logging
import mimetypes
import os
from typing import Dict, Optional

from inkstamp.core.annotations import (
    Annotation,
    AnnotationManager,
    SignatureAnnotation,
    TextAnnotation,
)
from inkstamp.core.config import EditorConfig
from inkstamp.core.document.compositor import DocumentCompositor, ExportResult
from inkstamp.core.document.renderer import DocumentRenderer, RenderedPage, RenderRequest
from inkstamp.core.errors import (
    DocumentLoadError,
    EditorError,
    ExportError,
    FileRejectedError,
    PageRenderError,
)
from inkstamp.core.page.transform import Size, canvas_size_for_scale
from inkstamp.core.signature.capture import CapturedSignature, SignatureFormat

logger = logging.getLogger(__name__)

PDF_SIGNATURE = b"%PDF-"
PDF_MIME_TYPE = "application/pdf"


class EditorSession:
    """
    Owns the source bytes, the render state and the annotation manager.

    Rendering is split into ``begin_render`` / ``apply_render`` so the caller
    can run the actual rasterisation elsewhere: only the most recent request
    is ever applied, older completions are discarded.
    """

    def __init__(self, config: Optional[EditorConfig] = None):
        self.config = config or EditorConfig()

        self.renderer = DocumentRenderer()
        self.annotations = AnnotationManager(history_limit=self.config.history_limit)
        self.compositor = DocumentCompositor(
            font_name=self.config.font_name,
            text_baseline_ratio=self.config.text_baseline_ratio,
            signature_image_scale=self.config.signature_image_scale,
            filename=self.config.export_filename,
        )

        self.source: Optional[bytes] = None
        self.filename: Optional[str] = None

        # View state
        self.current_page: int = 1
        self.scale: float = self.config.default_scale

        # Render bookkeeping
        self.displayed: Optional[RenderRequest] = None
        self.display_size: Optional[Size] = None
        self._canvas_sizes: Dict[int, Size] = {}
        self._ticket: int = 0

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------

    @property
    def page_count(self) -> int:
        return self.renderer.page_count

    def is_loaded(self) -> bool:
        """Check if a document is currently loaded."""
        return self.source is not None

    def validate_upload(self, data: bytes, filename: Optional[str] = None) -> None:
        """
        Reject files that are too large or are not PDFs.

        Raises:
            FileRejectedError: With a message suitable for the user
        """
        self._check_upload_size(len(data))

        named_pdf = False
        if filename:
            mime_type, _ = mimetypes.guess_type(filename)
            named_pdf = mime_type == PDF_MIME_TYPE or filename.lower().endswith('.pdf')

        if not named_pdf and not data.startswith(PDF_SIGNATURE):
            raise FileRejectedError("Please select a valid PDF file")

    def _check_upload_size(self, size: int) -> None:
        if size > self.config.max_upload_bytes:
            limit_mb = self.config.max_upload_bytes / (1024 * 1024)
            raise FileRejectedError(f"PDF file size must be less than {limit_mb:g}MB")

    def load_document(self, data: bytes, filename: Optional[str] = None) -> int:
        """
        Replace the open document.

        The previous document, its annotations and history are discarded
        before validation, so a failed load also leaves a clean session.

        Args:
            data: Raw PDF bytes
            filename: Optional name used for the type check

        Returns:
            Number of pages

        Raises:
            FileRejectedError: If the file fails the size or type check
            DocumentLoadError: If the bytes are not a readable PDF
        """
        self.close_document()
        self.validate_upload(data, filename)

        page_count = self.renderer.load(data)
        self.source = bytes(data)
        self.filename = filename
        self.annotations.reset(page_count)
        logger.info(f"Opened {filename or 'document'} ({page_count} pages)")
        return page_count

    def load_file(self, path: str) -> int:
        """Read a PDF from disk and load it."""
        try:
            self._check_upload_size(os.path.getsize(path))
            with open(path, 'rb') as f:
                data = f.read()
        except OSError as e:
            self.close_document()
            raise DocumentLoadError(f"Could not read {path}: {e}") from e
        except FileRejectedError:
            self.close_document()
            raise
        return self.load_document(data, os.path.basename(path))

    def close_document(self) -> None:
        """Close the document and reset all session state."""
        self.renderer.close()
        self.annotations.reset()
        self.source = None
        self.filename = None
        self.current_page = 1
        self.displayed = None
        self.display_size = None
        self._canvas_sizes.clear()
        self._ticket += 1  # anything still rendering is now stale

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def begin_render(self, page_number: Optional[int] = None,
                     scale: Optional[float] = None) -> RenderRequest:
        """
        Issue a render request for the current (or given) page and scale.

        The new request supersedes every earlier one.

        Raises:
            PageRenderError: If no document is loaded or the page is out of range
        """
        if not self.is_loaded():
            raise PageRenderError("No document is loaded")

        if page_number is not None:
            if not 1 <= page_number <= self.page_count:
                raise PageRenderError(
                    f"Page {page_number} is out of range (1-{self.page_count})", page_number
                )
            self.current_page = page_number
        if scale is not None:
            self.set_scale(scale)

        self._ticket += 1
        return RenderRequest(self._ticket, self.current_page, self.scale)

    def is_current(self, request: RenderRequest) -> bool:
        """True if no newer render request has been issued."""
        return request.ticket == self._ticket

    def apply_render(self, request: RenderRequest, page: RenderedPage) -> bool:
        """
        Record a finished render if it is still the latest request.

        Returns:
            False if the result was stale and has been discarded
        """
        if not self.is_current(request):
            logger.debug(f"Discarding stale render of page {request.page_number}")
            return False

        self.displayed = request
        self.display_size = page.display_size
        self._canvas_sizes[page.page_number] = page.display_size
        return True

    def fail_render(self, request: RenderRequest, error: str = "") -> bool:
        """
        Record a failed render if it is still the latest request.

        The displayed size is cleared so nothing keeps using the old raster.

        Returns:
            False if the failure was stale and has been discarded
        """
        if not self.is_current(request):
            return False
        logger.warning(f"Render of page {request.page_number} failed: {error}")
        self.displayed = None
        self.display_size = None
        return True

    def render_current(self) -> RenderedPage:
        """Render the current page synchronously and record the result."""
        request = self.begin_render()
        try:
            page = self.renderer.render_page(request.page_number, request.scale)
        except PageRenderError as e:
            self.fail_render(request, str(e))
            raise
        self.apply_render(request, page)
        return page

    def has_current_render(self) -> bool:
        """True if the displayed raster matches the current page and scale."""
        return (self.displayed is not None
                and self.displayed.page_number == self.current_page
                and self.displayed.scale == self.scale)

    # ------------------------------------------------------------------
    # Navigation and zoom
    # ------------------------------------------------------------------

    def go_to_page(self, page_number: int) -> bool:
        """
        Move to a page.

        Returns:
            True if the current page changed
        """
        if not 1 <= page_number <= self.page_count or page_number == self.current_page:
            return False
        self.current_page = page_number
        return True

    def next_page(self) -> bool:
        return self.go_to_page(self.current_page + 1)

    def previous_page(self) -> bool:
        return self.go_to_page(self.current_page - 1)

    def set_scale(self, scale: float) -> None:
        """
        Set the zoom factor.

        Raises:
            ValueError: If the scale is outside the configured range
        """
        if not self.config.min_scale <= scale <= self.config.max_scale:
            raise ValueError(
                f"Scale {scale} outside {self.config.min_scale}-{self.config.max_scale}"
            )
        self.scale = scale

    def zoom_by(self, delta: float) -> bool:
        """
        Change the zoom by ``delta``, rounded to one decimal.

        Returns:
            True if the new scale is within range and was applied
        """
        new_scale = round((self.scale + delta) * 10) / 10
        if not self.config.min_scale <= new_scale <= self.config.max_scale:
            return False
        if new_scale == self.scale:
            return False
        self.scale = new_scale
        return True

    def zoom_in(self) -> bool:
        return self.zoom_by(self.config.scale_step)

    def zoom_out(self) -> bool:
        return self.zoom_by(-self.config.scale_step)

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    def add_text_annotation(self, text: Optional[str] = None, x: Optional[float] = None,
                            y: Optional[float] = None, color: Optional[str] = None,
                            font_size: Optional[float] = None) -> TextAnnotation:
        """
        Place a text label on the current page.

        Position defaults to the centre of the displayed page.

        Raises:
            EditorError: If the current page has not been rendered yet
        """
        display = self._require_display()
        annotation = TextAnnotation(
            page=self.current_page,
            x=display.width / 2 if x is None else x,
            y=display.height / 2 if y is None else y,
            text=self.config.default_text if text is None else text,
            color=color or self.config.default_color,
            font_size=font_size or self.config.default_font_size,
            editing=True,
        )
        return self.annotations.add(annotation)

    def add_signature_annotation(self, captured: CapturedSignature,
                                 x: Optional[float] = None,
                                 y: Optional[float] = None) -> SignatureAnnotation:
        """
        Place a captured signature on the current page.

        Raster signatures are shown at the same reduced scale they are
        exported at; vector signatures keep the capture surface size.

        Raises:
            EditorError: If the current page has not been rendered yet
        """
        display = self._require_display()
        if captured.format == SignatureFormat.IMAGE:
            width = captured.width * self.config.signature_image_scale
            height = captured.height * self.config.signature_image_scale
        else:
            width, height = captured.width, captured.height

        annotation = SignatureAnnotation(
            page=self.current_page,
            x=display.width / 2 if x is None else x,
            y=display.height / 2 if y is None else y,
            width=width,
            height=height,
            stroke_paths=captured.stroke_paths,
            image_data=captured.image_data,
            color=captured.color,
            line_width=captured.line_width,
        )
        return self.annotations.add(annotation)

    def update_annotation(self, annotation_id: str, **patch) -> Optional[Annotation]:
        return self.annotations.update(annotation_id, **patch)

    def delete_annotation(self, annotation_id: str) -> bool:
        return self.annotations.delete(annotation_id)

    def undo(self) -> bool:
        return self.annotations.undo()

    def redo(self) -> bool:
        return self.annotations.redo()

    def clear_annotations(self) -> None:
        self.annotations.clear_all()

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def canvas_size_for(self, page_number: int) -> Size:
        """
        Display size to use when exporting annotations on ``page_number``.

        This is the size the page had when it was last rendered; a page that
        was never rendered falls back to its native size at the current scale.
        """
        recorded = self._canvas_sizes.get(page_number)
        if recorded is not None:
            return recorded
        return canvas_size_for_scale(self.renderer.page_size(page_number), self.scale)

    def canvas_sizes(self) -> Dict[int, Size]:
        """Export canvas sizes for every page that carries annotations."""
        sizes = {}
        for page_number in self.annotations.annotations_by_page():
            if 1 <= page_number <= self.page_count:
                sizes[page_number] = self.canvas_size_for(page_number)
        return sizes

    def export(self) -> ExportResult:
        """
        Composite all annotations into a new PDF.

        Raises:
            ExportError: If no document is loaded or compositing fails
        """
        if self.source is None:
            raise ExportError("No PDF document is currently loaded")
        return self.compositor.compose(
            self.source, self.annotations.annotations, self.canvas_sizes()
        )

    def _require_display(self) -> Size:
        if not self.has_current_render() or self.display_size is None:
            raise EditorError("The current page has not been rendered yet")
        return self.display_size
