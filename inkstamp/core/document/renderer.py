"""
PDF document loading and page rasterisation.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import fitz  # PyMuPDF

from inkstamp.core.errors import DocumentLoadError, PageRenderError
from inkstamp.core.page.transform import Size

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderRequest:
    """One render request; higher tickets supersede lower ones."""

    ticket: int
    page_number: int  # 1-based
    scale: float


@dataclass(frozen=True)
class RenderedPage:
    """Raster of one page at one scale, ready to wrap in a QImage."""

    page_number: int  # 1-based
    scale: float
    width: int
    height: int
    samples: bytes
    stride: int
    has_alpha: bool = False

    @property
    def display_size(self) -> Size:
        return Size(self.width, self.height)


class DocumentRenderer:
    """Handles PDF document loading, page geometry and rendering."""

    def __init__(self):
        self.doc: Optional[fitz.Document] = None
        self.page_count: int = 0

    def load(self, data: bytes) -> int:
        """
        Open a PDF from memory.

        Args:
            data: Raw PDF bytes; the buffer is not modified

        Returns:
            Number of pages

        Raises:
            DocumentLoadError: If the bytes are not a readable PDF
        """
        self.close()

        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise DocumentLoadError(
                f"Failed to load PDF. The file might be corrupted or unsupported ({e})"
            ) from e

        if doc.needs_pass:
            doc.close()
            raise DocumentLoadError("The PDF is password protected and cannot be opened")

        if doc.page_count == 0:
            doc.close()
            raise DocumentLoadError("The PDF does not contain any pages")

        self.doc = doc
        self.page_count = doc.page_count
        logger.info(f"Loaded PDF with {self.page_count} pages")
        return self.page_count

    def close(self) -> None:
        """Close the current document and clear all state."""
        if self.doc:
            self.doc.close()
            self.doc = None
        self.page_count = 0

    def is_loaded(self) -> bool:
        """Check if a document is currently loaded."""
        return self.doc is not None

    def page_size(self, page_number: int) -> Size:
        """
        Get the native size of a page in PDF units.

        Args:
            page_number: 1-based page number

        Raises:
            PageRenderError: If no document is loaded or the page does not exist
        """
        page = self._load_page(page_number)
        return Size(page.rect.width, page.rect.height)

    def render_page(self, page_number: int, scale: float) -> RenderedPage:
        """
        Render a single page to an RGB raster.

        Args:
            page_number: 1-based page number
            scale: Zoom factor; 1.0 renders one pixel per PDF unit

        Returns:
            The rendered page

        Raises:
            PageRenderError: If the page is out of range or rendering fails
        """
        if scale <= 0:
            raise PageRenderError(f"Invalid render scale {scale}", page_number)

        page = self._load_page(page_number)
        try:
            pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
        except Exception as e:
            raise PageRenderError(
                f"Error rendering page {page_number}: {e}", page_number
            ) from e

        logger.debug(f"Rendered page {page_number} at {scale:.2f}x ({pix.width}x{pix.height})")
        return RenderedPage(
            page_number=page_number,
            scale=scale,
            width=pix.width,
            height=pix.height,
            samples=bytes(pix.samples),
            stride=pix.stride,
            has_alpha=bool(pix.alpha),
        )

    def _load_page(self, page_number: int) -> fitz.Page:
        if not self.doc:
            raise PageRenderError("No document is loaded", page_number)
        if not 1 <= page_number <= self.page_count:
            raise PageRenderError(
                f"Page {page_number} is out of range (1-{self.page_count})", page_number
            )
        try:
            return self.doc.load_page(page_number - 1)
        except Exception as e:
            raise PageRenderError(
                f"Error loading page {page_number}: {e}", page_number
            ) from e
