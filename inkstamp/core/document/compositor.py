"""
Burns annotations into a copy of the source PDF.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Set, Union

import fitz  # PyMuPDF

from inkstamp.core.annotations.models import (
    Annotation,
    SignatureAnnotation,
    TextAnnotation,
    hex_to_rgb,
)
from inkstamp.core.errors import ExportError
from inkstamp.core.page.transform import (
    Size,
    scale_factors,
    scale_magnitude,
    to_document_space,
    to_page_space,
)
from inkstamp.core.signature.capture import draw_stroke

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass
class ExportResult:
    """The annotated document plus a report of what was drawn."""

    data: bytes
    page_count: int
    pages_touched: Set[int] = field(default_factory=set)
    skipped: List[str] = field(default_factory=list)  # ids of annotations not drawn
    filename: str = "annotated.pdf"

    @property
    def has_skipped(self) -> bool:
        return bool(self.skipped)

    def save(self, path: Union[str, Path]) -> Path:
        """Write the exported bytes to ``path``."""
        path = Path(path)
        path.write_bytes(self.data)
        logger.info(f"Saved annotated PDF to {path}")
        return path


class DocumentCompositor:
    """Draws text and signature annotations onto the pages of a PDF."""

    def __init__(self, font_name: str = "helv", text_baseline_ratio: float = 0.8,
                 signature_image_scale: float = 0.5, filename: str = "annotated.pdf"):
        """
        Args:
            font_name: PyMuPDF base-14 font name used for text annotations
            text_baseline_ratio: Share of the font size between the label's top
                edge and its baseline
            signature_image_scale: Size of a raster signature relative to its
                pixel dimensions
            filename: Suggested file name for the exported document
        """
        self.font_name = font_name
        self.text_baseline_ratio = text_baseline_ratio
        self.signature_image_scale = signature_image_scale
        self.filename = filename

    def compose(self, source: bytes, annotations: Iterable[Annotation],
                canvas_sizes: Mapping[int, Size],
                progress: Optional[ProgressCallback] = None) -> ExportResult:
        """
        Produce a new PDF with every annotation drawn on its page.

        Args:
            source: Original PDF bytes; never modified
            annotations: Annotations in display coordinates
            canvas_sizes: Display size each page was rendered at, by page number
            progress: Optional callback receiving (pages done, pages total)

        Returns:
            The exported document and the ids of annotations that were skipped

        Raises:
            ExportError: If the source cannot be parsed or the output cannot be written
        """
        try:
            doc = fitz.open(stream=source, filetype="pdf")
        except Exception as e:
            raise ExportError(f"Failed to open the source PDF for export: {e}") from e

        try:
            # Group annotations by page for efficiency
            annotations_by_page: Dict[int, List[Annotation]] = {}
            for ann in annotations:
                annotations_by_page.setdefault(ann.page, []).append(ann)

            skipped: List[str] = []
            pages_touched: Set[int] = set()
            total_pages = len(annotations_by_page)

            for done, page_number in enumerate(sorted(annotations_by_page)):
                if progress:
                    progress(done, total_pages)

                page_annotations = annotations_by_page[page_number]
                if not 1 <= page_number <= doc.page_count:
                    logger.warning(
                        f"Page {page_number} out of range (doc has {doc.page_count} pages); "
                        f"skipping {len(page_annotations)} annotations"
                    )
                    skipped.extend(ann.id for ann in page_annotations)
                    continue

                canvas_size = canvas_sizes.get(page_number)
                if canvas_size is None:
                    logger.warning(f"No rendered size known for page {page_number}; skipping it")
                    skipped.extend(ann.id for ann in page_annotations)
                    continue

                page = doc[page_number - 1]
                pages_touched.add(page_number)

                for ann in page_annotations:
                    try:
                        self._add_annotation_to_page(page, ann, canvas_size)
                    except Exception as e:
                        logger.error(f"Failed to add annotation {ann.id} on page {page_number}: {e}")
                        skipped.append(ann.id)

            if progress:
                progress(total_pages, total_pages)

            try:
                data = doc.tobytes(garbage=4, deflate=True)
            except Exception as e:
                raise ExportError(f"Failed to write the annotated PDF: {e}") from e

            return ExportResult(
                data=data,
                page_count=doc.page_count,
                pages_touched=pages_touched,
                skipped=skipped,
                filename=self.filename,
            )
        finally:
            doc.close()

    def _add_annotation_to_page(self, page: fitz.Page, annotation: Annotation,
                                canvas_size: Size) -> None:
        """Add a single annotation to a PDF page."""
        page_size = Size(page.rect.width, page.rect.height)

        if isinstance(annotation, TextAnnotation):
            self._draw_text(page, annotation, page_size, canvas_size)
        elif isinstance(annotation, SignatureAnnotation):
            if annotation.is_vector:
                self._draw_strokes(page, annotation, page_size, canvas_size)
            else:
                self._draw_image(page, annotation, page_size, canvas_size)
        else:
            raise TypeError(f"Unsupported annotation type: {type(annotation).__name__}")

    def _draw_text(self, page: fitz.Page, annotation: TextAnnotation,
                   page_size: Size, canvas_size: Size) -> None:
        factors = scale_factors(page_size, canvas_size)
        baseline_offset = annotation.font_size * factors.y * self.text_baseline_ratio

        doc_point = to_document_space(
            (annotation.x, annotation.y), page_size, canvas_size, baseline_offset
        )
        font_size = scale_magnitude(annotation.font_size, page_size, canvas_size)

        page.insert_text(
            fitz.Point(*to_page_space(doc_point, page_size)),
            annotation.text,
            fontsize=font_size,
            fontname=self.font_name,
            color=hex_to_rgb(annotation.color),
        )

    def _draw_strokes(self, page: fitz.Page, annotation: SignatureAnnotation,
                      page_size: Size, canvas_size: Size) -> None:
        if not annotation.stroke_paths:
            logger.debug(f"Signature {annotation.id} has no strokes; nothing to draw")
            return

        color = hex_to_rgb(annotation.color)
        shape = page.new_shape()
        for path in annotation.stroke_paths:
            points = [
                to_page_space(
                    to_document_space(
                        (annotation.x + px, annotation.y + py), page_size, canvas_size
                    ),
                    page_size,
                )
                for px, py in path
            ]
            draw_stroke(shape, points)

        shape.finish(
            color=color,
            width=scale_magnitude(annotation.line_width, page_size, canvas_size),
            lineCap=1,
            lineJoin=1,
            closePath=False,
        )
        shape.commit()

    def _draw_image(self, page: fitz.Page, annotation: SignatureAnnotation,
                    page_size: Size, canvas_size: Size) -> None:
        # Decoding first rejects malformed data before the page is touched
        pix = fitz.Pixmap(annotation.image_data)
        width = pix.width * self.signature_image_scale
        height = pix.height * self.signature_image_scale

        doc_x, doc_y = to_document_space(
            (annotation.x, annotation.y), page_size, canvas_size, height
        )
        left, bottom = to_page_space((doc_x, doc_y), page_size)
        rect = fitz.Rect(left, bottom - height, left + width, bottom)

        page.insert_image(rect, stream=annotation.image_data, keep_proportion=False)
