"""
Coordinate conversion between the display surface and PDF page space.

Display space: pixels of the rendered page, origin top-left, y down.
Document space: PDF units of the page, origin bottom-left, y up.
"""
from dataclasses import dataclass
from typing import Tuple

Point = Tuple[float, float]


@dataclass(frozen=True)
class Size:
    """Width and height pair, in pixels or PDF units depending on context."""

    width: float
    height: float


@dataclass(frozen=True)
class ScaleFactors:
    """Document units per display pixel along each axis."""

    x: float
    y: float


def canvas_size_for_scale(page_size: Size, scale: float) -> Size:
    """Size of the display surface a page renders to at ``scale``."""
    return Size(page_size.width * scale, page_size.height * scale)


def scale_factors(page_size: Size, canvas_size: Size) -> ScaleFactors:
    """
    Compute the display-to-document scale factors for a page.

    Args:
        page_size: Native page size in document units
        canvas_size: Size of the rendered page in display pixels

    Returns:
        Factors to multiply display coordinates by

    Raises:
        ValueError: If the canvas has not been populated yet
    """
    if canvas_size.width <= 0 or canvas_size.height <= 0:
        raise ValueError(
            f"Canvas size {canvas_size.width}x{canvas_size.height} is not populated; "
            "render the page before converting coordinates"
        )
    return ScaleFactors(
        page_size.width / canvas_size.width,
        page_size.height / canvas_size.height,
    )


def to_document_space(point: Point, page_size: Size, canvas_size: Size,
                      vertical_adjustment: float = 0.0) -> Point:
    """
    Convert a display-space point to document space.

    Args:
        point: (x, y) in display pixels
        page_size: Native page size
        canvas_size: Rendered page size
        vertical_adjustment: Height in document units of the drawn item
            below its anchor, so its visual top-left matches the display

    Returns:
        (x, y) in document units, origin bottom-left
    """
    factors = scale_factors(page_size, canvas_size)
    doc_x = point[0] * factors.x
    doc_y = page_size.height - (point[1] * factors.y) - vertical_adjustment
    return doc_x, doc_y


def to_display_space(doc_point: Point, page_size: Size, canvas_size: Size,
                     vertical_adjustment: float = 0.0) -> Point:
    """Inverse of :func:`to_document_space` for the same adjustment."""
    factors = scale_factors(page_size, canvas_size)
    x = doc_point[0] / factors.x
    y = (page_size.height - doc_point[1] - vertical_adjustment) / factors.y
    return x, y


def scale_magnitude(value: float, page_size: Size, canvas_size: Size) -> float:
    """
    Scale a font size or line width into document units.

    Only the horizontal factor is used, so a non-uniformly scaled canvas
    distorts glyphs and strokes.
    """
    return value * scale_factors(page_size, canvas_size).x


def to_page_space(doc_point: Point, page_size: Size) -> Point:
    """Flip a document-space point into PyMuPDF's top-left page space."""
    return doc_point[0], page_size.height - doc_point[1]
