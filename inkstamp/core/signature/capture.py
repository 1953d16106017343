"""
Freehand signature capture.

The capture surface is toolkit independent: the Qt pad feeds it pointer
events and paints whatever paths it holds. Rasterising goes through
PyMuPDF so exported images keep a transparent background.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import fitz  # PyMuPDF

from inkstamp.core.annotations.models import Point, StrokePath, hex_to_rgb

logger = logging.getLogger(__name__)


class SignatureFormat(Enum):
    PATHS = "paths"  # vector strokes, resolution independent
    IMAGE = "image"  # PNG with transparent background


@dataclass(frozen=True)
class CapturedSignature:
    """What the capture surface hands to the annotation model."""

    width: float
    height: float
    stroke_paths: Optional[Tuple[StrokePath, ...]] = None
    image_data: Optional[bytes] = None
    color: str = "#000000"
    line_width: float = 2.0

    @property
    def format(self) -> SignatureFormat:
        return SignatureFormat.PATHS if self.stroke_paths is not None else SignatureFormat.IMAGE

    @property
    def is_empty(self) -> bool:
        """True for a vector signature without any strokes."""
        return self.stroke_paths is not None and len(self.stroke_paths) == 0


def draw_stroke(shape: fitz.Shape, points: Sequence[Point]) -> None:
    """Add one stroke to a PyMuPDF shape; a single point becomes a dot."""
    if not points:
        return
    fitz_points = [fitz.Point(float(x), float(y)) for x, y in points]
    if len(fitz_points) == 1:
        shape.draw_line(fitz_points[0], fitz_points[0])
    else:
        shape.draw_polyline(fitz_points)


class SignatureCapture:
    """Collects pointer gestures on a fixed-size drawing surface."""

    def __init__(self, width: int = 400, height: int = 200,
                 color: str = "#000000", line_width: float = 2.0):
        self.width = width
        self.height = height
        self.color = color
        self.line_width = line_width

        self._paths: List[List[Point]] = []
        self._current: Optional[List[Point]] = None

    @property
    def is_drawing(self) -> bool:
        return self._current is not None

    @property
    def paths(self) -> Tuple[StrokePath, ...]:
        """All strokes so far, including the one being drawn."""
        return tuple(tuple(path) for path in self._paths)

    def pointer_down(self, x: float, y: float) -> None:
        """Start a new stroke at (x, y)."""
        self._current = [self._clamp(x, y)]
        self._paths.append(self._current)

    def pointer_move(self, x: float, y: float) -> None:
        """Extend the current stroke; ignored when no stroke is active."""
        if self._current is None:
            return
        point = self._clamp(x, y)
        if self._current[-1] != point:
            self._current.append(point)

    def pointer_up(self) -> None:
        """Finish the current stroke."""
        self._current = None

    def clear(self) -> None:
        """Discard every stroke; the surface is fully transparent again."""
        self._paths = []
        self._current = None

    def save(self, fmt: SignatureFormat = SignatureFormat.PATHS) -> CapturedSignature:
        """
        Export the signature.

        Args:
            fmt: Vector paths or a rasterised PNG

        Returns:
            The captured signature in the requested representation
        """
        self.pointer_up()
        if fmt == SignatureFormat.IMAGE:
            return CapturedSignature(
                width=self.width,
                height=self.height,
                image_data=self.to_png(),
                color=self.color,
                line_width=self.line_width,
            )
        return CapturedSignature(
            width=self.width,
            height=self.height,
            stroke_paths=self.paths,
            color=self.color,
            line_width=self.line_width,
        )

    def to_png(self) -> bytes:
        """Rasterise the strokes onto a transparent PNG of the surface size."""
        doc = fitz.open()
        try:
            page = doc.new_page(width=self.width, height=self.height)
            if self._paths:
                shape = page.new_shape()
                for path in self._paths:
                    draw_stroke(shape, path)
                shape.finish(
                    color=hex_to_rgb(self.color),
                    width=self.line_width,
                    lineCap=1,
                    lineJoin=1,
                    closePath=False,
                )
                shape.commit()
            pix = page.get_pixmap(alpha=True)
            logger.debug(f"Rasterised signature with {len(self._paths)} strokes")
            return pix.tobytes("png")
        finally:
            doc.close()

    def _clamp(self, x: float, y: float) -> Point:
        return (
            min(max(float(x), 0.0), float(self.width)),
            min(max(float(y), 0.0), float(self.height)),
        )
