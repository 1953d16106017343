"""
Annotation data models.

Annotations are immutable; every change produces a new object through
``dataclasses.replace`` so history snapshots can share them safely.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

import fitz  # PyMuPDF

Point = Tuple[float, float]
StrokePath = Tuple[Point, ...]
Bounds = Tuple[float, float, float, float]  # x0, y0, x1, y1

TEXT_LINE_HEIGHT = 1.2


class AnnotationKind(Enum):
    TEXT = "text"
    SIGNATURE = "signature"


def hex_to_rgb(color: str) -> Tuple[float, float, float]:
    """
    Convert a ``#rrggbb`` (or ``#rgb``) colour to PyMuPDF's 0-1 floats.

    Raises:
        ValueError: If the string is not a hex colour
    """
    value = color.lstrip('#')
    if len(value) == 3:
        value = ''.join(c * 2 for c in value)
    if len(value) != 6:
        raise ValueError(f"Invalid hex color: {color!r}")
    number = int(value, 16)
    return (
        ((number >> 16) & 255) / 255.0,
        ((number >> 8) & 255) / 255.0,
        (number & 255) / 255.0,
    )


@dataclass(frozen=True)
class TextAnnotation:
    """A text label anchored at its top-left corner in display pixels."""

    page: int  # 1-based page number
    x: float
    y: float
    text: str = "Double-click to edit"
    color: str = "#000000"
    font_size: float = 16.0
    editing: bool = True
    id: str = ""

    @property
    def kind(self) -> AnnotationKind:
        return AnnotationKind.TEXT

    def bounds(self) -> Bounds:
        """Approximate on-screen box of the label, measured in Helvetica."""
        lines = self.text.split('\n')
        width = max(fitz.get_text_length(line, fontname="helv", fontsize=self.font_size)
                    for line in lines)
        # An emptied label stays one em wide so it can still be picked
        width = max(width, self.font_size)
        height = len(lines) * self.font_size * TEXT_LINE_HEIGHT
        return self.x, self.y, self.x + width, self.y + height


@dataclass(frozen=True)
class SignatureAnnotation:
    """
    A signature placed as a box on the page.

    Exactly one representation is carried: ``stroke_paths`` (vector strokes
    relative to the box's top-left corner) or ``image_data`` (PNG bytes with
    a transparent background).
    """

    page: int  # 1-based page number
    x: float
    y: float
    width: float
    height: float
    stroke_paths: Optional[Tuple[StrokePath, ...]] = None
    image_data: Optional[bytes] = None
    color: str = "#000000"
    line_width: float = 2.0
    id: str = ""

    def __post_init__(self):
        if (self.stroke_paths is None) == (self.image_data is None):
            raise ValueError(
                "SignatureAnnotation needs exactly one of stroke_paths or image_data"
            )

    @property
    def kind(self) -> AnnotationKind:
        return AnnotationKind.SIGNATURE

    @property
    def is_vector(self) -> bool:
        return self.stroke_paths is not None

    def bounds(self) -> Bounds:
        return self.x, self.y, self.x + self.width, self.y + self.height


Annotation = Union[TextAnnotation, SignatureAnnotation]
