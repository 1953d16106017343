"""
Page geometry helpers.
"""
from .transform import (
    Point,
    ScaleFactors,
    Size,
    canvas_size_for_scale,
    scale_factors,
    scale_magnitude,
    to_display_space,
    to_document_space,
    to_page_space,
)

__all__ = [
    "Point",
    "ScaleFactors",
    "Size",
    "canvas_size_for_scale",
    "scale_factors",
    "scale_magnitude",
    "to_display_space",
    "to_document_space",
    "to_page_space",
]
