"""
Annotation system for PDF documents.
"""
from .models import (
    Annotation,
    AnnotationKind,
    SignatureAnnotation,
    TextAnnotation,
    hex_to_rgb,
)
from .history import AnnotationHistory
from .manager import AnnotationManager

__all__ = [
    'Annotation',
    'AnnotationKind',
    'SignatureAnnotation',
    'TextAnnotation',
    'hex_to_rgb',
    'AnnotationHistory',
    'AnnotationManager',
]
