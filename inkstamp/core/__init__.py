"""
Core business logic for the Inkstamp PDF annotator.
"""
from .annotations import AnnotationManager, SignatureAnnotation, TextAnnotation
from .config import EditorConfig
from .errors import (
    DocumentLoadError,
    EditorError,
    ExportError,
    FileRejectedError,
    PageRenderError,
)
from .session import EditorSession

__all__ = [
    'AnnotationManager', 'TextAnnotation', 'SignatureAnnotation',
    'EditorConfig', 'EditorSession',
    'EditorError', 'FileRejectedError', 'DocumentLoadError', 'PageRenderError', 'ExportError',
]
