"""
PDF document rendering and export compositing.
"""
from .compositor import DocumentCompositor, ExportResult
from .renderer import DocumentRenderer, RenderedPage, RenderRequest

__all__ = [
    'DocumentCompositor',
    'ExportResult',
    'DocumentRenderer',
    'RenderedPage',
    'RenderRequest',
]
