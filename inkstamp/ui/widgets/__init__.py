"""
Custom widgets for page display and annotation editing.
"""
from .page_canvas import PageCanvas
from .text_properties import TextPropertiesPanel

__all__ = ['PageCanvas', 'TextPropertiesPanel']
