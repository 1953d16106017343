"""
Toolbar components for editor operations.
"""
from .editor_toolbar import EditorToolbar

__all__ = ['EditorToolbar']
