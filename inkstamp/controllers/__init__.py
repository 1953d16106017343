"""
Application controllers for managing interactions between UI and core logic.
"""
from .editor_controller import EditorController

__all__ = ['EditorController']
