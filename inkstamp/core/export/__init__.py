"""
Background export of annotated documents.
"""
from .export_worker import ExportWorker

__all__ = ['ExportWorker']
