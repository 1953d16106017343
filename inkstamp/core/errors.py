"""
Exceptions raised by the editor core.

Every error here is recoverable: the controller turns it into an inline
message and the user retries by repeating the action.
"""


class EditorError(Exception):
    """Base class for all editor errors."""


class FileRejectedError(EditorError):
    """The selected file failed the size or type check before loading."""


class DocumentLoadError(EditorError):
    """The document bytes could not be parsed."""


class PageRenderError(EditorError):
    """A page could not be rasterised at the requested scale."""

    def __init__(self, message: str, page_number: int = 0):
        super().__init__(message)
        self.page_number = page_number


class ExportError(EditorError):
    """The annotated document could not be produced."""
