"""
Main annotation manager that coordinates all annotation operations.
"""
import logging
import uuid
from dataclasses import replace
from typing import Any, Dict, List, Optional

from .history import AnnotationHistory
from .models import Annotation, TextAnnotation

logger = logging.getLogger(__name__)


class AnnotationManager:
    """Owns the live annotations of the open document and their undo history."""

    def __init__(self, page_count: int = 0, history_limit: Optional[int] = None):
        self._annotations: List[Annotation] = []
        self.page_count: int = page_count
        self.history = AnnotationHistory(max_size=history_limit)

    @property
    def annotations(self) -> List[Annotation]:
        """A copy of the live collection, in insertion order."""
        return list(self._annotations)

    @property
    def history_index(self) -> int:
        return self.history.index

    def reset(self, page_count: int = 0) -> None:
        """
        Forget all annotations and history, e.g. when a new document loads.

        Args:
            page_count: Number of pages of the new document (0 if none)
        """
        self._annotations = []
        self.page_count = page_count
        self.history.reset()

    def add(self, annotation: Annotation) -> Annotation:
        """
        Add an annotation under a freshly generated id.

        Args:
            annotation: Annotation to add; any id it carries is replaced

        Returns:
            The stored annotation with its new id

        Raises:
            ValueError: If the annotation's page is outside the document
        """
        if self.page_count and not 1 <= annotation.page <= self.page_count:
            raise ValueError(
                f"Page {annotation.page} is outside the document (1-{self.page_count})"
            )

        stored = replace(annotation, id=uuid.uuid4().hex)
        self._annotations.append(stored)
        self.commit()
        logger.debug(f"Added {stored.kind.value} annotation {stored.id} on page {stored.page}")
        return stored

    def update(self, annotation_id: str, **patch: Any) -> Optional[Annotation]:
        """
        Merge ``patch`` into the annotation with ``annotation_id``.

        Returns:
            The updated annotation, or None if no annotation has that id
        """
        updated = self._replace(annotation_id, patch)
        if updated is not None:
            self.commit()
        return updated

    def move(self, annotation_id: str, x: float, y: float) -> Optional[Annotation]:
        """
        Reposition an annotation without recording a history step.

        Used for every pointer move of a drag; call :meth:`commit` on release
        so the whole drag becomes a single undo step.
        """
        return self._replace(annotation_id, {'x': x, 'y': y})

    def set_editing(self, annotation_id: str, editing: bool) -> Optional[Annotation]:
        """Switch a text annotation in or out of edit mode."""
        annotation = self.get(annotation_id)
        if not isinstance(annotation, TextAnnotation):
            return None
        return self.update(annotation_id, editing=editing)

    def delete(self, annotation_id: str) -> bool:
        """
        Remove an annotation.

        Returns:
            True if the annotation was found and removed
        """
        for index, annotation in enumerate(self._annotations):
            if annotation.id == annotation_id:
                del self._annotations[index]
                self.commit()
                return True
        return False

    def clear_all(self) -> None:
        """Remove every annotation. This is a hard reset and cannot be undone."""
        self._annotations = []
        self.history.reset()

    def commit(self) -> bool:
        """
        Record the live collection as a history step if it changed.

        Returns:
            True if a new snapshot was recorded
        """
        return self.history.push_state(self._annotations)

    def undo(self) -> bool:
        """
        Restore the previous snapshot.

        Returns:
            True if undo was performed
        """
        previous_state = self.history.undo()
        if previous_state is None:
            return False
        self._annotations = list(previous_state)
        return True

    def redo(self) -> bool:
        """
        Re-apply the snapshot undone last.

        Returns:
            True if redo was performed
        """
        next_state = self.history.redo()
        if next_state is None:
            return False
        self._annotations = list(next_state)
        return True

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return self.history.can_undo()

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return self.history.can_redo()

    def get(self, annotation_id: str) -> Optional[Annotation]:
        for annotation in self._annotations:
            if annotation.id == annotation_id:
                return annotation
        return None

    def get_annotations_for_page(self, page: int) -> List[Annotation]:
        """
        Get all annotations for a specific page.

        Args:
            page: 1-based page number

        Returns:
            Annotations on the page in drawing order
        """
        return [ann for ann in self._annotations if ann.page == page]

    def annotations_by_page(self) -> Dict[int, List[Annotation]]:
        """Group the live annotations by page number."""
        grouped: Dict[int, List[Annotation]] = {}
        for ann in self._annotations:
            grouped.setdefault(ann.page, []).append(ann)
        return grouped

    def get_annotation_at_point(self, page: int, x: float, y: float) -> Optional[Annotation]:
        """
        Get the topmost annotation under a display-space point.

        Args:
            page: 1-based page number
            x: X coordinate in display pixels
            y: Y coordinate in display pixels

        Returns:
            The topmost annotation at the point, or None
        """
        for ann in reversed(self.get_annotations_for_page(page)):
            x0, y0, x1, y1 = ann.bounds()
            if x0 <= x <= x1 and y0 <= y <= y1:
                return ann
        return None

    def get_annotation_count(self) -> int:
        """Get total number of annotations."""
        return len(self._annotations)

    def _replace(self, annotation_id: str, patch: Dict[str, Any]) -> Optional[Annotation]:
        if 'id' in patch:
            raise ValueError("An annotation's id cannot be changed")

        for index, annotation in enumerate(self._annotations):
            if annotation.id == annotation_id:
                updated = replace(annotation, **patch)
                self._annotations[index] = updated
                return updated
        return None
