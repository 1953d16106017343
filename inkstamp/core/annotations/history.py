"""
Snapshot-based undo/redo history for annotations.
"""
from typing import List, Optional, Sequence, Tuple

from .models import Annotation

Snapshot = Tuple[Annotation, ...]


class AnnotationHistory:
    """
    Linear history of full annotation snapshots.

    ``index`` points at the snapshot matching the live collection. Pushing a
    new state drops any snapshots ahead of ``index`` before appending, so
    only one forward branch is ever kept.
    """

    def __init__(self, max_size: Optional[int] = None):
        """
        Initialize the history with a single empty snapshot.

        Args:
            max_size: Maximum number of snapshots to keep, or None for no limit
        """
        self.max_size = max_size
        self.snapshots: List[Snapshot] = [()]
        self.index: int = 0

    @property
    def current(self) -> Snapshot:
        return self.snapshots[self.index]

    def push_state(self, annotations: Sequence[Annotation]) -> bool:
        """
        Record the live collection if it differs from the current snapshot.

        Args:
            annotations: Live annotation collection

        Returns:
            True if a new snapshot was appended
        """
        state = tuple(annotations)
        if state == self.current:
            return False

        del self.snapshots[self.index + 1:]
        self.snapshots.append(state)
        self.index += 1

        if self.max_size is not None and len(self.snapshots) > self.max_size:
            self.snapshots.pop(0)
            self.index -= 1
        return True

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return self.index > 0

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return self.index < len(self.snapshots) - 1

    def undo(self) -> Optional[Snapshot]:
        """
        Step back one snapshot.

        Returns:
            The snapshot to restore, or None when already at the oldest one
        """
        if not self.can_undo():
            return None
        self.index -= 1
        return self.current

    def redo(self) -> Optional[Snapshot]:
        """Step forward one snapshot, or return None if there is none."""
        if not self.can_redo():
            return None
        self.index += 1
        return self.current

    def reset(self) -> None:
        """Drop everything and start again from a single empty snapshot."""
        self.snapshots = [()]
        self.index = 0

    def __len__(self) -> int:
        return len(self.snapshots)
