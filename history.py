"""
Undo/redo history over city set snapshots.
"""

from typing import List, Optional, Tuple

from tsp_core import City

Snapshot = Tuple[City, ...]


class HistoryManager:
    """Linear undo/redo stacks. A new edit discards the redo branch."""

    def __init__(self, limit: Optional[int] = 200):
        self.limit = limit
        self.undo_stack: List[Snapshot] = []
        self.redo_stack: List[Snapshot] = []

    def snapshot(self, state: Snapshot):
        """Record the state as it was right before a direct edit."""
        self.undo_stack.append(state)
        if self.limit is not None and len(self.undo_stack) > self.limit:
            del self.undo_stack[:len(self.undo_stack) - self.limit]
        self.redo_stack.clear()

    def undo(self, current: Snapshot) -> Optional[Snapshot]:
        """Return the state to restore, or None if there is nothing to undo."""
        if not self.undo_stack:
            return None
        self.redo_stack.append(current)
        return self.undo_stack.pop()

    def redo(self, current: Snapshot) -> Optional[Snapshot]:
        if not self.redo_stack:
            return None
        self.undo_stack.append(current)
        return self.redo_stack.pop()

    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def clear(self):
        self.undo_stack.clear()
        self.redo_stack.clear()
