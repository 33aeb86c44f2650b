from __future__ import annotations

"""Linear edit history with branch truncation on commit."""

from typing import List, Optional, Tuple

from .entities import ArtifactState


class HistoryStore:
    """Ordered committed artifact states plus the active pointer.

    ``pointer == -1`` means "display ``origin``, no edits applied yet".
    Commits always land at ``pointer + 1`` and discard any redo branch.
    Only the transformation orchestrator writes to the store; views read it.
    """

    def __init__(self) -> None:
        self._origin: Optional[ArtifactState] = None
        self._timeline: List[ArtifactState] = []
        self._pointer: int = -1

    # ---- Read model ----
    @property
    def origin(self) -> Optional[ArtifactState]:
        return self._origin

    @property
    def timeline(self) -> Tuple[ArtifactState, ...]:
        return tuple(self._timeline)

    @property
    def pointer(self) -> int:
        return self._pointer

    def __len__(self) -> int:
        return len(self._timeline)

    def current(self) -> Optional[ArtifactState]:
        if self._pointer >= 0:
            return self._timeline[self._pointer]
        return self._origin

    def can_undo(self) -> bool:
        return self._pointer >= 0

    def can_redo(self) -> bool:
        return self._pointer < len(self._timeline) - 1

    # ---- Mutations ----
    def set_origin(self, artifact: ArtifactState) -> None:
        """Replace the source asset and drop every edit made on the previous one."""
        self._origin = artifact
        self._timeline = []
        self._pointer = -1

    def commit(self, artifact: ArtifactState) -> int:
        """Append ``artifact`` after the pointer, truncating the redo branch.

        Returns the new pointer.
        """
        k = self._pointer + 1
        del self._timeline[k:]
        self._timeline.append(artifact)
        self._pointer = k
        return k

    def undo(self) -> bool:
        if not self.can_undo():
            return False
        self._pointer -= 1
        return True

    def redo(self) -> bool:
        if not self.can_redo():
            return False
        self._pointer += 1
        return True

    def __repr__(self) -> str:
        return (
            f"HistoryStore(origin={'set' if self._origin else 'none'}, "
            f"entries={len(self._timeline)}, pointer={self._pointer})"
        )


__all__ = ["HistoryStore"]
