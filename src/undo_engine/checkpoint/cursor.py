"""Read-only queries over the host's edit log."""

from __future__ import annotations

from typing import Optional

from undo_engine.history import LogPosition, skip_boundaries, split_group

from .host import UndoHost


class HistoryCursor:
    """Answers "is there something to redo from here" without touching the log."""

    def __init__(self, host: UndoHost) -> None:
        self._host = host

    @property
    def head(self) -> LogPosition:
        return self._host.head()

    @staticmethod
    def skip_boundaries(position: LogPosition) -> LogPosition:
        return skip_boundaries(position)

    @staticmethod
    def next_group_boundary(position: LogPosition) -> LogPosition:
        """Skip the entries of the current group, then the boundaries after it."""

        cell = position
        while not cell.is_boundary:
            assert cell.parent is not None
            cell = cell.parent
        return skip_boundaries(cell)

    def is_at_redo_equivalent(
        self, position: LogPosition, *, checkpoint: Optional[LogPosition] = None
    ) -> bool:
        step = skip_boundaries(position)
        if checkpoint is not None and skip_boundaries(checkpoint) is step:
            return False
        return self._host.lookup_equivalent(step) is not None

    def equivalent_of(self, position: LogPosition) -> Optional[LogPosition]:
        target = self._host.lookup_equivalent(position)
        return target if isinstance(target, LogPosition) else None

    def count_redo_available(
        self,
        position: LogPosition,
        limit: int,
        *,
        checkpoint: Optional[LogPosition] = None,
    ) -> int:
        count = 0
        while count < limit and self.is_at_redo_equivalent(
            position, checkpoint=checkpoint
        ):
            _, position = split_group(skip_boundaries(position))
            count += 1
        return count


__all__ = ["HistoryCursor"]
