"""Cursor and selection state for history buffers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

Cursor = Tuple[int, int]  # (row, column)
Selection = Tuple[Cursor, Cursor]  # (anchor, point)


@dataclass(slots=True)
class BufferState:
    """Mutable cursor + selection info for a buffer."""

    cursor: Cursor = (0, 0)
    selection: Optional[Selection] = None

    def set_cursor(self, row: int, col: int) -> None:
        self.cursor = (row, col)

    def clear_selection(self) -> None:
        self.selection = None

    def set_selection(self, anchor: Cursor, point: Cursor) -> None:
        self.selection = (anchor, point)
        self.cursor = point

    @property
    def has_selection(self) -> bool:
        return self.selection is not None and self.selection[0] != self.selection[1]

    def ordered_selection(self) -> Optional[Selection]:
        if self.selection is None:
            return None
        anchor, point = self.selection
        return (anchor, point) if anchor <= point else (point, anchor)
