"""Adapter boundary types and errors raised by the history layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .log import EditEntry
from .state import Cursor, Selection


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    text: str
    cursor: Cursor
    selection: Optional[Selection]
    attributes: dict[str, str] = field(default_factory=dict)


class BufferValidationError(RuntimeError):
    """Raised when callers provide out-of-bounds cursor info."""

    def __init__(self, message: str, *, cursor: Cursor | None = None) -> None:
        super().__init__(message)
        self.cursor = cursor


class HistoryCorruptionError(RuntimeError):
    """Raised when an inverse edit no longer matches the document text."""

    def __init__(self, entry: EditEntry, found: str) -> None:
        super().__init__(
            f"Cannot revert edit at offset {entry.offset}: "
            f"expected {entry.inserted!r}, found {found!r}"
        )
        self.entry = entry
        self.found = found
