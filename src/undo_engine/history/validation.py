"""Validation helpers shared across history services."""

from __future__ import annotations

from .document import BufferDocument
from .state import Cursor
from .sync import BufferValidationError


def ensure_cursor(document: BufferDocument, cursor: Cursor) -> Cursor:
    row, col = cursor
    if row < 0 or row >= document.line_count:
        raise BufferValidationError("Row out of range", cursor=cursor)
    line = document.get_line(row)
    if col < 0 or col > len(line):
        raise BufferValidationError("Column out of range", cursor=cursor)
    return cursor


def ensure_steps(steps: object) -> int:
    """Step counts are positive integers; ``bool`` is rejected explicitly."""

    if isinstance(steps, bool) or not isinstance(steps, int):
        raise ValueError(f"step count must be an integer, got {steps!r}")
    if steps < 1:
        raise ValueError(f"step count must be positive, got {steps}")
    return steps
