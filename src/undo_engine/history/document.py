"""Text storage used by the reference history buffer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .state import Cursor


@dataclass(slots=True)
class BufferDocument:
    """Immutable-ish text storage built on a simple list-of-lines model.

    Every splice returns a new document with a bumped version; the line list
    is never mutated in place.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0

    @classmethod
    def from_text(cls, text: str, *, version: int = 0) -> "BufferDocument":
        return cls(_lines=text.split("\n"), version=version)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, index: int) -> str:
        return self._lines[index]

    def __len__(self) -> int:
        return sum(len(line) for line in self._lines) + len(self._lines) - 1

    def splice(self, offset: int, length: int, replacement: str) -> "BufferDocument":
        """Return a document with ``length`` characters at ``offset`` replaced."""

        text = self.text
        updated = text[:offset] + replacement + text[offset + length :]
        return BufferDocument.from_text(updated, version=self.version + 1)

    def slice(self, offset: int, length: int) -> str:
        return self.text[offset : offset + length]

    def offset_for(self, cursor: Cursor) -> int:
        row, col = cursor
        offset = 0
        for i in range(row):
            offset += len(self._lines[i]) + 1  # newline
        return offset + col

    def cursor_for(self, offset: int) -> Cursor:
        running = 0
        for row, line in enumerate(self._lines):
            if offset <= running + len(line):
                return (row, offset - running)
            running += len(line) + 1
        return (len(self._lines) - 1, len(self._lines[-1]))
