"""Append-only edit log and the undo equivalence table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional, Union


@dataclass(frozen=True, slots=True)
class EditEntry:
    """One primitive change: ``removed`` at ``offset`` was replaced by ``inserted``."""

    offset: int
    removed: str = ""
    inserted: str = ""

    def inverted(self) -> "EditEntry":
        return EditEntry(offset=self.offset, removed=self.inserted, inserted=self.removed)

    @property
    def end(self) -> int:
        """End offset of the change in the text the entry produced."""

        return self.offset + len(self.inserted)

    @property
    def delta(self) -> int:
        return len(self.inserted) - len(self.removed)


@dataclass(frozen=True, eq=False, slots=True)
class LogPosition:
    """A cell of the persistent log; the log "as of" this cell is its ancestry.

    ``entry is None`` marks a group boundary. The origin cell (no parent) is
    the empty history and also acts as a boundary. Cells compare by identity
    so they can key the equivalence table even after the head is rewound.
    """

    entry: Optional[EditEntry]
    parent: Optional["LogPosition"] = None
    depth: int = 0

    @property
    def is_boundary(self) -> bool:
        return self.entry is None

    @property
    def is_origin(self) -> bool:
        return self.parent is None

    def push(self, entry: Optional[EditEntry]) -> "LogPosition":
        return LogPosition(entry=entry, parent=self, depth=self.depth + 1)

    def walk(self) -> Iterator["LogPosition"]:
        """Yield this cell and its ancestors, newest first (origin excluded)."""

        cell: Optional[LogPosition] = self
        while cell is not None and not cell.is_origin:
            yield cell
            cell = cell.parent

    def __repr__(self) -> str:
        kind = "origin" if self.is_origin else ("|" if self.is_boundary else self.entry)
        return f"LogPosition(depth={self.depth}, {kind})"


class RegionMarker(Enum):
    """Equivalence target recorded for selection-scoped undo."""

    REGION = "region"


REGION = RegionMarker.REGION

EquivalenceTarget = Union[LogPosition, RegionMarker]


class EditLog:
    """Linear history of edits separated into change groups.

    Entries are only ever added on top of the head. ``rewind`` moves the head
    back to an older cell; the abandoned cells stay alive for anything still
    referencing them.
    """

    def __init__(self) -> None:
        self._origin = LogPosition(entry=None)
        self._head = self._origin

    @property
    def origin(self) -> LogPosition:
        return self._origin

    @property
    def head(self) -> LogPosition:
        return self._head

    def record(self, entry: EditEntry) -> LogPosition:
        self._head = self._head.push(entry)
        return self._head

    def add_boundary(self) -> LogPosition:
        if not self._head.is_boundary:
            self._head = self._head.push(None)
        return self._head

    def rewind(self, position: LogPosition) -> None:
        self._head = position

    def entries(self) -> list[EditEntry]:
        """All entries reachable from the head, oldest first."""

        found = [cell.entry for cell in self._head.walk() if cell.entry is not None]
        found.reverse()
        return found

    def __len__(self) -> int:
        return self._head.depth


class EquivalenceTable:
    """Maps the log position left by an undo to where that undo continued from."""

    def __init__(self) -> None:
        self._table: Dict[LogPosition, EquivalenceTarget] = {}

    def record(self, key: LogPosition, target: EquivalenceTarget) -> None:
        self._table[key] = target

    def get(self, key: LogPosition) -> Optional[EquivalenceTarget]:
        return self._table.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __len__(self) -> int:
        return len(self._table)


__all__ = [
    "EditEntry",
    "LogPosition",
    "EditLog",
    "EquivalenceTable",
    "EquivalenceTarget",
    "RegionMarker",
    "REGION",
]
