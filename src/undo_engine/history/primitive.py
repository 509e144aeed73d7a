"""Primitive undo: revert change groups by applying their inverse edits."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .document import BufferDocument
from .log import EditEntry, LogPosition
from .sync import HistoryCorruptionError

NO_FURTHER_UNDO = "No further undo information"
NO_FURTHER_UNDO_IN_REGION = "No further undo information for region"


class UndoMode(str, Enum):
    LINEAR = "linear"
    SELECTION = "selection"


@dataclass(slots=True)
class InverseOutcome:
    """Result of asking the history for inverse edits.

    ``position`` is the log cursor left behind (where a further step would
    continue from); ``failure`` carries the user-facing reason when fewer
    steps than requested could be applied.
    """

    position: Optional[LogPosition]
    steps: int = 0
    failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass(slots=True)
class RevertResult:
    document: BufferDocument
    position: LogPosition
    applied: List[EditEntry] = field(default_factory=list)
    steps: int = 0


def skip_boundaries(position: LogPosition) -> LogPosition:
    while position.is_boundary and not position.is_origin:
        assert position.parent is not None
        position = position.parent
    return position


def split_group(position: LogPosition) -> Tuple[List[EditEntry], LogPosition]:
    """Return the group's entries (newest first) and the boundary below it."""

    entries: List[EditEntry] = []
    cell = position
    while not cell.is_boundary:
        assert cell.entry is not None and cell.parent is not None
        entries.append(cell.entry)
        cell = cell.parent
    return entries, cell


def apply_inverse(
    document: BufferDocument, entry: EditEntry
) -> Tuple[BufferDocument, EditEntry]:
    found = document.slice(entry.offset, len(entry.inserted))
    if found != entry.inserted:
        raise HistoryCorruptionError(entry, found)
    updated = document.splice(entry.offset, len(entry.inserted), entry.removed)
    return updated, entry.inverted()


def revert_groups(
    document: BufferDocument, position: LogPosition, steps: int
) -> RevertResult:
    """Undo up to ``steps`` change groups starting at ``position``.

    Stops early when the origin is reached; ``steps`` on the result reports
    how many groups were actually reverted.
    """

    result = RevertResult(document=document, position=position)
    while result.steps < steps:
        start = skip_boundaries(result.position)
        if start.is_origin:
            break
        entries, result.position = split_group(start)
        for entry in entries:
            result.document, inverse = apply_inverse(result.document, entry)
            result.applied.append(inverse)
        result.steps += 1
    return result


def _commute(
    entry: EditEntry, later: Sequence[EditEntry]
) -> Optional[Tuple[EditEntry, List[EditEntry]]]:
    """Move ``entry`` past the edits applied after it.

    Returns ``entry`` in the coordinates of the text once ``later`` has been
    applied, and ``later`` re-expressed as if ``entry`` never happened.
    ``None`` when one of the later edits touches the entry's extent.
    """

    current = entry
    rebased: List[EditEntry] = []
    for edit in later:
        if edit.offset + len(edit.removed) <= current.offset:
            current = replace(current, offset=current.offset + edit.delta)
            rebased.append(edit)
        elif edit.offset >= current.end:
            rebased.append(replace(edit, offset=edit.offset - current.delta))
        else:
            return None
    return current, rebased


def selective_history(head: LogPosition, start: int, end: int) -> LogPosition:
    """Build a detached log holding only the changes inside ``[start, end]``.

    Entries outside the region stay applied; entries kept for the region are
    rewritten to the offsets they will have when their turn to be undone
    comes. Collection stops at the first change crossing the region edge.
    """

    groups: List[List[EditEntry]] = []
    current: List[EditEntry] = []
    left_in_place: List[EditEntry] = []  # oldest first

    for cell in head.walk():
        if cell.entry is None:
            if current:
                groups.append(current)
                current = []
            continue
        commuted = _commute(cell.entry, left_in_place)
        if commuted is None:
            break
        entry, rebased = commuted
        if start <= entry.offset and entry.end <= end:
            current.append(entry)
            left_in_place = rebased
            end -= entry.delta
        elif entry.end <= start or entry.offset >= end:
            left_in_place.insert(0, cell.entry)
        else:
            break
    if current:
        groups.append(current)

    cell = LogPosition(entry=None)
    for group in reversed(groups):
        for entry in reversed(group):
            cell = cell.push(entry)
        cell = cell.push(None)
    return cell


__all__ = [
    "InverseOutcome",
    "NO_FURTHER_UNDO",
    "NO_FURTHER_UNDO_IN_REGION",
    "RevertResult",
    "UndoMode",
    "apply_inverse",
    "revert_groups",
    "selective_history",
    "skip_boundaries",
    "split_group",
]
