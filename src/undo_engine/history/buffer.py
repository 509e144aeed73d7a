"""High-level buffer façade combining document, selection state, and history."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, List, Optional

from undo_engine.runtime import telemetry

from .document import BufferDocument
from .log import (
    REGION,
    EditEntry,
    EditLog,
    EquivalenceTable,
    EquivalenceTarget,
    LogPosition,
)
from .primitive import (
    NO_FURTHER_UNDO,
    NO_FURTHER_UNDO_IN_REGION,
    InverseOutcome,
    RevertResult,
    UndoMode,
    revert_groups,
    selective_history,
    skip_boundaries,
)
from .state import BufferState, Cursor, Selection
from .sync import BufferMirror
from .validation import ensure_cursor


@dataclass(slots=True)
class BufferDelta:
    version: int
    text: str
    cursor: Cursor
    selection: Optional[Selection]
    label: str


class Buffer:
    """Text buffer that records every edit into an append-only log.

    Besides plain editing it offers the two history primitives the undo
    commands build on: ``undo`` (continuing or fresh, linear or
    region-scoped) and ``revert_from`` (revert groups at an explicit log
    position and make the remaining tail the new head).
    """

    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        log: Optional[EditLog] = None,
        equivalence: Optional[EquivalenceTable] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.log = log or EditLog()
        self.equivalence = equivalence or EquivalenceTable()
        self._pending: Optional[LogPosition] = None
        self._in_region = False

    @classmethod
    def from_text(cls, text: str, *, name: str = "default") -> "Buffer":
        return cls(name=name, document=BufferDocument.from_text(text))

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def pending(self) -> Optional[LogPosition]:
        return self._pending

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self.document.text,
            cursor=self.state.cursor,
            selection=self.state.selection,
            attributes=dict(attributes or {}),
        )

    # -- editing -----------------------------------------------------------

    def replace_range(
        self, start: Cursor, end: Cursor, text: str, *, label: str
    ) -> BufferDelta:
        start = ensure_cursor(self.document, start)
        end = ensure_cursor(self.document, end)
        if start > end:
            start, end = end, start
        with Transaction(self, label) as tx:
            offset = self.document.offset_for(start)
            length = self.document.offset_for(end) - offset
            tx.apply(
                EditEntry(
                    offset=offset,
                    removed=self.document.slice(offset, length),
                    inserted=text,
                )
            )

        return BufferDelta(
            version=self.document.version,
            text=self.document.text,
            cursor=self.state.cursor,
            selection=self.state.selection,
            label=label,
        )

    def insert_text(self, text: str, *, cursor: Optional[Cursor] = None) -> BufferDelta:
        position = cursor or self.state.cursor
        return self.replace_range(position, position, text, label="insert_text")

    def delete_range(self, start: Cursor, end: Cursor) -> BufferDelta:
        return self.replace_range(start, end, "", label="delete_range")

    def move_cursor(self, cursor: Cursor) -> None:
        self.state.set_cursor(*ensure_cursor(self.document, cursor))

    def select(self, anchor: Cursor, point: Cursor) -> None:
        self.state.set_selection(
            ensure_cursor(self.document, anchor), ensure_cursor(self.document, point)
        )

    # -- history -----------------------------------------------------------

    def lookup_equivalent(self, position: LogPosition) -> Optional[EquivalenceTarget]:
        return self.equivalence.get(skip_boundaries(position))

    def install_pending(self, position: Optional[LogPosition]) -> None:
        self._pending = position

    def undo(
        self,
        steps: int = 1,
        *,
        continuing: bool = False,
        mode: UndoMode = UndoMode.LINEAR,
    ) -> InverseOutcome:
        """Undo ``steps`` change groups.

        A continuing undo resumes from where the previous one stopped, as long
        as nothing but undo/redo touched the log since. ``LINEAR`` mode never
        undoes an undo: it jumps over undo/redo pairs through the equivalence
        table. ``SELECTION`` mode restricts a fresh run to changes inside the
        active selection.
        """

        with telemetry.span(
            "history::undo",
            component="history",
            metadata={"buffer": self.name, "mode": mode.value, "steps": steps},
        ) as handle:
            resumable = (
                continuing
                and self._pending is not None
                and self.lookup_equivalent(self.log.head) is not None
            )
            if not resumable:
                self._start_undo(mode)
            handle.add_metadata("resumed", resumable)

            pending = self._pending
            if mode is UndoMode.LINEAR and pending is not None:
                pending = self._skip_redo_records(pending)
            failure = NO_FURTHER_UNDO_IN_REGION if self._in_region else NO_FURTHER_UNDO
            if pending is None:
                self._pending = None
                return InverseOutcome(position=None, failure=failure)

            result = revert_groups(self.document, pending, steps)
            self._pending = result.position
            if result.steps == 0:
                return InverseOutcome(position=result.position, failure=failure)

            self._commit_inverse(result, REGION if self._in_region else result.position)
            return InverseOutcome(
                position=result.position,
                steps=result.steps,
                failure=None if result.steps == steps else failure,
            )

    def revert_from(self, position: LogPosition, steps: int = 1) -> InverseOutcome:
        """Revert groups starting at ``position`` and make the tail the new head."""

        with telemetry.span(
            "history::revert",
            component="history",
            metadata={"buffer": self.name, "steps": steps},
        ):
            result = revert_groups(self.document, position, steps)
            if result.steps == 0:
                return InverseOutcome(position=None, failure=NO_FURTHER_UNDO)
            self.document = result.document
            self._place_cursor(result.applied)
            self.log.rewind(result.position)
            self._pending = None
            return InverseOutcome(position=result.position, steps=result.steps)

    def _start_undo(self, mode: UndoMode) -> None:
        bounds = self.state.ordered_selection()
        if mode is UndoMode.SELECTION and bounds and self.state.has_selection:
            start, end = (self.document.offset_for(cursor) for cursor in bounds)
            self._pending = selective_history(self.log.head, start, end)
            self._in_region = True
        else:
            self._pending = self.log.head
            self._in_region = False

    def _skip_redo_records(self, pending: LogPosition) -> Optional[LogPosition]:
        target = self.lookup_equivalent(pending)
        if not isinstance(target, LogPosition):
            return pending
        # undo/redo/undo/redo... chains: jump to the end of the chain
        while isinstance(target, LogPosition):
            following = self.lookup_equivalent(target)
            if following is None:
                break
            target = following
        return target if isinstance(target, LogPosition) else None

    def _commit_inverse(self, result: RevertResult, target: EquivalenceTarget) -> None:
        for inverse in result.applied:
            self.log.record(inverse)
        self.equivalence.record(self.log.head, target)
        self.log.add_boundary()
        self.document = result.document
        self._place_cursor(result.applied)
        telemetry.record_event(
            "history.undo_recorded",
            level="debug",
            data={
                "buffer": self.name,
                "edits": len(result.applied),
                "groups": result.steps,
                "region": self._in_region,
            },
            logger_name="undo_engine.history",
        )

    def _place_cursor(self, applied: List[EditEntry]) -> None:
        if applied:
            self.state.set_cursor(*self.document.cursor_for(applied[-1].end))


class Transaction(AbstractContextManager["Transaction"]):
    """Groups the edits applied inside the block into one change group."""

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self.entries: List[EditEntry] = []
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def apply(self, entry: EditEntry) -> None:
        buffer = self.buffer
        buffer.document = buffer.document.splice(
            entry.offset, len(entry.removed), entry.inserted
        )
        buffer.log.record(entry)
        buffer.state.set_cursor(*buffer.document.cursor_for(entry.end))
        self.entries.append(entry)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None and self.entries:
            self.buffer.log.add_boundary()
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
