"""Reference edit history: append-only log, equivalence table, and buffer."""

from .buffer import Buffer, BufferDelta, Transaction
from .document import BufferDocument
from .log import (
    REGION,
    EditEntry,
    EditLog,
    EquivalenceTable,
    EquivalenceTarget,
    LogPosition,
    RegionMarker,
)
from .primitive import (
    NO_FURTHER_UNDO,
    InverseOutcome,
    UndoMode,
    revert_groups,
    selective_history,
    skip_boundaries,
    split_group,
)
from .state import BufferState, Cursor, Selection
from .sync import BufferMirror, BufferValidationError, HistoryCorruptionError
from .validation import ensure_cursor, ensure_steps

__all__ = [
    "Buffer",
    "BufferDelta",
    "BufferDocument",
    "BufferMirror",
    "BufferState",
    "BufferValidationError",
    "Cursor",
    "EditEntry",
    "EditLog",
    "EquivalenceTable",
    "EquivalenceTarget",
    "HistoryCorruptionError",
    "InverseOutcome",
    "LogPosition",
    "NO_FURTHER_UNDO",
    "REGION",
    "RegionMarker",
    "Selection",
    "Transaction",
    "UndoMode",
    "ensure_cursor",
    "ensure_steps",
    "revert_groups",
    "selective_history",
    "skip_boundaries",
    "split_group",
]
