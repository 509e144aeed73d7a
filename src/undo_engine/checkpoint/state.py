"""Per-document checkpoint flags and their registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from undo_engine.history import LogPosition


@dataclass(slots=True)
class CheckpointState:
    """Mutable checkpoint flags owned by one document.

    ``respect`` enforces the checkpoint for redo. ``in_region`` marks an
    undo run scoped to a selection. ``checkpoint`` is the log head captured
    when the current undo run started.
    """

    respect: bool = True
    in_region: bool = False
    checkpoint: Optional[LogPosition] = None

    def disable(self) -> None:
        self.respect = False
        self.in_region = False


class CheckpointRegistry:
    """Hands out one ``CheckpointState`` per document id.

    States are created on first use and dropped by ``discard`` when the
    document closes, so a reopened document starts from the defaults.
    """

    def __init__(self) -> None:
        self._states: Dict[str, CheckpointState] = {}

    def state_for(self, document_id: str) -> CheckpointState:
        state = self._states.get(document_id)
        if state is None:
            state = self._states[document_id] = CheckpointState()
        return state

    def discard(self, document_id: str) -> Optional[CheckpointState]:
        return self._states.pop(document_id, None)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._states

    def __iter__(self) -> Iterator[str]:
        return iter(self._states)

    def __len__(self) -> int:
        return len(self._states)


__all__ = ["CheckpointRegistry", "CheckpointState"]
