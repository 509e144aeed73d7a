"""Checkpoint-constrained redo."""

from __future__ import annotations

from undo_engine.runtime import telemetry

from .cursor import HistoryCursor
from .failures import REDO_END_POINT_STEPPED_OVER, EngineResult, FailureKind
from .host import UndoHost
from .identity import CommandIdentity
from .state import CheckpointState


class RedoEngine:
    """Redo implemented as a targeted undo of the most recent undo record.

    Every precondition is checked before the log is touched. While the
    checkpoint is respected, redo stops where the current undo run began;
    a cancel gesture as the previous command lifts that limit for the rest
    of the run.

    ``REDO_STEP_NOT_FOUND`` needs a head in the middle of a change group.
    ``BufferHost`` always leaves its head on a boundary, where the next
    group boundary is just the head with boundaries skipped, so only hosts
    that expose mid-group heads can produce it.
    """

    def __init__(self, host: UndoHost, cursor: HistoryCursor) -> None:
        self._host = host
        self._cursor = cursor

    def redo(
        self, state: CheckpointState, previous: CommandIdentity, steps: int
    ) -> EngineResult:
        if state.respect and previous is CommandIdentity.CANCEL:
            state.disable()
            self._host.notify(REDO_END_POINT_STEPPED_OVER)
            telemetry.record_event(
                "checkpoint.override",
                data={"command": "redo"},
                logger_name="undo_engine.checkpoint",
            )

        head = self._cursor.head
        if not self._cursor.is_at_redo_equivalent(head):
            return EngineResult.refused(FailureKind.NO_UNDO_TO_REDO)

        checkpoint = None
        if state.respect:
            upcoming = self._cursor.next_group_boundary(head)
            if not self._cursor.is_at_redo_equivalent(upcoming):
                return EngineResult.refused(FailureKind.REDO_STEP_NOT_FOUND)
            if not self._cursor.is_at_redo_equivalent(
                head, checkpoint=state.checkpoint
            ):
                return EngineResult.refused(FailureKind.REDO_END_POINT)
            checkpoint = state.checkpoint

        available = self._cursor.count_redo_available(
            head, steps, checkpoint=checkpoint
        )
        outcome = self._host.revert_from(self._cursor.skip_boundaries(head), available)
        if outcome.position is None:
            return EngineResult.refused(
                FailureKind.NO_UNDO_TO_REDO, detail=outcome.failure
            )

        self._host.install_pending(self._cursor.equivalent_of(outcome.position))
        return EngineResult(
            applied=True, steps=outcome.steps, in_region=state.in_region
        )


__all__ = ["RedoEngine"]
