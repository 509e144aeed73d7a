"""Selection-aware undo that cooperates with the redo checkpoint."""

from __future__ import annotations

from undo_engine.history import UndoMode
from undo_engine.runtime import telemetry

from .classifier import RunContinuity
from .config import CheckpointConfig
from .failures import (
    UNDO_END_POINT_IGNORED,
    UNDO_IN_REGION_IN_USE,
    EngineResult,
    FailureKind,
)
from .host import UndoHost
from .identity import CommandIdentity
from .state import CheckpointState


class UndoEngine:
    def __init__(self, host: UndoHost, config: CheckpointConfig) -> None:
        self._host = host
        self._config = config

    def undo(
        self,
        state: CheckpointState,
        continuity: RunContinuity,
        previous: CommandIdentity,
        steps: int,
    ) -> EngineResult:
        if self._host.has_active_selection():
            if self._config.allow_undo_in_region:
                self._host.notify(UNDO_IN_REGION_IN_USE)
                state.disable()
                state.in_region = True
            else:
                self._host.clear_selection()

        if state.respect and previous is CommandIdentity.CANCEL:
            state.disable()
            self._host.notify(UNDO_END_POINT_IGNORED)
            telemetry.record_event(
                "checkpoint.override",
                data={"command": "undo"},
                logger_name="undo_engine.checkpoint",
            )

        # the log sees one continuous undo chain across undo/redo runs
        effective = CommandIdentity.PLAIN_UNDO if continuity.continues else previous
        mode = UndoMode.SELECTION if state.in_region else UndoMode.LINEAR
        outcome = self._host.undo(steps, mode=mode, previous=effective)

        failure = None if outcome.ok else FailureKind.NOTHING_TO_UNDO
        return EngineResult(
            applied=outcome.steps > 0,
            steps=outcome.steps,
            failure=failure,
            detail=outcome.failure,
            in_region=state.in_region,
        )


__all__ = ["UndoEngine"]
