"""Classifies a call as part of an undo/redo run or as a fresh start."""

from __future__ import annotations

from dataclasses import dataclass

from undo_engine.runtime import telemetry

from .config import CheckpointConfig
from .cursor import HistoryCursor
from .identity import REDO_IDENTITIES, UNDO_IDENTITIES, CommandIdentity, Invocation
from .state import CheckpointState


@dataclass(frozen=True, slots=True)
class RunContinuity:
    was_undo: bool
    was_redo: bool

    @property
    def continues(self) -> bool:
        return self.was_undo or self.was_redo


class RunClassifier:
    """Updates ``CheckpointState`` from the previous command's identity.

    An override (``respect`` off) only survives an uninterrupted run of
    undo/redo calls; any other command in between turns enforcement back on.
    An undo that starts a run captures the checkpoint.
    """

    def __init__(self, cursor: HistoryCursor, config: CheckpointConfig) -> None:
        self._cursor = cursor
        self._config = config

    def classify(
        self,
        state: CheckpointState,
        previous: CommandIdentity,
        invocation: Invocation,
    ) -> RunContinuity:
        continuity = RunContinuity(
            was_undo=previous in UNDO_IDENTITIES,
            was_redo=previous in REDO_IDENTITIES,
        )
        if continuity.continues:
            return continuity

        if not state.respect:
            state.respect = True
            if self._config.allow_undo_in_region:
                state.in_region = False
            telemetry.record_event(
                "checkpoint.restored",
                data={"previous": previous.value},
                logger_name="undo_engine.checkpoint",
            )
        if invocation is Invocation.UNDO:
            state.checkpoint = self._cursor.head
        return continuity


__all__ = ["RunClassifier", "RunContinuity"]
