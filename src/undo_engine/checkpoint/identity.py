"""Command identity tokens exchanged over the run-continuity channel."""

from __future__ import annotations

from enum import Enum


class CommandIdentity(str, Enum):
    """What the previously executed command was, compared by value."""

    PLAIN_UNDO = "undo"
    CONSTRAINED_UNDO = "undo_engine.undo"
    CONSTRAINED_REDO = "undo_engine.redo"
    CANCEL = "cancel"
    OTHER = "other"


class Invocation(str, Enum):
    UNDO = "undo"
    REDO = "redo"


UNDO_IDENTITIES = frozenset(
    {CommandIdentity.PLAIN_UNDO, CommandIdentity.CONSTRAINED_UNDO}
)
REDO_IDENTITIES = frozenset({CommandIdentity.CONSTRAINED_REDO})

__all__ = ["CommandIdentity", "Invocation", "UNDO_IDENTITIES", "REDO_IDENTITIES"]
