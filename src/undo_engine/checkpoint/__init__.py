"""Checkpoint-constrained undo/redo state machine."""

from .classifier import RunClassifier, RunContinuity
from .config import CheckpointConfig
from .cursor import HistoryCursor
from .failures import EngineResult, FailureKind, failure_message, success_message
from .host import UndoHost
from .identity import CommandIdentity, Invocation
from .redo import RedoEngine
from .state import CheckpointRegistry, CheckpointState
from .undo import UndoEngine

__all__ = [
    "CheckpointConfig",
    "CheckpointRegistry",
    "CheckpointState",
    "CommandIdentity",
    "EngineResult",
    "FailureKind",
    "HistoryCursor",
    "Invocation",
    "RedoEngine",
    "RunClassifier",
    "RunContinuity",
    "UndoEngine",
    "UndoHost",
    "failure_message",
    "success_message",
]
