"""User-invocable undo/redo commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from undo_engine.checkpoint import (
    CheckpointConfig,
    CheckpointRegistry,
    CheckpointState,
    CommandIdentity,
    EngineResult,
    HistoryCursor,
    Invocation,
    RedoEngine,
    RunClassifier,
    UndoEngine,
    UndoHost,
    failure_message,
    success_message,
)
from undo_engine.history import ensure_steps
from undo_engine.runtime import telemetry

_IDENTITIES = {
    Invocation.UNDO: CommandIdentity.CONSTRAINED_UNDO,
    Invocation.REDO: CommandIdentity.CONSTRAINED_REDO,
}


@dataclass(slots=True)
class CommandResult:
    """Result returned from ``CommandFacade`` commands."""

    applied: bool
    status: str = "ok"
    message: Optional[str] = None
    steps: int = 0


class CommandFacade:
    """Entry points an editor binds to keys: ``undo``, ``redo``, ``redo_all``.

    Failures never raise; they come back as a non-applied ``CommandResult``
    and are shown once through the host's ``notify``. The facade's identity
    is handed to the host only after the engine has finished.
    """

    def __init__(
        self,
        host: UndoHost,
        *,
        config: Optional[CheckpointConfig] = None,
        registry: Optional[CheckpointRegistry] = None,
    ) -> None:
        self.host = host
        self.config = config if config is not None else CheckpointConfig()
        self.registry = registry if registry is not None else CheckpointRegistry()
        self.cursor = HistoryCursor(host)
        self.classifier = RunClassifier(self.cursor, self.config)
        self.undo_engine = UndoEngine(host, self.config)
        self.redo_engine = RedoEngine(host, self.cursor)

    @property
    def state(self) -> CheckpointState:
        return self.registry.state_for(self.host.document_id)

    def undo(self, steps: int = 1) -> CommandResult:
        return self._run(Invocation.UNDO, ensure_steps(steps))

    def redo(self, steps: int = 1) -> CommandResult:
        return self._run(Invocation.REDO, ensure_steps(steps))

    def redo_all(self) -> CommandResult:
        return self._run(Invocation.REDO, self.config.redo_all_steps)

    def close_document(self) -> None:
        self.registry.discard(self.host.document_id)

    def _run(self, invocation: Invocation, steps: int) -> CommandResult:
        state = self.state
        previous = self.host.previous_command()
        with telemetry.span(
            f"command::{invocation.value}",
            logger_name="undo_engine.commands",
            component="commands",
            metadata={
                "document": self.host.document_id,
                "previous": previous.value,
            },
        ) as handle:
            continuity = self.classifier.classify(state, previous, invocation)
            if invocation is Invocation.UNDO:
                result = self.undo_engine.undo(state, continuity, previous, steps)
            else:
                result = self.redo_engine.redo(state, previous, steps)
            message = self._message(invocation, result)
            handle.add_metadata("steps", result.steps)
            if result.failure is not None:
                handle.reject(result.failure.value)
                telemetry.record_event(
                    "undo.failure",
                    level="warning",
                    data={
                        "command": invocation.value,
                        "failure": result.failure.value,
                        "document": self.host.document_id,
                    },
                    logger_name="undo_engine.commands",
                )

        self.host.notify(message)
        self.host.set_command(_IDENTITIES[invocation])
        return CommandResult(
            applied=result.applied,
            status=result.failure.value if result.failure else "ok",
            message=message,
            steps=result.steps,
        )

    def _message(self, invocation: Invocation, result: EngineResult) -> str:
        if result.failure is not None:
            return failure_message(
                result.failure, cancel_key=self.config.cancel_key, detail=result.detail
            )
        verb = "Undo" if invocation is Invocation.UNDO else "Redo"
        return success_message(verb, steps=result.steps, in_region=result.in_region)


__all__ = ["CommandFacade", "CommandResult"]
