"""Reference ``UndoHost`` backed by a history ``Buffer``."""

from __future__ import annotations

from typing import Callable, List, Optional, TypeVar

from undo_engine.checkpoint.identity import CommandIdentity
from undo_engine.history import (
    Buffer,
    EquivalenceTarget,
    InverseOutcome,
    LogPosition,
    UndoMode,
)

T = TypeVar("T")


def _noop(_message: str) -> None:  # pragma: no cover - default hook
    return None


class BufferHost:
    """Adapts a ``Buffer`` to the host interface and tracks the last command.

    Editors drive it with ``run_command`` for ordinary commands, ``cancel``
    for the cancel gesture and ``plain_undo`` for the editor's own undo, so
    that the identity channel always reflects what ran last.
    """

    def __init__(
        self, buffer: Buffer, *, on_notify: Callable[[str], None] = _noop
    ) -> None:
        self.buffer = buffer
        self.messages: List[str] = []
        self._on_notify = on_notify
        self._last_command = CommandIdentity.OTHER

    @property
    def document_id(self) -> str:
        return self.buffer.name

    def head(self) -> LogPosition:
        return self.buffer.log.head

    def lookup_equivalent(self, position: LogPosition) -> Optional[EquivalenceTarget]:
        return self.buffer.lookup_equivalent(position)

    def undo(
        self, steps: int, *, mode: UndoMode, previous: CommandIdentity
    ) -> InverseOutcome:
        return self.buffer.undo(
            steps, continuing=previous is CommandIdentity.PLAIN_UNDO, mode=mode
        )

    def revert_from(self, position: LogPosition, steps: int) -> InverseOutcome:
        return self.buffer.revert_from(position, steps)

    def install_pending(self, position: Optional[LogPosition]) -> None:
        self.buffer.install_pending(position)

    def has_active_selection(self) -> bool:
        return self.buffer.state.has_selection

    def clear_selection(self) -> None:
        self.buffer.state.clear_selection()

    def notify(self, message: str) -> None:
        self.messages.append(message)
        self._on_notify(message)

    def previous_command(self) -> CommandIdentity:
        return self._last_command

    def set_command(self, identity: CommandIdentity) -> None:
        self._last_command = identity

    # -- editor-side commands ---------------------------------------------

    def run_command(self, action: Callable[[Buffer], T]) -> T:
        """Run an unrelated editor command against the buffer."""

        result = action(self.buffer)
        self.set_command(CommandIdentity.OTHER)
        return result

    def cancel(self) -> None:
        self.set_command(CommandIdentity.CANCEL)

    def plain_undo(self, steps: int = 1) -> InverseOutcome:
        """The editor's own undo, outside checkpoint control."""

        outcome = self.buffer.undo(
            steps, continuing=self._last_command is CommandIdentity.PLAIN_UNDO
        )
        self.notify(outcome.failure or "Undo")
        self.set_command(CommandIdentity.PLAIN_UNDO)
        return outcome


__all__ = ["BufferHost"]
