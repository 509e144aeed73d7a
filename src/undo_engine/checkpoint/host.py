"""Interface the checkpoint core expects from the hosting editor."""

from __future__ import annotations

from typing import Optional, Protocol

from undo_engine.history import EquivalenceTarget, InverseOutcome, LogPosition, UndoMode

from .identity import CommandIdentity


class UndoHost(Protocol):
    """Everything the engines consume from the editor that owns the log."""

    @property
    def document_id(self) -> str:
        """Stable identifier of the document the history belongs to."""
        ...

    def head(self) -> LogPosition:
        """Current head of the edit log."""
        ...

    def lookup_equivalent(
        self, position: LogPosition
    ) -> Optional[EquivalenceTarget]:
        """Equivalence entry for ``position`` (leading boundaries skipped)."""
        ...

    def undo(
        self, steps: int, *, mode: UndoMode, previous: CommandIdentity
    ) -> InverseOutcome:
        """Run the editor's undo; ``previous`` decides whether it continues."""
        ...

    def revert_from(self, position: LogPosition, steps: int) -> InverseOutcome:
        """Revert ``steps`` groups at ``position``; the tail becomes the head."""
        ...

    def install_pending(self, position: Optional[LogPosition]) -> None:
        """Set where a continuing undo resumes."""
        ...

    def has_active_selection(self) -> bool: ...

    def clear_selection(self) -> None: ...

    def notify(self, message: str) -> None: ...

    def previous_command(self) -> CommandIdentity: ...

    def set_command(self, identity: CommandIdentity) -> None: ...


__all__ = ["UndoHost"]
