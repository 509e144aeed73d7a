"""Configuration for checkpoint-constrained undo."""

from __future__ import annotations

import sys
from dataclasses import dataclass

from undo_engine.runtime.telemetry import env, env_flag


@dataclass(frozen=True, slots=True)
class CheckpointConfig:
    """Options shared by every document handled by a facade.

    ``allow_undo_in_region`` scopes undo to an active selection instead of
    clearing the selection first. ``redo_all_steps`` is the step count
    requested by "redo all"; the constraint checks cut it short.
    """

    allow_undo_in_region: bool = False
    cancel_key: str = "ctrl+g"
    redo_all_steps: int = sys.maxsize

    def __post_init__(self) -> None:
        if not self.cancel_key:
            raise ValueError("cancel_key cannot be empty")
        if self.redo_all_steps < 1:
            raise ValueError("redo_all_steps must be positive")

    @classmethod
    def from_env(cls) -> "CheckpointConfig":
        """Read ``UNDO_ENGINE_ALLOW_UNDO_IN_REGION`` and ``UNDO_ENGINE_CANCEL_KEY``."""

        return cls(
            allow_undo_in_region=env_flag("ALLOW_UNDO_IN_REGION", False),
            cancel_key=env("CANCEL_KEY") or "ctrl+g",
        )


__all__ = ["CheckpointConfig"]
