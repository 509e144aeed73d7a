"""Textual adapter for the checkpoint undo commands."""

from .controller import KeyResult, TextualUIHooks, TextualUndoAdapter

__all__ = ["KeyResult", "TextualUIHooks", "TextualUndoAdapter"]
