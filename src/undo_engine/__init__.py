"""Checkpoint-constrained undo/redo on top of a linear edit history."""

__all__ = [
    "adapters",
    "checkpoint",
    "commands",
    "history",
    "runtime",
]

__version__ = "0.1.0"
