"""Undo/redo commands exposed to editors, plus the reference buffer host."""

from .facade import CommandFacade, CommandResult
from .host import BufferHost

__all__ = ["BufferHost", "CommandFacade", "CommandResult"]
