"""Minimal Textual adapter that routes key chords to the undo commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from undo_engine.commands import BufferHost, CommandFacade, CommandResult
from undo_engine.history import Buffer, BufferMirror, Cursor

_MODIFIER_ORDER = ("CTRL", "ALT", "SHIFT")


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


@dataclass(slots=True)
class KeyResult:
    """What a key press did: which command ran and what it reported."""

    command: str
    consumed: bool = True
    status: str = "ok"
    message: Optional[str] = None


def chord(key: str, modifiers: Iterable[str] = ()) -> str:
    """Canonical ``ctrl+alt+shift+key`` spelling of a key press."""

    mods = {str(mod).upper() for mod in modifiers}
    parts = [mod.lower() for mod in _MODIFIER_ORDER if mod in mods]
    parts.append(key.lower())
    return "+".join(parts)


class TextualUndoAdapter:
    """Bridges Textual key events to ``CommandFacade`` and plain editing.

    Undo/redo chords go to the facade; every other key is an ordinary
    editor command and runs through ``BufferHost.run_command`` so the
    command channel sees it. The cancel chord follows ``cancel_key``.
    """

    def __init__(
        self, facade: CommandFacade, host: BufferHost, hooks: TextualUIHooks
    ) -> None:
        self.facade = facade
        self.host = host
        self.hooks = hooks
        self._undo_bindings: Dict[str, Callable[[], CommandResult]] = {
            "ctrl+z": facade.undo,
            "ctrl+y": facade.redo,
            "ctrl+shift+z": facade.redo,
            "ctrl+alt+y": facade.redo_all,
        }
        self._cancel_chords = {facade.config.cancel_key.lower(), "esc"}
        self._refresh_buffer()

    @property
    def buffer(self) -> Buffer:
        return self.host.buffer

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> KeyResult:
        """Translate a Textual key event into a command and run it."""

        pressed = chord(key, modifiers)
        self._log_state("key ->", chord=pressed, text=text)
        seen = len(self.host.messages)
        result = self._dispatch(pressed, text)
        for notice in self.host.messages[seen:]:
            self.hooks.update_status(notice)
        self._refresh_buffer()
        self._log_state(
            "result <-",
            command=result.command,
            status=result.status,
            message=result.message,
        )
        return result

    def _dispatch(self, pressed: str, text: Optional[str]) -> KeyResult:
        binding = self._undo_bindings.get(pressed)
        if binding is not None:
            outcome = binding()
            return KeyResult(
                command=binding.__name__,
                status=outcome.status,
                message=outcome.message,
            )
        if pressed in self._cancel_chords:
            self.host.cancel()
            self.buffer.state.clear_selection()
            self.host.notify("Quit")
            return KeyResult(command="cancel", message="Quit")

        if pressed in {"left", "right"}:
            self.host.run_command(lambda buf: self._move(buf, pressed, extend=False))
            return KeyResult(command="move")
        if pressed in {"shift+left", "shift+right"}:
            direction = pressed.split("+")[-1]
            self.host.run_command(lambda buf: self._move(buf, direction, extend=True))
            return KeyResult(command="select")
        if pressed == "backspace":
            self.host.run_command(self._backspace)
            return KeyResult(command="delete")
        if pressed == "enter":
            self.host.run_command(lambda buf: self._insert(buf, "\n"))
            return KeyResult(command="newline")
        if text:
            self.host.run_command(lambda buf: self._insert(buf, text))
            return KeyResult(command="insert")

        self.host.run_command(lambda buf: None)
        return KeyResult(command="ignored", consumed=False)

    @staticmethod
    def _step(buffer: Buffer, cursor: Cursor, direction: str) -> Cursor:
        offset = buffer.document.offset_for(cursor)
        offset += 1 if direction == "right" else -1
        offset = max(0, min(offset, len(buffer.document)))
        return buffer.document.cursor_for(offset)

    def _move(self, buffer: Buffer, direction: str, *, extend: bool) -> None:
        target = self._step(buffer, buffer.state.cursor, direction)
        if not extend:
            buffer.state.clear_selection()
            buffer.move_cursor(target)
            return
        selection = buffer.state.selection
        anchor = selection[0] if selection else buffer.state.cursor
        buffer.select(anchor, target)

    @staticmethod
    def _insert(buffer: Buffer, text: str) -> None:
        bounds = buffer.state.ordered_selection()
        buffer.state.clear_selection()
        if bounds and bounds[0] != bounds[1]:
            buffer.replace_range(bounds[0], bounds[1], text, label="insert_text")
        else:
            buffer.insert_text(text)

    def _backspace(self, buffer: Buffer) -> None:
        bounds = buffer.state.ordered_selection()
        buffer.state.clear_selection()
        if bounds and bounds[0] != bounds[1]:
            buffer.delete_range(*bounds)
            return
        cursor = buffer.state.cursor
        previous = self._step(buffer, cursor, "left")
        if previous != cursor:
            buffer.delete_range(previous, cursor)

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.buffer.mirror())

    def _log_state(self, prefix: str, **fields: object) -> None:
        state = self.facade.state
        snapshot: Dict[str, object] = {
            "buffer": self.buffer.name,
            "cursor": self.buffer.state.cursor,
            "selection": self.buffer.state.selection,
            "respect": state.respect,
            "in_region": state.in_region,
            "previous": self.host.previous_command().value,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))


__all__ = ["KeyResult", "TextualUIHooks", "TextualUndoAdapter", "chord"]
