"""Textual demo editor wired to the checkpoint undo commands.

Run ``undo-engine-demo [path]`` and edit; ``ctrl+z`` undoes, ``ctrl+y`` /
``ctrl+shift+z`` redo, ``ctrl+alt+y`` redoes everything up to the
checkpoint and the cancel key (``ctrl+g`` by default, or ``escape``) lets
the next undo/redo cross it. Log lines are streamed over TCP unless
``--no-log-server`` is given.
"""

from __future__ import annotations

import argparse
from typing import Optional, Sequence, Tuple

from textual import events
from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, Static

from undo_engine.checkpoint import CheckpointConfig
from undo_engine.commands import BufferHost, CommandFacade
from undo_engine.history import Buffer, BufferMirror
from undo_engine.runtime.telemetry import env

from .controller import TextualUIHooks, TextualUndoAdapter
from .log_stream import NetworkLogStreamer

KeyPress = Tuple[str, Optional[str], Tuple[str, ...]]

_APP_KEYS = {"ctrl+c", "ctrl+q"}
_RENAMED = {"escape": "ESC", "enter": "ENTER", "return": "ENTER"}


def create_default_facade(
    text: str = "", *, config: Optional[CheckpointConfig] = None
) -> Tuple[CommandFacade, BufferHost]:
    """Build a facade over a fresh buffer, configured from the environment."""

    host = BufferHost(Buffer.from_text(text, name="scratch"))
    facade = CommandFacade(host, config=config or CheckpointConfig.from_env())
    return facade, host


def split_key(key: str, character: Optional[str], printable: bool) -> Optional[KeyPress]:
    """Turn Textual's ``ctrl+shift+z`` style key names into adapter input."""

    if key in _APP_KEYS:
        return None
    *mods, base = key.split("+") if key != "+" else [key]
    modifiers = tuple(mod.upper() for mod in mods)
    if base in _RENAMED:
        return (_RENAMED[base], None, modifiers)
    if printable and character and not modifiers:
        return (character, character, ())
    return (base, None, modifiers)


class UndoEngineApp(App[None]):
    CSS = """
	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
		overflow: auto;
	}

	#checkpoint-line, #status-line {
		height: 1;
		padding: 0 1;
	}

	#checkpoint-line {
		background: $surface-darken-2;
	}

	#status-line {
		background: $surface-darken-1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        initial_text: str = "",
        log_host: str = "127.0.0.1",
        log_port: int | None = 8765,
    ) -> None:
        super().__init__()
        self.initial_text = initial_text
        self.adapter: TextualUndoAdapter | None = None
        self.log_host = log_host
        self.log_port = log_port
        self._streamer: NetworkLogStreamer | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static("", id="buffer-view")
        yield Static("", id="checkpoint-line")
        yield Static("", id="status-line")
        yield Footer()

    async def on_mount(self) -> None:
        facade, host = create_default_facade(self.initial_text)
        self.adapter = TextualUndoAdapter(
            facade,
            host,
            TextualUIHooks(
                update_buffer=self._show_buffer,
                update_status=self._show_status,
                log=self._stream_line,
            ),
        )
        self._show_checkpoint()
        if self.log_port is not None:
            self._streamer = NetworkLogStreamer(self.log_host, self.log_port)
            await self._streamer.start()
            self._show_status(f"Log stream @ {self.log_host}:{self._streamer.port}")

    async def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.facade.close_document()
        if self._streamer:
            await self._streamer.stop()
            self._streamer = None

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        press = split_key(event.key, event.character, event.is_printable)
        if press is None:
            return
        key, text, modifiers = press
        self.adapter.handle_textual_key(key, text=text, modifiers=modifiers)
        self._show_checkpoint()
        event.stop()

    def _show_buffer(self, mirror: BufferMirror) -> None:
        self.query_one("#buffer-view", Static).update(mirror.text)

    def _show_status(self, status: str) -> None:
        self.query_one("#status-line", Static).update(status)

    def _show_checkpoint(self) -> None:
        if not self.adapter:
            return
        state = self.adapter.facade.state
        label = "enforced" if state.respect else "stepped over"
        if state.in_region:
            label += " (region)"
        self.query_one("#checkpoint-line", Static).update(f"end-point: {label}")

    def _stream_line(self, line: str) -> None:
        if self._streamer:
            self._streamer.log(line)


def _env_port(fallback: int) -> int:
    value = env("LOG_PORT")
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Checkpoint undo/redo demo editor.")
    parser.add_argument("path", nargs="?", help="File whose text seeds the buffer")
    parser.add_argument(
        "--log-host",
        default=env("LOG_HOST", "127.0.0.1"),
        help="Interface for the TCP log stream (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--log-port",
        type=int,
        default=_env_port(8765),
        help="Port for the TCP log stream, 0 for ephemeral (default: 8765)",
    )
    parser.add_argument(
        "--no-log-server", action="store_true", help="Do not stream log lines"
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    text = ""
    if args.path:
        with open(args.path, encoding="utf-8") as handle:
            text = handle.read()
    UndoEngineApp(
        initial_text=text,
        log_host=args.log_host,
        log_port=None if args.no_log_server else args.log_port,
    ).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
