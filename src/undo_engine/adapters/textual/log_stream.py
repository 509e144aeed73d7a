"""Async TCP broadcaster for the adapter's realtime log lines."""

from __future__ import annotations

import asyncio
from collections import deque
from contextlib import suppress
from datetime import datetime
from typing import Deque, Set


class NetworkLogStreamer:
    """Broadcasts log lines to TCP clients (e.g., ``nc 127.0.0.1 8765``).

    New clients first receive the retained backlog. Lines that arrive while
    the outgoing queue is full are dropped and counted in ``dropped``.
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 8765,
        *,
        source: str = "undo",
        backlog: int = 200,
        queue_size: int = 1024,
    ) -> None:
        self.host = host
        self.port = port
        self.source = source
        self.dropped = 0
        self._backlog: Deque[str] = deque(maxlen=backlog)
        self._queue_size = queue_size
        self._queue: asyncio.Queue[str] | None = None
        self._server: asyncio.AbstractServer | None = None
        self._pump_task: asyncio.Task[None] | None = None
        self._clients: Set[asyncio.StreamWriter] = set()

    @property
    def client_count(self) -> int:
        return len(self._clients)

    async def start(self) -> None:
        if self._server is not None:
            return
        self._queue = asyncio.Queue(maxsize=self._queue_size)
        self._server = await asyncio.start_server(
            self._handle_client, self.host, self.port
        )
        sockets = self._server.sockets or []
        if sockets:
            self.port = sockets[0].getsockname()[1]
        self._pump_task = asyncio.create_task(self._pump())

    async def stop(self) -> None:
        if self._pump_task:
            self._pump_task.cancel()
            with suppress(asyncio.CancelledError):
                await self._pump_task
            self._pump_task = None
        if self._server:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
        for writer in list(self._clients):
            await self._close_writer(writer)
        self._queue = None

    def log(self, line: str) -> None:
        """Record ``line`` and queue it for every connected client."""

        stamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        entry = f"{stamp} [{self.source}] {line}\n"
        self._backlog.append(entry)
        if self._queue is None:
            return
        try:
            self._queue.put_nowait(entry)
        except asyncio.QueueFull:
            self.dropped += 1

    async def _pump(self) -> None:
        assert self._queue is not None
        while True:
            entry = await self._queue.get()
            payload = entry.encode("utf-8")
            for writer in list(self._clients):
                try:
                    writer.write(payload)
                    await writer.drain()
                except (ConnectionError, OSError):
                    await self._close_writer(writer)

    async def _handle_client(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self._clients.add(writer)
        try:
            writer.write("".join(self._backlog).encode("utf-8"))
            await writer.drain()
            # clients only listen; wait for them to hang up
            while await reader.read(1024):
                pass
        finally:
            await self._close_writer(writer)

    async def _close_writer(self, writer: asyncio.StreamWriter) -> None:
        self._clients.discard(writer)
        writer.close()
        with suppress(ConnectionError, OSError):
            await writer.wait_closed()


__all__ = ["NetworkLogStreamer"]
