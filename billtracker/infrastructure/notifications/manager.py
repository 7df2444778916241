"""Connection management helpers for notification event streams."""

from __future__ import annotations

import asyncio
import json
import logging
import threading
from collections import defaultdict
from typing import Any, DefaultDict, Protocol, Set

logger = logging.getLogger(__name__)


class SseConnectionClosed(Exception):
    """Raised when a frame is written to a stream that can no longer accept it."""


class SseHandle(Protocol):
    def write(self, frame: str) -> None: ...


def format_sse_frame(payload: Any) -> str:
    """Serialize ``payload`` as a single ``data:`` event."""

    return f"data: {json.dumps(payload, default=str)}\n\n"


class SseConnection:
    """An open event stream for one browser tab.

    Frames are queued and drained by the streaming response running on the loop
    the connection was opened on. Writes coming from other threads (the reminder
    job) are handed over with ``call_soon_threadsafe``. Room in the backlog is
    reserved before a write returns, so a stream that stopped draining is
    reported to the writer instead of silently losing the frame.
    """

    def __init__(
        self,
        user_id: int,
        *,
        max_queue: int = 100,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.user_id = user_id
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._max_queue = max_queue
        self._pending = 0
        self._pending_lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, frame: str) -> None:
        if self._closed:
            raise SseConnectionClosed(f"Stream for user {self.user_id} is closed")

        with self._pending_lock:
            if self._pending >= self._max_queue:
                self._closed = True
                raise SseConnectionClosed(
                    f"Stream for user {self.user_id} is not draining frames"
                )
            self._pending += 1

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._queue.put_nowait(frame)
            return

        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, frame)
        except RuntimeError as exc:
            self._closed = True
            raise SseConnectionClosed(f"Event loop for user {self.user_id} is closed") from exc

    async def next_frame(self, timeout: float) -> str | None:
        """Return the next queued frame, or ``None`` when ``timeout`` elapses.

        A closed connection hands out what is already queued and then returns
        ``None`` at once.
        """

        if self._closed and self._queue.empty():
            return None
        try:
            frame = await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None
        with self._pending_lock:
            self._pending -= 1
        return frame

    def close(self) -> None:
        self._closed = True


class SseConnectionRegistry:
    """Track open event streams grouped by user.

    A user may keep several streams open (one per tab); each receives every
    frame. Access is serialized with a lock because the reminder job writes
    from a worker thread while request handlers register and drop streams on
    the event loop.
    """

    def __init__(self) -> None:
        self._connections: DefaultDict[int, Set[SseHandle]] = defaultdict(set)
        self._lock = threading.Lock()

    def register(self, user_id: int, connection: SseHandle) -> None:
        with self._lock:
            self._connections[user_id].add(connection)
            total = sum(len(items) for items in self._connections.values())
        logger.info("SSE client connected for user %s. Total clients: %s", user_id, total)

    def deregister(self, user_id: int, connection: SseHandle | None = None) -> None:
        """Remove ``connection`` (or every stream of ``user_id`` when omitted)."""

        with self._lock:
            connections = self._connections.get(user_id)
            if connections is None:
                return
            if connection is None:
                connections.clear()
            else:
                connections.discard(connection)
            if not connections:
                self._connections.pop(user_id, None)
        logger.info("SSE client disconnected for user %s", user_id)

    def connections_for(self, user_id: int) -> list[SseHandle]:
        with self._lock:
            return list(self._connections.get(user_id, ()))

    def count(self) -> int:
        with self._lock:
            return sum(len(items) for items in self._connections.values())

    def send(self, user_id: int, payload: Any) -> bool:
        """Write ``payload`` to every stream of ``user_id``.

        Streams that fail to accept the frame are dropped. Returns ``True`` when
        at least one stream accepted it.
        """

        connections = self.connections_for(user_id)
        if not connections:
            return False

        frame = format_sse_frame(payload)
        delivered = False
        for connection in connections:
            try:
                connection.write(frame)
            except Exception:
                logger.exception("Failed to send SSE to user %s", user_id)
                self.deregister(user_id, connection)
            else:
                delivered = True
        return delivered

    def close_all(self) -> None:
        with self._lock:
            connections = [item for items in self._connections.values() for item in items]
            self._connections.clear()
        for connection in connections:
            close = getattr(connection, "close", None)
            if close is not None:
                close()


__all__ = [
    "SseConnection",
    "SseConnectionClosed",
    "SseConnectionRegistry",
    "SseHandle",
    "format_sse_frame",
]
