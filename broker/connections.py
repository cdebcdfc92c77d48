from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Protocol

from broker.errors import TransportError

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """The slice of a duplex channel the registry needs.

    Starlette's `WebSocket` satisfies this.
    """

    async def send_text(self, data: str) -> None: ...

    async def close(self) -> None: ...


class ConnectionRegistry:
    """In-process set of open connections with best-effort fan-out.

    Contract:
      - `register(conn)` hands out a display identifier ("Client-N"). N comes
        from a counter that only ever grows, so identifiers are never reused
        after a disconnect.
      - `broadcast(text)` writes to every member. A failed write drops that
        connection (and closes it) without stopping delivery to the others.

    Every read and write of the map goes through `_lock`. Broadcast copies the
    membership under the lock and writes after releasing it, so a slow peer
    does not stall registration.
    """

    def __init__(self, *, prefix: str = "Client") -> None:
        self._prefix = prefix
        self._clients: dict[Connection, str] = {}
        self._counter = itertools.count(1)
        self._lock = asyncio.Lock()

    async def register(self, conn: Connection) -> str:
        async with self._lock:
            existing = self._clients.get(conn)
            if existing is not None:
                return existing
            identifier = f"{self._prefix}-{next(self._counter)}"
            self._clients[conn] = identifier
            total = len(self._clients)
        logger.info("Client connected: %s (%d total)", identifier, total)
        return identifier

    async def unregister(self, conn: Connection) -> str | None:
        async with self._lock:
            identifier = self._clients.pop(conn, None)
            total = len(self._clients)
        if identifier is not None:
            logger.info("Client disconnected: %s (%d total)", identifier, total)
        return identifier

    async def identifier_for(self, conn: Connection) -> str | None:
        async with self._lock:
            return self._clients.get(conn)

    async def snapshot(self) -> list[str]:
        """Identifiers of the open connections, in registration order."""

        async with self._lock:
            return list(self._clients.values())

    async def size(self) -> int:
        async with self._lock:
            return len(self._clients)

    async def send(self, conn: Connection, text: str) -> None:
        try:
            await conn.send_text(text)
        except Exception as e:
            raise TransportError(str(e) or type(e).__name__) from e

    async def broadcast(self, text: str) -> int:
        """Write `text` to every registered connection.

        Returns how many writes succeeded.
        """

        async with self._lock:
            members = list(self._clients.items())

        delivered = 0
        for conn, identifier in members:
            try:
                await conn.send_text(text)
            except Exception as e:
                logger.warning("Broadcast error to %s: %s, removing client", identifier, e)
                await self.drop(conn)
                continue
            delivered += 1
        return delivered

    async def drop(self, conn: Connection) -> None:
        """Unregister `conn` and close its transport."""

        await self.unregister(conn)
        try:
            await conn.close()
        except Exception:
            # Already torn down on the peer side.
            logger.debug("close() failed on dropped connection", exc_info=True)
