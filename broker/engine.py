from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

from broker.connections import ConnectionRegistry
from broker.errors import DispatchError, FormatError, HandlerError, TransportError
from broker.protocol import Message, decode, encode
from broker.registry import HandlerRegistry

logger = logging.getLogger(__name__)

BROKER_TOPIC = "broker"
BROKER_ID_TOPIC = "broker_id"


def frame_text(message: MutableMapping[str, Any]) -> str:
    """Text of a websocket.receive message, whether it arrived as a text or a binary frame."""

    text = message.get("text")
    if text is not None:
        return text
    data = message.get("bytes")
    if data is None:
        raise FormatError(f"unexpected message format: {message.get('type')}")
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FormatError(f"unexpected message format: binary frame is not utf-8 ({e.reason})") from e


class Engine:
    """Decodes frames, dispatches them by topic and fans results out.

    Handlers receive the engine itself so they can `broadcast` side effects
    in addition to the result they return to the caller.
    """

    def __init__(self, *, handlers: HandlerRegistry, connections: ConnectionRegistry | None = None) -> None:
        self.handlers = handlers
        self.connections = connections or ConnectionRegistry()

    async def process_message(self, raw: str) -> str:
        """Run one frame through decode -> lookup -> handler -> encode.

        Periodic jobs push synthetic frames through here too; there is no
        difference between those and frames read off a socket.
        """

        msg = decode(raw)
        handler = self.handlers.lookup(msg.topic)
        try:
            result = await handler(self, msg.payload)
        except Exception as e:
            raise HandlerError(msg.topic, e) from e
        return Message(topic=msg.topic, payload=result).encode()

    async def broadcast(self, text: str) -> int:
        return await self.connections.broadcast(text)

    async def serve(self, websocket: WebSocket) -> None:
        """Own one connection from handshake to close."""

        await websocket.accept()
        client_id = await self.connections.register(websocket)
        try:
            await self.broadcast(encode(BROKER_TOPIC, f"client_added,{client_id}"))
            await self.connections.send(websocket, encode(BROKER_ID_TOPIC, client_id))

            while True:
                try:
                    message = await websocket.receive()
                except WebSocketDisconnect:
                    break
                except Exception as e:
                    raise TransportError(str(e) or type(e).__name__) from e

                if message["type"] == "websocket.disconnect":
                    break
                logger.debug("%s -> %s", client_id, message)
                await self.connections.send(websocket, await self._respond(message))
        except TransportError as e:
            logger.info("Read error on %s: %s", client_id, e)
        finally:
            await self.connections.drop(websocket)
            await self.broadcast(encode(BROKER_TOPIC, f"client_removed,{client_id}"))

    async def _respond(self, message: MutableMapping[str, Any]) -> str:
        # Errors go back to the sender as bare text; the session stays open.
        try:
            return await self.process_message(frame_text(message))
        except FormatError as e:
            logger.info("Bad frame: %s", e)
            return str(e)
        except DispatchError as e:
            logger.info("%s", e)
            return str(e)
