"""
Checkout Hub

Server side of the checkout channel. Keeps the open sockets of each
signed-in shopper and pushes completion events to them.
"""

import logging
from collections import defaultdict
from typing import Any, Optional

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from shared.notifier.models import ChannelEvent, ChannelMessage

from ..models.user import User

logger = logging.getLogger(__name__)


class CheckoutHub:
    """Registry of open checkout sockets keyed by user document id"""

    def __init__(self):
        self._sockets: dict[str, set[WebSocket]] = defaultdict(set)

    def connection_count(self, user_document_id: Optional[str] = None) -> int:
        if user_document_id is not None:
            return len(self._sockets.get(user_document_id, ()))
        return sum(len(sockets) for sockets in self._sockets.values())

    async def serve(self, websocket: WebSocket, user: User) -> None:
        """Accept a socket and answer it until the client goes away"""
        await websocket.accept()
        self._sockets[user.document_id].add(websocket)
        logger.info(f"Checkout channel opened for user {user.document_id}")

        try:
            while True:
                raw = await websocket.receive_text()
                try:
                    message = ChannelMessage.decode(raw)
                except ValidationError:
                    logger.debug(f"Ignoring unrecognised frame from {user.document_id}")
                    continue

                if message.event == ChannelEvent.CONNECTION:
                    await websocket.send_text(
                        ChannelMessage(event=ChannelEvent.CONFIRMATION).encode()
                    )
                elif message.event == ChannelEvent.DISCONNECT:
                    break
        except WebSocketDisconnect as e:
            logger.debug(f"Client left checkout channel for {user.document_id}: code {e.code}")
        finally:
            self._unregister(user.document_id, websocket)
            logger.info(f"Checkout channel closed for user {user.document_id}")

    async def publish(self, user_document_id: str, event: ChannelEvent, data: Any = None) -> int:
        """
        Send an event to every socket of a user.

        Returns:
            Number of sockets the event was delivered to
        """
        frame = ChannelMessage(event=event, data=data).encode()
        delivered = 0
        for websocket in list(self._sockets.get(user_document_id, ())):
            try:
                await websocket.send_text(frame)
                delivered += 1
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.warning(f"Dropping dead checkout socket for {user_document_id}: {e}")
                self._unregister(user_document_id, websocket)

        if not delivered:
            logger.info(f"No open checkout channel for user {user_document_id}, {event.value} not delivered")
        return delivered

    async def disconnect_all(self) -> None:
        """Tell every client to disconnect and close the sockets"""
        frame = ChannelMessage(event=ChannelEvent.DISCONNECT).encode()
        for user_document_id, sockets in list(self._sockets.items()):
            for websocket in list(sockets):
                try:
                    await websocket.send_text(frame)
                    await websocket.close()
                except (WebSocketDisconnect, RuntimeError) as e:
                    logger.debug(f"Socket already gone for {user_document_id}: {e}")
                self._unregister(user_document_id, websocket)

    def _unregister(self, user_document_id: str, websocket: WebSocket) -> None:
        sockets = self._sockets.get(user_document_id)
        if not sockets:
            return
        sockets.discard(websocket)
        if not sockets:
            del self._sockets[user_document_id]


# Singleton instance
checkout_hub = CheckoutHub()
