"""
Realtime Broadcast Hub - WebSocket fan-out for the anonymous Q&A.

Every connected client sees every event (fan-out is global, not per thread).

Inbound envelope:  {"type": "NEW_ANSWER" | "REACTION", "payload": {...}}
Outbound envelope: {"type": "ANSWER_RECEIVED" | "REACTION_UPDATED", "payload": {...}}

Plus two replies sent only to the originating socket:
    {"type": "CONNECTED", "payload": {"connections": n}}
    {"type": "ERROR", "payload": {"message": "...", "detail": ...}}

The push channel is supplementary: clients that join late fetch current
state through the REST listing endpoints.
"""

import json
import logging
import time
from typing import Any, Dict, Optional, Set

from fastapi import WebSocket
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from placehub.schemas.schemas import (
    AnswerCreate, AnswerResponse, InboundEvent, OutboundEvent,
    ReactionPayload, ReactionUpdatedPayload, RealtimeMessage
)
from placehub.services.mongo_service import AnswerService

logger = logging.getLogger(__name__)


def build_event(event_type: OutboundEvent, payload: Dict[str, Any]) -> dict:
    return {"type": event_type.value, "payload": payload}


def answer_received_event(answer: dict) -> dict:
    payload = AnswerResponse.model_validate(answer).model_dump(by_alias=True, mode="json")
    return build_event(OutboundEvent.answer_received, payload)


def reaction_updated_event(answer: dict, triggered_by: str) -> dict:
    payload = ReactionUpdatedPayload(
        answer_id=answer["_id"],
        reactions=answer["reactions"],
        triggered_by=triggered_by,
        timestamp=int(time.time() * 1000)
    )
    return build_event(OutboundEvent.reaction_updated, payload.model_dump(by_alias=True))


class ConnectionHub:
    """
    Registry of open WebSocket connections.

    All add/remove/broadcast calls happen on the event loop thread, so the
    set needs no lock; broadcast iterates a snapshot so a disconnect during
    a send cannot break the loop.
    """

    def __init__(self):
        self._connections: Set[WebSocket] = set()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self._connections.add(websocket)
        logger.info(f"Client connected via WebSocket ({self.connection_count} open)")
        await self.send_to(websocket, build_event(OutboundEvent.connected, {"connections": self.connection_count}))

    def disconnect(self, websocket: WebSocket):
        self._connections.discard(websocket)
        logger.info(f"Client disconnected ({self.connection_count} open)")

    async def send_to(self, websocket: WebSocket, event: dict) -> bool:
        """Send to one socket. Returns False (and forgets the socket) on failure."""
        if websocket.client_state != WebSocketState.CONNECTED:
            self._connections.discard(websocket)
            return False
        try:
            await websocket.send_json(event)
            return True
        except Exception as e:
            logger.warning(f"Send failed, dropping connection: {e}")
            self._connections.discard(websocket)
            return False

    async def broadcast(self, event: dict) -> int:
        """
        Best-effort send to every connection open right now.

        Returns:
            Number of connections the event was delivered to
        """
        delivered = 0
        for websocket in list(self._connections):
            if await self.send_to(websocket, event):
                delivered += 1
        logger.debug(f"Broadcast {event.get('type')} to {delivered} client(s)")
        return delivered

    # ------------------------------------------------------------
    # Inbound message handling
    # ------------------------------------------------------------

    async def handle_message(self, websocket: WebSocket, raw: str):
        """
        Route one inbound message. Never raises: a bad message must not
        sever the connection or take down the hub.
        """
        try:
            try:
                message = RealtimeMessage.model_validate(json.loads(raw))
            except (json.JSONDecodeError, ValidationError) as e:
                await self._reply_error(websocket, "Malformed message", str(e))
                return

            if message.type == InboundEvent.new_answer.value:
                await self._handle_new_answer(websocket, message.payload)
            elif message.type == InboundEvent.reaction.value:
                await self._handle_reaction(websocket, message.payload)
            else:
                await self._reply_error(websocket, f"Unknown message type: {message.type}")
        except Exception as e:
            # Store errors land here: logged, action dropped
            logger.error(f"WebSocket message error: {e}")

    async def _handle_new_answer(self, websocket: WebSocket, payload: dict):
        try:
            data = AnswerCreate.model_validate(payload)
        except ValidationError as e:
            await self._reply_error(websocket, "Invalid answer", e.errors(include_url=False, include_context=False))
            return

        answer = await AnswerService().create_answer(data)
        await self.broadcast(answer_received_event(answer))

    async def _handle_reaction(self, websocket: WebSocket, payload: dict):
        try:
            data = ReactionPayload.model_validate(payload)
        except ValidationError as e:
            await self._reply_error(websocket, "Invalid reaction", e.errors(include_url=False, include_context=False))
            return

        answer = await AnswerService().react(data.answer_id, data.reaction)
        if answer is None:
            logger.info(f"Reaction dropped, answer {data.answer_id} not found")
            return
        await self.broadcast(reaction_updated_event(answer, data.reaction))

    async def _reply_error(self, websocket: WebSocket, message: str, detail: Optional[Any] = None):
        logger.warning(f"Rejected WebSocket message: {message}")
        await self.send_to(websocket, build_event(OutboundEvent.error, {"message": message, "detail": detail}))


# Singleton instance
_hub: ConnectionHub = None


def get_hub() -> ConnectionHub:
    """Get or create the connection hub (singleton pattern)"""
    global _hub
    if _hub is None:
        _hub = ConnectionHub()
    return _hub
