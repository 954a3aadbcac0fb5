"""
Realtime Routes

WS /ws - Shared realtime channel for the anonymous Q&A

Client sends:
    {"type": "NEW_ANSWER", "payload": {"questionId", "text", "senderIcon", "imageUrl"?, "sessionId"}}
    {"type": "REACTION", "payload": {"answerId", "reaction"}}

Server sends (to every client):
    {"type": "ANSWER_RECEIVED", "payload": {...answer}}
    {"type": "REACTION_UPDATED", "payload": {"answerId", "reactions", "triggeredBy", "timestamp"}}
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from placehub.services.realtime_hub import get_hub

router = APIRouter(tags=["Realtime"])


@router.websocket("/ws")
async def realtime_channel(websocket: WebSocket):
    hub = get_hub()
    await hub.connect(websocket)
    try:
        # One message at a time: arrival order is processing order per connection
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = message.get("text")
            if raw is None:
                raw = (message.get("bytes") or b"").decode("utf-8", errors="replace")
            await hub.handle_message(websocket, raw)
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(websocket)
