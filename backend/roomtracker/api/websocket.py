# backend/roomtracker/api/websocket.py

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder

from roomtracker.api.deps import (
    get_auth_service,
    get_connection_manager,
    get_message_manager,
    get_room_manager,
)
from roomtracker.api.utils import require_member
from roomtracker.core.errors import AppError, ErrorKind
from roomtracker.core.logging import get_logger
from roomtracker.services.auth_service import AuthService
from roomtracker.services.connection_manager import ConnectionManager
from roomtracker.services.message_manager import MessageManager
from roomtracker.services.room_manager import RoomManager

logger = get_logger(__name__)

router = APIRouter()

# Close codes sent instead of accepting the socket
CLOSE_CODE_BY_KIND = {
    ErrorKind.UNAUTHORIZED: 4401,
    ErrorKind.FORBIDDEN: 4403,
    ErrorKind.NOT_FOUND: 4404,
}

# ============================================================================
# ROOM CHAT WEBSOCKET
# ============================================================================

@router.websocket("/ws/rooms/{room_id}")
async def room_chat(
    websocket: WebSocket,
    room_id: str,
    auth: AuthService = Depends(get_auth_service),
    rooms: RoomManager = Depends(get_room_manager),
    messages: MessageManager = Depends(get_message_manager),
    connections: ConnectionManager = Depends(get_connection_manager),
):
    """
    Live chat for one room.

    The session cookie authenticates the socket, and only members get in.
    Otherwise the socket is closed before it is accepted, with 4401 (no
    session), 4404 (no such room) or 4403 (not a member).

    Protocol:
    =========

    Client -> Server Actions:
    -------------------------
    Send Message:
        {"action": "send", "content": "Hello!"}

    Ping:
        {"action": "ping"}
        Response: {"type": "pong"}

    Server -> Client Messages:
    -------------------------
    New / edited message:
        {"type": "message_created" | "message_updated", "message": {...}}

    Deleted message:
        {"type": "message_deleted", "message_id": "..."}

    Error:
        {"type": "error", "message": "..."}

    Messages sent over REST show up here too.
    """
    try:
        user = auth.resolve_identity(websocket)
        require_member(rooms, user.id, room_id)
    except AppError as e:
        logger.info(f"Chat socket for room {room_id} refused: {e.message}")
        await websocket.close(code=CLOSE_CODE_BY_KIND.get(e.kind, 1011), reason=e.message)
        return

    await connections.connect(websocket, room_id, user.id)

    try:
        while True:
            data = await websocket.receive_text()

            try:
                payload = json.loads(data)
            except json.JSONDecodeError:
                await websocket.send_json({"type": "error", "message": "Invalid JSON"})
                continue

            action = payload.get("action") if isinstance(payload, dict) else None

            if action == "send":
                try:
                    require_member(rooms, user.id, room_id)
                    sent = messages.send_message(room_id, user.id, payload.get("content"))
                except AppError as e:
                    await websocket.send_json({"type": "error", "message": e.message})
                    continue
                await connections.broadcast_to_room(
                    room_id, {"type": "message_created", "message": jsonable_encoder(sent)}
                )

            elif action == "ping":
                await websocket.send_json({"type": "pong"})

            else:
                await websocket.send_json({"type": "error", "message": f"Unknown action: {action}"})

    except WebSocketDisconnect:
        connections.disconnect(websocket)
    except Exception as e:
        logger.error("WebSocket error: %s", e)
        connections.disconnect(websocket)
        raise
