# backend/roomtracker/services/connection_manager.py

from __future__ import annotations

from typing import Dict, Set

from fastapi import WebSocket

from roomtracker.core.logging import get_logger

logger = get_logger(__name__)

# ============================================================================
# ROOM CHAT CONNECTIONS
# ============================================================================

class ConnectionManager:
    """
    Tracks the open chat sockets of each room and fans chat events out to them.

    A socket watches exactly one room, the one in its URL. Membership is
    checked before ``connect`` is called; this class only keeps the mapping.

    Data Structures:
        rooms: room_id -> Set of WebSocket connections watching that room
               Example: {"uuid-123": {websocket1, websocket2}}

        connection_rooms: WebSocket -> room_id it watches

        connection_users: WebSocket -> user_id (for logging)

    Scaling:
        Everything lives in process memory, so events only reach sockets
        held by the same worker.
    """

    def __init__(self) -> None:
        self.rooms: Dict[str, Set[WebSocket]] = {}
        self.connection_rooms: Dict[WebSocket, str] = {}
        self.connection_users: Dict[WebSocket, str] = {}

    async def connect(self, websocket: WebSocket, room_id: str, user_id: str) -> None:
        """
        Accept a socket and subscribe it to ``room_id``.

        Args:
            websocket: The WebSocket connection object
            room_id: UUID of the room whose chat it follows
            user_id: Profile id of the connected member
        """
        await websocket.accept()
        self.rooms.setdefault(room_id, set()).add(websocket)
        self.connection_rooms[websocket] = room_id
        self.connection_users[websocket] = user_id

        logger.info("✓ User %s watching room %s (%d sockets)", user_id, room_id, len(self.rooms[room_id]))

    def disconnect(self, websocket: WebSocket) -> None:
        """Forget a socket; empty rooms are dropped from the map."""
        room_id = self.connection_rooms.pop(websocket, None)
        user_id = self.connection_users.pop(websocket, "unknown")
        if room_id is None:
            return

        connections = self.rooms.get(room_id)
        if connections is not None:
            connections.discard(websocket)
            if not connections:
                del self.rooms[room_id]

        logger.info("✗ User %s stopped watching room %s", user_id, room_id)

    async def broadcast_to_room(self, room_id: str, message: dict) -> None:
        """
        Send a chat event to every socket watching a room.

        Args:
            room_id: UUID of target room
            message: JSON-serializable event

        Error Handling:
            A socket whose send fails is dropped.
        """
        if room_id not in self.rooms:
            logger.debug("[routing] Skipped broadcast: room=%s has 0 sockets", room_id)
            return

        disconnected = set()
        connections = self.rooms[room_id].copy()  # Copy to avoid modification during iteration

        logger.info("📨 Broadcasting %s to room %s: %d clients", message.get("type"), room_id, len(connections))

        for connection in connections:
            try:
                await connection.send_json(message)
            except Exception as e:
                logger.error(f"Send error: {e}")
                disconnected.add(connection)

        for conn in disconnected:
            self.disconnect(conn)

    def socket_count(self, room_id: str) -> int:
        return len(self.rooms.get(room_id, ()))
