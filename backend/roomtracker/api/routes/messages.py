# backend/roomtracker/api/routes/messages.py

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder

from roomtracker.api.deps import (
    get_auth_service,
    get_connection_manager,
    get_message_manager,
    get_room_manager,
)
from roomtracker.api.utils import error_response, handle_error, require_member, success_response
from roomtracker.api.validation import parse_limit
from roomtracker.models.models import MessageRequest
from roomtracker.services.auth_service import AuthService
from roomtracker.services.connection_manager import ConnectionManager
from roomtracker.services.message_manager import DEFAULT_MESSAGE_LIMIT, MessageManager
from roomtracker.services.room_manager import RoomManager

router = APIRouter(prefix="/api/rooms/{room_id}/messages", tags=["messages"])

# ============================================================================
# ROOM CHAT ENDPOINTS
# ============================================================================
#
# Every endpoint is members-only: 401 without a session, 404 for a missing
# room, 403 for a non-member. Writes are pushed to the room's open sockets
# as {"type": "message_created" | "message_updated" | "message_deleted", ...}.

@router.get("")
async def list_messages(
    room_id: str,
    request: Request,
    limit: Optional[str] = None,
    auth: AuthService = Depends(get_auth_service),
    rooms: RoomManager = Depends(get_room_manager),
    messages: MessageManager = Depends(get_message_manager),
):
    """Latest chat messages, oldest first. Returns 200 {"messages": [...]}."""
    parsed_limit, message = parse_limit(limit, DEFAULT_MESSAGE_LIMIT)
    if message:
        return error_response(message, 400)

    try:
        user = auth.resolve_identity(request)
        require_member(rooms, user.id, room_id)
        return success_response({"messages": messages.get_messages(room_id, parsed_limit)})
    except Exception as e:
        return handle_error(e, "fetching messages")


@router.post("")
async def send_message(
    room_id: str,
    body: MessageRequest,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
    rooms: RoomManager = Depends(get_room_manager),
    messages: MessageManager = Depends(get_message_manager),
    connections: ConnectionManager = Depends(get_connection_manager),
):
    """
    Post a chat message.

    Returns:
        201 {"message": MessageWithProfile}

    Errors:
        400 if the content is blank or longer than 2000 characters
    """
    try:
        user = auth.resolve_identity(request)
        require_member(rooms, user.id, room_id)
        sent = messages.send_message(room_id, user.id, body.content)
    except Exception as e:
        return handle_error(e, "sending message")

    await connections.broadcast_to_room(
        room_id, {"type": "message_created", "message": jsonable_encoder(sent)}
    )
    return success_response({"message": sent}, 201)


@router.patch("/{message_id}")
async def edit_message(
    room_id: str,
    message_id: str,
    body: MessageRequest,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
    rooms: RoomManager = Depends(get_room_manager),
    messages: MessageManager = Depends(get_message_manager),
    connections: ConnectionManager = Depends(get_connection_manager),
):
    """Edit one of the caller's messages. 404 if gone, 403 if not the author."""
    try:
        user = auth.resolve_identity(request)
        require_member(rooms, user.id, room_id)
        edited = messages.edit_message(room_id, message_id, user.id, body.content)
    except Exception as e:
        return handle_error(e, "editing message")

    await connections.broadcast_to_room(
        room_id, {"type": "message_updated", "message": jsonable_encoder(edited)}
    )
    return success_response({"message": edited})


@router.delete("/{message_id}")
async def delete_message(
    room_id: str,
    message_id: str,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
    rooms: RoomManager = Depends(get_room_manager),
    messages: MessageManager = Depends(get_message_manager),
    connections: ConnectionManager = Depends(get_connection_manager),
):
    """Soft-delete one of the caller's messages."""
    try:
        user = auth.resolve_identity(request)
        require_member(rooms, user.id, room_id)
        messages.delete_message(room_id, message_id, user.id)
    except Exception as e:
        return handle_error(e, "deleting message")

    await connections.broadcast_to_room(
        room_id, {"type": "message_deleted", "message_id": message_id}
    )
    return success_response({"message": "Message deleted"})
