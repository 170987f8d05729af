# backend/roomtracker/api/routes/rooms.py

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from roomtracker.api.deps import get_auth_service, get_leaderboard_manager, get_room_manager
from roomtracker.api.utils import error_response, handle_error, require_member, success_response
from roomtracker.api.validation import validate_required, validate_string_length
from roomtracker.core.errors import ErrorKind, InvalidPeriod, NotAMember
from roomtracker.models.models import CreateRoomRequest
from roomtracker.services.auth_service import AuthService
from roomtracker.services.leaderboard_manager import (
    DEFAULT_PERIOD,
    LEADERBOARD_PERIODS,
    LeaderboardManager,
)
from roomtracker.services.room_manager import RoomManager

router = APIRouter(prefix="/api/rooms", tags=["rooms"])

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
LEADERBOARD_ACCESS_DENIED = "Access denied: You must be a member of this room to view the leaderboard"

# ============================================================================
# ROOM ENDPOINTS
# ============================================================================

@router.get("")
async def list_rooms(
    request: Request,
    auth: AuthService = Depends(get_auth_service),
    rooms: RoomManager = Depends(get_room_manager),
):
    """
    List every room the caller belongs to.

    Returns:
        200 {"rooms": [RoomWithDetails, ...]}, newest membership first
    """
    try:
        user = auth.resolve_identity(request)
        return success_response({"rooms": rooms.list_user_rooms(user.id)})
    except Exception as e:
        return handle_error(e, "fetching rooms")


@router.post("")
async def create_room(
    body: CreateRoomRequest,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
    rooms: RoomManager = Depends(get_room_manager),
):
    """
    Create a room owned by the caller.

    Returns:
        201 {"room": Room}

    Errors:
        400 if name is missing or longer than 100 characters, or the
        description is longer than 500 characters
    """
    data = body.model_dump()
    message = validate_required(data, ["name"]) or validate_string_length(
        body.name, "name", 1, NAME_MAX_LENGTH
    )
    if message is None and body.description is not None:
        message = validate_string_length(
            body.description, "description", 0, DESCRIPTION_MAX_LENGTH
        )
    if message:
        return error_response(message, 400)

    try:
        user = auth.resolve_identity(request)
        room = rooms.create_room(user.id, body.name, body.description)
        return success_response({"room": room}, 201)
    except Exception as e:
        return handle_error(e, "creating room")


@router.get("/{room_id}")
async def get_room(
    room_id: str,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
    rooms: RoomManager = Depends(get_room_manager),
):
    """
    Get details of a room the caller belongs to.

    Flow:
        1. Resolve the caller (401 if there is no valid session)
        2. Check membership (404 if the room is missing, 403 if not a member)
        3. Only then read the room details, personalized for the caller

    Returns:
        200 {"room": RoomWithDetails}
    """
    try:
        user = auth.resolve_identity(request)

        # Non-members must never trigger a detail read
        if not rooms.is_member(user.id, room_id):
            raise NotAMember()

        room = rooms.get_room_details(room_id, user.id)
        return success_response({"room": room})
    except Exception as e:
        return handle_error(e, "fetching room details")


@router.post("/{room_id}/join")
async def join_room(
    room_id: str,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
    rooms: RoomManager = Depends(get_room_manager),
):
    """
    Join an existing room as a member.

    Errors:
        404 if the room does not exist, 400 if already a member
    """
    try:
        user = auth.resolve_identity(request)
        rooms.join_room(user.id, room_id)
        return success_response({"message": "Successfully joined room"})
    except Exception as e:
        return handle_error(e, "joining room")


@router.delete("/{room_id}/leave")
async def leave_room(
    room_id: str,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
    rooms: RoomManager = Depends(get_room_manager),
):
    """
    Leave a room. An owner who is the last member deletes the room.

    Errors:
        400 if not a member, or if the owner leaves while others remain
    """
    try:
        user = auth.resolve_identity(request)
        rooms.leave_room(user.id, room_id)
        return success_response({"message": "Successfully left room"})
    except Exception as e:
        return handle_error(e, "leaving room", overrides={ErrorKind.FORBIDDEN: 400})


# ============================================================================
# LEADERBOARD
# ============================================================================

@router.get("/{room_id}/leaderboard")
async def get_leaderboard(
    room_id: str,
    request: Request,
    period: str = DEFAULT_PERIOD,
    auth: AuthService = Depends(get_auth_service),
    rooms: RoomManager = Depends(get_room_manager),
    leaderboard: LeaderboardManager = Depends(get_leaderboard_manager),
):
    """
    Rank the members of a room by session time.

    Query params:
        period: day | week | month | all-time (default: week)

    Returns:
        200 {"period": "...", "leaderboard": [LeaderboardEntry, ...]}

    Errors:
        400 for an unknown period, 401, 404 room missing, 403 not a member
    """
    if period not in LEADERBOARD_PERIODS:
        return error_response(InvalidPeriod.default_message, 400)

    try:
        user = auth.resolve_identity(request)
        require_member(rooms, user.id, room_id, LEADERBOARD_ACCESS_DENIED)
        entries = leaderboard.compute_leaderboard(room_id, period)
        return success_response({"period": period, "leaderboard": entries})
    except Exception as e:
        return handle_error(e, "fetching leaderboard")
