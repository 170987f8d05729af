# backend/roomtracker/api/utils.py

from __future__ import annotations

from typing import Any, Mapping, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from roomtracker.core.errors import AppError, ErrorKind, NotAMember
from roomtracker.core.logging import get_logger

logger = get_logger(__name__)

STATUS_BY_KIND = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID: 400,
    ErrorKind.INTERNAL: 500,
}

INTERNAL_ERROR_MESSAGE = "Internal server error"


def success_response(data: Any, status_code: int = 200) -> JSONResponse:
    """
    Wrap a payload in the success envelope.

    Example:
        {"success": true, "data": {"room": {...}}}
    """
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": jsonable_encoder(data)},
    )


def error_response(message: str, status_code: int = 400) -> JSONResponse:
    """
    Wrap a message in the error envelope.

    Example:
        {"success": false, "error": "Room not found"}
    """
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


def status_for(kind: ErrorKind, overrides: Optional[Mapping[ErrorKind, int]] = None) -> int:
    if overrides and kind in overrides:
        return overrides[kind]
    return STATUS_BY_KIND[kind]


def handle_error(
    exc: Exception,
    action: str,
    overrides: Optional[Mapping[ErrorKind, int]] = None,
) -> JSONResponse:
    """
    Turn any failure caught at a route boundary into an error envelope.

    Known ``AppError``s map by kind (``overrides`` lets a route remap single
    kinds); anything else is a 500 carrying the exception text when there is
    one.

    Args:
        exc: The caught exception
        action: What the route was doing, for the log line
        overrides: Per-route kind -> status replacements
    """
    if isinstance(exc, AppError):
        status_code = status_for(exc.kind, overrides)
        if status_code >= 500:
            logger.error(f"Error {action}: {exc.message}")
        else:
            logger.info(f"Rejected {action}: {exc.message} ({status_code})")
        return error_response(exc.message, status_code)

    logger.exception(f"Error {action}: {exc}")
    return error_response(str(exc) or INTERNAL_ERROR_MESSAGE, 500)


def require_member(rooms: Any, user_id: str, room_id: str, message: Optional[str] = None) -> None:
    """
    Stop a request unless the caller belongs to the room.

    Raises:
        RoomNotFound: if the room does not exist (from ``rooms.is_member``)
        NotAMember: if it exists but the caller is not in it
    """
    if not rooms.is_member(user_id, room_id):
        raise NotAMember(message)
