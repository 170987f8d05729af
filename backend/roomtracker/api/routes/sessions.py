# backend/roomtracker/api/routes/sessions.py

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request

from roomtracker.api.deps import get_auth_service, get_session_manager
from roomtracker.api.utils import error_response, handle_error, success_response
from roomtracker.api.validation import (
    parse_limit,
    validate_date_range,
    validate_positive_number,
    validate_required,
    validate_timestamp,
)
from roomtracker.models.models import CreateSessionRequest
from roomtracker.services.auth_service import AuthService
from roomtracker.services.session_manager import SessionManager

router = APIRouter(prefix="/api/sessions", tags=["sessions"])

DEFAULT_LIMIT = 10


@router.post("")
async def create_session(
    body: CreateSessionRequest,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
    sessions: SessionManager = Depends(get_session_manager),
):
    """Record a finished session for the caller. Returns 201 {"session": Session}."""
    message = (
        validate_required(body.model_dump(), ["started_at", "ended_at", "duration_seconds"])
        or validate_positive_number(body.duration_seconds, "duration_seconds")
        or validate_date_range(body.started_at, body.ended_at)
    )
    if message:
        return error_response(message, 400)

    try:
        user = auth.resolve_identity(request)
        session = sessions.create_session(
            user.id, body.started_at, body.ended_at, body.duration_seconds
        )
        return success_response({"session": session}, 201)
    except Exception as e:
        return handle_error(e, "creating session")


@router.get("")
async def list_sessions(
    request: Request,
    limit: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    auth: AuthService = Depends(get_auth_service),
    sessions: SessionManager = Depends(get_session_manager),
):
    """
    List the caller's sessions, newest first.

    Query params:
        limit: positive integer, default 10
        start_date / end_date: ISO timestamps bounding ``started_at``
    """
    parsed_limit, message = parse_limit(limit, DEFAULT_LIMIT)
    if message:
        return error_response(message, 400)

    for name, value in (("start_date", start_date), ("end_date", end_date)):
        message = validate_timestamp(value, name) if value else None
        if message:
            return error_response(message, 400)
    if start_date and end_date:
        message = validate_date_range(start_date, end_date)
        if message:
            return error_response(message, 400)

    try:
        user = auth.resolve_identity(request)
        result = sessions.get_user_sessions(
            user.id, limit=parsed_limit, start_date=start_date, end_date=end_date
        )
        return success_response({"sessions": result})
    except Exception as e:
        return handle_error(e, "fetching sessions")
