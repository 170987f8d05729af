# backend/roomtracker/api/routes/auth.py

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from roomtracker.api.deps import get_auth_service
from roomtracker.api.utils import error_response, handle_error, success_response
from roomtracker.api.validation import validate_required, validate_string_length
from roomtracker.core.logging import get_logger
from roomtracker.models.models import DevLoginRequest
from roomtracker.services.auth_service import AuthService

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

DISPLAY_NAME_MAX_LENGTH = 50


@router.post("/dev-login")
async def dev_login(body: DevLoginRequest, auth: AuthService = Depends(get_auth_service)):
    """
    Create a profile and sign it in.

    Stands in for a real identity provider during development: the caller
    picks a display name and gets a session cookie for a fresh profile.
    """
    display_name = (body.display_name or "").strip()
    message = validate_required({"display_name": display_name}, ["display_name"]) or (
        validate_string_length(display_name, "display_name", 1, DISPLAY_NAME_MAX_LENGTH)
    )
    if message:
        return error_response(message, 400)

    try:
        profile = auth.create_profile(display_name, body.avatar_url)
        response = success_response({"user": profile}, 201)
        auth.set_session_cookie(response, auth.create_token(profile))
        logger.info(f"User signed in: {profile.display_name}")
        return response
    except Exception as e:
        return handle_error(e, "signing in")


@router.post("/logout")
async def logout(auth: AuthService = Depends(get_auth_service)):
    """Logout user."""
    response = success_response({"message": "Successfully logged out"})
    auth.clear_session_cookie(response)
    return response


@router.get("/me")
async def get_user_profile(request: Request, auth: AuthService = Depends(get_auth_service)):
    """Get current user profile."""
    try:
        user = auth.resolve_identity(request)
        return success_response({"user": auth.get_profile(user.id)})
    except Exception as e:
        return handle_error(e, "fetching profile")


@router.get("/session")
async def check_session(request: Request, auth: AuthService = Depends(get_auth_service)):
    """Check if user has valid session."""
    user = auth.optional_identity(request)
    if user is None:
        return {"authenticated": False}
    return {"authenticated": True, "user": user.model_dump()}
