# backend/roomtracker/api/routes/pages.py
"""Server-rendered pages. Data is fetched here; templates only lay it out."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from roomtracker.api.deps import (
    get_auth_service,
    get_leaderboard_manager,
    get_message_manager,
    get_room_manager,
)
from roomtracker.api.utils import status_for
from roomtracker.core.config import settings
from roomtracker.core.errors import AppError
from roomtracker.core.logging import get_logger
from roomtracker.services.auth_service import AuthService
from roomtracker.services.leaderboard_manager import (
    DEFAULT_PERIOD,
    LEADERBOARD_PERIODS,
    LeaderboardManager,
)
from roomtracker.services.message_manager import MessageManager
from roomtracker.services.room_manager import RoomManager

logger = get_logger(__name__)

router = APIRouter(tags=["pages"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[2] / "templates"))


def format_duration(seconds: float) -> str:
    """90061 -> '25h 1m'"""
    minutes = int(seconds // 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m" if hours else f"{minutes}m"


templates.env.filters["duration"] = format_duration

# Placeholder numbers until sessions are aggregated per user
DASHBOARD_PLACEHOLDER_STATS = [
    {"label": "Today", "value": "2h 34m"},
    {"label": "This Week", "value": "15h 20m"},
    {"label": "Streak", "value": "5 days"},
]


def redirect_to_login() -> RedirectResponse:
    return RedirectResponse(url=settings.LOGIN_PATH, status_code=303)


@router.get("/", include_in_schema=False)
async def home():
    return RedirectResponse(url="/dashboard", status_code=303)


@router.get("/dev-login", response_class=HTMLResponse)
async def dev_login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {"title": "Sign in"})


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(request: Request, auth: AuthService = Depends(get_auth_service)):
    """Session timer, mock stat cards and an empty recent-sessions list."""
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "title": "Dashboard",
            "user": auth.optional_identity(request),
            "stats": DASHBOARD_PLACEHOLDER_STATS,
            "recent_sessions": [],
        },
    )


@router.get("/rooms", response_class=HTMLResponse)
async def rooms_page(
    request: Request,
    auth: AuthService = Depends(get_auth_service),
    rooms: RoomManager = Depends(get_room_manager),
):
    """
    The caller's rooms as a grid of cards, or an empty state with
    create/join actions. Visitors without a session go to the login page.
    """
    user = auth.optional_identity(request)
    if user is None:
        return redirect_to_login()

    user_rooms = rooms.list_user_rooms(user.id)
    return templates.TemplateResponse(
        request,
        "rooms.html",
        {"title": "Rooms", "user": user, "rooms": user_rooms},
    )


@router.get("/rooms/{room_id}", response_class=HTMLResponse)
async def room_page(
    room_id: str,
    request: Request,
    period: Optional[str] = None,
    auth: AuthService = Depends(get_auth_service),
    rooms: RoomManager = Depends(get_room_manager),
    leaderboard: LeaderboardManager = Depends(get_leaderboard_manager),
    messages: MessageManager = Depends(get_message_manager),
):
    """
    Room view for members; a join prompt with the public room info for
    everyone else. An unknown ``period`` falls back to the default.
    """
    user = auth.optional_identity(request)
    if user is None:
        return redirect_to_login()

    if period not in LEADERBOARD_PERIODS:
        period = DEFAULT_PERIOD

    try:
        if not rooms.is_member(user.id, room_id):
            summary = rooms.get_basic_room_info(room_id)
            return templates.TemplateResponse(
                request,
                "join_prompt.html",
                {"title": summary.name, "user": user, "room": summary},
            )
        room = rooms.get_room_details(room_id, user.id)
        entries = leaderboard.compute_leaderboard(room_id, period)
        chat = messages.get_messages(room_id)
    except AppError as e:
        logger.info(f"Room page {room_id} refused for {user.id}: {e.message}")
        return templates.TemplateResponse(
            request,
            "error.html",
            {"title": "Room unavailable", "user": user, "message": e.message},
            status_code=status_for(e.kind),
        )

    return templates.TemplateResponse(
        request,
        "room_detail.html",
        {
            "title": room.name,
            "user": user,
            "room": room,
            "period": period,
            "periods": LEADERBOARD_PERIODS,
            "leaderboard": entries,
            "messages": chat,
        },
    )
