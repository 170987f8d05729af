# backend/roomtracker/api/routes/root.py

from fastapi import APIRouter

from roomtracker.core.config import settings

router = APIRouter()


@router.get("/api")
async def root():
    """
    API information.

    Returns basic info about the API and its endpoints.
    """
    return {
        "message": settings.APP_NAME,
        "version": "0.1.0",
        "features": ["rooms", "memberships", "sessions", "leaderboard", "chat", "dashboard"],
        "endpoints": {
            "rooms": "/api/rooms",
            "room_details": "/api/rooms/{room_id}",
            "leaderboard": "/api/rooms/{room_id}/leaderboard?period=week",
            "messages": "/api/rooms/{room_id}/messages",
            "chat_socket": "/ws/rooms/{room_id}",
            "sessions": "/api/sessions",
            "auth": "/auth",
            "health": "/health",
        },
    }
