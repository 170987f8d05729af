# backend/roomtracker/api/routes/health.py

from datetime import datetime, timezone

from fastapi import APIRouter

from roomtracker.core import state

router = APIRouter()

@router.get("/health")
async def health():
    """
    Health check endpoint.

    Returns current status, uptime and record counts. Used by container
    liveness checks and monitoring.

    Returns:
        dict: Status, uptime, record counts and open chat sockets
    """
    uptime_seconds = (datetime.now(timezone.utc) - state.app_start_time).total_seconds()
    with state.database.lock:
        return {
            "status": "healthy",
            "uptime_hours": round(uptime_seconds / 3600, 2),
            "rooms": len(state.database.rooms),
            "memberships": len(state.database.memberships),
            "sessions": len(state.database.sessions),
            "messages": len(state.database.messages),
            "chat_sockets": len(state.connection_manager.connection_rooms),
        }
