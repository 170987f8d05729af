# backend/roomtracker/core/state.py
from __future__ import annotations

from datetime import datetime, timezone

from roomtracker.core.config import settings
from roomtracker.services.auth_service import AuthService
from roomtracker.services.connection_manager import ConnectionManager
from roomtracker.services.leaderboard_manager import LeaderboardManager
from roomtracker.services.message_manager import MessageManager
from roomtracker.services.room_manager import RoomManager
from roomtracker.services.session_manager import SessionManager
from roomtracker.services.storage import Database

# Global singletons for app state
database = Database(settings.DATA_FILE)
room_manager = RoomManager(database)
session_manager = SessionManager(database)
leaderboard_manager = LeaderboardManager(database)
message_manager = MessageManager(database)
connection_manager = ConnectionManager()
auth_service = AuthService(database)

app_start_time: datetime = datetime.now(timezone.utc)
