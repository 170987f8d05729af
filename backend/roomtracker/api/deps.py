# backend/roomtracker/api/deps.py
"""FastAPI dependencies handing the process singletons to route handlers."""

from __future__ import annotations

from roomtracker.core import state
from roomtracker.services.auth_service import AuthService
from roomtracker.services.connection_manager import ConnectionManager
from roomtracker.services.leaderboard_manager import LeaderboardManager
from roomtracker.services.message_manager import MessageManager
from roomtracker.services.room_manager import RoomManager
from roomtracker.services.session_manager import SessionManager


def get_auth_service() -> AuthService:
    return state.auth_service


def get_room_manager() -> RoomManager:
    return state.room_manager


def get_session_manager() -> SessionManager:
    return state.session_manager


def get_leaderboard_manager() -> LeaderboardManager:
    return state.leaderboard_manager


def get_message_manager() -> MessageManager:
    return state.message_manager


def get_connection_manager() -> ConnectionManager:
    return state.connection_manager
