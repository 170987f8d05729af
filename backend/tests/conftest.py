"""Shared fixtures: an in-memory database wired into the app via dependency overrides."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from roomtracker.api.deps import (
    get_auth_service,
    get_connection_manager,
    get_leaderboard_manager,
    get_message_manager,
    get_room_manager,
    get_session_manager,
)
from roomtracker.core import state
from roomtracker.core.config import settings
from roomtracker.main import app
from roomtracker.services.auth_service import AuthService
from roomtracker.services.connection_manager import ConnectionManager
from roomtracker.services.leaderboard_manager import LeaderboardManager
from roomtracker.services.message_manager import MessageManager
from roomtracker.services.room_manager import RoomManager
from roomtracker.services.session_manager import SessionManager
from roomtracker.services.storage import Database

TEST_SECRET = "test-secret"


@pytest.fixture
def db() -> Database:
    return Database()


@pytest.fixture
def auth_service(db: Database) -> AuthService:
    return AuthService(db, secret_key=TEST_SECRET)


@pytest.fixture
def room_manager(db: Database) -> RoomManager:
    return RoomManager(db)


@pytest.fixture
def session_manager(db: Database) -> SessionManager:
    return SessionManager(db)


@pytest.fixture
def leaderboard_manager(db: Database) -> LeaderboardManager:
    return LeaderboardManager(db)


@pytest.fixture
def message_manager(db: Database) -> MessageManager:
    return MessageManager(db)


@pytest.fixture
def connection_manager() -> ConnectionManager:
    return ConnectionManager()


@pytest.fixture
def client(
    db,
    auth_service,
    room_manager,
    session_manager,
    leaderboard_manager,
    message_manager,
    connection_manager,
    monkeypatch,
):
    monkeypatch.setattr(state, "database", db)
    monkeypatch.setattr(state, "connection_manager", connection_manager)
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_room_manager] = lambda: room_manager
    app.dependency_overrides[get_session_manager] = lambda: session_manager
    app.dependency_overrides[get_leaderboard_manager] = lambda: leaderboard_manager
    app.dependency_overrides[get_message_manager] = lambda: message_manager
    app.dependency_overrides[get_connection_manager] = lambda: connection_manager
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def login(client: TestClient, auth_service: AuthService):
    """Create a profile and make it the client's current session."""

    def _login(display_name: str = "Alice"):
        profile = auth_service.create_profile(display_name)
        client.cookies.set(settings.COOKIE_NAME, auth_service.create_token(profile))
        return profile

    return _login
