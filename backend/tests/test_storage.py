"""JSON file persistence."""

from __future__ import annotations

import pytest

from roomtracker.core.errors import RoomNotFound, StorageError
from roomtracker.services.auth_service import AuthService
from roomtracker.services.message_manager import MessageManager
from roomtracker.services.room_manager import RoomManager
from roomtracker.services.session_manager import SessionManager
from roomtracker.services.storage import Database


def test_data_survives_restart(tmp_path):
    path = str(tmp_path / "data.json")
    db = Database(path)
    alice = AuthService(db).create_profile("Alice")
    room = RoomManager(db).create_room(alice.id, "Deep Work", "Heads down")
    SessionManager(db).create_session(
        alice.id, "2025-01-09T10:00:00+00:00", "2025-01-09T11:00:00+00:00", 3600
    )

    reloaded = Database(path)

    assert reloaded.profiles[alice.id].display_name == "Alice"
    assert reloaded.rooms[room.id].description == "Heads down"
    assert reloaded.memberships[(room.id, alice.id)].role == "owner"
    assert len(reloaded.sessions) == 1
    assert RoomManager(reloaded).get_room_details(room.id, alice.id).stats.total_hours == 1


def test_failed_mutation_is_not_saved(tmp_path):
    path = tmp_path / "data.json"
    db = Database(str(path))
    alice = AuthService(db).create_profile("Alice")
    before = path.read_text()

    with pytest.raises(RoomNotFound):
        RoomManager(db).join_room(alice.id, "ghost")

    assert path.read_text() == before


def test_corrupt_file_starts_empty(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("{not json")

    db = Database(str(path))

    assert db.rooms == {}
    assert db.profiles == {}


def test_in_memory_database_never_writes(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    db = Database()
    AuthService(db).create_profile("Alice")

    assert list(tmp_path.iterdir()) == []


def test_failed_save_rolls_back_memory(tmp_path):
    db = Database(str(tmp_path / "missing_dir" / "data.json"))
    rooms = RoomManager(db)

    with pytest.raises(StorageError):
        rooms.create_room("alice-id", "Deep Work", None)

    assert db.rooms == {}
    assert db.memberships == {}


def test_failed_save_keeps_earlier_state(tmp_path):
    path = tmp_path / "data.json"
    db = Database(str(path))
    alice = AuthService(db).create_profile("Alice")
    room = RoomManager(db).create_room(alice.id, "Deep Work", None)

    # Point at a directory that does not exist so the next save fails
    db.path = str(tmp_path / "gone" / "data.json")
    with pytest.raises(StorageError):
        RoomManager(db).leave_room(alice.id, room.id)

    assert room.id in db.rooms
    assert (room.id, alice.id) in db.memberships


def test_messages_survive_restart(tmp_path):
    path = str(tmp_path / "data.json")
    db = Database(path)
    alice = AuthService(db).create_profile("Alice")
    room = RoomManager(db).create_room(alice.id, "Deep Work", None)
    MessageManager(db).send_message(room.id, alice.id, "hello")

    reloaded = Database(path)

    assert [m.content for m in MessageManager(reloaded).get_messages(room.id)] == ["hello"]
