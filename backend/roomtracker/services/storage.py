# backend/roomtracker/services/storage.py

from __future__ import annotations

import json
import os
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Tuple

from roomtracker.core.errors import StorageError
from roomtracker.core.logging import get_logger
from roomtracker.models.models import Message, Profile, Room, RoomMembership, Session

logger = get_logger(__name__)

# ============================================================================
# JSON FILE DATABASE
# ============================================================================

class Database:
    """
    In-process tables with file-based persistence.

    Holds every record the application owns and writes the whole dataset to
    a JSON file after each mutation, so data survives restarts. With
    ``path=None`` nothing touches the disk, which is what the tests use.

    Attributes:
        profiles: profile_id -> Profile
        rooms: room_id -> Room
        memberships: (room_id, user_id) -> RoomMembership
        sessions: session_id -> Session
        messages: message_id -> Message

    Storage Format:
        {
            "profiles": [{"id": "...", "display_name": "...", ...}],
            "rooms": [{"id": "...", "name": "...", ...}],
            "memberships": [{"room_id": "...", "user_id": "...", "role": "owner", ...}],
            "sessions": [{"id": "...", "user_id": "...", "duration_seconds": 3600, ...}],
            "messages": [{"id": "...", "room_id": "...", "content": "...", ...}]
        }

    Handlers may run in worker threads, so every read and write goes
    through ``lock``.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self.lock = threading.RLock()
        self.profiles: Dict[str, Profile] = {}
        self.rooms: Dict[str, Room] = {}
        self.memberships: Dict[Tuple[str, str], RoomMembership] = {}
        self.sessions: Dict[str, Session] = {}
        self.messages: Dict[str, Message] = {}
        self.load()

    def load(self) -> None:
        """
        Load all tables from ``path``.

        A missing file means a fresh install. A corrupt file is logged and
        the database starts empty rather than refusing to boot.
        """
        if not self.path or not os.path.exists(self.path):
            return

        try:
            with open(self.path, "r") as f:
                data = json.load(f)
            self.profiles = {p["id"]: Profile(**p) for p in data.get("profiles", [])}
            self.rooms = {r["id"]: Room(**r) for r in data.get("rooms", [])}
            self.memberships = {
                (m["room_id"], m["user_id"]): RoomMembership(**m)
                for m in data.get("memberships", [])
            }
            self.sessions = {s["id"]: Session(**s) for s in data.get("sessions", [])}
            self.messages = {m["id"]: Message(**m) for m in data.get("messages", [])}
            logger.info(
                "✓ Loaded %d rooms, %d memberships, %d sessions from %s",
                len(self.rooms), len(self.memberships), len(self.sessions), self.path,
            )
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Load error: {e}")
            self.clear()

    def save(self) -> None:
        """Persist all tables to ``path`` (no-op for in-memory databases)."""
        if not self.path:
            return

        data = {
            "profiles": [p.model_dump() for p in self.profiles.values()],
            "rooms": [r.model_dump() for r in self.rooms.values()],
            "memberships": [m.model_dump() for m in self.memberships.values()],
            "sessions": [s.model_dump() for s in self.sessions.values()],
            "messages": [m.model_dump() for m in self.messages.values()],
        }
        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Save error: {e}")
            raise StorageError(f"Failed to save data: {e}") from e

    TABLES = ("profiles", "rooms", "memberships", "sessions", "messages")

    @contextmanager
    def write(self) -> Iterator["Database"]:
        """
        Hold the lock for a mutation and persist once it completes.

        If the mutation raises, or the save fails, every table is put back
        the way it was, so memory never holds changes the file does not.
        Records are replaced, never edited in place, which is what makes a
        shallow copy of each table a valid snapshot.
        """
        with self.lock:
            snapshot = {name: dict(getattr(self, name)) for name in self.TABLES}
            try:
                yield self
                self.save()
            except Exception:
                for name, rows in snapshot.items():
                    setattr(self, name, rows)
                raise

    def clear(self) -> None:
        with self.lock:
            self.profiles.clear()
            self.rooms.clear()
            self.memberships.clear()
            self.sessions.clear()
            self.messages.clear()
