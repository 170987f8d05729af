# backend/roomtracker/services/room_manager.py
from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from roomtracker.core.clock import parse_timestamp, utcnow, utcnow_iso
from roomtracker.core.errors import (
    AlreadyMember,
    NotAMember,
    OwnerCannotLeave,
    RoomNotFound,
)
from roomtracker.core.logging import get_logger
from roomtracker.models.models import (
    Room,
    RoomMembership,
    RoomMemberWithProfile,
    RoomStats,
    RoomSummary,
    RoomWithDetails,
    Session,
    unknown_profile,
)
from roomtracker.services.storage import Database

logger = get_logger(__name__)

# ============================================================================
# ROOM & MEMBERSHIP MANAGER
# ============================================================================
class RoomManager:
    """
    Reads and mutates rooms and their memberships.

    This is the only place that decides who belongs to which room. Route
    handlers call ``is_member`` before ``get_room_details`` so that a
    non-member never causes a detail read; ``get_room_details`` still
    re-checks membership on its own and raises ``NotAMember``.

    Usage:
        room_manager = RoomManager(Database("data.json"))
        room = room_manager.create_room("alice-id", "Deep Work", "Heads down")
        rooms = room_manager.list_user_rooms("alice-id")
    """

    def __init__(self, db: Database):
        self.db = db

    # ------------------------------------------------------------------
    # Membership queries
    # ------------------------------------------------------------------

    def get_room(self, room_id: str) -> Optional[Room]:
        return self.db.rooms.get(room_id)

    def get_membership(self, user_id: str, room_id: str) -> Optional[RoomMembership]:
        return self.db.memberships.get((room_id, user_id))

    def is_member(self, user_id: str, room_id: str) -> bool:
        """
        Check whether a user belongs to a room.

        Args:
            user_id: Profile id of the user
            room_id: UUID of the room

        Returns:
            True if the user is currently a member

        Raises:
            RoomNotFound: if the room does not exist
        """
        with self.db.lock:
            if room_id not in self.db.rooms:
                raise RoomNotFound()
            return (room_id, user_id) in self.db.memberships

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_room(self, user_id: str, name: str, description: Optional[str] = None) -> Room:
        """
        Create a room and make its creator the owner.

        Args:
            user_id: Profile id of the creator
            name: Room name (validated by the caller)
            description: Optional description

        Returns:
            Room: The newly created room
        """
        now = utcnow_iso()
        room = Room(
            id=str(uuid.uuid4()),
            name=name,
            description=description,
            created_by=user_id,
            created_at=now,
        )
        with self.db.write() as db:
            db.rooms[room.id] = room
            db.memberships[(room.id, user_id)] = RoomMembership(
                room_id=room.id, user_id=user_id, role="owner", joined_at=now
            )
        logger.info(f"✓ Created room: {room.name} ({room.id})")
        return room

    def join_room(self, user_id: str, room_id: str) -> RoomMembership:
        """
        Add a user to an existing room as a plain member.

        Raises:
            RoomNotFound: if the room does not exist
            AlreadyMember: if the user already belongs to the room
        """
        with self.db.write() as db:
            if room_id not in db.rooms:
                raise RoomNotFound()
            if (room_id, user_id) in db.memberships:
                raise AlreadyMember()
            membership = RoomMembership(
                room_id=room_id, user_id=user_id, role="member", joined_at=utcnow_iso()
            )
            db.memberships[(room_id, user_id)] = membership
        logger.info(f"✓ User {user_id} joined room {room_id}")
        return membership

    def leave_room(self, user_id: str, room_id: str) -> None:
        """
        Remove a user from a room.

        An owner who is the last member takes the room down with them; an
        owner with other members still in the room cannot leave.

        Raises:
            NotAMember: if the user is not in the room
            OwnerCannotLeave: if the user owns a room others still belong to
        """
        with self.db.write() as db:
            membership = db.memberships.get((room_id, user_id))
            if membership is None:
                raise NotAMember()

            if membership.role == "owner":
                member_count = sum(1 for (rid, _) in db.memberships if rid == room_id)
                if member_count > 1:
                    raise OwnerCannotLeave()
                self._delete_room(db, room_id)
                logger.info(f"✓ Deleted room {room_id} (last owner left)")
                return

            del db.memberships[(room_id, user_id)]
        logger.info(f"✓ User {user_id} left room {room_id}")

    @staticmethod
    def _delete_room(db: Database, room_id: str) -> None:
        db.rooms.pop(room_id, None)
        for key in [k for k in db.memberships if k[0] == room_id]:
            del db.memberships[key]
        for message_id in [mid for mid, m in db.messages.items() if m.room_id == room_id]:
            del db.messages[message_id]

    # ------------------------------------------------------------------
    # Detail views
    # ------------------------------------------------------------------

    def get_room_members(self, room_id: str) -> List[RoomMemberWithProfile]:
        """Members of a room with their profiles, oldest membership first."""
        with self.db.lock:
            memberships = [m for m in self.db.memberships.values() if m.room_id == room_id]
            members = []
            for m in sorted(memberships, key=lambda m: m.joined_at):
                profile = self.db.profiles.get(m.user_id) or unknown_profile(m.user_id, m.joined_at)
                members.append(
                    RoomMemberWithProfile(
                        user_id=m.user_id, role=m.role, joined_at=m.joined_at, profile=profile
                    )
                )
            return members

    def member_sessions(self, room_id: str) -> List[Session]:
        member_ids = {uid for (rid, uid) in self.db.memberships if rid == room_id}
        return [s for s in self.db.sessions.values() if s.user_id in member_ids]

    def get_room_stats(self, room_id: str, now: Optional[datetime] = None) -> RoomStats:
        """
        Aggregate the sessions of every current member of a room.

        ``active_today`` counts distinct members with a session started on
        the current UTC day.
        """
        today = (now or utcnow()).date()
        with self.db.lock:
            member_count = sum(1 for (rid, _) in self.db.memberships if rid == room_id)
            sessions = self.member_sessions(room_id)

        total_seconds = sum(s.duration_seconds for s in sessions)
        total_hours = total_seconds / 3600
        active_today = {
            s.user_id for s in sessions if parse_timestamp(s.started_at).date() == today
        }

        return RoomStats(
            total_hours=round(total_hours, 1),
            total_sessions=len(sessions),
            active_today=len(active_today),
            avg_hours_per_member=round(total_hours / member_count, 1) if member_count else 0,
        )

    def _last_active_at(self, user_id: str) -> Optional[str]:
        started = [s.started_at for s in self.db.sessions.values() if s.user_id == user_id]
        if not started:
            return None
        return max(started, key=parse_timestamp)

    def get_basic_room_info(self, room_id: str) -> RoomSummary:
        """
        Public face of a room, shown to signed-in users who have not joined.

        Raises:
            RoomNotFound: if the room does not exist
        """
        with self.db.lock:
            room = self.db.rooms.get(room_id)
            if room is None:
                raise RoomNotFound()
            member_count = sum(1 for (rid, _) in self.db.memberships if rid == room_id)
            return RoomSummary(**room.model_dump(), member_count=member_count)

    def get_room_details(self, room_id: str, user_id: str) -> RoomWithDetails:
        """
        Full room view for one viewer.

        Args:
            room_id: UUID of the room
            user_id: Profile id of the viewer; fills ``role``, ``joined_at``
                and ``last_active_at``

        Returns:
            RoomWithDetails with members, member count and stats

        Raises:
            RoomNotFound: if the room does not exist
            NotAMember: if the viewer does not belong to the room
        """
        with self.db.lock:
            room = self.db.rooms.get(room_id)
            if room is None:
                raise RoomNotFound()
            membership = self.db.memberships.get((room_id, user_id))
            if membership is None:
                raise NotAMember()

            members = self.get_room_members(room_id)
            return RoomWithDetails(
                **room.model_dump(),
                members=members,
                member_count=len(members),
                role=membership.role,
                joined_at=membership.joined_at,
                last_active_at=self._last_active_at(user_id),
                stats=self.get_room_stats(room_id),
            )

    def list_user_rooms(self, user_id: str) -> List[RoomWithDetails]:
        """
        Every room the user belongs to, most recently joined first.

        Memberships pointing at a room that no longer exists are skipped.
        """
        with self.db.lock:
            memberships = [m for m in self.db.memberships.values() if m.user_id == user_id]
            memberships.sort(key=lambda m: m.joined_at, reverse=True)
            return [
                self.get_room_details(m.room_id, user_id)
                for m in memberships
                if m.room_id in self.db.rooms
            ]
