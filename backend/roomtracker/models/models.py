# backend/roomtracker/models/models.py
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Role = Literal["owner", "admin", "member"]

# ============================================================================
# STORED RECORDS
# ============================================================================

class Profile(BaseModel):
    id: str
    display_name: str
    avatar_url: Optional[str] = None
    created_at: str

class Room(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_by: str
    created_at: str

class RoomMembership(BaseModel):
    room_id: str
    user_id: str
    role: Role = "member"
    joined_at: str

class Session(BaseModel):
    id: str
    user_id: str
    started_at: str
    ended_at: Optional[str] = None
    duration_seconds: float
    created_at: str

class Message(BaseModel):
    id: str
    room_id: str
    user_id: str
    content: str
    created_at: str
    edited_at: Optional[str] = None
    deleted_at: Optional[str] = None

# ============================================================================
# DERIVED VIEWS
# ============================================================================

class Identity(BaseModel):
    """The authenticated caller, as resolved from the session token."""
    id: str
    display_name: str = ""

def unknown_profile(user_id: str, created_at: str) -> Profile:
    """Stand-in for a profile that has gone missing from storage."""
    return Profile(id=user_id, display_name="Unknown user", created_at=created_at)

class RoomMemberWithProfile(BaseModel):
    user_id: str
    role: Role
    joined_at: str
    profile: Profile

class RoomStats(BaseModel):
    total_hours: float = 0
    total_sessions: int = 0
    active_today: int = 0
    avg_hours_per_member: float = 0

class RoomWithDetails(Room):
    """
    Room detail payload as seen by one viewer.

    ``role``, ``joined_at`` and ``last_active_at`` belong to the viewer,
    so two members asking for the same room get different payloads.
    """
    members: List[RoomMemberWithProfile] = Field(default_factory=list)
    member_count: int = 0
    role: Role
    joined_at: str
    last_active_at: Optional[str] = None
    stats: RoomStats = Field(default_factory=RoomStats)

class RoomSummary(Room):
    """What an outsider may see before joining: no members, no stats."""
    member_count: int = 0

class MessageWithProfile(Message):
    user: Profile

class LeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    user: Profile
    room_id: str
    total_seconds: float
    last_active_at: str

# ============================================================================
# REQUEST BODIES
# ============================================================================

class CreateRoomRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None

class CreateSessionRequest(BaseModel):
    started_at: Optional[str] = None
    ended_at: Optional[str] = None
    duration_seconds: Optional[float] = None

class MessageRequest(BaseModel):
    content: Optional[str] = None

class DevLoginRequest(BaseModel):
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
