"""RoomManager semantics without the HTTP layer."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from roomtracker.core.clock import utcnow_iso
from roomtracker.core.errors import (
    AlreadyMember,
    NotAMember,
    OwnerCannotLeave,
    RoomNotFound,
)


@pytest.fixture
def alice(auth_service):
    return auth_service.create_profile("Alice")


@pytest.fixture
def bob(auth_service):
    return auth_service.create_profile("Bob")


def test_create_room_makes_creator_owner(room_manager, alice):
    room = room_manager.create_room(alice.id, "Deep Work", None)

    membership = room_manager.get_membership(alice.id, room.id)
    assert membership.role == "owner"
    assert room_manager.is_member(alice.id, room.id)


def test_is_member_raises_for_missing_room(room_manager, alice):
    with pytest.raises(RoomNotFound):
        room_manager.is_member(alice.id, "ghost")


def test_is_member_false_for_outsider(room_manager, alice, bob):
    room = room_manager.create_room(alice.id, "Deep Work", None)
    assert room_manager.is_member(bob.id, room.id) is False


def test_join_room_errors(room_manager, alice, bob):
    room = room_manager.create_room(alice.id, "Deep Work", None)

    with pytest.raises(RoomNotFound):
        room_manager.join_room(bob.id, "ghost")
    with pytest.raises(AlreadyMember):
        room_manager.join_room(alice.id, room.id)

    membership = room_manager.join_room(bob.id, room.id)
    assert membership.role == "member"


def test_leave_room_rules(room_manager, alice, bob):
    room = room_manager.create_room(alice.id, "Deep Work", None)

    with pytest.raises(NotAMember):
        room_manager.leave_room(bob.id, room.id)

    room_manager.join_room(bob.id, room.id)
    with pytest.raises(OwnerCannotLeave):
        room_manager.leave_room(alice.id, room.id)

    room_manager.leave_room(bob.id, room.id)
    room_manager.leave_room(alice.id, room.id)
    assert room_manager.get_room(room.id) is None
    assert room_manager.db.memberships == {}


def test_get_room_details_checks_room_then_membership(room_manager, alice, bob):
    room = room_manager.create_room(alice.id, "Deep Work", None)

    with pytest.raises(RoomNotFound):
        room_manager.get_room_details("ghost", alice.id)
    with pytest.raises(NotAMember):
        room_manager.get_room_details(room.id, bob.id)


def test_details_are_personalized_per_viewer(room_manager, session_manager, alice, bob):
    room = room_manager.create_room(alice.id, "Deep Work", None)
    room_manager.join_room(bob.id, room.id)
    session_manager.create_session(
        bob.id, "2025-01-10T08:00:00+00:00", "2025-01-10T09:00:00+00:00", 3600
    )

    as_alice = room_manager.get_room_details(room.id, alice.id)
    as_bob = room_manager.get_room_details(room.id, bob.id)

    assert as_alice.role == "owner"
    assert as_bob.role == "member"
    assert as_alice.last_active_at is None
    assert as_bob.last_active_at == "2025-01-10T08:00:00+00:00"
    assert as_alice.members == as_bob.members
    assert [m.profile.display_name for m in as_alice.members] == ["Alice", "Bob"]


def test_room_stats(room_manager, session_manager, alice, bob, auth_service):
    room = room_manager.create_room(alice.id, "Deep Work", None)
    room_manager.join_room(bob.id, room.id)
    outsider = auth_service.create_profile("Outsider")

    session_manager.create_session(
        alice.id, "2025-01-09T10:00:00+00:00", "2025-01-09T12:00:00+00:00", 7200
    )
    now = utcnow_iso()
    session_manager.create_session(bob.id, now, now, 1800)
    session_manager.create_session(outsider.id, now, now, 9999)

    stats = room_manager.get_room_stats(room.id)

    assert stats.total_sessions == 2
    assert stats.total_hours == 2.5
    assert stats.active_today == 1
    assert stats.avg_hours_per_member == 1.2


def test_room_stats_active_today_uses_utc_day(room_manager, session_manager, alice):
    room = room_manager.create_room(alice.id, "Deep Work", None)
    session_manager.create_session(
        alice.id, "2025-03-01T23:30:00+00:00", "2025-03-01T23:59:00+00:00", 1740
    )

    same_day = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    next_day = datetime(2025, 3, 2, 0, 30, tzinfo=timezone.utc)

    assert room_manager.get_room_stats(room.id, now=same_day).active_today == 1
    assert room_manager.get_room_stats(room.id, now=next_day).active_today == 0


def test_stats_for_empty_room(room_manager):
    stats = room_manager.get_room_stats("no-members")
    assert stats.total_hours == 0
    assert stats.avg_hours_per_member == 0


def test_list_user_rooms_newest_membership_first(room_manager, alice, bob):
    first = room_manager.create_room(alice.id, "First", None)
    second = room_manager.create_room(bob.id, "Second", None)
    room_manager.join_room(alice.id, second.id)

    room_manager.db.memberships[(first.id, alice.id)].joined_at = "2025-01-01T00:00:00+00:00"
    room_manager.db.memberships[(second.id, alice.id)].joined_at = "2025-02-01T00:00:00+00:00"

    rooms = room_manager.list_user_rooms(alice.id)

    assert [r.name for r in rooms] == ["Second", "First"]
    assert [r.role for r in rooms] == ["member", "owner"]
    assert room_manager.list_user_rooms("nobody") == []


def test_basic_room_info_hides_member_data(room_manager, alice, bob):
    room = room_manager.create_room(alice.id, "Deep Work", "Heads down")
    room_manager.join_room(bob.id, room.id)

    summary = room_manager.get_basic_room_info(room.id)

    assert summary.name == "Deep Work"
    assert summary.description == "Heads down"
    assert summary.member_count == 2
    dumped = summary.model_dump()
    for private in ("members", "stats", "role", "joined_at", "last_active_at"):
        assert private not in dumped


def test_basic_room_info_missing_room(room_manager):
    with pytest.raises(RoomNotFound):
        room_manager.get_basic_room_info("ghost")
