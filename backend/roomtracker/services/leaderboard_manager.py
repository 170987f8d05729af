# backend/roomtracker/services/leaderboard_manager.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from roomtracker.core.clock import parse_timestamp, utcnow
from roomtracker.core.errors import InvalidPeriod, RoomNotFound
from roomtracker.core.logging import get_logger
from roomtracker.models.models import LeaderboardEntry, unknown_profile
from roomtracker.services.storage import Database

logger = get_logger(__name__)

LEADERBOARD_PERIODS = ("day", "week", "month", "all-time")
DEFAULT_PERIOD = "week"

ALL_TIME_START = datetime(2000, 1, 1, tzinfo=timezone.utc)

# ============================================================================
# ROOM LEADERBOARD
# ============================================================================

class LeaderboardManager:
    """
    Ranks the members of a room by time spent in sessions.

    A session counts toward a period when it started inside the window:

        day       since 00:00 UTC today
        week      the last 7 days
        month     the last 30 days
        all-time  since 2000-01-01

    Sessions starting after ``now`` never count.

    Usage:
        leaderboard = LeaderboardManager(db)
        entries = leaderboard.compute_leaderboard(room_id, "month")
    """

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def period_range(period: str, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
        end = now or utcnow()
        if period == "day":
            start = end.replace(hour=0, minute=0, second=0, microsecond=0)
        elif period == "week":
            start = end - timedelta(days=7)
        elif period == "month":
            start = end - timedelta(days=30)
        elif period == "all-time":
            start = ALL_TIME_START
        else:
            raise InvalidPeriod()
        return start, end

    def compute_leaderboard(
        self,
        room_id: str,
        period: str = DEFAULT_PERIOD,
        now: Optional[datetime] = None,
    ) -> List[LeaderboardEntry]:
        """
        Leaderboard of a room for one period.

        Args:
            room_id: UUID of the room
            period: One of ``LEADERBOARD_PERIODS``
            now: Reference time, defaults to the current UTC time

        Returns:
            Entries sorted by total seconds, then most recent activity, both
            descending, ranked from 1. Members without sessions in the window
            are left out.

        Raises:
            InvalidPeriod: for an unknown period
            RoomNotFound: if the room does not exist
        """
        start, end = self.period_range(period, now)

        with self.db.lock:
            if room_id not in self.db.rooms:
                raise RoomNotFound()
            member_ids = {uid for (rid, uid) in self.db.memberships if rid == room_id}
            sessions = [s for s in self.db.sessions.values() if s.user_id in member_ids]
            profiles = {uid: self.db.profiles.get(uid) for uid in member_ids}

        totals: Dict[str, float] = {}
        last_active: Dict[str, datetime] = {}
        last_active_raw: Dict[str, str] = {}
        for session in sessions:
            started = parse_timestamp(session.started_at)
            if started < start or started > end:
                continue
            uid = session.user_id
            totals[uid] = totals.get(uid, 0) + session.duration_seconds
            if uid not in last_active or started > last_active[uid]:
                last_active[uid] = started
                last_active_raw[uid] = session.started_at

        ranked = sorted(totals, key=lambda uid: (totals[uid], last_active[uid]), reverse=True)
        entries = [
            LeaderboardEntry(
                rank=rank,
                user_id=uid,
                user=profiles.get(uid) or unknown_profile(uid, last_active_raw[uid]),
                room_id=room_id,
                total_seconds=totals[uid],
                last_active_at=last_active_raw[uid],
            )
            for rank, uid in enumerate(ranked, start=1)
        ]
        logger.debug(f"Leaderboard {room_id} ({period}): {len(entries)} entries")
        return entries
