# backend/roomtracker/services/session_manager.py
from __future__ import annotations

import uuid
from typing import List, Optional

from roomtracker.core.clock import parse_timestamp, utcnow_iso
from roomtracker.core.logging import get_logger
from roomtracker.models.models import Session
from roomtracker.services.storage import Database

logger = get_logger(__name__)


class SessionManager:
    """Records finished focus sessions and lists them back per user."""

    def __init__(self, db: Database):
        self.db = db

    def create_session(
        self,
        user_id: str,
        started_at: str,
        ended_at: str,
        duration_seconds: float,
    ) -> Session:
        session = Session(
            id=str(uuid.uuid4()),
            user_id=user_id,
            started_at=started_at,
            ended_at=ended_at,
            duration_seconds=duration_seconds,
            created_at=utcnow_iso(),
        )
        with self.db.write() as db:
            db.sessions[session.id] = session
        logger.info(f"✓ Recorded {duration_seconds:.0f}s session for {user_id}")
        return session

    def get_user_sessions(
        self,
        user_id: str,
        limit: int = 10,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Session]:
        """
        Sessions of one user, newest first.

        Args:
            user_id: Profile id
            limit: Maximum number of sessions returned
            start_date: Only sessions started at or after this ISO timestamp
            end_date: Only sessions started at or before this ISO timestamp
        """
        start = parse_timestamp(start_date) if start_date else None
        end = parse_timestamp(end_date) if end_date else None

        with self.db.lock:
            sessions = [s for s in self.db.sessions.values() if s.user_id == user_id]

        def in_range(session: Session) -> bool:
            started = parse_timestamp(session.started_at)
            if start and started < start:
                return False
            if end and started > end:
                return False
            return True

        sessions = [s for s in sessions if in_range(s)]
        sessions.sort(key=lambda s: parse_timestamp(s.started_at), reverse=True)
        return sessions[:limit]
