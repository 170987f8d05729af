"""
Cookie session authentication.

Features:
- HTTP-only session cookie carrying a signed JWT (python-jose)
- Dev login: creates a profile and signs it in, no external identity provider
- Identity resolution for API routes (raises) and pages (returns None)
"""

from __future__ import annotations

import uuid
from datetime import timedelta
from typing import Any, Dict, Optional

from fastapi import Response
from fastapi.requests import HTTPConnection
from jose import JWTError, jwt

from roomtracker.core.clock import utcnow, utcnow_iso
from roomtracker.core.config import settings
from roomtracker.core.errors import Unauthorized
from roomtracker.core.logging import get_logger
from roomtracker.models.models import Identity, Profile
from roomtracker.services.storage import Database

logger = get_logger(__name__)


class AuthService:
    """
    Issues session tokens and resolves requests back to an ``Identity``.

    Route handlers depend on ``resolve_identity`` only, so tests can swap in
    any object with that one method.
    """

    def __init__(
        self,
        db: Database,
        secret_key: str = settings.SECRET_KEY,
        algorithm: str = settings.ALGORITHM,
        max_age: int = settings.SESSION_MAX_AGE,
        cookie_name: str = settings.COOKIE_NAME,
    ):
        self.db = db
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.max_age = max_age
        self.cookie_name = cookie_name

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def create_profile(self, display_name: str, avatar_url: Optional[str] = None) -> Profile:
        profile = Profile(
            id=str(uuid.uuid4()),
            display_name=display_name,
            avatar_url=avatar_url,
            created_at=utcnow_iso(),
        )
        with self.db.write() as db:
            db.profiles[profile.id] = profile
        logger.info(f"✓ Created profile {profile.display_name} ({profile.id})")
        return profile

    def get_profile(self, user_id: str) -> Optional[Profile]:
        return self.db.profiles.get(user_id)

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def create_token(self, profile: Profile, expires_delta: Optional[timedelta] = None) -> str:
        expire = utcnow() + (expires_delta or timedelta(seconds=self.max_age))
        claims: Dict[str, Any] = {
            "sub": profile.id,
            "name": profile.display_name,
            "exp": expire,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Identity:
        """
        Verify a session token and return the identity it names.

        Raises:
            Unauthorized: if the token is malformed, expired, or names a
                profile that no longer exists
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"Rejected session token: {e}")
            raise Unauthorized("Unauthorized: Invalid or expired session") from e

        user_id = payload.get("sub")
        profile = self.get_profile(user_id) if user_id else None
        if profile is None:
            raise Unauthorized("Unauthorized: Unknown user")
        return Identity(id=profile.id, display_name=profile.display_name)

    # ------------------------------------------------------------------
    # Request resolution
    # ------------------------------------------------------------------

    def resolve_identity(self, request: HTTPConnection) -> Identity:
        """
        Resolve the caller of ``request`` (an HTTP request or a WebSocket).

        Raises:
            Unauthorized: if there is no session cookie or it is invalid
        """
        token = request.cookies.get(self.cookie_name)
        if not token:
            raise Unauthorized()
        return self.decode_token(token)

    def optional_identity(self, request: HTTPConnection) -> Optional[Identity]:
        """Like ``resolve_identity`` but returns None instead of raising."""
        try:
            return self.resolve_identity(request)
        except Unauthorized:
            return None

    # ------------------------------------------------------------------
    # Cookies
    # ------------------------------------------------------------------

    def set_session_cookie(self, response: Response, token: str) -> None:
        response.set_cookie(
            key=self.cookie_name,
            value=token,
            httponly=True,
            secure=settings.COOKIE_SECURE,
            samesite="lax",
            max_age=self.max_age,
            domain=settings.COOKIE_DOMAIN,
        )

    def clear_session_cookie(self, response: Response) -> None:
        response.delete_cookie(key=self.cookie_name, domain=settings.COOKIE_DOMAIN)
