"""Session tokens, dev login and the /auth endpoints."""

from __future__ import annotations

from datetime import timedelta

import pytest

from roomtracker.core.config import settings
from roomtracker.core.errors import Unauthorized
from roomtracker.services.auth_service import AuthService


def test_token_round_trip(auth_service):
    profile = auth_service.create_profile("Alice")
    identity = auth_service.decode_token(auth_service.create_token(profile))

    assert identity.id == profile.id
    assert identity.display_name == "Alice"


def test_expired_token_rejected(auth_service):
    profile = auth_service.create_profile("Alice")
    token = auth_service.create_token(profile, expires_delta=timedelta(seconds=-10))

    with pytest.raises(Unauthorized, match="Invalid or expired session"):
        auth_service.decode_token(token)


def test_token_from_other_secret_rejected(db, auth_service):
    profile = auth_service.create_profile("Alice")
    forged = AuthService(db, secret_key="someone-else").create_token(profile)

    with pytest.raises(Unauthorized):
        auth_service.decode_token(forged)


def test_token_for_unknown_profile_rejected(db, auth_service):
    profile = auth_service.create_profile("Alice")
    token = auth_service.create_token(profile)
    del db.profiles[profile.id]

    with pytest.raises(Unauthorized, match="Unknown user"):
        auth_service.decode_token(token)


def test_dev_login_sets_cookie_and_me_works(client):
    resp = client.post("/auth/dev-login", json={"display_name": "  Alice  "})

    assert resp.status_code == 201
    assert settings.COOKIE_NAME in resp.cookies
    user = resp.json()["data"]["user"]
    assert user["display_name"] == "Alice"

    me = client.get("/auth/me")
    assert me.status_code == 200
    assert me.json()["data"]["user"]["id"] == user["id"]


def test_dev_login_requires_name(client):
    resp = client.post("/auth/dev-login", json={})

    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing required fields: display_name"


def test_me_without_session(client):
    resp = client.get("/auth/me")

    assert resp.status_code == 401
    assert resp.json()["error"] == "Unauthorized: No authenticated user"


def test_session_endpoint(client, login):
    assert client.get("/auth/session").json() == {"authenticated": False}

    alice = login("Alice")
    body = client.get("/auth/session").json()
    assert body["authenticated"] is True
    assert body["user"]["id"] == alice.id


def test_logout_clears_cookie(client):
    client.post("/auth/dev-login", json={"display_name": "Alice"})
    assert client.get("/auth/session").json()["authenticated"] is True

    resp = client.post("/auth/logout")

    assert resp.status_code == 200
    assert client.get("/auth/session").json() == {"authenticated": False}
