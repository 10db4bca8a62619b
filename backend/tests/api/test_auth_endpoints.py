"""HTTP-level tests for /api/v1/auth (Flask test client)."""

from __future__ import annotations

from datetime import timedelta

import pytest

from sessionguard.core.extensions import REFRESH_STORE_KEY
from sessionguard.infra.jwt.flask_jwt_token_codec import JWTTokenCodec
from sessionguard.services._shared.errors import StorageError
from sessionguard.services._shared.ports import InMemoryRefreshTokenStore
from tests.factories.user import DEFAULT_PASSWORD, UserFactory

BASE = "/api/v1/auth"
COOKIE = "refreshToken"


@pytest.fixture()
def user_email(session) -> str:
    user = UserFactory(email="api@example.com")
    session.flush()
    return user.email


def _login(client, email: str, password: str = DEFAULT_PASSWORD):
    return client.post(f"{BASE}/login", json={"email": email, "password": password})


def _cookie_value(client) -> str | None:
    cookie = client.get_cookie(COOKIE, path=BASE)
    return cookie.value if cookie else None


def _set_cookies(response) -> str:
    return "\n".join(response.headers.getlist("Set-Cookie"))


# ------------------------------- Register --------------------------------- #
def test_register_returns_created_user(client):
    resp = client.post(
        f"{BASE}/register",
        json={"email": "New@Example.com", "password": "Sup3rSecret!", "name": "New User"},
    )

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["email"] == "new@example.com"
    assert data["name"] == "New User"
    assert "password" not in data and "password_hash" not in data


def test_register_duplicate_email_is_conflict(client, user_email):
    resp = client.post(
        f"{BASE}/register",
        json={"email": user_email, "password": "Sup3rSecret!", "name": "Dup"},
    )

    assert resp.status_code == 409
    assert resp.mimetype == "application/problem+json"
    assert resp.get_json()["code"] == "duplicate_email"


def test_register_validation_error(client):
    resp = client.post(f"{BASE}/register", json={"email": "not-an-email", "password": "short"})

    assert resp.status_code == 422
    errors = resp.get_json()["details"]["errors"]
    assert {"email", "password", "name"} <= set(errors)


@pytest.mark.parametrize("name", ["", "   "])
def test_register_rejects_blank_name(client, name):
    resp = client.post(
        f"{BASE}/register",
        json={"email": "blank@example.com", "password": "Sup3rSecret!", "name": name},
    )

    assert resp.status_code == 422
    assert "name" in resp.get_json()["details"]["errors"]


# --------------------------------- Login ---------------------------------- #
def test_login_returns_pair_and_sets_http_only_cookie(client, user_email):
    resp = _login(client, user_email)

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["token_type"] == "bearer"
    assert data["expires_in"] == 15 * 60
    assert _cookie_value(client) == data["refresh_token"]
    assert "HttpOnly" in _set_cookies(resp)


def test_login_failure_is_uniform(client, user_email):
    wrong = _login(client, user_email, "wrong-password")
    unknown = _login(client, "ghost@example.com")

    for resp in (wrong, unknown):
        assert resp.status_code == 401
        assert resp.get_json()["code"] == "authentication_failed"
    assert _cookie_value(client) is None


def test_login_store_outage_is_service_unavailable(app, client, user_email):
    class _Down(InMemoryRefreshTokenStore):
        def save(self, identity, refresh_token, ttl):
            raise StorageError("refresh.save")

    app.extensions[REFRESH_STORE_KEY] = _Down()

    resp = _login(client, user_email)

    assert resp.status_code == 503
    body = resp.get_json()
    assert body["code"] == "storage_error"
    assert "refresh.save" not in body["detail"]


# -------------------------------- Refresh --------------------------------- #
def test_refresh_rotates_cookie_and_rejects_replay(app, client, user_email):
    first = _login(client, user_email).get_json()["data"]

    resp = client.post(f"{BASE}/refresh")

    assert resp.status_code == 200
    second = resp.get_json()["data"]
    assert second["refresh_token"] != first["refresh_token"]
    assert _cookie_value(client) == second["refresh_token"]

    replay = app.test_client().post(
        f"{BASE}/refresh", json={"refresh_token": first["refresh_token"]}
    )
    assert replay.status_code == 401
    assert replay.get_json()["code"] == "refresh_invalid"


def test_refresh_without_token(client):
    resp = client.post(f"{BASE}/refresh")

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "refresh_invalid"


def test_refresh_with_expired_token(client, user_email):
    expired = JWTTokenCodec(
        access_expires=timedelta(seconds=-5), refresh_expires=timedelta(seconds=-5)
    ).issue_refresh_token(1)

    resp = client.post(f"{BASE}/refresh", json={"refresh_token": expired})

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "refresh_expired"


# -------------------------------- Logout ---------------------------------- #
def test_logout_then_refresh_then_logout(app, client, user_email):
    pair = _login(client, user_email).get_json()["data"]
    bearer = {"Authorization": f"Bearer {pair['access_token']}"}

    resp = client.post(f"{BASE}/logout", headers=bearer)

    assert resp.status_code == 204
    assert _cookie_value(client) is None

    other = app.test_client()
    refresh = other.post(f"{BASE}/refresh", json={"refresh_token": pair["refresh_token"]})
    assert refresh.status_code == 401
    assert refresh.get_json()["code"] == "refresh_invalid"

    again = other.post(
        f"{BASE}/logout", headers=bearer, json={"refresh_token": pair["refresh_token"]}
    )
    assert again.status_code == 401
    assert again.get_json()["code"] == "invalid_token"


def test_logout_requires_bearer_token(client, user_email):
    _login(client, user_email)

    resp = client.post(f"{BASE}/logout")

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "invalid_token"
    assert _cookie_value(client) is not None


@pytest.mark.parametrize("body", [["x"], "x", 7])
def test_logout_with_non_object_body_is_validation_error(app, client, user_email, body):
    pair = _login(client, user_email).get_json()["data"]
    cookieless = app.test_client()

    resp = cookieless.post(
        f"{BASE}/logout",
        headers={"Authorization": f"Bearer {pair['access_token']}"},
        json=body,
    )

    assert resp.status_code == 422
    assert resp.mimetype == "application/problem+json"
