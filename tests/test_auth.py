from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from comfortboard.api import deps
from comfortboard.core.config import Settings
from comfortboard.core.security import (
    InvalidTokenError,
    decode_access_token,
    issue_access_token,
)
from comfortboard.factory import create_app
from comfortboard.schemas.auth import User
from tests.fakes import FakeWeatherClient


def test_token_success(client: TestClient) -> None:
    resp = client.post(
        "/api/auth/token",
        data={"username": "admin", "password": "password"},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == 30 * 60
    assert isinstance(body["access_token"], str) and body["access_token"]
    assert resp.headers["cache-control"] == "no-store"


def test_token_wrong_password(client: TestClient) -> None:
    resp = client.post(
        "/api/auth/token",
        data={"username": "admin", "password": "wrong"},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert resp.status_code == 401


def test_me(client: TestClient, token: str) -> None:
    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json() == {"username": "admin", "scopes": ["weather:read"]}

    anonymous = client.get("/api/auth/me")
    assert anonymous.status_code == 401


def test_weather_requires_token_when_enabled(settings: Settings) -> None:
    locked = settings.model_copy(update={"auth_required": True})
    app = create_app(locked)
    app.dependency_overrides[deps.get_weather_client] = lambda: FakeWeatherClient()

    with TestClient(app) as client:
        assert client.get("/api/weather").status_code == 401
        assert client.get("/api/cache-debug").status_code == 401
        assert client.get("/api/health").status_code == 200

        bad = client.get("/api/weather", headers={"Authorization": "Bearer nonsense"})
        assert bad.status_code == 401

        token = client.post(
            "/api/auth/token",
            data={"username": "admin", "password": "password"},
        ).json()["access_token"]
        resp = client.get("/api/weather", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200
        assert resp.json()["count"] == 12


def test_auth_required_without_admin_hash_is_rejected(monkeypatch) -> None:
    monkeypatch.delenv("APP_ADMIN_PASSWORD_HASH", raising=False)
    with pytest.raises(ValidationError, match="APP_ADMIN_PASSWORD_HASH"):
        Settings(_env_file=None, openweather_api_key="k", auth_required=True)


def test_login_fails_without_admin_hash(monkeypatch) -> None:
    monkeypatch.delenv("APP_ADMIN_PASSWORD_HASH", raising=False)
    settings = Settings(_env_file=None, openweather_api_key="k")
    assert settings.admin_password_hash is None
    assert (
        deps.authenticate_user(username="admin", password="admin", settings=settings)
        is None
    )


def test_issued_token_round_trips(settings: Settings) -> None:
    token = issue_access_token(User(username="admin", scopes=["weather:read"]), settings)
    claims = decode_access_token(token.access_token, settings)
    assert claims.sub == "admin"
    assert claims.scopes == ["weather:read"]
    assert token.expires_in == settings.access_token_expire_minutes * 60


def _forge(settings: Settings, key: str | None = None, **claims) -> str:
    now = datetime.now(tz=timezone.utc)
    payload = {"sub": "admin", "scopes": ["weather:read"], "exp": now + timedelta(minutes=5)}
    payload.update(claims)
    payload = {k: v for k, v in payload.items() if v is not None}
    return jwt.encode(payload, key or settings.secret_key, algorithm=settings.algorithm)


@pytest.mark.parametrize(
    "overrides",
    [
        {"key": "another_secret_key_that_is_32_chars_long"},
        {"exp": datetime.now(tz=timezone.utc) - timedelta(minutes=1)},
        {"sub": None},
        {"sub": ""},
        {"scopes": "weather:read"},
    ],
    ids=["foreign-key", "expired", "no-subject", "empty-subject", "scopes-not-a-list"],
)
def test_bad_tokens_are_rejected(settings: Settings, overrides: dict) -> None:
    token = _forge(settings, **overrides)
    with pytest.raises(InvalidTokenError):
        decode_access_token(token, settings)

    locked = settings.model_copy(update={"auth_required": True})
    app = create_app(locked)
    app.dependency_overrides[deps.get_weather_client] = lambda: FakeWeatherClient()
    with TestClient(app) as client:
        resp = client.get("/api/weather", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


def test_token_without_weather_scope_is_forbidden(settings: Settings) -> None:
    token = _forge(settings, scopes=[])
    locked = settings.model_copy(update={"auth_required": True})
    app = create_app(locked)
    app.dependency_overrides[deps.get_weather_client] = lambda: FakeWeatherClient()

    with TestClient(app) as client:
        resp = client.get("/api/weather", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 403
        assert "weather:read" in resp.json()["detail"]

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
