from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from comfortboard.api import deps
from comfortboard.core.config import Settings
from comfortboard.core.security import get_password_hash
from comfortboard.factory import create_app
from tests.fakes import FakeWeatherClient, write_city_file


@pytest.fixture()
def cities_file(tmp_path: Path) -> Path:
    return write_city_file(tmp_path / "cities.json", 12)


@pytest.fixture()
def settings(cities_file: Path) -> Settings:
    return Settings(
        _env_file=None,
        env="test",
        debug=True,
        docs_enabled=False,
        secret_key="test_secret_key_must_be_32_chars_minimum",
        admin_username="admin",
        admin_password_hash=get_password_hash("password"),
        auth_required=False,
        cors_origins=["http://localhost"],
        trusted_hosts=["testserver", "localhost"],
        openweather_api_key="test-key",
        weather_timeout_seconds=1.0,
        weather_max_workers=4,
        weather_min_cities=10,
        cities_file=str(cities_file),
    )


@pytest.fixture()
def fake_weather() -> FakeWeatherClient:
    return FakeWeatherClient()


@pytest.fixture()
def client(settings: Settings, fake_weather: FakeWeatherClient) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[deps.get_weather_client] = lambda: fake_weather
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def token(client: TestClient) -> str:
    resp = client.post(
        "/api/auth/token",
        data={"username": "admin", "password": "password"},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]
