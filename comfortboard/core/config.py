from __future__ import annotations

import secrets

from pydantic import AnyHttpUrl, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_VERSION = "1.0.0"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        case_sensitive=False,
    )

    env: str = Field(default="development")
    debug: bool = Field(default=False)
    docs_enabled: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    secret_key: str = Field(
        default_factory=lambda: secrets.token_urlsafe(48), min_length=32
    )
    algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=30, ge=1, le=60 * 24 * 30)

    admin_username: str = Field(default="admin", min_length=3, max_length=64)
    admin_password_hash: str | None = Field(default=None, min_length=10)
    auth_required: bool = Field(default=False)

    cors_origins: list[str] = Field(default_factory=list)
    trusted_hosts: list[str] = Field(default_factory=lambda: ["localhost", "127.0.0.1"])

    openweather_api_key: str = Field(min_length=1)
    openweather_base_url: AnyHttpUrl = Field(
        default="https://api.openweathermap.org/data/2.5/weather"
    )
    openweather_units: str = Field(default="metric")

    weather_timeout_seconds: float = Field(default=10.0, ge=1.0, le=30.0)
    weather_max_workers: int = Field(default=10, ge=1, le=64)
    weather_min_cities: int = Field(default=10, ge=1)
    cities_file: str = Field(default="cities.json", min_length=1)

    @model_validator(mode="after")
    def _admin_credentials_for_auth(self) -> Settings:
        if self.auth_required and not self.admin_password_hash:
            raise ValueError(
                "APP_ADMIN_PASSWORD_HASH must be set when APP_AUTH_REQUIRED is true"
            )
        return self

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


def load_settings() -> Settings:
    settings = Settings()
    if not settings.cors_origins:
        settings.cors_origins = ["http://localhost:3000", "http://localhost:8000"]
    return settings
