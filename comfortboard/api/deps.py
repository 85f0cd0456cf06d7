from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import OAuth2PasswordBearer, SecurityScopes

from comfortboard.core.config import Settings
from comfortboard.core.security import (
    InvalidTokenError,
    decode_access_token,
    verify_password,
)
from comfortboard.repositories.cities import CityRepository, JsonCityRepository
from comfortboard.schemas.auth import User
from comfortboard.services.weather import (
    WeatherAggregationService,
    WeatherClient,
    WeatherResultCache,
)

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/auth/token",
    scopes={"weather:read": "Read aggregated weather"},
    auto_error=False,
)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def authenticate_user(*, username: str, password: str, settings: Settings) -> User | None:
    if username != settings.admin_username:
        return None
    if not verify_password(password, settings.admin_password_hash):
        return None
    return User(username=username, scopes=["weather:read"])


def get_weather_client(request: Request) -> WeatherClient:
    return request.app.state.weather_client


def get_weather_cache(request: Request) -> WeatherResultCache:
    return request.app.state.weather_cache


def get_city_repository(
    settings: Annotated[Settings, Depends(get_settings)],
) -> CityRepository:
    return JsonCityRepository(settings.cities_file)


def get_weather_service(
    settings: Annotated[Settings, Depends(get_settings)],
    client: Annotated[WeatherClient, Depends(get_weather_client)],
    cache: Annotated[WeatherResultCache, Depends(get_weather_cache)],
    cities: Annotated[CityRepository, Depends(get_city_repository)],
) -> WeatherAggregationService:
    return WeatherAggregationService(
        client=client,
        cache=cache,
        cities=cities,
        min_cities=settings.weather_min_cities,
        max_workers=settings.weather_max_workers,
    )


def _decode_user(
    security_scopes: SecurityScopes, token: str | None, settings: Settings
) -> User:
    challenge = "Bearer"
    if security_scopes.scopes:
        challenge = f'Bearer scope="{security_scopes.scope_str}"'

    if not token:
        raise _unauthorized(challenge)
    try:
        user = User.from_claims(decode_access_token(token, settings))
    except InvalidTokenError as e:
        raise _unauthorized(challenge) from e

    missing = [s for s in security_scopes.scopes if not user.has_scope(s)]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Missing scope: {', '.join(missing)}",
            headers={"WWW-Authenticate": challenge},
        )
    return user


def _unauthorized(challenge: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": challenge},
    )


def get_current_user(
    security_scopes: SecurityScopes,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User:
    return _decode_user(security_scopes, token, settings)


def get_weather_reader(
    security_scopes: SecurityScopes,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User | None:
    # Weather endpoints stay public unless APP_AUTH_REQUIRED is set.
    if not settings.auth_required:
        return None
    return _decode_user(security_scopes, token, settings)


CurrentUser = Annotated[User, Security(get_current_user)]

WeatherReader = Annotated[
    User | None, Security(get_weather_reader, scopes=["weather:read"])
]
