"""Password checks and bearer tokens for the optional dashboard login."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext
from pydantic import ValidationError

from comfortboard.core.config import Settings
from comfortboard.schemas.auth import Token, TokenClaims, User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class InvalidTokenError(ValueError):
    pass


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def issue_access_token(user: User, settings: Settings) -> Token:
    lifetime = timedelta(minutes=settings.access_token_expire_minutes)
    now = datetime.now(tz=timezone.utc)
    encoded = jwt.encode(
        {
            "sub": user.username,
            "scopes": user.scopes,
            "iat": now,
            "exp": now + lifetime,
        },
        settings.secret_key,
        algorithm=settings.algorithm,
    )
    return Token(access_token=encoded, expires_in=int(lifetime.total_seconds()))


def decode_access_token(token: str, settings: Settings) -> TokenClaims:
    # PyJWT rejects expired tokens while decoding.
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            options={"require": ["exp", "sub"]},
        )
        return TokenClaims.model_validate(payload)
    except (jwt.PyJWTError, ValidationError) as e:
        raise InvalidTokenError(str(e)) from e
