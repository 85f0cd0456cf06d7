from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm

from comfortboard.api.deps import CurrentUser, authenticate_user, get_settings
from comfortboard.core.config import Settings
from comfortboard.core.security import issue_access_token
from comfortboard.schemas.auth import Token, User

router = APIRouter(prefix="/auth")


@router.post("/token", response_model=Token)
def issue_dashboard_token(
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Token:
    user = authenticate_user(
        username=form_data.username, password=form_data.password, settings=settings
    )
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    response.headers["Cache-Control"] = "no-store"
    return issue_access_token(user, settings)


@router.get("/me", response_model=User)
def whoami(user: CurrentUser) -> User:
    return user
