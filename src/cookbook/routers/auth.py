from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import HTTPAuthorizationCredentials

from src.cookbook.config import get_settings
from src.cookbook.deps import CurrentUser, auth_scheme, get_current_user, get_local_auth
from src.cookbook.domain.errors import InvalidCredentialsError, UserAlreadyExistsError
from src.cookbook.schemas.auth import LoginRequest, RegisterRequest, SessionResponse
from src.cookbook.services.local_auth import LocalAuthService

log = logging.getLogger("auth")
router = APIRouter(prefix="/auth", tags=["auth"])


def _require_local_mode() -> None:
    if get_settings().AUTH_MODE != "local":
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Local accounts are disabled")


@router.post("/register", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    _: None = Depends(_require_local_mode),
    accounts: LocalAuthService = Depends(get_local_auth),
) -> SessionResponse:
    try:
        accounts.register(body.email, body.password, body.name)
        user, token = accounts.login(body.email, body.password)
    except UserAlreadyExistsError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return SessionResponse(accessToken=token, userId=user.id, email=user.email, name=user.name)


@router.post("/login", response_model=SessionResponse)
async def login(
    body: LoginRequest,
    _: None = Depends(_require_local_mode),
    accounts: LocalAuthService = Depends(get_local_auth),
) -> SessionResponse:
    try:
        user, token = accounts.login(body.email, body.password)
    except InvalidCredentialsError as exc:
        log.warning("auth.login_fail email=%s", body.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    return SessionResponse(accessToken=token, userId=user.id, email=user.email, name=user.name)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    _: None = Depends(_require_local_mode),
    accounts: LocalAuthService = Depends(get_local_auth),
) -> Response:
    if cred is not None:
        accounts.logout(cred.credentials)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=CurrentUser)
async def me(user: CurrentUser = Depends(get_current_user)):
    return user
