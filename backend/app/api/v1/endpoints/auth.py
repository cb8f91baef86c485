# backend/app/api/v1/endpoints/auth.py
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Response, status

from backend.app.api import deps
from backend.app.core.config import Settings, get_settings
from backend.app.core.errors import InvalidOrExpiredTokenError
from backend.app.schemas.user import (
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    StatusResponse,
    UserCreate,
)
from backend.app.services.auth_service import AuthService, TokenPair

router = APIRouter()


def _set_cookie(response: Response, name: str, value: str, max_age: int, settings: Settings) -> None:
    # HttpOnly always; Secure follows configuration (true in production)
    response.set_cookie(
        key=name,
        value=value,
        max_age=max_age,
        path="/",
        domain=settings.COOKIE_DOMAIN or None,
        secure=settings.COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )


def set_auth_cookies(response: Response, pair: TokenPair, settings: Settings) -> None:
    _set_cookie(response, deps.ACCESS_COOKIE, pair.access_token,
                settings.ACCESS_TOKEN_EXPIRE_SECONDS, settings)
    _set_cookie(response, deps.REFRESH_COOKIE, pair.refresh_token,
                settings.REFRESH_TOKEN_EXPIRE_SECONDS, settings)


def clear_auth_cookies(response: Response, settings: Settings) -> None:
    for name in (deps.ACCESS_COOKIE, deps.REFRESH_COOKIE):
        response.delete_cookie(
            key=name,
            path="/",
            domain=settings.COOKIE_DOMAIN or None,
            secure=settings.COOKIE_SECURE,
            httponly=True,
            samesite="lax",
        )


@router.post("/register", response_model=StatusResponse, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, auth: AuthService = Depends(deps.get_auth_service)):
    await auth.register(user_in.email, user_in.password, user_in.name)
    return {"status": "account_created"}


@router.post("/login", response_model=StatusResponse)
async def login(
        credentials: LoginRequest,
        response: Response,
        auth: AuthService = Depends(deps.get_auth_service),
        settings: Settings = Depends(get_settings),
):
    pair = await auth.login(credentials.email, credentials.password)
    set_auth_cookies(response, pair, settings)
    return {"status": "logged_in"}


@router.post("/refresh", response_model=StatusResponse)
async def refresh(
        response: Response,
        refresh_token: Optional[str] = Cookie(default=None),
        auth: AuthService = Depends(deps.get_auth_service),
        settings: Settings = Depends(get_settings),
):
    if not refresh_token:
        raise InvalidOrExpiredTokenError("refresh token missing")
    pair = await auth.refresh(refresh_token)
    set_auth_cookies(response, pair, settings)
    return {"status": "token_refreshed"}


@router.post("/logout", response_model=StatusResponse)
async def logout(
        response: Response,
        refresh_token: Optional[str] = Cookie(default=None),
        auth: AuthService = Depends(deps.get_auth_service),
        settings: Settings = Depends(get_settings),
):
    await auth.logout(refresh_token)
    clear_auth_cookies(response, settings)
    return {"status": "logged_out"}


@router.post("/forgot-password", response_model=StatusResponse)
async def forgot_password(
        request: ForgotPasswordRequest,
        auth: AuthService = Depends(deps.get_auth_service),
):
    # Same answer whether or not the email exists
    await auth.forgot_password(request.email)
    return {"status": "reset_requested"}


@router.post("/reset-password", response_model=StatusResponse)
async def reset_password(
        request: ResetPasswordRequest,
        auth: AuthService = Depends(deps.get_auth_service),
):
    await auth.reset_password(request.token, request.new_password)
    return {"status": "password_reset"}
