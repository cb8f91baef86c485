# backend/app/api/v1/endpoints/me.py
from fastapi import APIRouter, Depends, Response

from backend.app.api import deps
from backend.app.api.v1.endpoints.auth import clear_auth_cookies
from backend.app.core.config import Settings, get_settings
from backend.app.models.user import User
from backend.app.schemas.user import (
    ChangePasswordRequest,
    ProfileUpdate,
    StatusResponse,
    UserResponse,
)
from backend.app.services.auth_service import AuthService

router = APIRouter()


@router.get("", response_model=UserResponse)
async def read_me(current_user: User = Depends(deps.get_current_approved_user)):
    return current_user


@router.put("", response_model=UserResponse)
async def edit_profile(
        profile: ProfileUpdate,
        current_user: User = Depends(deps.get_current_approved_user),
        auth: AuthService = Depends(deps.get_auth_service),
):
    return await auth.edit_profile(current_user.id, profile.name)


@router.put("/password", response_model=StatusResponse)
async def change_password(
        request: ChangePasswordRequest,
        response: Response,
        current_user: User = Depends(deps.get_current_approved_user),
        auth: AuthService = Depends(deps.get_auth_service),
        settings: Settings = Depends(get_settings),
):
    await auth.change_password(current_user.id, request.old_password, request.new_password)
    # Every refresh token is gone; this client logs in again too
    clear_auth_cookies(response, settings)
    return {"status": "password_changed"}
