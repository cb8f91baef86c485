# backend/app/schemas/user.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# Registration request (account starts PENDING)
class UserCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=1024)
    name: str = Field("", max_length=100)


class LoginRequest(BaseModel):
    email: str
    password: str


# Schema returned to the owner (NEVER includes the password hash)
class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    user_salt: str
    status: str
    is_admin: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PendingUser(BaseModel):
    id: int
    email: str
    name: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PendingUsersResponse(BaseModel):
    pending_users: List[PendingUser]


class ProfileUpdate(BaseModel):
    name: str = Field(..., max_length=100)


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str = Field(..., min_length=1, max_length=1024)


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str = Field(..., min_length=1, max_length=1024)


class StatusResponse(BaseModel):
    status: str
