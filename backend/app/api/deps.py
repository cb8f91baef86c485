# backend/app/api/deps.py
from typing import Optional

from fastapi import Cookie, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import Settings, get_settings
from backend.app.core.errors import (
    AccountNotApprovedError,
    AccountSuspendedError,
    ForbiddenError,
    InvalidOrExpiredTokenError,
    NotFoundError,
)
from backend.app.db.base import get_db
from backend.app.models.user import AccountStatus, User
from backend.app.security.encryption import NoteCipher
from backend.app.security.jwt import AccessTokenCodec
from backend.app.services.admin_service import AdminService
from backend.app.services.auth_service import AuthService, ResetLinkSender, log_reset_link
from backend.app.services.note_service import NoteService
from backend.app.services.share_service import ShareService

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"


# ─────────────────────────────────────────────────────────────────────────────
# Keys: built from immutable settings and injected explicitly
# ─────────────────────────────────────────────────────────────────────────────
def get_codec(settings: Settings = Depends(get_settings)) -> AccessTokenCodec:
    return AccessTokenCodec(settings.SECRET_KEY)


def get_cipher(settings: Settings = Depends(get_settings)) -> NoteCipher:
    return NoteCipher(settings.encryption_key_bytes)


def get_reset_link_sender(settings: Settings = Depends(get_settings)) -> Optional[ResetLinkSender]:
    # No mail transport is wired; reset links are only logged outside production
    if settings.is_production:
        return None
    return log_reset_link


# ─────────────────────────────────────────────────────────────────────────────
# Services (one per request, bound to the request's session)
# ─────────────────────────────────────────────────────────────────────────────
def get_auth_service(
        db: AsyncSession = Depends(get_db),
        settings: Settings = Depends(get_settings),
        codec: AccessTokenCodec = Depends(get_codec),
        sender: Optional[ResetLinkSender] = Depends(get_reset_link_sender),
) -> AuthService:
    return AuthService(db, settings, codec, reset_link_sender=sender)


def get_admin_service(db: AsyncSession = Depends(get_db)) -> AdminService:
    return AdminService(db)


def get_note_service(
        db: AsyncSession = Depends(get_db),
        cipher: NoteCipher = Depends(get_cipher),
) -> NoteService:
    return NoteService(db, cipher)


def get_share_service(
        db: AsyncSession = Depends(get_db),
        notes: NoteService = Depends(get_note_service),
) -> ShareService:
    return ShareService(db, notes)


# ─────────────────────────────────────────────────────────────────────────────
# Authentication
# ─────────────────────────────────────────────────────────────────────────────
async def get_current_user(
        access_token: Optional[str] = Cookie(default=None),
        codec: AccessTokenCodec = Depends(get_codec),
        auth: AuthService = Depends(get_auth_service),
) -> User:
    if not access_token:
        raise InvalidOrExpiredTokenError("access token missing")

    account_id = codec.verify(access_token)

    try:
        return await auth.get_account(account_id)
    except NotFoundError as ex:
        # Account deleted while its access token was still alive
        raise InvalidOrExpiredTokenError() from ex


async def get_current_approved_user(current_user: User = Depends(get_current_user)) -> User:
    if current_user.status == AccountStatus.SUSPENDED.value:
        raise AccountSuspendedError()
    if current_user.status != AccountStatus.APPROVED.value:
        raise AccountNotApprovedError()
    return current_user


async def get_current_admin(current_user: User = Depends(get_current_approved_user)) -> User:
    if not current_user.is_admin:
        raise ForbiddenError("admin only")
    return current_user


def require_encrypted_notes_enabled(settings: Settings = Depends(get_settings)) -> None:
    if not settings.ENCRYPTED_NOTES_ENABLED:
        raise NotFoundError()
