# backend/app/services/auth_service.py
"""
Credential & session lifecycle.

Account states: PENDING -> APPROVED <-> SUSPENDED, changed only by admins
(see admin_service). This service handles everything an account holder
can do: register, login, refresh rotation, logout, password change and
out-of-band password reset.

Each public method is one unit of work and commits (or rolls back) its
own session.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import Settings
from backend.app.core.errors import (
    AccountNotApprovedError,
    AccountSuspendedError,
    ConflictError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    wraps_storage_errors,
)
from backend.app.models.user import AccountStatus, User
from backend.app.security import hashing
from backend.app.security.jwt import AccessTokenCodec
from backend.app.security.tokens import generate_user_salt
from backend.app.services.password_resets import PasswordResetStore
from backend.app.services.refresh_tokens import RefreshTokenStore

logger = logging.getLogger(__name__)

# (email, reset_url) -> None. Delivery is out-of-band (mail in production).
ResetLinkSender = Callable[[str, str], None]


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def log_reset_link(email: str, reset_url: str) -> None:
    # Stand-in for a mail transport: development only
    logger.info("password reset link for %s: %s", email, reset_url)


class AuthService:
    def __init__(
        self,
        db: AsyncSession,
        settings: Settings,
        codec: AccessTokenCodec,
        reset_link_sender: Optional[ResetLinkSender] = None,
    ):
        self.db = db
        self.settings = settings
        self.codec = codec
        self.refresh_tokens = RefreshTokenStore(db)
        self.password_resets = PasswordResetStore(db)
        self.reset_link_sender = reset_link_sender

    # ─────────────────────────────────────────────────────────────
    # Lookups
    # ─────────────────────────────────────────────────────────────
    async def _find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    @wraps_storage_errors
    async def get_account(self, account_id: int) -> User:
        user = await self.db.get(User, account_id)
        if user is None:
            raise NotFoundError("user not found")
        return user

    # ─────────────────────────────────────────────────────────────
    # Register / login
    # ─────────────────────────────────────────────────────────────
    @wraps_storage_errors
    async def register(self, email: str, password: str, name: str) -> User:
        if await self._find_by_email(email) is not None:
            raise ConflictError()

        user = User(
            email=email,
            hashed_password=hashing.get_password_hash(password),
            name=name,
            user_salt=generate_user_salt(self.settings.USER_SALT_LENGTH),
            status=AccountStatus.PENDING.value,
            is_admin=False,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as ex:
            # Lost a race with a concurrent registration of the same email
            await self.db.rollback()
            raise ConflictError() from ex
        await self.db.refresh(user)
        logger.info("account registered id=%s (pending approval)", user.id)
        return user

    @wraps_storage_errors
    async def login(self, email: str, password: str) -> TokenPair:
        user = await self._find_by_email(email)
        if user is None:
            hashing.verify_password(password, hashing.DUMMY_HASH)
            raise InvalidCredentialsError()
        if not hashing.verify_password(password, user.hashed_password):
            logger.info("login failed for account id=%s", user.id)
            raise InvalidCredentialsError()

        if user.status == AccountStatus.PENDING.value:
            raise AccountNotApprovedError()
        if user.status == AccountStatus.SUSPENDED.value:
            raise AccountSuspendedError()

        pair = await self._issue_pair(user.id)
        await self.db.commit()
        logger.info("login ok for account id=%s", user.id)
        return pair

    async def _issue_pair(self, account_id: int) -> TokenPair:
        refresh = await self.refresh_tokens.issue(
            account_id, self.settings.REFRESH_TOKEN_EXPIRE_SECONDS
        )
        access = self.codec.issue(account_id, self.settings.ACCESS_TOKEN_EXPIRE_SECONDS)
        return TokenPair(access_token=access, refresh_token=refresh)

    # ─────────────────────────────────────────────────────────────
    # Refresh rotation / logout
    # ─────────────────────────────────────────────────────────────
    @wraps_storage_errors
    async def refresh(self, raw_refresh_token: str) -> TokenPair:
        """
        Exchange a refresh token for a new access + refresh pair.

        The presented token is revoked in the same transaction that stores
        its successor, so each refresh token works exactly once.
        """
        try:
            valid = await self.refresh_tokens.validate(raw_refresh_token)
            await self.refresh_tokens.revoke(valid.record_id)
        except InvalidOrExpiredTokenError:
            await self._handle_possible_reuse(raw_refresh_token)
            raise

        pair = await self._issue_pair(valid.account_id)
        await self.db.commit()
        return pair

    async def _handle_possible_reuse(self, raw_refresh_token: str) -> None:
        record = await self.refresh_tokens.find_by_raw(raw_refresh_token)
        if record is None or not record.revoked:
            return
        logger.warning("revoked refresh token presented again for account id=%s", record.user_id)
        if self.settings.REFRESH_REUSE_REVOKES_ALL:
            count = await self.refresh_tokens.revoke_all_for_account(record.user_id)
            await self.db.commit()
            logger.warning(
                "revoked %s refresh tokens for account id=%s after reuse", count, record.user_id
            )

    @wraps_storage_errors
    async def logout(self, raw_refresh_token: Optional[str]) -> None:
        """Revoke the presented refresh token if it is still valid; otherwise no-op."""
        if not raw_refresh_token:
            return
        try:
            valid = await self.refresh_tokens.validate(raw_refresh_token)
            await self.refresh_tokens.revoke(valid.record_id)
        except InvalidOrExpiredTokenError:
            return
        await self.db.commit()

    # ─────────────────────────────────────────────────────────────
    # Password reset (out-of-band)
    # ─────────────────────────────────────────────────────────────
    @wraps_storage_errors
    async def forgot_password(self, email: str) -> None:
        """Always succeeds from the caller's point of view."""
        user = await self._find_by_email(email)
        if user is None:
            return

        raw = await self.password_resets.issue(
            user.id, self.settings.reset_token_expire_seconds
        )
        await self.db.commit()
        logger.info("password reset issued for account id=%s", user.id)

        if self.reset_link_sender is None:
            logger.warning("no reset link sender configured; reset for account id=%s not delivered", user.id)
            return
        reset_url = f"{self.settings.APP_BASE_URL}/reset-password?token={raw}"
        self.reset_link_sender(user.email, reset_url)

    @wraps_storage_errors
    async def reset_password(self, raw_reset_token: str, new_password: str) -> None:
        valid = await self.password_resets.validate(raw_reset_token)
        # Claim the record first so two concurrent resets cannot both apply
        await self.password_resets.mark_used(valid.record_id)
        await self._set_password(valid.account_id, new_password)
        await self.refresh_tokens.revoke_all_for_account(valid.account_id)
        await self.db.commit()
        logger.info("password reset completed for account id=%s", valid.account_id)

    # ─────────────────────────────────────────────────────────────
    # Profile
    # ─────────────────────────────────────────────────────────────
    @wraps_storage_errors
    async def change_password(self, account_id: int, old_password: str, new_password: str) -> None:
        user = await self.db.get(User, account_id)
        if user is None or not hashing.verify_password(old_password, user.hashed_password):
            raise InvalidCredentialsError()

        await self._set_password(account_id, new_password)
        await self.refresh_tokens.revoke_all_for_account(account_id)
        await self.db.commit()
        logger.info("password changed for account id=%s", account_id)

    @wraps_storage_errors
    async def edit_profile(self, account_id: int, name: str) -> User:
        user = await self.db.get(User, account_id)
        if user is None:
            raise NotFoundError("user not found")
        user.name = name
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def _set_password(self, account_id: int, new_password: str) -> None:
        user = await self.db.get(User, account_id)
        if user is None:
            raise NotFoundError("user not found")
        user.hashed_password = hashing.get_password_hash(new_password)
        await self.db.flush()
