# backend/app/services/password_resets.py
"""Single-use, short-lived password reset tokens (hash only)."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import InvalidOrExpiredTokenError
from backend.app.models.password_reset import PasswordReset
from backend.app.security.tokens import one_way_hash, random_opaque_token


@dataclass(frozen=True)
class ValidResetToken:
    record_id: int
    account_id: int


class PasswordResetStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def issue(self, account_id: int, ttl_seconds: int) -> str:
        raw = random_opaque_token()
        self.db.add(
            PasswordReset(
                user_id=account_id,
                token_hash=one_way_hash(raw),
                expires_at=datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds),
                used=False,
            )
        )
        await self.db.flush()
        return raw

    async def validate(self, raw: str) -> ValidResetToken:
        result = await self.db.execute(
            select(PasswordReset.id, PasswordReset.user_id).where(
                PasswordReset.token_hash == one_way_hash(raw),
                PasswordReset.used.is_(False),
                PasswordReset.expires_at > datetime.now(timezone.utc),
            )
        )
        row = result.first()
        if row is None:
            raise InvalidOrExpiredTokenError()
        return ValidResetToken(record_id=row.id, account_id=row.user_id)

    async def mark_used(self, record_id: int) -> None:
        """One-shot: a second call (or a concurrent loser) gets InvalidOrExpiredTokenError."""
        result = await self.db.execute(
            update(PasswordReset)
            .where(PasswordReset.id == record_id, PasswordReset.used.is_(False))
            .values(used=True)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise InvalidOrExpiredTokenError()
