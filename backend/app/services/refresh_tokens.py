# backend/app/services/refresh_tokens.py
"""
Refresh token store: the authority for "is this session still alive".

Only one_way_hash(raw) is persisted. Every validation re-reads storage
(no caching), so a revoked token fails on the very next request.
Mutations are single conditional UPDATE statements; two concurrent
rotations of the same token cannot both win.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import InvalidOrExpiredTokenError
from backend.app.models.refresh_token import RefreshToken
from backend.app.security.tokens import one_way_hash, random_opaque_token


@dataclass(frozen=True)
class ValidRefreshToken:
    record_id: int
    account_id: int


class RefreshTokenStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def issue(self, account_id: int, ttl_seconds: int) -> str:
        """
        Persist a new token for the account and return the raw value.

        The caller transmits the raw value (cookie) and never stores it.
        Added to the session only; the caller commits.
        """
        raw = random_opaque_token()
        self.db.add(
            RefreshToken(
                user_id=account_id,
                token_hash=one_way_hash(raw),
                expires_at=datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds),
                revoked=False,
            )
        )
        await self.db.flush()
        return raw

    async def validate(self, raw: str) -> ValidRefreshToken:
        # Missing, revoked and expired all look the same to the caller
        now = datetime.now(timezone.utc)
        result = await self.db.execute(
            select(RefreshToken.id, RefreshToken.user_id).where(
                RefreshToken.token_hash == one_way_hash(raw),
                RefreshToken.revoked.is_(False),
                RefreshToken.expires_at > now,
            )
        )
        row = result.first()
        if row is None:
            raise InvalidOrExpiredTokenError()
        return ValidRefreshToken(record_id=row.id, account_id=row.user_id)

    async def find_by_raw(self, raw: str) -> Optional[RefreshToken]:
        """Record lookup regardless of state; used for reuse detection only."""
        result = await self.db.execute(
            select(RefreshToken)
            .where(RefreshToken.token_hash == one_way_hash(raw))
            # Conditional UPDATEs bypass the identity map; reload the row
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def revoke(self, record_id: int) -> None:
        """
        Revoke one token. Zero affected rows means someone else revoked it
        first (or it expired meanwhile) and is reported as an invalid token.
        """
        result = await self.db.execute(
            update(RefreshToken)
            .where(
                RefreshToken.id == record_id,
                RefreshToken.revoked.is_(False),
                RefreshToken.expires_at > datetime.now(timezone.utc),
            )
            .values(revoked=True)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise InvalidOrExpiredTokenError()

    async def revoke_all_for_account(self, account_id: int) -> int:
        result = await self.db.execute(
            update(RefreshToken)
            .where(RefreshToken.user_id == account_id, RefreshToken.revoked.is_(False))
            .values(revoked=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def purge_expired(self) -> int:
        """Delete expired rows. Not needed for correctness; expired rows are inert."""
        result = await self.db.execute(
            delete(RefreshToken)
            .where(RefreshToken.expires_at <= datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
