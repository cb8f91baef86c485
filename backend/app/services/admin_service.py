# backend/app/services/admin_service.py
"""Administrator-only account state transitions."""
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import NotFoundError, wraps_storage_errors
from backend.app.models.user import AccountStatus, User
from backend.app.services.refresh_tokens import RefreshTokenStore

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.refresh_tokens = RefreshTokenStore(db)

    async def _get(self, account_id: int) -> User:
        user = await self.db.get(User, account_id)
        if user is None:
            raise NotFoundError("user not found")
        return user

    @wraps_storage_errors
    async def list_pending(self) -> List[User]:
        result = await self.db.execute(
            select(User)
            .where(User.status == AccountStatus.PENDING.value)
            .order_by(User.created_at, User.id)
        )
        return list(result.scalars().all())

    @wraps_storage_errors
    async def approve(self, account_id: int) -> User:
        user = await self._get(account_id)
        user.status = AccountStatus.APPROVED.value
        await self.db.commit()
        logger.info("account id=%s approved", account_id)
        return user

    @wraps_storage_errors
    async def suspend(self, account_id: int) -> User:
        user = await self._get(account_id)
        user.status = AccountStatus.SUSPENDED.value
        # A suspended account keeps no live sessions
        await self.refresh_tokens.revoke_all_for_account(account_id)
        await self.db.commit()
        logger.info("account id=%s suspended", account_id)
        return user

    @wraps_storage_errors
    async def delete(self, account_id: int) -> None:
        """Hard delete; tokens, notes and shares go with it (ON DELETE CASCADE)."""
        user = await self._get(account_id)
        await self.db.delete(user)
        await self.db.commit()
        logger.info("account id=%s deleted", account_id)
