# backend/app/services/share_service.py
"""
Share capabilities: unguessable public tokens granting read access to one
transparent note, independent of any session.

A note has at most one active token; minting a new link disables the
previous one.
"""
import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import (
    ForbiddenError,
    NotFoundError,
    wraps_storage_errors,
)
from backend.app.models.note import NoteKind
from backend.app.models.shared_note import SharedNote
from backend.app.security.tokens import random_opaque_token
from backend.app.services.note_service import NoteService, PlainNote

logger = logging.getLogger(__name__)


class ShareService:
    def __init__(self, db: AsyncSession, notes: NoteService):
        self.db = db
        self.notes = notes

    async def _require_owner(self, account_id: int, note_id: int) -> None:
        try:
            # Zero-knowledge notes are not shareable: only transparent notes qualify
            await self.notes.ensure_ownership(account_id, note_id, NoteKind.TRANSPARENT)
        except NotFoundError as ex:
            raise ForbiddenError() from ex

    async def _disable_all(self, note_id: int) -> int:
        result = await self.db.execute(
            update(SharedNote)
            .where(SharedNote.note_id == note_id, SharedNote.disabled.is_(False))
            .values(disabled=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    @wraps_storage_errors
    async def create_share(self, account_id: int, note_id: int) -> str:
        await self._require_owner(account_id, note_id)

        await self._disable_all(note_id)
        token = random_opaque_token()
        self.db.add(SharedNote(note_id=note_id, token=token, disabled=False))
        await self.db.commit()
        logger.info("share link created for note id=%s", note_id)
        return token

    @wraps_storage_errors
    async def disable_share(self, account_id: int, note_id: int) -> None:
        await self._require_owner(account_id, note_id)
        count = await self._disable_all(note_id)
        await self.db.commit()
        logger.info("disabled %s share link(s) for note id=%s", count, note_id)

    @wraps_storage_errors
    async def resolve_share(self, token: str) -> PlainNote:
        """Public: the token alone is the credential. Unknown or disabled -> NotFoundError."""
        result = await self.db.execute(
            select(SharedNote.note_id).where(
                SharedNote.token == token,
                SharedNote.disabled.is_(False),
            )
        )
        note_id = result.scalar_one_or_none()
        if note_id is None:
            raise NotFoundError("shared note not found")
        return await self.notes.get_public(note_id)
