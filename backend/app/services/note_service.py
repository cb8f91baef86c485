# backend/app/services/note_service.py
"""
Note confidentiality layer.

Both note shapes share one table and one ownership check; only the
content handling differs:

- transparent: content encrypted with the server key on every write,
  decrypted on every read. The server can read and search it.
- zero_knowledge: ciphertexts, nonces and salt are stored and returned
  verbatim. No cryptographic operation happens here, so a server
  compromise does not expose them.

Non-owners get NotFoundError, never ForbiddenError: a private note's
existence is not confirmed to anyone but its owner.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import NotFoundError, wraps_storage_errors
from backend.app.models.note import Note, NoteKind
from backend.app.security.encryption import NoteCipher

COPY_SUFFIX = " (Copy)"


@dataclass
class PlainNote:
    """Decrypted view of a transparent note."""
    id: int
    title: str
    content: str
    is_pinned: bool
    is_archived: bool
    is_deleted: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


@dataclass
class EncryptedNoteInput:
    title_ciphertext: str
    content_ciphertext: str
    title_nonce: str
    content_nonce: str
    note_salt: str


class NoteService:
    def __init__(self, db: AsyncSession, cipher: NoteCipher):
        self.db = db
        self.cipher = cipher

    # ─────────────────────────────────────────────────────────────
    # Shared ownership
    # ─────────────────────────────────────────────────────────────
    async def _owned(self, account_id: int, note_id: int, kind: NoteKind) -> Note:
        result = await self.db.execute(
            select(Note).where(
                Note.id == note_id,
                Note.user_id == account_id,
                Note.kind == kind.value,
            )
        )
        note = result.scalars().first()
        if note is None:
            raise NotFoundError("note not found")
        return note

    @wraps_storage_errors
    async def ensure_ownership(
        self, account_id: int, note_id: int, kind: NoteKind = NoteKind.TRANSPARENT
    ) -> None:
        await self._owned(account_id, note_id, kind)

    def _to_plain(self, note: Note) -> PlainNote:
        return PlainNote(
            id=note.id,
            title=note.title or "",
            content=self.cipher.decrypt(note.content),
            is_pinned=note.is_pinned,
            is_archived=note.is_archived,
            is_deleted=note.is_deleted,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )

    async def _list_transparent(self, account_id: int) -> List[Note]:
        result = await self.db.execute(
            select(Note)
            .where(Note.user_id == account_id, Note.kind == NoteKind.TRANSPARENT.value)
            .order_by(Note.updated_at.desc(), Note.id.desc())
        )
        return list(result.scalars().all())

    # ─────────────────────────────────────────────────────────────
    # Transparent path
    # ─────────────────────────────────────────────────────────────
    @wraps_storage_errors
    async def create(self, account_id: int, title: str, content: str) -> PlainNote:
        note = Note(
            user_id=account_id,
            kind=NoteKind.TRANSPARENT.value,
            title=title,
            content=self.cipher.encrypt(content),
        )
        self.db.add(note)
        await self.db.commit()
        await self.db.refresh(note)
        return self._to_plain(note)

    @wraps_storage_errors
    async def get(self, account_id: int, note_id: int) -> PlainNote:
        note = await self._owned(account_id, note_id, NoteKind.TRANSPARENT)
        return self._to_plain(note)

    @wraps_storage_errors
    async def list_all(self, account_id: int) -> List[PlainNote]:
        return [self._to_plain(n) for n in await self._list_transparent(account_id)]

    @wraps_storage_errors
    async def metadata(self, account_id: int) -> List[Note]:
        """Listing without decrypting content."""
        return await self._list_transparent(account_id)

    @wraps_storage_errors
    async def update(self, account_id: int, note_id: int, title: str, content: str) -> PlainNote:
        note = await self._owned(account_id, note_id, NoteKind.TRANSPARENT)
        note.title = title
        note.content = self.cipher.encrypt(content)
        await self.db.commit()
        await self.db.refresh(note)
        return self._to_plain(note)

    @wraps_storage_errors
    async def update_flags(
        self,
        account_id: int,
        note_id: int,
        is_pinned: Optional[bool] = None,
        is_archived: Optional[bool] = None,
        is_deleted: Optional[bool] = None,
    ) -> PlainNote:
        note = await self._owned(account_id, note_id, NoteKind.TRANSPARENT)
        if is_pinned is not None:
            note.is_pinned = is_pinned
        if is_archived is not None:
            note.is_archived = is_archived
        if is_deleted is not None:
            note.is_deleted = is_deleted
        await self.db.commit()
        await self.db.refresh(note)
        return self._to_plain(note)

    @wraps_storage_errors
    async def duplicate(self, account_id: int, note_id: int) -> PlainNote:
        source = await self._owned(account_id, note_id, NoteKind.TRANSPARENT)
        copy = Note(
            user_id=account_id,
            kind=NoteKind.TRANSPARENT.value,
            title=(source.title or "") + COPY_SUFFIX,
            content=self.cipher.encrypt(self.cipher.decrypt(source.content)),
        )
        self.db.add(copy)
        await self.db.commit()
        await self.db.refresh(copy)
        return self._to_plain(copy)

    @wraps_storage_errors
    async def delete_forever(self, account_id: int, note_id: int) -> None:
        note = await self._owned(account_id, note_id, NoteKind.TRANSPARENT)
        await self.db.delete(note)
        await self.db.commit()

    @wraps_storage_errors
    async def search(self, account_id: int, query: str) -> List[PlainNote]:
        """
        Case-insensitive match on title or content, trashed notes excluded.

        Content is encrypted at rest, so matching happens after decryption
        instead of in SQL.
        """
        needle = query.lower()
        matches = []
        for note in await self._list_transparent(account_id):
            if note.is_deleted:
                continue
            plain = self._to_plain(note)
            if needle in plain.title.lower() or needle in plain.content.lower():
                matches.append(plain)
        return matches

    @wraps_storage_errors
    async def get_public(self, note_id: int) -> PlainNote:
        """Read a transparent note without an account context (share links)."""
        result = await self.db.execute(
            select(Note).where(
                Note.id == note_id,
                Note.kind == NoteKind.TRANSPARENT.value,
                Note.is_deleted.is_(False),
            )
        )
        note = result.scalars().first()
        if note is None:
            raise NotFoundError("note not found")
        return self._to_plain(note)

    # ─────────────────────────────────────────────────────────────
    # Zero-knowledge path (server is blind)
    # ─────────────────────────────────────────────────────────────
    @wraps_storage_errors
    async def create_encrypted(self, account_id: int, data: EncryptedNoteInput) -> Note:
        note = Note(
            user_id=account_id,
            kind=NoteKind.ZERO_KNOWLEDGE.value,
            title_ciphertext=data.title_ciphertext,
            content_ciphertext=data.content_ciphertext,
            title_nonce=data.title_nonce,
            content_nonce=data.content_nonce,
            note_salt=data.note_salt,
        )
        self.db.add(note)
        await self.db.commit()
        await self.db.refresh(note)
        return note

    @wraps_storage_errors
    async def list_encrypted(self, account_id: int) -> List[Note]:
        result = await self.db.execute(
            select(Note)
            .where(Note.user_id == account_id, Note.kind == NoteKind.ZERO_KNOWLEDGE.value)
            .order_by(Note.updated_at.desc(), Note.id.desc())
        )
        return list(result.scalars().all())

    @wraps_storage_errors
    async def get_encrypted(self, account_id: int, note_id: int) -> Note:
        return await self._owned(account_id, note_id, NoteKind.ZERO_KNOWLEDGE)

    @wraps_storage_errors
    async def update_encrypted(
        self, account_id: int, note_id: int, data: EncryptedNoteInput
    ) -> Note:
        note = await self._owned(account_id, note_id, NoteKind.ZERO_KNOWLEDGE)
        note.title_ciphertext = data.title_ciphertext
        note.content_ciphertext = data.content_ciphertext
        note.title_nonce = data.title_nonce
        note.content_nonce = data.content_nonce
        note.note_salt = data.note_salt
        await self.db.commit()
        await self.db.refresh(note)
        return note

    @wraps_storage_errors
    async def delete_encrypted(self, account_id: int, note_id: int) -> None:
        note = await self._owned(account_id, note_id, NoteKind.ZERO_KNOWLEDGE)
        await self.db.delete(note)
        await self.db.commit()
