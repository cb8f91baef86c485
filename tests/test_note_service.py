"""Transparent and zero-knowledge notes behind one ownership check."""
import pytest
from sqlalchemy import select, update

from backend.app.core.errors import NotFoundError, StorageError
from backend.app.models.note import Note
from backend.app.services.note_service import EncryptedNoteInput


@pytest.fixture
async def owner_id(make_account):
    return await make_account("owner@example.com")


@pytest.fixture
async def stranger_id(make_account):
    return await make_account("stranger@example.com")


def _zk_input(tag: str = "a") -> EncryptedNoteInput:
    return EncryptedNoteInput(
        title_ciphertext=f"title-ct-{tag}",
        content_ciphertext=f"content-ct-{tag}",
        title_nonce=f"tn-{tag}",
        content_nonce=f"cn-{tag}",
        note_salt=f"salt-{tag}",
    )


# ─────────────────────────────────────────────────────────────
# Transparent notes
# ─────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_content_is_encrypted_at_rest(note_service, db, owner_id):
    note = await note_service.create(owner_id, "Groceries", "milk and eggs")
    assert note.content == "milk and eggs"

    stored = (await db.execute(select(Note.content).where(Note.id == note.id))).scalar_one()
    assert "milk" not in stored
    assert (await note_service.get(owner_id, note.id)).content == "milk and eggs"


@pytest.mark.asyncio
async def test_non_owner_gets_not_found(note_service, owner_id, stranger_id):
    note = await note_service.create(owner_id, "Private", "secret")

    with pytest.raises(NotFoundError):
        await note_service.get(stranger_id, note.id)
    with pytest.raises(NotFoundError):
        await note_service.update(stranger_id, note.id, "x", "y")
    with pytest.raises(NotFoundError):
        await note_service.update_flags(stranger_id, note.id, is_pinned=True)
    with pytest.raises(NotFoundError):
        await note_service.duplicate(stranger_id, note.id)
    with pytest.raises(NotFoundError):
        await note_service.delete_forever(stranger_id, note.id)

    assert (await note_service.get(owner_id, note.id)).title == "Private"


@pytest.mark.asyncio
async def test_update_re_encrypts(note_service, db, owner_id):
    note = await note_service.create(owner_id, "t", "before")
    before = (await db.execute(select(Note.content).where(Note.id == note.id))).scalar_one()

    updated = await note_service.update(owner_id, note.id, "t2", "after")
    after = (await db.execute(select(Note.content).where(Note.id == note.id))).scalar_one()

    assert updated.title == "t2"
    assert updated.content == "after"
    assert before != after


@pytest.mark.asyncio
async def test_update_flags_is_partial(note_service, owner_id):
    note = await note_service.create(owner_id, "t", "c")

    flagged = await note_service.update_flags(owner_id, note.id, is_pinned=True)
    assert flagged.is_pinned is True
    assert flagged.is_archived is False

    flagged = await note_service.update_flags(owner_id, note.id, is_archived=True)
    assert flagged.is_pinned is True
    assert flagged.is_archived is True
    assert flagged.is_deleted is False


@pytest.mark.asyncio
async def test_duplicate(note_service, db, owner_id):
    note = await note_service.create(owner_id, "Plan", "step one")
    copy = await note_service.duplicate(owner_id, note.id)

    assert copy.id != note.id
    assert copy.title == "Plan (Copy)"
    assert copy.content == "step one"
    rows = (await db.execute(select(Note.content).where(Note.user_id == owner_id))).scalars().all()
    assert len(set(rows)) == 2


@pytest.mark.asyncio
async def test_list_and_metadata_are_per_owner(note_service, owner_id, stranger_id):
    await note_service.create(owner_id, "one", "1")
    await note_service.create(owner_id, "two", "2")
    await note_service.create(stranger_id, "theirs", "3")

    mine = await note_service.list_all(owner_id)
    assert sorted(n.title for n in mine) == ["one", "two"]
    meta = await note_service.metadata(owner_id)
    assert sorted(n.title for n in meta) == ["one", "two"]


@pytest.mark.asyncio
async def test_search_is_case_insensitive_and_skips_trash(note_service, owner_id, stranger_id):
    hit_title = await note_service.create(owner_id, "Meeting NOTES", "agenda")
    hit_content = await note_service.create(owner_id, "misc", "remember the meeting")
    trashed = await note_service.create(owner_id, "old meeting", "x")
    await note_service.update_flags(owner_id, trashed.id, is_deleted=True)
    await note_service.create(owner_id, "unrelated", "nothing here")
    await note_service.create(stranger_id, "meeting", "not yours")

    found = await note_service.search(owner_id, "MEETING")
    assert sorted(n.id for n in found) == sorted([hit_title.id, hit_content.id])


@pytest.mark.asyncio
async def test_delete_forever(note_service, owner_id):
    note = await note_service.create(owner_id, "t", "c")
    await note_service.delete_forever(owner_id, note.id)
    with pytest.raises(NotFoundError):
        await note_service.get(owner_id, note.id)


@pytest.mark.asyncio
async def test_corrupted_ciphertext_raises_storage_error(note_service, db, owner_id):
    note = await note_service.create(owner_id, "t", "c")
    await db.execute(update(Note).where(Note.id == note.id).values(content="!!corrupt!!"))
    await db.commit()
    db.expire_all()

    with pytest.raises(StorageError):
        await note_service.get(owner_id, note.id)


@pytest.mark.asyncio
async def test_get_public_skips_trashed(note_service, owner_id):
    note = await note_service.create(owner_id, "t", "c")
    assert (await note_service.get_public(note.id)).content == "c"

    await note_service.update_flags(owner_id, note.id, is_deleted=True)
    with pytest.raises(NotFoundError):
        await note_service.get_public(note.id)


# ─────────────────────────────────────────────────────────────
# Zero-knowledge notes
# ─────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_zero_knowledge_fields_stored_verbatim(note_service, owner_id):
    created = await note_service.create_encrypted(owner_id, _zk_input("a"))
    fetched = await note_service.get_encrypted(owner_id, created.id)

    assert fetched.title_ciphertext == "title-ct-a"
    assert fetched.content_ciphertext == "content-ct-a"
    assert fetched.title_nonce == "tn-a"
    assert fetched.content_nonce == "cn-a"
    assert fetched.note_salt == "salt-a"


@pytest.mark.asyncio
async def test_zero_knowledge_update_and_delete(note_service, owner_id, stranger_id):
    created = await note_service.create_encrypted(owner_id, _zk_input("a"))

    with pytest.raises(NotFoundError):
        await note_service.update_encrypted(stranger_id, created.id, _zk_input("b"))

    updated = await note_service.update_encrypted(owner_id, created.id, _zk_input("b"))
    assert updated.content_ciphertext == "content-ct-b"

    with pytest.raises(NotFoundError):
        await note_service.delete_encrypted(stranger_id, created.id)
    await note_service.delete_encrypted(owner_id, created.id)
    assert await note_service.list_encrypted(owner_id) == []


@pytest.mark.asyncio
async def test_kinds_do_not_cross(note_service, owner_id):
    plain = await note_service.create(owner_id, "plain", "text")
    zk = await note_service.create_encrypted(owner_id, _zk_input())

    with pytest.raises(NotFoundError):
        await note_service.get(owner_id, zk.id)
    with pytest.raises(NotFoundError):
        await note_service.get_encrypted(owner_id, plain.id)
    with pytest.raises(NotFoundError):
        await note_service.get_public(zk.id)

    assert [n.id for n in await note_service.list_all(owner_id)] == [plain.id]
    assert [n.id for n in await note_service.list_encrypted(owner_id)] == [zk.id]
