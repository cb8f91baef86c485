"""Public share links for transparent notes."""
import pytest

from backend.app.core.errors import ForbiddenError, NotFoundError
from backend.app.services.note_service import EncryptedNoteInput


@pytest.fixture
async def owner_id(make_account):
    return await make_account("sharer@example.com")


@pytest.mark.asyncio
async def test_share_resolve_disable(share_service, note_service, owner_id):
    note = await note_service.create(owner_id, "Recipe", "flour, water")

    token = await share_service.create_share(owner_id, note.id)
    assert len(token) == 64
    resolved = await share_service.resolve_share(token)
    assert resolved.id == note.id
    assert resolved.content == "flour, water"

    await share_service.disable_share(owner_id, note.id)
    with pytest.raises(NotFoundError):
        await share_service.resolve_share(token)


@pytest.mark.asyncio
async def test_new_share_replaces_old(share_service, note_service, owner_id):
    note = await note_service.create(owner_id, "t", "c")
    old = await share_service.create_share(owner_id, note.id)
    new = await share_service.create_share(owner_id, note.id)

    assert old != new
    with pytest.raises(NotFoundError):
        await share_service.resolve_share(old)
    assert (await share_service.resolve_share(new)).id == note.id


@pytest.mark.asyncio
async def test_share_reflects_current_content(share_service, note_service, owner_id):
    note = await note_service.create(owner_id, "t", "v1")
    token = await share_service.create_share(owner_id, note.id)
    await note_service.update(owner_id, note.id, "t", "v2")

    assert (await share_service.resolve_share(token)).content == "v2"


@pytest.mark.asyncio
async def test_only_owner_can_share(share_service, note_service, owner_id, make_account):
    stranger_id = await make_account("stranger@example.com")
    note = await note_service.create(owner_id, "t", "c")

    with pytest.raises(ForbiddenError):
        await share_service.create_share(stranger_id, note.id)
    with pytest.raises(ForbiddenError):
        await share_service.disable_share(stranger_id, note.id)
    with pytest.raises(ForbiddenError):
        await share_service.create_share(owner_id, 12345)


@pytest.mark.asyncio
async def test_zero_knowledge_notes_cannot_be_shared(share_service, note_service, owner_id):
    zk = await note_service.create_encrypted(
        owner_id,
        EncryptedNoteInput(
            title_ciphertext="t", content_ciphertext="c",
            title_nonce="n1", content_nonce="n2", note_salt="s",
        ),
    )
    with pytest.raises(ForbiddenError):
        await share_service.create_share(owner_id, zk.id)


@pytest.mark.asyncio
async def test_trashed_or_deleted_note_not_resolvable(share_service, note_service, owner_id):
    trashed = await note_service.create(owner_id, "t", "c")
    trashed_token = await share_service.create_share(owner_id, trashed.id)
    await note_service.update_flags(owner_id, trashed.id, is_deleted=True)

    gone = await note_service.create(owner_id, "t", "c")
    gone_token = await share_service.create_share(owner_id, gone.id)
    await note_service.delete_forever(owner_id, gone.id)

    for token in (trashed_token, gone_token, "0" * 64):
        with pytest.raises(NotFoundError):
            await share_service.resolve_share(token)
