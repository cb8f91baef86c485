"""Admin-only account transitions."""
import pytest
from sqlalchemy import func, select

from backend.app.core.errors import AccountSuspendedError, NotFoundError
from backend.app.models.note import Note
from backend.app.models.refresh_token import RefreshToken
from backend.app.models.user import User

PASSWORD = "correct horse battery staple"


async def _count(db, model, **filters) -> int:
    stmt = select(func.count()).select_from(model)
    for column, value in filters.items():
        stmt = stmt.where(getattr(model, column) == value)
    return (await db.execute(stmt)).scalar_one()


@pytest.mark.asyncio
async def test_list_pending_only_returns_pending(admin_service, auth_service, make_account):
    await make_account("approved@example.com")
    await auth_service.register("waiting1@example.com", PASSWORD, "")
    await auth_service.register("waiting2@example.com", PASSWORD, "")

    pending = await admin_service.list_pending()
    assert [u.email for u in pending] == ["waiting1@example.com", "waiting2@example.com"]


@pytest.mark.asyncio
async def test_approve_enables_login(admin_service, auth_service):
    user = await auth_service.register("soon@example.com", PASSWORD, "")
    account_id = user.id

    await admin_service.approve(account_id)

    pair = await auth_service.login("soon@example.com", PASSWORD)
    assert pair.refresh_token
    assert await admin_service.list_pending() == []


@pytest.mark.asyncio
async def test_suspend_revokes_sessions_and_blocks_login(admin_service, auth_service, db, make_account):
    account_id = await make_account("bad@example.com")
    await auth_service.login("bad@example.com", PASSWORD)
    await auth_service.login("bad@example.com", PASSWORD)

    await admin_service.suspend(account_id)

    assert await _count(db, RefreshToken, user_id=account_id, revoked=False) == 0
    with pytest.raises(AccountSuspendedError):
        await auth_service.login("bad@example.com", PASSWORD)

    # Suspension is reversible
    await admin_service.approve(account_id)
    await auth_service.login("bad@example.com", PASSWORD)


@pytest.mark.asyncio
async def test_delete_cascades(admin_service, auth_service, note_service, db, make_account):
    account_id = await make_account("gone@example.com")
    await auth_service.login("gone@example.com", PASSWORD)
    await note_service.create(account_id, "t", "c")

    await admin_service.delete(account_id)

    assert await _count(db, User, id=account_id) == 0
    assert await _count(db, RefreshToken, user_id=account_id) == 0
    assert await _count(db, Note, user_id=account_id) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("action", ["approve", "suspend", "delete"])
async def test_unknown_account(admin_service, action):
    with pytest.raises(NotFoundError):
        await getattr(admin_service, action)(999)

