"""
Test configuration and fixtures.

Provides:
- In-memory SQLite engine (StaticPool) with foreign keys on
- Service-level fixtures bound to one session
- HTTPX AsyncClient against the app with dependency overrides
"""
from typing import AsyncGenerator, List, Tuple

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.api import deps
from backend.app.core.config import Settings, get_settings
from backend.app.db import init_models
from backend.app.db.base import get_db
from backend.app.db.session import build_engine, build_session_factory
from backend.app.main import app
from backend.app.models.user import AccountStatus, User
from backend.app.security import hashing
from backend.app.security.encryption import NoteCipher
from backend.app.security.jwt import AccessTokenCodec
from backend.app.security.tokens import generate_user_salt
from backend.app.services.admin_service import AdminService
from backend.app.services.auth_service import AuthService
from backend.app.services.note_service import NoteService
from backend.app.services.share_service import ShareService

TEST_SECRET_KEY = "test-secret-key-not-for-production"
# base64 of b"0123456789abcdef0123456789abcdef"
TEST_ENCRYPTION_KEY = "MDEyMzQ1Njc4OWFiY2RlZjAxMjM0NTY3ODlhYmNkZWY="
DEFAULT_PASSWORD = "correct horse battery staple"


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(
        ENVIRONMENT="development",
        SECRET_KEY=TEST_SECRET_KEY,
        ENCRYPTION_KEY=TEST_ENCRYPTION_KEY,
        COOKIE_DOMAIN="",
        COOKIE_SECURE=False,
        APP_BASE_URL="http://test",
        REFRESH_REUSE_REVOKES_ALL=False,
        ENCRYPTED_NOTES_ENABLED=True,
        DATABASE_URL="sqlite+aiosqlite://",
    )


@pytest.fixture
def codec(settings: Settings) -> AccessTokenCodec:
    return AccessTokenCodec(settings.SECRET_KEY)


@pytest.fixture
def cipher(settings: Settings) -> NoteCipher:
    return NoteCipher(settings.encryption_key_bytes)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
async def engine():
    # In-memory SQLite: StaticPool, foreign keys on
    test_engine = build_engine("sqlite+aiosqlite://")
    await init_models(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker:
    return build_session_factory(engine)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_account(session_factory):
    """Insert an account directly (bypassing registration) and return its id."""

    async def _make(
        email: str,
        password: str = DEFAULT_PASSWORD,
        status: AccountStatus = AccountStatus.APPROVED,
        is_admin: bool = False,
        name: str = "Test User",
    ) -> int:
        async with session_factory() as session:
            user = User(
                email=email,
                hashed_password=hashing.get_password_hash(password),
                name=name,
                user_salt=generate_user_salt(),
                status=status.value,
                is_admin=is_admin,
            )
            session.add(user)
            await session.commit()
            return user.id

    return _make


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def sent_links() -> List[Tuple[str, str]]:
    return []


@pytest.fixture
def reset_link_sender(sent_links):
    def _send(email: str, reset_url: str) -> None:
        sent_links.append((email, reset_url))

    return _send


@pytest.fixture
def auth_service(db, settings, codec, reset_link_sender) -> AuthService:
    return AuthService(db, settings, codec, reset_link_sender=reset_link_sender)


@pytest.fixture
def admin_service(db) -> AdminService:
    return AdminService(db)


@pytest.fixture
def note_service(db, cipher) -> NoteService:
    return NoteService(db, cipher)


@pytest.fixture
def share_service(db, note_service) -> ShareService:
    return ShareService(db, note_service)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture
async def client(session_factory, settings, reset_link_sender) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated client; every request gets its own session."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[deps.get_reset_link_sender] = lambda: reset_link_sender

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def new_client(client):
    """Extra clients sharing the overrides installed by `client`."""

    def _new(**kwargs) -> AsyncClient:
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test", **kwargs)

    return _new


async def login(c: AsyncClient, email: str, password: str = DEFAULT_PASSWORD):
    return await c.post("/api/v1/auth/login", json={"email": email, "password": password})


@pytest.fixture
async def user_client(client, make_account) -> AsyncClient:
    """`client` logged in as an approved, non-admin account."""
    await make_account("alice@example.com")
    response = await login(client, "alice@example.com")
    assert response.status_code == 200
    return client


@pytest.fixture
async def admin_client(new_client, make_account) -> AsyncGenerator[AsyncClient, None]:
    await make_account("admin@example.com", is_admin=True)
    async with new_client() as c:
        response = await login(c, "admin@example.com")
        assert response.status_code == 200
        yield c
