"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from datetime import datetime
from pathlib import Path
from uuid import UUID, uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.exceptions import AuthError, ErrorCode
from domain.entities.session import AuthTokens, Identity
from domain.repositories.identity_provider import AuthStateListener
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.database.models import Base, NoteModel, ProfileModel

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_EMAIL = "admin@example.com"
TEST_PASSWORD = "correct-horse"


class FakeIdentityDirectory:
    """In-memory stand-in for the identity service's account store."""

    def __init__(self, auth_provider: JWTAuthProvider, auto_confirm: bool = True) -> None:
        self.auth_provider = auth_provider
        self.auto_confirm = auto_confirm
        self.accounts: dict[str, tuple[str, Identity]] = {}
        self.revoked: list[str] = []

    def add(self, identity: Identity, password: str = TEST_PASSWORD) -> Identity:
        self.accounts[identity.email] = (password, identity)
        return identity


class FakeIdentityProvider:
    """Identity provider that behaves like the Supabase client without HTTP."""

    def __init__(self, directory: FakeIdentityDirectory) -> None:
        self._directory = directory
        self._listeners: list[AuthStateListener] = []
        self._access_token: str | None = None

    def on_auth_state_change(self, listener: AuthStateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def restore_session(self, access_token: str | None) -> Identity | None:
        identity = None
        if access_token:
            identity = await self._directory.auth_provider.validate_token(access_token)
        self._access_token = access_token if identity else None
        await self._notify(identity)
        return identity

    async def sign_up(self, email: str, password: str) -> Identity:
        if email in self._directory.accounts:
            raise AuthError(
                message="User already registered",
                error_code=ErrorCode.EMAIL_ALREADY_REGISTERED,
                status_code=409,
            )
        identity = self._directory.add(Identity(id=uuid4(), email=email), password)
        if self._directory.auto_confirm:
            self._access_token = self._directory.auth_provider.create_token(identity)
            await self._notify(identity)
        return identity

    async def sign_in(self, email: str, password: str) -> AuthTokens:
        account = self._directory.accounts.get(email)
        if account is None or account[0] != password:
            raise AuthError()
        identity = account[1]
        tokens = AuthTokens(access_token=self._directory.auth_provider.create_token(identity))
        self._access_token = tokens.access_token
        await self._notify(identity)
        return tokens

    async def sign_out(self) -> None:
        if self._access_token:
            self._directory.revoked.append(self._access_token)
        self._access_token = None
        await self._notify(None)

    async def _notify(self, identity: Identity | None) -> None:
        for listener in list(self._listeners):
            await listener(identity)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def identity_directory(auth_provider: JWTAuthProvider) -> FakeIdentityDirectory:
    return FakeIdentityDirectory(auth_provider)


@pytest.fixture
def admin_identity(identity_directory: FakeIdentityDirectory) -> Identity:
    return identity_directory.add(Identity(id=uuid4(), email=ADMIN_EMAIL, display_name="Admin"))


@pytest.fixture
def test_identity(identity_directory: FakeIdentityDirectory) -> Identity:
    return identity_directory.add(
        Identity(id=uuid4(), email="test@example.com", display_name="Test User")
    )


@pytest.fixture
def seed_notes(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., object]:
    """Insert notes straight into the database: ``await seed_notes(user_id, [...])``."""

    async def _seed(
        user_id: UUID,
        notes: list[tuple[str, str | None, datetime]],
    ) -> None:
        async with session_factory() as session:
            for title, content, created_at in notes:
                session.add(
                    NoteModel(
                        user_id=user_id,
                        title=title,
                        content=content,
                        created_at=created_at,
                    )
                )
            await session.commit()

    return _seed


@pytest.fixture
def get_profile_row(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., object]:
    """Read a profile row directly: ``await get_profile_row(user_id)``."""

    async def _get(user_id: UUID) -> ProfileModel | None:
        async with session_factory() as session:
            return await session.get(ProfileModel, user_id)

    return _get


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession],
    identity_directory: FakeIdentityDirectory,
    auth_provider: JWTAuthProvider,
):  # type: ignore[no-untyped-def]
    """
    Create the application wired to the test database and fake identity service.

    Services get a UoW factory bound to the in-memory database; every request
    gets its own FakeIdentityProvider sharing one account directory.
    """
    from api.dependencies.auth import get_auth_provider, get_identity_provider
    from api.dependencies.services import get_session_service
    from api.v1.dependencies import (
        get_admin_service,
        get_analytics_service,
        get_settings_service,
    )
    from domain.services.admin_service import AdminService
    from domain.services.analytics_service import AnalyticsService
    from domain.services.session_service import SessionService
    from domain.services.settings_service import SettingsService
    from infrastructure.database.session import get_async_session
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_identity_provider] = lambda: FakeIdentityProvider(
        identity_directory
    )
    app.dependency_overrides[get_session_service] = lambda: SessionService(
        test_uow_factory, admin_email=ADMIN_EMAIL
    )
    app.dependency_overrides[get_admin_service] = lambda: AdminService(test_uow_factory)
    app.dependency_overrides[get_analytics_service] = lambda: AnalyticsService(
        test_uow_factory, storage_quota_mb=1000, timezone_name="UTC"
    )
    app.dependency_overrides[get_settings_service] = lambda: SettingsService(test_uow_factory)
    app.dependency_overrides[get_async_session] = override_get_async_session

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:  # type: ignore[no-untyped-def]
    """Create async test client (no auth)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def auth_headers(auth_provider: JWTAuthProvider, test_identity: Identity) -> dict[str, str]:
    """Authorization headers for the regular test user."""
    return {"Authorization": f"Bearer {auth_provider.create_token(test_identity)}"}


@pytest.fixture
def admin_headers(auth_provider: JWTAuthProvider, admin_identity: Identity) -> dict[str, str]:
    """Authorization headers for the configured administrator."""
    return {"Authorization": f"Bearer {auth_provider.create_token(admin_identity)}"}


@pytest.fixture
async def authenticated_client(  # type: ignore[no-untyped-def]
    app, auth_headers: dict[str, str]
) -> AsyncGenerator[AsyncClient, None]:
    """Client signed in as the regular test user."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=auth_headers
    ) as c:
        yield c


@pytest.fixture
async def admin_client(  # type: ignore[no-untyped-def]
    app, admin_headers: dict[str, str]
) -> AsyncGenerator[AsyncClient, None]:
    """Client signed in as the administrator (bootstrapped on first request)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=admin_headers
    ) as c:
        yield c
