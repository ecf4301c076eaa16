"""Integration test fixtures for database and HTTP client operations.

Runs against in-memory SQLite (aiosqlite) created from the SQLModel
metadata. The hosted auth provider is replaced with an in-process fake.
"""

from collections.abc import AsyncGenerator, Callable

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from src.bale.api.dependencies import get_auth_provider, get_db_session
from src.bale.core.auth_provider import AuthSession
from src.bale.core.config import get_settings
from src.bale.core.db import get_session
from src.bale.core.exceptions import AuthenticationRequired
from src.bale.main import create_app
from src.bale.models import Company, User
from tests.factories import CompanyFactory, UserFactory, WarehouseFactory
from tests.helpers import bearer, make_access_token, make_session


class FakeAuthProvider:
    """Stands in for the hosted provider. Sessions are registered per code/email."""

    def __init__(self) -> None:
        self.codes: dict[str, AuthSession] = {}
        self.otps: dict[tuple[str, str], AuthSession] = {}
        self.passwords: dict[tuple[str, str], AuthSession] = {}
        self.sent_otps: list[str] = []
        self.signed_out: list[str] = []

    async def exchange_code_for_session(
        self, code: str, code_verifier: str | None = None
    ) -> AuthSession:
        if code not in self.codes:
            raise AuthenticationRequired("Invalid or expired credentials")
        return self.codes[code]

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        if (email, password) not in self.passwords:
            raise AuthenticationRequired("Invalid or expired credentials")
        return self.passwords[(email, password)]

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        raise AuthenticationRequired("Invalid or expired credentials")

    async def send_otp(self, email: str, create_user: bool = True) -> None:
        self.sent_otps.append(email)

    async def verify_otp(self, email: str, token: str) -> AuthSession:
        if (email, token) not in self.otps:
            raise AuthenticationRequired("Invalid or expired credentials")
        return self.otps[(email, token)]

    async def sign_out(self, access_token: str) -> None:
        self.signed_out.append(access_token)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database per test. StaticPool keeps one shared connection."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session for arranging and inspecting data.

    Tests must call ``await db_session.commit()`` before hitting the API.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def auth_provider() -> FakeAuthProvider:
    return FakeAuthProvider()


@pytest.fixture
def app(engine: AsyncEngine, auth_provider: FakeAuthProvider) -> FastAPI:
    app = create_app()

    async def _test_session() -> AsyncGenerator[AsyncSession]:
        async with get_session(engine) as session:
            yield session

    app.dependency_overrides[get_db_session] = _test_session
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
async def company(db_session: AsyncSession) -> Company:
    company = CompanyFactory.build()
    db_session.add(company)
    db_session.add(WarehouseFactory.build(company_id=company.id))
    await db_session.commit()
    return company


@pytest.fixture
async def demo_company(db_session: AsyncSession) -> Company:
    company = CompanyFactory.demo()
    db_session.add(company)
    db_session.add(WarehouseFactory.build(company_id=company.id, name="Demo Warehouse"))
    await db_session.commit()
    return company


@pytest.fixture
def add_user(db_session: AsyncSession, company: Company) -> Callable:
    """Persist a user built by ``UserFactory.<variant>`` in ``company``."""

    async def _add(build: Callable[..., User] = UserFactory.build, **kwargs) -> User:
        kwargs.setdefault("company_id", company.id)
        user = build(**kwargs)
        db_session.add(user)
        await db_session.commit()
        return user

    return _add


@pytest.fixture
async def admin_user(add_user: Callable) -> User:
    return await add_user(UserFactory.admin)


@pytest.fixture
async def superadmin_user(add_user: Callable) -> User:
    return await add_user(UserFactory.superadmin)


@pytest.fixture
async def demo_admin_user(add_user: Callable) -> User:
    return await add_user(UserFactory.demo_admin)


@pytest.fixture
async def staff_user(add_user: Callable) -> User:
    return await add_user()


@pytest.fixture
def demo_identity_headers() -> dict[str, str]:
    """Signed in with the shared demo credential: no user record, demo mode."""
    return bearer(make_access_token(email=get_settings().demo_email))


@pytest.fixture
def register_code(auth_provider: FakeAuthProvider) -> Callable[..., str]:
    """Register an authorization code the fake provider will exchange."""

    def _register(code: str = "auth-code", **token_kwargs) -> str:
        token = make_access_token(**token_kwargs)
        auth_provider.codes[code] = make_session(token)
        return token

    return _register
