"""Shared fixtures: a fresh database per test and in-process clients.

By default every test gets its own SQLite file. Set ``TEST_DATABASE_URL``
to run against Postgres instead; tables are created and dropped per test.
"""

import os
from contextlib import contextmanager
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.db.base import Base
from libs.db.session import get_async_db
from services.clubs_service.app.main import app as clubs_app
from services.equipment_service.app.main import app as equipment_app
from services.gateway_service.app import clients
from services.gateway_service.app.main import app as gateway_app
from services.members_service.app.main import app as members_app

# Register every table with Base.metadata.
from services.clubs_service import models as _club_models  # noqa: F401
from services.equipment_service import models as _equipment_models  # noqa: F401
from services.members_service import models as _member_models  # noqa: F401

settings = get_settings()

SERVICE_APPS = (clubs_app, members_app, equipment_app)


# ---------------------------------------------------------------------------
# Auth helpers
# ---------------------------------------------------------------------------


def make_auth_user(user=None, **claims) -> AuthUser:
    """AuthUser for a ``User`` row (matched on ``auth_id``) or raw claims."""
    if user is not None:
        claims.setdefault("sub", user.auth_id)
        claims.setdefault("email", user.email)
        claims.setdefault("username", user.username)
    claims.setdefault("sub", "test-user")
    return AuthUser(**claims)


def make_token(auth_user: AuthUser) -> str:
    payload = auth_user.model_dump(by_alias=True, exclude_none=True)
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def auth_headers(user=None, **claims) -> dict:
    """Bearer header carrying a real signed token for ``user``."""
    return {"Authorization": f"Bearer {make_token(make_auth_user(user, **claims))}"}


@contextmanager
def override_auth(app, auth_user: AuthUser):
    """Bypass token verification for one app."""
    from libs.auth.dependencies import get_current_user

    app.dependency_overrides[get_current_user] = lambda: auth_user
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_current_user, None)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


def _enable_sqlite_pragmas(dbapi_connection, _record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    db_url = os.environ.get("TEST_DATABASE_URL") or (
        f"sqlite+aiosqlite:///{tmp_path / 'directory.db'}"
    )
    engine = create_async_engine(db_url, future=True)
    if db_url.startswith("sqlite"):
        event.listen(engine.sync_engine, "connect", _enable_sqlite_pragmas)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and asserting; requests get their own sessions."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def use_test_db(session_factory):
    """Point every app's DB dependency at the per-test database."""

    async def _get_test_db():
        async with session_factory() as session:
            yield session

    for service_app in SERVICE_APPS:
        service_app.dependency_overrides[get_async_db] = _get_test_db
    yield
    for service_app in SERVICE_APPS:
        service_app.dependency_overrides.pop(get_async_db, None)


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------


async def _client_for(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


@pytest_asyncio.fixture
async def clubs_client(use_test_db):
    async for client in _client_for(clubs_app):
        yield client


@pytest_asyncio.fixture
async def members_client(use_test_db):
    async for client in _client_for(members_app):
        yield client


@pytest_asyncio.fixture
async def equipment_client(use_test_db):
    async for client in _client_for(equipment_app):
        yield client


@pytest_asyncio.fixture
async def gateway_client(use_test_db, monkeypatch):
    """Gateway whose service clients call the service apps in-process."""
    for name, service_app in (
        ("clubs_client", clubs_app),
        ("members_client", members_app),
        ("equipment_client", equipment_app),
    ):
        in_app = clients.ServiceClient(
            name.removesuffix("_client"),
            "http://test",
            transport=ASGITransport(app=service_app),
        )
        monkeypatch.setattr(clients, name, in_app)

    async for client in _client_for(gateway_app):
        yield client
