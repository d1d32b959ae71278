"""
Shared fixtures: in-memory SQLite storage, a mocked mailer and an ASGI client.
"""

from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from auth.dependencies import get_mailer
from config.settings import Settings, get_settings
from database.models import Base
from database.session import get_db_session


def make_settings(**overrides) -> Settings:
    values = {
        "environment": "test",
        "jwt_secret": "test-secret",
        "jwt_expiry_seconds": 3600,
        "reset_token_expiry_seconds": 3600,
        "bcrypt_rounds": 4,
        "email_host": "smtp.test.local",
        "email_id": "noreply@test.local",
        "email_user": "Auth Service",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def mailer() -> MagicMock:
    mock = MagicMock()
    mock.send_reset = AsyncMock(return_value={"message": "email sent"})
    return mock


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as s:
        yield s


def build_app(settings: Settings, session_factory, mailer):
    from main import create_app

    app = create_app(settings)

    async def _session_override():
        async with session_factory() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_db_session] = _session_override
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_mailer] = lambda: mailer
    return app


@pytest.fixture
def app_factory():
    return build_app


@pytest.fixture
def app(settings, session_factory, mailer):
    return build_app(settings, session_factory, mailer)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
