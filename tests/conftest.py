"""Shared fixtures: fresh SQLite database per test, seeded users, API client."""

import asyncio
import os
import tempfile
from datetime import datetime, timedelta, timezone

# Must be set before any cardtransfer module is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="cardtransfer-logs-"))
os.environ.setdefault("SEED_DEMO_DATA", "false")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from cardtransfer.auth.otp_manager import FixedCodeIssuer, OtpManager
from cardtransfer.auth.session_manager import SessionManager
from cardtransfer.auth.sms_provider_mock import MockSMSProvider
from cardtransfer.db import models  # noqa: F401
from cardtransfer.db.seed import DEMO_USERS, seed_demo_data
from cardtransfer.db.session import Base

OTHER_USER = {
    "login": "petya",
    "password": "letmein42",
    "full_name": "Petya Ivanov",
    "cards": [("5559 0000 0000 0003", 50_000)],
}

SCENARIO_USER = {
    "login": "alice",
    "password": "wonderland",
    "cards": [("4000 0000 0000 0001", 1000), ("4000 0000 0000 0002", 500)],
}


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self):
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seeded(session_factory):
    async with session_factory() as session:
        await seed_demo_data(session, users=DEMO_USERS + [OTHER_USER, SCENARIO_USER])


@pytest.fixture
def session_manager():
    return SessionManager(session_timeout_minutes=30)


@pytest.fixture
def sms():
    return MockSMSProvider()


@pytest.fixture
def otp_manager(sms):
    return OtpManager(issuer=FixedCodeIssuer("12345"), sender=sms, ttl_seconds=300)


@pytest.fixture
def vasya(session_manager):
    return session_manager.create("vasya")


@pytest.fixture
def petya(session_manager):
    return session_manager.create("petya")


@pytest.fixture
def alice(session_manager):
    return session_manager.create("alice")


@pytest.fixture
async def client(session_factory, seeded, otp_manager, session_manager):
    """API client against the app with DB and auth state overridden."""
    from cardtransfer.api.deps import otp_manager_dep, session_manager_dep
    from cardtransfer.app import app
    from cardtransfer.db.deps import get_db

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[otp_manager_dep] = lambda: otp_manager
    app.dependency_overrides[session_manager_dep] = lambda: session_manager
    original_lock = app.state.transfer_lock
    app.state.transfer_lock = asyncio.Lock()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
    app.state.transfer_lock = original_lock


@pytest.fixture
def transport(client):
    """ASGI transport sharing the overrides installed by ``client``."""
    from cardtransfer.app import app

    return ASGITransport(app=app)
