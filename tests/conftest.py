"""
Pytest configuration and fixtures for the sync service tests.
"""

import os
import tempfile

# Settings are read at import time; keep test logs out of the repo
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="fitsync-logs-"))

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool

from fitsync.database.connection import Database
from fitsync.main import create_app
from fitsync.middlewares.clerk_auth import get_authenticated_user
from fitsync.models.user import User


@pytest_asyncio.fixture
async def database():
    """Fresh in-memory database per test."""
    database = Database(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await database.create_all()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def db(database):
    async with database.session() as session:
        yield session


async def _create_user(database: Database, clerk_id: str, email: str) -> User:
    async with database.session() as session:
        user = User(clerk_id=clerk_id, email=email, type="user")
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


@pytest_asyncio.fixture
async def user(database):
    return await _create_user(database, "user_test_athlete", "athlete@example.com")


@pytest_asyncio.fixture
async def other_user(database):
    return await _create_user(database, "user_test_other", "other@example.com")


@pytest.fixture
def app(database, user):
    app = create_app(database, enable_auth=False)
    app.dependency_overrides[get_authenticated_user] = lambda: user
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def pair_payload():
    return {
        "deviceId": "watch-1",
        "deviceName": "Acme Watch",
        "brand": "Acme",
        "model": "X1",
    }
