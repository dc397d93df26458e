"""Shared fixtures: a fresh sqlite file per test plus the services built on it."""

import pytest

from mixpoint.core.db import Database
from mixpoint.services.notifications import NotificationQueue
from mixpoint.services.state_service import SessionStateStore
from mixpoint.services.track_service import TrackService


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'mixpoint.db'}"


@pytest.fixture
async def database(db_url):
    db = Database(db_url)
    await db.open()
    yield db
    await db.close()


@pytest.fixture
async def broken_database(tmp_path):
    """A store whose file lives in a directory that does not exist: every connect fails."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'mixpoint.db'}")
    yield db
    await db.close()


@pytest.fixture
def notifications():
    return NotificationQueue()


@pytest.fixture
async def store(database, notifications):
    store = SessionStateStore(database.sessions, notifications)
    await store.seed()
    return store


@pytest.fixture
def tracks(database, notifications):
    return TrackService(database.sessions, notifications)
