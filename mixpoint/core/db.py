from __future__ import annotations

import logging

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from mixpoint.core.config import settings
from mixpoint.models import Base

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the engine and session factory for one persistent store.

    Lifecycle is explicit: construct at process start, `open()` once
    (creates tables), `close()` on shutdown. Sessions are opened per
    operation so concurrent tasks never share one.
    """

    def __init__(self, url: str | None = None, *, echo: bool | None = None):
        self.url = url or settings.DATABASE_URL_ASYNC
        self.engine: AsyncEngine = create_async_engine(
            self.url,
            echo=settings.SQL_ECHO if echo is None else echo,
        )
        if self.engine.dialect.name == "sqlite":
            _configure_sqlite(self.engine)
        self.sessions = async_sessionmaker(self.engine, expire_on_commit=False, class_=AsyncSession)

    async def open(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Opened store at %s", self.engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Closed store")


def _configure_sqlite(engine: AsyncEngine) -> None:
    # BEGIN IMMEDIATE: writers take the lock at transaction start, not on first write
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def get_db(request: Request) -> Database:
    return request.app.state.db
