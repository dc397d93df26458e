from contextlib import asynccontextmanager

from fastapi import FastAPI

from mixpoint.api.v1.router import router as v1_router
from mixpoint.core import Database, settings
from mixpoint.core.logging import setup_logging
from mixpoint.services.notifications import NotificationQueue
from mixpoint.services.state_service import SessionStateStore


def create_app(database_url: str | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open and seed the store once at startup, release it on shutdown."""
        setup_logging(settings.LOG_LEVEL)
        db = Database(database_url)
        await db.open()
        notifications = NotificationQueue()
        store = SessionStateStore(db.sessions, notifications)
        await store.seed()

        app.state.db = db
        app.state.notifications = notifications
        app.state.store = store
        try:
            yield
        finally:
            await db.close()

    app = FastAPI(title="mixpoint API", version="0.1.0", lifespan=lifespan)
    app.include_router(v1_router, prefix="/v1")
    return app


app = create_app()
