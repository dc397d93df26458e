from __future__ import annotations

import logging
import time

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mixpoint.core.errors import StorageError
from mixpoint.repos.track_repo import TrackRepo
from mixpoint.schemas.track import TrackRecord
from mixpoint.services.notifications import LoggingNotifier, Notifier, surface_storage_error

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class TrackService:
    """
    Content-addressed track store. Files are identified by (name, size)
    rather than a content hash: hashing multi-megabyte audio on every load
    costs more than the rare collision, which is an accepted limitation.

    Storage failures are reported through the notifier and the operation
    returns None; callers treat None as "not written".
    """

    def __init__(self, sessions: async_sessionmaker[AsyncSession], notifier: Notifier | None = None):
        self.sessions = sessions
        self.notifier = notifier if notifier is not None else LoggingNotifier()

    async def put_track(self, candidate: TrackRecord) -> TrackRecord | None:
        try:
            async with self.sessions() as db, db.begin():
                repo = TrackRepo(db)
                dup = await repo.find_by_fingerprint(name=candidate.name, size=candidate.size)
                if dup is not None and dup.bpm:
                    # already analyzed, skip the write
                    logger.debug("put_track: %r already stored as id=%s", candidate.name, dup.id)
                    return TrackRecord.model_validate(dup)

                fields = candidate.model_dump()
                if fields["id"] is None and dup is not None:
                    fields["id"] = dup.id
                fields["last_modified"] = _now_ms()
                if fields["id"] is None:
                    fields.pop("id")

                track = await repo.put(fields)
                stored = TrackRecord.model_validate(track)
        except SQLAlchemyError as e:
            surface_storage_error(self.notifier, "put_track", e)
            return None

        logger.info("Stored track id=%s name=%r bpm=%s", stored.id, stored.name, stored.bpm)
        return stored

    async def remove_track(self, track_id: int) -> bool | None:
        """Idempotent; returns whether a row was deleted, None on storage failure."""
        try:
            async with self.sessions() as db, db.begin():
                return await TrackRepo(db).delete(track_id)
        except SQLAlchemyError as e:
            surface_storage_error(self.notifier, "remove_track", e)
            return None

    async def get_track(self, track_id: int) -> TrackRecord | None:
        try:
            async with self.sessions() as db:
                track = await TrackRepo(db).get(track_id)
                return TrackRecord.model_validate(track) if track is not None else None
        except SQLAlchemyError as e:
            surface_storage_error(self.notifier, "get_track", e)
            return None

    async def find_by_fingerprint(self, name: str, size: int) -> TrackRecord | None:
        try:
            return await self.lookup_fingerprint(name, size)
        except StorageError:
            return None

    async def lookup_fingerprint(self, name: str, size: int) -> TrackRecord | None:
        """
        Like find_by_fingerprint, but a storage failure raises the StorageError
        (already reported) so a caller can tell a miss from a failure.
        """
        try:
            async with self.sessions() as db:
                track = await TrackRepo(db).find_by_fingerprint(name=name, size=size)
                return TrackRecord.model_validate(track) if track is not None else None
        except SQLAlchemyError as e:
            raise surface_storage_error(self.notifier, "find_by_fingerprint", e) from e

    async def list_tracks(self) -> list[TrackRecord] | None:
        try:
            async with self.sessions() as db:
                return [TrackRecord.model_validate(t) for t in await TrackRepo(db).list_tracks()]
        except SQLAlchemyError as e:
            surface_storage_error(self.notifier, "list_tracks", e)
            return None
