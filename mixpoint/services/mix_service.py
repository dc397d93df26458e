from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mixpoint.repos.mix_repo import MixRepo
from mixpoint.schemas.mix import MixOut, MixPoint, SetOut
from mixpoint.services.notifications import LoggingNotifier, Notifier, surface_storage_error

logger = logging.getLogger(__name__)


class MixService:
    """
    Mixes and sets are written whole and replaced whole. Referenced track
    and mix ids are not checked here; that is the caller's job.
    """

    def __init__(self, sessions: async_sessionmaker[AsyncSession], notifier: Notifier | None = None):
        self.sessions = sessions
        self.notifier = notifier if notifier is not None else LoggingNotifier()

    # --- mixes ---
    async def add_mix(self, track_ids: Sequence[int], mix_points: Sequence[MixPoint | dict] = ()) -> int | None:
        if not track_ids:
            raise ValueError("a mix needs at least one track")
        points = [MixPoint.model_validate(p).model_dump(by_alias=True) for p in mix_points]
        try:
            async with self.sessions() as db, db.begin():
                mix = await MixRepo(db).create_mix(track_ids=list(track_ids), mix_points=points)
                mix_id = mix.id
        except SQLAlchemyError as e:
            surface_storage_error(self.notifier, "add_mix", e)
            return None

        logger.info("Stored mix id=%s tracks=%s points=%d", mix_id, list(track_ids), len(points))
        return mix_id

    async def get_mix(self, mix_id: int) -> MixOut | None:
        try:
            async with self.sessions() as db:
                mix = await MixRepo(db).get_mix(mix_id)
                return MixOut.model_validate(mix) if mix is not None else None
        except SQLAlchemyError as e:
            surface_storage_error(self.notifier, "get_mix", e)
            return None

    async def list_mixes(self) -> list[MixOut] | None:
        try:
            async with self.sessions() as db:
                return [MixOut.model_validate(m) for m in await MixRepo(db).list_mixes()]
        except SQLAlchemyError as e:
            surface_storage_error(self.notifier, "list_mixes", e)
            return None

    async def remove_mix(self, mix_id: int) -> bool | None:
        try:
            async with self.sessions() as db, db.begin():
                return await MixRepo(db).delete_mix(mix_id)
        except SQLAlchemyError as e:
            surface_storage_error(self.notifier, "remove_mix", e)
            return None

    # --- sets ---
    async def add_set(self, mix_ids: Sequence[int]) -> int | None:
        try:
            async with self.sessions() as db, db.begin():
                mix_set = await MixRepo(db).create_set(mix_ids=list(mix_ids))
                return mix_set.id
        except SQLAlchemyError as e:
            surface_storage_error(self.notifier, "add_set", e)
            return None

    async def get_set(self, set_id: int) -> SetOut | None:
        try:
            async with self.sessions() as db:
                mix_set = await MixRepo(db).get_set(set_id)
                return SetOut.model_validate(mix_set) if mix_set is not None else None
        except SQLAlchemyError as e:
            surface_storage_error(self.notifier, "get_set", e)
            return None

    async def remove_set(self, set_id: int) -> bool | None:
        try:
            async with self.sessions() as db, db.begin():
                return await MixRepo(db).delete_set(set_id)
        except SQLAlchemyError as e:
            surface_storage_error(self.notifier, "remove_set", e)
            return None
