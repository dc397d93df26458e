from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from mixpoint.models import Mix, MixSet


class MixRepo:
    def __init__(self, db: AsyncSession):
        self.db = db

    # --- mixes ---
    async def create_mix(self, *, track_ids: list[int], mix_points: list[dict]) -> Mix:
        mix = Mix(track_ids=list(track_ids), mix_points=list(mix_points))
        self.db.add(mix)
        await self.db.flush()  # assign mix.id
        return mix

    async def get_mix(self, mix_id: int) -> Mix | None:
        return await self.db.get(Mix, mix_id)

    async def list_mixes(self) -> list[Mix]:
        res = await self.db.execute(select(Mix).order_by(Mix.id.asc()))
        return list(res.scalars().all())

    async def delete_mix(self, mix_id: int) -> bool:
        res = await self.db.execute(delete(Mix).where(Mix.id == mix_id))
        return res.rowcount > 0

    # --- sets ---
    async def create_set(self, *, mix_ids: list[int]) -> MixSet:
        mix_set = MixSet(mix_ids=list(mix_ids))
        self.db.add(mix_set)
        await self.db.flush()
        return mix_set

    async def get_set(self, set_id: int) -> MixSet | None:
        return await self.db.get(MixSet, set_id)

    async def delete_set(self, set_id: int) -> bool:
        res = await self.db.execute(delete(MixSet).where(MixSet.id == set_id))
        return res.rowcount > 0
