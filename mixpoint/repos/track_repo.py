from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from mixpoint.models import Track


class TrackRepo:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, track_id: int) -> Track | None:
        return await self.db.get(Track, track_id)

    async def find_by_fingerprint(self, *, name: str, size: int) -> Track | None:
        res = await self.db.execute(
            select(Track)
            .where(Track.name == name, Track.size == size)
            .order_by(Track.id.asc())
            .limit(1)
        )
        return res.scalar_one_or_none()

    async def list_tracks(self) -> list[Track]:
        res = await self.db.execute(select(Track).order_by(Track.id.asc()))
        return list(res.scalars().all())

    async def put(self, fields: dict[str, Any]) -> Track:
        """Insert, or overwrite every column of the row named by fields["id"]."""
        track_id = fields.get("id")
        track = await self.get(track_id) if track_id is not None else None
        if track is None:
            track = Track(**fields)
            self.db.add(track)
        else:
            for key, value in fields.items():
                setattr(track, key, value)
        await self.db.flush()  # assign track.id
        return track

    async def delete(self, track_id: int) -> bool:
        res = await self.db.execute(delete(Track).where(Track.id == track_id))
        return res.rowcount > 0
