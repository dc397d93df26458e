from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mixpoint.models import StateDocument


class StateRepo:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, key: str) -> dict | None:
        res = await self.db.execute(select(StateDocument.document).where(StateDocument.key == key))
        return res.scalar_one_or_none()

    async def exists(self, key: str) -> bool:
        res = await self.db.execute(select(StateDocument.key).where(StateDocument.key == key))
        return res.scalar_one_or_none() is not None

    async def put(self, key: str, document: dict) -> None:
        row = await self.db.get(StateDocument, key)
        if row is None:
            self.db.add(StateDocument(key=key, document=document))
        else:
            # JSON columns are not mutation-tracked; always assign a fresh dict
            row.document = dict(document)
        await self.db.flush()
