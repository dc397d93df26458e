from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, Callable, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mixpoint.core.config import settings
from mixpoint.core.errors import SlotUnavailable
from mixpoint.models import MIX_STATE, SET_STATE, STATE_KEYS
from mixpoint.repos.state_repo import StateRepo
from mixpoint.schemas.state import (
    MixState,
    SetState,
    TrackSlotState,
    merge_mix_state,
    merge_set_state,
    slot_key,
)
from mixpoint.services.notifications import LoggingNotifier, Notifier, surface_storage_error

logger = logging.getLogger(__name__)

SEED_DOCUMENTS: dict[str, dict] = {
    MIX_STATE: MixState().model_dump(mode="json", by_alias=True),
    SET_STATE: SetState().model_dump(mode="json", by_alias=True),
}


class SessionStateStore:
    """
    Live editing documents shared by both track panels.

    Every update is one read-merge-write transaction, serialized per document
    key by an asyncio.Lock. Updates from one caller apply in call order
    (asyncio locks are FIFO); updates from independent callers never lose each
    other's keys.
    """

    def __init__(
        self,
        sessions: async_sessionmaker[AsyncSession],
        notifier: Notifier | None = None,
        *,
        slot_count: int | None = None,
    ):
        self.sessions = sessions
        self.notifier = notifier if notifier is not None else LoggingNotifier()
        self.slot_keys = [slot_key(i) for i in range(slot_count or settings.SLOT_COUNT)]
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    # ---------- lifecycle ----------

    async def seed(self) -> bool | None:
        """Create missing documents. Never overwrites existing ones; returns True if anything was seeded."""
        seeded = False
        try:
            for key in STATE_KEYS:
                async with self._locks[key], self.sessions() as db, db.begin():
                    repo = StateRepo(db)
                    if not await repo.exists(key):
                        await repo.put(key, SEED_DOCUMENTS[key])
                        seeded = True
        except SQLAlchemyError as e:
            surface_storage_error(self.notifier, "seed_state", e)
            return None
        if seeded:
            logger.info("Seeded session state")
        return seeded

    # ---------- raw documents ----------

    async def get_state(self, key: str) -> dict | None:
        """Stored document for key, {} if it was never written, None on storage failure."""
        try:
            async with self.sessions() as db:
                return (await StateRepo(db).get(key)) or {}
        except SQLAlchemyError as e:
            surface_storage_error(self.notifier, "get_state", e)
            return None

    async def update_state(self, document: MixState | SetState | Mapping[str, Any], key: str) -> dict | None:
        """Replace the whole document for key."""
        payload = _validate_document(key, document)

        def replace(_current: dict) -> dict:
            return payload

        return await self._transact(key, "update_state", replace)

    # ---------- typed documents ----------

    async def get_mix_state(self) -> MixState | None:
        doc = await self.get_state(MIX_STATE)
        return MixState.model_validate(doc) if doc is not None else None

    async def get_set_state(self) -> SetState | None:
        doc = await self.get_state(SET_STATE)
        return SetState.model_validate(doc) if doc is not None else None

    async def update_mix_state(self, partial: MixState | Mapping[str, Any]) -> MixState | None:
        """Merge partial over mixState; keys not named in partial are kept."""
        merged: list[MixState] = []

        def merge(current: dict) -> dict:
            state = merge_mix_state(MixState.model_validate(current), partial)
            self._check_slots(state)
            merged.append(state)
            return _dump(state)

        if await self._transact(MIX_STATE, "update_mix_state", merge) is None:
            return None
        return merged[0]

    async def update_set_state(self, partial: SetState | Mapping[str, Any]) -> SetState | None:
        merged: list[SetState] = []

        def merge(current: dict) -> dict:
            state = merge_set_state(SetState.model_validate(current), partial)
            merged.append(state)
            return _dump(state)

        if await self._transact(SET_STATE, "update_set_state", merge) is None:
            return None
        return merged[0]

    async def update_track_state(self, slot_state: TrackSlotState, slot: str | None = None) -> MixState | None:
        """
        Write a whole slot. Placement: the explicit slot if given, else the
        slot already holding this track id, else the first empty slot.
        """
        merged: list[MixState] = []

        def place(current: dict) -> dict:
            state = MixState.model_validate(current)
            target = slot or self._locate_slot(state, slot_state)
            state = merge_mix_state(state, {"tracks": {target: slot_state}})
            self._check_slots(state)
            merged.append(state)
            return _dump(state)

        if await self._transact(MIX_STATE, "update_track_state", place) is None:
            return None
        return merged[0]

    async def update_slot(self, slot: str, **fields: Any) -> MixState | None:
        """Patch individual fields of one slot, e.g. update_slot("track0", adjusted_bpm=128.0)."""
        return await self.update_mix_state({"tracks": {slot: fields}})

    async def clear_slot(self, slot: str) -> MixState | None:
        return await self.update_mix_state({"tracks": {slot: None}})

    # ---------- internals ----------

    async def _transact(self, key: str, operation: str, mutate: Callable[[dict], dict]) -> dict | None:
        try:
            async with self._locks[key]:
                async with self.sessions() as db, db.begin():
                    repo = StateRepo(db)
                    current = (await repo.get(key)) or {}
                    updated = mutate(current)
                    await repo.put(key, updated)
        except SQLAlchemyError as e:
            surface_storage_error(self.notifier, operation, e)
            return None
        logger.debug("%s -> %s", operation, key)
        return updated

    def _locate_slot(self, state: MixState, slot_state: TrackSlotState) -> str:
        if slot_state.id is not None:
            for key, existing in state.tracks.items():
                if existing.id == slot_state.id:
                    return key
        for key in self.slot_keys:
            if key not in state.tracks:
                return key
        raise SlotUnavailable("no free track slot", details=f"track id={slot_state.id}")

    def _check_slots(self, state: MixState) -> None:
        extra = set(state.tracks) - set(self.slot_keys)
        if extra:
            raise ValueError(f"unknown slot(s): {', '.join(sorted(extra))}")


def _dump(state: MixState | SetState) -> dict:
    return state.model_dump(mode="json", by_alias=True)


def _validate_document(key: str, document: MixState | SetState | Mapping[str, Any]) -> dict:
    model = {MIX_STATE: MixState, SET_STATE: SetState}.get(key)
    if model is None:
        raise KeyError(f"unknown state document {key!r}")
    if not isinstance(document, model):
        document = model.model_validate(dict(document))
    return _dump(document)
