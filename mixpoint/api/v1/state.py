from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from mixpoint.api.deps import get_state_store
from mixpoint.core.errors import SlotUnavailable, UnknownStateField
from mixpoint.models import STATE_KEYS
from mixpoint.schemas.state import MixState, SetState, TrackSlotState
from mixpoint.services.state_service import SessionStateStore

router = APIRouter()


def _unavailable() -> HTTPException:
    return HTTPException(status_code=503, detail="state store unavailable")


@router.patch("/mix", response_model=MixState, response_model_by_alias=True)
async def update_mix_state(
    partial: dict[str, Any] = Body(...),
    store: SessionStateStore = Depends(get_state_store),
):
    try:
        state = await store.update_mix_state(partial)
    except UnknownStateField as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SlotUnavailable as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if state is None:
        raise _unavailable()
    return state


@router.put("/mix/tracks", response_model=MixState, response_model_by_alias=True)
async def update_track_state(
    slot_state: TrackSlotState,
    slot: str | None = None,
    store: SessionStateStore = Depends(get_state_store),
):
    try:
        state = await store.update_track_state(slot_state, slot=slot)
    except SlotUnavailable as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if state is None:
        raise _unavailable()
    return state


@router.patch("/set", response_model=SetState, response_model_by_alias=True)
async def update_set_state(
    partial: dict[str, Any] = Body(...),
    store: SessionStateStore = Depends(get_state_store),
):
    try:
        state = await store.update_set_state(partial)
    except UnknownStateField as e:
        raise HTTPException(status_code=422, detail=str(e))
    if state is None:
        raise _unavailable()
    return state


@router.get("/{key}")
async def get_state(key: str, store: SessionStateStore = Depends(get_state_store)) -> dict:
    if key not in STATE_KEYS:
        raise HTTPException(status_code=404, detail="unknown state document")
    doc = await store.get_state(key)
    if doc is None:
        raise _unavailable()
    return doc


@router.put("/{key}")
async def update_state(
    key: str,
    document: dict[str, Any] = Body(...),
    store: SessionStateStore = Depends(get_state_store),
) -> dict:
    if key not in STATE_KEYS:
        raise HTTPException(status_code=404, detail="unknown state document")
    try:
        doc = await store.update_state(document, key)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if doc is None:
        raise _unavailable()
    return doc
